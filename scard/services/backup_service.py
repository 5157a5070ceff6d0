import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from scard.models.expense import ExpenseRecord
from scard.models.service_record import parse_service_record
from scard.models.settings import AppSettings
from scard.services.app_controller import AppController
from scard.services.exceptions import InvalidBackupError

logger = logging.getLogger("BackupService")

BACKUP_VERSION = "1.0"


def backup_filename(day: date = None) -> str:
    day = day or date.today()
    return f"backup_scard_{day.isoformat()}.json"


def export_backup(controller: AppController) -> dict:
    """Documento de backup com tudo que está sob o namespace do store."""
    state = controller.state
    return {
        "records": [r.to_storage() for r in state.records],
        "expenses": [e.to_storage() for e in state.expenses],
        "settings": state.settings.to_storage(),
        "backupDate": datetime.now(timezone.utc).isoformat(),
        "version": BACKUP_VERSION,
    }


def write_backup(controller: AppController, directory: Union[str, Path]) -> Path:
    path = Path(directory) / backup_filename()
    document = export_backup(controller)
    path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info(f"Backup exportado: {path}")
    return path


def read_backup(path: Union[str, Path]) -> dict:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidBackupError(f"Não foi possível ler o backup: {e}")


def import_backup(controller: AppController, document: dict):
    """
    Substitui atendimentos, lançamentos e configurações pelo conteúdo do
    backup. A confirmação do usuário acontece antes, na UI.
    Tudo é validado antes de gravar: um backup inválido não altera nada.
    """
    if not isinstance(document, dict):
        raise InvalidBackupError()

    records_data = document.get("records")
    expenses_data = document.get("expenses")
    if not isinstance(records_data, list) or not isinstance(expenses_data, list):
        raise InvalidBackupError("Backup sem 'records' ou 'expenses'.")

    try:
        records = [parse_service_record(item) for item in records_data]
        expenses = [ExpenseRecord(**item) for item in expenses_data]
        settings = AppSettings(**(document.get("settings") or {}))
    except (ValidationError, ValueError, TypeError) as e:
        raise InvalidBackupError(f"Backup com dados inválidos: {e}")

    # As três chaves vão juntas: se uma estoura a cota
    # (StorageQuotaExceededError), nada é gravado.
    controller.storage.set_items({
        controller.records_repo.key: controller.records_repo.serialize(records, keep_retained=False),
        controller.expenses_repo.key: controller.expenses_repo.serialize(expenses, keep_retained=False),
        controller.settings_repo.key: controller.settings_repo.serialize(settings),
    })
    controller.reload()
    logger.info(
        f"Backup importado ({document.get('backupDate', '?')}): "
        f"{len(records)} atendimentos, {len(expenses)} lançamentos"
    )
