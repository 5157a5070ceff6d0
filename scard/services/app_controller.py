import logging
from dataclasses import dataclass, field
from typing import List, Optional

from scard.data.db_context import get_store_namespace
from scard.data.expense_repository import ExpenseRepository
from scard.data.local_storage import LocalStorage, StorageQuotaExceededError
from scard.data.service_repository import ServiceRecordRepository
from scard.data.settings_repository import SettingsRepository
from scard.models.base import new_id, utc_now_iso
from scard.models.expense import ExpenseRecord
from scard.models.service_record import (
    ServiceBase,
    ServiceStatus,
    is_completed,
    is_scheduled,
    parse_service_record,
)
from scard.models.settings import AppSettings, DEFAULT_SETTINGS
from scard.models.usuario import Area, User
from scard.services.exceptions import IncompleteServiceError
from scard.services.permissions import has_permission, permitted_areas, require_permission

logger = logging.getLogger("AppController")


def _default_settings() -> AppSettings:
    return DEFAULT_SETTINGS.model_copy(deep=True)


@dataclass
class AppState:
    """Estado em memória da aplicação (um por processo/janela)."""
    user: Optional[User] = None
    records: List[ServiceBase] = field(default_factory=list)
    expenses: List[ExpenseRecord] = field(default_factory=list)
    settings: AppSettings = field(default_factory=_default_settings)
    active_area: Optional[str] = None

    # Formulário de atendimento: registro em edição + modo agendamento
    editing_record: Optional[ServiceBase] = None
    scheduling_mode: bool = False
    form_open: bool = False


class AppController:
    """
    Dono do AppState. Carrega tudo do namespace do store quando a sessão é
    ativada e grava a coleção inteira após cada alteração.
    """

    def __init__(self, storage: LocalStorage, namespace: Optional[str] = None):
        self.storage = storage
        self.namespace = namespace or get_store_namespace()
        self.records_repo = ServiceRecordRepository(storage, self.namespace)
        self.expenses_repo = ExpenseRepository(storage, self.namespace)
        self.settings_repo = SettingsRepository(storage, self.namespace)
        self.state = AppState()

    # --- Sessão ---

    def activate_session(self, user: User):
        self.state.user = user
        self.reload()
        areas = permitted_areas(user)
        self.state.active_area = areas[0] if areas else None
        logger.info(
            f"Sessão ativa para {user.email}: {len(self.state.records)} atendimentos, "
            f"{len(self.state.expenses)} lançamentos"
        )

    def reload(self):
        self.state.records = self.records_repo.load_all()
        self.state.expenses = self.expenses_repo.load_all()
        self.state.settings = self.settings_repo.load()

    def clear_session(self):
        """Zera o estado em memória; o que está persistido não é tocado."""
        self.state = AppState()

    # --- Navegação ---

    def can_access(self, area) -> bool:
        return has_permission(self.state.user, area)

    def navigate(self, area):
        """Troca de aba. Sem permissão levanta PermissionDeniedError (a UI mostra o aviso)."""
        require_permission(self.state.user, area)
        self.state.active_area = area.value if isinstance(area, Area) else area

    # --- Atendimentos ---

    def _commit_records(self, new_records: List[ServiceBase]):
        previous = self.state.records
        self.state.records = new_records
        try:
            self.records_repo.save_all(new_records)
        except StorageQuotaExceededError:
            # Gravação recusada: a memória volta a refletir o que está salvo
            self.state.records = previous
            raise

    def add_record(self, data: dict) -> ServiceBase:
        payload = dict(data)
        payload["id"] = new_id()
        payload["created_at"] = utc_now_iso()
        record = parse_service_record(payload)
        # Mais recentes primeiro
        self._commit_records([record] + self.state.records)
        return record

    def update_record(self, record_id: str, data: dict, status: Optional[ServiceStatus] = None) -> Optional[ServiceBase]:
        """
        Aplica os campos sobre o registro existente (mesmo id e created_at).
        Id inexistente não faz nada.
        """
        updated = None
        new_records = []
        for record in self.state.records:
            if record.id == record_id:
                payload = {**record.model_dump(), **data}
                payload["id"] = record.id
                payload["created_at"] = record.created_at
                if status is not None:
                    payload["status"] = status.value
                updated = parse_service_record(payload)
                new_records.append(updated)
            else:
                new_records.append(record)

        if updated is None:
            return None
        self._commit_records(new_records)
        return updated

    def delete_record(self, record_id: str):
        self._commit_records([r for r in self.state.records if r.id != record_id])

    def agenda(self) -> List[ServiceBase]:
        """Somente agendados, do mais próximo para o mais distante."""
        scheduled = [r for r in self.state.records if is_scheduled(r)]
        return sorted(scheduled, key=lambda r: (r.service_date, r.service_time or "00:00"))

    def history(self, search: str = "", month: str = "") -> List[ServiceBase]:
        term = (search or "").lower()
        completed = [
            r for r in self.state.records
            if is_completed(r)
            and (term in r.client_name.lower() or term in r.description.lower())
            and (not month or r.service_date.startswith(month))
        ]
        return sorted(completed, key=lambda r: r.service_date, reverse=True)

    # --- Formulário (agendar / finalizar / editar) ---

    def _open_form(self, record: Optional[ServiceBase], scheduling: bool):
        self.state.editing_record = record
        self.state.scheduling_mode = scheduling
        self.state.form_open = True

    def start_new_service(self):
        self._open_form(None, scheduling=False)

    def start_new_schedule(self):
        self._open_form(None, scheduling=True)

    def start_finishing(self, record: ServiceBase):
        # Finalizar = concluir o agendamento agora
        self._open_form(record, scheduling=False)

    def start_editing_schedule(self, record: ServiceBase):
        self._open_form(record, scheduling=True)

    def start_editing_history(self, record: ServiceBase):
        self._open_form(record, scheduling=False)

    def _landing_area(self, preferred: Area) -> Optional[str]:
        """Área preferida se o usuário pode abri-la; senão a primeira permitida."""
        if has_permission(self.state.user, preferred):
            return preferred.value
        areas = permitted_areas(self.state.user)
        return areas[0] if areas else None

    def _close_form(self, preferred: Area):
        self.state.editing_record = None
        self.state.scheduling_mode = False
        self.state.form_open = False
        self.state.active_area = self._landing_area(preferred)

    def cancel_form(self):
        came_from_schedule = self.state.scheduling_mode
        self._close_form(Area.AGENDA if came_from_schedule else Area.LIST)

    def form_title(self) -> str:
        record = self.state.editing_record
        if record is not None:
            if self.state.scheduling_mode:
                return "Editar Agendamento"
            if is_completed(record):
                return "Editar Atendimento"
            return "Finalizar Atendimento"
        return "Novo Agendamento" if self.state.scheduling_mode else "Novo Atendimento"

    def submit_service_form(self, data: dict) -> ServiceBase:
        """
        Sem registro de referência cria um novo; com referência atualiza o
        existente. O status sai do modo agendamento em ambos os casos.
        Concluir exige forma de pagamento e valor (IncompleteServiceError).
        """
        target_status = ServiceStatus.AGENDADO if self.state.scheduling_mode else ServiceStatus.CONCLUIDO
        payload = dict(data)
        if target_status == ServiceStatus.AGENDADO:
            payload.pop("payment_method", None)
            payload.pop("amount", None)
        elif not payload.get("payment_method") or payload.get("amount") is None:
            raise IncompleteServiceError()

        if self.state.editing_record is not None:
            record = self.update_record(self.state.editing_record.id, payload, status=target_status)
            if record is None:
                # O registro sumiu (ex.: excluído em outra janela); vira um novo
                payload["status"] = target_status.value
                record = self.add_record(payload)
        else:
            payload["status"] = target_status.value
            record = self.add_record(payload)

        self._close_form(Area.AGENDA if is_scheduled(record) else Area.LIST)
        return record

    # --- Fluxo de caixa ---

    def _commit_expenses(self, new_expenses: List[ExpenseRecord]):
        previous = self.state.expenses
        self.state.expenses = new_expenses
        try:
            self.expenses_repo.save_all(new_expenses)
        except StorageQuotaExceededError:
            self.state.expenses = previous
            raise

    def add_expense(self, data: dict) -> ExpenseRecord:
        expense = ExpenseRecord(**{**data, "id": new_id(), "created_at": utc_now_iso()})
        self._commit_expenses([expense] + self.state.expenses)
        return expense

    def delete_expense(self, expense_id: str):
        self._commit_expenses([e for e in self.state.expenses if e.id != expense_id])

    # --- Configurações ---

    def save_settings(self, settings: AppSettings):
        """StorageQuotaExceededError (ex.: logo grande) mantém as configurações anteriores."""
        previous = self.state.settings
        self.state.settings = settings
        try:
            self.settings_repo.save(settings)
        except StorageQuotaExceededError:
            self.state.settings = previous
            raise
