import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, select

from scard.data.db_context import create_db_engine, get_storage_quota

logger = logging.getLogger("LocalStorage")


class StorageQuotaExceededError(Exception):
    """Valor maior que a cota configurada (ex.: logo muito grande)."""
    def __init__(self, key: str, size: int, quota: int):
        self.key = key
        self.size = size
        self.quota = quota
        self.message = (
            f"Valor de '{key}' excede o limite de armazenamento "
            f"({size} de {quota} bytes)."
        )
        super().__init__(self.message)


class StorageEntry(SQLModel, table=True):
    __tablename__ = "local_storage"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LocalStorage:
    """
    Armazenamento Chave-Valor persistido no SQLite local.
    Cada chave guarda um blob de texto (JSON); gravações substituem o valor inteiro.
    """

    def __init__(self, engine: Optional[Engine] = None, quota_bytes: Optional[int] = None):
        self.engine = engine or create_db_engine()
        self.quota_bytes = quota_bytes if quota_bytes is not None else get_storage_quota()

    def get_item(self, key: str) -> Optional[str]:
        with Session(self.engine) as session:
            entry = session.get(StorageEntry, key)
            return entry.value if entry else None

    def check_quota(self, key: str, value: str):
        size = len(value.encode("utf-8"))
        if size > self.quota_bytes:
            raise StorageQuotaExceededError(key, size, self.quota_bytes)

    def set_item(self, key: str, value: str):
        self.set_items({key: value})

    def set_items(self, items: Dict[str, str]):
        """
        Grava várias chaves numa única transação.
        A cota é conferida para todas antes: se uma estoura, nenhuma é gravada.
        """
        for key, value in items.items():
            self.check_quota(key, value)

        with Session(self.engine) as session:
            for key, value in items.items():
                # merge faz INSERT ou UPDATE conforme a chave exista
                session.merge(StorageEntry(key=key, value=value))
            session.commit()

    def remove_item(self, key: str):
        with Session(self.engine) as session:
            entry = session.get(StorageEntry, key)
            if entry:
                session.delete(entry)
                session.commit()

    def keys(self) -> List[str]:
        with Session(self.engine) as session:
            return list(session.exec(select(StorageEntry.key)).all())

    def clear(self):
        with Session(self.engine) as session:
            for entry in session.exec(select(StorageEntry)).all():
                session.delete(entry)
            session.commit()

    # --- Helpers JSON ---

    def read_json(self, key: str, default: Any = None) -> Any:
        """
        Lê e decodifica o JSON da chave.
        Blob ausente ou corrompido retorna `default` (o erro é apenas registrado).
        """
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Falha ao carregar '{key}': {e}")
            return default

    def write_json(self, key: str, data: Any):
        self.set_item(key, json.dumps(data, ensure_ascii=False))
