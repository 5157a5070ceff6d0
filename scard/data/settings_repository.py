import json
import logging
from pydantic import ValidationError

from scard.data.local_storage import LocalStorage
from scard.data.storage_keys import settings_key
from scard.models.settings import AppSettings, DEFAULT_SETTINGS

logger = logging.getLogger("SettingsRepository")


class SettingsRepository:
    def __init__(self, storage: LocalStorage, namespace: str):
        self.storage = storage
        self.key = settings_key(namespace)

    def load(self) -> AppSettings:
        """
        Padrões ⊕ persistido: campos que não existiam quando as
        configurações foram salvas ficam com o valor padrão do modelo.
        """
        saved = self.storage.read_json(self.key, default=None)
        if not isinstance(saved, dict):
            return DEFAULT_SETTINGS.model_copy(deep=True)

        try:
            return AppSettings(**saved)
        except ValidationError as e:
            logger.error(f"Configurações inválidas em '{self.key}': {e}")
            return DEFAULT_SETTINGS.model_copy(deep=True)

    def serialize(self, settings: AppSettings) -> str:
        return json.dumps(settings.to_storage(), ensure_ascii=False)

    def save(self, settings: AppSettings):
        # Pode levantar StorageQuotaExceededError (ex.: logo grande demais)
        self.storage.set_item(self.key, self.serialize(settings))
