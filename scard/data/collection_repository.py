import json
import logging
from typing import Any, Callable, Generic, List, TypeVar
from pydantic import ValidationError

from scard.data.local_storage import LocalStorage
from scard.models.base import StoredModel

T = TypeVar("T", bound=StoredModel)

logger = logging.getLogger("CollectionRepository")


class CollectionRepository(Generic[T]):
    """
    Classe base para coleções guardadas como um único array JSON.

    Contrato:
    - load_all() lê o array inteiro; blob corrompido vira lista vazia.
      Itens que não passam na validação não aparecem no resultado, mas ficam
      guardados em `retained` e voltam para o disco no próximo save_all().
    - save_all() SOBRESCREVE a coleção inteira. Não há merge nem trava:
      duas instâncias do app no mesmo arquivo disputam a chave e a última
      gravação vence.
    """

    def __init__(self, storage: LocalStorage, key: str, parser: Callable[[dict], T]):
        self.storage = storage
        self.key = key
        self.parser = parser
        # Entradas cruas do último load_all() que não viraram modelo
        self.retained: List[Any] = []

    def load_all(self) -> List[T]:
        raw = self.storage.read_json(self.key, default=[])
        self.retained = []
        if not isinstance(raw, list):
            logger.error(f"Formato inesperado em '{self.key}', usando coleção vazia")
            return []

        items: List[T] = []
        for entry in raw:
            try:
                items.append(self.parser(entry))
            except (ValidationError, ValueError, TypeError) as e:
                logger.warning(f"Item não reconhecido em '{self.key}', mantido como está: {e}")
                self.retained.append(entry)
        return items

    def serialize(self, items: List[T], keep_retained: bool = True) -> str:
        data = [item.to_storage() for item in items]
        if keep_retained:
            data.extend(self.retained)
        return json.dumps(data, ensure_ascii=False)

    def save_all(self, items: List[T]):
        # Pode levantar StorageQuotaExceededError
        self.storage.set_item(self.key, self.serialize(items))

    def clear(self):
        self.storage.remove_item(self.key)
        self.retained = []
