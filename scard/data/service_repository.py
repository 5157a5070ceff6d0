from scard.data.collection_repository import CollectionRepository
from scard.data.local_storage import LocalStorage
from scard.data.storage_keys import records_key
from scard.models.service_record import ServiceBase, parse_service_record


class ServiceRecordRepository(CollectionRepository[ServiceBase]):
    def __init__(self, storage: LocalStorage, namespace: str):
        # Inicializa a base passando a chave do namespace e o parser da variante
        super().__init__(storage, records_key(namespace), parse_service_record)
