from scard.data.collection_repository import CollectionRepository
from scard.data.local_storage import LocalStorage
from scard.data.storage_keys import expenses_key
from scard.models.expense import ExpenseRecord


class ExpenseRepository(CollectionRepository[ExpenseRecord]):
    def __init__(self, storage: LocalStorage, namespace: str):
        super().__init__(storage, expenses_key(namespace), lambda data: ExpenseRecord(**data))
