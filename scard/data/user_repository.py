from typing import Optional
from scard.data.collection_repository import CollectionRepository
from scard.data.local_storage import LocalStorage
from scard.data.storage_keys import USERS_KEY
from scard.models.usuario import StoredUser


class UserRepository(CollectionRepository[StoredUser]):
    """Diretório de usuários (com senha). Independe do namespace do store."""

    def __init__(self, storage: LocalStorage):
        super().__init__(storage, USERS_KEY, lambda data: StoredUser(**data))

    def find_by_email(self, email: str) -> Optional[StoredUser]:
        for user in self.load_all():
            if user.email == email:
                return user
        return None
