import logging
import secrets
import string
from typing import Optional

from scard.data.db_context import get_master_credentials
from scard.data.local_storage import LocalStorage
from scard.data.storage_keys import SESSION_KEY
from scard.data.user_repository import UserRepository
from scard.models.base import utc_now_iso
from scard.models.usuario import StoredUser, User, UserRole
from scard.services.exceptions import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    UserNotFoundError,
)
from scard.services.permissions import ALL_AREAS, DEFAULT_EMPLOYEE_PERMISSIONS

logger = logging.getLogger("AuthService")

MASTER_USER_ID = "master-global-id"
TEMP_PASSWORD_LENGTH = 8


def generate_temp_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


class AuthService:
    """
    Sessão do usuário logado.
    A sessão é persistida (sem senha) para ser restaurada na próxima abertura.
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self.users = UserRepository(storage)
        self._current_user: Optional[User] = None

    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    def restore_session(self) -> Optional[User]:
        """Lê a sessão salva; dado ausente ou corrompido = não autenticado."""
        data = self.storage.read_json(SESSION_KEY, default=None)
        if not isinstance(data, dict):
            self._current_user = None
            return None
        try:
            self._current_user = User(**data)
        except (ValueError, TypeError) as e:
            logger.error(f"Sessão salva inválida: {e}")
            self._current_user = None
        return self._current_user

    def _activate(self, user: User) -> User:
        self.storage.write_json(SESSION_KEY, user.to_storage())
        self._current_user = user
        return user

    def login(self, email: str, password: str) -> User:
        """Login normal: busca exata de e-mail + senha no diretório."""
        for stored in self.users.load_all():
            if stored.email == email and stored.password == password:
                logger.info(f"Login: {email}")
                return self._activate(stored.to_session_user())
        raise AuthenticationError()

    # --- ACESSO MASTER ---
    # Credencial fixa (configurável via .env) que NÃO passa pelo diretório.
    # Isolado aqui para ficar visível e testável separadamente.

    def is_master_credential(self, login: str, password: str) -> bool:
        master_login, master_password = get_master_credentials()
        return login == master_login and password == master_password

    def login_master(self, login: str, password: str) -> User:
        if not self.is_master_credential(login, password):
            raise AuthenticationError("Credenciais Master inválidas.")

        master = User(
            id=MASTER_USER_ID,
            email="scard-admin",
            name="Scard Creator",
            created_at=utc_now_iso(),
            is_admin=True,
            role=UserRole.MASTER,
            permissions=list(ALL_AREAS),
        )
        logger.info("Login Master")
        return self._activate(master)

    def register(self, name: str, email: str, password: str) -> User:
        """
        O primeiro cadastro vira admin (todas as áreas);
        os seguintes viram funcionários com a permissão mínima.
        """
        if not name or not email or not password:
            raise AuthenticationError("Preencha todos os campos.")

        directory = self.users.load_all()
        if any(u.email == email for u in directory):
            raise EmailAlreadyRegisteredError()

        is_first_user = len(directory) == 0
        role = UserRole.ADMIN if is_first_user else UserRole.EMPLOYEE
        permissions = list(ALL_AREAS) if is_first_user else list(DEFAULT_EMPLOYEE_PERMISSIONS)

        new_user = StoredUser(
            email=email,
            password=password,
            name=name,
            role=role,
            is_admin=role == UserRole.ADMIN,
            permissions=permissions,
        )
        self.users.save_all(directory + [new_user])
        logger.info(f"Novo usuário cadastrado: {email} ({role.value})")

        return self._activate(new_user.to_session_user())

    def recover_password(self, email: str) -> str:
        """
        Gera uma senha temporária e a devolve direto para quem pediu.
        Não existe canal de entrega (e-mail/SMS).
        """
        directory = self.users.load_all()
        if not any(u.email == email for u in directory):
            raise UserNotFoundError()

        temp_password = generate_temp_password()
        updated = [
            u.model_copy(update={"password": temp_password}) if u.email == email else u
            for u in directory
        ]
        self.users.save_all(updated)
        logger.info(f"Senha temporária gerada para {email}")
        return temp_password

    def logout(self):
        self.storage.remove_item(SESSION_KEY)
        self._current_user = None
