import logging
import secrets
import string
from typing import List, Optional
from urllib.parse import quote

from scard.data.local_storage import LocalStorage
from scard.data.user_repository import UserRepository
from scard.models.usuario import StoredUser, User, UserRole
from scard.services.exceptions import ProtectedUserError
from scard.services.permissions import ALL_AREAS

logger = logging.getLogger("AdminService")

GENERATED_PASSWORD_LENGTH = 12


class AdminService:
    """
    Gestão do diretório de usuários (painel admin).
    Toda operação lê o diretório inteiro, transforma e grava de volta.
    Contas master são recusadas aqui também, não só escondidas na UI.
    """

    def __init__(self, storage: LocalStorage):
        self.repository = UserRepository(storage)

    def list_users(self, search: str = "") -> List[StoredUser]:
        term = (search or "").lower()
        return [
            u for u in self.repository.load_all()
            if term in u.name.lower() or term in u.email.lower()
        ]

    def update_user(
        self,
        user_id: str,
        name: str,
        email: str,
        role: UserRole,
        permissions: List[str],
        new_password: Optional[str] = None,
    ) -> Optional[StoredUser]:
        role = UserRole(role)
        users = self.repository.load_all()
        updated_user = None
        result = []

        for u in users:
            if u.id != user_id:
                result.append(u)
                continue
            if u.role == UserRole.MASTER:
                raise ProtectedUserError()

            is_privileged = role in (UserRole.ADMIN, UserRole.MASTER)
            changes = {
                "name": name,
                "email": email,
                "role": role,
                "is_admin": is_privileged,
                "permissions": list(ALL_AREAS) if is_privileged else list(permissions),
            }
            # Senha em branco mantém a atual
            if new_password and new_password.strip():
                changes["password"] = new_password
            updated_user = u.model_copy(update=changes)
            result.append(updated_user)

        if updated_user is None:
            return None
        self.repository.save_all(result)
        logger.info(f"Usuário atualizado: {email} ({role.value})")
        return updated_user

    def delete_user(self, user_id: str):
        users = self.repository.load_all()
        for u in users:
            if u.id == user_id and u.role == UserRole.MASTER:
                raise ProtectedUserError()

        remaining = [u for u in users if u.id != user_id]
        if len(remaining) != len(users):
            self.repository.save_all(remaining)
            logger.info(f"Usuário excluído: {user_id}")

    @staticmethod
    def can_manage(user: User) -> bool:
        """Se a UI deve mostrar editar/excluir para este usuário."""
        return user.role != UserRole.MASTER

    @staticmethod
    def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
        alphabet = string.ascii_lowercase + string.digits
        return "".join(secrets.choice(alphabet) for _ in range(length))

    @staticmethod
    def password_reset_mailto(user: User, new_password: str, company_name: str = "Scard System") -> str:
        """Link mailto: para o admin enviar a nova senha pelo próprio cliente de e-mail."""
        subject = quote(f"Redefinição de Senha - {company_name}")
        body = quote(
            f"Olá {user.name},\n\n"
            f"Sua senha foi redefinida com sucesso pelo administrador.\n\n"
            f"Sua nova senha é: {new_password}\n\n"
            f"Por favor, acesse o sistema e altere sua senha se desejar.\n\n"
            f"Atenciosamente,\nEquipe {company_name}"
        )
        return f"mailto:{user.email}?subject={subject}&body={body}"
