from enum import Enum
from typing import List, Optional
from pydantic import model_validator
from sqlmodel import Field
from .base import StoredModel


class UserRole(str, Enum):
    """
    Papéis de acesso.
    MASTER não existe no diretório: é sintetizado pelo login Master.
    """
    MASTER = "master"
    ADMIN = "admin"
    EMPLOYEE = "employee"


class Area(str, Enum):
    """Áreas (abas) do sistema sujeitas a permissão."""
    AGENDA = "agenda"
    LIST = "list"
    CASHFLOW = "cashflow"
    DASHBOARD = "dashboard"
    ADMIN = "admin"


class User(StoredModel):
    """Usuário da sessão (sem senha)."""
    email: str
    name: str
    role: UserRole = Field(default=UserRole.EMPLOYEE)

    # Só é consultada para funcionários; master/admin acessam tudo.
    # None significa "sem permissões" (fail-closed).
    permissions: Optional[List[str]] = Field(default=None)

    # Flag legado: registros antigos só tinham isAdmin, sem role
    is_admin: bool = Field(default=False)

    @model_validator(mode="before")
    @classmethod
    def derive_legacy_role(cls, data):
        if isinstance(data, dict) and not data.get("role"):
            data = dict(data)
            legacy_admin = data.get("isAdmin", data.get("is_admin"))
            data["role"] = UserRole.ADMIN if legacy_admin else UserRole.EMPLOYEE
        return data


class StoredUser(User):
    """Registro do diretório de usuários (inclui a senha)."""
    password: str

    def to_session_user(self) -> User:
        data = self.model_dump(exclude={"password"})
        return User(**data)
