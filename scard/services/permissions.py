"""
Política de acesso por área.

master e admin enxergam tudo (inclusive áreas que não estão em nenhuma lista);
funcionários só enxergam o que está em `permissions` e nunca a área admin.
"""
from typing import Iterable, List, Optional, Union

from scard.models.usuario import Area, User, UserRole
from scard.services.exceptions import PermissionDeniedError

ALL_AREAS: List[str] = [area.value for area in Area]

# Áreas que o admin pode liberar para funcionários
EMPLOYEE_AREAS = [
    (Area.AGENDA.value, "Agenda de Serviços"),
    (Area.LIST.value, "Histórico de Atendimentos"),
    (Area.CASHFLOW.value, "Fluxo de Caixa (Financeiro)"),
    (Area.DASHBOARD.value, "Dashboard / Gráficos"),
]

DEFAULT_EMPLOYEE_PERMISSIONS: List[str] = [Area.AGENDA.value]


def _area_value(area: Union[Area, str]) -> str:
    return area.value if isinstance(area, Area) else area


def has_permission(user: Optional[User], area: Union[Area, str]) -> bool:
    if user is None:
        return False

    if user.role in (UserRole.MASTER, UserRole.ADMIN) or user.is_admin:
        return True

    area_id = _area_value(area)
    if area_id == Area.ADMIN.value:
        return False

    if user.permissions is None:
        return False
    return area_id in user.permissions


def require_permission(user: Optional[User], area: Union[Area, str]):
    if not has_permission(user, area):
        raise PermissionDeniedError(_area_value(area))


def toggle_permission(permissions: Iterable[str], area: Union[Area, str]) -> List[str]:
    """Liga/desliga a área na lista (aplicar duas vezes volta ao original)."""
    area_id = _area_value(area)
    current = list(permissions)
    if area_id in current:
        return [p for p in current if p != area_id]
    return current + [area_id]


def permitted_areas(user: Optional[User]) -> List[str]:
    return [area for area in ALL_AREAS if has_permission(user, area)]
