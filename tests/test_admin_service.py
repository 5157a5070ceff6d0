"""User directory management from the admin panel."""

import pytest
from urllib.parse import unquote

from scard.data.user_repository import UserRepository
from scard.models.usuario import StoredUser, UserRole
from scard.services.admin_service import AdminService
from scard.services.exceptions import ProtectedUserError
from scard.services.permissions import ALL_AREAS


@pytest.fixture
def admin(storage, auth):
    auth.register("Dona", "dona@salao.com", "123")
    auth.register("Ana Souza", "ana@salao.com", "abc")
    auth.register("Bia", "bia@outro.com", "xyz")
    auth.logout()
    return AdminService(storage)


def user_by_email(admin, email):
    return next(u for u in admin.list_users() if u.email == email)


# ── Listing ───────────────────────────────────────

def test_search_by_name_or_email(admin):
    assert [u.name for u in admin.list_users("souza")] == ["Ana Souza"]
    assert [u.email for u in admin.list_users("OUTRO")] == ["bia@outro.com"]
    assert len(admin.list_users()) == 3


# ── Updates ───────────────────────────────────────

def test_update_employee_permissions(admin):
    ana = user_by_email(admin, "ana@salao.com")
    admin.update_user(ana.id, ana.name, ana.email, UserRole.EMPLOYEE, ["agenda", "cashflow"])

    ana = user_by_email(admin, "ana@salao.com")
    assert ana.permissions == ["agenda", "cashflow"]
    assert ana.role == UserRole.EMPLOYEE
    assert ana.password == "abc"


def test_promotion_grants_all_areas(admin):
    ana = user_by_email(admin, "ana@salao.com")
    updated = admin.update_user(ana.id, ana.name, ana.email, "admin", [])
    assert updated.role == UserRole.ADMIN
    assert updated.is_admin is True
    assert updated.permissions == ALL_AREAS


def test_new_password_replaces_old(admin, auth):
    ana = user_by_email(admin, "ana@salao.com")
    admin.update_user(ana.id, ana.name, ana.email, UserRole.EMPLOYEE, ["agenda"], new_password="nova")
    assert auth.login("ana@salao.com", "nova").email == "ana@salao.com"


def test_blank_password_keeps_current(admin):
    ana = user_by_email(admin, "ana@salao.com")
    admin.update_user(ana.id, "Ana S.", ana.email, UserRole.EMPLOYEE, ["agenda"], new_password="   ")
    ana = user_by_email(admin, "ana@salao.com")
    assert ana.name == "Ana S."
    assert ana.password == "abc"


def test_update_unknown_user(admin):
    assert admin.update_user("nao-existe", "X", "x@x.com", UserRole.EMPLOYEE, []) is None
    assert len(admin.list_users()) == 3


# ── Deletes ───────────────────────────────────────

def test_delete_user(admin):
    bia = user_by_email(admin, "bia@outro.com")
    admin.delete_user(bia.id)
    assert "bia@outro.com" not in [u.email for u in admin.list_users()]


def test_delete_unknown_user_is_noop(admin):
    admin.delete_user("nao-existe")
    assert len(admin.list_users()) == 3


# ── Master protection ─────────────────────────────

def test_master_records_cannot_be_changed(admin, storage):
    repo = UserRepository(storage)
    master = StoredUser(email="m@m.com", name="Master", role=UserRole.MASTER, password="x")
    repo.save_all(repo.load_all() + [master])

    assert not AdminService.can_manage(master)
    with pytest.raises(ProtectedUserError):
        admin.update_user(master.id, "Outro", "m@m.com", UserRole.EMPLOYEE, [])
    with pytest.raises(ProtectedUserError):
        admin.delete_user(master.id)
    assert user_by_email(admin, "m@m.com").name == "Master"


# ── Password helpers ──────────────────────────────

def test_generated_password():
    password = AdminService.generate_password()
    assert len(password) == 12
    assert password.isalnum()


def test_password_reset_mailto(admin):
    ana = user_by_email(admin, "ana@salao.com")
    link = AdminService.password_reset_mailto(ana, "abc123xyz", "Beautiful Nails")
    assert link.startswith("mailto:ana@salao.com?subject=")
    assert "abc123xyz" in unquote(link)
    assert "Beautiful Nails" in unquote(link)
