import pytest

from scard.data.db_context import create_db_engine
from scard.data.local_storage import LocalStorage
from scard.services.app_controller import AppController
from scard.services.auth_service import AuthService


@pytest.fixture(autouse=True)
def master_env(monkeypatch):
    # Garante as credenciais padrão mesmo se houver um .env local
    monkeypatch.delenv("SCARD_MASTER_LOGIN", raising=False)
    monkeypatch.delenv("SCARD_MASTER_PASSWORD", raising=False)


@pytest.fixture
def storage(tmp_path):
    engine = create_db_engine(str(tmp_path / "test.db"))
    return LocalStorage(engine=engine, quota_bytes=64 * 1024)


@pytest.fixture
def auth(storage):
    return AuthService(storage)


@pytest.fixture
def controller(storage, auth):
    ctrl = AppController(storage, namespace="test")
    ctrl.activate_session(auth.register("Dona", "dona@salao.com", "123"))
    return ctrl


@pytest.fixture
def scheduled_data():
    def build(**overrides):
        data = {
            "client_name": "Maria",
            "client_phone": "(11) 98765-4321",
            "service_date": "2025-01-10",
            "service_time": "14:00",
            "return_date": "2025-01-30",
            "description": "Alongamento em gel",
        }
        data.update(overrides)
        return data
    return build
