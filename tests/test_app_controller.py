"""Domain state: load/save boundaries, schedule workflow, derived views."""

import pytest

from scard.data.local_storage import StorageQuotaExceededError
from scard.data.storage_keys import records_key
from scard.models.service_record import CompletedService, ServiceStatus
from scard.models.settings import AppSettings, DEFAULT_SETTINGS
from scard.models.usuario import User, UserRole
from scard.services.app_controller import AppController
from scard.services.exceptions import IncompleteServiceError, PermissionDeniedError


def schedule(controller, data):
    controller.start_new_schedule()
    return controller.submit_service_form(data)


# ── Schedule → completion ─────────────────────────

def test_finish_scheduled_record(controller, scheduled_data):
    scheduled = schedule(controller, scheduled_data())
    assert scheduled.status == ServiceStatus.AGENDADO
    assert controller.state.active_area == "agenda"

    controller.start_finishing(scheduled)
    assert controller.form_title() == "Finalizar Atendimento"
    finished = controller.submit_service_form(
        {**scheduled_data(), "amount": 100, "payment_method": "Pix"}
    )

    assert isinstance(finished, CompletedService)
    assert finished.id == scheduled.id
    assert finished.created_at == scheduled.created_at
    assert finished.amount == 100
    assert controller.state.active_area == "list"
    assert [r.id for r in controller.history()] == [scheduled.id]
    assert controller.agenda() == []
    assert len(controller.state.records) == 1


def test_edit_schedule_keeps_status(controller, scheduled_data):
    scheduled = schedule(controller, scheduled_data())

    controller.start_editing_schedule(scheduled)
    assert controller.form_title() == "Editar Agendamento"
    edited = controller.submit_service_form(scheduled_data(service_time="16:30", amount=80, payment_method="Pix"))

    assert edited.id == scheduled.id
    assert edited.status == ServiceStatus.AGENDADO
    assert edited.service_time == "16:30"
    assert "amount" not in edited.to_storage()


def test_new_service_without_reference_creates_completed(controller, scheduled_data):
    controller.start_new_service()
    assert controller.form_title() == "Novo Atendimento"
    record = controller.submit_service_form({**scheduled_data(), "amount": 45.5, "payment_method": "Dinheiro"})
    assert record.status == ServiceStatus.CONCLUIDO
    assert controller.state.editing_record is None
    assert controller.state.scheduling_mode is False


def test_cancel_form_returns_to_origin(controller):
    controller.start_new_schedule()
    controller.cancel_form()
    assert controller.state.active_area == "agenda"
    assert controller.state.form_open is False

    controller.start_new_service()
    controller.cancel_form()
    assert controller.state.active_area == "list"


def test_finish_requires_payment(controller, scheduled_data):
    scheduled = schedule(controller, scheduled_data())
    controller.start_finishing(scheduled)

    with pytest.raises(IncompleteServiceError):
        controller.submit_service_form(scheduled_data())

    assert controller.agenda()[0].id == scheduled.id
    assert controller.state.form_open is True


def test_employee_without_history_stays_on_agenda(storage, scheduled_data):
    ctrl = AppController(storage, namespace="test")
    ctrl.activate_session(User(email="f@f.com", name="F", role=UserRole.EMPLOYEE, permissions=["agenda"]))
    scheduled = schedule(ctrl, scheduled_data())

    ctrl.start_finishing(scheduled)
    ctrl.submit_service_form({**scheduled_data(), "amount": 100, "payment_method": "Pix"})
    assert ctrl.state.active_area == "agenda"
    assert ctrl.can_access(ctrl.state.active_area)

    ctrl.start_new_service()
    ctrl.cancel_form()
    assert ctrl.state.active_area == "agenda"


# ── Persistence boundaries ────────────────────────

def test_mutations_are_persisted_for_every_user(controller, storage, scheduled_data):
    schedule(controller, scheduled_data())
    controller.add_expense({"description": "Esmaltes", "amount": 30, "date": "2025-01-10", "type": "expense"})

    other = AppController(storage, namespace="test")
    other.activate_session(User(email="f@f.com", name="F", role=UserRole.EMPLOYEE, permissions=["agenda"]))
    assert len(other.state.records) == 1
    assert len(other.state.expenses) == 1


def test_clear_session_resets_memory_only(controller, storage, scheduled_data):
    schedule(controller, scheduled_data())
    controller.clear_session()

    assert controller.state.user is None
    assert controller.state.records == []
    assert controller.state.settings == DEFAULT_SETTINGS
    assert len(storage.read_json(records_key("test"))) == 1


def test_corrupted_records_blob_loads_empty(controller, storage):
    storage.set_item(records_key("test"), "[{broken")
    controller.reload()
    assert controller.state.records == []


def test_unreadable_entries_survive_the_next_save(controller, storage, scheduled_data):
    legacy_completed = {**scheduled_data(), "status": "concluido", "id": "sem-valor", "created_at": "2025-01-01"}
    without_status = {**scheduled_data(), "id": "sem-status", "created_at": "2025-01-01"}
    storage.write_json(records_key("test"), [
        {**scheduled_data(), "status": "agendado", "id": "ok", "created_at": "2025-01-01"},
        legacy_completed,
        without_status,
    ])
    controller.reload()

    assert sorted(r.id for r in controller.state.records) == ["ok", "sem-valor"]
    assert [r.id for r in controller.agenda()] == ["ok"]
    assert [r.id for r in controller.history()] == ["sem-valor"]

    schedule(controller, scheduled_data(client_name="Nova"))

    persisted_ids = [item["id"] for item in storage.read_json(records_key("test"))]
    assert len(persisted_ids) == 4
    assert {"ok", "sem-valor", "sem-status"} <= set(persisted_ids)


# ── Deletes / updates ─────────────────────────────

def test_delete_unknown_id_is_noop(controller, scheduled_data):
    schedule(controller, scheduled_data())
    before = list(controller.state.records)
    controller.delete_record("nao-existe")
    controller.delete_expense("nao-existe")
    assert controller.state.records == before


def test_update_unknown_id_returns_none(controller):
    assert controller.update_record("nao-existe", {"client_name": "X"}) is None


def test_delete_record(controller, scheduled_data):
    record = schedule(controller, scheduled_data())
    controller.delete_record(record.id)
    assert controller.state.records == []
    controller.reload()
    assert controller.state.records == []


# ── Derived views ─────────────────────────────────

def test_agenda_sorted_by_date_and_time(controller, scheduled_data):
    schedule(controller, scheduled_data(client_name="C", service_date="2025-02-01", service_time=None))
    schedule(controller, scheduled_data(client_name="B", service_date="2025-01-10", service_time="15:00"))
    schedule(controller, scheduled_data(client_name="A", service_date="2025-01-10", service_time="09:00"))
    assert [r.client_name for r in controller.agenda()] == ["A", "B", "C"]


def test_history_search_and_month(controller, scheduled_data):
    for name, day, desc in [("Ana", "2025-01-05", "Pé"), ("Bia", "2025-02-07", "Mão"), ("Carla", "2025-01-20", "Gel")]:
        controller.start_new_service()
        controller.submit_service_form(
            scheduled_data(client_name=name, service_date=day, description=desc, amount=10, payment_method="Pix")
        )

    assert [r.client_name for r in controller.history()] == ["Bia", "Carla", "Ana"]
    assert [r.client_name for r in controller.history(month="2025-01")] == ["Carla", "Ana"]
    assert [r.client_name for r in controller.history(search="gel")] == ["Carla"]


# ── Navigation ────────────────────────────────────

def test_employee_navigation_denied(storage):
    ctrl = AppController(storage, namespace="test")
    ctrl.activate_session(User(email="f@f.com", name="F", role=UserRole.EMPLOYEE, permissions=["list"]))
    assert ctrl.state.active_area == "list"

    with pytest.raises(PermissionDeniedError):
        ctrl.navigate("admin")
    assert ctrl.state.active_area == "list"


def test_admin_navigation(controller):
    controller.navigate("admin")
    assert controller.state.active_area == "admin"


# ── Settings ──────────────────────────────────────

def test_save_settings_persists(controller, storage):
    controller.save_settings(AppSettings(company_name="Espaço Fran"))
    other = AppController(storage, namespace="test")
    other.reload()
    assert other.state.settings.company_name == "Espaço Fran"


def test_oversized_logo_keeps_previous_settings(controller):
    huge = "data:image/png;base64," + "A" * (80 * 1024)
    with pytest.raises(StorageQuotaExceededError):
        controller.save_settings(AppSettings(company_name="Grande", logo=huge))
    assert controller.state.settings.company_name == DEFAULT_SETTINGS.company_name


def test_refused_record_write_keeps_memory_in_sync(controller, storage, scheduled_data):
    schedule(controller, scheduled_data())
    before = list(controller.state.records)

    controller.start_new_service()
    with pytest.raises(StorageQuotaExceededError):
        controller.submit_service_form(
            scheduled_data(description="x" * (70 * 1024), amount=10, payment_method="Pix")
        )

    assert controller.state.records == before
    assert len(storage.read_json(records_key("test"))) == 1


def test_refused_expense_write_keeps_memory_in_sync(controller):
    with pytest.raises(StorageQuotaExceededError):
        controller.add_expense({"description": "x" * (70 * 1024), "amount": 1, "date": "2025-01-01"})
    assert controller.state.expenses == []
