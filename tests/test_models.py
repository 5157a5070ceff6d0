"""Unit tests for entities: service-record variants, users and settings merge."""

import pytest
from pydantic import ValidationError

from scard.data.settings_repository import SettingsRepository
from scard.data.storage_keys import settings_key
from scard.models.service_record import (
    CompletedService,
    PaymentMethod,
    ScheduledService,
    ServiceStatus,
    parse_service_record,
)
from scard.models.settings import DEFAULT_SETTINGS, Theme
from scard.models.usuario import StoredUser, User, UserRole


# ── Service record variants ───────────────────────

def test_scheduled_record_drops_payment_fields(scheduled_data):
    record = parse_service_record({**scheduled_data(), "status": "agendado", "amount": 50, "payment_method": "Pix"})
    assert isinstance(record, ScheduledService)
    assert not hasattr(record, "amount")
    assert "amount" not in record.to_storage()


def test_completed_record_without_payment_is_kept(scheduled_data):
    legacy = parse_service_record({**scheduled_data(), "status": "concluido"})
    assert isinstance(legacy, CompletedService)
    assert legacy.amount is None
    assert legacy.payment_method is None

    record = parse_service_record(
        {**scheduled_data(), "status": "concluido", "amount": 100, "payment_method": "Pix"}
    )
    assert record.payment_method == PaymentMethod.PIX
    assert record.to_storage()["paymentMethod"] == "Pix"


@pytest.mark.parametrize("status", ["cancelado", None, ""])
def test_unknown_or_missing_status_is_rejected(scheduled_data, status):
    with pytest.raises(ValueError):
        parse_service_record({**scheduled_data(), "status": status})


def test_non_dict_entry_is_rejected():
    with pytest.raises(TypeError):
        parse_service_record("agendado")


def test_variant_status_is_fixed(scheduled_data):
    record = ScheduledService(**scheduled_data(), status="concluido")
    assert record.status == ServiceStatus.AGENDADO


def test_record_without_client_is_invalid():
    with pytest.raises(ValidationError):
        parse_service_record({"service_date": "2025-01-10", "status": "agendado"})


# ── JSON field names ──────────────────────────────

def test_storage_format_is_camel_case(scheduled_data):
    record = parse_service_record({**scheduled_data(), "status": "concluido", "amount": 80, "payment_method": "Débito"})
    stored = record.to_storage()
    assert stored["clientName"] == "Maria"
    assert stored["serviceDate"] == "2025-01-10"
    assert "createdAt" in stored
    assert "client_name" not in stored


def test_camel_case_input_is_accepted():
    record = parse_service_record({
        "id": "r1",
        "clientName": "Joana",
        "clientPhone": "",
        "serviceDate": "2025-03-01",
        "serviceTime": "10:00",
        "returnDate": "2025-03-21",
        "description": "Pé",
        "paymentMethod": "Crédito",
        "amount": 60,
        "status": "concluido",
        "createdAt": "2025-03-01T10:00:00.000Z",
    })
    assert record.client_name == "Joana"
    assert record.payment_method == PaymentMethod.CREDITO
    assert record.created_at == "2025-03-01T10:00:00.000Z"


def test_scheduled_drops_camel_case_payment_fields():
    record = parse_service_record(
        {"clientName": "Ana", "serviceDate": "2025-03-01", "status": "agendado", "paymentMethod": "Pix", "amount": 10}
    )
    assert "paymentMethod" not in record.to_storage()


# ── Users ─────────────────────────────────────────

def test_legacy_user_role_from_is_admin():
    legacy = User(email="a@a.com", name="A", is_admin=True)
    assert legacy.role == UserRole.ADMIN
    assert User(email="b@b.com", name="B").role == UserRole.EMPLOYEE
    assert User(**{"email": "c@c.com", "name": "C", "isAdmin": True}).role == UserRole.ADMIN


def test_session_user_has_no_password():
    stored = StoredUser(email="a@a.com", name="A", password="secret", permissions=["agenda"])
    session_user = stored.to_session_user()
    assert "password" not in session_user.to_storage()
    assert session_user.id == stored.id
    assert session_user.permissions == ["agenda"]


# ── Settings merge ────────────────────────────────

def test_settings_merge_backfills_defaults(storage):
    storage.write_json(settings_key("test"), {"company_name": "X"})
    settings = SettingsRepository(storage, "test").load()
    assert settings.company_name == "X"
    assert settings.theme == Theme.LIGHT
    assert settings.whatsapp_message_template == DEFAULT_SETTINGS.whatsapp_message_template
    assert settings.logo is None


def test_settings_corrupted_uses_defaults(storage):
    storage.set_item(settings_key("test"), "{{{")
    settings = SettingsRepository(storage, "test").load()
    assert settings == DEFAULT_SETTINGS


def test_settings_camel_case_roundtrip(storage):
    storage.write_json(settings_key("test"), {"companyName": "Y", "cardRates": {"debit": 1.5}})
    repo = SettingsRepository(storage, "test")
    settings = repo.load()
    assert settings.company_name == "Y"
    assert settings.card_rates.debit == 1.5
    assert settings.card_rates.credit == 0.0

    repo.save(settings)
    stored = storage.read_json(settings_key("test"))
    assert stored["companyName"] == "Y"
    assert stored["whatsappMessageTemplate"] == DEFAULT_SETTINGS.whatsapp_message_template
