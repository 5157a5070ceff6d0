"""Display formatting and WhatsApp confirmation links."""

from datetime import date
from urllib.parse import unquote

import pytest

from scard.services.formatters import (
    calculate_return_date,
    format_currency,
    format_date,
    format_phone,
    month_name,
    shift_date,
    weekday_name,
)
from scard.services.whatsapp import build_whatsapp_link, normalize_phone, render_message


# ── Formatters ────────────────────────────────────

@pytest.mark.parametrize("value, expected", [
    (1234.5, "R$ 1.234,50"),
    (0, "R$ 0,00"),
    (None, "R$ 0,00"),
    (-30, "-R$ 30,00"),
    (1000000, "R$ 1.000.000,00"),
])
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_format_date_without_timezone_shift():
    assert format_date("2025-01-10") == "10/01/2025"
    assert format_date("2025-01-10T23:59:00Z") == "10/01/2025"
    assert format_date(date(2025, 12, 31)) == "31/12/2025"
    assert format_date("") == ""


def test_return_date_is_twenty_days_later():
    assert calculate_return_date("2025-01-10") == "2025-01-30"
    assert calculate_return_date("2025-02-20") == "2025-03-12"
    assert calculate_return_date("") == ""


def test_date_helpers():
    assert shift_date("2025-01-31", 1) == "2025-02-01"
    assert weekday_name("2025-01-10") == "sexta-feira"
    assert month_name("2025-03") == "março de 2025"


@pytest.mark.parametrize("raw, expected", [
    ("11987654321", "(11) 98765-4321"),
    ("1134567890", "(11) 3456-7890"),
    ("11", "(11"),
    ("", ""),
])
def test_format_phone(raw, expected):
    assert format_phone(raw) == expected


# ── WhatsApp ──────────────────────────────────────

def test_country_code_added_for_local_numbers():
    assert normalize_phone("(11) 98765-4321") == "5511987654321"


def test_country_code_kept_when_already_present():
    assert normalize_phone("+55 11 98765-4321") == "5511987654321"


def test_template_placeholders():
    message = render_message("Oi {nome}, confirmado às {horario}? {nome}!", "Maria", "14:00")
    assert message == "Oi Maria, confirmado às 14:00? Maria!"
    assert render_message("{nome} {horario}", "Ana", None) == "Ana "


def test_whatsapp_link():
    link = build_whatsapp_link("(11) 98765-4321", "Olá {nome}, {horario}", "Maria", "14:00")
    assert link.startswith("https://wa.me/5511987654321?text=")
    assert unquote(link.split("text=")[1]) == "Olá Maria, 14:00"


def test_whatsapp_link_default_template():
    link = build_whatsapp_link("11987654321", None, "Maria", "09:30")
    text = unquote(link.split("text=")[1])
    assert "Maria" in text
    assert "09:30" in text
