import re
from typing import Optional
from urllib.parse import quote

from scard.models.settings import DEFAULT_WHATSAPP_TEMPLATE

DEFAULT_COUNTRY_CODE = "55"
WHATSAPP_URL = "https://wa.me"


def normalize_phone(phone: str, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """Mantém só os dígitos e aplica o DDI quando o número tem até 11 dígitos."""
    digits = re.sub(r"\D", "", phone or "")
    if digits and len(digits) <= 11:
        digits = country_code + digits
    return digits


def render_message(template: Optional[str], client_name: str, service_time: Optional[str]) -> str:
    message = template or DEFAULT_WHATSAPP_TEMPLATE
    return (
        message
        .replace("{nome}", client_name or "")
        .replace("{horario}", service_time or "")
    )


def build_whatsapp_link(
    phone: str,
    template: Optional[str],
    client_name: str,
    service_time: Optional[str] = None,
) -> str:
    """Link wa.me com a mensagem de confirmação já preenchida."""
    number = normalize_phone(phone)
    text = quote(render_message(template, client_name, service_time))
    return f"{WHATSAPP_URL}/{number}?text={text}"
