import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

MONTH_NAMES = [
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]

WEEKDAY_NAMES = [
    "segunda-feira", "terça-feira", "quarta-feira", "quinta-feira",
    "sexta-feira", "sábado", "domingo",
]

RETURN_DAYS = 20


def _to_date(value: Union[str, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def format_currency(value: Optional[float]) -> str:
    """1234.5 -> 'R$ 1.234,50'"""
    value = value or 0.0
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.2f}"
    # Troca os separadores do padrão americano para o brasileiro
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def format_date(value: Optional[Union[str, date]]) -> str:
    """'2025-01-10' -> '10/01/2025'. Sem fuso horário: a data é tratada como local."""
    if not value:
        return ""
    return _to_date(value).strftime("%d/%m/%Y")


def calculate_return_date(service_date: Optional[Union[str, date]], days: int = RETURN_DAYS) -> str:
    """Sugestão de retorno: data do serviço + 20 dias."""
    if not service_date:
        return ""
    return (_to_date(service_date) + timedelta(days=days)).isoformat()


def shift_date(value: str, days: int) -> str:
    if not value:
        return value
    return (_to_date(value) + timedelta(days=days)).isoformat()


def weekday_name(value: Optional[Union[str, date]]) -> str:
    if not value:
        return ""
    return WEEKDAY_NAMES[_to_date(value).weekday()]


def month_name(month_key: str) -> str:
    """'2025-01' -> 'janeiro de 2025'"""
    year, month = month_key.split("-")[:2]
    return f"{MONTH_NAMES[int(month) - 1]} de {year}"


def format_phone(raw: str) -> str:
    """Máscara brasileira: (11) 98765-4321 / (11) 3456-7890"""
    digits = re.sub(r"\D", "", raw or "")[:11]
    if len(digits) > 10:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) > 6:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    if len(digits) > 2:
        return f"({digits[:2]}) {digits[2:]}"
    if digits:
        return f"({digits}"
    return ""
