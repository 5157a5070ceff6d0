from enum import Enum
from typing import Optional
from sqlmodel import Field
from .base import JsonModel


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class CardRates(JsonModel):
    """Taxas da maquininha, em percentual."""
    debit: float = Field(default=0.0)
    credit: float = Field(default=0.0)


DEFAULT_WHATSAPP_TEMPLATE = (
    "Olá {nome}! Passando para confirmar nosso agendamento amanhã às {horario}. Tudo certo?"
)


class AppSettings(JsonModel):
    company_name: str = Field(default="Beautiful Nails")
    # Imagem em data URL (base64); pode estourar a cota do armazenamento
    logo: Optional[str] = Field(default=None)
    whatsapp_message_template: Optional[str] = Field(default=DEFAULT_WHATSAPP_TEMPLATE)
    theme: Theme = Field(default=Theme.LIGHT)
    card_rates: Optional[CardRates] = Field(default=None)


DEFAULT_SETTINGS = AppSettings()
