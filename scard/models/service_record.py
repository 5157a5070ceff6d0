from enum import Enum
from typing import Dict, Optional, Type, Union
from pydantic import field_validator
from sqlmodel import Field
from .base import StoredModel


class ServiceStatus(str, Enum):
    AGENDADO = "agendado"
    CONCLUIDO = "concluido"


class PaymentMethod(str, Enum):
    PIX = "Pix"
    DINHEIRO = "Dinheiro"
    DEBITO = "Débito"
    CREDITO = "Crédito"


class ServiceBase(StoredModel):
    """Campos comuns a agendamentos e atendimentos concluídos."""
    client_name: str
    client_phone: str = Field(default="")
    service_date: str  # YYYY-MM-DD
    service_time: Optional[str] = Field(default=None)  # HH:mm
    return_date: str = Field(default="")  # YYYY-MM-DD
    description: str = Field(default="")


class ScheduledService(ServiceBase):
    """Agendamento: ainda sem forma de pagamento nem valor."""
    status: ServiceStatus = Field(default=ServiceStatus.AGENDADO)

    @field_validator("status")
    @classmethod
    def force_status(cls, value):
        return ServiceStatus.AGENDADO


class CompletedService(ServiceBase):
    """
    Atendimento concluído. Pagamento e valor são exigidos no formulário
    (AppController.submit_service_form); registros antigos sem eles
    continuam válidos aqui para não se perderem na próxima gravação.
    """
    status: ServiceStatus = Field(default=ServiceStatus.CONCLUIDO)
    payment_method: Optional[PaymentMethod] = Field(default=None)
    amount: Optional[float] = Field(default=None)

    @field_validator("status")
    @classmethod
    def force_status(cls, value):
        return ServiceStatus.CONCLUIDO


ServiceRecord = Union[ScheduledService, CompletedService]

# Mapeia o valor de 'status' para a classe concreta
RECORD_TYPES: Dict[str, Type[ServiceBase]] = {
    ServiceStatus.AGENDADO.value: ScheduledService,
    ServiceStatus.CONCLUIDO.value: CompletedService,
}

PAYMENT_KEYS = ("payment_method", "paymentMethod", "amount")


def parse_service_record(data: dict) -> ServiceRecord:
    """
    Constrói a variante correta a partir do dict persistido.
    Sem 'status' (ou com um status desconhecido) levanta ValueError:
    o registro não pertence nem à agenda nem ao histórico.
    """
    if not isinstance(data, dict):
        raise TypeError(f"Atendimento em formato inesperado: {type(data).__name__}")

    status = data.get("status")
    if isinstance(status, ServiceStatus):
        status = status.value
    model_class = RECORD_TYPES.get(status)
    if model_class is None:
        raise ValueError(f"Status de atendimento desconhecido: {status}")

    payload = dict(data)
    payload["status"] = status
    if model_class is ScheduledService:
        # Agendamentos nunca carregam dados de pagamento
        for key in PAYMENT_KEYS:
            payload.pop(key, None)
    return model_class(**payload)


def is_scheduled(record: ServiceRecord) -> bool:
    return record.status == ServiceStatus.AGENDADO


def is_completed(record: ServiceRecord) -> bool:
    return record.status == ServiceStatus.CONCLUIDO


def has_payment(record: ServiceRecord) -> bool:
    """Concluído com forma de pagamento e valor (entra nos relatórios)."""
    return (
        is_completed(record)
        and record.payment_method is not None
        and record.amount is not None
    )
