import uuid
from datetime import datetime, timezone
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel


# Função auxiliar para timestamps UTC em ISO8601 (formato gravado no JSON)
def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class JsonModel(SQLModel):
    """
    Modelo gravado como JSON. No JSON os campos ficam em camelCase
    (clientName, serviceDate...), mesmo formato dos backups.
    No código continuam em snake_case; os dois nomes são aceitos na leitura.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_storage(self) -> dict:
        """Formato gravado no JSON (enums viram seus valores)."""
        return self.model_dump(mode="json", by_alias=True)


class StoredModel(JsonModel):
    """
    Classe Base para as entidades guardadas como JSON no armazenamento local.
    Implementa UUID e data de criação.
    """
    # Identificador UUID v4
    id: str = Field(default_factory=new_id)

    # Metadados de Auditoria
    created_at: str = Field(default_factory=utc_now_iso)
