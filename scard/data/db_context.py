import os
from typing import Optional
from dotenv import load_dotenv
from sqlmodel import SQLModel, create_engine
from sqlalchemy.engine import Engine

# Carrega as variáveis do arquivo .env (se existir)
load_dotenv()

DATABASE_NAME = "scard.db"
DEFAULT_STORE_NAMESPACE = "global"
# Mesmo limite usado pelos navegadores para o localStorage
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


def get_db_path() -> str:
    """
    Define o caminho do banco local dependendo do ambiente.
    SCARD_DB_PATH tem prioridade; no Android usamos o armazenamento interno gravável.
    """
    env_path = os.getenv("SCARD_DB_PATH")
    if env_path:
        return env_path

    if "ANDROID_ARGUMENT" in os.environ:
        storage_path = "/data/data/com.scard.system/files"
        return os.path.join(storage_path, DATABASE_NAME)

    # Desenvolvimento Desktop
    return DATABASE_NAME


def get_store_namespace() -> str:
    """Todos os usuários compartilham o mesmo 'store'. Hoje é um valor fixo."""
    return os.getenv("SCARD_STORE_NAMESPACE", DEFAULT_STORE_NAMESPACE)


def get_storage_quota() -> int:
    raw = os.getenv("SCARD_STORAGE_QUOTA_BYTES")
    if not raw:
        return DEFAULT_QUOTA_BYTES
    try:
        return int(raw)
    except ValueError:
        return DEFAULT_QUOTA_BYTES


def get_master_credentials() -> tuple:
    """Credencial Master fora do diretório de usuários (login, senha)."""
    return (
        os.getenv("SCARD_MASTER_LOGIN", "scard"),
        os.getenv("SCARD_MASTER_PASSWORD", "system2025"),
    )


def create_db_engine(db_path: Optional[str] = None) -> Engine:
    """
    Cria o Engine do SQLModel apontando para o arquivo local e garante as tabelas.
    """
    path = db_path or get_db_path()
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False}  # Necessário para Flet
    )
    SQLModel.metadata.create_all(engine)
    return engine
