# Chaves do armazenamento local.
# Sessão e diretório de usuários são globais; registros, despesas e
# configurações ficam sob o namespace do "store" (compartilhado por todos).

SESSION_KEY = "scard_session_v1"
USERS_KEY = "scard_users_v1"


def records_key(namespace: str) -> str:
    return f"scard_{namespace}_records_v1"


def expenses_key(namespace: str) -> str:
    return f"scard_{namespace}_expenses_v1"


def settings_key(namespace: str) -> str:
    return f"scard_{namespace}_settings_v1"
