class ScardError(Exception):
    """Classe base para as exceções da camada de serviços."""
    default_message = "Erro inesperado."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ===============================================
# AUTENTICAÇÃO E AUTORIZAÇÃO
# ===============================================

class AuthenticationError(ScardError):
    """Credenciais inválidas ou dados de cadastro incompletos."""
    default_message = "E-mail ou senha incorretos."


class EmailAlreadyRegisteredError(ScardError):
    default_message = "Este e-mail já está cadastrado."


class UserNotFoundError(ScardError):
    default_message = "E-mail não encontrado."


class PermissionDeniedError(ScardError):
    """Usuário sem acesso à área solicitada."""
    def __init__(self, area: str, message=None):
        self.area = area
        super().__init__(message or f"Você não tem permissão para acessar '{area}'.")


class ProtectedUserError(ScardError):
    """Tentativa de alterar ou excluir uma conta Master."""
    default_message = "Contas Master não podem ser alteradas nem excluídas."


# ===============================================
# BACKUP
# ===============================================

class InvalidBackupError(ScardError):
    default_message = "Arquivo de backup inválido."


# ===============================================
# ATENDIMENTOS
# ===============================================

class IncompleteServiceError(ScardError):
    """Atendimento concluído sem forma de pagamento ou valor."""
    default_message = "Informe a forma de pagamento e o valor do atendimento."
