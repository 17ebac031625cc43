class StorefrontError(Exception):
    """Classe base para todas as exceções da Camada Core."""
    default_message = "Ocorreu um erro na loja."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ===============================================
# ERROS DE COMUNICAÇÃO COM O BACKEND
# ===============================================

class RequestError(StorefrontError):
    """Falha de rede ou resposta HTTP fora da faixa 2xx."""
    default_message = "Something went wrong"

    def __init__(self, message=None, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class ParseError(StorefrontError):
    """A resposta do backend não tem nenhum dos formatos aceitos."""
    default_message = "Resposta do servidor em formato não reconhecido."


# ===============================================
# ERROS DE DADOS
# ===============================================

class InvalidDataError(StorefrontError):
    """Erro levantado quando dados inválidos são fornecidos."""
    default_message = "Os dados fornecidos são inválidos."


class InvalidQuantityError(InvalidDataError):
    """Quantidade abaixo de 1. Quem chama deve remover a linha."""
    default_message = "A quantidade deve ser no mínimo 1."


class ItemNotFoundError(StorefrontError):
    """Erro levantado quando um item não é encontrado."""
    default_message = "O item solicitado não foi encontrado."


# ===============================================
# ERROS DE FLUXO DE COMPRA E PEDIDO
# ===============================================

class EmptyCartError(StorefrontError):
    """Checkout com o carrinho vazio. A view deve voltar para o carrinho."""
    default_message = "O carrinho de compras está vazio."
    redirect_to = 'cart'


class InvalidStatusError(InvalidDataError):
    """Status fora de {PENDING, COMPLETED, CANCELLED}."""
    default_message = "O status fornecido não é válido para um pedido."


class InvalidTransitionError(StorefrontError):
    """Tentativa de sair de um status terminal."""

    def __init__(self, current, new, message=None):
        self.current = current
        self.new = new
        if message is None:
            message = f"O pedido já está {current} e não pode passar para {new}."
        super().__init__(message)


# ===============================================
# ERROS DE AUTORIZAÇÃO
# ===============================================

class UnauthorizedViewError(StorefrontError):
    """Rejeição do portão de papéis. Resolvida com redirect, nunca exibida."""

    def __init__(self, view, redirect_to='home', message=None):
        self.view = view
        self.redirect_to = redirect_to
        super().__init__(message or f"Acesso negado à página '{view}'.")


class ForbiddenActionError(StorefrontError):
    """O principal atual não pode executar esta mutação."""

    def __init__(self, action, message=None):
        self.action = action
        super().__init__(message or f"Você não tem permissão para '{action}'.")
