# vitrine/presentation/session.py
# Guarda o SessionContext (token + principal) na sessão do Django.

from django.http import HttpRequest

from vitrine.core.session import SessionContext

SESSION_KEY = 'sessao_vitrine'


def get_session_context(request: HttpRequest) -> SessionContext:
    """Carrega o contexto da sessão. Sem dados, o principal é ANONYMOUS."""
    return SessionContext.from_dict(request.session.get(SESSION_KEY))


def save_session_context(request: HttpRequest, context: SessionContext) -> None:
    if context.token:
        request.session[SESSION_KEY] = context.to_dict()
    else:
        request.session.pop(SESSION_KEY, None)
    request.session.modified = True


def clear_session(request: HttpRequest) -> None:
    """Logout: descarta o token e todas as consultas salvas."""
    request.session.flush()
