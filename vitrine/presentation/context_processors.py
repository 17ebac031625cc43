"""
Context processors para a aplicação presentation.
"""
from vitrine.core.authorization import navigation_for

from .session import get_session_context


def storefront_context(request):
    """
    Adiciona o principal atual e os links do menu ao contexto global dos templates.
    """
    principal = get_session_context(request).current_principal()
    return {
        'principal': principal,
        'nav': navigation_for(principal),
    }
