# vitrine/presentation/mixins.py
"""
Mixins compartilhados pelas views da loja e dos painéis.
"""
import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect

from vitrine.core.authorization import require_view
from vitrine.core.exceptions import StorefrontError, UnauthorizedViewError
from vitrine.core.query import QueryState, apply_params, parse_sort
from vitrine.core.use_cases import CollectionBrowser

from .session import get_session_context

logger = logging.getLogger(__name__)


class StorefrontViewMixin:
    """
    Carrega o contexto de sessão e passa a requisição pelo portão de papéis.
    Rejeições viram redirect silencioso (login ou home).
    """
    required_view = None

    def dispatch(self, request, *args, **kwargs):
        self.session_context = get_session_context(request)
        self.principal = self.session_context.current_principal()

        if self.required_view is not None:
            try:
                require_view(self.required_view, self.principal)
            except UnauthorizedViewError as e:
                logger.info("Acesso a '%s' negado para %s; indo para '%s'",
                            e.view, self.principal.role.value, e.redirect_to)
                return redirect(e.redirect_to)

        return super().dispatch(request, *args, **kwargs)


class QueryStateSessionMixin:
    """
    Guarda a QueryState de uma listagem na sessão, em 'consulta_<nome>'.

    A cada GET o estado salvo é recarregado e a query string é aplicada por cima,
    então voltar para a página mantém filtros, ordenação e página.
    """
    query_name = None
    page_size_setting = 'VITRINE_ORDERS_PAGE_SIZE'
    default_sort = None
    allowed_filters = ()

    def query_session_key(self, name=None):
        return f"consulta_{name or self.query_name}"

    def get_query_state(self, request, name=None, page_size_setting=None, default_sort=None,
                        allowed_filters=None) -> QueryState:
        page_size = getattr(settings, page_size_setting or self.page_size_setting)
        allowed_filters = self.allowed_filters if allowed_filters is None else allowed_filters
        stored = request.session.get(self.query_session_key(name))

        if stored:
            state = QueryState.from_dict(stored)
            state.page_size = page_size
        else:
            sort_key, sort_dir = parse_sort(default_sort or self.default_sort)
            state = QueryState(page_size=page_size, sort_key=sort_key, sort_dir=sort_dir)

        apply_params(state, request.GET, allowed_filters)
        return state

    def save_query_state(self, request, state: QueryState, name=None) -> None:
        request.session[self.query_session_key(name)] = state.to_dict()

    def load_page(self, request, loader, state: QueryState, name=None):
        """Carrega a página atual; falhas viram mensagem e a listagem fica vazia."""
        page = None
        try:
            page = CollectionBrowser(loader, state).load()
        except StorefrontError as e:
            messages.error(request, e.message)
        self.save_query_state(request, state, name)
        return page
