# vitrine/core/query.py
"""
Estado de consulta compartilhado por todas as listagens (produtos, pedidos, usuários).

A QueryState guarda página, tamanho de página, ordenação e filtros, e gera a forma
canônica dos parâmetros enviados ao backend. Qualquer mudança de filtro ou de
ordenação invalida os índices de página anteriores, então a página volta para 1.
"""
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
from urllib.parse import urlencode

from vitrine.core.exceptions import InvalidDataError

SORT_DIRECTIONS = ('asc', 'desc')

# Parâmetros que não são filtros
RESERVED_PARAMS = ('page', 'limit', 'sort')


def parse_sort(raw: Optional[str]):
    """Converte 'campo,direcao' em (campo, direcao). Vazio vira (None, 'asc')."""
    if not raw:
        return None, 'asc'
    key, _, direction = raw.partition(',')
    direction = (direction or 'asc').strip().lower()
    if direction not in SORT_DIRECTIONS:
        raise InvalidDataError(f"Direção de ordenação inválida: '{direction}'.")
    return key.strip() or None, direction


@dataclass
class QueryState:
    page: int = 1
    page_size: int = 10
    sort_key: Optional[str] = None
    sort_dir: str = 'asc'
    filters: Dict[str, str] = field(default_factory=dict)
    total_pages: Optional[int] = None
    version: int = 0

    def __post_init__(self):
        if self.page < 1:
            raise InvalidDataError("A página deve ser no mínimo 1.")
        if self.page_size < 1:
            raise InvalidDataError("O tamanho da página deve ser positivo.")
        if self.sort_dir not in SORT_DIRECTIONS:
            raise InvalidDataError(f"Direção de ordenação inválida: '{self.sort_dir}'.")
        self.filters = {k: str(v) for k, v in self.filters.items() if v not in (None, '')}

    # --- Mutações ---

    def set_filter(self, key: str, value) -> None:
        """Atualiza (ou remove, se vazio) um filtro e volta para a página 1."""
        if value in (None, ''):
            self.filters.pop(key, None)
        else:
            self.filters[key] = str(value)
        self._reset()

    def set_sort(self, key: Optional[str], direction: str = 'asc') -> None:
        direction = (direction or 'asc').lower()
        if direction not in SORT_DIRECTIONS:
            raise InvalidDataError(f"Direção de ordenação inválida: '{direction}'.")
        self.sort_key = key or None
        self.sort_dir = direction
        self._reset()

    def set_page(self, n: int) -> bool:
        """
        Vai para a página `n`. Fora dos limites conhecidos é um no-op.
        Retorna True quando a página mudou.
        """
        if n < 1:
            return False
        if self.total_pages is not None and n > max(1, self.total_pages):
            return False
        if n != self.page:
            self.page = n
            self.version += 1
        return True

    def set_total_pages(self, total_pages: int) -> None:
        self.total_pages = max(1, int(total_pages))

    def _reset(self):
        self.page = 1
        self.total_pages = None
        self.version += 1

    # --- Consultas ---

    @property
    def sort(self) -> Optional[str]:
        if not self.sort_key:
            return None
        return f"{self.sort_key},{self.sort_dir}"

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.total_pages is not None and self.page < self.total_pages

    def to_params(self) -> Dict[str, str]:
        """Forma canônica: page, limit, sort (se houver) e filtros em ordem alfabética."""
        params = {'page': str(self.page), 'limit': str(self.page_size)}
        if self.sort:
            params['sort'] = self.sort
        for key in sorted(self.filters):
            params[key] = self.filters[key]
        return params

    def to_query_string(self) -> str:
        return urlencode(self.to_params())

    # --- Construção ---

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, str],
        page_size: int = 10,
        default_sort: Optional[str] = None,
        allowed_filters=(),
    ) -> 'QueryState':
        """Monta o estado a partir de uma query string (ex.: request.GET)."""
        try:
            page = max(1, int(params.get('page') or 1))
        except (TypeError, ValueError):
            page = 1
        sort_key, sort_dir = parse_sort(params.get('sort') or default_sort)
        filters = {key: params.get(key) for key in allowed_filters if params.get(key)}
        return cls(page=page, page_size=page_size, sort_key=sort_key, sort_dir=sort_dir, filters=filters)

    def to_dict(self) -> dict:
        return {
            'page': self.page,
            'page_size': self.page_size,
            'sort_key': self.sort_key,
            'sort_dir': self.sort_dir,
            'filters': dict(self.filters),
            'total_pages': self.total_pages,
            'version': self.version,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> 'QueryState':
        return cls(
            page=data.get('page', 1),
            page_size=data.get('page_size', 10),
            sort_key=data.get('sort_key'),
            sort_dir=data.get('sort_dir', 'asc'),
            filters=dict(data.get('filters') or {}),
            total_pages=data.get('total_pages'),
            version=data.get('version', 0),
        )

    def copy(self) -> 'QueryState':
        return QueryState.from_dict(self.to_dict())


def apply_params(state: QueryState, params: Mapping[str, str], allowed_filters=()) -> bool:
    """
    Aplica a query string de uma requisição sobre um estado já existente.

    Filtros e ordenação só contam quando mudam de valor (e então a página volta para 1).
    A página pedida só é aplicada se nada mais mudou. Retorna True se o estado mudou.
    """
    version = state.version
    for key in allowed_filters:
        if key in params and (params.get(key) or '') != state.filters.get(key, ''):
            state.set_filter(key, params.get(key))

    if 'sort' in params:
        try:
            sort_key, sort_dir = parse_sort(params.get('sort'))
        except InvalidDataError:
            sort_key, sort_dir = state.sort_key, state.sort_dir
        new_sort = f"{sort_key},{sort_dir}" if sort_key else None
        if new_sort != state.sort:
            state.set_sort(sort_key, sort_dir)

    if state.version == version and params.get('page'):
        try:
            state.set_page(int(params.get('page')))
        except (TypeError, ValueError):
            pass
    return state.version != version
