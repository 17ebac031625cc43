# vitrine/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da loja.
Esta camada depende apenas das Entidades, da QueryState, do portão de autorização
e das Portas (Interfaces) do Core. Nada aqui conhece HTTP ou Django.
"""
import logging
import threading
import weakref
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Mapping, Optional

from vitrine.core.authorization import Action, View, require_action, require_view
from vitrine.core.entities import (
    Cart, CartLine, Order, OrderStatus, Page, Principal, Product, Role
)
from vitrine.core.exceptions import (
    EmptyCartError,
    InvalidDataError,
    InvalidQuantityError,
    InvalidStatusError,
    InvalidTransitionError,
    ItemNotFoundError,
    ParseError,
)
from vitrine.core.ports import (
    IAuthGateway,
    ICartRepository,
    IOrderRepository,
    IProductRepository,
    IRequestClient,
    IUserRepository,
)
from vitrine.core.query import QueryState
from vitrine.core.session import SessionContext

logger = logging.getLogger(__name__)

ItemParser = Optional[Callable[[Any], Any]]


# ====================================================================
# 1. COLEÇÕES PAGINADAS
# ====================================================================

# Cada endpoint embrulha a lista com uma chave diferente
ENVELOPE_KEYS = ('items', 'orders', 'users', 'products')


def _positive_int(value, default: int) -> int:
    if value in (None, ''):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ParseError(f"Número de página inválido na resposta: {value!r}.")
    return max(1, number)


def normalize_page(raw, requested_page: int = 1, parse_item: ItemParser = None, generation: int = 0) -> Page:
    """
    Resolve a união {lista, envelope} em um Page uniforme.

    Lista pura: página única e completa (page=1, total_pages=1), a página pedida é ignorada.
    Envelope: a lista vem em items/orders/users/products e o total em `pages`.
    """
    if isinstance(raw, list):
        items, page, total_pages = raw, 1, 1
    elif isinstance(raw, dict):
        key = next((k for k in ENVELOPE_KEYS if k in raw), None)
        if key is None:
            raise ParseError("A resposta não contém nenhuma lista reconhecida.")
        items = raw[key]
        if not isinstance(items, list):
            raise ParseError(f"O campo '{key}' da resposta não é uma lista.")
        total_pages = _positive_int(raw.get('pages', raw.get('totalPages')), default=1)
        page = _positive_int(raw.get('page'), default=requested_page)
    else:
        raise ParseError("A resposta não é uma lista nem um envelope.")

    page = min(page, total_pages)

    if parse_item is not None:
        try:
            items = [parse_item(item) for item in items]
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise ParseError(f"Item da coleção em formato inválido: {e}")

    return Page(items=list(items), page=page, total_pages=total_pages, generation=generation)


class CollectionFetcher:
    """Busca uma página de qualquer recurso listável do backend."""

    def __init__(self, client: IRequestClient):
        self.client = client

    def fetch_page(self, endpoint: str, query_state: QueryState, parse_item: ItemParser = None) -> Page:
        generation = query_state.version
        params = query_state.to_params()
        logger.debug("Buscando %s com %s (geração %s)", endpoint, params, generation)
        raw = self.client.get(endpoint, params=params)
        return normalize_page(raw, query_state.page, parse_item, generation)


class CollectionBrowser:
    """
    Carrega páginas de uma listagem e descarta respostas atrasadas.

    Cada carga guarda a `version` da QueryState no momento da requisição. Se a consulta
    mudou (filtro ou ordenação) antes da resposta chegar, o resultado é ignorado.
    As views montam uma QueryState por requisição, então ali a cerca só dispara se o
    próprio loader mexer na consulta; ela vale para quem reaproveita o mesmo browser.

    Se o total de páginas encolheu abaixo da página guardada (itens apagados, consulta
    antiga na sessão), a página volta para a última existente e é carregada de novo.
    """

    def __init__(self, loader: Callable[[QueryState], Page], query_state: QueryState):
        self.loader = loader
        self.query_state = query_state
        self.current: Optional[Page] = None

    def _fetch(self) -> Optional[Page]:
        generation = self.query_state.version
        page = self.loader(self.query_state)
        if generation != self.query_state.version:
            logger.warning("Descartando página da geração %s (atual %s)", generation, self.query_state.version)
            return None
        return page

    def load(self) -> Optional[Page]:
        page = self._fetch()
        if page is not None and self.query_state.page > page.total_pages:
            logger.info(
                "Página %s não existe mais (total %s), voltando para a última",
                self.query_state.page, page.total_pages,
            )
            self.query_state.set_total_pages(page.total_pages)
            self.query_state.set_page(page.total_pages)
            page = self._fetch()
        if page is None:
            return None
        self.query_state.set_total_pages(page.total_pages)
        self.query_state.page = page.page
        self.current = page
        return page


# ====================================================================
# 2. CATÁLOGO
# ====================================================================

class CatalogUseCase:
    """Listagem e detalhe de produtos (acesso público)."""
    ENDPOINT = '/products'

    def __init__(self, fetcher: CollectionFetcher, product_repo: IProductRepository,
                 parse_product: ItemParser = None):
        self.fetcher = fetcher
        self.product_repo = product_repo
        self.parse_product = parse_product

    def list_products(self, query_state: QueryState) -> Page:
        return self.fetcher.fetch_page(self.ENDPOINT, query_state, self.parse_product)

    def get_product(self, product_id) -> Product:
        return self.product_repo.get(product_id)


class CatalogAdminUseCase:
    """CRUD de produtos para ADMIN e SUPERADMIN."""

    def __init__(self, product_repo: IProductRepository, principal: Principal):
        self.product_repo = product_repo
        self.principal = principal

    @staticmethod
    def clean(data: Mapping[str, Any]) -> Dict[str, Any]:
        """Valida e normaliza os campos do formulário de produto."""
        name = (data.get('name') or '').strip()
        if not name:
            raise InvalidDataError("O nome do produto é obrigatório.")
        try:
            price = Decimal(str(data.get('price')))
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidDataError("Preço inválido.")
        if not price.is_finite() or price < 0:
            raise InvalidDataError("O preço não pode ser negativo.")
        try:
            stock = int(data.get('stock') or 0)
        except (TypeError, ValueError):
            raise InvalidDataError("Estoque inválido.")
        if stock < 0:
            raise InvalidDataError("O estoque não pode ser negativo.")
        return {
            'name': name,
            'description': (data.get('description') or '').strip(),
            'price': price,
            'stock': stock,
            'category': (data.get('category') or '').strip(),
            'image_url': (data.get('image_url') or '').strip() or None,
        }

    def create_product(self, data: Mapping[str, Any]) -> Product:
        require_action(Action.CREATE_PRODUCT, self.principal)
        product = self.product_repo.create(self.clean(data))
        logger.info("Produto %s criado por %s", product.id, self.principal.id)
        return product

    def update_product(self, product_id, data: Mapping[str, Any]) -> Product:
        require_action(Action.UPDATE_PRODUCT, self.principal)
        product = self.product_repo.update(product_id, self.clean(data))
        logger.info("Produto %s atualizado por %s", product_id, self.principal.id)
        return product

    def delete_product(self, product_id) -> None:
        require_action(Action.DELETE_PRODUCT, self.principal)
        self.product_repo.delete(product_id)
        logger.info("Produto %s removido por %s", product_id, self.principal.id)


# ====================================================================
# 3. CARRINHO
# ====================================================================

class OwnerLock:
    """Lock de um dono de carrinho. Some do registro quando ninguém mais o referencia."""

    __slots__ = ('_lock', '__weakref__')

    def __init__(self):
        self._lock = threading.Lock()

    def acquire(self, blocking: bool = True, timeout: float = -1) -> bool:
        return self._lock.acquire(blocking, timeout)

    def release(self) -> None:
        self._lock.release()

    def __enter__(self):
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info):
        self._lock.release()


class CartLockRegistry:
    """Um lock por dono de carrinho, compartilhado por todo o processo."""

    def __init__(self):
        self._locks: 'weakref.WeakValueDictionary[str, OwnerLock]' = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def __len__(self):
        return len(self._locks)

    def lock_for(self, owner_id) -> OwnerLock:
        key = str(owner_id)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = OwnerLock()
                self._locks[key] = lock
            return lock


cart_locks = CartLockRegistry()


class CartReconciler:
    """
    Apresenta "definir quantidade absoluta" sobre um backend que só soma.

    Toda mutação envia o delta, depois busca de novo o carrinho oficial. As mutações
    de um mesmo carrinho são serializadas pelo lock do dono: a quantidade atual é lida
    do backend dentro da mesma seção crítica que envia o delta, então a segunda
    mutação vê o resultado da primeira. Em caso de falha o carrinho local não muda.
    """

    def __init__(self, cart_repo: ICartRepository, principal: Principal, lock=None):
        self.cart_repo = cart_repo
        self.principal = principal
        self._lock = lock or OwnerLock()
        self.cart: Optional[Cart] = None

    def load(self) -> Cart:
        """Busca o carrinho oficial no backend."""
        require_action(Action.MANAGE_CART, self.principal)
        with self._lock:
            return self._refetch()

    def set_quantity(self, line: CartLine, desired_quantity: int) -> Cart:
        if desired_quantity < 1:
            # Abaixo de 1 é remoção, não um clamp
            raise InvalidQuantityError()
        require_action(Action.MANAGE_CART, self.principal)

        with self._lock:
            snapshot = self.cart_repo.fetch()
            return self._apply_quantity(snapshot, line, desired_quantity)

    def set_line_quantity(self, line_id, desired_quantity: int) -> Cart:
        """
        Leva a linha `line_id` à quantidade absoluta pedida; abaixo de 1 a linha é removida.
        Procura, decide e envia tudo sob o mesmo lock.
        """
        require_action(Action.MANAGE_CART, self.principal)

        with self._lock:
            snapshot = self.cart_repo.fetch()
            line = snapshot.find_line(line_id)
            if line is None:
                self.cart = snapshot
                raise ItemNotFoundError("Este item não está mais no carrinho.")
            if desired_quantity < 1:
                logger.info("Carrinho de %s: removendo linha %s", self.principal.id, line.id)
                self.cart_repo.remove(line.id)
                return self._refetch()
            return self._apply_quantity(snapshot, line, desired_quantity)

    def remove_line(self, line: CartLine) -> Cart:
        require_action(Action.MANAGE_CART, self.principal)
        with self._lock:
            logger.info("Carrinho de %s: removendo linha %s", self.principal.id, line.id)
            self.cart_repo.remove(line.id)
            return self._refetch()

    def add_product(self, product_id, quantity: int = 1) -> Cart:
        """Adiciona `quantity` unidades; para um produto novo o delta é a própria quantidade."""
        if quantity < 1:
            raise InvalidQuantityError()
        require_action(Action.MANAGE_CART, self.principal)
        with self._lock:
            logger.info("Carrinho de %s: +%s do produto %s", self.principal.id, quantity, product_id)
            self.cart_repo.add(product_id, quantity)
            return self._refetch()

    def clear_local(self) -> None:
        """O backend esvazia o carrinho ao criar o pedido."""
        self.cart = Cart()

    def _apply_quantity(self, snapshot: Cart, line: CartLine, desired_quantity: int) -> Cart:
        # Chamado com o lock já adquirido
        known = snapshot.find_line(line.id)
        if known is None:
            # A linha sumiu no servidor: o delta tem que recriá-la inteira
            logger.warning("Linha %s não está mais no carrinho de %s", line.id, self.principal.id)
            current = 0
        else:
            current = known.quantity

        delta = desired_quantity - current
        if delta == 0:
            logger.debug("Linha %s já está com %s unidades", line.id, desired_quantity)
            self.cart = snapshot
            return snapshot
        logger.info(
            "Carrinho de %s: produto %s de %s para %s (delta %+d)",
            self.principal.id, line.product_id, current, desired_quantity, delta,
        )
        self.cart_repo.add(line.product_id, delta)
        return self._refetch()

    def _refetch(self) -> Cart:
        self.cart = self.cart_repo.fetch()
        return self.cart


# ====================================================================
# 4. PEDIDOS
# ====================================================================

class OrderLifecycleController:
    """
    Checkout (carrinho -> pedido) e transições de status.

    PENDING -> COMPLETED | CANCELLED; os dois últimos são terminais.
    """
    MY_ORDERS_ENDPOINT = '/orders'
    ALL_ORDERS_ENDPOINT = '/orders/admin'
    DEFAULT_SORT = ('createdAt', 'desc')

    def __init__(self, order_repo: IOrderRepository, fetcher: CollectionFetcher, principal: Principal,
                 cart_reconciler: Optional[CartReconciler] = None, parse_order: ItemParser = None):
        self.order_repo = order_repo
        self.fetcher = fetcher
        self.principal = principal
        self.cart_reconciler = cart_reconciler
        self.parse_order = parse_order

    def place_order(self, cart: Optional[Cart] = None) -> Order:
        """Processa o checkout. Carrinho vazio falha antes de qualquer requisição."""
        require_action(Action.PLACE_ORDER, self.principal)

        if cart is None and self.cart_reconciler is not None:
            cart = self.cart_reconciler.cart
            if cart is None:
                cart = self.cart_reconciler.load()
        if cart is None or cart.is_empty:
            raise EmptyCartError("Não é possível finalizar o checkout com o carrinho vazio.")

        order = self.order_repo.create_from_cart()
        logger.info("Pedido %s criado por %s (%s itens)", order.id, self.principal.id, cart.total_items)

        if self.cart_reconciler is not None:
            self.cart_reconciler.clear_local()
        return order

    def set_status(self, order_id, new_status, current_status=None) -> Order:
        """Atualiza o status de um pedido (ADMIN/SUPERADMIN)."""
        require_action(Action.SET_ORDER_STATUS, self.principal)

        status = self.parse_status(new_status)
        if current_status is not None:
            current = self.parse_status(current_status)
            if current.is_terminal and current is not status:
                raise InvalidTransitionError(current.value, status.value)
        else:
            # O backend aceita qualquer transição, inclusive a partir de status terminal
            logger.warning("Status atual do pedido %s desconhecido; enviando %s sem checar a transição",
                           order_id, status.value)

        order = self.order_repo.update_status(order_id, status)
        logger.info("Pedido %s -> %s por %s", order_id, status.value, self.principal.id)
        return order

    @staticmethod
    def parse_status(value) -> OrderStatus:
        try:
            return OrderStatus(str(getattr(value, 'value', value)).upper())
        except ValueError:
            raise InvalidStatusError(f"O status '{value}' não é um status de pedido válido.")

    def list_my_orders(self, query_state: QueryState) -> Page:
        require_view(View.MY_ORDERS, self.principal)
        return self.fetcher.fetch_page(self.MY_ORDERS_ENDPOINT, query_state, self.parse_order)

    def list_all_orders(self, query_state: QueryState) -> Page:
        require_action(Action.LIST_ALL_ORDERS, self.principal)
        return self.fetcher.fetch_page(self.ALL_ORDERS_ENDPOINT, query_state, self.parse_order)


# ====================================================================
# 5. USUÁRIOS (SUPERADMIN)
# ====================================================================

class UserAdminUseCase:
    """Gestão de contas. Ninguém altera ou apaga a própria conta."""
    ENDPOINT = '/users'

    def __init__(self, user_repo: IUserRepository, fetcher: CollectionFetcher, principal: Principal,
                 parse_user: ItemParser = None):
        self.user_repo = user_repo
        self.fetcher = fetcher
        self.principal = principal
        self.parse_user = parse_user

    def list_users(self, query_state: QueryState) -> Page:
        require_action(Action.LIST_USERS, self.principal)
        return self.fetcher.fetch_page(self.ENDPOINT, query_state, self.parse_user)

    def change_role(self, user_id, role) -> None:
        require_action(Action.CHANGE_ROLE, self.principal, target_user_id=user_id)
        try:
            new_role = Role(str(getattr(role, 'value', role)).upper())
        except ValueError:
            raise InvalidDataError(f"Papel inválido: '{role}'.")
        if new_role not in Role.assignable():
            raise InvalidDataError(f"Papel inválido: '{role}'.")
        self.user_repo.update_role(user_id, new_role)
        logger.info("Usuário %s agora é %s (por %s)", user_id, new_role.value, self.principal.id)

    def delete_user(self, user_id) -> None:
        require_action(Action.DELETE_USER, self.principal, target_user_id=user_id)
        self.user_repo.delete(user_id)
        logger.info("Usuário %s removido por %s", user_id, self.principal.id)


# ====================================================================
# 6. AUTENTICAÇÃO
# ====================================================================

class AuthUseCase:
    """Preenche e limpa o contexto de sessão."""

    def __init__(self, auth_gateway: IAuthGateway, session: SessionContext):
        self.auth_gateway = auth_gateway
        self.session = session

    def login(self, email: str, password: str) -> Principal:
        if not email or not password:
            raise InvalidDataError("Informe e-mail e senha.")
        token, principal = self.auth_gateway.login(email, password)
        self.session.login(token, principal)
        logger.info("Login de %s (%s)", principal.id, principal.role.value)
        return principal

    def signup(self, name: str, email: str, password: str) -> Principal:
        if not name or not email or not password:
            raise InvalidDataError("Nome, e-mail e senha são obrigatórios.")
        token, principal = self.auth_gateway.register(name, email, password)
        self.session.login(token, principal)
        return principal

    def logout(self) -> None:
        self.session.logout()
