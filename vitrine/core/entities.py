from dataclasses import dataclass, field
from decimal import Decimal
from datetime import datetime
from enum import Enum
from typing import List, Optional, Generic, TypeVar

T = TypeVar('T')

# ====================================================================
# ENUMERAÇÕES
# Papéis e status são conjuntos fechados; nada fora deles é aceito.
# ====================================================================

class Role(str, Enum):
    """Papel do principal atual. ANONYMOUS nunca vem do backend."""
    ANONYMOUS = 'ANONYMOUS'
    USER = 'USER'
    ADMIN = 'ADMIN'
    SUPERADMIN = 'SUPERADMIN'

    @classmethod
    def assignable(cls) -> List['Role']:
        """Papéis que podem ser gravados em uma conta."""
        return [cls.USER, cls.ADMIN, cls.SUPERADMIN]


class OrderStatus(str, Enum):
    """Status do pedido. PENDING é o inicial; os outros dois são terminais."""
    PENDING = 'PENDING'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.PENDING


# ====================================================================
# ENTIDADES CORE
# ====================================================================

@dataclass
class Principal:
    """Quem está usando a loja agora (id + papel)."""
    id: Optional[int] = None
    role: Role = Role.ANONYMOUS
    name: str = ''
    email: str = ''

    @property
    def is_authenticated(self) -> bool:
        return self.id is not None and self.role is not Role.ANONYMOUS


@dataclass
class Product:
    """Produto do catálogo."""
    id: int
    name: str
    price: Decimal
    stock: int = 0
    description: str = ''
    category: str = ''
    image_url: Optional[str] = None


@dataclass
class CartLine:
    """Linha do carrinho. Existe no máximo uma linha por produto."""
    id: int
    product_id: int
    quantity: int
    product: Optional[Product] = None

    @property
    def unit_price(self) -> Decimal:
        if self.product is None:
            return Decimal('0')
        return self.product.price

    @property
    def subtotal(self) -> Decimal:
        """Preço unitário vezes quantidade."""
        return self.unit_price * self.quantity


@dataclass
class Cart:
    """Carrinho de compras, sempre na ordem em que o backend devolveu."""
    lines: List[CartLine] = field(default_factory=list)

    @property
    def subtotal(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal('0'))

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def find_line(self, line_id) -> Optional[CartLine]:
        return next((line for line in self.lines if str(line.id) == str(line_id)), None)

    def find_by_product(self, product_id) -> Optional[CartLine]:
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)


@dataclass
class OrderLine:
    """Snapshot de um item no momento da compra (preço congelado)."""
    product_id: int
    quantity: int
    price: Decimal
    product_name: str = ''
    image_url: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class Order:
    """Pedido criado a partir do carrinho no checkout."""
    id: int
    total_amount: Decimal
    status: OrderStatus = OrderStatus.PENDING
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    lines: List[OrderLine] = field(default_factory=list)
    created_at: Optional[datetime] = None


@dataclass
class UserAccount:
    """Conta de usuário vista pelo painel do SUPERADMIN."""
    id: int
    name: str
    email: str
    role: Role = Role.USER
    order_count: int = 0


@dataclass
class Page(Generic[T]):
    """
    Uma página de resultados já normalizada.
    `generation` é a versão da QueryState no momento da requisição.
    """
    items: List[T]
    page: int = 1
    total_pages: int = 1
    generation: int = 0

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < max(1, self.total_pages)
