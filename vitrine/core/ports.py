# vitrine/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (cliente HTTP,
Repositórios, Gateways) DEVE seguir para se conectar à camada Core (Casos de Uso).
"""

from typing import Protocol, Any, Mapping, Optional, Tuple
from abc import abstractmethod

from vitrine.core.entities import (
    Product, Cart, Order, OrderStatus, Principal, Role
)


# ====================================================================
# 1. CLIENTE DE REQUISIÇÕES (Transporte)
# ====================================================================

class IRequestClient(Protocol):
    """
    Cliente genérico do backend. Devolve o JSON já decodificado e levanta
    RequestError em falha de rede ou status fora de 2xx.
    """

    @abstractmethod
    def get(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> Any: ...

    @abstractmethod
    def post(self, endpoint: str, body: Optional[Mapping[str, Any]] = None) -> Any: ...

    @abstractmethod
    def put(self, endpoint: str, body: Optional[Mapping[str, Any]] = None) -> Any: ...

    @abstractmethod
    def delete(self, endpoint: str) -> Any: ...


# ====================================================================
# 2. REPOSITÓRIOS (operações de uma entidade só)
# ====================================================================

class IProductRepository(Protocol):

    @abstractmethod
    def get(self, product_id) -> Product: ...

    @abstractmethod
    def create(self, data: Mapping[str, Any]) -> Product: ...

    @abstractmethod
    def update(self, product_id, data: Mapping[str, Any]) -> Product: ...

    @abstractmethod
    def delete(self, product_id) -> None: ...


class ICartRepository(Protocol):
    """Carrinho do usuário da sessão. O backend só sabe somar quantidades."""

    @abstractmethod
    def fetch(self) -> Cart: ...

    @abstractmethod
    def add(self, product_id, quantity: int) -> None:
        """Incrementa a linha existente em `quantity` ou cria a linha com esse valor."""
        ...

    @abstractmethod
    def remove(self, line_id) -> None: ...


class IOrderRepository(Protocol):

    @abstractmethod
    def create_from_cart(self) -> Order:
        """Cria o pedido a partir do carrinho atual; o backend esvazia o carrinho."""
        ...

    @abstractmethod
    def update_status(self, order_id, status: OrderStatus) -> Order: ...


class IUserRepository(Protocol):

    @abstractmethod
    def update_role(self, user_id, role: Role) -> None: ...

    @abstractmethod
    def delete(self, user_id) -> None: ...


# ====================================================================
# 3. GATEWAYS (Identidade)
# ====================================================================

class IAuthGateway(Protocol):
    """Provedor de identidade: troca credenciais por (token, principal)."""

    @abstractmethod
    def login(self, email: str, password: str) -> Tuple[str, Principal]: ...

    @abstractmethod
    def register(self, name: str, email: str, password: str) -> Tuple[str, Principal]: ...
