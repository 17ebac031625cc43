"""
Camada de Infraestrutura: Implementação dos Repositórios sobre o backend REST.

Esta camada traduz as operações abstratas definidas nas Portas da Core
em chamadas concretas ao StorefrontApiClient, convertendo os payloads com os Mappers.
"""
from typing import Any, Mapping

from vitrine.core.entities import Cart, Order, OrderStatus, Product, Role
from vitrine.core.exceptions import ParseError
from vitrine.core.ports import (
    ICartRepository,
    IOrderRepository,
    IProductRepository,
    IRequestClient,
    IUserRepository,
)

from .mappers import CartLineMapper, OrderMapper, ProductMapper


class ProductRepositoryHttp(IProductRepository):
    """Produtos em /products."""

    def __init__(self, client: IRequestClient):
        self.client = client

    def get(self, product_id) -> Product:
        return ProductMapper.to_entity(self.client.get(f'/products/{product_id}'))

    def create(self, data: Mapping[str, Any]) -> Product:
        return ProductMapper.to_entity(self.client.post('/products', ProductMapper.to_payload(data)))

    def update(self, product_id, data: Mapping[str, Any]) -> Product:
        return ProductMapper.to_entity(
            self.client.put(f'/products/{product_id}', ProductMapper.to_payload(data))
        )

    def delete(self, product_id) -> None:
        self.client.delete(f'/products/{product_id}')


class CartRepositoryHttp(ICartRepository):
    """Carrinho do usuário do token em /cart."""

    def __init__(self, client: IRequestClient):
        self.client = client

    def fetch(self) -> Cart:
        raw = self.client.get('/cart')
        if raw is None:
            return Cart()
        if not isinstance(raw, list):
            raise ParseError("O carrinho deveria ser uma lista de linhas.")
        return Cart(lines=[CartLineMapper.to_entity(item) for item in raw])

    def add(self, product_id, quantity: int) -> None:
        # Incremento: o backend soma `quantity` à linha existente
        if isinstance(product_id, str) and product_id.isdigit():
            product_id = int(product_id)
        self.client.post('/cart', {'productId': product_id, 'quantity': quantity})

    def remove(self, line_id) -> None:
        self.client.delete(f'/cart/{line_id}')


class OrderRepositoryHttp(IOrderRepository):

    def __init__(self, client: IRequestClient):
        self.client = client

    def create_from_cart(self) -> Order:
        return OrderMapper.to_entity(self.client.post('/orders', {}))

    def update_status(self, order_id, status: OrderStatus) -> Order:
        return OrderMapper.to_entity(self.client.put(f'/orders/{order_id}/status', {'status': status.value}))


class UserRepositoryHttp(IUserRepository):

    def __init__(self, client: IRequestClient):
        self.client = client

    def update_role(self, user_id, role: Role) -> None:
        self.client.put(f'/users/{user_id}/role', {'role': role.value})

    def delete(self, user_id) -> None:
        self.client.delete(f'/users/{user_id}')
