# vitrine/core/dependency_injection.py
"""
Módulo de Injeção de Dependência (DI).
Responsável por instanciar os Use Cases com o cliente HTTP, Repositórios e Mappers
concretos da camada de Infraestrutura, a partir do contexto de sessão atual.
"""
from typing import Optional

from vitrine.infrastructure.gateways import HttpAuthGateway, StorefrontApiClient
from vitrine.infrastructure.mappers import OrderMapper, ProductMapper, UserMapper
from vitrine.infrastructure.repositories import (
    CartRepositoryHttp,
    OrderRepositoryHttp,
    ProductRepositoryHttp,
    UserRepositoryHttp,
)

from .session import SessionContext
from .use_cases import (
    AuthUseCase,
    CartReconciler,
    CatalogAdminUseCase,
    CatalogUseCase,
    CollectionFetcher,
    OrderLifecycleController,
    UserAdminUseCase,
    cart_locks,
)


def build_client(session: SessionContext) -> StorefrontApiClient:
    """Cliente do backend que lê o token da sessão a cada chamada."""
    return StorefrontApiClient(token_provider=lambda: session.token)


# ====================================================================
# Use Cases de Catálogo/Administração
# ====================================================================

def get_catalog_use_case(session: SessionContext) -> CatalogUseCase:
    client = build_client(session)
    return CatalogUseCase(
        CollectionFetcher(client),
        ProductRepositoryHttp(client),
        parse_product=ProductMapper.to_entity,
    )


def get_catalog_admin_use_case(session: SessionContext) -> CatalogAdminUseCase:
    return CatalogAdminUseCase(ProductRepositoryHttp(build_client(session)), session.current_principal())


def get_user_admin_use_case(session: SessionContext) -> UserAdminUseCase:
    client = build_client(session)
    return UserAdminUseCase(
        UserRepositoryHttp(client),
        CollectionFetcher(client),
        session.current_principal(),
        parse_user=UserMapper.to_entity,
    )


# ====================================================================
# Use Cases de Carrinho/Pedidos
# ====================================================================

def get_cart_reconciler(session: SessionContext) -> CartReconciler:
    principal = session.current_principal()
    return CartReconciler(
        CartRepositoryHttp(build_client(session)),
        principal,
        lock=cart_locks.lock_for(principal.id),
    )


def get_order_controller(session: SessionContext,
                         cart_reconciler: Optional[CartReconciler] = None) -> OrderLifecycleController:
    client = build_client(session)
    return OrderLifecycleController(
        OrderRepositoryHttp(client),
        CollectionFetcher(client),
        session.current_principal(),
        cart_reconciler=cart_reconciler,
        parse_order=OrderMapper.to_entity,
    )


def get_auth_use_case(session: SessionContext) -> AuthUseCase:
    return AuthUseCase(HttpAuthGateway(build_client(session)), session)
