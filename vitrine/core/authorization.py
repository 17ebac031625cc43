# vitrine/core/authorization.py
"""
Portão de autorização por papel.

Todas as decisões de acesso a páginas e de permissão de mutação passam por aqui,
como funções puras sobre o principal atual. As views não devem repetir essas
regras com condicionais espalhados.
"""
from enum import Enum
from typing import Optional, Union

from vitrine.core.entities import Principal, Role
from vitrine.core.exceptions import UnauthorizedViewError, ForbiddenActionError


class View(str, Enum):
    HOME = 'home'
    LOGIN = 'login'
    SIGNUP = 'signup'
    PRODUCTS = 'products'
    PRODUCT_DETAIL = 'product-detail'
    CART = 'cart'
    CHECKOUT = 'checkout'
    MY_ORDERS = 'my-orders'
    ADMIN_DASHBOARD = 'admin-dashboard'
    SUPERADMIN_USERS = 'superadmin-users'


class Action(str, Enum):
    MANAGE_CART = 'manage-cart'
    PLACE_ORDER = 'place-order'
    CREATE_PRODUCT = 'create-product'
    UPDATE_PRODUCT = 'update-product'
    DELETE_PRODUCT = 'delete-product'
    SET_ORDER_STATUS = 'set-order-status'
    LIST_ALL_ORDERS = 'list-all-orders'
    LIST_USERS = 'list-users'
    CHANGE_ROLE = 'change-role'
    DELETE_USER = 'delete-user'


STAFF_ROLES = frozenset({Role.ADMIN, Role.SUPERADMIN})
SHOPPER_ROLES = frozenset({Role.USER, Role.ADMIN, Role.SUPERADMIN})

_VIEW_ROLES = {
    View.HOME: None,
    View.LOGIN: None,
    View.SIGNUP: None,
    View.PRODUCTS: None,
    View.PRODUCT_DETAIL: None,
    View.CART: SHOPPER_ROLES,
    View.CHECKOUT: SHOPPER_ROLES,
    View.MY_ORDERS: SHOPPER_ROLES,
    View.ADMIN_DASHBOARD: STAFF_ROLES,
    View.SUPERADMIN_USERS: frozenset({Role.SUPERADMIN}),
}

_ACTION_ROLES = {
    Action.MANAGE_CART: SHOPPER_ROLES,
    Action.PLACE_ORDER: SHOPPER_ROLES,
    Action.CREATE_PRODUCT: STAFF_ROLES,
    Action.UPDATE_PRODUCT: STAFF_ROLES,
    Action.DELETE_PRODUCT: STAFF_ROLES,
    Action.SET_ORDER_STATUS: STAFF_ROLES,
    Action.LIST_ALL_ORDERS: STAFF_ROLES,
    Action.LIST_USERS: frozenset({Role.SUPERADMIN}),
    Action.CHANGE_ROLE: frozenset({Role.SUPERADMIN}),
    Action.DELETE_USER: frozenset({Role.SUPERADMIN}),
}

# Ações contra uma conta: nunca contra a própria
_SELF_GUARDED = frozenset({Action.CHANGE_ROLE, Action.DELETE_USER})

PrincipalLike = Union[Principal, dict, None]


def classify(principal: PrincipalLike) -> Role:
    """Classifica o principal em um dos quatro papéis."""
    if principal is None:
        return Role.ANONYMOUS
    if isinstance(principal, dict):
        raw_role = principal.get('role')
    else:
        raw_role = getattr(principal, 'role', None)
    if not raw_role:
        return Role.ANONYMOUS
    try:
        return Role(getattr(raw_role, 'value', raw_role))
    except ValueError:
        return Role.ANONYMOUS


def _principal_id(principal: PrincipalLike):
    if principal is None:
        return None
    if isinstance(principal, dict):
        return principal.get('id')
    return getattr(principal, 'id', None)


def can_access(view: Union[View, str], principal: PrincipalLike) -> bool:
    allowed = _VIEW_ROLES[View(view)]
    return allowed is None or classify(principal) in allowed


def can_mutate(action: Union[Action, str], principal: PrincipalLike, target_user_id=None) -> bool:
    action = Action(action)
    if classify(principal) not in _ACTION_ROLES[action]:
        return False
    if action in _SELF_GUARDED:
        own_id = _principal_id(principal)
        if target_user_id is None or own_id is None:
            return False
        if str(own_id) == str(target_user_id):
            return False
    return True


def require_view(view: Union[View, str], principal: PrincipalLike) -> None:
    """
    Levanta UnauthorizedViewError quando o acesso é negado.
    Anônimos em páginas de cliente vão para o login; o resto volta para a home.
    """
    view = View(view)
    if can_access(view, principal):
        return
    if classify(principal) is Role.ANONYMOUS and _VIEW_ROLES[view] is SHOPPER_ROLES:
        raise UnauthorizedViewError(view.value, redirect_to=View.LOGIN.value)
    raise UnauthorizedViewError(view.value, redirect_to=View.HOME.value)


def require_action(action: Union[Action, str], principal: PrincipalLike, target_user_id=None) -> None:
    action = Action(action)
    if not can_mutate(action, principal, target_user_id):
        raise ForbiddenActionError(action.value)


def navigation_for(principal: PrincipalLike) -> dict:
    """Quais links o menu deve mostrar para este principal."""
    role = classify(principal)
    # ADMIN só vê o painel; SUPERADMIN também compra
    shopper = role in (Role.USER, Role.SUPERADMIN)
    return {
        'show_cart': shopper,
        'show_orders': shopper,
        'show_admin': role in STAFF_ROLES,
        'show_superadmin': role is Role.SUPERADMIN,
        'show_login': role is Role.ANONYMOUS,
    }
