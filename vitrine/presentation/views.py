# vitrine/presentation/views.py
import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views import View
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.authentication import SessionAuthentication
from rest_framework.response import Response
from rest_framework.views import APIView

from vitrine.core import dependency_injection as di
from vitrine.core.authorization import View as Screen, require_view
from vitrine.core.exceptions import (
    EmptyCartError,
    ForbiddenActionError,
    InvalidDataError,
    ItemNotFoundError,
    ParseError,
    RequestError,
    StorefrontError,
    UnauthorizedViewError,
)

from .forms import AddToCartForm, CartQuantityForm
from .mixins import QueryStateSessionMixin, StorefrontViewMixin
from .serializers import AddToCartSerializer, CartSerializer, OrderSerializer, SetQuantitySerializer
from .session import get_session_context

logger = logging.getLogger(__name__)


# ====================================================================
# VIEWS: Orquestram a requisição, a execução dos casos de uso e a resposta.
# ====================================================================

PRODUCT_SORT_OPTIONS = [
    ('', 'Relevância'),
    ('price,asc', 'Menor preço'),
    ('price,desc', 'Maior preço'),
    ('name,asc', 'Nome (A-Z)'),
]

ORDER_SORT_OPTIONS = [
    ('createdAt,desc', 'Mais recentes'),
    ('createdAt,asc', 'Mais antigos'),
    ('totalAmount,desc', 'Maior valor'),
    ('totalAmount,asc', 'Menor valor'),
]


class HomeView(StorefrontViewMixin, View):
    """
    View para a página inicial da loja.
    """
    template_name = 'home.html'

    def get(self, request):
        return render(request, self.template_name)


# ====================================================================
# CATÁLOGO
# ====================================================================

class ProductListView(StorefrontViewMixin, QueryStateSessionMixin, View):
    """
    Listagem de produtos com busca, filtro por categoria, ordenação e paginação.
    O estado da consulta fica na sessão entre as visitas.
    """
    template_name = 'catalog/product_list.html'
    required_view = Screen.PRODUCTS
    query_name = 'produtos'
    page_size_setting = 'VITRINE_PRODUCTS_PAGE_SIZE'
    allowed_filters = ('search', 'category')

    def get(self, request):
        state = self.get_query_state(request)
        catalog = di.get_catalog_use_case(self.session_context)
        page = self.load_page(request, catalog.list_products, state)

        context = {
            'page': page,
            'products': page.items if page else [],
            'query': state,
            'categories': settings.VITRINE_PRODUCT_CATEGORIES,
            'sort_options': PRODUCT_SORT_OPTIONS,
        }
        return render(request, self.template_name, context)


class ProductDetailView(StorefrontViewMixin, View):
    """
    Detalhe do produto e o botão de adicionar ao carrinho.
    """
    template_name = 'catalog/product_detail.html'
    required_view = Screen.PRODUCT_DETAIL

    def get(self, request, pk):
        try:
            product = di.get_catalog_use_case(self.session_context).get_product(pk)
        except StorefrontError as e:
            messages.error(request, f"Não foi possível carregar o produto: {e.message}")
            return redirect(Screen.PRODUCTS.value)

        context = {
            'product': product,
            'form': AddToCartForm(),
        }
        return render(request, self.template_name, context)

    def post(self, request, pk):
        if not self.principal.is_authenticated:
            messages.info(request, "Entre na sua conta para comprar.")
            return redirect(Screen.LOGIN.value)

        form = AddToCartForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Quantidade inválida.")
            return redirect(Screen.PRODUCT_DETAIL.value, pk=pk)

        try:
            reconciler = di.get_cart_reconciler(self.session_context)
            reconciler.add_product(pk, form.cleaned_data['quantity'])
            messages.success(request, "Produto adicionado ao carrinho!")
        except StorefrontError as e:
            messages.error(request, e.message)

        return redirect(Screen.PRODUCT_DETAIL.value, pk=pk)


# ====================================================================
# CARRINHO E CHECKOUT
# ====================================================================

class CartView(StorefrontViewMixin, View):
    """
    Exibe o carrinho oficial (sempre buscado de novo no backend).
    """
    template_name = 'cart/cart.html'
    required_view = Screen.CART

    def get(self, request):
        cart = None
        try:
            cart = di.get_cart_reconciler(self.session_context).load()
        except StorefrontError as e:
            messages.error(request, f"Não foi possível carregar o carrinho: {e.message}")

        return render(request, self.template_name, {'cart': cart, 'form': CartQuantityForm()})


class CartLineUpdateView(StorefrontViewMixin, View):
    required_view = Screen.CART

    def post(self, request, line_id):
        form = CartQuantityForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Quantidade inválida.")
            return redirect(Screen.CART.value)

        try:
            reconciler = di.get_cart_reconciler(self.session_context)
            reconciler.set_line_quantity(line_id, form.cleaned_data['quantity'])
        except StorefrontError as e:
            messages.error(request, e.message)

        return redirect(Screen.CART.value)


class CartLineRemoveView(StorefrontViewMixin, View):
    required_view = Screen.CART

    def post(self, request, line_id):
        try:
            reconciler = di.get_cart_reconciler(self.session_context)
            reconciler.set_line_quantity(line_id, 0)
            messages.success(request, "Item removido do carrinho.")
        except StorefrontError as e:
            messages.error(request, e.message)

        return redirect(Screen.CART.value)


class CheckoutView(StorefrontViewMixin, View):
    """
    Resumo do carrinho e confirmação do pedido.
    """
    template_name = 'cart/checkout.html'
    required_view = Screen.CHECKOUT

    def get(self, request):
        try:
            cart = di.get_cart_reconciler(self.session_context).load()
        except StorefrontError as e:
            messages.error(request, e.message)
            return redirect(Screen.CART.value)

        if cart.is_empty:
            messages.info(request, "Seu carrinho está vazio.")
            return redirect(Screen.CART.value)

        return render(request, self.template_name, {'cart': cart})

    def post(self, request):
        reconciler = di.get_cart_reconciler(self.session_context)
        controller = di.get_order_controller(self.session_context, cart_reconciler=reconciler)

        try:
            order = controller.place_order()
        except EmptyCartError as e:
            messages.info(request, e.message)
            return redirect(e.redirect_to)
        except StorefrontError as e:
            messages.error(request, f"Falha ao finalizar o pedido: {e.message}")
            return redirect(Screen.CHECKOUT.value)

        messages.success(request, f"Pedido #{order.id} realizado com sucesso!")
        return redirect(Screen.MY_ORDERS.value)


# ====================================================================
# PEDIDOS DO CLIENTE
# ====================================================================

class MyOrdersView(StorefrontViewMixin, QueryStateSessionMixin, View):
    """View para listar o histórico de pedidos do usuário logado."""
    template_name = 'orders/my_orders.html'
    required_view = Screen.MY_ORDERS
    query_name = 'meus_pedidos'
    default_sort = 'createdAt,desc'

    def get(self, request):
        state = self.get_query_state(request)
        controller = di.get_order_controller(self.session_context)
        page = self.load_page(request, controller.list_my_orders, state)

        context = {
            'page': page,
            'orders': page.items if page else [],
            'query': state,
            'sort_options': ORDER_SORT_OPTIONS,
        }
        return render(request, self.template_name, context)


# ====================================================================
# API REST (Django REST Framework)
# ====================================================================


class StorefrontAPIView(APIView):
    """
    Base das APIs JSON. Passa pelo mesmo portão de papéis das páginas; rejeições
    viram 401/403 em vez de redirect e erros da loja viram {message}.
    """
    required_view = Screen.CART

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.session_context = get_session_context(request)
        self.principal = self.session_context.current_principal()
        if request.method not in ('GET', 'HEAD', 'OPTIONS'):
            # Mesmo cookie de sessão das páginas: exige o token CSRF
            SessionAuthentication().enforce_csrf(request)
        require_view(self.required_view, self.principal)

    def handle_exception(self, exc):
        if isinstance(exc, UnauthorizedViewError):
            principal = getattr(self, 'principal', None)
            code = status.HTTP_403_FORBIDDEN
            if principal is None or not principal.is_authenticated:
                code = status.HTTP_401_UNAUTHORIZED
            return Response({'message': exc.message, 'redirect': reverse(exc.redirect_to)}, status=code)
        if isinstance(exc, EmptyCartError):
            return Response({'message': exc.message, 'redirect': reverse(exc.redirect_to)},
                            status=status.HTTP_400_BAD_REQUEST)
        if isinstance(exc, StorefrontError):
            return Response({'message': exc.message}, status=self.status_for(exc))
        return super().handle_exception(exc)

    @staticmethod
    def status_for(exc):
        if isinstance(exc, ForbiddenActionError):
            return status.HTTP_403_FORBIDDEN
        if isinstance(exc, InvalidDataError):
            return status.HTTP_400_BAD_REQUEST
        if isinstance(exc, ItemNotFoundError):
            return status.HTTP_404_NOT_FOUND
        if isinstance(exc, RequestError) and exc.status_code and 400 <= exc.status_code < 500:
            return exc.status_code
        if isinstance(exc, (RequestError, ParseError)):
            return status.HTTP_502_BAD_GATEWAY
        logger.error("Erro não mapeado na API: %s", exc)
        return status.HTTP_500_INTERNAL_SERVER_ERROR


class CartAPIView(StorefrontAPIView):
    """
    API para ler o carrinho e adicionar produtos.
    """

    @extend_schema(responses=CartSerializer)
    def get(self, request):
        cart = di.get_cart_reconciler(self.session_context).load()
        return Response(CartSerializer(cart).data)

    @extend_schema(request=AddToCartSerializer, responses=CartSerializer)
    def post(self, request):
        serializer = AddToCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        reconciler = di.get_cart_reconciler(self.session_context)
        cart = reconciler.add_product(serializer.validated_data['product_id'], serializer.validated_data['quantity'])
        return Response(CartSerializer(cart).data, status=status.HTTP_201_CREATED)


class CartLineAPIView(StorefrontAPIView):
    """
    Quantidade absoluta (PUT) e remoção (DELETE) de uma linha do carrinho.
    """

    @extend_schema(request=SetQuantitySerializer, responses=CartSerializer)
    def put(self, request, line_id):
        serializer = SetQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        reconciler = di.get_cart_reconciler(self.session_context)
        cart = reconciler.set_line_quantity(line_id, serializer.validated_data['quantity'])
        return Response(CartSerializer(cart).data)

    @extend_schema(responses=CartSerializer)
    def delete(self, request, line_id):
        reconciler = di.get_cart_reconciler(self.session_context)
        cart = reconciler.set_line_quantity(line_id, 0)
        return Response(CartSerializer(cart).data)


class CheckoutAPIView(StorefrontAPIView):
    """
    API para transformar o carrinho atual em pedido.
    """
    required_view = Screen.CHECKOUT

    @extend_schema(request=None, responses=OrderSerializer)
    def post(self, request):
        reconciler = di.get_cart_reconciler(self.session_context)
        controller = di.get_order_controller(self.session_context, cart_reconciler=reconciler)
        order = controller.place_order()
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
