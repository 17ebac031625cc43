# vitrine/presentation/test_views.py

from decimal import Decimal
from unittest.mock import Mock, patch

from django.conf import settings
from django.contrib.messages import get_messages
from django.test import SimpleTestCase
from django.urls import reverse

from vitrine.core.entities import Cart, CartLine, Order, Page, Principal, Product, Role
from vitrine.core.exceptions import EmptyCartError, ForbiddenActionError, ItemNotFoundError, RequestError
from vitrine.core.session import SessionContext
from vitrine.presentation.session import SESSION_KEY

DI = 'vitrine.core.dependency_injection'


def make_cart(quantity=2):
    product = Product(id=7, name='Caneca', price=Decimal('9.99'))
    return Cart(lines=[CartLine(id=1, product_id=7, quantity=quantity, product=product)])


class StorefrontTestCase(SimpleTestCase):

    def login_as(self, role, user_id=1):
        principal = Principal(id=user_id, role=role, name='Teste', email='teste@example.com')
        session = self.client.session
        session[SESSION_KEY] = SessionContext(token='tok', principal=principal).to_dict()
        session.save()
        self.client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key
        return principal

    def messages_of(self, response):
        return [str(m) for m in get_messages(response.wsgi_request)]


# ====================================================================
# PORTÃO DE PÁGINAS
# ====================================================================

class TestRoleGate(StorefrontTestCase):

    def test_anonimo_no_carrinho_vai_para_o_login(self):
        response = self.client.get(reverse('cart'))

        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)

    def test_cliente_no_painel_volta_para_a_home(self):
        self.login_as(Role.USER)

        response = self.client.get(reverse('admin-dashboard'))

        self.assertRedirects(response, reverse('home'), fetch_redirect_response=False)

    def test_admin_na_gestao_de_usuarios_volta_para_a_home(self):
        self.login_as(Role.ADMIN)

        response = self.client.get(reverse('superadmin-users'))

        self.assertRedirects(response, reverse('home'), fetch_redirect_response=False)

    def test_menu_do_admin(self):
        self.login_as(Role.ADMIN)

        response = self.client.get(reverse('home'))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, reverse('admin-dashboard'))
        self.assertNotContains(response, f'href="{reverse("cart")}"')


# ====================================================================
# CATÁLOGO
# ====================================================================

class TestProductListView(StorefrontTestCase):

    @patch(f'{DI}.get_catalog_use_case')
    def test_lista_e_guarda_a_consulta_na_sessao(self, get_catalog):
        catalog = get_catalog.return_value
        catalog.list_products.return_value = Page(
            items=[Product(id=7, name='Caneca', price=Decimal('9.99'))], page=1, total_pages=2
        )

        response = self.client.get(reverse('products'), {'search': 'caneca', 'sort': 'price,asc'})

        self.assertContains(response, 'Caneca')
        state = catalog.list_products.call_args[0][0]
        self.assertEqual(state.filters, {'search': 'caneca'})
        self.assertEqual(state.sort, 'price,asc')
        self.assertEqual(state.page_size, settings.VITRINE_PRODUCTS_PAGE_SIZE)
        saved = self.client.session['consulta_produtos']
        self.assertEqual(saved['total_pages'], 2)

    @patch(f'{DI}.get_catalog_use_case')
    def test_pagina_seguinte_mantem_o_filtro(self, get_catalog):
        catalog = get_catalog.return_value
        catalog.list_products.return_value = Page(items=[], page=1, total_pages=3)
        self.client.get(reverse('products'), {'category': 'Home'})

        catalog.list_products.return_value = Page(items=[], page=2, total_pages=3)
        self.client.get(reverse('products'), {'page': '2'})

        state = catalog.list_products.call_args[0][0]
        self.assertEqual(state.page, 2)
        self.assertEqual(state.filters, {'category': 'Home'})

    @patch(f'{DI}.get_catalog_use_case')
    def test_falha_do_backend_vira_mensagem(self, get_catalog):
        get_catalog.return_value.list_products.side_effect = RequestError('Something went wrong', 500)

        response = self.client.get(reverse('products'))

        self.assertEqual(response.status_code, 200)
        self.assertIn('Something went wrong', self.messages_of(response))


class TestProductDetailView(StorefrontTestCase):

    def test_anonimo_nao_adiciona_ao_carrinho(self):
        response = self.client.post(reverse('product-detail', args=[7]), {'quantity': 1})

        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)

    @patch(f'{DI}.get_cart_reconciler')
    def test_cliente_adiciona_ao_carrinho(self, get_reconciler):
        self.login_as(Role.USER)

        response = self.client.post(reverse('product-detail', args=[7]), {'quantity': 2})

        get_reconciler.return_value.add_product.assert_called_once_with('7', 2)
        self.assertRedirects(response, reverse('product-detail', args=[7]), fetch_redirect_response=False)


# ====================================================================
# CARRINHO E CHECKOUT
# ====================================================================

class TestCartViews(StorefrontTestCase):

    def setUp(self):
        self.login_as(Role.USER)

    @patch(f'{DI}.get_cart_reconciler')
    def test_carrinho_mostra_o_subtotal(self, get_reconciler):
        get_reconciler.return_value.load.return_value = make_cart(quantity=2)

        response = self.client.get(reverse('cart'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['cart'].subtotal, Decimal('19.98'))
        self.assertContains(response, 'Caneca')

    @patch(f'{DI}.get_cart_reconciler')
    def test_quantidade_absoluta(self, get_reconciler):
        reconciler = get_reconciler.return_value

        response = self.client.post(reverse('cart-line-update', args=[1]), {'quantity': 1})

        reconciler.set_line_quantity.assert_called_once_with('1', 1)
        self.assertRedirects(response, reverse('cart'), fetch_redirect_response=False)

    @patch(f'{DI}.get_cart_reconciler')
    def test_quantidade_zero_remove_a_linha(self, get_reconciler):
        reconciler = get_reconciler.return_value

        self.client.post(reverse('cart-line-update', args=[1]), {'quantity': 0})

        reconciler.set_line_quantity.assert_called_once_with('1', 0)
        reconciler.set_quantity.assert_not_called()

    @patch(f'{DI}.get_cart_reconciler')
    def test_linha_que_sumiu_vira_mensagem(self, get_reconciler):
        get_reconciler.return_value.set_line_quantity.side_effect = ItemNotFoundError(
            "Este item não está mais no carrinho."
        )

        response = self.client.post(reverse('cart-line-remove', args=[99]))

        self.assertIn('Este item não está mais no carrinho.', self.messages_of(response))

    @patch(f'{DI}.get_order_controller')
    @patch(f'{DI}.get_cart_reconciler')
    def test_checkout_com_carrinho_vazio_volta_para_o_carrinho(self, get_reconciler, get_controller):
        get_controller.return_value.place_order.side_effect = EmptyCartError()

        response = self.client.post(reverse('checkout'))

        self.assertRedirects(response, reverse('cart'), fetch_redirect_response=False)

    @patch(f'{DI}.get_order_controller')
    @patch(f'{DI}.get_cart_reconciler')
    def test_checkout_vai_para_meus_pedidos(self, get_reconciler, get_controller):
        get_controller.return_value.place_order.return_value = Order(id=10, total_amount=Decimal('19.98'))

        response = self.client.post(reverse('checkout'))

        get_controller.assert_called_once()
        self.assertEqual(get_controller.call_args[1]['cart_reconciler'], get_reconciler.return_value)
        self.assertRedirects(response, reverse('my-orders'), fetch_redirect_response=False)


class TestMyOrdersView(StorefrontTestCase):

    @patch(f'{DI}.get_order_controller')
    def test_ordem_padrao_e_mais_recentes(self, get_controller):
        self.login_as(Role.USER)
        controller = get_controller.return_value
        controller.list_my_orders.return_value = Page(items=[Order(id=10, total_amount=Decimal('5'))])

        response = self.client.get(reverse('my-orders'))

        self.assertContains(response, 'Pedido #10')
        state = controller.list_my_orders.call_args[0][0]
        self.assertEqual(state.sort, 'createdAt,desc')


# ====================================================================
# PAINÉIS
# ====================================================================

class TestAdminViews(StorefrontTestCase):

    @patch(f'{DI}.get_order_controller')
    def test_admin_muda_status(self, get_controller):
        self.login_as(Role.ADMIN)
        controller = get_controller.return_value
        controller.set_status.return_value = Order(id=10, total_amount=Decimal('5'))

        response = self.client.post(
            reverse('admin-order-status', args=[10]), {'status': 'COMPLETED', 'current_status': 'PENDING'}
        )

        controller.set_status.assert_called_once_with('10', 'COMPLETED', 'PENDING')
        self.assertEqual(response.status_code, 302)

    @patch(f'{DI}.get_user_admin_use_case')
    def test_superadmin_nao_se_apaga(self, get_use_case):
        self.login_as(Role.SUPERADMIN, user_id=5)
        get_use_case.return_value.delete_user.side_effect = ForbiddenActionError('delete-user')

        response = self.client.post(reverse('superadmin-user-delete', args=[5]))

        self.assertIn('Você não pode apagar a própria conta.', self.messages_of(response))
        self.assertRedirects(response, reverse('superadmin-users'), fetch_redirect_response=False)


# ====================================================================
# AUTENTICAÇÃO
# ====================================================================

class TestAuthViews(StorefrontTestCase):

    @patch(f'{DI}.get_auth_use_case')
    def test_login_guarda_o_token_na_sessao(self, get_auth):
        def fake_login(session):
            use_case = Mock()

            def login(email, password):
                principal = Principal(id=1, role=Role.USER, name='Ana')
                session.login('tok', principal)
                return principal

            use_case.login.side_effect = login
            return use_case

        get_auth.side_effect = fake_login

        response = self.client.post(reverse('login'), {'email': 'ana@example.com', 'password': 'segredo'})

        self.assertRedirects(response, reverse('home'), fetch_redirect_response=False)
        self.assertEqual(self.client.session[SESSION_KEY]['token'], 'tok')

    @patch(f'{DI}.get_auth_use_case')
    def test_senha_errada(self, get_auth):
        get_auth.return_value.login.side_effect = RequestError('Invalid credentials', status_code=401)

        response = self.client.post(reverse('login'), {'email': 'ana@example.com', 'password': 'x'})

        self.assertEqual(response.status_code, 200)
        self.assertIn('E-mail ou senha inválidos.', self.messages_of(response))

    def test_logout_limpa_a_sessao(self):
        self.login_as(Role.USER)

        response = self.client.post(reverse('logout'))

        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)
        self.assertNotIn(SESSION_KEY, self.client.session)


# ====================================================================
# API JSON
# ====================================================================

class TestCartAPI(StorefrontTestCase):

    def test_anonimo_recebe_401(self):
        response = self.client.get(reverse('api-cart'))

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['redirect'], reverse('login'))

    @patch(f'{DI}.get_cart_reconciler')
    def test_carrinho_em_json(self, get_reconciler):
        self.login_as(Role.USER)
        get_reconciler.return_value.load.return_value = make_cart(quantity=2)

        response = self.client.get(reverse('api-cart'))

        data = response.json()
        self.assertEqual(data['total_items'], 2)
        self.assertEqual(data['subtotal'], '19.98')

    @patch(f'{DI}.get_order_controller')
    @patch(f'{DI}.get_cart_reconciler')
    def test_checkout_vazio_e_400(self, get_reconciler, get_controller):
        self.login_as(Role.USER)
        get_controller.return_value.place_order.side_effect = EmptyCartError()

        response = self.client.post(reverse('api-checkout'), content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['redirect'], reverse('cart'))
