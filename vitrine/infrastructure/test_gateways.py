# vitrine/infrastructure/test_gateways.py

import unittest
from decimal import Decimal
from unittest.mock import Mock

import requests

from vitrine.core.entities import Cart, OrderStatus, Role
from vitrine.core.exceptions import ParseError, RequestError
from vitrine.infrastructure.gateways import HttpAuthGateway, StorefrontApiClient
from vitrine.infrastructure.repositories import (
    CartRepositoryHttp,
    OrderRepositoryHttp,
    ProductRepositoryHttp,
    UserRepositoryHttp,
)


def fake_response(status_code=200, json_data=None, content=b'{}'):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.content = content
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


class TestStorefrontApiClient(unittest.TestCase):

    def setUp(self):
        self.http = Mock()
        self.token = 'abc'
        self.client = StorefrontApiClient(
            base_url='http://api.test/api/', token_provider=lambda: self.token, http=self.http
        )

    def test_get_anexa_o_token_bearer(self):
        self.http.request.return_value = fake_response(json_data=[{'id': 1}])

        data = self.client.get('/cart', params={'page': '1'})

        self.assertEqual(data, [{'id': 1}])
        args, kwargs = self.http.request.call_args
        self.assertEqual(args, ('GET', 'http://api.test/api/cart'))
        self.assertEqual(kwargs['params'], {'page': '1'})
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer abc')

    def test_sem_token_nao_envia_authorization(self):
        self.token = None
        self.http.request.return_value = fake_response(json_data=[])

        self.client.get('/products')

        self.assertNotIn('Authorization', self.http.request.call_args[1]['headers'])

    def test_post_sem_corpo_envia_objeto_vazio(self):
        self.http.request.return_value = fake_response(status_code=201, json_data={'id': 1})

        self.client.post('/orders')

        self.assertEqual(self.http.request.call_args[1]['json'], {})

    def test_erro_usa_a_mensagem_do_servidor(self):
        self.http.request.return_value = fake_response(status_code=400, json_data={'message': 'Out of stock'})

        with self.assertRaises(RequestError) as ctx:
            self.client.post('/cart', {'productId': 1, 'quantity': 5})

        self.assertEqual(ctx.exception.message, 'Out of stock')
        self.assertEqual(ctx.exception.status_code, 400)

    def test_erro_sem_mensagem_usa_o_padrao(self):
        self.http.request.return_value = fake_response(status_code=500, json_data=ValueError('html'))

        with self.assertRaises(RequestError) as ctx:
            self.client.get('/orders')

        self.assertEqual(ctx.exception.message, 'Something went wrong')

    def test_falha_de_conexao_vira_request_error(self):
        self.http.request.side_effect = requests.exceptions.ConnectionError('recusada')

        with self.assertRaises(RequestError) as ctx:
            self.client.get('/products')

        self.assertIsNone(ctx.exception.status_code)

    def test_resposta_vazia_vira_none(self):
        self.http.request.return_value = fake_response(status_code=204, content=b'')

        self.assertIsNone(self.client.delete('/cart/1'))

    def test_json_invalido_vira_parse_error(self):
        self.http.request.return_value = fake_response(json_data=ValueError('nope'), content=b'<html>')

        with self.assertRaises(ParseError):
            self.client.get('/products')


class TestHttpAuthGateway(unittest.TestCase):

    def test_login_devolve_token_e_principal(self):
        client = Mock()
        client.post.return_value = {'token': 'tok', 'user': {'id': 4, 'name': 'Ana', 'email': 'a@x.com', 'role': 'ADMIN'}}

        token, principal = HttpAuthGateway(client).login('a@x.com', 'segredo')

        client.post.assert_called_once_with('/auth/login', {'email': 'a@x.com', 'password': 'segredo'})
        self.assertEqual(token, 'tok')
        self.assertEqual(principal.id, 4)
        self.assertIs(principal.role, Role.ADMIN)

    def test_resposta_sem_token_falha(self):
        client = Mock()
        client.post.return_value = {'user': {'id': 4}}

        with self.assertRaises(ParseError):
            HttpAuthGateway(client).register('Ana', 'a@x.com', 'segredo')


class TestRepositories(unittest.TestCase):

    def setUp(self):
        self.client = Mock()

    def test_carrinho_envia_incremento(self):
        CartRepositoryHttp(self.client).add(7, -1)

        self.client.post.assert_called_once_with('/cart', {'productId': 7, 'quantity': -1})

    def test_carrinho_busca_linhas(self):
        self.client.get.return_value = [
            {'id': 1, 'quantity': 2, 'product': {'id': 7, 'name': 'Caneca', 'price': 9.99}},
        ]

        cart = CartRepositoryHttp(self.client).fetch()

        self.assertEqual(cart.lines[0].product_id, 7)
        self.assertEqual(cart.subtotal, Decimal('19.98'))

    def test_carrinho_vazio(self):
        self.client.get.return_value = None

        self.assertEqual(CartRepositoryHttp(self.client).fetch(), Cart())

    def test_carrinho_em_formato_errado(self):
        self.client.get.return_value = {'items': []}

        with self.assertRaises(ParseError):
            CartRepositoryHttp(self.client).fetch()

    def test_remover_linha(self):
        CartRepositoryHttp(self.client).remove(3)

        self.client.delete.assert_called_once_with('/cart/3')

    def test_criar_pedido(self):
        self.client.post.return_value = {'id': 9, 'totalAmount': 9.99, 'status': 'PENDING', 'items': []}

        order = OrderRepositoryHttp(self.client).create_from_cart()

        self.client.post.assert_called_once_with('/orders', {})
        self.assertEqual(order.id, 9)
        self.assertIs(order.status, OrderStatus.PENDING)

    def test_atualizar_status(self):
        self.client.put.return_value = {'id': 9, 'totalAmount': 9.99, 'status': 'COMPLETED'}

        OrderRepositoryHttp(self.client).update_status(9, OrderStatus.COMPLETED)

        self.client.put.assert_called_once_with('/orders/9/status', {'status': 'COMPLETED'})

    def test_criar_produto(self):
        self.client.post.return_value = {'id': 1, 'name': 'Caneca', 'price': 9.99}

        ProductRepositoryHttp(self.client).create({'name': 'Caneca', 'price': Decimal('9.99'), 'stock': 3})

        self.client.post.assert_called_once_with('/products', {
            'name': 'Caneca', 'description': '', 'price': 9.99, 'stock': 3, 'category': '', 'imageUrl': '',
        })

    def test_usuarios(self):
        repo = UserRepositoryHttp(self.client)

        repo.update_role(6, Role.ADMIN)
        repo.delete(6)

        self.client.put.assert_called_once_with('/users/6/role', {'role': 'ADMIN'})
        self.client.delete.assert_called_once_with('/users/6')


if __name__ == '__main__':
    unittest.main()
