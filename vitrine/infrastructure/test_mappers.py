# vitrine/infrastructure/test_mappers.py

import unittest
from decimal import Decimal

from vitrine.core.entities import OrderStatus, Role
from vitrine.core.exceptions import ParseError
from vitrine.infrastructure.mappers import (
    CartLineMapper,
    OrderMapper,
    PrincipalMapper,
    ProductMapper,
    UserMapper,
)


class TestProductMapper(unittest.TestCase):

    def test_produto_completo(self):
        product = ProductMapper.to_entity({
            'id': 3, 'name': 'Colar', 'price': '120.50', 'stock': 4,
            'description': 'Prata', 'category': 'Acessórios', 'imageUrl': 'http://img/colar.png',
        })

        self.assertEqual(product.price, Decimal('120.50'))
        self.assertEqual(product.image_url, 'http://img/colar.png')

    def test_campos_opcionais_ausentes(self):
        product = ProductMapper.to_entity({'id': 'abc', 'name': 'Colar', 'price': 10})

        self.assertEqual(product.id, 'abc')
        self.assertEqual(product.stock, 0)
        self.assertEqual(product.category, '')
        self.assertIsNone(product.image_url)

    def test_preco_negativo_e_rejeitado(self):
        with self.assertRaises(ParseError):
            ProductMapper.to_entity({'id': 1, 'name': 'X', 'price': -1})

    def test_payload_nao_objeto(self):
        with self.assertRaises(ParseError):
            ProductMapper.to_entity(['id', 1])


class TestCartLineMapper(unittest.TestCase):

    def test_product_id_vem_do_produto_embutido(self):
        line = CartLineMapper.to_entity({'id': 1, 'quantity': 2, 'product': {'id': 7, 'name': 'Caneca', 'price': 9.99}})

        self.assertEqual(line.product_id, 7)
        self.assertEqual(line.subtotal, Decimal('19.98'))

    def test_linha_sem_produto_falha(self):
        with self.assertRaises(ParseError):
            CartLineMapper.to_entity({'id': 1, 'quantity': 2})


class TestOrderMapper(unittest.TestCase):

    def test_pedido_com_itens_e_usuario(self):
        order = OrderMapper.to_entity({
            'id': 9,
            'totalAmount': 19.98,
            'status': 'CANCELLED',
            'createdAt': '2024-03-01T12:00:00Z',
            'user': {'id': 1, 'email': 'ana@example.com'},
            'items': [
                {'productId': 7, 'quantity': 2, 'price': 9.99, 'product': {'name': 'Caneca'}},
            ],
        })

        self.assertIs(order.status, OrderStatus.CANCELLED)
        self.assertEqual(order.user_id, 1)
        self.assertEqual(order.user_email, 'ana@example.com')
        self.assertEqual(order.lines[0].product_name, 'Caneca')
        self.assertEqual(order.lines[0].price, Decimal('9.99'))
        self.assertEqual(order.created_at.year, 2024)

    def test_status_padrao_e_pending(self):
        order = OrderMapper.to_entity({'id': 9, 'totalAmount': 0})

        self.assertIs(order.status, OrderStatus.PENDING)
        self.assertEqual(order.lines, [])

    def test_status_desconhecido_falha(self):
        with self.assertRaises(ParseError):
            OrderMapper.to_entity({'id': 9, 'totalAmount': 1, 'status': 'SHIPPED'})


class TestUserMapper(unittest.TestCase):

    def test_contagem_de_pedidos(self):
        user = UserMapper.to_entity({'id': 2, 'name': 'Bia', 'email': 'b@x.com', 'role': 'ADMIN', '_count': {'orders': 3}})

        self.assertIs(user.role, Role.ADMIN)
        self.assertEqual(user.order_count, 3)

    def test_contagem_alternativa(self):
        user = UserMapper.to_entity({'id': 2, 'role': 'USER', 'orderCount': 5})

        self.assertEqual(user.order_count, 5)

    def test_papel_anonimo_nao_vem_do_backend(self):
        with self.assertRaises(ParseError):
            PrincipalMapper.to_entity({'id': 2, 'role': 'ANONYMOUS'})

    def test_principal_sem_usuario(self):
        with self.assertRaises(ParseError):
            PrincipalMapper.to_entity(None)


if __name__ == '__main__':
    unittest.main()
