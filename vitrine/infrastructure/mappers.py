"""
Mapeadores (Mappers) para converter entre:
1. Payloads JSON do backend (validados com serializers do DRF)
2. Entidades de Domínio (vitrine.core.entities)

Qualquer payload fora do formato esperado vira ParseError.
"""
from decimal import Decimal
from typing import Any, Mapping, Optional

from rest_framework import serializers

from vitrine.core.entities import (
    CartLine as CartLineEntity,
    Order as OrderEntity,
    OrderLine as OrderLineEntity,
    OrderStatus,
    Principal as PrincipalEntity,
    Product as ProductEntity,
    Role,
    UserAccount as UserAccountEntity,
)
from vitrine.core.exceptions import ParseError


class IdentifierField(serializers.Field):
    """IDs do backend: inteiros, ou strings quando não são numéricos."""
    default_error_messages = {'invalid': 'Identificador inválido.'}

    def to_internal_value(self, data):
        if isinstance(data, bool) or data in (None, ''):
            self.fail('invalid')
        if isinstance(data, int):
            return data
        if isinstance(data, str):
            return int(data) if data.isdigit() else data
        self.fail('invalid')

    def to_representation(self, value):
        return value


def _money():
    return serializers.DecimalField(max_digits=None, decimal_places=None, min_value=0)


# ====================================================================
# SERIALIZERS DOS PAYLOADS DO BACKEND
# ====================================================================

class ProductPayloadSerializer(serializers.Serializer):
    id = IdentifierField()
    name = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    price = _money()
    stock = serializers.IntegerField(required=False, min_value=0, default=0)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    imageUrl = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class ProductSummarySerializer(serializers.Serializer):
    """Produto embutido em linhas de pedido; pode vir incompleto."""
    id = IdentifierField(required=False)
    name = serializers.CharField(required=False, allow_blank=True, default='')
    imageUrl = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class CartLinePayloadSerializer(serializers.Serializer):
    id = IdentifierField()
    productId = IdentifierField(required=False)
    quantity = serializers.IntegerField()
    product = ProductPayloadSerializer(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs.get('productId') is None:
            product = attrs.get('product')
            if not product:
                raise serializers.ValidationError("Linha do carrinho sem produto.")
            attrs['productId'] = product['id']
        return attrs


class OrderItemPayloadSerializer(serializers.Serializer):
    productId = IdentifierField(required=False)
    quantity = serializers.IntegerField(min_value=1)
    price = _money()
    product = ProductSummarySerializer(required=False, allow_null=True)


class OrderUserSerializer(serializers.Serializer):
    id = IdentifierField(required=False)
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class OrderPayloadSerializer(serializers.Serializer):
    id = IdentifierField()
    userId = IdentifierField(required=False)
    user = OrderUserSerializer(required=False, allow_null=True)
    items = OrderItemPayloadSerializer(many=True, required=False, default=list)
    totalAmount = _money()
    status = serializers.ChoiceField(choices=[s.value for s in OrderStatus], default=OrderStatus.PENDING.value)
    createdAt = serializers.DateTimeField(required=False, allow_null=True, default=None)


class UserPayloadSerializer(serializers.Serializer):
    id = IdentifierField()
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    role = serializers.ChoiceField(choices=[r.value for r in Role.assignable()], default=Role.USER.value)


def _validated(serializer_class, raw) -> dict:
    if not isinstance(raw, Mapping):
        raise ParseError(f"Esperado um objeto JSON, recebido {type(raw).__name__}.")
    serializer = serializer_class(data=raw)
    if not serializer.is_valid():
        raise ParseError(f"Payload inválido: {serializer.errors}")
    return serializer.validated_data


# ====================================================================
# MAPPERS
# ====================================================================

class ProductMapper:

    @staticmethod
    def from_validated(data: Mapping[str, Any]) -> ProductEntity:
        return ProductEntity(
            id=data['id'],
            name=data['name'],
            price=data['price'],
            stock=data.get('stock') or 0,
            description=data.get('description') or '',
            category=data.get('category') or '',
            image_url=data.get('imageUrl') or None,
        )

    @classmethod
    def to_entity(cls, raw) -> ProductEntity:
        return cls.from_validated(_validated(ProductPayloadSerializer, raw))

    @staticmethod
    def to_payload(data: Mapping[str, Any]) -> dict:
        """Campos já limpos pelo caso de uso -> corpo JSON do backend."""
        return {
            'name': data['name'],
            'description': data.get('description') or '',
            'price': float(Decimal(data['price'])),
            'stock': int(data.get('stock') or 0),
            'category': data.get('category') or '',
            'imageUrl': data.get('image_url') or '',
        }


class CartLineMapper:

    @staticmethod
    def to_entity(raw) -> CartLineEntity:
        data = _validated(CartLinePayloadSerializer, raw)
        product = data.get('product')
        return CartLineEntity(
            id=data['id'],
            product_id=data['productId'],
            quantity=data['quantity'],
            product=ProductMapper.from_validated(product) if product else None,
        )


class OrderMapper:

    @staticmethod
    def to_entity(raw) -> OrderEntity:
        data = _validated(OrderPayloadSerializer, raw)
        user = data.get('user') or {}
        lines = []
        for item in data.get('items') or []:
            product = item.get('product') or {}
            lines.append(OrderLineEntity(
                product_id=item.get('productId', product.get('id')),
                quantity=item['quantity'],
                price=item['price'],
                product_name=product.get('name') or '',
                image_url=product.get('imageUrl'),
            ))
        return OrderEntity(
            id=data['id'],
            total_amount=data['totalAmount'],
            status=OrderStatus(data['status']),
            user_id=data.get('userId', user.get('id')),
            user_email=user.get('email'),
            lines=lines,
            created_at=data.get('createdAt'),
        )


class UserMapper:

    @staticmethod
    def to_entity(raw) -> UserAccountEntity:
        data = _validated(UserPayloadSerializer, raw)
        counts = raw.get('_count') if isinstance(raw.get('_count'), Mapping) else {}
        try:
            order_count = int(counts.get('orders') or raw.get('orderCount') or 0)
        except (TypeError, ValueError):
            raise ParseError("Contagem de pedidos inválida.")
        return UserAccountEntity(
            id=data['id'],
            name=data.get('name') or '',
            email=data.get('email') or '',
            role=Role(data['role']),
            order_count=order_count,
        )


class PrincipalMapper:

    @staticmethod
    def to_entity(raw: Optional[Mapping]) -> PrincipalEntity:
        data = _validated(UserPayloadSerializer, raw)
        return PrincipalEntity(
            id=data['id'],
            role=Role(data['role']),
            name=data.get('name') or '',
            email=data.get('email') or '',
        )
