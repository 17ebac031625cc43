from rest_framework import serializers


class ProductSerializer(serializers.Serializer):
    id = serializers.ReadOnlyField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    stock = serializers.IntegerField()
    category = serializers.CharField()
    image_url = serializers.CharField(allow_null=True)


# ====================================================================
# SERIALIZERS PARA O CARRINHO
# ====================================================================

class CartLineSerializer(serializers.Serializer):
    """
    Linha do carrinho com o produto aninhado e o subtotal já calculado.
    """
    id = serializers.ReadOnlyField()
    product_id = serializers.ReadOnlyField()
    quantity = serializers.IntegerField()
    product = ProductSerializer(read_only=True, allow_null=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class CartSerializer(serializers.Serializer):
    """
    Carrinho oficial, na ordem devolvida pelo backend.
    """
    lines = CartLineSerializer(many=True, read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    total_items = serializers.IntegerField(read_only=True)


class AddToCartSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class SetQuantitySerializer(serializers.Serializer):
    """Quantidade absoluta. Abaixo de 1 a linha é removida."""
    quantity = serializers.IntegerField()


# ====================================================================
# SERIALIZER DE PEDIDO (resposta do checkout)
# ====================================================================

class OrderLineSerializer(serializers.Serializer):
    product_id = serializers.ReadOnlyField()
    product_name = serializers.CharField()
    quantity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)


class OrderSerializer(serializers.Serializer):
    id = serializers.ReadOnlyField()
    # Enum com str: sem o .value a representação seria 'OrderStatus.PENDING'
    status = serializers.CharField(source='status.value')
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    created_at = serializers.DateTimeField(allow_null=True)
    lines = OrderLineSerializer(many=True, read_only=True)
