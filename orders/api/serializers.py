"""
订单API序列化器。
只负责请求结构的解析，业务规则（客户信息、价格、库存）由领域层校验。
"""
from rest_framework import serializers

from orders.domain.value_objects import Address, Customer, RequestedLine


class AddressSerializer(serializers.Serializer):
    """收货地址序列化器"""
    street = serializers.CharField(allow_blank=True)
    number = serializers.CharField(allow_blank=True)
    city = serializers.CharField(allow_blank=True)
    province = serializers.CharField(allow_blank=True)
    country = serializers.CharField(allow_blank=True)
    postal_code = serializers.CharField(allow_blank=True)


class CustomerSerializer(serializers.Serializer):
    """客户信息序列化器"""
    full_name = serializers.CharField(allow_blank=True)
    email = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_blank=True)
    address = AddressSerializer(required=False, allow_null=True)


class OrderLineSerializer(serializers.Serializer):
    """订单行请求序列化器"""
    product_id = serializers.CharField()
    quantity = serializers.IntegerField()
    # 不限制精度：与商品目录价格的比较由领域层完成
    unit_price = serializers.DecimalField(max_digits=None, decimal_places=None, required=False, allow_null=True)


def _to_requested_lines(lines_data):
    return [
        RequestedLine(
            product_id=line["product_id"],
            quantity=line["quantity"],
            unit_price=line.get("unit_price"),
        )
        for line in lines_data
    ]


class OrderCreateSerializer(serializers.Serializer):
    """创建订单请求序列化器"""
    customer = CustomerSerializer()
    lines = OrderLineSerializer(many=True, allow_empty=True)
    # 仅管理员可以为其他客户下单
    customer_id = serializers.CharField(required=False)
    timeout = serializers.FloatField(required=False, min_value=0.001)
    
    def to_customer(self) -> Customer:
        return Customer.from_dict(self.validated_data["customer"])
    
    def to_requested_lines(self):
        return _to_requested_lines(self.validated_data["lines"])


class OrderUpdateSerializer(serializers.Serializer):
    """更新订单请求序列化器，订单行整体替换"""
    customer = CustomerSerializer(required=False)
    lines = OrderLineSerializer(many=True, allow_empty=True)
    timeout = serializers.FloatField(required=False, min_value=0.001)
    
    def to_customer(self):
        customer = self.validated_data.get("customer")
        return Customer.from_dict(customer) if customer else None
    
    def to_requested_lines(self):
        return _to_requested_lines(self.validated_data["lines"])
