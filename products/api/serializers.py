"""
商品API序列化器。
负责请求的反序列化和验证。
"""
from rest_framework import serializers
from django.core.validators import MinValueValidator


class ProductCreateSerializer(serializers.Serializer):
    """创建商品请求序列化器"""
    name = serializers.CharField(max_length=200, required=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    price = serializers.DecimalField(
        max_digits=10, 
        decimal_places=2, 
        validators=[MinValueValidator(0)]
    )
    stock = serializers.IntegerField(
        default=0,
        validators=[MinValueValidator(0)]
    )
    active = serializers.BooleanField(default=True)


class ProductUpdateSerializer(serializers.Serializer):
    """更新商品请求序列化器"""
    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(
        max_digits=10, 
        decimal_places=2, 
        validators=[MinValueValidator(0)],
        required=False
    )
    stock = serializers.IntegerField(
        validators=[MinValueValidator(0)],
        required=False
    )
    active = serializers.BooleanField(required=False)
