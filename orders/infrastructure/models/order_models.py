"""
订单基础设施层数据库模型。
定义与订单领域相关的Django ORM模型。
"""
import uuid

from django.db import models


class Order(models.Model):
    """订单数据库模型"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer_id = models.CharField(max_length=64, db_index=True, verbose_name="客户ID")
    
    # 客户快照
    full_name = models.CharField(max_length=200, verbose_name="客户姓名")
    email = models.EmailField(verbose_name="邮箱")
    phone = models.CharField(max_length=50, verbose_name="电话")
    street = models.CharField(max_length=200, verbose_name="街道")
    number = models.CharField(max_length=20, verbose_name="门牌号")
    city = models.CharField(max_length=100, verbose_name="城市")
    province = models.CharField(max_length=100, verbose_name="省份")
    country = models.CharField(max_length=100, verbose_name="国家")
    postal_code = models.CharField(max_length=10, verbose_name="邮编")
    
    total_items = models.PositiveIntegerField(default=0, verbose_name="商品总数")
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, verbose_name="订单总额")
    is_deleted = models.BooleanField(default=False, verbose_name="是否已删除")
    version = models.PositiveIntegerField(default=0, verbose_name="版本号")
    created_at = models.DateTimeField(verbose_name="创建时间")
    updated_at = models.DateTimeField(verbose_name="更新时间")
    
    class Meta:
        db_table = 'customer_order'
        verbose_name = "订单"
        verbose_name_plural = "订单"
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['customer_id', 'is_deleted'], name='idx_order_customer'),
        ]
    
    def __str__(self):
        return f"{self.id} ({self.full_name})"


class OrderLine(models.Model):
    """订单行数据库模型"""
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name="订单"
    )
    position = models.PositiveIntegerField(verbose_name="行号")
    product_id = models.CharField(max_length=64, verbose_name="商品ID")
    product_name = models.CharField(max_length=200, verbose_name="商品名称")
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, verbose_name="单价")
    quantity = models.PositiveIntegerField(verbose_name="数量")
    
    class Meta:
        db_table = 'order_line'
        verbose_name = "订单行"
        verbose_name_plural = "订单行"
        ordering = ['position']
        unique_together = [('order', 'position')]
    
    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
