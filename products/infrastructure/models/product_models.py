"""
商品基础设施层数据库模型。
定义与商品领域相关的Django ORM模型。
"""
import uuid

from django.db import models


class Product(models.Model):
    """商品数据库模型"""
    
    # 商品状态选项
    class StateChoices(models.TextChoices):
        DRAFT = 'draft', '草稿'
        ACTIVE = 'active', '激活'
        INACTIVE = 'inactive', '未激活'
        DELETED = 'deleted', '已删除'
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, verbose_name="商品名称")
    description = models.TextField(blank=True, verbose_name="商品描述")
    price_amount = models.DecimalField(
        max_digits=10, 
        decimal_places=2, 
        verbose_name="价格金额"
    )
    price_currency = models.CharField(
        max_length=3, 
        default="EUR", 
        verbose_name="价格货币"
    )
    stock = models.PositiveIntegerField(default=0, verbose_name="可用库存")
    state = models.CharField(
        max_length=20, 
        choices=StateChoices.choices, 
        default=StateChoices.ACTIVE,
        verbose_name="商品状态"
    )
    created_at = models.DateTimeField(verbose_name="创建时间")
    updated_at = models.DateTimeField(verbose_name="更新时间")
    
    # 版本号
    version = models.PositiveIntegerField(default=0, verbose_name="版本号")
    
    class Meta:
        db_table = 'product'
        verbose_name = "商品"
        verbose_name_plural = "商品"
        indexes = [
            models.Index(fields=['name'], name='idx_product_name'),
            models.Index(fields=['state'], name='idx_product_state'),
        ]
        
        # 添加数据库级别约束
        constraints = [
            # 确保价格不为负数
            models.CheckConstraint(condition=models.Q(price_amount__gte=0), name='price_amount_gte_0'),
        ]
    
    def __str__(self):
        return self.name
