"""
订单领域模型中的值对象。
地址、客户快照和订单行都是不可变的值对象。
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Address:
    """收货地址"""
    street: str
    number: str
    city: str
    province: str
    country: str
    postal_code: str
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "street": self.street,
            "number": self.number,
            "city": self.city,
            "province": self.province,
            "country": self.country,
            "postal_code": self.postal_code,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Address':
        return cls(
            street=data.get("street"),
            number=data.get("number"),
            city=data.get("city"),
            province=data.get("province"),
            country=data.get("country"),
            postal_code=data.get("postal_code"),
        )


@dataclass(frozen=True)
class Customer:
    """
    客户快照。
    下单时的联系方式和收货地址，之后客户资料变化不影响历史订单。
    """
    full_name: str
    email: str
    phone: str
    address: Optional[Address]
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address.to_dict() if self.address else None,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Customer':
        address = data.get("address")
        return cls(
            full_name=data.get("full_name"),
            email=data.get("email"),
            phone=data.get("phone"),
            address=Address.from_dict(address) if address else None,
        )


@dataclass(frozen=True)
class LineItem:
    """
    订单行。
    商品名称和单价是校验时从商品目录取得的快照。
    """
    product_id: str
    product_name: str
    unit_price: Decimal
    quantity: int
    
    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"订单行数量必须至少为1: {self.quantity}")
        if not isinstance(self.unit_price, Decimal):
            raise TypeError(f"订单行单价必须是Decimal: {self.unit_price!r}")
    
    @property
    def total(self) -> Decimal:
        """订单行小计 = 单价 × 数量"""
        return self.unit_price * self.quantity
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "total": str(self.total),
        }


@dataclass(frozen=True)
class RequestedLine:
    """
    请求中的订单行。
    unit_price可省略，省略时由商品目录填充；提供时必须与目录价格一致。
    """
    product_id: str
    quantity: int
    unit_price: Optional[Decimal] = None
