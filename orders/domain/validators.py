"""
客户信息校验。
校验订单中的客户联系方式和收货地址，任何一项不合法都会拒绝整个订单。
"""
import re
from typing import Optional

from orders.domain.config import (
    ADDRESS_FIELD_MIN_LENGTH,
    CUSTOMER_NAME_MIN_LENGTH,
    EMAIL_PATTERN,
    POSTAL_CODE_PATTERN,
)
from orders.domain.exceptions import InvalidOrderException
from orders.domain.value_objects import Address, Customer

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_POSTAL_CODE_RE = re.compile(POSTAL_CODE_PATTERN)


class CustomerValidator:
    """客户快照校验器"""
    
    def validate(self, customer: Optional[Customer]) -> None:
        """
        校验客户快照。
        
        Args:
            customer: 客户快照
            
        Raises:
            InvalidOrderException: 任意字段不合法
        """
        if customer is None:
            raise InvalidOrderException("customer", "客户信息不能为空")
        
        self._check_min_length("customer.full_name", customer.full_name, CUSTOMER_NAME_MIN_LENGTH)
        
        if not customer.email or not _EMAIL_RE.match(customer.email):
            raise InvalidOrderException("customer.email", "邮箱格式不正确", customer.email)
        
        if self._is_blank(customer.phone):
            raise InvalidOrderException("customer.phone", "电话不能为空", customer.phone)
        
        self.validate_address(customer.address)
    
    def validate_address(self, address: Optional[Address]) -> None:
        """
        校验收货地址。
        
        Args:
            address: 收货地址
            
        Raises:
            InvalidOrderException: 地址缺失或字段不合法
        """
        if address is None:
            raise InvalidOrderException("customer.address", "收货地址不能为空")
        
        for field_name in ("street", "city", "province", "country"):
            self._check_min_length(
                f"customer.address.{field_name}",
                getattr(address, field_name),
                ADDRESS_FIELD_MIN_LENGTH,
            )
        
        if self._is_blank(address.number):
            raise InvalidOrderException("customer.address.number", "门牌号不能为空", address.number)
        
        if not address.postal_code or not _POSTAL_CODE_RE.match(address.postal_code):
            raise InvalidOrderException("customer.address.postal_code", "邮编必须是5位数字", address.postal_code)
    
    @staticmethod
    def _is_blank(value: Optional[str]) -> bool:
        return value is None or not str(value).strip()
    
    def _check_min_length(self, field_name: str, value: Optional[str], min_length: int) -> None:
        if self._is_blank(value) or len(value.strip()) < min_length:
            raise InvalidOrderException(field_name, f"长度不能少于{min_length}个字符", value)
