"""
邮件通知。
订单确认邮件订阅者，以及新品汇总邮件的发送器。
"""
import smtplib
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from loguru import logger
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.domain.events import EntityKind, EventType
from notifications.dispatcher import Subscriber
from notifications.domain import NotificationEnvelope


class OrderEmailSender(ABC):
    """订单邮件发送接口"""
    
    @abstractmethod
    def send_order_confirmation(self, order_payload: Dict[str, Any]) -> None:
        """
        发送订单确认邮件。
        
        Args:
            order_payload: 订单快照（OrderAggregate.to_dict()的结果）
        """
        pass


class DjangoEmailSender:
    """
    基于django.core.mail的邮件发送基类。
    邮件包含HTML和纯文本两个版本，传输错误时按指数退避重试。
    """
    
    subject_template: str
    text_template: str
    html_template: str
    
    def __init__(
        self,
        from_email: Optional[str] = None,
        max_attempts: int = 3,
        wait_initial: float = 0.5,
        wait_max: float = 10.0,
    ):
        """
        初始化邮件发送器。
        
        Args:
            from_email: 发件人，默认使用DEFAULT_FROM_EMAIL
            max_attempts: 最大尝试次数
            wait_initial: 首次重试前的等待时间（秒）
            wait_max: 重试等待的上限（秒）
        """
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL
        self.max_attempts = max_attempts
        self.wait_initial = wait_initial
        self.wait_max = wait_max
    
    def render(self, context: Dict[str, Any], to: str) -> EmailMultiAlternatives:
        """
        渲染邮件。
        
        Args:
            context: 模板上下文
            to: 收件人
        
        Returns:
            待发送的邮件
        """
        subject = render_to_string(self.subject_template, context).strip()
        text_body = render_to_string(self.text_template, context)
        html_body = render_to_string(self.html_template, context)
        
        message = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=self.from_email,
            to=[to],
        )
        message.attach_alternative(html_body, "text/html")
        return message
    
    def send(self, message: EmailMultiAlternatives, description: str) -> None:
        """
        发送邮件，SMTP和网络错误按指数退避重试，用尽重试次数后抛出最后一次的异常。
        
        Args:
            message: 邮件
            description: 邮件说明，用于日志
        """
        retrying = Retrying(
            retry=retry_if_exception_type((smtplib.SMTPException, OSError)),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.wait_initial, max=self.wait_max),
            before_sleep=lambda state: logger.warning(
                f"{description}发送失败，第{state.attempt_number}次重试: {state.outcome.exception()}"
            ),
            reraise=True,
        )
        retrying(message.send, fail_silently=False)


class DjangoOrderEmailSender(DjangoEmailSender, OrderEmailSender):
    """订单确认邮件发送器"""
    
    subject_template = "notifications/order_confirmation_subject.txt"
    text_template = "notifications/order_confirmation.txt"
    html_template = "notifications/order_confirmation.html"
    
    def build_message(self, order_payload: Dict[str, Any]) -> EmailMultiAlternatives:
        """
        渲染订单确认邮件。
        
        Args:
            order_payload: 订单快照
        
        Returns:
            待发送的邮件
        """
        context = {"order": order_payload, "customer": order_payload["customer"]}
        return self.render(context, order_payload["customer"]["email"])
    
    def send_order_confirmation(self, order_payload: Dict[str, Any]) -> None:
        message = self.build_message(order_payload)
        self.send(message, "订单确认邮件")
        logger.info(f"订单确认邮件已发送: 订单 {order_payload['id']} -> {message.to[0]}")


class DjangoNewProductsEmailSender(DjangoEmailSender):
    """新品汇总邮件发送器"""
    
    subject_template = "notifications/new_products_subject.txt"
    text_template = "notifications/new_products.txt"
    html_template = "notifications/new_products.html"
    
    def send_new_products(self, email: str, products: List[Dict[str, Any]]) -> None:
        """
        发送新品汇总邮件。
        
        Args:
            email: 收件人
            products: 商品快照列表（Product.to_dict()的结果）
        """
        message = self.render({"products": products, "total": len(products)}, email)
        self.send(message, "新品汇总邮件")
        logger.info(f"新品汇总邮件已发送: {len(products)} 个商品 -> {email}")


class OrderEmailNotifier(Subscriber):
    """
    订单确认邮件通知者。
    只处理订单创建事件。
    """
    
    entity_kinds = frozenset({EntityKind.ORDER})
    event_types = frozenset({EventType.CREATED})
    
    def __init__(self, sender: OrderEmailSender):
        self.sender = sender
    
    def deliver(self, envelope: NotificationEnvelope) -> None:
        self.sender.send_order_confirmation(envelope.payload)
