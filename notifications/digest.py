"""
新品汇总邮件。
把上次运行以来上架的商品汇总成一封邮件，发送给所有有邮箱的激活用户。
由定时任务（send_new_products_digest管理命令）触发。
"""
import smtplib
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from django.contrib.auth import get_user_model
from loguru import logger

from notifications.subscribers.email import DjangoNewProductsEmailSender
from products.domain.repositories import ProductRepository


def active_user_emails() -> List[str]:
    """返回所有激活用户的邮箱，忽略空白邮箱并去重"""
    emails = get_user_model().objects.filter(is_active=True).order_by("pk").values_list("email", flat=True)
    return list(dict.fromkeys(email.strip() for email in emails if email and email.strip()))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NewProductsDigest:
    """
    新品汇总任务。
    每次运行查询[上次运行时间, 当前时间)之间上架的商品，没有新品时不发送邮件。
    单个收件人发送失败只记录日志，不影响其他收件人。
    """
    
    def __init__(
        self,
        product_repository: ProductRepository,
        sender: DjangoNewProductsEmailSender,
        recipients: Callable[[], Iterable[str]] = active_user_emails,
        since: Optional[datetime] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        初始化新品汇总任务。
        
        Args:
            product_repository: 商品仓储
            sender: 新品汇总邮件发送器
            recipients: 返回收件人邮箱的函数
            since: 第一次运行时的查询起点，默认为创建时刻
            clock: 时钟函数，测试时可替换
        """
        self.product_repository = product_repository
        self.sender = sender
        self.recipients = recipients
        self._clock = clock
        self.last_run = since or clock()
    
    def run(self) -> int:
        """
        执行一次汇总。
        
        Returns:
            成功发送的邮件数
        """
        now = self._clock()
        products = self.product_repository.find_created_between(self.last_run, now)
        # 查询成功后才推进时间窗口，发送失败的邮件不会重发
        self.last_run = now
        
        if not products:
            logger.info("没有新上架的商品，跳过新品汇总邮件")
            return 0
        
        payloads = [product.to_dict() for product in products]
        sent = 0
        for email in self.recipients():
            try:
                self.sender.send_new_products(email, payloads)
            except (smtplib.SMTPException, OSError) as e:
                logger.opt(exception=e).error(f"新品汇总邮件发送给 {email} 失败: {e}")
            else:
                sent += 1
        
        logger.info(f"新品汇总完成: {len(payloads)} 个新品，发送 {sent} 封邮件")
        return sent
