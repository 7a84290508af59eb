"""
发送新品汇总邮件。
供定时任务调用，例如每天执行一次：
    python manage.py send_new_products_digest --hours 24
"""
from datetime import datetime, timedelta, timezone

from django.core.management.base import BaseCommand, CommandError

from notifications import config
from notifications.digest import NewProductsDigest
from notifications.subscribers.email import DjangoNewProductsEmailSender
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository


class Command(BaseCommand):
    help = "把最近上架的商品汇总发送给所有激活用户"
    
    def add_arguments(self, parser):
        parser.add_argument(
            "--hours",
            type=float,
            default=config.DIGEST_WINDOW_HOURS,
            help="汇总最近多少小时内上架的商品",
        )
    
    def handle(self, *args, **options):
        hours = options["hours"]
        if hours <= 0:
            raise CommandError(f"--hours 必须为正数: {hours}")
        
        now = datetime.now(timezone.utc)
        digest = NewProductsDigest(
            DjangoProductRepository(),
            DjangoNewProductsEmailSender(max_attempts=config.EMAIL_MAX_ATTEMPTS),
            since=now - timedelta(hours=hours),
            clock=lambda: now,
        )
        sent = digest.run()
        self.stdout.write(f"新品汇总邮件已发送 {sent} 封")
