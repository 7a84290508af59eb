"""
通知模块配置文件。
从Django设置中获取通知模块的配置。
"""
from django.conf import settings

# 获取通知模块配置，如果不存在则使用默认值
NOTIFICATION_SETTINGS = getattr(settings, 'NOTIFICATION_SETTINGS', {})

# 每个订阅者收件箱的容量
INBOX_CAPACITY = NOTIFICATION_SETTINGS.get('INBOX_CAPACITY', 100)

# 收件箱已满时的丢弃策略：DROP_OLDEST 或 DROP_NEWEST
DROP_POLICY = NOTIFICATION_SETTINGS.get('DROP_POLICY', 'DROP_OLDEST')

# 实时推送后端：redis 或 memory
REALTIME_BACKEND = NOTIFICATION_SETTINGS.get('REALTIME_BACKEND', 'redis')

# Redis频道名前缀
CHANNEL_PREFIX = NOTIFICATION_SETTINGS.get('CHANNEL_PREFIX', 'tienda')

# 进程内实时会话的缓冲区大小
SESSION_BUFFER_SIZE = NOTIFICATION_SETTINGS.get('SESSION_BUFFER_SIZE', 100)

# 是否发送订单确认邮件
EMAIL_ENABLED = NOTIFICATION_SETTINGS.get('EMAIL_ENABLED', True)

# 邮件发送最大尝试次数
EMAIL_MAX_ATTEMPTS = NOTIFICATION_SETTINGS.get('EMAIL_MAX_ATTEMPTS', 3)

# 新品汇总邮件默认汇总最近多少小时内上架的商品
DIGEST_WINDOW_HOURS = NOTIFICATION_SETTINGS.get('DIGEST_WINDOW_HOURS', 24)
