"""
订单模块配置文件。
从Django设置中获取订单模块的配置。
"""
from django.conf import settings

# 获取订单模块配置，如果不存在则使用默认值
ORDER_SETTINGS = getattr(settings, 'ORDER_SETTINGS', {})

# 删除订单时是否软删除（保留记录，仅标记is_deleted）
SOFT_DELETE = ORDER_SETTINGS.get('SOFT_DELETE', True)

# 单个用例的默认超时时间（秒），None表示不限制
OPERATION_TIMEOUT = ORDER_SETTINGS.get('OPERATION_TIMEOUT', 5.0)

# 客户信息校验规则
CUSTOMER_NAME_MIN_LENGTH = 3
ADDRESS_FIELD_MIN_LENGTH = 3
EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,6}$'
POSTAL_CODE_PATTERN = r'^[0-9]{5}$'
