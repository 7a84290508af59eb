"""
测试环境配置文件。
包含测试环境特定的Django配置。
"""
from .base import *
from .env import *

# 测试环境禁用调试模式
DEBUG = False

# 使用内存数据库加速测试
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# 禁用缓存加速测试
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.dummy.DummyCache',
    }
}

# 邮件保存在内存中
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
DEFAULT_FROM_EMAIL = 'tienda@example.com'

# 禁用密码哈希加速测试
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# 简化日志配置
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'console': {
            'level': 'ERROR',
            'class': 'logging.StreamHandler',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'ERROR',
            'propagate': False,
        },
        'orders': {
            'handlers': ['console'],
            'level': 'ERROR',
            'propagate': False,
        },
    },
}

# 测试环境特定的DRF配置
REST_FRAMEWORK['DEFAULT_RENDERER_CLASSES'] = [
    'rest_framework.renderers.JSONRenderer',
]
REST_FRAMEWORK['TEST_REQUEST_DEFAULT_FORMAT'] = 'json'

# 订单模块测试环境配置
ORDER_SETTINGS = {
    'SOFT_DELETE': True,
    'OPERATION_TIMEOUT': None,  # 测试中由用例自行指定超时
}

# 通知模块测试环境配置
NOTIFICATION_SETTINGS = {
    'INBOX_CAPACITY': 100,
    'DROP_POLICY': 'DROP_OLDEST',
    'REALTIME_BACKEND': 'memory',  # 不依赖Redis
    'CHANNEL_PREFIX': 'tienda-test',
    'EMAIL_ENABLED': True,
    'EMAIL_MAX_ATTEMPTS': 1,
}

# JWT测试环境配置
JWT_SETTINGS = {
    'SECRET_KEY': 'tienda-test-secret',
    'ALGORITHM': 'HS256',
    'EXPIRATION_SECONDS': 300,
    'LEEWAY_SECONDS': 0,
}
