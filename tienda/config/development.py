"""
开发环境配置文件。
包含开发环境特定的Django配置。
"""
import os
from .base import *
from .env import *

# 开发环境默认开启调试模式
DEBUG = True

# 安全配置 - 开发环境禁用HTTPS相关设置
SECURE_SSL_REDIRECT = False
SECURE_PROXY_SSL_HEADER = None
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
SECURE_HSTS_SECONDS = 0
SECURE_HSTS_INCLUDE_SUBDOMAINS = False
SECURE_HSTS_PRELOAD = False

# 数据库配置
DATABASES = {
    'default': {
        'ENGINE': DB_ENGINE,
        'NAME': DB_NAME,
        'USER': DB_USER,
        'PASSWORD': DB_PASSWORD,
        'HOST': DB_HOST,
        'PORT': DB_PORT,
        'OPTIONS': {
            'charset': 'utf8mb4',
            'use_unicode': True,
        },
    }
}

# Redis缓存配置，实时推送通道也使用这个连接
CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': REDIS_URL,
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'CONNECTION_POOL_KWARGS': {'max_connections': REDIS_MAX_CONNECTIONS},
            'PASSWORD': REDIS_PASSWORD,
        },
        'KEY_PREFIX': REDIS_KEY_PREFIX,
    }
}

# 开发环境邮件输出到控制台
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# 日志配置 - 开发环境更详细的日志
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'verbose'
        },
        'file': {
            'level': 'INFO',
            'class': 'logging.FileHandler',
            'filename': os.path.join(BASE_DIR, 'logs/django.log'),
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console', 'file'],
            'level': 'INFO',
            'propagate': True,
        },
        'core': {
            'handlers': ['console', 'file'],
            'level': 'DEBUG',
            'propagate': False,
        },
        'orders': {
            'handlers': ['console', 'file'],
            'level': 'DEBUG',  # 开发环境使用DEBUG级别
            'propagate': False,
        },
        'products': {
            'handlers': ['console', 'file'],
            'level': 'DEBUG',
            'propagate': False,
        },
    },
}

# 确保日志目录存在
os.makedirs(os.path.join(BASE_DIR, 'logs'), exist_ok=True)

# 开发环境特定的DRF配置
REST_FRAMEWORK['DEFAULT_RENDERER_CLASSES'] = [
    'rest_framework.renderers.JSONRenderer',
    'rest_framework.renderers.BrowsableAPIRenderer',  # 保留浏览器API渲染器
]

# 订单模块配置
ORDER_SETTINGS = {
    'SOFT_DELETE': ORDER_SOFT_DELETE,
    'OPERATION_TIMEOUT': ORDER_OPERATION_TIMEOUT,
}

# 通知模块配置
NOTIFICATION_SETTINGS = {
    'INBOX_CAPACITY': NOTIFICATION_INBOX_CAPACITY,
    'DROP_POLICY': NOTIFICATION_DROP_POLICY,
    'REALTIME_BACKEND': NOTIFICATION_REALTIME_BACKEND,
    'CHANNEL_PREFIX': NOTIFICATION_CHANNEL_PREFIX,
    'EMAIL_ENABLED': NOTIFICATION_EMAIL_ENABLED,
    'EMAIL_MAX_ATTEMPTS': NOTIFICATION_EMAIL_MAX_ATTEMPTS,
    'DIGEST_WINDOW_HOURS': NOTIFICATION_DIGEST_WINDOW_HOURS,
}

# JWT配置
JWT_SETTINGS = {
    'SECRET_KEY': JWT_SECRET_KEY,
    'ALGORITHM': JWT_ALGORITHM,
    'EXPIRATION_SECONDS': JWT_EXPIRATION_SECONDS,
    'LEEWAY_SECONDS': JWT_LEEWAY_SECONDS,
}
