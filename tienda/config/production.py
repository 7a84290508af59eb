"""
生产环境配置文件。
包含生产环境特定的Django配置。
"""
import os
from .base import *
from .env import *

# 生产环境禁用调试模式
DEBUG = False

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
        'CONN_MAX_AGE': 60,  # 连接持久化
    }
}

# Redis缓存配置
CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': REDIS_URL,
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'CONNECTION_POOL_KWARGS': {'max_connections': REDIS_MAX_CONNECTIONS},
            'PASSWORD': REDIS_PASSWORD,
            'SOCKET_TIMEOUT': 5,  # 生产环境设置超时
            'SOCKET_CONNECT_TIMEOUT': 5,
        },
        'KEY_PREFIX': REDIS_KEY_PREFIX,
        'TIMEOUT': 300,  # 默认缓存5分钟
    }
}

# SMTP邮件
EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
EMAIL_TIMEOUT = 10

# 日志配置 - 生产环境更关注错误和警告
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'WARNING',
            'class': 'logging.StreamHandler',
            'formatter': 'verbose'
        },
        'file': {
            'level': 'INFO',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': os.path.join(BASE_DIR, 'logs/django.log'),
            'maxBytes': 10 * 1024 * 1024,  # 10MB
            'backupCount': 10,
            'formatter': 'verbose',
        },
        'error_file': {
            'level': 'ERROR',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': os.path.join(BASE_DIR, 'logs/error.log'),
            'maxBytes': 10 * 1024 * 1024,  # 10MB
            'backupCount': 10,
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console', 'file', 'error_file'],
            'level': 'INFO',
            'propagate': True,
        },
        'core': {
            'handlers': ['console', 'file', 'error_file'],
            'level': 'INFO',
            'propagate': False,
        },
        'orders': {
            'handlers': ['console', 'file', 'error_file'],
            'level': 'INFO',
            'propagate': False,
        },
        'products': {
            'handlers': ['console', 'file', 'error_file'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}

# 确保日志目录存在
os.makedirs(os.path.join(BASE_DIR, 'logs'), exist_ok=True)

# 生产环境安全设置
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_HSTS_SECONDS = 31536000  # 1年
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

# 生产环境特定的DRF配置
REST_FRAMEWORK['DEFAULT_RENDERER_CLASSES'] = [
    'rest_framework.renderers.JSONRenderer',  # 只使用JSON渲染器
]
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = [
    'rest_framework.throttling.AnonRateThrottle',
    'rest_framework.throttling.UserRateThrottle',
]
REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {
    'anon': '100/day',
    'user': '1000/day',
}

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
