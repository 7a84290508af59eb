"""
环境变量处理模块。
负责加载和处理环境变量。
"""
import os
import warnings
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from loguru import logger


# 项目根目录
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# 从当前文件同级目录加载.env文件
def load_env_file():
    """从当前文件同级目录加载.env文件"""
    # .env文件位置
    env_path = os.path.join(os.path.dirname(__file__), '.env')
    
    if not os.path.exists(env_path):
        logger.debug(f"环境变量文件不存在: {env_path}，将使用默认值")
        return False
    
    load_dotenv(dotenv_path=env_path, encoding='utf-8')
    logger.debug(f"成功加载环境变量文件: {env_path}")
    return True

# 尝试加载环境变量
load_env_file()

# 获取环境变量，支持类型转换和默认值
def get_env(name: str, default: Any = None, cast_type: Optional[type] = None) -> Any:
    """
    获取环境变量值，支持类型转换和默认值
    
    Args:
        name: 环境变量名称
        default: 默认值，如果环境变量不存在则返回此值
        cast_type: 类型转换函数，如int, float, bool等
        
    Returns:
        环境变量的值，经过类型转换（如果指定了cast_type）
    """
    value = os.environ.get(name, default)
    
    if value is None:
        return None
    
    if cast_type is not None:
        if cast_type is bool and isinstance(value, str):
            return value.lower() in ('true', 'yes', '1', 'y')
        if cast_type is list and isinstance(value, str):
            return [item.strip() for item in value.split(',') if item.strip()]
        try:
            return cast_type(value)
        except (ValueError, TypeError):
            warnings.warn(f"无法将环境变量{name}的值'{value}'转换为{cast_type.__name__}类型，使用默认值")
            return default
    
    return value


# 导出常用环境变量
DEBUG = get_env('DEBUG', default=True, cast_type=bool)
SECRET_KEY = get_env('SECRET_KEY', default='django-insecure-tienda-dev-key-change-me')
ALLOWED_HOSTS = get_env('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast_type=list)

# 数据库配置
DB_ENGINE = get_env('DB_ENGINE', default='django.db.backends.mysql')
DB_NAME = get_env('DB_NAME', default='tienda')
DB_USER = get_env('DB_USER', default='root')
DB_PASSWORD = get_env('DB_PASSWORD', default='')
DB_HOST = get_env('DB_HOST', default='127.0.0.1')
DB_PORT = get_env('DB_PORT', default='3306')

# Redis配置
REDIS_URL = get_env('REDIS_URL', default='redis://localhost:6379/1')
REDIS_PASSWORD = get_env('REDIS_PASSWORD', default='')
REDIS_MAX_CONNECTIONS = get_env('REDIS_MAX_CONNECTIONS', default=100, cast_type=int)
REDIS_KEY_PREFIX = get_env('REDIS_KEY_PREFIX', default='tienda')

# 国际化配置
LANGUAGE_CODE = get_env('LANGUAGE_CODE', default='zh-hans')
TIME_ZONE = get_env('TIME_ZONE', default='Asia/Shanghai')

# 邮件配置
EMAIL_HOST = get_env('EMAIL_HOST', default='localhost')
EMAIL_PORT = get_env('EMAIL_PORT', default=25, cast_type=int)
EMAIL_HOST_USER = get_env('EMAIL_HOST_USER', default='')
EMAIL_HOST_PASSWORD = get_env('EMAIL_HOST_PASSWORD', default='')
EMAIL_USE_TLS = get_env('EMAIL_USE_TLS', default=False, cast_type=bool)
DEFAULT_FROM_EMAIL = get_env('DEFAULT_FROM_EMAIL', default='tienda@localhost')

# 订单模块配置
ORDER_SOFT_DELETE = get_env('ORDER_SOFT_DELETE', default=True, cast_type=bool)
ORDER_OPERATION_TIMEOUT = get_env('ORDER_OPERATION_TIMEOUT', default=5.0, cast_type=float)

# 通知模块配置
NOTIFICATION_INBOX_CAPACITY = get_env('NOTIFICATION_INBOX_CAPACITY', default=100, cast_type=int)
NOTIFICATION_DROP_POLICY = get_env('NOTIFICATION_DROP_POLICY', default='DROP_OLDEST')
NOTIFICATION_REALTIME_BACKEND = get_env('NOTIFICATION_REALTIME_BACKEND', default='redis')
NOTIFICATION_CHANNEL_PREFIX = get_env('NOTIFICATION_CHANNEL_PREFIX', default='tienda')
NOTIFICATION_EMAIL_ENABLED = get_env('NOTIFICATION_EMAIL_ENABLED', default=True, cast_type=bool)
NOTIFICATION_EMAIL_MAX_ATTEMPTS = get_env('NOTIFICATION_EMAIL_MAX_ATTEMPTS', default=3, cast_type=int)
NOTIFICATION_DIGEST_WINDOW_HOURS = get_env('NOTIFICATION_DIGEST_WINDOW_HOURS', default=24, cast_type=float)

# JWT配置
JWT_SECRET_KEY = get_env('JWT_SECRET_KEY', default=SECRET_KEY)
JWT_ALGORITHM = get_env('JWT_ALGORITHM', default='HS256')
JWT_EXPIRATION_SECONDS = get_env('JWT_EXPIRATION_SECONDS', default=3600, cast_type=int)
JWT_LEEWAY_SECONDS = get_env('JWT_LEEWAY_SECONDS', default=0, cast_type=int)
