"""
JWT认证模块。
提供令牌的签发和校验，以及DRF认证类。
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from jose import ExpiredSignatureError, JWTError, jwt
from loguru import logger
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed

ACCESS_TOKEN_TYPE = "access"


@dataclass(frozen=True)
class TokenClaims:
    """令牌声明"""
    username: str
    user_id: Any
    is_staff: bool
    token_type: str
    issued_at: datetime
    expires_at: datetime


class JwtService:
    """
    JWT服务。
    令牌包含 sub（用户名）、uid（用户ID）、staff（是否管理员）、typ、iat、exp。
    """
    
    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expiration_seconds: Optional[int] = None,
        leeway_seconds: Optional[int] = None
    ):
        """
        初始化JWT服务，未指定的参数从JWT_SETTINGS读取。
        
        Args:
            secret_key: 签名密钥
            algorithm: 签名算法
            expiration_seconds: 令牌有效期（秒）
            leeway_seconds: 校验过期时间时允许的时钟偏差（秒）
        """
        jwt_settings = getattr(settings, 'JWT_SETTINGS', {})
        self.secret_key = secret_key or jwt_settings.get('SECRET_KEY') or settings.SECRET_KEY
        self.algorithm = algorithm or jwt_settings.get('ALGORITHM', 'HS256')
        self.expiration_seconds = (
            expiration_seconds if expiration_seconds is not None
            else jwt_settings.get('EXPIRATION_SECONDS', 3600)
        )
        self.leeway_seconds = (
            leeway_seconds if leeway_seconds is not None
            else jwt_settings.get('LEEWAY_SECONDS', 0)
        )
    
    def issue(self, user, expires_in: Optional[int] = None) -> str:
        """
        为用户签发访问令牌。
        
        Args:
            user: Django用户
            expires_in: 有效期（秒），默认使用配置
            
        Returns:
            编码后的令牌
        """
        now = datetime.now(timezone.utc)
        expire = now + timedelta(seconds=expires_in if expires_in is not None else self.expiration_seconds)
        payload = {
            "sub": user.get_username(),
            "uid": user.pk,
            "staff": bool(user.is_staff),
            "typ": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
    
    def decode(self, token: str) -> TokenClaims:
        """
        校验并解析令牌。
        
        Args:
            token: 编码后的令牌
            
        Returns:
            令牌声明
            
        Raises:
            AuthenticationFailed: 令牌过期、签名错误或类型不正确
        """
        try:
            payload: Dict[str, Any] = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"leeway": self.leeway_seconds, "require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError:
            raise AuthenticationFailed("令牌已过期")
        except JWTError as e:
            logger.debug(f"令牌校验失败: {e}")
            raise AuthenticationFailed("无效的令牌")
        
        if payload.get("typ") != ACCESS_TOKEN_TYPE:
            raise AuthenticationFailed("令牌类型不正确")
        
        return TokenClaims(
            username=payload["sub"],
            user_id=payload.get("uid"),
            is_staff=bool(payload.get("staff", False)),
            token_type=payload["typ"],
            issued_at=datetime.fromtimestamp(payload.get("iat", 0), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


class JWTAuthentication(BaseAuthentication):
    """
    DRF认证类。
    从 Authorization: Bearer <token> 头读取令牌，request.auth 为令牌声明。
    """
    
    keyword = "Bearer"
    
    def __init__(self):
        self.jwt_service = JwtService()
    
    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None
        if len(auth) != 2:
            raise AuthenticationFailed("认证头格式不正确")
        
        try:
            token = auth[1].decode()
        except UnicodeError:
            raise AuthenticationFailed("认证头格式不正确")
        
        claims = self.jwt_service.decode(token)
        user_model = get_user_model()
        try:
            user = user_model.objects.get(**{user_model.USERNAME_FIELD: claims.username})
        except user_model.DoesNotExist:
            raise AuthenticationFailed("用户不存在")
        if not user.is_active:
            raise AuthenticationFailed("用户已停用")
        
        return user, claims
    
    def authenticate_header(self, request):
        return self.keyword
