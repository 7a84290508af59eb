"""
JWT认证测试。
"""
from types import SimpleNamespace

import pytest
from jose import jwt
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.test import APIRequestFactory

from core.infrastructure.authentication import JWTAuthentication, JwtService


@pytest.fixture
def jwt_service():
    return JwtService(secret_key="secret", algorithm="HS256", expiration_seconds=60, leeway_seconds=0)


@pytest.fixture
def token_user():
    return SimpleNamespace(pk=7, is_staff=True, get_username=lambda: "ana")


def test_issue_and_decode(jwt_service, token_user):
    claims = jwt_service.decode(jwt_service.issue(token_user))
    
    assert claims.username == "ana"
    assert claims.user_id == 7
    assert claims.is_staff is True
    assert claims.token_type == "access"
    assert claims.expires_at > claims.issued_at


def test_expired_token_is_rejected(jwt_service, token_user):
    token = jwt_service.issue(token_user, expires_in=-10)
    
    with pytest.raises(AuthenticationFailed, match="过期"):
        jwt_service.decode(token)


def test_token_signed_with_other_key_is_rejected(jwt_service, token_user):
    token = JwtService(secret_key="other", algorithm="HS256").issue(token_user)
    
    with pytest.raises(AuthenticationFailed):
        jwt_service.decode(token)


def test_token_of_wrong_type_is_rejected(jwt_service):
    token = jwt.encode({"sub": "ana", "typ": "refresh", "exp": 4102444800}, "secret", algorithm="HS256")
    
    with pytest.raises(AuthenticationFailed, match="类型"):
        jwt_service.decode(token)


def test_defaults_come_from_settings():
    service = JwtService()
    
    assert service.secret_key == "tienda-test-secret"
    assert service.expiration_seconds == 300


@pytest.mark.django_db
class TestJWTAuthentication:
    
    def _request(self, header=None):
        extra = {"HTTP_AUTHORIZATION": header} if header else {}
        return APIRequestFactory().get("/api/orders/", **extra)
    
    def test_bearer_token_authenticates_user(self, django_user_model):
        user = django_user_model.objects.create_user(username="ana", password="x")
        token = JwtService().issue(user)
        
        authenticated, claims = JWTAuthentication().authenticate(self._request(f"Bearer {token}"))
        
        assert authenticated == user
        assert claims.user_id == user.pk
    
    def test_missing_header_is_anonymous(self):
        assert JWTAuthentication().authenticate(self._request()) is None
    
    def test_unknown_user_is_rejected(self, token_user):
        token = JwtService().issue(token_user)
        
        with pytest.raises(AuthenticationFailed):
            JWTAuthentication().authenticate(self._request(f"Bearer {token}"))
    
    def test_inactive_user_is_rejected(self, django_user_model):
        user = django_user_model.objects.create_user(username="ana", password="x", is_active=False)
        token = JwtService().issue(user)
        
        with pytest.raises(AuthenticationFailed):
            JWTAuthentication().authenticate(self._request(f"Bearer {token}"))
    
    def test_malformed_header_is_rejected(self):
        with pytest.raises(AuthenticationFailed):
            JWTAuthentication().authenticate(self._request("Bearer a b"))
