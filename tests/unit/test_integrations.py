"""
Unit tests for outbound integrations: SMTP email, Razorpay orders and the Redis cache.
Run: pytest tests/unit/test_integrations.py -v
"""
import pytest
import requests
from unittest.mock import MagicMock, Mock, patch

from linkfolio.core.cache import RedisTTLCache
from linkfolio.core.config import settings
from linkfolio.core.errors import PaymentGatewayError
from linkfolio.services import razorpay_service
from linkfolio.services.email_service import EmailService


@pytest.fixture
def smtp_settings(monkeypatch):
    monkeypatch.setattr(settings, "SMTP_USER", "mailer@example.com")
    monkeypatch.setattr(settings, "SMTP_PASSWORD", "pw")


def test_email_not_sent_without_credentials(monkeypatch):
    monkeypatch.setattr(settings, "SMTP_USER", None)
    service = EmailService()
    with patch("linkfolio.services.email_service.smtplib.SMTP_SSL") as smtp:
        assert service.send_team_invite_email("a@example.com", "Acme", "Owner", "tok") is False
    smtp.assert_not_called()


def test_invite_email_renders_link(smtp_settings):
    service = EmailService()
    with patch("linkfolio.services.email_service.smtplib.SMTP_SSL") as smtp:
        server = MagicMock()
        smtp.return_value.__enter__.return_value = server
        assert service.send_team_invite_email("a@example.com", "Acme", "Owner", "tok123") is True

    to_addr = server.sendmail.call_args.args[1]
    assert to_addr == ["a@example.com"]
    html = service._render_template(
        "team_invite.html",
        {"team_name": "Acme", "inviter_name": "Owner", "invite_url": "https://app/invite/tok123", "expiration_days": 7},
    )
    assert "https://app/invite/tok123" in html


def test_credentials_email_smtp_failure_returns_false(smtp_settings):
    import smtplib

    service = EmailService()
    with patch("linkfolio.services.email_service.smtplib.SMTP_SSL", side_effect=smtplib.SMTPException("down")):
        assert service.send_member_credentials_email("a@example.com", None, "Acme", "sam", "tmp") is False


@pytest.fixture
def gateway(monkeypatch):
    monkeypatch.setattr(settings, "RAZORPAY_KEY_ID", "key")
    monkeypatch.setattr(settings, "RAZORPAY_KEY_SECRET", "secret")


def test_create_order_posts_with_basic_auth(gateway):
    response = Mock(status_code=200, content=b"{}")
    response.json.return_value = {"id": "order_1", "amount": 100}
    with patch("linkfolio.services.razorpay_service.requests.post", return_value=response) as post:
        assert razorpay_service.create_order(100, "INR", "rcpt")["id"] == "order_1"
    assert post.call_args.kwargs["auth"] == ("key", "secret")
    assert post.call_args.kwargs["json"]["amount"] == 100
    assert post.call_args.kwargs["timeout"] == 10


def test_create_order_error_status(gateway):
    response = Mock(status_code=401, content=b"")
    with patch("linkfolio.services.razorpay_service.requests.post", return_value=response):
        with pytest.raises(PaymentGatewayError):
            razorpay_service.create_order(100, "INR", "rcpt")


def test_create_order_network_error(gateway):
    with patch("linkfolio.services.razorpay_service.requests.post", side_effect=requests.ConnectionError("x")):
        with pytest.raises(PaymentGatewayError):
            razorpay_service.create_order(100, "INR", "rcpt")


def test_create_order_without_credentials(monkeypatch):
    monkeypatch.setattr(settings, "RAZORPAY_KEY_ID", None)
    with pytest.raises(PaymentGatewayError):
        razorpay_service.create_order(100, "INR", "rcpt")


def test_redis_cache_prefixes_keys_and_uses_ttl():
    cache = RedisTTLCache(5, prefix="usage")
    with patch("linkfolio.core.cache.cache_set") as cache_set, \
            patch("linkfolio.core.cache.cache_get", return_value={"a": 1}) as cache_get, \
            patch("linkfolio.core.cache.cache_delete") as cache_delete:
        cache.set("u1", {"a": 1})
        assert cache.get("u1") == {"a": 1}
        cache.invalidate("u1")

    cache_set.assert_called_once_with("usage:u1", {"a": 1}, ttl=5)
    cache_get.assert_called_once_with("usage:u1")
    cache_delete.assert_called_once_with("usage:u1")
