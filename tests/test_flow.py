import pytest
from unittest.mock import MagicMock
from ssocreds.exceptions import CredentialExchangeError, LoginFailedError
from ssocreds.flow import login_and_store
from ssocreds.login.driver import LoginResult
from ssocreds.profiles import ResolvedProfile

PROFILE = ResolvedProfile(
    name="dev",
    start_url="https://x.awsapps.com/start",
    region="us-west-2",
    account_id="123456789012",
    role_name="DeveloperAccess",
)

def make_driver(result):
    driver = MagicMock()
    driver.login.return_value = result
    return driver

def test_login_and_store(tmp_path, credentials):
    """Test the full flow writing credentials."""
    path = tmp_path / "credentials"
    exchange = MagicMock(return_value=credentials)

    stored = login_and_store(PROFILE, driver=make_driver(LoginResult(success=True)),
                             credentials_path=path, exchange=exchange)

    assert stored == credentials
    exchange.assert_called_once_with(PROFILE)
    assert "aws_session_token = token+EXAMPLE==" in path.read_text()

def test_login_and_store_cancelled(tmp_path):
    """Test that cancellation stops the flow quietly."""
    path = tmp_path / "credentials"
    exchange = MagicMock()

    stored = login_and_store(PROFILE, driver=make_driver(LoginResult(success=False, cancelled=True)),
                             credentials_path=path, exchange=exchange)

    assert stored is None
    exchange.assert_not_called()
    assert not path.exists()

def test_login_and_store_login_failed(tmp_path):
    """Test that a failed login raises with the CLI's message."""
    driver = make_driver(LoginResult(success=False, message="Token has expired"))

    with pytest.raises(LoginFailedError, match="Token has expired"):
        login_and_store(PROFILE, driver=driver, credentials_path=tmp_path / "credentials",
                        exchange=MagicMock())

def test_login_and_store_exchange_failed(tmp_path):
    """Test that an exchange failure after a good login propagates."""
    path = tmp_path / "credentials"
    exchange = MagicMock(side_effect=CredentialExchangeError("dev", "ForbiddenException"))

    with pytest.raises(CredentialExchangeError):
        login_and_store(PROFILE, driver=make_driver(LoginResult(success=True)),
                        credentials_path=path, exchange=exchange)

    assert not path.exists()

def test_login_and_store_passes_cancel_event(tmp_path, credentials):
    """Test that the cancel event reaches the driver."""
    driver = make_driver(LoginResult(success=True))
    event = object()

    login_and_store(PROFILE, driver=driver, cancel_event=event,
                    credentials_path=tmp_path / "c", exchange=MagicMock(return_value=credentials))

    driver.login.assert_called_once_with("dev", cancel_event=event)
