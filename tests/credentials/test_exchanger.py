import hashlib
import json
from datetime import datetime, timezone

import boto3
import pytest
from botocore.stub import Stubber
from ssocreds.credentials.exchanger import Credentials, get_role_credentials, load_sso_access_token
from ssocreds.exceptions import CredentialExchangeError
from ssocreds.profiles import ResolvedProfile

PROFILE = ResolvedProfile(
    name="dev",
    start_url="https://x.awsapps.com/start",
    region="us-west-2",
    account_id="123456789012",
    role_name="DeveloperAccess",
)

SESSION_PROFILE = ResolvedProfile(
    name="prod",
    start_url="https://corp.awsapps.com/start",
    region="eu-west-1",
    account_id="210987654321",
    role_name="ReadOnly",
    sso_session="corp",
)

NOW = datetime(2030, 1, 1, tzinfo=timezone.utc)

def write_token(cache_dir, key, expires_at="2030-01-01T08:00:00Z", token="cached-token"):
    cache_dir.mkdir(parents=True, exist_ok=True)
    name = hashlib.sha1(key.encode("utf-8")).hexdigest() + ".json"
    (cache_dir / name).write_text(json.dumps({
        "startUrl": PROFILE.start_url,
        "region": PROFILE.region,
        "accessToken": token,
        "expiresAt": expires_at,
    }))

@pytest.fixture
def sso_client():
    """SSO client with stubbed responses."""
    client = boto3.client(
        "sso",
        region_name="us-west-2",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber

def test_load_token_by_start_url(tmp_path):
    """Test reading the token cached under the start URL."""
    write_token(tmp_path, PROFILE.start_url)

    assert load_sso_access_token(PROFILE, cache_dir=tmp_path, now=NOW) == "cached-token"

def test_load_token_by_session_name(tmp_path):
    """Test reading the token cached under the sso-session name."""
    write_token(tmp_path, "corp", token="session-token")

    assert load_sso_access_token(SESSION_PROFILE, cache_dir=tmp_path, now=NOW) == "session-token"

def test_load_token_missing(tmp_path):
    """Test a profile that has never logged in."""
    with pytest.raises(CredentialExchangeError, match="no cached SSO token"):
        load_sso_access_token(PROFILE, cache_dir=tmp_path, now=NOW)

def test_load_token_expired(tmp_path):
    """Test a cached token past its expiry."""
    write_token(tmp_path, PROFILE.start_url, expires_at="2029-12-31T23:00:00Z")

    with pytest.raises(CredentialExchangeError, match="expired"):
        load_sso_access_token(PROFILE, cache_dir=tmp_path, now=NOW)

def test_get_role_credentials(sso_client):
    """Test converting GetRoleCredentials output."""
    client, stubber = sso_client
    stubber.add_response(
        "get_role_credentials",
        {
            "roleCredentials": {
                "accessKeyId": "ASIAEXAMPLE",
                "secretAccessKey": "secret",
                "sessionToken": "token",
                "expiration": 1893499200000,
            }
        },
        {"accountId": "123456789012", "roleName": "DeveloperAccess", "accessToken": "tok"},
    )

    credentials = get_role_credentials(PROFILE, access_token="tok", client=client)

    assert credentials == Credentials(
        access_key_id="ASIAEXAMPLE",
        secret_access_key="secret",
        session_token="token",
        expiration=datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc),
    )
    stubber.assert_no_pending_responses()

def test_get_role_credentials_unauthorized(sso_client):
    """Test that service errors are wrapped."""
    client, stubber = sso_client
    stubber.add_client_error(
        "get_role_credentials",
        service_error_code="UnauthorizedException",
        service_message="Session token not found or invalid",
        http_status_code=401,
    )

    with pytest.raises(CredentialExchangeError) as exc_info:
        get_role_credentials(PROFILE, access_token="tok", client=client)

    assert "Session token not found or invalid" in str(exc_info.value)
    assert exc_info.value.profile_name == "dev"

def test_get_role_credentials_reads_cache(aws_home, sso_client):
    """Test that the token comes from the cache when not given."""
    client, stubber = sso_client
    write_token(aws_home / "sso" / "cache", PROFILE.start_url, expires_at="2999-01-01T00:00:00Z")
    stubber.add_response(
        "get_role_credentials",
        {"roleCredentials": {"accessKeyId": "A", "secretAccessKey": "S", "sessionToken": "T",
                             "expiration": 1893499200000}},
        {"accountId": "123456789012", "roleName": "DeveloperAccess", "accessToken": "cached-token"},
    )

    credentials = get_role_credentials(PROFILE, client=client)

    assert credentials.access_key_id == "A"

def test_credentials_repr_masks_secrets():
    """Test that secrets never appear in repr."""
    credentials = Credentials("ASIAEXAMPLE", "topsecret", "sessiontok", NOW)

    text = repr(credentials)

    assert "ASIAEXAMPLE" in text
    assert "topsecret" not in text
    assert "sessiontok" not in text
