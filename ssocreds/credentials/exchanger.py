"""
Exchanging an SSO session for temporary role credentials.

After `aws sso login` the CLI leaves an access token in ~/.aws/sso/cache,
keyed by the SHA-1 of the sso-session name (or of the start URL for legacy
profiles). botocore's token loader reads that cache; the SSO service's
GetRoleCredentials call then turns the token into a role credential triple.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError, SSOTokenLoadError
from botocore.utils import JSONFileCache, SSOTokenLoader, parse_timestamp

from ..exceptions import CredentialExchangeError
from ..profiles.models import ResolvedProfile
from ..utils.paths import get_sso_cache_dir

__all__ = [
    'Credentials',
    'load_sso_access_token',
    'get_role_credentials',
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """Temporary AWS credentials for one role."""

    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime

    def __repr__(self) -> str:
        return (f"Credentials(access_key_id={self.access_key_id!r}, "
                f"secret_access_key='****', session_token='****', "
                f"expiration={self.expiration.isoformat()!r})")

    __str__ = __repr__


def load_sso_access_token(profile: ResolvedProfile,
                          cache_dir: Optional[Union[str, Path]] = None,
                          now: Optional[datetime] = None) -> str:
    """
    Read the cached SSO access token for a profile.

    Args:
        profile: The profile that was logged in
        cache_dir: Token cache directory, defaults to ~/.aws/sso/cache
        now: Reference time for the expiry check

    Returns:
        str: The access token

    Raises:
        CredentialExchangeError: If no unexpired token is cached
    """
    cache = JSONFileCache(str(cache_dir or get_sso_cache_dir()))
    loader = SSOTokenLoader(cache=cache)

    try:
        token = loader(profile.start_url, session_name=profile.sso_session)
    except SSOTokenLoadError as e:
        raise CredentialExchangeError(profile.name, "no cached SSO token, run aws sso login", cause=e) from e

    expires_at = token.get("expiresAt")
    if expires_at:
        now = now or datetime.now(timezone.utc)
        if parse_timestamp(expires_at) <= now:
            raise CredentialExchangeError(profile.name, "cached SSO token has expired, run aws sso login")

    return token["accessToken"]


def _to_credentials(role_credentials: Dict[str, Any]) -> Credentials:
    # GetRoleCredentials returns the expiration in epoch milliseconds
    expiration = datetime.fromtimestamp(role_credentials["expiration"] / 1000, tz=timezone.utc)
    return Credentials(
        access_key_id=role_credentials["accessKeyId"],
        secret_access_key=role_credentials["secretAccessKey"],
        session_token=role_credentials["sessionToken"],
        expiration=expiration,
    )


def get_role_credentials(profile: ResolvedProfile,
                         access_token: Optional[str] = None,
                         client: Optional[Any] = None) -> Credentials:
    """
    Get temporary credentials for the profile's account and role.

    Args:
        profile: The profile to get credentials for
        access_token: SSO access token, read from the token cache if omitted
        client: boto3 "sso" client, created in the profile's region if omitted

    Returns:
        Credentials: The temporary credentials

    Raises:
        CredentialExchangeError: If the token is missing or the SSO call fails
    """
    if access_token is None:
        access_token = load_sso_access_token(profile)

    if client is None:
        client = boto3.client("sso", region_name=profile.region)

    try:
        response = client.get_role_credentials(
            accountId=profile.account_id,
            roleName=profile.role_name,
            accessToken=access_token,
        )
    except (ClientError, BotoCoreError) as e:
        raise CredentialExchangeError(profile.name, str(e), cause=e) from e

    credentials = _to_credentials(response["roleCredentials"])
    logger.info("Got credentials %s for profile %s", credentials.access_key_id, profile.name)
    return credentials
