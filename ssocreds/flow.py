"""
Login flow: ensure an SSO session, exchange it for role credentials and write
them to the shared credentials file.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional, Union

from .credentials.exchanger import Credentials, get_role_credentials
from .credentials.writer import update_credentials_file
from .exceptions import LoginFailedError
from .login.driver import LoginDriver
from .profiles.models import ResolvedProfile
from .utils.expiry import format_expiration

__all__ = ['login_and_store']

logger = logging.getLogger(__name__)


def login_and_store(profile: ResolvedProfile,
                    driver: Optional[LoginDriver] = None,
                    cancel_event: Optional[threading.Event] = None,
                    credentials_path: Optional[Union[str, Path]] = None,
                    exchange: Callable[[ResolvedProfile], Credentials] = get_role_credentials,
                    ) -> Optional[Credentials]:
    """
    Log in with a profile and store its temporary credentials.

    Args:
        profile: The selected profile
        driver: Login driver, a default LoginDriver if omitted
        cancel_event: Set by the caller to abandon the login
        credentials_path: Credentials file, defaults to get_credentials_path()
        exchange: Turns a logged-in profile into credentials

    Returns:
        Optional[Credentials]: The stored credentials, or None if cancelled

    Raises:
        LoginFailedError: If aws sso login exits unsuccessfully
        ToolNotInstalledError: If the AWS CLI is missing
        CredentialExchangeError: If no credentials could be obtained
        CredentialsFileError: If the credentials file cannot be written
    """
    driver = driver or LoginDriver()

    result = driver.login(profile.name, cancel_event=cancel_event)
    if result.cancelled:
        return None
    if not result.success:
        raise LoginFailedError(profile.name, result.message)

    credentials = exchange(profile)
    update_credentials_file(profile.name, credentials, credentials_path)

    logger.info("Credentials for %s expire in %s", profile.name, format_expiration(credentials.expiration))
    return credentials
