"""
Exception hierarchy for ssocreds.

    SSOCredsError
    ├── NoProfilesFoundError
    ├── InvalidProfileNameError
    ├── ToolNotInstalledError
    ├── LoginFailedError
    ├── CredentialExchangeError
    └── CredentialsFileError

Cancelling a login is not an error and has no exception.
"""

from typing import Optional

__all__ = [
    'SSOCredsError',
    'NoProfilesFoundError',
    'InvalidProfileNameError',
    'ToolNotInstalledError',
    'LoginFailedError',
    'CredentialExchangeError',
    'CredentialsFileError',
]


class SSOCredsError(Exception):
    """Base class for all ssocreds errors.

    Attributes:
        message: Human readable error message
        cause: Underlying exception, if any
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class NoProfilesFoundError(SSOCredsError):
    """No SSO profiles in either the config file or the settings file."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "No AWS SSO profiles found. Please configure profiles in "
               "~/.aws/config or in the settings file."
        )


class InvalidProfileNameError(SSOCredsError):
    """Profile name contains characters outside [A-Za-z0-9_.-]."""

    def __init__(self, profile_name: str):
        super().__init__(f"Invalid profile name: {profile_name!r}")
        self.profile_name = profile_name


class ToolNotInstalledError(SSOCredsError):
    """The AWS CLI could not be found or executed."""

    def __init__(self, install_hint: str, cause: Optional[Exception] = None):
        super().__init__("AWS CLI is not installed or not in PATH", cause)
        self.install_hint = install_hint


class LoginFailedError(SSOCredsError):
    """`aws sso login` ran and failed for a reason other than a missing CLI."""

    def __init__(self, profile_name: str, reason: str, cause: Optional[Exception] = None):
        super().__init__(f"AWS SSO login failed for profile '{profile_name}': {reason}", cause)
        self.profile_name = profile_name
        self.reason = reason


class CredentialExchangeError(SSOCredsError):
    """The SSO session could not be exchanged for role credentials."""

    def __init__(self, profile_name: str, reason: str, cause: Optional[Exception] = None):
        super().__init__(f"Could not get role credentials for profile '{profile_name}': {reason}", cause)
        self.profile_name = profile_name


class CredentialsFileError(SSOCredsError):
    """Reading or writing the shared credentials file failed."""

    def __init__(self, path: str, cause: Optional[Exception] = None):
        super().__init__(f"Could not update credentials file {path}", cause)
        self.path = path
