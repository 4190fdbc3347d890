"""
Locations of the files ssocreds reads and writes.

The AWS CLI environment overrides (AWS_CONFIG_FILE, AWS_SHARED_CREDENTIALS_FILE)
are honoured so the tool always works on the same files as the CLI it drives.
"""

import os
from pathlib import Path

SETTINGS_FILE_ENV = "SSOCREDS_SETTINGS_FILE"
SETTINGS_FILE_NAME = "sso-login-profiles.json"


def _get_aws_dir() -> Path:
    return Path.home() / ".aws"


def get_config_path() -> Path:
    """Get the path to the AWS config file."""
    override = os.environ.get("AWS_CONFIG_FILE")
    if override:
        return Path(override).expanduser()
    return _get_aws_dir() / "config"


def get_credentials_path() -> Path:
    """Get the path to the AWS credentials file."""
    override = os.environ.get("AWS_SHARED_CREDENTIALS_FILE")
    if override:
        return Path(override).expanduser()
    return _get_aws_dir() / "credentials"


def get_sso_cache_dir() -> Path:
    """Get the path to the AWS SSO token cache directory."""
    return _get_aws_dir() / "sso" / "cache"


def get_settings_path() -> Path:
    """Get the path to the JSON file listing extra SSO profiles."""
    override = os.environ.get(SETTINGS_FILE_ENV)
    if override:
        return Path(override).expanduser()
    return _get_aws_dir() / SETTINGS_FILE_NAME
