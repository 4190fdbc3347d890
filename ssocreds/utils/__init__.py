"""
Utility functions shared by the profile, login and credentials modules.
"""

from .paths import get_config_path, get_credentials_path, get_sso_cache_dir, get_settings_path
from .expiry import format_expiration
from .log import configure_logging

__all__ = [
    'get_config_path',
    'get_credentials_path',
    'get_sso_cache_dir',
    'get_settings_path',
    'format_expiration',
    'configure_logging',
]
