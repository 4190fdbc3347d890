"""
Temporary credentials: exchange with the SSO service and persistence to the
shared credentials file.
"""

from .exchanger import Credentials, load_sso_access_token, get_role_credentials
from .writer import render_credentials, update_credentials_file

__all__ = [
    'Credentials',
    'load_sso_access_token',
    'get_role_credentials',
    'render_credentials',
    'update_credentials_file',
]
