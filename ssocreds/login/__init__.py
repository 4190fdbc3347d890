"""
AWS SSO login through the AWS CLI.
"""

from .executable import augment_environment, candidate_executables, install_hint, find_aws_cli
from .driver import (
    LoginDriver,
    LoginResult,
    validate_profile_name,
    extract_verification_code,
    is_not_installed_error,
)

__all__ = [
    'augment_environment',
    'candidate_executables',
    'install_hint',
    'find_aws_cli',
    'LoginDriver',
    'LoginResult',
    'validate_profile_name',
    'extract_verification_code',
    'is_not_installed_error',
]
