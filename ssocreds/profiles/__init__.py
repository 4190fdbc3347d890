"""
SSO profile discovery: config parsing, resolution and merging with the
settings file.
"""

from .models import ResolvedProfile
from .config_parser import parse_config_text, load_config_sections
from .resolver import resolve_profiles, discover_config_profiles
from .merger import merge_profiles, load_settings_profiles, get_sso_profiles

__all__ = [
    'ResolvedProfile',
    'parse_config_text',
    'load_config_sections',
    'resolve_profiles',
    'discover_config_profiles',
    'merge_profiles',
    'load_settings_profiles',
    'get_sso_profiles',
]
