"""
SSO profile resolution

Turns the section map produced by the config parser into ResolvedProfile
objects. A profile resolves if it is either

  * a direct SSO profile (sso_start_url, sso_region, sso_account_id,
    sso_role_name all set on the profile), or
  * linked to an [sso-session] block through sso_session, taking the start
    URL and region from that block and the account and role from the profile.

Role-chaining profiles (source_profile + role_arn) are not resolved; they get
their credentials from another profile, not from SSO.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from .config_parser import Sections, load_config_sections, section_key
from .models import ResolvedProfile

__all__ = [
    'resolve_profiles',
    'discover_config_profiles',
]

logger = logging.getLogger(__name__)

_PROFILE_PREFIX = "profile:"


def _has_values(config: Dict[str, str], *keys: str) -> bool:
    return all(config.get(key, "").strip() for key in keys)


def _resolve_direct(name: str, config: Dict[str, str]) -> Optional[ResolvedProfile]:
    if not _has_values(config, "sso_start_url", "sso_region", "sso_account_id", "sso_role_name"):
        return None

    return ResolvedProfile(
        name=name,
        start_url=config["sso_start_url"],
        region=config["sso_region"],
        account_id=config["sso_account_id"],
        role_name=config["sso_role_name"],
    )


def _resolve_session(name: str, config: Dict[str, str], sections: Sections) -> Optional[ResolvedProfile]:
    if not _has_values(config, "sso_session", "sso_account_id", "sso_role_name"):
        return None

    session_name = config["sso_session"]
    session = sections.get(section_key("sso-session", session_name))
    if session is None or not _has_values(session, "sso_start_url", "sso_region"):
        return None

    return ResolvedProfile(
        name=name,
        start_url=session["sso_start_url"],
        region=session["sso_region"],
        account_id=config["sso_account_id"],
        role_name=config["sso_role_name"],
        sso_session=session_name,
    )


def resolve_profiles(sections: Sections) -> Dict[str, ResolvedProfile]:
    """
    Resolve every SSO profile in a parsed config.

    Args:
        sections: Section map from parse_config_text()

    Returns:
        Dict[str, ResolvedProfile]: Profile name -> profile, in discovery order
    """
    profiles: Dict[str, ResolvedProfile] = {}

    for key, config in sections.items():
        # Only process profile sections
        if not key.startswith(_PROFILE_PREFIX):
            continue

        name = key[len(_PROFILE_PREFIX):]

        profile = _resolve_direct(name, config) or _resolve_session(name, config, sections)
        if profile is not None:
            profiles[name] = profile
        elif _has_values(config, "source_profile", "role_arn"):
            # Role chaining is a known limitation, not a broken profile
            logger.debug("Skipping role-chaining profile %s (source_profile=%s)",
                         name, config["source_profile"])

    return profiles


def discover_config_profiles(path: Optional[Union[str, Path]] = None) -> Dict[str, ResolvedProfile]:
    """
    Read the AWS config file and resolve its SSO profiles.

    Args:
        path: Config file path, defaults to get_config_path()

    Returns:
        Dict[str, ResolvedProfile]: Profile name -> profile
    """
    return resolve_profiles(load_config_sections(path))
