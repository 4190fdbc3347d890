"""
Combining profiles from the AWS config file and the settings file.

The settings file is a JSON list of records with the fields name, startUrl,
region, accountId and roleName. It lets users define SSO profiles without
editing ~/.aws/config. When a name appears in both sources the config file
wins.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from ..utils.paths import get_settings_path
from .models import ResolvedProfile
from .resolver import discover_config_profiles

__all__ = [
    'merge_profiles',
    'load_settings_profiles',
    'get_sso_profiles',
]

logger = logging.getLogger(__name__)


def merge_profiles(config_profiles: Dict[str, ResolvedProfile],
                   settings_profiles: Iterable[ResolvedProfile]) -> List[ResolvedProfile]:
    """
    Merge config-file profiles over settings profiles.

    Args:
        config_profiles: Profiles resolved from the AWS config file
        settings_profiles: Profiles from the settings file

    Returns:
        List[ResolvedProfile]: One profile per name
    """
    merged: Dict[str, ResolvedProfile] = {p.name: p for p in settings_profiles}
    merged.update(config_profiles)
    return list(merged.values())


def load_settings_profiles(path: Optional[Union[str, Path]] = None) -> List[ResolvedProfile]:
    """
    Load SSO profiles from the JSON settings file.

    Records with a missing or empty required field are skipped with a warning.
    A missing file yields an empty list; an unreadable or malformed file is
    logged and also yields an empty list.

    Args:
        path: Settings file path, defaults to get_settings_path()

    Returns:
        List[ResolvedProfile]: Valid profiles in file order
    """
    settings_path = Path(path) if path is not None else get_settings_path()

    try:
        with open(settings_path, 'r', encoding='utf-8') as f:
            records = json.load(f)
    except FileNotFoundError:
        return []
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Error reading settings file %s: %s", settings_path, e)
        return []

    if not isinstance(records, list):
        logger.error("Settings file %s must contain a JSON list of profiles", settings_path)
        return []

    profiles = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping settings entry %d: not an object", index)
            continue
        try:
            profiles.append(ResolvedProfile.from_dict(record))
        except ValueError as e:
            logger.warning("Skipping settings entry %d: %s", index, e)

    return profiles


def get_sso_profiles(config_path: Optional[Union[str, Path]] = None,
                     settings_path: Optional[Union[str, Path]] = None) -> List[ResolvedProfile]:
    """
    Get all available AWS SSO profiles.

    Both sources are read again on every call.

    Args:
        config_path: AWS config file path, defaults to get_config_path()
        settings_path: Settings file path, defaults to get_settings_path()

    Returns:
        List[ResolvedProfile]: The merged profile set
    """
    return merge_profiles(discover_config_profiles(config_path), load_settings_profiles(settings_path))
