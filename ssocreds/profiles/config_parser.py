"""
AWS config file parser

Only the subset of the AWS config format needed to find SSO profiles is
understood: bracketed section headers, `key = value` lines and full-line
comments. configparser is not used because real-world config files often
contain lines it rejects (duplicate sections, stray text, continuation lines)
and one bad line must not hide every profile in the file.

Sections are keyed by qualifier and name:

    [profile dev]       -> "profile:dev"
    [sso-session corp]  -> "sso-session:corp"
    [default]           -> "other:default"
"""

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Union

from ..utils.paths import get_config_path

__all__ = [
    'parse_config_text',
    'load_config_sections',
    'section_key',
]

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", ";")

_PROFILE_HEADER = re.compile(r"^\[profile\s+(.+)\]$")
_SSO_SESSION_HEADER = re.compile(r"^\[sso-session\s+(.+)\]$")
_GENERIC_HEADER = re.compile(r"^\[(.+)\]$")
_KEY_VALUE = re.compile(r"^(\S+)\s*=\s*(.+)$")

Sections = Dict[str, Dict[str, str]]


def section_key(qualifier: str, name: str) -> str:
    """Build the composite key used in the section map."""
    return f"{qualifier}:{name}"


def _match_header(line: str) -> Optional[str]:
    match = _PROFILE_HEADER.match(line)
    if match:
        return section_key("profile", match.group(1).strip())

    match = _SSO_SESSION_HEADER.match(line)
    if match:
        return section_key("sso-session", match.group(1).strip())

    match = _GENERIC_HEADER.match(line)
    if match:
        return section_key("other", match.group(1).strip())

    return None


def parse_config_text(text: str) -> Sections:
    """
    Parse AWS config text into a section map.

    A header seen twice starts the section over, so the last occurrence wins.
    Lines outside any section and lines that are neither headers nor
    key/value pairs are ignored.

    Args:
        text: Raw config file content

    Returns:
        Dict[str, Dict[str, str]]: Section key -> key/value pairs, in file order
    """
    sections: Sections = {}
    current: Optional[Dict[str, str]] = None

    for raw_line in text.splitlines():
        line = raw_line.strip()

        # Skip empty lines and comments
        if not line or line.startswith(COMMENT_PREFIXES):
            continue

        key = _match_header(line)
        if key is not None:
            current = sections[key] = {}
            continue

        if current is None:
            continue

        kv = _KEY_VALUE.match(line)
        if kv:
            current[kv.group(1)] = kv.group(2).strip()

    return sections


def load_config_sections(path: Optional[Union[str, Path]] = None) -> Sections:
    """
    Read and parse the AWS config file.

    A missing file is normal and yields an empty map. Any other read failure
    is logged and also yields an empty map; profile discovery never fails
    because of the config file.

    Args:
        path: Config file path, defaults to get_config_path()

    Returns:
        Dict[str, Dict[str, str]]: The parsed sections
    """
    config_path = Path(path) if path is not None else get_config_path()

    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("AWS config file not found at %s", config_path)
        return {}
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Error reading AWS config file %s: %s", config_path, e)
        return {}

    sections = parse_config_text(text)
    logger.debug("Parsed %d section(s) from %s", len(sections), config_path)
    return sections
