"""
Credentials file writer

Rewrites the shared credentials file so that exactly one section holds the
new credentials:

    [dev]
    aws_access_key_id = ASIA...
    aws_secret_access_key = ...
    aws_session_token = ...

An existing section is replaced where it stands; its key lines are dropped,
while its comments and blank lines are kept. A missing section is appended at
the end of the file. Every other line is copied through untouched. The file
is rewritten in place, so an interrupted write can leave it truncated.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from ..exceptions import CredentialsFileError
from ..utils.paths import get_credentials_path
from .exchanger import Credentials

__all__ = [
    'render_credentials',
    'update_credentials_file',
]

logger = logging.getLogger(__name__)

_HEADER = re.compile(r"^\[(.+)\]$")
_KEY_VALUE = re.compile(r"^\S+\s*=\s*.+$")


def _credential_lines(profile_name: str, credentials: Credentials, newline: str) -> List[str]:
    return [
        f"[{profile_name}]{newline}",
        f"aws_access_key_id = {credentials.access_key_id}{newline}",
        f"aws_secret_access_key = {credentials.secret_access_key}{newline}",
        f"aws_session_token = {credentials.session_token}{newline}",
    ]


def _detect_newline(content: str) -> str:
    return "\r\n" if "\r\n" in content else "\n"


def render_credentials(content: str, profile_name: str, credentials: Credentials) -> str:
    """
    Return content with the profile's section set to the given credentials.

    Lines keep their own terminators; inserted lines use the file's line
    ending (CRLF if the file has any, LF otherwise).

    Args:
        content: Current credentials file content ("" if there is none)
        profile_name: Section to replace or append
        credentials: Credentials to write

    Returns:
        str: The new file content
    """
    newline = _detect_newline(content)
    new_lines: List[str] = []
    in_target = False
    found = False

    for line in content.splitlines(keepends=True):
        trimmed = line.strip()

        header = _HEADER.match(trimmed)
        if header:
            in_target = False
            if header.group(1) == profile_name:
                in_target = True
                # A repeated header is folded into the first one
                if not found:
                    new_lines.extend(_credential_lines(profile_name, credentials, newline))
                found = True
                continue

        # Drop the stale key lines of the target section
        if in_target and _KEY_VALUE.match(trimmed):
            continue

        new_lines.append(line)

    if not found:
        if new_lines:
            if not new_lines[-1].endswith(("\n", "\r")):
                new_lines[-1] += newline
            if new_lines[-1].strip() != "":
                new_lines.append(newline)
        new_lines.extend(_credential_lines(profile_name, credentials, newline))

    return "".join(new_lines)


def update_credentials_file(profile_name: str, credentials: Credentials,
                            path: Optional[Union[str, Path]] = None) -> Path:
    """
    Write credentials for a profile into the shared credentials file.

    The file is read and written without newline translation, so untouched
    sections keep their exact bytes on every platform.

    Args:
        profile_name: Section name to write
        credentials: Credentials to write
        path: Credentials file path, defaults to get_credentials_path()

    Returns:
        Path: The file that was written

    Raises:
        CredentialsFileError: If the file cannot be read or written
    """
    credentials_path = Path(path) if path is not None else get_credentials_path()

    try:
        credentials_path.parent.mkdir(parents=True, exist_ok=True)

        content = ""
        if credentials_path.exists():
            with open(credentials_path, 'r', encoding='utf-8', newline='') as f:
                content = f.read()

        with open(credentials_path, 'w', encoding='utf-8', newline='') as f:
            f.write(render_credentials(content, profile_name, credentials))
    except OSError as e:
        raise CredentialsFileError(str(credentials_path), cause=e) from e

    logger.info("Updated profile [%s] in %s", profile_name, credentials_path)
    return credentials_path
