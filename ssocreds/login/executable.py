"""
Locating the AWS CLI.

Editors, cron jobs and GUI launchers often start processes with a minimal
PATH that misses package-manager directories, so the AWS CLI is probed at a
fixed list of locations and the child environment gets those directories
appended.
"""

import logging
import os
import subprocess
import sys
from typing import Dict, List, Mapping, Optional, Sequence

from ..exceptions import ToolNotInstalledError

__all__ = [
    'augment_environment',
    'candidate_executables',
    'install_hint',
    'find_aws_cli',
]

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 10

_EXTRA_PATH_DIRS = {
    "darwin": ["/usr/local/bin", "/opt/homebrew/bin", "~/.local/bin"],
    "linux": ["/usr/local/bin", "/usr/bin", "/snap/bin", "~/.local/bin"],
    "win32": [r"C:\Program Files\Amazon\AWSCLIV2"],
}

_CANDIDATES = {
    "darwin": ["/usr/local/bin/aws", "/opt/homebrew/bin/aws"],
    "linux": ["/usr/local/bin/aws", "/usr/bin/aws", "/snap/bin/aws", "~/.local/bin/aws"],
    "win32": [
        r"C:\Program Files\Amazon\AWSCLIV2\aws.exe",
        r"C:\Program Files (x86)\Amazon\AWSCLIV2\aws.exe",
    ],
}

_INSTALL_HINTS = {
    "darwin": "brew install awscli",
    "linux": ('curl "https://awscli.amazonaws.com/awscli-exe-linux-x86_64.zip" -o awscliv2.zip'
              ' && unzip awscliv2.zip && sudo ./aws/install'),
    "win32": "winget install -e --id Amazon.AWSCLI",
}


def _platform_key(platform: Optional[str] = None) -> str:
    platform = platform or sys.platform
    if platform.startswith("win"):
        return "win32"
    if platform == "darwin":
        return "darwin"
    return "linux"


def augment_environment(env: Mapping[str, str],
                        extra_dirs: Optional[Sequence[str]] = None,
                        platform: Optional[str] = None) -> Dict[str, str]:
    """
    Return a copy of env with common install directories appended to PATH.

    Directories already on PATH are not added again, so applying this twice
    gives the same result as applying it once.

    Args:
        env: Environment to start from (not modified)
        extra_dirs: Directories to add, defaults to the platform's list
        platform: sys.platform style name, defaults to the running platform

    Returns:
        Dict[str, str]: The augmented environment
    """
    key = _platform_key(platform)
    separator = ";" if key == "win32" else ":"
    if extra_dirs is None:
        extra_dirs = _EXTRA_PATH_DIRS[key]

    result = dict(env)
    entries = [p for p in result.get("PATH", "").split(separator) if p]
    for directory in extra_dirs:
        directory = os.path.expanduser(directory)
        if directory not in entries:
            entries.append(directory)

    result["PATH"] = separator.join(entries)
    return result


def candidate_executables(platform: Optional[str] = None) -> List[str]:
    """List the AWS CLI locations to probe, PATH lookup first."""
    key = _platform_key(platform)
    return ["aws"] + [os.path.expanduser(p) for p in _CANDIDATES[key]]


def install_hint(platform: Optional[str] = None) -> str:
    """Get the command that installs the AWS CLI on this platform."""
    return _INSTALL_HINTS[_platform_key(platform)]


def find_aws_cli(env: Optional[Mapping[str, str]] = None,
                 timeout: float = PROBE_TIMEOUT,
                 platform: Optional[str] = None) -> str:
    """
    Find a working AWS CLI executable.

    Each candidate is run with --version; the first one that exits with 0 is
    returned.

    Args:
        env: Environment for the probe, defaults to the augmented os.environ
        timeout: Seconds to wait for each probe
        platform: sys.platform style name, defaults to the running platform

    Returns:
        str: The executable to run

    Raises:
        ToolNotInstalledError: If no candidate responds
    """
    if env is None:
        env = augment_environment(os.environ, platform=platform)

    for candidate in candidate_executables(platform):
        try:
            result = subprocess.run(
                [candidate, "--version"],
                capture_output=True,
                text=True,
                timeout=timeout,
                env=dict(env),
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("AWS CLI probe failed for %s: %s", candidate, e)
            continue

        if result.returncode == 0:
            logger.info("Using AWS CLI at %s: %s", candidate, result.stdout.strip())
            return candidate

    raise ToolNotInstalledError(install_hint(platform))
