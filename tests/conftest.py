"""
Shared test fixtures and configuration.
"""

import io
import os
import subprocess
import sys
from datetime import datetime, timezone

import pytest

# Add the parent directory to the path so we can import the ssocreds package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ssocreds.credentials.exchanger import Credentials


class FakeProcess:
    """Stand-in for subprocess.Popen with canned output and exit code."""

    def __init__(self, stdout="", stderr="", returncode=0, hang=False):
        self.stdout = io.StringIO(stdout)
        self.stderr = io.StringIO(stderr)
        self.returncode = None
        self._exit_code = returncode
        self.hang = hang
        self.terminated = False
        self.killed = False

    def wait(self, timeout=None):
        if self.hang and not self.terminated:
            raise subprocess.TimeoutExpired("aws", timeout)
        self.returncode = -15 if self.terminated else self._exit_code
        return self.returncode

    def terminate(self):
        self.terminated = True

    def kill(self):
        self.killed = True


@pytest.fixture
def fake_process():
    """Factory for FakeProcess objects."""
    return FakeProcess


@pytest.fixture
def credentials():
    """Sample temporary credentials."""
    return Credentials(
        access_key_id="ASIAEXAMPLE",
        secret_access_key="secret/EXAMPLE",
        session_token="token+EXAMPLE==",
        expiration=datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def aws_home(tmp_path, monkeypatch):
    """Point HOME and the AWS file overrides at a temporary directory."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    monkeypatch.delenv("AWS_CONFIG_FILE", raising=False)
    monkeypatch.delenv("AWS_SHARED_CREDENTIALS_FILE", raising=False)
    monkeypatch.delenv("SSOCREDS_SETTINGS_FILE", raising=False)
    aws_dir = tmp_path / ".aws"
    aws_dir.mkdir()
    return aws_dir
