"""
AWS SSO login driver

Runs `aws sso login --profile NAME` as a child process and reports how it
ended. The AWS CLI owns the SSO token cache: when a valid session already
exists it returns immediately without opening a browser, so no separate
session check is done here.

While the child runs, both output streams are forwarded to the log and
stderr is scanned for the device verification code (e.g. ABCD-EFGH), which
is handed to the caller once so the user can compare it with the code shown
in the browser.
"""

import logging
import os
import re
import signal
import subprocess
import threading
from dataclasses import dataclass
from typing import Callable, IO, List, Optional, Sequence, Tuple

from ..exceptions import InvalidProfileNameError, LoginFailedError, ToolNotInstalledError
from .executable import augment_environment, find_aws_cli, install_hint

__all__ = [
    'LoginResult',
    'LoginDriver',
    'validate_profile_name',
    'extract_verification_code',
    'is_not_installed_error',
    'NOT_INSTALLED_PATTERNS',
    'CHILD_OUTPUT',
]

logger = logging.getLogger(__name__)

PROFILE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
VERIFICATION_CODE_PATTERN = re.compile(r"\b([A-Z0-9]{4}-[A-Z0-9]{4})\b", re.IGNORECASE)

# Lower-case substrings that mean the shell or OS could not find the CLI
NOT_INSTALLED_PATTERNS = (
    "command not found",
    "not recognized",
    "no such file or directory",
)

POLL_INTERVAL = 0.2
TERMINATE_GRACE = 5

# Set on log records that carry a line of the child's output
CHILD_OUTPUT = "child_output"

# Exit statuses of a child stopped by Ctrl-C: shell convention, killed by
# SIGINT, and STATUS_CONTROL_C_EXIT on Windows
INTERRUPTED_EXIT_CODES = (130, -signal.SIGINT, 0xC000013A)


@dataclass
class LoginResult:
    """Outcome of one login attempt."""

    success: bool
    cancelled: bool = False
    verification_code: Optional[str] = None
    message: str = ""


def validate_profile_name(profile_name: str) -> None:
    """
    Reject profile names that could be misread as extra arguments.

    Raises:
        InvalidProfileNameError: If the name has characters outside [A-Za-z0-9_.-]
    """
    if not isinstance(profile_name, str) or not PROFILE_NAME_PATTERN.match(profile_name):
        raise InvalidProfileNameError(profile_name)


def extract_verification_code(text: str) -> Optional[str]:
    """Return the first XXXX-XXXX code in text, or None."""
    match = VERIFICATION_CODE_PATTERN.search(text)
    return match.group(1) if match else None


def is_not_installed_error(text: str, patterns: Sequence[str] = NOT_INSTALLED_PATTERNS) -> bool:
    """
    Decide whether error output means the AWS CLI is missing.

    Args:
        text: stderr output or an exception message
        patterns: Case-insensitive substrings to look for

    Returns:
        bool: True if any pattern occurs in text
    """
    lowered = (text or "").lower()
    return any(pattern.lower() in lowered for pattern in patterns)


class LoginDriver:
    """
    Drives `aws sso login` for one profile at a time.

    Args:
        log: Logger receiving the child's output, defaults to this module's logger
        on_code: Called once with the verification code when it appears
        on_output: Called with every output line, for live display
        locate: Returns the AWS CLI executable for an environment
    """

    def __init__(self,
                 log: Optional[logging.Logger] = None,
                 on_code: Optional[Callable[[str], None]] = None,
                 on_output: Optional[Callable[[str], None]] = None,
                 locate: Callable[..., str] = find_aws_cli):
        self.log = log or logger
        self.on_code = on_code
        self.on_output = on_output
        self.locate = locate

    def login(self, profile_name: str,
              cancel_event: Optional[threading.Event] = None) -> LoginResult:
        """
        Log in to AWS SSO with a profile.

        Args:
            profile_name: Profile to log in with
            cancel_event: Set by the caller to stop the login

        Returns:
            LoginResult: success on exit code 0; cancelled if cancel_event
            was set; otherwise the CLI's error output in message

        Raises:
            InvalidProfileNameError: Before anything is spawned, for a bad name
            ToolNotInstalledError: If the AWS CLI cannot be found or run
            LoginFailedError: If the child process could not be started
        """
        validate_profile_name(profile_name)

        env = augment_environment(os.environ)
        executable = self.locate(env=env)

        if cancel_event is not None and cancel_event.is_set():
            return LoginResult(success=False, cancelled=True)

        cmd = [executable, "sso", "login", "--profile", profile_name]
        self.log.info("Running: %s", " ".join(cmd))

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                env=env,
            )
        except OSError as e:
            if isinstance(e, FileNotFoundError) or is_not_installed_error(str(e)):
                raise ToolNotInstalledError(install_hint(), cause=e) from e
            raise LoginFailedError(profile_name, str(e), cause=e) from e

        session = _LoginSession(self, process)
        session.start()

        returncode = session.wait(cancel_event)
        if returncode is None:
            self.log.info("AWS SSO login for %s cancelled", profile_name)
            return LoginResult(success=False, cancelled=True,
                               verification_code=session.verification_code)

        stderr_text = session.stderr_text()
        if returncode == 0:
            self.log.info("AWS SSO login for %s succeeded", profile_name)
            return LoginResult(success=True, verification_code=session.verification_code,
                               message="SSO login successful")

        self.log.error("AWS SSO login for %s exited with code %d", profile_name, returncode)
        if is_not_installed_error(stderr_text):
            raise ToolNotInstalledError(install_hint())

        return LoginResult(
            success=False,
            verification_code=session.verification_code,
            message=stderr_text.strip() or f"aws sso login exited with code {returncode}",
        )


class _LoginSession:
    """Reader threads and wait loop for one running `aws sso login`."""

    def __init__(self, driver: LoginDriver, process: subprocess.Popen):
        self.driver = driver
        self.process = process
        self.verification_code: Optional[str] = None
        self._stderr_lines: List[str] = []
        self._threads: List[Tuple[threading.Thread, IO[str]]] = []

    def start(self) -> None:
        for stream, is_stderr in ((self.process.stdout, False), (self.process.stderr, True)):
            if stream is None:
                continue
            thread = threading.Thread(target=self._pump, args=(stream, is_stderr), daemon=True)
            thread.start()
            self._threads.append((thread, stream))

    def _pump(self, stream: IO[str], is_stderr: bool) -> None:
        for line in iter(stream.readline, ""):
            line = line.rstrip("\r\n")
            self.driver.log.info("%s%s", "[stderr] " if is_stderr else "", line,
                                 extra={CHILD_OUTPUT: True})
            if self.driver.on_output:
                self.driver.on_output(line)
            if is_stderr:
                self._stderr_lines.append(line)
                self._check_code(line)

    def _check_code(self, line: str) -> None:
        # Only the first code of an invocation is surfaced
        if self.verification_code is not None:
            return
        code = extract_verification_code(line)
        if code:
            self.verification_code = code
            if self.driver.on_code:
                self.driver.on_code(code)

    def wait(self, cancel_event: Optional[threading.Event]) -> Optional[int]:
        """Wait for exit; returns None if cancelled first."""
        while True:
            try:
                returncode = self.process.wait(timeout=POLL_INTERVAL)
                break
            except subprocess.TimeoutExpired:
                if cancel_event is not None and cancel_event.is_set():
                    self._terminate()
                    self._join()
                    return None

        self._join()
        # Ctrl-C reaches the child too, which may exit on its own before
        # the event is seen; that exit is still a cancellation
        if cancel_event is not None and cancel_event.is_set():
            return None
        if returncode in INTERRUPTED_EXIT_CODES:
            return None
        return returncode

    def _terminate(self) -> None:
        self.process.terminate()
        try:
            self.process.wait(timeout=TERMINATE_GRACE)
        except subprocess.TimeoutExpired:
            self.process.kill()
            self.process.wait()

    def _join(self) -> None:
        for thread, stream in self._threads:
            thread.join(timeout=TERMINATE_GRACE)
            # A reader still blocked on the pipe keeps it open
            if not thread.is_alive():
                stream.close()

    def stderr_text(self) -> str:
        return "\n".join(self._stderr_lines)
