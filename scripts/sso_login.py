#!/usr/bin/env python3
"""
AWS SSO Login CLI

A command-line utility that logs in to AWS SSO with a profile and writes the
resulting temporary credentials to ~/.aws/credentials, so tools that only
understand static credentials can use them.
"""

import argparse
import sys
import threading
from pathlib import Path

# Add the parent directory to sys.path to import from ssocreds
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from ssocreds.exceptions import (
    InvalidProfileNameError,
    NoProfilesFoundError,
    SSOCredsError,
    ToolNotInstalledError,
)
from ssocreds.flow import login_and_store
from ssocreds.login import LoginDriver
from ssocreds.profiles import get_sso_profiles
from ssocreds.utils import configure_logging, format_expiration


def format_profile_list(profiles):
    """Format profiles for display."""
    if not profiles:
        return "No AWS SSO profiles found."

    return "\n".join(f"  {i}. {p}" for i, p in enumerate(profiles, start=1))


def choose_profile(profiles, name=None):
    """Pick a profile by name, or ask for one on stdin."""
    if not profiles:
        raise NoProfilesFoundError()

    if name:
        profile = next((p for p in profiles if p.name == name), None)
        if profile is None:
            raise SSOCredsError(f"Profile '{name}' not found")
        return profile

    print("Select an AWS SSO profile:")
    print(format_profile_list(profiles))
    try:
        choice = input("Profile number: ").strip()
    except EOFError:
        return None
    if not choice.isdigit() or not 1 <= int(choice) <= len(profiles):
        return None
    return profiles[int(choice) - 1]


def handle_list(args):
    """Handle the list command."""
    profiles = get_sso_profiles(args.config_file, args.settings_file)
    print("AWS SSO Profiles:")
    print(format_profile_list(profiles))


def handle_login(args):
    """Handle the login command."""
    profiles = get_sso_profiles(args.config_file, args.settings_file)
    profile = choose_profile(profiles, args.profile)
    if profile is None:
        return  # User cancelled

    def show_code(code):
        print(f"\nVerification code: {code}\nConfirm it matches the code shown in your browser.\n")

    def show_output(line):
        # The AWS CLI prints the device authorization URL here
        print(line, file=sys.stderr)

    driver = LoginDriver(on_code=show_code, on_output=show_output)

    print(f"Logging in to AWS SSO profile: {profile.name}")
    cancel_event = threading.Event()
    worker_result = {}

    def run():
        try:
            worker_result["credentials"] = login_and_store(
                profile, driver=driver, cancel_event=cancel_event,
                credentials_path=args.credentials_file,
            )
        except SSOCredsError as e:
            worker_result["error"] = e

    worker = threading.Thread(target=run)
    worker.start()
    try:
        while worker.is_alive():
            worker.join(timeout=0.5)
    except KeyboardInterrupt:
        cancel_event.set()
        worker.join()

    if "error" in worker_result:
        raise worker_result["error"]

    credentials = worker_result.get("credentials")
    if credentials is None:
        print("Login cancelled.")
        return

    print(f"✅ AWS SSO login successful for profile: {profile.name}. "
          f"Credentials will expire in {format_expiration(credentials.expiration)}.")


def main():
    parser = argparse.ArgumentParser(
        description="AWS SSO Login - Write temporary SSO role credentials to ~/.aws/credentials"
    )
    parser.add_argument("--config-file", help="AWS config file (default: $AWS_CONFIG_FILE or ~/.aws/config)")
    parser.add_argument("--settings-file", help="JSON file with extra SSO profiles")
    parser.add_argument("--credentials-file",
                        help="Credentials file (default: $AWS_SHARED_CREDENTIALS_FILE or ~/.aws/credentials)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logs")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # List command
    list_parser = subparsers.add_parser("list", help="List available AWS SSO profiles")
    list_parser.set_defaults(func=handle_list)

    # Login command
    login_parser = subparsers.add_parser("login", help="Log in and write credentials for a profile")
    login_parser.add_argument("profile", nargs="?", help="Profile name (prompts if not specified)")
    login_parser.set_defaults(func=handle_login)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    configure_logging(args.verbose)

    try:
        args.func(args)
    except ToolNotInstalledError as e:
        print(f"❌ {e}")
        print(f"Install it with:\n  {e.install_hint}")
        sys.exit(1)
    except (NoProfilesFoundError, InvalidProfileNameError) as e:
        print(f"❌ {e}")
        sys.exit(1)
    except SSOCredsError as e:
        print(f"❌ AWS SSO login failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
