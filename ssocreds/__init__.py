"""
SSO credential bootstrap utilities.

Discovers AWS SSO profiles, logs in through the AWS CLI and writes short-lived
role credentials into the shared credentials file.
"""

__version__ = "0.1.0"
