"""
Profile data types shared by the resolver, the merger and the login flow.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Fields every settings record must carry, in the camel-case form used on disk.
REQUIRED_SETTINGS_FIELDS = ("name", "startUrl", "region", "accountId", "roleName")


@dataclass(frozen=True)
class ResolvedProfile:
    """An SSO profile with everything needed to request role credentials."""

    name: str
    start_url: str
    region: str
    account_id: str
    role_name: str
    # Name of the [sso-session] block this profile was resolved through
    sso_session: Optional[str] = None

    def __str__(self) -> str:
        """Return string representation of the profile."""
        return f"{self.name} - Account: {self.account_id}, Role: {self.role_name}"

    def to_dict(self) -> Dict[str, str]:
        """Convert to the settings record shape."""
        return {
            "name": self.name,
            "startUrl": self.start_url,
            "region": self.region,
            "accountId": self.account_id,
            "roleName": self.role_name,
        }

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "ResolvedProfile":
        """
        Build a profile from a settings record.

        Args:
            record: Mapping with name, startUrl, region, accountId and roleName

        Returns:
            ResolvedProfile: The profile

        Raises:
            ValueError: If a required field is missing or empty
        """
        missing = [f for f in REQUIRED_SETTINGS_FIELDS if not str(record.get(f) or "").strip()]
        if missing:
            raise ValueError(f"missing required field(s): {', '.join(missing)}")

        return cls(
            name=str(record["name"]).strip(),
            start_url=str(record["startUrl"]).strip(),
            region=str(record["region"]).strip(),
            account_id=str(record["accountId"]).strip(),
            role_name=str(record["roleName"]).strip(),
        )
