"""
Domain model for the authenticated owner of a record set.
"""
from dataclasses import dataclass
from typing import Optional

DEFAULT_DISPLAY_NAME = "User"


@dataclass(frozen=True)
class Owner:
    """
    Identity an operation is performed for.

    ``owner_id`` scopes every stored record. ``email`` and ``display_name``
    are only used for report headers.
    """

    owner_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None

    @property
    def name(self) -> str:
        """Display name, falling back to the email local part, then 'User'."""
        if self.display_name and self.display_name.strip():
            return self.display_name.strip()
        if self.email and "@" in self.email:
            local_part = self.email.split("@", 1)[0]
            if local_part:
                return local_part
        return DEFAULT_DISPLAY_NAME
