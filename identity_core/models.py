"""
User Model
==========
The account record owned by the credential store.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from identity_core.otp.models import utcnow


@dataclass
class User:
    """A registered account. Rows exist only for verified emails."""
    name: str
    email: str
    password_hash: str = field(repr=False)
    verified: bool = False
    created_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_public(self) -> Dict[str, Any]:
        """Serialize for clients; never includes the password hash."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "verified": self.verified,
            "created_at": self.created_at.isoformat(),
        }
