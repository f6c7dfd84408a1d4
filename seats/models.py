"""Licence and licence-user data model populated by the dialect parsers."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class LicenceUser:
    """A user currently holding one or more seats of a licence."""

    name: str
    seats_in_use: int = 1
    checkout_time: Optional[datetime] = None

    def elapsed_minutes(self, now: Optional[datetime] = None) -> Optional[int]:
        """Whole minutes since checkout, never negative."""
        if self.checkout_time is None:
            return None
        now = now or datetime.now()
        minutes = int((now - self.checkout_time).total_seconds() // 60)
        return max(minutes, 0)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "seats_in_use": self.seats_in_use,
            "checkout_time": self.checkout_time.isoformat() if self.checkout_time else None,
        }


@dataclass
class Licence:
    """Seat capacity and current holders of one product."""

    name: str
    seats_available: int = 0
    users: dict[str, LicenceUser] = field(default_factory=dict)

    @property
    def seats_in_use(self) -> int:
        return sum(u.seats_in_use for u in self.users.values())

    @property
    def free_seats(self) -> int:
        return max(self.seats_available - self.seats_in_use, 0)

    def to_dict(self) -> dict:
        """Serialize licence to dictionary."""
        return {
            "name": self.name,
            "seats_available": self.seats_available,
            "seats_in_use": self.seats_in_use,
            "free_seats": self.free_seats,
            "users": [u.to_dict() for u in self.users.values()],
        }
