"""In-memory licence aggregate and the "licences in use" report."""

from datetime import datetime
from typing import Iterator, Optional

from seats.models import Licence, LicenceUser


class LicenceAggregator:
    """Product name to ``Licence`` map rebuilt by every parse pass.

    Only the parse that owns an instance mutates it; readers get a fully
    built instance.
    """

    NO_USERS_MESSAGE = "No licences in use."

    def __init__(self):
        self._licences: dict[str, Licence] = {}

    # ---- Mutation (parsers only) ----

    def register(self, name: str, seats: int = 0) -> Licence:
        """Return the licence for ``name``, creating it with ``seats`` if new.

        An existing licence keeps its seat count.
        """
        licence = self._licences.get(name)
        if licence is None:
            licence = Licence(name=name, seats_available=seats)
            self._licences[name] = licence
        return licence

    def remove(self, name: str) -> bool:
        if name in self._licences:
            del self._licences[name]
            return True
        return False

    def replace(self, other: "LicenceAggregator") -> None:
        """Take over the content of ``other`` in one assignment."""
        self._licences = dict(other._licences)

    # ---- Queries ----

    def get(self, name: str) -> Optional[Licence]:
        return self._licences.get(name)

    def names(self) -> list[str]:
        return list(self._licences)

    def list_all(self) -> list[Licence]:
        return list(self._licences.values())

    def user(self, licence_name: str, user_name: str) -> Optional[LicenceUser]:
        licence = self._licences.get(licence_name)
        if licence is None:
            return None
        return licence.users.get(user_name)

    def users_of(self, name: str, now: Optional[datetime] = None) -> Iterator[str]:
        """Yield ``"<user> [<h>h <m>m]"`` for every current holder of ``name``.

        Always yields at least one item: an unknown product or one without
        holders produces a single placeholder line.
        """
        licence = self._licences.get(name)
        if licence is None or not licence.users:
            yield self.NO_USERS_MESSAGE
            return

        now = now or datetime.now()
        for user in list(licence.users.values()):
            minutes = user.elapsed_minutes(now)
            if minutes is None:
                yield f"{user.name} [unknown]"
            else:
                yield f"{user.name} [{minutes // 60}h {minutes % 60}m]"

    def usage_summary(self, name: str) -> str:
        """One-line usage text, e.g. ``"3 / 10 licences in use."``."""
        licence = self._licences.get(name)
        if licence is None:
            return self.NO_USERS_MESSAGE
        return f"{len(licence.users)} / {licence.seats_available} licences in use."

    def has_free_seat(self, name: str) -> bool:
        licence = self._licences.get(name)
        if licence is None:
            return False
        return licence.seats_available > len(licence.users)

    def to_dict(self) -> dict:
        return {name: lic.to_dict() for name, lic in self._licences.items()}

    def __contains__(self, name) -> bool:
        return name in self._licences

    def __len__(self) -> int:
        return len(self._licences)

    def __iter__(self):
        return iter(self._licences.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, LicenceAggregator):
            return NotImplemented
        return self._licences == other._licences
