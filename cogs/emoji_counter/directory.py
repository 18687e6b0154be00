"""
Last-seen display names for users.
"""

import threading
from typing import Optional

DEFAULT_PLACEHOLDER = "User"


class DisplayNameDirectory:
    """
    Maps user ids to the display name they were last seen with.

    Updated for every inbound group message. Lookups never fail: unknown users
    render as the placeholder label.
    """

    def __init__(self, placeholder: str = DEFAULT_PLACEHOLDER):
        self.placeholder = placeholder
        self._names: dict[str, str] = {}
        self._lock = threading.Lock()

    def update(self, user_id: str, name: Optional[str]) -> str:
        """Store a name (or the placeholder if none was available) and return it."""
        stored = name.strip() if name and name.strip() else self.placeholder
        with self._lock:
            self._names[user_id] = stored
        return stored

    def lookup(self, user_id: str) -> str:
        with self._lock:
            return self._names.get(user_id, self.placeholder)

    def known(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._names

    def as_dict(self) -> dict[str, str]:
        with self._lock:
            return dict(self._names)

    def __len__(self) -> int:
        return len(self._names)
