"""WalletRegistry — in-process index of issued Lightning Addresses.

Filled by provisioning and consulted by top-up before falling back to a
linear scan of the hub's app list. Lives only as long as the process.
"""

from __future__ import annotations


class WalletRegistry:
    """Maps an issued address localpart to the hub app ID it was bound to."""

    def __init__(self) -> None:
        self._apps: dict[str, str] = {}

    def register(self, localpart: str, app_id: str) -> None:
        """Record the app bound to ``localpart``; a later binding wins."""
        self._apps[localpart] = app_id

    def lookup(self, localpart: str) -> str | None:
        """Return the app ID for ``localpart``, if this process issued it."""
        return self._apps.get(localpart)

    def __len__(self) -> int:
        return len(self._apps)

    def __contains__(self, localpart: object) -> bool:
        return localpart in self._apps
