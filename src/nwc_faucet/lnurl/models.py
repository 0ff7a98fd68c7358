"""LNURL-pay protocol data models.

- LightningAddress — parsed ``localpart@domain`` (LUD-16)
- PayRequestParams — the ``payRequest`` discovery document (LUD-06)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

PAY_REQUEST_TAG = "payRequest"

# LUD-06 error body: {"status": "ERROR", "reason": "..."}
STATUS_ERROR = "ERROR"

MSAT_PER_SAT = 1000

# Two-part, email-like shape with a dotted domain
_ADDRESS_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True, slots=True)
class LightningAddress:
    """A Lightning Address split into its parts.

    Attributes:
        localpart: Text before the ``@``.
        domain: Text after the ``@``.
        address: The full ``localpart@domain`` string.
    """

    localpart: str
    domain: str
    address: str

    @classmethod
    def from_string(cls, raw: str) -> LightningAddress:
        """Split an address on its first ``@``.

        Only requires both parts to be non-empty; use :meth:`is_valid` for the
        stricter shape check.

        Raises:
            ValueError: If either part is empty or there is no ``@``.
        """
        localpart, sep, domain = raw.partition("@")
        if not sep or not localpart or not domain:
            msg = f"invalid lightning address: {raw!r}"
            raise ValueError(msg)
        return cls(localpart=localpart, domain=domain, address=raw)

    @staticmethod
    def is_valid(raw: str) -> bool:
        """Check ``raw`` looks like ``name@host.tld``."""
        return bool(_ADDRESS_REGEX.match(raw))

    @property
    def well_known_url(self) -> str:
        """The LUD-16 discovery URL for this address."""
        return f"https://{self.domain}/.well-known/lnurlp/{self.localpart}"


@dataclass(slots=True)
class PayRequestParams:
    """LNURL-pay discovery document.

    Attributes:
        tag: Must be ``payRequest``.
        callback: URL to request an invoice from.
        min_sendable: Minimum amount in millisatoshis.
        max_sendable: Maximum amount in millisatoshis.
        metadata: Raw LUD-06 metadata string.
        comment_allowed: Max comment length accepted by the callback (LUD-12).
    """

    tag: str = ""
    callback: str = ""
    min_sendable: int = 0
    max_sendable: int = 0
    metadata: str = ""
    comment_allowed: int = 0

    @property
    def is_pay_request(self) -> bool:
        return self.tag == PAY_REQUEST_TAG

    @property
    def min_sendable_sat(self) -> int:
        """Smallest whole-sat amount not below ``min_sendable``."""
        return -(-self.min_sendable // MSAT_PER_SAT)

    @property
    def max_sendable_sat(self) -> int:
        """Largest whole-sat amount not above ``max_sendable``."""
        return self.max_sendable // MSAT_PER_SAT

    def accepts(self, amount_sat: int) -> bool:
        """Check ``amount_sat`` is within the sendable bounds, inclusive."""
        return self.min_sendable_sat <= amount_sat <= self.max_sendable_sat

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PayRequestParams:
        return cls(
            tag=str(data.get("tag") or ""),
            callback=str(data.get("callback") or ""),
            min_sendable=int(data.get("minSendable") or 0),
            max_sendable=int(data.get("maxSendable") or 0),
            metadata=str(data.get("metadata") or ""),
            comment_allowed=int(data.get("commentAllowed") or 0),
        )
