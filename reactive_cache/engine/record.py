"""
Reactive Cache - Cache Record

Unit stored by the engine in both tiers.
"""

import time
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Record:
    """A cached value plus the metadata needed to expire or reclaim it."""

    data: Any
    timestamp: float
    expirable: bool = True
    encrypted: bool = False

    @classmethod
    def now(cls, data: Any, expirable: bool, encrypted: bool) -> "Record":
        return cls(data=data, timestamp=time.time(), expirable=expirable, encrypted=encrypted)

    def has_expired(self, lifetime_seconds: float | None, now: float | None = None) -> bool:
        """Expired once lifetime_seconds have elapsed since it was stored."""
        if lifetime_seconds is None:
            return False
        if now is None:
            now = time.time()
        return now >= self.timestamp + lifetime_seconds

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Record":
        return cls(
            data=payload["data"],
            timestamp=float(payload["timestamp"]),
            expirable=bool(payload.get("expirable", True)),
            encrypted=bool(payload.get("encrypted", False)),
        )
