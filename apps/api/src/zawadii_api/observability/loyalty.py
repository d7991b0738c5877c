from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from threading import Lock
from typing import Dict


@dataclass
class LoyaltySnapshot:
    activities: Dict[str, int]
    messaging: Dict[str, int]
    rewards: Dict[str, int]

    def as_dict(self) -> Dict[str, object]:
        return {
            "activities": dict(self.activities),
            "messaging": dict(self.messaging),
            "rewards": dict(self.rewards),
        }


class LoyaltyObservabilityStore:
    """In-process counters for purchase recording, SMS dispatch and reward codes."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._activities: Dict[str, int] = defaultdict(int)
        self._messaging: Dict[str, int] = defaultdict(int)
        self._rewards: Dict[str, int] = defaultdict(int)

    def record_activity(self, *, points_awarded: int, walk_in: bool) -> None:
        with self._lock:
            self._activities["recorded"] += 1
            self._activities["points_awarded"] += max(points_awarded, 0)
            self._activities["walk_in" if walk_in else "app_customer"] += 1

    def record_duplicate_rejected(self) -> None:
        with self._lock:
            self._activities["duplicates_rejected"] += 1

    def record_sms(self, kind: str, *, success: bool) -> None:
        with self._lock:
            outcome = "sent" if success else "failed"
            self._messaging[outcome] += 1
            self._messaging[f"{kind}:{outcome}"] += 1

    def record_reward_event(self, event: str, count: int = 1) -> None:
        with self._lock:
            self._rewards[event] += count

    def snapshot(self) -> LoyaltySnapshot:
        with self._lock:
            return LoyaltySnapshot(
                activities=dict(self._activities),
                messaging=dict(self._messaging),
                rewards=dict(self._rewards),
            )

    def reset(self) -> None:
        with self._lock:
            self._activities.clear()
            self._messaging.clear()
            self._rewards.clear()


_STORE = LoyaltyObservabilityStore()


def get_loyalty_store() -> LoyaltyObservabilityStore:
    return _STORE


__all__ = ["get_loyalty_store", "LoyaltyObservabilityStore", "LoyaltySnapshot"]
