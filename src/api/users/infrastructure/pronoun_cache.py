"""Process-wide bidirectional cache of pronoun pairs.

Pronoun pairs are few and immutable once stored, so every request shares one
cache instead of joining the pronouns table on each read.
"""

from __future__ import annotations

import threading

from users.domain.value_objects import Pronouns


class PronounCache:
    """Maps pronoun ids to pairs and pairs back to ids.

    The forward and reverse maps always agree: overwriting an id or a pair
    drops the stale entry in the other direction. Entries are never evicted.

    Example:
        cache = PronounCache()
        cache.set(1, Pronouns("she", "her"))
        cache.get_by_pronouns(Pronouns("she", "her"))  # 1
    """

    def __init__(self) -> None:
        self._by_id: dict[int, Pronouns] = {}
        self._by_pronouns: dict[Pronouns, int] = {}
        self._lock = threading.Lock()

    def set(self, pronoun_id: int, pronouns: Pronouns) -> None:
        """Store a mapping in both directions."""
        with self._lock:
            stale_pronouns = self._by_id.get(pronoun_id)
            if stale_pronouns is not None and stale_pronouns != pronouns:
                del self._by_pronouns[stale_pronouns]

            stale_id = self._by_pronouns.get(pronouns)
            if stale_id is not None and stale_id != pronoun_id:
                del self._by_id[stale_id]

            self._by_id[pronoun_id] = pronouns
            self._by_pronouns[pronouns] = pronoun_id

    def get_by_id(self, pronoun_id: int) -> Pronouns | None:
        """Return the pair stored for an id, or None."""
        with self._lock:
            return self._by_id.get(pronoun_id)

    def get_by_pronouns(self, pronouns: Pronouns) -> int | None:
        """Return the id stored for a pair, or None."""
        with self._lock:
            return self._by_pronouns.get(pronouns)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
