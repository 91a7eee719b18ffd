"""A small weighted spellchecker based on bounded edit distance."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from typing import Optional, Union

DEFAULT_ALPHABET = "abcdefghijklmnopqrstuvwxyz"
DEFAULT_MAX_ERRORS = 2


class SpellcheckerError(ValueError):
    """Raised for an invalid spellchecker configuration or serialized state."""


@dataclass(frozen=True)
class Suggestion:
    value: str
    score: float


@dataclass
class SuggestionResult:
    exact_match: bool = False
    suggestions: list[Suggestion] = field(default_factory=list)


def _bounded_distance(a: str, b: str, bound: int) -> Optional[int]:
    """Levenshtein distance between a and b, or None if it exceeds bound."""
    if abs(len(a) - len(b)) > bound:
        return None
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        if min(current) > bound:
            return None
        previous = current
    distance = previous[-1]
    return distance if distance <= bound else None


class Spellchecker:
    """Dictionary of weighted words that suggests corrections for unknown ones."""

    def __init__(self, alphabet: str = DEFAULT_ALPHABET, max_errors: int = DEFAULT_MAX_ERRORS) -> None:
        if not alphabet:
            raise SpellcheckerError("alphabet must not be empty")
        if len(set(alphabet)) != len(alphabet):
            raise SpellcheckerError("alphabet contains duplicate characters")
        if max_errors < 0:
            raise SpellcheckerError("max errors must not be negative")
        self._alphabet = alphabet
        self._max_errors = max_errors
        self._words: dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def alphabet(self) -> str:
        return self._alphabet

    @property
    def max_errors(self) -> int:
        return self._max_errors

    def __len__(self) -> int:
        with self._lock:
            return len(self._words)

    def __contains__(self, word: object) -> bool:
        with self._lock:
            return word in self._words

    def add(self, *args: str) -> None:
        """Add words with weight 1."""
        self.add_weight(1, *args)

    def add_weight(self, weight: int, *args: str) -> None:
        """Add words, increasing each one's weight by the given amount."""
        if weight < 0:
            raise SpellcheckerError("weight must not be negative")
        with self._lock:
            for word in args:
                if word:
                    self._words[word] = self._words.get(word, 0) + weight

    def suggest_score(self, word: str, limit: int) -> SuggestionResult:
        """Suggest known words close to ``word``, best first.

        At most ``limit`` suggestions are returned; a limit below 1 means no cap.
        """
        with self._lock:
            known = self._words.get(word)
            words = list(self._words.items())
        if known is not None:
            return SuggestionResult(True, [Suggestion(word, float(known))])

        candidates = []
        for candidate, weight in words:
            distance = _bounded_distance(word, candidate, self._max_errors)
            if distance is None:
                continue
            candidates.append(Suggestion(candidate, weight / (distance + 1)))
        candidates.sort(key=lambda s: (-s.score, s.value))
        if limit > 0:
            candidates = candidates[:limit]
        return SuggestionResult(False, candidates)

    def dump(self) -> bytes:
        """Serialize the spellchecker to bytes."""
        with self._lock:
            state = {
                "alphabet": self._alphabet,
                "maxErrors": self._max_errors,
                "words": dict(self._words),
            }
        return json.dumps(state, ensure_ascii=False).encode("utf-8")

    @classmethod
    def load(cls, data: Union[bytes, str]) -> "Spellchecker":
        """Restore a spellchecker produced by :meth:`dump`."""
        try:
            state = json.loads(data)
        except (ValueError, UnicodeDecodeError) as exc:
            raise SpellcheckerError(f"invalid spellchecker data: {exc}") from exc
        if not isinstance(state, dict):
            raise SpellcheckerError("invalid spellchecker data: not an object")
        alphabet = state.get("alphabet")
        max_errors = state.get("maxErrors")
        words = state.get("words", {})
        if not isinstance(alphabet, str):
            raise SpellcheckerError("invalid spellchecker data: bad alphabet")
        if not isinstance(max_errors, int) or isinstance(max_errors, bool):
            raise SpellcheckerError("invalid spellchecker data: bad max errors")
        if not isinstance(words, dict) or not all(
            isinstance(k, str) and isinstance(v, int) and not isinstance(v, bool) and v >= 0
            for k, v in words.items()
        ):
            raise SpellcheckerError("invalid spellchecker data: bad words")
        result = cls(alphabet, max_errors)
        result._words = dict(words)
        return result