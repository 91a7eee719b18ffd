"""Dictionary operations exposed by the HTTP API."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Iterator, Mapping, Pattern

from spellserve.registry import AlreadyExistsError, NotFoundError, Options

MAX_ERRORS_LIMIT = 5
DEFAULT_LIMIT = 5

ERROR_UNKNOWN_WORD = "unknown_word"
ERROR_INVALID_WORD = "invalid_word"


class Status(IntEnum):
    """Outcome of an operation, valued as the matching HTTP status code."""

    OK = 200
    INVALID_ARGUMENT = 400
    NOT_FOUND = 404
    ALREADY_EXISTS = 409
    INTERNAL = 500


class StatusError(Exception):
    """An operation failure carrying the status it maps to."""

    def __init__(self, status: Status, message: str = "") -> None:
        super().__init__(message or status.name.lower())
        self.status = status


@contextmanager
def _translate(mapping: Mapping[type, Status]) -> Iterator[None]:
    try:
        yield
    except StatusError:
        raise
    except Exception as exc:
        for error_type, status in mapping.items():
            if isinstance(exc, error_type):
                raise StatusError(status, str(exc)) from exc
        raise StatusError(Status.INTERNAL, str(exc)) from exc


@dataclass
class ListItem:
    code: str
    aliases: list[str] = field(default_factory=list)


@dataclass
class Phrase:
    text: str
    weight: int = 0


@dataclass
class FixSuggestion:
    text: str
    score: float


@dataclass
class Fix:
    start: int
    end: int
    error: str = ""
    suggestions: list[FixSuggestion] = field(default_factory=list)


@dataclass
class Correct:
    start: int
    end: int


@dataclass
class FixResponse:
    fixes: list[Fix] = field(default_factory=list)
    correct: list[Correct] = field(default_factory=list)


def dictionary_list(registry) -> list[ListItem]:
    """List all dictionaries with their aliases."""
    return [ListItem(item.code, list(item.aliases or [])) for item in registry.list()]


def dictionary_create(registry, code: str, alphabet: str, max_errors: int = 0) -> None:
    """Create a new dictionary in the registry."""
    if not code:
        raise StatusError(Status.INVALID_ARGUMENT, "code must not be empty")
    if not alphabet:
        raise StatusError(Status.INVALID_ARGUMENT, "alphabet must not be empty")
    if not 0 <= max_errors <= MAX_ERRORS_LIMIT:
        raise StatusError(
            Status.INVALID_ARGUMENT,
            f"maxErrors must be between 0 and {MAX_ERRORS_LIMIT}",
        )
    with _translate({AlreadyExistsError: Status.ALREADY_EXISTS}):
        registry.add(code, Options(alphabet, max_errors))


def dictionary_delete(registry, code: str) -> None:
    """Remove a dictionary from the registry."""
    with _translate({NotFoundError: Status.NOT_FOUND}):
        registry.delete(code)


def dictionary_save(registry, code: str) -> None:
    """Force a dictionary to be written to disk."""
    with _translate({NotFoundError: Status.NOT_FOUND}):
        registry.save(code)


def dictionary_item_add(registry, splitter: Pattern[str], code: str, phrases: Iterable[Phrase]) -> int:
    """Add the words of each phrase to a dictionary; return how many were added."""
    with _translate({NotFoundError: Status.NOT_FOUND}):
        spellchecker = registry.get(code)

    count = 0
    for phrase in phrases:
        words = [match.group(0) for match in splitter.finditer(phrase.text)]
        if not words:
            continue
        spellchecker.add_weight(phrase.weight or 1, *words)
        count += len(words)
    return count


def dictionary_fix(
    registry, splitter: Pattern[str], code: str, text: str, limit: int = DEFAULT_LIMIT
) -> FixResponse:
    """Check every word of ``text``; positions are character offsets."""
    with _translate({NotFoundError: Status.NOT_FOUND}):
        spellchecker = registry.get(code)

    response = FixResponse()
    if not text:
        return response

    for match in splitter.finditer(text):
        start, end = match.start(), match.end()
        result = spellchecker.suggest_score(match.group(0), limit)
        if result.exact_match:
            response.correct.append(Correct(start, end))
            continue
        if result.suggestions:
            response.fixes.append(
                Fix(
                    start,
                    end,
                    ERROR_INVALID_WORD,
                    [FixSuggestion(s.value, s.score) for s in result.suggestions],
                )
            )
        else:
            response.fixes.append(Fix(start, end, ERROR_UNKNOWN_WORD))
    return response