"""Alias operations exposed by the HTTP API."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Mapping

from spellserve.dictionaries import ListItem, Status, StatusError
from spellserve.registry import AliasNotFoundError, NotFoundError


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


def alias_list(registry) -> list[ListItem]:
    """List all dictionaries with their aliases."""
    return [ListItem(item.code, list(item.aliases or [])) for item in registry.list_aliases()]


def alias_get(registry, alias: str) -> str:
    """Return the dictionary code an alias points to."""
    with _translate({NotFoundError: Status.NOT_FOUND, AliasNotFoundError: Status.NOT_FOUND}):
        return registry.get_code_by_alias(alias)


def alias_set(registry, alias: str, dictionary: str) -> None:
    """Point an alias at a dictionary, moving it from any other one."""
    with _translate({AliasNotFoundError: Status.NOT_FOUND}):
        registry.set_alias(alias, dictionary)


def alias_delete(registry, alias: str) -> None:
    """Remove an alias."""
    with _translate({AliasNotFoundError: Status.NOT_FOUND}):
        registry.delete_alias(alias)