"""A directory-backed registry of named spellcheckers and their aliases."""

from __future__ import annotations

import base64
import binascii
import json
import os
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from spellserve.engine import Spellchecker, SpellcheckerError
from spellserve.logs import get_logger

EXTENSION = ".dict"
METADATA_FILE = "metadata"


class RegistryError(Exception):
    """Base class for registry errors."""


class AlreadyExistsError(RegistryError):
    def __init__(self, message: str = "dictionary already exists") -> None:
        super().__init__(message)


class SpellcheckerInitError(RegistryError):
    def __init__(self, message: str = "spellchecker init err") -> None:
        super().__init__(message)


class NotFoundError(RegistryError):
    def __init__(self, message: str = "dictionary not found") -> None:
        super().__init__(message)


class AliasNotFoundError(RegistryError):
    def __init__(self, message: str = "alias not found") -> None:
        super().__init__(message)


def file_name(code: str) -> str:
    """Name of the file that stores the dictionary ``code``."""
    return code + EXTENSION


@dataclass
class Options:
    alphabet: str = ""
    max_errors: int = 0


def _options_to_dict(options: Options) -> dict:
    return {"alphabet": options.alphabet, "maxErrors": options.max_errors}


def _options_from_dict(value: object) -> Options:
    if value is None:
        return Options()
    if not isinstance(value, dict):
        raise ValueError("options must be an object")
    alphabet = value.get("alphabet") or ""
    max_errors = value.get("maxErrors") or 0
    if not isinstance(alphabet, str):
        raise ValueError("options.alphabet must be a string")
    if not isinstance(max_errors, int) or isinstance(max_errors, bool) or max_errors < 0:
        raise ValueError("options.maxErrors must be a non-negative integer")
    return Options(alphabet, max_errors)


@dataclass
class RegistryItem:
    spellchecker: Optional[Spellchecker] = None
    options: Options = field(default_factory=Options)

    def to_json(self) -> str:
        """Serialize the item; the spellchecker state is base64 encoded."""
        data = self.spellchecker.dump() if self.spellchecker is not None else b""
        return json.dumps(
            {
                "options": _options_to_dict(self.options),
                "spellchecker": base64.b64encode(data).decode("ascii"),
            }
        )

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "RegistryItem":
        """Restore an item; raises ValueError on malformed or empty data."""
        value = json.loads(data)
        if not isinstance(value, dict):
            raise ValueError("registry item must be an object")
        encoded = value.get("spellchecker") or ""
        if not isinstance(encoded, str):
            raise ValueError("spellchecker must be a base64 string")
        try:
            raw = base64.b64decode(encoded, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"invalid spellchecker encoding: {exc}") from exc
        if not raw:
            raise SpellcheckerError("unable to initialize spellchecker with an empty slice")
        spellchecker = Spellchecker.load(raw)
        return cls(spellchecker, _options_from_dict(value.get("options")))


@dataclass
class ListItem:
    code: str
    aliases: list[str] = field(default_factory=list)


@dataclass
class Metadata:
    aliases: dict[str, str] = field(default_factory=dict)
    inverted_aliases: dict[str, list[str]] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps({"aliases": self.aliases, "invertedAliases": self.inverted_aliases})

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "Metadata":
        value = json.loads(data)
        if not isinstance(value, dict):
            raise ValueError("metadata must be an object")
        aliases = value.get("aliases") or {}
        inverted = value.get("invertedAliases") or {}
        if not isinstance(aliases, dict) or not isinstance(inverted, dict):
            raise ValueError("metadata fields must be objects")
        return cls(dict(aliases), {code: list(names or []) for code, names in inverted.items()})


class Registry:
    """Spellcheckers stored as ``<code>.dict`` files in one directory."""

    def __init__(self, directory: Union[str, os.PathLike]) -> None:
        self._dir = Path(directory)
        self._lock = threading.Lock()
        self._items: dict[str, RegistryItem] = {}

        files = self._find_dictionaries()
        self._metadata = self._load_metadata()

        log = get_logger()
        for path in files:
            code = path.name[: -len(EXTENSION)]
            try:
                item = RegistryItem.from_json(path.read_bytes())
            except (OSError, ValueError) as exc:
                log.error(
                    "registry: dictionary load error",
                    extra={"fields": {"code": code, "error": str(exc)}},
                )
                continue
            log.info("registry: loaded dictionary", extra={"fields": {"dictionary": code}})
            self._items[code] = item

    @property
    def directory(self) -> Path:
        return self._dir

    def add(self, code: str, options: Options) -> Spellchecker:
        with self._lock:
            if code in self._items:
                raise AlreadyExistsError()
            try:
                spellchecker = Spellchecker(options.alphabet, options.max_errors)
            except SpellcheckerError as exc:
                raise SpellcheckerInitError() from exc
            self._items[code] = RegistryItem(spellchecker, options)
            return spellchecker

    def get(self, code: str) -> Spellchecker:
        """Look up a dictionary by code or by alias."""
        with self._lock:
            item = self._items.get(code)
            if item is None:
                aliased = self._metadata.aliases.get(code)
                if aliased is None:
                    raise NotFoundError()
                item = self._items.get(aliased)
            if item is None or item.spellchecker is None:
                raise NotFoundError()
            return item.spellchecker

    def delete(self, code: str) -> None:
        with self._lock:
            if code not in self._items:
                raise NotFoundError()
            try:
                os.remove(self._dir / file_name(code))
            except FileNotFoundError:
                pass
            del self._items[code]

    def list(self) -> list[ListItem]:
        with self._lock:
            return [
                ListItem(code, list(self._metadata.inverted_aliases.get(code, [])))
                for code in sorted(self._items)
            ]

    def list_aliases(self) -> list[ListItem]:
        return self.list()

    def get_code_by_alias(self, alias: str) -> str:
        with self._lock:
            try:
                return self._metadata.aliases[alias]
            except KeyError:
                raise AliasNotFoundError() from None

    def set_alias(self, alias: str, to: str) -> None:
        """Point ``alias`` at dictionary ``to``, moving it if already used."""
        with self._lock:
            if to not in self._items:
                raise AliasNotFoundError()
            existing = self._metadata.aliases.get(alias)
            if existing == to:
                return
            if existing is not None:
                self._delete_alias(alias)
            self._metadata.aliases[alias] = to
            self._metadata.inverted_aliases.setdefault(to, []).append(alias)
            self._save_metadata()

    def delete_alias(self, alias: str) -> None:
        with self._lock:
            self._delete_alias(alias)
            self._save_metadata()

    def save(self, code: str) -> None:
        with self._lock:
            self._save(code)

    def save_all(self) -> None:
        """Write the metadata and every dictionary to disk."""
        log = get_logger()
        with self._lock:
            try:
                self._save_metadata()
            except OSError as exc:
                raise RegistryError(f"metadata save: {exc}") from exc
            for code in list(self._items):
                try:
                    self._save(code)
                except OSError as exc:
                    raise RegistryError(f"dictionary {code!r} save: {exc}") from exc
                log.info("registry: dictionary saved", extra={"fields": {"dictionary": code}})

    def auto_save(self, interval: float, stop_event: threading.Event) -> Optional[threading.Thread]:
        """Save everything every ``interval`` seconds until ``stop_event`` is set.

        Returns the background thread, or None when the interval is not positive.
        """
        if interval <= 0:
            return None

        def run() -> None:
            while not stop_event.wait(interval):
                try:
                    self.save_all()
                except RegistryError as exc:
                    get_logger().error(
                        "registry: save all error", extra={"fields": {"error": str(exc)}}
                    )

        thread = threading.Thread(target=run, name="registry-autosave", daemon=True)
        thread.start()
        return thread

    def _delete_alias(self, alias: str) -> None:
        existing = self._metadata.aliases.pop(alias, None)
        if existing is None:
            raise AliasNotFoundError()
        names = self._metadata.inverted_aliases.get(existing, [])
        if alias in names:
            names.remove(alias)
        if not names:
            self._metadata.inverted_aliases.pop(existing, None)

    def _find_dictionaries(self) -> list[Path]:
        with os.scandir(self._dir) as entries:
            return [
                Path(entry.path)
                for entry in entries
                if not entry.is_dir() and entry.name.endswith(EXTENSION)
            ]

    def _load_metadata(self) -> Metadata:
        try:
            data = (self._dir / METADATA_FILE).read_bytes()
        except FileNotFoundError:
            return Metadata()
        return Metadata.from_json(data)

    def _save(self, code: str) -> None:
        item = self._items.get(code)
        if item is None:
            raise NotFoundError()
        self._atomic_write(file_name(code), item.to_json().encode("utf-8"))

    def _save_metadata(self) -> None:
        self._atomic_write(METADATA_FILE, self._metadata.to_json().encode("utf-8"))

    def _atomic_write(self, name: str, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=name + ".tmp-", dir=self._dir)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
        except BaseException:
            os.remove(tmp_name)
            raise
        os.replace(tmp_name, self._dir / name)