"""Command-line entry point that configures and runs the HTTP server."""

from __future__ import annotations

import argparse
import os
import re
import signal
import threading
from pathlib import Path
from socketserver import ThreadingMixIn
from typing import Mapping, Optional, Sequence
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

import regex

from spellserve.app import create_app
from spellserve.logs import get_logger, new_logger, set_logger
from spellserve.registry import Registry, RegistryError

GIT_COMMIT = "dev"
DEFAULT_SERVER_ADDR = "localhost:8011"
DEFAULT_WORD_SPLIT = r"['\pL]+"

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


class ConfigError(ValueError):
    """Raised for invalid configuration taken from the environment."""


def parse_duration(value: str) -> float:
    """Parse a duration such as ``1h30m`` or ``300ms`` into seconds."""
    text = value
    sign = 1.0
    if text[:1] in "+-" and text:
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if text == "0":
        return 0.0
    if not text:
        raise ValueError(f"invalid duration {value!r}")
    total = 0.0
    position = 0
    while position < len(text):
        match = _DURATION_PART.match(text, position)
        if match is None:
            raise ValueError(f"invalid duration {value!r}")
        total += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()
    return sign * total


def init_registry(environ: Optional[Mapping[str, str]] = None) -> tuple[Registry, float]:
    """Open the registry directory and read the autosave interval in seconds."""
    environ = os.environ if environ is None else environ
    directory = environ.get("SPELLCHECKER_DIR", "")
    if not directory:
        raise ConfigError("env SPELLCHECKER_DIR must be provided")
    try:
        Path(directory).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"unable to create dir {directory}: {exc}") from exc

    interval = 0.0
    interval_text = environ.get("SPELLCHECKER_AUTOSAVE_INTERVAL", "")
    if interval_text:
        try:
            interval = parse_duration(interval_text)
        except ValueError as exc:
            raise ConfigError(f"invalid SPELLCHECKER_AUTOSAVE_INTERVAL: {exc}") from exc

    return Registry(directory), interval


def init_word_splitter(environ: Optional[Mapping[str, str]] = None):
    """Compile the pattern that finds words in text."""
    environ = os.environ if environ is None else environ
    value = environ.get("SPELLCHECKER_WORD_SPLIT_REGEXP", "")
    if not value:
        return regex.compile(DEFAULT_WORD_SPLIT)
    try:
        return regex.compile(value)
    except regex.error as exc:
        raise ConfigError(f"invalid SPELLCHECKER_WORD_SPLIT_REGEXP: {exc}") from exc


class _ThreadingServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args) -> None:  # noqa: A002
        get_logger().debug("http request", extra={"fields": {"request": format % args}})


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ConfigError(f"invalid address {address!r}")
    return host.strip("[]"), int(port)


def _serve(registry: Registry, splitter, address: str) -> int:
    log = get_logger()
    try:
        host, port = _split_address(address)
        server = make_server(
            host,
            port,
            create_app(registry, splitter),
            server_class=_ThreadingServer,
            handler_class=_QuietHandler,
        )
    except (ConfigError, OSError) as exc:
        log.error("http server stopped", extra={"fields": {"error": str(exc)}})
        return 1

    stop = threading.Event()
    previous_handlers = {}
    if threading.current_thread() is threading.main_thread():
        for signum in (signal.SIGTERM, signal.SIGINT):
            previous_handlers[signum] = signal.signal(signum, lambda *_: stop.set())

    thread = threading.Thread(target=server.serve_forever, name="http-server", daemon=True)
    thread.start()
    log.info("http server started", extra={"fields": {"address": address}})

    try:
        while not stop.wait(0.2):
            if not thread.is_alive():
                log.error("http server stopped", extra={"fields": {"error": "server loop exited"}})
                return 1
        server.shutdown()
        thread.join(timeout=1.0)
        server.server_close()
    finally:
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    try:
        registry.save_all()
    except RegistryError as exc:
        log.error("registry: save all error", extra={"fields": {"error": str(exc)}})
    return 0


def _run(environ: Mapping[str, str]) -> int:
    log = get_logger()
    try:
        registry, interval = init_registry(environ)
    except (OSError, ValueError) as exc:
        log.error("init spellchecker error", extra={"fields": {"error": str(exc)}})
        return 1

    try:
        splitter = init_word_splitter(environ)
    except ConfigError as exc:
        log.error("init spellchecker error", extra={"fields": {"error": str(exc)}})
        return 1

    autosave_stop = threading.Event()
    registry.auto_save(interval, autosave_stop)
    try:
        address = environ.get("SPELLCHECKER_HTTP_ADDR") or DEFAULT_SERVER_ADDR
        return _serve(registry, splitter, address)
    finally:
        autosave_stop.set()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the spellchecker HTTP server configured from the environment."""
    parser = argparse.ArgumentParser(
        prog="spellserve",
        description="Spellchecker HTTP server configured through SPELLCHECKER_* variables.",
    )
    parser.parse_args(argv)

    previous = get_logger()
    set_logger(new_logger(GIT_COMMIT, os.environ.get("SPELLCHECKER_LOG_LEVEL", "")))
    try:
        return _run(os.environ)
    finally:
        set_logger(previous)