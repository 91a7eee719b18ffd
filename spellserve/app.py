"""The HTTP application: dictionary and alias routes plus API docs."""

from __future__ import annotations

import json
import re
from http import HTTPStatus
from typing import Any, Pattern

from flask import Flask, Response, jsonify, request

from spellserve.aliases import alias_delete, alias_get, alias_list, alias_set
from spellserve.dictionaries import (
    DEFAULT_LIMIT,
    Fix,
    ListItem,
    Phrase,
    Status,
    StatusError,
    dictionary_create,
    dictionary_delete,
    dictionary_fix,
    dictionary_item_add,
    dictionary_list,
    dictionary_save,
)

API_TITLE = "Spellchecker"
API_DESCRIPTION = "To fix words"
API_VERSION = "v1"

_RULE_ARGUMENT = re.compile(r"<(?:[^:<>]+:)?([^<>]+)>")


def _invalid(message: str) -> StatusError:
    return StatusError(Status.INVALID_ARGUMENT, message)


def _body() -> dict:
    raw = request.get_data()
    if not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except ValueError as exc:
        raise _invalid(f"invalid JSON body: {exc}") from exc
    if not isinstance(value, dict):
        raise _invalid("request body must be a JSON object")
    return value


def _field(body: dict, name: str, kind: type, default: Any) -> Any:
    value = body.get(name)
    if value is None:
        return default
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _invalid(f"{name} must be an integer")
    elif not isinstance(value, kind):
        raise _invalid(f"{name} must be of type {kind.__name__}")
    return value


def _phrases(body: dict) -> list[Phrase]:
    items = body.get("phrases") or []
    if not isinstance(items, list):
        raise _invalid("phrases must be an array")
    result = []
    for item in items:
        if not isinstance(item, dict):
            raise _invalid("each phrase must be an object")
        weight = _field(item, "weight", int, 0)
        if weight < 0:
            raise _invalid("weight must not be negative")
        result.append(Phrase(_field(item, "text", str, ""), weight))
    return result


def _list_item(item: ListItem) -> dict:
    return {"code": item.code, "aliases": list(item.aliases)}


def _fix(fix: Fix) -> dict:
    data: dict[str, Any] = {"start": fix.start, "end": fix.end, "error": fix.error}
    if fix.suggestions:
        data["suggestions"] = [{"text": s.text, "score": s.score} for s in fix.suggestions]
    return data


def _no_content() -> Response:
    return Response(status=HTTPStatus.NO_CONTENT)


def create_app(registry, splitter: Pattern[str]) -> Flask:
    """Build the WSGI application serving ``registry``."""
    app = Flask("spellserve")

    @app.errorhandler(StatusError)
    def _status_error(exc: StatusError):
        return jsonify({"status": exc.status.name, "error": str(exc)}), int(exc.status)

    @app.get("/v1/dictionaries/", strict_slashes=False)
    def list_dictionaries():
        """List all dictionaries"""
        return jsonify({"items": [_list_item(item) for item in dictionary_list(registry)]})

    @app.post("/v1/dictionaries/<code>")
    def create_dictionary(code: str):
        """Create a new dictionary"""
        body = _body()
        dictionary_create(
            registry,
            code,
            _field(body, "alphabet", str, ""),
            _field(body, "maxErrors", int, 0),
        )
        return _no_content()

    @app.delete("/v1/dictionaries/<code>")
    def delete_dictionary(code: str):
        """Delete a dictionary"""
        dictionary_delete(registry, code)
        return _no_content()

    @app.post("/v1/dictionaries/<code>/save")
    def save_dictionary(code: str):
        """Save a dictionary"""
        dictionary_save(registry, code)
        return _no_content()

    @app.post("/v1/dictionaries/<code>/add")
    def add_to_dictionary(code: str):
        """Add phrases/words to spellchecker"""
        phrases = _phrases(_body())
        words = dictionary_item_add(registry, splitter, code, phrases)
        return jsonify({"words": words})

    @app.post("/v1/dictionaries/<code>/fix")
    def fix_text(code: str):
        """Fix text"""
        body = _body()
        response = dictionary_fix(
            registry,
            splitter,
            code,
            _field(body, "text", str, ""),
            _field(body, "limit", int, DEFAULT_LIMIT),
        )
        return jsonify(
            {
                "fixes": [_fix(fix) for fix in response.fixes],
                "correct": [{"start": c.start, "end": c.end} for c in response.correct],
            }
        )

    @app.get("/v1/aliases/", strict_slashes=False)
    def list_aliases():
        """List all aliases"""
        return jsonify({"items": [_list_item(item) for item in alias_list(registry)]})

    @app.get("/v1/aliases/<alias>")
    def get_alias(alias: str):
        """Get dictionary alias"""
        return jsonify({"dictionary": alias_get(registry, alias)})

    @app.put("/v1/aliases/<alias>")
    def set_alias(alias: str):
        """Set dictionary alias"""
        body = _body()
        alias_set(registry, alias, _field(body, "dictionary", str, ""))
        return _no_content()

    @app.delete("/v1/aliases/<alias>")
    def delete_alias(alias: str):
        """Delete alias from a dictionary"""
        alias_delete(registry, alias)
        return _no_content()

    @app.get("/docs", strict_slashes=False)
    @app.get("/docs/openapi.json")
    def docs():
        """API description"""
        paths: dict[str, dict] = {}
        for rule in app.url_map.iter_rules():
            if not rule.rule.startswith("/v1"):
                continue
            path = _RULE_ARGUMENT.sub(r"{\1}", rule.rule)
            summary = (app.view_functions[rule.endpoint].__doc__ or "").strip()
            for method in sorted((rule.methods or set()) - {"HEAD", "OPTIONS"}):
                paths.setdefault(path, {})[method.lower()] = {"summary": summary}
        return jsonify(
            {
                "openapi": "3.1.0",
                "info": {
                    "title": API_TITLE,
                    "description": API_DESCRIPTION,
                    "version": API_VERSION,
                },
                "paths": paths,
            }
        )

    return app