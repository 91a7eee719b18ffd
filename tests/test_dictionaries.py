import re

import pytest

from spellserve import registry as reg
from spellserve.dictionaries import (
    Correct,
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
from spellserve.engine import Spellchecker

SPLITTER = re.compile(r"[a-zA-Z]+")


class FakeRegistry:
    def __init__(self, error=None, spellchecker=None, items=None):
        self.error = error
        self.spellchecker = spellchecker
        self.items = items or []
        self.calls = []

    def _record(self, *call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    def add(self, code, options):
        self._record("add", code, options)
        return self.spellchecker

    def delete(self, code):
        self._record("delete", code)

    def save(self, code):
        self._record("save", code)

    def get(self, code):
        self._record("get", code)
        return self.spellchecker

    def list(self):
        return self.items


@pytest.fixture
def hello_checker():
    sc = Spellchecker()
    sc.add("hello")
    return sc


def test_create_success():
    fake = FakeRegistry()
    dictionary_create(fake, "en", "abcdefghijklmnopqrstuvwxyz", 2)
    assert fake.calls == [("add", "en", reg.Options("abcdefghijklmnopqrstuvwxyz", 2))]


@pytest.mark.parametrize(
    "error, status",
    [
        (reg.AlreadyExistsError(), Status.ALREADY_EXISTS),
        (RuntimeError("boom"), Status.INTERNAL),
    ],
)
def test_create_errors(error, status):
    fake = FakeRegistry(error=error)
    with pytest.raises(StatusError) as info:
        dictionary_create(fake, "en", "abcdefghijklmnopqrstuvwxyz", 2)
    assert info.value.status is status


@pytest.mark.parametrize(
    "code, alphabet, max_errors",
    [("en", "", 2), ("", "abc", 2), ("en", "abc", 6), ("en", "abc", -1)],
)
def test_create_invalid_argument(code, alphabet, max_errors):
    fake = FakeRegistry()
    with pytest.raises(StatusError) as info:
        dictionary_create(fake, code, alphabet, max_errors)
    assert info.value.status is Status.INVALID_ARGUMENT
    assert fake.calls == []


def test_create_with_real_registry(tmp_path):
    registry = reg.Registry(tmp_path)
    dictionary_create(registry, "en", "abc", 1)
    assert dictionary_list(registry) == [ListItem("en", [])]
    with pytest.raises(StatusError) as info:
        dictionary_create(registry, "en", "abc", 1)
    assert info.value.status is Status.ALREADY_EXISTS


def test_delete_success():
    fake = FakeRegistry()
    dictionary_delete(fake, "en")
    assert fake.calls == [("delete", "en")]


@pytest.mark.parametrize(
    "error, status",
    [(reg.NotFoundError(), Status.NOT_FOUND), (RuntimeError("boom"), Status.INTERNAL)],
)
def test_delete_errors(error, status):
    with pytest.raises(StatusError) as info:
        dictionary_delete(FakeRegistry(error=error), "xx")
    assert info.value.status is status


def test_save_success():
    fake = FakeRegistry()
    dictionary_save(fake, "en")
    assert fake.calls == [("save", "en")]


@pytest.mark.parametrize(
    "error, status",
    [(reg.NotFoundError(), Status.NOT_FOUND), (RuntimeError("boom"), Status.INTERNAL)],
)
def test_save_errors(error, status):
    with pytest.raises(StatusError) as info:
        dictionary_save(FakeRegistry(error=error), "xx")
    assert info.value.status is status


@pytest.mark.parametrize(
    "items, expected",
    [
        ([], []),
        (
            [reg.ListItem("en", ["eng", "english"])],
            [ListItem("en", ["eng", "english"])],
        ),
        (
            [reg.ListItem("en", ["eng"]), reg.ListItem("fr", ["fra", "french"])],
            [ListItem("en", ["eng"]), ListItem("fr", ["fra", "french"])],
        ),
    ],
)
def test_list(items, expected):
    assert dictionary_list(FakeRegistry(items=items)) == expected


def test_fix_empty_text():
    result = dictionary_fix(FakeRegistry(spellchecker=Spellchecker()), SPLITTER, "en", "", 5)
    assert result.fixes == []
    assert result.correct == []


def test_fix_exact_match(hello_checker):
    result = dictionary_fix(FakeRegistry(spellchecker=hello_checker), SPLITTER, "en", "hello", 5)
    assert result.fixes == []
    assert result.correct == [Correct(0, 5)]


def test_fix_word_with_suggestions(hello_checker):
    result = dictionary_fix(FakeRegistry(spellchecker=hello_checker), SPLITTER, "en", "hellp", 5)
    assert result.correct == []
    assert len(result.fixes) == 1
    fix = result.fixes[0]
    assert (fix.start, fix.end, fix.error) == (0, 5, "invalid_word")
    assert [s.text for s in fix.suggestions] == ["hello"]


def test_fix_word_without_suggestions(hello_checker):
    result = dictionary_fix(
        FakeRegistry(spellchecker=hello_checker), SPLITTER, "en", "qwertyuiop", 5
    )
    assert result.correct == []
    assert len(result.fixes) == 1
    fix = result.fixes[0]
    assert (fix.start, fix.end, fix.error) == (0, 10, "unknown_word")
    assert fix.suggestions == []


def test_fix_offsets_count_characters(hello_checker):
    splitter = re.compile(r"\w+")
    result = dictionary_fix(
        FakeRegistry(spellchecker=hello_checker), splitter, "en", "ёж hello", 5
    )
    assert result.correct == [Correct(3, 8)]
    assert [(f.start, f.end) for f in result.fixes] == [(0, 2)]


@pytest.mark.parametrize(
    "error, status",
    [(reg.NotFoundError(), Status.NOT_FOUND), (RuntimeError("boom"), Status.INTERNAL)],
)
def test_fix_errors(error, status):
    with pytest.raises(StatusError) as info:
        dictionary_fix(FakeRegistry(error=error), SPLITTER, "xx", "hello", 5)
    assert info.value.status is status


def test_item_add_single_phrase_with_weight():
    sc = Spellchecker()
    count = dictionary_item_add(
        FakeRegistry(spellchecker=sc), SPLITTER, "en", [Phrase("hello world", 2)]
    )
    assert count == 2
    assert "hello" in sc and "world" in sc
    assert sc.suggest_score("hello", 5).suggestions[0].score == 2.0


def test_item_add_zero_weight_defaults_to_one():
    sc = Spellchecker()
    count = dictionary_item_add(FakeRegistry(spellchecker=sc), SPLITTER, "en", [Phrase("hi", 0)])
    assert count == 1
    assert sc.suggest_score("hi", 5).suggestions[0].score == 1.0


def test_item_add_phrase_without_words():
    sc = Spellchecker()
    count = dictionary_item_add(FakeRegistry(spellchecker=sc), SPLITTER, "en", [Phrase("!!!", 5)])
    assert count == 0
    assert len(sc) == 0


@pytest.mark.parametrize(
    "error, status",
    [(reg.NotFoundError(), Status.NOT_FOUND), (RuntimeError("boom"), Status.INTERNAL)],
)
def test_item_add_errors(error, status):
    with pytest.raises(StatusError) as info:
        dictionary_item_add(FakeRegistry(error=error), SPLITTER, "xx", [])
    assert info.value.status is status