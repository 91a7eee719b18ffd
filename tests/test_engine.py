import pytest

from spellserve.engine import (
    DEFAULT_ALPHABET,
    Spellchecker,
    SpellcheckerError,
    SuggestionResult,
)


@pytest.fixture
def checker():
    sc = Spellchecker(DEFAULT_ALPHABET)
    sc.add("hello")
    return sc


def test_duplicate_alphabet_rejected():
    with pytest.raises(SpellcheckerError):
        Spellchecker("aaa")


def test_empty_alphabet_rejected():
    with pytest.raises(SpellcheckerError):
        Spellchecker("")


def test_negative_max_errors_rejected():
    with pytest.raises(SpellcheckerError):
        Spellchecker("abc", -1)


def test_exact_match(checker):
    result = checker.suggest_score("hello", 5)
    assert result.exact_match is True
    assert [s.value for s in result.suggestions] == ["hello"]


def test_suggestion_for_typo(checker):
    result = checker.suggest_score("hellp", 5)
    assert result.exact_match is False
    assert [s.value for s in result.suggestions] == ["hello"]


def test_no_suggestion_for_distant_word(checker):
    result = checker.suggest_score("qwertyuiop", 5)
    assert result == SuggestionResult(False, [])


def test_max_errors_zero_gives_no_suggestions():
    sc = Spellchecker("abc", 0)
    sc.add("abc")
    assert sc.suggest_score("abb", 5).suggestions == []
    assert sc.suggest_score("abc", 5).exact_match is True


def test_weight_orders_suggestions():
    sc = Spellchecker()
    sc.add("cat")
    sc.add_weight(5, "bat")
    values = [s.value for s in sc.suggest_score("rat", 5).suggestions]
    assert values == ["bat", "cat"]


def test_scores_are_descending():
    sc = Spellchecker()
    sc.add_weight(3, "cart", "care")
    sc.add("car")
    suggestions = sc.suggest_score("carx", 10).suggestions
    scores = [s.score for s in suggestions]
    assert scores == sorted(scores, reverse=True)
    assert {s.value for s in suggestions} == {"cart", "care", "car"}


def test_limit_caps_suggestions():
    sc = Spellchecker()
    sc.add("bat", "cat", "hat", "mat")
    assert len(sc.suggest_score("rat", 2).suggestions) == 2
    assert len(sc.suggest_score("rat", 0).suggestions) == 4


def test_add_accumulates_weight():
    sc = Spellchecker()
    sc.add("word")
    sc.add_weight(2, "word")
    assert len(sc) == 1
    assert sc.suggest_score("word", 1).suggestions[0].score == 3.0


def test_negative_weight_rejected():
    with pytest.raises(SpellcheckerError):
        Spellchecker().add_weight(-1, "word")


def test_dump_load_round_trip(checker):
    checker.add_weight(4, "world")
    restored = Spellchecker.load(checker.dump())
    assert restored.alphabet == checker.alphabet
    assert restored.max_errors == checker.max_errors
    assert "world" in restored
    assert restored.suggest_score("wrld", 5) == checker.suggest_score("wrld", 5)


@pytest.mark.parametrize("data", [b"qweqwe", b"[]", b'{"alphabet": 1, "maxErrors": 2}', b""])
def test_load_invalid_data(data):
    with pytest.raises(SpellcheckerError):
        Spellchecker.load(data)