import pytest
import xxhash

from transbridge.errors import ContractViolationError
from transbridge.utils.hashing import content_hash, stable_id


def test_stable_id_splices_uppercased_locale_at_index_three():
    value = stable_id("Hello world", "es")
    assert value[3:5] == "ES"
    assert len(value) == 18


def test_stable_id_keeps_the_hash_digits_around_the_locale():
    digest = xxhash.xxh3_64_hexdigest("Hello world".encode("utf-8"))
    value = stable_id("Hello world", "fr")
    assert value[:3] + value[5:] == digest


def test_stable_id_for_empty_text():
    # XXH3-64 of empty input is 0x2d06800538d394c2
    assert stable_id("", "es") == "2d0ES6800538d394c2"


def test_stable_id_is_deterministic_and_locale_sensitive():
    assert stable_id("Bonjour", "fr") == stable_id("Bonjour", "FR")
    assert stable_id("Bonjour", "fr") != stable_id("Bonjour", "de")
    assert stable_id("Bonjour", "fr") != stable_id("Bonsoir", "fr")


@pytest.mark.parametrize("locale", ["esp", "e", "", "pt-BR"])
def test_stable_id_rejects_locales_that_are_not_two_characters(locale):
    with pytest.raises(ContractViolationError):
        stable_id("Hola", locale)


def test_content_hash_ignores_key_order():
    assert content_hash({"a": 1, "b": [1, 2]}) == content_hash({"b": [1, 2], "a": 1})


def test_content_hash_changes_with_values():
    assert content_hash({"q": "Hello"}) != content_hash({"q": "Hello "})
    assert content_hash({"q": ["a", "b"]}) != content_hash({"q": ["b", "a"]})
