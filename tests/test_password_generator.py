import string

import pytest

from keyforge.core.errors import InvalidConfigurationError
from keyforge.core.models import CharacterClassName, GenerationSpec
from keyforge.generators.charsets import EXTENDED_ALPHABET, SYMBOLS, CharacterClassSet
from keyforge.generators.secret import SecretGenerator, password_spec


def _categories(secret):
    return {
        "lower": any(c in string.ascii_lowercase for c in secret),
        "upper": any(c in string.ascii_uppercase for c in secret),
        "digit": any(c in string.digits for c in secret),
        "symbol": any(c in SYMBOLS for c in secret),
        "extended": any(c in EXTENDED_ALPHABET for c in secret),
    }


def test_length_ten_with_every_class_covers_all_categories():
    gen = SecretGenerator()
    for _ in range(50):
        pw = gen.generate_password(password_spec(10))
        assert len(pw) == 10
        assert all(_categories(pw).values())


def test_short_length_truncates_mandatory_parts():
    gen = SecretGenerator()
    for _ in range(30):
        pw = gen.generate_password(password_spec(2))
        assert len(pw) == 2
        # truncation keeps the first parts in canonical order: lowercase, uppercase
        assert sum(c in string.ascii_lowercase for c in pw) == 1
        assert sum(c in string.ascii_uppercase for c in pw) == 1


def test_extended_characters_are_never_fill():
    gen = SecretGenerator()
    for _ in range(30):
        pw = gen.generate_password(password_spec(64))
        assert len(pw) == 64
        assert sum(c in EXTENDED_ALPHABET for c in pw) == 1


def test_single_class_without_unicode():
    gen = SecretGenerator()
    pw = gen.generate_password(
        password_spec(12, lowercase=False, uppercase=False, symbols=False, unicode=False)
    )
    assert len(pw) == 12
    assert pw.isdigit()


def test_fill_only_uses_enabled_classes():
    gen = SecretGenerator()
    pw = gen.generate_password(password_spec(40, digits=False, symbols=False, unicode=False))
    assert set(pw) <= set(string.ascii_letters)


def test_invalid_length_raises():
    gen = SecretGenerator()
    with pytest.raises(InvalidConfigurationError):
        gen.generate_password(password_spec(0))
    with pytest.raises(ValueError):
        gen.generate_password(password_spec(-5))


def test_no_classes_and_no_unicode_raises():
    gen = SecretGenerator()
    with pytest.raises(InvalidConfigurationError):
        gen.generate_password(GenerationSpec(total_length=10, classes=frozenset(), guarantee_unicode=False))


def test_unicode_only_single_character_is_valid():
    gen = SecretGenerator()
    pw = gen.generate_password(GenerationSpec(total_length=1, classes=frozenset(), guarantee_unicode=True))
    assert len(pw) == 1
    assert pw in EXTENDED_ALPHABET


def test_unicode_only_longer_than_one_fills_with_lowercase():
    gen = SecretGenerator()
    for _ in range(20):
        pw = gen.generate_password(
            GenerationSpec(total_length=10, classes=frozenset(), guarantee_unicode=True)
        )
        assert len(pw) == 10
        assert sum(c in EXTENDED_ALPHABET for c in pw) == 1
        assert sum(c in string.ascii_lowercase for c in pw) == 9


def test_character_class_alphabets_are_disjoint():
    classes = list(CharacterClassSet())
    assert [c.name for c in classes] == list(CharacterClassName)
    for i, a in enumerate(classes):
        for b in classes[i + 1:]:
            assert not set(a.alphabet) & set(b.alphabet)


def test_alphabet_for_uses_canonical_order():
    classes = CharacterClassSet()
    combined = classes.alphabet_for([CharacterClassName.DIGIT, CharacterClassName.LOWERCASE])
    assert combined == string.ascii_lowercase + string.digits
    assert CharacterClassSet.label_for("€") == "€ (euro sign)"
