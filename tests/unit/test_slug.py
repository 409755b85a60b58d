import pytest

from app.utils.text import slugify, sanitize_text, truncate


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Front Brake Pad Set", "front-brake-pad-set"),
        ("Model Y - 10 - BODY", "model-y-10-body"),
        ("  --Ñandú & Café!!  ", "nandu-cafe"),
        ("HEPA  Filter (2020+)", "hepa-filter-2020"),
        ("", ""),
        ("***", ""),
    ],
)
def test_slugify(value, expected):
    assert slugify(value) == expected


@pytest.mark.parametrize("value", ["Door Handle", "ÁÉÍ óú -- x", "a__b", "-x-", "12 / 34"])
def test_slugify_is_idempotent_and_clean(value):
    slug = slugify(value)

    assert slugify(slug) == slug
    assert not slug.startswith("-") and not slug.endswith("-")
    assert "--" not in slug
    assert all(c.isdigit() or ("a" <= c <= "z") or c == "-" for c in slug)


def test_slugify_none():
    assert slugify(None) == ""


def test_sanitize_text_strips_markup():
    assert sanitize_text("<b>brake</b>") == "bbrakeb"
    assert sanitize_text(None) == ""


def test_truncate():
    assert truncate("abcdef", 3) == "abc"
    assert truncate(None, 3) is None
