import pytest

from onfindr.schemas.business import check_phone, check_website, normalize_phone, normalize_website
from onfindr.services.business_service import slugify


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("07123 456789", "+447123456789"),
        ("07123456789", "+447123456789"),
        ("+44 7123 456789", "+447123456789"),
        ("+447123456789", "+447123456789"),
        ("7123 456789", "+447123456789"),
        ("447123456789", "+447123456789"),
        ("020 7946 0958", "+442079460958"),
        ("(020) 7946-0958", "+442079460958"),
    ],
)
def test_check_phone_accepts_uk_numbers(raw, expected):
    assert check_phone(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["12345", "0712345", "+1 555 123 4567", "00447123456789", "07123 4567890123", "07123-ABC-789"],
)
def test_check_phone_rejects_non_uk_numbers(raw):
    with pytest.raises(ValueError, match="valid UK phone number"):
        check_phone(raw)


@pytest.mark.parametrize("raw", ["07١٢٣٤٥٦٧٨٩", "０７１２３４５６７８９"])
def test_check_phone_rejects_non_ascii_digits(raw):
    with pytest.raises(ValueError, match="valid UK phone number"):
        check_phone(raw)


def test_normalize_phone_drops_non_ascii_digits():
    assert normalize_phone("07123 456789١").isascii()


def test_normalize_phone_passes_through_unrecognized_digits():
    assert normalize_phone("555-0100") == "5550100"
    assert normalize_phone("+1 (555) 010-0100") == "+15550100100"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("example.co.uk", "example.co.uk"),
        ("https://www.example.co.uk", "example.co.uk"),
        ("http://example.com/", "example.com"),
        ("WWW.Example.COM", "example.com"),
        ("joes-cafe.london", "joes-cafe.london"),
    ],
)
def test_check_website_normalizes_to_bare_domain(raw, expected):
    assert check_website(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["localhost", "example", "-bad.com", "bad-.com", "exa mple.com", "example.com/menu", "ftp://example.com"],
)
def test_check_website_rejects_invalid_domains(raw):
    with pytest.raises(ValueError):
        check_website(raw)


def test_check_website_length_limit():
    long_domain = ("a" * 60 + ".") * 2 + "com"
    with pytest.raises(ValueError):
        check_website(long_domain)


@pytest.mark.parametrize("raw", ["https://www.Example.co.uk/", "www.www.example.com", "WWW.www.Example.com"])
def test_normalize_website_is_idempotent(raw):
    once = normalize_website(raw)
    assert normalize_website(once) == once


def test_repeated_www_is_fully_stripped():
    first = check_website("www.www.example.com")
    assert first == "example.com"
    assert check_website(first) == first


@pytest.mark.parametrize(
    "name,slug",
    [
        ("Joe's Cafe", "joe's-cafe"),
        ("  The   Old  Mill ", "the-old-mill"),
        ("joe's-cafe", "joe's-cafe"),
    ],
)
def test_slugify(name, slug):
    assert slugify(name) == slug
