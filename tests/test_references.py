import pytest

from media.references import (
    EMPTY_REFERENCE,
    ImageReferenceKind,
    InvalidImageReference,
    is_valid_image_url,
    is_valid_url,
    looks_like_image_url,
    parse_image_reference,
)

INLINE_PNG = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="


@pytest.mark.parametrize(
    "url",
    [
        "http://example.com",
        "https://example.com/path/to/photo.jpg?w=400#top",
        "https://user:pw@sub.example.co.uk:8443/x",
        "ftp://files.example.com/pub/readme.txt",
        "http://127.0.0.1:5000/api",
    ],
)
def test_absolute_urls_are_valid(url):
    assert is_valid_url(url)


@pytest.mark.parametrize(
    "url",
    [
        "",
        "example.com/photo.jpg",
        "//example.com/photo.jpg",
        "/relative/path.png",
        "http://",
        "https:///nohost.png",
        "mailto:someone@example.com",
        "https://exa mple.com/photo.jpg",
        " https://example.com/leading-space.jpg",
        "https://[::1/broken",
        "https://example.com:99999/bad-port",
        "1http://example.com",
    ],
)
def test_urls_without_scheme_or_host_are_invalid(url):
    assert not is_valid_url(url)


@pytest.mark.parametrize("value", [None, 42, 3.5, ["https://example.com"], {"url": "x"}])
def test_non_strings_are_not_urls(value):
    assert not is_valid_url(value)


@pytest.mark.parametrize("value", ["", "   ", None])
def test_empty_photo_is_valid(value):
    assert is_valid_image_url(value)
    assert parse_image_reference(value) == EMPTY_REFERENCE


def test_http_url_is_an_external_reference():
    ref = parse_image_reference("  https://images.unsplash.com/photo-1?w=400  ")
    assert ref.kind is ImageReferenceKind.EXTERNAL_URL
    assert ref.value == "https://images.unsplash.com/photo-1?w=400"
    assert ref.media_type is None


def test_inline_image_data_is_parsed():
    ref = parse_image_reference(INLINE_PNG)
    assert ref.kind is ImageReferenceKind.INLINE_DATA
    assert ref.media_type == "image/png"
    assert is_valid_image_url(INLINE_PNG)


def test_inline_data_with_parameters():
    assert is_valid_image_url("data:image/svg+xml;charset=utf-8;base64,PHN2Zz48L3N2Zz4=")


@pytest.mark.parametrize(
    "value",
    [
        "data:text/plain;base64,aGVsbG8=",
        "data:image/png,not-base64-encoded",
        "data:image/png;base64,",
        "data:image/png;base64,@@@@",
        "data:image/png;base64,abc",
        "ftp://files.example.com/photo.jpg",
        "not a url",
        "www.example.com/photo.jpg",
    ],
)
def test_rejected_image_references(value):
    assert not is_valid_image_url(value)
    with pytest.raises(InvalidImageReference):
        parse_image_reference(value)


def test_non_string_photo_is_rejected():
    with pytest.raises(InvalidImageReference):
        parse_image_reference(12)


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/a/b/photo.JPEG",
        "https://example.com/logo.svg?v=3",
        "https://res.cloudinary.com/demo/image/upload/sample",
        "https://media.licdn.com/dms/image/C4D03AQ/profile",
        "https://avatars.githubusercontent.com/u/1?v=4",
        "data:image/gif;base64,R0lGODlhAQABAAAAACw=",
    ],
)
def test_image_heuristic_hits(url):
    assert looks_like_image_url(url)


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/about",
        "https://notimgur.com.evil.test/x",
        "https://example.com/photo.jpg.html",
    ],
)
def test_image_heuristic_misses(url):
    assert not looks_like_image_url(url)
