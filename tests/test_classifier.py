"""Tests for css2var.classifier."""

from __future__ import annotations

import pytest

from css2var.classifier import TOKEN_LIMIT, classify, image_path
from css2var.models import ValueKind


def test_classify_string_literal_replaces_punctuation() -> None:
    result = classify("'Open Sans'")

    assert result.kind is ValueKind.STRING_LITERAL
    assert result.token == "Open-Sans"


def test_classify_unresolved_preprocessor_reference_uses_name() -> None:
    result = classify("$brand-primary")

    assert result.kind is ValueKind.PREPROCESSOR_REF
    assert result.token == "brand-primary"


def test_classify_resolved_preprocessor_reference_uses_literal() -> None:
    definitions = {"primary": "#FF0000"}

    result = classify("$primary", resolve=definitions.get)

    assert result.kind is ValueKind.PREPROCESSOR_REF
    assert result.token == "FF0000"


def test_classify_gradient_collects_embedded_colors() -> None:
    result = classify("linear-gradient(to right, #ff0000, rgba(0, 255, 0, 0.5))")

    assert result.kind is ValueKind.GRADIENT
    assert result.token == "linear-ff0000rgba0255005"


def test_classify_gradient_token_is_bounded() -> None:
    stops = ", ".join(["rgba(100, 100, 100, 0.25)"] * 6)

    result = classify(f"radial-gradient(circle, {stops})")

    assert result.token.startswith("radial-")
    assert len(result.token) == len("radial-") + TOKEN_LIMIT


def test_classify_gradient_wins_over_quoted_content() -> None:
    result = classify('linear-gradient(#fff, #000), url("texture.png")')

    assert result.kind is ValueKind.GRADIENT
    assert result.token == "linear-fff000"


@pytest.mark.parametrize("value", ["transparent", "Transparent", " TRANSPARENT "])
def test_classify_transparent(value: str) -> None:
    assert classify(value).kind is ValueKind.TRANSPARENT


def test_classify_image_url() -> None:
    result = classify("url(./images/icon.png)")

    assert result.kind is ValueKind.IMAGE_URL
    assert result.asset_path == "./images/icon.png"
    assert result.token == "icon"


def test_classify_image_named_like_a_gradient_is_still_an_image() -> None:
    result = classify("url(gradient-bg.webp)")

    assert result.kind is ValueKind.IMAGE_URL
    assert result.asset_path == "gradient-bg.webp"


def test_classify_plain_strips_hash_and_punctuation() -> None:
    assert classify("#ff0000").token == "ff0000"
    assert classify("rgba(0, 0, 0, 0.5)").token == "rgba00005"
    assert classify("rgba(0, 0, 0, 0.5)").kind is ValueKind.PLAIN


def test_classify_empty_value_degrades_to_empty_token() -> None:
    result = classify("")

    assert result.kind is ValueKind.PLAIN
    assert result.token == ""


def test_image_path_accepts_quoted_and_bare_references() -> None:
    assert image_path('url("assets/bg.jpg")') == "assets/bg.jpg"
    assert image_path("logo.svg?v=2") == "logo.svg"


@pytest.mark.parametrize(
    "value",
    [
        "url(data:image/png;base64,AAAA)",
        "url(https://cdn.example.com/bg.png)",
        "url(/static/bg.png)",
        "url(font.woff2)",
        "#ffffff",
    ],
)
def test_image_path_rejects_non_local_images(value: str) -> None:
    assert image_path(value) is None
