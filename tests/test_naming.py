"""Tests for css2var.naming."""

from __future__ import annotations

from css2var.classifier import classify
from css2var.models import DeclarationContext
from css2var.naming import NameGenerator, NameRegistry


def _context(folder: str | None = None, selector: str | None = None) -> DeclarationContext:
    return DeclarationContext(source_path="button.css", folder=folder, selector=selector, line=1)


def _generate(generator: NameGenerator, prop: str, value: str, context: DeclarationContext) -> str:
    return generator.generate(prop, value, context, classify(value))


def test_default_name_joins_context_token_and_property() -> None:
    generator = NameGenerator(NameRegistry(), prefix="theme")

    name = _generate(generator, "color", "#ff0000", _context(folder="components", selector="button"))

    assert name == "--theme-components-button-ff0000-color"


def test_default_name_omits_missing_segments() -> None:
    generator = NameGenerator(NameRegistry(), prefix="")

    assert _generate(generator, "color", "#ff0000", _context()) == "--ff0000-color"
    assert _generate(generator, "color", "", _context(selector="x")) == "--x-color"


def test_string_literals_are_marked_in_names() -> None:
    generator = NameGenerator(NameRegistry())

    name = _generate(generator, "font-family", '"Helvetica Neue"', _context())

    assert name == "--var-string-Helvetica-Neue-font-family"


def test_identical_inputs_reuse_the_assigned_name() -> None:
    registry = NameRegistry()
    generator = NameGenerator(registry)
    context = _context(selector="card")

    first = _generate(generator, "color", "#fff", context)
    second = _generate(generator, "color", "#fff", context)

    assert first == second == "--var-card-fff-color"
    assert len(registry) == 1


def test_coincidental_collisions_get_numeric_suffixes() -> None:
    generator = NameGenerator(NameRegistry())
    context = _context(selector="card")

    names = [
        _generate(generator, "color", "rgb(0,0,0)", context),
        _generate(generator, "color", "rgb(0, 0, 0)", context),
        _generate(generator, "color", "rgb( 0, 0, 0 )", context),
    ]

    assert names == ["--var-card-rgb000-color", "--var-card-rgb000-color-1", "--var-card-rgb000-color-2"]


def test_aliases_shorten_property_segment_and_still_collide_safely() -> None:
    generator = NameGenerator(
        NameRegistry(),
        prefix="t",
        aliases={"background-color": "bg", "background": "bg"},
    )

    first = _generate(generator, "background-color", "#000", _context())
    second = _generate(generator, "background", "#000", _context())

    assert first == "--t-000-bg"
    assert second == "--t-000-bg-1"


def test_custom_formatter_replaces_default_and_skips_collision_loop() -> None:
    registry = NameRegistry()
    calls: list[tuple[str, str, DeclarationContext]] = []

    def formatter(prop: str, value: str, context: DeclarationContext) -> str:
        calls.append((prop, value, context))
        return f"--brand-{prop}"

    generator = NameGenerator(registry, formatter=formatter)

    first = _generate(generator, "color", "#111", _context(selector="a"))
    second = _generate(generator, "color", "#222", _context(selector="b"))

    assert first == second == "--brand-color"
    assert "--brand-color" in registry
    assert calls[1][2].selector == "b"


def test_custom_formatter_can_compose_with_default_name() -> None:
    registry = NameRegistry()
    generator = NameGenerator(registry, prefix="ui")

    def formatter(prop: str, value: str, context: DeclarationContext) -> str:
        return generator.default_name(prop, classify(value), context).upper()

    generator.formatter = formatter

    assert _generate(generator, "color", "#abc", _context()) == "--UI-ABC-COLOR"


def test_identity_separates_equal_text_from_different_sources() -> None:
    generator = NameGenerator(NameRegistry())
    context = _context(folder="icons", selector="card")
    value = "url(./logo.png)"

    first = generator.generate("background-image", value, context, classify(value), identity="/a/icons/logo.png")
    again = generator.generate("background-image", value, context, classify(value), identity="/a/icons/logo.png")
    other = generator.generate("background-image", value, context, classify(value), identity="/b/icons/logo.png")

    assert first == again == "--var-icons-card-logo-background-image"
    assert other == "--var-icons-card-logo-background-image-1"
