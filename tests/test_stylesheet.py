"""Tests for css2var.stylesheet."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from css2var.stylesheet import CSS, SCSS, Stylesheet, StylesheetParseError, dialect_for


def _parse(text: str, dialect: str = CSS) -> Stylesheet:
    return Stylesheet.parse(textwrap.dedent(text).lstrip("\n"), dialect)


def test_declarations_expose_property_value_and_line() -> None:
    sheet = _parse(
        """
        .button {
          color: #ff0000;
          font-size: 16px
        }
        """
    )

    declarations = list(sheet.declarations())

    assert [(d.property, d.value, d.line) for d in declarations] == [
        ("color", "#ff0000", 2),
        ("font-size", "16px", 3),
    ]
    assert declarations[0].nearest_class() == "button"


def test_rewrite_preserves_everything_but_the_value() -> None:
    source = ".button{color:#ff0000 !important}/* keep 'me' */\n.b { color : 'x' ; }\n"
    sheet = Stylesheet.parse(source)

    first, second = sheet.declarations()
    first.value = "var(--a)"
    second.value = "var(--b)"

    assert first.modified and second.modified
    assert second.value == "var(--b)"
    assert sheet.serialize() == ".button{color:var(--a) !important}/* keep 'me' */\n.b { color : var(--b) ; }\n"


def test_unmodified_document_serializes_verbatim() -> None:
    source = "@media (max-width: 600px) {\n  .a:hover, .b > li { color: red; }\n}\n"

    assert Stylesheet.parse(source).serialize() == source


def test_nested_scss_rules_and_variable_definitions() -> None:
    sheet = _parse(
        """
        $primary: #ff0000;
        .card {
          color: $primary;
          .title {
            color: #0000ff !important;
          }
          &:hover { background-color: #eee }
        }
        """,
        SCSS,
    )

    declarations = {d.line: d for d in sheet.declarations()}

    assert declarations[1].property == "$primary"
    assert declarations[1].value == "#ff0000"
    assert declarations[1].rule is None
    assert declarations[3].value == "$primary"
    assert declarations[5].value == "#0000ff"
    assert declarations[5].nearest_class() == "title"
    assert [rule.prelude for rule in declarations[5].ancestors()] == [".title", ".card"]
    assert declarations[7].property == "background-color"
    assert declarations[7].nearest_class() == "card"


def test_scss_line_comments_are_ignored_but_kept() -> None:
    source = "// don't { break\n.a { color: red; } // trailing\n"
    sheet = Stylesheet.parse(source, SCSS)

    (declaration,) = list(sheet.declarations())
    declaration.value = "var(--red)"

    assert declaration.line == 2
    assert sheet.serialize() == "// don't { break\n.a { color: var(--red); } // trailing\n"


def test_scss_interpolation_does_not_open_a_block() -> None:
    sheet = _parse(
        """
        .icon-#{$name} {
          background: url(./icons/#{$name}.svg);
          color: blue;
        }
        """,
        SCSS,
    )

    declarations = list(sheet.declarations())

    assert [d.property for d in declarations] == ["background", "color"]
    assert declarations[1].nearest_class() == "icon-"


def test_at_rules_without_blocks_are_not_declarations() -> None:
    sheet = _parse(
        """
        @import "theme.css";
        @charset "utf-8";
        .a { color: red; }
        """
    )

    assert [d.property for d in sheet.declarations()] == ["color"]


def test_dollar_properties_are_scss_only() -> None:
    assert list(Stylesheet.parse("$a: 1px;", CSS).declarations()) == []
    assert [d.property for d in Stylesheet.parse("$a: 1px;", SCSS).declarations()] == ["$a"]


def test_unmatched_closing_brace_raises() -> None:
    with pytest.raises(StylesheetParseError):
        Stylesheet.parse(".a { color: red; } }")


def test_dialect_follows_extension() -> None:
    assert dialect_for(Path("a/b.scss")) == SCSS
    assert dialect_for(Path("a/b.SCSS")) == SCSS
    assert dialect_for(Path("a/b.css")) == CSS


def test_crlf_documents_keep_their_line_endings() -> None:
    sheet = Stylesheet.parse(".a {\r\n  color: red;\r\n}\r\n")

    (declaration,) = list(sheet.declarations())
    declaration.value = "var(--red)"

    assert declaration.line == 2
    assert sheet.serialize() == ".a {\r\n  color: var(--red);\r\n}\r\n"


def test_byte_order_mark_is_not_part_of_the_first_property() -> None:
    source = "\ufeff$primary: #f00;\n.a { color: $primary; }\n"
    sheet = Stylesheet.parse(source, SCSS)

    assert [d.property for d in sheet.declarations()] == ["$primary", "color"]
    assert sheet.modified is False
    assert sheet.serialize() == source


def test_custom_property_blocks_are_values_not_rules() -> None:
    sheet = Stylesheet.parse(":root { --brand: { color: red }; }\n.a { color: blue; }\n")

    declarations = list(sheet.declarations())

    assert [(d.property, d.rule.prelude) for d in declarations] == [("--brand", ":root"), ("color", ".a")]
    assert declarations[0].value == "{ color: red }"


def test_load_reads_without_newline_translation(tmp_path: Path) -> None:
    path = tmp_path / "a.css"
    path.write_bytes(b".a {\r\n  color: red;\r\n}\r\n")

    sheet = Stylesheet.load(path)

    assert sheet.newline == "\r\n"
    assert sheet.serialize() == ".a {\r\n  color: red;\r\n}\r\n"
