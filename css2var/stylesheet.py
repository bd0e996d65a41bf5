"""Declaration-level view of CSS/SCSS documents built on the tinycss2 tokenizer.

tinycss2 supplies the tokens and block structure. Rules and declarations are
recovered from the token stream (which also covers SCSS nesting and ``$name:``
definitions), and every node is mapped back to its offset in the source
text. Value rewrites are applied as text splices, so everything outside a
replaced value is written back exactly as it was read.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

import tinycss2

CSS = "css"
SCSS = "scss"

_BOM = "\ufeff"
_TRIVIA = frozenset({"whitespace", "comment"})
_CLASS_RE = re.compile(r"\.(-?[_a-zA-Z][\w-]*)")


class StylesheetParseError(ValueError):
    """Raised when a document cannot be split into rules and declarations."""


def dialect_for(path: Path) -> str:
    """Return the syntax dialect implied by a file extension."""
    return SCSS if path.suffix.lower() == ".scss" else CSS


class Rule:
    """A block-bearing statement: a selector rule or an at-rule with a body."""

    def __init__(self, prelude: str, line: int, parent: Optional["Rule"] = None) -> None:
        self.prelude = prelude
        self.line = line
        self.parent = parent

    def __repr__(self) -> str:
        return f"Rule({self.prelude!r}, line={self.line})"

    def chain(self) -> Iterator["Rule"]:
        """Yield this rule and its ancestors, innermost first."""
        rule: Optional[Rule] = self
        while rule is not None:
            yield rule
            rule = rule.parent

    def class_name(self) -> Optional[str]:
        if self.prelude.startswith("@"):
            return None
        match = _CLASS_RE.search(self.prelude)
        return match.group(1) if match else None


class Declaration:
    """A ``property: value`` pair with a mutable value."""

    def __init__(
        self,
        sheet: "Stylesheet",
        property_name: str,
        line: int,
        rule: Optional[Rule],
        start: int,
        end: int,
    ) -> None:
        self.property = property_name
        self.line = line
        self.rule = rule
        self._sheet = sheet
        self._start = start
        self._end = end
        self._replacement: Optional[str] = None

    def __repr__(self) -> str:
        return f"Declaration({self.property!r}, {self.value!r}, line={self.line})"

    @property
    def value(self) -> str:
        if self._replacement is not None:
            return self._replacement
        return self._sheet.text[self._start : self._end]

    @value.setter
    def value(self, new_value: str) -> None:
        self._replacement = new_value

    @property
    def modified(self) -> bool:
        return self._replacement is not None

    def ancestors(self) -> List[Rule]:
        """Return the enclosing rules, innermost first."""
        return list(self.rule.chain()) if self.rule is not None else []

    def nearest_class(self) -> Optional[str]:
        """Return the first class name found walking up the enclosing rules."""
        for rule in self.ancestors():
            name = rule.class_name()
            if name:
                return name
        return None


class Stylesheet:
    """A parsed document supporting declaration iteration and re-serialization."""

    def __init__(self, text: str, dialect: str = CSS, *, newline: str = "\n", bom: str = "") -> None:
        self.text = text
        self.dialect = dialect
        self.newline = newline
        self.bom = bom
        self.rules: List[Rule] = []
        self._declarations: List[Declaration] = []

    @classmethod
    def parse(cls, text: str, dialect: str = CSS) -> "Stylesheet":
        """Parse ``text``; raises :class:`StylesheetParseError` on unmatched brackets."""
        bom = _BOM if text.startswith(_BOM) else ""
        text = text[len(bom) :]
        newline = _newline_style(text)
        text = _normalise_newlines(text)
        sheet = cls(text, dialect, newline=newline, bom=bom)
        source = _mask_line_comments(text) if dialect == SCSS else text
        nodes = tinycss2.parse_component_value_list(source, skip_comments=False)
        _TreeBuilder(sheet).walk(nodes, len(text), None)
        return sheet

    @classmethod
    def load(cls, path: Path) -> "Stylesheet":
        with path.open(encoding="utf-8", newline="") as handle:
            return cls.parse(handle.read(), dialect_for(path))

    @property
    def modified(self) -> bool:
        return any(declaration.modified for declaration in self._declarations)

    def declarations(self) -> Iterator[Declaration]:
        """Yield every declaration in document order, nested ones included."""
        return iter(list(self._declarations))

    def serialize(self) -> str:
        """Return the document with replacements applied, in its original newline style."""
        pieces: List[str] = []
        cursor = 0
        for declaration in self._declarations:
            if declaration._replacement is None:
                continue
            pieces.append(self.text[cursor : declaration._start])
            pieces.append(declaration._replacement)
            cursor = declaration._end
        pieces.append(self.text[cursor:])
        text = "".join(pieces)
        if self.newline != "\n":
            text = text.replace("\n", self.newline)
        return self.bom + text


class _TreeBuilder:
    def __init__(self, sheet: Stylesheet) -> None:
        self.sheet = sheet
        self.line_starts = [0]
        for index, char in enumerate(sheet.text):
            if char == "\n":
                self.line_starts.append(index + 1)

    def offset(self, node) -> int:
        return self.line_starts[node.source_line - 1] + node.source_column - 1

    def walk(self, nodes: Sequence, end: int, parent: Optional[Rule]) -> None:
        starts = [self.offset(node) for node in nodes]
        ends = starts[1:] + [end]
        statement: List[int] = []
        for index, node in enumerate(nodes):
            if node.type == "error" and node.kind in ")]}":
                raise StylesheetParseError(f"line {node.source_line}: {node.message}")
            if node.type == "literal" and node.value == ";":
                self.declaration(nodes, statement, starts, ends, parent)
                statement = []
            elif (
                node.type == "{} block"
                and not _is_interpolation(nodes, index)
                and not _in_custom_property(nodes, statement)
            ):
                self.rule(nodes, statement, starts, ends, index, parent)
                statement = []
            else:
                statement.append(index)
        if statement:
            self.declaration(nodes, statement, starts, ends, parent)

    def rule(
        self,
        nodes: Sequence,
        statement: List[int],
        starts: List[int],
        ends: List[int],
        block_index: int,
        parent: Optional[Rule],
    ) -> None:
        block = nodes[block_index]
        significant = [i for i in statement if nodes[i].type not in _TRIVIA]
        prelude_start = starts[significant[0]] if significant else starts[block_index]
        prelude = self.sheet.text[prelude_start : starts[block_index]].strip()
        line = nodes[significant[0]].source_line if significant else block.source_line
        rule = Rule(prelude, line, parent)
        self.sheet.rules.append(rule)

        block_end = ends[block_index]
        if self.sheet.text[block_end - 1 : block_end] == "}":
            block_end -= 1
        self.walk(block.content, block_end, rule)

    def declaration(
        self,
        nodes: Sequence,
        statement: List[int],
        starts: List[int],
        ends: List[int],
        parent: Optional[Rule],
    ) -> None:
        significant = [i for i in statement if nodes[i].type not in _TRIVIA]
        if not significant or not self._starts_property(nodes, significant):
            return
        colon = next(
            (i for i in significant if nodes[i].type == "literal" and nodes[i].value == ":"),
            None,
        )
        if colon is None:
            return

        property_name = self.sheet.text[starts[significant[0]] : starts[colon]].strip()
        value = [i for i in significant if i > colon]
        if (
            len(value) >= 2
            and nodes[value[-1]].type == "ident"
            and nodes[value[-1]].lower_value == "important"
            and nodes[value[-2]].type == "literal"
            and nodes[value[-2]].value == "!"
        ):
            value = value[:-2]

        if value:
            start, end = starts[value[0]], ends[value[-1]]
        else:
            start = end = ends[colon]

        self.sheet._declarations.append(
            Declaration(
                self.sheet,
                property_name,
                nodes[significant[0]].source_line,
                parent,
                start,
                end,
            )
        )

    def _starts_property(self, nodes: Sequence, significant: List[int]) -> bool:
        first = nodes[significant[0]]
        if first.type == "ident":
            return True
        if self.sheet.dialect != SCSS or len(significant) < 2:
            return False
        second = nodes[significant[1]]
        return (
            first.type == "literal"
            and first.value == "$"
            and second.type == "ident"
            and self.offset(second) == self.offset(first) + 1
        )


def _is_interpolation(nodes: Sequence, index: int) -> bool:
    if index == 0:
        return False
    previous = nodes[index - 1]
    return previous.type == "literal" and previous.value == "#"


def _in_custom_property(nodes: Sequence, statement: List[int]) -> bool:
    # `--name: { ... }` holds a block as its value, not a nested rule.
    significant = [nodes[i] for i in statement if nodes[i].type not in _TRIVIA]
    if len(significant) < 2:
        return False
    first, second = significant[0], significant[1]
    return (
        first.type == "ident"
        and first.value.startswith("--")
        and second.type == "literal"
        and second.value == ":"
    )


def _newline_style(text: str) -> str:
    if "\r\n" in text:
        return "\r\n"
    if "\r" in text:
        return "\r"
    return "\n"


def _normalise_newlines(text: str) -> str:
    # Mirrors the tokenizer's own preprocessing so node positions line up.
    return (
        text.replace("\0", "\uFFFD")
        .replace("\r\n", "\n")
        .replace("\r", "\n")
        .replace("\f", "\n")
    )


def _mask_line_comments(text: str) -> str:
    """Blank out ``//`` comments, keeping every offset intact."""
    out: List[str] = []
    index = 0
    length = len(text)
    quote: Optional[str] = None
    while index < length:
        char = text[index]
        if quote is not None:
            if char == "\\":
                out.append(text[index : index + 2])
                index += 2
                continue
            if char == quote or char == "\n":
                quote = None
            out.append(char)
            index += 1
            continue
        if char in "'\"":
            quote = char
        elif text.startswith("/*", index):
            end = text.find("*/", index + 2)
            end = length if end == -1 else end + 2
            out.append(text[index:end])
            index = end
            continue
        elif text.startswith("//", index):
            end = text.find("\n", index)
            end = length if end == -1 else end
            out.append(" " * (end - index))
            index = end
            continue
        elif text[index : index + 4].lower() == "url(":
            end = text.find(")", index)
            end = length if end == -1 else end + 1
            out.append(text[index:end])
            index = end
            continue
        out.append(char)
        index += 1
    return "".join(out)


__all__ = [
    "CSS",
    "SCSS",
    "Declaration",
    "Rule",
    "Stylesheet",
    "StylesheetParseError",
    "dialect_for",
]
