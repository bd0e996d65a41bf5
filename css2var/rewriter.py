"""Declaration scanning and value substitution for a single document."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .assets import AssetEncodingError, ImageCodec, build_data_url
from .classifier import PREPROCESSOR_SIGIL, Resolver, classify
from .config import RunOptions
from .ledger import UsageLedger
from .logging import get_logger
from .models import ClassifiedValue, DeclarationContext, ExtractedVariable, ValueKind
from .naming import NameGenerator, NameRegistry
from .stylesheet import SCSS, Declaration, Stylesheet

# Preprocessor definitions are all filed under this property, whatever they hold.
PREPROCESSOR_PROPERTY = "color"

_SCSS_FLAGS_RE = re.compile(r"\s*!(?:default|global)\b", re.IGNORECASE)


@dataclass
class RunState:
    """Everything one extraction run accumulates across files."""

    root: Path
    registry: NameRegistry
    generator: NameGenerator
    ledger: UsageLedger = field(default_factory=UsageLedger)
    variables: List[ExtractedVariable] = field(default_factory=list)
    asset_variables: List[ExtractedVariable] = field(default_factory=list)
    definitions: Dict[str, ExtractedVariable] = field(default_factory=dict)

    @classmethod
    def create(cls, options: RunOptions) -> "RunState":
        registry = NameRegistry()
        generator = NameGenerator(
            registry,
            prefix=options.prefix,
            aliases=options.property_aliases,
            formatter=options.name_formatter,
        )
        return cls(root=Path(options.directory).resolve(), registry=registry, generator=generator)

    def resolver(self, property_name: str) -> Resolver:
        """Return a lookup of preprocessor definitions sharing ``property_name``."""

        def resolve(name: str) -> Optional[str]:
            definition = self.definitions.get(name)
            if definition is None or definition.property != property_name:
                return None
            return definition.raw_value

        return resolve


class DeclarationRewriter:
    """Replaces allow-listed literal values in a document with ``var()`` references."""

    def __init__(
        self,
        options: RunOptions,
        state: RunState,
        codec: ImageCodec | None = None,
    ) -> None:
        self.options = options
        self.state = state
        self.codec = codec or ImageCodec()
        self.properties = set(options.properties)
        self.logger = get_logger("rewriter")

    def rewrite(self, sheet: Stylesheet, path: Path) -> int:
        """Substitute qualifying declarations in ``sheet``; returns the number rewritten."""
        rel_path = self._relative(path)
        folder = self._folder(path)

        if sheet.dialect == SCSS:
            self._collect_definitions(sheet, rel_path, folder)

        rewritten = 0
        for declaration in sheet.declarations():
            if self._substitute(declaration, path, rel_path, folder):
                rewritten += 1
        return rewritten

    def _collect_definitions(self, sheet: Stylesheet, rel_path: str, folder: Optional[str]) -> None:
        for declaration in sheet.declarations():
            if not declaration.property.startswith(PREPROCESSOR_SIGIL):
                continue
            value = _SCSS_FLAGS_RE.sub("", declaration.value).strip()
            if not value:
                continue
            context = self._context(declaration, rel_path, folder)
            classified = classify(value, self.state.resolver(PREPROCESSOR_PROPERTY))
            name = self.state.generator.generate(PREPROCESSOR_PROPERTY, value, context, classified)
            variable = ExtractedVariable(
                property=PREPROCESSOR_PROPERTY,
                raw_value=value,
                variable_name=name,
                source_path=rel_path,
                source_line=declaration.line,
            )
            self.state.variables.append(variable)
            self.state.definitions[declaration.property[len(PREPROCESSOR_SIGIL) :]] = variable

    def _substitute(
        self,
        declaration: Declaration,
        path: Path,
        rel_path: str,
        folder: Optional[str],
    ) -> bool:
        if declaration.property not in self.properties:
            return False
        value = declaration.value
        if not value or value.startswith("var(") or value.startswith("--"):
            return False
        if PREPROCESSOR_SIGIL in value and not self.options.inline_assets:
            self.logger.debug(
                "Leaving %s:%d as is; %r references a preprocessor variable",
                rel_path,
                declaration.line,
                value,
            )
            return False

        classified = classify(value, self.state.resolver(declaration.property))
        if classified.kind is ValueKind.TRANSPARENT:
            return False

        context = self._context(declaration, rel_path, folder)
        if classified.kind is ValueKind.IMAGE_URL and self.options.inline_assets:
            return self._inline_asset(declaration, classified, context, path)

        name = self.state.generator.generate(declaration.property, value, context, classified)
        self.state.variables.append(
            ExtractedVariable(
                property=declaration.property,
                raw_value=value,
                variable_name=name,
                source_path=rel_path,
                source_line=declaration.line,
            )
        )
        self.state.ledger.record(declaration.property, value, name, rel_path, declaration.line)
        declaration.value = f"var({name})"
        return True

    def _inline_asset(
        self,
        declaration: Declaration,
        classified: ClassifiedValue,
        context: DeclarationContext,
        path: Path,
    ) -> bool:
        value = declaration.value
        asset = (path.parent / (classified.asset_path or "")).resolve()
        if not asset.is_file():
            self.logger.warning(
                "Image not found for %s:%d: %s", context.source_path, context.line, classified.asset_path
            )
            return False
        try:
            encoded = self.codec.encode(asset)
        except (OSError, AssetEncodingError) as exc:
            self.logger.warning(
                "Could not inline image for %s:%d: %s", context.source_path, context.line, exc
            )
            return False

        name = self.state.generator.generate(
            declaration.property, value, context, classified, identity=asset.as_posix()
        )
        self.state.asset_variables.append(
            ExtractedVariable(
                property=declaration.property,
                raw_value=build_data_url(asset, encoded),
                variable_name=name,
                source_path=context.source_path,
                source_line=context.line,
            )
        )
        self.state.ledger.record(declaration.property, value, name, context.source_path, context.line)
        declaration.value = f"var({name})"
        return True

    def _context(self, declaration: Declaration, rel_path: str, folder: Optional[str]) -> DeclarationContext:
        return DeclarationContext(
            source_path=rel_path,
            folder=folder,
            selector=declaration.nearest_class(),
            line=declaration.line,
        )

    def _relative(self, path: Path) -> str:
        try:
            return path.resolve().relative_to(self.state.root).as_posix()
        except ValueError:
            return path.as_posix()

    def _folder(self, path: Path) -> Optional[str]:
        parent = path.resolve().parent
        if parent == self.state.root:
            return None
        return parent.name


__all__ = ["PREPROCESSOR_PROPERTY", "DeclarationRewriter", "RunState"]
