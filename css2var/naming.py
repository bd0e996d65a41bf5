"""Variable name generation with run-wide collision resolution."""

from __future__ import annotations

import re
from typing import Callable, Dict, Mapping, Optional, Set, Tuple

from .models import ClassifiedValue, DeclarationContext, ValueKind

NameFormatter = Callable[[str, str, DeclarationContext], str]

_SEGMENT_RE = re.compile(r"[^a-zA-Z0-9_-]+")


class NameRegistry:
    """Every variable name assigned during one run."""

    def __init__(self) -> None:
        self._names: Set[str] = set()

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def claim(self, name: str) -> None:
        self._names.add(name)


class NameGenerator:
    """Produces unique ``--prefix-...`` identifiers for declarations.

    The default scheme joins the non-empty segments
    ``prefix, folder, selector, value token, property alias``. Identical
    ``(property, value, folder, selector)`` inputs map to the same name; any
    other clash with an already registered name gets a ``-1``, ``-2``, ...
    suffix. A custom ``formatter`` replaces the scheme entirely and is trusted
    to manage uniqueness on its own.
    """

    def __init__(
        self,
        registry: NameRegistry,
        *,
        prefix: str = "var",
        aliases: Optional[Mapping[str, str]] = None,
        formatter: Optional[NameFormatter] = None,
    ) -> None:
        self.registry = registry
        self.prefix = prefix
        self.aliases = dict(aliases or {})
        self.formatter = formatter
        self._assigned: Dict[Tuple[str, str, Optional[str], Optional[str]], str] = {}

    def generate(
        self,
        property_name: str,
        raw_value: str,
        context: DeclarationContext,
        classified: ClassifiedValue,
        *,
        identity: Optional[str] = None,
    ) -> str:
        """Return the variable name for a declaration and register it.

        ``identity`` stands in for ``raw_value`` when deciding whether two
        declarations are the same variable, e.g. the resolved file of an
        inlined image whose ``url(...)`` text is only relative.
        """
        if self.formatter is not None:
            name = self.formatter(property_name, raw_value, context)
            self.registry.claim(name)
            return name

        key = (property_name, identity or raw_value, context.folder, context.selector)
        existing = self._assigned.get(key)
        if existing is not None:
            return existing

        base = self.default_name(property_name, classified, context)
        name = base
        suffix = 1
        while name in self.registry:
            name = f"{base}-{suffix}"
            suffix += 1

        self.registry.claim(name)
        self._assigned[key] = name
        return name

    def default_name(
        self,
        property_name: str,
        classified: ClassifiedValue,
        context: DeclarationContext,
    ) -> str:
        """Compose the un-suffixed default name; never consults the registry."""
        token = classified.token
        if classified.kind is ValueKind.STRING_LITERAL:
            token = f"string-{token}" if token else "string"
        segments = (
            self.prefix,
            context.folder or "",
            context.selector or "",
            token,
            self.aliases.get(property_name, property_name),
        )
        cleaned = [_clean_segment(segment) for segment in segments]
        return "--" + "-".join(segment for segment in cleaned if segment)


def _clean_segment(segment: str) -> str:
    return _SEGMENT_RE.sub("-", segment).strip("-")


__all__ = ["NameFormatter", "NameGenerator", "NameRegistry"]
