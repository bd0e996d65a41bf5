"""Core data models shared across css2var components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ValueKind(str, Enum):
    """Classification buckets for declaration values."""

    STRING_LITERAL = "string"
    PREPROCESSOR_REF = "preprocessor"
    GRADIENT = "gradient"
    IMAGE_URL = "image"
    TRANSPARENT = "transparent"
    PLAIN = "plain"


@dataclass(frozen=True)
class ClassifiedValue:
    """Outcome of classifying a raw declaration value."""

    kind: ValueKind
    token: str
    asset_path: Optional[str] = None


@dataclass(frozen=True)
class DeclarationContext:
    """Where a declaration lives; handed to custom name formatters."""

    source_path: str
    folder: Optional[str]
    selector: Optional[str]
    line: int


@dataclass(frozen=True)
class ExtractedVariable:
    """A generated custom property and the declaration it came from."""

    property: str
    raw_value: str
    variable_name: str
    source_path: str
    source_line: int


@dataclass(frozen=True)
class VariableUsageRecord:
    """A single substitution site for a variable."""

    source_path: str
    source_line: int
    property: str
    raw_value: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filePath": self.source_path,
            "line": self.source_line,
            "property": self.property,
            "value": self.raw_value,
        }


@dataclass
class VariableReport:
    """Aggregated usage statistics for one ``property:value`` key."""

    variable_name: str
    raw_value: str
    usage_count: int = 0
    usages: List[VariableUsageRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variableName": self.variable_name,
            "value": self.raw_value,
            "usageCount": self.usage_count,
            "usages": [usage.to_dict() for usage in self.usages],
        }
