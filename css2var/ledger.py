"""Cross-file usage bookkeeping for generated variables."""

from __future__ import annotations

from typing import Any, Dict, List

from .models import VariableReport, VariableUsageRecord


class UsageLedger:
    """Accumulates usage reports keyed by ``property:value``."""

    def __init__(self) -> None:
        self._reports: Dict[str, VariableReport] = {}

    def __len__(self) -> int:
        return len(self._reports)

    @staticmethod
    def key(property_name: str, raw_value: str) -> str:
        return f"{property_name}:{raw_value}"

    def record(
        self,
        property_name: str,
        raw_value: str,
        variable_name: str,
        source_path: str,
        source_line: int,
    ) -> VariableReport:
        """Append a usage, creating the report on first sight of the key."""
        key = self.key(property_name, raw_value)
        report = self._reports.get(key)
        if report is None:
            report = VariableReport(variable_name=variable_name, raw_value=raw_value)
            self._reports[key] = report
        report.usages.append(
            VariableUsageRecord(
                source_path=source_path,
                source_line=source_line,
                property=property_name,
                raw_value=raw_value,
            )
        )
        report.usage_count += 1
        return report

    def report(self) -> List[VariableReport]:
        return list(self._reports.values())

    def as_mapping(self) -> Dict[str, Dict[str, Any]]:
        """Return the JSON-ready view keyed by ``property:value``."""
        return {key: report.to_dict() for key, report in self._reports.items()}


__all__ = ["UsageLedger"]
