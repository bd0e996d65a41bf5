"""Assembly of the variable stylesheet and its optional side artifacts."""

from __future__ import annotations

import json
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import RunOptions
from .ledger import UsageLedger
from .logging import get_logger
from .models import ExtractedVariable

ROOT_GROUP = "root"
ASSETS_FILENAME = "assets.css"
ASSETS_LABEL = "资源变量"


@dataclass
class AssemblyResult:
    """Paths written by :meth:`OutputAssembler.write`."""

    output_path: Optional[Path] = None
    map_path: Optional[Path] = None
    assets_path: Optional[Path] = None


def dedupe(variables: Sequence[ExtractedVariable]) -> List[ExtractedVariable]:
    """Collapse entries sharing a name; the last value wins, the first position stays."""
    unique: Dict[str, ExtractedVariable] = {}
    for variable in variables:
        unique[variable.variable_name] = variable
    return list(unique.values())


def folder_of(variable: ExtractedVariable) -> str:
    folder = posixpath.dirname(variable.source_path)
    return folder or ROOT_GROUP


def build_stylesheet(
    variables: Sequence[ExtractedVariable],
    *,
    split_by_folder: bool = False,
    asset_variables: Sequence[ExtractedVariable] = (),
) -> str:
    """Render ``:root { ... }`` for the given variables.

    ``asset_variables`` are appended as a labelled section; they are passed
    here only when no separate asset sheet is written.
    """
    unique = dedupe(variables)
    lines: List[str] = []
    if not split_by_folder:
        lines.extend(_definition(variable) for variable in unique)
    else:
        groups: Dict[str, List[ExtractedVariable]] = {}
        for variable in unique:
            groups.setdefault(folder_of(variable), []).append(variable)
        for folder, members in groups.items():
            if lines:
                lines.append("")
            lines.append(f"  /* {folder} */")
            lines.extend(_definition(variable) for variable in members)

    if asset_variables:
        if lines:
            lines.append("")
        lines.append(f"  /* {ASSETS_LABEL} */")
        lines.extend(_definition(variable) for variable in dedupe(asset_variables))
    return _root_block(lines)


def build_asset_stylesheet(variables: Sequence[ExtractedVariable]) -> str:
    lines = [f"  /* {ASSETS_LABEL} */"]
    lines.extend(_definition(variable) for variable in dedupe(variables))
    return _root_block(lines)


def build_usage_map(ledger: UsageLedger) -> str:
    return json.dumps(ledger.as_mapping(), indent=2, ensure_ascii=False) + "\n"


def available_path(path: Path) -> Path:
    """Return ``path`` or the first ``stem-N.ext`` sibling that does not exist yet."""
    if not path.exists():
        return path
    counter = 1
    while True:
        candidate = path.with_name(f"{path.stem}-{counter}{path.suffix}")
        if not candidate.exists():
            return candidate
        counter += 1


class OutputAssembler:
    """Writes the variable sheet, usage map and asset sheet for a run."""

    def __init__(self, options: RunOptions) -> None:
        self.options = options
        self.logger = get_logger("assembler")

    def write(
        self,
        variables: Sequence[ExtractedVariable],
        asset_variables: Sequence[ExtractedVariable],
        ledger: UsageLedger,
    ) -> AssemblyResult:
        directory = Path(self.options.directory)
        result = AssemblyResult()
        embedded = () if self.options.export_assets else asset_variables

        if not variables and not embedded:
            self.logger.warning("No variables were extracted; skipping %s", self.options.output_file)
        else:
            requested = directory / self.options.output_file
            output_path = available_path(requested)
            if output_path != requested:
                self.logger.warning(
                    "%s already exists; writing variables to %s instead",
                    requested.name,
                    output_path.name,
                )
            content = build_stylesheet(
                variables,
                split_by_folder=self.options.split_by_folder,
                asset_variables=embedded,
            )
            output_path.write_text(content, encoding="utf-8")
            self.logger.info(
                "Wrote %d variables to %s", len(dedupe(variables)) + len(dedupe(embedded)), output_path
            )
            result.output_path = output_path

            if self.options.export_map:
                map_path = output_path.with_name(f"{output_path.stem}.map.json")
                map_path.write_text(build_usage_map(ledger), encoding="utf-8")
                self.logger.info("Wrote usage map to %s", map_path)
                result.map_path = map_path

        if self.options.export_assets and asset_variables:
            assets_path = directory / ASSETS_FILENAME
            assets_path.write_text(build_asset_stylesheet(asset_variables), encoding="utf-8")
            self.logger.info("Wrote %d asset variables to %s", len(dedupe(asset_variables)), assets_path)
            result.assets_path = assets_path

        return result


def _definition(variable: ExtractedVariable) -> str:
    return f"  {variable.variable_name}: {variable.raw_value};"


def _root_block(lines: Sequence[str]) -> str:
    body = "\n".join(lines)
    return f":root {{\n{body}\n}}\n"


__all__ = [
    "ASSETS_FILENAME",
    "AssemblyResult",
    "OutputAssembler",
    "available_path",
    "build_asset_stylesheet",
    "build_stylesheet",
    "build_usage_map",
    "dedupe",
]
