"""Run orchestration: discover, rewrite each file, then assemble outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .assembler import OutputAssembler, dedupe
from .assets import ImageCodec
from .config import RunOptions
from .file_scanner import FileScanner
from .logging import get_logger, log_progress
from .models import VariableReport
from .rewriter import DeclarationRewriter, RunState
from .stylesheet import Stylesheet, StylesheetParseError


class ExtractionError(RuntimeError):
    """Raised when a file cannot be read, parsed or written during a run."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


@dataclass
class ExtractionResult:
    """Summary of a completed extraction run."""

    files_processed: int
    variable_count: int
    asset_count: int = 0
    output_path: Optional[Path] = None
    map_path: Optional[Path] = None
    assets_path: Optional[Path] = None
    reports: List[VariableReport] = field(default_factory=list)


class Extractor:
    """Coordinates a css2var run over one directory.

    Files are processed strictly in the order the scanner returns them. Each
    file is rewritten in place as soon as it has been processed; a failure
    stops the run without restoring files that were already written.
    """

    def __init__(
        self,
        options: RunOptions,
        scanner: FileScanner | None = None,
        codec: ImageCodec | None = None,
        assembler: OutputAssembler | None = None,
    ) -> None:
        self.options = options
        self.scanner = scanner or FileScanner(options.exclude_paths)
        self.codec = codec or ImageCodec()
        self.assembler = assembler or OutputAssembler(options)
        self.logger = get_logger("orchestrator")
        self._state: Optional[RunState] = None

    def extract(self) -> ExtractionResult:
        """Rewrite every matching file and emit the variable sheet(s)."""
        root = Path(self.options.directory).expanduser().resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"Target directory not found: {self.options.directory}")

        files = self.scanner.scan(root, self.options.pattern)
        self.logger.info("Scanning %s", root)
        self.logger.info("Found %d matching files", len(files))

        state = RunState.create(self.options)
        self._state = state
        rewriter = DeclarationRewriter(self.options, state, codec=self.codec)

        for index, path in enumerate(files, start=1):
            log_progress(self.logger, index, len(files), path.relative_to(root).as_posix())
            self._process_file(path, rewriter)

        assembly = self.assembler.write(state.variables, state.asset_variables, state.ledger)

        variable_count = len(dedupe(state.variables))
        asset_count = len(dedupe(state.asset_variables))
        self.logger.info(
            "Processed %d files, extracted %d variables (%d assets)",
            len(files),
            variable_count,
            asset_count,
        )
        return ExtractionResult(
            files_processed=len(files),
            variable_count=variable_count,
            asset_count=asset_count,
            output_path=assembly.output_path,
            map_path=assembly.map_path,
            assets_path=assembly.assets_path,
            reports=state.ledger.report(),
        )

    def get_variable_report(self) -> List[VariableReport]:
        """Return the usage reports from the most recent run."""
        if self._state is None:
            return []
        return self._state.ledger.report()

    def _process_file(self, path: Path, rewriter: DeclarationRewriter) -> None:
        try:
            sheet = Stylesheet.load(path)
        except (OSError, UnicodeDecodeError, StylesheetParseError) as exc:
            raise ExtractionError(path, f"failed to load stylesheet: {exc}") from exc

        rewritten = rewriter.rewrite(sheet, path)
        if not sheet.modified:
            self.logger.debug("No qualifying declarations in %s", path.name)
            return
        self.logger.debug("Rewrote %d declarations in %s", rewritten, path.name)

        try:
            path.write_text(sheet.serialize(), encoding="utf-8", newline="")
        except OSError as exc:
            raise ExtractionError(path, f"failed to write stylesheet: {exc}") from exc


__all__ = ["ExtractionError", "ExtractionResult", "Extractor"]
