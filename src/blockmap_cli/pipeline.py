"""Batch driver: find component files, analyze each, write artifacts.

Layout under the output root::

    <tenant>/schemas/<category>.ts         block config (archives <category>.<component>.vN.ts)
    <tenant>/sync-json/<component>.json    initial content template
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable

from .analyzer import AnalysisResult, analyze_component
from .config import COMPONENT_EXTENSIONS, RunConfig
from .log import get_logger
from .model import BlockmapError
from .registry import RegistrationOutcome, SchemaRegistry
from .render import render_block_source, write_block_source

logger = get_logger("pipeline")

IGNORE_DIRS = {
    ".git", "node_modules", "__pycache__", ".venv", "venv",
    "build", "dist", ".next", ".nuxt", ".output", ".turbo",
    "coverage", ".nyc_output", ".idea", ".vscode", "storybook-static",
}


class NoInputFilesError(BlockmapError):
    """Nothing to analyze at the input path."""


@dataclass
class FileReport:
    path: Path
    result: AnalysisResult
    outcome: RegistrationOutcome | None = None
    schema_path: Path | None = None
    content_path: Path | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def version(self) -> int:
        return self.outcome.entry.version if self.outcome else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "componentName": self.result.component_name,
            "category": self.result.category.value,
            "confidence": self.result.confidence,
            "version": self.version,
            "status": self.outcome.status if self.outcome else None,
            "schemaPath": str(self.schema_path) if self.schema_path else None,
            "contentPath": str(self.content_path) if self.content_path else None,
            "errors": self.errors,
            "warnings": self.result.warnings,
        }


@dataclass
class RunSummary:
    tenant_dir: Path
    registry_path: Path
    reports: list[FileReport] = field(default_factory=list)
    registry_entries: int = 0

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.reports if r.ok)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.reports if not r.ok)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tenantDir": str(self.tenant_dir),
            "registryPath": str(self.registry_path),
            "successCount": self.success_count,
            "errorCount": self.error_count,
            "registryEntries": self.registry_entries,
            "files": [r.to_dict() for r in self.reports],
        }


def find_component_files(path: str | Path, extensions: Iterable[str] = COMPONENT_EXTENSIONS) -> list[Path]:
    """Component files under ``path`` in a stable, sorted walk order."""
    path = Path(path)
    allowed = tuple(ext.lower() for ext in extensions)
    if path.is_file():
        return [path] if path.suffix.lower() in allowed else []
    if not path.is_dir():
        return []

    found = []
    for dirpath, dirnames, filenames in os.walk(path):
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORE_DIRS)
        for fname in sorted(filenames):
            lower = fname.lower()
            if lower.endswith(".d.ts") or not lower.endswith(allowed):
                continue
            found.append(Path(dirpath) / fname)
    return found


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def process_file(path: Path, config: RunConfig, registry: SchemaRegistry) -> FileReport:
    """Analyze one file and write its artifacts. RegistryError propagates."""
    result = analyze_component(path)
    report = FileReport(path=path, result=result, errors=list(result.errors))
    content_path = config.content_dir / f"{result.component_name}.json"

    if not result.ok:
        # placeholder content only; keep any real schema for the generic category intact
        try:
            _write_json(content_path, result.content)
            report.content_path = content_path
        except OSError as exc:
            report.errors.append(f"Could not write {content_path}: {exc}")
        return report

    schema_path = config.schemas_dir / f"{result.schema.slug}.ts"
    source = render_block_source(result.schema)
    staged = schema_path.with_name(schema_path.name + ".tmp")
    try:
        # stage first so a failed write leaves the registry untouched
        write_block_source(result.schema, staged, source)
        report.outcome = registry.register(
            result.component_name, result.category, result.schema, schema_path, source=source,
        )
        staged.replace(schema_path)
        report.schema_path = schema_path
        _write_json(content_path, result.content)
        report.content_path = content_path
    except OSError as exc:
        report.errors.append(f"Could not write artifacts for {result.component_name}: {exc}")
    finally:
        staged.unlink(missing_ok=True)
    return report


def run_pipeline(
    config: RunConfig,
    on_result: Callable[[FileReport], None] | None = None,
) -> RunSummary:
    """Process every component file under the configured input path in order."""
    files = find_component_files(config.input_path, config.extensions)
    if not files:
        raise NoInputFilesError(f"No component files found at {config.input_path}")
    logger.debug("Found %d component files under %s", len(files), config.input_path)

    registry = SchemaRegistry(config.registry_path)
    config.schemas_dir.mkdir(parents=True, exist_ok=True)
    config.content_dir.mkdir(parents=True, exist_ok=True)

    summary = RunSummary(tenant_dir=config.tenant_dir, registry_path=config.registry_path)
    for path in files:
        report = process_file(path, config, registry)
        summary.reports.append(report)
        if on_result:
            on_result(report)

    summary.registry_entries = len(registry)
    return summary
