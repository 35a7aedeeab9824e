"""Component analyzer - parse, classify, extract metadata, synthesize.

Runs the whole per-file pipeline for one component and never raises for
bad input: parse failures come back as a zero-confidence generic result
with the reason in ``errors``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, TypeVar

from .content import IdAllocator, synthesize_content
from .detectors import THRESHOLD, generic_pattern, run_detectors, select_pattern
from .generator import synthesize
from .log import get_logger
from .model import BlockMapping, Category, ComponentDescriptor, DetectedPattern, FieldSchema
from .motion import detect_motion, detect_scroll_reveal, rendering_hints
from .parser import ComponentParseError, parse_component
from .responsive import detect_responsive

logger = get_logger("analyzer")

T = TypeVar("T")


@dataclass
class AnalysisResult:
    """Everything produced for one component file."""

    component_name: str
    source_path: str
    pattern: DetectedPattern
    schema: FieldSchema
    content: dict[str, Any]
    candidates: list[DetectedPattern] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def category(self) -> Category:
        return self.pattern.category

    @property
    def confidence(self) -> float:
        return self.pattern.confidence

    @property
    def ok(self) -> bool:
        return not self.errors

    def mapping(self, version: int = 1) -> BlockMapping:
        return BlockMapping(
            component_name=self.component_name,
            category=self.category,
            schema=self.schema,
            content=self.content,
            detection_metadata=dict(self.pattern.metadata),
            version=version,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "componentName": self.component_name,
            "sourcePath": self.source_path,
            "pattern": self.pattern.to_dict(),
            "schema": self.schema.to_dict(),
            "content": self.content,
            "candidates": [{"type": c.category.value, "confidence": c.confidence} for c in self.candidates],
            "errors": self.errors,
            "warnings": self.warnings,
        }


def _safe(func: Callable[..., T], *args: Any) -> T | None:
    """Extractors are best effort; a failure only drops their metadata."""
    try:
        return func(*args)
    except Exception:
        logger.debug("%s failed", func.__name__, exc_info=True)
        return None


def _placeholder(path: str | Path, error: str) -> AnalysisResult:
    name = Path(path).stem or "Component"
    descriptor = ComponentDescriptor(name=name, parameters={}, markup_text="", source_path=str(path))
    pattern = generic_pattern(descriptor, confidence=0.0)
    schema = synthesize(pattern)
    return AnalysisResult(
        component_name=name,
        source_path=str(path),
        pattern=pattern,
        schema=schema,
        content=synthesize_content(pattern, schema, name),
        errors=[error],
    )


def analyze_descriptor(descriptor: ComponentDescriptor) -> AnalysisResult:
    candidates = run_detectors(descriptor)
    pattern = select_pattern(candidates, descriptor)

    markup, imports = descriptor.markup_text, descriptor.imports
    motion = _safe(detect_motion, markup, imports)
    reveal = _safe(detect_scroll_reveal, markup, imports)
    responsive = _safe(detect_responsive, markup, imports)
    hints = _safe(rendering_hints, motion, reveal, markup)

    schema = synthesize(pattern, motion, reveal, responsive, hints)
    content = synthesize_content(pattern, schema, descriptor.name, IdAllocator(descriptor.name))

    warnings = []
    if pattern.category == Category.GENERIC:
        warnings.append(f"No pattern scored above {THRESHOLD}; using {Category.GENERIC.value}")
    runners_up = [c for c in candidates if c is not pattern and c.confidence > THRESHOLD]
    if runners_up:
        also = ", ".join(f"{c.category.value} ({c.confidence:.0%})" for c in runners_up)
        warnings.append(f"Also matched: {also}")

    return AnalysisResult(
        component_name=descriptor.name,
        source_path=descriptor.source_path,
        pattern=pattern,
        schema=schema,
        content=content,
        candidates=candidates,
        warnings=warnings,
    )


def analyze_source(text: str, path: str | Path = "") -> AnalysisResult:
    try:
        descriptor = parse_component(text, path)
    except ComponentParseError as exc:
        logger.debug("%s: %s", path, exc)
        return _placeholder(path, str(exc))
    return analyze_descriptor(descriptor)


def analyze_component(path: str | Path) -> AnalysisResult:
    """Analyze one component file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return _placeholder(path, f"Could not read {path.name}: {exc}")
    return analyze_source(text, path)
