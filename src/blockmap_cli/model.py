"""Core records shared by every stage of the pipeline.

Descriptors come out of the parser, patterns out of the detectors, schemas
and content templates out of the generators. Anything written to disk has a
``to_dict`` that emits camelCase keys for the CMS side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class BlockmapError(Exception):
    """Base error for the block mapping engine."""


class Category(str, Enum):
    """Structural category a component is classified into."""

    HERO = "hero"
    IMAGE_GALLERY = "imageGallery"
    RICH_TEXT = "richText"
    IMAGE_TEXT = "imageText"
    CARD_GRID = "cardGrid"
    FEATURE_LIST = "featureList"
    FAQ = "faq"
    TABS = "tabs"
    VIDEO = "video"
    SLIDER = "slider"
    CTA_BANNER = "ctaBanner"
    TESTIMONIALS = "testimonials"
    LOGO_CLOUD = "logoCloud"
    PRICING_TABLE = "pricingTable"
    CONTACT_FORM = "contactForm"
    MAP = "map"
    NAVIGATION = "navigation"
    FOOTER = "footer"
    GRID_LAYOUT = "gridLayout"
    RAW_HTML = "rawHtml"
    GENERIC = "genericContentBlock"

    @property
    def display_name(self) -> str:
        """'cardGrid' -> 'Card Grid'."""
        return format_label(self.value)


class SemanticType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    URL = "url"
    IMAGE = "image"
    ARRAY = "array"
    OBJECT = "object"
    COMPONENT = "component"
    RICH_TEXT = "richText"
    HTML = "html"


class FieldKind(str, Enum):
    """Field types understood by the CMS."""

    TEXT = "text"
    TEXTAREA = "textarea"
    RICH_TEXT = "richText"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    SELECT = "select"
    UPLOAD = "upload"
    ARRAY = "array"
    GROUP = "group"
    JSON = "json"


def format_label(name: str) -> str:
    """Turn a camelCase identifier into a Title Case label."""
    words: list[str] = []
    current = ""
    for ch in name.replace("_", " ").replace("-", " "):
        if ch == " ":
            if current:
                words.append(current)
            current = ""
        elif ch.isupper() and current and not current[-1].isupper():
            words.append(current)
            current = ch
        else:
            current += ch
    if current:
        words.append(current)
    return " ".join(w[:1].upper() + w[1:] for w in words)


@dataclass(frozen=True)
class ImportStatement:
    """One import declaration of a component file."""

    source: str
    default_alias: str | None = None
    named: tuple[str, ...] = ()
    type_only: bool = False

    def binds(self, name: str) -> bool:
        return name == self.default_alias or name in self.named


@dataclass(frozen=True)
class ComponentDescriptor:
    """Parsed view of one component; created once per file and never mutated."""

    name: str
    parameters: dict[str, Any]
    markup_text: str
    imports: tuple[ImportStatement, ...] = ()
    source_path: str = ""
    source_text: str = ""
    children: tuple[ComponentDescriptor, ...] = ()


@dataclass
class FieldInfo:
    name: str
    semantic_type: SemanticType
    is_required: bool = False
    default_value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.semantic_type.value,
            "isRequired": self.is_required,
            "defaultValue": self.default_value,
        }


@dataclass
class DetectedPattern:
    """Outcome of classification: the winning category and what backs it."""

    category: Category
    confidence: float
    metadata: dict[str, Any] = field(default_factory=dict)
    fields: dict[str, FieldInfo] = field(default_factory=dict)
    children: tuple[ComponentDescriptor, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.category.value,
            "confidence": self.confidence,
            "metadata": dict(self.metadata),
            "fields": {name: info.to_dict() for name, info in self.fields.items()},
            "children": [child.name for child in self.children],
        }


@dataclass
class MotionInfo:
    engine: str = "none"  # none | framerMotion | css | gsap
    enabled: bool = False
    config: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"engine": self.engine, "enabled": self.enabled, "config": self.config}


@dataclass
class ScrollRevealInfo:
    enabled: bool = False
    trigger: str = "viewportEnter"  # viewportEnter | viewportCenter | viewportFullyVisible
    once: bool = False
    offset: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"enabled": self.enabled, "trigger": self.trigger, "once": self.once}
        if self.offset is not None:
            data["offset"] = self.offset
        return data


@dataclass
class LayoutConfig:
    """Breakpoint-keyed class buckets plus grid and flex settings."""

    breakpoints: dict[str, list[str]] = field(default_factory=dict)
    grid: dict[str, int] = field(default_factory=dict)
    flex_direction: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"breakpoints": self.breakpoints}
        if self.grid:
            data["grid"] = self.grid
        if self.flex_direction:
            data["flexDirection"] = self.flex_direction
        return data


@dataclass
class ResponsiveInfo:
    variant: str = "auto"  # auto | mobileOnly | desktopOnly | bothDifferent
    mobile_component: str | None = None
    desktop_component: str | None = None
    use_custom_layout: bool = False
    layout_config: LayoutConfig | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"variant": self.variant, "useCustomLayout": self.use_custom_layout}
        if self.mobile_component:
            data["mobileComponent"] = self.mobile_component
        if self.desktop_component:
            data["desktopComponent"] = self.desktop_component
        if self.layout_config is not None:
            data["layoutConfig"] = self.layout_config.to_dict()
        return data


@dataclass
class RenderingHints:
    should_animate_on_scroll: bool = False
    has_initial_animation: bool = False
    has_hover_effects: bool = False
    heavy_animation: bool = False
    preferred_viewport: str = "section"  # fullWidth | contained | section
    z_index_sensitive: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "shouldAnimateOnScroll": self.should_animate_on_scroll,
            "hasInitialAnimation": self.has_initial_animation,
            "hasHoverEffects": self.has_hover_effects,
            "heavyAnimation": self.heavy_animation,
            "preferredViewport": self.preferred_viewport,
            "zIndexSensitive": self.z_index_sensitive,
        }


@dataclass
class SchemaField:
    """One field of a block schema, possibly holding nested fields."""

    name: str
    kind: FieldKind
    label: str = ""
    required: bool = False
    default: Any = None
    nested: list[SchemaField] = field(default_factory=list)
    options: list[tuple[str, str]] = field(default_factory=list)
    relation_to: str | None = None
    description: str | None = None
    min_rows: int | None = None

    def __post_init__(self) -> None:
        if not self.label:
            self.label = format_label(self.name)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "type": self.kind.value, "label": self.label}
        if self.required:
            data["required"] = True
        if self.default is not None:
            data["defaultValue"] = self.default
        if self.relation_to:
            data["relationTo"] = self.relation_to
        if self.options:
            data["options"] = [{"label": label, "value": value} for label, value in self.options]
        if self.min_rows is not None:
            data["minRows"] = self.min_rows
        if self.nested:
            data["fields"] = [f.to_dict() for f in self.nested]
        if self.description:
            data["admin"] = {"description": self.description}
        return data


@dataclass
class FieldSchema:
    """Synthesized block schema. Built fresh for every analysis."""

    slug: str
    label: str
    fields: list[SchemaField] = field(default_factory=list)
    motion: MotionInfo | None = None
    scroll_reveal: ScrollRevealInfo | None = None
    responsive: ResponsiveInfo | None = None
    rendering_hints: RenderingHints | None = None

    def get_field(self, name: str) -> SchemaField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field_signature(self) -> list[tuple[str, str]]:
        """Top-level (name, kind) pairs sorted by name, used for change detection."""
        return sorted((f.name, f.kind.value) for f in self.fields)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "slug": self.slug,
            "label": self.label,
            "fields": [f.to_dict() for f in self.fields],
        }
        if self.motion is not None:
            data["animation"] = self.motion.to_dict()
        if self.scroll_reveal is not None:
            data["scrollReveal"] = self.scroll_reveal.to_dict()
        if self.responsive is not None:
            data["responsive"] = self.responsive.to_dict()
        if self.rendering_hints is not None:
            data["renderingHints"] = self.rendering_hints.to_dict()
        return data


@dataclass
class BlockMapping:
    """Everything the CMS import step needs for one component."""

    component_name: str
    category: Category
    schema: FieldSchema
    content: dict[str, Any]
    detection_metadata: dict[str, Any] = field(default_factory=dict)
    version: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "componentName": self.component_name,
            "blockType": self.category.value,
            "schema": self.schema.to_dict(),
            "content": self.content,
            "detectionMetadata": self.detection_metadata,
            "version": self.version,
        }
