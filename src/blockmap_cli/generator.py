"""Schema synthesis - DetectedPattern in, CMS block FieldSchema out.

Each category has a fixed field set; the generic fallback derives its
fields from the component's parameters instead. Motion, scroll-reveal and
layout settings are appended as groups when they were detected.
"""

from __future__ import annotations

from typing import Callable

from .inference import infer_field_type
from .model import (
    Category,
    DetectedPattern,
    FieldInfo,
    FieldKind,
    FieldSchema,
    MotionInfo,
    RenderingHints,
    ResponsiveInfo,
    SchemaField,
    ScrollRevealInfo,
    SemanticType,
)

MEDIA_COLLECTION = "media"

ENGINE_OPTIONS = [
    ("None", "none"),
    ("Framer Motion", "framerMotion"),
    ("CSS", "css"),
    ("GSAP", "gsap"),
]
TRIGGER_OPTIONS = [
    ("When entering viewport", "viewportEnter"),
    ("When centered in viewport", "viewportCenter"),
    ("When fully visible", "viewportFullyVisible"),
]


def block_label(category: Category) -> str:
    label = category.display_name
    return label if label.endswith("Block") else f"{label} Block"


def _text(name: str, **kwargs) -> SchemaField:
    return SchemaField(name, FieldKind.TEXT, **kwargs)


def _rich(name: str, **kwargs) -> SchemaField:
    return SchemaField(name, FieldKind.RICH_TEXT, **kwargs)


def _upload(name: str, **kwargs) -> SchemaField:
    return SchemaField(name, FieldKind.UPLOAD, relation_to=MEDIA_COLLECTION, **kwargs)


def _array(name: str, nested: list[SchemaField], min_rows: int | None = 1, **kwargs) -> SchemaField:
    return SchemaField(name, FieldKind.ARRAY, nested=nested, min_rows=min_rows, **kwargs)


def _select(name: str, options: list[tuple[str, str]], default: str) -> SchemaField:
    return SchemaField(name, FieldKind.SELECT, options=options, default=default)


def _button() -> list[SchemaField]:
    return [_text("buttonLabel"), _text("buttonUrl", label="Button URL")]


# Category field sets


def _hero(pattern: DetectedPattern) -> list[SchemaField]:
    return [_text("title"), _rich("content"), _upload("backgroundImage"), *_button()]


def _image_gallery(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _text("title"),
        _array("images", [_upload("image", required=True), _text("caption")]),
    ]


def _rich_text(pattern: DetectedPattern) -> list[SchemaField]:
    return [_rich("content", required=True)]


def _image_text(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _upload("image"),
        _select("imagePosition", [("Left", "left"), ("Right", "right")], "left"),
        _text("title"),
        _rich("content"),
        *_button(),
    ]


def _card_grid(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _text("title"),
        _text("subtitle"),
        _array("cards", [_upload("image"), _text("title"), _rich("content"), *_button()]),
    ]


def _feature_list(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _text("title"),
        _array("features", [_text("icon"), _text("title"), _rich("description")]),
    ]


def _faq(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _text("title"),
        _array("items", [_text("question", required=True), _rich("answer", required=True)], label="FAQ Items"),
    ]


def _tabs(pattern: DetectedPattern) -> list[SchemaField]:
    return [_array("tabs", [_text("label", required=True), _rich("content", required=True)])]


def _video(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _text("videoUrl", label="Video URL", required=True, description="YouTube, Vimeo, or direct video URL"),
        _upload("thumbnail"),
        _text("title"),
    ]


def _slider(pattern: DetectedPattern) -> list[SchemaField]:
    return [_array("slides", [_upload("image"), _text("title"), _rich("text"), _text("link")])]


def _cta_banner(pattern: DetectedPattern) -> list[SchemaField]:
    gradients = [
        ("Purple to Orange", "purple-orange"),
        ("Blue to Purple", "blue-purple"),
        ("Green to Blue", "green-blue"),
    ]
    return [
        _text("title", required=True),
        _rich("content"),
        *_button(),
        _select("backgroundGradient", gradients, "purple-orange"),
    ]


def _testimonials(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _text("title"),
        _array("testimonials", [
            _text("name", required=True),
            _text("role"),
            _rich("quote", required=True),
            _upload("avatar"),
        ]),
    ]


def _logo_cloud(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _text("title"),
        _array("logos", [_upload("logo", required=True), _text("url", label="URL")]),
    ]


def _pricing_table(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _text("title"),
        _array("plans", [
            _text("title", required=True),
            _text("price"),
            _array("features", [_text("feature")], min_rows=None),
            *_button(),
        ]),
    ]


def _contact_form(pattern: DetectedPattern) -> list[SchemaField]:
    input_types = [(label, label.lower()) for label in ("Text", "Email", "Phone", "Textarea", "Select")]
    return [
        _text("title"),
        _rich("description"),
        _array("fields", [
            _text("label", required=True),
            _text("name", required=True),
            _select("type", input_types, "text"),
            SchemaField("required", FieldKind.CHECKBOX, default=False),
        ]),
    ]


def _map(pattern: DetectedPattern) -> list[SchemaField]:
    return [_text("mapUrl", label="Map URL", required=True, description="Google Maps or OpenStreetMap embed URL")]


def _navigation(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _array("items", [_text("label", required=True), _text("url", label="URL", required=True)], min_rows=0),
    ]


def _footer(pattern: DetectedPattern) -> list[SchemaField]:
    link = [_text("label"), _text("url", label="URL")]
    return [
        _array("columns", [_text("title"), _array("links", link, min_rows=None)], min_rows=None),
        _array("socialLinks", [_text("platform"), _text("url", label="URL")], min_rows=None),
    ]


def _grid_layout(pattern: DetectedPattern) -> list[SchemaField]:
    return [
        _array("items", [_text("title"), _rich("description"), _text("icon"), _upload("image")]),
    ]


def _raw_html(pattern: DetectedPattern) -> list[SchemaField]:
    return [SchemaField("html", FieldKind.TEXTAREA, label="HTML")]


RESERVED_NAMES = {"blockLabel", "animation", "scrollReveal", "layout"}


def _generic(pattern: DetectedPattern) -> list[SchemaField]:
    infos = [info for name, info in pattern.fields.items() if name not in RESERVED_NAMES]
    fields = [f for f in (generic_field(info) for info in infos) if f is not None]
    if pattern.children and not any(f.name == "content" for f in fields):
        fields.append(_rich("content"))
    return fields


def generic_field(info: FieldInfo) -> SchemaField | None:
    """Schema field for one inferred parameter; None when the shape is unknown."""
    kind = info.semantic_type
    if kind in (SemanticType.RICH_TEXT, SemanticType.HTML, SemanticType.COMPONENT):
        return _rich(info.name)
    if kind == SemanticType.IMAGE:
        return _upload(info.name)
    if kind == SemanticType.URL:
        return _text(info.name, description="URL")
    if kind == SemanticType.NUMBER:
        return SchemaField(info.name, FieldKind.NUMBER)
    if kind == SemanticType.BOOLEAN:
        return SchemaField(info.name, FieldKind.CHECKBOX)
    if kind == SemanticType.OBJECT:
        return SchemaField(info.name, FieldKind.JSON)
    if kind == SemanticType.ARRAY:
        return _generic_array(info)
    return _text(info.name)


def _generic_array(info: FieldInfo) -> SchemaField | None:
    items = info.default_value
    if not isinstance(items, list) or not items:
        return None

    if all(isinstance(item, dict) for item in items):
        samples: dict[str, object] = {}
        for item in items:
            for key, value in item.items():
                if samples.get(key) is None:
                    samples[key] = value
        nested = [
            generic_field(FieldInfo(key, infer_field_type(key, value), value is not None, value))
            for key, value in samples.items()
        ]
        nested = [f for f in nested if f is not None]
        return _array(info.name, nested, min_rows=None) if nested else None

    if all(isinstance(item, (str, int, float)) for item in items):
        value_field = generic_field(FieldInfo("value", infer_field_type("value", items[0]), True, items[0]))
        return _array(info.name, [value_field], min_rows=None)
    return None


FIELD_BUILDERS: dict[Category, Callable[[DetectedPattern], list[SchemaField]]] = {
    Category.HERO: _hero,
    Category.IMAGE_GALLERY: _image_gallery,
    Category.RICH_TEXT: _rich_text,
    Category.IMAGE_TEXT: _image_text,
    Category.CARD_GRID: _card_grid,
    Category.FEATURE_LIST: _feature_list,
    Category.FAQ: _faq,
    Category.TABS: _tabs,
    Category.VIDEO: _video,
    Category.SLIDER: _slider,
    Category.CTA_BANNER: _cta_banner,
    Category.TESTIMONIALS: _testimonials,
    Category.LOGO_CLOUD: _logo_cloud,
    Category.PRICING_TABLE: _pricing_table,
    Category.CONTACT_FORM: _contact_form,
    Category.MAP: _map,
    Category.NAVIGATION: _navigation,
    Category.FOOTER: _footer,
    Category.GRID_LAYOUT: _grid_layout,
    Category.RAW_HTML: _raw_html,
    Category.GENERIC: _generic,
}


# Settings groups


def _animation_group(motion: MotionInfo) -> SchemaField:
    return SchemaField("animation", FieldKind.GROUP, label="Animation Settings", nested=[
        SchemaField("enabled", FieldKind.CHECKBOX, default=True),
        _select("engine", ENGINE_OPTIONS, motion.engine),
        SchemaField("config", FieldKind.JSON, label="Animation Config"),
    ])


def _scroll_reveal_group(reveal: ScrollRevealInfo) -> SchemaField:
    nested = [
        SchemaField("enabled", FieldKind.CHECKBOX, default=True),
        _select("trigger", TRIGGER_OPTIONS, reveal.trigger),
        SchemaField("once", FieldKind.CHECKBOX, label="Animate Once", default=reveal.once),
        SchemaField("offset", FieldKind.NUMBER, label="Offset (px)", default=reveal.offset),
    ]
    return SchemaField("scrollReveal", FieldKind.GROUP, label="Scroll Reveal", nested=nested)


def _layout_group() -> SchemaField:
    return SchemaField("layout", FieldKind.GROUP, label="Responsive Layout", nested=[
        SchemaField("useCustomLayout", FieldKind.CHECKBOX, default=True),
        SchemaField("config", FieldKind.JSON, label="Layout Config"),
    ])


def synthesize(
    pattern: DetectedPattern,
    motion: MotionInfo | None = None,
    scroll_reveal: ScrollRevealInfo | None = None,
    responsive: ResponsiveInfo | None = None,
    hints: RenderingHints | None = None,
) -> FieldSchema:
    """Build the block schema for a detected pattern."""
    fields = [_text("blockLabel", description="Optional label for this block in the CMS")]
    fields.extend(FIELD_BUILDERS[pattern.category](pattern))

    if motion is not None and motion.enabled:
        fields.append(_animation_group(motion))
    if scroll_reveal is not None and scroll_reveal.enabled:
        fields.append(_scroll_reveal_group(scroll_reveal))
    if responsive is not None and responsive.use_custom_layout:
        fields.append(_layout_group())

    return FieldSchema(
        slug=pattern.category.value,
        label=block_label(pattern.category),
        fields=fields,
        motion=motion,
        scroll_reveal=scroll_reveal,
        responsive=responsive,
        rendering_hints=hints,
    )


def describe_category(category: Category) -> list[SchemaField]:
    """Fixed fields a category's schema carries, without detected extras."""
    return synthesize(DetectedPattern(category=category, confidence=1.0)).fields
