"""Content templates - initial block content mirroring a synthesized schema.

Values come from the component's parameter defaults, looked up through
per-category aliases (a hero's ``content`` may be declared as ``subtitle``),
and fall back to empty values of the right shape. Rich text is emitted as a
Lexical document, the format the CMS stores.
"""

from __future__ import annotations

import html
import re
from typing import Any, Iterable

from .inference import is_rich_text
from .model import Category, DetectedPattern, FieldKind, FieldSchema, SchemaField

BLOCK_TAG = re.compile(r"<(p|h[1-6]|li|blockquote)\b[^>]*>(.*?)</\1>", re.IGNORECASE | re.DOTALL)
ANY_TAG = re.compile(r"<[^>]+>")

BUTTON_ALIASES = {
    "buttonLabel": ("ctaLabel", "ctaText"),
    "buttonUrl": ("ctaUrl", "ctaLink", "href"),
}

CONTENT_ALIASES: dict[Category, dict[str, tuple[str, ...]]] = {
    Category.HERO: {
        "content": ("subtitle", "description"),
        "backgroundImage": ("image",),
        **BUTTON_ALIASES,
    },
    Category.IMAGE_GALLERY: {},
    Category.RICH_TEXT: {"content": ("text", "body")},
    Category.IMAGE_TEXT: {"image": ("imageUrl", "src"), "content": ("text", "description"), **BUTTON_ALIASES},
    Category.CARD_GRID: {"cards": ("items",)},
    Category.FEATURE_LIST: {"features": ("items",)},
    Category.FAQ: {"items": ("faqs",)},
    Category.TABS: {"tabs": ("items",)},
    Category.VIDEO: {"videoUrl": ("url", "src"), "thumbnail": ("poster",)},
    Category.SLIDER: {"slides": ("items",)},
    Category.CTA_BANNER: {"content": ("description", "subtitle"), **BUTTON_ALIASES},
    Category.TESTIMONIALS: {"testimonials": ("reviews",)},
    Category.LOGO_CLOUD: {"logos": ("brands",)},
    Category.PRICING_TABLE: {"plans": ("prices", "tiers")},
    Category.CONTACT_FORM: {},
    Category.MAP: {"mapUrl": ("url", "src")},
    Category.NAVIGATION: {"items": ("links", "menu")},
    Category.FOOTER: {"socialLinks": ("social",)},
    Category.GRID_LAYOUT: {},
    Category.RAW_HTML: {"html": ("content",)},
    Category.GENERIC: {},
}

# Array rows: alternative keys seen in component data
ITEM_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("name", "heading"),
    "content": ("description", "text", "body"),
    "description": ("content", "text"),
    "image": ("img", "src", "imageUrl"),
    "avatar": ("image", "photo"),
    "logo": ("image", "src"),
    "quote": ("text", "content"),
    "answer": ("content",),
    "label": ("title", "name"),
    "url": ("href", "link"),
    "link": ("href", "url"),
    "buttonLabel": ("cta", "linkText"),
    "buttonUrl": ("href", "link", "url"),
}


class IdAllocator:
    """Deterministic row identifiers, scoped to one analysis."""

    def __init__(self, namespace: str):
        self.namespace = re.sub(r"[^a-z0-9]+", "-", namespace.lower()).strip("-") or "block"
        self._counter = 0

    def next_id(self) -> str:
        self._counter += 1
        return f"{self.namespace}-{self._counter:04d}"


def _text_node(text: str) -> dict[str, Any]:
    return {"detail": 0, "format": 0, "mode": "normal", "style": "", "text": text, "type": "text", "version": 1}


def _paragraph(text: str) -> dict[str, Any]:
    return {
        "children": [_text_node(text)] if text else [],
        "direction": "ltr",
        "format": "",
        "indent": 0,
        "type": "paragraph",
        "version": 1,
    }


def _plain(fragment: str) -> str:
    return " ".join(html.unescape(ANY_TAG.sub(" ", fragment)).split())


def html_to_rich_text(source: str) -> dict[str, Any]:
    """Convert HTML or plain text into a Lexical root document.

    Block-level tags become paragraphs; plain text becomes one paragraph per
    blank-line separated chunk. Always yields at least one paragraph.
    """
    blocks = [_plain(m.group(2)) for m in BLOCK_TAG.finditer(source)]
    if not blocks:
        blocks = [_plain(chunk) for chunk in re.split(r"\n\s*\n", source)]
    paragraphs = [_paragraph(text) for text in blocks if text] or [_paragraph("")]
    return {
        "root": {
            "children": paragraphs,
            "direction": "ltr",
            "format": "",
            "indent": 0,
            "type": "root",
            "version": 1,
        }
    }


def _pick(values: dict[str, Any], names: Iterable[str]) -> Any:
    for name in names:
        value = values.get(name)
        if value is not None:
            return value
    return None


def _row(nested: list[SchemaField], item: Any, ids: IdAllocator) -> dict[str, Any]:
    row: dict[str, Any] = {"id": ids.next_id()}
    if not isinstance(item, dict):
        # scalar rows fill the first field
        item = {nested[0].name: item} if nested else {}
    for sub in nested:
        raw = _pick(item, (sub.name, *ITEM_ALIASES.get(sub.name, ())))
        row[sub.name] = field_value(sub, raw, ids)
    return row


def field_value(field: SchemaField, raw: Any, ids: IdAllocator) -> Any:
    """Coerce a raw default into the shape the field stores, or its fallback."""
    kind = field.kind
    if kind == FieldKind.RICH_TEXT:
        if isinstance(raw, dict) and "root" in raw:
            return raw
        return html_to_rich_text(raw) if isinstance(raw, str) and raw.strip() else None
    if kind in (FieldKind.TEXT, FieldKind.TEXTAREA):
        if raw is None or isinstance(raw, (dict, list)):
            return ""
        if isinstance(raw, bool):
            return str(raw).lower()
        text = str(raw)
        # textarea keeps markup (raw HTML blocks)
        if kind == FieldKind.TEXT and is_rich_text(text):
            return _plain(text)
        return text
    if kind == FieldKind.NUMBER:
        valid = isinstance(raw, (int, float)) and not isinstance(raw, bool)
        return raw if valid else field.default
    if kind == FieldKind.CHECKBOX:
        if isinstance(raw, bool):
            return raw
        return bool(field.default)
    if kind == FieldKind.SELECT:
        return raw if raw in {value for _, value in field.options} else field.default
    if kind == FieldKind.UPLOAD:
        return raw if isinstance(raw, str) and raw else None
    if kind == FieldKind.JSON:
        return raw if isinstance(raw, (dict, list)) else None
    if kind == FieldKind.ARRAY:
        items = raw if isinstance(raw, list) else []
        return [_row(field.nested, item, ids) for item in items]
    return raw


def _group_value(field: SchemaField, schema: FieldSchema) -> dict[str, Any] | None:
    if field.name == "animation" and schema.motion is not None:
        return {"enabled": True, "engine": schema.motion.engine, "config": schema.motion.config}
    if field.name == "scrollReveal" and schema.scroll_reveal is not None:
        reveal = schema.scroll_reveal
        return {"enabled": True, "trigger": reveal.trigger, "once": reveal.once, "offset": reveal.offset}
    if field.name == "layout" and schema.responsive is not None:
        layout = schema.responsive.layout_config
        return {"useCustomLayout": True, "config": layout.to_dict() if layout else None}
    return None


def synthesize_content(
    pattern: DetectedPattern,
    schema: FieldSchema,
    component_name: str,
    ids: IdAllocator | None = None,
) -> dict[str, Any]:
    """Build the initial content for a block, keyed like the schema's fields."""
    ids = ids or IdAllocator(component_name)
    aliases = CONTENT_ALIASES[pattern.category]
    defaults = {name: info.default_value for name, info in pattern.fields.items()}

    content: dict[str, Any] = {
        "blockType": pattern.category.value,
        "blockLabel": f"{component_name} Block",
    }
    for field in schema.fields:
        if field.name == "blockLabel":
            continue
        if field.kind == FieldKind.GROUP:
            content[field.name] = _group_value(field, schema)
            continue
        raw = _pick(defaults, (field.name, *aliases.get(field.name, ())))
        content[field.name] = field_value(field, raw, ids)

    if pattern.category == Category.GENERIC and pattern.children and content.get("content") is None:
        markup = "\n".join(child.markup_text for child in pattern.children)
        content["content"] = html_to_rich_text(markup)
    return content
