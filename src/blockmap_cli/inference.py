"""Field type inference from parameter names, defaults and usage context.

Name hints are checked before value shapes, so ``backgroundImage="/hero.jpg"``
is an image and not a url.
"""

from __future__ import annotations

import re
from typing import Any

from .model import FieldInfo, SemanticType

IMAGE_NAME = re.compile(r"image|img|photo|picture|avatar|logo|icon", re.IGNORECASE)
URL_NAME = re.compile(r"url|link|href|src|video|embed", re.IGNORECASE)
TEXT_NAME = re.compile(r"content|text|description|body|html|markdown", re.IGNORECASE)
ARRAY_NAME = re.compile(
    r"items|list|array|features|cards|slides|tabs|testimonials|logos|plans", re.IGNORECASE
)
COMPONENT_NAME = re.compile(r"component|children", re.IGNORECASE)

HTML_TAG = re.compile(r"<[a-z][\s\S]*>", re.IGNORECASE)
RICH_TEXT_TAG = re.compile(
    r"<(p|h[1-6]|ul|ol|li|strong|em|b|i|a|br|blockquote|code|pre)\b", re.IGNORECASE
)
IMAGE_URL = re.compile(r"\.(jpe?g|png|gif|webp|svg|avif)(\?.*)?$", re.IGNORECASE)
VIDEO_URL = re.compile(r"youtube\.com|youtu\.be|vimeo\.com|\.(mp4|webm|ogg)(\?.*)?$", re.IGNORECASE)
MAP_EMBED = re.compile(r"google\.com/maps|maps\.google|openstreetmap", re.IGNORECASE)


def infer_field_type(name: str, value: Any, usage_context: str = "") -> SemanticType:
    """Infer the semantic type of a component parameter."""
    if IMAGE_NAME.search(name):
        return SemanticType.IMAGE
    if URL_NAME.search(name):
        return SemanticType.URL
    if TEXT_NAME.search(name):
        if "dangerouslySetInnerHTML" in usage_context or "innerHTML" in usage_context:
            return SemanticType.HTML
        return SemanticType.RICH_TEXT
    if ARRAY_NAME.search(name):
        return SemanticType.ARRAY
    if COMPONENT_NAME.search(name) or (isinstance(value, dict) and "type" in value):
        return SemanticType.COMPONENT
    return _type_from_value(value)


def _type_from_value(value: Any) -> SemanticType:
    if isinstance(value, list):
        return SemanticType.ARRAY
    if isinstance(value, dict):
        return SemanticType.OBJECT
    # bool first: bool is an int subclass
    if isinstance(value, bool):
        return SemanticType.BOOLEAN
    if isinstance(value, (int, float)):
        return SemanticType.NUMBER
    if isinstance(value, str) and value.startswith(("http", "//", "/")):
        return SemanticType.URL
    return SemanticType.STRING


def extract_field_info(name: str, value: Any, usage_context: str = "") -> FieldInfo:
    return FieldInfo(
        name=name,
        semantic_type=infer_field_type(name, value, usage_context),
        is_required=value is not None,
        default_value=value,
    )


def contains_html(text: str) -> bool:
    return bool(HTML_TAG.search(text))


def is_rich_text(text: str) -> bool:
    """True when the text carries formatting tags beyond plain markup."""
    return bool(RICH_TEXT_TAG.search(text))


def is_image_url(value: Any) -> bool:
    return isinstance(value, str) and bool(IMAGE_URL.search(value))


def is_video_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return bool(VIDEO_URL.search(value)) or "video" in value.lower()


def is_map_embed(value: Any) -> bool:
    return isinstance(value, str) and bool(MAP_EMBED.search(value))
