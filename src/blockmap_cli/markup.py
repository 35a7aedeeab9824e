"""Text helpers over component markup: class tokens and object literals."""

from __future__ import annotations

import re
from typing import Any

CLASS_ATTR = re.compile(r"""\bclass(?:Name)?\s*=\s*\{?\s*(["'`])(.*?)\1""", re.DOTALL)
CLASS_HELPER = re.compile(r"\b(?:cn|clsx|classNames|twMerge)\(([^()]*)\)")
STRING_LITERAL = re.compile(r"""(["'`])(.*?)\1""", re.DOTALL)
NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")

BREAKPOINTS = ("sm", "md", "lg", "xl", "2xl")


def class_tokens(markup: str) -> list[str]:
    """Class names used in the markup, in order of first appearance."""
    chunks = [m.group(2) for m in CLASS_ATTR.finditer(markup)]
    for call in CLASS_HELPER.finditer(markup):
        chunks.extend(m.group(2) for m in STRING_LITERAL.finditer(call.group(1)))

    seen: dict[str, None] = {}
    for chunk in chunks:
        for token in chunk.split():
            if "$" in token or "{" in token or "}" in token:
                continue
            seen.setdefault(token, None)
    return list(seen)


def split_variant(token: str) -> tuple[list[str], str]:
    """'md:hover:scale-105' -> (['md', 'hover'], 'scale-105')."""
    parts = token.split(":")
    return parts[:-1], parts[-1]


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on ``sep`` outside brackets and string literals."""
    parts: list[str] = []
    depth = 0
    quote = ""
    current: list[str] = []
    escaped = False
    for ch in text:
        if quote:
            current.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = ""
            continue
        if ch in "\"'`":
            quote = ch
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    if "".join(current).strip():
        parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def parse_object_literal(body: str) -> dict[str, Any]:
    """Best-effort conversion of a JS object literal body (without braces)."""
    result: dict[str, Any] = {}
    for item in split_top_level(body):
        if item.startswith("..."):
            continue
        key, colon, raw = item.partition(":")
        key = key.strip().strip("\"'")
        if not key:
            continue
        result[key] = parse_literal_value(raw) if colon else key
    return result


def parse_literal_value(raw: str) -> Any:
    value = raw.strip()
    if value in ("true", "false"):
        return value == "true"
    if value in ("null", "undefined"):
        return None
    if NUMBER.fullmatch(value):
        return float(value) if "." in value else int(value)
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'`":
        return value[1:-1]
    if value.startswith("[") and value.endswith("]"):
        return [parse_literal_value(v) for v in split_top_level(value[1:-1])]
    if value.startswith("{") and value.endswith("}"):
        return parse_object_literal(value[1:-1])
    return value
