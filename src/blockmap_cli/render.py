"""Render a FieldSchema as a TypeScript block config module."""

from __future__ import annotations

import json
from pathlib import Path

from .model import FieldSchema, SchemaField

INDENT = "  "


def ts_string(value: str) -> str:
    """Single-quoted TypeScript string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


def pascal_case(slug: str) -> str:
    return slug[:1].upper() + slug[1:]


def export_name(slug: str) -> str:
    """'cardGrid' -> 'CardGridBlock'; slugs already ending in Block keep one suffix."""
    name = pascal_case(slug)
    return name if name.endswith("Block") else f"{name}Block"


def _render_field(field: SchemaField, depth: int) -> str:
    pad = INDENT * depth
    inner = INDENT * (depth + 1)
    lines = [
        f"{inner}name: {ts_string(field.name)},",
        f"{inner}type: {ts_string(field.kind.value)},",
        f"{inner}label: {ts_string(field.label)},",
    ]
    if field.required:
        lines.append(f"{inner}required: true,")
    if field.default is not None:
        lines.append(f"{inner}defaultValue: {json.dumps(field.default)},")
    if field.relation_to:
        lines.append(f"{inner}relationTo: {ts_string(field.relation_to)},")
    if field.options:
        options = ", ".join(
            f"{{ label: {ts_string(label)}, value: {ts_string(value)} }}" for label, value in field.options
        )
        lines.append(f"{inner}options: [{options}],")
    if field.min_rows is not None:
        lines.append(f"{inner}minRows: {field.min_rows},")
    if field.nested:
        lines.append(f"{inner}fields: [")
        lines.extend(_render_field(sub, depth + 2) for sub in field.nested)
        lines.append(f"{inner}],")
    if field.description:
        lines.append(f"{inner}admin: {{ description: {ts_string(field.description)} }},")
    return "\n".join([f"{pad}{{", *lines, f"{pad}}},"])


def render_block_source(schema: FieldSchema) -> str:
    """TypeScript module exporting the schema as a ``Block`` config."""
    fields = "\n".join(_render_field(field, 2) for field in schema.fields)
    return (
        "import type { Block } from 'payload'\n"
        "\n"
        f"export const {export_name(schema.slug)}: Block = {{\n"
        f"{INDENT}slug: {ts_string(schema.slug)},\n"
        f"{INDENT}labels: {{\n"
        f"{INDENT * 2}singular: {ts_string(schema.label)},\n"
        f"{INDENT * 2}plural: {ts_string(schema.label + 's')},\n"
        f"{INDENT}}},\n"
        f"{INDENT}fields: [\n"
        f"{fields}\n"
        f"{INDENT}],\n"
        "}\n"
    )


def write_block_source(schema: FieldSchema, path: Path, source: str | None = None) -> Path:
    """Write the rendered module, or a pre-rendered ``source`` for it, to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source if source is not None else render_block_source(schema), encoding="utf-8")
    return path
