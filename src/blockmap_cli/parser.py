"""Component source parsing with tree-sitter.

Turns one TSX/JSX/TS file into a ComponentDescriptor: its imports, the
primary component's declared parameters (with literal defaults), and the
markup that component returns. Other components declared in the same file
become child descriptors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser

from .log import get_logger
from .model import BlockmapError, ComponentDescriptor, ImportStatement

logger = get_logger("parser")

TSX_LANGUAGE = Language(ts_typescript.language_tsx())
TS_LANGUAGE = Language(ts_typescript.language_typescript())

FUNCTION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
}
SCOPE_TYPES = FUNCTION_TYPES | {"method_definition", "class_declaration", "class"}
JSX_TYPES = {"jsx_element", "jsx_self_closing_element", "jsx_fragment"}
WRAPPER_TYPES = {"parenthesized_expression", "as_expression", "satisfies_expression", "non_null_expression"}

ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


class ComponentParseError(BlockmapError):
    """Source text could not be parsed into a syntax tree."""


@dataclass
class _Candidate:
    name: str | None
    node: Node
    exported: bool = False
    default: bool = False


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _walk(node: Node, skip: set[str] | None = None) -> Iterator[Node]:
    """Depth-first, document-order walk that does not enter ``skip`` node types."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        children = [c for c in current.named_children if not skip or c.type not in skip]
        stack.extend(reversed(children))


def _grammar_for(path: str) -> Language:
    return TS_LANGUAGE if path.lower().endswith(".ts") else TSX_LANGUAGE


def _first_error_line(root: Node) -> int:
    for node in _walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
    return root.start_point[0] + 1


def parse_component(text: str, path: str | Path = "") -> ComponentDescriptor:
    """Parse component source into a descriptor.

    Raises ComponentParseError when the grammar reports syntax errors.
    """
    source_path = str(path)
    tree = Parser(_grammar_for(source_path)).parse(text.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        line = _first_error_line(root)
        raise ComponentParseError(f"Failed to parse component: syntax error at line {line}")

    stem = Path(source_path).stem if source_path else "Component"
    imports = tuple(_collect_imports(root))
    candidates = _collect_candidates(root)
    primary = _pick_primary(candidates, stem)

    if primary is None:
        logger.debug("%s: no component declaration found, using whole file", source_path)
        return ComponentDescriptor(
            name=stem,
            parameters={},
            markup_text=text,
            imports=imports,
            source_path=source_path,
            source_text=text,
        )

    children = []
    for candidate in candidates:
        if candidate is primary or not candidate.name or not candidate.name[0].isupper():
            continue
        returned = _returned_node(candidate.node)
        if returned is None or not _contains_jsx(returned):
            continue
        children.append(ComponentDescriptor(
            name=candidate.name,
            parameters=_parameters(candidate.node),
            markup_text=_text(returned),
            imports=imports,
            source_path=source_path,
            source_text=text,
        ))

    returned = _returned_node(primary.node)
    return ComponentDescriptor(
        name=primary.name or stem,
        parameters=_parameters(primary.node),
        markup_text=_text(returned) if returned is not None else text,
        imports=imports,
        source_path=source_path,
        source_text=text,
        children=tuple(children),
    )


# Imports


def _collect_imports(root: Node) -> Iterator[ImportStatement]:
    for node in root.named_children:
        if node.type != "import_statement":
            continue
        source = _string_value(node.child_by_field_name("source"))
        type_only = any(child.type == "type" for child in node.children)
        default_alias = None
        named: list[str] = []

        clause = next((c for c in node.named_children if c.type == "import_clause"), None)
        for part in clause.named_children if clause is not None else ():
            if part.type == "identifier":
                default_alias = _text(part)
            elif part.type == "namespace_import":
                ident = next((c for c in part.named_children if c.type == "identifier"), None)
                default_alias = _text(ident) or None
            elif part.type == "named_imports":
                for spec in part.named_children:
                    if spec.type != "import_specifier":
                        continue
                    name = spec.child_by_field_name("name")
                    if name is None:
                        continue
                    named.append(_string_value(name) if name.type == "string" else _text(name))

        yield ImportStatement(
            source=source,
            default_alias=default_alias,
            named=tuple(named),
            type_only=type_only,
        )


# Declarations


def _unwrap_function(node: Node | None) -> Node | None:
    """Function node behind a value, looking through memo()/forwardRef() style wrappers."""
    if node is None:
        return None
    if node.type in FUNCTION_TYPES:
        return node
    if node.type == "call_expression":
        args = node.child_by_field_name("arguments")
        for arg in args.named_children if args is not None else ():
            found = _unwrap_function(arg)
            if found is not None:
                return found
    if node.type in WRAPPER_TYPES and node.named_children:
        return _unwrap_function(node.named_children[0])
    return None


def _declarator_candidates(node: Node, exported: bool) -> Iterator[_Candidate]:
    for declarator in node.named_children:
        if declarator.type != "variable_declarator":
            continue
        name = declarator.child_by_field_name("name")
        fn = _unwrap_function(declarator.child_by_field_name("value"))
        if fn is not None and name is not None and name.type == "identifier":
            yield _Candidate(_text(name), fn, exported=exported)


def _declaration_candidates(node: Node, exported: bool, default: bool) -> Iterator[_Candidate]:
    if node.type in ("function_declaration", "generator_function_declaration"):
        yield _Candidate(_text(node.child_by_field_name("name")), node, exported, default)
    elif node.type in ("lexical_declaration", "variable_declaration"):
        yield from _declarator_candidates(node, exported)


def _collect_candidates(root: Node) -> list[_Candidate]:
    candidates: list[_Candidate] = []
    default_name = None

    for node in root.named_children:
        if node.type == "export_statement":
            is_default = any(child.type == "default" for child in node.children)
            declaration = node.child_by_field_name("declaration")
            value = node.child_by_field_name("value")
            if declaration is not None:
                candidates.extend(_declaration_candidates(declaration, True, is_default))
            elif value is not None and value.type == "identifier":
                default_name = _text(value)
            elif value is not None:
                fn = _unwrap_function(value)
                if fn is not None:
                    name = fn.child_by_field_name("name")
                    candidates.append(_Candidate(_text(name) or None, fn, True, True))
        else:
            candidates.extend(_declaration_candidates(node, False, False))

    if default_name:
        for candidate in candidates:
            if candidate.name == default_name:
                candidate.default = True
                candidate.exported = True
    return candidates


def _pick_primary(candidates: list[_Candidate], stem: str) -> _Candidate | None:
    def capitalized(c: _Candidate) -> bool:
        return bool(c.name) and c.name[0].isupper()

    rules = (
        lambda c: c.default,
        lambda c: c.name == stem,
        lambda c: c.exported and capitalized(c),
        capitalized,
        lambda c: bool(c.name) and "Component" in c.name,
    )
    for rule in rules:
        for candidate in candidates:
            if rule(candidate):
                return candidate
    return None


# Parameters


def _parameters(fn: Node) -> dict[str, Any]:
    params = fn.child_by_field_name("parameters")
    result: dict[str, Any] = {}
    patterns: list[Node] = []
    if params is None:
        single = fn.child_by_field_name("parameter")
        if single is not None:
            result[_text(single)] = None
            patterns.append(single)
    else:
        for param in params.named_children:
            if param.type in ("required_parameter", "optional_parameter"):
                pattern = param.child_by_field_name("pattern")
                _collect_pattern(pattern, param.child_by_field_name("value"), result)
            elif param.type != "comment":
                pattern = param
                _collect_pattern(pattern, None, result)
            else:
                continue
            if pattern is not None:
                patterns.append(pattern)

    # props object passed whole: its member accesses are the parameter list
    if len(patterns) == 1 and patterns[0].type == "identifier":
        props = _text(patterns[0])
        body = _text(fn.child_by_field_name("body"))
        accessed = re.findall(rf"\b{re.escape(props)}\.([A-Za-z_]\w*)", body)
        if accessed:
            return dict.fromkeys(accessed)
    return result


def _collect_pattern(pattern: Node | None, default: Node | None, out: dict[str, Any]) -> None:
    if pattern is None:
        return
    if pattern.type == "identifier":
        out[_text(pattern)] = _literal(default)
        return
    if pattern.type != "object_pattern":
        return
    for prop in pattern.named_children:
        if prop.type == "shorthand_property_identifier_pattern":
            out[_text(prop)] = None
        elif prop.type == "object_assignment_pattern":
            left = prop.child_by_field_name("left")
            out[_text(left)] = _literal(prop.child_by_field_name("right"))
        elif prop.type == "pair_pattern":
            key = _property_key(prop.child_by_field_name("key"))
            value = prop.child_by_field_name("value")
            if key is None:
                continue
            if value is not None and value.type == "assignment_pattern":
                out[key] = _literal(value.child_by_field_name("right"))
            else:
                out[key] = None


# Literals


def _unescape(raw: str) -> str:
    return re.sub(r"\\(.)", lambda m: ESCAPES.get(m.group(1), m.group(1)), raw)


def _string_value(node: Node | None) -> str:
    text = _text(node)
    if len(text) >= 2 and text[0] in "\"'`" and text[-1] == text[0]:
        text = text[1:-1]
    return _unescape(text)


def _property_key(node: Node | None) -> str | None:
    if node is None:
        return None
    if node.type == "string":
        return _string_value(node)
    if node.type in ("property_identifier", "number", "identifier"):
        return _text(node)
    return None


def _number(text: str) -> int | float | None:
    cleaned = text.replace("_", "")
    try:
        if cleaned.isdigit():
            return int(cleaned)
        if cleaned[:2].lower() in ("0x", "0o", "0b"):
            return int(cleaned, 0)
        return float(cleaned)
    except ValueError:
        return None


def _literal(node: Node | None) -> Any:
    """Python value of a literal expression; None for anything computed."""
    if node is None:
        return None
    kind = node.type
    if kind == "string":
        return _string_value(node)
    if kind == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return None
        return _string_value(node)
    if kind == "number":
        return _number(_text(node))
    if kind in ("true", "false"):
        return kind == "true"
    if kind == "unary_expression":
        value = _literal(node.child_by_field_name("argument"))
        operator = _text(node.child_by_field_name("operator"))
        if operator == "-" and isinstance(value, (int, float)) and not isinstance(value, bool):
            return -value
        return None
    if kind == "array":
        return [_literal(child) for child in node.named_children if child.type != "comment"]
    if kind == "object":
        result = {}
        for child in node.named_children:
            if child.type != "pair":
                continue
            key = _property_key(child.child_by_field_name("key"))
            if key is not None:
                result[key] = _literal(child.child_by_field_name("value"))
        return result
    if kind in WRAPPER_TYPES and node.named_children:
        return _literal(node.named_children[0])
    return None


# Markup


def _strip_parens(node: Node) -> Node:
    while node.type == "parenthesized_expression" and node.named_children:
        node = node.named_children[0]
    return node


def _contains_jsx(node: Node) -> bool:
    return any(n.type in JSX_TYPES for n in _walk(node))


def _returned_node(fn: Node) -> Node | None:
    """Expression the function returns; the last JSX-bearing return wins."""
    body = fn.child_by_field_name("body")
    if body is None:
        return None
    if body.type != "statement_block":
        return _strip_parens(body)

    returned = []
    for node in _walk(body, skip=SCOPE_TYPES):
        if node.type == "return_statement":
            value = next((c for c in node.named_children if c.type != "comment"), None)
            if value is not None:
                returned.append(_strip_parens(value))
    with_markup = [node for node in returned if _contains_jsx(node)]
    if with_markup:
        return with_markup[-1]
    return None
