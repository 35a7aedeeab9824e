"""Tests for the tree-sitter component parser."""

import pytest

from blockmap_cli.parser import ComponentParseError, parse_component

from conftest import BROKEN_SOURCE, HERO_SOURCE, PROGRAMS_SOURCE


class TestPrimaryComponent:
    def test_default_export_function(self):
        d = parse_component(HERO_SOURCE, "components/HeroBanner.tsx")
        assert d.name == "HeroBanner"
        assert d.source_path == "components/HeroBanner.tsx"
        assert list(d.parameters) == ["title", "subtitle", "backgroundImage", "buttonLabel", "buttonUrl"]
        assert d.parameters["backgroundImage"] == "/hero.jpg"

    def test_markup_is_returned_jsx(self):
        d = parse_component(HERO_SOURCE, "HeroBanner.tsx")
        assert d.markup_text.startswith("<section")
        assert d.markup_text.rstrip().endswith("</section>")
        assert "interface HeroBannerProps" not in d.markup_text
        assert "interface HeroBannerProps" in d.source_text

    def test_named_export_matching_file_name(self):
        d = parse_component(PROGRAMS_SOURCE, "Programs.tsx")
        assert d.name == "Programs"
        assert d.parameters == {"title": "Our Programs", "cards": []}

    def test_arrow_component_with_expression_body(self):
        source = "export const Badge = ({ label = 'New' }) => <span className=\"badge\">{label}</span>\n"
        d = parse_component(source, "Badge.tsx")
        assert d.name == "Badge"
        assert d.parameters == {"label": "New"}
        assert d.markup_text.startswith("<span")

    def test_memo_wrapped_component(self):
        source = (
            "import { memo } from 'react'\n"
            "const Card = memo(function Card({ title }) {\n"
            "  return <div>{title}</div>\n"
            "})\n"
            "export default Card\n"
        )
        d = parse_component(source, "Card.jsx")
        assert d.name == "Card"
        assert d.parameters == {"title": None}

    def test_identifier_default_export(self):
        source = (
            "function helper() { return 1 }\n"
            "const Stats = ({ count = 3 }) => {\n"
            "  if (!count) return null\n"
            "  return <p>{count}</p>\n"
            "}\n"
            "export default Stats\n"
        )
        d = parse_component(source, "index.tsx")
        assert d.name == "Stats"
        assert d.markup_text == "<p>{count}</p>"

    def test_props_member_access(self):
        source = (
            "export default function Quote(props) {\n"
            "  return <blockquote>{props.text} - {props.author}</blockquote>\n"
            "}\n"
        )
        d = parse_component(source, "Quote.tsx")
        assert list(d.parameters) == ["text", "author"]

    def test_no_component_uses_whole_file(self):
        source = "export const tokens = { primary: '#fff' }\n"
        d = parse_component(source, "tokens.ts")
        assert d.name == "tokens"
        assert d.parameters == {}
        assert d.markup_text == source


class TestLiteralDefaults:
    def test_literal_shapes(self):
        source = (
            "export default function Pricing({\n"
            "  columns = 3,\n"
            "  ratio = 1.5,\n"
            "  offset = -2,\n"
            "  highlighted = true,\n"
            "  note = null,\n"
            "  plans = [{ name: 'Basic', price: 10 }, { name: 'Pro', price: 20 }],\n"
            "  theme = { accent: 'blue' },\n"
            "  label = `Plans`,\n"
            "  computed = makeDefault(),\n"
            "}) {\n"
            "  return <div>{columns}</div>\n"
            "}\n"
        )
        params = parse_component(source, "Pricing.tsx").parameters
        assert params["columns"] == 3
        assert params["ratio"] == 1.5
        assert params["offset"] == -2
        assert params["highlighted"] is True
        assert params["note"] is None
        assert params["plans"] == [{"name": "Basic", "price": 10}, {"name": "Pro", "price": 20}]
        assert params["theme"] == {"accent": "blue"}
        assert params["label"] == "Plans"
        assert params["computed"] is None

    def test_string_escapes(self):
        source = "export default function T({ text = 'It\\'s here' }) { return <p>{text}</p> }\n"
        assert parse_component(source, "T.tsx").parameters["text"] == "It's here"


class TestImports:
    def test_import_forms(self):
        source = (
            "import React, { useState } from 'react'\n"
            "import { motion as m } from 'framer-motion'\n"
            "import * as Icons from 'lucide-react'\n"
            "import type { Props } from './types'\n"
            "import './styles.css'\n"
            "export default function X() { return <div /> }\n"
        )
        imports = parse_component(source, "X.tsx").imports
        assert [imp.source for imp in imports] == ["react", "framer-motion", "lucide-react", "./types", "./styles.css"]
        react, framer, icons, types, css = imports
        assert react.default_alias == "React"
        assert react.named == ("useState",)
        assert framer.named == ("motion",)
        assert icons.default_alias == "Icons"
        assert types.type_only
        assert not react.type_only
        assert css.default_alias is None and css.named == ()


class TestChildren:
    def test_sibling_components_become_children(self):
        source = (
            "function Item({ label }) {\n"
            "  return <li>{label}</li>\n"
            "}\n"
            "function formatLabel(x) { return x.trim() }\n"
            "export default function List({ items = [] }) {\n"
            "  return <ul>{items.map((i) => <Item label={i} />)}</ul>\n"
            "}\n"
        )
        d = parse_component(source, "List.tsx")
        assert d.name == "List"
        assert [child.name for child in d.children] == ["Item"]
        assert d.children[0].markup_text == "<li>{label}</li>"


class TestParseErrors:
    def test_syntax_error_raises(self):
        with pytest.raises(ComponentParseError, match="line"):
            parse_component(BROKEN_SOURCE, "Broken.tsx")
