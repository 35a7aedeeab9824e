"""Tests for content template synthesis."""

from blockmap_cli.content import IdAllocator, field_value, html_to_rich_text, synthesize_content
from blockmap_cli.detectors import detect_pattern
from blockmap_cli.generator import synthesize
from blockmap_cli.inference import extract_field_info
from blockmap_cli.model import (
    Category,
    ComponentDescriptor,
    DetectedPattern,
    FieldKind,
    MotionInfo,
    SchemaField,
)
from blockmap_cli.parser import parse_component

from conftest import HERO_SOURCE


def paragraph_texts(document):
    return [
        "".join(node["text"] for node in paragraph["children"])
        for paragraph in document["root"]["children"]
    ]


def pattern_with(category, **defaults):
    fields = {name: extract_field_info(name, value) for name, value in defaults.items()}
    return DetectedPattern(category=category, confidence=1.0, fields=fields)


class TestIdAllocator:
    def test_sequential_ids(self):
        ids = IdAllocator("Hero Banner")
        assert [ids.next_id(), ids.next_id()] == ["hero-banner-0001", "hero-banner-0002"]

    def test_empty_namespace(self):
        assert IdAllocator("!!!").next_id() == "block-0001"


class TestRichText:
    def test_block_tags_become_paragraphs(self):
        doc = html_to_rich_text("<p>One</p><p>Two &amp; <strong>three</strong></p>")
        assert paragraph_texts(doc) == ["One", "Two & three"]
        assert doc["root"]["type"] == "root"

    def test_plain_text_chunks(self):
        assert paragraph_texts(html_to_rich_text("First line\n\nSecond line")) == ["First line", "Second line"]

    def test_empty_source_has_one_paragraph(self):
        doc = html_to_rich_text("")
        assert len(doc["root"]["children"]) == 1
        assert doc["root"]["children"][0]["children"] == []


class TestSynthesizeContent:
    def test_hero_defaults_and_aliases(self):
        descriptor = parse_component(HERO_SOURCE, "HeroBanner.tsx")
        pattern = detect_pattern(descriptor)
        content = synthesize_content(pattern, synthesize(pattern), descriptor.name)
        assert content["blockType"] == "hero"
        assert content["blockLabel"] == "HeroBanner Block"
        assert content["title"] == "Welcome to Riverside"
        assert paragraph_texts(content["content"]) == ["Community programs for every age"]
        assert content["backgroundImage"] == "/hero.jpg"
        assert content["buttonLabel"] == "Get started"
        assert content["buttonUrl"] == "/contact"

    def test_keys_follow_schema(self):
        pattern = pattern_with(Category.FAQ)
        schema = synthesize(pattern)
        content = synthesize_content(pattern, schema, "Faq")
        assert list(content) == ["blockType", *schema.field_names]
        assert content["title"] == ""
        assert content["items"] == []

    def test_card_rows_use_item_aliases(self):
        pattern = pattern_with(Category.CARD_GRID, cards=[{"title": "Swim", "description": "Lessons", "img": "/s.jpg"}])
        content = synthesize_content(pattern, synthesize(pattern), "Programs")
        row = content["cards"][0]
        assert row["id"] == "programs-0001"
        assert row["image"] == "/s.jpg"
        assert row["title"] == "Swim"
        assert paragraph_texts(row["content"]) == ["Lessons"]
        assert row["buttonLabel"] == ""

    def test_scalar_rows_fill_first_field(self):
        pattern = pattern_with(Category.NAVIGATION, links=["Home", "About"])
        content = synthesize_content(pattern, synthesize(pattern), "Nav", IdAllocator("nav"))
        assert content["items"] == [
            {"id": "nav-0001", "label": "Home", "url": ""},
            {"id": "nav-0002", "label": "About", "url": ""},
        ]

    def test_animation_group_value(self):
        pattern = pattern_with(Category.MAP)
        motion = MotionInfo(engine="css", enabled=True, config={"type": "css", "classes": ["transition"]})
        content = synthesize_content(pattern, synthesize(pattern, motion), "Map")
        assert content["animation"] == {"enabled": True, "engine": "css", "config": motion.config}

    def test_generic_children_fill_content(self):
        child = ComponentDescriptor(name="Item", parameters={}, markup_text="<p>Child text</p>")
        pattern = DetectedPattern(category=Category.GENERIC, confidence=0.3, children=(child,))
        content = synthesize_content(pattern, synthesize(pattern), "Parent")
        assert paragraph_texts(content["content"]) == ["Child text"]


class TestFieldValue:
    def test_coercions(self):
        ids = IdAllocator("x")
        assert field_value(SchemaField("n", FieldKind.NUMBER, default=4), True, ids) == 4
        assert field_value(SchemaField("n", FieldKind.NUMBER), 2.5, ids) == 2.5
        assert field_value(SchemaField("t", FieldKind.TEXT), True, ids) == "true"
        assert field_value(SchemaField("t", FieldKind.TEXT), {"a": 1}, ids) == ""
        assert field_value(SchemaField("t", FieldKind.TEXT), "<strong>Hi</strong> there", ids) == "Hi there"
        assert field_value(SchemaField("h", FieldKind.TEXTAREA), "<p>Keep</p>", ids) == "<p>Keep</p>"
        assert field_value(SchemaField("c", FieldKind.CHECKBOX, default=False), "yes", ids) is False
        select = SchemaField("s", FieldKind.SELECT, options=[("Left", "left"), ("Right", "right")], default="left")
        assert field_value(select, "right", ids) == "right"
        assert field_value(select, "middle", ids) == "left"
        assert field_value(SchemaField("u", FieldKind.UPLOAD), "", ids) is None
        assert field_value(SchemaField("r", FieldKind.RICH_TEXT), "   ", ids) is None
