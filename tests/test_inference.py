"""Tests for field type inference."""

import pytest

from blockmap_cli.inference import (
    contains_html,
    extract_field_info,
    infer_field_type,
    is_image_url,
    is_map_embed,
    is_rich_text,
    is_video_url,
)
from blockmap_cli.model import SemanticType


class TestInferFieldType:
    def test_image_name_beats_url_value(self):
        assert infer_field_type("backgroundImage", "/hero.jpg", "") == SemanticType.IMAGE

    def test_url_name(self):
        assert infer_field_type("buttonUrl", "/contact", "") == SemanticType.URL

    def test_content_is_rich_text(self):
        assert infer_field_type("content", "<p>hi</p>", "<p>hi</p>") == SemanticType.RICH_TEXT

    def test_content_with_inner_html_is_html(self):
        context = "<div dangerouslySetInnerHTML={{ __html: content }} />"
        assert infer_field_type("content", "<p>hi</p>", context) == SemanticType.HTML

    @pytest.mark.parametrize("name", ["avatar", "companyLogo", "icon", "photoSrc"])
    def test_image_names(self, name):
        assert infer_field_type(name, None) == SemanticType.IMAGE

    def test_array_name(self):
        assert infer_field_type("cards", None) == SemanticType.ARRAY

    def test_children_is_component(self):
        assert infer_field_type("children", None) == SemanticType.COMPONENT

    def test_object_with_type_key_is_component(self):
        assert infer_field_type("slot", {"type": "Button"}) == SemanticType.COMPONENT

    @pytest.mark.parametrize("value, expected", [
        ([1, 2], SemanticType.ARRAY),
        ({"a": 1}, SemanticType.OBJECT),
        (True, SemanticType.BOOLEAN),
        (3, SemanticType.NUMBER),
        (2.5, SemanticType.NUMBER),
        ("https://example.com", SemanticType.URL),
        ("//cdn.example.com/x", SemanticType.URL),
        ("/about", SemanticType.URL),
        ("plain words", SemanticType.STRING),
        (None, SemanticType.STRING),
    ])
    def test_value_shapes(self, value, expected):
        assert infer_field_type("value", value) == expected

    def test_deterministic(self):
        first = infer_field_type("heading", "Hi", "<h1>Hi</h1>")
        assert all(infer_field_type("heading", "Hi", "<h1>Hi</h1>") == first for _ in range(5))


class TestExtractFieldInfo:
    def test_required_when_default_present(self):
        info = extract_field_info("title", "Welcome")
        assert info.is_required
        assert info.default_value == "Welcome"
        assert info.semantic_type == SemanticType.STRING

    def test_optional_without_default(self):
        info = extract_field_info("title", None)
        assert not info.is_required

    def test_to_dict(self):
        info = extract_field_info("count", 3)
        assert info.to_dict() == {"name": "count", "type": "number", "isRequired": True, "defaultValue": 3}


class TestValueHelpers:
    def test_contains_html(self):
        assert contains_html("<p>x</p>")
        assert not contains_html("just text")

    def test_is_rich_text(self):
        assert is_rich_text("<strong>bold</strong>")
        assert not is_rich_text("<div>plain</div>")

    def test_is_image_url(self):
        assert is_image_url("/img/team.webp")
        assert not is_image_url("/about")
        assert not is_image_url(None)

    def test_is_video_url(self):
        assert is_video_url("https://youtu.be/abc")
        assert is_video_url("/media/intro.mp4")
        assert not is_video_url("/about")

    def test_is_map_embed(self):
        assert is_map_embed("https://www.google.com/maps/embed?pb=1")
        assert not is_map_embed("https://example.com")
