"""Tests for the per-component analyzer."""

from blockmap_cli.analyzer import analyze_component, analyze_source
from blockmap_cli.model import Category

from conftest import BROKEN_SOURCE, HERO_SOURCE, PROGRAMS_RESPONSIVE_SOURCE, WIDGET_SOURCE


class TestAnalyzeSource:
    def test_hero(self):
        result = analyze_source(HERO_SOURCE, "components/HeroBanner.tsx")
        assert result.ok
        assert result.component_name == "HeroBanner"
        assert result.category == Category.HERO
        assert result.confidence == 1.0
        assert result.schema.field_names == [
            "blockLabel", "title", "content", "backgroundImage", "buttonLabel", "buttonUrl",
        ]
        assert result.schema.motion is None
        assert result.schema.responsive is None
        assert result.schema.rendering_hints.preferred_viewport == "fullWidth"
        assert result.content["backgroundImage"] == "/hero.jpg"

    def test_runners_up_are_reported(self):
        result = analyze_source(HERO_SOURCE, "HeroBanner.tsx")
        also = [w for w in result.warnings if w.startswith("Also matched")]
        assert len(also) == 1
        assert "ctaBanner" in also[0]
        assert result.candidates[0].category == Category.HERO

    def test_generic_fallback_warns(self):
        result = analyze_source(WIDGET_SOURCE, "Widget.tsx")
        assert result.category == Category.GENERIC
        assert result.confidence == 0.3
        assert result.schema.field_names == ["blockLabel", "title", "subtitle"]
        assert result.content["title"] == "Hello"
        assert any("No pattern scored above" in w for w in result.warnings)

    def test_responsive_layout_group(self):
        result = analyze_source(PROGRAMS_RESPONSIVE_SOURCE, "Programs.tsx")
        assert result.category == Category.CARD_GRID
        assert result.schema.field_names[-1] == "layout"
        assert result.content["layout"]["useCustomLayout"] is True
        assert result.content["layout"]["config"]["grid"] == {"base": 1, "md": 3}

    def test_deterministic(self):
        first = analyze_source(PROGRAMS_RESPONSIVE_SOURCE, "Programs.tsx").to_dict()
        second = analyze_source(PROGRAMS_RESPONSIVE_SOURCE, "Programs.tsx").to_dict()
        assert first == second

    def test_mapping(self):
        mapping = analyze_source(HERO_SOURCE, "HeroBanner.tsx").mapping(version=2).to_dict()
        assert mapping["blockType"] == "hero"
        assert mapping["version"] == 2
        assert mapping["detectionMetadata"]["nameMatch"] is True


class TestPlaceholder:
    def test_parse_failure(self):
        result = analyze_source(BROKEN_SOURCE, "components/Broken.tsx")
        assert not result.ok
        assert result.component_name == "Broken"
        assert result.category == Category.GENERIC
        assert result.confidence == 0.0
        assert "syntax error" in result.errors[0]
        assert result.content["blockType"] == Category.GENERIC.value
        assert result.content["blockLabel"] == "Broken Block"

    def test_unreadable_file(self, tmp_path):
        result = analyze_component(tmp_path / "Missing.tsx")
        assert not result.ok
        assert result.component_name == "Missing"
        assert result.errors[0].startswith("Could not read Missing.tsx")

    def test_component_file(self, tmp_path):
        path = tmp_path / "HeroBanner.tsx"
        path.write_text(HERO_SOURCE)
        result = analyze_component(path)
        assert result.category == Category.HERO
        assert result.source_path == str(path)
