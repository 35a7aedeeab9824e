"""Tests for motion, scroll-reveal and rendering-hint extraction."""

from blockmap_cli.model import ImportStatement, MotionInfo, ScrollRevealInfo
from blockmap_cli.motion import (
    detect_css_animations,
    detect_gsap,
    detect_motion,
    detect_scroll_reveal,
    rendering_hints,
)

FRAMER_IMPORT = ImportStatement("framer-motion", named=("motion",))


class TestFramerMotion:
    def test_object_literal_props(self):
        markup = (
            "<motion.div initial={{ opacity: 0, y: 20 }} animate={{ opacity: 1, y: 0 }}"
            " transition={{ duration: 0.5 }}>Hi</motion.div>"
        )
        motion = detect_motion(markup, [FRAMER_IMPORT])
        assert motion.engine == "framerMotion"
        assert motion.enabled
        assert motion.config == {
            "type": "framerMotion",
            "initial": {"opacity": 0, "y": 20},
            "animate": {"opacity": 1, "y": 0},
            "transition": {"duration": 0.5},
        }

    def test_variant_names_without_import(self):
        markup = '<motion.section initial="hidden" animate="visible">x</motion.section>'
        motion = detect_motion(markup, [])
        assert motion.engine == "framerMotion"
        assert motion.config["initial"] == {"variant": "hidden"}
        assert motion.config["animate"] == {"variant": "visible"}

    def test_framer_wins_over_css_classes(self):
        markup = '<motion.div className="transition-all duration-300">x</motion.div>'
        assert detect_motion(markup, [FRAMER_IMPORT]).engine == "framerMotion"


class TestGsap:
    def test_import_and_ref(self):
        imports = [
            ImportStatement("gsap", default_alias="gsap"),
            ImportStatement("gsap/ScrollTrigger", named=("ScrollTrigger",)),
        ]
        motion = detect_gsap("<div ref={container}>x</div>", imports)
        assert motion.engine == "gsap"
        assert motion.config["scrollTrigger"] is True
        assert motion.config["timeline"] is False

    def test_import_without_call_site(self):
        imports = [ImportStatement("gsap", default_alias="gsap")]
        assert detect_gsap("<div>x</div>", imports) is None
        assert detect_motion("<div>x</div>", imports) is None


class TestCssAnimations:
    def test_transition_classes(self):
        markup = '<div className="p-4 transition-all duration-300 hover:scale-105 md:ease-in-out">x</div>'
        motion = detect_css_animations(markup)
        assert motion.engine == "css"
        assert motion.config["classes"] == ["transition-all", "duration-300", "md:ease-in-out"]

    def test_no_motion(self):
        assert detect_motion('<div className="p-4">x</div>', []) is None


class TestScrollReveal:
    def test_while_in_view_center_once(self):
        markup = (
            "<motion.div whileInView={{ opacity: 1 }}"
            " viewport={{ once: true, amount: 0.5 }}>x</motion.div>"
        )
        reveal = detect_scroll_reveal(markup, [FRAMER_IMPORT])
        assert reveal.enabled
        assert reveal.trigger == "viewportCenter"
        assert reveal.once is True
        assert reveal.offset is None

    def test_fully_visible(self):
        markup = "<motion.div whileInView={{ opacity: 1 }} viewport={{ amount: 'all' }}>x</motion.div>"
        assert detect_scroll_reveal(markup, []).trigger == "viewportFullyVisible"

    def test_observer_hook_with_offset(self):
        imports = [ImportStatement("react-intersection-observer", named=("useInView",))]
        reveal = detect_scroll_reveal("<Reveal offset={100} triggerOnce>x</Reveal>", imports)
        assert reveal.trigger == "viewportEnter"
        assert reveal.once is True
        assert reveal.offset == 100
        assert reveal.to_dict()["offset"] == 100

    def test_text_center_is_not_a_trigger(self):
        markup = '<div className="scroll-reveal text-center">x</div>'
        assert detect_scroll_reveal(markup, []).trigger == "viewportEnter"

    def test_nothing_found(self):
        assert detect_scroll_reveal('<div className="p-4">x</div>', []) is None


class TestRenderingHints:
    def test_contained_viewport(self):
        hints = rendering_hints(None, None, '<div className="w-full max-w-5xl z-10 hover:shadow-lg">x</div>')
        assert hints.preferred_viewport == "contained"
        assert hints.z_index_sensitive
        assert hints.has_hover_effects
        assert not hints.heavy_animation
        assert not hints.should_animate_on_scroll

    def test_full_width_and_section(self):
        assert rendering_hints(None, None, '<div className="w-full">x</div>').preferred_viewport == "fullWidth"
        assert rendering_hints(None, None, "<div>x</div>").preferred_viewport == "section"

    def test_gsap_is_heavy(self):
        motion = MotionInfo(engine="gsap", enabled=True, config={"type": "gsap"})
        assert rendering_hints(motion, None, "<div>x</div>").heavy_animation

    def test_many_css_classes_are_heavy(self):
        classes = ["transition", "duration-300", "delay-100", "ease-in", "animate-pulse", "animate-bounce"]
        motion = MotionInfo(engine="css", enabled=True, config={"type": "css", "classes": classes})
        assert rendering_hints(motion, None, "<div>x</div>").heavy_animation

    def test_framer_initial_and_scroll(self):
        motion = MotionInfo(
            engine="framerMotion", enabled=True,
            config={"type": "framerMotion", "initial": {"opacity": 0}, "whileHover": {"scale": 1.05}},
        )
        hints = rendering_hints(motion, ScrollRevealInfo(enabled=True), "<div>x</div>")
        assert hints.has_initial_animation
        assert hints.has_hover_effects
        assert hints.should_animate_on_scroll
        assert not hints.heavy_animation
