"""Motion and scroll-reveal extraction.

Looks only at the returned markup and the import list. Each detector returns
``None`` when it sees nothing; ``detect_motion`` takes the first engine found
in the order framer-motion, gsap, css.
"""

from __future__ import annotations

import re
from typing import Sequence

from .markup import class_tokens, parse_object_literal, split_variant
from .model import ImportStatement, MotionInfo, RenderingHints, ScrollRevealInfo

MOTION_ELEMENT = re.compile(
    r"<motion\.(div|section|article|header|footer|nav|aside|main|span|p|h[1-6]|img|button|a|ul|li)\b"
)
MOTION_PROPS = ("initial", "animate", "exit", "whileInView", "whileHover", "transition")

GSAP_MARKER = re.compile(r"\bgsap\.\w+\(|\buseGSAP\b|\bScrollTrigger\b|\bref=\{")
GSAP_TIMELINE = re.compile(r"gsap\.timeline\(|\btimeline\b", re.IGNORECASE)
GSAP_SCROLL_TRIGGER = re.compile(r"ScrollTrigger\.(create|refresh)|scrollTrigger\s*:")
GSAP_TWEEN_CONFIG = re.compile(r"\{([^{}]*\bduration\b[^{}]*)\}")

CSS_MOTION_PREFIXES = ("transition", "duration-", "delay-", "ease-", "animate-")

REVEAL_MARKER = re.compile(
    r"IntersectionObserver|useIntersectionObserver|whileInView|scrollReveal|scroll-reveal"
    r"|fade-in-section|\banimate-in\b"
)
REVEAL_CENTER = re.compile(r"viewportCenter|\bamount\s*:\s*0?\.5\b")
REVEAL_FULL = re.compile(r"fullyVisible|\bamount\s*:\s*(?:1(?:\.0)?\b|[\"']all[\"'])", re.IGNORECASE)
REVEAL_ONCE = re.compile(r"\bonce\s*:\s*true|\bonce=\{\s*true\s*\}|\btriggerOnce\b")
REVEAL_OFFSET = re.compile(r"\boffset\s*[:=]\s*\{?\s*(\d+)")

Z_INDEX = re.compile(r"^-?z-(\d+|\[)")


def _motion_prop(markup: str, prop: str):
    literal = re.search(rf"\b{prop}\s*=\s*\{{\{{(.*?)\}}\}}", markup, re.DOTALL)
    if literal:
        return parse_object_literal(literal.group(1))
    variant = re.search(rf"\b{prop}\s*=\s*[\"']([\w-]+)[\"']", markup)
    if variant:
        return {"variant": variant.group(1)}
    return None


def detect_framer_motion(markup: str, imports: Sequence[ImportStatement]) -> MotionInfo | None:
    imported = any("framer-motion" in imp.source or imp.source == "motion/react" for imp in imports)
    if not imported and not MOTION_ELEMENT.search(markup):
        return None

    config: dict = {"type": "framerMotion"}
    for prop in MOTION_PROPS:
        value = _motion_prop(markup, prop)
        if value is not None:
            config[prop] = value
    return MotionInfo(engine="framerMotion", enabled=True, config=config)


def detect_gsap(markup: str, imports: Sequence[ImportStatement]) -> MotionInfo | None:
    gsap_imports = [
        imp for imp in imports
        if imp.source in ("gsap", "@gsap/react") or imp.source.startswith("gsap/")
    ]
    if not gsap_imports or not GSAP_MARKER.search(markup):
        return None

    config: dict = {
        "type": "gsap",
        "timeline": bool(GSAP_TIMELINE.search(markup)),
        "scrollTrigger": bool(GSAP_SCROLL_TRIGGER.search(markup)) or any(
            "ScrollTrigger" in imp.source or imp.binds("ScrollTrigger") for imp in gsap_imports
        ),
    }
    tween = GSAP_TWEEN_CONFIG.search(markup)
    if tween:
        config["rawConfig"] = parse_object_literal(tween.group(1))
    return MotionInfo(engine="gsap", enabled=True, config=config)


def detect_css_animations(markup: str) -> MotionInfo | None:
    classes = [
        token for token in class_tokens(markup)
        if split_variant(token)[1].startswith(CSS_MOTION_PREFIXES)
    ]
    if not classes:
        return None
    return MotionInfo(engine="css", enabled=True, config={"type": "css", "classes": classes})


def detect_motion(markup: str, imports: Sequence[ImportStatement]) -> MotionInfo | None:
    return (
        detect_framer_motion(markup, imports)
        or detect_gsap(markup, imports)
        or detect_css_animations(markup)
    )


def detect_scroll_reveal(markup: str, imports: Sequence[ImportStatement]) -> ScrollRevealInfo | None:
    """Find viewport-entry reveal behaviour and its trigger settings."""
    in_view_hook = any(
        imp.binds("useInView") or "intersection-observer" in imp.source for imp in imports
    )
    if not in_view_hook and not REVEAL_MARKER.search(markup):
        return None

    if REVEAL_CENTER.search(markup):
        trigger = "viewportCenter"
    elif REVEAL_FULL.search(markup):
        trigger = "viewportFullyVisible"
    else:
        trigger = "viewportEnter"

    offset = REVEAL_OFFSET.search(markup)
    return ScrollRevealInfo(
        enabled=True,
        trigger=trigger,
        once=bool(REVEAL_ONCE.search(markup)),
        offset=int(offset.group(1)) if offset else None,
    )


def rendering_hints(
    motion: MotionInfo | None,
    scroll_reveal: ScrollRevealInfo | None,
    markup: str,
) -> RenderingHints:
    tokens = class_tokens(markup)
    variants = [split_variant(t) for t in tokens]
    bases = {base for _, base in variants}
    config = motion.config if motion else {}

    has_hover = "whileHover" in config or any(
        "hover" in v or "group-hover" in v for v, _ in variants
    )
    heavy = motion is not None and (
        motion.engine == "gsap"
        or len(config.get("classes", [])) > 5
        or len([k for k in config if k in MOTION_PROPS]) > 3
    )

    if "w-full" in bases and ("container" in bases or any(b.startswith("max-w-") for b in bases)):
        viewport = "contained"
    elif "w-full" in bases:
        viewport = "fullWidth"
    else:
        viewport = "section"

    return RenderingHints(
        should_animate_on_scroll=bool(scroll_reveal and scroll_reveal.enabled),
        has_initial_animation=motion is not None and "initial" in config,
        has_hover_effects=has_hover,
        heavy_animation=heavy,
        preferred_viewport=viewport,
        z_index_sensitive=any(Z_INDEX.match(b) for b in bases),
    )
