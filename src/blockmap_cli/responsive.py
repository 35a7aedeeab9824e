"""Responsive layout and conditional-rendering extraction."""

from __future__ import annotations

import re
from typing import Sequence

from .markup import BREAKPOINTS, class_tokens, split_variant
from .model import ImportStatement, LayoutConfig, ResponsiveInfo

GRID_COLS = re.compile(r"^grid-cols-(\d+)$")
FLEX_DIRECTIONS = {"flex-row": "row", "flex-col": "column"}

VIEWPORT_CHECK = re.compile(r"\bisMobile\b|\bisDesktop\b|\bwidth\s*[<>]|window\.innerWidth")
TERNARY = re.compile(
    r"(?P<cond>\bisMobile\b|\bisDesktop\b|\b(?:width|innerWidth)\s*(?P<op>[<>])=?\s*\d+)"
    r"\s*\?\s*\(?\s*<(?P<first>[A-Za-z][\w.]*)"
    r"(?:[^?:]*?:\s*\(?\s*<(?P<second>[A-Za-z][\w.]*))?"
)
GUARD = re.compile(
    r"(?P<cond>\bisMobile\b|\bisDesktop\b|\b(?:width|innerWidth)\s*(?P<op>[<>])=?\s*\d+)"
    r"\s*&&\s*\(?\s*<(?P<first>[A-Za-z][\w.]*)"
)


def extract_layout(markup: str) -> LayoutConfig | None:
    """Bucket class tokens by breakpoint and pull out grid/flex settings."""
    buckets: dict[str, list[str]] = {"base": [], **{bp: [] for bp in BREAKPOINTS}}
    grid: dict[str, int] = {}
    flex: dict[str, str] = {}

    for token in class_tokens(markup):
        variants, base = split_variant(token)
        breakpoint = next((v for v in variants if v in BREAKPOINTS), "base")
        buckets[breakpoint].append(token)
        # state variants (hover:, dark:) don't change layout
        if any(v not in BREAKPOINTS for v in variants):
            continue
        cols = GRID_COLS.match(base)
        if cols:
            grid[breakpoint] = int(cols.group(1))
        if base in FLEX_DIRECTIONS:
            flex[breakpoint] = FLEX_DIRECTIONS[base]

    responsive = any(buckets[bp] for bp in BREAKPOINTS)
    if not (responsive or grid or flex):
        return None
    return LayoutConfig(
        breakpoints={bp: classes for bp, classes in buckets.items() if classes},
        grid=grid,
        flex_direction=flex,
    )


def _is_mobile_condition(match: re.Match) -> bool:
    cond = match.group("cond")
    if "isMobile" in cond:
        return True
    if "isDesktop" in cond:
        return False
    return match.group("op") == "<"


def detect_conditional_rendering(
    markup: str, imports: Sequence[ImportStatement]
) -> ResponsiveInfo | None:
    """Find components rendered only on mobile or desktop viewports."""
    media_hook = any(imp.binds("useMediaQuery") for imp in imports)
    if not media_hook and not VIEWPORT_CHECK.search(markup):
        return None

    mobile = desktop = None
    ternary = TERNARY.search(markup)
    if ternary:
        first, second = ternary.group("first"), ternary.group("second")
        if _is_mobile_condition(ternary):
            mobile, desktop = first, second
        else:
            desktop, mobile = first, second
    else:
        for guard in GUARD.finditer(markup):
            if _is_mobile_condition(guard):
                mobile = mobile or guard.group("first")
            else:
                desktop = desktop or guard.group("first")

    if mobile and desktop and mobile != desktop:
        variant = "bothDifferent"
    elif mobile and not desktop:
        variant = "mobileOnly"
    elif desktop and not mobile:
        variant = "desktopOnly"
    else:
        variant = "auto"
    return ResponsiveInfo(variant=variant, mobile_component=mobile, desktop_component=desktop)


def detect_responsive(markup: str, imports: Sequence[ImportStatement]) -> ResponsiveInfo | None:
    layout = extract_layout(markup)
    conditional = detect_conditional_rendering(markup, imports)
    if conditional is not None:
        conditional.use_custom_layout = layout is not None
        conditional.layout_config = layout
        return conditional
    if layout is not None:
        return ResponsiveInfo(variant="auto", use_custom_layout=True, layout_config=layout)
    return None
