"""Pattern detectors - weighted heuristic classification of components.

Every detector scores a fixed set of boolean signals against its weight
table (weights sum to 1.0) and returns a DetectedPattern, or None when the
score is under the threshold. ``DETECTORS`` lists them most specific first;
selection takes the first result strictly above the threshold. Reordering
that tuple is the supported way to tune classification.
"""

from __future__ import annotations

import re
from typing import Any, Callable

from .inference import contains_html, extract_field_info, is_image_url, is_map_embed, is_video_url
from .log import get_logger
from .model import Category, ComponentDescriptor, DetectedPattern, FieldInfo

logger = get_logger("detectors")

THRESHOLD = 0.5
FALLBACK_CONFIDENCE = 0.3

Detector = Callable[[ComponentDescriptor], "DetectedPattern | None"]


def _is_image_item(item: Any) -> bool:
    if isinstance(item, dict):
        return is_image_url(item.get("src") or item.get("url"))
    return is_image_url(item)


class _View:
    """Lower-level views of a descriptor that the signals are computed over."""

    def __init__(self, descriptor: ComponentDescriptor):
        self.descriptor = descriptor
        self.raw_name = descriptor.name
        self.name = descriptor.name.lower()
        self.markup = descriptor.markup_text
        self.source = descriptor.source_text or descriptor.markup_text
        self.props = " ".join(descriptor.parameters)
        self.values = list(descriptor.parameters.values())
        self.import_sources = " ".join(imp.source for imp in descriptor.imports)

    def named(self, pattern: str, exact: bool = False) -> bool:
        return bool(re.search(pattern, self.raw_name if exact else self.name))

    def image_list(self) -> bool:
        """A parameter default listing images: bare URLs or {src|url: ...} objects.

        Card rows that merely carry an ``image`` key do not count.
        """
        for value in self.values:
            if not isinstance(value, list) or not value:
                continue
            if all(_is_image_item(item) for item in value):
                return True
        return False

    def has(self, pattern: str, flags: int = re.IGNORECASE) -> bool:
        return bool(re.search(pattern, self.markup, flags))

    def count(self, pattern: str) -> int:
        return len(re.findall(pattern, self.markup, re.IGNORECASE))

    def declares(self, pattern: str) -> bool:
        """Array literals and other data usually sit outside the returned markup."""
        return bool(re.search(pattern, self.source, re.IGNORECASE))

    def prop(self, pattern: str) -> bool:
        return bool(re.search(pattern, self.props, re.IGNORECASE))


def pattern_fields(descriptor: ComponentDescriptor) -> dict[str, FieldInfo]:
    return {
        name: extract_field_info(name, value, descriptor.markup_text)
        for name, value in descriptor.parameters.items()
    }


def score(signals: dict[str, bool], weights: dict[str, float]) -> float:
    return round(sum(weight for key, weight in weights.items() if signals[key]), 4)


def _result(
    category: Category,
    view: _View,
    signals: dict[str, bool],
    weights: dict[str, float],
    **extra: Any,
) -> DetectedPattern | None:
    confidence = score(signals, weights)
    if confidence < THRESHOLD:
        return None
    metadata = {key: True for key, value in signals.items() if value}
    metadata.update({key: value for key, value in extra.items() if value})
    return DetectedPattern(
        category=category,
        confidence=confidence,
        metadata=metadata,
        fields=pattern_fields(view.descriptor),
        children=view.descriptor.children,
    )


HERO_WEIGHTS = {
    "nameMatch": 0.3,
    "isFullWidth": 0.2,
    "hasBackgroundImage": 0.2,
    "hasLargeTitle": 0.15,
    "hasButtons": 0.15,
}


def detect_hero(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"hero|banner"),
        "isFullWidth": v.has(r"w-full|full-width|min-h-\[600px\]|min-h-screen"),
        "hasBackgroundImage": v.has(r"backgroundImage|bg-\[url|style.*background"),
        "hasLargeTitle": v.has(r"text-[4-9]xl"),
        "hasButtons": v.has(r"button|cta|link.*href"),
    }
    return _result(
        Category.HERO, v, signals, HERO_WEIGHTS,
        hasTitle=v.has(r"<h1|title"),
        hasSubtitle=v.has(r"subtitle|description") or v.has(r"text-xl|text-2xl"),
    )


CONTACT_FORM_WEIGHTS = {
    "nameMatch": 0.3,
    "hasForm": 0.3,
    "hasInputs": 0.2,
    "hasNameField": 0.1,
    "hasEmailField": 0.05,
    "hasSubmit": 0.05,
}


def detect_contact_form(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"form|contact"),
        "hasForm": v.has(r"<form"),
        "hasInputs": v.has(r"<input|<textarea"),
        "hasNameField": v.has(r"\bname\b"),
        "hasEmailField": v.has(r"email"),
        "hasSubmit": v.has(r"submit"),
    }
    return _result(
        Category.CONTACT_FORM, v, signals, CONTACT_FORM_WEIGHTS,
        itemCount=v.count(r"<input|<textarea|<select"),
    )


MAP_WEIGHTS = {"nameMatch": 0.4, "hasIframe": 0.3, "hasGoogleMaps": 0.2, "hasMapEmbed": 0.1}


def detect_map(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"map"),
        "hasIframe": v.has(r"<iframe"),
        "hasGoogleMaps": v.has(r"google.*maps|maps\.google"),
        "hasMapEmbed": any(is_map_embed(value) for value in v.values),
    }
    return _result(Category.MAP, v, signals, MAP_WEIGHTS)


VIDEO_WEIGHTS = {
    "nameMatch": 0.3,
    "hasVideoTag": 0.3,
    "hasYouTube": 0.2,
    "hasVimeo": 0.15,
    "hasVideoUrl": 0.05,
}


def detect_video(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"video"),
        "hasVideoTag": v.has(r"<video"),
        "hasYouTube": v.has(r"youtube|youtu\.be"),
        "hasVimeo": v.has(r"vimeo"),
        "hasVideoUrl": any(is_video_url(value) for value in v.values),
    }
    return _result(Category.VIDEO, v, signals, VIDEO_WEIGHTS)


FAQ_WEIGHTS = {
    "nameMatch": 0.4,
    "hasDetails": 0.2,
    "hasAccordion": 0.2,
    "hasQuestionAnswer": 0.15,
    "hasItemsArray": 0.05,
}


def detect_faq(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"faq|accordion|collapse"),
        "hasDetails": v.has(r"<details"),
        "hasAccordion": v.has(r"accordion"),
        "hasQuestionAnswer": v.has(r"question") and v.has(r"answer"),
        "hasItemsArray": v.declares(r"faqs\s*:\s*\[|items\s*:\s*\["),
    }
    return _result(Category.FAQ, v, signals, FAQ_WEIGHTS, itemCount=v.count(r"<details|question"))


TABS_WEIGHTS = {"nameMatch": 0.4, "hasTabComponents": 0.4, "hasTabsArray": 0.1, "hasLabels": 0.1}


def detect_tabs(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"(?:^[Tt]|T)abs?(?![a-z])", exact=True),
        "hasTabComponents": v.has(r"<Tab(?:s|List|Panel)?\b|role=[\"']tab", 0),
        "hasTabsArray": v.declares(r"tabs\s*:\s*\[|items\s*:\s*\["),
        "hasLabels": v.has(r"label"),
    }
    return _result(Category.TABS, v, signals, TABS_WEIGHTS)


SLIDER_WEIGHTS = {
    "nameMatch": 0.4,
    "hasSwiper": 0.3,
    "hasSplide": 0.2,
    "hasSlidesArray": 0.05,
    "hasControls": 0.05,
}


def detect_slider(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"slider|carousel|swiper"),
        "hasSwiper": v.has(r"swiper") or "swiper" in v.import_sources,
        "hasSplide": v.has(r"splide") or "splide" in v.import_sources,
        "hasSlidesArray": v.declares(r"slides\s*:\s*\[|items\s*:\s*\["),
        "hasControls": v.has(r"navigation|arrows|dots"),
    }
    return _result(Category.SLIDER, v, signals, SLIDER_WEIGHTS, itemCount=v.count(r"<SwiperSlide|slide"))


TESTIMONIALS_WEIGHTS = {
    "nameMatch": 0.4,
    "hasTestimonialsArray": 0.3,
    "hasAvatar": 0.15,
    "hasQuotes": 0.1,
    "hasAuthor": 0.05,
}


def detect_testimonials(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"testimonial|review"),
        "hasTestimonialsArray": v.declares(r"testimonials\s*:\s*\[|reviews\s*:\s*\["),
        "hasAvatar": v.has(r"avatar|photo"),
        "hasQuotes": v.has(r"quote|[“”]|&ldquo;|&quot;"),
        "hasAuthor": v.has(r"\bname\b|author"),
    }
    return _result(Category.TESTIMONIALS, v, signals, TESTIMONIALS_WEIGHTS)


LOGO_CLOUD_WEIGHTS = {"nameMatch": 0.4, "hasLogosArray": 0.3, "hasManyLogos": 0.2, "hasRowLayout": 0.1}


def detect_logo_cloud(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    logo_count = v.count(r"logo|<img")
    signals = {
        "nameMatch": v.named(r"logo|cloud"),
        "hasLogosArray": v.declares(r"logos\s*:\s*\[|brands\s*:\s*\["),
        "hasManyLogos": logo_count > 3,
        "hasRowLayout": v.has(r"flex.*row|grid-cols"),
    }
    return _result(Category.LOGO_CLOUD, v, signals, LOGO_CLOUD_WEIGHTS, itemCount=logo_count)


PRICING_TABLE_WEIGHTS = {
    "nameMatch": 0.4,
    "hasPlansArray": 0.3,
    "hasPrices": 0.15,
    "hasFeatures": 0.1,
    "hasColumns": 0.05,
}


def detect_pricing_table(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"pricing|price"),
        "hasPlansArray": v.declares(r"plans\s*:\s*\[|prices\s*:\s*\[|tiers\s*:\s*\["),
        "hasPrices": v.has(r"price|\$\s?\d|€|£|/mo\b"),
        "hasFeatures": v.has(r"features"),
        "hasColumns": v.has(r"grid-cols-[34]"),
    }
    return _result(Category.PRICING_TABLE, v, signals, PRICING_TABLE_WEIGHTS)


IMAGE_GALLERY_WEIGHTS = {"nameMatch": 0.4, "hasImageArray": 0.3, "hasMultipleImages": 0.2, "hasGrid": 0.1}


def detect_image_gallery(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"gallery|images"),
        "hasImageArray": v.declares(r"images\s*:\s*\[|\.map\(.*image") or v.image_list(),
        "hasMultipleImages": v.count(r"<img|Image|image") > 2,
        "hasGrid": v.has(r"grid|flex.*wrap"),
    }
    return _result(
        Category.IMAGE_GALLERY, v, signals, IMAGE_GALLERY_WEIGHTS,
        itemCount=v.count(r"<img|<Image"),
    )


CARD_GRID_WEIGHTS = {
    "nameMatch": 0.3,
    "hasCardsArray": 0.3,
    "hasGrid": 0.2,
    "hasMultipleCards": 0.1,
    "hasImageAndTitle": 0.1,
}


def detect_card_grid(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    card_count = v.count(r"card")
    signals = {
        "nameMatch": v.named(r"grid|card"),
        "hasCardsArray": v.declares(r"cards\s*:\s*\[|items\s*:\s*\[|\.map\(.*card"),
        "hasGrid": v.has(r"grid"),
        "hasMultipleCards": card_count > 2,
        "hasImageAndTitle": v.has(r"image.*title|title.*image"),
    }
    return _result(Category.CARD_GRID, v, signals, CARD_GRID_WEIGHTS, itemCount=card_count)


FEATURE_LIST_WEIGHTS = {
    "nameMatch": 0.3,
    "hasFeaturesArray": 0.3,
    "hasIcons": 0.2,
    "hasChecks": 0.1,
    "isRepeated": 0.1,
}


def detect_feature_list(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"feature|list"),
        "hasFeaturesArray": v.declares(r"features\s*:\s*\[|items\s*:\s*\["),
        "hasIcons": v.has(r"icon|svg"),
        "hasChecks": v.has(r"check|✓|✔"),
        "isRepeated": v.has(r"\.map\(", 0),
    }
    return _result(Category.FEATURE_LIST, v, signals, FEATURE_LIST_WEIGHTS)


CTA_BANNER_WEIGHTS = {
    "nameMatch": 0.3,
    "hasButtons": 0.25,
    "hasTitleProp": 0.15,
    "hasSubtitleProp": 0.1,
    "hasBackground": 0.1,
    "hasNoImages": 0.1,
}


def detect_cta_banner(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"cta|banner"),
        "hasButtons": v.has(r"button|cta|link"),
        "hasTitleProp": v.prop(r"title|heading"),
        "hasSubtitleProp": v.prop(r"subtitle|description"),
        "hasBackground": v.has(r"bg-gradient|background"),
        "hasNoImages": not v.has(r"<img|<Image"),
    }
    return _result(Category.CTA_BANNER, v, signals, CTA_BANNER_WEIGHTS)


IMAGE_TEXT_WEIGHTS = {
    "nameMatch": 0.3,
    "hasImage": 0.25,
    "hasText": 0.25,
    "hasTwoColumns": 0.1,
    "hasImageProp": 0.1,
}


def detect_image_text(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"image|img|photo|media") and v.named(r"text|content|copy"),
        "hasImage": v.has(r"<img|<Image|image"),
        "hasText": v.has(r"<(?:p|h[1-6])[\s>]") or v.prop(r"text|content"),
        "hasTwoColumns": v.has(r"grid-cols-2|flex.*gap"),
        "hasImageProp": v.prop(r"image|img|photo"),
    }
    return _result(Category.IMAGE_TEXT, v, signals, IMAGE_TEXT_WEIGHTS)


RICH_TEXT_WEIGHTS = {
    "nameMatch": 0.2,
    "hasHtml": 0.3,
    "hasParagraphs": 0.2,
    "hasLists": 0.15,
    "hasTextProps": 0.15,
}


def detect_rich_text(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"content|text|section"),
        "hasHtml": contains_html(v.markup) or v.has(r"dangerouslySetInnerHTML|innerHTML", 0),
        "hasParagraphs": v.has(r"<(?:p|h[1-6])[\s>]"),
        "hasLists": v.has(r"<(?:ul|ol|li)[\s>]"),
        "hasTextProps": v.prop(r"content|text|description|body"),
    }
    return _result(Category.RICH_TEXT, v, signals, RICH_TEXT_WEIGHTS)


NAVIGATION_WEIGHTS = {"nameMatch": 0.4, "hasNavTag": 0.3, "hasLinks": 0.2, "hasLinksArray": 0.1}


def detect_navigation(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"nav|menu|header"),
        "hasNavTag": v.has(r"<nav\b"),
        "hasLinks": v.has(r"<a[\s>]|<Link\b|href"),
        "hasLinksArray": v.declares(r"items\s*:\s*\[|links\s*:\s*\[|menu\s*:\s*\["),
    }
    return _result(Category.NAVIGATION, v, signals, NAVIGATION_WEIGHTS, itemCount=v.count(r"<a[\s>]|<Link\b"))


FOOTER_WEIGHTS = {"nameMatch": 0.4, "hasFooterTag": 0.3, "hasColumns": 0.2, "hasSocial": 0.1}


def detect_footer(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "nameMatch": v.named(r"footer"),
        "hasFooterTag": v.has(r"<footer"),
        "hasColumns": v.has(r"grid-cols-[234]"),
        "hasSocial": v.has(r"social|icon"),
    }
    return _result(Category.FOOTER, v, signals, FOOTER_WEIGHTS)


GRID_LAYOUT_WEIGHTS = {"hasGrid": 0.5, "isRepeated": 0.3, "hasManyChildren": 0.2}


def detect_grid_layout(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "hasGrid": v.has(r"grid"),
        "isRepeated": v.has(r"\.map\(", 0),
        "hasManyChildren": len(descriptor.children) > 2,
    }
    return _result(Category.GRID_LAYOUT, v, signals, GRID_LAYOUT_WEIGHTS, itemCount=len(descriptor.children))


RAW_HTML_WEIGHTS = {"hasDangerousHtml": 0.5, "hasInnerHtml": 0.3, "hasPlainTags": 0.2}


def detect_raw_html(descriptor: ComponentDescriptor) -> DetectedPattern | None:
    v = _View(descriptor)
    signals = {
        "hasDangerousHtml": v.has(r"dangerouslySetInnerHTML", 0),
        "hasInnerHtml": v.has(r"\binnerHTML\b", 0),
        "hasPlainTags": v.has(r"<[^>]+>", 0) and not v.has(r"<[A-Z]", 0),
    }
    return _result(Category.RAW_HTML, v, signals, RAW_HTML_WEIGHTS)


DETECTORS: tuple[Detector, ...] = (
    detect_hero,
    detect_contact_form,
    detect_map,
    detect_video,
    detect_faq,
    detect_tabs,
    detect_slider,
    detect_testimonials,
    detect_logo_cloud,
    detect_pricing_table,
    detect_image_gallery,
    detect_card_grid,
    detect_feature_list,
    detect_cta_banner,
    detect_image_text,
    detect_rich_text,
    detect_navigation,
    detect_footer,
    detect_grid_layout,
    detect_raw_html,
)

WEIGHTS: dict[Category, dict[str, float]] = {
    Category.HERO: HERO_WEIGHTS,
    Category.CONTACT_FORM: CONTACT_FORM_WEIGHTS,
    Category.MAP: MAP_WEIGHTS,
    Category.VIDEO: VIDEO_WEIGHTS,
    Category.FAQ: FAQ_WEIGHTS,
    Category.TABS: TABS_WEIGHTS,
    Category.SLIDER: SLIDER_WEIGHTS,
    Category.TESTIMONIALS: TESTIMONIALS_WEIGHTS,
    Category.LOGO_CLOUD: LOGO_CLOUD_WEIGHTS,
    Category.PRICING_TABLE: PRICING_TABLE_WEIGHTS,
    Category.IMAGE_GALLERY: IMAGE_GALLERY_WEIGHTS,
    Category.CARD_GRID: CARD_GRID_WEIGHTS,
    Category.FEATURE_LIST: FEATURE_LIST_WEIGHTS,
    Category.CTA_BANNER: CTA_BANNER_WEIGHTS,
    Category.IMAGE_TEXT: IMAGE_TEXT_WEIGHTS,
    Category.RICH_TEXT: RICH_TEXT_WEIGHTS,
    Category.NAVIGATION: NAVIGATION_WEIGHTS,
    Category.FOOTER: FOOTER_WEIGHTS,
    Category.GRID_LAYOUT: GRID_LAYOUT_WEIGHTS,
    Category.RAW_HTML: RAW_HTML_WEIGHTS,
}


def generic_pattern(descriptor: ComponentDescriptor, confidence: float = FALLBACK_CONFIDENCE) -> DetectedPattern:
    """Fallback when no detector is confident enough."""
    return DetectedPattern(
        category=Category.GENERIC,
        confidence=confidence,
        metadata={"propCount": len(descriptor.parameters), "hasChildren": bool(descriptor.children)},
        fields=pattern_fields(descriptor),
        children=descriptor.children,
    )


def run_detectors(descriptor: ComponentDescriptor) -> list[DetectedPattern]:
    """Run every detector in priority order, keeping the non-null results."""
    results = []
    for detector in DETECTORS:
        try:
            found = detector(descriptor)
        except Exception:
            logger.debug("%s failed on %s", detector.__name__, descriptor.name, exc_info=True)
            continue
        if found is not None:
            results.append(found)
    return results


def select_pattern(results: list[DetectedPattern], descriptor: ComponentDescriptor) -> DetectedPattern:
    for pattern in results:
        if pattern.confidence > THRESHOLD:
            return pattern
    return generic_pattern(descriptor)


def detect_pattern(descriptor: ComponentDescriptor) -> DetectedPattern:
    return select_pattern(run_detectors(descriptor), descriptor)
