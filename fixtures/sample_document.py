"""
Sample marker documents for parser and generator testing.
SECTION_TEXT passes every rule in the section table.
"""

from typing import Iterable, Optional

# 16 words
INTRO_SENTENCE = (
    "Brewing great coffee at home is easier than most people think "
    "once you learn the basics."
)
# 18 words
BODY_SENTENCE = (
    "Fresh beans ground just before brewing release aromatic oils that make "
    "every cup taste brighter and more complex."
)
# 17 words
CONCLUSION_SENTENCE = (
    "Pick one change from this guide and try it with your next bag of beans this week."
)


def _repeat(sentence: str, times: int) -> str:
    return " ".join([sentence] * times)


SECTION_TEXT: dict[str, str] = {
    "section1": "How to Brew Better Coffee at Home\n{img} hero-coffee",
    "section2": _repeat(INTRO_SENTENCE, 5),
    "section3": "Choosing beans\nGrinding basics\nWater and temperature\nBrewing methods",
    "section4": (
        "Better flavor from fresh beans\n"
        "Lower cost per cup than cafes\n"
        "More control over strength"
    ),
    "section5": "\n\n".join([
        "CHOOSING BEANS\n" + _repeat(BODY_SENTENCE, 5),
        "Grinding Basics:\n" + _repeat(BODY_SENTENCE, 5) + "\n{img} burr-grinder",
        "WATER AND TEMPERATURE\n" + _repeat(BODY_SENTENCE, 5),
        "Brewing Methods:\n" + _repeat(BODY_SENTENCE, 5) + "\n{img} pour-over",
    ]),
    "section6": "Home brewers who weigh their beans report more consistent cups.",
    "section7": (
        "Method | Brew time | Body\n"
        "Pour-over | 3 min | Light\n"
        "French press | 4 min | Heavy"
    ),
    "section8": '"Good coffee starts with good water." - A. Barista, head roaster',
    "section9": "Heat water to 94C\nGrind 18g of beans\nBloom for 30 seconds\nPour slowly in circles",
    "section10": (
        "[Our grinder guide](/blogs/news/grinder-guide)\n"
        "[Bean storage tips](https://example.com/storage)"
    ),
    "section11": (
        "Q1: How fine should I grind for pour-over?\n"
        "A1: Aim for the texture of coarse sand.\n"
        "Q2: Does water quality matter?\n"
        "A2: Yes, filtered water gives a cleaner taste.\n"
        "Q3: How long do roasted beans stay fresh?\n"
        "A3: About two to four weeks after roasting.\n"
        "Q4: Can I reuse coffee grounds?\n"
        "A4: Not for drinking, but they make good compost."
    ),
    "section12": _repeat(CONCLUSION_SENTENCE, 3),
}

IMAGE_URLS: dict[str, str] = {
    "hero-coffee": "https://cdn.shopify.com/s/files/hero-coffee.jpg",
    "burr-grinder": "https://cdn.shopify.com/s/files/burr-grinder.jpg",
    "pour-over": "https://cdn.shopify.com/s/files/pour-over.jpg",
}


def build_document(
    overrides: Optional[dict[str, str]] = None,
    omit: Iterable[str] = (),
    order: Optional[list[str]] = None,
) -> str:
    """Assemble a marker document from SECTION_TEXT.

    Args:
        overrides: Replacement content keyed by section id
        omit: Section ids to leave out
        order: Explicit section order (defaults to section1..section12)
    """
    content = dict(SECTION_TEXT)
    content.update(overrides or {})
    omitted = set(omit)
    ids = order or list(SECTION_TEXT)
    return "\n\n".join(
        f"{{{section_id}}}\n{content[section_id]}"
        for section_id in ids
        if section_id not in omitted
    )
