"""Per-section HTML renderers.

Each of the twelve section ids has its own renderer; SECTION_RENDERERS
maps the id to it. The rule table's ``wrapper`` field is informational
and does not drive rendering.

Styles are inline because publishing platforms strip <style> blocks.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import partial
from typing import Callable

from src.common.logging import setup_logging

from ..document_parser import ImageReference, ParsedSection
from ..section_rules import ImagePosition
from .faq import extract_faqs
from .models import HTMLGeneratorOptions
from .sanitizer import escape_html, text_with_links_to_html
from .schema import generate_faq_schema

logger = setup_logging(module_name="html_generator.renderers")

H1_STYLE = (
    "font-size: 2.5em; font-weight: 700; margin-bottom: 20px; margin-top: 0; "
    "line-height: 1.2; color: #1a1a1a; letter-spacing: -0.5px;"
)
H2_STYLE = (
    "font-size: 1.8em; font-weight: 600; margin-top: 25px; margin-bottom: 15px; "
    "line-height: 1.3; color: #1a1a1a; border-bottom: 3px solid #e8e8e8; "
    "padding-bottom: 12px;"
)
PARAGRAPH_STYLE = (
    "font-size: 1.05em; line-height: 1.8; margin-bottom: 15px; margin-top: 0; "
    "color: #3a3a3a;"
)
BLOCKQUOTE_STYLE = (
    "border-left: 5px solid #d4a574; padding: 25px 30px; margin: 20px 0; "
    "background-color: #fef9f5; font-style: italic; font-size: 1.15em; "
    "color: #5a5a5a; line-height: 1.8;"
)
LIST_STYLE = "margin: 15px 0 15px 35px; line-height: 1.9;"
LIST_ITEM_STYLE = "margin-bottom: 10px; font-size: 1.05em; color: #3a3a3a;"
HERO_IMAGE_STYLE = (
    "width: 100%; height: auto; display: block; margin: 25px auto 30px auto; "
    "border-radius: 8px; box-shadow: 0 4px 12px rgba(0, 0, 0, 0.08);"
)
BODY_IMAGE_STYLE = (
    "width: 100%; height: auto; display: block; margin: 30px auto; "
    "border-radius: 8px; box-shadow: 0 4px 12px rgba(0, 0, 0, 0.08);"
)
FAQ_ITEM_STYLE = (
    "margin-bottom: 20px; padding: 15px; border: 1px solid #ddd; "
    "border-radius: 4px; background-color: #f9f9f9;"
)

NO_COMPARISON_DATA = "<p>No comparison data provided</p>"
NO_FAQS = "<p>No FAQs provided</p>"

SUBHEADING_MAX_LENGTH = 60
# A blank line may hold stray spaces or tabs
PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t\r]*(?:\n[ \t\r]*)+")


@dataclass
class RenderContext:
    """Per-call rendering inputs shared by every section renderer."""
    include_images: bool = True
    image_urls: dict[str, str] = field(default_factory=dict)
    include_faq_schema: bool = False

    @classmethod
    def from_options(cls, options: HTMLGeneratorOptions) -> RenderContext:
        return cls(
            include_images=options.include_images,
            image_urls=dict(options.image_urls or {}),
            include_faq_schema=options.include_faq_schema,
        )

    def resolve_image(self, image: ImageReference) -> str | None:
        """Look up an image URL; unresolved keywords yield None, never a placeholder."""
        url = self.image_urls.get(image.keyword)
        if not url:
            logger.info("Image URL not available for keyword: %s", image.keyword)
        return url or None


SectionRenderer = Callable[[ParsedSection, RenderContext], str]


def image_tag(url: str, alt: str, style: str) -> str:
    return f'<img src="{escape_html(url)}" alt="{escape_html(alt)}" style="{style}" />'


def render_hero(section: ParsedSection, ctx: RenderContext) -> str:
    """H1 title, followed by the first section image when it resolves."""
    h1 = f'<h1 style="{H1_STYLE}">{text_with_links_to_html(section.raw_content)}</h1>'

    rule_image = section.rule.image
    if (
        ctx.include_images
        and rule_image is not None
        and rule_image.position == ImagePosition.AFTER
        and section.images
    ):
        image = section.images[0]
        url = ctx.resolve_image(image)
        if url:
            return f"{h1}\n{image_tag(url, image.keyword, HERO_IMAGE_STYLE)}"

    return h1


def render_paragraph(section: ParsedSection, ctx: RenderContext) -> str:
    return f'<p style="{PARAGRAPH_STYLE}">{text_with_links_to_html(section.raw_content)}</p>'


def render_blockquote(section: ParsedSection, ctx: RenderContext) -> str:
    return (
        f'<blockquote style="{BLOCKQUOTE_STYLE}">'
        f"{text_with_links_to_html(section.raw_content)}</blockquote>"
    )


def render_list(
    section: ParsedSection,
    ctx: RenderContext,
    tag: str = "ul",
    title: str = "",
) -> str:
    """One <li> per line, preceded by an <h2> title when given."""
    items = "\n".join(
        f'<li style="{LIST_ITEM_STYLE}">{text_with_links_to_html(line)}</li>'
        for line in section.lines
    )
    html = f'<{tag} style="{LIST_STYLE}">\n{items}\n</{tag}>'
    if title:
        html = f'<h2 style="{H2_STYLE}">{escape_html(title)}</h2>\n{html}'
    return html


def _is_subheading(line: str) -> bool:
    return (
        bool(line)
        and len(line) < SUBHEADING_MAX_LENGTH
        and (line.endswith(":") or line == line.upper())
    )


def render_body(section: ParsedSection, ctx: RenderContext) -> str:
    """Main body: blank-line separated paragraphs with optional subheadings.

    Every odd-indexed paragraph takes the next section image in order;
    an image whose keyword does not resolve is skipped but still consumed.
    """
    paragraphs = [p.strip() for p in PARAGRAPH_BREAK_RE.split(section.raw_content)]
    images = section.images
    image_index = 0
    parts = []

    for idx, paragraph in enumerate(paragraphs):
        lines = [line.strip() for line in paragraph.split("\n")]
        html = ""

        if _is_subheading(lines[0]):
            html += f'<h2 style="{H2_STYLE}">{text_with_links_to_html(lines[0])}</h2>\n'
            lines = lines[1:]

        body_text = "\n".join(lines).strip()
        if body_text:
            html += f'<p style="{PARAGRAPH_STYLE}">{text_with_links_to_html(body_text)}</p>'

        if ctx.include_images and idx % 2 == 1 and image_index < len(images):
            image = images[image_index]
            url = ctx.resolve_image(image)
            if url:
                html += f"\n{image_tag(url, image.keyword, BODY_IMAGE_STYLE)}"
            image_index += 1

        html = html.strip()
        if html:
            parts.append(html)

    return "\n\n".join(parts)


def _split_row(line: str) -> list[str]:
    return [cell.strip() for cell in line.split("|")]


def render_comparison_table(section: ParsedSection, ctx: RenderContext) -> str:
    """Pipe-delimited table: first line is the header row."""
    lines = section.lines
    if len(lines) < 2:
        return NO_COMPARISON_DATA

    headers = _split_row(lines[0])
    rows = [_split_row(line) for line in lines[1:]]

    html = "<table>\n<thead><tr>"
    html += "".join(f"<th>{escape_html(header)}</th>" for header in headers)
    html += "</tr></thead>\n<tbody>"
    for row in rows:
        html += "<tr>" + "".join(f"<td>{escape_html(cell)}</td>" for cell in row) + "</tr>"
    html += "</tbody>\n</table>"
    return html


def render_faq(section: ParsedSection, ctx: RenderContext) -> str:
    faqs = extract_faqs(section.lines)
    if not faqs:
        return NO_FAQS

    blocks = "".join(
        f'\n<div style="{FAQ_ITEM_STYLE}">\n'
        f'  <p style="margin: 0 0 10px 0; font-weight: bold;">'
        f"<strong>Q: {escape_html(faq.question)}</strong></p>\n"
        f'  <p style="margin: 0; color: #555;">A: {escape_html(faq.answer)}</p>\n'
        f"</div>\n"
        for faq in faqs
    )
    html = f"<h2>Frequently Asked Questions</h2>\n<div>\n{blocks}</div>"

    if ctx.include_faq_schema:
        html += f"\n{generate_faq_schema(faqs)}"
    return html


SECTION_RENDERERS: dict[str, SectionRenderer] = {
    "section1": render_hero,
    "section2": render_paragraph,
    "section3": partial(render_list, tag="ul", title="Table of Contents"),
    "section4": partial(render_list, tag="ul", title="Key Benefits"),
    "section5": render_body,
    "section6": render_blockquote,
    "section7": render_comparison_table,
    "section8": render_blockquote,
    "section9": partial(render_list, tag="ol", title="Steps"),
    "section10": partial(render_list, tag="ul", title="Related Resources"),
    "section11": render_faq,
    "section12": render_paragraph,
}


def render_section(section: ParsedSection, ctx: RenderContext) -> str:
    """Render one parsed section; empty or unknown sections render to ""."""
    if not section.raw_content and not section.lines:
        logger.warning("Section %s has no content", section.id)
        return ""

    renderer = SECTION_RENDERERS.get(section.id)
    if renderer is None:
        logger.warning(
            "Unknown section ID: %s. Valid sections are section1-section12.", section.id
        )
        return ""
    return renderer(section, ctx)
