"""
HTML Generator for parsed blog documents.
Turns a ParsedDocument into a fragment, a styled fragment or a full page.
"""

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.common.logging import setup_logging

from ..document_parser import ParsedDocument
from .models import HTMLGeneratorOptions, OutputFormat
from .renderers import RenderContext, render_section
from .sanitizer import escape_html
from .schema import DEFAULT_HEADLINE, generate_article_schema

logger = setup_logging(module_name="html_generator.generator")

FEATURED_IMAGE_STYLE = (
    "width: 100%; height: auto; aspect-ratio: 16 / 9; object-fit: cover; "
    "margin: 0 0 40px 0; border-radius: 12px; "
    "box-shadow: 0 8px 24px rgba(0, 0, 0, 0.12); display: block;"
)


class HTMLGenerator:
    """
    Renders parsed blog documents as HTML.

    Usage:
        generator = HTMLGenerator()
        html = generator.generate(parsed, HTMLGeneratorOptions(blog_title="..."))
    """

    def __init__(self, templates_dir: Optional[Path] = None):
        """
        Initialize the generator.

        Args:
            templates_dir: Path to the wrapper templates directory.
                          Defaults to ./templates relative to this file.
        """
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"

        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def generate(
        self,
        parsed: ParsedDocument,
        options: Optional[HTMLGeneratorOptions] = None,
    ) -> str:
        """
        Generate the bare HTML fragment.

        Fragments (schema, featured image, one per section) are joined
        with blank lines; sections that render empty are dropped.

        Args:
            parsed: Output of parse_document
            options: Rendering options (defaults apply when omitted)

        Returns:
            HTML fragment string
        """
        options = options or HTMLGeneratorOptions()
        fragments = []

        if options.include_schema:
            fragments.append(
                generate_article_schema(
                    options.blog_title,
                    options.blog_date,
                    options.author_name,
                )
            )

        if options.include_images and options.featured_image_url:
            fragments.append(
                f'<img src="{escape_html(options.featured_image_url)}" '
                f'alt="Featured image" style="{FEATURED_IMAGE_STYLE}" />'
            )

        ctx = RenderContext.from_options(options)
        for section in parsed.sections:
            html = render_section(section, ctx)
            logger.debug(
                "Section %s (%s): generated %d characters", section.id, section.name, len(html)
            )
            if html:
                fragments.append(html)

        result = "\n\n".join(fragments)
        logger.info(
            "Generated %d characters of HTML from %d fragments", len(result), len(fragments)
        )
        return result

    def generate_styled(
        self,
        parsed: ParsedDocument,
        options: Optional[HTMLGeneratorOptions] = None,
    ) -> str:
        """
        Generate the fragment wrapped in an inline-styled div.

        For platforms that strip <style> tags from article bodies.
        """
        template = self.env.get_template("styled.html")
        return template.render(content=self.generate(parsed, options))

    def generate_document(
        self,
        parsed: ParsedDocument,
        options: Optional[HTMLGeneratorOptions] = None,
    ) -> str:
        """
        Generate a standalone HTML document with an embedded stylesheet.
        """
        options = options or HTMLGeneratorOptions()
        template = self.env.get_template("document.html")
        return template.render(
            title=options.blog_title or DEFAULT_HEADLINE,
            content=self.generate(parsed, options),
        )

    def render(
        self,
        parsed: ParsedDocument,
        options: Optional[HTMLGeneratorOptions] = None,
        output_format: OutputFormat = OutputFormat.FRAGMENT,
    ) -> str:
        """
        Generate HTML in the requested output format.
        """
        if output_format == OutputFormat.STYLED:
            return self.generate_styled(parsed, options)
        if output_format == OutputFormat.DOCUMENT:
            return self.generate_document(parsed, options)
        return self.generate(parsed, options)


def generate_html(
    parsed: ParsedDocument,
    options: Optional[HTMLGeneratorOptions] = None,
) -> str:
    """Convenience function to generate a bare HTML fragment."""
    return HTMLGenerator().generate(parsed, options)


def generate_styled_html(
    parsed: ParsedDocument,
    options: Optional[HTMLGeneratorOptions] = None,
) -> str:
    """Convenience function to generate an inline-styled HTML fragment."""
    return HTMLGenerator().generate_styled(parsed, options)


def generate_html_document(
    parsed: ParsedDocument,
    options: Optional[HTMLGeneratorOptions] = None,
) -> str:
    """Convenience function to generate a standalone HTML document."""
    return HTMLGenerator().generate_document(parsed, options)
