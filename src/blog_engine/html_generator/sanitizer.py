"""HTML escaping and markdown-link conversion.

All user text goes through escape_html before it is embedded. The only
markup reintroduced afterwards is an <a> tag for [text](url) links whose
URL passes is_valid_url.
"""

from __future__ import annotations

import re

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}
_HTML_ESCAPE_RE = re.compile(r"[&<>\"']")

MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

LINK_STYLE = (
    "color: #2563eb; text-decoration: underline; "
    "text-decoration-thickness: 1px; text-underline-offset: 2px;"
)

ALLOWED_SCHEMES = ("http", "https", "mailto")

# Browsers drop these anywhere in a URL and trim C0 controls and spaces at the ends
_URL_IGNORED_RE = re.compile(r"[\t\r\n]")
_URL_TRIM_CHARS = "".join(chr(code) for code in range(0x21))
_URL_SCHEME_RE = re.compile(r"^([^:/?#]*):")


def escape_html(text: str) -> str:
    """Escape the five HTML metacharacters."""
    return _HTML_ESCAPE_RE.sub(lambda m: _HTML_ESCAPES[m.group(0)], text)


def _unescape_html(text: str) -> str:
    for char, entity in reversed(_HTML_ESCAPES.items()):
        text = text.replace(entity, char)
    return text


def is_valid_url(url: str) -> bool:
    """Whitelist check for link targets.

    The URL is normalized the way a browser reads it, then only http(s),
    mailto and scheme-less (relative) URLs are accepted, which rules out
    javascript:, data:, vbscript: and any other scheme.
    """
    normalized = _URL_IGNORED_RE.sub("", url).strip(_URL_TRIM_CHARS)
    match = _URL_SCHEME_RE.match(normalized)
    if match is None:
        return True
    return match.group(1).lower() in ALLOWED_SCHEMES


def text_with_links_to_html(text: str) -> str:
    """Escape text and convert markdown-style links to anchors.

    Links with an invalid URL are left as the original (escaped) text.
    """
    escaped = escape_html(text)

    def replace(match: re.Match) -> str:
        link_text, url = match.group(1), match.group(2)
        # The URL was escaped along with the rest of the text; validate
        # the original characters, then escape exactly once for the attribute.
        raw_url = _unescape_html(url)
        if is_valid_url(raw_url):
            return f'<a href="{escape_html(raw_url)}" style="{LINK_STYLE}">{link_text}</a>'
        return match.group(0)

    return MARKDOWN_LINK_RE.sub(replace, escaped)
