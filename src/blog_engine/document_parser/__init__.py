# Document Parser Module
# {sectionN} marker extraction, image references and section validation

from .models import (
    DocumentMetadata,
    ImageReference,
    OrderCheck,
    ParsedDocument,
    ParsedSection,
)
from .parser import (
    count_words,
    extract_image_references,
    get_section_content,
    normalize_newlines,
    parse_document,
    validate_section_content,
    validate_section_order,
)

__all__ = [
    "DocumentMetadata",
    "ImageReference",
    "OrderCheck",
    "ParsedDocument",
    "ParsedSection",
    "count_words",
    "extract_image_references",
    "get_section_content",
    "normalize_newlines",
    "parse_document",
    "validate_section_content",
    "validate_section_order",
]
