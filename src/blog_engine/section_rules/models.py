"""Data models for section rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ImagePosition(str, Enum):
    """Where a section's image is placed relative to its content."""
    BEFORE = "before"
    AFTER = "after"
    NONE = "none"


class SchemaType(str, Enum):
    """Structured-data treatment for a section."""
    ARTICLE = "article"
    FAQ = "faq"
    BREADCRUMB = "breadcrumb"
    NONE = "none"


@dataclass(frozen=True)
class ImageConfig:
    """Image policy for a section."""
    position: ImagePosition = ImagePosition.NONE
    required: bool = False
    css_class: Optional[str] = None
    alt: Optional[str] = None


@dataclass(frozen=True)
class ValidationRules:
    """Item-count rules for list-like sections (counted as non-empty lines)."""
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    allow_line_breaks: bool = True


@dataclass(frozen=True)
class SectionRule:
    """Static definition of one of the twelve blog sections."""
    id: str
    name: str
    description: str
    wrapper: str  # informational only, renderers are chosen by id
    order: int
    required: bool = False
    item_wrapper: Optional[str] = None
    min_words: Optional[int] = None
    max_words: Optional[int] = None
    image: Optional[ImageConfig] = None
    validation_rules: Optional[ValidationRules] = None
    schema: SchemaType = SchemaType.NONE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "wrapper": self.wrapper,
            "item_wrapper": self.item_wrapper,
            "order": self.order,
            "required": self.required,
            "min_words": self.min_words,
            "max_words": self.max_words,
            "image": {
                "position": self.image.position.value,
                "required": self.image.required,
            } if self.image else None,
            "validation_rules": {
                "min_items": self.validation_rules.min_items,
                "max_items": self.validation_rules.max_items,
            } if self.validation_rules else None,
            "schema": self.schema.value,
        }


@dataclass(frozen=True)
class SectionLookup:
    """Result of looking up a section id in the rule table."""
    valid: bool
    rule: Optional[SectionRule] = None
    error: str = ""
