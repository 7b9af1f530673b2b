"""Data models for parsed blog documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..section_rules import SectionRule


@dataclass(frozen=True)
class ImageReference:
    """An {img} placeholder found inside a section.

    The keyword is resolved to a URL later via the caller's image_urls map.
    """
    keyword: str
    section_id: str
    position: int  # 0-based order within the section

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "section_id": self.section_id,
            "position": self.position,
        }


@dataclass(frozen=True)
class ParsedSection:
    """One {sectionN} block after image stripping and validation."""
    id: str
    name: str
    raw_content: str  # image markers already stripped
    lines: list[str]
    word_count: int
    rule: SectionRule
    valid: bool
    warnings: list[str] = field(default_factory=list)
    images: list[ImageReference] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "word_count": self.word_count,
            "valid": self.valid,
            "warnings": list(self.warnings),
            "images": [img.to_dict() for img in self.images],
        }


@dataclass
class DocumentMetadata:
    """Document-level totals and validation outcome."""
    total_words: int = 0
    total_sections: int = 0
    is_valid: bool = False
    missing_required: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_words": self.total_words,
            "total_sections": self.total_sections,
            "is_valid": self.is_valid,
            "missing_required": list(self.missing_required),
            "warnings": list(self.warnings),
        }


@dataclass
class ParsedDocument:
    """Sections in document appearance order plus all image references."""
    sections: list[ParsedSection] = field(default_factory=list)
    images: list[ImageReference] = field(default_factory=list)
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)

    def get_section(self, section_id: str) -> Optional[ParsedSection]:
        return next((s for s in self.sections if s.id == section_id), None)

    def to_dict(self) -> dict:
        return {
            "sections": [s.to_dict() for s in self.sections],
            "images": [img.to_dict() for img in self.images],
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class OrderCheck:
    """Result of the opt-in section order validation."""
    valid: bool
    error: str = ""
