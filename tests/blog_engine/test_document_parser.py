"""
Unit tests for the document parser.
Tests marker extraction, image references, section validation and
document-level metadata.
"""

import dataclasses
import sys
from pathlib import Path
from types import MappingProxyType

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fixtures.sample_document import build_document
from src.blog_engine.document_parser import (
    count_words,
    extract_image_references,
    get_section_content,
    parse_document,
    validate_section_content,
    validate_section_order,
)
from src.blog_engine.document_parser.parser import NO_SECTIONS_WARNING
from src.blog_engine.section_rules import SECTION_RULES, SectionRule, ValidationRules


class TestParseDocument:
    def test_sample_document_is_valid(self, parsed_document):
        meta = parsed_document.metadata
        assert meta.is_valid is True
        assert meta.warnings == []
        assert meta.missing_required == []
        assert meta.total_sections == 12

    def test_total_words_is_sum_of_sections(self, parsed_document):
        expected = sum(s.word_count for s in parsed_document.sections)
        assert parsed_document.metadata.total_words == expected

    def test_word_counts(self, parsed_document):
        assert parsed_document.get_section("section1").word_count == 7
        assert parsed_document.get_section("section2").word_count == 80
        assert parsed_document.get_section("section5").word_count == 369
        assert parsed_document.get_section("section12").word_count == 51

    def test_sections_keep_document_order(self):
        parsed = parse_document("{section2}\nIntro text\n{section1}\nTitle")
        assert [s.id for s in parsed.sections] == ["section2", "section1"]

    def test_markers_are_case_insensitive(self):
        parsed = parse_document("{SECTION1}\nTitle\n{Section2}\nIntro")
        assert [s.id for s in parsed.sections] == ["section1", "section2"]

    def test_content_runs_to_next_marker(self):
        parsed = parse_document("{section1}\n  My Title  \n\n{section3}\nA\nB")
        assert parsed.get_section("section1").raw_content == "My Title"
        assert parsed.get_section("section3").lines == ["A", "B"]

    def test_empty_document(self):
        parsed = parse_document("")
        assert parsed.sections == []
        assert parsed.images == []
        assert parsed.metadata.is_valid is False
        assert parsed.metadata.total_words == 0
        assert parsed.metadata.warnings == [NO_SECTIONS_WARNING]
        assert parsed.metadata.missing_required == []

    def test_text_without_markers(self):
        parsed = parse_document("Just a plain paragraph with no markers.")
        assert parsed.metadata.is_valid is False
        assert parsed.metadata.warnings == [NO_SECTIONS_WARNING]

    def test_missing_required_section(self):
        parsed = parse_document(build_document(omit=["section3"]))
        assert parsed.metadata.missing_required == ["section3"]
        assert parsed.metadata.is_valid is False

    def test_missing_hero_section(self):
        parsed = parse_document(build_document(omit=["section1"]))
        assert parsed.metadata.missing_required == ["section1"]
        assert parsed.metadata.is_valid is False
        assert parsed.get_section("section1") is None
        assert parsed.metadata.total_sections == 11

    def test_missing_several_required_sections(self):
        parsed = parse_document(build_document(omit=["section12", "section1", "section4"]))
        assert parsed.metadata.missing_required == ["section1", "section4", "section12"]

    def test_crlf_document(self):
        parsed = parse_document(build_document().replace("\n", "\r\n"))
        assert parsed.metadata.is_valid is True
        assert parsed.get_section("section1").raw_content == "How to Brew Better Coffee at Home"
        assert "\r" not in parsed.get_section("section5").raw_content

    @pytest.mark.parametrize("word_count,expected_warnings", [
        (119, ["section2: Below minimum word count (119/120)"]),
        (120, []),
    ])
    def test_minimum_word_boundary(self, monkeypatch, word_count, expected_warnings):
        rules = dict(SECTION_RULES)
        rules["section2"] = dataclasses.replace(SECTION_RULES["section2"], min_words=120)
        monkeypatch.setattr(
            "src.blog_engine.document_parser.parser.SECTION_RULES", MappingProxyType(rules)
        )

        parsed = parse_document("{section2}\n" + " ".join(["word"] * word_count))

        section = parsed.get_section("section2")
        assert section.word_count == word_count
        assert section.warnings == expected_warnings
        assert section.valid is (not expected_warnings)

    def test_missing_optional_section_is_still_valid(self):
        parsed = parse_document(build_document(omit=["section6", "section7", "section11"]))
        assert parsed.metadata.missing_required == []
        assert parsed.metadata.is_valid is True

    def test_unknown_section_is_skipped(self):
        parsed = parse_document("{section1}\nTitle\n{section13}\nStray text")
        assert [s.id for s in parsed.sections] == ["section1"]
        assert "Unknown section: section13" in parsed.metadata.warnings
        assert parsed.get_section("section1").raw_content == "Title"

    def test_unknown_warnings_come_first(self):
        parsed = parse_document("{section2}\nShort intro\n{section99}\nx")
        warnings = parsed.metadata.warnings
        assert warnings[0] == "Unknown section: section99"
        assert warnings[1].startswith("section2: Below minimum word count")

    def test_duplicate_sections_are_kept(self):
        parsed = parse_document("{section3}\nA\n{section3}\nB")
        assert [s.lines for s in parsed.sections] == [["A"], ["B"]]
        assert parsed.get_section("section3").lines == ["A"]

    def test_section_warning_invalidates_document(self):
        parsed = parse_document(build_document(overrides={"section2": "Too short."}))
        section = parsed.get_section("section2")
        assert section.valid is False
        assert section.warnings == ["section2: Below minimum word count (2/50)"]
        assert parsed.metadata.is_valid is False
        assert parsed.metadata.missing_required == []

    def test_to_dict(self, parsed_document):
        data = parsed_document.to_dict()
        assert data["metadata"]["is_valid"] is True
        assert data["sections"][0]["id"] == "section1"
        assert data["images"][0] == {
            "keyword": "hero-coffee",
            "section_id": "section1",
            "position": 0,
        }


class TestImageReferences:
    def test_sample_images_in_order(self, parsed_document):
        refs = [(i.keyword, i.section_id, i.position) for i in parsed_document.images]
        assert refs == [
            ("hero-coffee", "section1", 0),
            ("burr-grinder", "section5", 0),
            ("pour-over", "section5", 1),
        ]

    def test_images_stay_in_their_section(self):
        parsed = parse_document("{section1}\nTitle\n{img} hero\n{section2}\n{img} mid")
        assert [i.keyword for i in parsed.get_section("section1").images] == ["hero"]
        assert [i.keyword for i in parsed.get_section("section2").images] == ["mid"]

    def test_image_directly_before_next_marker(self):
        parsed = parse_document("{section5}\n{img} foo{section6}")
        section5 = parsed.get_section("section5")
        section6 = parsed.get_section("section6")
        assert [(i.keyword, i.section_id) for i in section5.images] == [("foo", "section5")]
        assert section6.images == []
        assert section6.raw_content == ""
        assert [i.keyword for i in parsed.images] == ["foo"]

    def test_image_markers_removed_from_content(self):
        parsed = parse_document("{section1}\nTitle\n{img} hero")
        section = parsed.get_section("section1")
        assert "{img}" not in section.raw_content
        assert "hero" not in section.raw_content
        assert section.word_count == 1

    def test_image_marker_case_insensitive(self):
        refs = extract_image_references("{IMG} Hero-Shot", "section1")
        assert refs[0].keyword == "Hero-Shot"

    def test_keyword_stops_at_brace(self):
        refs = extract_image_references("{img} first{img} second", "section5")
        assert [r.keyword for r in refs] == ["first", "second"]
        assert [r.position for r in refs] == [0, 1]

    def test_blank_keyword_ignored(self):
        refs = extract_image_references("{img}   \n{img} real", "section5")
        assert [(r.keyword, r.position) for r in refs] == [("real", 0)]

    def test_keyword_does_not_cross_newline(self):
        refs = extract_image_references("{img}\nnext line text", "section5")
        assert refs == []


class TestValidateSectionContent:
    @pytest.fixture
    def min_rule(self) -> SectionRule:
        return SectionRule(
            id="custom",
            name="Custom",
            description="Custom rule",
            wrapper="p",
            order=99,
            min_words=120,
        )

    def test_below_minimum(self, min_rule):
        warnings = validate_section_content("custom", "x", 119, min_rule)
        assert warnings == ["custom: Below minimum word count (119/120)"]

    def test_at_minimum(self, min_rule):
        assert validate_section_content("custom", "x", 120, min_rule) == []

    def test_exceeds_maximum(self):
        rule = SECTION_RULES["section12"]
        warnings = validate_section_content("section12", "x", 151, rule)
        assert warnings == ["section12: Exceeds maximum word count (151/150)"]

    def test_at_maximum(self):
        assert validate_section_content("section12", "x", 150, SECTION_RULES["section12"]) == []

    def test_h1_outside_hero(self):
        warnings = validate_section_content(
            "section6", "<h1>Big</h1> fact", 2, SECTION_RULES["section6"]
        )
        assert warnings == ["section6: Contains H1 tag (only section1 should have H1)"]

    def test_h1_allowed_in_hero(self):
        assert validate_section_content(
            "section1", "<h1>Title</h1>", 1, SECTION_RULES["section1"]
        ) == []

    def test_too_few_items(self):
        content = "Q: One?\nA: Yes."
        warnings = validate_section_content("section11", content, 4, SECTION_RULES["section11"])
        assert warnings == ["section11: Too few items (2/4)"]

    def test_too_many_items(self):
        content = "\n".join(f"Q{i}: Question {i}?" for i in range(13))
        warnings = validate_section_content("section11", content, 39, SECTION_RULES["section11"])
        assert warnings == ["section11: Too many items (13/12)"]

    def test_blank_lines_not_counted_as_items(self):
        rule = SectionRule(
            id="custom",
            name="Custom",
            description="Custom rule",
            wrapper="ul",
            order=99,
            validation_rules=ValidationRules(min_items=2),
        )
        assert validate_section_content("custom", "a\n\n   \nb", 2, rule) == []


class TestHelpers:
    def test_count_words(self):
        assert count_words("  one two\tthree\nfour  ") == 4
        assert count_words("") == 0

    def test_get_section_content(self, parsed_document):
        assert get_section_content(parsed_document, "section1") == (
            "How to Brew Better Coffee at Home"
        )

    def test_get_section_content_missing(self):
        parsed = parse_document("{section1}\nTitle")
        assert get_section_content(parsed, "section9") == ""

    def test_section_order_valid(self, parsed_document):
        result = validate_section_order(parsed_document.sections)
        assert result.valid is True
        assert result.error == ""

    def test_section_order_invalid(self):
        parsed = parse_document("{section1}\nTitle\n{section4}\nA\n{section2}\nIntro")
        result = validate_section_order(parsed.sections)
        assert result.valid is False
        assert "out of order" in result.error

    def test_section_order_with_gaps(self):
        parsed = parse_document("{section1}\nTitle\n{section5}\nBody\n{section12}\nEnd")
        assert validate_section_order(parsed.sections).valid is True

    def test_section_order_empty(self):
        assert validate_section_order([]).valid is True
