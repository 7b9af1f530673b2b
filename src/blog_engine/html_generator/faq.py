"""FAQ extraction from free-form section text.

Authors type FAQs inconsistently ("Q1: ...", "Q ...", answers on the
same line, stray notes between question and answer), so extraction runs
in two passes:

1. Line pass: a line starting with ``Q``/``Q1:`` opens a question; the
   next ``A``/``A1:`` line before another question is its answer. Other
   lines in between are skipped.
2. Inline pass (only when the line pass finds nothing): all lines are
   joined with spaces and question/answer spans are matched by regex,
   then paired by position.

The inline pass pairs the i-th question with the i-th answer, so
documents with unequal question and answer counts can come out
mispaired. Pairs missing either side are dropped. The inline pass is
also case-sensitive, so an uppercase ``A`` or ``Q`` inside a question
("Is AI safe?") ends the span early.
"""

from __future__ import annotations

import re

from .models import FAQItem

QUESTION_LINE_RE = re.compile(r"^Q\d*:?\s+", re.IGNORECASE)
ANSWER_LINE_RE = re.compile(r"^A\d*:?\s+", re.IGNORECASE)

INLINE_QUESTION_RE = re.compile(r"Q\d*:?\s*([^QA]+?)(?=A\d*:?\s*)")
INLINE_ANSWER_RE = re.compile(r"A\d*:?\s*([^QA]+?)(?=Q\d*:?\s*|$)")


def extract_faqs(lines: list[str]) -> list[FAQItem]:
    """Extract FAQ pairs from section lines, trying the line pass first."""
    return _extract_line_faqs(lines) or _extract_inline_faqs(lines)


def _extract_line_faqs(lines: list[str]) -> list[FAQItem]:
    faqs = []
    for i, line in enumerate(lines):
        if not QUESTION_LINE_RE.match(line):
            continue
        question = QUESTION_LINE_RE.sub("", line, count=1).strip()
        if not question:
            continue

        answer = ""
        for next_line in lines[i + 1:]:
            if QUESTION_LINE_RE.match(next_line):
                break
            if ANSWER_LINE_RE.match(next_line):
                answer = ANSWER_LINE_RE.sub("", next_line, count=1).strip()
                break

        if answer:
            faqs.append(FAQItem(question=question, answer=answer))
    return faqs


def _extract_inline_faqs(lines: list[str]) -> list[FAQItem]:
    full_text = " ".join(lines)
    questions = [m.group(1).strip() for m in INLINE_QUESTION_RE.finditer(full_text)]
    answers = [m.group(1).strip() for m in INLINE_ANSWER_RE.finditer(full_text)]

    faqs = []
    for index, question in enumerate(questions):
        answer = answers[index] if index < len(answers) else ""
        if question and answer:
            faqs.append(FAQItem(question=question, answer=answer))
    return faqs
