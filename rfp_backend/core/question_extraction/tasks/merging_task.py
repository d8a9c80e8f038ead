"""
Section merger.

Combines per-chunk sections by case-insensitive title and drops repeated
questions, which is what collapses the duplicates produced by chunk overlap.
Inputs are never mutated, so merging is idempotent.

Dependencies: None
System role: Reducer between extraction and persistence
"""

from typing import Iterable

from ..models import ExtractedQuestionCandidate, ExtractedSection, MergedSection


def _dedupe_questions(
    questions: Iterable[ExtractedQuestionCandidate],
) -> list[ExtractedQuestionCandidate]:
    seen: set[str] = set()
    unique: list[ExtractedQuestionCandidate] = []
    for question in questions:
        key = question.question_text.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(question)
    return unique


def merge_sections(sections: Iterable[ExtractedSection]) -> list[MergedSection]:
    """
    Merge sections across chunks.

    The first section seen under a title keeps its description and location
    hint; later sections only contribute questions. Order of first appearance
    is preserved for both sections and questions.

    Args:
        sections: Sections from all chunks of one run

    Returns:
        list[MergedSection]: One section per distinct title
    """
    heads: dict[str, ExtractedSection] = {}
    grouped: dict[str, list[ExtractedQuestionCandidate]] = {}

    for section in sections:
        key = section.merge_key
        if key not in heads:
            heads[key] = section
            grouped[key] = []
        grouped[key].extend(section.questions)

    return [
        MergedSection(
            title=head.title,
            description=head.description,
            location_hint=head.location_hint,
            questions=_dedupe_questions(grouped[key]),
        )
        for key, head in heads.items()
    ]


class MergingTask:
    """Merge per-chunk extraction output."""

    def merge(self, sections: Iterable[ExtractedSection]) -> list[MergedSection]:
        return merge_sections(sections)
