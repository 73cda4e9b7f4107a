"""Read-only projections of a tree for rendering."""

from enum import Enum
from typing import Optional

from passage.core.models import AnalysisTree, Paragraph, Sentence


class Emphasis(Enum):
    """How a sentence should be drawn."""
    NORMAL = "normal"
    EMPHASIZED = "emphasized"


def emphasis_for(sentence: Sentence, hovered_purpose: Optional[str]) -> Emphasis:
    """Get the emphasis of one sentence for the hovered purpose key."""
    if hovered_purpose is not None and sentence.purpose_key == hovered_purpose:
        return Emphasis.EMPHASIZED
    return Emphasis.NORMAL


def derive_highlights(
    tree: AnalysisTree,
    hovered_purpose: Optional[str],
) -> dict[str, Emphasis]:
    """
    Map every sentence id to its emphasis.

    Args:
        tree: The analysis tree
        hovered_purpose: Purpose key under the pointer, or None

    Returns:
        Dict of sentence id to Emphasis, covering every sentence
    """
    return {
        sentence.id: emphasis_for(sentence, hovered_purpose)
        for paragraph in tree
        for sentence in paragraph.sentences
    }


def visible_paragraphs(tree: AnalysisTree) -> list[Paragraph]:
    """Get paragraphs reduced to their sentences with text, skipping empty ones."""
    visible = []
    for paragraph in tree:
        sentences = tuple(s for s in paragraph.sentences if s.has_text)
        if sentences:
            visible.append(Paragraph(id=paragraph.id, sentences=sentences))
    return visible


def reconstruct_passage(tree: AnalysisTree) -> str:
    """Rebuild plain passage text: sentences joined by spaces, paragraphs by a blank line."""
    return "\n\n".join(
        " ".join(s.text.strip() for s in paragraph.sentences)
        for paragraph in visible_paragraphs(tree)
    )
