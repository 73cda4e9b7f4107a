"""Pure edit operations on an analysis tree.

Every function takes a tree and returns a new one. Paragraphs and sentences
that an edit does not touch are carried over as the same objects. When an id
does not match anything the input tree itself is returned.
"""

import logging
from typing import Optional

from passage.core.ids import IdFactory
from passage.core.models import AnalysisTree, Paragraph, Sentence

logger = logging.getLogger(__name__)


def find_paragraph(tree: AnalysisTree, paragraph_id: str) -> Optional[Paragraph]:
    """Get a paragraph by ID."""
    for paragraph in tree:
        if paragraph.id == paragraph_id:
            return paragraph
    return None


def find_sentence(
    tree: AnalysisTree,
    paragraph_id: str,
    sentence_id: str,
) -> Optional[Sentence]:
    """Get a sentence by paragraph and sentence ID."""
    paragraph = find_paragraph(tree, paragraph_id)
    if paragraph is None:
        return None
    for sentence in paragraph.sentences:
        if sentence.id == sentence_id:
            return sentence
    return None


def sentence_count(tree: AnalysisTree) -> int:
    return sum(len(p.sentences) for p in tree)


def _replace_paragraph(
    tree: AnalysisTree,
    paragraph_id: str,
    sentences: tuple[Sentence, ...],
) -> AnalysisTree:
    return tuple(
        Paragraph(id=p.id, sentences=sentences) if p.id == paragraph_id else p
        for p in tree
    )


def update_sentence(
    tree: AnalysisTree,
    paragraph_id: str,
    sentence_id: str,
    new_sentence: Sentence,
) -> AnalysisTree:
    """Replace a sentence in place, keeping its position."""
    if find_sentence(tree, paragraph_id, sentence_id) is None:
        logger.debug("update_sentence: no sentence %s in %s", sentence_id, paragraph_id)
        return tree

    paragraph = find_paragraph(tree, paragraph_id)
    sentences = tuple(
        new_sentence if s.id == sentence_id else s
        for s in paragraph.sentences
    )
    return _replace_paragraph(tree, paragraph_id, sentences)


def remove_sentence(
    tree: AnalysisTree,
    paragraph_id: str,
    sentence_id: str,
) -> AnalysisTree:
    """Remove a sentence. The paragraph stays even if it ends up empty."""
    if find_sentence(tree, paragraph_id, sentence_id) is None:
        logger.debug("remove_sentence: no sentence %s in %s", sentence_id, paragraph_id)
        return tree

    paragraph = find_paragraph(tree, paragraph_id)
    sentences = tuple(s for s in paragraph.sentences if s.id != sentence_id)
    return _replace_paragraph(tree, paragraph_id, sentences)


def add_sentence_to_paragraph(
    tree: AnalysisTree,
    paragraph_id: str,
    ids: IdFactory | None = None,
) -> AnalysisTree:
    """Append an empty, unassigned sentence to the end of a paragraph."""
    paragraph = find_paragraph(tree, paragraph_id)
    if paragraph is None:
        logger.debug("add_sentence_to_paragraph: no paragraph %s", paragraph_id)
        return tree

    ids = ids or IdFactory()
    placeholder = Sentence(id=ids.sentence_id(), text="")
    return _replace_paragraph(tree, paragraph_id, paragraph.sentences + (placeholder,))


def drop_empty_paragraphs(tree: AnalysisTree) -> AnalysisTree:
    """Remove paragraphs that have no sentences left."""
    if all(p.sentences for p in tree):
        return tree
    return tuple(p for p in tree if p.sentences)
