"""Editing session: the current tree plus hover state and undo history."""

import logging
from dataclasses import replace
from typing import Optional

from passage.core import mutations
from passage.core.ids import IdFactory
from passage.core.models import AnalysisTree, Sentence
from passage.core.segmenter import Segmenter
from passage.core.views import Emphasis, derive_highlights

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("text", "summary", "purpose_key", "ties")


class AnalysisSession:
    """Owns the tree for one user.

    Each edit runs one pure mutation and swaps the tree reference, so a
    previous tree is never modified and can be restored by undo.
    """

    def __init__(self, ids: IdFactory | None = None, max_history: int = 100):
        self.ids = ids or IdFactory()
        self.segmenter = Segmenter(self.ids)
        self.raw_text = ""
        self.tree: AnalysisTree = ()
        self.hovered_purpose: Optional[str] = None
        self.max_history = max_history
        self._history: list[AnalysisTree] = []

    def analyze(self, raw_text: Optional[str] = None) -> AnalysisTree:
        """Segment the raw text into a new tree, discarding the old one and its history."""
        if raw_text is not None:
            self.raw_text = raw_text
        self.tree = self.segmenter.segment(self.raw_text)
        self._history.clear()
        self.hovered_purpose = None
        logger.info(
            "Analyzed passage: %d paragraphs, %d sentences",
            len(self.tree),
            mutations.sentence_count(self.tree),
        )
        return self.tree

    def _apply(self, new_tree: AnalysisTree) -> bool:
        """Swap in a new tree. Returns False if the edit was a no-op."""
        if new_tree is self.tree:
            return False
        self._history.append(self.tree)
        if len(self._history) > self.max_history:
            del self._history[0]
        self.tree = new_tree
        return True

    def update_sentence(self, paragraph_id: str, sentence_id: str, new_sentence: Sentence) -> bool:
        """Replace a sentence. Returns True if the tree changed."""
        return self._apply(
            mutations.update_sentence(self.tree, paragraph_id, sentence_id, new_sentence)
        )

    def edit_field(self, paragraph_id: str, sentence_id: str, field_name: str, value: str) -> bool:
        """Set one field of a sentence."""
        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"Not an editable sentence field: {field_name}")
        sentence = mutations.find_sentence(self.tree, paragraph_id, sentence_id)
        if sentence is None or getattr(sentence, field_name) == value:
            return False
        return self.update_sentence(
            paragraph_id, sentence_id, replace(sentence, **{field_name: value})
        )

    def set_purpose(self, paragraph_id: str, sentence_id: str, purpose_key: str) -> bool:
        """Assign a purpose key to a sentence."""
        return self.edit_field(paragraph_id, sentence_id, "purpose_key", purpose_key)

    def remove_sentence(self, paragraph_id: str, sentence_id: str) -> bool:
        """Remove a sentence. Returns True if it was found."""
        return self._apply(mutations.remove_sentence(self.tree, paragraph_id, sentence_id))

    def add_sentence(self, paragraph_id: str) -> Optional[str]:
        """Append an empty sentence. Returns its id, or None if the paragraph is unknown."""
        if not self._apply(
            mutations.add_sentence_to_paragraph(self.tree, paragraph_id, self.ids)
        ):
            return None
        return mutations.find_paragraph(self.tree, paragraph_id).sentences[-1].id

    def drop_empty_paragraphs(self) -> bool:
        """Remove paragraphs whose sentences were all deleted."""
        return self._apply(mutations.drop_empty_paragraphs(self.tree))

    def undo(self) -> bool:
        """Restore the tree from before the last edit."""
        if not self._history:
            return False
        self.tree = self._history.pop()
        return True

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    def set_hovered_purpose(self, purpose_key: Optional[str]) -> None:
        """Set or clear the purpose key under the pointer."""
        self.hovered_purpose = purpose_key

    def highlights(self) -> dict[str, Emphasis]:
        """Get emphasis for every sentence given the current hover state."""
        return derive_highlights(self.tree, self.hovered_purpose)

    def get_stats(self) -> dict[str, int]:
        """Get paragraph and sentence counts."""
        return {
            "paragraphs": len(self.tree),
            "sentences": mutations.sentence_count(self.tree),
        }
