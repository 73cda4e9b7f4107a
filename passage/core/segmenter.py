"""Split raw passage text into paragraphs and sentences."""

import logging
import re

from passage.core.ids import IdFactory
from passage.core.models import AnalysisTree, Paragraph, Sentence

logger = logging.getLogger(__name__)


class Segmenter:
    """Turn pasted text into an analysis tree."""

    # One or more blank (whitespace-only) lines
    PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

    # A run of non-terminators, keeping one terminator only when it is
    # followed by whitespace or the end of the paragraph
    SENTENCE_PATTERN = re.compile(r"[^.!?]+(?:[.!?](?=\s|\Z))?")

    def __init__(self, ids: IdFactory | None = None):
        self.ids = ids or IdFactory()

    def split_paragraphs(self, text: str) -> list[str]:
        """Split text on blank-line runs, dropping segments that trim to nothing."""
        paragraphs = []
        for segment in self.PARAGRAPH_BREAK.split(text):
            segment = segment.strip()
            if segment:
                paragraphs.append(segment)
        return paragraphs

    def split_sentences(self, paragraph: str) -> list[str]:
        """
        Split one paragraph into trimmed sentence strings.

        Newlines inside the paragraph are kept inside sentences. Candidates
        made only of whitespace are discarded, so punctuation-only text
        yields an empty list.
        """
        sentences = []
        for match in self.SENTENCE_PATTERN.finditer(paragraph.strip()):
            sentence = match.group().strip()
            if sentence:
                sentences.append(sentence)
        return sentences

    def segment(self, text: str) -> AnalysisTree:
        """
        Segment text into paragraphs of sentences with fresh ids.

        Args:
            text: Raw pasted text, any length

        Returns:
            Tuple of paragraphs in source order; empty for blank input
        """
        if not text.strip():
            return ()

        paragraphs = []
        for paragraph_text in self.split_paragraphs(text):
            sentence_texts = self.split_sentences(paragraph_text)
            if not sentence_texts:
                logger.debug("Dropping paragraph with no sentences: %r", paragraph_text[:40])
                continue

            paragraph_id = self.ids.paragraph_id()
            sentences = tuple(
                Sentence(id=self.ids.sentence_id(), text=sentence_text)
                for sentence_text in sentence_texts
            )
            paragraphs.append(Paragraph(id=paragraph_id, sentences=sentences))

        logger.debug(
            "Segmented %d characters into %d paragraphs, %d sentences",
            len(text),
            len(paragraphs),
            sum(len(p.sentences) for p in paragraphs),
        )
        return tuple(paragraphs)


def parse_passage(text: str, ids: IdFactory | None = None) -> AnalysisTree:
    """Segment text with a throwaway Segmenter."""
    return Segmenter(ids).segment(text)
