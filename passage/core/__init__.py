"""Core analysis logic - UI independent."""
from .models import Sentence, Paragraph, AnalysisTree, UNASSIGNED
from .ids import IdFactory, TokenSource, UuidTokenSource
from .segmenter import Segmenter, parse_passage
from .mutations import update_sentence, remove_sentence, add_sentence_to_paragraph
from .views import Emphasis, derive_highlights, reconstruct_passage
from .taxonomy import PurposeTaxonomy, PurposeDescriptor, PurposeLookup
from .session import AnalysisSession

__all__ = [
    "Sentence",
    "Paragraph",
    "AnalysisTree",
    "UNASSIGNED",
    "IdFactory",
    "TokenSource",
    "UuidTokenSource",
    "Segmenter",
    "parse_passage",
    "update_sentence",
    "remove_sentence",
    "add_sentence_to_paragraph",
    "Emphasis",
    "derive_highlights",
    "reconstruct_passage",
    "PurposeTaxonomy",
    "PurposeDescriptor",
    "PurposeLookup",
    "AnalysisSession",
]
