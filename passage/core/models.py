"""Data models for passage analysis."""

from dataclasses import dataclass, field


# Purpose key used when nothing has been assigned yet
UNASSIGNED = "NONE"


@dataclass(frozen=True)
class Sentence:
    """A sentence with its annotations."""
    id: str
    text: str
    summary: str = ""
    purpose_key: str = UNASSIGNED
    ties: str = ""

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "text": self.text,
            "summary": self.summary,
            "purposeKey": self.purpose_key,
            "ties": self.ties,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Sentence":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            text=data.get("text", ""),
            summary=data.get("summary", ""),
            purpose_key=data.get("purposeKey", UNASSIGNED),
            ties=data.get("ties", ""),
        )


@dataclass(frozen=True)
class Paragraph:
    """An ordered group of sentences."""
    id: str
    sentences: tuple[Sentence, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "sentences": [s.to_dict() for s in self.sentences],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Paragraph":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            sentences=tuple(
                Sentence.from_dict(s) for s in data.get("sentences", [])
            ),
        )


# The whole passage, paragraphs in source order
AnalysisTree = tuple[Paragraph, ...]


def tree_to_dicts(tree: AnalysisTree) -> list[dict]:
    """Convert a tree to plain lists and dicts."""
    return [p.to_dict() for p in tree]


def tree_from_dicts(data: list[dict]) -> AnalysisTree:
    """Rebuild a tree from plain lists and dicts."""
    return tuple(Paragraph.from_dict(p) for p in data)
