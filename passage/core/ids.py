"""Identifier generation for paragraphs and sentences."""

from abc import ABC, abstractmethod
import uuid


PARAGRAPH_PREFIX = "p-"
SENTENCE_PREFIX = "s-"


class TokenSource(ABC):
    """Abstract source of unique tokens."""

    @abstractmethod
    def new_token(self) -> str:
        """
        Return a token never returned before.

        Returns:
            A fresh token string
        """
        pass


class UuidTokenSource(TokenSource):
    """Random uuid4 tokens."""

    def new_token(self) -> str:
        return str(uuid.uuid4())


class IdFactory:
    """Build prefixed ids so the kind of node can be read off the id."""

    def __init__(self, source: TokenSource | None = None):
        self.source = source or UuidTokenSource()

    def paragraph_id(self) -> str:
        """Get a fresh paragraph id."""
        return PARAGRAPH_PREFIX + self.source.new_token()

    def sentence_id(self) -> str:
        """Get a fresh sentence id."""
        return SENTENCE_PREFIX + self.source.new_token()


def is_paragraph_id(node_id: str) -> bool:
    return node_id.startswith(PARAGRAPH_PREFIX)


def is_sentence_id(node_id: str) -> bool:
    return node_id.startswith(SENTENCE_PREFIX)
