"""Rhetorical purpose labels and lookup with fallback."""

from dataclasses import dataclass
from typing import Optional

from passage.core.models import UNASSIGNED


class TaxonomyError(ValueError):
    """Malformed purpose definitions."""
    pass


@dataclass(frozen=True)
class PurposeDescriptor:
    """Display information for a purpose key."""
    name: str
    color: str  # urwid foreground color name
    is_placeholder: bool = False


_TRUE_WORDS = ("true", "yes", "on", "1")
_FALSE_WORDS = ("false", "no", "off", "0", "")


def _parse_flag(key, value) -> bool:
    """Read a yes/no config value; quoted words count, anything else is an error."""
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise TaxonomyError(f"Purpose {key!r}: placeholder must be true or false, got {value!r}")


@dataclass(frozen=True)
class PurposeLookup:
    """Result of resolving a key: found, or the unassigned fallback."""
    key: str
    descriptor: PurposeDescriptor
    found: bool


UNASSIGNED_DESCRIPTOR = PurposeDescriptor(
    name="Select purpose...",
    color="light gray",
    is_placeholder=True,
)

DEFAULT_PURPOSES: dict[str, PurposeDescriptor] = {
    UNASSIGNED: UNASSIGNED_DESCRIPTOR,
    "CLAIM": PurposeDescriptor("Claim / thesis", "light green"),
    "CONTEXT": PurposeDescriptor("Context / background", "light blue"),
    "EVIDENCE": PurposeDescriptor("Evidence / example", "light cyan"),
    "ELABORATION": PurposeDescriptor("Elaboration", "yellow"),
    "COUNTER": PurposeDescriptor("Counterargument / concession", "light red"),
    "TRANSITION": PurposeDescriptor("Transition", "light magenta"),
    "CONCLUSION": PurposeDescriptor("Conclusion / implication", "brown"),
}


class PurposeTaxonomy:
    """Ordered table of purpose keys.

    The unassigned key is always present. Keys stored on sentences are never
    checked against this table; unknown keys simply resolve to the
    unassigned descriptor when drawn.
    """

    def __init__(self, purposes: Optional[dict[str, PurposeDescriptor]] = None):
        purposes = dict(DEFAULT_PURPOSES if purposes is None else purposes)
        self._purposes = {UNASSIGNED: purposes.pop(UNASSIGNED, UNASSIGNED_DESCRIPTOR)}
        self._purposes.update(purposes)

    @classmethod
    def from_config(cls, data: Optional[dict]) -> "PurposeTaxonomy":
        """
        Build a taxonomy from the `purposes` config section.

        Each entry maps a key to `{name, color, placeholder}`; `color` and
        `placeholder` are optional. An empty or missing section gives the
        defaults.
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise TaxonomyError("'purposes' must be a mapping of key to definition")

        purposes = {}
        for key, entry in data.items():
            if isinstance(entry, str):
                entry = {"name": entry}
            if not isinstance(entry, dict) or not entry.get("name"):
                raise TaxonomyError(f"Purpose {key!r} needs at least a name")
            purposes[str(key)] = PurposeDescriptor(
                name=str(entry["name"]),
                color=str(entry.get("color", "white")),
                is_placeholder=_parse_flag(key, entry.get("placeholder", False)),
            )
        return cls(purposes)

    def __contains__(self, key: str) -> bool:
        return key in self._purposes

    def __len__(self) -> int:
        return len(self._purposes)

    def items(self):
        return self._purposes.items()

    def keys(self) -> list[str]:
        return list(self._purposes)

    def resolve(self, key: Optional[str]) -> PurposeLookup:
        """Look up a key, falling back to the unassigned descriptor."""
        if key in self._purposes:
            return PurposeLookup(key=key, descriptor=self._purposes[key], found=True)
        return PurposeLookup(
            key=UNASSIGNED,
            descriptor=self._purposes[UNASSIGNED],
            found=False,
        )

    def name_for(self, key: Optional[str]) -> str:
        return self.resolve(key).descriptor.name

    def selectable_keys(self) -> list[str]:
        """Get keys a user may pick (placeholders excluded)."""
        return [k for k, d in self._purposes.items() if not d.is_placeholder]

    def next_key(self, key: str) -> str:
        """Get the selectable key after `key`, wrapping around."""
        keys = self.selectable_keys()
        if not keys:
            return UNASSIGNED
        if key not in keys:
            return keys[0]
        return keys[(keys.index(key) + 1) % len(keys)]
