"""Color theme and styling for the TUI."""

import urwid

from passage.core.taxonomy import PurposeTaxonomy, TaxonomyError
from passage.core.views import Emphasis

# Urwid palette for the application
# Format: (name, foreground, background)

PALETTE = [
    # UI elements
    ("header", "white", "dark blue"),
    ("footer", "white", "dark gray"),
    ("tab_active", "white,bold", "dark blue"),
    ("tab_inactive", "light gray", "dark gray"),

    # Analysis editor
    ("paragraph_title", "white,bold", ""),
    ("field_label", "dark gray", ""),
    ("field", "white", ""),
    ("field_focus", "white", "dark blue"),

    # Status/info
    ("info", "light cyan", ""),
    ("success", "light green", ""),
    ("warning", "yellow", ""),
    ("error", "light red", ""),

    # Dialog
    ("dialog", "white", "dark gray"),
    ("dialog_title", "white,bold", "dark blue"),
    ("button", "white", "dark gray"),
    ("button_focus", "white,bold", "dark blue"),
]

PURPOSE_ATTR_PREFIX = "purpose_"


def purpose_attr_name(key: str, emphasized: bool = False, cursor: bool = False) -> str:
    """Get the palette entry name for a purpose key."""
    name = PURPOSE_ATTR_PREFIX + key
    if cursor:
        name += "_cursor"
    elif emphasized:
        name += "_emph"
    return name


def validate_colors(taxonomy: PurposeTaxonomy) -> None:
    """Check every purpose colour is one urwid can draw."""
    for key, descriptor in taxonomy.items():
        try:
            urwid.AttrSpec(descriptor.color, "")
        except urwid.AttrSpecError as e:
            raise TaxonomyError(f"Purpose {key!r}: {e}") from e


def build_palette(taxonomy: PurposeTaxonomy) -> list[tuple[str, str, str]]:
    """Get the full palette with normal, emphasized and cursor entries for every purpose."""
    validate_colors(taxonomy)
    palette = list(PALETTE)
    for key, descriptor in taxonomy.items():
        color = descriptor.color
        palette.append((purpose_attr_name(key), color, ""))
        palette.append((purpose_attr_name(key, True), f"{color},bold", "dark gray"))
        palette.append((purpose_attr_name(key, cursor=True), f"{color},bold,underline", "dark gray"))
    return palette


def get_purpose_attr(
    taxonomy: PurposeTaxonomy, key: str, emphasis: Emphasis, is_cursor: bool = False
) -> str:
    """Get attribute name for a sentence's purpose; unknown keys use the unassigned entry."""
    lookup = taxonomy.resolve(key)
    return purpose_attr_name(lookup.key, emphasis == Emphasis.EMPHASIZED, is_cursor)
