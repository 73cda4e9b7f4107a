"""Main application entry point."""

import argparse
import json
import logging
import sys
from typing import Optional

import urwid

from passage.config import ConfigError, configure_logging, load_config
from passage.core.models import tree_to_dicts
from passage.core.segmenter import parse_passage
from passage.core.session import AnalysisSession
from passage.core.taxonomy import PurposeTaxonomy, TaxonomyError
from passage.core.views import reconstruct_passage
from passage.ui.screens import AnalysisScreen, PassageScreen, ReconstructedScreen
from passage.ui.theme import build_palette, validate_colors
from passage.ui.widgets import StatusBar, TabBar

logger = logging.getLogger(__name__)


class App:
    """Main application class."""

    TAB_NAMES = ["Passage", "Analysis", "Reconstructed"]
    TAB_KEYS = ["f2", "f3", "f4"]

    def __init__(self, config: dict, taxonomy: Optional[PurposeTaxonomy] = None):
        self.config = config
        self.taxonomy = taxonomy or PurposeTaxonomy.from_config(config.get("purposes"))
        self.session = AnalysisSession()
        self.loop: Optional[urwid.MainLoop] = None

        self._init_ui()

    def _init_ui(self):
        """Initialize the UI components."""
        self.tab_bar = TabBar(self.TAB_NAMES, on_tab_change=self._on_tab_change)

        self.passage_screen = PassageScreen(self)
        self.analysis_screen = AnalysisScreen(self)
        self.reconstructed_screen = ReconstructedScreen(self)

        self.screens = [
            self.passage_screen,
            self.analysis_screen,
            self.reconstructed_screen,
        ]

        self.status_bar = StatusBar()

        self.body = urwid.WidgetPlaceholder(self.screens[0])
        self.frame = urwid.Frame(
            header=self.tab_bar,
            body=self.body,
            footer=self.status_bar,
        )

        self._refresh_current_screen()
        self.update_status()

    def _on_tab_change(self, index: int):
        """Handle tab change; hover and cursor do not carry across tabs."""
        self.session.set_hovered_purpose(None)
        self.reconstructed_screen.viewer.reset_cursor()
        self.body.original_widget = self.screens[index]
        self._refresh_current_screen()
        self.update_status()

    def _refresh_current_screen(self):
        """Refresh data for the current screen."""
        current = self.body.original_widget

        if current == self.analysis_screen:
            self.analysis_screen.refresh()
        elif current == self.reconstructed_screen:
            self.reconstructed_screen.refresh()

    def switch_tab(self, index: int):
        """Switch to a specific tab."""
        self.tab_bar.set_active(index)

    def analyze(self, text: str):
        """Segment new text, replacing the current analysis."""
        self.session.analyze(text)
        stats = self.session.get_stats()
        self.switch_tab(1)
        self.show_message(
            f"Analyzed: {stats['paragraphs']} paragraphs, {stats['sentences']} sentences"
        )

    def undo(self):
        """Undo the last edit."""
        if self.session.undo():
            self._refresh_current_screen()
            self.show_message("Undone")
        else:
            self.show_message("Nothing to undo")

    def set_hovered_purpose(self, purpose_key: Optional[str]):
        """Change the hovered purpose and redraw emphasis."""
        self.session.set_hovered_purpose(purpose_key)
        current = self.body.original_widget
        if current == self.analysis_screen:
            self.analysis_screen.update_emphasis()
        elif current == self.reconstructed_screen:
            self.reconstructed_screen.refresh()
        self.update_status()

    def update_status(self, message: Optional[str] = None):
        """Update the status bar based on current state, led by an optional message."""
        current = self.body.original_widget
        stats = self.session.get_stats()

        base_status = f"Paragraphs: {stats['paragraphs']} | Sentences: {stats['sentences']}"
        hovered = self.session.hovered_purpose
        if hovered is not None:
            base_status += f" | {self.taxonomy.name_for(hovered)}"

        if current == self.passage_screen:
            hint = " | Paste text, then Analyze | [F1]help [F10]quit"
        elif current == self.analysis_screen:
            hint = " | Purpose button cycles labels | [C-u]undo [F1]help"
        else:
            label = self.reconstructed_screen.cursor_label()
            if label:
                hint = f" | {label} | [Esc]clear [C-u]undo"
            else:
                hint = " | arrows move between sentences | [Esc]clear [C-u]undo"

        if message:
            self.status_bar.set_text(f"{message} | {base_status}")
        else:
            self.status_bar.set_text(base_status + hint)

    def show_message(self, message: str):
        """Show a temporary message in the status bar, with current counts."""
        self.update_status(message)

    def handle_input(self, key):
        """Handle global key input."""

        # Handle tuple keys (mouse events) - ignore them
        if not isinstance(key, str):
            return

        if key in ("f10", "q", "Q"):
            raise urwid.ExitMainLoop()

        if key in self.TAB_KEYS:
            self.switch_tab(self.TAB_KEYS.index(key))
            return

        if key == "tab":
            current = self.tab_bar.active_tab
            self.switch_tab((current + 1) % len(self.TAB_NAMES))
            return

        if key == "ctrl u":
            self.undo()
            return

        if key in ("f1", "?"):
            self._show_help()
            return

    def _show_help(self):
        """Show help overlay."""
        lines = [
            "Passage Analyzer",
            "",
            "Navigation:",
            "  F2/F3/F4, Tab  Switch between tabs",
            "  ↑/↓            Move between fields",
            "  F10, q         Quit",
            "",
            "Analysis:",
            "  Purpose button  Cycle the rhetorical purpose",
            "  Remove button   Delete the sentence",
            "  + Add sentence  Append an empty sentence",
            "  ctrl u          Undo the last edit",
            "",
            "Reconstructed:",
            "  ←/→             Move sentence cursor",
            "  Esc             Clear highlight",
            "",
            "Purposes:",
        ]
        lines += [f"  {d.name}" for k, d in self.taxonomy.items() if not d.is_placeholder]
        lines += ["", "Press any key to close..."]

        text = urwid.Text("\n".join(lines))
        filler = urwid.Filler(text, valign="top")
        box = urwid.LineBox(filler, title="Help")
        overlay = urwid.Overlay(
            box,
            self.frame,
            align="center",
            width=60,
            valign="middle",
            height=len(lines) + 2,
        )

        def close_help(key):
            self.loop.widget = self.frame
            self.loop.unhandled_input = self.handle_input
            return True

        self.loop.widget = overlay
        self.loop.unhandled_input = close_help

    def run(self):
        """Run the application."""
        self.loop = urwid.MainLoop(
            self.frame,
            palette=build_palette(self.taxonomy),
            unhandled_input=self.handle_input,
            handle_mouse=True,
        )

        try:
            self.loop.run()
        except KeyboardInterrupt:
            pass


def read_input(path: str) -> str:
    """Read passage text from a file, or stdin for '-'."""
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def dump(text: str, fmt: str) -> str:
    """Analyze text and format the result without starting the UI."""
    tree = parse_passage(text)
    if fmt == "json":
        return json.dumps(tree_to_dicts(tree), ensure_ascii=False, indent=2)
    return reconstruct_passage(tree)


def main(argv: Optional[list[str]] = None):
    """Entry point."""
    parser = argparse.ArgumentParser(description="Passage rhetorical analysis")
    parser.add_argument(
        "-c", "--config",
        help="Path to config file",
        default=None,
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="Passage to load ('-' for stdin)",
    )
    parser.add_argument(
        "--dump",
        choices=["text", "json"],
        help="Print the analysis instead of starting the UI",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        configure_logging(config)
        taxonomy = PurposeTaxonomy.from_config(config.get("purposes"))
        validate_colors(taxonomy)
    except (ConfigError, TaxonomyError) as e:
        parser.exit(2, f"Configuration error: {e}\n")

    text = ""
    if args.file:
        try:
            text = read_input(args.file)
        except OSError as e:
            parser.exit(1, f"Could not read {args.file}: {e}\n")
        logger.info("Read %d characters from %s", len(text), args.file)

    if args.dump:
        print(dump(text, args.dump))
        return

    app = App(config, taxonomy)
    if text:
        app.passage_screen.set_text(text)
        app.analyze(text)
    app.run()


if __name__ == "__main__":
    main()
