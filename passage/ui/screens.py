"""Screen compositions for the different app views."""

import urwid

from passage.core.mutations import find_sentence
from passage.ui.widgets import (
    AddSentenceRow,
    ParagraphHeader,
    ReconstructedView,
    SentenceEditor,
)


class PassageScreen(urwid.WidgetWrap):
    """Screen for pasting the raw passage."""

    def __init__(self, app):
        self.app = app

        self.edit = urwid.Edit("", multiline=True)
        analyze_btn = urwid.Button("Analyze", on_press=self._on_analyze)
        clear_btn = urwid.Button("Clear", on_press=self._on_clear)

        buttons = urwid.Columns([
            (11, urwid.AttrMap(analyze_btn, "button", focus_map="button_focus")),
            (9, urwid.AttrMap(clear_btn, "button", focus_map="button_focus")),
        ], dividechars=2)

        pile = urwid.Pile([
            ("pack", urwid.Text("Paste your passage here. Separate paragraphs with a blank line.")),
            ("pack", urwid.Divider()),
            urwid.Filler(urwid.AttrMap(self.edit, "field", focus_map="field_focus"), valign="top"),
            ("pack", urwid.Divider()),
            ("pack", buttons),
        ])
        super().__init__(urwid.LineBox(urwid.Padding(pile, left=1, right=1), title="Passage"))

    def get_text(self) -> str:
        return self.edit.edit_text

    def set_text(self, text: str):
        self.edit.set_edit_text(text)

    def _on_analyze(self, button=None):
        text = self.get_text()
        if not text.strip():
            self.app.show_message("Nothing to analyze - paste some text first")
            return
        self.app.analyze(text)

    def _on_clear(self, button=None):
        self.set_text("")


class AnalysisScreen(urwid.WidgetWrap):
    """Screen for annotating sentences paragraph by paragraph."""

    def __init__(self, app):
        self.app = app
        self.editors: dict[str, SentenceEditor] = {}

        self.walker = urwid.SimpleFocusListWalker([])
        self.listbox = urwid.ListBox(self.walker)
        super().__init__(urwid.LineBox(self.listbox, title="Analysis"))

    def refresh(self, focus_sentence_id: str | None = None):
        """Rebuild all editors from the session tree."""
        session = self.app.session
        old_focus = self.walker.focus if len(self.walker) else 0

        self.walker.clear()
        self.editors.clear()

        if not session.tree:
            if session.raw_text.strip():
                message = ("No parsable content found. Ensure your text has meaningful "
                           "sentences and paragraphs are separated by a blank line.")
            else:
                message = "Paste text in the Passage tab and press Analyze to see results."
            self.walker.append(urwid.Text(message))
            return

        focus_position = None
        for number, paragraph in enumerate(session.tree, start=1):
            self.walker.append(ParagraphHeader(paragraph.id, number, len(paragraph.sentences)))
            for sentence in paragraph.sentences:
                editor = SentenceEditor(
                    paragraph.id,
                    sentence,
                    self.app.taxonomy,
                    on_edit=self._on_edit,
                    on_cycle_purpose=self._on_cycle_purpose,
                    on_remove=self._on_remove,
                )
                if sentence.id == focus_sentence_id:
                    focus_position = len(self.walker)
                self.editors[sentence.id] = editor
                self.walker.append(editor)
            self.walker.append(AddSentenceRow(paragraph.id, on_add=self._on_add))
            self.walker.append(urwid.Divider())

        if focus_position is None:
            focus_position = min(old_focus, len(self.walker) - 1)
        self.walker.set_focus(focus_position)
        self.update_emphasis()

    def update_emphasis(self):
        """Re-apply hover emphasis to every editor."""
        highlights = self.app.session.highlights()
        for sentence_id, editor in self.editors.items():
            editor.set_emphasis(highlights[sentence_id])

    def focused_editor(self) -> SentenceEditor | None:
        if not len(self.walker):
            return None
        widget = self.walker[self.walker.focus]
        if isinstance(widget, SentenceEditor):
            return widget
        return None

    def _sync_hover(self):
        """Hover follows the focused sentence."""
        editor = self.focused_editor()
        key = editor.sentence.purpose_key if editor else None
        if key != self.app.session.hovered_purpose:
            self.app.set_hovered_purpose(key)

    def _on_edit(self, paragraph_id: str, sentence_id: str, field_name: str, value: str):
        session = self.app.session
        if session.edit_field(paragraph_id, sentence_id, field_name, value):
            self.editors[sentence_id].sentence = find_sentence(session.tree, paragraph_id, sentence_id)

    def _on_cycle_purpose(self, paragraph_id: str, sentence_id: str):
        session = self.app.session
        editor = self.editors[sentence_id]
        new_key = self.app.taxonomy.next_key(editor.sentence.purpose_key)
        session.set_purpose(paragraph_id, sentence_id, new_key)
        editor.set_sentence(find_sentence(session.tree, paragraph_id, sentence_id))
        self.app.set_hovered_purpose(new_key)

    def _on_remove(self, paragraph_id: str, sentence_id: str):
        if self.app.session.remove_sentence(paragraph_id, sentence_id):
            self.refresh()
            self.app.show_message("Sentence removed (ctrl u to undo)")

    def _on_add(self, paragraph_id: str):
        sentence_id = self.app.session.add_sentence(paragraph_id)
        if sentence_id:
            self.refresh(focus_sentence_id=sentence_id)
            self.app.update_status()

    def keypress(self, size, key):
        key = super().keypress(size, key)
        self._sync_hover()
        return key

    def mouse_event(self, size, event, button, col, row, focus):
        handled = super().mouse_event(size, event, button, col, row, focus)
        self._sync_hover()
        return handled


class ReconstructedScreen(urwid.WidgetWrap):
    """Screen showing the passage as running text colored by purpose."""

    def __init__(self, app):
        self.app = app
        self.viewer = ReconstructedView(app.taxonomy, on_hover=self._on_hover)
        super().__init__(urwid.LineBox(self.viewer, title="Reconstructed Passage"))

    def refresh(self):
        """Redraw from the session tree."""
        session = self.app.session
        self.viewer.set_tree(session.tree, session.hovered_purpose)

    def _on_hover(self, purpose_key: str | None):
        self.app.set_hovered_purpose(purpose_key)

    def cursor_label(self) -> str | None:
        """Get "Sentence i/N: purpose" for the cursor, or None without one."""
        sentence = self.viewer.current_sentence()
        if sentence is None:
            return None
        position = self.viewer.cursor_pos + 1
        total = len(self.viewer.sentences)
        return f"Sentence {position}/{total}: {self.app.taxonomy.name_for(sentence.purpose_key)}"
