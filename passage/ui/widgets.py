"""Custom urwid widgets for the passage analyzer."""

import urwid

from passage.core.models import AnalysisTree, Sentence
from passage.core.taxonomy import PurposeTaxonomy
from passage.core.views import Emphasis, emphasis_for, visible_paragraphs
from passage.ui.theme import get_purpose_attr


class SentenceEditor(urwid.WidgetWrap):
    """Editable fields for one sentence, framed in its purpose color."""

    def __init__(
        self,
        paragraph_id: str,
        sentence: Sentence,
        taxonomy: PurposeTaxonomy,
        on_edit=None,
        on_cycle_purpose=None,
        on_remove=None,
    ):
        self.paragraph_id = paragraph_id
        self.sentence = sentence
        self.taxonomy = taxonomy
        self.on_edit = on_edit
        self.on_cycle_purpose = on_cycle_purpose
        self.on_remove = on_remove
        self.emphasis = Emphasis.NORMAL

        self.edits: dict[str, urwid.Edit] = {}
        rows = []
        for field_name, label in (
            ("text", "Text:    "),
            ("summary", "Summary: "),
            ("ties", "Ties:    "),
        ):
            edit = urwid.Edit(("field_label", label), getattr(sentence, field_name), multiline=True)
            urwid.connect_signal(edit, "postchange", self._on_change, user_args=[field_name])
            self.edits[field_name] = edit
            # Sentence text takes the purpose color from the frame
            attr = {} if field_name == "text" else "field"
            rows.append(urwid.AttrMap(edit, attr, focus_map="field_focus"))

        self.purpose_button = urwid.Button(self._purpose_label(), on_press=self._on_purpose)
        self.remove_button = urwid.Button("Remove", on_press=self._on_remove)
        rows.append(urwid.Columns([
            urwid.AttrMap(self.purpose_button, "button", focus_map="button_focus"),
            (10, urwid.AttrMap(self.remove_button, "button", focus_map="button_focus")),
        ], dividechars=2))

        self.frame = urwid.AttrMap(urwid.LineBox(urwid.Pile(rows)), self._attr())
        super().__init__(self.frame)

    @property
    def sentence_id(self) -> str:
        return self.sentence.id

    def _purpose_label(self) -> str:
        return f"Purpose: {self.taxonomy.name_for(self.sentence.purpose_key)}"

    def _attr(self) -> str:
        return get_purpose_attr(self.taxonomy, self.sentence.purpose_key, self.emphasis)

    def _on_change(self, field_name: str, edit: urwid.Edit, old_text: str):
        if self.on_edit:
            self.on_edit(self.paragraph_id, self.sentence.id, field_name, edit.edit_text)

    def _on_purpose(self, button=None):
        if self.on_cycle_purpose:
            self.on_cycle_purpose(self.paragraph_id, self.sentence.id)

    def _on_remove(self, button=None):
        if self.on_remove:
            self.on_remove(self.paragraph_id, self.sentence.id)

    def set_sentence(self, sentence: Sentence):
        """Take a new value for this sentence without resetting edit cursors."""
        self.sentence = sentence
        self.purpose_button.set_label(self._purpose_label())
        self.frame.set_attr_map({None: self._attr()})

    def set_emphasis(self, emphasis: Emphasis):
        """Redraw with or without hover emphasis."""
        if self.emphasis != emphasis:
            self.emphasis = emphasis
            self.frame.set_attr_map({None: self._attr()})


class ParagraphHeader(urwid.WidgetWrap):
    """Title line above a paragraph's sentences."""

    def __init__(self, paragraph_id: str, number: int, sentence_count: int):
        self.paragraph_id = paragraph_id
        if sentence_count:
            text = f"Paragraph {number} ({sentence_count} sentences)"
        else:
            text = f"Paragraph {number} (empty)"
        super().__init__(urwid.AttrMap(urwid.Text(text), "paragraph_title"))


class AddSentenceRow(urwid.WidgetWrap):
    """Button that appends a sentence to a paragraph."""

    def __init__(self, paragraph_id: str, on_add=None):
        self.paragraph_id = paragraph_id
        self.on_add = on_add
        button = urwid.Button("+ Add sentence", on_press=self._on_press)
        widget = urwid.Padding(
            urwid.AttrMap(button, "button", focus_map="button_focus"),
            width=20,
        )
        super().__init__(widget)

    def _on_press(self, button=None):
        if self.on_add:
            self.on_add(self.paragraph_id)


class ReconstructedView(urwid.WidgetWrap):
    """The passage as running text, colored by purpose, with a sentence cursor."""

    def __init__(self, taxonomy: PurposeTaxonomy, on_hover=None):
        self.taxonomy = taxonomy
        self.on_hover = on_hover
        self.sentences: list[Sentence] = []
        self.cursor_pos: int | None = None
        self._hovered: str | None = None
        self._paragraphs = ()

        self.walker = urwid.SimpleFocusListWalker([])
        self.listbox = urwid.ListBox(self.walker)
        super().__init__(self.listbox)

    def set_tree(self, tree: AnalysisTree, hovered_purpose: str | None):
        """Set the tree to display and the purpose to emphasize."""
        self._hovered = hovered_purpose
        self._paragraphs = visible_paragraphs(tree)
        self.sentences = [s for p in self._paragraphs for s in p.sentences]
        if self.cursor_pos is not None and self.cursor_pos >= len(self.sentences):
            self.cursor_pos = len(self.sentences) - 1 if self.sentences else None
        self._rebuild()

    def _rebuild(self):
        self.walker.clear()
        if not self._paragraphs:
            self.walker.append(urwid.Text("Nothing to show yet. Paste a passage and analyze it."))
            return

        index = 0
        cursor_row = None
        for paragraph in self._paragraphs:
            markup = []
            for sentence in paragraph.sentences:
                if markup:
                    markup.append(" ")
                if index == self.cursor_pos:
                    cursor_row = len(self.walker)
                attr = get_purpose_attr(
                    self.taxonomy,
                    sentence.purpose_key,
                    emphasis_for(sentence, self._hovered),
                    is_cursor=index == self.cursor_pos,
                )
                markup.append((attr, sentence.text.strip()))
                index += 1
            self.walker.append(urwid.Text(markup))
            self.walker.append(urwid.Divider())

        # Scroll to the paragraph holding the cursor
        if cursor_row is not None:
            self.listbox.set_focus(cursor_row)

    def current_sentence(self) -> Sentence | None:
        if self.cursor_pos is None:
            return None
        return self.sentences[self.cursor_pos]

    def move_cursor(self, step: int):
        """Move the sentence cursor and hover its purpose."""
        if not self.sentences:
            return
        if self.cursor_pos is None:
            self.cursor_pos = 0 if step > 0 else len(self.sentences) - 1
        else:
            self.cursor_pos = max(0, min(len(self.sentences) - 1, self.cursor_pos + step))
        self._rebuild()
        if self.on_hover:
            self.on_hover(self.sentences[self.cursor_pos].purpose_key)

    def reset_cursor(self):
        """Drop the cursor without reporting a hover change."""
        self.cursor_pos = None
        self._rebuild()

    def clear_cursor(self):
        self.reset_cursor()
        if self.on_hover:
            self.on_hover(None)

    def selectable(self):
        return True

    def keypress(self, size, key):
        if key in ("right", "ctrl f", "down", "ctrl n"):
            self.move_cursor(1)
            return None
        elif key in ("left", "ctrl b", "up", "ctrl p"):
            self.move_cursor(-1)
            return None
        elif key == "esc":
            self.clear_cursor()
            return None
        return super().keypress(size, key)


class TabBar(urwid.WidgetWrap):
    """A horizontal tab bar."""

    def __init__(self, tabs: list[str], on_tab_change=None):
        self.tabs = tabs
        self.active_tab = 0
        self.on_tab_change = on_tab_change

        self._build()

    def _build(self):
        """Build the tab bar widget."""
        columns = []
        for i, tab in enumerate(self.tabs):
            if i == self.active_tab:
                attr = "tab_active"
            else:
                attr = "tab_inactive"

            btn = urwid.Text(f" F{i + 2} {tab} ")
            btn = urwid.AttrMap(btn, attr)
            columns.append(("pack", btn))
            columns.append(("pack", urwid.Text(" ")))

        widget = urwid.Columns(columns)
        widget = urwid.AttrMap(widget, "header")
        self._w = widget

    def set_active(self, index: int):
        """Set the active tab."""
        if 0 <= index < len(self.tabs):
            self.active_tab = index
            self._build()
            if self.on_tab_change:
                self.on_tab_change(index)


class StatusBar(urwid.WidgetWrap):
    """A status bar showing hints and messages."""

    def __init__(self, text: str = ""):
        self.text_widget = urwid.Text(text)
        widget = urwid.AttrMap(self.text_widget, "footer")
        super().__init__(widget)

    def set_text(self, text: str):
        """Set the status text."""
        self.text_widget.set_text(text)
