"""Unit tests for core functionality."""

import pytest

# Models
from passage.core.models import (
    UNASSIGNED,
    Paragraph,
    Sentence,
    tree_from_dicts,
    tree_to_dicts,
)

# Ids
from passage.core.ids import IdFactory, TokenSource, is_paragraph_id, is_sentence_id

# Segmenter
from passage.core.segmenter import Segmenter, parse_passage

# Mutations
from passage.core.mutations import (
    add_sentence_to_paragraph,
    drop_empty_paragraphs,
    find_sentence,
    remove_sentence,
    update_sentence,
)

# Views
from passage.core.views import (
    Emphasis,
    derive_highlights,
    emphasis_for,
    reconstruct_passage,
    visible_paragraphs,
)

# Taxonomy
from passage.core.taxonomy import PurposeTaxonomy, PurposeDescriptor, TaxonomyError

# Session
from passage.core.session import AnalysisSession


class CountingTokens(TokenSource):
    """Deterministic tokens: 1, 2, 3, ..."""

    def __init__(self):
        self.count = 0

    def new_token(self) -> str:
        self.count += 1
        return str(self.count)


def counting_ids() -> IdFactory:
    return IdFactory(CountingTokens())


def texts(paragraph: Paragraph) -> list[str]:
    return [s.text for s in paragraph.sentences]


class TestModels:
    """Test data models."""

    def test_sentence_defaults(self):
        sentence = Sentence(id="s-1", text="Hello.")
        assert sentence.summary == ""
        assert sentence.ties == ""
        assert sentence.purpose_key == UNASSIGNED == "NONE"

    def test_sentence_is_immutable(self):
        sentence = Sentence(id="s-1", text="Hello.")
        with pytest.raises(AttributeError):
            sentence.text = "Changed."

    def test_to_dict_uses_purpose_key_name(self):
        data = Sentence(id="s-1", text="Hi.", purpose_key="CLAIM").to_dict()
        assert data["purposeKey"] == "CLAIM"
        assert "purpose_key" not in data

    def test_tree_from_dicts(self):
        tree = parse_passage("One. Two.\n\nThree.", counting_ids())
        assert tree_from_dicts(tree_to_dicts(tree)) == tree

    def test_from_dict_fills_defaults(self):
        sentence = Sentence.from_dict({"id": "s-9", "text": "Bare."})
        assert sentence.purpose_key == UNASSIGNED
        assert sentence.summary == ""


class TestIds:
    """Test identifier generation."""

    def test_prefixes(self):
        ids = IdFactory()
        assert ids.paragraph_id().startswith("p-")
        assert ids.sentence_id().startswith("s-")

    def test_uuid_format(self):
        paragraph_id = IdFactory().paragraph_id()
        assert len(paragraph_id) == 2 + 36  # prefix + UUID

    def test_fresh_on_every_call(self):
        ids = IdFactory()
        generated = {ids.sentence_id() for _ in range(200)}
        assert len(generated) == 200

    def test_injected_source(self):
        ids = counting_ids()
        assert ids.paragraph_id() == "p-1"
        assert ids.sentence_id() == "s-2"

    def test_kind_from_prefix(self):
        assert is_paragraph_id("p-abc")
        assert not is_paragraph_id("s-abc")
        assert is_sentence_id("s-abc")


class TestSegmenter:
    """Test paragraph and sentence splitting."""

    def setup_method(self):
        self.segmenter = Segmenter(counting_ids())

    def test_empty_and_whitespace_input(self):
        assert self.segmenter.segment("") == ()
        assert self.segmenter.segment("   ") == ()
        assert self.segmenter.segment("\n \n") == ()
        assert self.segmenter.segment("\t\n\n  \n") == ()

    def test_single_paragraph_three_terminators(self):
        tree = self.segmenter.segment("Sentence one. Sentence two! Sentence three?")
        assert len(tree) == 1
        assert texts(tree[0]) == ["Sentence one.", "Sentence two!", "Sentence three?"]
        for sentence in tree[0].sentences:
            assert sentence.purpose_key == UNASSIGNED
            assert sentence.summary == ""
            assert sentence.ties == ""

    def test_two_paragraphs(self):
        tree = self.segmenter.segment("P1.\n\nP2.")
        assert len(tree) == 2
        assert texts(tree[0]) == ["P1."]
        assert texts(tree[1]) == ["P2."]

    def test_blank_line_runs_are_one_separator(self):
        text = ("Paragraph one, sentence one. P1S2.\n\n"
                "Paragraph two, sentence one. P2S2!\n\n\n"
                "Paragraph three.")
        tree = self.segmenter.segment(text)
        assert len(tree) == 3
        assert texts(tree[0]) == ["Paragraph one, sentence one.", "P1S2."]
        assert texts(tree[1]) == ["Paragraph two, sentence one.", "P2S2!"]
        assert texts(tree[2]) == ["Paragraph three."]

    def test_whitespace_only_line_separates_paragraphs(self):
        tree = self.segmenter.segment("One.\n   \nTwo.")
        assert [texts(p) for p in tree] == [["One."], ["Two."]]

    def test_whitespace_paragraphs_skipped(self):
        text = "Paragraph 1.\n\n   \n\nParagraph 3.\n\n\t\n\nParagraph 5."
        tree = self.segmenter.segment(text)
        assert [texts(p) for p in tree] == [["Paragraph 1."], ["Paragraph 3."], ["Paragraph 5."]]

    def test_leading_and_trailing_spaces_trimmed(self):
        tree = self.segmenter.segment("  Leading and trailing spaces.  ")
        assert len(tree) == 1
        assert texts(tree[0]) == ["Leading and trailing spaces."]

    def test_space_before_period_kept(self):
        tree = self.segmenter.segment("Yet another one with space before period .")
        assert texts(tree[0]) == ["Yet another one with space before period ."]

    def test_no_terminator_is_one_sentence(self):
        tree = self.segmenter.segment("This is a single line without a period")
        assert texts(tree[0]) == ["This is a single line without a period"]

    def test_newline_inside_sentence(self):
        text = ("This is a sentence\nthat spans multiple lines but is one sentence. "
                "This is another one.\n\nNew paragraph.")
        tree = self.segmenter.segment(text)
        assert len(tree) == 2
        assert texts(tree[0]) == [
            "This is a sentence\nthat spans multiple lines but is one sentence.",
            "This is another one.",
        ]
        assert texts(tree[1]) == ["New paragraph."]

    def test_punctuation_only_paragraph_dropped(self):
        assert self.segmenter.segment("...!!!???") == ()

    def test_punctuation_only_paragraph_dropped_between_others(self):
        tree = self.segmenter.segment("Real sentence.\n\n...\n\nAnother.")
        assert [texts(p) for p in tree] == [["Real sentence."], ["Another."]]

    def test_terminator_glued_to_text_is_not_kept(self):
        # Only a terminator followed by whitespace or the end is kept
        tree = self.segmenter.segment("Wait... what? Yes.")
        assert texts(tree[0]) == ["Wait", "what?", "Yes."]

    def test_ids_assigned_in_order(self):
        tree = self.segmenter.segment("A. B.\n\nC.")
        assert tree[0].id == "p-1"
        assert [s.id for s in tree[0].sentences] == ["s-2", "s-3"]
        assert tree[1].id == "p-4"
        assert tree[1].sentences[0].id == "s-5"

    def test_ids_unique_with_default_generator(self):
        tree = parse_passage("First sentence. Second sentence.\n\nThird sentence.")
        all_ids = [p.id for p in tree] + [s.id for p in tree for s in p.sentences]
        assert len(all_ids) == 5
        assert len(set(all_ids)) == 5

    def test_structure_is_deterministic(self):
        text = "One. Two!\n\nThree?\n\n\nFour"
        first = parse_passage(text)
        second = parse_passage(text)
        assert [texts(p) for p in first] == [texts(p) for p in second]
        assert first[0].id != second[0].id

    def test_split_helpers(self):
        assert self.segmenter.split_paragraphs("a\n\n\n b \n\n") == ["a", "b"]
        assert self.segmenter.split_sentences("  x. y?  ") == ["x.", "y?"]
        assert self.segmenter.split_sentences("?!") == []

    def test_paragraph_count_never_exceeds_segments(self):
        text = "A.\n\n?\n\n \n\nB. C."
        segments = text.split("\n\n")
        tree = self.segmenter.segment(text)
        assert len(tree) <= len(segments)
        assert len(tree) == 2


class TestMutations:
    """Test pure tree edits."""

    def setup_method(self):
        # p-1: s-2 "One.", s-3 "Two."   p-4: s-5 "Three."
        self.tree = parse_passage("One. Two.\n\nThree.", counting_ids())

    def test_update_replaces_in_place(self):
        new = Sentence(id="s-2", text="Uno.", summary="first", purpose_key="CLAIM")
        result = update_sentence(self.tree, "p-1", "s-2", new)
        assert result[0].sentences[0] == new
        assert texts(result[0]) == ["Uno.", "Two."]

    def test_update_leaves_others_untouched(self):
        new = Sentence(id="s-2", text="Uno.")
        result = update_sentence(self.tree, "p-1", "s-2", new)
        assert result[0].sentences[1] is self.tree[0].sentences[1]
        assert result[1] is self.tree[1]

    def test_update_does_not_mutate_input(self):
        before = tree_to_dicts(self.tree)
        update_sentence(self.tree, "p-1", "s-2", Sentence(id="s-2", text="Uno."))
        assert tree_to_dicts(self.tree) == before

    def test_update_unknown_ids_is_noop(self):
        new = Sentence(id="s-2", text="Uno.")
        assert update_sentence(self.tree, "p-404", "s-2", new) is self.tree
        assert update_sentence(self.tree, "p-1", "s-404", new) is self.tree
        # Right sentence, wrong paragraph
        assert update_sentence(self.tree, "p-4", "s-2", new) is self.tree

    def test_remove_shifts_following_up(self):
        result = remove_sentence(self.tree, "p-1", "s-2")
        assert texts(result[0]) == ["Two."]
        assert len(result[0].sentences) == len(self.tree[0].sentences) - 1
        assert result[1] is self.tree[1]

    def test_remove_last_sentence_keeps_paragraph(self):
        result = remove_sentence(self.tree, "p-4", "s-5")
        assert len(result) == 2
        assert result[1].id == "p-4"
        assert result[1].sentences == ()

    def test_remove_twice_is_noop(self):
        once = remove_sentence(self.tree, "p-4", "s-5")
        assert remove_sentence(once, "p-4", "s-5") is once

    def test_add_appends_placeholder(self):
        result = add_sentence_to_paragraph(self.tree, "p-4", IdFactory(CountingTokens()))
        added = result[1].sentences[-1]
        assert len(result[1].sentences) == 2
        assert added.text == ""
        assert added.summary == ""
        assert added.ties == ""
        assert added.purpose_key == UNASSIGNED
        assert added.id.startswith("s-")
        assert result[0] is self.tree[0]

    def test_add_fresh_id_each_time(self):
        once = add_sentence_to_paragraph(self.tree, "p-1")
        twice = add_sentence_to_paragraph(once, "p-1")
        new_ids = [s.id for s in twice[0].sentences[2:]]
        assert len(set(new_ids)) == 2

    def test_add_unknown_paragraph_is_noop(self):
        assert add_sentence_to_paragraph(self.tree, "p-404") is self.tree

    def test_drop_empty_paragraphs(self):
        emptied = remove_sentence(self.tree, "p-4", "s-5")
        assert [p.id for p in drop_empty_paragraphs(emptied)] == ["p-1"]
        assert drop_empty_paragraphs(self.tree) is self.tree

    def test_find_sentence(self):
        assert find_sentence(self.tree, "p-4", "s-5").text == "Three."
        assert find_sentence(self.tree, "p-1", "s-5") is None


class TestViews:
    """Test highlight derivation and reconstruction."""

    def setup_method(self):
        tree = parse_passage("One. Two.\n\nThree.", counting_ids())
        tree = update_sentence(tree, "p-1", "s-2", Sentence(id="s-2", text="One.", purpose_key="CLAIM"))
        self.tree = update_sentence(tree, "p-4", "s-5", Sentence(id="s-5", text="Three.", purpose_key="CLAIM"))

    def test_hover_emphasizes_across_paragraphs(self):
        highlights = derive_highlights(self.tree, "CLAIM")
        assert highlights == {
            "s-2": Emphasis.EMPHASIZED,
            "s-3": Emphasis.NORMAL,
            "s-5": Emphasis.EMPHASIZED,
        }

    def test_clearing_hover_reverts_all(self):
        highlights = derive_highlights(self.tree, None)
        assert set(highlights.values()) == {Emphasis.NORMAL}
        assert len(highlights) == 3

    def test_hovering_unassigned(self):
        highlights = derive_highlights(self.tree, UNASSIGNED)
        assert highlights["s-3"] == Emphasis.EMPHASIZED
        assert highlights["s-2"] == Emphasis.NORMAL

    def test_derivation_does_not_mutate(self):
        before = tree_to_dicts(self.tree)
        derive_highlights(self.tree, "CLAIM")
        assert tree_to_dicts(self.tree) == before

    def test_emphasis_for(self):
        sentence = self.tree[0].sentences[0]
        assert emphasis_for(sentence, "CLAIM") == Emphasis.EMPHASIZED
        assert emphasis_for(sentence, "EVIDENCE") == Emphasis.NORMAL

    def test_reconstruct(self):
        assert reconstruct_passage(self.tree) == "One. Two.\n\nThree."

    def test_reconstruct_skips_empty(self):
        tree = add_sentence_to_paragraph(self.tree, "p-1")
        tree = remove_sentence(tree, "p-4", "s-5")
        assert reconstruct_passage(tree) == "One. Two."
        assert [p.id for p in visible_paragraphs(tree)] == ["p-1"]
        assert len(visible_paragraphs(tree)[0].sentences) == 2

    def test_reconstruct_empty_tree(self):
        assert reconstruct_passage(()) == ""


class TestTaxonomy:
    """Test purpose lookup."""

    def setup_method(self):
        self.taxonomy = PurposeTaxonomy()

    def test_resolve_known(self):
        lookup = self.taxonomy.resolve("CLAIM")
        assert lookup.found
        assert lookup.key == "CLAIM"
        assert lookup.descriptor.name == "Claim / thesis"

    def test_resolve_unknown_falls_back(self):
        lookup = self.taxonomy.resolve("NO_SUCH_KEY")
        assert not lookup.found
        assert lookup.key == UNASSIGNED
        assert lookup.descriptor.is_placeholder

    def test_resolve_none(self):
        assert not self.taxonomy.resolve(None).found

    def test_unassigned_always_first(self):
        taxonomy = PurposeTaxonomy({"A": PurposeDescriptor("Alpha", "yellow")})
        assert taxonomy.keys() == [UNASSIGNED, "A"]

    def test_selectable_excludes_placeholder(self):
        assert UNASSIGNED not in self.taxonomy.selectable_keys()
        assert "CLAIM" in self.taxonomy.selectable_keys()

    def test_next_key_cycles(self):
        keys = self.taxonomy.selectable_keys()
        assert self.taxonomy.next_key(UNASSIGNED) == keys[0]
        assert self.taxonomy.next_key(keys[0]) == keys[1]
        assert self.taxonomy.next_key(keys[-1]) == keys[0]
        assert self.taxonomy.next_key("BOGUS") == keys[0]

    def test_from_config(self):
        taxonomy = PurposeTaxonomy.from_config({
            "HOOK": {"name": "Hook", "color": "yellow"},
            "THESIS": "Thesis",
        })
        assert taxonomy.keys() == [UNASSIGNED, "HOOK", "THESIS"]
        assert taxonomy.resolve("HOOK").descriptor.color == "yellow"
        assert taxonomy.resolve("THESIS").descriptor.color == "white"

    def test_from_config_empty_gives_defaults(self):
        assert PurposeTaxonomy.from_config(None).keys() == PurposeTaxonomy().keys()

    def test_from_config_rejects_bad_entries(self):
        with pytest.raises(TaxonomyError):
            PurposeTaxonomy.from_config({"BAD": {"color": "red"}})
        with pytest.raises(TaxonomyError):
            PurposeTaxonomy.from_config(["CLAIM"])

    def test_from_config_placeholder_words(self):
        taxonomy = PurposeTaxonomy.from_config({
            "A": {"name": "A", "placeholder": "false"},
            "B": {"name": "B", "placeholder": "yes"},
            "C": {"name": "C", "placeholder": False},
        })
        assert taxonomy.selectable_keys() == ["A", "C"]
        with pytest.raises(TaxonomyError):
            PurposeTaxonomy.from_config({"D": {"name": "D", "placeholder": "maybe"}})


class TestSession:
    """Test the editing session."""

    def setup_method(self):
        self.session = AnalysisSession(ids=counting_ids())
        self.session.analyze("One. Two.\n\nThree.")

    def test_analyze(self):
        assert self.session.get_stats() == {"paragraphs": 2, "sentences": 3}
        assert self.session.raw_text == "One. Two.\n\nThree."
        assert not self.session.can_undo

    def test_edit_field(self):
        assert self.session.edit_field("p-1", "s-3", "summary", "second point")
        assert find_sentence(self.session.tree, "p-1", "s-3").summary == "second point"

    def test_edit_field_unchanged_value(self):
        assert not self.session.edit_field("p-1", "s-3", "text", "Two.")
        assert not self.session.can_undo

    def test_edit_field_rejects_id(self):
        with pytest.raises(ValueError):
            self.session.edit_field("p-1", "s-3", "id", "s-99")

    def test_set_purpose_and_undo(self):
        before = self.session.tree
        self.session.set_purpose("p-1", "s-2", "CLAIM")
        assert find_sentence(self.session.tree, "p-1", "s-2").purpose_key == "CLAIM"
        assert self.session.undo()
        assert self.session.tree is before
        assert not self.session.undo()

    def test_add_sentence(self):
        new_id = self.session.add_sentence("p-4")
        assert new_id == "s-6"
        assert self.session.tree[1].sentences[-1].id == new_id
        assert self.session.add_sentence("p-404") is None

    def test_ids_never_reused_after_removal(self):
        self.session.remove_sentence("p-4", "s-5")
        new_id = self.session.add_sentence("p-4")
        assert new_id != "s-5"

    def test_remove_only_sentence(self):
        assert self.session.remove_sentence("p-4", "s-5")
        assert self.session.tree[1].sentences == ()
        assert not self.session.remove_sentence("p-4", "s-5")
        assert self.session.drop_empty_paragraphs()
        assert len(self.session.tree) == 1

    def test_hover(self):
        self.session.set_purpose("p-1", "s-2", "CLAIM")
        self.session.set_purpose("p-4", "s-5", "CLAIM")
        self.session.set_hovered_purpose("CLAIM")
        highlights = self.session.highlights()
        assert highlights["s-2"] == highlights["s-5"] == Emphasis.EMPHASIZED
        assert highlights["s-3"] == Emphasis.NORMAL

        self.session.set_hovered_purpose(None)
        assert set(self.session.highlights().values()) == {Emphasis.NORMAL}

    def test_reanalyze_resets(self):
        self.session.set_purpose("p-1", "s-2", "CLAIM")
        self.session.set_hovered_purpose("CLAIM")
        self.session.analyze("Fresh.")
        assert self.session.get_stats() == {"paragraphs": 1, "sentences": 1}
        assert self.session.hovered_purpose is None
        assert not self.session.can_undo

    def test_history_is_bounded(self):
        session = AnalysisSession(max_history=2)
        session.analyze("One.")
        paragraph_id = session.tree[0].id
        for _ in range(5):
            session.add_sentence(paragraph_id)
        assert session.undo()
        assert session.undo()
        assert not session.undo()
