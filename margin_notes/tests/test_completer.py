"""Tests for the prompt_toolkit completer integration."""

from prompt_toolkit.completion import CompleteEvent, WordCompleter
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import fragment_list_to_text
from prompt_toolkit.layout.menus import _get_menu_item_fragments

from margin_notes.completer import MENU_CHROME, AnnotatingCompleter, menu_right_margin
from margin_notes.display_width import display_width

WORDS = ["fill-column", "fill-prefix", "tab-width"]


def complete(completer, text):
    return list(completer.get_completions(Document(text), CompleteEvent()))


class TestAnnotatingCompleter:
    """Tests for AnnotatingCompleter."""

    def test_passthrough_without_session(self, mode, host):
        completer = AnnotatingCompleter(WordCompleter(WORDS, WORD=True), host, right_margin=100)
        completions = complete(completer, "fi")
        assert [c.display_text for c in completions] == ["fill-column", "fill-prefix"]

    def test_passthrough_without_category(self, mode, host):
        completer = AnnotatingCompleter(WordCompleter(WORDS, WORD=True), host, right_margin=100)
        with host.open_session("Pick: ", WORDS):
            completions = complete(completer, "fi")
        assert [c.display_text for c in completions] == ["fill-column", "fill-prefix"]

    def test_annotated_display(self, mode, host, environment):
        completer = AnnotatingCompleter(WordCompleter(WORDS, WORD=True), host, right_margin=100)
        with host.open_session("Describe variable: ", environment.variables):
            completions = complete(completer, "fi")

        annotated, plain = completions
        assert annotated.text == "fill-column"
        assert annotated.display_text.startswith("fill-column ")
        assert display_width(annotated.display_text) == 100
        assert annotated.display_text.endswith("…")

        # No variable named fill-prefix: the completion is left alone
        assert plain.display_text == "fill-prefix"

    def test_completion_fields_preserved(self, mode, host, environment):
        completer = AnnotatingCompleter(WordCompleter(WORDS, WORD=True), host, right_margin=100)
        with host.open_session("Describe variable: ", environment.variables):
            annotated = complete(completer, "fi")[0]
        assert annotated.start_position == -2

    def test_without_annotation_mode(self, host, environment):
        completer = AnnotatingCompleter(WordCompleter(WORDS, WORD=True), host, right_margin=100)
        with host.open_session("Describe variable: ", environment.variables):
            completions = complete(completer, "fi")
        assert [c.display_text for c in completions] == ["fill-column", "fill-prefix"]


class TestMenuRightMargin:
    """Tests for the default right margin."""

    def test_reserves_menu_chrome(self):
        completions = complete(WordCompleter(WORDS, WORD=True), "fi")
        assert menu_right_margin(completions, width=100) == 100 - MENU_CHROME

    def test_reserves_meta_column(self):
        inner = WordCompleter(WORDS, WORD=True, meta_dict={"fill-column": "setting"})
        completions = complete(inner, "fi")
        assert menu_right_margin(completions, width=100) == 100 - MENU_CHROME - len("setting") - 2

    def test_never_negative(self):
        assert menu_right_margin([], width=2) == 0

    def test_default_margin_fits_menu(self, mode, host, environment, monkeypatch):
        """The completion menu renders the annotation without trimming it."""
        monkeypatch.setattr("margin_notes.completer.terminal_width", lambda: 100)
        completer = AnnotatingCompleter(WordCompleter(WORDS, WORD=True), host)
        with host.open_session("Describe variable: ", environment.variables):
            annotated = complete(completer, "fi")[0]

        assert display_width(annotated.display_text) == 100 - MENU_CHROME
        # The menu window is one column narrower than the output (scrollbar)
        for space_after in (False, True):
            rendered = fragment_list_to_text(
                _get_menu_item_fragments(annotated, False, 99, space_after=space_after)
            )
            assert rendered == " " + annotated.display_text + " "
            assert rendered.rstrip().endswith("…")
            assert not rendered.rstrip().endswith("...")

    def test_explicit_margin_wins(self, mode, host, environment, monkeypatch):
        monkeypatch.setattr("margin_notes.completer.terminal_width", lambda: 100)
        completer = AnnotatingCompleter(WordCompleter(WORDS, WORD=True), host, right_margin=60)
        with host.open_session("Describe variable: ", environment.variables):
            annotated = complete(completer, "fi")[0]
        assert display_width(annotated.display_text) == 60
