"""Tests for the default annotators and the end-to-end annotation flow."""

import inspect

import pytest

from margin_notes.annotators import FACE_SAMPLE, DefaultAnnotators, install_default_annotators
from margin_notes.categories import (
    COMMAND,
    CUSTOMIZE_GROUP,
    FACE,
    PACKAGE,
    SYMBOL,
    VARIABLE,
)
from margin_notes.display_width import display_width, truncate_to_width
from margin_notes.environment import UNBOUND, format_key_for_display, package_summary
from margin_notes.formatter import KEY_STYLE, Spacer
from margin_notes.registry import AnnotatorRegistry


@pytest.fixture
def annotators(environment, formatter):
    return DefaultAnnotators(environment, formatter)


class TestFormatKeyForDisplay:
    """Tests for key description formatting."""

    @pytest.mark.parametrize("key, expected", [
        ("c-d", "Ctrl+D"),
        ("f2", "F2"),
        ("escape", "Esc"),
        (["escape", "v"], "Esc V"),
        ("s-tab", "Shift+Tab"),
        ("q", "Q"),
        ("insert", "Insert"),
    ])
    def test_formats(self, key, expected):
        assert format_key_for_display(key) == expected


class TestEnvironment:
    """Tests for the lookup stores."""

    def test_key_description(self, environment):
        assert environment.key_description("quit") == "Ctrl+D"
        assert environment.key_description("undocumented") is None

    def test_command_doc_first_line(self, environment):
        assert environment.command_doc("describe-variable") == "Show the value and documentation of a variable."
        assert environment.command_doc("undocumented") is None
        assert environment.command_doc("missing") is None

    def test_variable_value(self, environment):
        assert environment.variable_value("fill-column") == 70
        assert environment.variable_value("user-name") is None
        assert environment.variable_value("missing") is UNBOUND

    def test_symbol_doc_from_dict(self, environment):
        environment.namespace = {"len": len}
        assert environment.symbol_doc("len") == inspect.getdoc(len).splitlines()[0]
        assert environment.symbol_doc("missing") is None

    def test_package_summary_missing(self):
        assert package_summary("surely-not-an-installed-distribution") is None

    def test_package_summary_empty_name(self):
        assert package_summary("") is None


class TestDefaultAnnotators:
    """Tests for each default annotator."""

    def test_command_with_key(self, annotators):
        annotation = annotators.command("quit")
        assert annotation.plain == " (Ctrl+D) Leave the shell."
        assert annotation.fragments[-1][0] == KEY_STYLE

    def test_command_key_sequence(self, annotators):
        annotation = annotators.command("describe-variable")
        assert annotation.plain.startswith(" (Esc V) Show the value")

    def test_command_without_key_or_doc(self, annotators, environment):
        environment.commands["bare"] = lambda: None
        assert annotators.command("bare") is None
        assert annotators.command("missing") is None

    def test_command_doc_only(self, annotators, environment):
        environment.keybindings.pop("quit")
        assert annotators.command("quit").plain == " Leave the shell."

    def test_variable(self, annotators):
        annotation = annotators.variable("tab-width")
        texts = [f[1] for f in annotation.fragments if not isinstance(f, Spacer)]
        assert "8" in texts
        assert "Distance between tab stops, in columns." in texts

    def test_variable_none_value(self, annotators):
        assert "None" in annotators.variable("user-name").plain

    def test_unknown_variable(self, annotators):
        assert annotators.variable("missing") is None

    def test_face(self, annotators):
        annotation = annotators.face("error")
        sample = [f for f in annotation.fragments if not isinstance(f, Spacer) and f[1] == FACE_SAMPLE]
        assert len(sample) == 1
        assert "#ff5f5f bold" in sample[0][0]
        assert annotation.plain.endswith("Error messages.")

    def test_face_without_doc(self, annotators):
        assert annotators.face("comment").plain == " " + FACE_SAMPLE

    def test_unknown_face(self, annotators):
        assert annotators.face("missing") is None

    def test_symbol(self, annotators, formatter):
        doc = inspect.getdoc(sorted).splitlines()[0]
        expected = " " + truncate_to_width(doc, formatter.truncate_width)
        assert annotators.symbol("sorted").plain == expected
        assert annotators.symbol("missing") is None

    def test_package(self, annotators, monkeypatch):
        monkeypatch.setattr(
            "margin_notes.annotators.package_summary",
            lambda name: "Library for building interactive prompts" if name == "prompt_toolkit" else None,
        )
        assert annotators.package("prompt_toolkit").plain == " Library for building interactive prompts"
        assert annotators.package("missing") is None

    def test_customize_group(self, annotators):
        assert annotators.customize_group("editing").plain == " Basic text editing facilities."
        assert annotators.customize_group("missing") is None


class TestInstallDefaults:
    """Tests for install_default_annotators()."""

    def test_registers_well_known_categories(self, environment):
        registry = AnnotatorRegistry()
        install_default_annotators(registry, environment)
        assert set(registry.annotators) == {COMMAND, VARIABLE, FACE, SYMBOL, PACKAGE, CUSTOMIZE_GROUP}


class TestEndToEnd:
    """A describe-variable session annotated from prompt text alone."""

    def test_describe_variable(self, mode, host, environment, formatter):
        right_margin = 100
        with host.open_session("Describe variable: ", environment.variables) as session:
            assert host.get_metadata(session, "category") == VARIABLE
            annotations = dict(host.annotate(session))

        cand = "fill-column"
        line = cand + annotations[cand].render(display_width(cand), right_margin)

        # Documentation is truncated and flush against the right margin
        assert display_width(line) == right_margin
        assert line.endswith("Column beyond which automatic line-wrap…")
        # The value field ends one column before the documentation field
        assert line.index("70") + len("70") == right_margin - formatter.truncate_width - 1
