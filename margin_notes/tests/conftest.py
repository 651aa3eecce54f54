"""Pytest configuration for margin_notes tests.

Run tests with: pytest margin_notes/tests/
"""

import sys
import types
from pathlib import Path

import pytest

# Add the project root to path for imports
project_dir = Path(__file__).parent.parent.parent
if str(project_dir) not in sys.path:
    sys.path.insert(0, str(project_dir))

from margin_notes.annotators import install_default_annotators
from margin_notes.environment import Environment, Variable
from margin_notes.formatter import AnnotationFormatter
from margin_notes.host import CompletionHost
from margin_notes.mode import AnnotationMode
from margin_notes.registry import AnnotatorRegistry


def leave():
    """Leave the shell."""


def describe_variable():
    """Show the value and documentation of a variable.

    Prompts for the variable name.
    """


def undocumented():
    pass


@pytest.fixture
def environment():
    """Lookup stores with a few commands, variables, styles and groups."""
    return Environment(
        commands={
            "quit": leave,
            "describe-variable": describe_variable,
            "undocumented": undocumented,
        },
        keybindings={"quit": "c-d", "describe-variable": ["escape", "v"]},
        variables={
            "fill-column": Variable(70, "Column beyond which automatic line-wrapping should happen."),
            "tab-width": Variable(8, "Distance between tab stops, in columns."),
            "user-name": Variable(None, "The user's login name."),
        },
        styles={"error": "#ff5f5f bold", "comment": "#888888 italic"},
        style_docs={"error": "Error messages."},
        groups={"editing": "Basic text editing facilities."},
        namespace=types.SimpleNamespace(len=len, sorted=sorted),
    )


@pytest.fixture
def formatter():
    """Formatter with small widths so tests can reason about columns."""
    return AnnotationFormatter(truncate_width=40, value_width=10)


@pytest.fixture
def registry(environment, formatter):
    """Independent registry with the default chain and annotators."""
    registry = AnnotatorRegistry()
    install_default_annotators(registry, environment, formatter)
    return registry


@pytest.fixture
def host():
    return CompletionHost()


@pytest.fixture
def mode(registry, host):
    """Annotation mode enabled on the host for the duration of a test."""
    mode = AnnotationMode(registry)
    mode.enable(host)
    yield mode
    mode.disable()
