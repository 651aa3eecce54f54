"""Category classifiers.

A classifier looks at the signals available for the current completion
session and either names a category or returns None ("no opinion").
Classifiers are consulted in order and the first answer wins.
"""

import logging
import re
import types
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Pattern, Tuple, Union

from .categories import (
    COMMAND,
    CUSTOMIZE_GROUP,
    FACE,
    PACKAGE,
    SYMBOL,
    VARIABLE,
    Category,
    as_category,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    """Signals available to classifiers for one completion session.

    Attributes:
        command: The command that opened the session, if known.
        original_category: The category the host itself declared, if any.
        prompt: The prompt text shown to the user.
        candidates: The candidate source (list, mapping, module, ...).
    """
    command: Optional[str] = None
    original_category: Optional[Category] = None
    prompt: Optional[str] = None
    candidates: Any = None


ClassifierFn = Callable[[SessionState], Optional[Category]]

# Ordered (pattern, category) pairs matched against the prompt text
DEFAULT_PROMPT_CATEGORIES: List[Tuple[str, str]] = [
    (r"\bgroup\b", CUSTOMIZE_GROUP),
    (r"\bM-x\b", COMMAND),
    (r"\bpackage\b", PACKAGE),
    (r"\bface\b", FACE),
    (r"\bstyle\b", FACE),
    (r"\bvariable\b", VARIABLE),
    (r"\bcommand\b", COMMAND),
]


def resolve_category(
    chain: Iterable[ClassifierFn], state: SessionState
) -> Optional[Category]:
    """Run classifiers in order and return the first category found.

    Classifiers after the first match are not called.

    Args:
        chain: Ordered classifiers.
        state: Signals for the current session.

    Returns:
        The first non-None category, or None if no classifier knows.
    """
    for classifier in chain:
        category = classifier(state)
        if category is not None:
            logger.debug(f"Category {category!r} from {_classifier_name(classifier)}")
            return as_category(category)
    return None


def _classifier_name(classifier: ClassifierFn) -> str:
    return getattr(classifier, "__name__", type(classifier).__name__)


class CommandClassifier:
    """Classify by the command that opened the session.

    Looks the command up in an explicit override mapping. The mapping is
    held by reference, so later overrides are seen immediately.
    """

    __name__ = "classify_by_command"

    def __init__(self, command_categories: Dict[str, Category]):
        self.command_categories = command_categories

    def __call__(self, state: SessionState) -> Optional[Category]:
        if state.command is None:
            return None
        return self.command_categories.get(state.command)


def classify_by_original_category(state: SessionState) -> Optional[Category]:
    """Trust the category the host already declared."""
    return state.original_category


class PromptClassifier:
    """Classify by matching the prompt text against ordered patterns."""

    __name__ = "classify_by_prompt"

    def __init__(self, prompt_categories: List[Tuple[Pattern, Category]]):
        self.prompt_categories = prompt_categories

    def __call__(self, state: SessionState) -> Optional[Category]:
        if not state.prompt:
            return None
        for pattern, category in self.prompt_categories:
            if pattern.search(state.prompt):
                return category
        return None


def compile_prompt_pattern(pattern: Union[str, Pattern]) -> Pattern:
    """Compile a prompt pattern; string patterns match case-insensitively."""
    if isinstance(pattern, str):
        return re.compile(pattern, re.IGNORECASE)
    return pattern


def classify_by_candidate_shape(state: SessionState) -> Optional[Category]:
    """Recognize a symbol table used directly as the candidate source."""
    if isinstance(state.candidates, (types.ModuleType, types.SimpleNamespace)):
        return SYMBOL
    return None
