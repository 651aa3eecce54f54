"""Annotator dispatch table and classifier chain.

The registry is the configuration handed to `AnnotationMode`: which
classifiers run (and in what order), which command or prompt maps to which
category, and which annotator serves each category. A process-wide default
instance is available from `default_registry()`; tests and embedders can
build independent registries.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Pattern, Tuple, Union

from .categories import Category, as_category
from .classifiers import (
    DEFAULT_PROMPT_CATEGORIES,
    ClassifierFn,
    CommandClassifier,
    PromptClassifier,
    SessionState,
    classify_by_candidate_shape,
    classify_by_original_category,
    compile_prompt_pattern,
    resolve_category,
)
from .formatter import Annotation

logger = logging.getLogger(__name__)

AnnotatorFn = Callable[[str], Optional[Annotation]]


class UnknownCategoryError(LookupError):
    """Raised when binding a command to a category with no annotator."""


class AnnotatorRegistry:
    """Category dispatch table plus the classifier chain that feeds it.

    Example:
        registry = AnnotatorRegistry()
        registry.register_annotator(Category("color"), annotate_color)
        registry.add_prompt_category(r"\\bcolou?r\\b", "color")
    """

    def __init__(self, default_chain: bool = True):
        """Initialize the registry.

        Args:
            default_chain: If True, install the default classifier chain
                (command override, original category, prompt, candidate
                shape) and the default prompt patterns.
        """
        self._annotators: Dict[Category, AnnotatorFn] = {}
        self.command_categories: Dict[str, Category] = {}
        self.prompt_categories: List[Tuple[Pattern, Category]] = []
        self._classifiers: List[ClassifierFn] = []

        if default_chain:
            for pattern, category in DEFAULT_PROMPT_CATEGORIES:
                self.add_prompt_category(pattern, category)
            self._classifiers = [
                CommandClassifier(self.command_categories),
                classify_by_original_category,
                PromptClassifier(self.prompt_categories),
                classify_by_candidate_shape,
            ]

    # -- Dispatch table ---------------------------------------------------

    def register_annotator(self, category: str, annotator: AnnotatorFn) -> "AnnotatorRegistry":
        """Register the annotator for a category, replacing any previous one.

        Args:
            category: Category the annotator serves.
            annotator: Callable taking a candidate and returning an
                Annotation or None.

        Returns:
            The registry, for chaining.
        """
        if not callable(annotator):
            raise TypeError(f"Annotator for {category!r} is not callable: {annotator!r}")
        category = as_category(category)
        if category in self._annotators:
            logger.debug(f"Replacing annotator for {category!r}")
        self._annotators[category] = annotator
        return self

    def unregister_annotator(self, category: str) -> Optional[AnnotatorFn]:
        """Remove and return the annotator for a category, if any."""
        return self._annotators.pop(as_category(category), None)

    def lookup_annotator(self, category: Optional[str]) -> Optional[AnnotatorFn]:
        """Return the annotator registered for a category, or None."""
        if category is None:
            return None
        return self._annotators.get(category)

    @property
    def annotators(self) -> Dict[Category, AnnotatorFn]:
        """Copy of the dispatch table."""
        return dict(self._annotators)

    # -- Command and prompt overrides --------------------------------------

    def set_command_category(self, command: str, category: str) -> None:
        """Force sessions opened by `command` to resolve to `category`."""
        self.command_categories[command] = as_category(category)

    def bind_command(
        self, command: str, annotator: Union[str, AnnotatorFn]
    ) -> Category:
        """Give a single command its own annotator.

        The command resolves to a synthetic category named after itself,
        and that category gets the annotator. Other commands sharing the
        command's usual category are unaffected.

        Args:
            command: Command name.
            annotator: An annotator callable, or a category whose current
                annotator should be used.

        Returns:
            The synthetic category.

        Raises:
            UnknownCategoryError: If `annotator` names a category with no
                registered annotator.
        """
        if isinstance(annotator, str):
            fn = self.lookup_annotator(annotator)
            if fn is None:
                raise UnknownCategoryError(f"No annotator registered for category {annotator!r}")
        else:
            fn = annotator

        category = Category(command)
        self.register_annotator(category, fn)
        self.set_command_category(command, category)
        return category

    def add_prompt_category(
        self, pattern: Union[str, Pattern], category: str, first: bool = False
    ) -> None:
        """Map prompts matching `pattern` to `category`.

        Args:
            pattern: Regular expression searched in the prompt text.
                String patterns are case-insensitive.
            category: Category for matching prompts.
            first: If True, this pattern is tried before existing ones.
        """
        entry = (compile_prompt_pattern(pattern), as_category(category))
        if first:
            self.prompt_categories.insert(0, entry)
        else:
            self.prompt_categories.append(entry)

    # -- Classifier chain ---------------------------------------------------

    @property
    def classifiers(self) -> List[ClassifierFn]:
        """Copy of the classifier chain, in consultation order."""
        return list(self._classifiers)

    def add_classifier(self, classifier: ClassifierFn, index: Optional[int] = None) -> None:
        """Add a classifier to the chain.

        Args:
            classifier: Callable taking a SessionState.
            index: Position to insert at (0 prepends); appends if None.
        """
        if not callable(classifier):
            raise TypeError(f"Classifier is not callable: {classifier!r}")
        if index is None:
            self._classifiers.append(classifier)
        else:
            self._classifiers.insert(index, classifier)

    def remove_classifier(self, classifier: ClassifierFn) -> bool:
        """Remove a classifier. Returns True if it was in the chain."""
        try:
            self._classifiers.remove(classifier)
        except ValueError:
            return False
        return True

    def set_classifiers(self, classifiers: Iterable[ClassifierFn]) -> None:
        """Replace the whole classifier chain."""
        classifiers = list(classifiers)
        for classifier in classifiers:
            if not callable(classifier):
                raise TypeError(f"Classifier is not callable: {classifier!r}")
        self._classifiers = classifiers

    def resolve(self, state: SessionState) -> Optional[Category]:
        """Resolve the category for a session with this registry's chain."""
        return resolve_category(self._classifiers, state)


_default_registry: Optional[AnnotatorRegistry] = None


def default_registry() -> AnnotatorRegistry:
    """Return the process-wide registry, creating it on first use.

    The registry starts with the default classifier chain and the default
    annotators, which read from `default_environment()`.
    """
    global _default_registry
    if _default_registry is None:
        # annotators imports this module
        from .annotators import install_default_annotators
        from .environment import default_environment

        registry = AnnotatorRegistry()
        install_default_annotators(registry, default_environment())
        _default_registry = registry
    return _default_registry
