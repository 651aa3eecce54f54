"""Category-aware annotations for completion candidates.

Infers what a completion session is choosing among (a command, a
variable, a style, ...) and annotates each candidate with right-aligned
descriptive text chosen for that category.
"""

from .annotators import DefaultAnnotators, install_default_annotators
from .categories import (
    COMMAND,
    CUSTOMIZE_GROUP,
    FACE,
    FILE,
    PACKAGE,
    SYMBOL,
    VARIABLE,
    Category,
)
from .classifiers import SessionState, resolve_category
from .completer import AnnotatingCompleter
from .config import MarginConfig, load_config
from .display_width import display_width, truncate_to_width
from .environment import Environment, Variable, default_environment
from .formatter import Annotation, AnnotationFormatter, Spacer, annotation_style
from .host import CompletionHost, CompletionSession
from .mode import AnnotationMode
from .registry import AnnotatorRegistry, UnknownCategoryError, default_registry

__all__ = [
    "COMMAND",
    "CUSTOMIZE_GROUP",
    "FACE",
    "FILE",
    "PACKAGE",
    "SYMBOL",
    "VARIABLE",
    "Annotation",
    "AnnotationFormatter",
    "AnnotationMode",
    "AnnotatingCompleter",
    "AnnotatorRegistry",
    "Category",
    "CompletionHost",
    "CompletionSession",
    "DefaultAnnotators",
    "Environment",
    "MarginConfig",
    "SessionState",
    "Spacer",
    "UnknownCategoryError",
    "Variable",
    "annotation_style",
    "default_environment",
    "default_registry",
    "display_width",
    "install_default_annotators",
    "load_config",
    "resolve_category",
    "truncate_to_width",
]
