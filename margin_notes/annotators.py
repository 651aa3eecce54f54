"""Default annotators for the well-known categories."""

from typing import Optional

from .categories import COMMAND, CUSTOMIZE_GROUP, FACE, PACKAGE, SYMBOL, VARIABLE
from .environment import UNBOUND, Environment, package_summary
from .formatter import DOC_STYLE, KEY_STYLE, SAMPLE_STYLE, Annotation, AnnotationFormatter
from .registry import AnnotatorRegistry

FACE_SAMPLE = "abcdefghijklmNOPQRSTUVWXYZ"


class DefaultAnnotators:
    """Annotators backed by an Environment.

    Each method takes a candidate string and returns an Annotation, or
    None when there is nothing to say about the candidate.
    """

    def __init__(self, environment: Environment, formatter: Optional[AnnotationFormatter] = None):
        self.environment = environment
        self.formatter = formatter or AnnotationFormatter()

    def command(self, cand: str) -> Optional[Annotation]:
        """Key binding in parentheses followed by the command's doc line."""
        key = self.environment.key_description(cand)
        doc = self.environment.command_doc(cand)
        if key is None:
            return self.formatter.format(doc, style=DOC_STYLE)
        text = f"({key}) {doc}" if doc else f"({key})"
        return self.formatter.format(text, style=KEY_STYLE)

    def variable(self, cand: str) -> Optional[Annotation]:
        """Current value and documentation, as two aligned fields."""
        value = self.environment.variable_value(cand)
        doc = self.environment.variable_doc(cand)
        return self.formatter.format_value(value, doc, has_value=value is not UNBOUND)

    def face(self, cand: str) -> Optional[Annotation]:
        """A sample rendered in the style, then its description."""
        style = self.environment.style_of(cand)
        if style is None:
            return None
        fmt = self.formatter
        sample = fmt.format(
            FACE_SAMPLE,
            len(FACE_SAMPLE),
            extra_inset=fmt.truncate_width + 1,
            style=f"{SAMPLE_STYLE} {style}".strip(),
        )
        doc = fmt.format(self.environment.style_doc(cand), style=DOC_STYLE)
        return sample + doc if doc is not None else sample

    def symbol(self, cand: str) -> Optional[Annotation]:
        """Doc line of the object the symbol names."""
        return self.formatter.format(self.environment.symbol_doc(cand), style=DOC_STYLE)

    def package(self, cand: str) -> Optional[Annotation]:
        """Summary of the installed distribution."""
        return self.formatter.format(package_summary(cand), style=DOC_STYLE)

    def customize_group(self, cand: str) -> Optional[Annotation]:
        """Description of the settings group."""
        return self.formatter.format(self.environment.group_doc(cand), style=DOC_STYLE)


def install_default_annotators(
    registry: AnnotatorRegistry,
    environment: Environment,
    formatter: Optional[AnnotationFormatter] = None,
) -> DefaultAnnotators:
    """Register the default annotators for the well-known categories.

    Args:
        registry: Registry to populate.
        environment: Lookup stores the annotators read from.
        formatter: Formatter to use (default: AnnotationFormatter()).

    Returns:
        The DefaultAnnotators instance whose methods were registered.
    """
    annotators = DefaultAnnotators(environment, formatter)
    registry.register_annotator(COMMAND, annotators.command)
    registry.register_annotator(VARIABLE, annotators.variable)
    registry.register_annotator(FACE, annotators.face)
    registry.register_annotator(SYMBOL, annotators.symbol)
    registry.register_annotator(PACKAGE, annotators.package)
    registry.register_annotator(CUSTOMIZE_GROUP, annotators.customize_group)
    return annotators
