"""Annotation formatting.

Annotations are right-justified against the right margin of the display
area rather than placed at a fixed offset from the candidate, so that the
annotations of a candidate list form one scannable column regardless of how
long each candidate is.

An `Annotation` is kept as fragments until it is rendered, because the
filler between candidate and annotation depends on where the candidate
ends and on how wide the display is; both are only known to the host.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style

from .display_width import DEFAULT_ELLIPSIS, display_width, truncate_to_width


# Style classes applied to annotation text (decorative only)
ANNOTATION_STYLE = "class:margin.annotation"
KEY_STYLE = "class:margin.key"
VALUE_STYLE = "class:margin.value"
DOC_STYLE = "class:margin.doc"
SAMPLE_STYLE = "class:margin.sample"

DEFAULT_ANNOTATION_STYLES = {
    "margin.annotation": "#888888",
    "margin.key": "#5fafff bold",
    "margin.value": "#87af87",
    "margin.doc": "#888888 italic",
    "margin.sample": "",
}


def annotation_style(overrides: Optional[dict] = None) -> Style:
    """Build the prompt_toolkit Style for annotation classes.

    Args:
        overrides: Optional mapping of class name to style string.

    Returns:
        A Style usable with PromptSession(style=...).
    """
    styles = dict(DEFAULT_ANNOTATION_STYLES)
    if overrides:
        styles.update(overrides)
    return Style.from_dict(styles)


@dataclass(frozen=True)
class Spacer:
    """Invisible filler reaching to `from_right` columns left of the margin."""
    from_right: int

    def width_at(self, column: int, right_margin: int) -> int:
        """Columns this spacer occupies when it starts at `column`."""
        return max(0, right_margin - self.from_right - column)


Fragment = Union[Tuple[str, str], Spacer]


@dataclass(frozen=True)
class Annotation:
    """A formatted annotation: styled text fragments and alignment spacers."""
    fragments: Tuple[Fragment, ...] = ()

    def __add__(self, other: "Annotation") -> "Annotation":
        if not isinstance(other, Annotation):
            return NotImplemented
        return Annotation(self.fragments + other.fragments)

    def __bool__(self) -> bool:
        return bool(self.fragments)

    @property
    def plain(self) -> str:
        """Annotation text with the alignment fillers left out."""
        return "".join(f[1] for f in self.fragments if not isinstance(f, Spacer))

    def to_formatted_text(self, start_column: int, right_margin: int) -> FormattedText:
        """Resolve spacers into padding and return prompt_toolkit fragments.

        Args:
            start_column: Column where the annotation starts (the display
                width of the candidate it follows).
            right_margin: Display width of the area the annotation lives in.

        Returns:
            FormattedText with one (style, text) pair per fragment.
        """
        column = start_column
        result = []
        for fragment in self.fragments:
            if isinstance(fragment, Spacer):
                text = " " * fragment.width_at(column, right_margin)
                style = ""
            else:
                style, text = fragment
            if text:
                result.append((style, text))
                column += display_width(text)
        return FormattedText(result)

    def render(self, start_column: int, right_margin: int) -> str:
        """Render to plain text, padding each spacer to its column."""
        return "".join(text for _, text in self.to_formatted_text(start_column, right_margin))


class AnnotationFormatter:
    """Fits annotation text into a column budget and aligns it to the margin.

    Args:
        truncate_width: Default column budget for annotation text.
        value_width: Column budget for the value field of value-bearing
            annotations.
        ellipsis: Marker used when text is cut.
    """

    def __init__(
        self,
        truncate_width: int = 80,
        value_width: int = 20,
        ellipsis: str = DEFAULT_ELLIPSIS,
    ):
        self.truncate_width = truncate_width
        self.value_width = value_width
        self.ellipsis = ellipsis

    def format(
        self,
        raw: Optional[str],
        column_budget: Optional[int] = None,
        extra_inset: int = 0,
        style: str = ANNOTATION_STYLE,
    ) -> Optional[Annotation]:
        """Format raw annotation text.

        Args:
            raw: Annotation text; may be multi-line. None means there is
                nothing to show.
            column_budget: Maximum display width (default: truncate_width).
            extra_inset: Extra columns between the text end and the margin.
            style: Style tag for the text.

        Returns:
            Annotation ending at `right_margin - extra_inset`, or None.
        """
        if raw is None:
            return None
        if column_budget is None:
            column_budget = self.truncate_width

        text = truncate_to_width(str(raw), column_budget, ellipsis=self.ellipsis)
        return Annotation((
            ("", " "),
            Spacer(extra_inset + display_width(text)),
            (style, text),
        ))

    def format_value(self, value: Any, doc: Optional[str], has_value: bool = True) -> Optional[Annotation]:
        """Format a value field and its documentation as two aligned fields.

        The value is right-justified to end just before the documentation
        field; the documentation is right-justified at the margin.

        Args:
            value: The current value, shown via repr().
            doc: Documentation text, or None.
            has_value: False when there is no value to show (a None value
                is still a value).

        Returns:
            The combined annotation, or None when both parts are absent.
        """
        value_part = None
        if has_value:
            value_part = self.format(
                repr(value),
                self.value_width,
                extra_inset=self.truncate_width + 1,
                style=VALUE_STYLE,
            )
        doc_part = self.format(doc, style=DOC_STYLE)

        if value_part is None:
            return doc_part
        if doc_part is None:
            return value_part
        return value_part + doc_part
