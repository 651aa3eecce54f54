"""prompt_toolkit integration.

Wraps any prompt_toolkit Completer so that, while a completion session is
open on the host, each completion's display carries its annotation aligned
against the right edge of the completion menu.
"""

import logging
import shutil
from typing import Iterable, List, Optional

from prompt_toolkit.application.current import get_app_or_none
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import FormattedText, fragment_list_width, to_formatted_text

from .host import CompletionHost

logger = logging.getLogger(__name__)

# CompletionsMenu: leading pad, trailing pad, scrollbar
MENU_CHROME = 3
# Pad columns around the meta text in the meta column
META_PADDING = 2


def terminal_width() -> int:
    """Width of the running application's output, or of the terminal."""
    app = get_app_or_none()
    if app is not None:
        try:
            return app.output.get_size().columns
        except Exception as e:
            logger.debug(f"Could not read output size: {e}")
    return shutil.get_terminal_size().columns


def menu_right_margin(completions: List[Completion], width: Optional[int] = None) -> int:
    """Widest display the completion menu shows untrimmed.

    Args:
        completions: Completions the menu will show; their meta texts
            claim a column of their own.
        width: Output width (default: terminal_width()).
    """
    if width is None:
        width = terminal_width()
    margin = width - MENU_CHROME
    meta_width = max((fragment_list_width(c.display_meta) for c in completions), default=0)
    if meta_width:
        margin -= meta_width + META_PADDING
    return max(margin, 0)


class AnnotatingCompleter(Completer):
    """Completer that appends annotations to another completer's results.

    Completions pass through unchanged when no session is open or the
    session has no annotation function.

    Example usage:
        completer = AnnotatingCompleter(WordCompleter(names), host)
        with host.open_session("Describe variable: ", names, command="describe-variable"):
            session.prompt("Describe variable: ", completer=completer)
    """

    def __init__(
        self,
        inner: Completer,
        host: CompletionHost,
        right_margin: Optional[int] = None,
    ):
        """Initialize the completer.

        Args:
            inner: Completer producing the candidates.
            host: Host whose active session is annotated.
            right_margin: Column annotations align against. Defaults to
                menu_right_margin() over the inner completions.
        """
        self.inner = inner
        self.host = host
        self.right_margin = right_margin

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        """Yield the inner completions with annotated display text."""
        session = self.host.active_session
        annotate = self.host.annotation_function(session) if session is not None else None
        if annotate is None:
            yield from self.inner.get_completions(document, complete_event)
            return

        completions = list(self.inner.get_completions(document, complete_event))
        right_margin = self.right_margin or menu_right_margin(completions)
        for completion in completions:
            annotation = annotate(completion.text)
            if annotation is None:
                yield completion
                continue

            display = to_formatted_text(completion.display)
            start_column = fragment_list_width(display)
            yield Completion(
                completion.text,
                start_position=completion.start_position,
                display=FormattedText(
                    list(display) + list(annotation.to_formatted_text(start_column, right_margin))
                ),
                display_meta=completion.display_meta,
                style=completion.style,
                selected_style=completion.selected_style,
            )
