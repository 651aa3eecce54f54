"""Session interception point.

`AnnotationMode` inserts itself into a `CompletionHost` by wrapping the
host's metadata accessor. While active it answers the "category" and
"annotation-function" queries; all other keys go to the host's own
accessor. Deactivating restores the saved accessor, leaving no wrapper
behind.
"""

import functools
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from .categories import Category, as_category
from .classifiers import SessionState
from .formatter import Annotation
from .host import (
    ANNOTATION_FUNCTION,
    CATEGORY,
    CompletionHost,
    CompletionSession,
    MetadataAccessor,
    default_metadata_accessor,
)
from .registry import AnnotatorFn, AnnotatorRegistry, default_registry

logger = logging.getLogger(__name__)


def guard_annotator(annotator: AnnotatorFn) -> AnnotatorFn:
    """Wrap an annotator so a failure for one candidate yields None."""

    @functools.wraps(annotator)
    def guarded(cand: str) -> Optional[Annotation]:
        try:
            return annotator(cand)
        except Exception as e:
            logger.debug(f"Annotator failed for {cand!r}: {e}", exc_info=True)
            return None

    return guarded


class AnnotationMode:
    """Installs category inference and annotator dispatch into a host.

    Two states: inactive (nothing installed) and active (accessor wrapped
    and command listener registered).

    Example:
        mode = AnnotationMode(registry)
        mode.enable(host)
        ...
        mode.disable()
    """

    def __init__(self, registry: Optional[AnnotatorRegistry] = None):
        self.registry = registry if registry is not None else default_registry()
        self._host: Optional[CompletionHost] = None
        self._original_accessor: Optional[MetadataAccessor] = None
        self._command: Optional[str] = None

    @property
    def enabled(self) -> bool:
        """True while the interception is installed."""
        return self._host is not None

    def enable(self, host: CompletionHost) -> None:
        """Install the interception into `host`.

        Any previous installation (on this or another host) is removed
        first, so enabling twice never wraps the accessor twice.
        """
        if self.enabled:
            self.disable()

        self._host = host
        self._original_accessor = host.metadata_accessor
        host.metadata_accessor = self.intercept
        host.session_start_hooks.append(self._on_session_start)
        host.session_end_hooks.append(self._on_session_end)
        logger.debug("Annotation mode enabled")

    def disable(self) -> None:
        """Remove the interception and restore the host's accessor."""
        host = self._host
        if host is None:
            return

        if host.metadata_accessor != self.intercept:
            logger.warning("Metadata accessor was replaced while annotation mode was active")
        host.metadata_accessor = self._original_accessor
        _discard(host.session_start_hooks, self._on_session_start)
        _discard(host.session_end_hooks, self._on_session_end)

        self._host = None
        self._original_accessor = None
        self._command = None
        logger.debug("Annotation mode disabled")

    def toggle(self, host: CompletionHost) -> bool:
        """Flip the mode on `host`. Returns the new state."""
        if self.enabled:
            self.disable()
        else:
            self.enable(host)
        return self.enabled

    @contextmanager
    def installed(self, host: CompletionHost) -> Iterator["AnnotationMode"]:
        """Keep the mode enabled on `host` for the duration of the block."""
        self.enable(host)
        try:
            yield self
        finally:
            self.disable()

    def _on_session_start(self, command: Optional[str]) -> None:
        self._command = command

    def _on_session_end(self) -> None:
        self._command = None

    def session_state(self, session: CompletionSession) -> SessionState:
        """Snapshot the signals for `session`.

        The original category is read through the saved accessor, never
        through the host's slot, which would lead back here.
        """
        original = self._original_accessor(session, CATEGORY) if self._original_accessor else None
        return SessionState(
            command=self._command if self._command is not None else session.command,
            original_category=as_category(original),
            prompt=session.prompt,
            candidates=session.candidates,
        )

    def category(self, session: CompletionSession) -> Optional[Category]:
        """Category for `session`; None when unknown or classification fails."""
        try:
            return self.registry.resolve(self.session_state(session))
        except Exception as e:
            logger.debug(f"Category resolution failed for {session!r}: {e}", exc_info=True)
            return None

    def annotation_function(self, session: CompletionSession) -> Optional[AnnotatorFn]:
        """Guarded annotator for the session's category, or None."""
        category = self.category(session)
        if category is None:
            return None
        try:
            annotator = self.registry.lookup_annotator(category)
        except Exception as e:
            logger.debug(f"Annotator lookup failed for {category!r}: {e}", exc_info=True)
            return None
        if annotator is None:
            return None
        return guard_annotator(annotator)

    def intercept(self, session: CompletionSession, key: str) -> Any:
        """Metadata accessor installed into the host while active."""
        if key == CATEGORY:
            return self.category(session)
        if key == ANNOTATION_FUNCTION:
            annotator = self.annotation_function(session)
            if annotator is not None:
                return annotator
        accessor = self._original_accessor or default_metadata_accessor
        return accessor(session, key)


def _discard(hooks: list, hook: Callable) -> None:
    if hook in hooks:
        hooks.remove(hook)
