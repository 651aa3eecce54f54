"""Host side of a completion session.

`CompletionHost` owns the per-session metadata accessor (a single
replaceable function slot) and the session start/end signals. It knows
nothing about categories beyond asking for them; `AnnotationMode` wraps
the accessor slot to supply categories and annotation functions.
"""

import logging
import types
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from .formatter import Annotation

logger = logging.getLogger(__name__)

CATEGORY = "category"
ANNOTATION_FUNCTION = "annotation-function"

MetadataAccessor = Callable[["CompletionSession", str], Any]


class CompletionSession:
    """One interactive completion episode.

    Args:
        prompt: Prompt text shown to the user.
        candidates: Candidate source: a sequence of strings, a mapping
            (keys are candidates), a module or namespace (attribute names
            are candidates) or a zero-argument callable returning any of
            those.
        metadata: Metadata the host declares for this session, e.g.
            {"category": "file"}.
        command: Name of the command that opened the session.
    """

    def __init__(
        self,
        prompt: str = "",
        candidates: Any = None,
        metadata: Optional[Dict[str, Any]] = None,
        command: Optional[str] = None,
    ):
        self.prompt = prompt
        self.candidates = candidates
        self.metadata = dict(metadata or {})
        self.command = command

    def __repr__(self) -> str:
        return f"CompletionSession(prompt={self.prompt!r}, command={self.command!r})"


def default_metadata_accessor(session: CompletionSession, key: str) -> Any:
    """Read a metadata key straight from the session."""
    return session.metadata.get(key)


def candidate_strings(candidates: Any) -> List[str]:
    """Normalize a candidate source to a list of strings."""
    if candidates is None:
        return []
    if isinstance(candidates, (types.ModuleType, types.SimpleNamespace)):
        return sorted(name for name in vars(candidates) if not name.startswith("_"))
    if isinstance(candidates, Mapping):
        return [str(key) for key in candidates]
    if callable(candidates):
        return candidate_strings(candidates())
    return [str(cand) for cand in candidates]


class CompletionHost:
    """Completion host with an interceptable metadata accessor.

    Only one session is active at a time. Listeners registered in
    `session_start_hooks` receive the invoking command when a session
    opens; `session_end_hooks` are called when it closes.
    """

    def __init__(self):
        self.metadata_accessor: MetadataAccessor = default_metadata_accessor
        self.session_start_hooks: List[Callable[[Optional[str]], None]] = []
        self.session_end_hooks: List[Callable[[], None]] = []
        self._active_session: Optional[CompletionSession] = None

    @property
    def active_session(self) -> Optional[CompletionSession]:
        """The currently open session, if any."""
        return self._active_session

    def get_metadata(self, session: CompletionSession, key: str) -> Any:
        """Query session metadata through the (possibly wrapped) accessor."""
        return self.metadata_accessor(session, key)

    @contextmanager
    def open_session(
        self,
        prompt: str = "",
        candidates: Any = None,
        metadata: Optional[Dict[str, Any]] = None,
        command: Optional[str] = None,
    ) -> Iterator[CompletionSession]:
        """Open a completion session for the duration of the block.

        Raises:
            RuntimeError: If another session is already open.
        """
        if self._active_session is not None:
            raise RuntimeError(f"A completion session is already active: {self._active_session!r}")

        session = CompletionSession(prompt, candidates, metadata, command)
        for hook in list(self.session_start_hooks):
            hook(command)
        self._active_session = session
        logger.debug(f"Opened {session!r}")
        try:
            yield session
        finally:
            self._active_session = None
            for hook in list(self.session_end_hooks):
                hook()
            logger.debug(f"Closed {session!r}")

    def annotation_function(self, session: CompletionSession) -> Optional[Callable[[str], Any]]:
        """Annotation function for a session, if it has a category."""
        if self.get_metadata(session, CATEGORY) is None:
            return None
        return self.get_metadata(session, ANNOTATION_FUNCTION)

    def annotate(self, session: CompletionSession) -> List[Tuple[str, Optional[Annotation]]]:
        """Annotate every candidate of a session.

        Returns:
            (candidate, annotation) pairs; annotation is None for
            candidates with nothing to show, or for all candidates when
            the session has no annotation function.
        """
        candidates = candidate_strings(session.candidates)
        annotate = self.annotation_function(session)
        if annotate is None:
            return [(cand, None) for cand in candidates]
        return [(cand, annotate(cand)) for cand in candidates]
