"""Lookup stores consulted by the default annotators.

Each lookup answers for one name and returns None when it has nothing to
say; none of them block or raise for unknown names.
"""

import builtins
import inspect
import logging
from dataclasses import dataclass, field
from importlib import metadata
from typing import Any, Callable, Dict, List, Optional, Union

from .display_width import first_line

logger = logging.getLogger(__name__)

# Either a single key or a sequence, in prompt_toolkit syntax
KeyBinding = Union[str, List[str]]

# Returned by variable_value() for names that have no value
UNBOUND = object()

SPECIAL_KEYS = {
    "escape": "Esc",
    "enter": "Enter",
    "space": "Space",
    "tab": "Tab",
    "pageup": "PgUp",
    "pagedown": "PgDn",
    "home": "Home",
    "end": "End",
    "up": "Up",
    "down": "Down",
    "left": "Left",
    "right": "Right",
}


def format_key_for_display(key: KeyBinding) -> str:
    """Format a keybinding for human-readable display.

    Converts prompt_toolkit key syntax to user-friendly format:
    - "c-a" -> "Ctrl+A"
    - "f2" -> "F2"
    - "escape" -> "Esc"
    - ["escape", "enter"] -> "Esc Enter"
    """
    if isinstance(key, (list, tuple)):
        return " ".join(format_key_for_display(k) for k in key)

    key_str = str(key).lower()

    if key_str.startswith("c-"):
        return f"Ctrl+{key_str[2:].upper()}"
    if key_str.startswith("s-"):
        return f"Shift+{key_str[2:].capitalize()}"
    if key_str.startswith("f") and key_str[1:].isdigit():
        return key_str.upper()
    if key_str in SPECIAL_KEYS:
        return SPECIAL_KEYS[key_str]
    if len(key_str) == 1:
        return key_str.upper()
    return key_str.capitalize()


def first_doc_line(obj: Any) -> Optional[str]:
    """First line of an object's docstring, or None."""
    doc = inspect.getdoc(obj)
    if not doc:
        return None
    return first_line(doc)


@dataclass
class Variable:
    """A named setting with its current value and documentation."""
    value: Any
    doc: Optional[str] = None


@dataclass
class Environment:
    """Read-only stores describing the host's commands, settings and styles.

    Attributes:
        commands: Command name -> callable implementing it.
        keybindings: Command name -> key (prompt_toolkit syntax).
        variables: Setting name -> Variable.
        styles: Style name -> prompt_toolkit style string.
        style_docs: Style name -> description.
        groups: Settings group name -> description.
        namespace: Module or namespace whose attributes are symbols.
    """
    commands: Dict[str, Callable] = field(default_factory=dict)
    keybindings: Dict[str, KeyBinding] = field(default_factory=dict)
    variables: Dict[str, Variable] = field(default_factory=dict)
    styles: Dict[str, str] = field(default_factory=dict)
    style_docs: Dict[str, str] = field(default_factory=dict)
    groups: Dict[str, str] = field(default_factory=dict)
    namespace: Any = None

    def key_description(self, command: str) -> Optional[str]:
        """Human-readable key bound to a command, or None."""
        key = self.keybindings.get(command)
        if not key:
            return None
        return format_key_for_display(key)

    def command_doc(self, command: str) -> Optional[str]:
        """First docstring line of a command."""
        fn = self.commands.get(command)
        if fn is None:
            return None
        return first_doc_line(fn)

    def variable_value(self, name: str) -> Any:
        """Current value of a variable, or UNBOUND."""
        variable = self.variables.get(name)
        if variable is None:
            return UNBOUND
        return variable.value

    def variable_doc(self, name: str) -> Optional[str]:
        """Documentation of a variable."""
        variable = self.variables.get(name)
        if variable is None:
            return None
        return variable.doc

    def style_of(self, name: str) -> Optional[str]:
        """prompt_toolkit style string of a named style."""
        return self.styles.get(name)

    def style_doc(self, name: str) -> Optional[str]:
        """Description of a named style."""
        return self.style_docs.get(name)

    def group_doc(self, name: str) -> Optional[str]:
        """Description of a settings group."""
        return self.groups.get(name)

    def symbol_doc(self, name: str) -> Optional[str]:
        """First docstring line of a symbol in the namespace."""
        if self.namespace is None:
            return None
        if isinstance(self.namespace, dict):
            obj = self.namespace.get(name)
        else:
            obj = getattr(self.namespace, name, None)
        if obj is None:
            return None
        return first_doc_line(obj)


def package_summary(name: str) -> Optional[str]:
    """Summary line of an installed distribution, or None."""
    try:
        meta = metadata.metadata(name)
    except (metadata.PackageNotFoundError, ValueError):
        logger.debug(f"Package {name!r} is not installed")
        return None
    summary = meta.get("Summary")
    if not summary or summary == "UNKNOWN":
        return None
    return summary


def default_environment() -> Environment:
    """Environment for the running interpreter, with builtins as symbols."""
    return Environment(namespace=builtins)
