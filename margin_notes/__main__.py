"""Interactive demo: annotated completion in a prompt_toolkit prompt.

Run with: python -m margin_notes [--env-file .env]
"""

import logging
import os
import sys
import types
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter

from .annotators import install_default_annotators
from .completer import AnnotatingCompleter
from .config import load_config
from .environment import Environment, Variable, package_summary
from .formatter import annotation_style
from .host import CompletionHost, candidate_strings
from .mode import AnnotationMode
from .registry import AnnotatorRegistry


def _configure_logging() -> None:
    """Send logs to MARGIN_NOTES_TRACE_LOG, or nowhere (stderr breaks the prompt)."""
    trace_log_path = os.environ.get("MARGIN_NOTES_TRACE_LOG")
    root_logger = logging.getLogger()
    if trace_log_path:
        os.makedirs(os.path.dirname(os.path.abspath(trace_log_path)), exist_ok=True)
        file_handler = logging.FileHandler(trace_log_path)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        ))
        root_logger.handlers = [file_handler]
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.handlers = [logging.NullHandler()]


class Demo:
    """A tiny command shell whose prompts are annotated."""

    def __init__(self, right_margin: Optional[int] = None):
        self.host = CompletionHost()
        self.prompt_session: PromptSession = PromptSession(style=annotation_style())
        self.right_margin = right_margin
        self.commands: Dict[str, Callable[[], None]] = {
            "describe-variable": self.describe_variable,
            "describe-style": self.describe_style,
            "describe-symbol": self.describe_symbol,
            "describe-package": self.describe_package,
            "quit": self.quit,
        }
        self.environment = Environment(
            commands=self.commands,
            keybindings={"quit": "c-d", "describe-variable": ["escape", "v"]},
            variables={
                "fill-column": Variable(70, "Column beyond which automatic line-wrapping should happen."),
                "tab-width": Variable(8, "Distance between tab stops (for display of tab characters), in columns."),
                "user-name": Variable(os.environ.get("USER"), "The user's login name."),
            },
            styles={"prompt": "#5fd7ff bold", "error": "#ff5f5f", "comment": "#888888 italic"},
            style_docs={"prompt": "Prompt text.", "error": "Error messages.", "comment": "Comments in code."},
            namespace=types.SimpleNamespace(len=len, sorted=sorted, print=print, open=open),
        )
        self.running = True

    def read(self, prompt: str, candidates: Any, command: Optional[str] = None) -> str:
        """Open a completion session and read one answer."""
        words = candidate_strings(candidates)
        completer = AnnotatingCompleter(WordCompleter(words, WORD=True), self.host, self.right_margin)
        with self.host.open_session(prompt, candidates, command=command):
            return self.prompt_session.prompt(prompt, completer=completer).strip()

    def describe_variable(self) -> None:
        """Show the value and documentation of a variable."""
        name = self.read("Describe variable: ", self.environment.variables, "describe-variable")
        variable = self.environment.variables.get(name)
        print(f"{name} = {variable.value!r}\n{variable.doc}" if variable else f"No variable {name!r}")

    def describe_style(self) -> None:
        """Show the style string of a named style."""
        name = self.read("Describe style: ", self.environment.styles, "describe-style")
        print(self.environment.style_of(name) or f"No style {name!r}")

    def describe_symbol(self) -> None:
        """Show the documentation of a symbol."""
        name = self.read("Symbol: ", self.environment.namespace, "describe-symbol")
        print(self.environment.symbol_doc(name) or f"No documentation for {name!r}")

    def describe_package(self) -> None:
        """Show the summary of an installed package."""
        from importlib import metadata
        names = sorted({dist.metadata["Name"] for dist in metadata.distributions() if dist.metadata["Name"]})
        name = self.read("Describe package: ", names, "describe-package")
        print(package_summary(name) or f"No package {name!r}")

    def quit(self) -> None:
        """Leave the demo."""
        self.running = False

    def run(self) -> None:
        while self.running:
            try:
                name = self.read("M-x ", self.commands, "execute-extended-command")
            except (EOFError, KeyboardInterrupt):
                break
            command = self.commands.get(name)
            if command is None:
                print(f"Unknown command: {name}")
                continue
            try:
                command()
            except (EOFError, KeyboardInterrupt):
                continue


def main() -> int:
    import argparse

    parser = argparse.ArgumentParser(
        description="Annotated completion demo",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env)"
    )
    parser.add_argument(
        "--no-annotations",
        action="store_true",
        help="Start with annotation mode disabled"
    )
    args = parser.parse_args()

    load_dotenv(args.env_file)
    _configure_logging()

    config = load_config()
    demo = Demo(right_margin=config.right_margin)

    registry = AnnotatorRegistry()
    config.apply_to(registry)
    install_default_annotators(registry, demo.environment, config.make_formatter())

    mode = AnnotationMode(registry)
    if config.enabled and not args.no_annotations:
        mode.enable(demo.host)
    try:
        demo.run()
    finally:
        mode.disable()
    return 0


if __name__ == "__main__":
    sys.exit(main())
