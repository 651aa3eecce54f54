"""Completion categories.

A category names what a completion session is choosing among. The set is
open: any string can become a category, including the synthetic
per-command categories created by `AnnotatorRegistry.bind_command`.
"""

from typing import Optional


class Category(str):
    """Tagged identifier for a completion category.

    Compares and hashes like the plain string it wraps, so
    ``Category("variable") == "variable"``.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Category({str.__repr__(self)})"


def as_category(value: Optional[str]) -> Optional[Category]:
    """Coerce a string (or None) to a Category."""
    if value is None or isinstance(value, Category):
        return value
    return Category(value)


COMMAND = Category("command")
VARIABLE = Category("variable")
FACE = Category("face")
SYMBOL = Category("symbol")
PACKAGE = Category("package")
CUSTOMIZE_GROUP = Category("customize-group")
FILE = Category("file")
