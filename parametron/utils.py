"""
Small helpers shared by the parameters, registry and rendering layers.

- Unset: marker for an omitted argument, so None stays usable as a real value
  (a Custom parameter may legitimately default to None).
- coalesce(value, default): resolve Unset to a default.
- indent(text, width): left-pad every line of a help block.

    >>> coalesce(Unset, "VALUE")
    'VALUE'
    >>> coalesce(None, "VALUE") is None
    True
    >>> indent("tool -v\\ntool -h", 4)
    '    tool -v\\n    tool -h'
"""
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance. It is falsy, prints as "Unset" and survives
    copy/pickle as the same object. Check for it with `is Unset`, or with
    isinstance(value, UnsetType) when combining with other types.
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __reduce__(self):
        return "Unset"

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    return `object` unless it is Unset, in which case return `default`.

    falsy values other than Unset ("", 0, None, []) are kept.
    """
    return default if object is Unset else object


def indent(text, width, /):
    """
    Indent every line of `text` by `width` spaces.

    Line breaks are preserved; an empty string yields the bare indentation.
    """
    if not isinstance(text, str):
        raise TypeError("indent() first argument must be a string")
    if not isinstance(width, int) or width < 0:
        raise ValueError("indent() second argument must be a non-negative integer")
    return "\n".join(" " * width + line for line in text.split("\n"))


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "indent",
)
