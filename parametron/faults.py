"""
Errors raised while declaring parameters and while parsing a command line.

Two families
- ConfigurationError (a ValueError): the declaration is wrong, e.g. two parameters
  share a short name or an arity is negative. Raised at setup time, immediately.
- ParserException: the end user typed something the declaration does not accept.
  Each one carries a one-sentence message plus keyword options (code, title, hint,
  input, ...) and renders itself through rich.

Every user-facing message quotes the spelling the user actually typed ('-o' or
'--out'), never an internal identifier.

Rendering
    [ tool — 21101 | Unknown Option ]
    unknown option '--verbos', see '--help' for more information
     → did you mean '--verbose'? run 'tool --help' for more information

- palette keys: fault-prog, fault-code, fault-title, fault-message, fault-arrow, fault-hint;
  override any of them with a __styles__ mapping in __main__.
- the program name comes from __main__.__prog__, else the "prog" option.
- the parser never exits; invoke() prints the fault on stderr and exits with status 2.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset, UnsetType


class FaultCode(IntEnum):
    """
    stable numeric identifiers of user-facing faults, ten apart per family.

    - 2110x: option resolution (unknown, repeated, mutex conflict)
    - 2111x: option values (missing, extra inline, count, invalid)
    - 2112x: positional arguments (placement, count)
    - 2113x: requirements (required option, required mutex group)
    """
    UNKNOWN_OPTION          = 21101
    REPEATED_OPTION         = 21102
    MUTEX_CONFLICT          = 21103

    MISSING_VALUE           = 21111
    EXTRA_INLINE_VALUES     = 21112
    WRONG_VALUE_COUNT       = 21113
    INVALID_VALUE           = 21114

    MISPLACED_POSITIONAL    = 21121
    WRONG_POSITIONAL_COUNT  = 21122

    MISSING_REQUIRED_OPTION = 21131
    MISSING_REQUIRED_GROUP  = 21132

    def normalize(self):
        """
        the label printed in fault headers.

        a __codes__ mapping in __main__ may relabel any code (e.g. "E-UNKNOWN");
        unmapped codes print as their number.
        """
        labels = getattr(__import__("__main__"), "__codes__", {})
        return str(labels.get(self, self.value))


class ConfigurationError(ValueError):
    """
    raised while declaring parameters and groups when the declaration itself is wrong.

    examples: duplicate long/short names, negative arity, a mutex member marked as
    required, registering the same parameter twice.
    """


_PALETTE = {
    "fault-prog": "bold #F5F5F5",
    "fault-code": "bold #36C5F0",
    "fault-title": "bold #FF4D94",
    "fault-message": "#D1D5DB",
    "fault-arrow": "dim #86EFAC",
    "fault-hint": "italic #86EFAC",
}


def _styler(colorful):
    styles = defaultdict(str, _PALETTE | getattr(__import__("__main__"), "__styles__", {}))
    return lambda key: styles[key] if colorful else ""


class ParserException(Exception):
    """
    Base of every end-user parse error.

    - message: one sentence, also returned by str().
    - options: read-only mapping of the keyword payload. Well-known keys are code
      (FaultCode), title, hint, input (offending spelling), prog and colorful; the
      raising site may add more (expected, actual, suggestions, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        style = _styler(self.options.get("colorful", True))
        prog = getattr(__import__("__main__"), "__prog__", self.options.get("prog", "parametron"))

        header = Text("[ ")
        header.append(str(prog), style("fault-prog"))
        if self.code is not None:
            header.append(" — ").append(self.code.normalize(), style("fault-code"))
        header.append(" | ").append(self.options.get("title", "error").title(), style("fault-title"))
        header.append(" ]")

        lines = [header, Text(str(self), style("fault-message"))]
        if self.hint:
            lines.append(Text.assemble((" → ", style("fault-arrow")), (self.hint, style("fault-hint"))))
        return Group(*lines)

    def __replace__(self, **overrides):
        """
        copy of this fault with some options overridden (used to attach prog/colorful).
        """
        return type(self)(self.message, **(dict(self.options) | overrides))


class UnknownOptionError(ParserException): ...
class RepeatedOptionError(ParserException): ...
class MutexConflictError(ParserException): ...
class MissingValueError(ParserException): ...
class ExtraInlineValuesError(ParserException): ...
class ValueCountError(ParserException): ...
class InvalidValueError(ParserException): ...
class MisplacedPositionalError(ParserException): ...
class PositionalCountError(ParserException): ...
class MissingRequiredOptionError(ParserException): ...
class MissingRequiredGroupError(ParserException): ...


__all__ = (
    "FaultCode",
    "ConfigurationError",
    "ParserException",
    "UnknownOptionError",
    "RepeatedOptionError",
    "MutexConflictError",
    "MissingValueError",
    "ExtraInlineValuesError",
    "ValueCountError",
    "InvalidValueError",
    "MisplacedPositionalError",
    "PositionalCountError",
    "MissingRequiredOptionError",
    "MissingRequiredGroupError",
)
