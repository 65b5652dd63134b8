"""
Help, usage and version rendering.

What this module provides
- build_usage(registry, positional_usage): the one-line synopsis, in registration order.
  • a mutex group renders once, at its first member, as "a | b" inside "[ ]" (optional)
    or "( )" (required); the remaining members are skipped.
  • a lone required parameter renders bare; a lone optional one inside "[ ]".
  • the positional placeholder comes last.
- wrap_usage(text, width, indent): bracket-aware wrapping of that synopsis.
- render_help(parser) / render_version(parser): rich Text renderables.

Palette keys (help)
- program-name, section-label, description-section, usage-section,
  option-name, argument-description, example

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When the parser is not colorful, styling is suppressed; the plain layout is identical.
"""
from collections import defaultdict

from rich.text import Text

from .utils import indent

OUTER_MARGIN = 2
INDENT = 2
USAGE_WIDTH = 75
OPTIONS_SEPARATION = 10

_OPENING = "([<"
_CLOSING = ")]>"


def wrap_usage(text, width, indent=0, /, *, indent_first_line=False):
    """
    wrap a usage synopsis without splitting bracketed alternatives when possible.

    algorithm
    - track a nesting depth: +1 on '(', '[', '<' and -1 on ')', ']', '>'.
    - only spaces at depth 0 are eligible break points.
    - when the running line reaches `width` characters, break at the last eligible space
      if it lies in the second half of the line; otherwise break right here, even inside
      a token, so a single huge group cannot produce an unbounded line.
    - continuation lines are indented by `indent` spaces.

    returns the wrapped text without a trailing newline.
    """
    width = max(width, 1)
    padding = " " * indent

    lines = []
    depth = 0
    start = 0
    space = -1
    for index, char in enumerate(text):
        if char == " " and not depth:
            space = index
        elif char in _OPENING:
            depth += 1
        elif char in _CLOSING:
            depth = max(depth - 1, 0)

        if index - start >= width:
            if space >= start + width // 2:
                lines.append(text[start:space])
                start = space + 1
            else:
                lines.append(text[start:index])
                start = index
    lines.append(text[start:])

    return padding * indent_first_line + ("\n" + padding).join(lines)


def build_usage(registry, positional_usage="", /):
    inputs = []
    seen = set()

    for parameter in registry:
        if parameter in seen:
            continue
        group = parameter.group
        if group is not None and group.mutex:
            seen.update(group.parameters)
            alternatives = " | ".join(member.usage() for member in group)
            inputs.append(("(%s)" if group.required else "[%s]") % alternatives)
        else:
            seen.add(parameter)
            inputs.append(parameter.usage() if parameter.required else "[%s]" % parameter.usage())

    if positional_usage:
        inputs.append(positional_usage)
    return " ".join(inputs)


def options_table(registry, /):
    """
    return (help-fragment, description) rows, descriptions aligned in one column.

    the description column starts at max(len(help-fragment)) + OPTIONS_SEPARATION.
    """
    rows = [(parameter.help(), parameter.descr) for parameter in registry]
    offset = max((len(help) for help, _ in rows), default=0) + OPTIONS_SEPARATION
    return [(help, " " * (offset - len(help)), descr) for help, descr in rows]


def _palette(colorful):
    styles = defaultdict(str, {
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "section-label": "bold #00E6FF",  # CYAN headings
        "description-section": "italic #A3A3A3",  # Neutral gray
        "usage-section": "bold #36C5F0",  # SKY-BLUE synopsis
        "option-name": "bold #00E6FF",  # CYAN for options
        "argument-description": "#9CA3AF",  # Muted gray
        "example": "#E5E7EB",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def render_help(parser, /):
    """
    Render the help screen of a CommandParser as a rich Text.

    sections
    - header: display name (or program name) and " - description" when given.
    - usage: program name followed by the wrapped synopsis.
    - synopsis: free text paragraph, indented as-is (optional).
    - options: aligned table of help fragments and descriptions.
    - example: indented block (optional).
    """
    styler = _palette(parser.colorful)
    margin = " " * OUTER_MARGIN
    registry = parser.registry

    help = Text()

    # Header
    help.append(margin).append(parser.name or parser.program, styler("program-name"))
    if parser.descr:
        help.append(" - ").append(parser.descr, styler("description-section"))
    help.append("\n\n")

    # Usage
    help.append(margin).append("Usage:", styler("section-label")).append("\n")
    prefix = margin + " " * INDENT + parser.program + " "
    help.append(prefix)
    help.append(wrap_usage(
        build_usage(registry, parser.positional_usage),
        parser.width - len(prefix),
        len(prefix),
    ), styler("usage-section"))
    help.append("\n\n")

    # Synopsis
    if parser.synopsis:
        help.append(margin).append("Synopsis:", styler("section-label")).append("\n")
        help.append(indent(parser.synopsis, OUTER_MARGIN + INDENT), styler("description-section"))
        help.append("\n\n")

    # Options
    help.append(margin).append("Options:", styler("section-label")).append("\n")
    for fragment, gap, descr in options_table(registry):
        help.append(margin + " " * INDENT).append(fragment, styler("option-name"))
        if descr:
            help.append(gap).append(descr, styler("argument-description"))
        help.append("\n")

    # Example
    if parser.example:
        help.append("\n")
        help.append(margin).append("Example:", styler("section-label")).append("\n")
        help.append(indent(parser.example, OUTER_MARGIN + INDENT), styler("example"))
        help.append("\n")

    help.rstrip()
    return help


def render_version(parser, /):
    styler = _palette(parser.colorful)
    return Text.assemble(("Version: ", styler("section-label")), parser.version)


__all__ = (
    "OUTER_MARGIN",
    "INDENT",
    "USAGE_WIDTH",
    "OPTIONS_SEPARATION",
    "wrap_usage",
    "build_usage",
    "options_table",
    "render_help",
    "render_version",
)
