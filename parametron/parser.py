"""
Parametron command layer: declare parameters, parse argv, render help.

What this module provides
- CommandParser: owns a Registry of parameters and drives parsing:
  • classifies every token as long option, short option cluster or positional.
  • dispatches options to their parameters, which consume their own values.
  • enforces uniqueness of invocations, mutex exclusivity and positional placement.
  • validates required parameters, required mutex groups and positional arity.
  • answers the built-in '-h/--help' and '--version' switches with an early-exit Outcome.
- Outcome / Terminal: the result of a parse. `terminal` is set when help or version
  was requested; the caller decides how to print it and whether to exit.
- invoke(parser, prompt): shell adapter that prints help/version/faults through rich and
  exits the process with the conventional status (0 for help/version, 2 for user errors).

Token grammar
- '--name' / '--name=value'          long option (the bare '--' is a positional)
- '-x' / '-xyz' / '-xyz value'       short option or cluster (the bare '-' is a positional)
- anything else                       positional argument

Quick start
    from parametron import CommandParser, Switch, String, invoke

    active = Switch("active", "a", descr="switches mode to active")
    source = String("file", "f", metavar="FILE", descr="specify an input file")
    url = String("url", "u", metavar="URL", descr="specify an input url")

    parser = CommandParser("example", version="1.0.0", arity=0)
    parser.add(active).add_mutex(source, url, required=True)

    if __name__ == "__main__":
        invoke(parser)
        print(active.value, source.value, url.value)

Design notes
- User errors are raised as ParserException subclasses (see parametron.faults); setup
  errors as ConfigurationError. parse() never terminates the process.
- A CommandParser is single-use: invocation flags are stateful, so one instance must not
  serve concurrent (or repeated) parse() calls over the same parameters.
"""
import difflib
import shlex
import sys
from collections.abc import Iterable
from typing import NamedTuple

from rich.console import Console

from .faults import *
from .groups import GroupKind, Registry
from .parameters import ONE_OR_MORE, ParameterKind, Switch
from .rendering import USAGE_WIDTH, render_help, render_version
from .stream import TokenStream, extract_option, looks_like_option
from .utils import *


class Terminal(NamedTuple):
    """
    early-exit request produced by '--help' or '--version'.

    status is the exit status the process should end with; renderable is the rich Text
    to print and text its plain form.
    """
    status: int
    renderable: object

    @property
    def text(self):
        return self.renderable.plain


class Outcome(NamedTuple):
    positionals: tuple
    terminal: Terminal | None = None

    @property
    def exiting(self):
        return self.terminal is not None


class CommandParser:
    """
    Parse command line arguments into registered parameters.

    Parameters
    - program: str
      program name shown in the usage line (e.g. "java -jar example.jar" or "tool").
    - name: str (keyword)
      display name for the help header; defaults to the program name.
    - version: str (keyword)
      reported by '--version' (default "1.0.0").
    - descr / synopsis / example: str (keyword)
      help header description, free-text synopsis section and example block.
    - arity: "+" | int (keyword)
      expected positional count: "+" (one or more, default) or exactly N >= 0.
    - positional_usage: str (keyword)
      placeholder appended to the usage line (default "[ARGS...]").
    - enforce: bool (keyword)
      when True (default) options are rejected once positionals have started.
    - defaults: bool (keyword)
      install the built-in '-h/--help' and '--version' switches (default True).
    - width: int (keyword)
      usage line width (default 75).
    - colorful: bool (keyword)
      style help output; defaults to whether stdout is an interactive terminal.
    """

    def __init__(
            self,
            program,
            /,
            *,
            name=Unset,
            version="1.0.0",
            descr=Unset,
            synopsis=Unset,
            example=Unset,
            arity=ONE_OR_MORE,
            positional_usage="[ARGS...]",
            enforce=True,
            defaults=True,
            width=USAGE_WIDTH,
            colorful=Unset,
    ):
        if not isinstance(program, str):
            raise TypeError("CommandParser() program must be a string")
        elif not (program := program.strip()):
            raise ConfigurationError("CommandParser() program cannot be empty")

        for label, object in (("name", name), ("descr", descr), ("synopsis", synopsis), ("example", example)):
            if not isinstance(object, str | UnsetType):
                raise TypeError(f"CommandParser() {label!r} must be a string")
        for label, object in (("version", version), ("positional_usage", positional_usage)):
            if not isinstance(object, str):
                raise TypeError(f"CommandParser() {label!r} must be a string")
        for label, object in (("enforce", enforce), ("defaults", defaults)):
            if not isinstance(object, bool):
                raise TypeError(f"CommandParser() {label!r} must be a boolean")
        if not isinstance(width, int) or isinstance(width, bool):
            raise TypeError("CommandParser() 'width' must be an integer")
        elif width < 1:
            raise ConfigurationError("CommandParser() 'width' must be positive")
        if not isinstance(colorful, bool | UnsetType):
            raise TypeError("CommandParser() 'colorful' must be a boolean")

        if arity != ONE_OR_MORE:
            if not isinstance(arity, int) or isinstance(arity, bool):
                raise TypeError("CommandParser() 'arity' must be an integer or '+'")
            if arity < 0:
                raise ConfigurationError(
                    "invalid positional arguments arity %r, arity can't be negative" % arity
                )

        self.program = program
        self.name = coalesce(name)
        self.version = version
        self.descr = coalesce(descr)
        self.synopsis = coalesce(synopsis)
        self.example = coalesce(example)
        self.arity = arity
        self.positional_usage = positional_usage
        self.enforce = enforce
        self.width = width
        self.colorful = coalesce(colorful, self.interactive)

        self._registry = Registry()
        self._defaults = defaults
        self._installed = False
        self._positionals = []
        self._help = Switch("help", "h", descr="Print this help text")
        self._version = Switch("version", descr="Print the version number")

    @property
    def registry(self):
        return self._registry

    @property
    def positionals(self):
        return tuple(self._positionals)

    @property
    def interactive(self):
        """
        whether stdout is an interactive terminal (useful to disable formatting for pipes).
        """
        return Console().is_terminal

    def add(self, parameter, /):
        """
        register a single ungrouped parameter; returns self for chaining.
        """
        self._registry.register(parameter)
        return self

    def add_group(self, *parameters):
        """
        register parameters as a plain group; returns self for chaining.
        """
        self._registry.register_group(GroupKind.PLAIN, *parameters)
        return self

    def add_mutex(self, *parameters, required=False):
        """
        register mutually exclusive parameters; returns self for chaining.

        when required is True exactly one of them must be given.
        """
        self._registry.register_group(GroupKind.MUTEX, *parameters, required=required)
        return self

    def _install(self):
        # built-ins go last so they close the usage line and the options table
        if self._defaults and not self._installed:
            self._registry.register(self._help)
            self._registry.register(self._version)
        self._installed = True

    def help(self):
        """
        render the help screen as a rich Text (see parametron.rendering.render_help).
        """
        self._install()
        return render_help(self)

    def _resolve(self, parameter, label, input):
        """
        check that `parameter` may be dispatched for the user spelling `label`.

        order of checks: unknown, already invoked, conflicting mutex member. the group of
        the parameter is marked invoked here, before the value is parsed.
        """
        if parameter is None:
            candidates = [name for other in self._registry for name in other.names]
            suggestions = difflib.get_close_matches(label, candidates, 3)
            try:
                hint = "did you mean %r? run '%s --help' for more information" % (suggestions[0], self.program)
            except IndexError:
                hint = "run '%s --help' for more information" % self.program
            raise UnknownOptionError(
                "unknown option %r, see '--help' for more information" % label,
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                input=label,
                token=input,
                suggestions=suggestions,
                hint=hint,
            )

        if parameter.invoked:
            raise RepeatedOptionError(
                "option %r has already been invoked" % label,
                title="repeated option",
                code=FaultCode.REPEATED_OPTION,
                input=label,
                token=input,
                hint="keep a single %s; each option can be given only once" % label,
            )

        if (group := parameter.group) is not None:
            if group.mutex and group.invoked:
                raise MutexConflictError(
                    "another option from the same mutex group as %r has already been invoked" % label,
                    title="conflicting options",
                    code=FaultCode.MUTEX_CONFLICT,
                    input=label,
                    token=input,
                    group=group.label,
                    hint="use only one of: %s" % group.label,
                )
            group._invoked = True

    def _dispatch(self, parameter, stream):
        parameter.parse(stream)
        parameter._invoked = True

    def _reject_positional(self, input):
        if self._positionals and self.enforce:
            raise MisplacedPositionalError(
                "invalid positional argument %r" % self._positionals[0],
                title="misplaced positional",
                code=FaultCode.MISPLACED_POSITIONAL,
                input=input,
                positional=self._positionals[0],
                hint="move positional arguments after every option",
            )

    def _parseargs(self, stream):
        """
        walk the stream and dispatch every token.

        - long options: '--name' or '--name=value' (bare '--' excluded).
        - short options: each character of '-xyz' is resolved in turn; scanning stops at the
          first parameter that is not a switch, because that one consumes its value from
          the stream (any trailing characters of the cluster are not processed).
        - everything else (including '-' and '--') is positional.
        """
        while stream.has_next():
            token = stream.next()
            stream.option = extract_option(token)

            if token.startswith("--") and token != "--":
                self._reject_positional(token)
                parameter = self._registry.lookup(stream.option[2:])
                self._resolve(parameter, stream.option, token)
                self._dispatch(parameter, stream)

            elif looks_like_option(token):
                self._reject_positional(token)
                for char in token[1:]:
                    stream.option = "-" + char
                    parameter = self._registry.lookup_short(char)
                    self._resolve(parameter, stream.option, token)
                    self._dispatch(parameter, stream)
                    if parameter.kind is not ParameterKind.SWITCH and not getattr(parameter, "switch", False):
                        break

            else:
                self._positionals.append(token)

    def _validate(self):
        for parameter in self._registry:
            if parameter.group is not None and parameter.group.mutex:
                continue
            if parameter.required and not parameter.invoked:
                raise MissingRequiredOptionError(
                    "missing required option %r" % parameter.name,
                    title="missing required option",
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    input=parameter.spelling,
                    hint="add %s to the command line" % parameter.spelling,
                )

        for group in self._registry.groups:
            if group.mutex and group.required and not group.invoked:
                raise MissingRequiredGroupError(
                    "missing required mutex option, exactly one of %r must be specified" % group.label,
                    title="missing required mutex option",
                    code=FaultCode.MISSING_REQUIRED_GROUP,
                    input=group.label,
                    hint="add one of: %s" % group.label,
                )

        count = len(self._positionals)
        if self.arity == ONE_OR_MORE and not count:
            raise PositionalCountError(
                "expected one or more positional arguments, got 0",
                title="missing positionals",
                code=FaultCode.WRONG_POSITIONAL_COUNT,
                expected=self.arity,
                actual=count,
                hint="add at least one positional argument after the options",
            )
        if self.arity != ONE_OR_MORE and count != self.arity:
            raise PositionalCountError(
                "expected exactly %d positional arguments, got %d" % (self.arity, count),
                title="wrong number of positionals",
                code=FaultCode.WRONG_POSITIONAL_COUNT,
                expected=self.arity,
                actual=count,
                hint="pass exactly %d positional argument%s" % (self.arity, "s" * (self.arity != 1)),
            )

    def parse(self, argv=Unset, /):
        """
        parse an argument vector (program path excluded; defaults to sys.argv[1:]).

        returns
        - Outcome(positionals, terminal=None) after successful validation.
        - Outcome(positionals, terminal=Terminal(0, ...)) when help or version was requested;
          help/version short-circuit every end-of-parse validation.

        raises
        - ParserException subclasses for end-user mistakes.
        """
        self._install()
        self._positionals = []
        self._parseargs(TokenStream(sys.argv[1:] if argv is Unset else argv))

        if self._defaults and self._help.invoked:
            return Outcome(self.positionals, Terminal(0, render_help(self)))
        if self._defaults and self._version.invoked:
            return Outcome(self.positionals, Terminal(0, render_version(self)))

        self._validate()
        return Outcome(self.positionals)

    def __repr__(self):
        return "command-parser(program=%r, parameters=%d, groups=%d)" % (
            self.program, len(self._registry), len(self._registry.groups)
        )


def invoke(parser, prompt=Unset, /):
    """
    Run a CommandParser the way a shell program would.

    Parameters
    - parser: CommandParser.
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string; split with shlex.split.
      • Iterable[str]: pre-tokenized sequence.

    Behavior
    - help/version: printed on stdout, then sys.exit(0).
    - user errors: rendered through rich on stderr, then sys.exit(2).
    - otherwise returns the positional arguments.

    Raises
    - TypeError: when parser is not a CommandParser or prompt has the wrong type.
    """
    if not isinstance(parser, CommandParser):
        raise TypeError("invoke() first argument must be a CommandParser")

    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() argument must be a string or an iterable of strings")
    else:
        raise TypeError("invoke() argument must be a string or an iterable of strings")

    try:
        outcome = parser.parse(tokens)
    except ParserException as fault:
        Console(stderr=True).print(fault.__replace__(prog=parser.program, colorful=parser.colorful))
        sys.exit(2)

    if outcome.exiting:
        Console().print(outcome.terminal.renderable)
        sys.exit(outcome.terminal.status)
    return outcome.positionals


__all__ = (
    "CommandParser",
    "Outcome",
    "Terminal",
    "invoke",
)
