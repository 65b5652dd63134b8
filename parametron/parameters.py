r"""
Parametron parameter specifications and value tokenization.

Overview
- Variants (closed set, see ParameterKind)
  • Switch: presence-only boolean; every invocation toggles the stored value.
  • Boolean: accepts true/yes or false/no.
  • Integer: accepts a base-10 integer literal.
  • Float: accepts a floating point literal.
  • String: accepts any single token.
  • StringArray: accepts a fixed number of tokens, or one-or-more ("+").
  • Custom: extension point; behaviour supplied through callables, no subclassing.

- Shared contract
  • usage(): short fragment for the synopsis line (e.g. "-o FILE").
  • help(): longer fragment for the options table (e.g. "-o, --out FILE").
  • parse(stream): consume zero or more tokens from a TokenStream and store the value.
  • value: the stored (typed) value, readable after parsing.

- Tokenization helpers (public, reused by Custom parse callables)
  • clean(token): trim, drop one trailing ',', strip one layer of matching quotes.
  • tokenize(stream): obtain exactly one value, from '--name=value' or the next token.
  • tokenize_array(stream, arity): obtain a bounded run of values, from
    '--name=v1,v2' or the following non-option tokens.

Metadata (sanitized on construction)
- name: long option name, required; must match r"[^\W_][\w-]*" (no dashes in front, no '=').
- short: optional single character; "" means no short form.
- metavar: label shown in help; upper-cased; defaults to "VALUE".
- descr: description shown in the options table.
- required: the parser fails when a required parameter is never invoked.

Quick example:
    >>> from parametron.parameters import Switch, String, StringArray
    >>> active = Switch("active", "a", descr="switches mode to active")
    >>> output = String("out", "o", metavar="file", descr="specify an output file")
    >>> output.help()
    '-o, --out FILE'
    >>> StringArray("include", "I", arity="+").usage()
    '-I VALUE [VALUE...]'
"""
import abc
import re
from enum import Enum

from .faults import (
    ConfigurationError,
    ExtraInlineValuesError,
    FaultCode,
    InvalidValueError,
    MissingValueError,
    ValueCountError,
)
from .stream import looks_like_option
from .utils import *

ARRAY_DELIMITER = ","
ONE_OR_MORE = "+"
MAX_DISPLAYED_METAVARS = 3


class ParameterKind(Enum):
    SWITCH = "switch"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    STRING_ARRAY = "string-array"
    CUSTOM = "custom"


def clean(token, /):
    """
    normalize a raw value token.

    steps
    - strip surrounding whitespace.
    - drop a single trailing ',' (left over from "a, b, c" style input).
    - when the remainder is wrapped in a matching pair of '"' or "'", strip exactly one layer.
    """
    token = token.strip()
    if token.endswith(ARRAY_DELIMITER):
        token = token[:-1]
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):
        token = token[1:-1]
    return token


def _inline(token):
    # text after the first '=' of '--name=value'; None when there is no '='
    option, separator, value = token.partition("=")
    return value if separator else None


def tokenize(stream, /):
    """
    obtain a single value for the option that is currently being resolved.

    resolution order
    1. the current token carries '=': the value is the text after it. a ',' inside
       means several values were given where one was expected.
    2. a next token exists: it must not look like an option; it is consumed.
    3. nothing left: the value is missing.

    raises
    - ExtraInlineValuesError for '--name=a,b'.
    - MissingValueError when no value is available.
    """
    if (value := _inline(stream.current or "")) is not None:
        if ARRAY_DELIMITER in value:
            raise ExtraInlineValuesError(
                "invalid number of arguments to option %r, expected one" % stream.option,
                title="too many inline values",
                code=FaultCode.EXTRA_INLINE_VALUES,
                input=stream.option,
                hint="pass a single value (for example: %s=<value>)" % stream.option,
            )
        return clean(value)

    if stream.has_next():
        if looks_like_option(token := stream.peek()):
            raise MissingValueError(
                "expected <value> for option %r, got %r" % (stream.option, token),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                input=stream.option,
                hint="put a value right after %s (quote it if it starts with '-')" % stream.option,
            )
        return clean(stream.next())

    raise MissingValueError(
        "expected <value> for option %r, got ''" % stream.option,
        title="missing value",
        code=FaultCode.MISSING_VALUE,
        input=stream.option,
        hint="put a value right after %s" % stream.option,
    )


def tokenize_array(stream, arity, /):
    """
    obtain a run of values for the option that is currently being resolved.

    collection
    - inline: '--name=v1,v2,v3' is split on ',' and every piece is cleaned.
      a trailing "," is ignored and "--name=" carries no values.
    - spaced: '--name v1 v2 ...' consumes following tokens greedily, stopping as soon
      as the next token looks like an option or a fixed arity would be exceeded.

    validation
    - fixed arity: the number of values must match exactly.
    - one-or-more ("+"): at least one value must be present.
    """
    values = []
    if (inline := _inline(stream.current or "")) is not None:
        pieces = inline.split(ARRAY_DELIMITER)
        # a trailing delimiter (or an empty remainder) ends the list without adding a value
        if pieces[-1] == "":
            pieces.pop()
        values.extend(clean(piece) for piece in pieces)
    elif stream.has_next() and not looks_like_option(stream.peek()):
        while stream.has_next() and not looks_like_option(stream.peek()):
            if arity != ONE_OR_MORE and len(values) + 1 > arity:
                break
            values.append(clean(stream.next()))
    else:
        raise MissingValueError(
            "expected argument(s) for option %r, got %r" % (stream.option, stream.peek() or ""),
            title="missing values",
            code=FaultCode.MISSING_VALUE,
            input=stream.option,
            hint="pass values as %s=v1,v2 or %s v1 v2" % (stream.option, stream.option),
        )

    if arity == ONE_OR_MORE and not values:
        raise ValueCountError(
            "expected one or more arguments for option %r, got 0" % stream.option,
            title="not enough values",
            code=FaultCode.WRONG_VALUE_COUNT,
            input=stream.option,
            expected=arity,
            actual=0,
            hint="pass at least one value to %s" % stream.option,
        )
    if arity != ONE_OR_MORE and len(values) != arity:
        raise ValueCountError(
            "expected %d arguments for option %r, got %d" % (arity, stream.option, len(values)),
            title="wrong number of values",
            code=FaultCode.WRONG_VALUE_COUNT,
            input=stream.option,
            expected=arity,
            actual=len(values),
            hint="pass exactly %d value%s to %s" % (arity, "s" * (arity != 1), stream.option),
        )
    return values


def _sanitize_descriptor(cls, metadata, /):
    """
    Internal: validate and normalize the metadata every parameter carries.

    Responsibilities
    - name: non-empty string, shell-friendly (letters, digits, '-', '_'), without the
      leading dashes; the parser adds them.
    - short: "" or a single letter/digit.
    - metavar: non-empty string, upper-cased.
    - descr: string (may be empty).
    - required: bool.

    Raises
    - TypeError for wrongly typed metadata.
    - ConfigurationError for malformed values.

    Notes
    - This function mutates the provided metadata dict in place.
    """
    typename = cls.kind.value if isinstance(cls.kind, ParameterKind) else cls.__name__.lower()

    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{typename} name must be a string")
    elif not re.fullmatch(r"[^\W_][\w-]*", name := name.strip()):
        raise ConfigurationError(f"{typename} name {name!r} is not a valid long option name")
    metadata["name"] = name

    if not isinstance(short := metadata["short"], str):
        raise TypeError(f"{typename} short name must be a string")
    elif short and not re.fullmatch(r"[^\W_]", short):
        raise ConfigurationError(f"{typename} short name {short!r} must be a single letter or digit")

    if not isinstance(metavar := metadata["metavar"], str):
        raise TypeError(f"{typename} 'metavar' must be a string")
    elif not (metavar := metavar.strip()):
        raise ConfigurationError(f"{typename} 'metavar' cannot be empty")
    metadata["metavar"] = metavar.upper()

    if not isinstance(metadata["descr"], str):
        raise TypeError(f"{typename} 'descr' must be a string")
    metadata["descr"] = metadata["descr"].strip()

    if not isinstance(metadata["required"], bool):
        raise TypeError(f"{typename} 'required' must be a boolean")


class Parameter(abc.ABC):
    """
    Base of every parameter variant.

    Invocation state
    - invoked: set by the parser (and only by the parser) once the parameter matched.
    - group: the Group the parameter belongs to, or None while ungrouped; assigned by
      the registry when the group is declared.
    """
    kind = Unset

    def __init__(self, name, short="", /, *, default=Unset, metavar="VALUE", descr="", required=False):
        metadata = dict(name=name, short=short, metavar=metavar, descr=descr, required=required)
        _sanitize_descriptor(type(self), metadata)
        self._name = metadata["name"]
        self._short = short
        self._metavar = metadata["metavar"]
        self._descr = metadata["descr"]
        self._required = required
        self._invoked = False
        self._group = None
        self._value = default

    @property
    def name(self):
        return self._name

    @property
    def short(self):
        return self._short

    @property
    def metavar(self):
        return self._metavar

    @property
    def descr(self):
        return self._descr

    @property
    def required(self):
        return self._required

    @property
    def invoked(self):
        return self._invoked

    @property
    def group(self):
        return self._group

    @property
    def value(self):
        return self._value

    @property
    def spelling(self):
        """
        preferred user-facing spelling: '-x' when a short form exists, else '--name'.
        """
        return "-" + self._short if self._short else "--" + self._name

    @property
    def names(self):
        return ("-" + self._short, "--" + self._name) if self._short else ("--" + self._name,)

    def usage(self):
        return "%s %s" % (self.spelling, self._metavar)

    def help(self):
        return "%s %s" % (", ".join(self.names), self._metavar)

    @abc.abstractmethod
    def parse(self, stream, /):
        raise NotImplementedError

    def __rich_repr__(self):
        yield "name", self._name
        yield "short", self._short
        yield "value", self.value
        yield "required", self._required
        yield "invoked", self._invoked

    def __repr__(self):
        return "%s(%s)" % (
            self.kind.value if isinstance(self.kind, ParameterKind) else type(self).__name__,
            ", ".join("%s=%r" % pair for pair in self.__rich_repr__()),
        )


class Switch(Parameter):
    kind = ParameterKind.SWITCH

    def __init__(self, name, short="", /, *, default=False, descr="", required=False):
        if not isinstance(default, bool):
            raise TypeError("switch 'default' must be a boolean")
        super().__init__(name, short, default=default, descr=descr, required=required)

    def usage(self):
        return self.spelling

    def help(self):
        return ", ".join(self.names)

    def parse(self, stream, /):
        # toggles on every invocation and never touches the stream
        self._value = not self._value


class Boolean(Parameter):
    kind = ParameterKind.BOOLEAN

    def __init__(self, name, short="", /, *, default=False, metavar="VALUE", descr="", required=False):
        if not isinstance(default, bool):
            raise TypeError("boolean 'default' must be a boolean")
        super().__init__(name, short, default=default, metavar=metavar, descr=descr, required=required)

    def parse(self, stream, /):
        match token := tokenize(stream):
            case "true" | "yes":
                self._value = True
            case "false" | "no":
                self._value = False
            case _:
                raise InvalidValueError(
                    "invalid argument %r for option %r" % (token, stream.option),
                    title="invalid boolean",
                    code=FaultCode.INVALID_VALUE,
                    input=stream.option,
                    hint="use one of: true, yes, false, no",
                )


class Integer(Parameter):
    kind = ParameterKind.INTEGER

    def __init__(self, name, short="", /, *, default=0, metavar="VALUE", descr="", required=False):
        if not isinstance(default, int) or isinstance(default, bool):
            raise TypeError("integer 'default' must be an integer")
        super().__init__(name, short, default=default, metavar=metavar, descr=descr, required=required)

    def parse(self, stream, /):
        if not re.fullmatch(r"[+-]?\d+", token := tokenize(stream), flags=re.ASCII):
            raise InvalidValueError(
                "invalid argument %r for option %r" % (token, stream.option),
                title="invalid integer",
                code=FaultCode.INVALID_VALUE,
                input=stream.option,
                hint="pass a whole number (for example: %s 42)" % stream.option,
            )
        self._value = int(token)


class Float(Parameter):
    kind = ParameterKind.FLOAT

    def __init__(self, name, short="", /, *, default=0.0, metavar="VALUE", descr="", required=False):
        if not isinstance(default, int | float) or isinstance(default, bool):
            raise TypeError("float 'default' must be a number")
        super().__init__(name, short, default=float(default), metavar=metavar, descr=descr, required=required)

    def parse(self, stream, /):
        token = tokenize(stream)
        try:
            if "_" in token:
                raise ValueError(token)
            self._value = float(token)
        except ValueError:
            raise InvalidValueError(
                "invalid argument %r for option %r" % (token, stream.option),
                title="invalid number",
                code=FaultCode.INVALID_VALUE,
                input=stream.option,
                hint="pass a number (for example: %s 0.5)" % stream.option,
            ) from None


class String(Parameter):
    kind = ParameterKind.STRING

    def __init__(self, name, short="", /, *, default="", metavar="VALUE", descr="", required=False):
        if not isinstance(default, str):
            raise TypeError("string 'default' must be a string")
        super().__init__(name, short, default=default, metavar=metavar, descr=descr, required=required)

    def parse(self, stream, /):
        self._value = tokenize(stream)


class StringArray(Parameter):
    """
    A list of strings.

    arity
    - int >= 0: exactly that many values.
    - "+": one or more values (spaced form stops at the next option-looking token).
    """
    kind = ParameterKind.STRING_ARRAY

    def __init__(self, name, short="", /, *, arity=ONE_OR_MORE, default=Unset, metavar="VALUE", descr="", required=False):
        if arity != ONE_OR_MORE:
            if not isinstance(arity, int) or isinstance(arity, bool):
                raise TypeError("string-array 'arity' must be an integer or '+'")
            if arity < 0:
                raise ConfigurationError("invalid arity %r, arity can't be negative" % arity)
        default = list(coalesce(default, []))
        if not all(isinstance(item, str) for item in default):
            raise TypeError("string-array 'default' must contain only strings")
        super().__init__(name, short, default=default, metavar=metavar, descr=descr, required=required)
        self._arity = arity

    @property
    def arity(self):
        return self._arity

    @property
    def value(self):
        return list(self._value)

    def _metavars(self):
        if self._arity != ONE_OR_MORE and 0 < self._arity <= MAX_DISPLAYED_METAVARS:
            return " ".join([self._metavar] * self._arity)
        return "%s [%s...]" % (self._metavar, self._metavar)

    def usage(self):
        if self._arity == 0:
            return self.spelling
        return "%s %s" % (self.spelling, self._metavars())

    def help(self):
        return "%s %s" % (", ".join(self.names), self._metavars())

    def parse(self, stream, /):
        self._value = tokenize_array(stream, self._arity)


class Custom(Parameter):
    """
    Extension point for user-defined value kinds.

    parameters
    - parse: callable(stream) -> value. It may use tokenize()/tokenize_array() to honour
      the shared '=' / spaced / quoting contract, and should raise a ParserException
      subclass (typically InvalidValueError) for bad input.
    - usage / help: optional callable(parameter) -> str overriding the default fragments.
    - switch: when True the parameter takes no argument and, like Switch, does not stop
      a short-option cluster.

    Example
        >>> def point(stream):
        ...     x, y = tokenize_array(stream, 2)
        ...     return float(x), float(y)
        >>> origin = Custom("origin", parse=point, default=(0.0, 0.0), metavar="N")
    """
    kind = ParameterKind.CUSTOM

    def __init__(self, name, short="", /, *, parse, usage=Unset, help=Unset, default=None, metavar="VALUE", descr="", required=False, switch=False):
        if not callable(parse):
            raise TypeError("custom 'parse' must be callable")
        for hook in (usage, help):
            if hook is not Unset and not callable(hook):
                raise TypeError("custom 'usage' and 'help' must be callable")
        if not isinstance(switch, bool):
            raise TypeError("custom 'switch' must be a boolean")
        super().__init__(name, short, default=default, metavar=metavar, descr=descr, required=required)
        self._parser = parse
        self._usage = usage
        self._help = help
        self._switch = switch

    @property
    def switch(self):
        return self._switch

    def usage(self):
        if self._usage is not Unset:
            return self._usage(self)
        return self.spelling if self._switch else super().usage()

    def help(self):
        if self._help is not Unset:
            return self._help(self)
        return ", ".join(self.names) if self._switch else super().help()

    def parse(self, stream, /):
        self._value = self._parser(stream)


__all__ = (
    "ARRAY_DELIMITER",
    "ONE_OR_MORE",
    "ParameterKind",
    "Parameter",
    "Switch",
    "Boolean",
    "Integer",
    "Float",
    "String",
    "StringArray",
    "Custom",
    "clean",
    "tokenize",
    "tokenize_array",
)
