"""
Parameter registry and grouping rules.

What this module provides
- GroupKind: plain groups (cosmetic bundling) and mutex groups (at most one member,
  or exactly one when the group is required, may be invoked).
- Group: an ordered, duplicate-free set of parameters with its own invocation and
  requirement state and a human-readable label for diagnostics.
- Registry: owns every registered parameter, enforces long/short name uniqueness
  and partitions parameters into groups.

Invariants
- a parameter is registered at most once and belongs to at most one group.
- a mutex member cannot itself be required; requiredness belongs to the group.
- the registry is shaped during setup only; during parsing just the `invoked` flags
  and stored values change, and the parser is the only writer.

All violations are programmer mistakes and raise ConfigurationError right away.
"""
from enum import Enum

from .faults import ConfigurationError
from .parameters import Parameter


class GroupKind(Enum):
    PLAIN = "plain"
    MUTEX = "mutex"


class Group:
    """
    An ordered set of parameters declared together.

    attributes
    - id: position of the group in its registry.
    - kind: GroupKind.PLAIN or GroupKind.MUTEX.
    - required: only meaningful for mutex groups (exactly one member must be invoked).
    - invoked: true once any member matched during parsing.
    - label: preferred spellings of the members, comma-joined (e.g. "-f, -u").
    """

    def __init__(self, id, kind, parameters, /, *, required=False):
        self._id = id
        self._kind = kind
        self._required = required
        self._invoked = False
        self._parameters = tuple(parameters)
        self._label = ", ".join(parameter.spelling for parameter in self._parameters)

    @property
    def id(self):
        return self._id

    @property
    def kind(self):
        return self._kind

    @property
    def mutex(self):
        return self._kind is GroupKind.MUTEX

    @property
    def required(self):
        return self._required

    @property
    def invoked(self):
        return self._invoked

    @property
    def parameters(self):
        return self._parameters

    @property
    def label(self):
        return self._label

    def __iter__(self):
        return iter(self._parameters)

    def __len__(self):
        return len(self._parameters)

    def __contains__(self, parameter):
        return parameter in self._parameters

    def __repr__(self):
        return "group(id=%r, kind=%r, required=%r, invoked=%r, label=%r)" % (
            self._id, self._kind.value, self._required, self._invoked, self._label
        )


class Registry:
    """
    Owner of all declared parameters.

    lookups
    - lookup(name): by long name (without '--').
    - lookup_short(char): by short name (without '-').
    iteration follows registration order.
    """

    def __init__(self):
        self._parameters = {}
        self._shorts = {}
        self._groups = []

    @property
    def groups(self):
        return tuple(self._groups)

    def __iter__(self):
        return iter(tuple(self._parameters.values()))

    def __len__(self):
        return len(self._parameters)

    def __contains__(self, parameter):
        return self._parameters.get(getattr(parameter, "name", None)) is parameter

    def lookup(self, name, /):
        return self._parameters.get(name)

    def lookup_short(self, short, /):
        return self._shorts.get(short) if short else None

    def _check(self, parameter, names, shorts):
        if not isinstance(parameter, Parameter):
            raise TypeError("only parameters can be registered, not %r" % type(parameter).__name__)
        if parameter in self:
            raise ConfigurationError("the parameter %r was already registered" % parameter.name)
        if parameter.name in self._parameters or parameter.name in names:
            raise ConfigurationError("a parameter with name %r already exists" % parameter.name)
        if parameter.short and (parameter.short in self._shorts or parameter.short in shorts):
            raise ConfigurationError("a parameter with short name %r already exists" % parameter.short)

    def register(self, parameter, /):
        self._check(parameter, (), ())
        self._parameters[parameter.name] = parameter
        if parameter.short:
            self._shorts[parameter.short] = parameter
        return parameter

    def register_group(self, kind, /, *parameters, required=False):
        """
        register `parameters` and bundle them into a new group.

        validation happens up front so a rejected group leaves the registry untouched.

        raises
        - ConfigurationError: empty group, repeated member, member already grouped or
          registered, required member of a mutex group, required plain group.
        """
        if not isinstance(kind, GroupKind):
            raise TypeError("register_group() first argument must be a GroupKind")
        if not isinstance(required, bool):
            raise TypeError("register_group() 'required' must be a boolean")
        if not parameters:
            raise ConfigurationError("a %s group needs at least one parameter" % kind.value)
        if required and kind is not GroupKind.MUTEX:
            raise ConfigurationError("only mutex groups can be required; mark the parameters as required instead")

        names = set()
        shorts = set()
        for index, parameter in enumerate(parameters):
            if not isinstance(parameter, Parameter):
                raise TypeError("only parameters can be grouped, not %r" % type(parameter).__name__)
            if parameter.group is not None:
                raise ConfigurationError("the parameter %r is already part of a group" % parameter.name)
            if any(parameter is other for other in parameters[:index]):
                raise ConfigurationError("the parameter %r appears twice in the same group" % parameter.name)
            self._check(parameter, names, shorts)
            if kind is GroupKind.MUTEX and parameter.required:
                raise ConfigurationError(
                    "the parameter %r is required and part of a mutex group; set the group to required instead"
                    % parameter.name
                )
            names.add(parameter.name)
            if parameter.short:
                shorts.add(parameter.short)

        group = Group(len(self._groups), kind, parameters, required=required)
        for parameter in parameters:
            self.register(parameter)
            parameter._group = group
        self._groups.append(group)
        return group


__all__ = (
    "GroupKind",
    "Group",
    "Registry",
)
