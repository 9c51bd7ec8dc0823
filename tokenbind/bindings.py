r"""
tokenbind binding entries.

Overview
- BindingKind: the five recognizable token patterns.
  • POSITIONAL: matched by declaration order, not by a literal name.
  • FLAG: named, consumes no following token.
  • FLAG_WITH_VALUE: named, consumes exactly one following token.
  • FLAG_WITH_VALUES: named, consumes the maximal run of following non-name tokens.
  • CATCH_ALL: receives every token nothing else claimed, once, after the pass.

- BindingEntry: one declared pattern (kind, literal name, field binder, apply callback).
  Entries are immutable once built; their fields are exposed as read-only properties.

The apply callback depends on the kind
- POSITIONAL / FLAG_WITH_VALUE: convert(token) -> value, assigned through the binder.
- FLAG with a binder: produce() -> value, assigned through the binder.
- FLAG without a binder: action(target), a direct mutation of the destination.
- FLAG_WITH_VALUES: convert_all(tokens) -> value, assigned through the binder.
- CATCH_ALL: action(target, leftovers).

Validation highlights
- Names are required for named kinds and forbidden for positional/catch-all.
- Names must be non-empty and contain no whitespace; any prefix style is accepted
  ("-a", "--all", "/AAA").
- Positional and value-bearing kinds require a binder; catch-all forbids one.
"""
import re
from enum import Enum

from .binders import binder as normalize
from .utils import Unset, mirror


class BindingKind(Enum):
    POSITIONAL = "positional"
    FLAG = "flag"
    FLAG_WITH_VALUE = "flag-with-value"
    FLAG_WITH_VALUES = "flag-with-values"
    CATCH_ALL = "catch-all"

    @property
    def named(self):
        """True for the kinds matched by a literal token."""
        return self in (BindingKind.FLAG, BindingKind.FLAG_WITH_VALUE, BindingKind.FLAG_WITH_VALUES)


def _sanitize_name(kind, name, /):
    """
    Internal: validate the literal name against the entry kind.

    Raises
    - TypeError: name given to an unnamed kind, missing for a named kind, or not a string.
    - ValueError: empty string or embedded whitespace.
    """
    if not kind.named:
        if name is not Unset:
            raise TypeError(f"{kind.value} binding cannot have a name")
        return None

    if name is Unset:
        raise TypeError(f"{kind.value} binding must specify a name")
    if not isinstance(name, str):
        raise TypeError(f"{kind.value} binding name must be a string")
    if not name:
        raise ValueError(f"{kind.value} binding name cannot be empty")
    if re.search(r"\s", name):
        raise ValueError(f"{kind.value} binding name cannot contain whitespace")
    return name


def _sanitize_binder(kind, binder, /):
    match kind:
        case BindingKind.CATCH_ALL:
            if binder is not Unset:
                raise TypeError("catch-all binding cannot have a field binder")
            return None
        case BindingKind.FLAG:
            # Direct-action flags carry no binder
            return None if binder is Unset else normalize(binder)
        case _:
            if binder is Unset:
                raise TypeError(f"{kind.value} binding must specify a field binder")
            return normalize(binder)


class BindingEntry:
    """
    One declared rule mapping a token pattern to a field mutation.

    Properties
    - kind: BindingKind
    - name: str | None, the literal token (None for positional and catch-all)
    - binder: FieldBinder | None
    - apply: the converter/producer/action (see module docs)
    - label: the identifier used in faults and diagnostics
    """

    kind = mirror("kind")
    name = mirror("name")
    binder = mirror("binder")
    apply = mirror("apply")

    def __init__(self, kind, /, name=Unset, binder=Unset, apply=Unset):
        if not isinstance(kind, BindingKind):
            raise TypeError("binding kind must be a BindingKind")
        if not callable(apply):
            raise TypeError(f"{kind.value} binding callback must be callable")

        self._kind = kind
        self._name = _sanitize_name(kind, name)
        self._binder = _sanitize_binder(kind, binder)
        self._apply = apply

    @property
    def label(self):
        if self._name is not None:
            return self._name
        if self._binder is not None:
            return self._binder.name
        return "*"

    def matches(self, token, /, *, ignore_case=False):
        """
        Exact literal comparison, or comparison of the upper-cased forms when
        ignore_case is set. Unnamed entries never match.
        """
        if self._name is None:
            return False
        if ignore_case:
            return self._name.upper() == token.upper()
        return self._name == token

    def __setattr__(self, name, value):
        if not name.startswith("_") or "_apply" in self.__dict__:
            raise AttributeError(f"binding entry attribute {name!r} is read-only")
        super().__setattr__(name, value)

    def __repr__(self):
        return "binding(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "kind", self._kind.value
        if self._name is not None:
            yield "name", self._name
        if self._binder is not None:
            yield "binder", self._binder


__all__ = (
    "BindingKind",
    "BindingEntry",
)
