"""
tokenbind token resolver: walk the tokens once and populate the destination.

What this module provides
- Resolver: runs one pass of a token sequence against a frozen Registry and returns a
  Resolution (never raises resolution faults).
- Resolution: result type carrying either the populated destination or the fault.
- resolve(registry, tokens): throwing form (returns the destination or raises the fault).
- try_resolve(registry, tokens): boolean form, (True, destination) or (False, None).
- invoke(registry, prompt): reads sys.argv[1:], a shell-like string or a token iterable;
  in shell mode, faults are rendered on stderr and the process exits with status 1.

The pass
- Each token is first compared to every named entry (exact, or upper-cased on both
  sides when the registry ignores case). The first declared entry that matches wins.
- Unmatched tokens fill the next pending positional, else join the leftover list.
- FLAG consumes nothing else; FLAG_WITH_VALUE takes the next token unless the input ends,
  the token is itself a recognized name, or it is empty; FLAG_WITH_VALUES takes the
  maximal run of following non-name tokens, which must not be empty.
- After the pass: a pending positional fails with MissingPositional; leftovers go to the
  catch-all in encounter order, are discarded, or fail with UnclaimedTokens when strict.
- The first fault aborts the pass; no partial destination is ever returned.

State is local to one call: a frozen registry can serve concurrent resolutions.
"""
import functools
import shlex
import sys
from collections import deque
from collections.abc import Iterable

from .bindings import BindingKind
from .faults import *
from .registry import Registry
from .utils import Unset


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _tokens(tokens, function):
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError(f"{function}() tokens must be an iterable of strings")
    tokens = list(tokens)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError(f"{function}() tokens must be an iterable of strings")
    return tokens


class Resolution[_T]:
    """
    Outcome of one resolution: the populated destination, or the fault that stopped it.

    - ok / bool(resolution): True on success.
    - value: the destination (None on failure).
    - fault: the BindingException instance (None on success), never raised by the resolver.
    - kind / name: the failure kind and offending binding name (None on success).
    - unwrap(): the destination, or raise the fault.
    """

    __slots__ = ("_value", "_fault")

    def __init__(self, value=None, fault=None, /):
        if fault is not None and not isinstance(fault, BindingException):
            raise TypeError("resolution fault must be a binding exception")
        self._value = value if fault is None else None
        self._fault = fault

    @property
    def ok(self):
        return self._fault is None

    @property
    def value(self):
        return self._value

    @property
    def fault(self):
        return self._fault

    @property
    def kind(self):
        return None if self._fault is None else self._fault.kind

    @property
    def name(self):
        return None if self._fault is None else self._fault.name

    def unwrap(self):
        if self._fault is not None:
            trigger(self._fault)
        return self._value

    def __bool__(self):
        return self.ok

    def __repr__(self):
        return "resolution(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        if self._fault is None:
            yield "value", self._value
        else:
            yield "kind", str(self._fault.kind)
            yield "name", self._fault.name


class _State:
    """Per-call resolution state: destination, positional cursor, leftovers, index."""

    __slots__ = ("target", "pending", "leftovers", "index")

    def __init__(self, target, positionals):
        self.target = target
        self.pending = deque(positionals)
        self.leftovers = []
        self.index = 0


class Resolver[_T]:
    """
    Single-pass token resolver bound to one registry.

    The registry is frozen on construction. A Resolver holds no per-call state and
    may be reused, including from several threads at once.
    """

    def __init__(self, registry, /):
        if not isinstance(registry, Registry):
            raise TypeError("resolver argument must be a registry")
        self._registry = registry.freeze()

    @property
    def registry(self):
        return self._registry

    def resolve(self, tokens, /):
        """
        Run the pass and return a Resolution.

        Raises
        - TypeError: tokens is not an iterable of strings (API misuse, not a fault).
        Exceptions from the registry factory propagate unchanged.
        """
        tokens = _tokens(tokens, "resolve")
        state = _State(self._registry.factory(), self._registry.positionals)

        while state.index < len(tokens):
            token = tokens[state.index]
            entry = self._registry.match(token)
            if entry is None:
                fault = self._unnamed(state, token)
            else:
                match entry.kind:
                    case BindingKind.FLAG:
                        fault = self._flag(state, entry)
                    case BindingKind.FLAG_WITH_VALUE:
                        fault = self._flag_with_value(state, entry, tokens)
                    case BindingKind.FLAG_WITH_VALUES:
                        fault = self._flag_with_values(state, entry, tokens)
                    case _:
                        raise RuntimeError("unexpected binding kind")
            if fault is not None:
                return Resolution(None, fault)

        if fault := self._finalize(state, tokens):
            return Resolution(None, fault)
        return Resolution(state.target)

    # steps

    def _unnamed(self, state, token):
        if state.pending:
            entry = state.pending.popleft()
            fault = self._assign(state, entry, entry.apply, token)
        else:
            state.leftovers.append(token)
            fault = None
        state.index += 1
        return fault

    def _flag(self, state, entry):
        if entry.binder is None:
            fault = self._call(state, entry, entry.apply, state.target)
        else:
            fault = self._assign(state, entry, entry.apply)
        state.index += 1
        return fault

    def _flag_with_value(self, state, entry, tokens):
        following = state.index + 1
        if (
            following >= len(tokens) or
            not tokens[following] or
            self._registry.is_name(tokens[following])
        ):
            return self._missing(state, entry, "a value")

        fault = self._assign(state, entry, entry.apply, tokens[following])
        state.index = following + 1
        return fault

    def _flag_with_values(self, state, entry, tokens):
        start = end = state.index + 1
        while end < len(tokens) and not self._registry.is_name(tokens[end]):
            end += 1
        if start == end:
            return self._missing(state, entry, "one or more values")

        fault = self._assign(state, entry, entry.apply, tokens[start:end])
        state.index = end
        return fault

    def _finalize(self, state, tokens):
        if state.pending:
            entry = state.pending[0]
            return MissingPositionalError(
                "positional %r is missing after %d token(s)" % (entry.label, len(tokens)),
                title="missing positional",
                code=FaultCode.MISSING_POSITIONAL,
                kind=FailureKind.MISSING_POSITIONAL,
                name=entry.label,
                index=len(tokens),
                hint="add a value for %r; positionals are filled in declaration order" % entry.label,
                docs=getdoc(FaultCode.MISSING_POSITIONAL),
            )

        if not state.leftovers:
            return None

        if (catchall := self._registry.catchall) is not None:
            return self._call(state, catchall, catchall.apply, state.target, list(state.leftovers))

        if self._registry.strict:
            return UnclaimedTokensError(
                "unclaimed input remains: %s" % " ".join(map(repr, state.leftovers)),
                title="unclaimed input",
                code=FaultCode.UNCLAIMED_TOKENS,
                kind=FailureKind.UNCLAIMED_TOKENS,
                name=None,
                index=len(tokens),
                leftovers=tuple(state.leftovers),
                hint="remove the extra inputs or declare a catch-all binding",
                docs=getdoc(FaultCode.UNCLAIMED_TOKENS),
            )

        # leftovers without a catch-all are dropped
        return None

    # helpers

    def _assign(self, state, entry, callback, *args):
        try:
            value = callback(*args)
            entry.binder.assign(state.target, value)
        except Exception as exception:
            return self._invalid(state, entry, exception)
        return None

    def _call(self, state, entry, callback, *args):
        try:
            callback(*args)
        except Exception as exception:
            return self._invalid(state, entry, exception)
        return None

    def _missing(self, state, entry, what):
        return MissingValueError(
            "%s %r at %s position expects %s" % (entry.kind.value, entry.label, _ordinal(state.index + 1), what),
            title="missing value",
            code=FaultCode.MISSING_VALUE,
            kind=FailureKind.MISSING_VALUE,
            name=entry.label,
            index=state.index,
            hint="put %s right after %r, before any other option" % (what, entry.label),
            docs=getdoc(FaultCode.MISSING_VALUE),
        )

    def _invalid(self, state, entry, exception):
        return InvalidValueError(
            "%s %r at %s position rejected its input: %s" % (
                entry.kind.value, entry.label, _ordinal(state.index + 1), exception
            ),
            title="invalid value",
            code=FaultCode.INVALID_VALUE,
            kind=FailureKind.INVALID_VALUE,
            name=entry.label,
            index=state.index,
            exception=exception,
            hint="check the format expected by %r" % entry.label,
            docs=getdoc(FaultCode.INVALID_VALUE),
        )


def resolve(registry, tokens, /):
    """
    Throwing form: return the populated destination, or raise the fault
    (MissingValueError, MissingPositionalError, InvalidValueError, UnclaimedTokensError).
    """
    return Resolver(registry).resolve(tokens).unwrap()


def try_resolve(registry, tokens, /):
    """
    Boolean form: (True, destination) on success, (False, None) on failure.

    The failure detail is discarded; use resolve() or Resolver.resolve() for diagnostics.
    A destination factory that raises also yields (False, None); a tokens argument that
    is not an iterable of strings still raises TypeError.
    """
    resolver = Resolver(registry)
    tokens = _tokens(tokens, "try_resolve")
    try:
        resolution = resolver.resolve(tokens)
    except Exception:
        return False, None
    return resolution.ok, resolution.value


def invoke(registry, prompt=Unset, /, *, shell=False, fancy=False, colorful=True):
    """
    Resolve process arguments (or a prompt) against a registry.

    Parameters
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string, split with shlex.split.
      • Iterable[str]: pre-tokenized sequence.
    - shell: render faults on stderr and exit with status 1 instead of raising.
    - fancy / colorful: rendering options for shell mode.

    Returns
    - the populated destination.
    """
    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    else:
        tokens = _tokens(prompt, "invoke")

    resolution = Resolver(registry).resolve(tokens)
    if not resolution.ok:
        trigger(resolution.fault, shell=shell, fancy=fancy, colorful=colorful)
    return resolution.value


__all__ = (
    "Resolution",
    "Resolver",
    "resolve",
    "try_resolve",
    "invoke",
)
