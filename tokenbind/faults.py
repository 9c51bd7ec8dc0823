"""
tokenbind faults (errors and warnings) and rendering.

Scope
- FailureKind: the structured failure taxonomy reported by a resolution
  (MissingValue, MissingPositional, InvalidValue, UnclaimedTokens).
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep logs/searches predictable.
- BindingException / BindingWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- report(): print a fault on the stderr console without raising.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: every resolution message names the ordinal position of
  the offending token (“at third position”).
- Short titles, one-sentence bodies, a single clear hint.

Integration
- The resolver builds faults but never raises them; a Resolution carries them.
- The throwing entry points raise the carried fault; in shell mode invoke() renders it
  via rich and exits with status 1.
"""
import inspect
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum, StrEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FailureKind(StrEnum):
    """
    structured failure kinds carried by a failed resolution.

    - MissingValue: a flag with value(s) matched but no eligible token followed it.
    - MissingPositional: fewer non-option tokens than declared positional bindings.
    - InvalidValue: a converter, producer or action raised while applying a token.
    - UnclaimedTokens: strict mode only, unmatched tokens with no catch-all declared.
    """
    MISSING_VALUE = "MissingValue"
    MISSING_POSITIONAL = "MissingPositional"
    INVALID_VALUE = "InvalidValue"
    UNCLAIMED_TOKENS = "UnclaimedTokens"


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - values (2110x): MISSING_VALUE, INVALID_VALUE
    - positionals (2111x): MISSING_POSITIONAL
    - leftovers (2112x): UNCLAIMED_TOKENS
    - warnings (22xxx): SHADOWED_BINDING

    normalize() allows the host to remap codes to custom labels through a
    __codes__ mapping on __main__.
    """
    # --- value errors (21xxx) ---
    MISSING_VALUE       = 21101
    INVALID_VALUE       = 21102

    # --- positional errors (21xxx) ---
    MISSING_POSITIONAL  = 21111

    # --- leftover errors (21xxx) ---
    UNCLAIMED_TOKENS    = 21121

    # --- warnings (22xxx) ---
    SHADOWED_BINDING    = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        when __main__ exposes no __codes__ mapping, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program():
    main = __import__("__main__")
    return getattr(main, "__prog__", None) or os.path.basename(sys.argv[0]) or "tokenbind"


def _render(self, message, title, palette):
    main = __import__("__main__")
    colorful = self.options.get("colorful", True)
    fancy = self.options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    code = self.options.get("code")
    header = Text.assemble(
        "[ ",
        text(_program(), styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "", styler("code")),
        " | ",
        text(str(self.options.get("title", "")).title(), styler(title)),
        " ]"
    )
    body = text(self.message, styler(message))
    parts = [body]
    if hint := self.options.get("hint"):
        parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


class BindingException(Exception):
    """
    base type for resolution failures.

    carries a lowercased message and read-only options. the options every
    resolver-built fault provides are: code, title, hint, kind, name, index.
    """

    def __init__(self, message=Unset, /, **options):
        assert message is Unset or isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def kind(self):
        return self.options.get("kind")

    @property
    def name(self):
        return self.options.get("name")

    @property
    def index(self):
        return self.options.get("index")

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, "error-message", "error-title", {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from self.options.get("exception")
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingValueError(BindingException): ...
class MissingPositionalError(BindingException): ...
class InvalidValueError(BindingException): ...
class UnclaimedTokensError(BindingException): ...


class BindingWarning(Warning):
    """
    base type for non-fatal diagnostics (declaration-time notices).
    """

    def __init__(self, message=Unset, /, **options):
        assert message is Unset or isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, "warning-message", "warning-title", {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShadowedBindingWarning(BindingWarning): ...


def _check(fault, function):
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError(f"{function}() argument must have a __trigger__ and __replace__ methods")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into a copy of the fault before triggering.
    - shell mode prints on the stderr console (and exits for exceptions);
      otherwise exceptions are raised and warnings go through warnings.warn.
    """
    _check(fault, "trigger")
    fault.__replace__(**options).__trigger__()


def report(fault, /, **options):
    """
    print a fault on the stderr console, never raising or exiting.
    """
    _check(fault, "report")
    console.print(fault.__replace__(**options))


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FailureKind",
    "FaultCode",
    "BindingException",
    "MissingValueError",
    "MissingPositionalError",
    "InvalidValueError",
    "UnclaimedTokensError",
    "BindingWarning",
    "ShadowedBindingWarning",
    "trigger",
    "report",
    "getdoc",
)
