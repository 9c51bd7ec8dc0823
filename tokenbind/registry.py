"""
tokenbind binding registry: the declarative side of a resolution.

A Registry is an ordered, append-only collection of binding entries built through
fluent calls, plus the options that drive matching. It is created once per
destination type and reused across many resolutions.

Lifecycle
- declare: positional(), flag(), flag_with_value(), flag_with_values(), catch_all()
- freeze: explicit freeze(), or implicitly on the first resolution
- resolve: resolve()/try_resolve()/parse() delegate to tokenbind.resolver

Rules
- Declaration order is matching precedence: the first named entry equal to a token wins.
- Positional entries are consumed in declaration order regardless of any named entries
  declared between them.
- Only one catch-all may be declared; a second one is rejected immediately.
- Declaring, or changing options, on a frozen registry raises TypeError.
- Two named entries that compare equal under the case rule are legal but the later one
  can never match; a ShadowedBindingWarning is emitted when that happens, at declaration
  or when enabling ignore_case makes it so.

Quick example:
    >>> class Options:
    ...     path = None
    ...     count = 0
    ...     verbose = False
    >>> registry = (
    ...     Registry(Options)
    ...     .positional("path")
    ...     .positional("count", int)
    ...     .flag("-v", "verbose")
    ... )
    >>> options = registry.resolve(["a.txt", "3", "-v"])
    >>> options.path, options.count, options.verbose
    ('a.txt', 3, True)
"""
from .bindings import BindingEntry, BindingKind
from .binders import FieldBinder
from .faults import FaultCode, ShadowedBindingWarning, getdoc, trigger
from .utils import Unset, identity, rename


@rename("produce")
def _present():
    return True


class Registry[_T]:
    """
    Ordered binding declarations for one destination type.

    Parameters
    - factory: Callable[[], _T]
      Zero-argument callable producing a fresh destination for every resolution
      (usually the destination class itself).
    - ignore_case: bool
      Compare names and tokens after upper-casing both sides.
    - strict: bool
      Fail with UnclaimedTokens when tokens are left over and no catch-all exists,
      instead of discarding them.
    """

    def __init__(self, factory, /, *, ignore_case=False, strict=False):
        if not callable(factory):
            raise TypeError("registry factory must be callable")
        self._factory = factory
        self._entries = []
        self._frozen = False
        self._ignore_case = bool(ignore_case)
        self._strict = bool(strict)

    @classmethod
    def create(cls, factory, setting, /, **options):
        """
        Build, declare and freeze in one step.

        setting receives the fresh registry and declares its bindings; its
        return value is ignored.

        Example
            registry = Registry.create(Options, lambda setting: (
                setting.positional("path")
                       .flag_with_value("-B", "option_b")
            ), ignore_case=True)
        """
        if not callable(setting):
            raise TypeError("create() setting must be callable")
        self = cls(factory, **options)
        setting(self)
        return self.freeze()

    # options

    @property
    def factory(self):
        return self._factory

    @property
    def frozen(self):
        return self._frozen

    @property
    def ignore_case(self):
        return self._ignore_case

    @ignore_case.setter
    def ignore_case(self, value):
        self._mutable()
        before = list(self._shadows())
        self._ignore_case = bool(value)
        for entry, shadow in self._shadows():
            if (entry, shadow) not in before:
                self._warn(entry, shadow)

    @property
    def strict(self):
        return self._strict

    @strict.setter
    def strict(self, value):
        self._mutable()
        self._strict = bool(value)

    # declarations

    def positional(self, binder, convert=identity, /):
        """
        Declare the next positional slot; convert(token) is assigned through binder.
        """
        return self._append(BindingEntry(BindingKind.POSITIONAL, binder=binder, apply=convert))

    def flag(self, name, binder, produce=Unset, /):
        """
        Declare a flag consuming only its own token.

        Forms
        - flag(name, binder, produce=lambda: True): assign produce() through binder.
        - flag(name, action): run action(target) directly, for flags with no field
          (e.g. OR-ing an enum member into a bit set).
        """
        if produce is Unset and callable(binder) and not isinstance(binder, FieldBinder):
            return self._append(BindingEntry(BindingKind.FLAG, name=name, apply=binder))
        return self._append(BindingEntry(
            BindingKind.FLAG, name=name, binder=binder, apply=_present if produce is Unset else produce
        ))

    def flag_with_value(self, name, binder, convert=identity, /):
        """
        Declare a flag consuming exactly one following token.
        """
        return self._append(BindingEntry(BindingKind.FLAG_WITH_VALUE, name=name, binder=binder, apply=convert))

    def flag_with_values(self, name, binder, convert_all=list, /):
        """
        Declare a flag consuming every following token up to the next recognized name.
        """
        return self._append(BindingEntry(BindingKind.FLAG_WITH_VALUES, name=name, binder=binder, apply=convert_all))

    def catch_all(self, action, /):
        """
        Declare the single catch-all; action(target, leftovers) runs once after the pass.
        """
        if self.catchall is not None:
            raise TypeError("registry already declares a catch-all binding")
        return self._append(BindingEntry(BindingKind.CATCH_ALL, apply=action))

    def freeze(self):
        """Stop accepting declarations; returns the registry for chaining."""
        self._frozen = True
        return self

    # introspection

    @property
    def entries(self):
        return tuple(self._entries)

    @property
    def positionals(self):
        return tuple(entry for entry in self._entries if entry.kind is BindingKind.POSITIONAL)

    @property
    def named(self):
        return tuple(entry for entry in self._entries if entry.kind.named)

    @property
    def catchall(self):
        for entry in self._entries:
            if entry.kind is BindingKind.CATCH_ALL:
                return entry
        return None

    def match(self, token, /):
        """
        Return the first named entry whose name equals token under the case rule, or None.
        """
        for entry in self._entries:
            if entry.matches(token, ignore_case=self._ignore_case):
                return entry
        return None

    def is_name(self, token, /):
        return self.match(token) is not None

    # resolution

    def resolve(self, tokens, /):
        """Throwing form: return the populated destination or raise the fault."""
        from .resolver import resolve
        return resolve(self, tokens)

    def try_resolve(self, tokens, /):
        """Boolean form: (True, destination) or (False, None)."""
        from .resolver import try_resolve
        return try_resolve(self, tokens)

    def parse(self, tokens, /):
        """Result form: a Resolution carrying the destination or the fault."""
        from .resolver import Resolver
        return Resolver(self).resolve(tokens)

    # internals

    def _mutable(self):
        if self._frozen:
            raise TypeError("registry is frozen and cannot be modified")

    def _append(self, entry):
        self._mutable()
        if entry.name is not None and (shadow := self.match(entry.name)) is not None:
            self._warn(entry, shadow)
        self._entries.append(entry)
        return self

    def _shadows(self):
        """Yield (entry, earlier) for every named entry hidden under the current case rule."""
        for index, entry in enumerate(self._entries):
            if entry.name is None:
                continue
            for earlier in self._entries[:index]:
                if earlier.matches(entry.name, ignore_case=self._ignore_case):
                    yield entry, earlier
                    break

    def _warn(self, entry, shadow):
        trigger(ShadowedBindingWarning(
            "binding %r is shadowed by an earlier binding %r" % (entry.name, shadow.name),
            title="shadowed binding",
            code=FaultCode.SHADOWED_BINDING,
            name=entry.name,
            hint="remove the duplicate or rename one of them; the first declaration wins",
            docs=getdoc(FaultCode.SHADOWED_BINDING),
        ))

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))

    def __repr__(self):
        return "registry(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "factory", getattr(self._factory, "__qualname__", self._factory)
        yield "entries", self.entries
        yield "ignore_case", self._ignore_case
        yield "strict", self._strict
        yield "frozen", self._frozen


__all__ = (
    "Registry",
)
