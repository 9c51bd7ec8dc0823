"""
Field binders: how a converted value reaches the destination object.

A binder pairs the identity of a destination field (its name, used in faults and
diagnostics) with the act of assigning a value to that field on a given instance.

Builders
- field("path"):              setattr(target, "path", value)
- item("path"):               target["path"] = value   (mapping destinations)
- setter("path", callback):   callback(target, value)  (anything else)

Wherever the registry expects a binder, a plain string is accepted and means field(...).

Example
    >>> class Options:
    ...     path = None
    >>> options = Options()
    >>> field("path").assign(options, "a.txt")
    >>> options.path
    'a.txt'
"""
import operator

from .utils import mirror, rename


def _sanitize_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__name__.lower()} name must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__name__.lower()} name cannot be empty")
    return name


class FieldBinder:
    """
    Base binder: a named field plus an assignment callback.

    Subclasses only decide how the callback is built; assign() is shared.
    """

    name = mirror("name")

    def __init__(self, name, assign, /):
        if not callable(assign):
            raise TypeError(f"{type(self).__name__.lower()} callback must be callable")
        self._name = _sanitize_name(type(self), name)
        self._assign = assign

    def assign(self, target, value, /):
        self._assign(target, value)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        if self._name != other._name:
            return False
        # builder subclasses generate their callback from the name
        return type(self) is not FieldBinder or self._assign == other._assign

    def __hash__(self):
        return hash((type(self), self._name))

    def __repr__(self):
        return f"{type(self).__name__.lower()}({self._name!r})"

    def __rich_repr__(self):
        yield self._name


class AttributeBinder(FieldBinder):
    """Assign through setattr()."""

    def __init__(self, name, /):
        name = _sanitize_name(type(self), name)
        super().__init__(name, rename(lambda target, value: setattr(target, name, value), "assign"))


class ItemBinder(FieldBinder):
    """Assign through __setitem__ (dict-like destinations)."""

    def __init__(self, key, /):
        key = _sanitize_name(type(self), key)
        super().__init__(key, rename(lambda target, value: operator.setitem(target, key, value), "assign"))


def field(name, /):
    """Bind to an attribute of the destination object."""
    return AttributeBinder(name)


def item(key, /):
    """Bind to a key of a mapping destination."""
    return ItemBinder(key)


def setter(name, callback, /):
    """
    Bind through an arbitrary callback(target, value).

    The name is only used to identify the field in faults (e.g. MissingPositional).
    """
    return FieldBinder(name, callback)


def binder(object, /):
    """
    Normalize a binder-like object: a FieldBinder is returned as-is, a string
    becomes field(string).
    """
    if isinstance(object, FieldBinder):
        return object
    if isinstance(object, str):
        return field(object)
    raise TypeError("binder must be a field binder or an attribute name")


__all__ = (
    "FieldBinder",
    "AttributeBinder",
    "ItemBinder",
    "field",
    "item",
    "setter",
    "binder",
)
