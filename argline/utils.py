"""
Argline utilities shared by the schema, invocation, binding and help layers.

- Unset          "not provided" sentinel, for parameters where None is meaningful
                 (OptCfg(defaults=None) means "no defaults").
- coalesce()     resolve Unset to a fallback, keeping every other value.
- rename()       stable __name__/__qualname__ for generated callables, so
                 validators show up as validate_i8 rather than validator.
- mirror()       read-only property over "_<name>" returning a snapshot of
                 container values.

    >>> coalesce(Unset, "app"), coalesce(None, "app")
    ('app', None)
    >>> class Cfg:
    ...     _names = ("f", "foo")
    ...     names = mirror("names")
    >>> Cfg().names
    ['f', 'foo']
"""
import functools
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """type of the Unset singleton; falsey, not subclassable."""

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """object, or default when object is Unset."""
    return default if object is Unset else object


def rename(target, name=Unset, /):
    """
    rename(callable, name) renames the callable in place and returns it;
    rename(name) returns a decorator doing the same.
    """
    if name is Unset:
        if not isinstance(target, str):
            raise TypeError("@rename() argument must be a string")
        return functools.partial(_rename, name=target)
    return _rename(target, name=name)


def _rename(target, /, *, name):
    if not callable(target):
        raise TypeError("rename() target must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    try:
        target.__name__ = target.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() target does not accept a new name") from None
    return target


def _snapshot(value):
    # strings are sequences too, and must stay as they are
    match value:
        case str():
            return value
        case Mapping():
            return {key: _snapshot(item) for key, item in value.items()}
        case Sequence():
            return [_snapshot(item) for item in value]
        case Set():
            return set(value)
        case _:
            return value


def mirror(name, /):
    """read-only property exposing a snapshot of self._<name>."""
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    attribute = "_" + name

    def getter(self):
        return _snapshot(getattr(self, attribute))

    return property(rename(getter, name))


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
)
