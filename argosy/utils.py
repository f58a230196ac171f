"""
Argosy utilities shared by the options, config, schema, and parser modules.

- Unset: the "no argument given" marker for keyword defaults where None is a
  legitimate value (an OptionSpec without a callback stores None, but the
  constructor must still tell "no callback" from "callback=None").
- coalesce(value, default): Unset → default, anything else untouched.
- rename(name): decorator pinning __name__/__qualname__ on generated methods.
- mirror(name): read-only property over the "_name" backing slot.
- ordinal(n): position labels for fault messages ("first", ..., "11th").

    >>> coalesce(Unset, 0), coalesce("", 0)
    (0, '')
    >>> ordinal(2), ordinal(23)
    ('second', '23rd')
"""
import functools
from typing import final

_ORDINALS = (
    "first",
    "second",
    "third",
    "fourth",
    "fifth",
    "sixth",
    "seventh",
    "eighth",
    "ninth",
    "tenth",
)


@final
class UnsetType:
    """
    Type of the Unset marker; one instance per process, always falsy.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


def coalesce(object, default=None, /):
    """
    Return default when object is Unset, object otherwise (None, 0, "" kept).
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator: give the decorated callable a stable name for reprs and tracebacks.

    raises TypeError for a non-string name, a non-callable target, or a
    callable whose names are read-only (e.g., built-ins).
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("rename() must decorate a callable")
        try:
            function.__name__ = function.__qualname__ = name
        except (AttributeError, TypeError):
            raise TypeError("rename() cannot rename %r" % function) from None
        return function

    return decorator


def mirror(name, /):
    """
    Property reading self._<name>; lists come back as tuples so the backing
    storage of a sealed object cannot be mutated through it.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        value = getattr(self, "_" + name)
        return tuple(value) if isinstance(value, list) else value

    return property(getter)


@functools.cache
def ordinal(number, /):
    """
    Position label for a 1-based token index: words up to ten, then 11th, 21st, 102nd...
    """
    if 1 <= number <= len(_ORDINALS):
        return _ORDINALS[number - 1]
    if 10 < number % 100 < 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "UnsetType",
    "Unset",
)
