"""
gnuopt internal helpers.

- Unset: "argument not given" marker, distinct from None (None is a meaningful
  value for option names and groups).
- coalesce(): swap Unset for a default.
- mirror(): read-only property over a private "_name" attribute; containers are
  handed out as copies so the registry state cannot be edited from outside.
- caller(): "file:line" of the code that called into the package, recorded on
  every declaration.
"""
import inspect
import os.path
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset singleton: falsey, printable, copy-stable.

    Supports "str | Unset" in isinstance checks.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __or__(self, other, /):
        return type(self) | other

    def __ror__(self, other, /):
        return other | type(self)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return default when object is Unset, object otherwise (None, 0 and "" included).
    """
    return object if object is not Unset else default


def rename(callable, name, /):
    """
    Give a generated callable a readable __name__/__qualname__.
    """
    callable.__qualname__ = callable.__name__ = name
    return callable


def _detach(object):
    if isinstance(object, Sequence) and not isinstance(object, str | tuple):
        return [_detach(item) for item in object]
    if isinstance(object, Mapping):
        return {key: _detach(item) for key, item in object.items()}
    if isinstance(object, Set):
        return set(object)
    return object


def mirror(name, /):
    """
    Property returning self._<name>; lists, dicts and sets come back as copies.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(rename(getter, name))


def caller():
    """
    Return "file:line" of the nearest frame outside this package ("<unknown>" if none).
    """
    package = os.path.dirname(os.path.abspath(__file__))
    frame = inspect.currentframe()
    try:
        while frame is not None:
            if os.path.dirname(os.path.abspath(frame.f_code.co_filename)) != package:
                return "%s:%d" % (frame.f_code.co_filename, frame.f_lineno)
            frame = frame.f_back
        return "<unknown>"
    finally:
        del frame


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "caller",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
