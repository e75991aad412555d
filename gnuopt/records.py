r"""
gnuopt record reflector.

A record is a dataclass instance whose fields become options. The declaration
of each field is read from its "getopt" metadata entry (see gnuopt.tags):

    @dataclasses.dataclass
    class Options:
        name: str = dataclasses.field(default="", metadata={"getopt": "--name=NAME name of the widget"})
        count: int = dataclasses.field(default=42, metadata={"getopt": "--count -c=COUNT number of widgets"})
        verbose: bool = dataclasses.field(default=False, metadata={"getopt": "-v be verbose"})
        lazy: str = ""  # derived: --lazy

Rules
- a "-" tag ignores the field; so does a leading underscore in its name.
- no (or an empty) tag derives the name from the field (Tag.derive).
- the adapter follows the annotation: bool, int, float, str, timedelta,
  list[str] and enum.Enum subclasses are understood, also as "X | None" (a
  None default then starts from the adapter's own). A field already holding
  a Value adapter is used as is. Anything else is an UnsupportedFieldError.
- every parsed value is written back to the record field.

Faults
- declaration faults are raised (TagSyntaxError prefixed with "Type.field: ").
- TypeError for anything that is not a mutable dataclass instance.
"""
import copy
import dataclasses
import datetime
import enum
import types
import typing

from .faults import *
from .options import OptionSet
from .tags import Tag, parse_tag
from .utils import Unset
from .values import Bool, Choice, Duration, Float, Int, List, String, Value

KEY = "getopt"


def _fields(record):
    if not dataclasses.is_dataclass(record) or isinstance(record, type):
        raise TypeError("expected a dataclass instance, got %s" % type(record).__name__)
    if type(record).__dataclass_params__.frozen:
        raise TypeError("%s is frozen and cannot receive parsed values" % type(record).__name__)
    for field in dataclasses.fields(record):
        tag = field.metadata.get(KEY, "")
        if tag == "-" or field.name.startswith("_"):
            continue
        yield field, tag


def _declaration(record, field, tag):
    try:
        declaration = parse_tag(tag)
    except TagSyntaxError as fault:
        raise TagSyntaxError(
            "%s.%s: %s" % (type(record).__name__, field.name, fault), **fault.options
        ) from fault
    return declaration if declaration is not None else Tag.derive(field.name)


def _unsupported(record, field, hint):
    return UnsupportedFieldError(
        "%s.%s: unsupported field type %s" % (type(record).__name__, field.name, getattr(hint, "__name__", hint)),
        title="unsupported field",
        code=FaultCode.UNSUPPORTED_FIELD,
        field=field.name,
        hint="use bool, int, float, str, timedelta, list[str], an Enum (optionally | None) or a Value adapter",
    )


def _adapter(record, field):
    current = getattr(record, field.name)
    if isinstance(current, Value):
        return current

    hint = typing.get_type_hints(type(record)).get(field.name, type(current))
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        # X | None reads as X; the None default falls back to the adapter's own
        members = [member for member in typing.get_args(hint) if member is not type(None)]
        if len(members) != 1:
            raise _unsupported(record, field, hint)
        hint, = members
    origin = typing.get_origin(hint) or hint
    current = Unset if current is None else current

    if origin is bool:
        return Bool(current)
    if isinstance(origin, type) and issubclass(origin, enum.Enum):
        return Choice(origin, current)
    if origin is int:
        return Int(current)
    if origin is float:
        return Float(current)
    if origin is str:
        return String(current)
    if origin is datetime.timedelta:
        return Duration(current)
    if origin is list and typing.get_args(hint) in ((), (str,)):
        return List(current)
    raise _unsupported(record, field, hint)


class _Binding(Value):
    """
    Adapter proxy writing every parsed value back to the record field.
    """

    def __init__(self, adapter, record, name):
        self._adapter = adapter
        self._record = record
        self._name = name

    @property
    def flag(self):
        return bool(getattr(self._adapter, "flag", False))

    @property
    def value(self):
        return self._adapter.value

    def parse(self, text, option=None, /):
        self._adapter.parse(text, option)
        setattr(self._record, self._name, self._adapter.value)

    def reset(self, text, option=None, /):
        if callable(reset := getattr(self._adapter, "reset", None)):
            reset(text, option)
        else:
            self._adapter.parse(text, option)
        setattr(self._record, self._name, self._adapter.value)

    def render(self):
        return self._adapter.render()

    def __repr__(self):
        return "%s.%s=%r" % (type(self._record).__name__, self._name, self._adapter)


def register(record, options, /):
    """
    Declare one option per eligible field of record on options.

    Returns the declared options, in field order.
    """
    declared = []
    for field, tag in _fields(record):
        declaration = _declaration(record, field, tag)
        adapter = _adapter(record, field)
        value = adapter if adapter is getattr(record, field.name) else _Binding(adapter, record, field.name)
        declared.append(options.declare(
            declaration.short,
            declaration.long,
            value,
            help=declaration.help if declaration.help is not None else Unset,
            param=declaration.param if declaration.param is not None else Unset,
        ))
    return declared


def validate(record, /):
    """
    Return the declaration fault record would raise on registration, or None.
    """
    try:
        register(record, OptionSet("validate"))
    except DeclarationError as fault:
        return fault
    return None


def duplicate(record, /):
    """
    Copy record: eligible fields are deep-copied, ignored fields shared.
    """
    eligible = [field for field, tag in _fields(record) if _declaration(record, field, tag) is not None]
    other = copy.copy(record)
    for field in eligible:
        setattr(other, field.name, copy.deepcopy(getattr(record, field.name)))
    return other


def register_new(record, program=Unset, /, **configuration):
    """
    Duplicate record and register the copy on a fresh OptionSet.

    Returns (copy, options). configuration is passed to OptionSet().
    """
    other = duplicate(record)
    options = OptionSet(program, **configuration)
    register(other, options)
    return other, options


def lookup(record, name, /):
    """
    Current value of the field declared as name ("o", "-o", "option", "--option").

    Returns None when no field matches or the record cannot be reflected.
    """
    name = name.lstrip("-")
    try:
        for field, tag in _fields(record):
            declaration = _declaration(record, field, tag)
            if name and name in (declaration.long, declaration.short):
                current = getattr(record, field.name)
                return current.value if isinstance(current, Value) else current
    except (DeclarationError, TypeError):
        return None
    return None


__all__ = (
    "register",
    "validate",
    "duplicate",
    "register_new",
    "lookup",
)
