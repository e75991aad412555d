"""
gnuopt value adapters.

Overview
- Value: the two-method contract every option value honours.
  • parse(text, option): apply raw command-line text; raise ValueError when the
    text is not acceptable. The option is passed for context (messages).
  • render(): the current value as text. The registry captures it at declaration
    time as the option's default, and the usage text shows it.
  • reset(text, option): restore a previously rendered value (defaults to parse).
  • flag: class attribute; True for adapters that take no argument. Flag adapters
    receive "" when the option is given without an explicit value.

- Stock adapters
  • Bool, String, Int, Float, Duration, List, Counter, Choice.

Contract
- parse(render()) reproduces the current value (round-trip idempotence).
- adapters are plain objects: the scanner mutates them in place, the caller reads
  .value afterwards.

Quick example:
    >>> verbose = Bool()
    >>> verbose.parse("", None)
    >>> verbose.value
    True
"""
import datetime
import enum
import re
from abc import ABC, abstractmethod

from .utils import Unset, coalesce


def _label(option):
    return getattr(option, "name", None) or "value"


class Value(ABC):
    """
    Abstract base of all value adapters.

    Subclasses set .value in parse() and format it back in render(). Third
    party adapters do not have to inherit from Value; any object exposing
    parse/render (and optionally flag/reset) is accepted by the registry.
    """
    flag = False

    def __init__(self, value=Unset, /):
        self.value = coalesce(value, self.initial())

    def initial(self):
        return None

    @abstractmethod
    def parse(self, text, option=None, /):
        ...

    @abstractmethod
    def render(self):
        ...

    def reset(self, text, option=None, /):
        self.parse(text, option)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.value)


class Bool(Value):
    flag = True

    def initial(self):
        return False

    def parse(self, text, option=None, /):
        match text.lower():
            case "" | "1" | "true" | "on" | "t":
                self.value = True
            case "0" | "false" | "off" | "f":
                self.value = False
            case _:
                raise ValueError("invalid value for bool %s: %r" % (_label(option), text))

    def render(self):
        return "true" if self.value else "false"


class String(Value):
    def initial(self):
        return ""

    def parse(self, text, option=None, /):
        self.value = text

    def render(self):
        return self.value


class Int(Value):
    def initial(self):
        return 0

    def parse(self, text, option=None, /):
        # Base prefixes (0x, 0o, 0b) are honoured; plain leading zeros stay decimal.
        try:
            self.value = int(text, 0)
        except ValueError:
            self.value = int(text, 10)

    def render(self):
        return str(self.value)


class Float(Value):
    def initial(self):
        return 0.0

    def parse(self, text, option=None, /):
        self.value = float(text)

    def render(self):
        return repr(self.value)


_UNITS = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}


def _fraction(whole, remainder, digits):
    if not remainder:
        return str(whole)
    return "%d.%s" % (whole, ("%0*d" % (digits, remainder)).rstrip("0"))


class Duration(Value):
    """
    datetime.timedelta adapter.

    Accepted text: unit-suffixed components ("1h30m", "1.5s", "250ms", "10us"),
    an optional leading sign, or a bare number of seconds ("90", "0.5").
    Rendering follows the same compact form ("1h30m0s", "250ms", "0s").
    """

    def initial(self):
        return datetime.timedelta()

    def parse(self, text, option=None, /):
        text = text.strip()
        if re.fullmatch(r"[-+]?(\d+(\.\d*)?|\.\d+)", text):
            self.value = datetime.timedelta(seconds=float(text))
            return
        if not re.fullmatch(r"[-+]?((\d+(\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h))+", text):
            raise ValueError("invalid duration for %s: %r" % (_label(option), text))
        total = 0.0
        for number, unit in re.findall(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)", text):
            total += float(number) * _UNITS[unit]
        self.value = datetime.timedelta(microseconds=round(-total if text.startswith("-") else total))

    def render(self):
        micros = (self.value.days * 86_400 + self.value.seconds) * 1_000_000 + self.value.microseconds
        if not micros:
            return "0s"
        sign = "-" if micros < 0 else ""
        micros = abs(micros)
        if micros < 1_000:
            return "%s%dus" % (sign, micros)
        if micros < 1_000_000:
            return "%s%sms" % (sign, _fraction(micros // 1_000, micros % 1_000, 3))
        hours, micros = divmod(micros, 3_600_000_000)
        minutes, micros = divmod(micros, 60_000_000)
        seconds = _fraction(micros // 1_000_000, micros % 1_000_000, 6) + "s"
        if hours:
            return "%s%dh%dm%s" % (sign, hours, minutes, seconds)
        if minutes:
            return "%s%dm%s" % (sign, minutes, seconds)
        return sign + seconds


class List(Value):
    """
    Comma separated list of strings. The first occurrence on the command line
    replaces the declared default, later ones append.
    """

    def initial(self):
        return []

    def parse(self, text, option=None, /):
        if option is not None and not getattr(option, "count", 1):
            self.value = []
        if text:
            self.value.extend(text.split(","))

    def reset(self, text, option=None, /):
        self.value = []
        self.parse(text, option)

    def render(self):
        return ",".join(self.value)


class Counter(Value):
    """
    Counts occurrences (-vvv); an explicit number sets the counter.
    """
    flag = True

    def initial(self):
        return 0

    def parse(self, text, option=None, /):
        if not text:
            self.value += 1
            return
        try:
            self.value = int(text, 10)
        except ValueError:
            raise ValueError("invalid count for %s: %r" % (_label(option), text)) from None

    def reset(self, text, option=None, /):
        self.value = int(text, 10) if text else 0

    def render(self):
        return str(self.value)


class Choice(Value):
    """
    One of a fixed set of choices: the members of an enum.Enum subclass
    (matched by name, case-insensitively) or a collection of strings.
    """

    def __init__(self, choices, value=Unset, /):
        if isinstance(choices, type) and issubclass(choices, enum.Enum):
            self._enum = choices
            self._choices = tuple(member.name for member in choices)
        else:
            self._enum = None
            self._choices = tuple(choices)
        if not self._choices:
            raise ValueError("Choice() requires at least one choice")
        super().__init__(value)

    @property
    def choices(self):
        return self._choices

    def initial(self):
        return self._enum[self._choices[0]] if self._enum is not None else self._choices[0]

    def parse(self, text, option=None, /):
        if self._enum is not None:
            for name in self._choices:
                if name.lower() == text.lower():
                    self.value = self._enum[name]
                    return
        elif text in self._choices:
            self.value = text
            return
        raise ValueError("%s must be one of %s, got %r" % (_label(option), ", ".join(self._choices), text))

    def render(self):
        return self.value.name if self._enum is not None else self.value


__all__ = (
    "Value",
    "Bool",
    "String",
    "Int",
    "Float",
    "Duration",
    "List",
    "Counter",
    "Choice",
)
