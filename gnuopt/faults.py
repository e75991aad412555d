"""
gnuopt faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the library
  can surface. Codes are grouped by tier so logs and searches stay predictable.
- GetoptException: base type carrying the message plus a read-only options
  mapping; knows how to render itself with rich and how to trigger itself.
- DeclarationError / ParseError: the two tiers.
  • declaration faults are integrator bugs (duplicate names, bad tags, ...).
  • parse faults are ordinary bad user input (unknown option, missing value, ...).
- trigger(): central entry point to surface any fault (respecting shell/colorful/fancy).

Message contract
- str(fault) is the literal single-line message. Parse faults are prefixed with
  "<program>: ", declaration faults with the declaration site ("file:line: ").
  Callers and tests match on these strings, so they never carry styling.

Integration
- Outside shell mode faults are raised; in shell mode they are rendered via rich
  on stderr (optionally followed by the usage text) and the process exits with 1.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True, highlight=False)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by tier)
    - declaration (110xx)
      • DUPLICATE_OPTION, NAMELESS_OPTION, INVALID_NAME, TAG_SYNTAX,
        UNSUPPORTED_FIELD, UNKNOWN_GROUP
    - scanning (111xx)
      • UNKNOWN_OPTION, AMBIGUOUS_OPTION, MISSING_ARGUMENT, INVALID_VALUE
    - validation (112xx)
      • MANDATORY_OPTION, EXCLUSIVE_OPTIONS, REQUIRED_GROUP
    """
    # --- declaration faults (110xx) ---
    DUPLICATE_OPTION  = 11001
    NAMELESS_OPTION   = 11002
    INVALID_NAME      = 11003
    TAG_SYNTAX        = 11004
    UNSUPPORTED_FIELD = 11005
    UNKNOWN_GROUP     = 11006

    # --- scanning faults (111xx) ---
    UNKNOWN_OPTION    = 11111
    AMBIGUOUS_OPTION  = 11112
    MISSING_ARGUMENT  = 11113
    INVALID_VALUE     = 11114

    # --- validation faults (112xx) ---
    MANDATORY_OPTION  = 11201
    EXCLUSIVE_OPTIONS = 11202
    REQUIRED_GROUP    = 11203

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class GetoptException(Exception):
    """
    base class of every gnuopt fault.

    options (all optional, merged in by trigger())
    - code: FaultCode, title: str, hint: str
    - program: str, option: the Option involved (if any), input: the raw token
    - shell/colorful/fancy: rendering switches
    - cause: exception the fault is chained from (adapter failures)
    - usage: callable returning the usage text printed after the fault in shell mode
    - console: rich console used in shell mode (defaults to stderr)
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message if message is not Unset else "")
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        message = text(str(self), "error-message")

        if not self.options.get("fancy", False):
            return message

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(code.normalize() if code is not None else "fault", "code"),
            " | ",
            text(str(self.options.get("title", "error")).title(), "error-title"),
            " ]"
        )
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        return Panel(Group(*renders), title=header, title_align="left")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from self.options.get("cause")
        output = self.options.get("console", console)
        output.print(self)
        if usage := self.options.get("usage"):
            output.print(Text(usage().rstrip("\n")))
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeclarationError(GetoptException): ...
class DuplicateOptionError(DeclarationError): ...
class NamelessOptionError(DeclarationError): ...
class InvalidNameError(DeclarationError): ...
class TagSyntaxError(DeclarationError): ...
class UnsupportedFieldError(DeclarationError): ...
class UnknownGroupError(DeclarationError): ...


class ParseError(GetoptException): ...
class UnknownOptionError(ParseError): ...
class AmbiguousOptionError(ParseError): ...
class MissingArgumentError(ParseError): ...
class InvalidValueError(ParseError): ...
class MandatoryOptionError(ParseError): ...
class ExclusiveOptionsError(ParseError): ...
class RequiredGroupError(ParseError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see GetoptException).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode the fault is printed and the process exits; otherwise it is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "GetoptException",
    "DeclarationError",
    "DuplicateOptionError",
    "NamelessOptionError",
    "InvalidNameError",
    "TagSyntaxError",
    "UnsupportedFieldError",
    "UnknownGroupError",
    "ParseError",
    "UnknownOptionError",
    "AmbiguousOptionError",
    "MissingArgumentError",
    "InvalidValueError",
    "MandatoryOptionError",
    "ExclusiveOptionsError",
    "RequiredGroupError",
    "trigger",
)
