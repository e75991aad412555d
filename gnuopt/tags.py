r"""
gnuopt tag mini-language.

A tag is the annotation string attached to a record field; it declares the
option generated for that field.

Syntax
    [--option[=PARAM]] [-o[=PARAM]] [-|--] description

- Option tokens come first, separated by white space: one long name ("--name"),
  one short name ("-n"), in any order. Either may carry "=PARAM", the display
  name of the argument in the usage text (at most one PARAM per tag).
- The description is everything after the option tokens. An empty token ("-" or
  "--") ends the option tokens explicitly, so the description itself may start
  with a dash: "-v -- -v means verbose".
- An empty (or white space only) tag means "no declaration": the caller derives
  one from the field name instead (see Tag.derive).

Examples
    "--name=NAME -n sets the name to NAME"
    "-n=NAME        sets the name to NAME"
    "--name         sets the name"

Faults
- TagSyntaxError for: two long names, two short names, a short name longer than
  one character, two parameter names, "---" prefixes, and descriptions or
  parameters without any option name.
"""
import collections
import re

from .faults import FaultCode, TagSyntaxError


class Tag(collections.namedtuple("Tag", ("long", "short", "param", "help"), defaults=(None, None, None, None))):
    """
    Structured result of parse_tag(): long name, short name, parameter display
    name and help text. Absent parts are None.
    """
    __slots__ = ()

    @classmethod
    def derive(cls, identifier, /):
        """
        Build the declaration used when a field carries no tag.

        A single letter identifier becomes a short name, anything else a long
        name; both are lower-cased and underscores become dashes.
            Name -> --name, N -> -n, dry_run -> --dry-run
        """
        name = identifier.lower().replace("_", "-")
        if len(name) == 1:
            return cls(short=name)
        return cls(long=name)


def _next_option(text):
    """
    split the next option token off text.

    returns (option, param, rest): option is "" when text does not start with a
    dash, param is "" when the token carries no "=PARAM".
    """
    if not text.startswith("-"):
        return "", "", text
    token, *rest = re.split(r"\s+", text, maxsplit=1)
    option, _, param = token.partition("=")
    return option, param, "".join(rest).strip()


def _prefix(option):
    return option[:len(option) - len(option.lstrip("-"))]


def _fault(reason, tag):
    return TagSyntaxError("tag %s: %r" % (reason, tag), title="malformed tag", code=FaultCode.TAG_SYNTAX, tag=tag)


def parse_tag(text, /):
    """
    Parse one tag into a Tag, or return None when it declares nothing.

    Raises TagSyntaxError when the tag is malformed (see module docs).
    """
    if not isinstance(text, str):
        raise TypeError("parse_tag() argument must be a string")
    tag = text.strip()
    if not tag:
        return None

    long = short = param = None
    rest = tag
    while True:
        option, value, rest = _next_option(rest)
        if option in ("", "-", "--"):
            if value:
                # only happens with "--=FOO" or "-=FOO"
                raise _fault("missing option name", tag)
            if long is None and short is None:
                if rest:
                    raise _fault("missing option name", tag)
                return None
            return Tag(long, short, param, rest or None)

        if value:
            if param is not None:
                raise _fault("has multiple parameter names", tag)
            param = value

        match _prefix(option):
            case "-":
                if short is not None:
                    raise _fault("has too many short names", tag)
                if len(option) != 2:
                    raise _fault("has invalid short name", tag)
                short = option[1]
            case "--":
                if long is not None:
                    raise _fault("has too many long names", tag)
                long = option[2:]
            case _:
                raise _fault("must not start with ---", tag)


__all__ = (
    "Tag",
    "parse_tag",
)
