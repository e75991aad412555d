r"""
gnuopt scanning engine (GNU getopt_long compatible).

scan(options, tokens, callback) walks the argument vector (program name
excluded) left to right and applies every option it meets to its adapter.

Rules
- "--" alone ends option scanning; every later token is positional.
- "--name[=value]" is a long option. An exact name wins, otherwise a prefix
  matching exactly one declared long name is accepted ("--verb" for
  "--verbose"); several matches are ambiguous, none is unknown.
  • flags take an optional "=value" (Bool reads "--verbose=false"),
  • value options take "=value", else their default text when the argument is
    optional, else the next token.
- "-abc" is a cluster of short options, matched exactly. Flags apply and the
  scan moves to the next character; a value option takes the rest of the token
  ("-ofile", "-o=file"), else its default text when optional, else the next
  token, and ends the cluster.
- Anything else ("file", "-") is positional. With permute (GNU) scanning goes
  on; without it (POSIX) the first positional ends option scanning.

State
- the returned State tells why scanning ended (see State).

Faults (raised, never recovered from)
- UnknownOptionError, AmbiguousOptionError, MissingArgumentError,
  InvalidValueError (adapter raised ValueError; chained).
"""
import enum
from collections import deque

from .faults import *
from .utils import Unset


class State(enum.Enum):
    """
    Why the last scan of an OptionSet ended.
    """
    UNKNOWN = "unknown"  # never parsed
    IN_PROGRESS = "in progress"
    DASH_DASH = "dash dash"  # "--" seen
    END_OF_OPTIONS = "end of options"  # first positional in POSIX mode
    END_OF_ARGUMENTS = "end of arguments"  # vector exhausted
    TERMINATED = "terminated"  # callback returned False
    FAILURE = "failure"


def _resolve(options, name, input):
    if not name:
        raise UnknownOptionError(
            "%s: unknown option: %s" % (options.program, input),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            program=options.program,
            input=input,
        )
    longs = options.longs
    if (option := longs.get(name)) is not None:
        return option
    candidates = [long for long in longs if long.startswith(name)]
    if len(candidates) == 1:
        return longs[candidates[0]]
    if candidates:
        raise AmbiguousOptionError(
            "%s: ambiguous option --%s matches %s" % (
                options.program, name, ", ".join("--" + candidate for candidate in candidates)
            ),
            title="ambiguous option",
            code=FaultCode.AMBIGUOUS_OPTION,
            program=options.program,
            input="--" + name,
            candidates=tuple(candidates),
            hint="spell out more of the option name",
        )
    raise UnknownOptionError(
        "%s: unknown option: --%s" % (options.program, name),
        title="unknown option",
        code=FaultCode.UNKNOWN_OPTION,
        program=options.program,
        input="--" + name,
    )


def _missing(options, option, input):
    return MissingArgumentError(
        "%s: missing argument for option %s" % (options.program, input),
        title="missing argument",
        code=FaultCode.MISSING_ARGUMENT,
        program=options.program,
        option=option,
        input=input,
        hint="pass a value after %s" % input,
    )


def _apply(options, option, text, input, callback):
    """
    apply text to option; True when the callback asks to stop scanning.
    """
    try:
        option._apply(text)
    except ValueError as exception:
        raise InvalidValueError(
            "%s: invalid value for option %s: %s" % (options.program, input, text),
            title="invalid value",
            code=FaultCode.INVALID_VALUE,
            program=options.program,
            option=option,
            input=input,
            cause=exception,
            hint=str(exception),
        ) from exception
    return callback is not Unset and callback(option) is False


def _scan_long(options, token, tokens, callback):
    name, separator, text = token[2:].partition("=")
    option = _resolve(options, name, token)
    input = "--" + option.long

    if option.flag:
        text = text if separator else ""
    elif separator:
        pass
    elif option.optional:
        text = option.default
    elif tokens:
        text = tokens.popleft()
    else:
        raise _missing(options, option, input)

    return _apply(options, option, text, input, callback)


def _scan_short(options, token, tokens, callback):
    cluster, separator, inline = token[1:].partition("=")
    if not cluster:
        raise UnknownOptionError(
            "%s: unknown option: %s" % (options.program, token),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            program=options.program,
            input=token,
        )

    for index, char in enumerate(cluster):
        input = "-" + char
        if (option := options.shorts.get(char)) is None:
            raise UnknownOptionError(
                "%s: unknown option: %s" % (options.program, input),
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                program=options.program,
                input=input,
            )
        rest = cluster[index + 1:]

        if option.flag:
            # a split "=value" belongs to the last character of the cluster
            text = inline if separator and not rest else ""
            if _apply(options, option, text, input, callback):
                if rest:
                    tokens.appendleft("-" + rest + separator + inline)
                return True
            continue

        if rest:
            text = token[index + 2:]
        elif separator:
            text = inline
        elif option.optional:
            text = option.default
        elif tokens:
            text = tokens.popleft()
        else:
            raise _missing(options, option, input)
        return _apply(options, option, text, input, callback)

    return False


def scan(options, tokens, callback=Unset, /):
    """
    Scan tokens (program name excluded) against options.

    Returns
    - (arguments, state): the positional arguments in order and the State that
      ended the scan.
    """
    tokens = deque(tokens)
    arguments = []

    while tokens:
        token = tokens.popleft()

        if token == "--":
            arguments.extend(tokens)
            return arguments, State.DASH_DASH

        if token.startswith("--"):
            stop = _scan_long(options, token, tokens, callback)
        elif token.startswith("-") and len(token) > 1:
            stop = _scan_short(options, token, tokens, callback)
        else:
            arguments.append(token)
            if not options.permute:
                arguments.extend(tokens)
                return arguments, State.END_OF_OPTIONS
            continue

        if stop:
            arguments.extend(tokens)
            return arguments, State.TERMINATED

    return arguments, State.END_OF_ARGUMENTS


__all__ = (
    "State",
    "scan",
)
