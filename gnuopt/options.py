r"""
gnuopt option registry.

Overview
- Option: one declared switch. It binds a short name ("-v"), a long name
  ("--verbose") or both to a value adapter (see gnuopt.values) and carries the
  presentation (help, param) and constraint (mandatory, group) metadata, plus
  the per-parse state (seen, count).
- OptionSet: the ordered registry of options. It owns the name uniqueness
  invariants, group membership, the program name used to prefix messages, and
  the entry points that scan an argument vector (getopt/parse) and render
  usage text (usage/print_usage).

Lifecycle
- Declarations run at program initialization; the registry's shape is fixed
  once parsing starts. A parse mutates the adapters and the seen/count state in
  place, so parsing the same set twice carries state over: use duplicate() (or
  gnuopt.records.register_new) to get an independent copy per parse.

Faults
- Declaration faults (duplicate names, nameless options, malformed names) are
  integrator bugs and are surfaced through trigger(): raised by default, printed
  followed by sys.exit(1) when the set runs in shell mode.
- Parse faults are always raised by getopt(); parse() is the terminating wrapper
  that prints the fault and the usage text in shell mode.

Quick example:
    >>> from gnuopt import OptionSet, Bool, Int
    >>> options = OptionSet("tool")
    >>> verbose = options.declare("v", "verbose", Bool(), help="be verbose")
    >>> count = options.declare("c", "count", Int(1), help="number of widgets", param="COUNT")
    >>> options.getopt(["tool", "-vc3", "file"])
    ['file']
    >>> count.value.value
    3
"""
import copy
import os.path
import sys
from types import MappingProxyType

from rich.console import Console

from . import usage
from .faults import *
from .parser import State, scan
from .utils import *
from .validator import validate


class Option:
    """
    One declared option.

    Options are created by OptionSet.declare(); they are not meant to be built
    directly. The names listed in __introspectable__ are exposed as read-only
    properties, mutators return the option itself so they can be chained:

        options.declare("r", Unset, Bool()).set_mandatory()
    """

    __introspectable__ = (
        "short",
        "long",
        "value",
        "flag",
        "optional",
        "default",
        "help",
        "param",
        "mandatory",
        "group",
        "seen",
        "count",
        "declared",
    )

    short = mirror("short")
    long = mirror("long")
    value = mirror("value")
    flag = mirror("flag")
    optional = mirror("optional")
    default = mirror("default")
    help = mirror("help")
    param = mirror("param")
    mandatory = mirror("mandatory")
    group = mirror("group")
    seen = mirror("seen")
    count = mirror("count")
    declared = mirror("declared")

    def __init__(self, owner, index, short, long, value, help, param, declared):
        self._owner = owner
        self._index = index
        self._short = short
        self._long = long
        self._value = value
        self._flag = bool(getattr(value, "flag", False))
        self._optional = False
        self._default = value.render()
        self._help = help
        self._param = param
        self._mandatory = False
        self._group = None
        self._seen = False
        self._count = 0
        self._declared = declared

    @property
    def name(self):
        """
        Display name used in messages: "--long" when a long name exists, else "-s".
        """
        if self._long is not None:
            return "--" + self._long
        return "-" + self._short

    def set_flag(self):
        """
        Mark the option as taking no argument.
        """
        self._flag = True
        return self

    def set_optional(self):
        """
        Mark the argument as optional: when omitted, the adapter receives the
        default text instead of the next command-line token.
        """
        self._optional = True
        return self

    def set_mandatory(self):
        self._mandatory = True
        return self

    def set_group(self, group, /):
        """
        Make the option a member of group (None removes it from its group).
        Members of a group are mutually exclusive.
        """
        self._owner._assign(self, group)
        return self

    def reset(self):
        """
        Restore the declared default into the adapter and forget it was seen.
        """
        if callable(reset := getattr(self._value, "reset", None)):
            reset(self._default, self)
        else:
            self._value.parse(self._default, self)
        self._seen = False
        self._count = 0

    def _apply(self, text):
        self._value.parse(text, self)
        self._seen = True
        self._count += 1

    def __repr__(self):
        return "option(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        for name in ("short", "long", "value", "flag", "optional", "help", "param", "mandatory", "group", "seen"):
            yield name, getattr(self, name)


def _sanitize_short(short, site):
    if short is Unset or short is None or short == "":
        return None
    if not isinstance(short, str):
        raise TypeError("option short name must be a string")
    if len(short) != 1 or short == "-" or short.isspace():
        raise InvalidNameError(
            "%s: invalid short option name %r" % (site, short),
            title="invalid option name",
            code=FaultCode.INVALID_NAME,
            hint="short names are a single character other than '-'",
        )
    return short


def _sanitize_long(long, site):
    if long is Unset or long is None or long == "":
        return None
    if not isinstance(long, str):
        raise TypeError("option long name must be a string")
    if long.startswith("-") or "=" in long or any(char.isspace() for char in long):
        raise InvalidNameError(
            "%s: invalid long option name %r" % (site, long),
            title="invalid option name",
            code=FaultCode.INVALID_NAME,
            hint="declare long names without leading dashes, '=' or spaces",
        )
    return long


class OptionSet:
    """
    Ordered registry of options plus the parse entry points.

    Configuration (keyword-only)
    - permute: GNU behaviour (True) lets options and positional arguments
      interleave; POSIX behaviour (False) stops option scanning at the first
      positional argument.
    - shell: faults are printed with rich and terminate the process instead of
      being raised (declaration faults and parse()).
    - colorful / fancy: rich styling and panels for printed faults and usage.
    - column: maximum column where help text starts in the option listing.
    - width: display width used to wrap help text.
    """

    def __init__(
            self,
            program=Unset,
            /,
            *,
            permute=True,
            shell=False,
            colorful=False,
            fancy=False,
            column=25,
            width=80,
    ):
        if not isinstance(program, str | UnsetType):
            raise TypeError("OptionSet() program must be a string")
        self._program = program
        self._parameters = "[parameters ...]"
        self._permute = bool(permute)
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._column = int(column)
        self._width = int(width)
        self._options = []
        self._shorts = {}
        self._longs = {}
        self._groups = {}
        self._required = {}
        self._arguments = []
        self._state = State.UNKNOWN

    permute = mirror("permute")
    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")
    column = mirror("column")
    width = mirror("width")
    parameters = mirror("parameters")
    arguments = mirror("arguments")
    state = mirror("state")

    @property
    def program(self):
        """
        Program name used to prefix parse messages.

        Falls back to the basename of sys.argv[0] until set_program() is called or
        getopt() sees an argument vector.
        """
        if self._program is not Unset:
            return self._program
        return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "program"

    def set_program(self, program, /):
        if not isinstance(program, str):
            raise TypeError("set_program() argument must be a string")
        self._program = program

    def set_parameters(self, parameters, /):
        """
        Set the description of the positional parameters shown at the end of the
        usage line (default "[parameters ...]"; "" hides it).
        """
        if not isinstance(parameters, str):
            raise TypeError("set_parameters() argument must be a string")
        self._parameters = parameters

    @property
    def shorts(self):
        return MappingProxyType(self._shorts)

    @property
    def longs(self):
        return MappingProxyType(self._longs)

    @property
    def groups(self):
        """
        group name -> members in declaration order.
        """
        return MappingProxyType({
            group: sorted(members, key=lambda option: option._index) for group, members in self._groups.items()
        })

    @property
    def required(self):
        return tuple(self._required)

    def declare(self, short, long, value, /, help=Unset, param=Unset):
        """
        Declare an option and return it.

        Parameters
        - short: single character, or Unset/None/"" for none.
        - long: long name without dashes, or Unset/None/"" for none.
        - value: the adapter (parse/render contract, see gnuopt.values).
        - help: help text for the usage listing.
        - param: display name of the argument in the usage listing.

        Faults (declaration tier, surfaced through trigger)
        - NamelessOptionError: neither a short nor a long name.
        - InvalidNameError: malformed short/long name.
        - DuplicateOptionError: the short or long name is already declared.
        """
        site = caller()
        if not callable(getattr(value, "parse", None)) or not callable(getattr(value, "render", None)):
            raise TypeError("declare() value must provide parse() and render() methods")
        if not isinstance(help, str | UnsetType) or not isinstance(param, str | UnsetType):
            raise TypeError("declare() help and param must be strings")

        try:
            short = _sanitize_short(short, site)
            long = _sanitize_long(long, site)
        except InvalidNameError as fault:
            return self.trigger(fault)

        if short is None and long is None:
            return self.trigger(NamelessOptionError(
                "%s: no short or long option given" % site,
                title="nameless option",
                code=FaultCode.NAMELESS_OPTION,
                hint="give the option a short name, a long name, or both",
            ))
        if short is not None and (other := self._shorts.get(short)) is not None:
            return self.trigger(DuplicateOptionError(
                "%s: -%s already declared at %s" % (site, short, other.declared),
                title="duplicate option",
                code=FaultCode.DUPLICATE_OPTION,
                option=other,
                hint="every short name may be declared only once per option set",
            ))
        if long is not None and (other := self._longs.get(long)) is not None:
            return self.trigger(DuplicateOptionError(
                "%s: --%s already declared at %s" % (site, long, other.declared),
                title="duplicate option",
                code=FaultCode.DUPLICATE_OPTION,
                option=other,
                hint="every long name may be declared only once per option set",
            ))

        option = Option(self, len(self._options), short, long, value, coalesce(help), coalesce(param), site)
        self._options.append(option)
        if short is not None:
            self._shorts[short] = option
        if long is not None:
            self._longs[long] = option
        return option

    def _assign(self, option, group):
        if group is not None and not isinstance(group, str):
            raise TypeError("set_group() argument must be a string or None")
        if option._group is not None:
            self._groups[option._group].remove(option)
        option._group = group
        if group is not None:
            self._groups.setdefault(group, []).append(option)

    def require_group(self, group, /):
        """
        Require exactly one member of group to be set. Checked by the validator
        after scanning, so members may be assigned afterwards.
        """
        if not isinstance(group, str):
            raise TypeError("require_group() argument must be a string")
        self._required[group] = True

    def lookup(self, name, /):
        """
        Return the option declared as name ("v", "-v", "verbose", "--verbose") or None.
        """
        if not isinstance(name, str):
            raise TypeError("lookup() argument must be a string")
        if name.startswith("--"):
            return self._longs.get(name[2:])
        if name.startswith("-") and len(name) == 2:
            return self._shorts.get(name[1])
        if len(name) == 1:
            return self._shorts.get(name, self._longs.get(name))
        return self._longs.get(name)

    def is_set(self, name, /):
        """
        True when the option declared as name was seen by a parse.
        """
        return (option := self.lookup(name)) is not None and option.seen

    def visit_all(self, callback, /):
        """
        Call callback(option) for every option in declaration order.
        """
        for option in list(self._options):
            callback(option)

    def visit(self, callback, /):
        """
        Call callback(option) for every option seen by a parse, in declaration order.
        """
        for option in list(self._options):
            if option.seen:
                callback(option)

    def __iter__(self):
        return iter(list(self._options))

    def __len__(self):
        return len(self._options)

    @property
    def nargs(self):
        return len(self._arguments)

    def arg(self, index, /):
        """
        Positional argument number index of the last parse ("" when out of range).
        """
        try:
            return self._arguments[index]
        except IndexError:
            return ""

    def reset(self):
        """
        Reset every option to its default and forget the last parse.
        """
        for option in self._options:
            option.reset()
        self._arguments = []
        self._state = State.UNKNOWN

    def duplicate(self):
        """
        Return an independent copy: same declarations and configuration,
        deep-copied adapters, no parse state. Safe to parse concurrently with
        the original.
        """
        other = OptionSet(
            self._program,
            permute=self._permute,
            shell=self._shell,
            colorful=self._colorful,
            fancy=self._fancy,
            column=self._column,
            width=self._width,
        )
        other._parameters = self._parameters
        clones = {}
        for option in self._options:
            clone = copy.copy(option)
            clone._owner = other
            clone._value = copy.deepcopy(option._value)
            clone._seen = False
            clone._count = 0
            clones[option] = clone
            other._options.append(clone)
            if clone.short is not None:
                other._shorts[clone.short] = clone
            if clone.long is not None:
                other._longs[clone.long] = clone
        for group, members in self._groups.items():
            other._groups[group] = [clones[option] for option in members]
        other._required = dict(self._required)
        return other

    def trigger(self, fault, /, **options):
        """
        Surface fault with this set's program name and rendering switches.
        """
        return trigger(fault, **{
            "program": self.program,
            "shell": self._shell,
            "colorful": self._colorful,
            "fancy": self._fancy,
        } | options)

    def getopt(self, args=Unset, callback=Unset, /):
        """
        Scan args against the declared options and validate the result.

        Parameters
        - args: argument vector including the program name at index 0
          (sys.argv when Unset). The program name is adopted unless one was set.
        - callback: optional callback(option) run after each applied option;
          returning False stops scanning, leaving every following token
          positional and skipping validation.

        Returns
        - the positional arguments, in order (also kept in .arguments).

        Raises
        - ParseError subclasses: the first fault encountered.
        - UnknownGroupError when a required group has no members.
        """
        args = list(coalesce(args, sys.argv))
        if not all(isinstance(arg, str) for arg in args):
            raise TypeError("getopt() argument must be an iterable of strings")
        if self._program is Unset and args and args[0]:
            self._program = os.path.basename(args[0])

        self._arguments = []
        self._state = State.IN_PROGRESS
        try:
            self._arguments, self._state = scan(self, args[1:], callback)
            if self._state is not State.TERMINATED:
                validate(self)
        except GetoptException:
            self._state = State.FAILURE
            raise
        return list(self._arguments)

    def parse(self, args=Unset, /):
        """
        getopt() with the terminating convenience: in shell mode a fault is
        printed with the usage text on stderr and the process exits with 1.
        """
        try:
            return self.getopt(args)
        except ParseError as fault:
            return self.trigger(fault, usage=self.usage)

    def usage(self):
        """
        Return the usage text (usage line plus option listing).
        """
        return usage.render(self)

    def print_usage(self, *, stderr=False, console=Unset):
        usage.print_usage(self, console=coalesce(console, Console(stderr=stderr, highlight=False)))


__all__ = (
    "Option",
    "OptionSet",
)
