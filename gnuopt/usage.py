r"""
gnuopt usage formatter.

Layout
- usage line, never wrapped:
      Usage: <program> [-hv] [--long-flag] [-c COUNT] [--name NAME] [parameters ...]
  • short flags are folded into one bracket, long-only flags follow,
  • value options use their short form when they have one,
  • optional arguments are bracketed once more: [-c [COUNT]].
- option listing, one entry per option in declaration order:
       -c, --count=COUNT    number of widgets
           --lazy=value     unspecified
       -n NUMBER            set n to NUMBER
       -v                   be verbose
  • help starts at min(longest left column + 2, options.column); a left column
    that does not fit puts its help on the next line,
  • help wraps at options.width, continuation lines indented to the help column.

Rendering
- render() returns plain text; print_usage() goes through rich, styled with the
  host's __styles__ when the set is colorful and inside a panel when fancy.
"""
import textwrap
from collections import defaultdict

from rich.panel import Panel
from rich.text import Text

PARAM = "value"
HELP = "unspecified"


def _param(option):
    return option.param or PARAM


def usage_line(options, /):
    """
    Return the single "Usage: ..." line of options (no trailing newline).
    """
    shorts = []
    longs = []
    values = []
    for option in options:
        if option.flag:
            if option.short is not None:
                shorts.append(option.short)
            else:
                longs.append("[--%s]" % option.long)
            continue
        name = "-" + option.short if option.short is not None else "--" + option.long
        param = "[%s]" % _param(option) if option.optional else _param(option)
        values.append("[%s %s]" % (name, param))

    parts = ["Usage:", options.program]
    if shorts:
        parts.append("[-%s]" % "".join(shorts))
    parts.extend(longs)
    parts.extend(values)
    if options.parameters:
        parts.append(options.parameters)
    return " ".join(parts)


def _left(option):
    if option.short is not None and option.long is not None:
        left = " -%s, --%s" % (option.short, option.long)
    elif option.short is not None:
        left = " -" + option.short
    else:
        left = "     --" + option.long

    if option.flag:
        return left
    if option.long is not None:
        return left + ("[=%s]" if option.optional else "=%s") % _param(option)
    return left + (" [%s]" if option.optional else " %s") % _param(option)


def option_lines(options, /):
    """
    Return the aligned option listing, one list item per output line.
    """
    entries = [(_left(option), option.help or HELP) for option in options]
    if not entries:
        return []
    column = min(max(len(left) for left, _ in entries) + 2, options.column)
    span = max(options.width - column, 10)

    lines = []
    for left, help in entries:
        wrapped = textwrap.wrap(help, span) or [""]
        if len(left) + 1 > column:
            lines.append(left)
        else:
            lines.append(left.ljust(column) + wrapped.pop(0))
        lines.extend(" " * column + line for line in wrapped)
    return lines


def render(options, /):
    """
    Return the complete usage text: usage line, option listing, trailing newline.
    """
    return "\n".join([usage_line(options), *option_lines(options)]) + "\n"


def print_usage(options, /, *, console):
    main = __import__("__main__")

    styles = defaultdict(str, {
        "usage-label": "bold #FF4DA6",  # friendly pinky label
        "option-name": "bold #00E5FF",  # neon cyan switches
        "metavar": "italic #9CE19C",  # gentle green parameters
    } | getattr(main, "__styles__", {}))

    text = Text(render(options).rstrip("\n"))
    if options.colorful:
        text.highlight_regex(r"^Usage:", styles["usage-label"])
        text.highlight_regex(r"(?<![\w-])--?[^\s\[\]=,]+", styles["option-name"])
        text.highlight_regex(r"(?<==)[^\s\]]+|(?<=[\w-] )[A-Z][A-Z0-9_-]*\b", styles["metavar"])

    if options.fancy:
        console.print(Panel(text, title=options.program, title_align="left"))
    else:
        console.print(text, soft_wrap=True)


__all__ = (
    "usage_line",
    "option_lines",
    "render",
    "print_usage",
)
