"""
Argline help: render option configurations as aligned help text.

Titles
- every non-empty name is written as -x (one character) or --name, joined by
  ", ". empty names keep their slot so related options line up:
  • before the first name, each empty slot shifts the title right by 4 columns;
  • between names, each empty slot widens the gap by 4 columns (2 when it is
    the last name).
- a configuration without names is titled by its store key.
- arg_in_help, when set, follows the names after one space.

    >>> make_opt_title(OptCfg(names=["", "f", "", "b", ""]))
    (4, '-f,     -b')

Columns
- make_opts_help(cfgs) computes the description column as the widest title
  plus 2 and returns it alongside the entries.
- make_opts_help(cfgs, indent=n) uses column n; a title too wide for it pushes
  the description onto the next line, indented by n.
- widths are measured in terminal cells (rich.cells.cell_len), so wide
  characters count double.

Help
- accumulates free text blocks and option blocks, each with its own left
  margin, and prints them line by line through a rich console.
"""
from rich.cells import cell_len
from rich.console import Console

from .configs import ANY_OPT, OptCfg
from .utils import Unset


def _dashed(name):
    return ("-" if len(name) == 1 else "--") + name


def make_opt_title(cfg, /):
    """return (first_indent, title) for one configuration."""
    if not isinstance(cfg, OptCfg):
        raise TypeError("make_opt_title() argument must be an OptCfg")

    head_spaces = 0
    last_spaces = 0
    title = ""
    names = cfg.names

    def append(name):
        nonlocal title, last_spaces
        if last_spaces > 0:
            title += "," + " " * (last_spaces - 1)
        last_spaces = 0
        title += _dashed(name)

    for index, name in enumerate(names):
        last = index == len(names) - 1
        if not name:
            if not title:
                head_spaces += 4
            else:
                last_spaces += 2 if last else 4
            continue
        append(name)
        if not last:
            last_spaces += 2

    if not any(names) and cfg.store_key:
        append(cfg.store_key)

    if cfg.arg_in_help:
        title += " " + cfg.arg_in_help

    return head_spaces, title


def make_opts_help(cfgs, /, indent=0):
    """
    render option configurations into (first_indent, text) entries.

    returns (entries, indent) where indent is the description column actually
    used: the given one, or the computed one when indent is 0. ignored and
    wildcard configurations produce no entry.
    """
    if not isinstance(indent, int) or indent < 0:
        raise ValueError("make_opts_help() indent must be a non-negative integer")

    titled = []
    for cfg in cfgs:
        key = cfg.effective_key
        if not key or key == ANY_OPT:
            continue
        first_indent, title = make_opt_title(cfg)
        titled.append((cfg, first_indent, title, first_indent + cell_len(title)))

    if indent == 0:
        indent = max((width for *_, width in titled), default=0) + 2

    entries = []
    for cfg, first_indent, title, width in titled:
        if cfg.desc:
            if width + 2 > indent:
                title += "\n" + " " * indent + cfg.desc
            else:
                title += " " * (indent - width) + cfg.desc
        entries.append((first_indent, title))

    return entries, indent


class Help:
    """
    a help text made of blocks, printed without wrapping.

        help = Help()
        help.add_text("Usage: app [options...] <file>")
        help.add_opts(cfgs, margin_left=2)
        help.print()
    """

    def __init__(self, *, margin_left=0):
        if not isinstance(margin_left, int) or margin_left < 0:
            raise ValueError("Help() margin_left must be a non-negative integer")
        self._margin_left = margin_left
        self._blocks = []

    def add_text(self, text, /, *, margin_left=0):
        """append a free text block; embedded newlines start new lines."""
        if not isinstance(text, str):
            raise TypeError("add_text() argument must be a string")
        self._blocks.append((margin_left, text.split("\n")))

    def add_opts(self, cfgs, /, *, indent=0, margin_left=0):
        """
        append an option block rendered by make_opts_help().

        returns the description column used, so following blocks can be
        aligned with it.
        """
        entries, indent = make_opts_help(cfgs, indent)
        lines = []
        for first_indent, text in entries:
            first, *rest = text.split("\n")
            lines.append(" " * first_indent + first)
            lines.extend(rest)
        self._blocks.append((margin_left, lines))
        return indent

    def lines(self):
        """yield the help text line by line."""
        for margin_left, lines in self._blocks:
            margin = " " * (self._margin_left + margin_left)
            for line in lines:
                yield margin + line if line else ""

    def __iter__(self):
        return self.lines()

    def __str__(self):
        return "\n".join(self.lines())

    def print(self, *, console=Unset):
        """print the help text on a rich console (stdout by default)."""
        console = Console() if console is Unset else console
        for line in self.lines():
            console.out(line, highlight=False)


__all__ = (
    "make_opt_title",
    "make_opts_help",
    "Help",
)
