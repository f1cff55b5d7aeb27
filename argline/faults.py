"""
Argline faults (parse errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every error the library raises,
  grouped by family so logs and searches stay predictable.
- ArglineError: base type carrying a message plus a read-only mapping of
  structured fields (option, store_key, opt_arg, ...), able to render itself
  through rich.
- Three closed families:
  • InvalidOsArg   the argument vector could not be decoded at the process boundary.
  • InvalidOption  an option in the input was misused (unknown, missing value, ...).
  • InvalidConfig  the option configurations themselves are inconsistent.
- report() / trigger() / getdoc(): surface a fault on a console, raise it, or look
  up host-provided documentation for its code.

Fields
- every fault exposes its fields as attributes (err.option, err.store_key, ...)
  and through err.options (a MappingProxyType).
- err.option is the matched option name for usage faults and the first non-empty
  configured name for configuration faults (the empty string for encoding faults).
- faults of the same type with the same fields compare equal.

Integration
- parse operations raise the first fault recorded during traversal.
- hosts that want friendly output wrap parsing and call
  trigger(fault, shell=True), which renders the fault and exits with status 1.
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce, rename

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - encoding (101xx)
      • OS_ARGS_CONTAIN_INVALID_UNICODE
    - option usage (111xx)
      • OPTION_CONTAINS_INVALID_CHAR, UNCONFIGURED_OPTION, OPTION_NEEDS_ARG,
        OPTION_TAKES_NO_ARG, OPTION_IS_NOT_ARRAY, OPTION_ARG_IS_INVALID
    - configuration consistency (121xx)
      • STORE_KEY_IS_DUPLICATED, CONFIG_IS_ARRAY_BUT_HAS_NO_ARG,
        CONFIG_HAS_DEFAULTS_BUT_HAS_NO_ARG, OPTION_NAME_IS_DUPLICATED
    """
    # --- encoding errors (101xx) ---
    OS_ARGS_CONTAIN_INVALID_UNICODE    = 10101

    # --- option usage errors (111xx) ---
    OPTION_CONTAINS_INVALID_CHAR       = 11101
    UNCONFIGURED_OPTION                = 11102
    OPTION_NEEDS_ARG                   = 11111
    OPTION_TAKES_NO_ARG                = 11112
    OPTION_IS_NOT_ARRAY                = 11113
    OPTION_ARG_IS_INVALID              = 11121

    # --- configuration errors (121xx) ---
    STORE_KEY_IS_DUPLICATED            = 12101
    CONFIG_IS_ARRAY_BUT_HAS_NO_ARG     = 12111
    CONFIG_HAS_DEFAULTS_BUT_HAS_NO_ARG = 12112
    OPTION_NAME_IS_DUPLICATED          = 12121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _switch(name):
    # how the user would have typed the option
    if not name:
        return ""
    return ("-" if len(name) == 1 else "--") + name


class ArglineError(Exception):
    """
    base class of every argline fault.

    subclasses declare
    - __fields__: names of the structured fields that must be given as keywords.
    - __template__: %-style message template filled from the fields.
    - __title__ / __hint__: short title and one-line hint used by __rich__.
    - code: the FaultCode of the fault.

    presentation options (prog, colorful, fancy, shell, deferred) may be passed
    alongside the fields; they influence rendering only and take no part in
    equality.
    """
    __fields__ = ()
    __template__ = "%(message)s"
    __title__ = "error"
    __hint__ = ""
    code = None

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        for field in cls.__dict__.get("__fields__", ()):
            @rename(field)
            def getter(self, field=field):
                return self.options[field]
            setattr(cls, field, property(getter))

    def __init__(self, message=Unset, /, **options):
        assert message is Unset or isinstance(message, str)
        if missing := [field for field in type(self).__fields__ if field not in options]:
            raise TypeError("%s() missing required field(s): %s" % (type(self).__name__, ", ".join(missing)))
        self.options = MappingProxyType(options)
        self.message = coalesce(message, type(self).__template__ % options)
        super().__init__(self.message)

    @property
    def fields(self):
        return {field: self.options[field] for field in type(self).__fields__}

    @property
    def option(self):
        return self.options.get("option", "")

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.fields == other.fields

    def __hash__(self):
        return hash((type(self), tuple(self.fields.items())))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join("%s=%r" % item for item in self.fields.items()))

    def __str__(self):
        return self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "underline #00E5FF dim",
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        default = os.path.basename(sys.argv[0]) if sys.argv else ""
        prog = text(getattr(main, "__prog__", self.options.get("prog", default)), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " | ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(type(self).__title__.title(), styler("error-title")),
            " ]"
        )
        parts = [text(self.message, styler("error-message"))]

        if hint := type(self).__hint__ % (self.fields | {"switch": _switch(self.option)}):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := getdoc(self.code):
            parts.append(text(docs, styler("docs")))

        if self.options.get("fancy", False):
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidOsArg(ArglineError):
    """the argument vector could not be decoded at the process boundary."""


class InvalidOption(ArglineError):
    """an option in the input was used in a way the configurations forbid."""


class InvalidConfig(InvalidOption):
    """
    the option configurations are inconsistent.

    raised before any argument is traversed; .option names the first
    non-empty configured name of the offending configuration.
    """

    @property
    def option(self):
        return self.options["name"]


class OsArgsContainInvalidUnicode(InvalidOsArg):
    __fields__ = ("index", "os_arg")
    __template__ = "command line argument at index %(index)d contains invalid unicode (argument: %(os_arg)r)"
    __title__ = "invalid unicode"
    __hint__ = "make sure the arguments are encoded as utf-8"
    code = FaultCode.OS_ARGS_CONTAIN_INVALID_UNICODE


class OptionContainsInvalidChar(InvalidOption):
    __fields__ = ("option",)
    __template__ = "option %(option)r contains an invalid character"
    __title__ = "malformed option"
    __hint__ = "option names start with a letter followed by letters, digits or '-'"
    code = FaultCode.OPTION_CONTAINS_INVALID_CHAR


class UnconfiguredOption(InvalidOption):
    __fields__ = ("option",)
    __template__ = "option %(option)r is not configured"
    __title__ = "unknown option"
    __hint__ = "remove %(switch)s or check the spelling against the help"
    code = FaultCode.UNCONFIGURED_OPTION


class OptionNeedsArg(InvalidOption):
    __fields__ = ("option", "store_key")
    __template__ = "option %(option)r needs an argument (store key: %(store_key)r)"
    __title__ = "missing option argument"
    __hint__ = "pass a value (for example: %(switch)s=<value> or %(switch)s <value>)"
    code = FaultCode.OPTION_NEEDS_ARG


class OptionTakesNoArg(InvalidOption):
    __fields__ = ("option", "store_key")
    __template__ = "option %(option)r takes no argument (store key: %(store_key)r)"
    __title__ = "unexpected option argument"
    __hint__ = "remove everything from '=' (for example: %(switch)s)"
    code = FaultCode.OPTION_TAKES_NO_ARG


class OptionIsNotArray(InvalidOption):
    __fields__ = ("option", "store_key")
    __template__ = "option %(option)r cannot take multiple arguments (store key: %(store_key)r)"
    __title__ = "repeated option"
    __hint__ = "pass %(switch)s only once"
    code = FaultCode.OPTION_IS_NOT_ARRAY


class OptionArgIsInvalid(InvalidOption):
    __fields__ = ("option", "store_key", "opt_arg", "details")
    __template__ = "argument %(opt_arg)r of option %(option)r is invalid: %(details)s (store key: %(store_key)r)"
    __title__ = "invalid option argument"
    __hint__ = "check the value given to %(switch)s"
    code = FaultCode.OPTION_ARG_IS_INVALID


class StoreKeyIsDuplicated(InvalidConfig):
    __fields__ = ("store_key", "name")
    __template__ = "store key %(store_key)r is duplicated (option: %(name)r)"
    __title__ = "duplicated store key"
    code = FaultCode.STORE_KEY_IS_DUPLICATED


class ConfigIsArrayButHasNoArg(InvalidConfig):
    __fields__ = ("store_key", "name")
    __template__ = "configuration %(store_key)r is an array but takes no argument (option: %(name)r)"
    __title__ = "array without argument"
    code = FaultCode.CONFIG_IS_ARRAY_BUT_HAS_NO_ARG


class ConfigHasDefaultsButHasNoArg(InvalidConfig):
    __fields__ = ("store_key", "name")
    __template__ = "configuration %(store_key)r has defaults but takes no argument (option: %(name)r)"
    __title__ = "defaults without argument"
    code = FaultCode.CONFIG_HAS_DEFAULTS_BUT_HAS_NO_ARG


class OptionNameIsDuplicated(InvalidConfig):
    __fields__ = ("store_key", "name")
    __template__ = "option name %(name)r is duplicated (store key: %(store_key)r)"
    __title__ = "duplicated option name"
    code = FaultCode.OPTION_NAME_IS_DUPLICATED


def report(fault, /, *, console=Unset, **options):
    """
    render a fault on a rich console without raising it.

    options (prog, colorful, fancy) are merged into the fault before rendering;
    the default console writes to stderr.
    """
    if not isinstance(fault, ArglineError):
        raise TypeError("report() argument must be an argline fault")
    coalesce(console, globals()["console"]).print(fault.__replace__(**options))


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArglineError).
    - options are merged into the fault via __replace__(**options) before triggering.
    - shell=False (the default) raises the fault; shell=True renders it on the
      stderr console and exits with status 1 unless deferred=True.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. returns
    None when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "ArglineError",
    "InvalidOsArg",
    "InvalidOption",
    "InvalidConfig",
    "OsArgsContainInvalidUnicode",
    "OptionContainsInvalidChar",
    "UnconfiguredOption",
    "OptionNeedsArg",
    "OptionTakesNoArg",
    "OptionIsNotArray",
    "OptionArgIsInvalid",
    "StoreKeyIsDuplicated",
    "ConfigIsArrayButHasNoArg",
    "ConfigHasDefaultsButHasNoArg",
    "OptionNameIsDuplicated",
    "report",
    "trigger",
    "getdoc",
)
