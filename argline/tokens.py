r"""
Argline token recognizer: classify one command-line argument at a time.

Shapes (tested in order)
- '--'           end of options; everything after it is positional.
- '--name[=v]'   long option. name matches [A-Za-z][A-Za-z0-9-]*; the text after
                 the first '=' is the inline value (possibly empty).
- '-'            bare dash, a positional (conventionally stdin/stdout).
- '-abc[=v]'     short cluster; every character is a short option, the inline
                 value binds to the character right before '='.
- anything else  positional.

The recognizer is pure: it never consults option configurations. Whether an
option takes the next argument as its value is decided by the engine.

Segments
- a long option yields exactly one segment.
- a short cluster yields one segment per character, in input order:
  • valid letters become options; only the last one is "terminal" (it may take
    the next argument, or the inline value when '=' follows it).
  • any other character becomes an invalid segment naming that single character,
    and the character is skipped.
- an invalid long option yields one invalid segment naming the whole text after
  '--' (inline value included), e.g. '--1abc=x' -> '1abc=x'.

    >>> recognize("-ab=c").segments
    (Segment(name='a', value=None, valid=True, terminal=False), Segment(name='b', value='c', valid=True, terminal=True))
"""
import re
from enum import Enum
from typing import NamedTuple

END_OF_OPTIONS = "--"

_LONG = re.compile(r"(?P<name>[A-Za-z][A-Za-z0-9-]*)(=(?P<value>.*))?", re.DOTALL)


class TokenKind(Enum):
    END_OF_OPTIONS = "end-of-options"
    LONG_OPTION = "long-option"
    SHORT_CLUSTER = "short-cluster"
    BARE_DASH = "bare-dash"
    POSITIONAL = "positional"

    @property
    def is_option(self):
        return self in (TokenKind.LONG_OPTION, TokenKind.SHORT_CLUSTER)


class Segment(NamedTuple):
    """
    one option candidate extracted from a token.

    - name: option name (or the offending text when valid is False).
    - value: inline value when '=' was consumed for this option, else None.
    - valid: whether name obeys the option name rules.
    - terminal: whether this option may take the following argument as its value.
    """
    name: str
    value: str | None = None
    valid: bool = True
    terminal: bool = True


class Token(NamedTuple):
    kind: TokenKind
    text: str
    segments: tuple[Segment, ...] = ()


def is_long_name(text, /):
    """true when text is a valid long option name (without the leading '--')."""
    return bool(re.fullmatch(r"[A-Za-z][A-Za-z0-9-]*", text))


def is_short_name(char, /):
    """true when char is a valid short option name (a single ASCII letter)."""
    return len(char) == 1 and char.isascii() and char.isalpha()


def _long(body):
    if match := _LONG.fullmatch(body):
        return Segment(match["name"], match["value"])
    return Segment(body, valid=False)


def _cluster(body):
    segments = []
    name = ""

    for index, char in enumerate(body):
        if index > 0:
            if char == "=":
                # the rest of the token, '=' excluded, belongs to the previous letter
                if name:
                    segments.append(Segment(name, body[index + 1:]))
                return tuple(segments)
            if name:
                segments.append(Segment(name, terminal=False))
        if is_short_name(char):
            name = char
        else:
            segments.append(Segment(char, valid=False, terminal=False))
            name = ""

    if name:
        segments.append(Segment(name))
    return tuple(segments)


def recognize(arg, /):
    """
    classify a single argument.

    returns a Token whose segments describe the option candidates it carries
    (empty for end-of-options, bare dashes and positionals).
    """
    if not isinstance(arg, str):
        raise TypeError("recognize() argument must be a string")

    if arg == END_OF_OPTIONS:
        return Token(TokenKind.END_OF_OPTIONS, arg)
    if arg.startswith("--"):
        return Token(TokenKind.LONG_OPTION, arg, (_long(arg[2:]),))
    if arg == "-":
        return Token(TokenKind.BARE_DASH, arg)
    if arg.startswith("-"):
        return Token(TokenKind.SHORT_CLUSTER, arg, _cluster(arg[1:]))
    return Token(TokenKind.POSITIONAL, arg)


__all__ = (
    "END_OF_OPTIONS",
    "TokenKind",
    "Segment",
    "Token",
    "is_long_name",
    "is_short_name",
    "recognize",
)
