"""
Argline parser engine: drive the recognizer over an argument vector.

The engine knows nothing about schemas or invocations. It is fed three
callbacks and reports through them:

- collect_args(arg)            a positional argument was found.
- collect_opts(name, value)    an option was found; value is its argument or
                               None. may raise InvalidOption.
- take_opt_args(name)          whether the option consumes the next argument
                               when no inline value was given.

States
- normal             classify the argument (see argline.tokens).
- pending value      the previous option takes an argument: the current one is
                     its value whatever it looks like ('-x', '--', ...).
- after '--'         every argument is positional.

Errors do not stop the traversal: the first InvalidOption is remembered, the
rest of the vector is still processed, and the remembered error is raised at
the end. In until_1st_arg mode the traversal stops at the first positional
(or at the first argument after '--') and returns its index, unless an error
was already recorded, in which case that error is raised instead.
"""
from .faults import InvalidOption, OptionContainsInvalidChar
from .tokens import TokenKind, recognize


def parse_args(
        args,
        collect_args,
        collect_opts,
        take_opt_args,
        *,
        until_1st_arg=False,
        is_after_end_opt=False,
):
    """
    traverse args (the vector without the program path).

    returns (index, is_after_end_opt): index is the position in args where
    until_1st_arg mode stopped (None when the whole vector was consumed), and
    is_after_end_opt tells whether '--' has been passed.

    raises the first InvalidOption recorded during the traversal.
    """
    first = None
    pending = None
    last = len(args) - 1

    def collect(name, value):
        nonlocal first
        try:
            collect_opts(name, value)
        except InvalidOption as exception:
            if first is None:
                first = exception

    for index, arg in enumerate(args):
        if is_after_end_opt:
            if until_1st_arg:
                if first is not None:
                    raise first
                return index, True
            collect_args(arg)
            continue

        if pending is not None:
            name, pending = pending, None
            collect(name, arg)
            continue

        token = recognize(arg)

        match token.kind:
            case TokenKind.END_OF_OPTIONS:
                is_after_end_opt = True
            case TokenKind.LONG_OPTION | TokenKind.SHORT_CLUSTER:
                for segment in token.segments:
                    if not segment.valid:
                        if first is None:
                            first = OptionContainsInvalidChar(option=segment.name)
                        continue
                    if (
                        segment.value is None and
                        segment.terminal and
                        index < last and
                        take_opt_args(segment.name)
                    ):
                        pending = segment.name
                        continue
                    collect(segment.name, segment.value)
            case _:
                if until_1st_arg:
                    if first is not None:
                        raise first
                    return index, is_after_end_opt
                collect_args(arg)

    if first is not None:
        raise first
    return None, is_after_end_opt


__all__ = (
    "parse_args",
)
