"""
Argline invocation: one program call, parsed.

An Invocation holds
- name              basename of the program path (argv[0]); "" for an empty vector.
- args              positional arguments, in input order.
- opts              option values by store key, each a list in input order. an
                    option given without argument maps to an empty list, so
                    has_opt() and opt_args() tell "absent" from "valueless".
- cfgs              the option configurations used by the last parse.
- is_after_end_opt  whether '--' has been passed.

Parse operations
- parse()                         no configurations: every option is accepted,
                                  none takes a separate argument.
- parse_with(cfgs)                configuration-driven parsing with arity checks,
                                  validation and defaults.
- parse_until_sub_cmd()           like parse(), but stop at the first positional
- parse_until_sub_cmd_with(cfgs)  (or at the first argument after '--') and
                                  return an Invocation for the rest, named after
                                  that argument. None when there is no rest.
- parse_for(store)                parse_with() the store's configurations, then
- parse_until_sub_cmd_for(store)  write the values onto the store.

Every parse operation resets the previous results first. Faults are raised
after the whole vector was traversed (see argline.engine); the results
collected until then stay readable on the invocation.

    >>> cmd = Invocation(["/usr/bin/app", "--foo-bar=123", "bar", "--baz", "qux"])
    >>> cmd.parse()
    >>> cmd.name, cmd.args, cmd.opt_args("foo-bar"), cmd.has_opt("baz")
    ('app', ('bar', 'qux'), ('123',), True)
"""
import os
import shlex
import sys
from collections.abc import Iterable

from .binding import make_opt_cfgs_for
from .configs import ANY_OPT, Schema
from .engine import parse_args
from .faults import (
    OsArgsContainInvalidUnicode,
    UnconfiguredOption,
    OptionNeedsArg,
    OptionTakesNoArg,
    OptionIsNotArray,
)
from .utils import Unset, mirror


def _basename(path):
    for separator in {"/", os.sep, os.altsep} - {None}:
        path = path.rpartition(separator)[2]
    return path


class Invocation:
    __introspectable__ = ("name", "args", "opts", "cfgs", "is_after_end_opt")

    name = mirror("name")
    opts = mirror("opts")
    is_after_end_opt = mirror("is_after_end_opt")

    def __init__(self, argv=Unset, /):
        """
        build an invocation from an argument vector.

        argv
        - Unset: sys.argv.
        - str: a shell-like command line, split with shlex.split.
        - Iterable[str]: the vector itself (argv[0] is the program path).
        """
        if argv is Unset:
            argv = sys.argv
        elif isinstance(argv, str):
            argv = shlex.split(argv)
        elif not isinstance(argv, Iterable):
            raise TypeError("Invocation() argument must be a string or an iterable of strings")

        self._argv = tuple(argv)
        if not all(isinstance(arg, str) for arg in self._argv):
            raise TypeError("Invocation() argument must be a string or an iterable of strings")

        self._start = 0
        self._name = _basename(self._argv[0]) if self._argv else ""
        self._inherited_end_opt = False
        self._reset()

    @classmethod
    def from_os_args(cls, argv=Unset, /):
        """
        build an invocation from raw process arguments.

        items may be bytes (decoded as utf-8) or str (as produced by the
        interpreter, where undecodable bytes became lone surrogates). the first
        undecodable item raises OsArgsContainInvalidUnicode with its raw bytes.
        """
        decoded = []
        for index, item in enumerate(sys.argv if argv is Unset else argv):
            if isinstance(item, bytes | bytearray):
                try:
                    decoded.append(bytes(item).decode("utf-8"))
                except UnicodeDecodeError:
                    raise OsArgsContainInvalidUnicode(index=index, os_arg=bytes(item)) from None
            elif isinstance(item, str):
                try:
                    item.encode("utf-8")
                except UnicodeEncodeError:
                    try:
                        raw = os.fsencode(item)
                    except UnicodeEncodeError:
                        raw = item.encode("utf-8", "surrogatepass")
                    raise OsArgsContainInvalidUnicode(index=index, os_arg=raw) from None
                decoded.append(item)
            else:
                raise TypeError("from_os_args() argument must be an iterable of strings or bytes")
        return cls(decoded)

    def _spawn(self, index):
        # the child shares this invocation's vector; argv[index] is its program path
        child = object.__new__(type(self))
        child._argv = self._argv
        child._start = index
        child._name = self._argv[index]
        child._inherited_end_opt = self._is_after_end_opt
        child._reset()
        return child

    def _reset(self, cfgs=()):
        self._args = []
        self._opts = {}
        self._cfgs = tuple(cfgs)
        self._is_after_end_opt = self._inherited_end_opt

    @property
    def args(self):
        return tuple(self._args)

    @property
    def cfgs(self):
        return self._cfgs

    def has_opt(self, key, /):
        """whether the option stored under key was given (or defaulted)."""
        return key in self._opts

    def opt_arg(self, key, /):
        """the first value stored under key, or None."""
        values = self._opts.get(key)
        return values[0] if values else None

    def opt_args(self, key, /):
        """all values stored under key, or None when the option is absent."""
        values = self._opts.get(key)
        return None if values is None else tuple(values)

    def _traverse(self, collect_opts, take_opt_args, *, until_1st_arg):
        index, self._is_after_end_opt = parse_args(
            self._argv[self._start + 1:],
            self._args.append,
            collect_opts,
            take_opt_args,
            until_1st_arg=until_1st_arg,
            is_after_end_opt=self._is_after_end_opt,
        )
        return None if index is None else self._spawn(self._start + 1 + index)

    def _collect_free(self, name, value):
        values = self._opts.setdefault(name, [])
        if value is not None:
            values.append(value)

    def _collector(self, schema):
        def collect_opts(name, value):
            cfg = schema.lookup(name)
            if cfg is None:
                if not schema.has_any:
                    raise UnconfiguredOption(option=name)
                # wildcard: stored under the name as typed, never validated
                return self._collect_free(name, value)

            key = cfg.effective_key
            if value is not None:
                if not cfg.has_arg:
                    raise OptionTakesNoArg(option=name, store_key=key)
                if self._opts.get(key) and not cfg.is_array:
                    raise OptionIsNotArray(option=name, store_key=key)
                cfg.validator(key, name, value)
                self._opts.setdefault(key, []).append(value)
            elif cfg.has_arg:
                raise OptionNeedsArg(option=name, store_key=key)
            else:
                self._opts.setdefault(key, [])

        return collect_opts

    def _apply_defaults(self, schema):
        for cfg in schema:
            key = cfg.effective_key
            if not key or key == ANY_OPT or key in self._opts:
                continue
            if defaults := cfg.defaults:
                self._opts[key] = list(defaults)

    def _parse_schemaless(self, *, until_1st_arg):
        self._reset()
        return self._traverse(self._collect_free, lambda name: False, until_1st_arg=until_1st_arg)

    def _parse_schema(self, cfgs, *, until_1st_arg):
        self._reset(cfgs)
        schema = Schema(self._cfgs)
        try:
            return self._traverse(self._collector(schema), schema.takes_arg, until_1st_arg=until_1st_arg)
        finally:
            self._apply_defaults(schema)

    def parse(self):
        """parse without configurations; raises the first InvalidOption."""
        self._parse_schemaless(until_1st_arg=False)

    def parse_until_sub_cmd(self):
        """parse without configurations up to the first positional; returns the sub command or None."""
        return self._parse_schemaless(until_1st_arg=True)

    def parse_with(self, cfgs, /):
        """
        parse against option configurations.

        raises InvalidConfig before traversal when cfgs are inconsistent, and
        the first InvalidOption met during traversal otherwise.

        defaults of absent options are stored once the traversal is over, also
        when an InvalidOption is raised, so the options stay complete for
        callers reporting the fault. an InvalidConfig leaves the options empty.
        """
        self._parse_schema(cfgs, until_1st_arg=False)

    def parse_until_sub_cmd_with(self, cfgs, /):
        """parse_with() up to the first positional; returns the sub command or None."""
        return self._parse_schema(cfgs, until_1st_arg=True)

    def parse_for(self, store, /):
        """parse_with() the store's configurations and write the results onto it."""
        self.parse_with(make_opt_cfgs_for(store))
        store.__setopts__(self.opts)

    def parse_until_sub_cmd_for(self, store, /):
        """parse_until_sub_cmd_with() for a store; returns the sub command or None."""
        child = self.parse_until_sub_cmd_with(make_opt_cfgs_for(store))
        store.__setopts__(self.opts)
        return child

    def __repr__(self):
        return "Invocation(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


__all__ = (
    "Invocation",
)
