"""
Argline option configurations and the schema built from them.

OptCfg
- one immutable record per recognized option:
  • store_key    key the collected values are stored under. empty means "first
                 non-empty name"; "*" makes the configuration a wildcard that
                 accepts every otherwise-unconfigured option.
  • names        names the option answers to. one character is a short option
                 (-f), longer names are long options (--foo-bar). empty strings
                 never match but keep their slot in the help output.
  • has_arg      the option takes an argument.
  • is_array     the option may be repeated, accumulating its arguments.
  • defaults     None, or the values stored when the option is absent.
  • desc / arg_in_help   help text and the argument placeholder.
  • validator    callable (store_key, option, opt_arg) raising OptionArgIsInvalid.

Schema
- validates a sequence of OptCfg and indexes it by name and by store key.
- checks, per configuration and in declaration order:
  1. the store key is not already used (StoreKeyIsDuplicated);
  2. an array takes an argument (ConfigIsArrayButHasNoArg);
  3. non-empty defaults come with an argument (ConfigHasDefaultsButHasNoArg);
  4. none of its names is already taken (OptionNameIsDuplicated).
- configurations whose store key and names are all empty are ignored.
- a configuration without non-empty names is matched by its store key.

    >>> schema = Schema([OptCfg(store_key="foo", names=["f"], has_arg=True)])
    >>> schema.lookup("f").effective_key
    'foo'
"""
from collections.abc import Iterable

from .faults import (
    StoreKeyIsDuplicated,
    ConfigIsArrayButHasNoArg,
    ConfigHasDefaultsButHasNoArg,
    OptionNameIsDuplicated,
)
from .utils import Unset, coalesce, mirror
from .validators import validate_nothing

ANY_OPT = "*"


def _strings(object, message):
    if isinstance(object, str) or not isinstance(object, Iterable):
        raise TypeError(message)
    items = tuple(object)
    if not all(isinstance(item, str) for item in items):
        raise TypeError(message)
    return items


class OptCfg:
    __introspectable__ = (
        "store_key",
        "names",
        "has_arg",
        "is_array",
        "defaults",
        "desc",
        "arg_in_help",
        "validator",
    )

    store_key = mirror("store_key")
    names = mirror("names")
    has_arg = mirror("has_arg")
    is_array = mirror("is_array")
    defaults = mirror("defaults")
    desc = mirror("desc")
    arg_in_help = mirror("arg_in_help")
    validator = mirror("validator")

    def __init__(
            self,
            *,
            store_key="",
            names=(),
            has_arg=False,
            is_array=False,
            defaults=None,
            desc="",
            arg_in_help="",
            validator=Unset,
    ):
        if not isinstance(store_key, str):
            raise TypeError("OptCfg() store_key must be a string")
        if not isinstance(has_arg, bool) or not isinstance(is_array, bool):
            raise TypeError("OptCfg() has_arg and is_array must be booleans")
        if not isinstance(desc, str) or not isinstance(arg_in_help, str):
            raise TypeError("OptCfg() desc and arg_in_help must be strings")
        if validator is not Unset and not callable(validator):
            raise TypeError("OptCfg() validator must be callable")

        self._store_key = store_key
        self._names = _strings(names, "OptCfg() names must be an iterable of strings")
        self._has_arg = has_arg
        self._is_array = is_array
        self._defaults = None if defaults is None else _strings(
            defaults, "OptCfg() defaults must be None or an iterable of strings"
        )
        self._desc = desc
        self._arg_in_help = arg_in_help
        self._validator = coalesce(validator, validate_nothing)

    @property
    def effective_key(self):
        """the store key, falling back to the first non-empty name ("" if none)."""
        if self._store_key:
            return self._store_key
        return next(filter(None, self._names), "")

    @property
    def first_name(self):
        """the first non-empty name, falling back to the effective store key."""
        return next(filter(None, self._names), self.effective_key)

    @property
    def is_wildcard(self):
        return self.effective_key == ANY_OPT

    @property
    def is_ignored(self):
        return not self.effective_key

    def __repr__(self):
        return "OptCfg(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


class Schema:
    """
    validated, indexed view over option configurations.

    construction raises the first InvalidConfig found; lookups afterwards are
    by option name (lookup/takes_arg) or by store key (find).
    """

    def __init__(self, cfgs=(), /):
        self._cfgs = tuple(cfgs)
        if not all(isinstance(cfg, OptCfg) for cfg in self._cfgs):
            raise TypeError("Schema() argument must be an iterable of OptCfg")

        self._by_name = {}
        self._by_key = {}
        self._has_any = False

        for index, cfg in enumerate(self._cfgs):
            key = cfg.effective_key
            if not key:
                continue
            if key == ANY_OPT:
                self._has_any = True
                continue

            first = cfg.first_name
            if key in self._by_key:
                raise StoreKeyIsDuplicated(store_key=key, name=first)
            self._by_key[key] = index

            if not cfg.has_arg:
                if cfg.is_array:
                    raise ConfigIsArrayButHasNoArg(store_key=key, name=first)
                if cfg.defaults:
                    raise ConfigHasDefaultsButHasNoArg(store_key=key, name=first)

            for name in [name for name in cfg.names if name] or [key]:
                if name in self._by_name:
                    raise OptionNameIsDuplicated(store_key=key, name=name)
                self._by_name[name] = index

    @property
    def cfgs(self):
        return self._cfgs

    @property
    def has_any(self):
        """true when a wildcard configuration is present."""
        return self._has_any

    def lookup(self, name, /):
        """the configuration answering to the option name, or None."""
        try:
            return self._cfgs[self._by_name[name]]
        except KeyError:
            return None

    def find(self, store_key, /):
        """the configuration storing under store_key, or None."""
        try:
            return self._cfgs[self._by_key[store_key]]
        except KeyError:
            return None

    def takes_arg(self, name, /):
        cfg = self.lookup(name)
        return cfg is not None and cfg.has_arg

    def __iter__(self):
        return iter(self._cfgs)

    def __len__(self):
        return len(self._cfgs)


__all__ = (
    "ANY_OPT",
    "OptCfg",
    "Schema",
)
