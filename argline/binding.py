"""
Argline binding: derive option configurations from an annotated class and
write parsed values back onto its instances.

Declaring a store
    from argline import optstore, opt, int32

    @optstore
    class Options:
        verbose: bool = opt(cfg="v,verbose", desc="Print more.")
        level: int32 = opt(cfg="l,level=3", arg="<n>")
        names: list[str] = opt(cfg="n,name=[a,b]")
        output: str | None = opt(cfg="o")

    options = Options()                      # fields start from the cfg defaults
    Invocation(argv).parse_for(options)      # fields now reflect the command line

Field annotations
- bool                       flag; True when the option was given. no defaults.
- str                        takes an argument.
- int / float                unbounded integer / 64-bit float.
- int8 ... int128, uint8 ... uint128, float32, float64
                             sized numbers (Annotated aliases checked by range).
- list[T]                    repeatable, every argument kept (T: str or number).
- T | None, Optional[T]      takes an argument, None when absent.

opt() keys
- cfg   "names[=defaults]": comma separated names, then the default spec:
        a literal ("=3"), a bracketed list ("=[a,b]"), a list with a custom
        separator written before the bracket ("=|[a|b]"), "[]" for an empty
        list, or nothing after '=' for a single empty string.
- desc  description shown in the help.
- arg   argument placeholder shown in the help.

The store key of every configuration is the field name; fields without names
are matched by the field name itself.

Protocol
- any object with __optcfgs__() -> list[OptCfg] and __setopts__(opts) can be
  handed to Invocation.parse_for(); @optstore generates both.
"""
import dataclasses
import functools
import inspect
import types
import typing
from typing import Annotated, ClassVar, NamedTuple, Protocol, Union, runtime_checkable

from .configs import OptCfg
from .faults import OptionArgIsInvalid
from .utils import Unset, rename
from .validators import NumberKind, parse_number, validate_nothing, validate_number

int8 = Annotated[int, NumberKind.I8]
int16 = Annotated[int, NumberKind.I16]
int32 = Annotated[int, NumberKind.I32]
int64 = Annotated[int, NumberKind.I64]
int128 = Annotated[int, NumberKind.I128]
uint8 = Annotated[int, NumberKind.U8]
uint16 = Annotated[int, NumberKind.U16]
uint32 = Annotated[int, NumberKind.U32]
uint64 = Annotated[int, NumberKind.U64]
uint128 = Annotated[int, NumberKind.U128]
float32 = Annotated[float, NumberKind.F32]
float64 = Annotated[float, NumberKind.F64]


@runtime_checkable
class OptStore(Protocol):
    def __optcfgs__(self): ...
    def __setopts__(self, opts, /): ...


class Opt(NamedTuple):
    cfg: str = ""
    desc: str = ""
    arg: str = ""


def opt(*, cfg="", desc="", arg=""):
    """declare how a field of an @optstore class is exposed on the command line."""
    if not all(isinstance(value, str) for value in (cfg, desc, arg)):
        raise TypeError("opt() arguments must be strings")
    return Opt(cfg, desc, arg)


def parse_defaults(text, /):
    """
    split the default part of a cfg string into its values.

    - "[a,b]"  -> ["a", "b"]
    - "[]"     -> []
    - "|[a|b]" -> ["a", "b"]     (the character before '[' is the separator)
    - "abc"    -> ["abc"]
    - ""       -> [""]
    """
    if text.endswith("]"):
        if text.startswith("["):
            inner = text[1:-1]
            return inner.split(",") if inner else []
        if len(text) >= 3 and text[1] == "[":
            separator, inner = text[0], text[2:-1]
            return inner.split(separator) if inner else []
    return [text]


def parse_cfg(cfg, /):
    """split a cfg string into (names, defaults); defaults is None without '='."""
    names, separator, defaults = cfg.partition("=")
    names = [name.strip() for name in names.split(",")] if names else []
    return names, parse_defaults(defaults) if separator else None


class _FieldType(NamedTuple):
    label: str
    container: str | None  # None, "list" or "optional"
    scalar: str  # "bool", "str" or "number"
    number: NumberKind | None

    @property
    def has_arg(self):
        return self.scalar != "bool"

    @property
    def is_array(self):
        return self.container == "list"

    @property
    def validator(self):
        return validate_number(self.number) if self.number else validate_nothing

    def coerce(self, text):
        if self.number:
            return parse_number(self.number, text)
        return text


def _scalar(hint):
    if hint is str:
        return "str", None
    if hint is int:
        return "number", NumberKind.INT
    if hint is float:
        return "number", NumberKind.F64
    if typing.get_origin(hint) is Annotated:
        base, *metadata = typing.get_args(hint)
        for kind in metadata:
            if isinstance(kind, NumberKind) and base is (float if kind.is_float else int):
                return "number", kind
    return None, None


def _resolve_type(name, hint):
    unsupported = TypeError(
        "`%s` has an unsupported type %r: accepted are bool, str, int, float, the sized number "
        "aliases, and list[...] or optional wrappers of str and numbers" % (name, hint)
    )

    if hint is bool:
        return _FieldType("bool", None, "bool", None)

    origin = typing.get_origin(hint)
    container, inner = None, hint
    if origin is list:
        container, (inner,) = "list", typing.get_args(hint)
    elif origin in (Union, types.UnionType):
        members = typing.get_args(hint)
        if len(members) != 2 or type(None) not in members:
            raise unsupported
        container, inner = "optional", next(member for member in members if member is not type(None))

    scalar, number = _scalar(inner)
    if scalar is None:
        raise unsupported
    label = str(number) if number else "str"
    if container:
        label = "%s[%s]" % (container, label)
    return _FieldType(label, container, scalar, number)


class _OptField:
    """one option-bearing field of an @optstore class."""

    def __init__(self, name, hint, declared):
        self.name = name
        self.type = _resolve_type(name, hint)
        self.names, self.defaults = parse_cfg(declared.cfg)
        self.desc = declared.desc
        self.arg = declared.arg

        if self.type.scalar == "bool" and self.defaults is not None:
            raise TypeError("`%s` is bool, so the default value cannot be specified" % name)

    @property
    def option(self):
        """the name reported in binding errors."""
        return next(filter(None, self.names), self.name)

    def cfg(self):
        return OptCfg(
            store_key=self.name,
            names=self.names,
            has_arg=self.type.has_arg,
            is_array=self.type.is_array,
            defaults=self.defaults,
            desc=self.desc,
            arg_in_help=self.arg,
            validator=self.type.validator,
        )

    def initial(self):
        """the value a fresh instance starts from, derived from the cfg defaults."""
        defaults = self.defaults or []
        try:
            match self.type:
                case _FieldType(scalar="bool"):
                    return False
                case _FieldType(container="list"):
                    return [self.type.coerce(value) for value in defaults]
                case _FieldType(container="optional"):
                    return self.type.coerce(defaults[0]) if defaults else None
                case _FieldType(scalar="number", number=number):
                    return self.type.coerce(defaults[0]) if defaults else (0.0 if number.is_float else 0)
                case _:
                    return defaults[0] if defaults else ""
        except ValueError:
            raise ValueError(
                "`%s` is %s, but the default value is invalid format" % (self.name, self.type.label)
            ) from None

    def _coerce(self, text):
        try:
            return self.type.coerce(text)
        except ValueError as exception:
            raise OptionArgIsInvalid(
                option=self.option,
                store_key=self.name,
                opt_arg=text,
                details=str(exception),
            ) from None

    def apply(self, store, opts):
        if self.type.scalar == "bool":
            setattr(store, self.name, self.name in opts)
            return
        if (values := opts.get(self.name)) is None:
            return
        if self.type.is_array:
            setattr(store, self.name, [self._coerce(value) for value in values])
        elif values:
            setattr(store, self.name, self._coerce(values[0]))


def _own_fields(cls):
    hints = typing.get_type_hints(cls, include_extras=True)

    for name in inspect.get_annotations(cls):
        hint = hints[name]
        if hint is ClassVar or typing.get_origin(hint) is ClassVar:
            continue

        value = cls.__dict__.get(name, Unset)
        field = _OptField(name, hint, value if isinstance(value, Opt) else Opt())

        initial = field.initial() if value is Unset or isinstance(value, Opt) else value
        metadata = {"argline": field}
        if isinstance(initial, list):
            setattr(cls, name, dataclasses.field(default_factory=functools.partial(list, initial), metadata=metadata))
        else:
            setattr(cls, name, dataclasses.field(default=initial, metadata=metadata))
        yield field


@rename("__optcfgs__")
def __optcfgs__(self):
    return [field.cfg() for field in type(self).__optfields__]


@rename("__setopts__")
def __setopts__(self, opts, /):
    for field in type(self).__optfields__:
        field.apply(self, opts)


def optstore(cls=Unset, /):
    """
    turn an annotated class into a dataclass usable with Invocation.parse_for().

    works both as @optstore and @optstore(). raises TypeError for unsupported
    field types or a bool field with defaults, and ValueError for numeric
    defaults that do not parse.
    """
    @rename("optstore")
    def wrapper(cls, /):
        if not isinstance(cls, type):
            raise TypeError("@optstore() must be applied to a class")

        fields = {field.name: field for field in getattr(cls, "__optfields__", ())}
        fields.update((field.name, field) for field in _own_fields(cls))

        cls.__optfields__ = tuple(fields.values())
        if "__optcfgs__" not in cls.__dict__:
            cls.__optcfgs__ = __optcfgs__
        if "__setopts__" not in cls.__dict__:
            cls.__setopts__ = __setopts__
        return dataclasses.dataclass(cls)

    return wrapper(cls) if cls is not Unset else wrapper


def make_opt_cfgs_for(store, /):
    """return the option configurations of a store object (see OptStore)."""
    if not isinstance(store, OptStore):
        raise TypeError("make_opt_cfgs_for() argument must implement __optcfgs__ and __setopts__")
    cfgs = list(store.__optcfgs__())
    if not all(isinstance(cfg, OptCfg) for cfg in cfgs):
        raise TypeError("__optcfgs__() must return OptCfg instances")
    return cfgs


__all__ = (
    "OptStore",
    "Opt",
    "opt",
    "optstore",
    "make_opt_cfgs_for",
    "parse_cfg",
    "parse_defaults",
    "int8",
    "int16",
    "int32",
    "int64",
    "int128",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uint128",
    "float32",
    "float64",
)
