"""
Option store binding tests (optstore, opt, parse_for).

Scope
- Validate the cfg string grammar (names and defaults).
- Validate the configurations derived from annotated fields.
- Validate initial values, declaration errors and the write-back of parsed
  values, including coercion faults.

Conventions
- Test method names follow CamelCase per project convention.
- Stores are declared inside the tests that use them.
"""

import math
import unittest
from unittest import TestCase

from argline import (
    Invocation,
    Opt,
    OptCfg,
    OptionArgIsInvalid,
    OptionNeedsArg,
    OptStore,
    float32,
    int8,
    make_opt_cfgs_for,
    opt,
    optstore,
    parse_cfg,
    parse_defaults,
    uint16,
)


class TestCfgStrings(TestCase):
    """The cfg grammar."""

    def testDefaultSpecs(self):
        self.assertEqual(parse_defaults("[a,b]"), ["a", "b"])
        self.assertEqual(parse_defaults("[]"), [])
        self.assertEqual(parse_defaults("|[a|b,c]"), ["a", "b,c"])
        self.assertEqual(parse_defaults("abc"), ["abc"])
        self.assertEqual(parse_defaults(""), [""])

    def testNamesOnly(self):
        self.assertEqual(parse_cfg("f,foo-bar"), (["f", "foo-bar"], None))

    def testNamesAndDefaults(self):
        self.assertEqual(parse_cfg("n,num=[1,2]"), (["n", "num"], ["1", "2"]))
        self.assertEqual(parse_cfg("n=3"), (["n"], ["3"]))
        self.assertEqual(parse_cfg("n="), (["n"], [""]))

    def testEmptyNameSlots(self):
        self.assertEqual(parse_cfg(",foo"), (["", "foo"], None))

    def testNoNames(self):
        self.assertEqual(parse_cfg(""), ([], None))
        self.assertEqual(parse_cfg("=x"), ([], ["x"]))

    def testOptValidatesArguments(self):
        self.assertEqual(opt(cfg="f"), Opt("f", "", ""))
        with self.assertRaises(TypeError):
            opt(cfg=1)  # type: ignore[arg-type]


class TestDeclaration(TestCase):
    """Configurations derived from fields."""

    def testConfigurations(self):
        @optstore
        class Options:
            verbose: bool = opt(cfg="v,verbose", desc="Print more.")
            level: int8 = opt(cfg="l,level=3", arg="<n>")
            names: list[str] = opt(cfg="n,name=[a,b]")
            output: str | None = opt(cfg="o")
            plain: str

        cfgs = {cfg.store_key: cfg for cfg in make_opt_cfgs_for(Options())}
        self.assertEqual(list(cfgs), ["verbose", "level", "names", "output", "plain"])

        self.assertEqual(cfgs["verbose"].names, ["v", "verbose"])
        self.assertFalse(cfgs["verbose"].has_arg)
        self.assertIsNone(cfgs["verbose"].defaults)
        self.assertEqual(cfgs["verbose"].desc, "Print more.")

        self.assertTrue(cfgs["level"].has_arg)
        self.assertFalse(cfgs["level"].is_array)
        self.assertEqual(cfgs["level"].defaults, ["3"])
        self.assertEqual(cfgs["level"].arg_in_help, "<n>")

        self.assertTrue(cfgs["names"].is_array)
        self.assertEqual(cfgs["names"].defaults, ["a", "b"])

        self.assertTrue(cfgs["output"].has_arg)
        self.assertEqual(cfgs["plain"].names, [])
        self.assertTrue(all(isinstance(cfg, OptCfg) for cfg in cfgs.values()))

    def testInitialValues(self):
        @optstore
        class Options:
            flag: bool = opt(cfg="f")
            text: str = opt(cfg="t=hello")
            count: uint16 = opt(cfg="c")
            ratio: float = opt(cfg="r=0.5")
            nums: list[int] = opt(cfg="n=[1,2]")
            maybe: int | None = opt(cfg="m")
            given: str = "kept"

        options = Options()
        self.assertFalse(options.flag)
        self.assertEqual(options.text, "hello")
        self.assertEqual(options.count, 0)
        self.assertEqual(options.ratio, 0.5)
        self.assertEqual(options.nums, [1, 2])
        self.assertIsNone(options.maybe)
        self.assertEqual(options.given, "kept")

    def testListDefaultsAreNotShared(self):
        @optstore()
        class Options:
            items: list[str] = opt(cfg="i=[x]")

        first, second = Options(), Options()
        first.items.append("y")
        self.assertEqual(second.items, ["x"])

    def testBoolCannotHaveDefaults(self):
        with self.assertRaises(TypeError) as context:
            @optstore
            class Options:
                flag: bool = opt(cfg="f=true")
        self.assertIn("`flag` is bool", str(context.exception))

    def testInvalidNumericDefault(self):
        with self.assertRaises(ValueError) as context:
            @optstore
            class Options:
                small: int8 = opt(cfg="s=300")
        self.assertIn("`small` is i8", str(context.exception))

    def testUnsupportedType(self):
        with self.assertRaises(TypeError):
            @optstore
            class Options:
                mapping: dict[str, str] = opt(cfg="m")

    def testInheritedFields(self):
        @optstore
        class Base:
            verbose: bool = opt(cfg="v")

        @optstore
        class Child(Base):
            name: str = opt(cfg="n")

        keys = [cfg.store_key for cfg in make_opt_cfgs_for(Child())]
        self.assertEqual(keys, ["verbose", "name"])

    def testProtocol(self):
        @optstore
        class Options:
            flag: bool

        self.assertIsInstance(Options(), OptStore)
        with self.assertRaises(TypeError):
            make_opt_cfgs_for(object())


class TestParseFor(TestCase):
    """Writing parsed values onto stores."""

    def testRoundTrip(self):
        @optstore
        class Options:
            flag: bool = opt(cfg="f,flag")
            text: str = opt(cfg="t")
            small: int8 = opt(cfg="s")
            ratio: float32 = opt(cfg="r")
            nums: list[uint16] = opt(cfg="n")
            words: list[str] = opt(cfg="w=[a,b]")
            maybe: int | None = opt(cfg="m")
            absent: float | None = opt(cfg="a")

        options = Options()
        cmd =Invocation(["app", "--flag", "-t", "hi", "-s=-8", "-r", "0.25", "-n=1", "-n=2", "-m", "7", "arg"])
        cmd.parse_for(options)

        self.assertTrue(options.flag)
        self.assertEqual(options.text, "hi")
        self.assertEqual(options.small, -8)
        self.assertEqual(options.ratio, 0.25)
        self.assertEqual(options.nums, [1, 2])
        self.assertEqual(options.words, ["a", "b"])
        self.assertEqual(options.maybe, 7)
        self.assertIsNone(options.absent)
        self.assertEqual(cmd.args, ("arg",))

    def testAbsentFlagIsFalse(self):
        @optstore
        class Options:
            flag: bool = opt(cfg="f")

        options = Options()
        Invocation(["app"]).parse_for(options)
        self.assertFalse(options.flag)

    def testFloatOverflow(self):
        @optstore
        class Options:
            ratio: float32 = opt(cfg="r")

        options = Options()
        Invocation(["app", "-r", "1e39"]).parse_for(options)
        self.assertTrue(math.isinf(options.ratio))

    def testInvalidArgument(self):
        @optstore
        class Options:
            small: int8 = opt(cfg="s,small")

        options = Options()
        with self.assertRaises(OptionArgIsInvalid) as context:
            Invocation(["app", "--small=200"]).parse_for(options)
        self.assertEqual(
            context.exception,
            OptionArgIsInvalid(
                option="small",
                store_key="small",
                opt_arg="200",
                details="number too large to fit in target type",
            ),
        )
        self.assertEqual(options.small, 0)

    def testStoreIsUntouchedOnFault(self):
        @optstore
        class Options:
            text: str = opt(cfg="t")
            flag: bool = opt(cfg="f")

        options = Options()
        with self.assertRaises(OptionNeedsArg):
            Invocation(["app", "-f", "-t"]).parse_for(options)
        self.assertFalse(options.flag)

    def testSetoptsCoercionFault(self):
        @optstore
        class Options:
            count: uint16 = opt(cfg=",count")

        options = Options()
        with self.assertRaises(OptionArgIsInvalid) as context:
            options.__setopts__({"count": ["x"]})
        self.assertEqual(context.exception.option, "count")
        self.assertEqual(context.exception.store_key, "count")
        self.assertEqual(context.exception.details, "invalid digit found in string")

    def testSubCommandStore(self):
        @optstore
        class Options:
            verbose: bool = opt(cfg="v")

        options = Options()
        sub = Invocation(["app", "-v", "run", "-x"]).parse_until_sub_cmd_for(options)
        self.assertTrue(options.verbose)
        self.assertEqual(sub.name, "run")


if __name__ == "__main__":
    unittest.main()
