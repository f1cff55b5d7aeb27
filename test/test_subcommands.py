"""
Sub command tests (parse_until_sub_cmd and parse_until_sub_cmd_with).

Scope
- Validate where the parent stops and what the child invocation carries:
  its name, its share of the vector, the end-of-options latch.
- Validate fault precedence over the hand-off.

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from argline import Invocation, OptCfg, OptionNeedsArg, UnconfiguredOption


class TestSubCommands(TestCase):
    """Stopping at the first positional."""

    def testHandOff(self):
        cmd = Invocation(["/path/to/app", "--foo", "sub", "--bar", "x"])
        sub = cmd.parse_until_sub_cmd_with([OptCfg(names=["foo"])])
        self.assertEqual(cmd.opts, {"foo": []})
        self.assertEqual(cmd.args, ())
        self.assertIsNotNone(sub)
        self.assertEqual(sub.name, "sub")
        self.assertEqual(sub.args, ())

        sub.parse()
        self.assertEqual(sub.opts, {"bar": []})
        self.assertEqual(sub.args, ("x",))

    def testChildSharesTheVector(self):
        cmd = Invocation(["app", "-a", "sub", "-b"])
        sub = cmd.parse_until_sub_cmd()
        self.assertIs(sub._argv, cmd._argv)

    def testChildNameIsTheRawArgument(self):
        cmd = Invocation(["app", "/usr/bin/tool", "-x"])
        sub = cmd.parse_until_sub_cmd()
        self.assertEqual(sub.name, "/usr/bin/tool")

    def testBareDashIsASubCommand(self):
        cmd = Invocation(["app", "-a", "-", "-b"])
        sub = cmd.parse_until_sub_cmd()
        self.assertEqual(sub.name, "-")
        sub.parse()
        self.assertEqual(sub.opts, {"b": []})

    def testNoSubCommand(self):
        cmd = Invocation(["app", "--foo", "--bar=1"])
        self.assertIsNone(cmd.parse_until_sub_cmd())
        self.assertEqual(cmd.opts, {"foo": [], "bar": ["1"]})

    def testOptionArgumentIsNotASubCommand(self):
        cmd = Invocation(["app", "--foo", "bar", "baz"])
        sub = cmd.parse_until_sub_cmd_with([OptCfg(names=["foo"], has_arg=True)])
        self.assertEqual(cmd.opts, {"foo": ["bar"]})
        self.assertEqual(sub.name, "baz")

    def testEndOfOptionsIsInherited(self):
        cmd = Invocation(["app", "-a", "--", "sub", "-b", "c"])
        sub = cmd.parse_until_sub_cmd()
        self.assertTrue(cmd.is_after_end_opt)
        self.assertEqual(sub.name, "sub")
        self.assertTrue(sub.is_after_end_opt)

        sub.parse()
        self.assertEqual(sub.opts, {})
        self.assertEqual(sub.args, ("-b", "c"))
        self.assertTrue(sub.is_after_end_opt)

    def testNestedSubCommands(self):
        cmd = Invocation(["app", "-a", "one", "-b", "two", "-c", "x"])
        one = cmd.parse_until_sub_cmd()
        two = one.parse_until_sub_cmd()
        two.parse()
        self.assertEqual((cmd.opts, one.opts, two.opts), ({"a": []}, {"b": []}, {"c": []}))
        self.assertEqual(two.name, "two")
        self.assertEqual(two.args, ("x",))

    def testFaultBeforeSubCommandWins(self):
        cmd = Invocation(["app", "--qux", "--foo", "sub", "--bar"])
        with self.assertRaises(UnconfiguredOption) as context:
            cmd.parse_until_sub_cmd_with([OptCfg(names=["foo"])])
        self.assertEqual(context.exception.option, "qux")
        self.assertEqual(cmd.opts, {"foo": []})

    def testFaultAfterLastArgument(self):
        cmd = Invocation(["app", "-f"])
        with self.assertRaises(OptionNeedsArg):
            cmd.parse_until_sub_cmd_with([OptCfg(names=["f"], has_arg=True)])

    def testDefaultsAppliedToParent(self):
        cmd = Invocation(["app", "sub", "--num=1"])
        sub = cmd.parse_until_sub_cmd_with([OptCfg(names=["num"], has_arg=True, defaults=["0"])])
        self.assertEqual(cmd.opt_arg("num"), "0")
        sub.parse_with([OptCfg(names=["num"], has_arg=True, defaults=["0"])])
        self.assertEqual(sub.opt_arg("num"), "1")


if __name__ == "__main__":
    unittest.main()
