# python
"""
Post-scan validation tests.

Scope
- mandatory options.
- mutually exclusive groups, required groups and their messages.
- ordering: the first violation is reported.
"""

import unittest
from unittest import TestCase

from gnuopt import (
    Bool,
    ExclusiveOptionsError,
    FaultCode,
    MandatoryOptionError,
    OptionSet,
    RequiredGroupError,
    State,
    UnknownGroupError,
)


class TestMandatory(TestCase):

    def build(self):
        options = OptionSet("test")
        options.declare("o", None, Bool())
        options.declare("r", None, Bool()).set_mandatory()
        return options

    def testMissing(self):
        with self.assertRaises(MandatoryOptionError) as context:
            self.build().getopt(["test"])
        self.assertEqual(str(context.exception), "test: option -r is mandatory")
        self.assertIs(context.exception.options["code"], FaultCode.MANDATORY_OPTION)

    def testPresent(self):
        self.assertEqual(self.build().getopt(["test", "-r"]), [])

    def testLongNameInMessage(self):
        options = OptionSet("test")
        options.declare("r", "required", Bool()).set_mandatory()
        with self.assertRaises(MandatoryOptionError) as context:
            options.getopt(["test"])
        self.assertEqual(str(context.exception), "test: option --required is mandatory")


class TestGroups(TestCase):

    def build(self):
        options = OptionSet("test")
        for name, group in (("A", "One"), ("B", "One"), ("C", "Two"), ("D", "Two")):
            options.declare(name, None, Bool()).set_group(group)
        options.require_group("One")
        return options

    def testRequiredGroupMissing(self):
        with self.assertRaises(RequiredGroupError) as context:
            self.build().getopt(["test"])
        self.assertEqual(str(context.exception), "test: exactly one of the following options must be specified: -A, -B")

    def testOnePerGroup(self):
        self.assertEqual(self.build().getopt(["test", "-A", "-C"]), [])

    def testExclusiveInRequiredGroup(self):
        with self.assertRaises(ExclusiveOptionsError) as context:
            self.build().getopt(["test", "-A", "-B"])
        self.assertEqual(str(context.exception), "test: options -A and -B are mutually exclusive")

    def testExclusiveNamesFollowDeclarationOrder(self):
        with self.assertRaises(ExclusiveOptionsError) as context:
            self.build().getopt(["test", "-A", "-D", "-C"])
        self.assertEqual(str(context.exception), "test: options -C and -D are mutually exclusive")

    def testOptionalGroupMayBeEmpty(self):
        self.assertEqual(self.build().getopt(["test", "-B"]), [])

    def testRequiredGroupWithoutMembers(self):
        options = OptionSet("test")
        options.declare("x", None, Bool())
        options.require_group("Nobody")
        with self.assertRaises(UnknownGroupError):
            options.getopt(["test", "-x"])
        self.assertIs(options.state, State.FAILURE)

    def testMandatoryReportedBeforeGroups(self):
        options = self.build()
        options.declare("r", None, Bool()).set_mandatory()
        with self.assertRaises(MandatoryOptionError):
            options.getopt(["test", "-A", "-B"])


if __name__ == "__main__":
    unittest.main()
