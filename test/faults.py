# python
"""
Fault tests.

Scope
- message contract: str(fault) is the plain message.
- FaultCode labels and host remapping through __main__.__codes__.
- trigger(): raise outside shell mode, print and exit inside it.
- rich rendering (plain, fancy panel with hint).
"""

import copy
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from gnuopt import DeclarationError, FaultCode, GetoptException, ParseError, UnknownOptionError, trigger


def fault(**options):
    return UnknownOptionError(
        "test: unknown option: -x",
        title="unknown option",
        code=FaultCode.UNKNOWN_OPTION,
        **options,
    )


class TestException(TestCase):

    def testMessage(self):
        self.assertEqual(str(fault()), "test: unknown option: -x")
        self.assertEqual(str(GetoptException()), "")

    def testTiers(self):
        self.assertTrue(issubclass(UnknownOptionError, ParseError))
        self.assertFalse(issubclass(UnknownOptionError, DeclarationError))

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            fault().options["code"] = None  # type: ignore[index]

    def testReplaceMergesOptions(self):
        replaced = copy.replace(fault(hint="first"), hint="second", shell=False)
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertEqual(replaced.options["hint"], "second")
        self.assertIs(replaced.options["code"], FaultCode.UNKNOWN_OPTION)
        self.assertEqual(str(replaced), "test: unknown option: -x")


class TestFaultCode(TestCase):

    def testNormalize(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11111")

    def testHostLabels(self):
        with mock.patch("__main__.__codes__", {FaultCode.UNKNOWN_OPTION: "E-UNKNOWN"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-UNKNOWN")


class TestTrigger(TestCase):

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownOptionError):
            trigger(fault(), shell=False)

    def testChainsCause(self):
        cause = ValueError("bad")
        with self.assertRaises(UnknownOptionError) as context:
            trigger(fault(cause=cause))
        self.assertIs(context.exception.__cause__, cause)

    def testPrintsAndExitsInShell(self):
        buffer = io.StringIO()
        with self.assertRaises(SystemExit) as context:
            trigger(fault(), shell=True, console=Console(file=buffer, width=120), usage=lambda: "Usage: test\n")
        self.assertEqual(context.exception.code, 1)
        self.assertEqual(buffer.getvalue(), "test: unknown option: -x\nUsage: test\n")

    def testRejectsForeignObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


class TestRich(TestCase):

    def testFancyPanel(self):
        buffer = io.StringIO()
        Console(file=buffer, width=120).print(fault(fancy=True, hint="check the spelling"))
        output = buffer.getvalue()
        self.assertIn("11111", output)
        self.assertIn("Unknown Option", output)
        self.assertIn("check the spelling", output)


if __name__ == "__main__":
    unittest.main()
