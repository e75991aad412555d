# python
"""
Record reflector tests.

Scope
- dataclass fields become options (tags, derived names, ignored fields).
- parsed values are written back to the record.
- validate(), duplicate(), register_new() and lookup().
- the usage text generated for a reference record.
"""

import dataclasses
import datetime
import enum
import typing
import unittest
from dataclasses import dataclass, field
from unittest import TestCase

from gnuopt import (
    Counter,
    OptionSet,
    TagSyntaxError,
    UnsupportedFieldError,
    records,
)


@dataclass
class Widget:
    name: str = field(default="", metadata={"getopt": "--name=NAME      name of the widget"})
    count: int = field(default=0, metadata={"getopt": "--count -c=COUNT number of widgets"})
    verbose: bool = field(default=False, metadata={"getopt": "-v               be verbose"})
    N: int = field(default=0, metadata={"getopt": "-n=NUMBER        set n to NUMBER"})
    timeout: datetime.timedelta = field(default=datetime.timedelta(), metadata={"getopt": "--timeout        duration of run"})
    lazy: str = ""


REFERENCE = (
    "Usage: program [-v] [--name NAME] [-c COUNT] [-n NUMBER] [--timeout value] [--lazy value] [parameters ...]\n"
    "     --name=NAME      name of the widget\n"
    " -c, --count=COUNT    number of widgets\n"
    " -v                   be verbose\n"
    " -n NUMBER            set n to NUMBER\n"
    "     --timeout=value  duration of run\n"
    "     --lazy=value     unspecified\n"
)


class Level(enum.Enum):
    LOW = "low"
    HIGH = "high"


@dataclass
class Everything:
    flag: bool = False
    ratio: float = 0.5
    tags: list[str] = field(default_factory=list)
    level: Level = Level.LOW
    quiet: Counter = field(default_factory=Counter, metadata={"getopt": "-q quieter"})
    ignored: object = field(default=None, metadata={"getopt": "-"})
    _private: object = None


@dataclass
class Unsupported:
    data: dict = field(default_factory=dict)


@dataclass
class Optionals:
    name: str | None = None
    limit: typing.Optional[int] = None
    level: Level | None = Level.HIGH


@dataclass
class Numbers:
    values: list[int] = field(default_factory=list)


@dataclass
class Either:
    value: int | str = 0


@dataclass
class Malformed:
    bad: str = field(default="", metadata={"getopt": "---bad"})


@dataclass(frozen=True)
class Frozen:
    name: str = ""


class TestRegister(TestCase):

    def testReferenceUsage(self):
        widget, options = records.register_new(Widget(count=42), "program")
        self.assertEqual(options.usage(), REFERENCE)

    def testParsedValuesAreWrittenBack(self):
        widget = Widget()
        options = OptionSet("test")
        records.register(widget, options)
        arguments = options.getopt(["test", "--name", "bob", "-c7", "-v", "-n", "3", "--timeout=1m", "--lazy=yes", "x"])
        self.assertEqual(arguments, ["x"])
        self.assertEqual(widget, Widget("bob", 7, True, 3, datetime.timedelta(minutes=1), "yes"))

    def testDefaultsComeFromTheRecord(self):
        options = OptionSet("test")
        records.register(Widget(name="bob"), options)
        self.assertEqual(options.lookup("name").default, "bob")

    def testSupportedTypes(self):
        everything = Everything()
        options = OptionSet("test")
        declared = records.register(everything, options)
        self.assertEqual([option.name for option in declared], ["--flag", "--ratio", "--tags", "--level", "-q"])
        options.getopt(["test", "--flag", "--ratio", "2", "--tags", "a,b", "--level", "high", "-qq"])
        self.assertTrue(everything.flag)
        self.assertEqual(everything.ratio, 2.0)
        self.assertEqual(everything.tags, ["a", "b"])
        self.assertIs(everything.level, Level.HIGH)
        self.assertEqual(everything.quiet.value, 2)

    def testResetRestoresRecord(self):
        widget = Widget(name="bob")
        options = OptionSet("test")
        records.register(widget, options)
        options.getopt(["test", "--name", "fred"])
        options.reset()
        self.assertEqual(widget.name, "bob")

    def testUnsupportedField(self):
        with self.assertRaises(UnsupportedFieldError) as context:
            records.register(Unsupported(), OptionSet("test"))
        self.assertIn("Unsupported.data", str(context.exception))

    def testOptionalAnnotations(self):
        optionals = Optionals()
        options = OptionSet("test")
        records.register(optionals, options)
        self.assertEqual(options.lookup("limit").default, "0")
        options.getopt(["test", "--name", "bob", "--limit", "5"])
        self.assertEqual(optionals.name, "bob")
        self.assertEqual(optionals.limit, 5)
        self.assertIs(optionals.level, Level.HIGH)

    def testListItemsMustBeStrings(self):
        with self.assertRaises(UnsupportedFieldError) as context:
            records.register(Numbers(), OptionSet("test"))
        self.assertIn("Numbers.values", str(context.exception))

    def testUnionsOtherThanOptionalAreRejected(self):
        with self.assertRaises(UnsupportedFieldError):
            records.register(Either(), OptionSet("test"))

    def testMalformedTagNamesTheField(self):
        with self.assertRaises(TagSyntaxError) as context:
            records.register(Malformed(), OptionSet("test"))
        self.assertIn("Malformed.bad: tag must not start with ---", str(context.exception))

    def testRejectsNonRecords(self):
        for record in (object(), Widget, Frozen()):
            with self.assertRaises(TypeError):
                records.register(record, OptionSet("test"))


class TestValidate(TestCase):

    def testValidRecord(self):
        self.assertIsNone(records.validate(Widget()))

    def testInvalidRecord(self):
        self.assertIsInstance(records.validate(Malformed()), TagSyntaxError)
        self.assertIsInstance(records.validate(Unsupported()), UnsupportedFieldError)


class TestDuplicate(TestCase):

    def testIndependentCopies(self):
        original = Everything(tags=["a"])
        first, options = records.register_new(original, "test")
        options.getopt(["test", "--tags", "b"])
        self.assertEqual(first.tags, ["b"])
        self.assertEqual(original.tags, ["a"])

    def testIgnoredFieldsAreShared(self):
        marker = object()
        copy = records.duplicate(Everything(ignored=marker))
        self.assertIs(copy.ignored, marker)

    def testMalformedRecordRaises(self):
        with self.assertRaises(TagSyntaxError):
            records.duplicate(Malformed())

    def testRegisterNewConfiguration(self):
        _, options = records.register_new(Widget(), "test", permute=False, column=30)
        self.assertFalse(options.permute)
        self.assertEqual(options.column, 30)
        self.assertEqual(options.program, "test")


class TestLookup(TestCase):

    def testByEitherName(self):
        @dataclass
        class Record:
            option: str = field(default="value", metadata={"getopt": "--option -o"})

        record = Record()
        for name in ("option", "--option", "o", "-o"):
            self.assertEqual(records.lookup(record, name), "value")
        self.assertIsNone(records.lookup(record, "missing"))

    def testAdapterFieldsReturnTheirValue(self):
        self.assertEqual(records.lookup(Everything(quiet=Counter(3)), "q"), 3)

    def testInvalidRecords(self):
        self.assertIsNone(records.lookup(Malformed(), "bad"))
        self.assertIsNone(records.lookup(object(), "x"))


if __name__ == "__main__":
    unittest.main()
