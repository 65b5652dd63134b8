"""
Parameter variants and value tokenization behavioral tests.

Scope
- Validate clean(), tokenize() and tokenize_array() against inline, spaced and quoted input.
- Validate every built-in variant (Switch, Boolean, Integer, Float, String, StringArray).
- Validate the Custom extension point and descriptor sanitization.

Conventions
- Test method names follow CamelCase per project convention.
- Streams are positioned on the option token, as the parser leaves them before dispatch.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from parametron import (
    Boolean,
    ConfigurationError,
    Custom,
    ExtraInlineValuesError,
    Float,
    Integer,
    InvalidValueError,
    MissingValueError,
    ParameterKind,
    String,
    StringArray,
    Switch,
    TokenStream,
    ValueCountError,
    clean,
    extract_option,
    tokenize,
    tokenize_array,
)


def positioned(*tokens):
    """Return a stream whose current token is the first one, labelled like the parser does."""
    stream = TokenStream(tokens)
    stream.option = extract_option(stream.next())
    return stream


class TestClean(TestCase):
    """Behavioral tests for token cleaning."""

    def testTrimsWhitespace(self):
        self.assertEqual(clean("  value \t"), "value")

    def testDropsOneTrailingComma(self):
        self.assertEqual(clean("value,"), "value")
        self.assertEqual(clean("value,,"), "value,")

    def testStripsOneLayerOfMatchingQuotes(self):
        self.assertEqual(clean('"my file"'), "my file")
        self.assertEqual(clean("'my file'"), "my file")
        self.assertEqual(clean('""nested""'), '"nested"')

    def testKeepsUnmatchedQuotes(self):
        self.assertEqual(clean("\"mixed'"), "\"mixed'")
        self.assertEqual(clean('"'), '"')

    def testCommaIsDroppedBeforeQuotes(self):
        self.assertEqual(clean("'a',"), "a")


class TestTokenize(TestCase):
    """Behavioral tests for single-value tokenization."""

    def testInlineValue(self):
        stream = positioned("--out=file.txt", "next")
        self.assertEqual(tokenize(stream), "file.txt")
        self.assertEqual(stream.peek(), "next")

    def testInlineValueKeepsLaterEquals(self):
        self.assertEqual(tokenize(positioned("--define=key=value")), "key=value")

    def testInlineDelimiterRejected(self):
        with self.assertRaises(ExtraInlineValuesError) as context:
            tokenize(positioned("--out=a,b"))
        self.assertIn("expected one", str(context.exception))
        self.assertIn("'--out'", str(context.exception))

    def testSpacedValueIsConsumed(self):
        stream = positioned("--out", "'file.txt'")
        self.assertEqual(tokenize(stream), "file.txt")
        self.assertFalse(stream.has_next())

    def testBareDashIsAValue(self):
        self.assertEqual(tokenize(positioned("--out", "-")), "-")

    def testOptionShapedNextTokenRejected(self):
        with self.assertRaises(MissingValueError) as context:
            tokenize(positioned("--out", "-x"))
        self.assertIn("got '-x'", str(context.exception))

    def testMissingValue(self):
        with self.assertRaises(MissingValueError) as context:
            tokenize(positioned("--out"))
        self.assertIn("got ''", str(context.exception))


class TestTokenizeArray(TestCase):
    """Behavioral tests for array tokenization."""

    def testInlineValuesAreSplitAndCleaned(self):
        self.assertEqual(tokenize_array(positioned("--list=a, b,'c'"), "+"), ["a", "b", "c"])

    def testSpacedValuesStopAtArity(self):
        stream = positioned("--list", "a", "b", "c")
        self.assertEqual(tokenize_array(stream, 2), ["a", "b"])
        self.assertEqual(stream.peek(), "c")

    def testSpacedValuesStopAtNextOption(self):
        stream = positioned("--list", "a", "b", "-x")
        self.assertEqual(tokenize_array(stream, "+"), ["a", "b"])
        self.assertEqual(stream.peek(), "-x")

    def testFixedArityShortfall(self):
        with self.assertRaises(ValueCountError) as context:
            tokenize_array(positioned("--list", "a", "-x"), 2)
        self.assertIn("expected 2", str(context.exception))
        self.assertIn("got 1", str(context.exception))
        self.assertEqual(context.exception.options["actual"], 1)

    def testFixedArityOverflowInline(self):
        with self.assertRaises(ValueCountError) as context:
            tokenize_array(positioned("--list=a,b,c"), 2)
        self.assertEqual(context.exception.options["expected"], 2)
        self.assertEqual(context.exception.options["actual"], 3)

    def testInlineTrailingDelimiterIsIgnored(self):
        self.assertEqual(tokenize_array(positioned("--pair=a,b,"), 2), ["a", "b"])

    def testEmptyInlineRemainderHasNoValues(self):
        with self.assertRaises(ValueCountError) as context:
            tokenize_array(positioned("--files="), "+")
        self.assertEqual(str(context.exception), "expected one or more arguments for option '--files', got 0")
        self.assertEqual(context.exception.options["actual"], 0)
        self.assertEqual(tokenize_array(positioned("--none="), 0), [])

    def testMissingValues(self):
        with self.assertRaises(MissingValueError):
            tokenize_array(positioned("--list"), "+")
        with self.assertRaises(MissingValueError):
            tokenize_array(positioned("--list", "--other"), "+")


class TestScalarVariants(TestCase):
    """Behavioral tests for Switch, Boolean, Integer, Float and String."""

    def testSwitchTogglesWithoutConsuming(self):
        active = Switch("active", "a")
        stream = positioned("-a", "value")
        active.parse(stream)
        self.assertIs(active.value, True)
        self.assertEqual(stream.peek(), "value")
        active.parse(stream)
        self.assertIs(active.value, False)

    def testSwitchTogglesFromTrueDefault(self):
        color = Switch("color", default=True)
        color.parse(positioned("--color"))
        self.assertIs(color.value, False)

    def testBooleanLiterals(self):
        for token, expected in (("true", True), ("yes", True), ("false", False), ("no", False)):
            with self.subTest(token=token):
                convert = Boolean("convert", default=not expected)
                convert.parse(positioned("--convert", token))
                self.assertIs(convert.value, expected)

    def testBooleanIsCaseSensitive(self):
        with self.assertRaises(InvalidValueError) as context:
            Boolean("convert").parse(positioned("--convert=True"))
        self.assertIn("'True'", str(context.exception))
        self.assertIn("'--convert'", str(context.exception))

    def testIntegerParsing(self):
        group = Integer("group", default=1)
        self.assertEqual(group.value, 1)
        group.parse(positioned("--group=-7"))
        self.assertEqual(group.value, -7)

    def testIntegerRejectsNonIntegers(self):
        for token in ("3.5", "abc", "1_000", ""):
            with self.subTest(token=token):
                with self.assertRaises(InvalidValueError):
                    Integer("group").parse(positioned("--group=" + token))

    def testFloatParsing(self):
        ratio = Float("ratio")
        self.assertEqual(ratio.value, 0.0)
        ratio.parse(positioned("--ratio", "2.5"))
        self.assertEqual(ratio.value, 2.5)
        ratio = Float("ratio")
        ratio.parse(positioned("--ratio=1e3"))
        self.assertEqual(ratio.value, 1000.0)

    def testFloatRejectsGarbage(self):
        with self.assertRaises(InvalidValueError):
            Float("ratio").parse(positioned("--ratio", "abc"))

    def testStringInlineAndSpacedAgree(self):
        inline = String("out", "o")
        spaced = String("out", "o")
        inline.parse(positioned("--out=out.txt"))
        spaced.parse(positioned("--out", "out.txt"))
        self.assertEqual(inline.value, spaced.value)
        self.assertEqual(inline.value, "out.txt")

    def testStringQuotedValue(self):
        name = String("name")
        name.parse(positioned("--name", '"John Doe"'))
        self.assertEqual(name.value, "John Doe")


class TestStringArray(TestCase):
    """Behavioral tests for StringArray arity and rendering."""

    def testParsesFixedArity(self):
        point = StringArray("point", "p", arity=3)
        point.parse(positioned("-p", "1", "2", "3"))
        self.assertEqual(point.value, ["1", "2", "3"])

    def testValueIsACopy(self):
        tags = StringArray("tags", default=["a"])
        tags.value.append("b")
        self.assertEqual(tags.value, ["a"])

    def testNegativeArityIsAConfigurationError(self):
        with self.assertRaises(ConfigurationError):
            StringArray("point", arity=-1)

    def testArityMustBeIntegerOrPlus(self):
        with self.assertRaises(TypeError):
            StringArray("point", arity="*")

    def testUsageRepeatsSmallArity(self):
        self.assertEqual(StringArray("point", "p", arity=3, metavar="n").usage(), "-p N N N")
        self.assertEqual(StringArray("point", "p", arity=3, metavar="n").help(), "-p, --point N N N")

    def testUsageCollapsesLargeOrVariableArity(self):
        self.assertEqual(StringArray("point", "p", arity=4, metavar="n").usage(), "-p N [N...]")
        self.assertEqual(StringArray("tags", arity="+").help(), "--tags VALUE [VALUE...]")

    def testZeroArityUsageHasNoMetavar(self):
        empty = StringArray("empty", "e", arity=0)
        self.assertEqual(empty.usage(), "-e")
        self.assertEqual(empty.help(), "-e, --empty VALUE [VALUE...]")


class TestDescriptor(TestCase):
    """Behavioral tests for shared descriptor metadata."""

    def testSpellingsAndFragments(self):
        out = String("out", "o", metavar="file", descr="  Output file ")
        self.assertEqual(out.metavar, "FILE")
        self.assertEqual(out.descr, "Output file")
        self.assertEqual(out.spelling, "-o")
        self.assertEqual(out.names, ("-o", "--out"))
        self.assertEqual(out.usage(), "-o FILE")
        self.assertEqual(out.help(), "-o, --out FILE")

    def testSwitchFragmentsHaveNoMetavar(self):
        self.assertEqual(Switch("active", "a").usage(), "-a")
        self.assertEqual(Switch("active", "a").help(), "-a, --active")
        self.assertEqual(Switch("verbose").usage(), "--verbose")

    def testFreshParametersAreNotInvokedNorGrouped(self):
        out = String("out")
        self.assertFalse(out.invoked)
        self.assertIsNone(out.group)
        self.assertFalse(out.required)
        self.assertIs(out.kind, ParameterKind.STRING)

    def testInvalidNames(self):
        for name in ("--out", "", "with space", "a=b", "_hidden"):
            with self.subTest(name=name):
                with self.assertRaises(ConfigurationError):
                    String(name)

    def testInvalidShortNames(self):
        for short in ("ab", "-", "="):
            with self.subTest(short=short):
                with self.assertRaises(ConfigurationError):
                    String("out", short)

    def testWronglyTypedMetadata(self):
        with self.assertRaises(TypeError):
            String(3)
        with self.assertRaises(TypeError):
            Switch("active", default="yes")
        with self.assertRaises(TypeError):
            Integer("group", default=True)
        with self.assertRaises(TypeError):
            String("out", required="yes")

    def testEmptyMetavarRejected(self):
        with self.assertRaises(ConfigurationError):
            String("out", metavar="  ")


class TestCustom(TestCase):
    """Behavioral tests for the Custom extension point."""

    def testParseCallableReusesTokenizers(self):
        def point(stream):
            x, y = tokenize_array(stream, 2)
            return float(x), float(y)

        origin = Custom("origin", parse=point, default=(0.0, 0.0), metavar="n")
        self.assertEqual(origin.value, (0.0, 0.0))
        origin.parse(positioned("--origin=1.5,2"))
        self.assertEqual(origin.value, (1.5, 2.0))
        self.assertIs(origin.kind, ParameterKind.CUSTOM)

    def testDefaultFragments(self):
        origin = Custom("origin", "O", parse=tokenize, metavar="xy")
        self.assertEqual(origin.usage(), "-O XY")
        self.assertEqual(origin.help(), "-O, --origin XY")

    def testFragmentOverrides(self):
        origin = Custom(
            "origin",
            parse=tokenize,
            usage=lambda parameter: "--origin X,Y",
            help=lambda parameter: "--origin=X,Y",
        )
        self.assertEqual(origin.usage(), "--origin X,Y")
        self.assertEqual(origin.help(), "--origin=X,Y")

    def testSwitchLikeCustomHasNoMetavar(self):
        dry = Custom("dry-run", "n", parse=lambda stream: True, switch=True)
        self.assertEqual(dry.usage(), "-n")
        self.assertEqual(dry.help(), "-n, --dry-run")

    def testParseMustBeCallable(self):
        with self.assertRaises(TypeError):
            Custom("origin", parse="nope")
        with self.assertRaises(TypeError):
            Custom("origin", parse=tokenize, usage="nope")


if __name__ == "__main__":
    unittest.main()
