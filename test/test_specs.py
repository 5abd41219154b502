"""
Specification construction, normalization and read-only result slots.

Scope
- Validate name and display metadata sanitization.
- Validate the parameter policy implications.
- Validate the read-only mirrors and value()/values() fallbacks.

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from rich.text import Text

from argsieve import Registry, Specification


class TestNames(TestCase):
    """Alias validation."""

    def testNamedSpecificationKeepsNamesInOrder(self):
        spec = Specification("--count", "-c", "c")
        self.assertEqual(spec.names, ("--count", "-c", "c"))
        self.assertFalse(spec.wildcard)

    def testNoNamesMakesAWildcard(self):
        spec = Specification()
        self.assertIsNone(spec.names)
        self.assertTrue(spec.wildcard)

    def testEmptyNameRejected(self):
        with self.assertRaises(ValueError):
            Specification("")

    def testWhitespaceRejected(self):
        with self.assertRaises(ValueError):
            Specification("--dry run")

    def testEqualsSignRejected(self):
        with self.assertRaises(ValueError):
            Specification("--a=b")

    def testBareDashesRejected(self):
        for name in ("-", "--"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Specification(name)

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            Specification(5)

    def testNonAsciiAccepted(self):
        self.assertEqual(Specification("--größe").names, ("--größe",))


class TestParameterPolicy(TestCase):
    """required ⇒ requires_param ⇒ allows_param; multi_param ⇒ allows_param."""

    def testPlainFlag(self):
        spec = Specification("--verbose")
        self.assertFalse(spec.required)
        self.assertFalse(spec.allows_param)
        self.assertFalse(spec.requires_param)
        self.assertFalse(spec.multi_param)

    def testRequiredImpliesParameter(self):
        spec = Specification("--name", required=True)
        self.assertTrue(spec.requires_param)
        self.assertTrue(spec.allows_param)

    def testRequiresParamImpliesAllows(self):
        spec = Specification("--name", requires_param=True)
        self.assertTrue(spec.allows_param)
        self.assertFalse(spec.required)

    def testMultiImpliesAllows(self):
        spec = Specification("--tag", multi_param=True)
        self.assertTrue(spec.allows_param)
        self.assertFalse(spec.requires_param)

    def testConverterImpliesAllowsOnNamed(self):
        self.assertTrue(Specification("--count", type=int).allows_param)

    def testConverterOnWildcardDoesNotChangePolicy(self):
        self.assertFalse(Specification(type=int).allows_param)

    def testDefaultConverterIsStr(self):
        self.assertIs(Specification("--name").type, str)

    def testConverterMustBeCallable(self):
        with self.assertRaises(TypeError):
            Specification("--count", type="int")

    def testDependencyMustBeASpecification(self):
        with self.assertRaises(TypeError):
            Specification("--b", only_if="--a")

    def testDependencyDefaultsToNone(self):
        self.assertIsNone(Specification("--b").only_if)


class TestDisplay(TestCase):
    """metavar / descr."""

    def testDefaultsToNone(self):
        spec = Specification("--name")
        self.assertIsNone(spec.metavar)
        self.assertIsNone(spec.descr)

    def testMetavarIsStripped(self):
        self.assertEqual(Specification(metavar=" file ").metavar, "file")

    def testEmptyMetavarRejected(self):
        for metavar in ("", "   "):
            with self.subTest(metavar=metavar), self.assertRaises(ValueError):
                Specification(metavar=metavar)

    def testMetavarMustBeAString(self):
        with self.assertRaises(TypeError):
            Specification(metavar=3)

    def testDescrAcceptsRichText(self):
        descr = Text("match case-insensitively", style="italic")
        self.assertIs(Specification("-i", descr=descr).descr, descr)

    def testDescrMustBeTextual(self):
        with self.assertRaises(TypeError):
            Specification("-i", descr=None)


class TestResultSlots(TestCase):
    """Mirrors and convenience readers."""

    def testFreshSlots(self):
        spec = Specification("--tag", multi_param=True)
        self.assertFalse(spec.found)
        self.assertFalse(spec.failed)
        self.assertIsNone(spec.matched)
        self.assertIsNone(spec.param)
        self.assertEqual(spec.params, ())
        self.assertIsNone(Specification("--name").params)

    def testSlotsAreReadOnly(self):
        spec = Specification("--verbose")
        with self.assertRaises(AttributeError):
            spec.found = True
        with self.assertRaises(AttributeError):
            spec.names = ("--other",)

    def testParamsIsASnapshot(self):
        registry = Registry()
        files = registry.add(multi_param=True)
        registry.match(["a", "b"])
        self.assertEqual(files.params, ("a", "b"))
        values = files.values()
        values.append("c")
        self.assertEqual(files.params, ("a", "b"))

    def testFallbacksBeforeMatching(self):
        spec = Specification("--name", allows_param=True)
        self.assertIsNone(spec.value())
        self.assertEqual(spec.value("anonymous"), "anonymous")
        self.assertIsNone(spec.values())
        self.assertEqual(spec.values(["a"]), ["a"])

    def testSingleValuedValues(self):
        registry = Registry()
        name = registry.add("--name", allows_param=True)
        registry.match(["--name", "ada"])
        self.assertEqual(name.value(), "ada")
        self.assertEqual(name.values(), ["ada"])

    def testFoundWithoutValue(self):
        registry = Registry()
        name = registry.add("--name", allows_param=True)
        registry.match(["--name"])
        self.assertTrue(name.found)
        self.assertEqual(name.value("anonymous"), "anonymous")
        self.assertEqual(name.values(["anonymous"]), ["anonymous"])


class TestRepresentation(TestCase):
    """repr and rich repr."""

    def testRepr(self):
        representation = repr(Specification("--count", "-c"))
        self.assertTrue(representation.startswith("specification(names=('--count', '-c'), required=False"))
        self.assertTrue(representation.endswith("params=None)"))

    def testRichRepr(self):
        fields = dict(Specification("--count").__rich_repr__())
        self.assertEqual(set(fields), set(Specification.__displayable__))
        self.assertEqual(fields["names"], ("--count",))


if __name__ == "__main__":
    unittest.main()
