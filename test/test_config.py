# python
"""
Parser configuration behavioral tests (defaults, directives, immutability).

Scope
- Validate ParserConfig defaults and the bundling_override → bundling implication.
- Validate configure() directives (order, spelling variants, unknown directives).
- Validate value semantics: read-only fields, equality, hashing, copy.replace().

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from argosy import ParserConfig


class TestParserConfig(TestCase):
    """Behavioral tests for ParserConfig."""

    def testDefaults(self):
        config = ParserConfig()
        self.assertTrue(config.case_insensitive)
        self.assertTrue(config.auto_abbreviate)
        self.assertFalse(config.bundling)
        self.assertFalse(config.bundling_override)
        self.assertFalse(config.require_order)
        self.assertFalse(config.allow_single_dash_words)
        self.assertFalse(config.pass_through)

    def testOverrideImpliesBundling(self):
        config = ParserConfig(bundling_override=True)
        self.assertTrue(config.bundling)
        self.assertTrue(config.bundling_override)

    def testConfigureAppliesDirectivesInOrder(self):
        config = ParserConfig().configure("bundling", "no_ignore_case", "require_order")
        self.assertTrue(config.bundling)
        self.assertFalse(config.case_insensitive)
        self.assertTrue(config.require_order)

        config = config.configure("permute", "no_bundling")
        self.assertFalse(config.require_order)
        self.assertFalse(config.bundling)

    def testConfigureAcceptsSpellingVariants(self):
        config = ParserConfig().configure("Bundling-Override", "PASS_THROUGH", "no-auto-abbrev")
        self.assertTrue(config.bundling)
        self.assertTrue(config.bundling_override)
        self.assertTrue(config.pass_through)
        self.assertFalse(config.auto_abbreviate)

    def testNoBundlingClearsOverride(self):
        config = ParserConfig().configure("bundling_override", "no_bundling")
        self.assertFalse(config.bundling)
        self.assertFalse(config.bundling_override)

    def testSingleDashWordsDirective(self):
        config = ParserConfig().configure("single_dash_words")
        self.assertTrue(config.allow_single_dash_words)
        self.assertFalse(config.configure("no_single_dash_words").allow_single_dash_words)

    def testConfigureReturnsNewConfig(self):
        config = ParserConfig()
        derived = config.configure("bundling")
        self.assertIsNot(config, derived)
        self.assertFalse(config.bundling)

    def testUnknownDirective(self):
        with self.assertRaises(ValueError):
            ParserConfig().configure("gnu_compat")
        with self.assertRaises(TypeError):
            ParserConfig().configure(1)

    def testReadOnly(self):
        config = ParserConfig()
        with self.assertRaises(AttributeError):
            config.bundling = True

    def testEqualityAndHashing(self):
        self.assertEqual(ParserConfig(), ParserConfig())
        self.assertEqual(ParserConfig(bundling=True), ParserConfig().configure("bundling"))
        self.assertNotEqual(ParserConfig(), ParserConfig(pass_through=True))
        self.assertEqual(len({ParserConfig(), ParserConfig()}), 1)

    def testReplace(self):
        config = copy.replace(ParserConfig(), require_order=True)
        self.assertTrue(config.require_order)
        self.assertTrue(config.case_insensitive)

    def testKeywordOnly(self):
        with self.assertRaises(TypeError):
            ParserConfig(True)

    def testRepresentation(self):
        self.assertTrue(repr(ParserConfig()).startswith("parser-config(case_insensitive=True"))


if __name__ == "__main__":
    unittest.main()
