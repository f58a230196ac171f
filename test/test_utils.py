# python
"""
Utility behavioral tests (Unset sentinel, coalesce, rename, mirror, ordinal).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from argosy.utils import Unset, UnsetType, coalesce, rename, mirror, ordinal


class TestUnset(TestCase):

    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testSealed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestHelpers(TestCase):

    def testRename(self):
        @rename("renamed")
        def original():
            pass
        self.assertEqual(original.__name__, "renamed")
        with self.assertRaises(TypeError):
            rename("other")(len)
        with self.assertRaises(TypeError):
            rename(42)

    def testMirrorCopiesContainers(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a", "b"]

        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testOrdinal(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")


if __name__ == "__main__":
    unittest.main()
