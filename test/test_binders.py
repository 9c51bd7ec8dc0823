"""
Tests for field binders.

This module verifies how converted values reach destinations:
- Attribute, item and callback binders assign as documented.
- Names are validated and stripped.
- binder() normalizes strings and rejects anything else.
- Equality and hashing follow the binder identity.
"""
import unittest
from unittest import TestCase

from tokenbind.binders import *


class Destination:
    path = None


class BinderTest(TestCase):

    def testFieldAssignsAttribute(self) -> None:
        target = Destination()
        field("path").assign(target, "a.txt")
        self.assertEqual(target.path, "a.txt")

    def testItemAssignsKey(self) -> None:
        target = {}
        item("path").assign(target, "a.txt")
        self.assertEqual(target, {"path": "a.txt"})

    def testSetterCallsBack(self) -> None:
        calls = []
        binding = setter("path", lambda target, value: calls.append((target, value)))
        binding.assign("target", "value")
        self.assertEqual(calls, [("target", "value")])
        self.assertEqual(binding.name, "path")

    def testSetterRequiresCallable(self) -> None:
        with self.assertRaises(TypeError):
            setter("path", "not callable")

    def testNameValidation(self) -> None:
        with self.assertRaises(TypeError):
            field(1)
        with self.assertRaises(ValueError):
            field("   ")
        self.assertEqual(item(" path ").name, "path")

    def testBinderNormalization(self) -> None:
        explicit = item("path")
        self.assertIs(binder(explicit), explicit)
        self.assertIsInstance(binder("path"), AttributeBinder)
        with self.assertRaises(TypeError):
            binder(1)

    def testEquality(self) -> None:
        self.assertEqual(field("path"), field("path"))
        self.assertNotEqual(field("path"), item("path"))
        self.assertEqual(hash(item("path")), hash(item("path")))
        self.assertEqual(len({field("path"), field("path"), field("count")}), 2)

    def testBuiltBindersAreHashable(self) -> None:
        """
        Binders from field() and item() can be used as set members and mapping keys.
        """
        lookup = {field("path"): 1, item("path"): 2}
        self.assertEqual(lookup[field("path")], 1)
        self.assertEqual(lookup[item("path")], 2)

    def testSetterEqualityUsesCallback(self) -> None:
        callback = lambda target, value: None
        self.assertEqual(setter("path", callback), setter("path", callback))
        self.assertNotEqual(setter("path", callback), setter("path", lambda target, value: None))
        self.assertEqual(hash(setter("path", callback)), hash(setter("path", print)))

    def testRepr(self) -> None:
        self.assertEqual(repr(field("path")), "attributebinder('path')")
        self.assertEqual(repr(item("path")), "itembinder('path')")


if __name__ == "__main__":
    unittest.main()
