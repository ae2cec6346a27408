"""Tests for top-level package lazy exports."""

from __future__ import annotations

import unittest

import tracked_models


class PackageExportTests(unittest.TestCase):
    """Ensure __getattr__ and exported symbols behave as expected."""

    def test_lazy_exports_resolve_known_symbols(self) -> None:
        for name in tracked_models.__all__:
            self.assertIsNotNone(getattr(tracked_models, name), name)
        self.assertTrue(callable(tracked_models.load_config))
        self.assertTrue(callable(tracked_models.export_json))

    def test_exports_are_usable_together(self) -> None:
        class Item(tracked_models.Record):
            fields = (tracked_models.FieldSpec("label", default="x"),)

        items = tracked_models.IndexedSet([Item("1")])
        self.assertEqual(tracked_models.export_json(items), '[{"pk":"1","label":"x"}]')

    def test_unknown_symbol_raises_attribute_error(self) -> None:
        with self.assertRaises(AttributeError):
            getattr(tracked_models, "THIS_DOES_NOT_EXIST")


if __name__ == "__main__":
    unittest.main()
