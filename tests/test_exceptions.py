"""Tests for domain exception hierarchy."""

from __future__ import annotations

import unittest

from tracked_models.exceptions import (
    ConfigValidationError,
    DuplicateKeyError,
    IndexOutOfRangeError,
    NotFoundError,
    SchemaError,
    TrackedModelsError,
    TriggerDepthExceededError,
    UnknownFieldError,
)


class ExceptionHierarchyTests(unittest.TestCase):
    """Validate exception inheritance contract."""

    def test_exception_hierarchy(self) -> None:
        self.assertTrue(issubclass(TrackedModelsError, RuntimeError))
        for error in (
            UnknownFieldError,
            NotFoundError,
            IndexOutOfRangeError,
            DuplicateKeyError,
            SchemaError,
            TriggerDepthExceededError,
            ConfigValidationError,
        ):
            self.assertTrue(issubclass(error, TrackedModelsError))


if __name__ == "__main__":
    unittest.main()
