"""
manuscripts/tests/test_classification.py

Unit tests for change classification and version label derivation.
"""

from __future__ import annotations

import unittest

from manuscripts.enum.change_type import ChangeType
from manuscripts.logic.classification import (
    ClassifierThresholds,
    classify,
    next_version_label,
    parse_version_label,
)


class TestClassify(unittest.TestCase):
    def test_first_version_is_always_initial(self) -> None:
        for score in (None, 0.0, 50.0, 100.0):
            self.assertIs(classify(score, True), ChangeType.INITIAL)

    def test_threshold_boundaries(self) -> None:
        self.assertIs(classify(69.9, False), ChangeType.MAJOR_UPDATE)
        self.assertIs(classify(70.0, False), ChangeType.MINOR_UPDATE)
        self.assertIs(classify(89.9, False), ChangeType.MINOR_UPDATE)
        self.assertIs(classify(90.0, False), ChangeType.TWEAK)
        self.assertIs(classify(100.0, False), ChangeType.TWEAK)
        self.assertIs(classify(0.0, False), ChangeType.MAJOR_UPDATE)

    def test_custom_thresholds(self) -> None:
        strict = ClassifierThresholds(major=50.0, minor=99.0)
        self.assertIs(classify(60.0, False, strict), ChangeType.MINOR_UPDATE)
        self.assertIs(classify(49.0, False, strict), ChangeType.MAJOR_UPDATE)
        self.assertIs(classify(99.0, False, strict), ChangeType.TWEAK)

    def test_invalid_thresholds_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ClassifierThresholds(major=95.0, minor=90.0)
        with self.assertRaises(ValueError):
            ClassifierThresholds(major=-1.0, minor=90.0)


class TestVersionLabels(unittest.TestCase):
    def test_increments_from_previous_label(self) -> None:
        self.assertEqual(next_version_label("V2.3.1", ChangeType.MAJOR_UPDATE), "V3.0.0")
        self.assertEqual(next_version_label("V2.3.1", ChangeType.MINOR_UPDATE), "V2.4.0")
        self.assertEqual(next_version_label("V2.3.1", ChangeType.TWEAK), "V2.3.2")

    def test_initial_resets_label(self) -> None:
        self.assertEqual(next_version_label("V7.1.4", ChangeType.INITIAL), "V1.0.0")

    def test_leading_v_is_optional(self) -> None:
        self.assertEqual(parse_version_label("4.5.6"), (4, 5, 6))
        self.assertEqual(next_version_label("4.5.6", ChangeType.TWEAK), "V4.5.7")

    def test_malformed_labels_fall_back_to_1_0_0(self) -> None:
        for label in (None, "", "V1.2", "V1.2.3.4", "Vx.1.0", "draft"):
            with self.subTest(label=label):
                self.assertEqual(parse_version_label(label), (1, 0, 0))
        self.assertEqual(next_version_label("V1.two.3", ChangeType.MINOR_UPDATE), "V1.1.0")


if __name__ == "__main__":
    unittest.main()
