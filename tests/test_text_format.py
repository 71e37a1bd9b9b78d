from __future__ import annotations

import unittest

from hab_bridge.core.text_format import humanize, underscored


class TestHumanize(unittest.TestCase):
    def test_strips_trailing_id(self) -> None:
        self.assertEqual("Some item", humanize("some_item_id"))

    def test_splits_camel_case(self) -> None:
        self.assertEqual("Some camel case name", humanize("someCamelCaseName"))

    def test_empty_string(self) -> None:
        self.assertEqual("", humanize(""))

    def test_dashes_and_whitespace_collapse(self) -> None:
        self.assertEqual("Living room light", humanize("  living--room \t light "))

    def test_uppercase_run_stays_one_word(self) -> None:
        self.assertEqual("Sensor ht", humanize("sensorHT"))

    def test_digit_boundary(self) -> None:
        self.assertEqual("Floor1 lamp", humanize("floor1Lamp"))

    def test_already_humanized_is_stable(self) -> None:
        for text in ("Some item", "Some camel case name", "Kitchen"):
            self.assertEqual(text, humanize(humanize(text)))

    def test_id_inside_word_is_kept(self) -> None:
        self.assertEqual("Idle humidity", humanize("idle_humidity"))

    def test_underscored(self) -> None:
        self.assertEqual("some_camel_case", underscored("someCamel-case"))


if __name__ == "__main__":
    unittest.main()
