# -*- coding: utf-8 -*-
"""
Tests for value serialization and typed coercions.
"""

import math
import unittest
from collections import OrderedDict
from dataclasses import dataclass
from typing import List

from opentelemetry.instrumentation.awssdk.internal._json_parser import (
    OutOfRangeNumber,
)
from opentelemetry.instrumentation.awssdk.internal._serializer import (
    serialize,
    to_bracketed_list,
    to_int,
    to_probability,
)


@dataclass
class Projection:
    ProjectionType: str
    NonKeyAttributes: List[str]


class ModelLike:
    def to_dict(self):
        return {"IndexName": "by-date", "Limit": 10}


class TestSerialize(unittest.TestCase):
    def test_serialize_table_driven(self):
        for label, value, expected in (
            ("none", None, None),
            ("string", "my-bucket", "my-bucket"),
            ("empty string", "", ""),
            ("int", 25, "25"),
            ("float", 0.5, "0.5"),
            ("true", True, "true"),
            ("false", False, "false"),
            ("bytes", b"abc", "abc"),
            ("invalid bytes", b"\xff", None),
            ("mapping keys", OrderedDict([("orders", {}), ("users", {})]), "[orders,users]"),
            ("list", ["a", "b", "c"], "[a,b,c]"),
            ("tuple", ("x",), "[x]"),
            ("nested list", [["a", "b"], "c"], "[[a,b],c]"),
            ("empty list", [], None),
            ("list of empties", [None, "", []], None),
            ("set", {"b", "a"}, "[a,b]"),
            ("out of range", OutOfRangeNumber("1.5"), None),
            (
                "dataclass",
                Projection("INCLUDE", ["a"]),
                '{"ProjectionType":"INCLUDE","NonKeyAttributes":["a"]}',
            ),
            ("to_dict", ModelLike(), '{"IndexName":"by-date","Limit":10}'),
        ):
            with self.subTest(case=label):
                self.assertEqual(serialize(value), expected)

    def test_dataclass_type_is_not_serialized_as_json(self):
        self.assertEqual(serialize(Projection), str(Projection))


class TestCoercions(unittest.TestCase):
    def test_to_int(self):
        for value, expected in (
            (5, 5),
            (0, 0),
            (-3, -3),
            (7.0, 7),
            (7.5, None),
            (math.nan, None),
            (math.inf, None),
            (True, None),
            (" 12 ", 12),
            ("12.5", None),
            (None, None),
            ([1], None),
        ):
            with self.subTest(value=value):
                self.assertEqual(to_int(value), expected)

    def test_to_probability(self):
        for value, expected in (
            (0, 0.0),
            (1, 1.0),
            (0.25, 0.25),
            ("0.5", 0.5),
            (1.5, None),
            (-0.1, None),
            (2, None),
            (math.nan, None),
            (False, None),
            (OutOfRangeNumber("1.5"), None),
            ("warm", None),
            (None, None),
        ):
            with self.subTest(value=value):
                self.assertEqual(to_probability(value), expected)

    def test_to_bracketed_list(self):
        self.assertEqual(to_bracketed_list("end_turn"), "[end_turn]")
        self.assertEqual(to_bracketed_list(["stop", "length"]), "[stop,length]")
        self.assertIsNone(to_bracketed_list([]))
        self.assertIsNone(to_bracketed_list(""))
