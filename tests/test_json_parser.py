# -*- coding: utf-8 -*-
"""
Tests for the model payload parser.
"""

import sys
import unittest

from opentelemetry.instrumentation.awssdk.internal._json_parser import (
    MAX_NESTING_DEPTH,
    OutOfRangeNumber,
    PayloadParseError,
    parse,
)


class TestParse(unittest.TestCase):
    def test_values(self):
        for text, expected in (
            ('{"a": 1}', {"a": 1}),
            ("[1, 2, 3]", [1, 2, 3]),
            ('"text"', "text"),
            ("true", True),
            ("false", False),
            ("null", None),
            ("{}", {}),
            ("[]", []),
            (" \n\t{ \"a\" : [ ] } \r\n", {"a": []}),
            ("-42", -42),
            ("123456789012345678901234567890", 123456789012345678901234567890),
            ("0.5", 0.5),
            ("0.0", 0.0),
            ("1.0", 1.0),
            ("5E-1", 0.5),
            ('{"a": {"b": [null, {"c": false}]}}', {"a": {"b": [None, {"c": False}]}}),
        ):
            with self.subTest(text=text):
                self.assertEqual(parse(text), expected)

    def test_string_escapes(self):
        self.assertEqual(parse(r'"a\"b\n c\u0041"'), 'a"b\n cA')
        self.assertEqual(
            parse(r'"\\ \/ \b \f \r \t"'), "\\ / \b \f \r \t"
        )
        self.assertEqual(parse(r'"\ud83d\ude00"'), "\U0001F600")
        self.assertEqual(parse('"héllo"'), "héllo")

    def test_bytes_inputs(self):
        payload = '{"prompt": "héllo"}'.encode("utf-8")
        for value in (
            payload,
            bytearray(payload),
            memoryview(payload),
            b"\xef\xbb\xbf" + payload,
        ):
            with self.subTest(type=type(value).__name__):
                self.assertEqual(parse(value), {"prompt": "héllo"})

    def test_out_of_range_fraction_is_marked(self):
        tree = parse('{"temperature": 1.5, "top_p": 0.9, "max_tokens": 512}')
        self.assertEqual(tree["temperature"], OutOfRangeNumber("1.5"))
        self.assertEqual(tree["top_p"], 0.9)
        self.assertEqual(tree["max_tokens"], 512)

        for text in ("-0.1", "2.5", "1e3", "1.0000001"):
            with self.subTest(text=text):
                self.assertIsInstance(parse(text), OutOfRangeNumber)

    def test_malformed_documents(self):
        for text in (
            "",
            "   ",
            '{"a": 1',
            '{"a" 1}',
            '{"a": 1,}',
            "[1, 2",
            "[1 2]",
            '"unterminated',
            '{"a": 1} trailing',
            "{a: 1}",
            "nul",
            "01",
            "1.",
            "+1",
            '"bad \\x escape"',
            '"\\u12"',
            '"tab\there"',
            "}",
        ):
            with self.subTest(text=text):
                with self.assertRaises(PayloadParseError):
                    parse(text)

    def test_invalid_utf8(self):
        with self.assertRaises(PayloadParseError):
            parse(b'{"a": "\xff"}')

    def test_error_position(self):
        with self.assertRaises(PayloadParseError) as ctx:
            parse('{"a": 1} x')
        self.assertEqual(ctx.exception.position, 9)
        self.assertIsInstance(ctx.exception, ValueError)

    def test_nesting_limit(self):
        deep = "[" * (MAX_NESTING_DEPTH + 1) + "]" * (MAX_NESTING_DEPTH + 1)
        with self.assertRaises(PayloadParseError):
            parse(deep)
        shallow = "[" * MAX_NESTING_DEPTH + "]" * MAX_NESTING_DEPTH
        self.assertIsInstance(parse(shallow), list)

    def test_integer_beyond_conversion_limit_is_marked(self):
        limit = getattr(sys, "get_int_max_str_digits", lambda: 0)()
        if not limit:
            self.skipTest("interpreter has no integer string conversion limit")
        literal = "9" * (limit + 1)
        tree = parse('{"max_tokens": ' + literal + ', "temperature": 0.5}')
        self.assertEqual(tree["max_tokens"], OutOfRangeNumber(literal))
        self.assertEqual(tree["temperature"], 0.5)
