# Copyright The OpenTelemetry Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Parser for serialized model invocation bodies.

Produces plain Python values: dict, list, str, int, float, bool and None.
Model bodies only carry fractional numbers for probability-like settings
(temperature, top_p, ...), so a literal with a fraction or exponent part must
lie in [0.0, 1.0]. An out-of-range literal does not fail the document; it is
kept in the tree as an ``OutOfRangeNumber`` that path resolution never
matches.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

MAX_NESTING_DEPTH = 128

_WHITESPACE = " \t\n\r"
_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)?")
_PLAIN_STRING_RUN = re.compile(r'[^"\\\x00-\x1f]+')
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")

_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_LITERALS = (("true", True), ("false", False), ("null", None))


class PayloadParseError(ValueError):
    """The payload is not a well-formed document."""

    def __init__(self, message: str, position: int = -1):
        super().__init__(
            message if position < 0 else f"{message} at position {position}"
        )
        self.position = position


class OutOfRangeNumberError(PayloadParseError):
    """A numeric literal cannot be represented within its bound."""

    def __init__(
        self, literal: str, position: int = -1, reason: Optional[str] = None
    ):
        super().__init__(
            reason or f"Fractional value {literal} is outside [0.0, 1.0]",
            position,
        )
        self.literal = literal


@dataclass(frozen=True)
class OutOfRangeNumber:
    """
    Placeholder for a numeric literal that failed its bound: a fraction
    outside [0.0, 1.0], or an integer too long to convert.
    """

    literal: str


class _JsonParser:
    def __init__(self, text: str):
        self.text = text
        self.position = 0

    def parse(self) -> Any:
        self._skip_whitespace()
        value = self._read_value(0)
        self._skip_whitespace()
        if self.position != len(self.text):
            raise PayloadParseError("Unexpected trailing data", self.position)
        return value

    def _skip_whitespace(self):
        text = self.text
        while self.position < len(text) and text[self.position] in _WHITESPACE:
            self.position += 1

    def _current(self) -> str:
        if self.position >= len(self.text):
            raise PayloadParseError("Unexpected end of input", self.position)
        return self.text[self.position]

    def _expect(self, char: str):
        self._skip_whitespace()
        if self._current() != char:
            raise PayloadParseError(
                f"Expected '{char}' but found '{self._current()}'",
                self.position,
            )
        self.position += 1

    def _read_value(self, depth: int) -> Any:
        self._skip_whitespace()
        char = self._current()
        if char == '"':
            return self._read_string()
        if char == "{":
            return self._read_object(depth + 1)
        if char == "[":
            return self._read_array(depth + 1)
        if char == "-" or char.isdigit():
            try:
                return self._read_number()
            except OutOfRangeNumberError as e:
                return OutOfRangeNumber(e.literal)
        for literal, value in _LITERALS:
            if self.text.startswith(literal, self.position):
                self.position += len(literal)
                return value
        raise PayloadParseError(f"Unexpected character '{char}'", self.position)

    def _read_number(self) -> Union[int, float]:
        match = _NUMBER.match(self.text, self.position)
        if match is None:
            raise PayloadParseError("Invalid number", self.position)
        start = self.position
        literal = match.group(0)
        self.position = match.end()
        if match.group(1) is None and match.group(2) is None:
            try:
                return int(literal)
            except ValueError:
                # sys.get_int_max_str_digits() limits str to int conversion
                raise OutOfRangeNumberError(
                    literal, start, f"Integer literal of {len(literal)} digits"
                ) from None
        value = float(literal)
        if not 0.0 <= value <= 1.0:
            raise OutOfRangeNumberError(literal, start)
        return value

    def _read_string(self) -> str:
        self._expect('"')
        text = self.text
        chunks: List[str] = []
        while True:
            run = _PLAIN_STRING_RUN.match(text, self.position)
            if run is not None:
                chunks.append(run.group(0))
                self.position = run.end()
            char = self._current()
            if char == '"':
                self.position += 1
                return "".join(chunks)
            if char != "\\":
                raise PayloadParseError(
                    "Unescaped control character in string", self.position
                )
            self.position += 1
            escape = self._current()
            if escape in _SIMPLE_ESCAPES:
                chunks.append(_SIMPLE_ESCAPES[escape])
                self.position += 1
            elif escape == "u":
                chunks.append(self._read_unicode_escape())
            else:
                raise PayloadParseError(
                    f"Invalid escape '\\{escape}'", self.position
                )

    def _read_hex4(self) -> int:
        match = _HEX4.match(self.text, self.position)
        if match is None:
            raise PayloadParseError("Invalid unicode escape", self.position)
        self.position = match.end()
        return int(match.group(0), 16)

    def _read_unicode_escape(self) -> str:
        # position is on the "u"
        self.position += 1
        code = self._read_hex4()
        if 0xD800 <= code <= 0xDBFF and self.text.startswith(
            "\\u", self.position
        ):
            saved = self.position
            self.position += 2
            low = self._read_hex4()
            if 0xDC00 <= low <= 0xDFFF:
                return chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00))
            self.position = saved
        return chr(code)

    def _read_object(self, depth: int) -> Dict[str, Any]:
        self._check_depth(depth)
        result: Dict[str, Any] = {}
        self._expect("{")
        self._skip_whitespace()
        if self._current() == "}":
            self.position += 1
            return result
        while True:
            self._skip_whitespace()
            key = self._read_string()
            self._expect(":")
            result[key] = self._read_value(depth)
            self._skip_whitespace()
            char = self._current()
            self.position += 1
            if char == "}":
                return result
            if char != ",":
                raise PayloadParseError(
                    f"Expected ',' or '}}' but found '{char}'",
                    self.position - 1,
                )

    def _read_array(self, depth: int) -> List[Any]:
        self._check_depth(depth)
        result: List[Any] = []
        self._expect("[")
        self._skip_whitespace()
        if self._current() == "]":
            self.position += 1
            return result
        while True:
            result.append(self._read_value(depth))
            self._skip_whitespace()
            char = self._current()
            self.position += 1
            if char == "]":
                return result
            if char != ",":
                raise PayloadParseError(
                    f"Expected ',' or ']' but found '{char}'",
                    self.position - 1,
                )

    def _check_depth(self, depth: int):
        if depth > MAX_NESTING_DEPTH:
            raise PayloadParseError("Document nested too deeply", self.position)


def parse(payload: Union[bytes, bytearray, memoryview, str]) -> Any:
    """
    Parse a UTF-8 JSON payload into a value tree.

    Raises:
        PayloadParseError: the payload is not valid UTF-8 or not a
            well-formed document.
    """
    if isinstance(payload, str):
        text = payload
    else:
        try:
            text = bytes(payload).decode("utf-8-sig")
        except (UnicodeDecodeError, TypeError) as e:
            raise PayloadParseError(f"Payload is not UTF-8 text: {e}") from e
    return _JsonParser(text).parse()
