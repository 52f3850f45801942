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

"""Rendering of resolved values into span attribute values."""

import dataclasses
import json
import logging
import math
from collections.abc import Mapping
from typing import Any, Optional

from opentelemetry.instrumentation.awssdk.internal._json_parser import (
    OutOfRangeNumber,
)

logger = logging.getLogger(__name__)

_SEQUENCE_TYPES = (list, tuple)
_SET_TYPES = (set, frozenset)
_BYTES_TYPES = (bytes, bytearray, memoryview)


def serialize(value: Any) -> Optional[str]:
    """
    Render a field value as an attribute string.

    - Mappings render their keys, e.g. DynamoDB ``RequestItems`` becomes the
      list of table names
    - Lists, tuples and sets render as ``[a,b,c]``; empty ones as None
    - Dataclass instances and objects exposing ``to_dict`` render as
      compact JSON
    - Bytes decode as UTF-8
    - Booleans render lowercase, everything else through ``str``
    """
    if value is None or isinstance(value, OutOfRangeNumber):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, _BYTES_TYPES):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(value, Mapping):
        return _serialize_items(list(value.keys()))
    if isinstance(value, _SEQUENCE_TYPES):
        return _serialize_items(value)
    if isinstance(value, _SET_TYPES):
        return _serialize_items(sorted(value, key=str))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _serialize_structure(dataclasses.asdict(value), value)
    if callable(getattr(value, "to_dict", None)):
        return _serialize_structure(value.to_dict(), value)
    return str(value)


def _serialize_items(items) -> Optional[str]:
    rendered = [s for s in (serialize(item) for item in items) if s]
    if not rendered:
        return None
    return "[" + ",".join(rendered) + "]"


def _serialize_structure(data: Any, value: Any) -> Optional[str]:
    try:
        return json.dumps(data, separators=(",", ":"), default=str)
    except (TypeError, ValueError) as e:
        logger.debug("Failed to serialize %s: %s", type(value).__name__, e)
        return None


def to_int(value: Any) -> Optional[int]:
    """Integral count, or None when the value is not a whole number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def to_probability(value: Any) -> Optional[float]:
    """Float in [0.0, 1.0], or None when the value fails that bound."""
    if value is None or isinstance(value, (bool, OutOfRangeNumber)):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or not 0.0 <= number <= 1.0:
        return None
    return number


def to_bracketed_list(value: Any) -> Optional[str]:
    """Render one value, or a list of values, as ``[a,b]``."""
    if isinstance(value, _SEQUENCE_TYPES):
        return _serialize_items(value)
    return _serialize_items([value])
