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

"""Attribute sinks and the emitter writing resolved values into them."""

import logging
from typing import Any, Dict, Protocol, Union

from opentelemetry.trace import Span

logger = logging.getLogger(__name__)

AttributeValue = Union[str, int, float]


class AttributeSink(Protocol):
    """Typed destination for extracted attributes."""

    def put_string(self, key: str, value: str) -> None: ...

    def put_int(self, key: str, value: int) -> None: ...

    def put_double(self, key: str, value: float) -> None: ...


class SpanAttributeSink:
    """Writes attributes onto an OpenTelemetry span."""

    def __init__(self, span: Span):
        self._span = span

    def _set(self, key: str, value: AttributeValue) -> None:
        if self._span.is_recording():
            self._span.set_attribute(key, value)

    def put_string(self, key: str, value: str) -> None:
        self._set(key, value)

    def put_int(self, key: str, value: int) -> None:
        self._set(key, value)

    def put_double(self, key: str, value: float) -> None:
        self._set(key, value)


class DictAttributeSink:
    """Collects attributes into a dict; later writes replace earlier ones."""

    def __init__(self):
        self.attributes: Dict[str, AttributeValue] = {}

    def put_string(self, key: str, value: str) -> None:
        self.attributes[key] = value

    def put_int(self, key: str, value: int) -> None:
        self.attributes[key] = value

    def put_double(self, key: str, value: float) -> None:
        self.attributes[key] = value


class AttributeEmitter:
    """Routes values to the typed ``put_*`` of a sink, skipping empty ones."""

    def __init__(self, sink: AttributeSink):
        self._sink = sink

    def emit(self, key: str, value: Any) -> bool:
        """Write ``value`` under ``key``; returns whether anything was written."""
        if value is None or value == "":
            return False
        try:
            if isinstance(value, bool):
                self._sink.put_string(key, "true" if value else "false")
            elif isinstance(value, int):
                self._sink.put_int(key, value)
            elif isinstance(value, float):
                self._sink.put_double(key, value)
            else:
                self._sink.put_string(key, str(value))
        except Exception as e:
            logger.debug("Failed to write attribute %s: %s", key, e)
            return False
        return True
