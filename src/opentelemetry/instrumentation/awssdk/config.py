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
Configuration for AWS SDK attribute extraction.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from opentelemetry.instrumentation.awssdk.semconv import (
    AwsSdkEnvironmentVariables,
)

DEFAULT_MAX_PAYLOAD_BYTES = 1024 * 1024

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def get_int_env(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


def get_optional_bool_env(key: str) -> "bool | None":
    """Get optional boolean from environment variable, returns None if not set."""
    raw = os.getenv(key)
    if raw is None:
        return None
    raw_lower = raw.lower()
    if raw_lower in _TRUE_VALUES:
        return True
    if raw_lower in _FALSE_VALUES:
        return False
    return None


def first_present_bool(keys: List[str], default: bool) -> bool:
    """Return first parseable boolean from keys list, or default if none are set."""
    for key in keys:
        value = get_optional_bool_env(key)
        if value is not None:
            return value
    return default


class AwsSdkInstrumentationConfig:
    """Default values and environment keys for the extraction engine."""

    _GENAI_PAYLOAD_KEYS: List[str] = [
        AwsSdkEnvironmentVariables.GENAI_PAYLOAD_ENABLED,
        AwsSdkEnvironmentVariables.GENAI_PAYLOAD_ENABLED_PROPERTY,
    ]
    _EXPERIMENTAL_KEYS: List[str] = [
        AwsSdkEnvironmentVariables.EXPERIMENTAL_SPAN_ATTRIBUTES,
        AwsSdkEnvironmentVariables.EXPERIMENTAL_SPAN_ATTRIBUTES_PROPERTY,
    ]

    GENAI_PAYLOAD_ENABLED: bool = True
    EXPERIMENTAL_SPAN_ATTRIBUTES: bool = True


def is_genai_payload_enabled() -> bool:
    """
    Check if model invocation bodies should be parsed for gen_ai attributes.
    """
    return first_present_bool(
        AwsSdkInstrumentationConfig._GENAI_PAYLOAD_KEYS,
        AwsSdkInstrumentationConfig.GENAI_PAYLOAD_ENABLED,
    )


def is_experimental_span_attributes_enabled() -> bool:
    """Check if experimental ``aws.*`` span attributes should be emitted."""
    return first_present_bool(
        AwsSdkInstrumentationConfig._EXPERIMENTAL_KEYS,
        AwsSdkInstrumentationConfig.EXPERIMENTAL_SPAN_ATTRIBUTES,
    )


def get_max_payload_bytes() -> int:
    """Get the largest payload, in bytes, the parser will look at."""
    value = get_int_env(
        AwsSdkEnvironmentVariables.MAX_PAYLOAD_BYTES,
        DEFAULT_MAX_PAYLOAD_BYTES,
    )
    return value if value > 0 else DEFAULT_MAX_PAYLOAD_BYTES


@dataclass
class AwsSdkExtractorConfig:
    """Extractor options.

    Fields left as ``None`` are read from the environment when the config is
    created, so explicit arguments always take precedence.
    """

    genai_payload_enabled: Optional[bool] = None
    experimental_span_attributes: Optional[bool] = None
    max_payload_bytes: Optional[int] = None

    def __post_init__(self):
        if self.genai_payload_enabled is None:
            self.genai_payload_enabled = is_genai_payload_enabled()
        if self.experimental_span_attributes is None:
            self.experimental_span_attributes = (
                is_experimental_span_attributes_enabled()
            )
        if self.max_payload_bytes is None:
            self.max_payload_bytes = get_max_payload_bytes()
