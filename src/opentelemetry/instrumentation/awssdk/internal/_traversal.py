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

"""Field path traversal over request/response object graphs."""

import logging
from typing import Any, Callable, Optional, Sequence

from opentelemetry.instrumentation.awssdk.internal._accessor import (
    ACCESSOR_CACHE,
    AccessorCache,
)

logger = logging.getLogger(__name__)

# Top-level field lookup, e.g. ``params.get`` for a botocore call.
FieldValueProvider = Callable[[str], Any]


def mapping_provider(
    source: Any, cache: Optional[AccessorCache] = None
) -> FieldValueProvider:
    """
    Build a top-level field provider for a request or response.

    Mappings (botocore ``api_params`` and parsed responses) are read by key;
    any other object falls back to the accessor cache.
    """
    if source is None:
        return lambda _field: None
    if hasattr(source, "get") and hasattr(source, "keys"):
        return lambda field: source.get(field)
    return lambda field: next_value(source, field, cache)


def next_value(
    current: Any, field_name: str, cache: Optional[AccessorCache] = None
) -> Any:
    """Read ``field_name`` from ``current``; None when it cannot be read."""
    if cache is None:
        cache = ACCESSOR_CACHE
    accessor = cache.resolve(type(current), field_name)
    if accessor is None:
        return None
    try:
        return accessor.read(current)
    except Exception as e:
        logger.debug(
            "Failed to read %s from %s: %s",
            field_name,
            type(current).__name__,
            e,
        )
        return None


def traverse(
    field_value_provider: FieldValueProvider,
    path: Sequence[str],
    cache: Optional[AccessorCache] = None,
) -> Any:
    """
    Walk ``path`` starting from the provider's value for ``path[0]``.

    Every later segment is read through the accessor cache on the runtime
    type of the value reached so far. The walk stops at the first segment
    that is missing or fails, and None is returned.
    """
    if not path:
        return None
    try:
        target = field_value_provider(path[0])
    except Exception as e:
        logger.debug("Field provider failed for %s: %s", path[0], e)
        return None
    for segment in path[1:]:
        if target is None:
            return None
        target = next_value(target, segment, cache)
    return target
