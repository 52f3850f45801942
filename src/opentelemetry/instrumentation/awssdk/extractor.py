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
Attribute extraction for AWS SDK calls.

The extractor is handed an already classified call (see
``resolve_operation``) and the request, response or error object of that
call. It walks the registered field paths, decodes model invocation bodies
and writes every value it can resolve into an attribute sink. A field that
is missing or malformed is skipped; nothing is raised to the caller.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from opentelemetry.instrumentation.awssdk.config import AwsSdkExtractorConfig
from opentelemetry.instrumentation.awssdk.internal._accessor import (
    ACCESSOR_CACHE,
    AccessorCache,
)
from opentelemetry.instrumentation.awssdk.internal._emitter import (
    AttributeEmitter,
    AttributeSink,
)
from opentelemetry.instrumentation.awssdk.internal._json_parser import (
    PayloadParseError,
    parse,
)
from opentelemetry.instrumentation.awssdk.internal._registry import (
    CATEGORIES,
    AwsSdkOperation,
    FieldMapping,
    Phase,
    RequestCategory,
    is_experimental_attribute,
)
from opentelemetry.instrumentation.awssdk.internal._resolver import (
    MODEL_ATTRIBUTES,
    resolve_model_attribute,
)
from opentelemetry.instrumentation.awssdk.internal._serializer import (
    serialize,
)
from opentelemetry.instrumentation.awssdk.internal._traversal import (
    FieldValueProvider,
    mapping_provider,
    traverse,
)
from opentelemetry.instrumentation.awssdk.semconv import (
    GEN_AI_SYSTEM_AWS_BEDROCK,
    AwsAttributes,
    GenAiAttributes,
)

logger = logging.getLogger(__name__)

OperationLike = Union[AwsSdkOperation, RequestCategory, str, None]

_RAW_PAYLOAD_TYPES = (bytes, bytearray, memoryview, str)
_DECODED_PAYLOAD_TYPES = (dict, list)
_REQUEST_ID_PATH = ("ResponseMetadata", "RequestId")
_ERROR_CODE_PATH = ("Error", "Code")


def _as_operation(operation: OperationLike) -> AwsSdkOperation:
    if isinstance(operation, AwsSdkOperation):
        return operation
    if isinstance(operation, RequestCategory):
        return AwsSdkOperation.of(operation)
    if isinstance(operation, str):
        return AwsSdkOperation.of(CATEGORIES.get(operation))
    return AwsSdkOperation.of(None)


def _payload_size(payload: Any) -> int:
    if isinstance(payload, str):
        return len(payload)
    return memoryview(payload).nbytes


class AwsSdkAttributeExtractor:
    """
    Extracts span attributes from AWS SDK requests, responses and errors.

    Instances hold no per-call state and can be shared between threads.
    """

    def __init__(
        self,
        config: Optional[AwsSdkExtractorConfig] = None,
        accessor_cache: Optional[AccessorCache] = None,
    ):
        self._config = (
            config if config is not None else AwsSdkExtractorConfig()
        )
        self._cache = (
            accessor_cache if accessor_cache is not None else ACCESSOR_CACHE
        )

    @property
    def config(self) -> AwsSdkExtractorConfig:
        return self._config

    def extract_request(
        self,
        sink: AttributeSink,
        operation: OperationLike,
        request: Any,
        extra_fields: Sequence[FieldMapping] = (),
    ) -> None:
        """Write the request-phase attributes of ``request`` into ``sink``.

        ``extra_fields`` are call-site specific mappings evaluated before the
        operation's own mappings.
        """
        self._extract(sink, operation, Phase.REQUEST, request, extra_fields)

    def extract_response(
        self,
        sink: AttributeSink,
        operation: OperationLike,
        response: Any,
        extra_fields: Sequence[FieldMapping] = (),
    ) -> None:
        """Write the response-phase attributes of ``response`` into ``sink``."""
        emitter = self._extract(
            sink, operation, Phase.RESPONSE, response, extra_fields
        )
        self._emit_from_path(
            emitter, response, AwsAttributes.AWS_REQUEST_ID, _REQUEST_ID_PATH
        )

    def extract_error(
        self, sink: AttributeSink, operation: OperationLike, error: Any
    ) -> None:
        """
        Write attributes for a failed call.

        botocore attaches the parsed error response to ``ClientError`` as
        ``error.response``; its error code and request id are emitted and the
        response-phase mappings are applied to it.
        """
        try:
            response = getattr(error, "response", None)
        except Exception as e:
            logger.debug("Failed to read response from error: %s", e)
            return
        if not isinstance(response, Mapping):
            return

        emitter = self._extract(sink, operation, Phase.RESPONSE, response)
        self._emit_from_path(
            emitter, response, AwsAttributes.AWS_ERROR_CODE, _ERROR_CODE_PATH
        )
        self._emit_from_path(
            emitter, response, AwsAttributes.AWS_REQUEST_ID, _REQUEST_ID_PATH
        )

    def _extract(
        self,
        sink: AttributeSink,
        operation: OperationLike,
        phase: Phase,
        source: Any,
        extra_fields: Sequence[FieldMapping] = (),
    ) -> AttributeEmitter:
        emitter = AttributeEmitter(sink)
        if source is None:
            return emitter

        mappings = tuple(extra_fields) + _as_operation(operation).fields(phase)
        provider = mapping_provider(source, self._cache)
        # Parsed bodies, keyed by the identity of the raw payload.
        trees: Dict[int, Tuple[Any, Any]] = {}
        gen_ai_written = False

        for mapping in mappings:
            if mapping.phase is not phase:
                continue
            try:
                written = self._apply(emitter, provider, mapping, trees)
            except Exception as e:
                logger.debug(
                    "Failed to extract %s: %s", mapping.attribute_key, e
                )
                continue
            if written and mapping.attribute_key.startswith("gen_ai."):
                gen_ai_written = True

        if gen_ai_written:
            emitter.emit(
                GenAiAttributes.GEN_AI_SYSTEM, GEN_AI_SYSTEM_AWS_BEDROCK
            )
        return emitter

    def _apply(
        self,
        emitter: AttributeEmitter,
        provider: FieldValueProvider,
        mapping: FieldMapping,
        trees: Dict[int, Tuple[Any, Any]],
    ) -> bool:
        key = mapping.attribute_key
        if (
            is_experimental_attribute(key)
            and not self._config.experimental_span_attributes
        ):
            return False

        target = traverse(provider, mapping.path, self._cache)
        if target is None:
            return False

        model_attribute = MODEL_ATTRIBUTES.get(key)
        if model_attribute is None:
            return emitter.emit(key, serialize(target))

        if not self._config.genai_payload_enabled:
            return False
        tree = self._payload_tree(target, trees)
        if tree is None:
            return False
        resolved = resolve_model_attribute(tree, model_attribute)
        if resolved is None:
            return False
        return emitter.emit(key, resolved.value)

    def _payload_tree(
        self, payload: Any, trees: Dict[int, Tuple[Any, Any]]
    ) -> Any:
        if isinstance(payload, _DECODED_PAYLOAD_TYPES):
            return payload
        if not isinstance(payload, _RAW_PAYLOAD_TYPES):
            logger.debug(
                "Unsupported model payload type %s", type(payload).__name__
            )
            return None

        # Entries keep their payload alive, so ids are unique for the call.
        entry = trees.get(id(payload))
        if entry is not None and entry[0] is payload:
            return entry[1]
        tree = self._parse_payload(payload)
        trees[id(payload)] = (payload, tree)
        return tree

    def _parse_payload(self, payload: Any) -> Any:
        size = _payload_size(payload)
        if size > self._config.max_payload_bytes:
            logger.debug(
                "Skipping model payload of %s bytes, limit is %s",
                size,
                self._config.max_payload_bytes,
            )
            return None
        try:
            return parse(payload)
        except PayloadParseError as e:
            logger.debug("Malformed model payload: %s", e)
            return None
        except Exception as e:
            logger.debug("Failed to parse model payload: %s", e)
            return None

    def _emit_from_path(
        self,
        emitter: AttributeEmitter,
        source: Any,
        key: str,
        path: Sequence[str],
    ) -> None:
        if source is None:
            return
        try:
            value = traverse(
                mapping_provider(source, self._cache), path, self._cache
            )
            emitter.emit(key, serialize(value))
        except Exception as e:
            logger.debug("Failed to extract %s: %s", key, e)
