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
Attribute extraction engine for AWS SDK telemetry.

Usage
-----
.. code:: python

    from opentelemetry import trace
    from opentelemetry.instrumentation.awssdk import (
        AwsSdkAttributeExtractor,
        SpanAttributeSink,
        resolve_operation,
    )

    extractor = AwsSdkAttributeExtractor()
    operation = resolve_operation("bedrock-runtime", "InvokeModel")

    with tracer.start_as_current_span("BedrockRuntime.InvokeModel") as span:
        sink = SpanAttributeSink(span)
        extractor.extract_request(sink, operation, params)
        response = client.invoke_model(**params)
        extractor.extract_response(sink, operation, response)

The extractor only reads the objects it is given; intercepting SDK calls
and managing spans is left to the host instrumentation.
"""

from opentelemetry.instrumentation.awssdk.config import AwsSdkExtractorConfig
from opentelemetry.instrumentation.awssdk.extractor import (
    AwsSdkAttributeExtractor,
)
from opentelemetry.instrumentation.awssdk.internal._emitter import (
    AttributeSink,
    DictAttributeSink,
    SpanAttributeSink,
)
from opentelemetry.instrumentation.awssdk.internal._json_parser import (
    PayloadParseError,
)
from opentelemetry.instrumentation.awssdk.internal._registry import (
    AwsSdkOperation,
    FieldMapping,
    Phase,
    RequestCategory,
    category_for_service,
    fields,
    request,
    resolve_operation,
    response,
)
from opentelemetry.instrumentation.awssdk.version import __version__

__all__ = [
    "AttributeSink",
    "AwsSdkAttributeExtractor",
    "AwsSdkExtractorConfig",
    "AwsSdkOperation",
    "DictAttributeSink",
    "FieldMapping",
    "PayloadParseError",
    "Phase",
    "RequestCategory",
    "SpanAttributeSink",
    "__version__",
    "category_for_service",
    "fields",
    "request",
    "resolve_operation",
    "response",
]
