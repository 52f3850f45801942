"""Unit tests configuration module."""

import pytest

from opentelemetry.instrumentation.awssdk import (
    AwsSdkAttributeExtractor,
    AwsSdkExtractorConfig,
)
from opentelemetry.instrumentation.awssdk.internal._accessor import (
    AccessorCache,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)


@pytest.fixture(scope="function", name="span_exporter")
def fixture_span_exporter():
    """Create an in-memory span exporter for testing."""
    exporter = InMemorySpanExporter()
    yield exporter


@pytest.fixture(scope="function", name="tracer_provider")
def fixture_tracer_provider(span_exporter):
    """Create a tracer provider with in-memory exporter."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider


@pytest.fixture(scope="function", name="tracer")
def fixture_tracer(tracer_provider):
    return tracer_provider.get_tracer(__name__)


@pytest.fixture(scope="function", name="extractor")
def fixture_extractor():
    """Extractor with every feature enabled, independent of the environment."""
    config = AwsSdkExtractorConfig(
        genai_payload_enabled=True,
        experimental_span_attributes=True,
        max_payload_bytes=1024 * 1024,
    )
    return AwsSdkAttributeExtractor(config, AccessorCache())
