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
AWS SDK semantic conventions used by the attribute extraction engine.

Keys under ``aws.*`` are experimental span attributes. The ``gen_ai.*`` keys
are taken from the incubating GenAI semantic conventions so that spans
produced here line up with the other LoongSuite GenAI instrumentations.
"""

from opentelemetry.semconv._incubating.attributes import (
    gen_ai_attributes as GenAIAttributes,
)


class AwsAttributes:
    """Experimental ``aws.*`` span attribute keys."""

    AWS_BUCKET_NAME = "aws.bucket.name"
    AWS_QUEUE_URL = "aws.queue.url"
    AWS_QUEUE_NAME = "aws.queue.name"
    AWS_STREAM_NAME = "aws.stream.name"
    AWS_TABLE_NAME = "aws.table.name"
    AWS_SNS_TOPIC_ARN = "aws.sns.topic.arn"
    AWS_GUARDRAIL_ID = "aws.bedrock.guardrail.id"
    AWS_GUARDRAIL_ARN = "aws.bedrock.guardrail.arn"
    AWS_AGENT_ID = "aws.bedrock.agent.id"
    AWS_KNOWLEDGE_BASE_ID = "aws.bedrock.knowledge_base.id"
    AWS_DATA_SOURCE_ID = "aws.bedrock.data_source.id"
    AWS_STATE_MACHINE_ARN = "aws.stepfunctions.state_machine.arn"
    AWS_STEP_FUNCTIONS_ACTIVITY_ARN = "aws.stepfunctions.activity.arn"
    AWS_SECRET_ARN = "aws.secretsmanager.secret.arn"
    AWS_LAMBDA_NAME = "aws.lambda.function.name"
    AWS_LAMBDA_ARN = "aws.lambda.function.arn"
    AWS_LAMBDA_RESOURCE_ID = "aws.lambda.resource_mapping.id"
    AWS_DYNAMODB_PROVISIONED_READ_CAPACITY = (
        "aws.dynamodb.provisioned_read_capacity"
    )
    AWS_DYNAMODB_PROVISIONED_WRITE_CAPACITY = (
        "aws.dynamodb.provisioned_write_capacity"
    )
    AWS_DYNAMODB_LIMIT = "aws.dynamodb.limit"
    AWS_DYNAMODB_INDEX_NAME = "aws.dynamodb.index_name"
    AWS_DYNAMODB_CONSISTENT_READ = "aws.dynamodb.consistent_read"
    AWS_DYNAMODB_COUNT = "aws.dynamodb.count"
    AWS_DYNAMODB_SCANNED_COUNT = "aws.dynamodb.scanned_count"
    AWS_DYNAMODB_SELECT = "aws.dynamodb.select"
    AWS_DYNAMODB_TABLE_NAMES = "aws.dynamodb.table_names"
    AWS_DYNAMODB_CONSUMED_CAPACITY = "aws.dynamodb.consumed_capacity"
    AWS_DYNAMODB_GLOBAL_SECONDARY_INDEXES = (
        "aws.dynamodb.global_secondary_indexes"
    )
    AWS_SQS_MAX_NUMBER_OF_MESSAGES = "aws.sqs.max_number_of_messages"
    AWS_REQUEST_ID = "aws.request_id"
    AWS_ERROR_CODE = "aws.error.code"


class MessagingAttributes:
    """Messaging keys shared with the messaging semantic conventions."""

    MESSAGING_DESTINATION_NAME = "messaging.destination.name"


class GenAiAttributes:
    """GenAI keys populated from model invocation payloads."""

    GEN_AI_SYSTEM = "gen_ai.system"
    GEN_AI_REQUEST_MODEL = GenAIAttributes.GEN_AI_REQUEST_MODEL
    GEN_AI_REQUEST_MAX_TOKENS = GenAIAttributes.GEN_AI_REQUEST_MAX_TOKENS
    GEN_AI_REQUEST_TEMPERATURE = GenAIAttributes.GEN_AI_REQUEST_TEMPERATURE
    GEN_AI_REQUEST_TOP_P = GenAIAttributes.GEN_AI_REQUEST_TOP_P
    GEN_AI_RESPONSE_FINISH_REASONS = (
        GenAIAttributes.GEN_AI_RESPONSE_FINISH_REASONS
    )
    GEN_AI_USAGE_INPUT_TOKENS = GenAIAttributes.GEN_AI_USAGE_INPUT_TOKENS
    GEN_AI_USAGE_OUTPUT_TOKENS = GenAIAttributes.GEN_AI_USAGE_OUTPUT_TOKENS


GEN_AI_SYSTEM_AWS_BEDROCK = "aws.bedrock"


class AwsSdkEnvironmentVariables:
    GENAI_PAYLOAD_ENABLED = "OTEL_INSTRUMENTATION_AWS_SDK_GENAI_PAYLOAD_ENABLED"
    GENAI_PAYLOAD_ENABLED_PROPERTY = (
        "otel.instrumentation.aws-sdk.genai-payload.enabled"
    )
    EXPERIMENTAL_SPAN_ATTRIBUTES = (
        "OTEL_INSTRUMENTATION_AWS_SDK_EXPERIMENTAL_SPAN_ATTRIBUTES"
    )
    EXPERIMENTAL_SPAN_ATTRIBUTES_PROPERTY = (
        "otel.instrumentation.aws-sdk.experimental-span-attributes"
    )
    MAX_PAYLOAD_BYTES = "OTEL_INSTRUMENTATION_AWS_SDK_MAX_PAYLOAD_BYTES"
