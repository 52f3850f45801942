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
Static field path tables.

Each request category owns an ordered list of field mappings per call phase.
Operation-specific mappings are looked up separately and evaluated before the
category's generic ones. Nothing here is mutated after import.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from opentelemetry.instrumentation.awssdk.semconv import (
    AwsAttributes,
    GenAiAttributes,
    MessagingAttributes,
)


class Phase(Enum):
    REQUEST = "request"
    RESPONSE = "response"


@dataclass(frozen=True)
class FieldMapping:
    """Binds an attribute key to a field path read during one call phase."""

    attribute_key: str
    path: Tuple[str, ...]
    phase: Phase

    def __post_init__(self):
        if not self.path or not all(self.path):
            raise ValueError(
                f"Field path for {self.attribute_key} must not be empty"
            )


def request(attribute_key: str, field_path: str) -> FieldMapping:
    """Request-phase mapping; ``field_path`` segments are dot separated."""
    return FieldMapping(
        attribute_key, tuple(field_path.split(".")), Phase.REQUEST
    )


def response(attribute_key: str, field_path: str) -> FieldMapping:
    """Response-phase mapping; ``field_path`` segments are dot separated."""
    return FieldMapping(
        attribute_key, tuple(field_path.split(".")), Phase.RESPONSE
    )


@dataclass(frozen=True)
class RequestCategory:
    """A family of API calls sharing the same generic field mappings."""

    name: str
    request_fields: Tuple[FieldMapping, ...] = ()
    response_fields: Tuple[FieldMapping, ...] = ()

    @classmethod
    def of(cls, name: str, *mappings: FieldMapping) -> "RequestCategory":
        return cls(
            name,
            tuple(m for m in mappings if m.phase is Phase.REQUEST),
            tuple(m for m in mappings if m.phase is Phase.RESPONSE),
        )

    def fields(self, phase: Phase) -> Tuple[FieldMapping, ...]:
        if phase is Phase.REQUEST:
            return self.request_fields
        return self.response_fields


@dataclass(frozen=True)
class AwsSdkOperation:
    """A classified call: its category plus operation-specific mappings."""

    category: Optional[RequestCategory]
    request_fields: Tuple[FieldMapping, ...] = ()
    response_fields: Tuple[FieldMapping, ...] = ()

    @classmethod
    def of(
        cls, category: Optional[RequestCategory], *mappings: FieldMapping
    ) -> "AwsSdkOperation":
        return cls(
            category,
            tuple(m for m in mappings if m.phase is Phase.REQUEST),
            tuple(m for m in mappings if m.phase is Phase.RESPONSE),
        )

    def fields(self, phase: Phase) -> Tuple[FieldMapping, ...]:
        """Operation-specific mappings first, then the category's."""
        own = (
            self.request_fields
            if phase is Phase.REQUEST
            else self.response_fields
        )
        return own + fields(self.category, phase)


S3 = RequestCategory.of("s3", request(AwsAttributes.AWS_BUCKET_NAME, "Bucket"))

SQS = RequestCategory.of(
    "sqs",
    request(AwsAttributes.AWS_QUEUE_URL, "QueueUrl"),
    request(AwsAttributes.AWS_QUEUE_NAME, "QueueName"),
)

KINESIS = RequestCategory.of(
    "kinesis", request(AwsAttributes.AWS_STREAM_NAME, "StreamName")
)

DYNAMODB = RequestCategory.of(
    "dynamodb", request(AwsAttributes.AWS_TABLE_NAME, "TableName")
)

# Only one of TopicArn and TargetArn is permitted on an SNS request.
SNS = RequestCategory.of(
    "sns",
    request(MessagingAttributes.MESSAGING_DESTINATION_NAME, "TargetArn"),
    request(MessagingAttributes.MESSAGING_DESTINATION_NAME, "TopicArn"),
    request(AwsAttributes.AWS_SNS_TOPIC_ARN, "TopicArn"),
)

BEDROCK = RequestCategory.of(
    "bedrock",
    request(AwsAttributes.AWS_GUARDRAIL_ID, "guardrailIdentifier"),
    response(AwsAttributes.AWS_GUARDRAIL_ARN, "guardrailArn"),
)

BEDROCK_AGENT_OPERATION = RequestCategory.of(
    "bedrock_agent_operation",
    request(AwsAttributes.AWS_AGENT_ID, "agentId"),
    response(AwsAttributes.AWS_AGENT_ID, "agentId"),
)

BEDROCK_AGENT_RUNTIME_OPERATION = RequestCategory.of(
    "bedrock_agent_runtime_operation",
    request(AwsAttributes.AWS_AGENT_ID, "agentId"),
    response(AwsAttributes.AWS_AGENT_ID, "agentId"),
    request(AwsAttributes.AWS_KNOWLEDGE_BASE_ID, "knowledgeBaseId"),
    response(AwsAttributes.AWS_KNOWLEDGE_BASE_ID, "knowledgeBaseId"),
)

BEDROCK_DATA_SOURCE_OPERATION = RequestCategory.of(
    "bedrock_data_source_operation",
    request(AwsAttributes.AWS_DATA_SOURCE_ID, "dataSourceId"),
    response(AwsAttributes.AWS_DATA_SOURCE_ID, "dataSourceId"),
)

BEDROCK_KNOWLEDGE_BASE_OPERATION = RequestCategory.of(
    "bedrock_knowledge_base_operation",
    request(AwsAttributes.AWS_KNOWLEDGE_BASE_ID, "knowledgeBaseId"),
    response(AwsAttributes.AWS_KNOWLEDGE_BASE_ID, "knowledgeBaseId"),
)

# "body" holds the serialized model payload in both phases.
BEDROCK_RUNTIME = RequestCategory.of(
    "bedrock_runtime",
    request(GenAiAttributes.GEN_AI_REQUEST_MODEL, "modelId"),
    request(GenAiAttributes.GEN_AI_REQUEST_MAX_TOKENS, "body"),
    request(GenAiAttributes.GEN_AI_REQUEST_TEMPERATURE, "body"),
    request(GenAiAttributes.GEN_AI_REQUEST_TOP_P, "body"),
    request(GenAiAttributes.GEN_AI_USAGE_INPUT_TOKENS, "body"),
    response(GenAiAttributes.GEN_AI_RESPONSE_FINISH_REASONS, "body"),
    response(GenAiAttributes.GEN_AI_USAGE_INPUT_TOKENS, "body"),
    response(GenAiAttributes.GEN_AI_USAGE_OUTPUT_TOKENS, "body"),
)

STEP_FUNCTIONS = RequestCategory.of(
    "step_functions",
    request(AwsAttributes.AWS_STATE_MACHINE_ARN, "stateMachineArn"),
    request(AwsAttributes.AWS_STEP_FUNCTIONS_ACTIVITY_ARN, "activityArn"),
)

SECRETS_MANAGER = RequestCategory.of(
    "secrets_manager", response(AwsAttributes.AWS_SECRET_ARN, "ARN")
)

LAMBDA = RequestCategory.of(
    "lambda",
    request(AwsAttributes.AWS_LAMBDA_NAME, "FunctionName"),
    request(AwsAttributes.AWS_LAMBDA_RESOURCE_ID, "UUID"),
    response(AwsAttributes.AWS_LAMBDA_ARN, "Configuration.FunctionArn"),
)

CATEGORIES: Dict[str, RequestCategory] = {
    category.name: category
    for category in (
        S3,
        SQS,
        KINESIS,
        DYNAMODB,
        SNS,
        BEDROCK,
        BEDROCK_AGENT_OPERATION,
        BEDROCK_AGENT_RUNTIME_OPERATION,
        BEDROCK_DATA_SOURCE_OPERATION,
        BEDROCK_KNOWLEDGE_BASE_OPERATION,
        BEDROCK_RUNTIME,
        STEP_FUNCTIONS,
        SECRETS_MANAGER,
        LAMBDA,
    )
}

# Keyed by normalized service name, see normalize_service_name.
_SERVICE_CATEGORIES: Dict[str, RequestCategory] = {
    "s3": S3,
    "sqs": SQS,
    "kinesis": KINESIS,
    "dynamodb": DYNAMODB,
    "sns": SNS,
    "bedrock": BEDROCK,
    "bedrockagentruntime": BEDROCK_AGENT_RUNTIME_OPERATION,
    "bedrockruntime": BEDROCK_RUNTIME,
    "sfn": STEP_FUNCTIONS,
    "stepfunctions": STEP_FUNCTIONS,
    "secretsmanager": SECRETS_MANAGER,
    "lambda": LAMBDA,
}

# bedrock-agent control plane calls are classified by the resource they act on.
_BEDROCK_AGENT_OPERATION_MARKERS: Tuple[Tuple[str, RequestCategory], ...] = (
    ("DataSource", BEDROCK_DATA_SOURCE_OPERATION),
    ("KnowledgeBase", BEDROCK_KNOWLEDGE_BASE_OPERATION),
    ("Agent", BEDROCK_AGENT_OPERATION),
)

_OPERATIONS: Dict[Tuple[str, str], AwsSdkOperation] = {
    ("dynamodb", "BatchGetItem"): AwsSdkOperation.of(
        DYNAMODB,
        request(AwsAttributes.AWS_DYNAMODB_TABLE_NAMES, "RequestItems"),
        response(
            AwsAttributes.AWS_DYNAMODB_CONSUMED_CAPACITY, "ConsumedCapacity"
        ),
    ),
    ("dynamodb", "BatchWriteItem"): AwsSdkOperation.of(
        DYNAMODB,
        request(AwsAttributes.AWS_DYNAMODB_TABLE_NAMES, "RequestItems"),
        response(
            AwsAttributes.AWS_DYNAMODB_CONSUMED_CAPACITY, "ConsumedCapacity"
        ),
    ),
    ("dynamodb", "CreateTable"): AwsSdkOperation.of(
        DYNAMODB,
        request(
            AwsAttributes.AWS_DYNAMODB_GLOBAL_SECONDARY_INDEXES,
            "GlobalSecondaryIndexes",
        ),
        request(
            AwsAttributes.AWS_DYNAMODB_PROVISIONED_READ_CAPACITY,
            "ProvisionedThroughput.ReadCapacityUnits",
        ),
        request(
            AwsAttributes.AWS_DYNAMODB_PROVISIONED_WRITE_CAPACITY,
            "ProvisionedThroughput.WriteCapacityUnits",
        ),
    ),
    ("dynamodb", "GetItem"): AwsSdkOperation.of(
        DYNAMODB,
        request(AwsAttributes.AWS_DYNAMODB_CONSISTENT_READ, "ConsistentRead"),
    ),
    ("dynamodb", "Query"): AwsSdkOperation.of(
        DYNAMODB,
        request(AwsAttributes.AWS_DYNAMODB_LIMIT, "Limit"),
        request(AwsAttributes.AWS_DYNAMODB_CONSISTENT_READ, "ConsistentRead"),
        request(AwsAttributes.AWS_DYNAMODB_INDEX_NAME, "IndexName"),
        request(AwsAttributes.AWS_DYNAMODB_SELECT, "Select"),
        response(AwsAttributes.AWS_DYNAMODB_COUNT, "Count"),
        response(AwsAttributes.AWS_DYNAMODB_SCANNED_COUNT, "ScannedCount"),
    ),
    ("dynamodb", "Scan"): AwsSdkOperation.of(
        DYNAMODB,
        request(AwsAttributes.AWS_DYNAMODB_LIMIT, "Limit"),
        request(AwsAttributes.AWS_DYNAMODB_CONSISTENT_READ, "ConsistentRead"),
        request(AwsAttributes.AWS_DYNAMODB_INDEX_NAME, "IndexName"),
        request(AwsAttributes.AWS_DYNAMODB_SELECT, "Select"),
        response(AwsAttributes.AWS_DYNAMODB_COUNT, "Count"),
        response(AwsAttributes.AWS_DYNAMODB_SCANNED_COUNT, "ScannedCount"),
    ),
    ("sqs", "ReceiveMessage"): AwsSdkOperation.of(
        SQS,
        request(
            AwsAttributes.AWS_SQS_MAX_NUMBER_OF_MESSAGES,
            "MaxNumberOfMessages",
        ),
    ),
}

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_service_name(service: str) -> str:
    """``bedrock-runtime`` / ``Bedrock Runtime`` -> ``bedrockruntime``."""
    return _NON_ALNUM.sub("", (service or "").lower())


def fields(
    category: Union[RequestCategory, str, None], phase: Phase
) -> Tuple[FieldMapping, ...]:
    """Generic mappings of a category; empty for an unknown category."""
    if isinstance(category, str):
        category = CATEGORIES.get(category)
    if not isinstance(category, RequestCategory):
        return ()
    return category.fields(phase)


def category_for_service(
    service: str, operation: Optional[str] = None
) -> Optional[RequestCategory]:
    """Classify a service (botocore service name or SDK service id)."""
    normalized = normalize_service_name(service)
    if normalized == "bedrockagent":
        for marker, category in _BEDROCK_AGENT_OPERATION_MARKERS:
            if operation and marker in operation:
                return category
        return None
    return _SERVICE_CATEGORIES.get(normalized)


def resolve_operation(service: str, operation: str) -> AwsSdkOperation:
    """
    Classify one call. Unknown services yield an operation with no category,
    which maps nothing.
    """
    normalized = normalize_service_name(service)
    known = _OPERATIONS.get((normalized, operation))
    if known is not None:
        return known
    return AwsSdkOperation.of(category_for_service(service, operation))


def is_experimental_attribute(attribute_key: str) -> bool:
    return attribute_key.startswith("aws.")
