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
Candidate path resolution over parsed model payloads.

Model providers hosted on Bedrock each use their own body schema, so every
gen_ai attribute has an ordered list of JSON-pointer style paths, one per
known schema. The first path that yields an acceptable value wins,
regardless of which provider produced the payload.

Model -> path mapping:
    Amazon Nova       /inferenceConfig/*, /usage/inputTokens,
                      /usage/outputTokens, /stopReason
    Amazon Titan      /textGenerationConfig/*, /inputTextTokenCount,
                      /results/0/tokenCount, /results/0/completionReason
    Anthropic Claude  /max_tokens, /temperature, /top_p, /usage/input_tokens,
                      /usage/output_tokens, /stop_reason
    Cohere Command    /max_tokens, /temperature, /p, /prompt,
                      /generations/0/text, /generations/0/finish_reason
    Cohere Command R  /max_tokens, /temperature, /p, /message, /text,
                      /finish_reason
    AI21 Jamba        /max_tokens, /temperature, /top_p, /usage/prompt_tokens,
                      /usage/completion_tokens, /choices/0/finish_reason
    Meta Llama        /max_gen_len, /temperature, /top_p, /prompt_token_count,
                      /generation_token_count, /stop_reason
    Mistral AI        /max_tokens, /temperature, /top_p, /prompt,
                      /outputs/0/text, /outputs/0/stop_reason
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from opentelemetry.instrumentation.awssdk.internal._json_parser import (
    OutOfRangeNumber,
)
from opentelemetry.instrumentation.awssdk.internal._serializer import (
    to_bracketed_list,
    to_int,
    to_probability,
)
from opentelemetry.instrumentation.awssdk.semconv import GenAiAttributes

logger = logging.getLogger(__name__)

# Characters per token used when a count has to be estimated from text.
CHARS_PER_TOKEN = 6.0


class ValueKind(Enum):
    INT = "int"
    PROBABILITY = "probability"
    FINISH_REASONS = "finish_reasons"


class Derivation(Enum):
    DIRECT = "direct"
    APPROXIMATED = "approximated"


@dataclass(frozen=True)
class ModelAttribute:
    """Candidate paths for one gen_ai attribute."""

    key: str
    kind: ValueKind
    candidates: Tuple[str, ...]
    text_candidates: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolvedAttribute:
    key: str
    value: Any
    derivation: Derivation


_ACCEPTORS: Dict[ValueKind, Callable[[Any], Any]] = {
    ValueKind.INT: to_int,
    ValueKind.PROBABILITY: to_probability,
    ValueKind.FINISH_REASONS: to_bracketed_list,
}


def parse_pointer(path: str) -> Tuple[str, ...]:
    """
    Split ``/a/0/b`` into steps. A missing leading slash is tolerated and
    ``~1`` / ``~0`` unescape to ``/`` / ``~``.
    """
    return tuple(
        step.replace("~1", "/").replace("~0", "~")
        for step in path.split("/")
        if step
    )


def resolve_path(tree: Any, path: str) -> Any:
    """Value at ``path``, or None when any step does not apply."""
    current = tree
    for step in parse_pointer(path):
        if isinstance(current, dict):
            current = current.get(step)
        elif isinstance(current, list):
            if not (step.isascii() and step.isdigit()):
                return None
            index = int(step)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
        if current is None:
            return None
    return current


def resolve(
    tree: Any,
    candidate_paths: Sequence[str],
    accept: Optional[Callable[[Any], Any]] = None,
) -> Any:
    """
    First value found along ``candidate_paths``, in declared order.

    A candidate that is missing, out of range, or rejected by ``accept``
    (which returns None to reject, otherwise the converted value) is skipped
    and the next one is tried.
    """
    for path in candidate_paths:
        value = resolve_path(tree, path)
        if value is None or isinstance(value, OutOfRangeNumber):
            continue
        if accept is not None:
            value = accept(value)
            if value is None:
                logger.debug("Rejected value at candidate path %s", path)
                continue
        return value
    return None


def approximate_count(tree: Any, text_paths: Sequence[str]) -> Optional[int]:
    """Estimate a token count as ceil(len(text) / 6) from the first text found."""
    for path in text_paths:
        value = resolve_path(tree, path)
        if isinstance(value, str):
            return math.ceil(len(value) / CHARS_PER_TOKEN)
    return None


def resolve_model_attribute(
    tree: Any, attribute: ModelAttribute
) -> Optional[ResolvedAttribute]:
    value = resolve(tree, attribute.candidates, _ACCEPTORS[attribute.kind])
    if value is not None:
        return ResolvedAttribute(attribute.key, value, Derivation.DIRECT)
    if attribute.text_candidates:
        estimate = approximate_count(tree, attribute.text_candidates)
        if estimate is not None:
            return ResolvedAttribute(
                attribute.key, estimate, Derivation.APPROXIMATED
            )
    return None


MODEL_ATTRIBUTES: Dict[str, ModelAttribute] = {
    attribute.key: attribute
    for attribute in (
        ModelAttribute(
            GenAiAttributes.GEN_AI_REQUEST_MAX_TOKENS,
            ValueKind.INT,
            (
                "/max_tokens",
                "/max_gen_len",
                "/textGenerationConfig/maxTokenCount",
                "/inferenceConfig/max_new_tokens",
            ),
        ),
        ModelAttribute(
            GenAiAttributes.GEN_AI_REQUEST_TEMPERATURE,
            ValueKind.PROBABILITY,
            (
                "/temperature",
                "/textGenerationConfig/temperature",
                "/inferenceConfig/temperature",
            ),
        ),
        ModelAttribute(
            GenAiAttributes.GEN_AI_REQUEST_TOP_P,
            ValueKind.PROBABILITY,
            (
                "/top_p",
                "/p",
                "/textGenerationConfig/topP",
                "/inferenceConfig/top_p",
            ),
        ),
        ModelAttribute(
            GenAiAttributes.GEN_AI_RESPONSE_FINISH_REASONS,
            ValueKind.FINISH_REASONS,
            (
                "/stopReason",
                "/finish_reason",
                "/stop_reason",
                "/results/0/completionReason",
                "/generations/0/finish_reason",
                "/choices/0/finish_reason",
                "/outputs/0/stop_reason",
            ),
        ),
        ModelAttribute(
            GenAiAttributes.GEN_AI_USAGE_INPUT_TOKENS,
            ValueKind.INT,
            (
                "/inputTextTokenCount",
                "/prompt_token_count",
                "/usage/input_tokens",
                "/usage/prompt_tokens",
                "/usage/inputTokens",
            ),
            text_candidates=("/prompt", "/message"),
        ),
        ModelAttribute(
            GenAiAttributes.GEN_AI_USAGE_OUTPUT_TOKENS,
            ValueKind.INT,
            (
                "/generation_token_count",
                "/results/0/tokenCount",
                "/usage/output_tokens",
                "/usage/completion_tokens",
                "/usage/outputTokens",
            ),
            text_candidates=("/text", "/outputs/0/text", "/generations/0/text"),
        ),
    )
}


def is_model_attribute(attribute_key: str) -> bool:
    return attribute_key in MODEL_ATTRIBUTES
