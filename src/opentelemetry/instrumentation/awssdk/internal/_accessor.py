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
Per-type field accessor discovery and memoization.

Request and response objects handed to the extractor share no interface
with this package. A field is located by name only: on first use the runtime
type is inspected for a zero-argument way to read it, and the outcome,
including "no such field", is cached for the lifetime of the process.
"""

import inspect
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

_MISSING = object()
_ABSENT = object()

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class AccessorKind(Enum):
    MAPPING_KEY = "mapping_key"
    ATTRIBUTE = "attribute"
    METHOD = "method"
    INSTANCE_ATTRIBUTE = "instance_attribute"


@dataclass(frozen=True)
class FieldAccessor:
    """A resolved way to read one field from instances of one type."""

    kind: AccessorKind
    name: str
    aliases: Tuple[str, ...] = ()

    def read(self, target: Any) -> Any:
        if self.kind is AccessorKind.MAPPING_KEY:
            return target.get(self.name)
        if self.kind is AccessorKind.INSTANCE_ATTRIBUTE:
            for name in (self.name,) + self.aliases:
                value = getattr(target, name, _MISSING)
                if value is not _MISSING:
                    return value
            return None
        value = getattr(target, self.name)
        if self.kind is AccessorKind.METHOD:
            return value()
        return value


def to_snake_case(name: str) -> str:
    """``QueueUrl`` -> ``queue_url``, ``FunctionARN`` -> ``function_arn``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def attribute_spellings(field_name: str) -> List[str]:
    """The exact name, then its lower-camel and snake_case spellings."""
    return _dedupe(
        [
            field_name,
            field_name[:1].lower() + field_name[1:],
            to_snake_case(field_name),
        ]
    )


def candidate_names(field_name: str) -> List[str]:
    """
    Member names tried, in order, when looking a field up on a type.

    Covers ``attribute_spellings`` followed by the ``get_x`` / ``getX``
    getter conventions.
    """
    snake = to_snake_case(field_name)
    upper_first = field_name[:1].upper() + field_name[1:]
    return _dedupe(
        attribute_spellings(field_name)
        + [f"get_{snake}", f"get{upper_first}"]
    )


def _dedupe(names: List[str]) -> List[str]:
    seen = set()
    ordered = []
    for name in names:
        if name and name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered


def _takes_no_arguments(func: Any, skip_first: bool) -> bool:
    try:
        params = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        return False
    if skip_first:
        if not params or params[0].kind not in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            return False
        params = params[1:]
    for param in params:
        if param.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        ):
            continue
        if param.default is inspect.Parameter.empty:
            return False
    return True


def _member_accessor(cls: type, name: str) -> Optional[FieldAccessor]:
    member = inspect.getattr_static(cls, name, _MISSING)
    if member is _MISSING:
        return None

    if isinstance(member, staticmethod):
        if _takes_no_arguments(member.__func__, skip_first=False):
            return FieldAccessor(AccessorKind.METHOD, name)
        return None
    if isinstance(member, classmethod):
        if _takes_no_arguments(member.__func__, skip_first=True):
            return FieldAccessor(AccessorKind.METHOD, name)
        return None
    if inspect.isfunction(member):
        if _takes_no_arguments(member, skip_first=True):
            return FieldAccessor(AccessorKind.METHOD, name)
        return None
    if inspect.ismethoddescriptor(member) or inspect.isbuiltin(member):
        # C-level methods such as dict.keys; only usable when introspectable.
        if _takes_no_arguments(member, skip_first=True):
            return FieldAccessor(AccessorKind.METHOD, name)
        return None
    if callable(member) and not hasattr(member, "__get__"):
        return None

    # property, __slots__ member, or a plain class-level value
    return FieldAccessor(AccessorKind.ATTRIBUTE, name)


def _declares_field(cls: type, name: str) -> bool:
    dataclass_fields = getattr(cls, "__dataclass_fields__", None)
    if isinstance(dataclass_fields, dict) and name in dataclass_fields:
        return True
    for klass in getattr(cls, "__mro__", (cls,)):
        annotations = klass.__dict__.get("__annotations__")
        if isinstance(annotations, dict) and name in annotations:
            return True
    return False


def _has_instance_dict(cls: type) -> bool:
    return any(
        "__dict__" in vars(klass) for klass in getattr(cls, "__mro__", ())
    )


def discover_accessor(cls: type, field_name: str) -> Optional[FieldAccessor]:
    """
    Find a zero-argument reader for ``field_name`` on ``cls``.

    Resolution order:
    1. Mapping types: key lookup with the exact field name
    2. Members of the type (property, slot, class value, or a method that
       can be called without arguments), trying each of ``candidate_names``
    3. Fields declared through dataclasses or class annotations
    4. For types whose instances carry a ``__dict__``, a plain attribute
       read of the field name (or its camel/snake spellings) at call time

    Private names and methods that require arguments are never selected.
    Returns None when the type offers no way to read the field.
    """
    if not field_name:
        return None

    if isinstance(cls, type) and issubclass(cls, Mapping):
        return FieldAccessor(AccessorKind.MAPPING_KEY, field_name)

    names = [n for n in candidate_names(field_name) if not n.startswith("_")]
    for name in names:
        try:
            accessor = _member_accessor(cls, name)
        except Exception as e:
            logger.debug(
                "Failed to inspect %s.%s: %s", cls.__name__, name, e
            )
            accessor = None
        if accessor is not None:
            return accessor

    for name in names:
        if _declares_field(cls, name):
            return FieldAccessor(AccessorKind.ATTRIBUTE, name)

    # Names the type defines as members were already considered above.
    attribute_names = [
        n
        for n in attribute_spellings(field_name)
        if not n.startswith("_")
        and inspect.getattr_static(cls, n, _MISSING) is _MISSING
    ]
    if attribute_names and _has_instance_dict(cls):
        return FieldAccessor(
            AccessorKind.INSTANCE_ATTRIBUTE,
            attribute_names[0],
            tuple(attribute_names[1:]),
        )

    return None


class AccessorCache:
    """
    Memoizes ``discover_accessor`` per (runtime type, field name).

    Entries are never invalidated. Two threads racing on the same key may
    both run discovery; ``dict.setdefault`` keeps whichever result landed
    first, and discovery is deterministic so both results are equal anyway.
    """

    def __init__(self):
        self._entries: Dict[Tuple[type, str], Any] = {}

    def resolve(
        self, cls: type, field_name: str
    ) -> Optional[FieldAccessor]:
        key = (cls, field_name)
        entry = self._entries.get(key, _MISSING)
        if entry is _MISSING:
            discovered = discover_accessor(cls, field_name)
            entry = self._entries.setdefault(
                key, _ABSENT if discovered is None else discovered
            )
        return None if entry is _ABSENT else entry

    def __contains__(self, key: Tuple[type, str]) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


ACCESSOR_CACHE = AccessorCache()
