# -*- coding: utf-8 -*-
"""
Tests for per-type accessor discovery and caching.
"""

import threading
import unittest
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from opentelemetry.instrumentation.awssdk.internal._accessor import (
    AccessorCache,
    AccessorKind,
    FieldAccessor,
    candidate_names,
    discover_accessor,
    to_snake_case,
)


class PropertyRequest:
    def __init__(self, bucket):
        self._bucket = bucket

    @property
    def bucket(self):
        return self._bucket


class GetterRequest:
    def __init__(self, queue_url):
        self._queue_url = queue_url

    def getQueueUrl(self):
        return self._queue_url


class SnakeGetterRequest:
    def get_table_name(self):
        return "orders"


class ArgumentMethodRequest:
    __slots__ = ()

    def TableName(self, region):
        return region


class SlottedRequest:
    __slots__ = ("name",)

    def __init__(self, name):
        self.name = name


class StaticRequest:
    @staticmethod
    def StreamName():
        return "clicks"


class PlainRequest:
    def __init__(self):
        self.Bucket = "plain-bucket"
        self.queue_url = "https://sqs/queue"


@dataclass
class DataclassRequest:
    FunctionName: str
    Qualifier: str = "$LATEST"


class TestNaming(unittest.TestCase):
    def test_to_snake_case(self):
        for name, expected in (
            ("Bucket", "bucket"),
            ("QueueUrl", "queue_url"),
            ("FunctionARN", "function_arn"),
            ("modelId", "model_id"),
            ("ARN", "arn"),
            ("already_snake", "already_snake"),
        ):
            with self.subTest(name=name):
                self.assertEqual(to_snake_case(name), expected)

    def test_candidate_names_order(self):
        self.assertEqual(
            candidate_names("QueueUrl"),
            ["QueueUrl", "queueUrl", "queue_url", "get_queue_url", "getQueueUrl"],
        )

    def test_candidate_names_deduplicated(self):
        self.assertEqual(
            candidate_names("bucket"), ["bucket", "get_bucket", "getBucket"]
        )


class TestDiscoverAccessor(unittest.TestCase):
    def test_discovery_table_driven(self):
        for cls, field_name, kind, target, expected in (
            (PropertyRequest, "Bucket", AccessorKind.ATTRIBUTE,
             PropertyRequest("b1"), "b1"),
            (GetterRequest, "QueueUrl", AccessorKind.METHOD,
             GetterRequest("u1"), "u1"),
            (SnakeGetterRequest, "TableName", AccessorKind.METHOD,
             SnakeGetterRequest(), "orders"),
            (SlottedRequest, "name", AccessorKind.ATTRIBUTE,
             SlottedRequest("n1"), "n1"),
            (StaticRequest, "StreamName", AccessorKind.METHOD,
             StaticRequest(), "clicks"),
            (DataclassRequest, "FunctionName", AccessorKind.ATTRIBUTE,
             DataclassRequest("fn"), "fn"),
            (DataclassRequest, "Qualifier", AccessorKind.ATTRIBUTE,
             DataclassRequest("fn", "7"), "7"),
            (PlainRequest, "Bucket", AccessorKind.INSTANCE_ATTRIBUTE,
             PlainRequest(), "plain-bucket"),
            (PlainRequest, "QueueUrl", AccessorKind.INSTANCE_ATTRIBUTE,
             PlainRequest(), "https://sqs/queue"),
        ):
            with self.subTest(cls=cls.__name__, field=field_name):
                accessor = discover_accessor(cls, field_name)
                self.assertIsNotNone(accessor)
                self.assertIs(accessor.kind, kind)
                self.assertEqual(accessor.read(target), expected)

    def test_mapping_uses_key_lookup(self):
        accessor = discover_accessor(OrderedDict, "Bucket")
        self.assertEqual(
            accessor, FieldAccessor(AccessorKind.MAPPING_KEY, "Bucket")
        )
        self.assertEqual(accessor.read(OrderedDict(Bucket="b")), "b")
        self.assertIsNone(accessor.read(OrderedDict()))

    def test_absent_fields(self):
        for cls, field_name in (
            (SlottedRequest, "Bucket"),
            (ArgumentMethodRequest, "TableName"),
            (int, "Bucket"),
            (str, "QueueUrl"),
            (list, "Items"),
            (PlainRequest, ""),
            (SlottedRequest, "_private"),
        ):
            with self.subTest(cls=cls.__name__, field=field_name):
                self.assertIsNone(discover_accessor(cls, field_name))

    def test_instance_attribute_missing_reads_none(self):
        accessor = discover_accessor(PlainRequest, "TableName")
        self.assertIsNotNone(accessor)
        self.assertIsNone(accessor.read(PlainRequest()))


class TestAccessorCache(unittest.TestCase):
    def setUp(self):
        self.cache = AccessorCache()

    def test_resolution_is_memoized(self):
        first = self.cache.resolve(PropertyRequest, "Bucket")
        second = self.cache.resolve(PropertyRequest, "Bucket")
        self.assertIs(first, second)
        self.assertIn((PropertyRequest, "Bucket"), self.cache)
        self.assertEqual(len(self.cache), 1)

    def test_absent_result_is_cached(self):
        self.assertIsNone(self.cache.resolve(SlottedRequest, "Bucket"))
        self.assertIn((SlottedRequest, "Bucket"), self.cache)
        self.assertIsNone(self.cache.resolve(SlottedRequest, "Bucket"))
        self.assertEqual(len(self.cache), 1)

    def test_keyed_by_type_and_field(self):
        self.cache.resolve(PropertyRequest, "Bucket")
        self.cache.resolve(GetterRequest, "Bucket")
        self.cache.resolve(PropertyRequest, "Key")
        self.assertEqual(len(self.cache), 3)

    def test_concurrent_first_resolution(self):
        barrier = threading.Barrier(8)

        def resolve(_):
            barrier.wait()
            return self.cache.resolve(GetterRequest, "QueueUrl")

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(resolve, range(8)))

        self.assertEqual(len(self.cache), 1)
        for result in results:
            self.assertIs(result, results[0])
        self.assertEqual(results[0].read(GetterRequest("u")), "u")
