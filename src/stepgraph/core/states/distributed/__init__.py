"""Item sources, batching and result export for Distributed Map."""

from stepgraph.core.states.distributed.bucket import Bucket, BucketRef, Partition, PartitionScope
from stepgraph.core.states.distributed.item_batcher import ItemBatcher
from stepgraph.core.states.distributed.item_reader import (
    CsvHeaderLocation,
    CsvHeaders,
    ItemReader,
    S3CsvItemReader,
    S3JsonItemReader,
    S3ManifestItemReader,
    S3ObjectsItemReader,
)
from stepgraph.core.states.distributed.result_writer import ResultWriter

__all__ = [
    "Bucket",
    "BucketRef",
    "Partition",
    "PartitionScope",
    "ItemBatcher",
    "ItemReader",
    "S3ObjectsItemReader",
    "S3JsonItemReader",
    "S3CsvItemReader",
    "S3ManifestItemReader",
    "CsvHeaders",
    "CsvHeaderLocation",
    "ResultWriter",
]
