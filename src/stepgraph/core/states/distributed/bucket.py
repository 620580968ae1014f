"""References to S3 buckets used by Distributed Map readers and writers.

Readers and writers only need a name, an ARN and the partition the bucket
lives in. Anything implementing ``BucketRef`` works; ``Bucket`` is a plain
value implementation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from stepgraph.core.types import PolicyStatement

DEFAULT_PARTITION = "aws"


@runtime_checkable
class PartitionScope(Protocol):
    """Provides the partition when the bucket is only known at run time."""

    @property
    def partition(self) -> str: ...


@runtime_checkable
class BucketRef(Protocol):
    @property
    def bucket_name(self) -> str: ...

    @property
    def bucket_arn(self) -> str: ...

    @property
    def partition(self) -> str: ...

    def grant_read(self, objects_key_pattern: str = "*") -> list[PolicyStatement]: ...


@dataclass(frozen=True)
class Partition:
    """A ``PartitionScope`` for a fixed partition (``aws``, ``aws-cn``, ...)."""

    partition: str = DEFAULT_PARTITION


@dataclass(frozen=True)
class Bucket:
    """An existing bucket, referenced by name.

    Example:
        >>> Bucket("inventory").bucket_arn
        'arn:aws:s3:::inventory'
    """

    bucket_name: str
    partition: str = DEFAULT_PARTITION
    bucket_arn: str = field(default="")

    def __post_init__(self) -> None:
        if not self.bucket_name:
            raise ValueError("bucket_name is required")
        if not self.bucket_arn:
            object.__setattr__(self, "bucket_arn", f"arn:{self.partition}:s3:::{self.bucket_name}")

    def arn_for_objects(self, key_pattern: str) -> str:
        return f"{self.bucket_arn}/{key_pattern}"

    def grant_read(self, objects_key_pattern: str = "*") -> list[PolicyStatement]:
        """Statements allowing to list the bucket and read matching objects."""
        return [
            PolicyStatement(
                actions=["s3:GetObject*", "s3:GetBucket*", "s3:List*"],
                resources=[self.bucket_arn, self.arn_for_objects(objects_key_pattern)],
            )
        ]
