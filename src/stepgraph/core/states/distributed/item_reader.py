"""Item readers: where a Distributed Map gets its items from.

Every reader points at a bucket, given either as a ``BucketRef`` or as a
JSON path resolved at run time (``bucket_name_path``, which then needs a
``bucket_name_scope`` to know the partition).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from stepgraph.core.fields import is_json_path
from stepgraph.core.states.distributed.bucket import BucketRef, PartitionScope
from stepgraph.core.types import PolicyStatement


def resolve_partition(bucket: BucketRef | None, scope: PartitionScope | None) -> str:
    """Partition of the bucket, or of the scope when the bucket is dynamic."""
    if bucket is not None:
        return bucket.partition
    if scope is not None:
        return scope.partition
    raise ValueError("Cannot determine partition: provide either `bucket` or `bucketNamePath` and `bucketNameScope`")


def bucket_location_errors(bucket: BucketRef | None, bucket_name_path: str | None) -> list[str]:
    errors = []
    if bucket is not None and bucket_name_path is not None:
        errors.append("Provide either `bucket` or `bucketNamePath` and `bucketNameScope`, but not both")
    if bucket is None and bucket_name_path is None:
        errors.append("Provide either `bucket` or `bucketNamePath`")
    return errors


def render_bucket(bucket: BucketRef | None, bucket_name_path: str | None) -> dict[str, Any]:
    if bucket is not None:
        return {"Bucket": bucket.bucket_name}
    return {"Bucket.$": bucket_name_path}


class ItemReader(ABC):
    """Base for S3 item readers.

    Args:
        bucket: Bucket holding the items.
        bucket_name_path: Path to the bucket name in the state input.
        bucket_name_scope: Partition provider, needed with bucket_name_path.
        max_items: Stop after this many items.

    Raises:
        ValueError: If the partition cannot be determined.
    """

    resource_api: str = "getObject"

    def __init__(
        self,
        *,
        bucket: BucketRef | None = None,
        bucket_name_path: str | None = None,
        bucket_name_scope: PartitionScope | None = None,
        max_items: int | None = None,
    ) -> None:
        self._bucket = bucket
        self.bucket_name_path = bucket_name_path
        self.max_items = max_items
        self.partition = resolve_partition(bucket, bucket_name_scope)

    @property
    def bucket(self) -> BucketRef:
        if self._bucket is None:
            raise ValueError("`bucket` is undefined: the reader was configured with `bucketNamePath`")
        return self._bucket

    @property
    def resource(self) -> str:
        return f"arn:{self.partition}:states:::s3:{self.resource_api}"

    @abstractmethod
    def _reader_config(self) -> dict[str, Any]:
        """ReaderConfig entries specific to the reader type."""

    @abstractmethod
    def _parameters(self) -> dict[str, Any]:
        """Parameters entries besides the bucket."""

    def render(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Resource": self.resource}
        config = self._reader_config()
        if self.max_items is not None:
            config["MaxItems"] = self.max_items
        if config:
            rendered["ReaderConfig"] = config
        rendered["Parameters"] = {**render_bucket(self._bucket, self.bucket_name_path), **self._parameters()}
        return rendered

    def _objects_arn(self) -> str:
        if self._bucket is not None:
            return f"{self._bucket.bucket_arn}/*"
        return f"arn:{self.partition}:s3:::*"

    def provide_policy_statements(self) -> list[PolicyStatement]:
        return [PolicyStatement(actions=["s3:GetObject"], resources=[self._objects_arn()])]

    def validate_item_reader(self) -> list[str]:
        return bucket_location_errors(self._bucket, self.bucket_name_path)


class S3ObjectsItemReader(ItemReader):
    """Iterate over the objects listed under a prefix."""

    resource_api = "listObjectsV2"

    def __init__(self, *, prefix: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.prefix = prefix

    def _reader_config(self) -> dict[str, Any]:
        return {}

    def _parameters(self) -> dict[str, Any]:
        return {"Prefix": self.prefix} if self.prefix is not None else {}

    def provide_policy_statements(self) -> list[PolicyStatement]:
        resource = self._bucket.bucket_arn if self._bucket is not None else f"arn:{self.partition}:s3:::*"
        return [PolicyStatement(actions=["s3:ListBucket"], resources=[resource])]


class S3FileItemReader(ItemReader):
    """Reader for a single object; ``key`` may be a path token."""

    input_type: str = ""

    def __init__(self, *, key: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.key = key

    def _reader_config(self) -> dict[str, Any]:
        return {"InputType": self.input_type}

    def _parameters(self) -> dict[str, Any]:
        if is_json_path(self.key):
            return {"Key.$": str(self.key)}
        return {"Key": self.key}


class S3JsonItemReader(S3FileItemReader):
    """Items are the elements of a JSON array object."""

    input_type = "JSON"


class S3ManifestItemReader(S3FileItemReader):
    """Items are the objects listed in an S3 inventory manifest."""

    input_type = "MANIFEST"


class CsvHeaderLocation(Enum):
    FIRST_ROW = "FIRST_ROW"
    GIVEN = "GIVEN"


@dataclass(frozen=True)
class CsvHeaders:
    """Where the column names of a CSV file come from."""

    header_location: CsvHeaderLocation
    headers: tuple[str, ...] | None = None

    @classmethod
    def use_first_row(cls) -> CsvHeaders:
        return cls(CsvHeaderLocation.FIRST_ROW)

    @classmethod
    def use(cls, headers: list[str]) -> CsvHeaders:
        if not headers:
            raise ValueError("At least one CSV header is required")
        return cls(CsvHeaderLocation.GIVEN, tuple(headers))


class S3CsvItemReader(S3FileItemReader):
    """Items are the rows of a CSV object."""

    input_type = "CSV"

    def __init__(self, *, csv_headers: CsvHeaders | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.csv_headers = csv_headers or CsvHeaders.use_first_row()

    def _reader_config(self) -> dict[str, Any]:
        config = super()._reader_config()
        config["CSVHeaderLocation"] = self.csv_headers.header_location.value
        if self.csv_headers.headers is not None:
            config["CSVHeaders"] = list(self.csv_headers.headers)
        return config
