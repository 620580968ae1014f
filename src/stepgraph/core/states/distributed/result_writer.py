"""Where a Distributed Map writes its aggregated results."""

from __future__ import annotations

from typing import Any

from stepgraph.core.states.distributed.bucket import BucketRef, PartitionScope
from stepgraph.core.states.distributed.item_reader import (
    bucket_location_errors,
    render_bucket,
    resolve_partition,
)
from stepgraph.core.types import PolicyStatement


class ResultWriter:
    """Export child execution results to S3.

    Args:
        bucket: Destination bucket.
        bucket_name_path: Path to the bucket name in the state input.
        bucket_name_scope: Partition provider, needed with bucket_name_path.
        prefix: Key prefix for the written objects.
    """

    def __init__(
        self,
        *,
        bucket: BucketRef | None = None,
        bucket_name_path: str | None = None,
        bucket_name_scope: PartitionScope | None = None,
        prefix: str | None = None,
    ) -> None:
        self.bucket = bucket
        self.bucket_name_path = bucket_name_path
        self.prefix = prefix
        self.partition = resolve_partition(bucket, bucket_name_scope)

    def render(self) -> dict[str, Any]:
        parameters = render_bucket(self.bucket, self.bucket_name_path)
        if self.prefix is not None:
            parameters["Prefix"] = self.prefix
        return {
            "Resource": f"arn:{self.partition}:states:::s3:putObject",
            "Parameters": parameters,
        }

    def provide_policy_statements(self) -> list[PolicyStatement]:
        if self.bucket is not None:
            resource = f"{self.bucket.bucket_arn}/*"
        else:
            resource = f"arn:{self.partition}:s3:::*"
        return [
            PolicyStatement(
                actions=[
                    "s3:PutObject",
                    "s3:GetObject",
                    "s3:ListMultipartUploadParts",
                    "s3:AbortMultipartUpload",
                ],
                resources=[resource],
            )
        ]

    def validate_result_writer(self) -> list[str]:
        return bucket_location_errors(self.bucket, self.bucket_name_path)
