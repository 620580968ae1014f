"""Grouping Distributed Map items into batches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Batches are passed as state input, which is capped at 256 KiB.
MAX_INPUT_BYTES_PER_BATCH = 262_144


@dataclass
class ItemBatcher:
    """Batch items before handing them to the item processor.

    Each limit can be a number or a path read from the input, not both.
    At least one limit must be given.

    Attributes:
        max_items_per_batch: Items per batch.
        max_items_per_batch_path: Path to the items-per-batch limit.
        max_input_bytes_per_batch: Bytes per batch, at most 256 KiB.
        max_input_bytes_per_batch_path: Path to the bytes-per-batch limit.
        batch_input: Fixed JSON added to every batch under ``BatchInput``.

    Raises:
        ValueError: On conflicting, missing or out of range limits.
    """

    max_items_per_batch: int | None = None
    max_items_per_batch_path: str | None = None
    max_input_bytes_per_batch: int | None = None
    max_input_bytes_per_batch_path: str | None = None
    batch_input: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        errors = self.validate_item_batcher()
        if errors:
            raise ValueError("; ".join(errors))

    def validate_item_batcher(self) -> list[str]:
        errors = []
        if all(
            value is None
            for value in (
                self.max_items_per_batch,
                self.max_items_per_batch_path,
                self.max_input_bytes_per_batch,
                self.max_input_bytes_per_batch_path,
            )
        ):
            errors.append(
                "Provide at least one value for `maxItemsPerBatch`, `maxItemsPerBatchPath`, "
                "`maxInputBytesPerBatch` or `maxInputBytesPerBatchPath`"
            )
        if self.max_items_per_batch is not None and self.max_items_per_batch_path is not None:
            errors.append("Provide either `maxItemsPerBatch` or `maxItemsPerBatchPath`, but not both")
        if self.max_input_bytes_per_batch is not None and self.max_input_bytes_per_batch_path is not None:
            errors.append(
                "Provide either `maxInputBytesPerBatch` or `maxInputBytesPerBatchPath`, but not both"
            )
        if self.max_items_per_batch is not None and self.max_items_per_batch < 1:
            errors.append("maxItemsPerBatch must be at least 1")
        if self.max_input_bytes_per_batch is not None and not (
            1 <= self.max_input_bytes_per_batch <= MAX_INPUT_BYTES_PER_BATCH
        ):
            errors.append(f"maxInputBytesPerBatch must be between 1 and {MAX_INPUT_BYTES_PER_BATCH}")
        return errors

    def render(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {}
        for key, value in (
            ("MaxItemsPerBatch", self.max_items_per_batch),
            ("MaxItemsPerBatchPath", self.max_items_per_batch_path),
            ("MaxInputBytesPerBatch", self.max_input_bytes_per_batch),
            ("MaxInputBytesPerBatchPath", self.max_input_bytes_per_batch_path),
            ("BatchInput", self.batch_input),
        ):
            if value is not None:
                rendered[key] = value
        return rendered
