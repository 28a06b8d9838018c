"""Orchestration module for publishing archival scans."""

from archive_uploader.orchestration.publish_orchestrator import (
    BatchItemResult,
    PublishOrchestrator,
)

__all__ = [
    "BatchItemResult",
    "PublishOrchestrator",
]
