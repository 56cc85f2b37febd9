"""Transformation pipeline infrastructure."""

from github_firestore_connector.pipeline.base import (
    DataTransformationPipeline,
    get_executor,
    shutdown_executor,
)
from github_firestore_connector.pipeline.github_to_firestore import GitHubToFirestorePipeline

__all__ = [
    "DataTransformationPipeline",
    "GitHubToFirestorePipeline",
    "get_executor",
    "shutdown_executor",
]
