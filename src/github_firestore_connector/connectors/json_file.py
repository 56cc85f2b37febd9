"""Output connector that mirrors a Firestore collection as JSON files on disk."""

import logging
import os
from pathlib import Path

from github_firestore_connector.connectors.base import OutputConnector
from github_firestore_connector.exceptions import OutputError
from github_firestore_connector.models import FirestoreIssueDocument
from github_firestore_connector.utils import atomic_write_json

logger = logging.getLogger(__name__)


class JsonFileOutputConnector(OutputConnector[FirestoreIssueDocument]):
    """Write each document to ``<root>/<collection>/<id>.json``.

    Writes go through a temp file and rename, so readers never see a half
    written document. Writing an existing id overwrites it (upsert).
    """

    CONNECTOR_TYPE = "json-file"

    def __init__(self, root: Path | str, collection: str = "issues"):
        self.root = Path(root)
        self.collection = collection

    @property
    def connector_type(self) -> str:
        return self.CONNECTOR_TYPE

    @property
    def supported_type(self) -> type:
        return FirestoreIssueDocument

    @property
    def collection_dir(self) -> Path:
        return self.root / self.collection

    def document_path(self, record_id: str) -> Path:
        return self.collection_dir / f"{record_id}.json"

    def write(self, record: FirestoreIssueDocument) -> None:
        path = self.document_path(record.id)
        try:
            atomic_write_json(path, record.to_dict())
        except OSError as e:
            raise OutputError(f"Failed to write document {record.id} to {path}: {e}") from e
        logger.debug(f"Wrote document {record.id} to {path}")

    def write_batch(self, records: list[FirestoreIssueDocument]) -> None:
        for record in records:
            self.write(record)
        logger.info(f"Wrote batch of {len(records)} documents to {self.collection_dir}")

    def exists(self, record_id: str) -> bool:
        return self.document_path(record_id).exists()

    def is_healthy(self) -> bool:
        target = self.collection_dir if self.collection_dir.exists() else self.root
        if not target.exists():
            # Will be created on first write
            return True
        return target.is_dir() and os.access(target, os.W_OK)

    def initialize(self) -> None:
        try:
            self.collection_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Cannot create output directory {self.collection_dir}: {e}") from e
        logger.info(f"JSON file connector ready at {self.collection_dir}")
