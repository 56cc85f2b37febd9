"""Run records through the best pipeline and into an output connector."""

import logging
import time
from datetime import timedelta
from typing import Any

from github_firestore_connector.connectors.base import OutputConnector
from github_firestore_connector.exceptions import ConnectorNotFoundError, PipelineNotFoundError
from github_firestore_connector.models import (
    SyncFailure,
    SyncPartialFailure,
    SyncResult,
    SyncSuccess,
)
from github_firestore_connector.pipeline.base import DataTransformationPipeline
from github_firestore_connector.registry import ConnectorRegistry

logger = logging.getLogger(__name__)


class PluginOrchestrator:
    """Pick a pipeline and a connector from the registry and push records through."""

    def __init__(self, registry: ConnectorRegistry, timeout: float | None = None):
        self.registry = registry
        self.timeout = timeout  # seconds to wait on a pipeline future

    def resolve_pipeline(
        self, input_type: type, output_type: type, pipeline_id: str | None = None
    ) -> DataTransformationPipeline:
        """Return the requested pipeline, or the best one for the type pair.

        Raises:
            PipelineNotFoundError: If nothing registered can handle the pair
        """
        if pipeline_id is not None:
            pipeline = self.registry.get_pipeline(pipeline_id, input_type, output_type)
            if pipeline is None:
                raise PipelineNotFoundError(
                    f"Pipeline '{pipeline_id}' is not registered for "
                    f"{input_type.__name__} -> {output_type.__name__}"
                )
            return pipeline

        pipeline = self.registry.find_best_pipeline(input_type, output_type)
        if pipeline is None:
            raise PipelineNotFoundError(
                f"No pipeline found for {input_type.__name__} -> {output_type.__name__}"
            )
        return pipeline

    def resolve_connector(self, connector_type: str, output_type: type) -> OutputConnector:
        connector = self.registry.get_connector(connector_type, output_type)
        if connector is None:
            raise ConnectorNotFoundError(
                f"No connector '{connector_type}' accepting {output_type.__name__}"
            )
        return connector

    def process(
        self,
        item: Any,
        input_type: type,
        output_type: type,
        connector_type: str,
        pipeline_id: str | None = None,
    ) -> Any:
        """Transform one record and write it.

        Returns:
            The transformed record that was written

        Raises:
            PipelineNotFoundError, ConnectorNotFoundError: On lookup failure
            InvalidArgumentError: If ``item`` is None (from the pipeline future)
        """
        pipeline = self.resolve_pipeline(input_type, output_type, pipeline_id)
        connector = self.resolve_connector(connector_type, output_type)
        logger.debug(
            f"Processing single item: {input_type.__name__} -> {output_type.__name__} "
            f"via {pipeline.pipeline_id} into {connector_type}"
        )

        record = pipeline.transform(item).result(timeout=self.timeout)
        connector.write(record)
        return record

    def process_batch(
        self,
        items: list[Any],
        input_type: type,
        output_type: type,
        connector_type: str,
        pipeline_id: str | None = None,
    ) -> SyncResult:
        """Transform a batch and write every resulting record.

        Lookup and transformation errors propagate. Write errors are collected
        per record and reported through the returned SyncResult.
        """
        started = time.monotonic()
        pipeline = self.resolve_pipeline(input_type, output_type, pipeline_id)
        connector = self.resolve_connector(connector_type, output_type)

        logger.info(
            f"Processing batch of {len(items) if items is not None else 0} items "
            f"via {pipeline.pipeline_id} into {connector_type}"
        )
        records = pipeline.transform_batch(items).result(timeout=self.timeout)

        processed = 0
        errors: list[str] = []
        for record in records:
            record_id = getattr(record, "id", "?")
            try:
                connector.write(record)
                processed += 1
            except Exception as e:
                errors.append(f"Failed to write {record_id}: {e}")
                logger.error(f"Failed to write {record_id} to {connector_type}: {e}")

        duration = timedelta(seconds=time.monotonic() - started)
        return self._build_result(processed, errors, duration)

    @staticmethod
    def _build_result(processed: int, errors: list[str], duration: timedelta) -> SyncResult:
        if not errors:
            logger.info(f"SYNC_SUCCESS: {processed} records processed in {duration}")
            return SyncSuccess(duration=duration, processed_count=processed)
        if processed > 0:
            logger.warning(
                f"SYNC_PARTIAL_FAILURE: {processed} successful, {len(errors)} failed in {duration}"
            )
            return SyncPartialFailure(
                duration=duration,
                processed_count=processed,
                failed_count=len(errors),
                errors=tuple(errors),
            )
        logger.error(f"SYNC_COMPLETE_FAILURE: {len(errors)} failures in {duration}")
        return SyncFailure(duration=duration, error=f"All {len(errors)} writes failed: {errors[0]}")
