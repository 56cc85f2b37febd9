"""Registry of transformation pipelines and output connectors.

The registry is where pipelines get picked at runtime. Callers ask for an
(input type, output type) pair; every registered pipeline whose
``supports()`` accepts the pair is a candidate, and ``rank_pipelines()``
orders the candidates by priority. Output connectors are looked up by their
``connector_type`` and checked against the record type they accept.
"""

import logging
import threading
from collections.abc import Iterable

from github_firestore_connector.connectors.base import OutputConnector
from github_firestore_connector.pipeline.base import DataTransformationPipeline
from github_firestore_connector.pipeline.github_to_firestore import GitHubToFirestorePipeline

logger = logging.getLogger(__name__)


def rank_pipelines(
    pipelines: Iterable[DataTransformationPipeline],
) -> list[DataTransformationPipeline]:
    """Order pipelines best-first: highest priority, then earliest registered."""
    # sorted() is stable, so equal priorities keep their incoming order
    return sorted(pipelines, key=lambda p: p.priority, reverse=True)


class ConnectorRegistry:
    """Holds pipelines by id and output connectors by type."""

    def __init__(self) -> None:
        self._pipelines: dict[str, DataTransformationPipeline] = {}
        self._connectors: dict[str, OutputConnector] = {}
        self._lock = threading.Lock()

    # Pipelines

    def register_pipeline(self, pipeline: DataTransformationPipeline) -> None:
        """Register a pipeline under its id, replacing any previous holder of that id."""
        pipeline_id = pipeline.pipeline_id
        with self._lock:
            if pipeline_id in self._pipelines:
                logger.warning(f"Pipeline with id '{pipeline_id}' already registered, replacing")
                # Re-registration moves the pipeline to the end of the tie-break order
                del self._pipelines[pipeline_id]
            self._pipelines[pipeline_id] = pipeline
        logger.info(f"Registered transformation pipeline: {pipeline_id}")

    def get_pipeline(
        self, pipeline_id: str, input_type: type, output_type: type
    ) -> DataTransformationPipeline | None:
        """Get a pipeline by id, only if it supports the requested type pair."""
        pipeline = self._pipelines.get(pipeline_id)
        if pipeline is not None and pipeline.supports(input_type, output_type):
            return pipeline
        return None

    def find_pipelines(self, input_type: type, output_type: type) -> list[DataTransformationPipeline]:
        """All pipelines supporting the type pair, best first."""
        with self._lock:
            registered = list(self._pipelines.values())
        return rank_pipelines(p for p in registered if p.supports(input_type, output_type))

    def find_best_pipeline(
        self, input_type: type, output_type: type
    ) -> DataTransformationPipeline | None:
        """Highest-priority pipeline supporting the type pair, or None."""
        candidates = self.find_pipelines(input_type, output_type)
        if not candidates:
            logger.debug(
                f"No pipeline supports {input_type.__name__} -> {output_type.__name__}"
            )
            return None
        return candidates[0]

    def registered_pipeline_ids(self) -> set[str]:
        return set(self._pipelines)

    def pipelines(self) -> list[DataTransformationPipeline]:
        """Registered pipelines, best first."""
        with self._lock:
            return rank_pipelines(list(self._pipelines.values()))

    # Output connectors

    def register_connector(self, connector: OutputConnector) -> None:
        connector_type = connector.connector_type
        with self._lock:
            if connector_type in self._connectors:
                logger.warning(f"Connector with type '{connector_type}' already registered, replacing")
            self._connectors[connector_type] = connector
        logger.info(f"Registered output connector: {connector_type}")

    def get_connector(self, connector_type: str, data_type: type) -> OutputConnector | None:
        """Get a connector by type, only if it accepts ``data_type`` records."""
        connector = self._connectors.get(connector_type)
        if connector is not None and issubclass(data_type, connector.supported_type):
            return connector
        return None

    def connectors_for(self, data_type: type) -> list[OutputConnector]:
        """All connectors accepting ``data_type`` records."""
        with self._lock:
            registered = list(self._connectors.values())
        return [c for c in registered if issubclass(data_type, c.supported_type)]

    def registered_connector_types(self) -> set[str]:
        return set(self._connectors)

    def initialize_all(self) -> dict[str, bool]:
        """Initialize every connector.

        Returns:
            Dict mapping connector type to whether initialization succeeded
        """
        logger.info(f"Initializing {len(self._connectors)} connectors")
        results = {}
        for connector_type, connector in list(self._connectors.items()):
            try:
                connector.initialize()
                results[connector_type] = True
            except Exception as e:
                logger.error(f"Failed to initialize connector {connector_type}: {e}")
                results[connector_type] = False
        return results

    def shutdown_all(self) -> dict[str, bool]:
        """Shut down every connector; failures are logged, not raised."""
        logger.info(f"Shutting down {len(self._connectors)} connectors")
        results = {}
        for connector_type, connector in list(self._connectors.items()):
            try:
                connector.shutdown()
                results[connector_type] = True
            except Exception as e:
                logger.error(f"Failed to shut down connector {connector_type}: {e}")
                results[connector_type] = False
        return results

    def check_health(self) -> dict[str, bool]:
        """Health of every connector; a check that raises counts as unhealthy."""
        results = {}
        for connector_type, connector in list(self._connectors.items()):
            try:
                results[connector_type] = bool(connector.is_healthy())
            except Exception as e:
                logger.warning(f"Health check failed for connector {connector_type}: {e}")
                results[connector_type] = False
        return results


def default_registry() -> ConnectorRegistry:
    """Registry preloaded with the built-in pipelines."""
    registry = ConnectorRegistry()
    registry.register_pipeline(GitHubToFirestorePipeline())
    return registry
