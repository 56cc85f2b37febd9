"""Tests for the pipeline and connector registry."""

import pytest

from github_firestore_connector.connectors.base import OutputConnector
from github_firestore_connector.models import FirestoreIssueDocument, GitHubIssue
from github_firestore_connector.pipeline.base import DataTransformationPipeline
from github_firestore_connector.pipeline.github_to_firestore import GitHubToFirestorePipeline
from github_firestore_connector.registry import ConnectorRegistry, default_registry, rank_pipelines


class SlackMessage:
    """Alternative output type for a competing pipeline."""


class StubPipeline(DataTransformationPipeline):
    """Configurable pipeline for selection tests."""

    def __init__(self, pipeline_id, priority=0, input_type=GitHubIssue, output_type=SlackMessage):
        super().__init__()
        self._id = pipeline_id
        self._priority = priority
        self._input_type = input_type
        self._output_type = output_type

    @property
    def pipeline_id(self):
        return self._id

    @property
    def priority(self):
        return self._priority

    def supports(self, input_type, output_type):
        return issubclass(input_type, self._input_type) and issubclass(
            output_type, self._output_type
        )

    def _transform_one(self, item):
        return SlackMessage()

    def _transform_many(self, items):
        return [SlackMessage() for _ in items]


class StubConnector(OutputConnector):
    """In-memory connector with switchable failures."""

    def __init__(self, connector_type="memory", supported=FirestoreIssueDocument, healthy=True):
        self._type = connector_type
        self._supported = supported
        self.healthy = healthy
        self.fail_lifecycle = False
        self.initialized = False

    @property
    def connector_type(self):
        return self._type

    @property
    def supported_type(self):
        return self._supported

    def write(self, record):
        pass

    def write_batch(self, records):
        pass

    def exists(self, record_id):
        return False

    def is_healthy(self):
        if self.healthy is None:
            raise RuntimeError("health endpoint unreachable")
        return self.healthy

    def initialize(self):
        if self.fail_lifecycle:
            raise RuntimeError("cannot start")
        self.initialized = True

    def shutdown(self):
        if self.fail_lifecycle:
            raise RuntimeError("cannot stop")


@pytest.fixture
def registry():
    """Create an empty registry."""
    return ConnectorRegistry()


class TestPipelineSelection:
    """Test suite for pipeline registration and lookup."""

    def test_default_registry_has_builtin_pipeline(self):
        """Should preload the GitHub to Firestore pipeline."""
        registry = default_registry()

        assert registry.registered_pipeline_ids() == {"github-to-firestore"}
        best = registry.find_best_pipeline(GitHubIssue, FirestoreIssueDocument)
        assert isinstance(best, GitHubToFirestorePipeline)

    def test_find_best_by_priority(self, registry):
        """Should pick the highest-priority supporting pipeline."""
        low = StubPipeline("slack-basic", priority=10)
        high = StubPipeline("slack-rich", priority=50)
        registry.register_pipeline(low)
        registry.register_pipeline(high)
        registry.register_pipeline(GitHubToFirestorePipeline())

        assert registry.find_best_pipeline(GitHubIssue, SlackMessage) is high
        assert isinstance(
            registry.find_best_pipeline(GitHubIssue, FirestoreIssueDocument),
            GitHubToFirestorePipeline,
        )

    def test_ties_keep_registration_order(self, registry):
        """Should prefer the earlier registration on equal priority."""
        first = StubPipeline("first", priority=5)
        second = StubPipeline("second", priority=5)
        registry.register_pipeline(first)
        registry.register_pipeline(second)

        assert registry.find_best_pipeline(GitHubIssue, SlackMessage) is first

    def test_no_supporting_pipeline(self, registry):
        """Should return None when nothing supports the pair."""
        registry.register_pipeline(GitHubToFirestorePipeline())

        assert registry.find_best_pipeline(str, FirestoreIssueDocument) is None

    def test_get_pipeline_checks_types(self, registry):
        """Should only return a pipeline by id when it supports the pair."""
        pipeline = GitHubToFirestorePipeline()
        registry.register_pipeline(pipeline)

        assert registry.get_pipeline("github-to-firestore", GitHubIssue, FirestoreIssueDocument) is pipeline
        assert registry.get_pipeline("github-to-firestore", GitHubIssue, SlackMessage) is None
        assert registry.get_pipeline("missing", GitHubIssue, FirestoreIssueDocument) is None

    def test_reregister_replaces(self, registry):
        """Should replace a pipeline registered under the same id."""
        registry.register_pipeline(StubPipeline("slack", priority=1))
        replacement = StubPipeline("slack", priority=2)
        registry.register_pipeline(replacement)

        assert registry.registered_pipeline_ids() == {"slack"}
        assert registry.find_best_pipeline(GitHubIssue, SlackMessage) is replacement

    def test_rank_pipelines(self):
        """Should order by descending priority."""
        a, b, c = StubPipeline("a", 1), StubPipeline("b", 100), StubPipeline("c", 1)

        assert [p.pipeline_id for p in rank_pipelines([a, b, c])] == ["b", "a", "c"]


class TestConnectors:
    """Test suite for output connector registration and lifecycle."""

    def test_get_connector_checks_data_type(self, registry):
        """Should return a connector only for data it accepts."""
        connector = StubConnector()
        registry.register_connector(connector)

        assert registry.get_connector("memory", FirestoreIssueDocument) is connector
        assert registry.get_connector("memory", GitHubIssue) is None
        assert registry.get_connector("firestore", FirestoreIssueDocument) is None

    def test_connectors_for(self, registry):
        """Should list every connector accepting the data type."""
        docs = StubConnector("docs")
        slack = StubConnector("slack", supported=SlackMessage)
        registry.register_connector(docs)
        registry.register_connector(slack)

        assert registry.connectors_for(SlackMessage) == [slack]
        assert registry.registered_connector_types() == {"docs", "slack"}

    def test_lifecycle_failures_are_reported(self, registry):
        """Should report lifecycle failures per connector without raising."""
        good = StubConnector("good")
        bad = StubConnector("bad")
        bad.fail_lifecycle = True
        registry.register_connector(good)
        registry.register_connector(bad)

        assert registry.initialize_all() == {"good": True, "bad": False}
        assert good.initialized
        assert registry.shutdown_all() == {"good": True, "bad": False}

    def test_check_health(self, registry):
        """Should count a raising health check as unhealthy."""
        registry.register_connector(StubConnector("up", healthy=True))
        registry.register_connector(StubConnector("down", healthy=False))
        registry.register_connector(StubConnector("broken", healthy=None))

        assert registry.check_health() == {"up": True, "down": False, "broken": False}
