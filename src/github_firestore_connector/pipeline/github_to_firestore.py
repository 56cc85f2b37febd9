"""Default pipeline: GitHub issues to Firestore issue documents."""

from github_firestore_connector.models import FirestoreIssueDocument, GitHubIssue, utc_now
from github_firestore_connector.pipeline.base import DataTransformationPipeline


class GitHubToFirestorePipeline(DataTransformationPipeline[GitHubIssue, FirestoreIssueDocument]):
    """Copy issue fields into a Firestore document and stamp the sync time."""

    PIPELINE_ID = "github-to-firestore"
    PRIORITY = 100  # default pipeline, outranks alternatives

    @property
    def pipeline_id(self) -> str:
        return self.PIPELINE_ID

    @property
    def priority(self) -> int:
        return self.PRIORITY

    def supports(self, input_type: type, output_type: type) -> bool:
        if not isinstance(input_type, type) or not isinstance(output_type, type):
            return False
        return issubclass(input_type, GitHubIssue) and issubclass(
            output_type, FirestoreIssueDocument
        )

    def _transform_one(self, item: GitHubIssue) -> FirestoreIssueDocument:
        return FirestoreIssueDocument.from_github_issue(item, synced_at=utc_now())

    def _transform_many(self, items: list[GitHubIssue]) -> list[FirestoreIssueDocument]:
        # One sync time for the whole batch
        synced_at = utc_now()
        return [FirestoreIssueDocument.from_github_issue(item, synced_at=synced_at) for item in items]
