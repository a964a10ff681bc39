"""Threshold rules that flag fields users struggle with."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from processor.aggregator import FieldMetrics


@dataclass(frozen=True)
class ProblemIssues:
    high_abandonment: bool
    long_hesitation: bool
    excessive_changes: bool


@dataclass(frozen=True)
class ProblemReport:
    field_id: str
    issues: ProblemIssues
    metrics: FieldMetrics

    def to_dict(self) -> dict[str, Any]:
        return {
            "fieldId": self.field_id,
            "issues": {
                "highAbandonment": self.issues.high_abandonment,
                "longHesitation": self.issues.long_hesitation,
                "excessiveChanges": self.issues.excessive_changes,
            },
            "metrics": self.metrics.to_dict()["metrics"],
        }


class ProblemDetector:
    """
    Classifies fields as problematic.

        high_abandonment:  abandonment_rate > abandonment_threshold (%)
        long_hesitation:   avg_hesitation  > hesitation_threshold_ms
        excessive_changes: change_count    > change_threshold

    A field is reported only when it abandons or hesitates too much;
    excessive_changes rides along as an extra flag.
    """

    ABANDONMENT_THRESHOLD = 30
    HESITATION_THRESHOLD_MS = 5000
    CHANGE_THRESHOLD = 10

    def __init__(
        self,
        abandonment_threshold: int = ABANDONMENT_THRESHOLD,
        hesitation_threshold_ms: int = HESITATION_THRESHOLD_MS,
        change_threshold: int = CHANGE_THRESHOLD,
    ):
        self.abandonment_threshold = abandonment_threshold
        self.hesitation_threshold_ms = hesitation_threshold_ms
        self.change_threshold = change_threshold

    def classify(self, metrics: FieldMetrics) -> ProblemIssues:
        return ProblemIssues(
            high_abandonment=metrics.abandonment_rate > self.abandonment_threshold,
            long_hesitation=metrics.avg_hesitation > self.hesitation_threshold_ms,
            excessive_changes=metrics.change_count > self.change_threshold,
        )

    def detect(self, field_metrics: Iterable[FieldMetrics]) -> list[ProblemReport]:
        reports = []
        for metrics in field_metrics:
            issues = self.classify(metrics)
            if issues.high_abandonment or issues.long_hesitation:
                reports.append(
                    ProblemReport(field_id=metrics.field_id, issues=issues, metrics=metrics)
                )
        return reports


def detect_problems(field_metrics: Iterable[FieldMetrics]) -> list[ProblemReport]:
    """Detect problems using the default thresholds."""
    return ProblemDetector().detect(field_metrics)
