"""Coverage job handling and persistence seams."""

from covdelta.jobs.factory import build_job_handler
from covdelta.jobs.handler import CoverageJobHandler
from covdelta.jobs.models import (
    CoverageArtifactSource,
    CoverageReportRecord,
    CoverageReportStatus,
    Job,
    PullRequestSource,
    ReportStore,
)
from covdelta.jobs.store import InMemoryReportStore

__all__ = [
    "CoverageArtifactSource",
    "CoverageJobHandler",
    "CoverageReportRecord",
    "CoverageReportStatus",
    "InMemoryReportStore",
    "Job",
    "PullRequestSource",
    "ReportStore",
    "build_job_handler",
]
