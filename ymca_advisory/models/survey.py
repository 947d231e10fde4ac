"""Survey submission records.

A Submission is one organization's raw answers for one reporting period.
Submissions are never edited: a later submission for the same organization
and period supersedes an earlier one, and `latest_submission` picks it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional


class QuestionFilter(str, Enum):
    """Which questions were asked of the respondent."""

    ALL = "all"
    RESTRICTED_ACCESS_ONLY = "restricted-access-only"
    UNRESTRICTED_ACCESS_ONLY = "unrestricted-access-only"

    @classmethod
    def parse(cls, value: "str | QuestionFilter | None") -> "QuestionFilter":
        """Accept enum members, their values, or None (all questions)."""
        if value is None:
            return cls.ALL
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown question filter: {value!r}")


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str) and value.strip():
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Submission:
    """Raw survey answers keyed by dotted question code (e.g. "FI.LQ.001")."""

    organization_id: str
    responses: Mapping[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    submission_id: Optional[str] = None
    period: Optional[str] = None

    def __post_init__(self):
        # Freeze a private copy so callers cannot mutate scored input
        object.__setattr__(self, "responses", MappingProxyType(dict(self.responses or {})))

    @property
    def revision(self) -> tuple:
        """Identity used to detect a new submission for the same organization."""
        return (self.submission_id, self.period, self.timestamp.isoformat())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Submission":
        """Build from the JSON shape `{organizationId, responses, timestamp}`.

        Snake-case keys are accepted too. Missing responses become an empty
        mapping, which scores zero everywhere.
        """
        organization_id = data.get("organizationId") or data.get("organization_id")
        if not organization_id:
            raise ValueError("Submission is missing organizationId")
        responses = data.get("responses") or {}
        if not isinstance(responses, Mapping):
            responses = {}
        return cls(
            organization_id=str(organization_id),
            responses=responses,
            timestamp=_parse_timestamp(data.get("timestamp")),
            submission_id=data.get("submissionId") or data.get("submission_id"),
            period=data.get("period") or data.get("period_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "organizationId": self.organization_id,
            "responses": dict(self.responses),
            "timestamp": self.timestamp.isoformat(),
        }
        if self.submission_id:
            result["submissionId"] = self.submission_id
        if self.period:
            result["period"] = self.period
        return result


def latest_submission(
    submissions: Iterable[Submission],
    organization_id: Optional[str] = None,
    period: Optional[str] = None,
) -> Optional[Submission]:
    """Return the effective (most recent) submission, or None if there is none.

    Args:
        submissions: All submissions, in any order
        organization_id: Restrict to one organization
        period: Restrict to one reporting period
    """
    candidates = [
        s
        for s in submissions
        if (organization_id is None or s.organization_id == organization_id) and (period is None or s.period == period)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda s: s.timestamp)
