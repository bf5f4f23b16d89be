# src/auditor/services/compliance_service.py
from pydantic import BaseModel

from auditor.model import AnalysisResult, Impact, Level

PENALTY_PER_VIOLATION = 5


class ComplianceSummary(BaseModel):
    level: Level
    compliant: bool
    score: int
    violation_count: int
    pass_count: int
    incomplete_count: int
    inapplicable_count: int
    critical_or_serious: int


def summarize(result: AnalysisResult, level: Level = Level.AA) -> ComplianceSummary:
    """
    Condenses an analysis into a pass/fail verdict and a 0-100 score
    (five points off per violation record).
    """
    violations = len(result.violations)
    severe = sum(1 for v in result.violations if v.impact in (Impact.CRITICAL, Impact.SERIOUS))
    return ComplianceSummary(
        level=level,
        compliant=violations == 0,
        score=max(0, 100 - violations * PENALTY_PER_VIOLATION),
        violation_count=violations,
        pass_count=len(result.passes),
        incomplete_count=len(result.incomplete),
        inapplicable_count=len(result.inapplicable),
        critical_or_serious=severe,
    )
