# src/wcagpiper/core/api.py
"""
Public entry points: `analyze` finds accessibility violations in markup,
`fix` applies remediations for a list of violations and returns the fixed
source in its original dialect. Neither raises on bad input.
"""
from typing import Any, Iterable, Optional

from auditor.controllers.audit_controller import AuditController
from auditor.model import AnalysisOptions, AnalysisResult
from remediator.controllers.fix_controller import FixController
from remediator.model import FixOptions

_audit_controller: Optional[AuditController] = None
_fix_controller: Optional[FixController] = None


def _auditor() -> AuditController:
    global _audit_controller
    if _audit_controller is None:
        _audit_controller = AuditController()
    return _audit_controller


def _fixer() -> FixController:
    global _fix_controller
    if _fix_controller is None:
        _fix_controller = FixController()
    return _fix_controller


def analyze(code: str, level: str = "AA", format: str = "html") -> AnalysisResult:
    """
    Detects WCAG violations in `code`.

    Args:
        code: Source text in the given dialect.
        level: Conformance level, "A", "AA" or "AAA". Invalid values fall back to "AA".
        format: "html", "react", "vue" or "angular". Unknown values are treated as html.
    """
    return _auditor().analyze(code, AnalysisOptions(level=level, format=format))


def fix(code: str, violations: Optional[Iterable[Any]], level: str = "AA", format: str = "html",
        auto_fix: bool = True) -> str:
    """
    Remediates `violations` (Violation models or dicts) in `code` and returns
    the formatted result in the same dialect.
    """
    options = FixOptions(level=level, format=format, auto_fix=auto_fix)
    return _fixer().fix(code, violations, options)
