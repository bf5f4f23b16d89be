# tests/core/test_public_api.py
from wcagpiper.core import api
from auditor.model import AnalysisResult, Violation


def test_analyze_returns_result_model():
    result = api.analyze('<img src="a.png">')
    assert isinstance(result, AnalysisResult)
    assert all(isinstance(v, Violation) for v in result.violations)


def test_analyze_tolerates_bad_options():
    """Ongeldige level/format-waarden vallen terug op AA en html."""
    result = api.analyze('<img src="a.png">', level="Z", format="svelte")
    assert result.violations[0].tags[0] == "wcag2aa"


def test_analyze_empty_input():
    result = api.analyze("")
    assert [v.id for v in result.violations] == ["html-has-lang", "document-title"]


def test_fix_accepts_dicts_from_serialized_results():
    """Violations die als JSON zijn doorgegeven werken net als modellen."""
    code = '<img src="my-logo.png">'
    as_dicts = api.analyze(code).to_dict()["violations"]
    assert api.fix(code, as_dicts) == api.fix(code, api.analyze(code).violations)


def test_fix_without_violations_only_formats():
    output = api.fix("<p>x</p>", None, format="react")
    assert output.startswith("<p>")
    assert output.rstrip().endswith("</p>")
    assert "x" in output
    assert "<html" not in output
