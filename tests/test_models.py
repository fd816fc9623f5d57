# tests/test_models.py
import pytest
from pydantic import ValidationError
from review_relay.models.config import RenderConfig
from review_relay.models.review import Issue, Praise, ReviewResult


def test_render_config_defaults():
    config = RenderConfig()
    assert config.include_machine_block_inline is True
    assert config.include_machine_block_in_summary is False
    assert config.max_code_block_width == 100


def test_render_config_rejects_zero_width():
    with pytest.raises(ValidationError):
        RenderConfig(max_code_block_width=0)


def test_review_result_reads_nested_review_block():
    result = ReviewResult.model_validate({
        "summary": {"total_issues": 1, "total_praises": 1, "high": 1},
        "review": {
            "issues": [{
                "file_path": "src/app.py",
                "line_number": 12,
                "severity": "high",
                "category": "security",
                "message": "Hardcoded secret",
            }],
            "praises": [{
                "file_path": "src/util.py",
                "line_number": 3,
                "category": "best_practice",
                "message": "Nice helper",
            }],
        },
    })

    assert result.summary.total_issues == 1
    assert result.summary.critical == 0
    assert result.issues[0].location == ("src/app.py", 12)
    assert result.praises[0].category == "best_practice"


def test_review_result_accepts_top_level_lists():
    result = ReviewResult.model_validate({
        "summary": {"total_issues": 1},
        "issues": [{"file_path": "a.py", "line_number": 1, "message": "x"}],
    })
    assert len(result.issues) == 1
    assert result.praises == []


def test_review_counts_default_to_zero():
    result = ReviewResult.model_validate({"summary": {"total_issues": None}})
    assert result.summary.total_issues == 0
    assert result.summary.low == 0

    assert ReviewResult.model_validate({}).summary.total_praises == 0


def test_issue_without_location_is_not_inline_eligible():
    assert Issue(message="general remark").location is None
    assert Issue(file_path="", line_number=4).location is None
    assert Issue(file_path="a.py", line_number=None).location is None


def test_issue_tolerates_nulls_and_unknown_values():
    issue = Issue.model_validate({
        "file_path": "a.py",
        "line_number": "not-a-line",
        "severity": None,
        "category": "style",
        "message": None,
    })
    assert issue.location is None
    assert issue.severity == "unknown"
    assert issue.category == "style"
    assert issue.message == ""


def test_praise_location():
    assert Praise(file_path="b.py", line_number="7").location == ("b.py", 7)


def test_review_result_drops_non_object_items():
    result = ReviewResult.model_validate({
        "summary": {"total_issues": 2},
        "review": {
            "issues": [None, "oops", {"file_path": "a.py", "line_number": 1, "message": "x"}],
            "praises": {"not": "a list"},
        },
    })
    assert [issue.location for issue in result.issues] == [("a.py", 1)]
    assert result.praises == []


def test_issue_coerces_scalar_text_fields():
    issue = Issue.model_validate({
        "file_path": "a.py",
        "line_number": 2,
        "severity": 3,
        "category": ["bug"],
        "message": 42,
        "suggested_fix": 1.5,
    })
    assert issue.message == "42"
    assert issue.severity == "3"
    assert issue.category == ""
    assert issue.suggested_fix == "1.5"


@pytest.mark.parametrize("line_number", [0, -4, 3.7, True, "0"])
def test_non_positive_or_fractional_lines_have_no_location(line_number):
    assert Issue(file_path="a.py", line_number=line_number).location is None


def test_whole_float_line_is_accepted():
    assert Issue(file_path="a.py", line_number=12.0).location == ("a.py", 12)


def test_negative_counts_clamp_to_zero():
    result = ReviewResult.model_validate({"summary": {"total_issues": -2, "critical": -1, "low": 3}})
    assert result.summary.total_issues == 0
    assert result.summary.critical == 0
    assert result.summary.low == 3
