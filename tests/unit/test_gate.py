# tests/unit/test_gate.py
import pytest
from review_relay.models.config import GateState
from review_relay.review.gate import decide


@pytest.mark.unit
def test_no_critical_issues_passes():
    decision = decide(0)
    assert decision.state == GateState.PASS
    assert decision.description == "No critical severity issues found"


@pytest.mark.unit
@pytest.mark.parametrize("count", [1, 2, 17, 1000])
def test_any_critical_issue_fails(count):
    decision = decide(count)
    assert decision.state == GateState.FAIL
    assert str(count) in decision.description
