from dataclasses import dataclass
from review_relay.models.config import GateState


@dataclass(frozen=True)
class GateDecision:
    state: GateState
    description: str


def decide(critical_count: int) -> GateDecision:
    """Fail the gate when any critical issue was found."""
    if critical_count > 0:
        return GateDecision(
            state=GateState.FAIL,
            description=f"Found {critical_count} critical severity issues that must be addressed",
        )
    return GateDecision(state=GateState.PASS, description="No critical severity issues found")
