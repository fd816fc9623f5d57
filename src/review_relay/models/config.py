from enum import Enum
from pydantic import BaseModel, Field


class Category(str, Enum):
    BUG = "bug"
    SECURITY = "security"
    BEST_PRACTICE = "best_practice"
    DEPENDENCY = "dependency"
    PERFORMANCE = "performance"
    RBAC = "rbac"
    SYNTAX = "syntax"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RenderConfig(BaseModel):
    include_machine_block_inline: bool = True
    include_machine_block_in_summary: bool = False
    max_code_block_width: int = Field(default=100, gt=0)


class GateState(str, Enum):
    PASS = "pass"
    FAIL = "fail"
