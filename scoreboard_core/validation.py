"""
Input validation schemas using Pydantic v2
Validates all command types before they reach the contest core
"""

import logging
import re
from typing import Optional, Self, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .types import CommandType

logger = logging.getLogger(__name__)


class ScoringConfig:
    """ICPC scoring rules shared by the ranking engine and the validators"""

    PENALTY_PER_WRONG_ATTEMPT = 20
    ACCEPTED = "Accepted"
    STATUSES = (
        "Accepted",
        "Wrong_Answer",
        "Runtime_Error",
        "Time_Limit_Exceed",
    )
    # Query filters use this token to match anything
    WILDCARD = "ALL"
    # Problem ids are single letters A..Z
    MAX_PROBLEMS = 26


COMMAND_TYPES = set(get_args(CommandType))

_PROBLEM_RE = re.compile(r"^[A-Z]$")

# ==================== VALIDATOR FUNCTIONS ====================


class ValidatedCmd(BaseModel):
    """Command model with per-type field requirements"""

    type: str = Field(..., min_length=1, max_length=32, description="Command type")

    # ADDTEAM / SUBMIT / QUERY_*
    team: Optional[str] = Field(
        None, min_length=1, description="Team name"
    )

    # START
    duration: Optional[int] = Field(None, ge=0, description="Contest length in minutes")
    problemCount: Optional[int] = Field(
        None,
        ge=1,
        le=ScoringConfig.MAX_PROBLEMS,
        description="Number of problems (1-26)",
    )

    # SUBMIT
    problem: Optional[str] = Field(None, description="Problem letter")
    status: Optional[str] = Field(None, description="Judge verdict")
    time: Optional[int] = Field(None, ge=0, description="Submission minute")

    # QUERY_SUBMISSION
    problemFilter: str = Field(ScoringConfig.WILDCARD, description="Problem letter or ALL")
    statusFilter: str = Field(ScoringConfig.WILDCARD, description="Verdict or ALL")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Validate command type is one of allowed types"""
        v = v.strip().upper()
        if v not in COMMAND_TYPES:
            raise ValueError(f"type must be one of {sorted(COMMAND_TYPES)}, got {v}")
        return v

    @field_validator("team")
    @classmethod
    def validate_team_name(cls, v: Optional[str]) -> Optional[str]:
        """Team names are single whitespace-free tokens"""
        if v is None:
            return v
        v = InputSanitizer.sanitize_string(v, max_length=None)
        if len(v) == 0:
            raise ValueError("team name cannot be empty")
        if any(ch.isspace() for ch in v):
            raise ValueError("team name cannot contain whitespace")
        return v

    @field_validator("problem")
    @classmethod
    def validate_problem(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not _PROBLEM_RE.match(v):
            raise ValueError(f"problem must be a single letter A-Z, got {v!r}")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if v not in ScoringConfig.STATUSES:
            raise ValueError(f"status must be one of {ScoringConfig.STATUSES}, got {v}")
        return v

    @field_validator("problemFilter")
    @classmethod
    def validate_problem_filter(cls, v: str) -> str:
        v = v.strip()
        if v != ScoringConfig.WILDCARD and not _PROBLEM_RE.match(v):
            raise ValueError(f"problemFilter must be a letter or ALL, got {v!r}")
        return v

    @field_validator("statusFilter")
    @classmethod
    def validate_status_filter(cls, v: str) -> str:
        v = v.strip()
        if v != ScoringConfig.WILDCARD and v not in ScoringConfig.STATUSES:
            raise ValueError(f"statusFilter must be a verdict or ALL, got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_command_fields(self) -> Self:
        """Validate required fields based on command type"""
        cmd_type = self.type

        if cmd_type in {"ADDTEAM", "QUERY_RANKING", "QUERY_SUBMISSION"}:
            if self.team is None:
                raise ValueError(f"{cmd_type} requires team")

        elif cmd_type == "START":
            if self.duration is None:
                raise ValueError("START requires duration")
            if self.problemCount is None:
                raise ValueError("START requires problemCount")

        elif cmd_type == "SUBMIT":
            for field_name in ("team", "problem", "status", "time"):
                if getattr(self, field_name) is None:
                    raise ValueError(f"SUBMIT requires {field_name}")

        return self

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class InputSanitizer:
    """Utility class for input sanitization"""

    @staticmethod
    def sanitize_string(value: str, max_length: int | None = None) -> str:
        """Sanitize string input"""
        if not isinstance(value, str):
            value = str(value)

        # Strip whitespace
        value = value.strip()

        # Limit length
        if max_length is not None:
            value = value[:max_length]

        # Remove null bytes
        value = value.replace("\0", "")

        return value

    @staticmethod
    def validate_and_sanitize_cmd(cmd_dict: dict) -> ValidatedCmd:
        """
        Validate and sanitize command dictionary

        Returns:
            ValidatedCmd: Validated command object

        Raises:
            ValueError: If validation fails
        """
        try:
            return ValidatedCmd(**cmd_dict)
        except Exception as e:
            logger.warning(f"Command validation failed: {e}")
            raise ValueError(f"Invalid command: {str(e)}")


# ==================== EXPORT ====================

__all__ = [
    "COMMAND_TYPES",
    "ScoringConfig",
    "ValidatedCmd",
    "InputSanitizer",
]
