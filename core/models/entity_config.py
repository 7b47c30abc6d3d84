# ============================================================================
# ENTITY CONFIGURATION MODELS
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core model - Typed configuration of control entities
# PURPOSE: Resolve raw config key/values once, at construction time
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ScriptConfig, LoopConfig, PauseConfig, parse_duration
# DEPENDENCIES: pydantic
# ============================================================================
"""
Entity Configuration Models

Each control entity type exposes a fixed set of named, typed keys. The
raw key/values come from the entity's configuration store (a dict, or
a blueprint block) and are validated into one of these frozen models
when the entity is constructed. Execution reads the model, never the
raw dict.

Key names follow the blueprint vocabulary, so some contain dots
(``ignore.exceptions``, ``script.url``); they are mapped onto Python
field names with ``validation_alias``.
"""

import os
import re
from datetime import timedelta
from typing import Any, Dict, List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# DURATIONS
# ============================================================================

_DURATION_PATTERN = re.compile(
    r"^\s*(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>ms|s|m|h|d)?\s*$",
    re.IGNORECASE,
)

_UNIT_MILLISECONDS = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}


def parse_duration(value: Any) -> timedelta:
    """
    Parse a time span.

    Accepts a timedelta, a number of milliseconds, or a string such as
    "2000ms", "2s", "1.5m", "1h". A bare numeric string is milliseconds.

    Raises:
        ValueError: If the value cannot be read as a duration
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(milliseconds=value)
    if isinstance(value, str):
        match = _DURATION_PATTERN.match(value)
        if not match:
            raise ValueError(f"Invalid duration: {value!r}")
        unit = (match.group("unit") or "ms").lower()
        return timedelta(milliseconds=float(match.group("value")) * _UNIT_MILLISECONDS[unit])
    raise ValueError(f"Invalid duration: {value!r}")


# ============================================================================
# RUN SCRIPT / CONDITIONS
# ============================================================================

class ScriptConfig(BaseModel):
    """
    Configuration shared by RunScript, IfCondition and IfElseCondition.

    Only one of script or file should be given; when both are, the file
    takes precedence.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    language: str = Field(
        ...,
        min_length=1,
        description="Script engine identifier (e.g. 'python', 'jinja2')"
    )
    script: Optional[str] = Field(
        default=None,
        description="Inline script or expression"
    )
    file: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("file", "script.url"),
        description="Script location (path, file:// or http(s):// URL); overrides script"
    )
    invoke: Optional[str] = Field(
        default=None,
        description="Function to invoke after the script is evaluated"
    )
    args: List[str] = Field(
        default_factory=list,
        description="Raw function arguments; each may itself be an expression"
    )
    bindings: Dict[str, Any] = Field(
        default_factory=dict,
        description="Binding name -> entity or entity identifier"
    )

    @field_validator("file", mode="before")
    @classmethod
    def handle_path_input(cls, v):
        """Allow pathlib.Path (or any PathLike) as a location."""
        if isinstance(v, os.PathLike):
            return os.fspath(v)
        return v

    @field_validator("args", mode="before")
    @classmethod
    def stringify_args(cls, v):
        """Arguments are raw strings; non-strings are stringified."""
        if v is None:
            return []
        if isinstance(v, (str, bytes)):
            return [v]
        return [a if isinstance(a, str) else str(a) for a in v]

    @field_validator("bindings", mode="before")
    @classmethod
    def handle_missing_bindings(cls, v):
        return {} if v is None else v


# ============================================================================
# LOOP
# ============================================================================

class LoopConfig(BaseModel):
    """Configuration of a Loop entity."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    count: int = Field(
        ...,
        validation_alias=AliasChoices("count", "loop_count"),
        description="Number of passes over the children; <= 0 means none"
    )
    ignore_exceptions: bool = Field(
        default=False,
        validation_alias=AliasChoices("ignore.exceptions", "ignore_exceptions"),
        description="If false, a child failure aborts the loop"
    )


# ============================================================================
# PAUSE
# ============================================================================

class PauseConfig(BaseModel):
    """Configuration of a Pause entity."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    duration: timedelta = Field(..., description="How long start() blocks")

    @field_validator("duration", mode="before")
    @classmethod
    def parse_time_span(cls, v):
        return parse_duration(v)

    @field_validator("duration")
    @classmethod
    def must_be_positive(cls, v: timedelta) -> timedelta:
        if v <= timedelta(0):
            raise ValueError("duration must be positive")
        return v
