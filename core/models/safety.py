"""Safety check configuration and result models."""

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    """Severity of a single safety check outcome."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class SafetyConfig(BaseModel):
    """Risk thresholds applied to every quote."""

    model_config = ConfigDict(frozen=True)

    max_price_impact_percent: float = Field(default=2.0, ge=0)  # 2.0 = 2%
    max_slippage_bps: int = Field(default=100, ge=0)  # 100 = 1%
    min_route_count: int = Field(default=1, ge=0)
    min_output_ratio: float = Field(default=0.90, ge=0)  # 0.90 = 90% of input
    warn_price_impact_percent: float = Field(default=1.0, ge=0)
    warn_slippage_bps: int = Field(default=50, ge=0)

    @model_validator(mode="after")
    def _validate(self):
        if self.warn_price_impact_percent > self.max_price_impact_percent:
            raise ValueError(
                "warn_price_impact_percent must not exceed max_price_impact_percent"
            )
        if self.warn_slippage_bps > self.max_slippage_bps:
            raise ValueError("warn_slippage_bps must not exceed max_slippage_bps")
        return self


class SafetyCheck(BaseModel):
    """Outcome of one check."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    reason: str
    severity: Severity

    @property
    def is_blocking(self) -> bool:
        """Only failed error-severity checks block a trade."""
        return self.severity == Severity.ERROR and not self.passed


class SafetyChecks(BaseModel):
    """The five named checks run against a quote."""

    model_config = ConfigDict(frozen=True)

    price_impact: SafetyCheck
    slippage: SafetyCheck
    route_count: SafetyCheck
    output_amount: SafetyCheck
    liquidity_depth: SafetyCheck


class SafetyCheckResult(BaseModel):
    """Aggregated safety verdict for a quote."""

    model_config = ConfigDict(frozen=True)

    safe: bool
    checks: SafetyChecks

    def iter_checks(self) -> Iterator[tuple[str, SafetyCheck]]:
        """Yield (name, check) pairs in a fixed order."""
        for name in SafetyChecks.model_fields:
            yield name, getattr(self.checks, name)

    @property
    def warnings(self) -> list[str]:
        return [
            check.reason
            for _, check in self.iter_checks()
            if check.severity == Severity.WARNING
        ]
