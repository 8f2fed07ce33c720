"""Swap quote models.

Quotes come from an external aggregator client. Raw amounts are integers
in the token's smallest unit; numeric strings (as aggregators send them)
are coerced on validation.
"""

from pydantic import BaseModel, ConfigDict, Field


class RoutePlan(BaseModel):
    """One leg of a split route."""

    model_config = ConfigDict(frozen=True)

    label: str
    percent: float = Field(ge=0, le=100)


class Quote(BaseModel):
    """Normalized swap quote."""

    model_config = ConfigDict(frozen=True)

    input_mint: str
    output_mint: str
    in_amount: int = Field(ge=0)
    out_amount: int = Field(ge=0)
    other_amount_threshold: int | None = None
    swap_mode: str = "ExactIn"
    slippage_bps: int = Field(ge=0)
    price_impact_pct: float  # Fraction, 0.01 = 1%
    route_plan: list[RoutePlan] = Field(default_factory=list)

    def input_amount(self, decimals: int) -> float:
        """Input amount in human units."""
        return self.in_amount / 10**decimals

    def output_amount(self, decimals: int) -> float:
        """Output amount in human units."""
        return self.out_amount / 10**decimals

    @property
    def price_impact_percent(self) -> float:
        return self.price_impact_pct * 100

    @property
    def route_count(self) -> int:
        return len(self.route_plan)

    def rate(self, input_decimals: int, output_decimals: int) -> float:
        """Output tokens received per input token (0 for an empty input)."""
        input_amount = self.input_amount(input_decimals)
        if input_amount == 0:
            return 0.0
        return self.output_amount(output_decimals) / input_amount

    def unit_cost(self, input_decimals: int, output_decimals: int) -> float:
        """Input tokens paid per output token (0 for an empty output)."""
        output_amount = self.output_amount(output_decimals)
        if output_amount == 0:
            return 0.0
        return self.input_amount(input_decimals) / output_amount
