"""Pydantic models for API request/response."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.model.stats import DarwinStats


class CheckoutInitRequest(BaseModel):
    """Request model for recording a checkout start.

    ``anonymousId`` is optional here so a missing id yields 400, not 422.
    """
    anonymousId: Optional[str] = Field(None, description="Site visitor's anonymous analytics id")


class MarkPurchaseRequest(BaseModel):
    anonymousId: Optional[str] = None
    secret: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True


class PurchaseCheckResponse(BaseModel):
    hasPurchased: bool


class InitiateCheckoutResponse(BaseModel):
    ok: bool


class AbandonedSweepResponse(BaseModel):
    success: bool
    abandoned: int = Field(..., description="Sessions newly detected as abandoned")
    message: str


class MemberCountResponse(BaseModel):
    count: int


class DarwinStatsResponse(BaseModel):
    """Response model for DARWIN statistics, serialized in camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    return_since_inception: Optional[float] = None
    annualized_return: Optional[float] = None
    track_record_years: Optional[float] = None
    maximum_drawdown: Optional[float] = None
    best_month: Optional[float] = None
    worst_month: Optional[float] = None
    number_of_trades: Optional[float] = None
    average_trade_duration: Optional[str] = None
    winning_trades_ratio: Optional[float] = None
    current_investors: Optional[float] = None
    aum: Optional[float] = None
    last_updated: str

    @classmethod
    def from_domain(cls, stats: DarwinStats) -> "DarwinStatsResponse":
        return cls(
            return_since_inception=stats.return_since_inception,
            annualized_return=stats.annualized_return,
            track_record_years=stats.track_record_years,
            maximum_drawdown=stats.maximum_drawdown,
            best_month=stats.best_month,
            worst_month=stats.worst_month,
            number_of_trades=stats.number_of_trades,
            average_trade_duration=stats.average_trade_duration,
            winning_trades_ratio=stats.winning_trades_ratio,
            current_investors=stats.current_investors,
            aum=stats.aum,
            last_updated=stats.last_updated,
        )
