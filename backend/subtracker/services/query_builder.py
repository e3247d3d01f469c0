"""Builders for the dynamic parts of subscription queries.

Summary queries accumulate optional predicates; partial updates accumulate
``(column, value)`` pairs. Both are rendered by SQLAlchemy with bound
parameters, so nothing here formats SQL text.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from subtracker.models.subscription import Subscription
from subtracker.schemas.subscription import SubscriptionSummaryRequest, UpdateSubscriptionRequest
from subtracker.services.parsing import month_end, parse_period


class PredicateBuilder:
    def __init__(self) -> None:
        self._predicates: list[ColumnElement] = []

    def add(self, predicate: ColumnElement) -> PredicateBuilder:
        self._predicates.append(predicate)
        return self

    def equals(self, column: Any, value: Any) -> PredicateBuilder:
        if value is not None:
            self._predicates.append(column == value)
        return self

    def build(self) -> list[ColumnElement]:
        return list(self._predicates)


class FieldSet:
    """Ordered column assignments for a single-row UPDATE."""

    def __init__(self) -> None:
        self._values: list[tuple[str, Any]] = []

    def set(self, column: str, value: Any) -> FieldSet:
        if column in self:
            raise ValueError(f"column assigned twice: {column}")
        self._values.append((column, value))
        return self

    def columns(self) -> list[str]:
        return [c for c, _ in self._values]

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __contains__(self, column: object) -> bool:
        return any(c == column for c, _ in self._values)


@dataclass(frozen=True)
class SummaryFilter:
    user_id: UUID | None = None
    service_name: str | None = None
    period_start: date | None = None
    # Inclusive: last calendar day of the end month
    period_end: date | None = None

    @classmethod
    def from_request(cls, req: SubscriptionSummaryRequest) -> SummaryFilter:
        period_start = None
        period_end = None
        if req.start_period is not None:
            period_start = parse_period(req.start_period, "start_period")
        if req.end_period is not None:
            period_end = month_end(parse_period(req.end_period, "end_period"))
        return cls(
            user_id=req.user_id,
            service_name=req.service_name,
            period_start=period_start,
            period_end=period_end,
        )

    @property
    def is_empty_range(self) -> bool:
        if self.period_start is None or self.period_end is None:
            return False
        return self.period_end < self.period_start


def build_summary_predicates(flt: SummaryFilter) -> list[ColumnElement]:
    """Interval overlap of ``[start_date, end_date or +inf)`` with the period, plus equality filters."""
    builder = PredicateBuilder()
    if flt.period_end is not None:
        builder.add(Subscription.start_date <= flt.period_end)
    if flt.period_start is not None:
        builder.add(or_(Subscription.end_date.is_(None), Subscription.end_date >= flt.period_start))
    builder.equals(Subscription.user_id, flt.user_id)
    builder.equals(Subscription.service_name, flt.service_name)
    return builder.build()


def build_update_fields(req: UpdateSubscriptionRequest, now: datetime) -> FieldSet:
    """Collect only the supplied fields. Every date is parsed before anything is written."""
    fields = FieldSet()
    if req.service_name is not None:
        fields.set("service_name", req.service_name)
    if req.price is not None:
        fields.set("price", req.price)
    if req.start_date is not None:
        fields.set("start_date", parse_period(req.start_date, "start_date"))
    if req.end_date is not None:
        if req.end_date == "":
            fields.set("end_date", None)
        else:
            fields.set("end_date", parse_period(req.end_date, "end_date"))
    fields.set("updated_at", now)
    return fields
