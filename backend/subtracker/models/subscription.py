from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Integer, String, Uuid

from subtracker.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Subscription(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (CheckConstraint("price > 0", name="ck_subscriptions_price_positive"),)

    id = Column(Uuid, primary_key=True, default=uuid4)
    service_name = Column(String, nullable=False, index=True)
    price = Column(Integer, nullable=False)
    user_id = Column(Uuid, nullable=False, index=True)
    # Month granularity: always the 1st of the month
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
