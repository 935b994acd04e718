from typing import List

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, Numeric, String

from app.data.base import Base, engine
from app.domain.helpers.periods import as_utc
from app.domain.models.alert import AlertTier, BudgetAlert


class AlertLogORM(Base):
    __tablename__ = "alert_log"
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False)
    budget_amount = Column(Numeric(18, 4), nullable=False)
    current_spending = Column(Numeric(18, 4), nullable=False)
    overage = Column(Numeric(18, 4), nullable=False, default=0)
    percentage_used = Column(Float, nullable=False)
    has_exceeded = Column(Boolean, nullable=False, default=False)
    tier = Column(String, nullable=False)
    message = Column(String, default="")
    checked_at = Column(DateTime, nullable=False)


def create_alert_log_table():
    Base.metadata.create_all(bind=engine)


def alert_to_domain(row: AlertLogORM) -> BudgetAlert:
    return BudgetAlert(
        category=row.category,
        budget_amount=row.budget_amount,
        current_spending=row.current_spending,
        overage=row.overage,
        percentage_used=row.percentage_used,
        has_exceeded=row.has_exceeded,
        tier=AlertTier(row.tier),
        message=row.message or "",
        checked_at=as_utc(row.checked_at),
    )


def add_alerts(db, user_id: str, alerts: List[BudgetAlert]) -> int:
    for alert in alerts:
        db.add(
            AlertLogORM(
                user_id=user_id,
                category=alert.category,
                budget_amount=alert.budget_amount,
                current_spending=alert.current_spending,
                overage=alert.overage,
                percentage_used=alert.percentage_used,
                has_exceeded=alert.has_exceeded,
                tier=alert.tier.value,
                message=alert.message,
                # stored naive, always UTC
                checked_at=as_utc(alert.checked_at).replace(tzinfo=None),
            )
        )
    db.commit()
    return len(alerts)


def list_alerts(db, user_id: str, limit: int = 50) -> List[BudgetAlert]:
    rows = (
        db.query(AlertLogORM)
        .filter(AlertLogORM.user_id == user_id)
        .order_by(AlertLogORM.checked_at.desc(), AlertLogORM.id.desc())
        .limit(limit)
        .all()
    )
    return [alert_to_domain(r) for r in rows]
