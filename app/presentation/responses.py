from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel

from app.domain.models.aggregate import CategoryAggregate, OperationResult


class CategoryAggregateResponse(BaseModel):
    category: str
    amount: float
    percentage: float
    icon: str = ""
    icon_background_color: str = ""
    progress_color: str = ""

    @staticmethod
    def from_domain(a: CategoryAggregate) -> "CategoryAggregateResponse":
        return CategoryAggregateResponse(
            category=a.category,
            amount=a.amount,
            percentage=a.percentage,
            icon=a.icon,
            icon_background_color=a.icon_background_color,
            progress_color=a.progress_color,
        )


def unwrap(result: OperationResult, not_found: str = "") -> Any:
    """Return the result's data, or raise the matching HTTP error."""
    if not result.success:
        code = 404 if not_found and result.message == not_found else 400
        raise HTTPException(status_code=code, detail=result.message)
    return result.data
