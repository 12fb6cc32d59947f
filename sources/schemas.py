"""
sources/schemas.py

Typed row schemas for both relational domains.

Each model mirrors one source table: integer ids, Decimal money and
scores, dates, length-bounded strings and bool for BIT flags. Rows are
validated through these models on ingestion; extra columns are ignored.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class EntityRow(BaseModel):
    """Common configuration for every row schema."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )


# ---------------------------------------------------------------------------
# E-commerce
# ---------------------------------------------------------------------------


class CustomerRow(EntityRow):
    customer_id: int
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=100)
    registration_date: date | None = None
    city: str | None = Field(default=None, max_length=50)
    state: str | None = Field(default=None, max_length=50)
    country: str | None = Field(default=None, max_length=50)


class ProductRow(EntityRow):
    product_id: int
    product_name: str | None = Field(default=None, max_length=100)
    category: str | None = Field(default=None, max_length=50)
    subcategory: str | None = Field(default=None, max_length=50)
    price: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    cost: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    supplier_id: int | None = None


class OrderRow(EntityRow):
    order_id: int
    customer_id: int | None = None
    order_date: date | None = None
    total_amount: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    status: str | None = Field(default=None, max_length=20)
    shipping_cost: Decimal | None = Field(default=None, max_digits=8, decimal_places=2)


class OrderItemRow(EntityRow):
    order_item_id: int
    order_id: int | None = None
    product_id: int | None = None
    quantity: int | None = None
    unit_price: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)


# ---------------------------------------------------------------------------
# HR
# ---------------------------------------------------------------------------


class DepartmentRow(EntityRow):
    dept_id: int
    dept_name: str | None = Field(default=None, max_length=50)
    location: str | None = Field(default=None, max_length=50)


class EmployeeRow(EntityRow):
    employee_id: int
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=100)
    hire_date: date | None = None
    job_title: str | None = Field(default=None, max_length=100)
    dept_id: int | None = None
    salary: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    manager_id: int | None = None
    status: str | None = Field(default="Active", max_length=20)
    termination_date: date | None = None


class PerformanceReviewRow(EntityRow):
    review_id: int
    employee_id: int
    review_date: date
    reviewer_id: int
    performance_score: Decimal = Field(ge=1, le=5, max_digits=3, decimal_places=2)
    goals_met: bool
    promotion_ready: bool
    comments: str | None = None


class TrainingProgramRow(EntityRow):
    program_id: int
    program_name: str | None = Field(default=None, max_length=100)
    duration_hours: int | None = None
    cost_per_employee: Decimal | None = Field(default=None, max_digits=8, decimal_places=2)


class EmployeeTrainingRow(EntityRow):
    training_id: int
    employee_id: int
    program_id: int
    completion_date: date
    score: Decimal = Field(max_digits=5, decimal_places=2)
    passed: bool


ENTITY_SCHEMAS: dict[str, type[EntityRow]] = {
    "customers": CustomerRow,
    "products": ProductRow,
    "orders": OrderRow,
    "order_items": OrderItemRow,
    "departments": DepartmentRow,
    "employees": EmployeeRow,
    "performance_reviews": PerformanceReviewRow,
    "training_programs": TrainingProgramRow,
    "employee_training": EmployeeTrainingRow,
}


def schema_fields(entity: str) -> frozenset[str]:
    """Declared column names for *entity*; empty when unknown."""
    model = ENTITY_SCHEMAS.get(entity)
    if model is None:
        return frozenset()
    return frozenset(model.model_fields)
