"""
Shared pytest fixtures: small e-commerce and HR datasets.

Rows are plain dicts in the shape the row source receives them; the
in-memory source validates and types them.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Callable

import pytest

from app.config import ReportSettings
from reports.assembler import ReportAssembler
from sources.memory import InMemoryRowSource

AS_OF = date(2024, 1, 1)


@pytest.fixture()
def settings() -> ReportSettings:
    return ReportSettings(as_of=AS_OF)


@pytest.fixture()
def make_assembler(settings: ReportSettings) -> Callable[..., ReportAssembler]:
    def build(tables: dict[str, list[dict[str, Any]]], **overrides: Any) -> ReportAssembler:
        return ReportAssembler(InMemoryRowSource(tables), settings=replace(settings, **overrides))

    return build


@pytest.fixture()
def hr_tables() -> dict[str, list[dict[str, Any]]]:
    return {
        "departments": [
            {"dept_id": 1, "dept_name": "Engineering", "location": "Berlin"},
            {"dept_id": 2, "dept_name": "Sales", "location": "Paris"},
            {"dept_id": 3, "dept_name": "Legal", "location": "Rome"},
        ],
        "employees": [
            {
                "employee_id": 1, "first_name": "Alice", "last_name": "Smith",
                "hire_date": "2015-01-01", "job_title": "Engineering Manager",
                "dept_id": 1, "salary": "150000.00", "manager_id": None, "status": "Active",
            },
            {
                "employee_id": 2, "first_name": "Bob", "last_name": "Jones",
                "hire_date": "2020-06-01", "job_title": "Engineer",
                "dept_id": 1, "salary": "100000.00", "manager_id": 1, "status": "Active",
            },
            {
                "employee_id": 3, "first_name": "Carol", "last_name": "White",
                "hire_date": "2021-03-15", "job_title": "Engineer",
                "dept_id": 1, "salary": "110000.00", "manager_id": 1, "status": "Active",
            },
            {
                "employee_id": 4, "first_name": "Dan", "last_name": "Brown",
                "hire_date": "2022-01-10", "job_title": "Engineer",
                "dept_id": 1, "salary": "90000.00", "manager_id": 1,
                "status": "Terminated", "termination_date": "2023-01-10",
            },
            {
                "employee_id": 5, "first_name": "Eve", "last_name": "Black",
                "hire_date": "2023-05-01", "job_title": "Sales Rep",
                "dept_id": 2, "salary": "60000.00", "manager_id": None, "status": "Active",
            },
        ],
        "performance_reviews": [
            {"review_id": 1, "employee_id": 2, "review_date": "2022-12-01", "reviewer_id": 1,
             "performance_score": "3.80", "goals_met": 1, "promotion_ready": 0},
            {"review_id": 2, "employee_id": 2, "review_date": "2023-06-01", "reviewer_id": 1,
             "performance_score": "4.20", "goals_met": 1, "promotion_ready": 1},
            {"review_id": 3, "employee_id": 3, "review_date": "2023-06-01", "reviewer_id": 1,
             "performance_score": "4.60", "goals_met": 1, "promotion_ready": 1},
            {"review_id": 4, "employee_id": 4, "review_date": "2022-12-01", "reviewer_id": 1,
             "performance_score": "3.00", "goals_met": 0, "promotion_ready": 0},
            {"review_id": 5, "employee_id": 1, "review_date": "2023-06-01", "reviewer_id": 5,
             "performance_score": "4.00", "goals_met": 1, "promotion_ready": 0},
            {"review_id": 6, "employee_id": 3, "review_date": "2022-12-01", "reviewer_id": 1,
             "performance_score": "4.80", "goals_met": 1, "promotion_ready": 0},
        ],
        "training_programs": [
            {"program_id": 1, "program_name": "Python", "duration_hours": 16, "cost_per_employee": "500.00"},
            {"program_id": 2, "program_name": "Leadership", "duration_hours": 8, "cost_per_employee": "1000.00"},
            {"program_id": 3, "program_name": "Unused", "duration_hours": 4, "cost_per_employee": "200.00"},
        ],
        "employee_training": [
            {"training_id": 1, "employee_id": 2, "program_id": 1, "completion_date": "2023-02-01",
             "score": "90.00", "passed": 1},
            {"training_id": 2, "employee_id": 3, "program_id": 1, "completion_date": "2023-02-01",
             "score": "70.00", "passed": 0},
            {"training_id": 3, "employee_id": 1, "program_id": 2, "completion_date": "2023-03-01",
             "score": "55.00", "passed": 0},
            {"training_id": 4, "employee_id": 3, "program_id": 2, "completion_date": "2023-03-01",
             "score": "60.00", "passed": 0},
        ],
    }
