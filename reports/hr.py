"""
reports/hr.py

HR analytics reports.

Employee status is compared case-insensitively ("Active", "Terminated").
Elapsed-day metrics are measured against ``ReportContext.as_of``.

Employees that fan out over several reviews are counted once per
employee; score averages run over every review of the counted employees.
"""

from __future__ import annotations

from typing import Any

from aggregation.aggregates import (
    avg,
    count,
    count_where,
    max_,
    min_,
    stddev,
    sum_,
)
from aggregation.grouping import Partition, group, index_by
from aggregation.ladders import (
    PERFORMANCE_CATEGORY,
    TENURE_BRACKET,
    TURNOVER_RISK,
    classify_trend,
)
from aggregation.metrics import format_pct, percentage, round_half_up, safe_ratio
from aggregation.ordering import asc, desc, sort_rows
from aggregation.record import Record
from aggregation.window import Lag, latest, over
from reports.base import (
    BaseReport,
    ReportContext,
    Tables,
    days_between,
    full_name,
    lookup_join,
    outer_union,
    status_is,
)

ACTIVE = "active"
TERMINATED = "terminated"

_EMPLOYEE_FIELDS = (
    "employee_id",
    "first_name",
    "last_name",
    "hire_date",
    "job_title",
    "dept_id",
    "salary",
    "manager_id",
    "status",
    "termination_date",
)
_DEPARTMENT_FIELDS = ("dept_id", "dept_name")
_REVIEW_FIELDS = (
    "review_id",
    "employee_id",
    "review_date",
    "performance_score",
    "goals_met",
    "promotion_ready",
)
_PROGRAM_FIELDS = ("program_id", "program_name", "cost_per_employee")
_TRAINING_FIELDS = ("training_id", "employee_id", "program_id", "score", "passed")


def _is_terminated(employee: Record) -> bool:
    return status_is(employee, TERMINATED)


def _active(employees: tuple[Record, ...]) -> list[Record]:
    return [employee for employee in employees if status_is(employee, ACTIVE)]


def _with_departments(employees: Any, tables: Tables, context: ReportContext) -> list[Record]:
    departments = index_by(tables["departments"], "dept_id", context.diagnostics)
    return lookup_join(employees, departments, on="dept_id")


def _reviews_by_employee(tables: Tables, context: ReportContext) -> dict[Any, Partition]:
    return {
        employee_id: partition
        for (employee_id,), partition in group(
            tables["performance_reviews"], "employee_id", context.diagnostics
        ).items()
    }


def _reviews_of(employees: Any, reviews: dict[Any, Partition]) -> list[Record]:
    collected: list[Record] = []
    for employee in employees:
        partition = reviews.get(employee["employee_id"])
        if partition is not None:
            collected.extend(partition.rows)
    return collected


def _avg_or_none(rows: list[Record], value: str) -> Any:
    return avg(rows, value) if rows else None


# ---------------------------------------------------------------------------
# Turnover
# ---------------------------------------------------------------------------


class EmployeeTurnoverReport(BaseReport):
    """
    Headcount, terminations and turnover risk for every department.

    ``turnover_rate_pct`` is the numeric rate (one decimal) and
    ``turnover_rate`` its display string; ordering and risk use the
    unrounded rate.
    """

    name = "employee_turnover"
    title = "Employee Turnover Analysis"
    columns = (
        "dept_name",
        "total_employees",
        "terminated_employees",
        "turnover_rate_pct",
        "turnover_rate",
        "risk_level",
    )
    requires = {"departments": _DEPARTMENT_FIELDS, "employees": _EMPLOYEE_FIELDS}

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        departments = tables["departments"]
        by_dept = group(tables["employees"], "dept_id", context.diagnostics)
        candidate_keys = [(dept["dept_id"],) for dept in departments]

        stats = []
        for dept, (_, partition) in zip(departments, outer_union(candidate_keys, by_dept)):
            total = count(partition, "employee_id") if partition else 0
            terminated = count_where(partition, _is_terminated) if partition else 0
            rate = percentage(terminated, total)
            stats.append(
                Record(
                    dept_id=dept["dept_id"],
                    dept_name=dept["dept_name"],
                    total_employees=total,
                    terminated_employees=terminated,
                    rate=rate,
                    risk_level=TURNOVER_RISK.classify(rate if rate is not None else 0),
                )
            )

        ordered = sort_rows(stats, [desc("rate"), asc("dept_name"), asc("dept_id")])
        return [
            row.extend(
                turnover_rate_pct=round_half_up(row["rate"], 1),
                turnover_rate=format_pct(row["rate"], 1) or "0.0%",
            )
            for row in ordered
        ]


# ---------------------------------------------------------------------------
# Salary
# ---------------------------------------------------------------------------


def _salary_stats(partition: Partition) -> dict[str, Any]:
    return {
        "employee_count": count(partition, "employee_id"),
        "min_salary": min_(partition, "salary"),
        "max_salary": max_(partition, "salary"),
        "avg_salary": avg(partition, "salary"),
        "salary_std_dev": stddev(partition, "salary"),
    }


def _present_salary(row: Record) -> Record:
    return row.extend(
        avg_salary=round_half_up(row["avg_salary"]),
        salary_std_dev=round_half_up(row["salary_std_dev"]),
    )


class SalaryByJobTitleReport(BaseReport):
    """Salary distribution of active employees per department and job title."""

    name = "salary_by_job_title"
    title = "Salary Analysis by Job Title"
    columns = (
        "dept_name",
        "job_title",
        "employee_count",
        "min_salary",
        "max_salary",
        "avg_salary",
        "salary_std_dev",
    )
    requires = {"departments": _DEPARTMENT_FIELDS, "employees": _EMPLOYEE_FIELDS}

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        staff = _with_departments(_active(tables["employees"]), tables, context)
        rows = [
            Record(dept_name=dept_name, job_title=job_title, **_salary_stats(partition))
            for (dept_name, job_title), partition in group(
                staff, ("dept_name", "job_title"), context.diagnostics
            ).items()
        ]
        ordered = sort_rows(rows, [asc("dept_name"), desc("avg_salary"), asc("job_title")])
        return [_present_salary(row) for row in ordered]


class SalaryByDepartmentReport(BaseReport):
    """Salary distribution of active employees per department."""

    name = "salary_by_department"
    title = "Salary Analysis by Department"
    columns = (
        "dept_name",
        "employee_count",
        "min_salary",
        "max_salary",
        "avg_salary",
        "salary_std_dev",
    )
    requires = SalaryByJobTitleReport.requires

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        staff = _with_departments(_active(tables["employees"]), tables, context)
        rows = [
            Record(dept_name=dept_name, **_salary_stats(partition))
            for (dept_name,), partition in group(staff, "dept_name", context.diagnostics).items()
        ]
        ordered = sort_rows(rows, [asc("dept_name"), desc("avg_salary")])
        return [_present_salary(row) for row in ordered]


# ---------------------------------------------------------------------------
# Performance
# ---------------------------------------------------------------------------


class PerformanceTrendReport(BaseReport):
    """Latest review of each active employee compared with the one before it."""

    name = "performance_trend"
    title = "Performance Review Analysis"
    columns = (
        "employee_name",
        "job_title",
        "dept_name",
        "current_score",
        "previous_score",
        "performance_trend",
        "goals_met",
        "promotion_ready",
    )
    requires = {
        "departments": _DEPARTMENT_FIELDS,
        "employees": _EMPLOYEE_FIELDS,
        "performance_reviews": _REVIEW_FIELDS,
    }

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        sequenced = over(
            tables["performance_reviews"],
            partition_by="employee_id",
            order_by="review_date",
            columns={"previous_score": Lag("performance_score")},
            diagnostics=context.diagnostics,
        )
        history = group(sequenced, "employee_id", context.diagnostics)

        rows = []
        for employee in _with_departments(_active(tables["employees"]), tables, context):
            partition = history.get((employee["employee_id"],))
            review = latest(partition, "review_date") if partition else None
            if review is None:
                continue
            rows.append(
                Record(
                    employee_id=employee["employee_id"],
                    employee_name=full_name(employee["first_name"], employee["last_name"]),
                    job_title=employee["job_title"],
                    dept_name=employee["dept_name"],
                    current_score=review["performance_score"],
                    previous_score=review["previous_score"],
                    performance_trend=classify_trend(
                        review["performance_score"], review["previous_score"]
                    ),
                    goals_met=review["goals_met"],
                    promotion_ready=review["promotion_ready"],
                )
            )
        return sort_rows(rows, [desc("current_score"), asc("employee_id")])


class TrainingEffectivenessReport(BaseReport):
    """Participation, pass rate and cost efficiency per training program."""

    name = "training_effectiveness"
    title = "Training Effectiveness Analysis"
    columns = (
        "program_name",
        "participants",
        "avg_score",
        "passed_count",
        "pass_rate",
        "cost_per_employee",
        "total_investment",
        "cost_per_successful_completion",
    )
    requires = {"training_programs": _PROGRAM_FIELDS, "employee_training": _TRAINING_FIELDS}

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        by_program = group(tables["employee_training"], "program_id", context.diagnostics)

        rows = []
        for program in tables["training_programs"]:
            partition = by_program.get((program["program_id"],))
            if partition is None:
                continue
            participants = count(partition, "training_id")
            passed = count_where(partition, lambda row: bool(row["passed"]))
            cost = program["cost_per_employee"]
            investment = cost * participants if cost is not None else None
            rows.append(
                Record(
                    program_id=program["program_id"],
                    program_name=program["program_name"],
                    participants=participants,
                    avg_score=avg(partition, "score"),
                    passed_count=passed,
                    pass_rate=percentage(passed, participants),
                    cost_per_employee=cost,
                    total_investment=investment,
                    cost_per_successful_completion=safe_ratio(investment, passed),
                )
            )

        ordered = sort_rows(rows, [desc("pass_rate"), asc("program_name"), asc("program_id")])
        return [
            row.extend(
                avg_score=round_half_up(row["avg_score"]),
                pass_rate=round_half_up(row["pass_rate"]),
                cost_per_successful_completion=round_half_up(row["cost_per_successful_completion"]),
            )
            for row in ordered
        ]


class ManagerEffectivenessReport(BaseReport):
    """Span of control, team performance and team turnover per manager."""

    name = "manager_effectiveness"
    title = "Manager Effectiveness"
    columns = (
        "manager_id",
        "manager_name",
        "job_title",
        "team_size",
        "avg_team_performance",
        "team_turnover_count",
        "team_turnover_rate",
        "total_team_payroll",
    )
    requires = {"employees": _EMPLOYEE_FIELDS, "performance_reviews": _REVIEW_FIELDS}

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        employees = tables["employees"]
        managers = index_by(employees, "employee_id", context.diagnostics)
        teams = group(
            [employee for employee in employees if employee["manager_id"] is not None],
            "manager_id",
            context.diagnostics,
        )
        reviews = _reviews_by_employee(tables, context)
        min_team_size = context.settings.manager_min_team_size

        rows = []
        for (manager_id,), team in teams.items():
            manager = managers.get(manager_id)
            if manager is None or len(team) < min_team_size:
                continue
            turnover = count_where(team, _is_terminated)
            rows.append(
                Record(
                    manager_id=manager_id,
                    manager_name=full_name(manager["first_name"], manager["last_name"]),
                    job_title=manager["job_title"],
                    team_size=len(team),
                    avg_team_performance=_avg_or_none(
                        _reviews_of(team, reviews), "performance_score"
                    ),
                    team_turnover_count=turnover,
                    team_turnover_rate=percentage(turnover, len(team)),
                    total_team_payroll=sum_(team, "salary"),
                )
            )

        ordered = sort_rows(rows, [desc("avg_team_performance"), asc("manager_id")])
        return [
            row.extend(
                avg_team_performance=round_half_up(row["avg_team_performance"]),
                team_turnover_rate=round_half_up(row["team_turnover_rate"]),
            )
            for row in ordered
        ]


# ---------------------------------------------------------------------------
# Tenure and hiring
# ---------------------------------------------------------------------------


class TenureAnalysisReport(BaseReport):
    """Headcount, pay, performance and turnover per tenure bracket."""

    name = "tenure_analysis"
    title = "Tenure Analysis"
    columns = (
        "tenure_bracket",
        "employee_count",
        "avg_salary",
        "avg_performance",
        "terminated_count",
        "turnover_rate",
    )
    requires = {"employees": _EMPLOYEE_FIELDS, "performance_reviews": _REVIEW_FIELDS}

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        def bracket(employee: Record) -> str:
            end = employee.require("termination_date") or context.as_of
            return TENURE_BRACKET.classify(days_between(employee.require("hire_date"), end))

        reviews = _reviews_by_employee(tables, context)
        rows = []
        for (tenure_bracket,), partition in group(
            tables["employees"], bracket, context.diagnostics
        ).items():
            terminated = count_where(partition, _is_terminated)
            rows.append(
                Record(
                    tenure_bracket=tenure_bracket,
                    employee_count=count(partition),
                    avg_salary=round_half_up(avg(partition, "salary")),
                    avg_performance=round_half_up(
                        _avg_or_none(_reviews_of(partition, reviews), "performance_score")
                    ),
                    terminated_count=terminated,
                    turnover_rate=round_half_up(percentage(terminated, count(partition))),
                )
            )
        return sort_rows(rows, [asc(lambda row: TENURE_BRACKET.ordinal(row["tenure_bracket"]))])


def _hire_year(employee: Record) -> int | None:
    hire_date = employee.require("hire_date")
    return hire_date.year if hire_date else None


def _hire_month(employee: Record) -> int | None:
    hire_date = employee.require("hire_date")
    return hire_date.month if hire_date else None


class _HiringReport(BaseReport):
    """New hires and average starting salary per hiring period."""

    requires = {"departments": _DEPARTMENT_FIELDS, "employees": _EMPLOYEE_FIELDS}
    key_columns: tuple[str, ...] = ()
    order: tuple = ()

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        staff = [
            employee.extend(hire_year=_hire_year(employee), hire_month=_hire_month(employee))
            for employee in _with_departments(tables["employees"], tables, context)
        ]
        rows = [
            Record(
                dict(zip(self.key_columns, key)),
                new_hires=count(partition, "employee_id"),
                avg_starting_salary=avg(partition, "salary"),
            )
            for key, partition in group(staff, self.key_columns, context.diagnostics).items()
        ]
        return [
            row.extend(avg_starting_salary=round_half_up(row["avg_starting_salary"]))
            for row in sort_rows(rows, list(self.order))
        ]


class HiringByYearReport(_HiringReport):
    name = "hiring_by_year"
    title = "Hiring Trends by Year"
    columns = ("hire_year", "new_hires", "avg_starting_salary")
    key_columns = ("hire_year",)
    order = (desc("hire_year"),)


class HiringByYearDepartmentReport(_HiringReport):
    name = "hiring_by_year_department"
    title = "Hiring Trends by Year and Department"
    columns = ("hire_year", "new_hires", "dept_name", "avg_starting_salary")
    key_columns = ("hire_year", "dept_name")
    order = (desc("hire_year"), asc("dept_name"))


class HiringByMonthDepartmentReport(_HiringReport):
    name = "hiring_by_month_department"
    title = "Hiring Trends by Month and Department"
    columns = ("hire_year", "hire_month", "new_hires", "dept_name", "avg_starting_salary")
    key_columns = ("hire_year", "hire_month", "dept_name")
    order = (desc("hire_year"), desc("hire_month"), asc("dept_name"))


# ---------------------------------------------------------------------------
# High performers
# ---------------------------------------------------------------------------


class HighPerformersReport(BaseReport):
    """
    Active employees classified by their latest performance score.

    Employees without reviews stay in the report with NULL score fields and
    fall into the default category.
    """

    name = "high_performers"
    title = "High Performer Identification"
    columns = (
        "employee_id",
        "employee_name",
        "job_title",
        "dept_name",
        "hire_date",
        "days_tenure",
        "performance_score",
        "promotion_ready",
        "training_programs_completed",
        "performance_category",
    )
    requires = {
        "departments": _DEPARTMENT_FIELDS,
        "employees": _EMPLOYEE_FIELDS,
        "performance_reviews": _REVIEW_FIELDS,
        "employee_training": _TRAINING_FIELDS,
    }

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        reviews = _reviews_by_employee(tables, context)
        completed = group(
            [row for row in tables["employee_training"] if row["passed"]],
            "employee_id",
            context.diagnostics,
        )

        rows = []
        for employee in _with_departments(_active(tables["employees"]), tables, context):
            employee_id = employee["employee_id"]
            partition = reviews.get(employee_id)
            review = latest(partition, "review_date") if partition else None
            score = review["performance_score"] if review else None
            trainings = completed.get((employee_id,))
            rows.append(
                Record(
                    employee_id=employee_id,
                    employee_name=full_name(employee["first_name"], employee["last_name"]),
                    job_title=employee["job_title"],
                    dept_name=employee["dept_name"],
                    hire_date=employee["hire_date"],
                    days_tenure=days_between(employee["hire_date"], context.as_of),
                    performance_score=score,
                    promotion_ready=review["promotion_ready"] if review else None,
                    training_programs_completed=count(trainings) if trainings else 0,
                    performance_category=PERFORMANCE_CATEGORY.classify(score),
                )
            )
        return sort_rows(rows, [desc("performance_score"), asc("employee_id")])


HR_REPORTS: tuple[BaseReport, ...] = (
    EmployeeTurnoverReport(),
    SalaryByJobTitleReport(),
    SalaryByDepartmentReport(),
    PerformanceTrendReport(),
    TrainingEffectivenessReport(),
    ManagerEffectivenessReport(),
    TenureAnalysisReport(),
    HiringByYearReport(),
    HiringByYearDepartmentReport(),
    HiringByMonthDepartmentReport(),
    HighPerformersReport(),
)
