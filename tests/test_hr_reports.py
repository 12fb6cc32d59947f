"""
tests/test_hr_reports.py

End-to-end tests for the HR reports over the shared ``hr_tables`` fixture.

Coverage
--------
- Turnover: zero-filled departments, rate display, risk ladder, ordering
- Salary distributions for active employees only
- Performance trend from the latest two reviews
- Training effectiveness with NULL cost per pass
- Manager effectiveness and the minimum team size setting
- Tenure brackets using termination date or the as-of date
- Hiring rollups and the high performer left join
"""

from __future__ import annotations

from decimal import Decimal

import pytest


@pytest.fixture()
def run(make_assembler, hr_tables):
    def execute(name: str, **overrides):
        return make_assembler(hr_tables, **overrides).run(name)

    return execute


class TestTurnover:
    def test_every_department_listed_in_rate_order(self, run) -> None:
        result = run("employee_turnover")
        assert result.column("dept_name") == ["Engineering", "Sales", "Legal"]
        assert result.column("total_employees") == [4, 1, 0]
        assert result.column("terminated_employees") == [1, 0, 0]

    def test_rate_and_risk(self, run) -> None:
        result = run("employee_turnover")
        assert result.column("turnover_rate_pct") == [Decimal("25.0"), Decimal("0.0"), None]
        assert result.column("turnover_rate") == ["25.0%", "0.0%", "0.0%"]
        assert result.column("risk_level") == ["High Risk", "Low Risk", "Low Risk"]

    def test_status_match_is_case_insensitive(self, make_assembler, hr_tables) -> None:
        hr_tables["employees"][3]["status"] = "TERMINATED"
        result = make_assembler(hr_tables).run("employee_turnover")
        assert result.column("terminated_employees")[0] == 1


class TestSalary:
    def test_by_job_title(self, run) -> None:
        rows = [tuple(row.values()) for row in run("salary_by_job_title").rows]
        assert rows[0][:3] == ("Engineering", "Engineering Manager", 1)
        assert rows[0][5:] == (Decimal("150000.00"), None)
        assert rows[1][:3] == ("Engineering", "Engineer", 2)
        assert rows[1][5:] == (Decimal("105000.00"), Decimal("7071.07"))
        assert rows[2][:3] == ("Sales", "Sales Rep", 1)

    def test_terminated_employees_excluded(self, run) -> None:
        engineer = run("salary_by_job_title").rows[1]
        assert engineer["min_salary"] == Decimal("100000.00")
        assert engineer["max_salary"] == Decimal("110000.00")

    def test_by_department(self, run) -> None:
        result = run("salary_by_department")
        assert result.column("dept_name") == ["Engineering", "Sales"]
        assert result.column("employee_count") == [3, 1]
        assert result.column("avg_salary") == [Decimal("120000.00"), Decimal("60000.00")]


class TestPerformanceTrend:
    def test_latest_review_against_previous(self, run) -> None:
        result = run("performance_trend")
        assert result.column("employee_name") == ["Carol White", "Bob Jones", "Alice Smith"]
        assert result.column("current_score") == [Decimal("4.60"), Decimal("4.20"), Decimal("4.00")]
        assert result.column("previous_score") == [Decimal("4.80"), Decimal("3.80"), None]
        assert result.column("performance_trend") == ["Declining", "Improving", "First Review"]

    def test_employees_without_reviews_or_inactive_are_skipped(self, run) -> None:
        names = run("performance_trend").column("employee_name")
        assert "Eve Black" not in names
        assert "Dan Brown" not in names


class TestTraining:
    def test_program_metrics(self, run) -> None:
        result = run("training_effectiveness")
        assert result.column("program_name") == ["Python", "Leadership"]
        assert result.column("participants") == [2, 2]
        assert result.column("avg_score") == [Decimal("80.00"), Decimal("57.50")]
        assert result.column("passed_count") == [1, 0]
        assert result.column("pass_rate") == [Decimal("50.00"), Decimal("0.00")]
        assert result.column("total_investment") == [Decimal("1000.00"), Decimal("2000.00")]

    def test_cost_per_pass_is_null_without_passes(self, run) -> None:
        assert run("training_effectiveness").column("cost_per_successful_completion") == [
            Decimal("1000.00"),
            None,
        ]


class TestManagers:
    def test_team_metrics(self, run) -> None:
        result = run("manager_effectiveness")
        assert len(result) == 1
        row = result.rows[0]
        assert row["manager_name"] == "Alice Smith"
        assert row["team_size"] == 3
        assert row["avg_team_performance"] == Decimal("4.08")
        assert row["team_turnover_count"] == 1
        assert row["team_turnover_rate"] == Decimal("33.33")
        assert row["total_team_payroll"] == Decimal("300000.00")

    def test_min_team_size(self, run) -> None:
        assert len(run("manager_effectiveness", manager_min_team_size=4)) == 0


class TestTenure:
    def test_brackets_in_ladder_order(self, run) -> None:
        result = run("tenure_analysis")
        assert result.column("tenure_bracket") == ["< 1 year", "1-2 years", "2-5 years", "5-10 years"]
        assert result.column("employee_count") == [1, 1, 2, 1]
        assert result.column("avg_performance") == [None, Decimal("3.00"), Decimal("4.35"), Decimal("4.00")]

    def test_terminated_tenure_ends_at_termination(self, run) -> None:
        one_to_two = run("tenure_analysis").rows[1]
        assert one_to_two["terminated_count"] == 1
        assert one_to_two["turnover_rate"] == Decimal("100.00")
        assert one_to_two["avg_salary"] == Decimal("90000.00")


class TestHiring:
    def test_by_year_descending(self, run) -> None:
        result = run("hiring_by_year")
        assert result.column("hire_year") == [2023, 2022, 2021, 2020, 2015]
        assert result.column("new_hires") == [1, 1, 1, 1, 1]

    def test_by_month_and_department(self, run) -> None:
        first = run("hiring_by_month_department").rows[0]
        assert dict(first) == {
            "hire_year": 2023,
            "hire_month": 5,
            "new_hires": 1,
            "dept_name": "Sales",
            "avg_starting_salary": Decimal("60000.00"),
        }

    def test_by_year_and_department(self, run) -> None:
        result = run("hiring_by_year_department")
        assert result.column("dept_name")[0] == "Sales"
        assert len(result) == 5


class TestHighPerformers:
    def test_categories_and_order(self, run) -> None:
        result = run("high_performers")
        assert result.column("employee_name") == [
            "Carol White",
            "Bob Jones",
            "Alice Smith",
            "Eve Black",
        ]
        assert result.column("performance_category") == [
            "Star Performer",
            "High Performer",
            "High Performer",
            "Needs Training",
        ]

    def test_unreviewed_employee_kept_with_nulls(self, run) -> None:
        eve = run("high_performers").rows[-1]
        assert eve["performance_score"] is None
        assert eve["promotion_ready"] is None
        assert eve["days_tenure"] == 245
        assert eve["training_programs_completed"] == 0

    def test_training_count_only_passed(self, run) -> None:
        rows = {row["employee_id"]: row for row in run("high_performers").rows}
        assert rows[2]["training_programs_completed"] == 1
        assert rows[3]["training_programs_completed"] == 0
