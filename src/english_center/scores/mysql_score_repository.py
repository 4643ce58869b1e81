from __future__ import annotations

from typing import Any, Dict, List

from ..database.crud_repository import MySQLTableRepository
from ..database.mysql_base import db_cursor, fetchall, fetchone


class MySQLScoreRepository(MySQLTableRepository):
    table = "scores"
    id_column = "score_id"
    columns = (
        "student_id",
        "test_id",
        "listening_score",
        "speaking_score",
        "reading_score",
        "writing_score",
        "total_score",
        "grade",
        "notes",
    )
    alias = "sc"
    select_sql = """
        SELECT sc.*, s.full_name AS student_name, t.test_name, t.test_date, c.class_name
        FROM scores sc
        LEFT JOIN students s ON s.student_id = sc.student_id
        LEFT JOIN tests t ON t.test_id = sc.test_id
        LEFT JOIN classes c ON c.class_id = t.class_id
    """
    order_by = "sc.score_id DESC"
    search_columns = ("s.full_name", "t.test_name", "sc.grade")

    entity = "score"
    invalid_reference_message = "Invalid student or test ID"
    duplicate_message = "Score already exists for this student and test"

    def list_by_student(self, student_id: int) -> List[Dict[str, Any]]:
        return self.list_where("sc.student_id", int(student_id), order_by="t.test_date DESC")

    def list_by_test(self, test_id: int) -> List[Dict[str, Any]]:
        return self.list_where("sc.test_id", int(test_id), order_by="sc.total_score DESC")

    def totals_overview(self) -> Dict[str, Any]:
        with self._errors("fetching score statistics"), db_cursor(self._db) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total_scores,
                       AVG(total_score) AS average_score,
                       MAX(total_score) AS highest_score,
                       MIN(total_score) AS lowest_score
                FROM scores
                """
            )
            return fetchone(cur) or {}

    def grade_counts(self) -> Dict[str, int]:
        with self._errors("fetching score statistics"), db_cursor(self._db) as (_, cur):
            cur.execute("SELECT grade, COUNT(*) AS n FROM scores WHERE grade IS NOT NULL GROUP BY grade")
            return {r["grade"]: int(r["n"]) for r in fetchall(cur)}
