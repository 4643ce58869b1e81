from __future__ import annotations

from typing import Any, Dict, List

from ..database.crud_repository import MySQLTableRepository
from ..database.mysql_base import db_cursor, fetchall


class MySQLPaymentRepository(MySQLTableRepository):
    table = "payments"
    id_column = "payment_id"
    columns = (
        "student_id",
        "enrollment_id",
        "amount",
        "payment_date",
        "payment_method",
        "transaction_id",
        "description",
        "status",
    )
    alias = "p"
    select_sql = """
        SELECT p.*, s.full_name AS student_name
        FROM payments p
        LEFT JOIN students s ON s.student_id = p.student_id
    """
    order_by = "p.payment_date DESC, p.created_date DESC"
    search_columns = ("s.full_name", "p.payment_method", "p.transaction_id")

    entity = "payment"
    invalid_reference_message = "Invalid student ID"

    def list_by_student(self, student_id: int) -> List[Dict[str, Any]]:
        return self.list_where("p.student_id", int(student_id))

    def summary(self) -> List[Dict[str, Any]]:
        """Completed-payment totals for every active student."""
        with self._errors("fetching payment summary"), db_cursor(self._db) as (_, cur):
            cur.execute(
                """
                SELECT
                    s.student_id,
                    s.full_name AS student_name,
                    COUNT(p.payment_id) AS total_payments,
                    COALESCE(SUM(p.amount), 0) AS total_amount,
                    MAX(p.payment_date) AS last_payment_date,
                    CASE WHEN COUNT(p.payment_id) > 0 THEN 'ACTIVE' ELSE 'INACTIVE' END AS payment_status
                FROM students s
                LEFT JOIN payments p ON p.student_id = s.student_id AND p.status = 'COMPLETED'
                WHERE s.status = 'ACTIVE'
                GROUP BY s.student_id, s.full_name
                ORDER BY total_amount DESC, s.full_name
                """
            )
            return fetchall(cur)

    def student_options(self) -> List[Dict[str, Any]]:
        with self._errors("fetching students"), db_cursor(self._db) as (_, cur):
            cur.execute("SELECT student_id, full_name FROM students WHERE status='ACTIVE' ORDER BY full_name")
            return fetchall(cur)

    def enrollment_options(self) -> List[Dict[str, Any]]:
        with self._errors("fetching enrollments"), db_cursor(self._db) as (_, cur):
            cur.execute(
                """
                SELECT e.enrollment_id, e.student_id, s.full_name AS student_name,
                       e.class_id, c.class_name, e.fee_paid, e.payment_status
                FROM enrollments e
                JOIN students s ON s.student_id = e.student_id
                JOIN classes c ON c.class_id = e.class_id
                WHERE e.status = 'ACTIVE'
                ORDER BY s.full_name, c.class_name
                """
            )
            return fetchall(cur)
