from __future__ import annotations

from typing import Optional

from ..core.exceptions import ConflictError
from ..database.crud_repository import MySQLTableRepository
from ..database.mysql_base import db_cursor, fetchone
from .repository import ClassRepository


class MySQLClassRepository(MySQLTableRepository, ClassRepository):
    table = "classes"
    id_column = "class_id"
    # current_students is derived; it is only written by recompute_occupancy
    columns = ("class_name", "course_id", "teacher_id", "start_date", "end_date", "schedule", "room", "status")
    alias = "c"
    select_sql = """
        SELECT c.*, co.course_name, t.full_name AS teacher_name
        FROM classes c
        LEFT JOIN courses co ON co.course_id = c.course_id
        LEFT JOIN teachers t ON t.teacher_id = c.teacher_id
    """
    order_by = "c.class_id DESC"
    search_columns = ("c.class_name", "co.course_name", "t.full_name")
    search_order_by = "c.class_name ASC"

    entity = "class"
    invalid_reference_message = "Invalid course or teacher ID"
    referenced_message = "Cannot delete class: it still has sessions or tests"

    def _before_delete(self, cur, record_id: int) -> None:
        if self.count_where(cur, "enrollments", "class_id", record_id) > 0:
            raise ConflictError("Cannot delete class: Students are enrolled in this class")

    def recompute_occupancy(self, class_id: int) -> Optional[int]:
        with self._errors("updating student count"), db_cursor(self._db) as (_, cur):
            cur.execute(
                """
                UPDATE classes
                SET current_students = (
                    SELECT COUNT(*) FROM enrollments
                    WHERE enrollments.class_id=%s AND enrollments.status='ACTIVE'
                )
                WHERE class_id=%s
                """,
                (int(class_id), int(class_id)),
            )
            cur.execute("SELECT current_students FROM classes WHERE class_id=%s", (int(class_id),))
            r = fetchone(cur)
            return int(r["current_students"]) if r else None
