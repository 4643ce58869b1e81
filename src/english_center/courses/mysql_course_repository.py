from __future__ import annotations

from ..core.exceptions import ConflictError
from ..database.crud_repository import MySQLTableRepository


class MySQLCourseRepository(MySQLTableRepository):
    table = "courses"
    id_column = "course_id"
    columns = ("course_name", "description", "level", "duration_weeks", "fee", "max_students", "status")
    select_sql = "SELECT * FROM courses"
    order_by = "course_id DESC"
    search_columns = ("course_name", "description", "level")
    search_order_by = "course_name ASC"

    entity = "course"
    referenced_message = "Cannot delete course: It is being used in active classes"

    def _before_delete(self, cur, record_id: int) -> None:
        if self.count_where(cur, "classes", "course_id", record_id) > 0:
            raise ConflictError(self.referenced_message)
