from __future__ import annotations

from ..core.exceptions import ConflictError
from ..database.crud_repository import MySQLTableRepository


class MySQLTeacherRepository(MySQLTableRepository):
    table = "teachers"
    id_column = "teacher_id"
    columns = ("full_name", "email", "phone", "qualification", "experience_years", "salary", "hire_date", "status")
    select_sql = "SELECT * FROM teachers"
    order_by = "teacher_id DESC"
    search_columns = ("full_name", "email", "qualification")
    search_order_by = "full_name ASC"

    entity = "teacher"
    duplicate_message = "Email already exists"
    referenced_message = "Cannot delete teacher: Teacher is assigned to classes"

    def _before_delete(self, cur, record_id: int) -> None:
        if self.count_where(cur, "classes", "teacher_id", record_id) > 0:
            raise ConflictError(self.referenced_message)
