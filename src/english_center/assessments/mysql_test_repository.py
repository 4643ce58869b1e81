from __future__ import annotations

from ..core.exceptions import ConflictError
from ..database.crud_repository import MySQLTableRepository


class MySQLTestRepository(MySQLTableRepository):
    table = "tests"
    id_column = "test_id"
    columns = (
        "test_name",
        "class_id",
        "test_type_id",
        "test_date",
        "max_score",
        "duration_minutes",
        "description",
        "status",
    )
    alias = "t"
    select_sql = """
        SELECT t.*, c.class_name, tt.type_name AS test_type_name
        FROM tests t
        LEFT JOIN classes c ON c.class_id = t.class_id
        LEFT JOIN test_types tt ON tt.test_type_id = t.test_type_id
    """
    order_by = "t.test_date DESC"
    search_columns = ("t.test_name", "c.class_name")

    entity = "test"
    invalid_reference_message = "Invalid class or test type ID"
    referenced_message = "Cannot delete test: scores have been recorded for it"

    def _before_delete(self, cur, record_id: int) -> None:
        if self.count_where(cur, "scores", "test_id", record_id) > 0:
            raise ConflictError(self.referenced_message)
