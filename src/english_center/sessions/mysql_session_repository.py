from __future__ import annotations

from typing import Any, Dict, List

from ..database.crud_repository import MySQLTableRepository


class MySQLSessionRepository(MySQLTableRepository):
    table = "sessions"
    id_column = "session_id"
    columns = ("class_id", "session_date", "session_time", "duration_minutes", "topic", "description", "status")
    alias = "ses"
    select_sql = """
        SELECT ses.*, c.class_name
        FROM sessions ses
        LEFT JOIN classes c ON c.class_id = ses.class_id
    """
    order_by = "ses.session_date DESC, ses.session_time DESC"
    search_columns = ("ses.topic", "c.class_name")

    entity = "session"
    invalid_reference_message = "Invalid class ID"

    def list_by_class(self, class_id: int) -> List[Dict[str, Any]]:
        return self.list_where("ses.class_id", int(class_id), order_by="ses.session_date ASC, ses.session_time ASC")
