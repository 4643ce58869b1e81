from __future__ import annotations

from ..database.crud_repository import MySQLTableRepository


class MySQLStudentRepository(MySQLTableRepository):
    table = "students"
    id_column = "student_id"
    columns = ("full_name", "email", "phone", "address", "date_of_birth", "gender", "registration_date", "status")
    select_sql = "SELECT * FROM students"
    order_by = "student_id DESC"
    search_columns = ("full_name", "email", "phone")
    search_order_by = "full_name ASC"

    entity = "student"
    duplicate_message = "Email already exists"
    referenced_message = "Cannot delete student: the student has enrollments, attendance, scores or payments"
