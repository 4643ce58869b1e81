from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional, Sequence

from .assessments.mysql_test_repository import MySQLTestRepository
from .assessments.service import TestService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.service import ClassService
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.service import CourseService
from .database.connection import DatabaseClient, DBConfig
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollments.service import EnrollmentService
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.service import PaymentService
from .scores.grading import GradingScale
from .scores.mysql_score_repository import MySQLScoreRepository
from .scores.service import ScoreService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.service import SessionService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.service import TeacherService


@dataclass(frozen=True)
class Container:
    db: DatabaseClient

    attendance_service: AttendanceService
    enrollment_service: EnrollmentService
    class_service: ClassService
    student_service: StudentService
    teacher_service: TeacherService
    course_service: CourseService
    session_service: SessionService
    test_service: TestService
    score_service: ScoreService
    payment_service: PaymentService


def build_services(
    *,
    db,
    attendance_repo,
    enrollment_repo,
    class_repo,
    student_repo,
    teacher_repo,
    course_repo,
    session_repo,
    test_repo,
    score_repo,
    payment_repo,
    grading: Optional[GradingScale] = None,
    today: Callable[[], date] = date.today,
) -> Container:
    """Wire services over the given repositories (MySQL ones or test fakes)."""
    return Container(
        db=db,
        attendance_service=AttendanceService(attendance_repo),
        enrollment_service=EnrollmentService(enrollment_repo, class_repo, today=today),
        class_service=ClassService(class_repo, today=today),
        student_service=StudentService(student_repo, today=today),
        teacher_service=TeacherService(teacher_repo, today=today),
        course_service=CourseService(course_repo, today=today),
        session_service=SessionService(session_repo, attendance_repo, today=today),
        test_service=TestService(test_repo, today=today),
        score_service=ScoreService(score_repo, grading=grading, today=today),
        payment_service=PaymentService(payment_repo, today=today),
    )


def build_container(
    *,
    db_config: dict,
    grade_bands: Optional[Iterable[Sequence]] = None,
) -> Container:
    db = DatabaseClient(DBConfig.from_dict(db_config))
    return build_services(
        db=db,
        attendance_repo=MySQLAttendanceRepository(db),
        enrollment_repo=MySQLEnrollmentRepository(db),
        class_repo=MySQLClassRepository(db),
        student_repo=MySQLStudentRepository(db),
        teacher_repo=MySQLTeacherRepository(db),
        course_repo=MySQLCourseRepository(db),
        session_repo=MySQLSessionRepository(db),
        test_repo=MySQLTestRepository(db),
        score_repo=MySQLScoreRepository(db),
        payment_repo=MySQLPaymentRepository(db),
        grading=GradingScale(grade_bands),
    )
