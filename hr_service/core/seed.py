"""
Demo data seeding.

Clears the operator, employee and attendance tables and inserts a small data
set: two operators (password ``password123``), three employees and their
check-ins for the first two days of August 2025.

Usage::

    hr-service-seed
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import delete
from sqlalchemy.engine import Engine
from sqlmodel import Session

from hr_service.core.config import settings
from hr_service.core.database import create_db_and_tables, create_db_engine
from hr_service.core.logging import get_logger, setup_logging
from hr_service.core.security import hash_password
from hr_service.models import Attendance, Employee, Operator

logger = get_logger(__name__)

DEFAULT_PASSWORD = "password123"

OPERATORS = [
    ("admin@hr.com", "HR Admin"),
    ("manager@hr.com", "HR Manager"),
]

EMPLOYEES = [
    ("Rahim Uddin", 28, "Software Engineer", "2024-01-15", "1997-05-20", "75000.00"),
    ("Karim Hossain", 32, "Senior Developer", "2023-06-01", "1993-11-10", "95000.00"),
    ("Fatema Akter", 25, "Junior Developer", "2025-02-01", "2000-03-15", "45000.00"),
]

# (employee index, date, check-in time)
CHECK_INS = [
    (0, "2025-08-01", "09:30:00"),
    (0, "2025-08-02", "10:00:00"),
    (1, "2025-08-01", "09:00:00"),
    (1, "2025-08-02", "09:50:00"),
    (2, "2025-08-01", "09:45:00"),
    (2, "2025-08-02", "09:46:00"),
]


def seed_database(engine: Engine, password: str = DEFAULT_PASSWORD) -> None:
    password_hash = hash_password(password)

    with Session(engine) as session:
        session.exec(delete(Attendance))
        session.exec(delete(Employee))
        session.exec(delete(Operator))

        for email, name in OPERATORS:
            session.add(Operator(email=email, password_hash=password_hash, name=name))

        employees = [
            Employee(
                name=name,
                age=age,
                designation=designation,
                hiring_date=dt.date.fromisoformat(hiring_date),
                date_of_birth=dt.date.fromisoformat(date_of_birth),
                salary=Decimal(salary),
            )
            for name, age, designation, hiring_date, date_of_birth, salary in EMPLOYEES
        ]
        session.add_all(employees)
        session.flush()

        for index, date, check_in_time in CHECK_INS:
            session.add(
                Attendance(
                    employee_id=employees[index].id,
                    date=dt.date.fromisoformat(date),
                    check_in_time=dt.time.fromisoformat(check_in_time),
                )
            )
        session.commit()

    logger.info(
        f"Seeded {len(OPERATORS)} operator(s), {len(EMPLOYEES)} employee(s) "
        f"and {len(CHECK_INS)} attendance record(s)"
    )


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    engine = create_db_engine(settings)
    create_db_and_tables(engine)
    seed_database(engine)
    engine.dispose()


if __name__ == "__main__":
    main()
