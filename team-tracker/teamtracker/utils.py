import uuid
from datetime import date
from typing import Optional

from teamtracker.models import Task, TaskStatus


def format_currency(amount: int) -> str:
    return f"¥{amount:,}"


def format_number(num: float) -> str:
    return f"{num:,.0f}"


def generate_unique_id():
    return str(uuid.uuid4())


def new_task(
    title: str,
    member_id: str,
    start_date: date,
    end_date: Optional[date] = None,
    amount: int = 0,
    points: int = 0,
    notes: str = "",
) -> Task:
    """Build a fresh pending task; a missing end date makes it a one-day task."""
    return Task(
        id=generate_unique_id(),
        title=title.strip(),
        member_id=member_id,
        amount=int(amount),
        points=int(points),
        status=TaskStatus.PENDING,
        start_date=start_date,
        end_date=end_date or start_date,
        notes=notes.strip(),
    )


def error_message(error: object) -> str:
    if isinstance(error, Exception) and str(error):
        return str(error)
    if isinstance(error, str):
        return error
    return "Something went wrong."
