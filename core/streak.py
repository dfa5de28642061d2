from datetime import date
from typing import Optional, Tuple


def update_streak(streak: int, last_completion_date: Optional[date], today: date) -> Tuple[int, date]:
    """
    Updates the daily completion streak when a task is marked done on `today`.

    Returns:
        The new (streak, last_completion_date) pair. A second completion on the same
        day changes nothing; completing the day after the last one extends the streak;
        any longer gap restarts it at 1.
    """
    if last_completion_date == today:
        return streak, today
    if last_completion_date is None:
        return 1, today

    gap_days = (today - last_completion_date).days
    if gap_days == 1:
        return streak + 1, today
    if gap_days > 1:
        return 1, today
    return streak, today
