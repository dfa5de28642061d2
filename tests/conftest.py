from datetime import datetime

import pytest

from models import Expense, Task


@pytest.fixture
def morning():
    return datetime(2024, 3, 10, 9, 0)


@pytest.fixture
def grocery_expenses():
    return [
        Expense(id="e1", amount=100, category="Groceries", date="2024-01-05"),
        Expense(id="e2", amount=50, category="Groceries", date="2024-02-05"),
    ]


@pytest.fixture
def mixed_expenses():
    return [
        Expense(id="1", date="2024-01-03", category="Groceries", description="Costco", amount=80),
        Expense(id="2", date="2024-01-10", category="Groceries", description="costco ", amount=40),
        Expense(id="3", date="2024-02-02", category="Groceries", description="Costco", amount=35),
        Expense(id="4", date="2024-02-04", category="Entertainment", description="Netflix", amount=18),
        Expense(id="5", date="2024-02-09", category="Health", description="Gym membership", amount=60),
        Expense(id="6", date="2024-02-11", category="Other", description="Car insurance", amount=120),
        Expense(id="7", date="2024-02-15", category="Transport", description="Uber", amount=25),
    ]


@pytest.fixture
def task_list():
    return [
        Task(id="t1", title="Write report", priority="high", tags=["deep-work"]),
        Task(id="t2", title="Reply to email", priority="low", tags=["comms"]),
        Task(id="t3", title="Pay rent", priority="medium", due="2000-01-01"),
        Task(id="t4", title="Old chore", priority="high", completed=True),
        Task(id="t5", title="Ship feature", priority="medium", notes="Blocked: waiting on API keys", tags=["deep-work"]),
    ]
