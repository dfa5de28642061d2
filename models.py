# ================================================
# FILE: models.py
# ================================================
import math
from typing import List, Optional, Dict, Any, Literal
from datetime import date
from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_finite_number(value: Any) -> Optional[float]:
    """
    Converts a loosely typed numeric input (number or numeric string) to a float.

    Returns:
        The float value, or None when the input is missing, boolean, non-numeric, NaN or infinite.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


TASK_PRIORITIES = ("low", "medium", "high")


def _text_or_empty(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# --- Source records (persisted client-side) ---

class Expense(BaseModel):
    """A single logged expense, as stored by the expenses page."""
    id: str = Field("", description="Opaque unique identifier", examples=["3f1c2a"])
    date: str = Field("", description="Calendar date in ISO form (yyyy-mm-dd)", examples=["2024-01-05"])
    category: str = Field("", description="Free-text category label", examples=["Groceries"])
    description: str = Field("", description="Free-text merchant or memo", examples=["Costco"])
    amount: float = Field(0.0, description="Non-negative amount. Malformed values are read as 0.", examples=[42.5])

    @field_validator("id", "date", "category", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text_or_empty(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float:
        number = coerce_finite_number(value)
        return number if number is not None else 0.0


class Task(BaseModel):
    """A task from the task manager. `notes` may carry a free-text 'blocked:' marker."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field("", description="Opaque unique identifier")
    title: str = Field("", description="Task title")
    notes: str = Field("", description="Free-text notes")
    priority: Literal['low', 'medium', 'high'] = Field("low", description="Task priority. Missing or unknown values are read as low.")
    due: Optional[str] = Field(None, description="Optional due date (yyyy-mm-dd)", examples=["2024-03-01"])
    tags: List[str] = Field(default_factory=list, description="Ordered tags; the first one is used as the plan bucket")
    completed: bool = Field(False, description="Whether the task is done")
    created_at: Optional[float] = Field(None, alias="createdAt", description="Creation timestamp (epoch milliseconds)")
    completed_at: Optional[float] = Field(None, alias="completedAt", description="Completion timestamp (epoch milliseconds)")

    @field_validator("id", "title", "notes", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text_or_empty(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _coerce_priority(cls, value: Any) -> str:
        return value if value in TASK_PRIORITIES else "low"

    @field_validator("due", mode="before")
    @classmethod
    def _empty_due_is_none(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return _text_or_empty(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value: Any) -> Any:
        return [] if value is None else value


# --- Day planner output ---

class PlannedBlock(BaseModel):
    """One scheduled interval of the day plan. Derived on every call, never persisted."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    from_: str = Field(..., alias="from", description="Start clock time, HH:MM (24h)", examples=["09:30"])
    to: str = Field(..., description="End clock time, HH:MM (24h)", examples=["10:20"])
    estimate_min: int = Field(..., alias="estimateMin", description="Block length in minutes")
    blocked: Optional[bool] = Field(None, description="Set only when the task notes carry a blocked marker")


class PlanTasksResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plan: List[PlannedBlock]
    nudges: List[str]
    tone: str
    plan_text: str = Field(..., alias="planText")
    buckets: Dict[str, List[str]] = Field(..., description="Scheduled titles grouped by the task's first tag")
    blocked: List[str] = Field(..., description="Titles of scheduled tasks carrying a blocked marker")


# --- Expense advisor output ---

class ExpenseAdviceEnvelope(BaseModel):
    """A weekly spending cap suggestion for one category."""
    model_config = ConfigDict(populate_by_name=True)

    category: str
    weekly_cap: int = Field(..., alias="weeklyCap")
    target_cut_pct: int = Field(..., alias="targetCutPct")
    currency: str


class CategoryTotal(BaseModel):
    category: str
    amount: float


class MonthTotal(BaseModel):
    month: str = Field(..., description="yyyy-mm")
    total: float


class ExpenseAdviceStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: float
    top_categories: List[CategoryTotal] = Field(..., alias="topCategories", description="At most three, largest first")
    months: List[MonthTotal] = Field(..., description="Chronological monthly totals")


class ExpenseAdviceResult(BaseModel):
    suggestions: List[str] = Field(..., description="Deduplicated, capped advice lines")
    envelopes: List[ExpenseAdviceEnvelope]
    stats: ExpenseAdviceStats
    narrative: str


# --- Mesh endpoint request payloads ---

class MeshRequest(BaseModel):
    """Envelope accepted by the single mesh endpoint."""
    type: str = Field(..., description="Request type", examples=["expense.advise", "tasks.plan", "expense.add", "tasks.streak"])
    payload: Optional[Dict[str, Any]] = Field(None, description="Type-specific payload")


class ExpenseAdvicePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[Expense] = Field(default_factory=list)
    currency: Optional[str] = Field(None, description="ISO 4217 currency code", examples=["CAD"])
    max_suggestions: Optional[float] = Field(None, alias="maxSuggestions", description="Clamped to [3, 10]")
    seed: Optional[float] = Field(None, description="Seed for reproducible phrasing")

    @field_validator("items", mode="before")
    @classmethod
    def _items_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("max_suggestions", "seed", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> Optional[float]:
        return coerce_finite_number(value)


class TaskPlanPayload(BaseModel):
    tasks: List[Task] = Field(default_factory=list)
    seed: Optional[float] = Field(None, description="Seed for reproducible ordering and phrasing. 0 means unseeded.")

    @field_validator("tasks", mode="before")
    @classmethod
    def _tasks_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("seed", mode="before")
    @classmethod
    def _coerce_seed(cls, value: Any) -> Optional[float]:
        return coerce_finite_number(value)


class StreakUpdate(BaseModel):
    """Current streak state plus the day a task was completed."""
    model_config = ConfigDict(populate_by_name=True)

    streak: int = Field(0, ge=0, description="Consecutive days with at least one completed task")
    last_completion_date: Optional[date] = Field(None, alias="lastCompletionDate")
    today: Optional[date] = Field(None, description="Completion day; defaults to the server's current date")

    @field_validator("streak", mode="before")
    @classmethod
    def _coerce_streak(cls, value: Any) -> int:
        number = coerce_finite_number(value)
        return max(0, int(number)) if number is not None else 0


class StreakResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    streak: int
    last_completion_date: Optional[date] = Field(None, alias="lastCompletionDate")


class ExpenseAddAck(BaseModel):
    ok: bool = True
