"""
Day planner: scores incomplete tasks, orders them and lays them out as back-to-back
time blocks starting at the current clock time.
"""
import re
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from models import PlannedBlock, PlanTasksResult, Task
from core.phrases import DEFAULT_PLANNER_PHRASES, PlannerPhrases
from core.rng import EngineRandom, planner_random

MAX_BLOCKS = 10
BUFFER_MINUTES = 5
MINUTES_PER_DAY = 24 * 60
NUDGE_COUNT = 4
EXTRA_MINUTES = 5
EXTRA_MINUTES_PROBABILITY = 0.35
JITTER_RANGE = 5

OVERDUE_BONUS = 1000
DUE_TODAY_BONUS = 500
BLOCKED_PENALTY = 80
COMPLETED_PENALTY = 10000

PRIORITY_WEIGHTS = {"high": 100, "medium": 50, "low": 10}
BASE_DURATIONS = {"high": 50, "medium": 30, "low": 20}

# TODO: replace with a structured `blocked` field on Task once the task manager stores one.
BLOCKED_MARKER = re.compile(r"blocked\s*:", re.IGNORECASE)


def is_blocked(task: Task) -> bool:
    return bool(BLOCKED_MARKER.search(task.notes or ""))


def minutes_to_hhmm(total: int) -> str:
    """Minutes since midnight to zero-padded HH:MM, wrapping past midnight."""
    hours = (total // 60) % 24
    minutes = total % 60
    return f"{hours:02d}:{minutes:02d}"


def score_task(task: Task, today: str, rng: EngineRandom) -> float:
    """
    Priority score, higher is scheduled earlier. Draws exactly one jitter value from `rng`.

    Args:
        task: The task to score.
        today: Current date as yyyy-mm-dd; due dates compare lexicographically against it.
        rng: Generator supplying the [0, 5) tie-breaking jitter.
    """
    due = task.due or ""
    overdue = bool(due) and due < today and not task.completed
    due_today = due == today and not task.completed
    jitter = rng.random() * JITTER_RANGE

    score = PRIORITY_WEIGHTS.get(task.priority, PRIORITY_WEIGHTS["low"]) + jitter
    if overdue:
        score += OVERDUE_BONUS
    if due_today:
        score += DUE_TODAY_BONUS
    if is_blocked(task):
        score -= BLOCKED_PENALTY
    if task.completed:
        score -= COMPLETED_PENALTY
    return score


def allocate_blocks(ordered: Sequence[Task], start_minute: int, rng: EngineRandom) -> List[PlannedBlock]:
    cursor = start_minute
    blocks: List[PlannedBlock] = []
    for task in ordered[:MAX_BLOCKS]:
        estimate = BASE_DURATIONS.get(task.priority, BASE_DURATIONS["low"])
        if rng.chance(EXTRA_MINUTES_PROBABILITY):
            estimate += EXTRA_MINUTES
        blocks.append(PlannedBlock(
            id=task.id,
            title=task.title,
            from_=minutes_to_hhmm(cursor),
            to=minutes_to_hhmm(cursor + estimate),
            estimate_min=estimate,
            blocked=True if is_blocked(task) else None,
        ))
        cursor += estimate + BUFFER_MINUTES
    return blocks


def bucket_by_tag(plan: Sequence[PlannedBlock], active: Sequence[Task], default_bucket: str) -> Dict[str, List[str]]:
    tasks_by_id = {}
    for task in active:
        tasks_by_id.setdefault(task.id, task)

    buckets: Dict[str, List[str]] = {}
    for block in plan:
        task = tasks_by_id.get(block.id)
        tag = (task.tags[0] if task and task.tags else "") or default_bucket
        buckets.setdefault(tag, []).append(block.title)
    return buckets


def render_plan_text(plan: Sequence[PlannedBlock], phrases: PlannerPhrases = DEFAULT_PLANNER_PHRASES) -> str:
    if not plan:
        return phrases.empty_plan_text
    return "\n".join(
        f"- [ ] {block.from_}–{block.to} — {block.title}{' (blocked)' if block.blocked else ''}"
        for block in plan
    )


def plan_tasks(
    tasks: Sequence[Task],
    seed: Optional[float] = None,
    now: Optional[datetime] = None,
    phrases: PlannerPhrases = DEFAULT_PLANNER_PHRASES
) -> PlanTasksResult:
    """
    Builds a day plan from the task list.

    Completed tasks never enter the plan. The remaining tasks are ordered by `score_task`
    and the first ten become blocks starting at `now`, each followed by a 5-minute buffer.

    Args:
        tasks: Snapshot of the user's tasks.
        seed: Non-zero seed for a reproducible plan; None or 0 is unseeded.
        now: Clock used for "today" and the first block's start. Defaults to local time.
        phrases: Nudge and tone pools.

    Returns:
        PlanTasksResult with blocks, four nudges, a tone line, a checklist rendering,
        titles bucketed by first tag and the titles of blocked tasks.
    """
    rng = planner_random(seed)
    now = now or datetime.now()
    today = now.date().isoformat()

    active = [task for task in tasks if not task.completed]
    scores = {id(task): score_task(task, today, rng) for task in active}
    ordered = sorted(active, key=lambda task: scores[id(task)], reverse=True)

    plan = allocate_blocks(ordered, now.hour * 60 + now.minute, rng)
    nudges = rng.shuffled(phrases.nudges)[:NUDGE_COUNT]
    tone = rng.choose(phrases.tones)

    return PlanTasksResult(
        plan=plan,
        nudges=nudges,
        tone=tone,
        plan_text=render_plan_text(plan, phrases),
        buckets=bucket_by_tag(plan, active, phrases.default_bucket),
        blocked=[block.title for block in plan if block.blocked],
    )
