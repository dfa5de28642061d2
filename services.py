from typing import Dict, Any, Optional, Type, TypeVar, Callable, Awaitable
from datetime import date
import traceback

from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

import config
import models
from core.advisor import advise_expenses
from core.planner import plan_tasks
from core.streak import update_streak

PayloadModel = TypeVar("PayloadModel", bound=BaseModel)


def _dump(result: BaseModel) -> Dict[str, Any]:
    """Serializes a result with the camelCase field names the web client expects."""
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


def _parse_payload(model_cls: Type[PayloadModel], payload: Optional[Dict[str, Any]], request_type: str) -> PayloadModel:
    """
    Validates a type-specific payload.

    Raises:
        RequestValidationError: If the payload does not fit the model (reported as 422).
    """
    try:
        return model_cls.model_validate(payload or {})
    except ValidationError as e:
        print(f"Invalid payload for {request_type}: {e}")
        raise RequestValidationError(e.errors())


async def forward_to_agent(
    agent_client: Any,
    request_type: str,
    payload: Optional[Dict[str, Any]],
    result_model: Type[PayloadModel]
) -> Optional[PayloadModel]:
    """
    Sends the request envelope to the external agent service, once, with no retry.

    Args:
        agent_client: httpx.AsyncClient for the agent service, or None when none is configured.
        request_type: The mesh request type being forwarded.
        payload: The payload exactly as the caller sent it.
        result_model: Model the agent's JSON answer must validate against.

    Returns:
        The validated agent result, or None on any failure (network error, non-2xx status,
        malformed JSON, unexpected shape) so the caller can answer locally.
    """
    if agent_client is None:
        return None
    try:
        print(f"Forwarding {request_type} to agent service at {config.AGENT_SERVICE_PATH}...")
        response = await agent_client.post(
            config.AGENT_SERVICE_PATH,
            json={"type": request_type, "payload": payload or {}},
        )
        response.raise_for_status()
        result = result_model.model_validate(response.json())
        print(f"Agent service answered {request_type}.")
        return result
    except Exception as e:
        print(f"Agent service failed for {request_type}, falling back to local engine: {e}")
        traceback.print_exc()
        return None


async def advise_expenses_service(payload: Optional[Dict[str, Any]], agent_client: Any) -> Dict[str, Any]:
    """
    Expense advice for the `expense.advise` request type.
    Tries the agent service first, then the local advisor.
    """
    advice_request = _parse_payload(models.ExpenseAdvicePayload, payload, "expense.advise")
    result = await forward_to_agent(agent_client, "expense.advise", payload, models.ExpenseAdviceResult)
    if result is None:
        result = advise_expenses(
            items=advice_request.items,
            currency=advice_request.currency,
            max_suggestions=advice_request.max_suggestions,
            seed=advice_request.seed,
        )
    return _dump(result)


async def plan_tasks_service(payload: Optional[Dict[str, Any]], agent_client: Any) -> Dict[str, Any]:
    """
    Day plan for the `tasks.plan` request type.
    Tries the agent service first, then the local planner.
    """
    plan_request = _parse_payload(models.TaskPlanPayload, payload, "tasks.plan")
    result = await forward_to_agent(agent_client, "tasks.plan", payload, models.PlanTasksResult)
    if result is None:
        result = plan_tasks(tasks=plan_request.tasks, seed=plan_request.seed)
    return _dump(result)


async def add_expense_service(payload: Optional[Dict[str, Any]], agent_client: Any) -> Dict[str, Any]:
    """Acknowledges a new expense. The browser's own storage stays the source of truth."""
    expense = _parse_payload(models.Expense, payload, "expense.add")
    print(f"Expense acknowledged: id={expense.id or 'N/A'}, category={expense.category or 'N/A'}, amount={expense.amount:.2f}")
    return _dump(models.ExpenseAddAck())


async def update_streak_service(payload: Optional[Dict[str, Any]], agent_client: Any) -> Dict[str, Any]:
    """Applies one task completion to the client's streak counter (`tasks.streak`)."""
    streak_request = _parse_payload(models.StreakUpdate, payload, "tasks.streak")
    streak, last_completion_date = update_streak(
        streak=streak_request.streak,
        last_completion_date=streak_request.last_completion_date,
        today=streak_request.today or date.today(),
    )
    return _dump(models.StreakResult(streak=streak, last_completion_date=last_completion_date))


MESH_HANDLERS: Dict[str, Callable[[Optional[Dict[str, Any]], Any], Awaitable[Dict[str, Any]]]] = {
    "expense.advise": advise_expenses_service,
    "tasks.plan": plan_tasks_service,
    "expense.add": add_expense_service,
    "tasks.streak": update_streak_service,
}


async def dispatch_mesh_request(mesh_request: models.MeshRequest, agent_client: Any) -> Dict[str, Any]:
    """
    Routes a mesh request to its handler.

    Raises:
        HTTPException: 400 if the request type is not recognized.
    """
    handler = MESH_HANDLERS.get(mesh_request.type)
    if handler is None:
        print(f"Unknown mesh request type: {mesh_request.type!r}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown type")
    return await handler(mesh_request.payload, agent_client)
