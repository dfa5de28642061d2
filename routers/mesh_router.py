from typing import Any, Dict
import traceback

from fastapi import APIRouter, Depends, HTTPException, status, Body
from fastapi.exceptions import RequestValidationError

import models
import services
from agent_service import get_agent_client

router = APIRouter(
    prefix="/api",
    tags=["Mesh"]
)

@router.post("/mesh",
             response_model=Dict[str, Any],
             summary="Advise on expenses, plan the day, or record a completion",
             description="Single entry point used by the web client. `type` selects the operation: "
                         "`expense.advise`, `tasks.plan`, `expense.add` or `tasks.streak`. "
                         "Advice and plans are delegated to the external agent service when one is configured, "
                         "and produced locally whenever it is unavailable or answers with anything unusable.")
async def mesh_route(
    mesh_request: models.MeshRequest = Body(..., description="Request type and its payload."),
    agent_client: Any = Depends(get_agent_client)
):
    """
    Endpoint for all mesh requests.
    - **type**: one of `expense.advise`, `tasks.plan`, `expense.add`, `tasks.streak`.
    - **payload**: the type-specific payload.
    """
    try:
        return await services.dispatch_mesh_request(mesh_request, agent_client)
    except HTTPException as http_exc:
        raise http_exc
    except RequestValidationError as validation_exc:
        raise validation_exc
    except Exception as e:
        print(f"Unexpected error in POST /api/mesh route for type {mesh_request.type!r}: {e}")
        traceback.print_exc()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An unexpected server error occurred: {str(e)}"
        )
