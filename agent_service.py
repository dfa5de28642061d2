from typing import Optional, Any
import httpx

import config

agent_client: Optional[httpx.AsyncClient] = None

def get_agent_client() -> Any:
    """
    Dependency to get the HTTP client for the external agent service.
    Initializes the client if it hasn't been already.
    The return type is hinted as 'Any' to keep FastAPI from trying to build a schema for it.

    Returns:
        Any: An httpx.AsyncClient bound to AGENT_SERVICE_URL, or None when no agent service
        is configured (requests are then answered locally).
    """
    global agent_client
    if agent_client is None:
        if not config.AGENT_SERVICE_URL:
            return None
        agent_client = httpx.AsyncClient(
            base_url=config.AGENT_SERVICE_URL,
            headers={"User-Agent": f"{config.APP_TITLE}/{config.APP_VERSION}"},
            timeout=config.AGENT_SERVICE_TIMEOUT,
        )
        print(f"Agent service client created for {config.AGENT_SERVICE_URL}")
    return agent_client

def init_agent_client():
    """
    Initializes the agent service client. Can be called at application startup.
    """
    global agent_client
    if agent_client is None:
        get_agent_client()
    print("Agent service client initialization check complete.")

async def close_agent_client():
    """
    Closes the shared client, if one was created. Called at application shutdown.
    """
    global agent_client
    if agent_client is not None:
        await agent_client.aclose()
        agent_client = None
        print("Agent service client closed.")
