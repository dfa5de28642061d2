import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

AGENT_SERVICE_URL: str = os.getenv("AGENT_SERVICE_URL", "").strip()
AGENT_SERVICE_PATH: str = os.getenv("AGENT_SERVICE_PATH", "/api/v1/message:send")

_raw_timeout = os.getenv("AGENT_SERVICE_TIMEOUT", "").strip()
AGENT_SERVICE_TIMEOUT: Optional[float] = None
if _raw_timeout:
    try:
        AGENT_SERVICE_TIMEOUT = float(_raw_timeout)
    except ValueError:
        print(f"WARNING: AGENT_SERVICE_TIMEOUT '{_raw_timeout}' is not a number. No timeout will be applied.")

DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "CAD")
CURRENCY_LOCALE: str = os.getenv("CURRENCY_LOCALE", "en_US")

DEFAULT_MAX_SUGGESTIONS: int = 6
MIN_SUGGESTIONS: int = 3
MAX_SUGGESTIONS: int = 10

APP_VERSION = "0.3.0"
APP_TITLE = "Focus Mesh API"
APP_DESCRIPTION = "Expense advice and day planning for the focus/expenses/tasks companion app, with optional delegation to an external agent service."

if not AGENT_SERVICE_URL:
    print("Config loaded: AGENT_SERVICE_URL not set. Requests will be answered by the local engines.")
else:
    print(f"Config loaded: AGENT_SERVICE_URL = {AGENT_SERVICE_URL}{AGENT_SERVICE_PATH}")
