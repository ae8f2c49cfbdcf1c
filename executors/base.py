from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from core.intent import ParsedIntent
from models.chat import IncomingMessage
from services.utils import deep_serialize


class BaseExecutor(ABC):
    """
    Base contract for all executors.
    Executors take a ParsedIntent plus the message it came from and return a
    response dict. No parsing here; the router has already decided.
    """

    @abstractmethod
    async def execute(self, intent: ParsedIntent, message: IncomingMessage) -> dict:
        pass


def build_response(
    type: str,
    intent: ParsedIntent,
    message: str,
    data: Optional[Dict[str, Any]] = None,
    flex: Optional[Dict[str, Any]] = None,
) -> dict:
    response = {
        "type": type,
        "intent": intent.kind.value,
        "data": deep_serialize(data or {}),
        "message": message,
    }
    if flex is not None:
        response["flex"] = flex
    return response
