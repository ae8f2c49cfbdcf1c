import random
from typing import Optional

from core.intent import ParsedIntent
from executors.base import BaseExecutor, build_response
from models.chat import IncomingMessage
from services.templates import key_for_intent, render


class ConversationExecutor(BaseExecutor):
    """
    Executes stateless intents: greeting, help, cultural values and the
    fallback for anything the router did not recognise.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    async def execute(self, intent: ParsedIntent, message: IncomingMessage) -> dict:
        key = key_for_intent(intent)
        data = {"template": key}
        if intent.value:
            data["value"] = intent.value

        return build_response(
            "conversation",
            intent,
            render(key, self.rng),
            data=data,
        )
