# services/message_handler.py
import logging
import random
from typing import Dict, Optional

from core.intent_kind import IntentKind
from executors.base import BaseExecutor
from executors.conversation import ConversationExecutor
from executors.family import FamilyExecutor
from executors.progress import ProgressExecutor
from executors.savings import SavingsGoalExecutor
from models.chat import IncomingMessage
from services.router import parse_message
from services.store import SavingsStore

logger = logging.getLogger(__name__)


class MessageHandler:
    """
    One chat message in, one reply envelope out:
    router → executor for the intent kind → {"type", "intent", "data", "message"}.
    """

    def __init__(self, store: SavingsStore, rng: Optional[random.Random] = None):
        self.store = store
        conversation = ConversationExecutor(rng)
        family = FamilyExecutor(store, rng)

        # -----------------------------
        # Intent → Executor (SINGLE SOURCE OF TRUTH)
        # -----------------------------
        self.executors: Dict[IntentKind, BaseExecutor] = {
            IntentKind.SET_SAVINGS_GOAL: SavingsGoalExecutor(store, rng),
            IntentKind.CHECK_PROGRESS: ProgressExecutor(store, rng),
            IntentKind.FAMILY_COMMAND: family,
            IntentKind.SET_HEIR: family,
            IntentKind.GREETING: conversation,
            IntentKind.HELP: conversation,
            IntentKind.CULTURAL_VALUE: conversation,
            IntentKind.UNKNOWN: conversation,
        }

    async def handle(self, message: IncomingMessage) -> dict:
        intent = parse_message(message.text)
        logger.info(
            f"[INTENT] user_id={message.user_id}, group_id={message.group_id}, "
            f"kind={intent.kind.value}, stateful={intent.kind.is_stateful()}, "
            f"text='{message.text[:100]}'"
        )
        if intent.kind.is_unknown():
            logger.warning(f"[INTENT] unrecognised message user_id={message.user_id}")
        return await self.executors[intent.kind].execute(intent, message)
