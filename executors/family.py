import logging
import random
from typing import Optional

from core.intent import ParsedIntent
from core.intent_kind import IntentKind, FamilySubcommand
from executors.base import BaseExecutor, build_response
from models.chat import IncomingMessage
from services.store import SavingsStore
from services.templates import encouragement, format_yen, render
from services.utils import short_address

logger = logging.getLogger(__name__)


class FamilyExecutor(BaseExecutor):
    """
    Executes FAMILY_COMMAND and SET_HEIR.

    Family groups are keyed by the chat group id, so create / goal /
    progress only work inside a group chat.
    """

    def __init__(self, store: SavingsStore, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng

    async def execute(self, intent: ParsedIntent, message: IncomingMessage) -> dict:
        if intent.kind is IntentKind.SET_HEIR:
            return self._set_heir(intent, message)

        handlers = {
            FamilySubcommand.CREATE: self._create,
            FamilySubcommand.INVITE: self._invite,
            FamilySubcommand.GOAL: self._goal,
            FamilySubcommand.PROGRESS: self._progress,
        }
        handler = handlers.get(intent.subcommand, self._info)
        return handler(intent, message)

    # -----------------------------
    # Helpers
    # -----------------------------
    def _reply(self, intent: ParsedIntent, key: str, data: Optional[dict] = None, **fields) -> dict:
        data = dict(data or {})
        data.setdefault("subcommand", intent.subcommand.value if intent.subcommand else None)
        return build_response("family", intent, render(key, self.rng, **fields), data=data)

    def _group_family_or_reply(self, intent: ParsedIntent, message: IncomingMessage):
        if not message.is_group:
            return None, self._reply(intent, "family_group_only")
        if not self.store.has_family(message.group_id):
            return None, self._reply(intent, "family_not_found")
        return self.store.get_family(message.group_id), None

    # -----------------------------
    # Subcommands
    # -----------------------------
    def _create(self, intent: ParsedIntent, message: IncomingMessage) -> dict:
        if not message.is_group:
            return self._reply(intent, "family_group_only")

        family = self.store.create_family(creator=message.user_id, group_id=message.group_id)
        logger.info(f"[FAMILY] created group_id={family.group_id} creator={message.user_id}")
        return self._reply(intent, "family_created", data={"family": family}, name=family.name)

    def _invite(self, intent: ParsedIntent, message: IncomingMessage) -> dict:
        family, reply = self._group_family_or_reply(intent, message)
        if reply:
            return reply

        family = self.store.join_family(message.user_id, family.group_id)
        logger.info(f"[FAMILY] joined group_id={family.group_id} user_id={message.user_id}")
        return self._reply(
            intent,
            "family_joined",
            data={"family": family},
            name=family.name,
            members=len(family.members),
        )

    def _goal(self, intent: ParsedIntent, message: IncomingMessage) -> dict:
        family, reply = self._group_family_or_reply(intent, message)
        if reply:
            return reply
        if not intent.amount:
            return self._reply(intent, "family_goal_missing_amount")

        family = self.store.set_family_goal(family.group_id, intent.amount)
        return self._reply(
            intent,
            "family_goal_set",
            data={"family": family},
            savings_goal=format_yen(family.savings_goal),
            total_saved=format_yen(family.total_saved),
        )

    def _progress(self, intent: ParsedIntent, message: IncomingMessage) -> dict:
        family, reply = self._group_family_or_reply(intent, message)
        if reply:
            return reply

        progress = family.progress_percent
        return self._reply(
            intent,
            "family_progress",
            data={"family": family, "progress": progress},
            savings_goal=format_yen(family.savings_goal),
            total_saved=format_yen(family.total_saved),
            progress=progress,
            members=len(family.members),
            encouragement=encouragement(progress),
        )

    def _info(self, intent: ParsedIntent, message: IncomingMessage) -> dict:
        key = "family_info_group" if message.is_group else "family_info_direct"
        return self._reply(intent, key)

    def _set_heir(self, intent: ParsedIntent, message: IncomingMessage) -> dict:
        family = self.store.set_heir(message.user_id, intent.address)
        logger.info(
            f"[FAMILY] heir set user_id={message.user_id} "
            f"group_id={family.group_id if family else None}"
        )
        return build_response(
            "family",
            intent,
            render("heir_set", self.rng, short_address=short_address(intent.address)),
            data={"address": intent.address, "family_group_id": family.group_id if family else None},
        )
