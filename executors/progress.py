import math
import random
from typing import Callable, Optional

from core.intent import ParsedIntent
from executors.base import BaseExecutor, build_response
from models.chat import IncomingMessage
from services.goal_calculator import days_until, get_now
from services.store import SavingsStore
from services.templates import encouragement, format_yen, render


class ProgressExecutor(BaseExecutor):
    """
    Executes CHECK_PROGRESS against the sender's most recent target.
    """

    def __init__(
        self,
        store: SavingsStore,
        rng: Optional[random.Random] = None,
        now_fn: Callable = get_now,
    ):
        self.store = store
        self.rng = rng
        self.now_fn = now_fn

    async def execute(self, intent: ParsedIntent, message: IncomingMessage) -> dict:
        target = self.store.latest_target(message.user_id)
        if target is None:
            return build_response(
                "progress",
                intent,
                render("no_target", self.rng),
                data={"has_target": False},
            )

        saved = self.store.get_profile(message.user_id).total_saved
        days_remaining = days_until(target.target_date, self.now_fn())
        remaining = max(0, target.amount - saved)
        daily_target = math.ceil(remaining / max(days_remaining, 1))
        progress = round(saved / target.amount * 100, 1)

        text = render(
            "progress",
            self.rng,
            goal=target.goal,
            amount=format_yen(target.amount),
            saved=format_yen(saved),
            progress=progress,
            days_remaining=days_remaining,
            daily_target=format_yen(daily_target),
            encouragement=encouragement(progress),
        )
        return build_response(
            "progress",
            intent,
            text,
            data={
                "has_target": True,
                "target": target,
                "saved": saved,
                "progress": progress,
                "days_remaining": days_remaining,
                "daily_target": daily_target,
            },
        )
