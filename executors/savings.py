import logging
import random
from typing import Callable, Optional

from configurations import config
from core.errors import InvalidTimeline
from core.intent import ParsedIntent
from executors.base import BaseExecutor, build_response
from models.chat import IncomingMessage
from models.savings import SavingsTarget
from services.flex import build_target_flex
from services.goal_calculator import calculate_goal, get_now
from services.store import SavingsStore
from services.target_parser import refine_target
from services.templates import format_yen, render

logger = logging.getLogger(__name__)


class SavingsGoalExecutor(BaseExecutor):
    """
    Executes SET_SAVINGS_GOAL: works out the plan, stores the target on the
    sender's profile and replies with the plan plus a flex bubble.
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
        intent = await refine_target(intent)

        # Explicit date > day count > configured default
        if intent.timeline_date is not None:
            timeline = intent.timeline_date
        elif intent.timeline_days is not None:
            timeline = intent.timeline_days
        else:
            timeline = config.DEFAULT_TIMELINE_DAYS

        now = self.now_fn()
        try:
            plan = calculate_goal(intent.amount, timeline, now=now)
        except InvalidTimeline as e:
            logger.warning(f"[GOAL] invalid timeline user_id={message.user_id} timeline={e.timeline!r}")
            return build_response(
                "savings_goal",
                intent,
                render("invalid_timeline", self.rng),
                data={"error": e.error_type, "timeline": str(e.timeline)},
            )

        target = SavingsTarget(
            amount=intent.amount,
            goal=intent.goal,
            created_at=now,
            target_date=plan.target_date,
            daily_target=plan.daily_target,
        )
        self.store.add_target(message.user_id, target)

        fields = {
            "goal": target.goal,
            "amount": format_yen(target.amount),
            "target_date": plan.target_date.date().isoformat(),
            "days_remaining": plan.days_remaining,
            "daily_target": format_yen(plan.daily_target),
        }
        logger.info(
            f"[GOAL] user_id={message.user_id} goal={target.goal} amount={target.amount} "
            f"days_remaining={plan.days_remaining} daily_target={plan.daily_target}"
        )

        if plan.expired:
            return build_response(
                "savings_goal",
                intent,
                render("savings_goal_expired", self.rng, **fields),
                data={"target": target, "plan": plan, "expired": True},
            )

        return build_response(
            "savings_goal",
            intent,
            render("savings_goal_set", self.rng, **fields),
            data={"target": target, "plan": plan, "expired": False},
            flex=build_target_flex(target, plan.days_remaining),
        )
