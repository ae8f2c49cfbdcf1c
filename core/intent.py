# core/intent.py
from pydantic import BaseModel, ConfigDict
from typing import Optional

from core.intent_kind import IntentKind, FamilySubcommand


class ParsedIntent(BaseModel):
    """
    A passive container that represents what the user wants.
    This does NOT execute logic.
    This does NOT touch the savings store.

    Only the fields that belong to ``kind`` are populated:
    - SET_SAVINGS_GOAL: amount, goal, timeline_days / timeline_date
    - FAMILY_COMMAND: subcommand (+ amount for the goal subcommand)
    - SET_HEIR: address
    - CULTURAL_VALUE: value
    - HELP: topic (None for general help)
    """

    model_config = ConfigDict(frozen=True)

    kind: IntentKind
    raw_text: str

    amount: Optional[int] = None
    goal: Optional[str] = None
    timeline_days: Optional[int] = None
    timeline_date: Optional[str] = None

    value: Optional[str] = None
    subcommand: Optional[FamilySubcommand] = None
    address: Optional[str] = None
    topic: Optional[str] = None
