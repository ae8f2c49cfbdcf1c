# services/router.py
"""
Intent Router

- Maps one free-text chat message (Japanese, English or mixed) to exactly one ParsedIntent
- Rules run in a fixed priority order and the first match wins; patterns overlap,
  so "家族で¥1000貯めたい" is a savings goal, not a family command
- Pure: no store access, no randomness, never raises. No match means UNKNOWN
"""

import logging
from typing import Callable, List, Optional, Tuple

from core.intent import ParsedIntent
from core.intent_kind import IntentKind, FamilySubcommand
from services.extractors import (
    normalize_text,
    find_keyword,
    extract_savings_amount,
    extract_first_amount,
    extract_goal,
    extract_timeline,
    extract_address,
)

logger = logging.getLogger(__name__)

FAMILY_KEYWORDS = ["家族", "family"]

# Ordered: "家族目標" must not be read as progress, and so on
FAMILY_SUBCOMMAND_KEYWORDS: List[Tuple[FamilySubcommand, Tuple[str, ...]]] = [
    (FamilySubcommand.CREATE, ("作成", "create")),
    (FamilySubcommand.INVITE, ("招待", "invite")),
    (FamilySubcommand.GOAL, ("目標", "goal")),
    (FamilySubcommand.PROGRESS, ("進捗", "progress")),
]

INHERITANCE_KEYWORDS = ["相続", "inherit", "heir"]
GREETING_KEYWORDS = ["こんにちは", "こんばんは", "おはよう", "hello", "hi"]
HELP_KEYWORDS = ["ヘルプ", "help"]
PROGRESS_KEYWORDS = ["進捗", "progress", "確認", "check", "status"]

CULTURAL_VALUE_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("mottainai", ("もったいない", "勿体無い", "mottainai")),
    ("omotenashi", ("おもてなし", "omotenashi")),
    ("kyodo", ("協働", "kyodo")),
    ("dento", ("伝統", "dento")),
    ("wisdom", ("知恵", "wisdom")),
]

# (raw text, normalized text, lower-cased normalized text) -> intent or None
RuleMatcher = Callable[[str, str, str], Optional[ParsedIntent]]


# ---------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------
def _match_savings(raw: str, normalized: str, lowered: str) -> Optional[ParsedIntent]:
    amount = extract_savings_amount(normalized)
    if amount is None:
        return None

    timeline_days, timeline_date = extract_timeline(normalized)
    return ParsedIntent(
        kind=IntentKind.SET_SAVINGS_GOAL,
        raw_text=raw,
        amount=amount,
        goal=extract_goal(lowered),
        timeline_days=timeline_days,
        timeline_date=timeline_date,
    )


def _match_family(raw: str, normalized: str, lowered: str) -> Optional[ParsedIntent]:
    if not find_keyword(lowered, FAMILY_KEYWORDS):
        return None

    subcommand = FamilySubcommand.INFO
    for candidate, keywords in FAMILY_SUBCOMMAND_KEYWORDS:
        if find_keyword(lowered, keywords):
            subcommand = candidate
            break

    return ParsedIntent(
        kind=IntentKind.FAMILY_COMMAND,
        raw_text=raw,
        subcommand=subcommand,
        amount=extract_first_amount(normalized),
    )


def _match_inheritance(raw: str, normalized: str, lowered: str) -> Optional[ParsedIntent]:
    if not find_keyword(lowered, INHERITANCE_KEYWORDS):
        return None

    # Address taken from the un-lowered text so its casing survives
    address = extract_address(normalized)
    if address:
        return ParsedIntent(kind=IntentKind.SET_HEIR, raw_text=raw, address=address)
    return ParsedIntent(kind=IntentKind.HELP, raw_text=raw, topic="inheritance")


def _match_greeting(raw: str, normalized: str, lowered: str) -> Optional[ParsedIntent]:
    if find_keyword(lowered, GREETING_KEYWORDS):
        return ParsedIntent(kind=IntentKind.GREETING, raw_text=raw)
    return None


def _match_help(raw: str, normalized: str, lowered: str) -> Optional[ParsedIntent]:
    if lowered == "?" or find_keyword(lowered, HELP_KEYWORDS):
        return ParsedIntent(kind=IntentKind.HELP, raw_text=raw)
    return None


def _match_progress(raw: str, normalized: str, lowered: str) -> Optional[ParsedIntent]:
    if find_keyword(lowered, PROGRESS_KEYWORDS):
        return ParsedIntent(kind=IntentKind.CHECK_PROGRESS, raw_text=raw)
    return None


def _match_cultural_value(raw: str, normalized: str, lowered: str) -> Optional[ParsedIntent]:
    for value, keywords in CULTURAL_VALUE_KEYWORDS:
        if find_keyword(lowered, keywords):
            return ParsedIntent(kind=IntentKind.CULTURAL_VALUE, raw_text=raw, value=value)
    return None


# ---------------------------------------------------------------------
# Dispatch table (priority order = list order)
# ---------------------------------------------------------------------
INTENT_RULES: List[Tuple[str, RuleMatcher]] = [
    ("savings_amount", _match_savings),
    ("family_command", _match_family),
    ("inheritance", _match_inheritance),
    ("greeting", _match_greeting),
    ("help", _match_help),
    ("progress", _match_progress),
    ("cultural_value", _match_cultural_value),
]


def parse_message(text: str) -> ParsedIntent:
    """
    Classify a chat message. Same text in, same intent out.
    """
    raw = text or ""
    normalized = normalize_text(raw)
    if not normalized:
        return ParsedIntent(kind=IntentKind.UNKNOWN, raw_text=raw)

    lowered = normalized.lower()
    for name, matcher in INTENT_RULES:
        intent = matcher(raw, normalized, lowered)
        if intent is not None:
            logger.debug(f"[ROUTER] rule={name} kind={intent.kind.value}")
            return intent

    return ParsedIntent(kind=IntentKind.UNKNOWN, raw_text=raw)
