import asyncio
from datetime import datetime, timedelta

from core.intent import ParsedIntent
from core.intent_kind import IntentKind
from executors.conversation import ConversationExecutor
from executors.family import FamilyExecutor
from executors.progress import ProgressExecutor
from executors.savings import SavingsGoalExecutor
from models.chat import IncomingMessage
from models.savings import SavingsTarget
from services.message_handler import MessageHandler
from services.router import parse_message
from services.templates import TEMPLATES


NOW = datetime(2026, 1, 1)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def dm(text: str, user_id: str = "u1") -> IncomingMessage:
    return IncomingMessage(user_id=user_id, text=text)


def group(text: str, user_id: str = "u1", group_id: str = "G1") -> IncomingMessage:
    return IncomingMessage(user_id=user_id, text=text, group_id=group_id)


def run(executor, message: IncomingMessage, intent: ParsedIntent = None) -> dict:
    return asyncio.run(executor.execute(intent or parse_message(message.text), message))


# ---------------------------------------------------------------------
# SAVINGS GOAL
# ---------------------------------------------------------------------

def test_savings_goal_is_planned_and_stored(store, rng):
    executor = SavingsGoalExecutor(store, rng, now_fn=lambda: NOW)

    response = run(executor, dm("Set target ¥30000 Okinawa 30日"))

    assert response["type"] == "savings_goal"
    assert response["intent"] == "set_savings_goal"
    assert response["data"]["plan"]["daily_target"] == 1000
    assert response["data"]["plan"]["days_remaining"] == 30
    assert response["data"]["expired"] is False
    assert "flex" in response
    assert "Okinawa Trip" in response["message"]

    target = store.latest_target("u1")
    assert target.amount == 30000
    assert target.goal == "Okinawa Trip"
    assert target.daily_target == 1000


def test_savings_goal_without_timeline_uses_default(store, rng):
    executor = SavingsGoalExecutor(store, rng, now_fn=lambda: NOW)

    response = run(executor, dm("¥3000貯めたい"))

    assert response["data"]["plan"]["days_remaining"] == 30
    assert response["data"]["plan"]["daily_target"] == 100


def test_flex_button_carries_daily_target(store, rng):
    executor = SavingsGoalExecutor(store, rng, now_fn=lambda: NOW)

    response = run(executor, dm("Set target ¥30000 Okinawa 30日"))

    button = response["flex"]["contents"]["footer"]["contents"][0]
    assert "amount=1000" in button["action"]["uri"]


def test_past_date_is_stored_but_reported_expired(store, rng):
    executor = SavingsGoalExecutor(store, rng, now_fn=lambda: NOW)

    response = run(executor, dm("2025-12-01までに¥5000貯めたい"))

    assert response["data"]["expired"] is True
    assert response["data"]["plan"]["daily_target"] == 5000
    assert "flex" not in response
    assert store.latest_target("u1") is not None


def test_unreadable_date_replies_instead_of_raising(store, rng):
    executor = SavingsGoalExecutor(store, rng, now_fn=lambda: NOW)
    intent = ParsedIntent(
        kind=IntentKind.SET_SAVINGS_GOAL,
        raw_text="¥5000 by xyzzy",
        amount=5000,
        goal="savings",
        timeline_date="xyzzy",
    )

    response = run(executor, dm(intent.raw_text), intent)

    assert response["data"]["error"] == "invalid_timeline"
    assert response["message"] in TEMPLATES["invalid_timeline"]
    assert store.latest_target("u1") is None


# ---------------------------------------------------------------------
# PROGRESS
# ---------------------------------------------------------------------

def test_progress_without_target(store, rng):
    executor = ProgressExecutor(store, rng, now_fn=lambda: NOW)

    response = run(executor, dm("進捗"))

    assert response["data"] == {"has_target": False}
    assert response["message"] in TEMPLATES["no_target"]


def test_progress_with_deposits(store, rng):
    store.add_target(
        "u1",
        SavingsTarget(amount=30000, goal="Travel", target_date=NOW + timedelta(days=20), daily_target=1000),
    )
    store.record_deposit("u1", 10000)
    executor = ProgressExecutor(store, rng, now_fn=lambda: NOW)

    response = run(executor, dm("進捗"))
    data = response["data"]

    assert data["has_target"] is True
    assert data["saved"] == 10000
    assert data["days_remaining"] == 20
    assert data["daily_target"] == 1000
    assert data["progress"] == 33.3


# ---------------------------------------------------------------------
# FAMILY
# ---------------------------------------------------------------------

def test_family_create_requires_group_chat(store, rng):
    response = run(FamilyExecutor(store, rng), dm("家族作成"))

    assert response["message"] in TEMPLATES["family_group_only"]
    assert store.families == {}


def test_family_flow_in_group_chat(store, rng):
    executor = FamilyExecutor(store, rng)

    created = run(executor, group("家族作成"))
    assert created["data"]["subcommand"] == "create"
    assert store.has_family("G1")

    joined = run(executor, group("家族招待", user_id="u2"))
    assert joined["data"]["family"]["members"] == ["u1", "u2"]

    goal = run(executor, group("家族目標 ¥100000"))
    assert goal["data"]["family"]["savings_goal"] == 100000

    store.record_deposit("u2", 25000)
    progress = run(executor, group("家族進捗"))
    assert progress["data"]["progress"] == 25
    assert "25%" in progress["message"]


def test_family_goal_without_amount(store, rng):
    store.create_family("u1", group_id="G1")

    response = run(FamilyExecutor(store, rng), group("家族目標"))

    assert response["message"] in TEMPLATES["family_goal_missing_amount"]


def test_family_progress_before_create(store, rng):
    response = run(FamilyExecutor(store, rng), group("家族進捗"))

    assert response["message"] in TEMPLATES["family_not_found"]


def test_family_info_depends_on_chat_type(store, rng):
    executor = FamilyExecutor(store, rng)

    assert run(executor, dm("家族"))["message"] in TEMPLATES["family_info_direct"]
    assert run(executor, group("家族"))["message"] in TEMPLATES["family_info_group"]


def test_set_heir(store, rng):
    address = "0x" + "ab" * 20
    store.create_family("u1", group_id="G1")

    response = run(FamilyExecutor(store, rng), group(f"相続人 {address}"))

    assert response["intent"] == "set_heir"
    assert response["data"]["family_group_id"] == "G1"
    assert address[:10] in response["message"]
    assert store.get_family("G1").heir_address == address


# ---------------------------------------------------------------------
# CONVERSATION + HANDLER
# ---------------------------------------------------------------------

def test_cultural_value_reply(rng):
    response = run(ConversationExecutor(rng), dm("もったいない"))

    assert response["type"] == "conversation"
    assert response["data"] == {"template": "cultural:mottainai", "value": "mottainai"}
    assert response["message"] in TEMPLATES["cultural:mottainai"]


def test_handler_routes_every_kind(store, rng):
    handler = MessageHandler(store, rng)

    for kind in IntentKind:
        assert kind in handler.executors


def test_handler_goal_then_progress(store, rng):
    handler = MessageHandler(store, rng)

    goal = asyncio.run(handler.handle(dm("¥9000貯めたい 90日")))
    progress = asyncio.run(handler.handle(dm("進捗")))

    assert goal["intent"] == "set_savings_goal"
    assert progress["intent"] == "check_progress"
    assert progress["data"]["has_target"] is True
    assert progress["data"]["saved"] == 0


def test_handler_unknown_reply(store, rng):
    response = asyncio.run(MessageHandler(store, rng).handle(dm("asdfgh")))

    assert response["intent"] == "unknown"
    assert response["message"] in TEMPLATES["unknown"]
