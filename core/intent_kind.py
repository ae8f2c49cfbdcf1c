# core/intent_kind.py
from enum import Enum


class IntentKind(str, Enum):
    """
    The closed set of things a chat message can ask for.
    """

    GREETING = "greeting"
    HELP = "help"
    SET_SAVINGS_GOAL = "set_savings_goal"
    CHECK_PROGRESS = "check_progress"
    CULTURAL_VALUE = "cultural_value"
    FAMILY_COMMAND = "family_command"
    SET_HEIR = "set_heir"
    UNKNOWN = "unknown"

    # -----------------------------
    # Semantic helpers (SAFE)
    # -----------------------------
    def is_stateful(self) -> bool:
        """Intents whose handler reads or writes the savings store."""
        return self in {
            IntentKind.SET_SAVINGS_GOAL,
            IntentKind.CHECK_PROGRESS,
            IntentKind.FAMILY_COMMAND,
            IntentKind.SET_HEIR,
        }

    def is_unknown(self) -> bool:
        return self is IntentKind.UNKNOWN


class FamilySubcommand(str, Enum):
    CREATE = "create"
    INVITE = "invite"
    GOAL = "goal"
    PROGRESS = "progress"
    INFO = "info"
