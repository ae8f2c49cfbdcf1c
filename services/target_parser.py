# services/target_parser.py
import logging
from asyncio import wait_for, TimeoutError

from configurations import config
from core.intent import ParsedIntent
from services.extractors import DEFAULT_GOAL

logger = logging.getLogger(__name__)


async def refine_target(intent: ParsedIntent) -> ParsedIntent:
    """
    Let the LLM fill in the goal and timeline the regex parse could not find.
    The amount always comes from the router. On timeout or any agent failure
    the deterministic intent is returned unchanged.
    """
    if not config.AI_TARGET_PARSER:
        return intent

    from agents.target_agent import extract_target

    try:
        extraction = await wait_for(extract_target(intent.raw_text), timeout=config.AI_TIMEOUT_SECONDS)
    except TimeoutError:
        logger.warning("[TARGET_AI] timed out, using rule-based parse")
        return intent
    except Exception:
        logger.exception("[TARGET_AI] failed, using rule-based parse")
        return intent

    update = {}
    if intent.goal in (None, DEFAULT_GOAL) and extraction.goal:
        update["goal"] = extraction.goal

    has_timeline = intent.timeline_days is not None or intent.timeline_date is not None
    if not has_timeline and extraction.timeline_value:
        if extraction.timeline_type == "date":
            update["timeline_date"] = extraction.timeline_value
        elif extraction.timeline_type == "days" and extraction.timeline_value.strip().isdigit():
            update["timeline_days"] = int(extraction.timeline_value)

    if update:
        logger.info(f"[TARGET_AI] refined fields={sorted(update)}")
        return intent.model_copy(update=update)
    return intent
