from typing import Literal, Optional

from pydantic import BaseModel
from pydantic_ai import Agent
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from configurations.config import GEMINI_MODEL_NAME, get_env_var


class TargetExtraction(BaseModel):
    goal: Optional[str] = None
    timeline_type: Optional[Literal["date", "days"]] = None
    timeline_value: Optional[str] = None
    cultural_tone: Literal["polite", "casual", "serious"] = "polite"


SYSTEM_PROMPT = (
    "You are a polite Japanese savings assistant (お守りボット). "
    "Parse the user's savings message with cultural sensitivity.\n\n"
    "Extract:\n"
    "1. goal: what they are saving for (travel destination, purchase, event), in short English "
    "such as 'Okinawa Trip' or 'New Car'. null if not stated.\n"
    "2. timeline_type: 'date' for a calendar deadline, 'days' for a duration. null if not stated.\n"
    "3. timeline_value: ISO date (YYYY-MM-DD) for 'date', a whole number of days for 'days'.\n"
    "4. cultural_tone: polite, casual or serious.\n\n"
    "Never invent a deadline the user did not give. "
    "Be respectful of Japanese values: mottainai (no waste), saving patience, seasonal goals."
)

_agent: Optional[Agent] = None


def get_target_agent() -> Agent:
    """Built on first use so the key is only required when the parser is enabled."""
    global _agent
    if _agent is None:
        provider = GoogleProvider(api_key=get_env_var("GOOGLE_API_KEY"))
        model = GoogleModel(GEMINI_MODEL_NAME, provider=provider)
        _agent = Agent(model, system_prompt=SYSTEM_PROMPT, output_type=TargetExtraction)
    return _agent


async def extract_target(user_input: str) -> TargetExtraction:
    result = await get_target_agent().run(user_input)
    return result.output
