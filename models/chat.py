# models/chat.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class IncomingMessage(BaseModel):
    """One inbound chat message, transport details stripped."""

    user_id: str
    text: str
    # Set when the message was posted in a group chat
    group_id: Optional[str] = None

    @property
    def is_group(self) -> bool:
        return self.group_id is not None


# -----------------------------
# API request bodies
# -----------------------------
class UserRequest(BaseModel):
    text: str
    user_id: str
    group_id: Optional[str] = None


class DepositRequest(BaseModel):
    user_id: str
    amount: int = Field(..., gt=0)
    asset: str = Field(default="JPYC")
    transaction_hash: Optional[str] = None


class FamilyCreateRequest(BaseModel):
    user_id: str
    family_name: str
    group_id: Optional[str] = None


# -----------------------------
# Chat platform webhook payload
# -----------------------------
class WebhookSource(BaseModel):
    type: str = "user"
    userId: Optional[str] = None
    groupId: Optional[str] = None


class WebhookEvent(BaseModel):
    type: str
    replyToken: Optional[str] = None
    source: WebhookSource = Field(default_factory=WebhookSource)
    message: Optional[Dict[str, Any]] = None

    def to_incoming(self) -> Optional[IncomingMessage]:
        """Text messages only; everything else is ignored."""
        if self.type != "message" or not self.message:
            return None
        if self.message.get("type") != "text" or not self.source.userId:
            return None
        return IncomingMessage(
            user_id=self.source.userId,
            text=self.message.get("text", ""),
            group_id=self.source.groupId if self.source.type == "group" else None,
        )


class WebhookBody(BaseModel):
    events: List[WebhookEvent] = Field(default_factory=list)
