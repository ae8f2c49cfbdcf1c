# app.py
import base64
import hashlib
import hmac
import logging
import json
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from asyncio import Lock

from configurations import config
from core.errors import OmamoriError
from core.intent_kind import IntentKind
from models.chat import (
    DepositRequest,
    FamilyCreateRequest,
    IncomingMessage,
    UserRequest,
    WebhookBody,
)
from models.goal import GoalRequest
from services.goal_calculator import calculate_goal
from services.message_handler import MessageHandler
from services.store import SavingsStore
from services.templates import encouragement, format_yen, render
from services.utils import deep_serialize


# -----------------------------
# Structured Logging Setup
# -----------------------------
class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(
            {
                "time": self.formatTime(record, self.datefmt),
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
                "exception": record.exc_text,
            },
            ensure_ascii=False,
        )


logger = logging.getLogger("omamori_bot_api")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
handler.setFormatter(JSONFormatter())
if not logger.handlers:
    logger.addHandler(handler)

# -----------------------------
# FastAPI App
# -----------------------------
app = FastAPI(title="OMAMORI Savings Bot API", version="1.0")

# -----------------------------
# Metrics
# -----------------------------
metrics_lock = Lock()
request_counters = {kind.value: 0 for kind in IntentKind}
request_counters.update({"total": 0, "errors": 0})


# -----------------------------
# Failure envelope
# -----------------------------
def error_response(status_code: int, error_type: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"type": error_type, "message": message}},
    )


@app.exception_handler(OmamoriError)
async def omamori_error_handler(request: Request, exc: OmamoriError):
    return error_response(exc.status_code, exc.error_type, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, "http_error", str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(422, "validation_error", str(exc.errors()))


# -----------------------------
# Startup
# -----------------------------
@app.on_event("startup")
async def startup():
    # Tests install their own store before the app starts
    if getattr(app.state, "store", None) is None:
        app.state.store = SavingsStore()
        app.state.handler = MessageHandler(app.state.store)
    logger.info("✅ Savings store ready")


def get_store() -> SavingsStore:
    return app.state.store


def get_handler() -> MessageHandler:
    return app.state.handler


async def _count(intent: str) -> None:
    async with metrics_lock:
        request_counters[intent] = request_counters.get(intent, 0) + 1


async def _count_error() -> None:
    async with metrics_lock:
        request_counters["errors"] += 1


def verify_signature(body: bytes, signature: str | None) -> bool:
    """HMAC-SHA256 of the raw body, base64 encoded, keyed by the channel secret."""
    if not config.LINE_CHANNEL_SECRET:
        return True
    if not signature:
        return False
    digest = hmac.new(config.LINE_CHANNEL_SECRET.encode("utf-8"), body, hashlib.sha256).digest()
    return hmac.compare_digest(base64.b64encode(digest).decode("utf-8"), signature)


# -----------------------------
# API Endpoints
# -----------------------------
@app.get("/")
async def root():
    return {"message": "OMAMORI Savings Bot API is running."}


@app.get("/health")
async def health() -> Dict[str, Any]:
    store = get_store()
    return {
        "status": "ok",
        "users": len(store.profiles),
        "families": len(store.families),
        "ai_target_parser": config.AI_TARGET_PARSER,
    }


@app.get("/metrics")
async def metrics() -> Dict[str, Any]:
    async with metrics_lock:
        return request_counters.copy()


@app.post("/process")
async def process_request(request: UserRequest):
    async with metrics_lock:
        request_counters["total"] += 1

    try:
        logger.info(
            f"[REQUEST_START] user_id={request.user_id}, text_length={len(request.text)}"
        )
        message = IncomingMessage(
            user_id=request.user_id,
            text=request.text,
            group_id=request.group_id,
        )
        response = await get_handler().handle(message)
        await _count(response["intent"])
        return response

    except Exception as e:
        await _count_error()
        logger.exception(f"[ERROR] user_id={request.user_id}, exception={e}")
        raise HTTPException(
            status_code=500,
            detail=str(e) if config.DEBUG else "An unexpected error occurred",
        )


@app.post("/webhook")
async def webhook(request: Request):
    body = await request.body()
    if not verify_signature(body, request.headers.get("x-line-signature")):
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        payload = WebhookBody.model_validate_json(body or b"{}")
    except ValidationError:
        raise HTTPException(status_code=400, detail="Malformed webhook payload")

    results = []
    for event in payload.events:
        message = event.to_incoming()
        if message is None:
            continue

        async with metrics_lock:
            request_counters["total"] += 1
        try:
            response = await get_handler().handle(message)
        except Exception as e:
            # Report this event and keep answering the rest of the batch
            await _count_error()
            logger.exception(f"[ERROR] webhook user_id={message.user_id}, exception={e}")
            results.append(
                {
                    "replyToken": event.replyToken,
                    "error": {
                        "type": "internal_error",
                        "message": str(e) if config.DEBUG else "Webhook processing failed",
                    },
                }
            )
            continue
        await _count(response["intent"])
        results.append({"replyToken": event.replyToken, "reply": response})

    return {"status": "success", "results": results}


@app.post("/goal/calculate")
async def goal_calculate(request: GoalRequest):
    plan = calculate_goal(request.amount, request.timeline)
    return deep_serialize(plan)


@app.post("/deposit")
async def deposit(request: DepositRequest):
    store = get_store()
    family = store.record_deposit(request.user_id, request.amount)
    profile = store.get_profile(request.user_id)

    if family is not None:
        progress = family.progress_percent
        message = render(
            "family_deposit",
            amount=format_yen(request.amount),
            asset=request.asset,
            total_saved=format_yen(family.total_saved),
            remaining=format_yen(family.remaining),
            progress=progress,
            encouragement=encouragement(progress),
        )
    else:
        message = render(
            "deposit",
            amount=format_yen(request.amount),
            asset=request.asset,
            total_saved=format_yen(profile.total_saved),
        )

    logger.info(
        f"[DEPOSIT] user_id={request.user_id} amount={request.amount} asset={request.asset} "
        f"family={family.group_id if family else None}"
    )
    return {
        "success": True,
        "message": message,
        "profile": deep_serialize(profile),
        "family": deep_serialize(family),
    }


@app.post("/family/create")
async def family_create(request: FamilyCreateRequest):
    family = get_store().create_family(
        creator=request.user_id,
        name=request.family_name,
        group_id=request.group_id,
    )
    return {
        "success": True,
        "group_id": family.group_id,
        "message": f'Family group "{family.name}" created successfully',
        "family": deep_serialize(family),
    }


@app.post("/family/transaction")
async def family_transaction(request: DepositRequest):
    store = get_store()
    store.require_family_for_user(request.user_id)
    family = store.record_deposit(request.user_id, request.amount)
    progress = family.progress_percent
    return {
        "success": True,
        "message": render(
            "family_deposit",
            amount=format_yen(request.amount),
            asset=request.asset,
            total_saved=format_yen(family.total_saved),
            remaining=format_yen(family.remaining),
            progress=progress,
            encouragement=encouragement(progress),
        ),
        "family": deep_serialize(family),
    }


@app.get("/family/{group_id}")
async def family_info(group_id: str):
    family = get_store().get_family(group_id)
    return {"success": True, "family": deep_serialize(family)}


@app.get("/profile/{user_id}")
async def profile_info(user_id: str):
    profile = get_store().find_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return {"success": True, "profile": deep_serialize(profile)}


# -----------------------------
# Entrypoint
# -----------------------------
import uvicorn

if __name__ == "__main__":
    uvicorn.run("API_LAYER.app:app", host="0.0.0.0", port=config.PORT, workers=1)
