"""
YachtBot — FastAPI Application
Slack Events endpoint plus /healthz, /metrics, price and refresh endpoints.
"""
import json
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse

from yachtbot.bootstrap import BotContext, build_context
from yachtbot.config.settings import get_settings
from yachtbot.errors import (
    FetchError, QuoteParseError, StorageError, SymbolNotFoundError,
)
from yachtbot.utils.helpers import utc_timestamp
from yachtbot.utils.logger import get_logger, setup_logging

logger = get_logger("api")

ContextFactory = Callable[[], Awaitable[BotContext]]

HANDLED_EVENTS = ("app_mention", "message")


async def _default_context() -> BotContext:
    return await build_context(get_settings())


def _status_for(error: Exception) -> int:
    if isinstance(error, SymbolNotFoundError):
        return 404
    if isinstance(error, QuoteParseError):
        return 422
    if isinstance(error, StorageError):
        return 503
    return 502


def _should_handle(event: Dict[str, Any]) -> bool:
    """Only human messages; channel mentions arrive again as app_mention, DMs do not."""
    if event.get("type") not in HANDLED_EVENTS:
        return False
    if event.get("bot_id") or event.get("subtype"):
        return False
    if (event.get("type") == "message" and event.get("channel_type") != "im"
            and "<@" in (event.get("text") or "")):
        return False
    return bool(event.get("channel"))


async def handle_event(ctx: BotContext, event: Dict[str, Any]) -> None:
    """Answer one Slack message event."""
    # plain channel chatter stays silent on failures; mentions and DMs get an apology
    quiet = event.get("type") == "message" and event.get("channel_type") != "im"
    reply = await ctx.lookup.handle_text(event.get("text", ""), quiet=quiet)
    if reply is None:
        return
    ctx.counters["lookups"] += 1
    if not await ctx.responder.send(event["channel"], reply):
        ctx.counters["errors"] += 1


def create_app(context_factory: Optional[ContextFactory] = None) -> FastAPI:
    factory = context_factory or _default_context

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the bot context on startup, close it on shutdown."""
        setup_logging()
        ctx = await factory()
        app.state.bot = ctx
        app.state.started_at = utc_timestamp()
        logger.info("yachtbot_ready", version=ctx.settings.version)

        yield

        logger.info("yachtbot_shutting_down")
        await ctx.close()

    app = FastAPI(
        title="YachtBot",
        description="Slack bot for cryptocurrency prices",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ─── Health & Metrics ───────────────────────────────────────────

    @app.get("/healthz", tags=["System"])
    async def health_check(request: Request):
        ctx: BotContext = request.app.state.bot
        try:
            symbols = await ctx.index.count()
            status = "healthy"
        except StorageError as e:
            logger.warning("healthz_storage_error", error=str(e))
            symbols = None
            status = "degraded"
        return {
            "status": status,
            "symbols_indexed": symbols,
            "uptime_since": request.app.state.started_at,
            "timestamp": utc_timestamp(),
        }

    @app.get("/metrics", tags=["System"])
    async def metrics(request: Request):
        ctx: BotContext = request.app.state.bot
        return {
            "app": {
                "name": ctx.settings.app_name,
                "version": ctx.settings.version,
                "started_at": request.app.state.started_at,
            },
            "counters": dict(ctx.counters),
            "slack": ctx.responder.stats,
            "timestamp": utc_timestamp(),
        }

    # ─── Slack Events ───────────────────────────────────────────────

    @app.post("/slack/events", tags=["Slack"])
    async def slack_events(request: Request, background: BackgroundTasks):
        """Slack Events API receiver; replies are posted in the background."""
        ctx: BotContext = request.app.state.bot
        body = await request.body()

        if ctx.verifier is not None and not ctx.verifier.is_valid_request(body, dict(request.headers)):
            logger.warning("slack_signature_invalid")
            raise HTTPException(status_code=401, detail="invalid signature")

        try:
            payload = json.loads(body)
        except ValueError:
            raise HTTPException(status_code=400, detail="body is not JSON")
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="body is not a JSON object")

        # https://api.slack.com/events/url_verification
        if payload.get("type") == "url_verification":
            return PlainTextResponse(payload.get("challenge", ""))

        # Slack retries when we are slow; the first delivery is already being handled
        if request.headers.get("x-slack-retry-num"):
            logger.info("slack_retry_ignored", retry=request.headers.get("x-slack-retry-num"))
            return {"ok": True}

        if payload.get("type") == "event_callback":
            event = payload.get("event") or {}
            ctx.counters["events_received"] += 1
            if _should_handle(event):
                background.add_task(handle_event, ctx, event)

        return {"ok": True}

    # ─── Price & Refresh ────────────────────────────────────────────

    @app.get("/api/v1/price/{symbol}", tags=["Prices"])
    async def price(symbol: str, request: Request):
        """Price attachment for a ticker, as it would be posted to Slack."""
        ctx: BotContext = request.app.state.bot
        try:
            message = await ctx.lookup.lookup(symbol)
        except (SymbolNotFoundError, FetchError, QuoteParseError, StorageError) as e:
            logger.warning("price_endpoint_error", symbol=symbol, error=str(e))
            raise HTTPException(status_code=_status_for(e), detail=str(e))
        ctx.counters["lookups"] += 1
        return message.to_attachment()

    @app.post("/api/v1/refresh", tags=["Prices"])
    async def refresh(request: Request):
        """Rebuild the symbol index from the full provider catalog."""
        ctx: BotContext = request.app.state.bot
        try:
            result = await ctx.refresh.run()
        except (FetchError, StorageError) as e:
            ctx.counters["errors"] += 1
            logger.error("refresh_endpoint_error", error=str(e))
            raise HTTPException(status_code=_status_for(e), detail=str(e))
        ctx.counters["refreshes"] += 1
        return result.to_dict()

    return app


app = create_app()
