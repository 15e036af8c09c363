import logging
from contextlib import asynccontextmanager
from functools import partial
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from content_empire.config import Settings, settings as default_settings
from content_empire.db.base import make_engine, make_session_factory
from content_empire.db.store import ContentStore
from content_empire.deps import init_db
from content_empire.logging_config import setup_logging
from content_empire.services.commands import CommandHandler
from content_empire.services.poller import BotPoller
from content_empire.services.scheduler import QueueTrigger, report_due_entries
from content_empire.services.telegram_api import TelegramClient

# Routers
from content_empire.routers import posts, scheduler_api, sources, stats

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ContentStore] = None,
    trigger: Optional[QueueTrigger] = None,
    poller: Optional[BotPoller] = None,
    init_schema: bool = True,
) -> FastAPI:
    """
    Builds the app with explicitly constructed clients. Anything not passed in
    is created from settings; the bot is only wired when BOT_TOKEN is set.
    """
    settings = settings or default_settings
    engine = None
    if store is None:
        engine = make_engine(settings.database_url, settings.database_key)
        store = ContentStore(make_session_factory(engine), queue_delay_seconds=settings.queue_delay_seconds)
    if trigger is None:
        trigger = QueueTrigger(partial(report_due_entries, store), cron=settings.queue_cron)
    if poller is None and settings.bot_token:
        relay = TelegramClient(settings.bot_token, settings.telegram_api_base, settings.poll_timeout)
        poller = BotPoller(relay, CommandHandler(store, relay, settings.bot_username),
                           timeout=settings.poll_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if engine is not None and init_schema:
            init_db(engine)
        trigger.start()
        if poller is not None:
            poller.start()
        else:
            logger.warning("BOT_TOKEN is not set; Telegram bot disabled")
        logger.info("server listening on http://%s:%s", settings.host, settings.port)
        try:
            yield
        finally:
            trigger.stop()
            if poller is not None:
                poller.stop(join_timeout=1.0)
                poller.relay.close()

    app = FastAPI(title="Content Empire Admin API", version="0.1.0", lifespan=lifespan)
    app.state.store = store
    app.state.trigger = trigger
    app.state.poller = poller
    app.state.pending_limit = settings.pending_limit

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", include_in_schema=False)
    def root():
        return FileResponse(STATIC_DIR / "index.html")

    # Mount routes
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    app.include_router(stats.router)          # /api/stats
    app.include_router(posts.router)          # /api/posts/*
    app.include_router(sources.router)        # /api/sources
    app.include_router(scheduler_api.router)  # /scheduler/*
    return app


setup_logging(default_settings.log_level, default_settings.log_file or None)
app = create_app()
