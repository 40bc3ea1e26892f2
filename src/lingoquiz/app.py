import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI

from . import database
from .config import settings
from .globals import sessions, vocab_manager
from .log_handler import SQLiteHandler
from .router import router


# --- Logging Setup ---
def setup_logging():
    logger = logging.getLogger("lingoquiz")
    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    if not os.path.exists(settings.LOG_DIR):
        os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)
    if settings.LOG_TO_DB and not any(isinstance(h, SQLiteHandler) for h in logger.handlers):
        database.init_db()
        logger.addHandler(SQLiteHandler())
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    database.init_db()
    vocab_manager.load_all()
    yield
    sessions.clear()


# --- App Factory ---
def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
        root_path=settings.ROOT_PATH,
    )

    app.include_router(router)

    return app
