"""
Local and container entrypoint: prepare the schema, then serve with uvicorn.

RUN_MIGRATIONS=true applies Alembic migrations first and falls back to
create_all when they fail.
"""
import logging
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("rentdesk.run")


def upgrade_schema() -> bool:
    from alembic import command
    from alembic.config import Config

    logger.info("[STARTUP] Applying migrations")
    try:
        command.upgrade(Config("alembic.ini"), "head")
    except Exception as e:
        logger.warning(f"[STARTUP] Migrations failed: {e}")
        return False
    return True


def prepare_database() -> None:
    from rentdesk.database import init_db

    if os.getenv("RUN_MIGRATIONS") == "true" and upgrade_schema():
        return
    init_db()


def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    prepare_database()

    logger.info(f"[STARTUP] Listening on {host}:{port}")
    uvicorn.run(
        "rentdesk.main:app",
        host=host,
        port=port,
        reload=os.getenv("ENV") == "development",
        log_level="info",
        # Realtime rooms are held in process memory
        workers=1,
    )


if __name__ == "__main__":
    main()
