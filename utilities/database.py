import logging
from typing import List

from tortoise import Tortoise

logger = logging.getLogger("emoji_counter.database")


async def init_database(db_url: str, modules: List[str] = None):
    """
    Initializes the Tortoise ORM connection.

    Args:
        db_url: Tortoise connection URL, e.g. "sqlite://db.sqlite3".
        modules: A list of python modules (paths) that contain your Tortoise Models.
                 Example: ["cogs.emoji_counter.storage"]
    """
    if modules is None:
        modules = []

    logger.info(f"Initializing database connection to {db_url}...")

    try:
        await Tortoise.init(
            db_url=db_url,
            modules={'models': modules}
        )
        # Generate the schema (create tables) if they don't exist
        await Tortoise.generate_schemas(safe=True)
        logger.info("Database initialized and schemas generated successfully.")
    except Exception as e:
        logger.critical(f"Failed to initialize database: {e}")
        raise


async def close_database():
    """Closes the Tortoise ORM connection."""
    try:
        await Tortoise.close_connections()
        logger.info("Database connections closed.")
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")
