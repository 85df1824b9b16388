import asyncio
import logging

from config import settings_conf
from store import EntityStore
from store.seed import seed_demo_data

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings_conf['log_level']),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def main() -> EntityStore:
    """Create the store, populate it when demo data is enabled and log a summary.

    Returns:
        The store, for the process hosting it to hand to its callers
    """
    store = EntityStore()
    if settings_conf['seed_demo_data']:
        await seed_demo_data(store)

    counts = await store.stats()
    logger.info("Entity store ready: " + ", ".join(f"{name}={count}" for name, count in counts.items()))

    problems = await store.check_consistency()
    if problems:
        logger.warning(f"Store started with {len(problems)} inconsistent counters")
    return store


if __name__ == "__main__":
    asyncio.run(main())
