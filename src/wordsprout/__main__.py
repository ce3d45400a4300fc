"""Main entry point: initialize the database and resync global word statistics."""
import logging
import sys

from wordsprout.engine import VocabularyEngine
from wordsprout.logging_config import setup_logging

logger = logging.getLogger("wordsprout")


def main() -> int:
    """Create tables and run one global word statistics resync."""
    engine = VocabularyEngine()
    engine.start(background=False)
    try:
        summary = engine.resync_global_stats()
    except Exception as e:
        logger.error("Global word stats resync failed: %s", e, exc_info=True)
        return 1
    finally:
        engine.stop()

    logger.info(
        "Global word stats: %d words (%d inserted, %d updated, %d deleted)",
        summary.total,
        summary.inserted,
        summary.updated,
        summary.deleted,
    )
    return 0


if __name__ == "__main__":
    setup_logging("Starting WordSprout v0.1.0 ...")
    sys.exit(main())
