"""
CLI entrypoint for seeding and aggregate repair. Run from the project root:

  python -m rately.seed            # create default accounts/store/ratings where missing
  python -m rately.seed --resync   # only recompute every store's cached rating stats
"""

import argparse
import logging
import sys

from rately.core.database import SessionLocal
from rately.services.aggregation import resync_all_stores
from rately.services.seed import seed_database

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the Rately database.")
    parser.add_argument(
        "--resync",
        action="store_true",
        help="Skip seeding; recompute cached average/total ratings for every store",
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        if args.resync:
            synced = resync_all_stores(db)
            logger.info("Resync completed: stores_synced=%s", synced)
        else:
            report = seed_database(db)
            logger.info(
                "Seed completed: users_created=%s ratings_created=%s",
                report.users_created,
                report.ratings_created,
            )
        return 0
    except Exception as e:
        logger.exception("Seed job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
