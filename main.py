import argparse
import logging

from apptbook.config import load_settings
from apptbook.shell import run_session, seed_sample_data
from apptbook.store import IntervalStore


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="apptbook: in-memory appointment book")
    parser.add_argument("--no-sample-data", action="store_true", help="Start with an empty appointment book")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override LOG_LEVEL",
    )
    args = parser.parse_args()

    settings = load_settings()
    _setup_logging(args.log_level or settings.log_level)
    logger = logging.getLogger(__name__)

    store = IntervalStore(search_horizon_minutes=settings.slot_search_horizon_minutes)
    if settings.seed_sample_data and not args.no_sample_data:
        seed_sample_data(store)

    try:
        run_session(store, settings)
        return 0

    except EOFError:
        logger.warning("Input closed before the session finished")
        return 1

    except ValueError as e:
        # Re-prompt attempts exhausted.
        logger.error("Giving up on invalid input (%s: %s)", type(e).__name__, e)
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    except Exception as e:
        logger.error("Session failed (%s: %s)", type(e).__name__, e)
        raise


if __name__ == "__main__":
    raise SystemExit(main())
