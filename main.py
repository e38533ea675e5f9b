import argparse
import time
import schedule
import logging
import sys
from config.app_config import LOG_LEVEL, SCHEDULER_INTERVAL_MINUTES
from database.config import get_db_context
from services.campaign_service import CampaignService

# Configure Logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)

logger = logging.getLogger("campaign_worker")


def run_housekeeping_cycle():
    """Launch due scheduled campaigns and close expired ones."""
    logger.info("Starting campaign housekeeping cycle...")
    try:
        with get_db_context() as db:
            service = CampaignService(db)
            launched = service.launch_scheduled()
            closed = service.close_expired()
    except Exception:
        logger.exception("Error in housekeeping cycle")
        return 0, 0

    logger.info(f"Cycle complete. {launched} launched, {closed} closed.")
    return launched, closed


def start_scheduler():
    logger.info(f"Starting campaign scheduler (every {SCHEDULER_INTERVAL_MINUTES} minutes)...")
    # Run once immediately
    run_housekeeping_cycle()

    schedule.every(SCHEDULER_INTERVAL_MINUTES).minutes.do(run_housekeeping_cycle)

    while True:
        schedule.run_pending()
        time.sleep(30)


def main():
    parser = argparse.ArgumentParser(description="Campaign housekeeping worker")
    parser.add_argument("--mode", choices=["once", "schedule"], default="schedule", help="Run once or schedule")
    args = parser.parse_args()

    if args.mode == "schedule":
        start_scheduler()
    else:
        run_housekeeping_cycle()


if __name__ == "__main__":
    main()
