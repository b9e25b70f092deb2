"""Scheduler entry point: runs the pipeline on a fixed interval."""
import asyncio
import signal
import logging
from typing import Optional

from api.services.container import build_services
from crawler.worker import PipelineWorker
from database.connection import DatabaseConnection
from shared.config import Settings, settings as default_settings

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class Scheduler:
    """Invokes the pipeline every ``crawl_interval_seconds`` until stopped."""

    def __init__(self, worker: PipelineWorker, settings: Optional[Settings] = None):
        self.worker = worker
        self.settings = settings or default_settings
        self._stop = asyncio.Event()

    def stop(self):
        logger.info("Scheduler stopping...")
        self._stop.set()

    async def run_once(self):
        """Run the pipeline once. Errors are logged, never raised."""
        try:
            run = await self.worker.run(self.settings.scheduled_sources, self.settings.scheduled_limit)
            logger.info(f"Scheduled run finished: crawled {run.crawled}, processed {len(run.processed)}")
        except Exception as e:
            logger.error(f"Error in scheduled run: {e}")

    async def start(self):
        logger.info(f"Scheduler starting, interval {self.settings.crawl_interval_seconds}s")
        while not self._stop.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.settings.crawl_interval_seconds)
            except asyncio.TimeoutError:
                pass


async def main():
    """Main entry point for the scheduler service."""
    redis_client = await DatabaseConnection.init_redis()
    blob_collection = await DatabaseConnection.get_blob_collection()
    services = build_services(redis_client, blob_collection, default_settings)

    scheduler = Scheduler(services.worker, default_settings)

    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        scheduler.stop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, signal_handler)

    try:
        await scheduler.start()
    finally:
        await DatabaseConnection.close_connections()
        logger.info("Scheduler shutdown complete")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
