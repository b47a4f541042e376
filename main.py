#!/usr/bin/env python3
"""Showreel - browsable video catalog."""

import argparse
import asyncio
import logging
import signal

import uvicorn

from config import load_config, Config
from data.catalog_session import CatalogSession
from data.catalog_source import HttpCatalogSource
from data.normalizer import Normalizer
from web.app import create_app

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("showreel")


class Showreel:
    """Main orchestrator - wires the catalog session into the web app and serves it."""

    def __init__(self, config: Config):
        self.config = config
        self.catalog_session = None
        self.server = None

    def setup(self) -> None:
        """Initialize all components."""
        cat_cfg = self.config.catalog
        source = HttpCatalogSource(cat_cfg.source_url, timeout=cat_cfg.fetch_timeout)
        normalizer = Normalizer(
            fill_missing_views=cat_cfg.fill_missing_views,
            uploader=cat_cfg.uploader,
        )
        self.catalog_session = CatalogSession(source, normalizer, page_size=cat_cfg.page_size)
        logger.info("Catalog source: %s", cat_cfg.source_url)

        app = create_app(self.config, self.catalog_session)
        server_config = uvicorn.Config(
            app,
            host=self.config.web.host,
            port=self.config.web.port,
            log_level="info",
        )
        self.server = uvicorn.Server(server_config)
        logger.info("Web app initialized")

    async def run(self) -> None:
        """Start everything."""
        self.setup()
        logger.info("Showreel starting on %s:%d", self.config.web.host, self.config.web.port)
        try:
            await self.server.serve()
        except asyncio.CancelledError:
            logger.info("Server cancelled")

    async def stop(self) -> None:
        """Stop all components."""
        if self.catalog_session:
            self.catalog_session.close()
        if self.server:
            self.server.should_exit = True
        logger.info("Showreel stopped")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Showreel")
    parser.add_argument("-c", "--config", help="Path to config file", default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config(args.config)
    app = Showreel(config)

    loop = asyncio.get_running_loop()

    def signal_handler():
        asyncio.create_task(app.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            signal.signal(sig, lambda s, f: signal_handler())

    try:
        await app.run()
    except KeyboardInterrupt:
        await app.stop()


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
