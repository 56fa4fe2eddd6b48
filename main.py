# Filename: main.py

import asyncio
import logging

import aiohttp
from solana.rpc.async_api import AsyncClient
from solders.pubkey import Pubkey

from address_deriver import AddressDeriver
from alert_pipeline import AlertPipeline
from config import load_config, rpc_http_endpoint, rpc_websocket_endpoint
from market_data import MarketEnricher
from reputation import ReputationChecker
from scoring import ConfidenceScorer
from telegram_alert import LogOnlyNotifier, TelegramNotifier
from websocket_listener import WebSocketListener

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")


def build_notifier(config):
    if config.get("ENABLE_TELEGRAM") and config.get("TELEGRAM_BOT_TOKEN") and config.get("TELEGRAM_CHAT_ID"):
        return TelegramNotifier(config["TELEGRAM_BOT_TOKEN"], config["TELEGRAM_CHAT_ID"])
    logger.info("📭 Telegram disabled, alerts go to the log")
    return LogOnlyNotifier()


async def run(config):
    client = AsyncClient(rpc_http_endpoint(config), commitment=config.get("COMMITMENT", "processed"))
    session = aiohttp.ClientSession()

    pipeline = AlertPipeline(
        deriver=AddressDeriver(
            Pubkey.from_string(config["TOKEN_PROGRAM_ID"]),
            Pubkey.from_string(config["ASSOCIATED_TOKEN_PROGRAM_ID"]),
        ),
        enricher=MarketEnricher(
            session,
            api_key=config.get("BIRDEYE_API_KEY", ""),
            base_url=config["BIRDEYE_BASE_URL"],
            chain=config.get("BIRDEYE_CHAIN", "solana"),
            timeout=config.get("MARKET_DATA_TIMEOUT_SECONDS", 10),
        ),
        scorer=ConfidenceScorer(
            ReputationChecker(client, min_lamports=config["REPUTABLE_MIN_LAMPORTS"]),
            denylist=config.get("NAME_DENYLIST", ["scam"]),
        ),
        notifier=build_notifier(config),
        threshold=config["CONFIDENCE_THRESHOLD"],
        max_concurrency=config["MAX_CONCURRENT_PIPELINES"],
        backlog=config["PIPELINE_BACKLOG"],
    )

    listener = WebSocketListener(
        rpc_websocket_endpoint(config),
        program_id=config["PUMP_PROGRAM_ID"],
        commitment=config.get("COMMITMENT", "processed"),
        reconnect_delay=config.get("RECONNECT_DELAY_SECONDS", 5),
    )

    reporter = asyncio.create_task(pipeline.report_stats(
        config["STATS_REPORT_INTERVAL_SECONDS"],
        push=config.get("PUSH_STATS_SUMMARY", False),
    ))
    try:
        logger.info("👂 Listening for new Pump.fun launches...")
        await pipeline.run(listener.stream())
    finally:
        await shutdown(listener, reporter, session, client)
        logger.info(pipeline.stats.summary())


async def shutdown(listener, reporter, session, client):
    listener.stop()
    reporter.cancel()
    await asyncio.gather(reporter, return_exceptions=True)
    await session.close()
    await client.close()


def main():
    logger.info("🚀 Starting pump.fun launch alerts...")
    config = load_config()
    if not config.get("HELIUS_API_KEY") and not config.get("RPC_HTTP_ENDPOINT"):
        logger.warning("No HELIUS_API_KEY or RPC_HTTP_ENDPOINT configured")

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("❌ Listener stopped by user.")


if __name__ == "__main__":
    main()
