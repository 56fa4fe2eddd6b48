# Filename: telegram_alert.py

import asyncio
import logging
from typing import Optional

import requests
from solders.pubkey import Pubkey

from errors import NotificationDeliveryFailed
from models import CreationEvent, MarketSnapshot

logger = logging.getLogger("TelegramNotifier")


def escape_md(text: str) -> str:
    """Escape Markdown-sensitive characters."""
    return text.replace('_', '\\_').replace('*', '\\*').replace('[', '\\[').replace('`', '\\`')


def format_usd(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    if value >= 1:
        return f"${value:,.2f}"
    # sub-cent memecoin prices: keep the significant digits
    return "$" + f"{value:.12f}".rstrip("0").rstrip(".")


def format_creation_alert(event: CreationEvent, derived_address: Pubkey, snapshot: MarketSnapshot,
                          score: int, signature: str) -> str:
    """Format the alert message text for a launch that cleared the threshold."""
    text = "🚀 *New High-Confidence Pump.fun Launch Detected!*\n\n"
    text += f"*Name:* {escape_md(event.name)}\n"
    text += f"*Symbol:* {escape_md(event.symbol)}\n"
    text += f"*URI:* {escape_md(event.uri)}\n"
    text += f"*Mint:* `{event.mint}`\n"
    text += f"*Bonding Curve:* `{event.bonding_curve}`\n"
    text += f"*Associated Curve:* `{derived_address}`\n"
    text += f"*Creator:* `{event.creator}`\n"
    text += f"*Price:* {format_usd(snapshot.price)}\n"
    text += f"*Market Cap:* {format_usd(snapshot.market_cap)}\n"
    text += f"*Confidence Score:* {score}/100\n"
    text += f"*Signature:* `{signature}`\n\n"
    text += f"[🔎 View on Solscan](https://solscan.io/tx/{signature})"
    return text


class TelegramNotifier:
    def __init__(self, bot_token: str = "", chat_id: str = "", timeout: float = 10):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout = timeout

        if not self.bot_token or not self.chat_id:
            logger.error("[Telegram] Missing bot token or chat ID!")

    async def send_message(self, text: str):
        # requests is blocking; run it in a worker thread
        await asyncio.to_thread(self.send_markdown, text)

    def send_markdown(self, text: str):
        """
        Sends a raw Markdown message.
        Raises NotificationDeliveryFailed; alerts are not retried.
        """
        if not self.bot_token or not self.chat_id:
            raise NotificationDeliveryFailed("Telegram credentials not configured")

        url = f"https://api.telegram.org/bot{self.bot_token}/sendMessage"
        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "Markdown",
            "disable_web_page_preview": True
        }

        try:
            response = requests.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationDeliveryFailed("Telegram request exception", {"error": repr(e)}) from e

        if response.status_code != 200:
            raise NotificationDeliveryFailed(
                "Telegram sendMessage failed",
                {"status": response.status_code, "body": response.text[:200]},
            )
        logger.info("[Telegram] ✅ Message sent successfully.")


class LogOnlyNotifier:
    """Stand-in when Telegram is disabled: alerts go to the log."""

    async def send_message(self, text: str):
        logger.info(f"[ALERT]\n{text}")
