# Filename: alert_pipeline.py

import asyncio
import logging
from typing import AsyncIterator, Protocol

from address_deriver import AddressDeriver
from errors import MalformedPayload, NotificationDeliveryFailed
from market_data import MarketEnricher
from models import LogNotification, MarketSnapshot, PipelineResult, PipelineState, TERMINAL_STATES, settle
from payload_decoder import decode_creation_event, extract_payload, is_creation_event
from scoring import DEFAULT_THRESHOLD, ConfidenceScorer, passes_threshold
from telegram_alert import format_creation_alert

logger = logging.getLogger("AlertPipeline")


class Notifier(Protocol):
    async def send_message(self, text: str): ...


class PipelineStats:
    def __init__(self):
        self.counts = {state: 0 for state in TERMINAL_STATES}
        self.overflow = 0
        self.undelivered = 0

    def record(self, result: PipelineResult):
        self.counts[result.state] += 1
        if result.state is PipelineState.ALERTED and not result.delivered:
            self.undelivered += 1

    def summary(self) -> str:
        return (
            f"📊 Launch pipeline summary\n"
            f"- Alerted: {self.counts[PipelineState.ALERTED]} (undelivered: {self.undelivered})\n"
            f"- Suppressed: {self.counts[PipelineState.SUPPRESSED]}\n"
            f"- Dropped: {self.counts[PipelineState.DROPPED]}\n"
            f"- Ignored: {self.counts[PipelineState.IGNORED]}\n"
            f"- Backlog overflow: {self.overflow}"
        )

    def reset(self):
        for state in self.counts:
            self.counts[state] = 0
        self.overflow = 0
        self.undelivered = 0


class AlertPipeline:
    """
    received -> decoded -> enriching -> scored -> alerted | suppressed | dropped

    One process() call per log notification; instances share nothing but the
    notifier. run() feeds a bounded worker pool from the log stream and drops
    the newest notification when the backlog is full.
    """

    def __init__(self, deriver: AddressDeriver, enricher: MarketEnricher, scorer: ConfidenceScorer,
                 notifier: Notifier, threshold: int = DEFAULT_THRESHOLD,
                 max_concurrency: int = 16, backlog: int = 256):
        self.deriver = deriver
        self.enricher = enricher
        self.scorer = scorer
        self.notifier = notifier
        self.threshold = threshold
        self.max_concurrency = max(1, max_concurrency)
        self.backlog = max(1, backlog)
        self.stats = PipelineStats()

    @staticmethod
    def is_candidate(notification: LogNotification) -> bool:
        return not notification.has_error and is_creation_event(notification.logs)

    async def process(self, notification: LogNotification) -> PipelineResult:
        result = PipelineResult(signature=notification.signature)

        if not self.is_candidate(notification):
            return self._finish(result.advance(PipelineState.IGNORED))

        try:
            event = decode_creation_event(extract_payload(notification.logs))
        except MalformedPayload as e:
            logger.warning(f"[DROP] {notification.signature}: malformed creation payload: {e}")
            result.error = e
            return self._finish(result.advance(PipelineState.DROPPED))

        result.event = event
        result.advance(PipelineState.DECODED)
        result.advance(PipelineState.ENRICHING)

        derived, market, scored = await asyncio.gather(
            settle(self.deriver.derive(event.bonding_curve, event.mint)),
            settle(self.enricher.fetch(str(event.mint))),
            settle(self.scorer.score(event)),
        )

        if not derived.ok:
            logger.error(f"[DROP] {event.name}: address derivation failed: {derived.error}")
            result.error = derived.error
            return self._finish(result.advance(PipelineState.DROPPED))
        if not scored.ok:
            logger.error(f"[DROP] {event.name}: scoring failed: {scored.error!r}")
            result.error = scored.error
            return self._finish(result.advance(PipelineState.DROPPED))

        result.derived_address = derived.value[0]
        result.snapshot = market.value if market.ok else MarketSnapshot()
        result.score = scored.value.total
        result.advance(PipelineState.SCORED)

        if not passes_threshold(result.score, self.threshold):
            logger.info(f"Low confidence launch skipped: {event.name} ({result.score}/100)")
            return self._finish(result.advance(PipelineState.SUPPRESSED))

        result.message = format_creation_alert(
            event, result.derived_address, result.snapshot, result.score, notification.signature
        )
        result.advance(PipelineState.ALERTED)
        try:
            await self.notifier.send_message(result.message)
            result.delivered = True
            logger.info(f"Alert sent: {event.name} ({result.score}/100)")
        except NotificationDeliveryFailed as e:
            logger.error(f"[ALERT LOST] {event.name}: {e}")
            result.error = e
        return self._finish(result)

    def _finish(self, result: PipelineResult) -> PipelineResult:
        self.stats.record(result)
        return result

    def submit(self, queue: asyncio.Queue, notification: LogNotification) -> bool:
        if not self.is_candidate(notification):
            self.stats.counts[PipelineState.IGNORED] += 1
            return False
        try:
            queue.put_nowait(notification)
            return True
        except asyncio.QueueFull:
            self.stats.overflow += 1
            logger.warning(f"[OVERFLOW] Backlog full ({self.backlog}), dropping {notification.signature}")
            return False

    async def _worker(self, queue: asyncio.Queue):
        while True:
            notification = await queue.get()
            try:
                await self.process(notification)
            except Exception as e:
                logger.exception(f"Unexpected error processing {notification.signature}")
                result = PipelineResult(signature=notification.signature, error=e)
                self._finish(result.advance(PipelineState.DROPPED))
            finally:
                queue.task_done()

    async def run(self, stream: AsyncIterator[LogNotification]):
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.backlog)
        workers = [asyncio.create_task(self._worker(queue)) for _ in range(self.max_concurrency)]
        logger.info(f"Pipeline running with {self.max_concurrency} workers, backlog {self.backlog}")
        try:
            async for notification in stream:
                self.submit(queue, notification)
            await queue.join()
        finally:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

    async def report_once(self, push: bool = False) -> str:
        """Log the summary, optionally send it to the notifier, then reset the counters."""
        summary = self.stats.summary()
        logger.info(summary)
        if push:
            try:
                await self.notifier.send_message(summary)
            except NotificationDeliveryFailed as e:
                logger.error(f"[Visibility Summary Error] {e}")
        self.stats.reset()
        return summary

    async def report_stats(self, interval: float, push: bool = False):
        while True:
            await asyncio.sleep(interval)
            await self.report_once(push=push)
