# Filename: reputation.py

from solana.rpc.async_api import AsyncClient
from solders.pubkey import Pubkey
from loguru import logger

from errors import ReputationLookupFailed

LAMPORTS_PER_SOL = 1_000_000_000


class ReputationChecker:
    """Creator holding at least 1 SOL counts as reputable (weak proxy for stake)."""

    def __init__(self, client: AsyncClient, min_lamports: int = LAMPORTS_PER_SOL):
        self.client = client
        self.min_lamports = min_lamports

    async def get_balance(self, creator: Pubkey) -> int:
        try:
            resp = await self.client.get_balance(creator)
        except Exception as e:
            raise ReputationLookupFailed("balance lookup failed", {"creator": str(creator), "error": e}) from e

        value = getattr(resp, "value", None)
        if not isinstance(value, int) or isinstance(value, bool):
            raise ReputationLookupFailed("balance response invalid", {"creator": str(creator)})
        return value

    async def is_reputable(self, creator: Pubkey) -> bool:
        balance = await self.get_balance(creator)
        reputable = balance >= self.min_lamports
        logger.debug(f"[REPUTATION] {creator}: {balance / LAMPORTS_PER_SOL:.3f} SOL -> {'reputable' if reputable else 'unknown'}")
        return reputable
