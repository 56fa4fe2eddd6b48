# Filename: address_deriver.py

import asyncio
import hashlib
import logging
from typing import Sequence, Tuple

from solders.pubkey import Pubkey

from errors import DerivationFailed

logger = logging.getLogger("AddressDeriver")

PDA_MARKER = b"ProgramDerivedAddress"
MAX_SEEDS = 16
MAX_SEED_LEN = 32


def create_program_address(seeds: Sequence[bytes], nonce: int, program_id: Pubkey) -> Pubkey:
    """Hash one candidate. Raises DerivationFailed when it lands on the curve."""
    hasher = hashlib.sha256()
    for seed in seeds:
        hasher.update(seed)
    hasher.update(bytes([nonce]))
    hasher.update(bytes(program_id))
    hasher.update(PDA_MARKER)
    candidate = Pubkey.from_bytes(hasher.digest())
    if candidate.is_on_curve():
        raise DerivationFailed("candidate is on curve", {"nonce": nonce})
    return candidate


def find_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Tuple[Pubkey, int]:
    if len(seeds) > MAX_SEEDS:
        raise DerivationFailed("too many seeds", {"count": len(seeds)})
    for seed in seeds:
        if len(seed) > MAX_SEED_LEN:
            raise DerivationFailed("seed too long", {"length": len(seed)})

    for nonce in range(255, -1, -1):
        try:
            return create_program_address(seeds, nonce, program_id), nonce
        except DerivationFailed:
            continue

    raise DerivationFailed("no off-curve address in 256 attempts", {"program": str(program_id)})


class AddressDeriver:
    """
    Locates the bonding curve's associated token account: the PDA of
    [bonding_curve, token_program, mint] under the associated-token program.
    """

    def __init__(self, token_program_id: Pubkey, associated_token_program_id: Pubkey):
        self.token_program_id = token_program_id
        self.associated_token_program_id = associated_token_program_id

    async def derive(self, bonding_curve: Pubkey, mint: Pubkey) -> Tuple[Pubkey, int]:
        seeds = [bytes(bonding_curve), bytes(self.token_program_id), bytes(mint)]
        # CPU-bound search, off the event loop
        address, nonce = await asyncio.to_thread(
            find_program_address, seeds, self.associated_token_program_id
        )
        logger.debug(f"[DERIVE] {mint} -> {address} (nonce {nonce})")
        return address, nonce
