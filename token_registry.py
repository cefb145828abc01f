from __future__ import annotations

from typing import Dict, List, Optional


NATIVE_SYMBOL = "SOL"
NATIVE_MINT = "native"          # sentinel for the chain's base currency
LAMPORTS_PER_SOL = 1_000_000_000

USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDT_MINT = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"

# mint -> display metadata (mainnet mints; they do not exist on devnet/testnet)
TOKENS: Dict[str, Dict[str, object]] = {
    USDC_MINT: {"symbol": "USDC", "decimals": 6},
    USDT_MINT: {"symbol": "USDT", "decimals": 6},
}

DEFAULT_MINTS: List[str] = [USDC_MINT, USDT_MINT]


def symbol_for_mint(mint: str) -> Optional[str]:
    meta = TOKENS.get(mint)
    if meta and meta.get("symbol"):
        return str(meta["symbol"])
    return None


def decimals_for_mint(mint: str, default: int) -> int:
    meta = TOKENS.get(mint)
    if meta and meta.get("decimals") is not None:
        return int(meta["decimals"])
    return default
