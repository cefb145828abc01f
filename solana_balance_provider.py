from __future__ import annotations

import logging
from typing import Dict, Iterable, List

import requests

from solana_rpc import (
    DEFAULT_COMMITMENT,
    DEFAULT_SOLANA_RPC_URL,
    DEFAULT_TIMEOUT,
    InvalidAddressError,
    MintNotFoundError,
    SolanaRpcError,
    get_sol_balance_lamports,
    get_token_accounts_by_mint,
    validate_address,
    validate_rpc_url,
)
from token_registry import LAMPORTS_PER_SOL, NATIVE_MINT, NATIVE_SYMBOL


log = logging.getLogger(__name__)

# failures that cost one entry its balance, never the whole query
LOOKUP_ERRORS = (SolanaRpcError, requests.RequestException, InvalidAddressError)


def fetch_native(
    wallet: str,
    rpc_url: str = DEFAULT_SOLANA_RPC_URL,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    commitment: str = DEFAULT_COMMITMENT,
) -> float:
    """SOL balance of `wallet`. An account that does not exist on-chain holds 0."""
    lamports = get_sol_balance_lamports(wallet, rpc_url, timeout=timeout, commitment=commitment)
    return lamports / LAMPORTS_PER_SOL


def fetch_token(
    wallet: str,
    mint: str,
    rpc_url: str = DEFAULT_SOLANA_RPC_URL,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    commitment: str = DEFAULT_COMMITMENT,
) -> float:
    """
    Balance of `mint` held by `wallet`, summed over all of its token accounts.

    A mint that does not exist on the queried cluster (e.g. a mainnet token on
    devnet) reads as 0. Any other failure is logged and also reads as 0.
    """
    try:
        query_mint = validate_address(mint)
        accounts = get_token_accounts_by_mint(wallet, query_mint, rpc_url, timeout=timeout, commitment=commitment)
        total = 0.0
        for acct in accounts:
            total += acct.ui_amount
    except MintNotFoundError:
        log.debug("mint %s does not exist on %s, balance is 0", mint, rpc_url)
        return 0.0
    except LOOKUP_ERRORS as e:
        log.error("Error fetching token balance for mint %s: %s", mint, e)
        return 0.0

    return total


def _unique_mints(mints: Iterable[str]) -> List[str]:
    out: List[str] = []
    for m in mints:
        if m == NATIVE_MINT:
            log.debug("ignoring %r in mint list, native balance is always included", m)
            continue
        if m in out:
            continue
        out.append(m)
    return out


def aggregate(
    wallet: str,
    mints: Iterable[str] = (),
    rpc_url: str = DEFAULT_SOLANA_RPC_URL,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    commitment: str = DEFAULT_COMMITMENT,
) -> Dict[str, float]:
    """
    Returns {"SOL": <sol>, <mint>: <amount>, ...}, native first, then mints in
    the order requested (duplicates collapsed).

    Every requested mint gets an entry. A failed lookup shows up as 0 and does
    not stop the remaining ones. Only a malformed wallet address or RPC URL
    raises, since then nothing can be resolved.
    """
    wallet = validate_address(wallet)
    validate_rpc_url(rpc_url)

    out: Dict[str, float] = {}

    try:
        out[NATIVE_SYMBOL] = fetch_native(wallet, rpc_url, timeout=timeout, commitment=commitment)
    except LOOKUP_ERRORS as e:
        log.error("Error fetching SOL balance: %s", e)
        out[NATIVE_SYMBOL] = 0.0

    for mint in _unique_mints(mints):
        out[mint] = fetch_token(wallet, mint, rpc_url, timeout=timeout, commitment=commitment)

    return out

