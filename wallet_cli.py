from __future__ import annotations

import argparse
import logging
from typing import Dict, List

from rich.console import Console

import config
from solana_balance_provider import aggregate
from solana_rpc import InvalidAddressError, InvalidEndpointError
from token_registry import DEFAULT_MINTS, NATIVE_SYMBOL, TOKENS, decimals_for_mint, symbol_for_mint


SOL_DECIMALS_SHOWN = 9
TOKEN_DECIMALS_SHOWN = 6          # mints missing from the registry

console = Console(highlight=False)


def display_asset(key: str) -> str:
    """
    Convert balance keys into human-friendly labels.
    """
    if key == NATIVE_SYMBOL:
        return NATIVE_SYMBOL

    symbol = symbol_for_mint(key)
    if symbol:
        return symbol

    # fallback: shorten mint
    return key[:8] + "..."


def json_key(key: str) -> str:
    if key == NATIVE_SYMBOL:
        return NATIVE_SYMBOL
    return symbol_for_mint(key) or key


def format_balance_lines(balances: Dict[str, float]) -> List[str]:
    lines = []
    for key, amount in balances.items():
        if key == NATIVE_SYMBOL:
            lines.append(f"{NATIVE_SYMBOL}:  {amount:.{SOL_DECIMALS_SHOWN}f}")
        else:
            shown = decimals_for_mint(key, TOKEN_DECIMALS_SHOWN)
            lines.append(f"{display_asset(key)}: {amount:.{shown}f}")
    return lines


def balances_payload(balances: Dict[str, float]) -> Dict[str, float]:
    out: Dict[str, float] = {NATIVE_SYMBOL: balances.get(NATIVE_SYMBOL, 0.0)}
    for key, amount in balances.items():
        if key == NATIVE_SYMBOL:
            continue
        out[json_key(key)] = amount
    return out


def mainnet_only_misses(balances: Dict[str, float], rpc_url: str) -> List[str]:
    """Registry tokens that read 0 against an endpoint that is not mainnet."""
    if "mainnet" in rpc_url:
        return []
    return [display_asset(k) for k, amt in balances.items() if k in TOKENS and amt == 0]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Show SOL and SPL token balances of a Solana wallet")
    p.add_argument("wallet", help="Wallet address (base58)")
    p.add_argument(
        "mints",
        nargs="*",
        help="Token mint addresses to query (default: USDC and USDT)",
    )
    p.add_argument("--rpc-url", default=config.SOLANA_RPC_URL, help="RPC endpoint (default: $SOLANA_RPC_URL or mainnet-beta)")
    p.add_argument("--timeout", type=float, default=config.SOLANA_RPC_TIMEOUT, help="Per-request timeout in seconds")
    p.add_argument("--commitment", default=config.SOLANA_COMMITMENT, help="Commitment level (default: confirmed)")
    p.add_argument("--json-only", action="store_true", help="Only print the JSON section")
    p.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level (default: $LOG_LEVEL or WARNING)")
    return p


def main(argv: List[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    mints = args.mints if args.mints else list(DEFAULT_MINTS)

    try:
        balances = aggregate(
            args.wallet,
            mints,
            args.rpc_url,
            timeout=args.timeout,
            commitment=args.commitment,
        )
    except (InvalidAddressError, InvalidEndpointError) as e:
        raise SystemExit(f"Error: {e}")

    if not args.json_only:
        console.print("\n[bold]=== Wallet Balances ===[/bold]")
        for line in format_balance_lines(balances):
            console.print(line)

        misses = mainnet_only_misses(balances, args.rpc_url)
        if misses:
            console.print(f"[yellow]Note: {', '.join(misses)} are mainnet tokens. Use a mainnet RPC to query them.[/yellow]")

        console.print("\n[bold]=== JSON Format ===[/bold]")

    console.print_json(data=balances_payload(balances), indent=2)


if __name__ == "__main__":
    main()
