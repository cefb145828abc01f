from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import base58
import requests


DEFAULT_SOLANA_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_TIMEOUT = 20
DEFAULT_COMMITMENT = "confirmed"

PUBKEY_LENGTH = 32
MAX_TOKEN_DECIMALS = 255
JSONRPC_INVALID_PARAMS = -32602
MINT_UNPACK_MARKER = "could not be unpacked"


class SolanaRpcError(RuntimeError):
    """Raised when the RPC node answers with a JSON-RPC error payload."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"Solana RPC error {self.code}: {self.message}"


class MintNotFoundError(SolanaRpcError):
    """The mint account does not exist (or is not a mint) on the queried cluster."""


class MalformedResponseError(SolanaRpcError):
    """The node answered, but not in a shape we understand."""


class InvalidAddressError(ValueError):
    pass


class InvalidEndpointError(ValueError):
    pass


@dataclass(frozen=True)
class TokenAccountAmount:
    pubkey: str
    amount_raw: int           # integer base units (no decimals applied)
    decimals: int

    @property
    def ui_amount(self) -> float:
        return self.amount_raw / 10 ** self.decimals


def validate_address(address: str) -> str:
    """
    Check that `address` is a base58 string decoding to a 32-byte public key.
    Does not check that the key is on the curve.
    """
    if not isinstance(address, str) or not address.strip():
        raise InvalidAddressError("address is empty")
    address = address.strip()
    try:
        raw = base58.b58decode(address)
    except ValueError as e:
        raise InvalidAddressError(f"{address!r} is not valid base58: {e}") from e
    if len(raw) != PUBKEY_LENGTH:
        raise InvalidAddressError(f"{address!r} decodes to {len(raw)} bytes, expected {PUBKEY_LENGTH}")
    return address


def validate_rpc_url(rpc_url: str) -> str:
    parsed = urlparse(rpc_url or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidEndpointError(f"not an http(s) RPC URL: {rpc_url!r}")
    return rpc_url


def classify_rpc_error(error: Any) -> SolanaRpcError:
    """
    Map a JSON-RPC error payload to a typed exception.

    The node has no dedicated error code for "mint missing on this cluster"; it
    reports it as invalid params ("Token mint could not be unpacked"). This is
    the only place the server message is inspected.
    """
    if not isinstance(error, dict):
        return SolanaRpcError(str(error))

    code = error.get("code")
    message = str(error.get("message", ""))
    data = error.get("data")

    if MINT_UNPACK_MARKER in message.lower():
        return MintNotFoundError(message, code=code, data=data)
    return SolanaRpcError(message, code=code, data=data)


def _rpc_call(rpc_url: str, method: str, params: List[Any], timeout: float = DEFAULT_TIMEOUT) -> Any:
    payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
    r = requests.post(rpc_url, json=payload, timeout=timeout)
    r.raise_for_status()
    try:
        data = r.json()
    except ValueError as e:
        raise MalformedResponseError(f"{method}: response is not JSON") from e
    if not isinstance(data, dict):
        raise MalformedResponseError(f"{method}: unexpected response {data!r}")
    if data.get("error") is not None:
        raise classify_rpc_error(data["error"])
    if "result" not in data:
        raise MalformedResponseError(f"{method}: response has no result")
    return data["result"]


def get_sol_balance_lamports(
    address: str,
    rpc_url: str = DEFAULT_SOLANA_RPC_URL,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    commitment: str = DEFAULT_COMMITMENT,
) -> int:
    """
    Returns SOL balance in lamports (1 SOL = 1_000_000_000 lamports).
    An account that was never funded reports 0.
    """
    res = _rpc_call(rpc_url, "getBalance", [address, {"commitment": commitment}], timeout=timeout)
    if not isinstance(res, dict):
        raise MalformedResponseError(f"getBalance: unexpected result {res!r}")
    value = res.get("value")
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"getBalance: bad value {value!r}") from e


def _parse_token_account(item: Dict[str, Any]) -> TokenAccountAmount:
    try:
        info = item["account"]["data"]["parsed"]["info"]
        tok = info["tokenAmount"]
        acct = TokenAccountAmount(
            pubkey=str(item.get("pubkey", "")),
            amount_raw=int(tok["amount"]),
            decimals=int(tok["decimals"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponseError(f"getTokenAccountsByOwner: unparseable account {item!r}") from e

    # SPL decimals is a u8
    if acct.amount_raw < 0 or not 0 <= acct.decimals <= MAX_TOKEN_DECIMALS:
        raise MalformedResponseError(f"getTokenAccountsByOwner: amount or decimals out of range in {item!r}")
    try:
        acct.ui_amount
    except OverflowError as e:
        raise MalformedResponseError(f"getTokenAccountsByOwner: amount too large in {item!r}") from e
    return acct


def get_token_accounts_by_mint(
    owner: str,
    mint: str,
    rpc_url: str = DEFAULT_SOLANA_RPC_URL,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    commitment: str = DEFAULT_COMMITMENT,
) -> List[TokenAccountAmount]:
    """
    Returns every token account of `mint` owned by `owner` (getTokenAccountsByOwner).

    A wallet can have more than one token account for the same mint, so the
    result is a list; empty when the wallet holds none.
    """
    res = _rpc_call(
        rpc_url,
        "getTokenAccountsByOwner",
        [
            owner,
            {"mint": mint},
            {"encoding": "jsonParsed", "commitment": commitment},
        ],
        timeout=timeout,
    )
    if not isinstance(res, dict) or not isinstance(res.get("value", []), list):
        raise MalformedResponseError(f"getTokenAccountsByOwner: unexpected result {res!r}")

    return [_parse_token_account(item) for item in res.get("value", [])]
