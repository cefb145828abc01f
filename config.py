"""
Runtime settings, read from the environment (and a local .env file if present).
"""

import os
from dotenv import load_dotenv

load_dotenv()

# ── RPC ───────────────────────────────────────────────────────────────────────
SOLANA_RPC_URL: str = os.getenv("SOLANA_RPC_URL", "https://api.mainnet-beta.solana.com")
SOLANA_RPC_TIMEOUT: float = float(os.getenv("SOLANA_RPC_TIMEOUT", "20"))
SOLANA_COMMITMENT: str = os.getenv("SOLANA_COMMITMENT", "confirmed")

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()
