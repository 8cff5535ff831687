# config.py
import os
from dotenv import load_dotenv

load_dotenv()

# ---------------------------- env helpers ---------------------------------

def _clean(s: str | None) -> str | None:
    if s is None: return None
    return s.strip().replace("\n","").replace("\r","")

def _getenv(name: str, default: str | None = None, required: bool = False) -> str | None:
    v = os.getenv(name, default)
    v = _clean(v) if isinstance(v, str) else v
    if required and not v:
        raise RuntimeError(f"Missing required env var: {name}")
    return v

# --- Persistent locations (works on a host volume or locally) ---
DATA_ROOT       = _getenv("DATA_ROOT", "/var/data/sparkpets")
SQLITE_DB_PATH  = _getenv("SQLITE_DB_PATH", os.path.join(DATA_ROOT, "sparkpets.sqlite"))
BUSY_TIMEOUT_MS = int(_getenv("SQLITE_BUSY_TIMEOUT_MS", "3000") or "3000")

# --- Ledger (optional; game runs without it) ---
HORIZON_URL        = (_getenv("HORIZON_URL", "https://horizon-testnet.stellar.org") or "").rstrip("/")
NETWORK_PASSPHRASE = _getenv("NETWORK_PASSPHRASE", "auto") or "auto"
SPARK_CODE         = _getenv("SPARK_CODE", "SPARK") or "SPARK"
SPARK_ISSUER_G     = _getenv("SPARK_ISSUER_PUBLIC", "") or ""
SPARK_DISTR_S      = _getenv("SPARK_DISTR_SECRET", "") or ""

# --- Services ---
MATCHMAKER_PORT = int(_getenv("MATCHMAKER_PORT", "8080") or "8080")
ORACLE_PORT     = int(_getenv("ORACLE_PORT", "8081") or "8081")
LOG_LEVEL       = (_getenv("LOG_LEVEL", "INFO") or "INFO").upper()
