# ledger.py
# SPARK payouts and DNA anchoring on a Stellar-compatible Horizon.
# Everything here is optional: without issuer/distributor env the game runs
# off-chain and every call returns None.
import json, hashlib, logging, threading
import requests
from stellar_sdk import Server, Keypair, Asset, TransactionBuilder, exceptions as sx
from stellar_sdk.client.requests_client import RequestsClient

import config

log = logging.getLogger(__name__)

TESTNET_PASSPHRASE = "Test SDF Network ; September 2015"
TX_TIMEOUT_SECS = 180
MEMO_TEXT_MAX_BYTES = 28
DATA_NAME_MAX_BYTES = 64


class LedgerError(RuntimeError):
    def __init__(self, msg: str, codes=None):
        super().__init__(msg)
        self.codes = codes


# ---------- small helpers ----------
def _mask(k: str | None) -> str:
    if not k: return ""
    k = k.strip()
    if len(k) <= 8: return k[:1] + "…"
    return f"{k[:4]}…{k[-4:]}"

def _extract_result_codes(err):
    """
    Pull Horizon result codes off a stellar-sdk exception
    (extras/problem shapes vary slightly between versions).
    """
    ex = getattr(err, "extras", None)
    if not isinstance(ex, dict):
        problem = getattr(err, "problem", None)
        ex = (problem.get("extras") or problem) if isinstance(problem, dict) else None
    if isinstance(ex, dict):
        return ex.get("result_codes") or (ex.get("extras") or {}).get("result_codes")
    return None

def _trim_utf8(s: str, max_bytes: int) -> str:
    """Stellar limits memo text and data names in UTF-8 bytes; trim without splitting a character."""
    b = s.encode("utf-8")
    if len(b) <= max_bytes:
        return s
    return b[:max_bytes].decode("utf-8", errors="ignore")

def is_enabled() -> bool:
    return bool(config.SPARK_ISSUER_G and config.SPARK_DISTR_S)

# ---------- Horizon client (lazy: nothing touches the network at import) ----------
_state_lock = threading.Lock()
_server: Server | None = None
_passphrase: str | None = None

def _network_passphrase() -> str:
    if config.NETWORK_PASSPHRASE.lower() != "auto":
        return config.NETWORK_PASSPHRASE
    try:
        r = requests.get(config.HORIZON_URL, timeout=6)
        r.raise_for_status()
        return r.json().get("network_passphrase") or TESTNET_PASSPHRASE
    except (requests.RequestException, ValueError) as e:
        log.warning("PASSPHRASE_PROBE_FAIL %s: %s", type(e).__name__, e)
        return TESTNET_PASSPHRASE

def _horizon() -> tuple[Server, str]:
    global _server, _passphrase
    with _state_lock:
        if _server is None:
            _server = Server(config.HORIZON_URL, client=RequestsClient(num_retries=1, post_timeout=10))
            _passphrase = _network_passphrase()
            log.info("LEDGER_ENV_SUMMARY %s", json.dumps({
                "HORIZON_URL": config.HORIZON_URL,
                "PASSPHRASE_mode": "auto" if config.NETWORK_PASSPHRASE.lower() == "auto" else "explicit",
                "SPARK_CODE": config.SPARK_CODE,
                "SPARK_ISSUER_masked": _mask(config.SPARK_ISSUER_G),
            }))
        return _server, _passphrase

def _base_fee(server: Server) -> int:
    try:
        return max(100, int(server.fetch_base_fee()) * 5)
    except sx.SdkError:
        return 500

def spark_asset() -> Asset:
    return Asset(config.SPARK_CODE, config.SPARK_ISSUER_G)

# ---------- submit ----------
def _submit(build) -> str:
    """
    Load the distributor account, let `build(tb)` append ops/memo,
    sign and submit. Returns the tx hash.
    """
    server, pp = _horizon()
    try:
        kp = Keypair.from_secret(config.SPARK_DISTR_S)
        acc = server.load_account(kp.public_key)
        tb = TransactionBuilder(acc, pp, base_fee=_base_fee(server))
        tx = build(tb).set_timeout(TX_TIMEOUT_SECS).build()
        tx.sign(kp)
        res = server.submit_transaction(tx)
    except sx.SdkError as e:
        codes = _extract_result_codes(e)
        log.warning("LEDGER_SUBMIT_FAIL %s", json.dumps({"error": str(e), "codes": codes}, default=str))
        raise LedgerError(f"submit_failed:{type(e).__name__}", codes=codes) from e
    return res.get("hash")

def issue_spark(dest: str, amount: int, memo: str | None = None) -> str | None:
    if not is_enabled() or int(amount) <= 0:
        return None

    def _build(tb):
        tb = tb.append_payment_op(destination=dest, asset=spark_asset(), amount=str(int(amount)))
        if memo:
            tb = tb.add_text_memo(_trim_utf8(memo, MEMO_TEXT_MAX_BYTES))
        return tb

    tx_hash = _submit(_build)
    log.info("SPARK_ISSUED %s", json.dumps({"dest": _mask(dest), "amount": int(amount), "hash": tx_hash}))
    return tx_hash

def anchor_dna(nft_id: str, dna: str) -> str | None:
    """Store the DNA as account data keyed by NFT id, memo = sha256(dna)."""
    if not is_enabled():
        return None

    def _build(tb):
        return (tb.append_manage_data_op(data_name=_trim_utf8(f"dna:{nft_id}", DATA_NAME_MAX_BYTES), data_value=dna[:64])
                  .add_hash_memo(hashlib.sha256(dna.encode("utf-8")).digest()))

    tx_hash = _submit(_build)
    log.info("DNA_ANCHORED %s", json.dumps({"nft_id": nft_id, "hash": tx_hash}))
    return tx_hash
