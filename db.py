import os, sqlite3, threading, time, logging

import config
from pets import Pet, new_pet_from_dna

log = logging.getLogger(__name__)

# --- Persistent location; tests point this at a temp file ---
DB_PATH = config.SQLITE_DB_PATH
BUSY_TIMEOUT_MS = config.BUSY_TIMEOUT_MS

_lock = threading.Lock()

def _now_i() -> int:
    return int(time.time())

def _ensure_dirs():
    d = os.path.dirname(DB_PATH)
    if d:
        os.makedirs(d, exist_ok=True)

def conn():
    _ensure_dirs()
    cx = sqlite3.connect(DB_PATH, check_same_thread=False, detect_types=sqlite3.PARSE_DECLTYPES)
    cx.row_factory = sqlite3.Row
    cx.execute("PRAGMA foreign_keys=ON;")
    cx.execute("PRAGMA journal_mode=WAL;")
    cx.execute("PRAGMA synchronous=NORMAL;")
    cx.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS};")
    return cx

def init_db():
    with _lock, conn() as cx:
        cx.executescript("""
        -- Eggs bought but not yet hatched
        CREATE TABLE IF NOT EXISTS eggs(
          id INTEGER PRIMARY KEY,
          address TEXT NOT NULL,
          nft_id TEXT UNIQUE,
          payment_tx TEXT,
          created_at INTEGER NOT NULL,
          hatched_at INTEGER
        );
        CREATE INDEX IF NOT EXISTS idx_eggs_address ON eggs(address);

        -- Hatched pets. DNA is the source of truth; stat columns are for queries only.
        CREATE TABLE IF NOT EXISTS pets(
          id TEXT PRIMARY KEY,
          dna TEXT NOT NULL,
          owner TEXT,
          nft_id TEXT,
          strength INTEGER,
          speed INTEGER,
          intelligence INTEGER,
          endurance INTEGER,
          created_at INTEGER NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_pets_owner ON pets(owner);

        CREATE TABLE IF NOT EXISTS battles(
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          challenger_id TEXT NOT NULL,
          opponent_id TEXT NOT NULL,
          opponent_dna TEXT,
          winner_id TEXT NOT NULL,
          victory INTEGER NOT NULL,
          reward INTEGER NOT NULL,
          rounds INTEGER NOT NULL,
          tx_hash TEXT,
          created_at INTEGER NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_battles_challenger ON battles(challenger_id);
        """)
    log.info("DB_READY %s", DB_PATH)

# ---------- eggs ----------
def record_egg(address: str, payment_tx: str | None, nft_id: str) -> int:
    with conn() as cx:
        cur = cx.execute(
            "INSERT INTO eggs(address, nft_id, payment_tx, created_at) VALUES(?,?,?,?)",
            (address, nft_id, payment_tx, _now_i())
        )
        return int(cur.lastrowid)

def load_egg(nft_id: str) -> dict | None:
    with conn() as cx:
        r = cx.execute(
            "SELECT id, address, nft_id, payment_tx, created_at, hatched_at FROM eggs WHERE nft_id=?",
            (nft_id,)
        ).fetchone()
    return dict(r) if r else None

def mark_egg_hatched(nft_id: str) -> None:
    with conn() as cx:
        cx.execute("UPDATE eggs SET hatched_at=? WHERE nft_id=? AND hatched_at IS NULL", (_now_i(), nft_id))

# ---------- pets ----------
def save_pet(pet: Pet) -> bool:
    """Insert once; an existing row (DNA and owner) is never overwritten. True if inserted."""
    s = pet.stats
    with conn() as cx:
        cur = cx.execute("""
          INSERT INTO pets(id, dna, owner, nft_id, strength, speed, intelligence, endurance, created_at)
          VALUES(?,?,?,?,?,?,?,?,?)
          ON CONFLICT(id) DO NOTHING
        """, (pet.id, pet.dna, pet.owner, pet.nft_id,
              s.strength, s.speed, s.intelligence, s.endurance, _now_i()))
        return cur.rowcount == 1

def _row_to_pet(r: sqlite3.Row) -> Pet:
    return new_pet_from_dna(r["id"], r["dna"], owner=r["owner"] or "", nft_id=r["nft_id"] or "")

def load_pet(pet_id: str) -> Pet | None:
    with conn() as cx:
        r = cx.execute("SELECT id, dna, owner, nft_id FROM pets WHERE id=?", (pet_id,)).fetchone()
    return _row_to_pet(r) if r else None

def pets_for_owner(owner: str, limit: int = 200) -> list[Pet]:
    with conn() as cx:
        rows = cx.execute(
            "SELECT id, dna, owner, nft_id FROM pets WHERE owner=? ORDER BY created_at DESC, id LIMIT ?",
            (owner, int(limit))
        ).fetchall()
    return [_row_to_pet(r) for r in rows]

# ---------- battles ----------
def record_battle(result, challenger_id: str, opponent: Pet, tx_hash: str | None = None) -> int:
    with conn() as cx:
        cur = cx.execute("""
          INSERT INTO battles(challenger_id, opponent_id, opponent_dna, winner_id,
                              victory, reward, rounds, tx_hash, created_at)
          VALUES(?,?,?,?,?,?,?,?,?)
        """, (challenger_id, opponent.id, opponent.dna, result.winner.id,
              1 if result.victory else 0, int(result.reward), int(result.rounds), tx_hash, _now_i()))
        return int(cur.lastrowid)

def battles_for_pet(pet_id: str, limit: int = 50) -> list[dict]:
    with conn() as cx:
        rows = cx.execute("""
          SELECT id, challenger_id, opponent_id, opponent_dna, winner_id, victory, reward, rounds, tx_hash, created_at
          FROM battles
          WHERE challenger_id=? OR opponent_id=?
          ORDER BY id DESC LIMIT ?
        """, (pet_id, pet_id, int(limit))).fetchall()
    out = []
    for r in rows:
        d = dict(r)
        d["victory"] = bool(d["victory"])
        out.append(d)
    return out
