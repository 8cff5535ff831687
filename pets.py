# pets.py
from dataclasses import dataclass

from dice import Dice

DNA_LENGTH  = 32
DNA_ALPHABET = "0123456789abcdef"
STAT_MIN, STAT_MAX = 1, 100

# ids of house-generated opponents; never accepted as an egg id
WILD_PREFIX = "wild:"

# DNA slice per stat, in order
_STAT_SLICES = (
    ("strength",     0,  8),
    ("speed",        8,  16),
    ("intelligence", 16, 24),
    ("endurance",    24, 32),
)


class InvalidPetError(ValueError):
    """A pet was built with missing or out-of-range stats."""


@dataclass(frozen=True)
class Stats:
    strength: int
    speed: int
    intelligence: int
    endurance: int

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name, _, _ in _STAT_SLICES}


@dataclass(frozen=True)
class Pet:
    id: str
    dna: str
    stats: Stats
    owner: str = ""
    nft_id: str = ""

    def __post_init__(self):
        if not isinstance(self.stats, Stats):
            raise InvalidPetError(f"pet {self.id!r}: stats missing")
        for name, value in self.stats.as_dict().items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidPetError(f"pet {self.id!r}: {name} is not an int")
            if not STAT_MIN <= value <= STAT_MAX:
                raise InvalidPetError(f"pet {self.id!r}: {name}={value} outside [{STAT_MIN}, {STAT_MAX}]")


# ---------- DNA ----------
def normalize_dna(dna: str | None) -> str:
    """Right-pad with '0' to 32 chars; anything past 32 is ignored."""
    return (dna or "")[:DNA_LENGTH].ljust(DNA_LENGTH, "0")

def _segment_to_stat(segment: str) -> int:
    return sum(ord(ch) for ch in segment) % 100 + 1

def derive_stats(dna: str | None) -> Stats:
    """
    Map DNA to a stat vector. Each stat reads its own 8-char slice:
    sum of character codes, mod 100, plus 1. Total over any string.
    """
    d = normalize_dna(dna)
    return Stats(**{name: _segment_to_stat(d[lo:hi]) for name, lo, hi in _STAT_SLICES})

def generate_random_dna(dice=None) -> str:
    dice = dice or Dice()
    return "".join(DNA_ALPHABET[dice.next_int(len(DNA_ALPHABET))] for _ in range(DNA_LENGTH))


# ---------- construction ----------
def new_pet_from_dna(pet_id: str, dna: str | None, owner: str = "", nft_id: str = "") -> Pet:
    d = normalize_dna(dna)
    return Pet(id=pet_id, dna=d, stats=derive_stats(d), owner=owner or "", nft_id=nft_id or "")

def pet_to_dict(pet: Pet) -> dict:
    return {
        "id": pet.id,
        "dna": pet.dna,
        "owner": pet.owner,
        "nft_id": pet.nft_id,
        "stats": pet.stats.as_dict(),
    }
