# oracle_api.py
# Egg mint bookkeeping and hatching (DNA assignment).
import json, sqlite3, time, uuid, logging
from flask import Blueprint, request, jsonify, abort, current_app

import db
import ledger
from dice import Dice
from pets import WILD_PREFIX, generate_random_dna, new_pet_from_dna, pet_to_dict

bp_oracle = Blueprint("oracle", __name__)
log = logging.getLogger(__name__)

def _dice():
    return current_app.config.get("GAME_DICE") or Dice()

def _new_egg_code() -> str:
    short = hex(int(time.time()))[2:].upper()[-6:]
    return f"EGG{short}{uuid.uuid4().hex[:6].upper()}"

@bp_oracle.post("/mint")
def mint_egg():
    """
    Records a bought egg. The payment tx is stored as given; checking it
    against the ledger is out of scope here.
    """
    j = request.get_json(silent=True) or {}
    address = (j.get("address") or "").strip()
    payment_tx = (j.get("payment_tx") or "").strip() or None
    nft_id = (j.get("nft_id") or "").strip() or _new_egg_code()
    if not address:
        abort(400, "address_required")
    if nft_id.lower().startswith(WILD_PREFIX):
        abort(400, "reserved_nft_id")

    try:
        egg_id = db.record_egg(address, payment_tx, nft_id)
    except sqlite3.IntegrityError:
        abort(409, "egg_exists")

    log.info("EGG_MINTED %s", json.dumps({"egg_id": egg_id, "nft_id": nft_id}))
    return jsonify({"success": True, "egg_id": egg_id, "nft_id": nft_id})

def _already_hatched(pet, address):
    if pet.owner and pet.owner != address:
        abort(403, "not_owner")
    return jsonify({"dna": pet.dna, "pet_id": pet.id, "stats": pet.stats.as_dict()})

@bp_oracle.post("/hatch")
def hatch_egg():
    j = request.get_json(silent=True) or {}
    address = (j.get("address") or "").strip()
    nft_id = (j.get("nft_id") or "").strip()
    if not address or not nft_id:
        abort(400, "address_and_nft_id_required")

    egg = db.load_egg(nft_id)
    if not egg:
        abort(404, "unknown_egg")
    if egg["address"] != address:
        abort(403, "not_owner")

    existing = db.load_pet(nft_id)
    if existing:
        return _already_hatched(existing, address)

    pet = new_pet_from_dna(nft_id, generate_random_dna(_dice()), owner=address, nft_id=nft_id)
    if not db.save_pet(pet):
        # lost a concurrent hatch; the stored DNA wins
        return _already_hatched(db.load_pet(nft_id), address)
    db.mark_egg_hatched(nft_id)
    log.info("PET_HATCHED %s", json.dumps({"pet_id": pet.id, "stats": pet.stats.as_dict()}))

    out = {"dna": pet.dna, "pet_id": pet.id, "stats": pet.stats.as_dict()}
    try:
        tx_hash = ledger.anchor_dna(nft_id, pet.dna)
    except ledger.LedgerError:
        current_app.logger.exception("anchor_dna failed")
        out["ledger_error"] = True
    else:
        if tx_hash:
            out["tx_hash"] = tx_hash
    return jsonify(out)

@bp_oracle.get("/pets/<pet_id>")
def pet_detail(pet_id):
    pet = db.load_pet(pet_id)
    if not pet:
        abort(404, "not_found")
    return jsonify(pet_to_dict(pet))

@bp_oracle.get("/pets")
def pets_mine():
    owner = (request.args.get("owner") or "").strip()
    if not owner:
        abort(400, "owner_required")
    return jsonify({"items": [pet_to_dict(p) for p in db.pets_for_owner(owner)]})
