# matchmaker_api.py
import json, logging
from flask import Blueprint, request, jsonify, abort, current_app

import db
import ledger
from arena import battle
from dice import Dice
from pets import WILD_PREFIX, generate_random_dna, new_pet_from_dna, pet_to_dict

bp_match = Blueprint("matchmaker", __name__)
log = logging.getLogger(__name__)

MAX_HISTORY = 200

def _dice():
    return current_app.config.get("GAME_DICE") or Dice()

def _wild_opponent(dice):
    dna = generate_random_dna(dice)
    return new_pet_from_dna(f"{WILD_PREFIX}{dna}", dna)

@bp_match.post("/match")
def match():
    j = request.get_json(silent=True) or {}
    address = (j.get("address") or "").strip()
    pet_id = (j.get("pet_id") or "").strip()
    if not address or not pet_id:
        abort(400, "address_and_pet_id_required")

    pet = db.load_pet(pet_id)
    if not pet:
        abort(404, "unknown_pet")
    if pet.owner and pet.owner != address:
        abort(403, "not_owner")

    dice = _dice()
    opponent = _wild_opponent(dice)
    result = battle(pet, opponent, dice)

    # challenger gets the reward either way; losing still pays the base amount
    out = {
        "victory": result.victory,
        "spark": result.reward,
        "rounds": result.rounds,
        "opponent": pet_to_dict(opponent),
    }
    tx_hash = None
    try:
        tx_hash = ledger.issue_spark(address, result.reward, memo=f"SPARK {pet.id}")
    except ledger.LedgerError:
        current_app.logger.exception("issue_spark failed")
        out["ledger_error"] = True
    if tx_hash:
        out["tx_hash"] = tx_hash

    out["battle_id"] = db.record_battle(result, pet.id, opponent, tx_hash)
    log.info("MATCH_RESOLVED %s", json.dumps({
        "battle_id": out["battle_id"], "pet_id": pet.id, "opponent_id": opponent.id,
        "victory": result.victory, "rounds": result.rounds, "spark": result.reward,
    }))
    return jsonify(out)

@bp_match.get("/battles")
def battle_history():
    pet_id = (request.args.get("pet_id") or "").strip()
    if not pet_id:
        abort(400, "pet_id_required")
    try:
        limit = int(request.args.get("limit") or 50)
    except ValueError:
        abort(400, "bad_limit")
    limit = max(1, min(limit, MAX_HISTORY))
    return jsonify({"items": db.battles_for_pet(pet_id, limit)})
