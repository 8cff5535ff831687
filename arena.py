# arena.py
from dataclasses import dataclass

from dice import Dice
from pets import Pet

BASE_HP      = 100
ROUND_CAP    = 20
BASE_REWARD  = 10
ATTACK_ROLL  = 20   # attack adds next_int(20)
DEFENSE_ROLL = 10   # defense adds next_int(10)


@dataclass(frozen=True)
class BattleResult:
    winner: Pet
    loser: Pet
    victory: bool       # challenger's point of view
    reward: int         # SPARK
    rounds: int
    challenger_hp: int
    opponent_hp: int

    def as_dict(self) -> dict:
        return {
            "winner_id": self.winner.id,
            "loser_id": self.loser.id,
            "victory": self.victory,
            "reward": self.reward,
            "rounds": self.rounds,
            "challenger_hp": self.challenger_hp,
            "opponent_hp": self.opponent_hp,
        }


def _strike(attacker: Pet, defender: Pet, dice) -> int:
    attack  = attacker.stats.strength + dice.next_int(ATTACK_ROLL)
    defense = defender.stats.speed // 2 + dice.next_int(DEFENSE_ROLL)
    return max(1, attack - defense)

def battle(challenger: Pet, opponent: Pet, dice=None) -> BattleResult:
    """
    Turn-based fight, challenger strikes first each round.

    A blow that drops the opponent to 0 ends the fight before the counter
    attack, and that round is not counted. The loop stops after ROUND_CAP
    full rounds. Victory goes to whoever has more HP left; ties go to the
    opponent. Reward is BASE_REWARD, plus (ROUND_CAP - rounds) and
    intelligence // 10 when the challenger wins.
    """
    dice = dice or Dice()
    challenger_hp = BASE_HP + challenger.stats.endurance
    opponent_hp   = BASE_HP + opponent.stats.endurance

    rounds = 0
    while challenger_hp > 0 and opponent_hp > 0 and rounds < ROUND_CAP:
        opponent_hp -= _strike(challenger, opponent, dice)
        if opponent_hp <= 0:
            break
        challenger_hp -= _strike(opponent, challenger, dice)
        rounds += 1

    victory = challenger_hp > opponent_hp
    reward = BASE_REWARD
    if victory:
        reward += (ROUND_CAP - rounds) + challenger.stats.intelligence // 10

    winner, loser = (challenger, opponent) if victory else (opponent, challenger)
    return BattleResult(
        winner=winner,
        loser=loser,
        victory=victory,
        reward=reward,
        rounds=rounds,
        challenger_hp=challenger_hp,
        opponent_hp=opponent_hp,
    )
