"""
Enemy moves and weighted move selection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, TYPE_CHECKING

from engine.core.numeric import finite_or
from engine.core.rng import RNG

if TYPE_CHECKING:
    from engine.resources.database import Database

logger = logging.getLogger(__name__)

ATTACK_KIND = "attack"


@dataclass(frozen=True)
class Move:
    """
    Static data for an enemy move.

    Only "attack" moves resolve damage; any other kind is reserved and
    produces an enemyMoveUnknown event.
    """
    id: str
    name: str
    kind: str = ATTACK_KIND
    power_multiplier: float = 1.0
    weight: float = 1.0

    @property
    def is_attack(self) -> bool:
        return self.kind == ATTACK_KIND

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Move:
        """Build a move from a content record, sanitising numbers."""
        move_id = str(data.get("id") or "unknown_move")
        power = finite_or(data.get("powerMultiplier", data.get("power_multiplier")), 1.0)
        weight = finite_or(data.get("weight"), 1.0)
        return cls(
            id=move_id,
            name=str(data.get("name") or move_id),
            kind=str(data.get("kind") or ATTACK_KIND),
            power_multiplier=power if power > 0 else 1.0,
            weight=weight if weight > 0 else 1.0,
        )


FALLBACK_MOVE = Move(id="attack", name="Attack", kind=ATTACK_KIND, power_multiplier=1.0, weight=1.0)

DEFAULT_MOVES: tuple[Move, ...] = (
    Move(id="basic_attack", name="Attack", power_multiplier=1.0, weight=70),
    Move(id="heavy_attack", name="Heavy Attack", power_multiplier=1.35, weight=25),
    Move(id="wild_swing", name="Wild Swing", power_multiplier=0.85, weight=35),
)


class MoveRegistry:
    """
    Moves by id.

    Usage:
        registry = MoveRegistry()           # default moves
        move = registry.pick(enemy.move_ids, rng)
    """

    def __init__(self, moves: Optional[Iterable[Move]] = None):
        self._moves: dict[str, Move] = {}
        for move in (DEFAULT_MOVES if moves is None else moves):
            self.register(move)

    @classmethod
    def from_database(cls, database: Database, include_defaults: bool = True) -> MoveRegistry:
        """Build a registry from the moves category of a content database."""
        registry = cls() if include_defaults else cls(moves=())
        for record in database.moves.values():
            registry.register(Move.from_dict(record))
        return registry

    def register(self, move: Move) -> None:
        if move.id in self._moves:
            logger.debug(f"Move {move.id} redefined")
        self._moves[move.id] = move

    def get(self, move_id: str) -> Optional[Move]:
        return self._moves.get(move_id)

    def __contains__(self, move_id: str) -> bool:
        return move_id in self._moves

    def __len__(self) -> int:
        return len(self._moves)

    def resolve(self, move_ids: Iterable[str]) -> list[Move]:
        """Look up a move pool, dropping unknown ids."""
        pool = []
        for move_id in move_ids or ():
            move = self._moves.get(move_id)
            if move is None:
                logger.warning(f"Unknown enemy move id: {move_id}")
                continue
            pool.append(move)
        return pool

    def pick(self, move_ids: Iterable[str], rng: RNG) -> Move:
        """
        Weighted random pick from an enemy's move pool.

        Falls back to a plain "Attack" (weight 1) when the pool is empty
        or every id is unknown.
        """
        pool = self.resolve(move_ids)
        if not pool:
            return FALLBACK_MOVE
        return pool[rng.weighted_index([move.weight for move in pool])]


DEFAULT_MOVE_REGISTRY = MoveRegistry()
