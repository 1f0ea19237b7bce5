"""
A small RPG that speaks JSON.

Advance inputs are `{"kind": <InputKind>, "payload": {...}}`:
- AddMonster    {"name": str, "hitPoints": int}   (game master only)
- AttackMonster {"monsterName": str, "damage": int} (anyone)

Every accepted advance and every inspect reports the game state as JSON.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Dict, Mapping, Optional

from ..core.dispatch import Application
from ..core.env import AdvanceEnv, InspectEnv
from ..core.errors import RollwalletError
from ..core.types import Address, Deposit, Metadata


class GameError(RollwalletError):
    pass


@unique
class InputKind(Enum):
    ADD_MONSTER = "AddMonster"
    ATTACK_MONSTER = "AttackMonster"


@dataclass
class Monster:
    name: str
    hit_points: int

    def to_json(self) -> Dict[str, Any]:
        return {"name": self.name, "hitPoints": self.hit_points}


def _require_str(obj: Mapping[str, Any], key: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str):
        raise GameError(f"{key} must be a string")
    return value


def _require_int(obj: Mapping[str, Any], key: str) -> int:
    value = obj.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise GameError(f"{key} must be an int")
    return value


class GameApplication(Application):
    def __init__(self, gm: Address) -> None:
        self.gm = gm
        self.monsters: Dict[str, Monster] = {}

    def advance(self, env: AdvanceEnv, metadata: Metadata, deposit: Optional[Deposit], payload: bytes) -> None:
        try:
            obj = json.loads(payload)
        except ValueError as exc:
            raise GameError(f"failed to unmarshal input: {exc}") from exc
        if not isinstance(obj, dict) or not isinstance(obj.get("payload"), dict):
            raise GameError("input must be an object with a payload object")
        try:
            kind = InputKind(obj.get("kind"))
        except ValueError as exc:
            raise GameError(f"invalid input kind: {obj.get('kind')}") from exc

        if kind is InputKind.ADD_MONSTER:
            self._add_monster(metadata, obj["payload"])
        else:
            self._attack_monster(obj["payload"])
        self.inspect(env, b"")

    def inspect(self, env: InspectEnv, payload: bytes) -> None:
        state = {"monsters": {name: m.to_json() for name, m in sorted(self.monsters.items())}}
        env.report(json.dumps(state, separators=(",", ":")).encode("utf-8"))

    def _add_monster(self, metadata: Metadata, payload: Mapping[str, Any]) -> None:
        if metadata.msg_sender != self.gm:
            raise GameError("only GM can add monsters")
        monster = Monster(name=_require_str(payload, "name"), hit_points=_require_int(payload, "hitPoints"))
        if monster.hit_points <= 0:
            raise GameError("hit points must be positive")
        if monster.name in self.monsters:
            raise GameError("monster with this name already exists")
        self.monsters[monster.name] = monster

    def _attack_monster(self, payload: Mapping[str, Any]) -> None:
        name = _require_str(payload, "monsterName")
        damage = _require_int(payload, "damage")
        if damage < 0:
            raise GameError("negative damage")
        monster = self.monsters.get(name)
        if monster is None:
            raise GameError("monster not found")
        monster.hit_points -= damage
        if monster.hit_points <= 0:
            # killed
            del self.monsters[name]
