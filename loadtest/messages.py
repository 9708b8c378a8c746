from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union
import json
import random

# Per-tick probabilities for the boolean controls
JUMP_PROBABILITY = 0.02
BOOST_PROBABILITY = 0.05


class MessageType(str, Enum):
    """Client -> server message types understood by the game endpoint."""

    JOIN = "join"      # sent once, right after the connection opens
    INPUT = "input"    # sent every tick while the connection is open


def _dumps(data: Dict[str, Any]) -> str:
    # Compact, keys in wire order ("type" first)
    return json.dumps(data, separators=(',', ':'))


@dataclass
class JoinMessage:
    """
    Identifies a simulated client to the game server:
    {"type": "join", "name": "bot<index>"}
    """
    name: str

    @property
    def type(self) -> MessageType:
        return MessageType.JOIN

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type.value, 'name': self.name}

    def to_json(self) -> str:
        return _dumps(self.to_dict())


@dataclass
class InputMessage:
    """
    One tick of player controls:
    {"type": "input", "seq": int, "throttle": float, "steer": float, "jump": bool, "boost": bool}

    throttle and steer lie in [-1, 1]; seq starts at 1 for every connection.
    """
    seq: int
    throttle: float
    steer: float
    jump: bool
    boost: bool

    @property
    def type(self) -> MessageType:
        return MessageType.INPUT

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'seq': self.seq,
            'throttle': self.throttle,
            'steer': self.steer,
            'jump': self.jump,
            'boost': self.boost,
        }

    def to_json(self) -> str:
        return _dumps(self.to_dict())


Message = Union[JoinMessage, InputMessage]


def random_input(seq: int, rng: Optional[random.Random] = None) -> InputMessage:
    """Sample fresh controls for tick `seq`."""
    rng = rng or random
    return InputMessage(
        seq=seq,
        throttle=rng.uniform(-1.0, 1.0),
        steer=rng.uniform(-1.0, 1.0),
        jump=rng.random() < JUMP_PROBABILITY,
        boost=rng.random() < BOOST_PROBABILITY,
    )
