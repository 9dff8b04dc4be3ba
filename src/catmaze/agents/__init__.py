"""Simulated agents: the player, wandering monsters and the cat."""

from .player import Player, PlayerController, VerticalState
from .monster import Monster, MonsterAI
from .target import Target

__all__ = [
    "Player",
    "PlayerController",
    "VerticalState",
    "Monster",
    "MonsterAI",
    "Target",
]
