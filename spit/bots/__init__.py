"""
Bots module - AI opponent implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- BotDecision: What a bot chose and why
- GreedyPolicy: The scripted Spit opponent
"""

from .policy import BotPolicy, BotDecision, GreedyPolicy

__all__ = [
    "BotPolicy",
    "BotDecision",
    "GreedyPolicy",
]
