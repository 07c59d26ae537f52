"""
Spit - Card game engine with a timer-driven AI opponent.

A deterministic rules engine for the two-player card game Spit,
one human against one scripted opponent. The engine provides:
- Deck setup and the triangular layout deal
- Move legality and turn resolution
- A greedy AI policy driven by an explicit tick
- A thin HTTP adapter for browser front ends
"""

__version__ = "0.1.0"
