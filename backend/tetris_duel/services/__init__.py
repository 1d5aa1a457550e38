"""Game domain services: pieces, board engine, scoring, garbage and rooms.

This package contains pure domain logic that is driven by the session
layer and socket handlers, keeping transport concerns separated from core
game mechanics.
"""
