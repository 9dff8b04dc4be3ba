"""
catmaze package root.

A first-person maze game core: a randomly carved maze, a wall collision field,
a player capsule and wandering monsters. Rendering and input devices live
outside the simulation and talk to it through ``catmaze.snapshot`` and
``catmaze.input``.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
