"""A small multiplayer typing game lobby with hosting and joining over TCP."""

__version__ = "0.1.0"