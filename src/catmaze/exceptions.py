class CatMazeError(Exception):
    """Base exception for the catmaze project."""


class MazeGenerationError(CatMazeError, ValueError):
    """Raised when a maze cannot be generated (e.g., even or too small size)."""


class ConfigError(CatMazeError, ValueError):
    """Raised for unknown difficulties or malformed preset/settings data."""
