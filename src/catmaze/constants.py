from typing import Tuple

# World geometry
CELL_SIZE: float = 4.0
WALL_HEIGHT: float = 3.0
# Inward shrink applied per side to wall boxes for collision only
WALL_CLEARANCE: float = 0.6

# Player
PLAYER_GROUND_HEIGHT: float = 1.6
PLAYER_SPEED: float = 4.0
PLAYER_RUN_MULTIPLIER: float = 1.8
PLAYER_YAW_SPEED: float = 1.6  # radians/sec
PLAYER_RADIUS: float = 0.4  # drawn size only; collision uses WALL_CLEARANCE
GRAVITY: float = -12.0
JUMP_SPEED: float = 6.0
MAX_HEALTH: int = 100

# Monsters
MONSTER_HEIGHT: float = 0.6
MONSTER_RADIUS: float = 0.5  # drawn size only
MONSTER_MIN_SPEED: float = 1.0
MONSTER_SPEED_SPREAD: float = 1.5
MONSTER_TURN_CHANCE: float = 0.01
MONSTER_CONTACT_DISTANCE: float = 1.0

# Target ("the cat")
TARGET_HEIGHT: float = 0.6
TARGET_FOUND_DISTANCE: float = 1.2

# Decorative pillars
PROP_COUNT: int = 10
PROP_MIN_SCALE: float = 0.6
PROP_SCALE_SPREAD: float = 0.8

# Simulation
MAX_STEP_SECONDS: float = 0.05

# Carving steps as (dx, dy); two cells so a wall always separates path cells
CARVE_STEPS: Tuple[Tuple[int, int], ...] = ((2, 0), (-2, 0), (0, 2), (0, -2))
ORTHOGONAL: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
