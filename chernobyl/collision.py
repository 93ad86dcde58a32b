"""Tile-map and box collision for a moving entity."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

TILE_SIZE = 32
MAP_WIDTH = 30
MAP_HEIGHT = 17

# 1 marks a solid tile, 0 an open one; rows are MAP_WIDTH tiles wide.
DEMO_TILEMAP: tuple[int, ...] = (
    1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 1, 1, 1, 1, 0, 0, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1,
    1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1,
)


@dataclass
class Vec2:
    """A two-dimensional vector."""

    x: float = 0.0
    y: float = 0.0


@dataclass
class Entity:
    """Something that moves across the tile map."""

    pos: Vec2
    speed: Vec2 = field(default_factory=Vec2)
    size_x: int = TILE_SIZE
    size_y: int = TILE_SIZE


@dataclass(frozen=True)
class TileBounds:
    """Pixel coordinates of the tile grid lines around a position."""

    left: int
    right: int
    top: int
    bottom: int


@dataclass(frozen=True)
class EdgeProbes:
    """Tile indices checked on each side of an entity."""

    top_left: int
    top_right: int
    bottom_left: int
    bottom_right: int
    left_top: int
    right_top: int
    left_bottom: int
    right_bottom: int


@dataclass(frozen=True)
class Box:
    """An axis-aligned rectangle given by its edges."""

    top: float
    bottom: float
    left: float
    right: float


def tile_bounds(x: float, y: float, tile_size: int = TILE_SIZE) -> TileBounds:
    """Snap a position down and up to the surrounding tile grid lines."""
    return TileBounds(
        left=int(math.floor(x / tile_size) * tile_size),
        right=int(math.ceil(x / tile_size) * tile_size),
        top=int(math.floor(y / tile_size) * tile_size),
        bottom=int(math.ceil(y / tile_size) * tile_size),
    )


def edge_probes(
    bounds: TileBounds, map_width: int = MAP_WIDTH, tile_size: int = TILE_SIZE
) -> EdgeProbes:
    """Indices of the tiles beside each edge of an entity at ``bounds``."""
    ts = tile_size
    left, right, top, bottom = bounds.left, bounds.right, bounds.top, bounds.bottom
    return EdgeProbes(
        top_left=(left - ts + top * map_width) // ts,
        top_right=(right + ts + top * map_width) // ts,
        bottom_left=(left - ts + bottom * map_width) // ts,
        bottom_right=(right + ts + bottom * map_width) // ts,
        left_top=(left + (top - ts) * map_width) // ts,
        right_top=(right + (top - ts) * map_width) // ts,
        left_bottom=(left + bottom * map_width) // ts + map_width,
        right_bottom=(right + bottom * map_width) // ts + map_width,
    )


def corner_probes(
    bounds: TileBounds, map_width: int = MAP_WIDTH, tile_size: int = TILE_SIZE
) -> tuple[int, int, int, int]:
    """Indices of the tiles under the four corners: top-left, top-right, bottom-left, bottom-right."""
    ts = tile_size
    return (
        (bounds.left + bounds.top * map_width) // ts,
        (bounds.right + bounds.top * map_width) // ts,
        (bounds.left + bounds.bottom * map_width) // ts,
        (bounds.right + bounds.bottom * map_width) // ts,
    )


def _solid(tilemap: Sequence[int], index: int) -> bool:
    """Tiles outside the map count as open."""
    return 0 <= index < len(tilemap) and tilemap[index] == 1


def resolve_tile_collision(
    entity: Entity, tilemap: Sequence[int], bounds: TileBounds, probes: EdgeProbes
) -> Vec2:
    """Stop the entity's motion into solid tiles; return and store the new speed."""
    x, y = entity.pos.x, entity.pos.y
    vx, vy = entity.speed.x, entity.speed.y

    if x in (bounds.left, bounds.right):
        if vx < 0 and (_solid(tilemap, probes.top_left) or _solid(tilemap, probes.bottom_left)):
            vx = 0
        if vx > 0 and (_solid(tilemap, probes.top_right) or _solid(tilemap, probes.bottom_right)):
            vx = 0

    if y in (bounds.top, bounds.bottom):
        if vy < 0 and (_solid(tilemap, probes.left_top) or _solid(tilemap, probes.right_top)):
            vy = 0
        if vy > 0 and (_solid(tilemap, probes.left_bottom) or _solid(tilemap, probes.right_bottom)):
            vy = 0

    if x == bounds.left:
        if y == bounds.top and vx < 0 and vy < 0 and _solid(tilemap, probes.left_top - 1):
            vx = vy = 0
        if y == bounds.bottom and vx < 0 and vy > 0 and _solid(tilemap, probes.left_bottom - 1):
            vx = vy = 0
    if x == bounds.right:
        if y == bounds.top and vx > 0 and vy < 0 and _solid(tilemap, probes.right_top + 1):
            vx = vy = 0
        if y == bounds.bottom and vx > 0 and vy > 0 and _solid(tilemap, probes.right_bottom + 1):
            vx = vy = 0

    entity.speed = Vec2(vx, vy)
    return entity.speed


def touches_solid(tilemap: Sequence[int], corners: Sequence[int]) -> bool:
    """Whether any of the given tile indices is solid."""
    return any(_solid(tilemap, index) for index in corners)


def speed_from_keys(
    up: bool, down: bool, left: bool, right: bool, step: float = TILE_SIZE // 4
) -> Vec2:
    """Speed for the held arrow keys; up beats down and left beats right."""
    if up:
        vy = -step
    elif down:
        vy = step
    else:
        vy = 0
    if left:
        vx = -step
    elif right:
        vx = step
    else:
        vx = 0
    return Vec2(vx, vy)


def block_motion(speed: Vec2, mover: Box, obstacle: Box) -> Vec2:
    """Zero the speed components that would carry ``mover`` into ``obstacle``.

    ``mover`` is the moving box already advanced by ``speed``.
    """
    vx, vy = speed.x, speed.y
    a, b = mover, obstacle
    if (
        a.bottom > b.top
        and (a.top < b.top or a.top < b.bottom)
        and a.right > b.left
        and a.left < b.right
    ):
        vy = 0
    if (
        a.right > b.left
        and (a.left < b.left or a.left < b.right)
        and a.bottom > b.top
        and a.top < b.bottom
    ):
        vx = 0
    return Vec2(vx, vy)