import math
from typing import Tuple

import pygame

import config
from trafficinfo.models import Aircraft, Exercise, LevelDirection, Position
from .colors import BLACK, CYAN, DARK_GREY, GREY, WHITE, AMBER

Point = Tuple[int, int]

RING_SPACING_NM = 5.0
HEADING_VECTOR_MIN = 1.0      # vector length: distance flown in this many minutes


def radar_geometry(screen) -> Tuple[Point, int]:
    """Radar centre and radius (px) inside the left part of the screen."""
    screen_w, screen_h = screen.get_size()
    radar_h = int(screen_h * 0.90)
    center = (int(screen_w * 0.35), radar_h // 2)
    radius = min(center) - 40
    return center, radius


def to_screen(pos: Position, center: Point, px_per_nm: float) -> Point:
    # +x right, +y up -> screen y inverted
    return (int(round(center[0] + pos.x * px_per_nm)),
            int(round(center[1] - pos.y * px_per_nm)))


def level_tag(ac: Aircraft) -> str:
    """Mode C style label: hundreds of feet, arrow for a cleared level change."""
    tag = f"{ac.level // 100:03d}"
    change = ac.level_change
    if change is not None:
        arrow = "v" if change.direction is LevelDirection.DESCEND else "^"
        tag += f"{arrow}{change.target_level // 100:03d}"
    return tag


def draw_scope(screen, font, center: Point, radius: int) -> None:
    cx, cy = center
    pygame.draw.circle(screen, BLACK, center, radius)
    pygame.draw.circle(screen, GREY, center, radius, 2)

    px_per_nm = radius / config.RADAR_RANGE_NM
    rings = int(config.RADAR_RANGE_NM // RING_SPACING_NM)
    for i in range(1, rings + 1):
        r = int(i * RING_SPACING_NM * px_per_nm)
        pygame.draw.circle(screen, DARK_GREY, center, r, 1)
        label = font.render(f"{i * RING_SPACING_NM:.0f}", True, DARK_GREY)
        screen.blit(label, (cx + 4, cy - r + 2))

    # compass ticks every 30 deg
    for deg in range(0, 360, 30):
        rad = math.radians(deg)
        r1 = radius - 10
        x1 = cx + r1 * math.sin(rad)
        y1 = cy - r1 * math.cos(rad)
        x2 = cx + radius * math.sin(rad)
        y2 = cy - radius * math.cos(rad)
        pygame.draw.line(screen, GREY, (x1, y1), (x2, y2), 1)


def draw_history(screen, ac: Aircraft, center: Point, px_per_nm: float, color) -> None:
    for pos in ac.history:
        pygame.draw.circle(screen, color, to_screen(pos, center, px_per_nm), 2)


def draw_heading_vector(screen, ac: Aircraft, center: Point, px_per_nm: float, color) -> None:
    length_nm = ac.speed * HEADING_VECTOR_MIN / 60.0
    rad = math.radians(ac.heading)
    tip = Position(ac.position.x + length_nm * math.sin(rad),
                   ac.position.y + length_nm * math.cos(rad))
    pygame.draw.line(screen, color, to_screen(ac.position, center, px_per_nm),
                     to_screen(tip, center, px_per_nm), 1)


def draw_target(screen, ac: Aircraft, center: Point) -> None:
    """Triangle at the scope centre, nose along the heading."""
    cx, cy = center
    rad = math.radians(ac.heading)
    pts = []
    for fwd, side in ((10.0, 0.0), (-8.0, -6.0), (-8.0, 6.0)):
        x = fwd * math.sin(rad) + side * math.cos(rad)
        y = fwd * math.cos(rad) - side * math.sin(rad)
        pts.append((cx + x, cy - y))
    pygame.draw.polygon(screen, WHITE, pts)


def draw_intruder(screen, font, ac: Aircraft, center: Point, px_per_nm: float) -> None:
    x, y = to_screen(ac.position, center, px_per_nm)
    size = 7
    pts = [(x, y - size), (x + size, y), (x, y + size), (x - size, y)]
    pygame.draw.polygon(screen, AMBER, pts)

    lines = (ac.callsign, f"{level_tag(ac)} {ac.speed:d}", ac.type.designator)
    for k, line in enumerate(lines):
        surf = font.render(line, True, AMBER)
        screen.blit(surf, (x + 10, y - 8 + 16 * k))


def draw_radar(screen, font, exercise: Exercise) -> None:
    """Scope, target at the centre, intruder with trail and vector. Read-only on the exercise."""
    center, radius = radar_geometry(screen)
    px_per_nm = radius / config.RADAR_RANGE_NM
    draw_scope(screen, font, center, radius)

    target, intruder = exercise.target, exercise.intruder
    draw_history(screen, target, center, px_per_nm, GREY)
    draw_heading_vector(screen, target, center, px_per_nm, CYAN)
    draw_target(screen, target, center)

    draw_history(screen, intruder, center, px_per_nm, GREY)
    draw_heading_vector(screen, intruder, center, px_per_nm, AMBER)
    draw_intruder(screen, font, intruder, center, px_per_nm)

    label = font.render(f"{config.RADAR_RANGE_NM:.0f} NM", True, WHITE)
    screen.blit(label, (center[0] - 20, center[1] - radius + 10))
