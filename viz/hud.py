import textwrap
from typing import Optional

import pygame

from trafficinfo.models import Exercise
from .colors import AMBER, CYAN, GREEN, WHITE
from .radar_display import level_tag


def draw_hud(screen, font, exercise: Exercise, index: int = 1,
             show_solution: bool = False, status: Optional[str] = None):
    """Side HUD panel: exercise data, controls, and the solution when revealed."""
    screen_w, screen_h = screen.get_size()
    panel_w = int(screen_w * 0.30)
    panel_x = screen_w - panel_w
    margin_x, margin_y = 12, 10
    line_spacing = 20

    # translucent panel
    hud_surface = pygame.Surface((panel_w, screen_h), pygame.SRCALPHA)
    hud_surface.fill((0, 0, 0, 180))
    y = margin_y

    target, intruder = exercise.target, exercise.intruder
    header_lines = [
        (f"Exercise #{index}  ({target.flight_rule.value})", WHITE),
        ("", WHITE),
        (f"You are: {target.callsign}", CYAN),
        (f"  {target.type.name}", CYAN),
        (f"  HDG {target.heading:03d}  {target.speed} kt  {level_tag(target)}", CYAN),
        ("", WHITE),
        (f"Traffic: {intruder.callsign}", AMBER),
        (f"  {intruder.type.name} ({intruder.type.wake.value})", AMBER),
        ("", WHITE),
        ("Controls:", WHITE),
        ("[SPACE]  Next exercise", WHITE),
        ("[A]      Show / hide answer", WHITE),
        ("[S]      Speak answer", WHITE),
        ("[ESC]    Quit", WHITE),
        ("", WHITE),
    ]
    for line, color in header_lines:
        surf = font.render(line, True, color)
        hud_surface.blit(surf, (margin_x, y))
        y += line_spacing

    if show_solution:
        sit = exercise.situation
        detail = [
            f"Clock: {sit.clock} o'clock",
            f"Distance: {sit.distance:.1f} NM",
            f"Direction: {sit.direction.value}",
            f"Vertical: {sit.vertical_text}",
            "",
            "Answer:",
        ]
        for line in detail:
            hud_surface.blit(font.render(line, True, GREEN), (margin_x, y))
            y += line_spacing

        wrap_chars = max(10, (panel_w - 2 * margin_x) // 9)
        for wline in textwrap.wrap(exercise.solution, width=wrap_chars):
            if y > screen_h - 2 * line_spacing:
                break
            hud_surface.blit(font.render(wline, True, GREEN), (margin_x, y))
            y += line_spacing

    if status:
        surf = font.render(status, True, WHITE)
        hud_surface.blit(surf, (margin_x, screen_h - 2 * line_spacing))

    # border line separating radar and HUD
    pygame.draw.line(hud_surface, (120, 120, 120), (0, 0), (0, screen_h), 1)
    screen.blit(hud_surface, (panel_x, 0))
