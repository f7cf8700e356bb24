from typing import Optional

from trafficinfo.models import Exercise
from .colors import BLACK
from .hud import draw_hud
from .radar_display import draw_radar


def render(screen, font, exercise: Optional[Exercise], index: int = 1,
           show_solution: bool = False, status: Optional[str] = None):
    screen.fill(BLACK)
    if exercise is None:
        return
    draw_radar(screen, font, exercise)
    draw_hud(screen, font, exercise, index=index, show_solution=show_solution, status=status)
