import argparse
import logging
import random
import sys

import pygame

import config
from sim.factory import generate_exercise
from sim.scenarios import SCENARIOS
from trafficinfo.errors import TrafficInfoError
from trafficinfo.models import Exercise
from viz.aural import AuralReadout
from viz.pygame_app import render
from viz.radar_display import level_tag


def load_scenario(key: str) -> Exercise:
    fn = SCENARIOS.get(key, SCENARIOS["1"])
    return fn()


def describe(exercise: Exercise, index: int) -> str:
    t, i, sit = exercise.target, exercise.intruder, exercise.situation
    lines = [
        f"--- Exercise {index} ({t.flight_rule.value}) ---",
        f"  target   {t.callsign:<10} {t.type.designator:<5} HDG {t.heading:03d} {t.speed:3d} kt {level_tag(t)}",
        f"  intruder {i.callsign:<10} {i.type.designator:<5} HDG {i.heading:03d} {i.speed:3d} kt {level_tag(i)}"
        f"  at ({i.position.x:+.1f}, {i.position.y:+.1f}) NM",
        f"  {sit.clock} o'clock, {sit.distance:.1f} NM, {sit.direction.value}, {sit.vertical_text}",
        f"  > {exercise.solution}",
    ]
    return "\n".join(lines)


def preview(rng: random.Random, scenario: str = None):
    def next_exercise():
        return load_scenario(scenario) if scenario else generate_exercise(rng)

    pygame.init()
    screen = pygame.display.set_mode((config.SCREEN_W, config.SCREEN_H))
    pygame.display.set_caption("Traffic Information Trainer")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("consolas,menlo,monospace", 16)
    aural = AuralReadout()

    exercise = next_exercise()
    index = 1
    show_solution = False

    running = True
    while running:
        clock.tick(30)
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE:
                    running = False

                elif e.key == pygame.K_SPACE:
                    exercise = next_exercise()
                    index += 1
                    show_solution = False

                elif e.key == pygame.K_a:
                    show_solution = not show_solution

                elif e.key == pygame.K_s:
                    aural.speak_exercise(exercise)

        render(screen, font, exercise, index=index, show_solution=show_solution)
        pygame.display.flip()

    aural.close()
    pygame.quit()


def main():
    parser = argparse.ArgumentParser(description="Generate ATC traffic-information exercises.")
    parser.add_argument("--count", "-n", type=int, default=1, help="exercises to print")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible output")
    parser.add_argument("--verbose", "-v", action="store_true", help="log builder retries")
    parser.add_argument("--show", action="store_true", help="open the radar preview")
    parser.add_argument(
        "--scenario", "-s",
        help=f"reference scenario key ({'/'.join(SCENARIOS)}) instead of generated traffic",
        default=None,
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    rng = random.Random(args.seed)

    if args.show:
        preview(rng, args.scenario)
        return 0

    try:
        for k in range(1, args.count + 1):
            exercise = load_scenario(args.scenario) if args.scenario else generate_exercise(rng)
            print(describe(exercise, k))
    except TrafficInfoError as e:
        print("Generation failed:", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
