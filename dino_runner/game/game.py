# dino_runner/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_SPACE, K_UP, K_DOWN, K_ESCAPE, K_RETURN, K_b

from .clock import FrameScheduler
from .config import RunnerConfig, DEFAULT_WIDTH, SEED_DEFAULT
from .events import InputAction, ScoreChanged, SoundCue
from .render import draw_world
from .runner import GamePhase, Runner
from .storage import JsonHighScoreStore, MemoryHighScoreStore

logger = logging.getLogger(__name__)

JUMP_KEYS = (K_SPACE, K_UP)
DUCK_KEYS = (K_DOWN,)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Endless runner: jump and duck past the obstacles.")
    p.add_argument("--seed", type=int, default=None,
                   help="Session seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--width", type=int, default=DEFAULT_WIDTH,
                   help="Viewport width in px; below 600 the base speed is scaled down.")
    p.add_argument("--constrained", action="store_true",
                   help="Constrained viewport: no intro, lower pterodactyls.")
    p.add_argument("--high-score-file", default=None,
                   help="JSON file holding the high score (kept in memory when omitted).")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--boxes", action="store_true", help="Outline collision boxes.")
    return p.parse_args(argv)


def resolve_launch_seed(seed):
    # None -> SEED_DEFAULT; -1 -> random
    if seed is None:
        return SEED_DEFAULT
    if seed == -1:
        return None
    return seed


def key_to_action(event):
    """Map a pygame key event to an InputAction, or None."""
    down = event.type == pygame.KEYDOWN
    if event.key in JUMP_KEYS:
        return InputAction.JUMP_PRESSED if down else InputAction.JUMP_RELEASED
    if event.key in DUCK_KEYS:
        return InputAction.DUCK_PRESSED if down else InputAction.DUCK_RELEASED
    if event.key == K_RETURN and down:
        return InputAction.RESTART_REQUESTED
    return None


def handle_outputs(runner):
    for ev in runner.drain_events():
        if isinstance(ev, SoundCue):
            logger.debug("sound: %s", ev.name.lower())
        elif isinstance(ev, ScoreChanged) and ev.is_new_high_score and runner.phase is GamePhase.CRASHED:
            logger.info("new high score: %d", ev.current_score)


def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = RunnerConfig(width=args.width, constrained_viewport=args.constrained)
    store = JsonHighScoreStore(args.high_score_file) if args.high_score_file else MemoryHighScoreStore()
    scheduler = FrameScheduler()
    runner = Runner(config, scheduler, seed=resolve_launch_seed(args.seed), high_score_store=store)
    logger.info("seed %d, high score %d", runner.seed, runner.score.high_score)

    pygame.init()
    pygame.display.set_caption("Dino Runner")
    screen = pygame.display.set_mode((config.width, config.height))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 14)
    show_boxes = args.boxes

    while True:
        elapsed = clock.tick(config.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN and event.key == K_ESCAPE:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN and event.key == K_b:
                show_boxes = not show_boxes
                continue
            if event.type in (pygame.KEYDOWN, pygame.KEYUP):
                action = key_to_action(event)
                if action is not None:
                    runner.push_input(action)
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                runner.push_input(InputAction.JUMP_PRESSED)
            if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                runner.push_input(InputAction.JUMP_RELEASED)
            if event.type == pygame.WINDOWFOCUSLOST:
                runner.push_input(InputAction.VISIBILITY_LOST)
            if event.type == pygame.WINDOWFOCUSGAINED:
                runner.push_input(InputAction.VISIBILITY_REGAINED)

        scheduler.advance(elapsed)
        handle_outputs(runner)

        # --- Render ---
        draw_world(screen, runner, font, show_boxes=show_boxes)
        if runner.phase is GamePhase.CRASHED:
            msg = font.render("G A M E  O V E R   (ENTER / SPACE to restart)", True, (200, 60, 60))
            screen.blit(msg, ((config.width - msg.get_width()) // 2, 40))
        elif runner.phase is GamePhase.WAITING:
            msg = font.render("SPACE jump | DOWN duck | ESC quit", True, (120, 120, 120))
            screen.blit(msg, (12, 10))
        pygame.display.flip()


if __name__ == "__main__":
    run()
