# dino_runner/game/render.py
import pygame

from .config import (
    COLOR_BG, COLOR_BG_NIGHT, COLOR_FG, COLOR_FG_NIGHT, COLOR_CLOUD, COLOR_DANGER,
    CLOUD_WIDTH, CLOUD_HEIGHT, MOON_WIDTH, MOON_HEIGHT, STAR_SIZE,
)
from .player import PlayerStatus


def _blend(a, b, t):
    return tuple(int(round(x + (y - x) * t)) for x, y in zip(a, b))


def palette(runner):
    """(background, foreground) for the current night-mode opacity."""
    t = runner.horizon.night_mode.opacity
    return _blend(COLOR_BG, COLOR_BG_NIGHT, t), _blend(COLOR_FG, COLOR_FG_NIGHT, t)


def draw_world(surface: pygame.Surface, runner, font=None, show_boxes: bool = False):
    """Flat-rect rendering of one frame; no sprite sheet needed."""
    bg, fg = palette(runner)
    surface.fill(bg)
    horizon = runner.horizon

    # Night sky
    night = horizon.night_mode
    if night.opacity > 0:
        sky = _blend(bg, COLOR_FG_NIGHT, night.opacity)
        for star in night.stars:
            pygame.draw.rect(surface, sky, pygame.Rect(int(star.x), star.y, STAR_SIZE // 3, STAR_SIZE // 3))
        pygame.draw.ellipse(surface, sky, pygame.Rect(int(night.x), night.y, MOON_WIDTH, MOON_HEIGHT // 2))

    for cloud in horizon.clouds:
        pygame.draw.rect(surface, COLOR_CLOUD,
                         pygame.Rect(int(cloud.x), cloud.y, CLOUD_WIDTH, CLOUD_HEIGHT), border_radius=6)

    # Ground: bumpy segments get a notch so the scroll is visible
    line = horizon.horizon_line
    for x, variant in zip(line.x, line.variants):
        pygame.draw.line(surface, fg, (int(x), line.y + 1), (int(x) + line.width, line.y + 1), 1)
        if variant:
            pygame.draw.rect(surface, fg, pygame.Rect(int(x) + line.width // 3, line.y - 2, 6, line.height // 4))

    for obstacle in horizon.obstacles:
        rect = pygame.Rect(int(obstacle.x), obstacle.y, obstacle.width, obstacle.height)
        pygame.draw.rect(surface, fg, rect, width=2)
        for box in obstacle.world_boxes():
            pygame.draw.rect(surface, fg, box.to_rect())

    player = runner.player
    color = COLOR_DANGER if player.status is PlayerStatus.CRASHED else fg
    for box in player.world_boxes():
        pygame.draw.rect(surface, color, box.to_rect())

    if show_boxes:
        for obstacle in horizon.obstacles:
            for box in obstacle.world_boxes():
                pygame.draw.rect(surface, COLOR_DANGER, box.to_rect(), width=1)
        for box in player.world_boxes():
            pygame.draw.rect(surface, (90, 180, 255), box.to_rect(), width=1)

    if font is not None:
        draw_score(surface, runner, font, fg)


def draw_score(surface: pygame.Surface, runner, font, color):
    score = runner.score
    width = surface.get_width()
    if score.paint:
        txt = font.render("".join(score.digits), True, color)
        surface.blit(txt, (width - txt.get_width() - 10, 6))
        x_end = width - txt.get_width() - 20
    else:
        x_end = width - font.size("".join(score.digits))[0] - 20
    if score.high_score_digits:
        hi = font.render("".join(score.high_score_digits), True, _blend(color, COLOR_BG, 0.35))
        surface.blit(hi, (x_end - hi.get_width(), 6))
