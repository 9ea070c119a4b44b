import argparse
import logging
import math
import random
import time

import pygame

from meteor_assets import AssetError, default_assets, load_assets
from meteor_simulation import SCREEN_HEIGHT, SCREEN_WIDTH, TPS, Controls, World


JOY_AXIS_X = 0
JOY_AXIS_DEADZONE = 0.5
JOY_FIRE_BUTTON = 2


COLORS = {
    "bg": (5, 7, 10),
    "ship": (230, 230, 230),
    "bullet": (120, 200, 255),
    "meteor": (245, 245, 245),
    "ui": (200, 200, 200),
}

log = logging.getLogger(__name__)


def seed_from_time():
    return int(time.time()) & 0xFFFFFFFF


def make_meteor_shape(rng, radius):
    points = []
    count = rng.randint(8, 13)
    for i in range(count):
        angle = (math.tau / count) * i
        r = radius * rng.uniform(0.65, 1.0)
        points.append((math.cos(angle) * r, math.sin(angle) * r))
    return points


def sprite_center(entity):
    sprite = entity.sprite
    return pygame.Vector2(entity.position.x + sprite.width / 2, entity.position.y + sprite.height / 2)


def draw_image(surface, entity):
    # Rotate about the sprite centre, then place it at the entity's position.
    rotated = pygame.transform.rotate(entity.sprite.image, -math.degrees(entity.rotation))
    surface.blit(rotated, rotated.get_rect(center=sprite_center(entity)))


def draw_vector_shape(surface, pos, rotation, points, color, width=2):
    angle = math.degrees(rotation)
    rotated = []
    for x, y in points:
        vec = pygame.Vector2(x, y).rotate(angle)
        rotated.append((pos.x + vec.x, pos.y + vec.y))
    pygame.draw.lines(surface, color, True, rotated, width)


def draw_ship(surface, player, color):
    half_w = player.sprite.width / 2
    half_h = player.sprite.height / 2
    points = [(0, -half_h), (-half_w, half_h), (0, half_h * 0.5), (half_w, half_h)]
    draw_vector_shape(surface, sprite_center(player), player.rotation, points, color)


def draw_bullet(surface, bullet, color):
    pos = sprite_center(bullet)
    half = pygame.Vector2(0, bullet.sprite.height / 2).rotate(math.degrees(bullet.rotation))
    pygame.draw.line(surface, color, pos - half, pos + half, 3)


class Renderer:
    def __init__(self, screen, font):
        self.screen = screen
        self.font = font
        self.meteor_shapes = {}

    def meteor_shape(self, meteor):
        key = (meteor.variant, meteor.sprite.width, meteor.sprite.height)
        shape = self.meteor_shapes.get(key)
        if shape is None:
            radius = min(meteor.sprite.width, meteor.sprite.height) / 2
            shape = make_meteor_shape(random.Random(meteor.variant), radius)
            self.meteor_shapes[key] = shape
        return shape

    def draw(self, world):
        self.screen.fill(COLORS["bg"])

        player = world.player
        if player.sprite.image is not None:
            draw_image(self.screen, player)
        else:
            draw_ship(self.screen, player, COLORS["ship"])

        for meteor in world.meteors:
            if meteor.sprite.image is not None:
                draw_image(self.screen, meteor)
            else:
                draw_vector_shape(
                    self.screen, sprite_center(meteor), meteor.rotation, self.meteor_shape(meteor), COLORS["meteor"]
                )

        for bullet in world.bullets:
            if bullet.sprite.image is not None:
                draw_image(self.screen, bullet)
            else:
                draw_bullet(self.screen, bullet, COLORS["bullet"])

        hud = [
            f"Meteors: {len(world.meteors)}",
            f"Bullets: {len(world.bullets)}",
            f"Resets: {world.resets}",
        ]
        for i, line in enumerate(hud):
            text = self.font.render(line, True, COLORS["ui"])
            self.screen.blit(text, (10, 10 + i * 20))

        help_text = "Left/Right or A/D rotate  Space shoot  Esc quit"
        text = self.font.render(help_text, True, COLORS["ui"])
        self.screen.blit(text, (10, SCREEN_HEIGHT - 28))


def read_controls(keys, joystick=None):
    turn = 0
    fire = bool(keys[pygame.K_SPACE])
    if keys[pygame.K_LEFT] or keys[pygame.K_a]:
        turn -= 1
    if keys[pygame.K_RIGHT] or keys[pygame.K_d]:
        turn += 1

    if joystick:
        hat_x = joystick.get_hat(0)[0] if joystick.get_numhats() > 0 else 0
        axis_x = joystick.get_axis(JOY_AXIS_X) if joystick.get_numaxes() > JOY_AXIS_X else 0.0
        if hat_x < 0 or axis_x < -JOY_AXIS_DEADZONE:
            turn -= 1
        if hat_x > 0 or axis_x > JOY_AXIS_DEADZONE:
            turn += 1
        if joystick.get_numbuttons() > JOY_FIRE_BUTTON and joystick.get_button(JOY_FIRE_BUTTON):
            fire = True

    return Controls(rotate_left=turn < 0, rotate_right=turn > 0, fire=fire)


def run_headless(world, ticks):
    idle = Controls()
    for _ in range(ticks):
        world.update(idle)
    log.info(
        "simulated %d ticks: %d meteors, %d bullets, %d resets",
        world.tick,
        len(world.meteors),
        len(world.bullets),
        world.resets,
    )
    return world


def run_window(world, tps):
    screen = pygame.display.get_surface()
    clock = pygame.time.Clock()
    renderer = Renderer(screen, pygame.font.SysFont("Consolas", 18))

    joystick = None
    if pygame.joystick.get_count() > 0:
        joystick = pygame.joystick.Joystick(0)
        joystick.init()
        log.info("using joystick %s", joystick.get_name())

    running = True
    while running:
        clock.tick(tps)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

        keys = pygame.key.get_pressed()
        if keys[pygame.K_ESCAPE]:
            running = False

        world.update(read_controls(keys, joystick))
        renderer.draw(world)
        pygame.display.flip()


def positive_int(value):
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Rotate the ship and shoot down incoming meteors")
    parser.add_argument("--tps", type=positive_int, default=TPS, help="simulation ticks per second")
    parser.add_argument("--seed", type=int, default=None, help="random seed (defaults to the clock)")
    parser.add_argument("--assets", default=None, help="directory holding the sprite images")
    parser.add_argument("--headless", type=int, default=None, metavar="TICKS", help="simulate TICKS ticks without a window")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    seed = seed_from_time() if args.seed is None else args.seed
    log.info("seed %d, %d ticks/s", seed, args.tps)

    if args.headless is not None:
        try:
            assets = load_assets(args.assets) if args.assets else default_assets()
        except AssetError as exc:
            log.error("%s", exc)
            return 1
        run_headless(World(assets, random.Random(seed), args.tps), args.headless)
        return 0

    pygame.init()
    pygame.joystick.init()
    try:
        pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Meteor Defense")
        try:
            assets = load_assets(args.assets) if args.assets else default_assets()
        except AssetError as exc:
            log.error("%s", exc)
            return 1
        run_window(World(assets, random.Random(seed), args.tps), args.tps)
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
