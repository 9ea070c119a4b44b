import logging
import math
import random
from dataclasses import dataclass

import pygame


SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
TPS = 60

PLAYER_TURN_SPEED = math.pi  # radians/sec
SHOOT_COOLDOWN = 1.0
BULLET_SPEED = 350  # units/sec
BULLET_SPAWN_OFFSET = 50.0

METEOR_SPAWN_INTERVAL = 1.0
METEOR_SPEED = (0.25, 1.75)  # units/tick
METEOR_SPIN = (-0.02, 0.02)  # radians/tick

log = logging.getLogger(__name__)

Vector = pygame.Vector2


def normalize(vec):
    # Vector2.normalize raises ValueError on a zero-length vector.
    return Vector(vec).normalize()


def field_center(field_size):
    width, height = field_size
    return Vector(width / 2, height / 2)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self):
        return self.x + self.width

    @property
    def max_y(self):
        return self.y + self.height

    def intersects(self, other):
        """Inclusive overlap test: shared edges and corners count."""
        return (
            self.x <= other.max_x
            and other.x <= self.max_x
            and self.y <= other.max_y
            and other.y <= self.max_y
        )


class Timer:
    """Countdown measured in whole simulation ticks."""

    def __init__(self, duration, tps=TPS):
        self.duration = duration
        self.tps = tps
        self.target_ticks = round(duration * tps)
        self.current_ticks = 0

    @property
    def elapsed(self):
        return self.current_ticks / self.tps

    def update(self, ticks=1):
        self.current_ticks += ticks

    def is_ready(self):
        return self.current_ticks >= self.target_ticks

    def reset(self):
        self.current_ticks = 0


@dataclass(frozen=True)
class Controls:
    rotate_left: bool = False
    rotate_right: bool = False
    fire: bool = False


class Entity:
    def __init__(self, position, rotation, sprite):
        self.position = Vector(position)
        self.rotation = rotation
        self.sprite = sprite

    def collider(self):
        return Rect(self.position.x, self.position.y, self.sprite.width, self.sprite.height)


class Meteor(Entity):
    def __init__(self, position, movement, rotation_speed, sprite, variant=0):
        super().__init__(position, 0.0, sprite)
        self.movement = Vector(movement)
        self.rotation_speed = rotation_speed
        self.variant = variant

    @classmethod
    def spawn(cls, assets, rng, field_size=(SCREEN_WIDTH, SCREEN_HEIGHT)):
        variant = rng.randrange(len(assets.meteors))
        target = field_center(field_size)
        radius = field_size[0] / 2
        angle = rng.uniform(0, math.tau)
        pos = target + Vector(math.cos(angle), math.sin(angle)) * radius

        speed = rng.uniform(*METEOR_SPEED)
        movement = normalize(target - pos) * speed
        rotation_speed = rng.uniform(*METEOR_SPIN)
        return cls(pos, movement, rotation_speed, assets.meteors[variant], variant)

    def update(self):
        self.position += self.movement
        self.rotation += self.rotation_speed


class Bullet(Entity):
    def __init__(self, position, rotation, sprite, tps=TPS):
        super().__init__(position, rotation, sprite)
        self.speed = BULLET_SPEED / tps

    def update(self):
        self.position.x += math.sin(self.rotation) * self.speed
        self.position.y += math.cos(self.rotation) * -self.speed


class Player(Entity):
    def __init__(self, assets, tps=TPS, field_size=(SCREEN_WIDTH, SCREEN_HEIGHT)):
        sprite = assets.player
        start = field_center(field_size) - Vector(sprite.width / 2, sprite.height / 2)
        super().__init__(start, 0.0, sprite)
        self.bullet_sprite = assets.bullet
        self.tps = tps
        self.shoot_cooldown = Timer(SHOOT_COOLDOWN, tps)

    def update(self, controls):
        """Apply one tick of input; returns a new Bullet when one is fired."""
        speed = PLAYER_TURN_SPEED / self.tps
        if controls.rotate_left:
            self.rotation -= speed
        if controls.rotate_right:
            self.rotation += speed

        self.shoot_cooldown.update()
        if not (self.shoot_cooldown.is_ready() and controls.fire):
            return None
        self.shoot_cooldown.reset()

        # The offset scales the angle, not the distance.
        half_w = self.sprite.width / 2
        half_h = self.sprite.height / 2
        spawn_pos = Vector(
            self.position.x + half_w + math.sin(self.rotation * BULLET_SPAWN_OFFSET),
            self.position.y + half_h + math.cos(self.rotation * -BULLET_SPAWN_OFFSET),
        )
        return Bullet(spawn_pos, self.rotation, self.bullet_sprite, self.tps)


class World:
    def __init__(
        self,
        assets,
        rng=None,
        tps=TPS,
        field_size=(SCREEN_WIDTH, SCREEN_HEIGHT),
        spawn_interval=METEOR_SPAWN_INTERVAL,
    ):
        self.assets = assets
        self.rng = rng or random.Random()
        self.tps = tps
        self.field_size = field_size
        self.meteor_spawn_timer = Timer(spawn_interval, tps)
        self.meteors = []
        # Bullets only leave through collisions, so a player firing into empty
        # space grows this list for the whole session.
        self.bullets = []
        self.player = Player(assets, tps, field_size)
        self.tick = 0
        self.resets = 0

    def add_bullet(self, bullet):
        self.bullets.append(bullet)

    def update(self, controls):
        self.tick += 1

        bullet = self.player.update(controls)
        if bullet is not None:
            self.add_bullet(bullet)

        self.meteor_spawn_timer.update()
        if self.meteor_spawn_timer.is_ready():
            self.meteor_spawn_timer.reset()
            meteor = Meteor.spawn(self.assets, self.rng, self.field_size)
            self.meteors.append(meteor)
            log.debug("tick %d: meteor spawned at (%.1f, %.1f)", self.tick, meteor.position.x, meteor.position.y)

        for meteor in self.meteors:
            meteor.update()

        for bullet in self.bullets:
            bullet.update()

        self.resolve_hits()

        player_box = self.player.collider()
        for meteor in self.meteors:
            if meteor.collider().intersects(player_box):
                self.reset()
                break

    def resolve_hits(self):
        """Remove every meteor/bullet pair whose colliders overlap this tick."""
        hit_meteors = set()
        hit_bullets = set()
        bullet_boxes = [b.collider() for b in self.bullets]
        for i, meteor in enumerate(self.meteors):
            box = meteor.collider()
            for j, bullet_box in enumerate(bullet_boxes):
                if box.intersects(bullet_box):
                    hit_meteors.add(i)
                    hit_bullets.add(j)

        if not hit_meteors:
            return
        log.debug(
            "tick %d: %d meteor(s) destroyed by %d bullet(s)",
            self.tick,
            len(hit_meteors),
            len(hit_bullets),
        )
        self.meteors = [m for i, m in enumerate(self.meteors) if i not in hit_meteors]
        self.bullets = [b for j, b in enumerate(self.bullets) if j not in hit_bullets]

    def reset(self):
        # The spawn timer keeps running across resets.
        self.resets += 1
        log.info(
            "tick %d: player hit, resetting (%d meteors, %d bullets cleared)",
            self.tick,
            len(self.meteors),
            len(self.bullets),
        )
        self.player = Player(self.assets, self.tps, self.field_size)
        self.meteors = []
        self.bullets = []
