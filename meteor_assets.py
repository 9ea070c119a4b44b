import logging
from dataclasses import dataclass
from pathlib import Path

import pygame


PLAYER_IMAGE = "playerShip1_blue.png"
BULLET_IMAGE = "laserBlue02.png"
METEOR_GLOB = "meteors/*.png"

# Pixel sizes of the stock sprites, used when no images are loaded.
PLAYER_SIZE = (99, 75)
BULLET_SIZE = (13, 37)
METEOR_SIZES = (
    (101, 84),
    (120, 98),
    (89, 82),
    (98, 96),
    (43, 43),
    (45, 40),
    (28, 28),
    (29, 26),
)

log = logging.getLogger(__name__)


class AssetError(RuntimeError):
    pass


@dataclass(frozen=True)
class Sprite:
    width: int
    height: int
    image: object = None


@dataclass(frozen=True)
class Assets:
    player: Sprite
    bullet: Sprite
    meteors: tuple

    def __post_init__(self):
        if not self.meteors:
            raise AssetError("at least one meteor sprite is required")


def sprite_from_size(size):
    return Sprite(size[0], size[1])


def default_assets():
    return Assets(
        player=sprite_from_size(PLAYER_SIZE),
        bullet=sprite_from_size(BULLET_SIZE),
        meteors=tuple(sprite_from_size(size) for size in METEOR_SIZES),
    )


def load_image(path):
    try:
        image = pygame.image.load(str(path))
    except (pygame.error, FileNotFoundError) as exc:
        raise AssetError(f"cannot load {path}: {exc}") from exc
    if pygame.display.get_surface() is not None:
        image = image.convert_alpha()
    return Sprite(image.get_width(), image.get_height(), image)


def load_assets(directory):
    directory = Path(directory)
    if not directory.is_dir():
        raise AssetError(f"asset directory not found: {directory}")

    meteors = tuple(load_image(path) for path in sorted(directory.glob(METEOR_GLOB)))
    if not meteors:
        raise AssetError(f"no meteor images matching {METEOR_GLOB} in {directory}")

    assets = Assets(
        player=load_image(directory / PLAYER_IMAGE),
        bullet=load_image(directory / BULLET_IMAGE),
        meteors=meteors,
    )
    log.info("loaded assets from %s (%d meteor variants)", directory, len(meteors))
    return assets
