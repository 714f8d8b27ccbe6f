"""The 64x32 monochrome framebuffer and an optional pygame window to show it."""

from __future__ import annotations

from typing import Protocol, Sequence

from chipeight.util import is_bit_set

WIDTH = 64
HEIGHT = 32
PX_OFF = 0x81C784
PX_ON = 0x29302A


def _rgb(colour: int) -> tuple[int, int, int]:
    return (colour >> 16) & 0xFF, (colour >> 8) & 0xFF, colour & 0xFF


class Renderer(Protocol):
    def present(self, framebuffer: Sequence[int]) -> None: ...


class Display:
    """CHIP-8 framebuffer; pixels are stored as 0xRRGGBB colours."""

    def __init__(self, renderer: Renderer | None = None) -> None:
        self.renderer = renderer
        self._framebuffer = [PX_OFF] * (WIDTH * HEIGHT)

    @property
    def framebuffer(self) -> tuple[int, ...]:
        return tuple(self._framebuffer)

    def clear_screen(self) -> None:
        self._framebuffer = [PX_OFF] * (WIDTH * HEIGHT)

    def draw(self, sprite: Sequence[int], x: int, y: int) -> int:
        """XOR a sprite onto the screen, wrapping at the edges.

        Returns 1 if any lit pixel was turned off, otherwise 0.
        """
        collision = 0
        for row, byte in enumerate(sprite):
            py = (y + row) % HEIGHT
            for col in range(8):
                if not is_bit_set(byte, 7 - col):
                    continue
                px = (x + col) % WIDTH
                coord = py * WIDTH + px
                if self._framebuffer[coord] == PX_ON:
                    collision = 1
                    self._framebuffer[coord] = PX_OFF
                else:
                    self._framebuffer[coord] = PX_ON
        return collision

    def pixel(self, x: int, y: int) -> bool:
        """Return True if the pixel at (x, y) is lit."""
        if not (0 <= x < WIDTH and 0 <= y < HEIGHT):
            raise IndexError(f"pixel ({x}, {y}) is outside the screen")
        return self._framebuffer[y * WIDTH + x] == PX_ON

    def refresh(self) -> None:
        """Hand the current framebuffer to the renderer, if there is one."""
        if self.renderer is not None:
            self.renderer.present(self.framebuffer)

    def is_open(self) -> bool:
        return True


class PygameRenderer:
    """Shows a framebuffer in a pygame window scaled by an integer factor."""

    def __init__(self, title: str, scale: int) -> None:
        import pygame

        self._pygame = pygame
        pygame.display.init()
        self.scale = scale
        self._surface = pygame.display.set_mode((WIDTH * scale, HEIGHT * scale))
        pygame.display.set_caption(title)
        self._surface.fill(_rgb(PX_OFF))
        pygame.display.flip()

    def present(self, framebuffer: Sequence[int]) -> None:
        pygame = self._pygame
        self._surface.fill(_rgb(PX_OFF))
        scale = self.scale
        for index, colour in enumerate(framebuffer):
            if colour == PX_OFF:
                continue
            y, x = divmod(index, WIDTH)
            self._surface.fill(_rgb(colour), pygame.Rect(x * scale, y * scale, scale, scale))
        pygame.display.flip()

    def close(self) -> None:
        self._pygame.display.quit()