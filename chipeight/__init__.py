"""CHIP-8 interpreter with a pygame window, keypad, beeper and a recent-ROM list."""

__version__ = "0.1.0"
__all__ = ["__version__"]