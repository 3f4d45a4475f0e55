"""Game Maker - turns a child's favorite book into a playable Phaser game"""

__version__ = "0.1.0"
