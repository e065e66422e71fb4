"""Local texture appearance codes for face images and a k-nearest-neighbour classifier."""

__version__ = "0.1.0"