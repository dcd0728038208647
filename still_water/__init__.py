"""Still Water: guided breathing and calm particle environments."""

__version__ = "1.0.0"
