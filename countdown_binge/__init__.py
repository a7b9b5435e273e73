"""countdown-binge: follow TV shows and know when a season is ready to binge."""

__version__ = "0.1.0"
