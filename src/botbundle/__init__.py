"""botbundle - release bundler for the music-bot application."""

__version__ = "0.1.0"
