"""Multi-source search bot: Stack Overflow, Wikipedia and Spotify from one chat."""

__version__ = "0.1.0"
