"""Real-time attention estimation for video-meeting engagement tracking."""

__version__ = "0.1.0"
