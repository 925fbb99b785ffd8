"""exp — command-line front-end for mobile app development projects."""

__version__ = "0.9.0"
