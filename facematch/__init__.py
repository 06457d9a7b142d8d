"""Face verification service: embedding comparison with graded confidence."""

__version__ = "1.0.0"
