"""larapress - scaffold a LaraPress application from a release archive."""

__version__ = "0.1.0"
