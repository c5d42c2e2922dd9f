"""Storage for parsed interaction matrices."""
