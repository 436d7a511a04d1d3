"""Unit helpers. All layout geometry is expressed in PostScript points."""

POINTS_PER_INCH = 72.0


def per_inch_to_points(density: float) -> float:
    """Return the pitch in points of something repeated ``density`` times per inch."""
    if density <= 0:
        raise ValueError("density must be positive")
    return POINTS_PER_INCH / density
