"""covhtml — coverage aggregation and annotated HTML reports for gocov data."""

__version__ = "0.1.0"
