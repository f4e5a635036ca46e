"""Command-line interface for ChronoHatch."""
