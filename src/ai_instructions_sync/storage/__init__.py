"""Storage primitives for the workspace configuration document."""
