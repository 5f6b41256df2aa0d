"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: CRS identifiers, bounds, limits
- exceptions: Exception taxonomy
"""
