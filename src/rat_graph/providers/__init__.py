"""Graph providers."""
