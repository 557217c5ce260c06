"""Domain core: pure scheduling logic with no framework dependencies."""
