"""HTTP surface for the editor gateway."""
