"""Gateway between a browser-based editor and a single GitHub repository."""
