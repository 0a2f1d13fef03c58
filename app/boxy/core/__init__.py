"""Core services for boxy: paths, configuration, bookmarks, theme, logging."""
