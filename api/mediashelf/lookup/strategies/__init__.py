"""One lookup strategy per media type."""
