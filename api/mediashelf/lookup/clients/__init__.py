"""External metadata clients used by the lookup strategies."""
