"""Service layer: cache stores, entity store and the catalog aggregators."""
