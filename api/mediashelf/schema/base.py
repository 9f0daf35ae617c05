"""Shared schema base classes for catalog records and computed results."""

from pydantic import BaseModel, ConfigDict


class CatalogModel(BaseModel):
    """Immutable-on-read record; copies are made with ``model_copy``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)
