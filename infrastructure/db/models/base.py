"""
Shared declarative base for the ledger tables.
Every model imports Base from here so they share one registry and MetaData.
"""
from sqlalchemy import MetaData
from sqlalchemy.orm import registry

# Stable constraint names keep migrations diffable
metadata = MetaData(naming_convention={
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
})

mapper_registry = registry(metadata=metadata)
Base = mapper_registry.generate_base()
