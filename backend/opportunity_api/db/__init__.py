# Relational schema (SQLAlchemy Core)

from opportunity_api.db.tables import (
    metadata,
    opportunities,
    opportunity_next_steps,
    opportunity_notes,
)

__all__ = [
    "metadata",
    "opportunities",
    "opportunity_notes",
    "opportunity_next_steps",
]
