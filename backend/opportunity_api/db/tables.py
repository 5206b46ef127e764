"""
SQLAlchemy Core table definitions for opportunities, notes and next steps.
Column names are PascalCase; rows are returned to clients with these keys.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    Uuid,
    false,
)

metadata = MetaData()

opportunities = Table(
    "Opportunities",
    metadata,
    Column("Id", Uuid, primary_key=True),
    Column("Name", String(200), nullable=False),
    Column("TechnologyStack", String(400)),
    Column("TechOwner", String(200)),
    Column("BusinessOwner", String(200)),
    Column("FirstContactDate", Date),
    Column("Stage", String(60)),
    Column("Status", String(30)),
    Column("Priority", Integer),
    Column("Tags", String(400)),
    Column("NextStepSummary", String(500)),
    Column("NextStepDueDate", Date),
    Column("CreatedAt", DateTime(timezone=True), nullable=False),
    Column("UpdatedAt", DateTime(timezone=True), nullable=False),
)

opportunity_notes = Table(
    "OpportunityNotes",
    metadata,
    Column("Id", Uuid, primary_key=True),
    Column(
        "OpportunityId",
        Uuid,
        ForeignKey("Opportunities.Id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("NoteDate", Date, nullable=False),
    Column("Content", Text, nullable=False),
    Column("CreatedAt", DateTime(timezone=True), nullable=False),
)

opportunity_next_steps = Table(
    "OpportunityNextSteps",
    metadata,
    Column("Id", Uuid, primary_key=True),
    Column(
        "OpportunityId",
        Uuid,
        ForeignKey("Opportunities.Id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("Title", String(250), nullable=False),
    Column("DueDate", Date),
    Column("IsDone", Boolean, nullable=False, default=False, server_default=false()),
    Column("CreatedAt", DateTime(timezone=True), nullable=False),
)
