"""
Opportunity repository: parameterized CRUD over Opportunities, OpportunityNotes and
OpportunityNextSteps. Every operation is a single statement (detail reads are three).
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator
from uuid import UUID

from fastapi import Depends
from sqlalchemy import case, delete, insert, or_, select, text, update
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

from opportunity_api.core.database import DatabasePool, get_database
from opportunity_api.core.errors import ErrorKind, NotFoundError, StoreConnectionError, StoreError
from opportunity_api.db.tables import opportunities, opportunity_next_steps, opportunity_notes
from opportunity_api.schemas.next_step import NextStep, NextStepInput
from opportunity_api.schemas.note import Note, NoteInput
from opportunity_api.schemas.opportunity import (
    Opportunity,
    OpportunityDetail,
    OpportunityInput,
    SortDirection,
    SortField,
)

logger = logging.getLogger(__name__)

LIST_LIMIT = 500

_SORT_COLUMNS = {
    SortField.NAME: opportunities.c.Name,
    SortField.CREATED: opportunities.c.CreatedAt,
    SortField.UPDATED: opportunities.c.UpdatedAt,
}

_SEARCH_COLUMNS = (
    opportunities.c.Name,
    opportunities.c.TechOwner,
    opportunities.c.BusinessOwner,
    opportunities.c.Tags,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _opportunity_values(fields: OpportunityInput) -> dict[str, Any]:
    """Map OpportunityInput to Opportunities column values (every mutable column)."""
    return {
        "Name": fields.name,
        "TechnologyStack": fields.technology_stack,
        "TechOwner": fields.tech_owner,
        "BusinessOwner": fields.business_owner,
        "FirstContactDate": fields.first_contact_date,
        "Stage": fields.stage,
        "Status": fields.status,
        "Priority": fields.priority,
        "Tags": fields.tags,
        "NextStepSummary": fields.next_step_summary,
        "NextStepDueDate": fields.next_step_due_date,
    }


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Translate driver errors into StoreError kinds."""
    try:
        yield
    except IntegrityError as e:
        logger.warning("%s constraint violation: %s", action, e.orig)
        raise StoreError(f"{action} failed: constraint violation", kind=ErrorKind.CONSTRAINT) from e
    except DBAPIError as e:
        if e.connection_invalidated:
            logger.error("%s lost database connection: %s", action, e.orig)
            raise StoreConnectionError(f"{action} failed: database connection lost") from e
        logger.error("%s error: %s", action, e.orig)
        raise StoreError(f"{action} failed") from e
    except (SQLAlchemyError, OSError) as e:
        logger.error("%s error: %s", action, e)
        raise StoreError(f"{action} failed") from e


class OpportunityRepository:
    def __init__(self, db: DatabasePool) -> None:
        self.db = db

    async def ping(self) -> None:
        """Round-trip a trivial query (health check)."""
        engine = await self.db.get_connection()
        with _store_errors("Health check"):
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

    async def list_opportunities(
        self,
        query: str = "",
        sort: SortField = SortField.UPDATED,
        direction: SortDirection = SortDirection.DESC,
    ) -> list[Opportunity]:
        """Up to LIST_LIMIT opportunities whose name, owners or tags contain query (case-insensitive)."""
        column = _SORT_COLUMNS[sort]
        stmt = select(opportunities)
        query = (query or "").strip()
        if query:
            stmt = stmt.where(or_(*(c.icontains(query, autoescape=True) for c in _SEARCH_COLUMNS)))
        stmt = stmt.order_by(column.asc() if direction is SortDirection.ASC else column.desc()).limit(LIST_LIMIT)

        engine = await self.db.get_connection()
        with _store_errors("List opportunities"):
            async with engine.connect() as conn:
                rows = (await conn.execute(stmt)).mappings().all()
        return [Opportunity.model_validate(dict(r)) for r in rows]

    async def get_opportunity(self, opportunity_id: UUID) -> OpportunityDetail:
        """Opportunity with notes (newest first) and next steps (open first, then by due date)."""
        notes_stmt = (
            select(opportunity_notes)
            .where(opportunity_notes.c.OpportunityId == opportunity_id)
            .order_by(opportunity_notes.c.NoteDate.desc(), opportunity_notes.c.CreatedAt.desc())
        )
        steps = opportunity_next_steps.c
        steps_stmt = (
            select(opportunity_next_steps)
            .where(steps.OpportunityId == opportunity_id)
            # Undated steps sort ahead of dated ones within the same done-state
            .order_by(
                steps.IsDone.asc(),
                case((steps.DueDate.is_(None), 0), else_=1),
                steps.DueDate.asc(),
                steps.CreatedAt.desc(),
            )
        )

        engine = await self.db.get_connection()
        with _store_errors("Get opportunity"):
            async with engine.connect() as conn:
                row = (
                    await conn.execute(select(opportunities).where(opportunities.c.Id == opportunity_id))
                ).mappings().first()
                if row is None:
                    raise NotFoundError()
                note_rows = (await conn.execute(notes_stmt)).mappings().all()
                step_rows = (await conn.execute(steps_stmt)).mappings().all()

        return OpportunityDetail(
            opportunity=Opportunity.model_validate(dict(row)),
            notes=[Note.model_validate(dict(r)) for r in note_rows],
            next_steps=[NextStep.model_validate(dict(r)) for r in step_rows],
        )

    async def create_opportunity(self, fields: OpportunityInput) -> UUID:
        new_id = uuid.uuid4()
        now = _now()
        stmt = insert(opportunities).values(
            Id=new_id,
            CreatedAt=now,
            UpdatedAt=now,
            **_opportunity_values(fields),
        )
        engine = await self.db.get_connection()
        with _store_errors("Create opportunity"):
            async with engine.begin() as conn:
                await conn.execute(stmt)
        logger.info("Created opportunity %s", new_id)
        return new_id

    async def update_opportunity(self, opportunity_id: UUID, fields: OpportunityInput) -> None:
        """Full replace of every mutable field."""
        stmt = (
            update(opportunities)
            .where(opportunities.c.Id == opportunity_id)
            .values(UpdatedAt=_now(), **_opportunity_values(fields))
        )
        await self._execute_one(stmt, "Update opportunity")

    async def delete_opportunity(self, opportunity_id: UUID) -> None:
        """Delete the opportunity; notes and next steps go with it (ON DELETE CASCADE)."""
        stmt = delete(opportunities).where(opportunities.c.Id == opportunity_id)
        await self._execute_one(stmt, "Delete opportunity")
        logger.info("Deleted opportunity %s", opportunity_id)

    async def add_note(self, opportunity_id: UUID, note: NoteInput) -> UUID:
        new_id = uuid.uuid4()
        stmt = insert(opportunity_notes).values(
            Id=new_id,
            OpportunityId=opportunity_id,
            NoteDate=note.note_date,
            Content=note.content,
            CreatedAt=_now(),
        )
        engine = await self.db.get_connection()
        with _store_errors("Add note"):
            async with engine.begin() as conn:
                await conn.execute(stmt)
        return new_id

    async def delete_note(self, note_id: UUID) -> None:
        stmt = delete(opportunity_notes).where(opportunity_notes.c.Id == note_id)
        await self._execute_one(stmt, "Delete note")

    async def add_step(self, opportunity_id: UUID, step: NextStepInput) -> UUID:
        new_id = uuid.uuid4()
        stmt = insert(opportunity_next_steps).values(
            Id=new_id,
            OpportunityId=opportunity_id,
            Title=step.title,
            DueDate=step.due_date,
            IsDone=False,
            CreatedAt=_now(),
        )
        engine = await self.db.get_connection()
        with _store_errors("Add next step"):
            async with engine.begin() as conn:
                await conn.execute(stmt)
        return new_id

    async def toggle_step(self, step_id: UUID, is_done: bool) -> None:
        stmt = (
            update(opportunity_next_steps)
            .where(opportunity_next_steps.c.Id == step_id)
            .values(IsDone=is_done)
        )
        await self._execute_one(stmt, "Update next step")

    async def delete_step(self, step_id: UUID) -> None:
        stmt = delete(opportunity_next_steps).where(opportunity_next_steps.c.Id == step_id)
        await self._execute_one(stmt, "Delete next step")

    async def _execute_one(self, stmt: Any, action: str) -> None:
        """Run an update/delete by id; zero affected rows means the id does not exist."""
        engine = await self.db.get_connection()
        with _store_errors(action):
            async with engine.begin() as conn:
                affected = (await conn.execute(stmt)).rowcount
        if affected == 0:
            raise NotFoundError()


def get_opportunity_repository(db: DatabasePool = Depends(get_database)) -> OpportunityRepository:
    """Dependency: repository bound to the app's connection pool."""
    return OpportunityRepository(db)
