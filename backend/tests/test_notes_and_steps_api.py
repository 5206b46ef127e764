"""API tests for notes and next steps."""

import uuid

import pytest
from httpx import AsyncClient


@pytest.fixture
async def opportunity_id(client: AsyncClient) -> str:
    response = await client.post("/opportunities", json={"name": "Acme"})
    return response.json()["id"]


async def add_step(client: AsyncClient, opportunity_id: str, **payload) -> str:
    response = await client.post(f"/opportunities/{opportunity_id}/steps", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["id"]


class TestNotes:
    async def test_add_note_shows_on_detail(self, client: AsyncClient, opportunity_id: str) -> None:
        response = await client.post(
            f"/opportunities/{opportunity_id}/notes",
            json={"noteDate": "2024-03-01", "content": "Intro call went well."},
        )
        assert response.status_code == 201
        note_id = response.json()["id"]
        uuid.UUID(note_id)

        notes = (await client.get(f"/opportunities/{opportunity_id}")).json()["notes"]
        assert len(notes) == 1
        assert notes[0]["Id"] == note_id
        assert notes[0]["OpportunityId"] == opportunity_id
        assert notes[0]["NoteDate"] == "2024-03-01"
        assert notes[0]["Content"] == "Intro call went well."
        assert notes[0]["CreatedAt"]

    async def test_notes_ordered_by_note_date_then_newest(self, client: AsyncClient, opportunity_id: str) -> None:
        url = f"/opportunities/{opportunity_id}/notes"
        await client.post(url, json={"noteDate": "2024-01-10", "content": "old"})
        await client.post(url, json={"noteDate": "2024-05-01", "content": "newest date, first"})
        await client.post(url, json={"noteDate": "2024-05-01", "content": "newest date, second"})

        notes = (await client.get(f"/opportunities/{opportunity_id}")).json()["notes"]
        assert [n["Content"] for n in notes] == [
            "newest date, second",
            "newest date, first",
            "old",
        ]

    async def test_long_content_is_accepted(self, client: AsyncClient, opportunity_id: str) -> None:
        content = "word " * 5000
        response = await client.post(
            f"/opportunities/{opportunity_id}/notes",
            json={"noteDate": "2024-03-01", "content": content},
        )
        assert response.status_code == 201
        notes = (await client.get(f"/opportunities/{opportunity_id}")).json()["notes"]
        assert notes[0]["Content"] == content

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"content": "x"}, "noteDate"),
            ({"noteDate": "2024-3-1", "content": "x"}, "noteDate"),
            ({"noteDate": "2024-03-01T00:00", "content": "x"}, "noteDate"),
            ({"noteDate": "2024-02-30", "content": "x"}, "noteDate"),
            ({"noteDate": "2024-03-01"}, "content"),
            ({"noteDate": "2024-03-01", "content": ""}, "content"),
        ],
    )
    async def test_add_note_validation(
        self, client: AsyncClient, opportunity_id: str, payload: dict, field: str
    ) -> None:
        response = await client.post(f"/opportunities/{opportunity_id}/notes", json=payload)
        assert response.status_code == 400
        assert response.json()["field"] == field

    async def test_add_note_to_missing_opportunity_is_constraint_error(self, client: AsyncClient) -> None:
        response = await client.post(
            f"/opportunities/{uuid.uuid4()}/notes",
            json={"noteDate": "2024-03-01", "content": "orphan"},
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "constraint"

    async def test_delete_note(self, client: AsyncClient, opportunity_id: str) -> None:
        response = await client.post(
            f"/opportunities/{opportunity_id}/notes",
            json={"noteDate": "2024-03-01", "content": "temp"},
        )
        note_id = response.json()["id"]

        response = await client.delete(f"/notes/{note_id}")
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert (await client.get(f"/opportunities/{opportunity_id}")).json()["notes"] == []
        assert (await client.delete(f"/notes/{note_id}")).status_code == 404

    async def test_delete_note_invalid_id(self, client: AsyncClient) -> None:
        response = await client.delete("/notes/1234")
        assert response.status_code == 400
        assert response.json()["field"] == "note_id"

    @pytest.mark.parametrize(
        "raw_id",
        ["0000000000000000000000000000abcd", "{12345678-1234-1234-1234-123456789abc}", "urn:uuid:12345678-1234-1234-1234-123456789abc"],
    )
    async def test_delete_note_rejects_non_canonical_id(self, client: AsyncClient, raw_id: str) -> None:
        response = await client.delete(f"/notes/{raw_id}")
        assert response.status_code == 400
        assert response.json()["kind"] == "validation"


class TestNextSteps:
    async def test_add_step_defaults_to_open(self, client: AsyncClient, opportunity_id: str) -> None:
        step_id = await add_step(client, opportunity_id, title="Send deck", dueDate="2024-04-01")

        steps = (await client.get(f"/opportunities/{opportunity_id}")).json()["nextSteps"]
        assert steps == [
            {
                "Id": step_id,
                "OpportunityId": opportunity_id,
                "Title": "Send deck",
                "DueDate": "2024-04-01",
                "IsDone": False,
                "CreatedAt": steps[0]["CreatedAt"],
            }
        ]

    async def test_add_step_without_due_date(self, client: AsyncClient, opportunity_id: str) -> None:
        await add_step(client, opportunity_id, title="Follow up", dueDate=None)
        steps = (await client.get(f"/opportunities/{opportunity_id}")).json()["nextSteps"]
        assert steps[0]["DueDate"] is None

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({}, "title"),
            ({"title": ""}, "title"),
            ({"title": "t" * 251}, "title"),
            ({"title": "ok", "dueDate": "next week"}, "dueDate"),
        ],
    )
    async def test_add_step_validation(
        self, client: AsyncClient, opportunity_id: str, payload: dict, field: str
    ) -> None:
        response = await client.post(f"/opportunities/{opportunity_id}/steps", json=payload)
        assert response.status_code == 400
        assert response.json()["field"] == field

    async def test_add_step_to_missing_opportunity_is_constraint_error(self, client: AsyncClient) -> None:
        response = await client.post(f"/opportunities/{uuid.uuid4()}/steps", json={"title": "orphan"})
        assert response.status_code == 400
        assert response.json()["kind"] == "constraint"

    async def test_incomplete_steps_come_before_complete(self, client: AsyncClient, opportunity_id: str) -> None:
        early = await add_step(client, opportunity_id, title="early", dueDate="2024-01-01")
        late = await add_step(client, opportunity_id, title="late", dueDate="2024-12-01")
        mid = await add_step(client, opportunity_id, title="mid", dueDate="2024-06-01")
        undated = await add_step(client, opportunity_id, title="undated")

        response = await client.patch(f"/steps/{early}", json={"isDone": True})
        assert response.status_code == 200
        assert response.json() == {"ok": True}

        steps = (await client.get(f"/opportunities/{opportunity_id}")).json()["nextSteps"]
        assert [s["Id"] for s in steps] == [undated, mid, late, early]
        assert [s["IsDone"] for s in steps] == [False, False, False, True]

    async def test_toggle_step_back_to_open(self, client: AsyncClient, opportunity_id: str) -> None:
        step_id = await add_step(client, opportunity_id, title="Send deck")
        await client.patch(f"/steps/{step_id}", json={"isDone": True})
        await client.patch(f"/steps/{step_id}", json={"isDone": False})
        steps = (await client.get(f"/opportunities/{opportunity_id}")).json()["nextSteps"]
        assert steps[0]["IsDone"] is False

    @pytest.mark.parametrize("payload", [{}, {"isDone": "yes"}, {"isDone": 1}, {"isDone": None}])
    async def test_toggle_requires_boolean(self, client: AsyncClient, opportunity_id: str, payload: dict) -> None:
        step_id = await add_step(client, opportunity_id, title="Send deck")
        response = await client.patch(f"/steps/{step_id}", json=payload)
        assert response.status_code == 400
        assert response.json()["field"] == "isDone"

    async def test_toggle_bad_uuid_is_rejected(self, client: AsyncClient) -> None:
        response = await client.patch("/steps/bad-uuid", json={"isDone": True})
        assert response.status_code == 400
        body = response.json()
        assert body["kind"] == "validation"
        assert body["field"] == "step_id"

    async def test_toggle_missing_step_returns_404(self, client: AsyncClient) -> None:
        response = await client.patch(f"/steps/{uuid.uuid4()}", json={"isDone": True})
        assert response.status_code == 404

    async def test_delete_step(self, client: AsyncClient, opportunity_id: str) -> None:
        step_id = await add_step(client, opportunity_id, title="Send deck")
        response = await client.delete(f"/steps/{step_id}")
        assert response.status_code == 200
        assert (await client.get(f"/opportunities/{opportunity_id}")).json()["nextSteps"] == []
        assert (await client.delete(f"/steps/{step_id}")).status_code == 404

    @pytest.mark.parametrize(
        "raw_id",
        ["0000000000000000000000000000abcd", "{12345678-1234-1234-1234-123456789abc}", "urn:uuid:12345678-1234-1234-1234-123456789abc"],
    )
    async def test_delete_step_rejects_non_canonical_id(self, client: AsyncClient, raw_id: str) -> None:
        response = await client.delete(f"/steps/{raw_id}")
        assert response.status_code == 400
        body = response.json()
        assert body["kind"] == "validation"
        assert body["field"] == "step_id"
