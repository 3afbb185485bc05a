"""API tests for the task board endpoints."""

import pytest


@pytest.fixture
async def project_id(client) -> str:
    response = await client.post("/api/v1/projects", json={"name": "Cardápio Digital"})
    return response.json()["id"]


async def _add_task(client, project_id: str, code: str = "RN - 1", squad: str | None = None) -> dict:
    payload = {"code": code, "title": "Login", "category": "RN - 1 Acesso", "description": "Regra completa"}
    if squad:
        payload["squad"] = squad
    response = await client.post(f"/api/v1/projects/{project_id}/tasks", json=payload)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_task(client, project_id):
    task = await _add_task(client, project_id, squad="Backend")
    assert task["column"] == "A Fazer"
    assert task["squad"] == "Backend"
    assert task["dev_completed_at"] is None


@pytest.mark.asyncio
async def test_create_task_requires_fields(client, project_id):
    response = await client.post(f"/api/v1/projects/{project_id}/tasks", json={"code": "RN - 1"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_task_unknown_project(client):
    response = await client.post(
        "/api/v1/projects/proj_missing/tasks", json={"code": "a", "title": "b", "category": "c"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_move_task_stamps_once(client, project_id):
    task = await _add_task(client, project_id)
    url = f"/api/v1/projects/{project_id}/tasks/{task['id']}/move"

    first = (await client.post(url, json={"column": "Testes"})).json()
    assert first["persisted"] is True
    assert first["task"]["column"] == "Testes"
    dev_stamp = first["task"]["dev_completed_at"]
    assert dev_stamp is not None
    assert first["task"]["prod_completed_at"] is None

    await client.post(url, json={"column": "A Fazer"})
    final = (await client.post(url, json={"column": "Deploy Prod"})).json()
    assert final["task"]["column"] == "Deploy Prod"
    assert final["task"]["prod_completed_at"] is not None
    assert final["task"]["dev_completed_at"][:19] == dev_stamp[:19]

    board = (await client.get(f"/api/v1/projects/{project_id}/board")).json()
    prod = next(c for c in board if c["column"] == "Deploy Prod")
    assert [t["id"] for t in prod["tasks"]] == [task["id"]]


@pytest.mark.asyncio
async def test_move_to_unknown_column(client, project_id):
    task = await _add_task(client, project_id)
    response = await client.post(
        f"/api/v1/projects/{project_id}/tasks/{task['id']}/move", json={"column": "Done"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_move_unknown_task(client, project_id):
    response = await client.post(
        f"/api/v1/projects/{project_id}/tasks/task_missing/move", json={"column": "Testes"}
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_edit_task(client, project_id):
    task = await _add_task(client, project_id)
    response = await client.put(
        f"/api/v1/projects/{project_id}/tasks/{task['id']}",
        json={"title": "Login social", "squad": "Frontend"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Login social"
    assert body["squad"] == "Frontend"
    assert body["description"] == "Regra completa"


@pytest.mark.asyncio
async def test_delete_task(client, project_id):
    task = await _add_task(client, project_id)
    url = f"/api/v1/projects/{project_id}/tasks/{task['id']}"

    assert (await client.delete(url)).status_code == 204
    assert (await client.delete(url)).status_code == 404
    project = (await client.get(f"/api/v1/projects/{project_id}")).json()
    assert project["tasks"] == []


@pytest.mark.asyncio
async def test_board_lists_all_columns_in_order(client, project_id):
    await _add_task(client, project_id)
    board = (await client.get(f"/api/v1/projects/{project_id}/board")).json()
    assert [c["column"] for c in board] == ["A Fazer", "Fazendo", "Testes", "Deploy Dev", "Deploy Prod"]
    assert len(board[0]["tasks"]) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["code", "title", "category", "column"])
async def test_edit_rejects_null_required_field(client, project_id, field):
    task = await _add_task(client, project_id)
    response = await client.put(f"/api/v1/projects/{project_id}/tasks/{task['id']}", json={field: None})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    project = (await client.get(f"/api/v1/projects/{project_id}")).json()
    assert project["tasks"][0]["title"] == "Login"
    assert project["tasks"][0]["column"] == "A Fazer"


@pytest.mark.asyncio
async def test_edit_rejects_empty_title(client, project_id):
    task = await _add_task(client, project_id)
    response = await client.put(f"/api/v1/projects/{project_id}/tasks/{task['id']}", json={"title": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_edit_null_clears_description_and_squad(client, project_id):
    task = await _add_task(client, project_id, squad="Backend")
    response = await client.put(
        f"/api/v1/projects/{project_id}/tasks/{task['id']}", json={"description": None, "squad": None}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["description"] == ""
    assert body["squad"] is None
