"""
HTTP-level tests for the todo routes and per-user data isolation.
"""

import uuid

import pytest

from conftest import register


@pytest.fixture
def alice(client):
    _, token = register(client, "alice@example.com")
    return {"x-auth": token}


@pytest.fixture
def bob(client):
    _, token = register(client, "bob@example.com")
    return {"x-auth": token}


def _create(client, headers, text="First todo"):
    res = client.post("/todos", json={"text": text}, headers=headers)
    assert res.status_code == 200
    return res.json()


class TestCreateTodo:
    def test_create(self, client, alice):
        todo = _create(client, alice, "  Test todo text  ")
        assert todo["text"] == "Test todo text"
        assert todo["completed"] is False
        assert todo["completed_at"] is None

        me = client.get("/me", headers=alice).json()
        assert todo["creator_id"] == me["id"]

    def test_empty_text_rejected(self, client, alice):
        res = client.post("/todos", json={"text": "   "}, headers=alice)
        assert res.status_code == 400
        assert client.get("/todos", headers=alice).json()["todos"] == []

    def test_requires_auth(self, client):
        res = client.post("/todos", json={"text": "x"})
        assert res.status_code == 401


class TestReadTodos:
    def test_list_only_own(self, client, alice, bob):
        _create(client, alice, "alice 1")
        _create(client, alice, "alice 2")
        _create(client, bob, "bob 1")

        alice_todos = client.get("/todos", headers=alice).json()["todos"]
        bob_todos = client.get("/todos", headers=bob).json()["todos"]
        assert sorted(t["text"] for t in alice_todos) == ["alice 1", "alice 2"]
        assert [t["text"] for t in bob_todos] == ["bob 1"]

    def test_get_one(self, client, alice):
        todo = _create(client, alice)
        res = client.get(f"/todos/{todo['id']}", headers=alice)
        assert res.status_code == 200
        assert res.json()["todo"]["text"] == "First todo"

    def test_get_other_users_todo(self, client, alice, bob):
        todo = _create(client, alice)
        res = client.get(f"/todos/{todo['id']}", headers=bob)
        assert res.status_code == 404

    def test_unknown_and_invalid_ids(self, client, alice):
        assert client.get(f"/todos/{uuid.uuid4()}", headers=alice).status_code == 404
        assert client.get("/todos/123abc", headers=alice).status_code == 404


class TestDeleteTodo:
    def test_delete(self, client, alice):
        todo = _create(client, alice)
        res = client.delete(f"/todos/{todo['id']}", headers=alice)
        assert res.status_code == 200
        assert res.json()["todo"]["id"] == todo["id"]
        assert client.get(f"/todos/{todo['id']}", headers=alice).status_code == 404

    def test_delete_other_users_todo(self, client, alice, bob):
        todo = _create(client, alice)
        assert client.delete(f"/todos/{todo['id']}", headers=bob).status_code == 404
        assert client.get(f"/todos/{todo['id']}", headers=alice).status_code == 200

    def test_delete_invalid_id(self, client, alice):
        assert client.delete("/todos/234", headers=alice).status_code == 404


class TestUpdateTodo:
    def test_complete(self, client, alice):
        todo = _create(client, alice)
        res = client.patch(
            f"/todos/{todo['id']}",
            json={"text": "updated", "completed": True},
            headers=alice,
        )
        assert res.status_code == 200
        updated = res.json()["todo"]
        assert updated["text"] == "updated"
        assert updated["completed"] is True
        assert isinstance(updated["completed_at"], int)

    def test_uncomplete_clears_timestamp(self, client, alice):
        todo = _create(client, alice)
        client.patch(f"/todos/{todo['id']}", json={"completed": True}, headers=alice)
        res = client.patch(
            f"/todos/{todo['id']}",
            json={"text": "again", "completed": False},
            headers=alice,
        )
        updated = res.json()["todo"]
        assert updated["completed"] is False
        assert updated["completed_at"] is None
        assert updated["text"] == "again"

    def test_update_other_users_todo(self, client, alice, bob):
        todo = _create(client, alice)
        res = client.patch(f"/todos/{todo['id']}", json={"completed": True}, headers=bob)
        assert res.status_code == 404
        assert client.get(f"/todos/{todo['id']}", headers=alice).json()["todo"]["completed"] is False
