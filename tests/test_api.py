"""Tests for the HTTP endpoints."""

from uuid import uuid4

from fastapi.testclient import TestClient

from kitchen_planner.api.app import create_app
from kitchen_planner.containers import AppContainer
from kitchen_planner.domain.menus import Dish, Menu


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def test_health(container: AppContainer) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_dish_cost_endpoint(container: AppContainer, carbonara: Dish) -> None:
    response = _client(container).get(f"/dishes/{carbonara.id}/cost")

    assert response.status_code == 200
    data = response.json()
    assert data["dish_name"] == "Pasta Carbonara"
    assert data["combined_total"] == 11.5
    assert data["cost_per_portion"] == 2.88
    assert data["line_items"][0]["ingredient"] == "Spaghetti"


def test_dish_cost_not_found(container: AppContainer) -> None:
    response = _client(container).get(f"/dishes/{uuid4()}/cost")

    assert response.status_code == 404


def test_menu_cost_endpoint(container: AppContainer, menu: Menu) -> None:
    response = _client(container).get(f"/menus/{menu.id}/cost")

    assert response.status_code == 200
    data = response.json()
    assert data["total_food_cost"] == 42.55
    assert [row["dish_name"] for row in data["dishes"]] == [
        "Pasta Carbonara",
        "Caesar Salad",
    ]


def test_menu_endpoints_return_404_for_unknown_menu(container: AppContainer) -> None:
    client = _client(container)
    missing = uuid4()

    for path in (
        f"/menus/{missing}/cost",
        f"/menus/{missing}/shopping-list",
        f"/menus/{missing}/scaled-shopping-list?covers=4",
        f"/menus/{missing}/prep-tasks",
    ):
        response = client.get(path)
        assert response.status_code == 404
        assert response.json()["detail"] == "Menu not found"

    assert client.post(f"/menus/{missing}/tasks/generate").status_code == 404


def test_shopping_list_endpoint(container: AppContainer, menu: Menu) -> None:
    response = _client(container).get(f"/menus/{menu.id}/shopping-list")

    assert response.status_code == 200
    data = response.json()
    assert data["menu_name"] == "Friday Trattoria"
    assert data["groups"][0]["category"] == "dairy"
    assert data["total_estimated_cost"] == 42.55


def test_scaled_shopping_list_endpoint(container: AppContainer, menu: Menu) -> None:
    response = _client(container).get(
        f"/menus/{menu.id}/scaled-shopping-list", params={"covers": 20}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["covers"] == 20
    assert data["scale_factor"] == 2.0
    assert data["base_covers_source"] == "expected"


def test_scaled_shopping_list_requires_positive_covers(
    container: AppContainer, menu: Menu
) -> None:
    client = _client(container)
    path = f"/menus/{menu.id}/scaled-shopping-list"

    assert client.get(path).status_code == 400
    assert client.get(path, params={"covers": 0}).status_code == 400
    assert client.get(path, params={"covers": "lots"}).status_code == 422


def test_prep_tasks_endpoint(container: AppContainer, menu: Menu) -> None:
    response = _client(container).get(f"/menus/{menu.id}/prep-tasks")

    assert response.status_code == 200
    data = response.json()
    assert data["total_tasks"] == 6
    assert data["task_groups"][0]["timing"] == "day_before"
    assert data["task_groups"][0]["label"] == "Day Before Service"


def test_generate_and_list_tasks(container: AppContainer, menu: Menu) -> None:
    client = _client(container)

    response = client.post(
        f"/menus/{menu.id}/tasks/generate", params={"week_start": "2026-10-19"}
    )

    assert response.status_code == 201
    assert response.json() == {
        "menu_id": str(menu.id),
        "total": 12,
        "shopping_count": 6,
        "prep_count": 6,
        "week_start": "2026-10-19",
    }

    listed = client.get("/tasks", params={"menu_id": str(menu.id), "type": "shopping"})
    assert listed.status_code == 200
    assert len(listed.json()) == 6
    assert client.get("/tasks", params={"menu_id": "none"}).json() == []
    assert client.get("/tasks", params={"priority": "urgent"}).status_code == 400


def test_update_task_endpoint(container: AppContainer, menu: Menu) -> None:
    client = _client(container)
    client.post(f"/menus/{menu.id}/tasks/generate")
    task = client.get("/tasks", params={"type": "prep"}).json()[0]

    response = client.put(f"/tasks/{task['id']}", json={"title": "Cure 12 yolks"})

    assert response.status_code == 200
    assert response.json()["title"] == "Cure 12 yolks"
    assert response.json()["source"] == "manual"

    completed = client.put(f"/tasks/{task['id']}", json={"completed": True})
    assert completed.json()["completed"] is True
    assert completed.json()["completed_at"] is not None


def test_update_task_validation(container: AppContainer, menu: Menu) -> None:
    client = _client(container)
    client.post(f"/menus/{menu.id}/tasks/generate")
    task = client.get("/tasks").json()[0]

    assert client.put(f"/tasks/{task['id']}", json={}).status_code == 400
    assert (
        client.put(f"/tasks/{task['id']}", json={"priority": "urgent"}).status_code
        == 400
    )
    assert client.put(f"/tasks/{uuid4()}", json={"title": "x"}).status_code == 404


def test_update_task_rejects_null_title(container: AppContainer, menu: Menu) -> None:
    client = _client(container)
    client.post(f"/menus/{menu.id}/tasks/generate")
    task = client.get("/tasks", params={"type": "prep"}).json()[0]

    response = client.put(f"/tasks/{task['id']}", json={"title": None})

    assert response.status_code == 400
    assert response.json()["detail"] == "Fields cannot be null: title"
    stored = {row["id"]: row for row in client.get("/tasks").json()}[task["id"]]
    assert stored["title"] == task["title"]
    assert stored["source"] == "auto"
