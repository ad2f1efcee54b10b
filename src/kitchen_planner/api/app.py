"""FastAPI application factory."""

from datetime import date
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder

from kitchen_planner.api.models import TaskUpdateRequest
from kitchen_planner.app_logging import configure_logging
from kitchen_planner.containers import AppContainer
from kitchen_planner.domain.tasks import TaskFilters, TaskPriority, TaskType
from kitchen_planner.services.shopping import InvalidCoversError
from kitchen_planner.services.tasks import InvalidTaskUpdateError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)

    app = FastAPI()
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/dishes/{dish_id}/cost")
    async def dish_cost(dish_id: UUID, request: Request) -> dict[str, object]:
        """Return batch and per-portion costing for a dish."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.costing_service.get_dish_cost(dish_id)
        if summary is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Dish not found")
        return jsonable_encoder(summary)

    @app.get("/menus/{menu_id}/cost")
    async def menu_cost(menu_id: UUID, request: Request) -> dict[str, object]:
        """Return food cost rolled up across a menu."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.costing_service.get_menu_cost(menu_id)
        return _found(summary)

    @app.get("/menus/{menu_id}/shopping-list")
    async def shopping_list(menu_id: UUID, request: Request) -> dict[str, object]:
        """Return the aggregated shopping list for a menu."""
        state_container: AppContainer = request.app.state.container
        result = state_container.shopping_list_service.generate_shopping_list(menu_id)
        return _found(result)

    @app.get("/menus/{menu_id}/scaled-shopping-list")
    async def scaled_shopping_list(
        menu_id: UUID, request: Request, covers: int | None = None
    ) -> dict[str, object]:
        """Return the shopping list scaled to a number of covers."""
        state_container: AppContainer = request.app.state.container
        if covers is None:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                "covers parameter is required and must be a positive integer",
            )
        try:
            service = state_container.shopping_list_service
            result = service.generate_scaled_shopping_list(menu_id, covers)
        except InvalidCoversError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        return _found(result)

    @app.get("/menus/{menu_id}/prep-tasks")
    async def prep_tasks(menu_id: UUID, request: Request) -> dict[str, object]:
        """Return prep tasks for a menu grouped by timing bucket."""
        state_container: AppContainer = request.app.state.container
        result = state_container.prep_task_service.generate_prep_tasks(menu_id)
        return _found(result)

    @app.post("/menus/{menu_id}/tasks/generate", status_code=status.HTTP_201_CREATED)
    async def generate_tasks(
        menu_id: UUID, request: Request, week_start: date | None = None
    ) -> dict[str, object]:
        """Regenerate the auto tasks for a menu."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.task_service.generate_and_persist_tasks(
            menu_id, week_start=week_start
        )
        return _found(summary)

    @app.get("/tasks")
    async def list_tasks(  # noqa: PLR0913
        request: Request,
        menu_id: str | None = None,
        type: str | None = None,  # noqa: A002
        completed: bool | None = None,
        priority: str | None = None,
        due_date_from: date | None = None,
        due_date_to: date | None = None,
        overdue: bool = False,
        search: str | None = None,
    ) -> list[dict[str, object]]:
        """Return tasks matching the query filters."""
        state_container: AppContainer = request.app.state.container
        try:
            filters = TaskFilters(
                menu_id=UUID(menu_id) if menu_id and menu_id != "none" else None,
                without_menu=menu_id == "none",
                type=TaskType(type) if type else None,
                completed=completed,
                priority=TaskPriority(priority) if priority else None,
                due_date_from=due_date_from,
                due_date_to=due_date_to,
                overdue=overdue,
                search=search,
            )
        except ValueError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        return jsonable_encoder(state_container.task_service.list_tasks(filters))

    @app.put("/tasks/{task_id}")
    async def update_task(
        task_id: UUID, body: TaskUpdateRequest, request: Request
    ) -> dict[str, object]:
        """Apply a partial update to a task."""
        state_container: AppContainer = request.app.state.container
        try:
            task = state_container.task_service.update_task(
                task_id, body.model_dump(exclude_unset=True)
            )
        except InvalidTaskUpdateError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        if task is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Task not found")
        return jsonable_encoder(task)

    return app


def _found(result: object | None) -> dict[str, object]:
    if result is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Menu not found")
    return jsonable_encoder(result)
