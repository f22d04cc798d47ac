# src/todolist/web/app.py

"""FastAPI app exposing the todo service as a JSON API (+ static frontend)."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field, StrictBool

from ..core.errors import StorageError, ValidationError
from ..todos.todo_models import TodoPatch
from ..todos.todo_service import TodoService

logger = logging.getLogger(__name__)

NOT_FOUND = "Todo not found"


class CreateTodoRequest(BaseModel):
    """Request body for POST /api/todos."""

    text: str | None = Field(None, description="Task text; trimmed before storing")


class UpdateTodoRequest(BaseModel):
    """Request body for PUT /api/todos/{id}. Omitted fields stay unchanged."""

    text: str | None = Field(None, description="New task text")
    completed: StrictBool | None = Field(None, description="New completion flag")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "path", "query")]
    msg = str(first.get("msg", "Invalid request"))
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def create_app(
    service: TodoService,
    *,
    title: str = "todolist",
    static_dir: str | Path | None = None,
) -> FastAPI:
    """
    Build the FastAPI app around an already constructed service.

    The caller owns the storage lifetime; this function only wires routes.
    """
    app = FastAPI(title=title, description="Single-user task list API", version="1.0.0")
    app.state.todo_service = service

    @app.exception_handler(ValidationError)
    async def _on_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _on_request_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe_validation_error(exc)
        logger.info("Malformed request %s %s: %s", request.method, request.url.path, message)
        return _error(400, message)

    @app.exception_handler(StorageError)
    async def _on_storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.exception(
            "Storage failure on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
        return _error(500, exc.message)

    @app.get("/api/todos")
    async def list_todos() -> JSONResponse:
        todos = await service.list_all()
        return JSONResponse(content=[t.to_dict() for t in todos])

    @app.get("/api/todos/{todo_id}")
    async def get_todo(todo_id: int) -> JSONResponse:
        todo = await service.get_by_id(todo_id)
        if todo is None:
            return _error(404, NOT_FOUND)
        return JSONResponse(content=todo.to_dict())

    @app.post("/api/todos")
    async def create_todo(payload: CreateTodoRequest | None = None) -> JSONResponse:
        text = payload.text if payload is not None else None
        todo = await service.create_and_fetch(text)
        if todo is None:
            # Deleted between insert and re-read.
            return _error(404, NOT_FOUND)
        logger.info("Created todo id=%s", todo.id)
        return JSONResponse(status_code=201, content=todo.to_dict())

    @app.put("/api/todos/{todo_id}")
    async def update_todo(todo_id: int, payload: UpdateTodoRequest | None = None) -> JSONResponse:
        patch = TodoPatch() if payload is None else TodoPatch(text=payload.text, completed=payload.completed)
        changes = await service.update(todo_id, patch)
        if changes == 0:
            return _error(404, NOT_FOUND)

        todo = await service.get_by_id(todo_id)
        if todo is None:
            return _error(404, NOT_FOUND)
        return JSONResponse(content=todo.to_dict())

    @app.delete("/api/todos/completed/all")
    async def delete_completed_todos() -> JSONResponse:
        deleted = await service.delete_completed()
        return JSONResponse(
            content={
                "message": f"{deleted} completed todos deleted successfully",
                "deletedCount": deleted,
            }
        )

    @app.delete("/api/todos/{todo_id}")
    async def delete_todo(todo_id: int) -> JSONResponse:
        changes = await service.delete(todo_id)
        if changes == 0:
            return _error(404, NOT_FOUND)
        logger.info("Deleted todo id=%s", todo_id)
        return JSONResponse(content={"message": "Todo deleted successfully"})

    if static_dir is not None:
        static_path = Path(static_dir)
        if static_path.is_dir():
            # Mounted last so /api routes win; html=True serves index.html at "/".
            app.mount("/", StaticFiles(directory=str(static_path), html=True), name="static")
        else:
            logger.warning("Static dir %s not found; frontend disabled", static_path)

    return app
