from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.templating import Jinja2Templates

from taskmanager.app.routes import history, task_lists, tasks
from taskmanager.app.middleware.access_log import AccessLogMiddleware
from taskmanager.config import Settings
from taskmanager.domain.errors import NotFoundError, PersistenceError
from taskmanager.infra.db.sqlite import create_schema, make_sqlite_url, make_engine, make_sessionmaker
from taskmanager.infra.db.log_repo_sqlite import SQLiteLogRepo
from taskmanager.infra.db.task_list_repo_sqlite import SQLiteTaskListRepo
from taskmanager.infra.db.task_repo_sqlite import SQLiteTaskRepo
from taskmanager.observability.logging import setup_logging
from taskmanager.services.log_service import LogService
from taskmanager.services.task_list_service import TaskListService
from taskmanager.services.task_service import TaskService

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
logger = logging.getLogger("taskmanager.system")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings)
    logger.info("system.start", extra={"category": "system", "event": "system.start"})

    # --- SQLite wiring ---
    engine = make_engine(make_sqlite_url(settings.db_path))
    sessionmaker = make_sessionmaker(engine)

    task_repo = SQLiteTaskRepo(sessionmaker)
    task_list_repo = SQLiteTaskListRepo(sessionmaker)
    log_svc = LogService(
        SQLiteLogRepo(sessionmaker), task_repo, task_list_repo,
        default_limit=settings.history_limit,
        display_tz=settings.display_zone(),
    )
    list_svc = TaskListService(task_list_repo, log_svc)
    task_svc = TaskService(task_repo, list_svc, log_svc)

    tasks.get_service = lambda: task_svc
    task_lists.get_service = lambda: list_svc
    history.get_service = lambda: log_svc

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await create_schema(engine)
        logger.info(
            "db.ready",
            extra={"category": "system", "event": "db.ready", "db_path": settings.db_path},
        )
        yield
        await engine.dispose()

    app = FastAPI(title="Task Manager", lifespan=lifespan)
    app.add_middleware(AccessLogMiddleware)
    app.state.settings = settings

    # Static files (CSS)
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    # Routers
    app.include_router(tasks.router)
    app.include_router(task_lists.router)
    app.include_router(history.router)

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        logger.info(
            "request.not_found",
            extra={"category": "http", "event": "request.not_found", "path": request.url.path, "detail": exc.message},
        )
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(PersistenceError)
    async def _persistence_failed(request: Request, exc: PersistenceError):
        # already logged with context where it was raised
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    # Pages
    @app.get("/", response_class=HTMLResponse)
    async def home(request: Request):
        lists = await list_svc.get_task_lists()
        all_tasks = await task_svc.get_tasks()
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "task_lists": lists,
                "tasks_by_list": {
                    tl.task_list_id: [t for t in all_tasks if t.task_list_id == tl.task_list_id] for tl in lists
                },
                "history": await log_svc.history(),
            },
        )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
