from __future__ import annotations

from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from taskmanager.app.main import create_app
from taskmanager.config import Settings
from taskmanager.infra.db.task_repo_memory import InMemoryLogRepo, InMemoryTaskListRepo, InMemoryTaskRepo
from taskmanager.services.log_service import LogService
from taskmanager.services.task_list_service import TaskListService
from taskmanager.services.task_service import TaskService


@dataclass
class Services:
    task_repo: InMemoryTaskRepo
    task_list_repo: InMemoryTaskListRepo
    log_repo: InMemoryLogRepo
    tasks: TaskService
    task_lists: TaskListService
    history: LogService


def build_services(task_repo=None, task_list_repo=None, log_repo=None) -> Services:
    task_repo = task_repo or InMemoryTaskRepo()
    task_list_repo = task_list_repo or InMemoryTaskListRepo(task_repo)
    log_repo = log_repo or InMemoryLogRepo()
    history = LogService(log_repo, task_repo, task_list_repo)
    task_lists = TaskListService(task_list_repo, history)
    tasks = TaskService(task_repo, task_lists, history)
    return Services(task_repo, task_list_repo, log_repo, tasks, task_lists, history)


@pytest.fixture
def services() -> Services:
    return build_services()


@pytest.fixture
def make_services():
    return build_services


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(db_path=str(tmp_path / "data" / "test.db"), log_dir=str(tmp_path / "logs"), log_level="DEBUG")


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
