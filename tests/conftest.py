from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import app
from routers.evaluations import get_store
from schemas.enums import SubjectKey
from services import evaluation_engine
from services.history_store import HistoryStore

BASE_TIME = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


def subject_grades(*values):
    """과목 순서대로 평점 매핑 생성 (값이 하나면 5과목 모두 동일)"""
    if len(values) == 1:
        values = values * 5
    return dict(zip(list(SubjectKey), values))


def make_result(grade=2.00, attendance=2.00, minutes=0, raw_percent=None):
    return evaluation_engine.evaluate(
        subject_grades(grade),
        attendance,
        raw_percent,
        now=BASE_TIME + timedelta(minutes=minutes),
    )


def form_for(grade="2.00", attendance="2.00", **extra):
    form = {f"grade_{key.value}": grade for key in SubjectKey}
    form["attendance"] = attendance
    form.update(extra)
    return form


@pytest.fixture
def store(tmp_path):
    return HistoryStore(str(tmp_path / "history.json"))


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
