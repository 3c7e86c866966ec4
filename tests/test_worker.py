import httpx

from app import dependencies
from worker.celery_app import celery_app, trigger_workflow

from .fakes import FakeWorkflowEngine


def test_trigger_workflow_runs_dispatch(monkeypatch, store, pending_task, make_dispatcher):
    engine = FakeWorkflowEngine(httpx.Response(200, json={
        "new_script": "Improved script",
        "analysis": "Made it better",
    }))
    monkeypatch.setattr(dependencies, "build_dispatch_client", lambda: make_dispatcher(engine))

    assert trigger_workflow(pending_task.id) == "completed"
    assert store.get(pending_task.id).is_completed()


def test_trigger_workflow_skips_duplicate(monkeypatch, processing_task, make_dispatcher):
    engine = FakeWorkflowEngine(httpx.Response(200, json={}))
    monkeypatch.setattr(dependencies, "build_dispatch_client", lambda: make_dispatcher(engine))

    assert trigger_workflow(processing_task.id) is None
    assert engine.requests == []


def test_schedule_dispatch_enqueues_task(monkeypatch):
    queued = []
    monkeypatch.setattr(trigger_workflow, "delay", queued.append)

    dependencies.schedule_dispatch("abc123")

    assert queued == ["abc123"]


def test_worker_does_not_redeliver_lost_dispatches():
    assert not celery_app.conf.task_acks_late
    assert not celery_app.conf.task_reject_on_worker_lost
