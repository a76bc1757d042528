from datetime import datetime, timezone
from fastapi.testclient import TestClient
from backend.app.main import app
from backend.app.models.task_model import Task
from backend.app.services.email_service import create_email
from backend.app.services.task_service import create_task, list_tasks_by_employee

client = TestClient(app)


def _task(db, employee, title='Review contract'):
    email = create_email(db, message_id=f'src-{title}', sender_id=employee.id,
                         received_at=datetime.now(timezone.utc), subject='Contract')
    return create_task(db, title=title, assigned_to_id=employee.id, created_by_id=employee.id,
                       source_email_id=email.id, priority='high', confidence_score=0.9)


def test_update_status(db, employee, auth_headers):
    task = _task(db, employee)
    r = client.put(f'/api/tasks/{task.id}/status', json={'status': 'completed'}, headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert data['success'] is True
    assert data['task']['status'] == 'completed'
    assert data['task']['completionDate'] is not None
    db.expire_all()
    assert db.get(Task, task.id).status == 'completed'


def test_reopening_clears_completion_date(db, employee, auth_headers):
    task = _task(db, employee)
    client.put(f'/api/tasks/{task.id}/status', json={'status': 'completed'}, headers=auth_headers)
    r = client.put(f'/api/tasks/{task.id}/status', json={'status': 'in_progress'}, headers=auth_headers)
    assert r.json()['task']['completionDate'] is None


def test_invalid_status_is_rejected(db, employee, auth_headers):
    task = _task(db, employee)
    r = client.put(f'/api/tasks/{task.id}/status', json={'status': 'done'}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()['detail'] == 'Invalid status'


def test_unknown_task_returns_404(auth_headers):
    r = client.put('/api/tasks/42/status', json={'status': 'completed'}, headers=auth_headers)
    assert r.status_code == 404


def test_recent_tasks_include_assignee_and_source(db, employee, auth_headers):
    _task(db, employee, 'First')
    _task(db, employee, 'Second')
    r = client.get('/api/tasks/recent?limit=1', headers=auth_headers)
    assert r.status_code == 200
    [item] = r.json()
    assert item['title'] == 'Second'
    assert item['assignedTo']['email'] == 'alice@contoso.com'
    assert item['sourceEmail']['subject'] == 'Contract'
    assert item['confidenceScore'] == 0.9


def test_tasks_by_employee(db, employee):
    _task(db, employee, 'One')
    _task(db, employee, 'Two')
    assert {t.title for t in list_tasks_by_employee(db, employee.id)} == {'One', 'Two'}
