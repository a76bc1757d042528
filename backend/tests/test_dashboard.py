from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from backend.app.main import app
from backend.app.services.analytics_service import sentiment_distribution, email_metrics
from backend.app.services.email_service import create_email, create_email_analysis
from backend.app.services.employee_service import get_or_create_organization, create_employee
from backend.app.services.task_service import create_task, update_task_status

client = TestClient(app)


def _seed_email(db, sender, message_id, sentiment=None, received=None):
    email = create_email(db, message_id=message_id, sender_id=sender.id,
                         received_at=received or datetime.now(timezone.utc), subject=message_id)
    if sentiment:
        create_email_analysis(db, email_id=email.id, sentiment=sentiment, urgency_score=1)
    return email


def _outsider(db):
    org = get_or_create_organization(db, 'fabrikam.com')
    return create_employee(db, email='zed@fabrikam.com', organization_id=org.id)


def test_metrics_are_scoped_to_organization(db, employee, auth_headers):
    other = _outsider(db)
    e1 = _seed_email(db, employee, 'a1', 'positive')
    _seed_email(db, employee, 'a2')
    _seed_email(db, other, 'z1', 'negative')
    t = create_task(db, title='Do it', assigned_to_id=employee.id, source_email_id=e1.id)
    create_task(db, title='Other org', assigned_to_id=other.id, source_email_id=e1.id)
    update_task_status(db, t.id, 'completed')
    r = client.get('/api/dashboard/metrics', headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {'totalEmails': 2, 'tasksIdentified': 1, 'analyzedEmails': 1, 'tasksCompleted': 1}


def test_sentiment_distribution_sums_to_analyzed_emails(db, employee, auth_headers):
    other = _outsider(db)
    for i, s in enumerate(['positive', 'positive', 'negative', 'neutral', 'neutral', 'neutral']):
        _seed_email(db, employee, f'e{i}', s)
    _seed_email(db, employee, 'unanalyzed')
    _seed_email(db, other, 'z1', 'negative')
    r = client.get('/api/dashboard/sentiment', headers=auth_headers)
    assert r.json() == {'positive': 2, 'neutral': 3, 'negative': 1}
    org_id = employee.organization_id
    assert sum(sentiment_distribution(db, org_id).values()) == email_metrics(db, org_id)['analyzed_emails']


def test_sentiment_distribution_has_all_labels_when_empty(auth_headers):
    assert client.get('/api/dashboard/sentiment', headers=auth_headers).json() == {'positive': 0, 'neutral': 0, 'negative': 0}


def test_email_volume_groups_by_day(db, employee, auth_headers):
    now = datetime.now(timezone.utc).replace(hour=12, minute=0, second=0, microsecond=0)
    for i, days_ago in enumerate([0, 0, 1, 3, 30]):
        _seed_email(db, employee, f'v{i}', received=now - timedelta(days=days_ago))
    r = client.get('/api/dashboard/email-volume', headers=auth_headers)
    assert r.status_code == 200
    points = r.json()
    assert [p['count'] for p in points] == [1, 1, 2]
    assert points[-1]['date'] == now.date().isoformat()
    assert [p['date'] for p in points] == sorted(p['date'] for p in points)
    wide = client.get('/api/dashboard/email-volume?days=60', headers=auth_headers).json()
    assert sum(p['count'] for p in wide) == 5


def test_email_volume_rejects_bad_days(auth_headers):
    assert client.get('/api/dashboard/email-volume?days=0', headers=auth_headers).status_code == 422
