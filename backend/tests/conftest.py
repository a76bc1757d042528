import os, json, tempfile
from datetime import datetime, timedelta, timezone

_db_dir = tempfile.mkdtemp(prefix="mail_insights_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["JWT_SECRET"] = "test-jwt-secret"

import httpx
import pytest
from backend.app.main import app
from backend.app.db.database import Base, engine, SessionLocal, init_db
from backend.app.services.annotator import Annotator
from backend.app.services.auth_service import generate_token, auth_user_for
from backend.app.services.employee_service import get_or_create_organization, create_employee
from backend.app.services.graph_client import GraphClient

GRAPH_BASE = "https://graph.test/v1.0"
LLM_BASE = "https://llm.test/v1"


@pytest.fixture(autouse=True)
def fresh_schema():
    init_db()
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def employee(db):
    org = get_or_create_organization(db, "contoso.com")
    return create_employee(db, email="alice@contoso.com", organization_id=org.id, display_name="Alice", role="Analyst")


@pytest.fixture
def auth_headers(employee):
    return {"Authorization": f"Bearer {generate_token(auth_user_for(employee))}"}


def graph_message(message_id, subject="Quarterly report", body="Please send the report by Friday.", received=None,
                  sender="bob@contoso.com", to=("alice@contoso.com",)):
    received = received or datetime.now(timezone.utc) - timedelta(hours=1)
    return {
        "id": message_id,
        "conversationId": f"conv-{message_id}",
        "subject": subject,
        "bodyPreview": body,
        "receivedDateTime": received.strftime("%Y-%m-%dT%H:%M:%SZ"),
        "sender": {"emailAddress": {"name": "Bob", "address": sender}},
        "toRecipients": [{"emailAddress": {"address": a}} for a in to],
        "importance": "normal",
        "hasAttachments": False,
        "isRead": False,
    }


def annotation(tasks=(), sentiment="neutral", summary="Summary", urgency=3, topics=("reporting",)):
    return {
        "tasks": list(tasks),
        "summary": summary,
        "sentiment": sentiment,
        "urgencyScore": urgency,
        "keyTopics": list(topics),
        "actionRequired": bool(tasks),
    }


def extracted_task(title, confidence, due="2026-11-01T17:00:00Z", priority="high"):
    return {"title": title, "description": f"{title} details", "assignedTo": None, "dueDate": due,
            "priority": priority, "category": "deliverable", "confidence": confidence}


@pytest.fixture
def graph_factory():
    """Build a GraphClient factory served by an in-memory Graph."""
    def build(user=None, messages=(), fail_status=None, requests=None):
        user = user or {"id": "graph-user-1", "mail": "alice@contoso.com", "displayName": "Alice",
                        "department": "Finance", "jobTitle": "Analyst"}

        def handler(request: httpx.Request):
            if requests is not None:
                requests.append(request)
            if fail_status:
                return httpx.Response(fail_status, json={"error": {"code": "InvalidAuthenticationToken",
                                                                   "message": "Access token has expired."}})
            path = request.url.path
            if path.endswith("/me"):
                return httpx.Response(200, json=user)
            if path.endswith("/messages"):
                return httpx.Response(200, json={"value": list(messages)})
            if "/users/" in path:
                return httpx.Response(200, json=user)
            return httpx.Response(404, json={"error": {"message": "Resource not found"}})

        transport = httpx.MockTransport(handler)
        return lambda token: GraphClient(token, base_url=GRAPH_BASE, transport=transport)
    return build


@pytest.fixture
def llm_annotator():
    """Build an Annotator whose LLM answers per email subject.

    A dict answer is returned as JSON content, a str as raw content, an int as an HTTP error status.
    """
    def build(answers, default=None, requests=None):
        def handler(request: httpx.Request):
            payload = json.loads(request.content)
            if requests is not None:
                requests.append(payload)
            prompt = payload["messages"][0]["content"]
            subject = prompt.split("Email Subject: ", 1)[1].split("\n", 1)[0]
            answer = answers.get(subject, default)
            if answer is None:
                answer = annotation()
            if isinstance(answer, int):
                return httpx.Response(answer, json={"error": {"message": "upstream failure"}})
            content = answer if isinstance(answer, str) else json.dumps(answer)
            return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})

        return Annotator(api_key="test-key", base_url=LLM_BASE, transport=httpx.MockTransport(handler))
    return build
