import logging
from typing import Callable, List, Optional
import httpx
from pydantic import ValidationError
from ..core.config import get_settings
from ..schemas.graph import GraphUser, GraphMessage

logger = logging.getLogger(__name__)

MESSAGE_SELECT_FIELDS = ','.join([
    'id', 'subject', 'bodyPreview', 'receivedDateTime', 'sender', 'toRecipients',
    'importance', 'hasAttachments', 'conversationId', 'isRead',
])
DEFAULT_PAGE_SIZE = 50


class GraphError(Exception):
    """Microsoft Graph call failed. Carries Graph's status code and message unchanged."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self):
        if self.status_code is None:
            return self.message
        return f"graph_http_{self.status_code}: {self.message}"


class GraphClient:
    """Thin Microsoft Graph REST client bound to one delegated access token."""

    def __init__(self, access_token: str, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        settings = get_settings()
        self._client = httpx.Client(
            base_url=base_url or settings.graph_base_url,
            timeout=timeout if timeout is not None else settings.graph_timeout,
            headers={'Authorization': f'Bearer {access_token}', 'Accept': 'application/json'},
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self._client.close()

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        try:
            resp = self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise GraphError(f"{type(e).__name__}: {e}") from e
        if resp.status_code >= 400:
            err = GraphError(_error_message(resp), status_code=resp.status_code)
            logger.warning("graph_request_failed", extra={"path": path, "status": resp.status_code})
            raise err
        try:
            data = resp.json()
        except ValueError as e:
            raise GraphError(f"response from {path} is not JSON") from e
        if not isinstance(data, dict):
            raise GraphError(f"response from {path} is not an object")
        return data

    def get_current_user(self) -> GraphUser:
        return self._parse_user(self._get('/me'))

    def get_user_profile(self, user_id: str) -> GraphUser:
        return self._parse_user(self._get(f'/users/{user_id}'))

    def list_messages(self, user_id: str, top: int = DEFAULT_PAGE_SIZE) -> List[GraphMessage]:
        """Newest-first first page of a mailbox. Further pages are never requested."""
        data = self._get(f'/users/{user_id}/messages', params={
            '$top': top,
            '$orderby': 'receivedDateTime desc',
            '$select': MESSAGE_SELECT_FIELDS,
        })
        try:
            return [GraphMessage.model_validate(m) for m in data.get('value') or []]
        except ValidationError as e:
            raise GraphError(f"unexpected message payload: {e.errors()[0]['msg']}") from e

    @staticmethod
    def _parse_user(data: dict) -> GraphUser:
        try:
            return GraphUser.model_validate(data)
        except ValidationError as e:
            raise GraphError(f"unexpected user payload: {e.errors()[0]['msg']}") from e


def _error_message(resp: httpx.Response) -> str:
    # Graph errors look like {"error": {"code": "...", "message": "..."}}
    try:
        body = resp.json()
        err = body.get('error') if isinstance(body, dict) else None
        if isinstance(err, dict) and err.get('message'):
            return err['message']
    except ValueError:
        pass
    return resp.text[:200] or resp.reason_phrase


def get_graph_client_factory() -> Callable[[str], GraphClient]:
    """FastAPI dependency: builds one GraphClient per caller token."""
    return GraphClient
