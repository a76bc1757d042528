from typing import List, Optional
import json, logging
import httpx
from pydantic import ValidationError
from ..core.config import get_settings
from ..schemas.annotation import AnnotationResult, SENTIMENTS

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """Analyze the following email and extract actionable tasks. Consider the context and relationships between sender and recipients.

Email Subject: {subject}
From: {sender}
To: {recipients}

Email Content:
{body}

Respond with a single JSON object in this shape:
{{
  "tasks": [
    {{
      "title": "Brief task description",
      "description": "Detailed explanation",
      "assignedTo": "email@domain.com or null",
      "dueDate": "ISO date or null",
      "priority": "high|medium|low",
      "category": "meeting|review|deliverable|follow-up|research",
      "confidence": 0.85
    }}
  ],
  "summary": "Overall email purpose",
  "sentiment": "positive|negative|neutral|urgent",
  "urgencyScore": 5,
  "keyTopics": ["topic1", "topic2"],
  "actionRequired": true
}}

Only extract explicit or strongly implied tasks. Be conservative with confidence scores."""


class AnnotationError(Exception):
    """LLM annotation could not be produced or parsed."""


def build_prompt(body: str, subject: str, sender: str, recipients: List[str]) -> str:
    return PROMPT_TEMPLATE.format(
        subject=subject,
        sender=sender,
        recipients=', '.join(recipients),
        body=body,
    )


def normalize_sentiment(value: Optional[str]) -> str:
    """Collapse model output onto positive/negative/neutral ('urgent' counts as neutral)."""
    label = (value or '').strip().lower()
    return label if label in SENTIMENTS else 'neutral'


class Annotator:
    """Single-shot JSON annotation against an OpenAI-compatible chat completions API."""

    def __init__(self, api_key: Optional[str], model: str = 'gpt-4o', base_url: str = 'https://api.openai.com/v1',
                 timeout: float = 60.0, temperature: float = 0.3, max_tokens: int = 1000,
                 transport: Optional[httpx.BaseTransport] = None):
        self.api_key = api_key
        self.model = model
        self.endpoint = base_url.rstrip('/') + '/chat/completions'
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.transport = transport

    @classmethod
    def from_settings(cls) -> 'Annotator':
        s = get_settings()
        return cls(
            api_key=s.openai_api_key,
            model=s.openai_model,
            base_url=s.openai_base_url,
            timeout=s.llm_timeout,
            temperature=s.llm_temperature,
            max_tokens=s.llm_max_tokens,
        )

    def _complete(self, prompt: str) -> str:
        if not self.api_key:
            raise AnnotationError('missing OPENAI_API_KEY')
        headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
        }
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "response_format": {"type": "json_object"},
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(self.endpoint, headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise AnnotationError(f'llm_transport_error: {type(e).__name__}: {e}') from e
        if resp.status_code >= 400:
            raise AnnotationError(f'llm_http_{resp.status_code}: {resp.text[:160]}')
        try:
            data = resp.json()
        except ValueError as e:
            raise AnnotationError('llm_response_not_json') from e
        if not isinstance(data, dict):
            raise AnnotationError('llm_response_not_object')
        choices = data.get('choices')
        choice = choices[0] if isinstance(choices, list) and choices else {}
        if not isinstance(choice, dict):
            raise AnnotationError('llm_choice_not_object')
        message = choice.get('message') or {}
        if not isinstance(message, dict):
            raise AnnotationError('llm_message_not_object')
        content = message.get('content')
        if not content or not isinstance(content, str):
            raise AnnotationError('no content in LLM response')
        return content

    def annotate(self, body: str, subject: str, sender: str, recipients: List[str]) -> AnnotationResult:
        content = self._complete(build_prompt(body, subject, sender, recipients))
        try:
            raw = json.loads(content)
        except json.JSONDecodeError as e:
            raise AnnotationError(f'annotation is not valid JSON: {e.msg}') from e
        if not isinstance(raw, dict):
            raise AnnotationError('annotation JSON is not an object')
        try:
            result = AnnotationResult.model_validate(raw)
        except ValidationError as e:
            raise AnnotationError(f'annotation has unexpected shape: {e.errors()[0]["msg"]}') from e
        result.sentiment = normalize_sentiment(result.sentiment)
        return result


def get_annotator() -> Annotator:
    """FastAPI dependency: a fresh annotator per request, configured from the environment."""
    return Annotator.from_settings()
