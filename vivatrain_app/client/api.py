"""
Thin REST client for the VivaTrain API.

Each call returns the parsed JSON body or raises :class:`ApiError` with the
server's ``message``. The ``async`` helpers run the blocking ``requests``
call in a worker thread so controllers can await them on the event loop.
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import urlencode

import requests

from .config import ClientConfig

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed API call: non-2xx response or transport failure."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[dict] = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}
        super().__init__(message)


def encode_criteria(criteria: Mapping[str, Any]) -> str:
    """Query string for sentence filters; list values become the comma form the server splits."""
    params = {}
    for key, value in criteria.items():
        if isinstance(value, (list, tuple, set)):
            value = ','.join(str(v) for v in value)
        if value in (None, ''):
            continue
        params[key] = value
    return urlencode(params)


class ApiClient:
    """Issues HTTP requests to the task/sentence/auth backend."""

    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or ClientConfig()
        # The session keeps the login cookie between calls
        self.session = session or requests.Session()

    def url_for(self, path: str) -> str:
        return self.config.base_url.rstrip('/') + '/' + path.lstrip('/')

    def request(self, path: str, method: str = 'GET', data: Any = None, files: Any = None) -> Dict[str, Any]:
        """Blocking request. Returns the JSON body (empty dict for 204)."""
        url = self.url_for(path)
        kwargs: Dict[str, Any] = {'timeout': self.config.timeout}
        if files is not None:
            kwargs['files'] = files
            if data is not None:
                kwargs['data'] = data
        elif data is not None:
            kwargs['json'] = data

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(f'Could not reach the server: {e}') from e

        if response.status_code == 204 or not response.content:
            body: Dict[str, Any] = {}
        else:
            try:
                body = response.json()
            except ValueError:
                body = {}

        if not response.ok:
            message = body.get('message') if isinstance(body, dict) else None
            logger.info("%s %s -> %s: %s", method, url, response.status_code, message)
            raise ApiError(message or response.reason or 'Request failed', response.status_code, body)
        return body

    async def send_api_request(self, path: str, method: str = 'GET', data: Any = None, files: Any = None):
        return await asyncio.to_thread(self.request, path, method, data, files)

    # --- Auth ---

    async def login(self, email: str, password: str):
        return await self.send_api_request('/api/v1/users/login', 'POST', {'email': email, 'password': password})

    async def logout(self):
        return await self.send_api_request('/api/v1/users/logout', 'GET')

    async def signup(self, name, email, password, password_confirm, class_code=None):
        return await self.send_api_request('/api/v1/users/signup', 'POST', {
            'name': name,
            'email': email,
            'password': password,
            'passwordConfirm': password_confirm,
            'classCode': class_code,
        })

    # --- Sentences ---

    async def get_sentences(self, criteria: Union[str, Mapping[str, Any], None] = None) -> List[dict]:
        """Sentences matching a query string or a mapping of filters."""
        if isinstance(criteria, Mapping):
            query = encode_criteria(criteria)
        else:
            query = (criteria or '').lstrip('?')
        path = '/api/v1/sentences' + (f'?{query}' if query else '')
        body = await self.send_api_request(path, 'GET')
        return body.get('data') or []

    async def create_sentence(self, sentence, translation, level=None, viva_ref=None, tense=None, grammar=None,
                              audio_url=None):
        body = await self.send_api_request('/api/v1/sentences', 'POST', {
            'sentence': sentence,
            'translation': translation,
            'level': level,
            'vivaRef': viva_ref,
            'tense': tense,
            'grammar': grammar,
            'audioUrl': audio_url,
        })
        return body.get('data')

    # --- Tasks ---

    async def create_task(self, task_details: Mapping[str, Any]):
        body = await self.send_api_request('/api/v1/tasks', 'POST', dict(task_details))
        return body.get('data')

    async def delete_task(self, task_id):
        await self.send_api_request(f'/api/v1/tasks/{task_id}', 'DELETE')

    # --- Results and revision ---

    async def send_results(self, student_task_id, correct_count, wrong_count, finished_sentences, initial_count=None):
        payload = {
            'correctCount': correct_count,
            'wrongCount': wrong_count,
            'finishedSentences': finished_sentences,
        }
        if initial_count is not None:
            payload['initialCount'] = initial_count
        body = await self.send_api_request(f'/api/v1/studenttasks/{student_task_id}/results', 'POST', payload)
        return body.get('data')

    async def update_revision_item(self, revision_id, changes: Mapping[str, Any]):
        body = await self.send_api_request(f'/api/v1/revision/{revision_id}', 'PATCH', dict(changes))
        return body.get('data')

    # --- Audio ---

    async def upload_audio(self, file_path: str) -> str:
        """Upload a recording and return its URL."""
        def _upload():
            with open(file_path, 'rb') as handle:
                return self.request('/api/v1/audio', 'POST', files={'file': (os.path.basename(file_path), handle)})

        body = await asyncio.to_thread(_upload)
        return (body.get('data') or {}).get('url')
