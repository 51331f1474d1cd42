"""
    SpiceDBClient — thin JSON/HTTP client for the authorization service.

    Wraps the HTTP gateway endpoints the console needs.  Every failure
    (connection error, timeout, non-2xx, undecodable body) is raised as
    ``BackendError`` so callers deal with a single exception type.
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from saffron_api.types import ObjectReference

from .config import SpiceDBConfig
from .exceptions import BackendError

logger = logging.getLogger(__name__)

OPERATION_CREATE = "OPERATION_CREATE"
OPERATION_TOUCH = "OPERATION_TOUCH"
OPERATION_DELETE = "OPERATION_DELETE"


class SpiceDBClient:
    """
    Client for the SpiceDB HTTP API.

    Usage:
        client = SpiceDBClient(SpiceDBConfig.from_env())
        schema_text = client.read_schema()
    """

    def __init__(self, config: SpiceDBConfig,
                 session: Optional[requests.Session] = None):
        self._config = config
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })
        if config.token:
            self.session.headers['Authorization'] = f"Bearer {config.token}"
        if config.insecure:
            self.session.verify = False

    @property
    def config(self) -> SpiceDBConfig:
        return self._config

    # ── Transport ────────────────────────────────────────────────

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> requests.Response:
        """POST ``payload`` to ``endpoint`` and return the 2xx response."""
        if not self._config.is_configured:
            raise BackendError("SpiceDB endpoint is not configured (set SPICEDB_URL).")

        url = f"{self._config.endpoint}{endpoint}"
        try:
            response = self.session.post(url, json=payload, timeout=self._config.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("Request to %s failed: %s", url, e)
            raise BackendError(f"Request to SpiceDB failed: {e}") from e

        if not 200 <= response.status_code < 300:
            message = self._error_message(response)
            logger.error("SpiceDB %s returned HTTP %d: %s", endpoint, response.status_code, message)
            raise BackendError(
                f"SpiceDB returned HTTP {response.status_code}: {message}",
                status_code=response.status_code,
            )
        return response

    def _request(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self._post(endpoint, payload)
        if not response.text:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise BackendError(f"SpiceDB returned invalid JSON: {e}") from e
        return self._expect_object(data, endpoint)

    def _stream(self, endpoint: str, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Collect the ``result`` objects of a streaming endpoint.

        The gateway answers server-streaming calls with one JSON object
        per line (``{"result": {...}}``); a single JSON array is accepted
        as well.
        """
        response = self._post(endpoint, payload)
        results: List[Dict[str, Any]] = []
        for item in self._decode_stream(response.text):
            item = self._expect_object(item, endpoint)
            if 'error' in item:
                error = item['error'] or {}
                message = error.get('message', error) if isinstance(error, dict) else error
                raise BackendError(f"SpiceDB stream error: {message}")
            results.append(self._expect_object(item.get('result', item), endpoint))
        return results

    @staticmethod
    def _expect_object(data: Any, endpoint: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise BackendError(
                f"SpiceDB returned an unexpected response from {endpoint}: "
                f"expected an object, got {type(data).__name__}"
            )
        return data

    @staticmethod
    def _decode_stream(text: str) -> Iterable[Dict[str, Any]]:
        text = text.strip()
        if not text:
            return []
        try:
            if text.startswith('['):
                return json.loads(text)
            return [json.loads(line) for line in text.splitlines() if line.strip()]
        except ValueError as e:
            raise BackendError(f"SpiceDB returned invalid JSON: {e}") from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text.strip() or response.reason or "no response body"
        if isinstance(data, dict) and data.get('message'):
            return str(data['message'])
        return json.dumps(data)

    # ── Schema ───────────────────────────────────────────────────

    def read_schema(self) -> str:
        """Return the current schema text."""
        return self._request('/v1/schema/read', {}).get('schemaText', '')

    def write_schema(self, schema_text: str) -> Dict[str, Any]:
        """Replace the schema; returns the raw response (``writtenAt``)."""
        return self._request('/v1/schema/write', {'schema': schema_text})

    # ── Relationships ────────────────────────────────────────────

    def read_relationships(self, resource_type: Optional[str] = None,
                           resource_id: Optional[str] = None,
                           relation: Optional[str] = None,
                           subject_type: Optional[str] = None,
                           subject_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return relationship objects matching the filter."""
        relationship_filter: Dict[str, Any] = {}
        if resource_type:
            relationship_filter['resourceType'] = resource_type
        if resource_id:
            relationship_filter['optionalResourceId'] = resource_id
        if relation:
            relationship_filter['optionalRelation'] = relation
        if subject_type:
            subject_filter: Dict[str, Any] = {'subjectType': subject_type}
            if subject_id:
                subject_filter['optionalSubjectId'] = subject_id
            relationship_filter['optionalSubjectFilter'] = subject_filter

        results = self._stream('/v1/relationships/read',
                               {'relationshipFilter': relationship_filter})
        return [r['relationship'] for r in results if isinstance(r.get('relationship'), dict)]

    def write_relationships(self, operation: str, resource: ObjectReference,
                            relation: str, subject: ObjectReference) -> Dict[str, Any]:
        """Apply one relationship update (create / touch / delete)."""
        update = {
            'operation': operation,
            'relationship': {
                'resource': resource.to_object_dict(),
                'relation': relation,
                'subject': subject.to_subject_dict(),
            },
        }
        return self._request('/v1/relationships/write', {'updates': [update]})

    # ── Permissions ──────────────────────────────────────────────

    def check_permission(self, resource: ObjectReference, permission: str,
                         subject: ObjectReference,
                         context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'resource': resource.to_object_dict(),
            'permission': permission,
            'subject': subject.to_subject_dict(),
        }
        if context:
            payload['context'] = context
        return self._request('/v1/permissions/check', payload)

    def expand_permission_tree(self, resource: ObjectReference,
                               permission: str) -> Dict[str, Any]:
        return self._request('/v1/permissions/expand', {
            'resource': resource.to_object_dict(),
            'permission': permission,
        })

    def lookup_subjects(self, resource: ObjectReference, permission: str,
                        subject_type: str) -> List[Dict[str, Any]]:
        return self._stream('/v1/permissions/subjects', {
            'resource': resource.to_object_dict(),
            'permission': permission,
            'subjectObjectType': subject_type,
        })
