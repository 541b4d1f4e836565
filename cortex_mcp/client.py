"""Client for the Cortex memory API."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from cortex_mcp.config import CortexConfig
from cortex_mcp.models import (
    DEFAULT_MAX_RESULTS,
    DEFAULT_MEMORY_TITLE,
    DEFAULT_RECALL_MODE,
    DEFAULT_USER_NAME,
    ConversationTurn,
    DeleteResult,
    FetchMode,
    IngestOutcome,
    MemoryRecord,
    RecallMode,
    RecallResult,
    SourceContent,
    SourceList,
    SourceRecord,
)

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Cortex answered with a non-success status or an unreadable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ServiceUnavailableError(ServiceError):
    """Cortex could not be reached (connection failure or timeout)."""


def _error_detail(response: httpx.Response, fallback: Optional[str] = None) -> str:
    """Pull a readable message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("detail", "error", "message"):
            if body.get(key):
                return str(body[key])
    if fallback:
        return fallback
    text = response.text.strip()
    return text[:200] if text else response.reason_phrase or f"HTTP {response.status_code}"


class CortexClient:
    """Async client for the Cortex memory API.

    One method per tool. Every request is scoped to the configured tenant
    and sub-tenant. Nothing is cached between calls.
    """

    def __init__(self, config: CortexConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.base_url = config.base_url
        self.http_client = http_client or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def __aenter__(self) -> "CortexClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.http_client.aclose()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Accept": "application/json",
        }

    def _tenant(self) -> Dict[str, str]:
        return {
            "tenant_id": self.config.tenant_id,
            "sub_tenant_id": self.config.sub_tenant_id,
        }

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        try:
            return await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                headers=self._headers(),
                json=json,
                params=params,
            )
        except httpx.TimeoutException as e:
            raise ServiceUnavailableError(
                f"request to {path} timed out after {self.config.timeout_seconds:g}s"
            ) from e
        except httpx.TransportError as e:
            raise ServiceUnavailableError(f"could not reach Cortex: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        if not response.is_success:
            raise ServiceError(_error_detail(response), status_code=response.status_code)
        try:
            data = response.json()
        except ValueError as e:
            raise ServiceError("Cortex returned a non-JSON response", response.status_code) from e
        if not isinstance(data, dict):
            raise ServiceError("Cortex returned an unexpected response shape", response.status_code)
        return data

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request("POST", path, json={**self._tenant(), **payload})
        return self._json(response)

    # -- Recall --------------------------------------------------------------

    async def recall(
        self,
        query: str,
        max_results: int = DEFAULT_MAX_RESULTS,
        mode: RecallMode = DEFAULT_RECALL_MODE,
        graph_context: bool = True,
    ) -> RecallResult:
        """Search stored memories.

        Chunks keep the order the service ranked them in and are capped at
        ``max_results``.

        Raises:
            ServiceError: non-success status or malformed body.
            ServiceUnavailableError: the service could not be reached.
        """
        data = await self._post(
            "/recall/full_recall",
            {
                "query": query,
                "max_results": max_results,
                "mode": mode,
                "graph_context": graph_context,
            },
        )
        try:
            result = RecallResult.model_validate(data)
        except ValidationError as e:
            raise ServiceError(f"unexpected recall response: {e.error_count()} invalid field(s)") from e

        if len(result.chunks) > max_results:
            result = result.model_copy(update={"chunks": result.chunks[:max_results]})
        logger.debug("Recall returned %d chunks for %r", len(result.chunks), query)
        return result

    # -- Ingest --------------------------------------------------------------

    async def _add_memory(self, memory: Dict[str, Any]) -> bool:
        data = await self._post("/memories/add_memory", {"memories": [memory]})
        try:
            return int(data.get("success_count", 1)) > 0
        except (TypeError, ValueError):
            return False

    async def ingest_text(
        self,
        text: str,
        title: str = DEFAULT_MEMORY_TITLE,
        source_id: Optional[str] = None,
        infer: bool = True,
        is_markdown: bool = False,
    ) -> IngestOutcome:
        """Store one piece of text. The outcome counts exactly one item.

        Raises:
            ServiceUnavailableError: the service could not be reached.
        """
        memory: Dict[str, Any] = {
            "text": text,
            "title": title,
            "infer": infer,
            "is_markdown": is_markdown,
        }
        if source_id:
            memory["source_id"] = source_id

        try:
            stored = await self._add_memory(memory)
        except ServiceUnavailableError:
            raise
        except ServiceError as e:
            logger.warning("Failed to store text in Cortex: %s", e)
            stored = False

        return IngestOutcome(success_count=int(stored), failed_count=int(not stored))

    async def ingest_conversation(
        self,
        turns: List[ConversationTurn],
        source_id: str,
        user_name: Optional[str] = None,
    ) -> IngestOutcome:
        """Store conversation turns, one request per turn.

        Turns are sent in input order. A rejected turn is counted and the
        remaining turns still go out. Once the service is unreachable the
        rest are counted as failed without being sent. Either way the
        outcome totals ``len(turns)``.
        """
        outcome = IngestOutcome()
        for index, turn in enumerate(turns):
            memory = {
                "user_assistant_pairs": [{"user": turn.user, "assistant": turn.assistant}],
                "source_id": source_id,
                "user_name": user_name or DEFAULT_USER_NAME,
                "infer": True,
            }
            try:
                stored = await self._add_memory(memory)
            except ServiceUnavailableError as e:
                remaining = len(turns) - index
                logger.warning(
                    "Cortex unreachable at turn %d of %d for %s, counting %d turn(s) as failed: %s",
                    index + 1, len(turns), source_id, remaining, e,
                )
                return outcome + IngestOutcome(failed_count=remaining)
            except ServiceError as e:
                logger.warning("Failed to ingest turn %d into %s: %s", index + 1, source_id, e)
                stored = False
            outcome += IngestOutcome(success_count=int(stored), failed_count=int(not stored))
        return outcome

    # -- User memories -------------------------------------------------------

    async def list_memories(self) -> List[MemoryRecord]:
        """List stored user memories; empty when there are none."""
        response = await self._request(
            "GET", "/user_memory/list_user_memories", params=self._tenant()
        )
        data = self._json(response)
        try:
            return [MemoryRecord.model_validate(m) for m in data.get("user_memories") or []]
        except ValidationError as e:
            raise ServiceError(f"unexpected memory listing: {e.error_count()} invalid field(s)") from e

    async def delete_memory(self, memory_id: str) -> DeleteResult:
        """Delete a user memory. A missing id yields ``deleted=False``."""
        response = await self._request(
            "DELETE",
            "/user_memory/delete_user_memory",
            params={**self._tenant(), "memory_id": memory_id},
        )
        if response.status_code == 404:
            logger.info("Memory %s not found", memory_id)
            return DeleteResult(deleted=False)
        data = self._json(response)
        return DeleteResult(deleted=bool(data.get("user_memory_deleted", False)))

    # -- Sources -------------------------------------------------------------

    async def fetch_content(self, source_id: str, mode: FetchMode = "content") -> SourceContent:
        """Fetch a source's content. Failures come back as ``success=False``.

        Raises:
            ServiceUnavailableError: the service could not be reached.
        """
        response = await self._request(
            "POST",
            "/fetch/fetch_content",
            json={**self._tenant(), "source_id": source_id, "mode": mode},
        )
        if response.status_code == 404:
            return SourceContent(success=False, error=_error_detail(response, fallback="not found"))
        if not response.is_success:
            return SourceContent(success=False, error=_error_detail(response))

        try:
            data = self._json(response)
            return SourceContent.model_validate(data)
        except (ServiceError, ValidationError) as e:
            return SourceContent(success=False, error=str(e))

    async def list_sources(self, source_ids: Optional[List[str]] = None) -> SourceList:
        """List ingested sources, optionally restricted to ``source_ids``."""
        payload: Dict[str, Any] = {}
        if source_ids:
            payload["source_ids"] = source_ids
        data = await self._post("/list/sources", payload)

        try:
            sources = [SourceRecord.model_validate(s) for s in data.get("sources") or []]
        except ValidationError as e:
            raise ServiceError(f"unexpected source listing: {e.error_count()} invalid field(s)") from e

        total = data.get("total")
        if not isinstance(total, int) or total < 0:
            total = len(sources)
        return SourceList(sources=sources, total=total)
