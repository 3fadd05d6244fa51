# -*- coding: utf-8 -*-
"""
cbt_admin/clients/exam_api_client.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Async client for the remote exam REST API.

Every answer of the API is wrapped as ``{code, message, data}``. The client
unwraps it into the models of :mod:`cbt_admin.domain.models` and turns
transport failures, non-2xx answers and answers that do not fit the expected
model into :class:`RemoteAPIError`.
No request is ever retried.
"""

from typing import Any, AsyncGenerator, Dict, List, Optional, Type, TypeVar

import httpx
from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cbt_admin.config.logger import configure_logger
from cbt_admin.config.settings import settings
from cbt_admin.domain.models import (ApiMessage, CategoryQuestion, ExportData,
                                     Me, Paginated, Question, School, Test,
                                     User)
from cbt_admin.domain.variants import BaseQuestionPayload
from cbt_admin.utils.exceptions import DEFAULT_ERROR_MESSAGE, RemoteAPIError

logger = configure_logger(__name__)

M = TypeVar("M", bound=BaseModel)

INVALID_RESPONSE_MESSAGE = "Respons server tidak valid."


class ExamApiClient:
    """Thin typed wrapper around ``httpx.AsyncClient``."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            token: Bearer token forwarded to the API, if any
            base_url: Overrides ``settings.api_base_url``
            timeout: Overrides ``settings.api_timeout_seconds``
            transport: Custom transport, used by tests
        """
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.api_base_url).rstrip("/"),
            headers=headers,
            timeout=timeout if timeout is not None else settings.api_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "ExamApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------ core

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Send one request and return the decoded body.

        Raises:
            RemoteAPIError: Transport failure or error status
        """
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {path} gagal terhubung: {e}")
            raise RemoteAPIError("Tidak dapat terhubung ke server.") from e

        try:
            body = response.json()
        except ValueError:
            body = response.text or None

        if response.is_error:
            message = DEFAULT_ERROR_MESSAGE
            if isinstance(body, dict):
                nested = body.get("data")
                if isinstance(body.get("message"), str) and body["message"]:
                    message = body["message"]
                elif isinstance(nested, dict) and isinstance(nested.get("message"), str):
                    message = nested["message"]
            logger.warning(
                f"⚠️ {method} {path} -> {response.status_code}: {message}"
            )
            raise RemoteAPIError(
                message, remote_status=response.status_code, payload=body
            )

        logger.debug(f"🔍 {method} {path} -> {response.status_code}")
        return body

    @staticmethod
    def _data(body: Any) -> Any:
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    @staticmethod
    def _parse(model: Type[M], data: Any) -> M:
        """
        Validate a decoded answer against a response model.

        Raises:
            RemoteAPIError: The answer does not have the expected shape
        """
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.error(
                f"❌ Respons tidak sesuai {model.__name__}: {e.error_count()} kesalahan"
            )
            raise RemoteAPIError(INVALID_RESPONSE_MESSAGE, payload=data) from e

    @staticmethod
    def _clean_params(params: Dict[str, Any]) -> Dict[str, Any]:
        """Drop unset and blank query values."""
        cleaned = {}
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            cleaned[key] = value
        return cleaned

    # ------------------------------------------------------------- questions

    async def get_questions(
        self,
        page: int = 1,
        paginate: int = 10,
        search: str | None = None,
        search_by_specific: str | None = None,
        question_category_id: int | None = None,
        order_by: str | None = None,
        order: str | None = None,
    ) -> Paginated[Question]:
        """
        One page of bank questions.

        Args:
            page: Page number, starting at 1
            paginate: Page size
            search: Free text, trimmed
            search_by_specific: Column the search applies to
            question_category_id: Category filter
            order_by: Sort column, e.g. ``questions.updated_at``
            order: ``asc`` or ``desc``

        Returns:
            Paginated[Question]: The page
        """
        params = self._clean_params(
            {
                "page": page,
                "paginate": paginate,
                "search": search,
                "searchBySpecific": search_by_specific,
                "question_category_id": question_category_id,
                "orderBy": order_by,
                "order": order if order in ("asc", "desc") else None,
            }
        )
        body = await self._request("GET", "/master/questions", params=params)
        return self._parse(Paginated[Question], self._data(body) or {})

    async def get_question(self, question_id: int) -> Question:
        body = await self._request("GET", f"/master/questions/{question_id}")
        return self._parse(Question, self._data(body))

    async def create_question(self, payload: BaseQuestionPayload) -> Question:
        body = await self._request("POST", "/master/questions", json=payload.to_wire())
        return self._parse(Question, self._data(body))

    async def update_question(
        self, question_id: int, payload: BaseQuestionPayload
    ) -> Question:
        body = await self._request(
            "PUT", f"/master/questions/{question_id}", json=payload.to_wire()
        )
        return self._parse(Question, self._data(body))

    async def delete_question(self, question_id: int) -> ApiMessage:
        body = await self._request("DELETE", f"/master/questions/{question_id}")
        return self._parse(ApiMessage, body or {})

    async def import_questions(
        self,
        question_category_id: int,
        filename: str,
        content: bytes,
        content_type: str = "text/csv",
    ) -> ApiMessage:
        """
        Start an import job. The server processes the file asynchronously.
        """
        body = await self._request(
            "POST",
            "/master/questions/import",
            data={"question_category_id": str(question_category_id)},
            files={"file": (filename, content, content_type)},
        )
        return self._parse(ApiMessage, body or {})

    async def export_questions(self, question_category_id: int) -> ApiMessage:
        body = await self._request(
            "POST",
            "/master/questions/export",
            json={"question_category_id": question_category_id},
        )
        return self._parse(ApiMessage, body or {})

    # ---------------------------------------------------------------- master

    async def get_question_categories(
        self, page: int = 1, paginate: int = 50, search: str | None = None
    ) -> Paginated[CategoryQuestion]:
        params = self._clean_params(
            {"page": page, "paginate": paginate, "search": search}
        )
        body = await self._request("GET", "/master/question-categories", params=params)
        return self._parse(Paginated[CategoryQuestion], self._data(body) or {})

    async def get_schools(
        self, page: int = 1, paginate: int = 100, search: str | None = None
    ) -> Paginated[School]:
        params = self._clean_params(
            {"page": page, "paginate": paginate, "search": search}
        )
        body = await self._request("GET", "/master/schools", params=params)
        return self._parse(Paginated[School], self._data(body) or {})

    async def get_users(
        self, role_id: int | None = None, page: int = 1, paginate: int = 100
    ) -> Paginated[User]:
        params = self._clean_params(
            {"page": page, "paginate": paginate, "role_id": role_id}
        )
        body = await self._request("GET", "/user-management/users", params=params)
        return self._parse(Paginated[User], self._data(body) or {})

    async def get_me(self) -> Me:
        body = await self._request("GET", "/me")
        return self._parse(Me, self._data(body))

    # ----------------------------------------------------------------- tests

    async def get_tests(self, params: Dict[str, Any]) -> Paginated[Test]:
        body = await self._request(
            "GET", "/test/tests", params=self._clean_params(params)
        )
        return self._parse(Paginated[Test], self._data(body) or {})

    async def create_test(self, payload: Dict[str, Any]) -> Test:
        body = await self._request("POST", "/test/tests", json=payload)
        return self._parse(Test, self._data(body))

    async def update_test(self, test_id: int, payload: Dict[str, Any]) -> Test:
        body = await self._request("PUT", f"/test/tests/{test_id}", json=payload)
        return self._parse(Test, self._data(body))

    async def delete_test(self, test_id: int) -> ApiMessage:
        body = await self._request("DELETE", f"/test/tests/{test_id}")
        return self._parse(ApiMessage, body or {})

    async def export_test(self, test_id: int) -> ApiMessage:
        body = await self._request("POST", "/test/export", json={"test_id": test_id})
        return self._parse(ApiMessage, body or {})

    async def export_test_questions(self, test_id: int) -> Optional[ExportData]:
        """
        Nested test-with-questions payload for the printable export.

        Returns:
            ExportData | None: ``None`` when the API returned no data
        """
        body = await self._request("POST", f"/test/export/questions/{test_id}")
        data = self._data(body)
        if not data:
            return None
        return self._parse(ExportData, data)

    async def add_questions_to_test_category(
        self, test_id: int, test_question_category_id: int, question_ids: List[int]
    ) -> ApiMessage:
        body = await self._request(
            "POST",
            f"/test/tests/{test_id}/question-categories/"
            f"{test_question_category_id}/questions",
            json={"question_ids": question_ids},
        )
        return self._parse(ApiMessage, body or {})

    # --------------------------------------------------------------- uploads

    async def upload_file(
        self,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> Any:
        """
        Upload a media file for the rich-text editor.

        Returns:
            The raw decoded body; its shape varies, see
            :func:`cbt_admin.utils.upload_url.extract_upload_url`
        """
        return await self._request(
            "POST",
            "/master/service-upload",
            files={"file": (filename, content, content_type)},
        )


async def get_exam_api(request: Request) -> AsyncGenerator[ExamApiClient, None]:
    """
    Provides an API client for FastAPI dependency injection.

    The caller's bearer token, when present, is forwarded to the remote API.

    Yields:
        ExamApiClient: Client closed after the request
    """
    token = None
    authorization = request.headers.get("Authorization")
    if authorization and authorization.startswith("Bearer "):
        token = authorization.split(" ", 1)[1]

    async with ExamApiClient(token=token) as api:
        yield api
