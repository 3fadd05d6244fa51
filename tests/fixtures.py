# -*- coding: utf-8 -*-
"""
Fixtures for the CBT admin tests: a scripted remote API and record factories
"""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from cbt_admin.clients.exam_api_client import ExamApiClient
from cbt_admin.domain.enums import NotificationKind

API_BASE_URL = "https://api.test/api/v1"
API_PREFIX = "/api/v1"


class FakeReporter:
    """Records notifications and answers confirmations with ``answer``"""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.notifications: List[Tuple[str, str, Optional[str]]] = []
        self.prompts: List[str] = []

    def notify(self, kind, message, detail=None):
        self.notifications.append((NotificationKind(kind).value, message, detail))

    async def confirm(self, prompt, detail=None):
        self.prompts.append(prompt)
        return self.answer

    def kinds(self) -> List[str]:
        return [kind for kind, _, _ in self.notifications]

    @property
    def last(self) -> Tuple[str, str, Optional[str]]:
        return self.notifications[-1]


class MockApi:
    """
    Scripted remote exam API behind ``httpx.MockTransport``.

    Routes are keyed by method and path (without the ``/api/v1`` prefix).
    A route answers with a JSON body, or a callable receiving the request.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, body: Any = None, status: int = 200) -> "MockApi":
        self.routes[(method.upper(), path)] = (status, body)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]

        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"code": 404, "message": f"Not mocked: {path}"})

        status, body = route
        if callable(body):
            result = body(request)
            if isinstance(result, httpx.Response):
                return result
            body = result
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def client(self, token: str | None = "test-token") -> ExamApiClient:
        return ExamApiClient(token=token, base_url=API_BASE_URL, transport=self.transport)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.method == method and request.url.path == API_PREFIX + path
        ]


def json_body(request: httpx.Request) -> Any:
    return json.loads(request.content)


def envelope(data: Any = None, message: str = "Success", code: int = 200) -> Dict[str, Any]:
    return {"code": code, "message": message, "data": data}


def paginated(
    items: List[Dict[str, Any]],
    current_page: int = 1,
    last_page: int = 1,
    per_page: int = 10,
) -> Dict[str, Any]:
    return envelope(
        {
            "current_page": current_page,
            "data": items,
            "last_page": last_page,
            "total": len(items),
            "per_page": per_page,
        }
    )


def make_question(
    question_id: int = 1,
    category_id: Optional[int] = 1,
    question_type: str = "multiple_choice",
    **overrides,
) -> Dict[str, Any]:
    record = {
        "id": question_id,
        "question_category_id": category_id,
        "category_name": f"Kategori {category_id}",
        "type": question_type,
        "question": f"<p>Soal {question_id}</p>",
        "explanation": None,
        "answer": "a",
        "total_point": None,
        "options": [
            {"option": "a", "text": "Satu", "point": 1},
            {"option": "b", "text": "Dua", "point": 0},
        ],
    }
    record.update(overrides)
    return record


def make_me(user_id: int = 1, *roles: str) -> Dict[str, Any]:
    return {
        "id": user_id,
        "name": f"User {user_id}",
        "email": f"user{user_id}@example.com",
        "roles": [{"id": index + 1, "name": role} for index, role in enumerate(roles)],
    }


def make_test(test_id: int = 1, **overrides) -> Dict[str, Any]:
    record = {
        "id": test_id,
        "school_id": 2,
        "school_name": "SMA Negeri 1",
        "title": f"Tryout {test_id}",
        "sub_title": None,
        "total_time": 3600,
        "timer_type": "per_test",
        "score_type": "default",
        "assessment_type": "irt",
        "pass_grade": 70,
        "shuffle_questions": False,
        "start_date": "2024-05-01 08:00:00",
        "end_date": "2024-05-02T17:00:00Z",
        "user_id": 7,
        "status": True,
    }
    record.update(overrides)
    return record


def make_export_data(
    categories: int = 2,
    questions_per_category: int = 2,
    answer: str = "b",
    title: str = "Tryout UTBK",
) -> Dict[str, Any]:
    next_id = 1
    question_categories = []
    for category_index in range(categories):
        wrappers = []
        for _ in range(questions_per_category):
            wrappers.append(
                {
                    "id": next_id,
                    "question": {
                        "id": next_id,
                        "question": f"<p>Pertanyaan {next_id}</p>",
                        "type": "multiple_choice",
                        "answer": answer,
                        "options": [
                            {"option": "a", "text": "<b>Pilihan A</b>", "point": 0},
                            {"option": "b", "text": "Pilihan B", "point": 1},
                            {"option": "c", "text": "Pilihan C", "point": 0},
                        ],
                    },
                }
            )
            next_id += 1
        question_categories.append(
            {
                "id": category_index + 1,
                "question_category": {"name": f"Bagian {category_index + 1}"},
                "questions": wrappers,
            }
        )
    return {
        "test": {"title": title, "sub_title": "Paket A", "school_id": 2},
        "question_categories": question_categories,
    }


def echo_saved_question(new_id: int = 101) -> Callable[[httpx.Request], Dict[str, Any]]:
    """Route handler answering a create/update with the sent payload plus an id"""

    def handler(request: httpx.Request) -> Dict[str, Any]:
        payload = json_body(request)
        return envelope({"id": new_id, **payload})

    return handler
