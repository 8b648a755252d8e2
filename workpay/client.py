"""
HTTP client for the WorkPay API.

Wraps httpx and unwraps the ``{success, data}`` response envelope: a
successful call returns the ``data`` payload, anything else raises
:class:`ApiError` carrying the HTTP status (0 for transport failures) and
the server's error message.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for any unsuccessful API call."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, message={self.message!r})"


class WorkPayClient:
    """
    Synchronous client for the WorkPay REST API.

    Resource operations are grouped as attributes: ``workers``, ``products``,
    ``expenses``, ``production``, ``powerloom``, ``export_logs``,
    ``settings`` and ``reports``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self.workers = _Workers(self)
        self.products = _Products(self)
        self.expenses = _Expenses(self)
        self.production = _Production(self)
        self.powerloom = _Powerloom(self)
        self.export_logs = _ExportLogs(self)
        self.settings = _Settings(self)
        self.reports = _Reports(self)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "WorkPayClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Issue a request and return the envelope's ``data`` (or the whole body if it has none)."""
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            logger.error("API request %s %s failed: %s", method, path, e)
            raise ApiError(0, "Network error or server unavailable") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not response.is_success:
            raise ApiError(
                response.status_code,
                body.get("error") or body.get("message") or f"HTTP {response.status_code}",
            )
        if not body.get("success", False):
            raise ApiError(
                response.status_code,
                body.get("error") or body.get("message") or "Request failed",
            )
        return body.get("data", body)

    def download(self, path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        """Fetch a binary attachment such as a salary export."""
        try:
            response = self._client.get(path, params={k: v for k, v in (params or {}).items() if v is not None})
        except httpx.HTTPError as e:
            logger.error("API download %s failed: %s", path, e)
            raise ApiError(0, "Network error or server unavailable") from e
        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("error") or body.get("message") if isinstance(body, dict) else None
            raise ApiError(response.status_code, message or f"HTTP {response.status_code}")
        return response.content


class _Resource:
    path = ""

    def __init__(self, client: WorkPayClient):
        self._client = client


class _CrudResource(_Resource):

    def get_all(self, **filters: Any) -> List[Dict[str, Any]]:
        return self._client.request("GET", self.path, params=filters)

    def get_by_id(self, record_id: int) -> Dict[str, Any]:
        return self._client.request("GET", f"{self.path}/{record_id}")

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._client.request("POST", self.path, json=data)

    def update(self, record_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._client.request("PUT", f"{self.path}/{record_id}", json=data)

    def delete(self, record_id: int) -> Any:
        return self._client.request("DELETE", f"{self.path}/{record_id}")


class _Workers(_CrudResource):
    path = "/workers"


class _Products(_CrudResource):
    path = "/products"


class _Expenses(_CrudResource):
    path = "/expenses"

    def summary(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> Dict[str, Any]:
        return self._client.request(
            "GET", f"{self.path}/stats/summary", params={"startDate": start_date, "endDate": end_date}
        )


class _Production(_CrudResource):
    path = "/production"

    def summary(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> Dict[str, Any]:
        return self._client.request(
            "GET", f"{self.path}/stats/summary", params={"startDate": start_date, "endDate": end_date}
        )


class _Powerloom(_Resource):
    path = "/powerloom-production"

    def get_all(self, loom_number: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._client.request("GET", self.path, params={"loom": loom_number})

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._client.request("POST", self.path, json=data)

    def delete(self, entry_id: int) -> Any:
        return self._client.request("DELETE", f"{self.path}/{entry_id}")

    def delete_all(self, loom_number: Optional[int] = None) -> Dict[str, Any]:
        return self._client.request("DELETE", self.path, params={"loom": loom_number})


class _ExportLogs(_Resource):
    path = "/export-logs"

    def get_all(self, worker_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._client.request("GET", self.path, params={"workerId": worker_id})

    def create(self, worker_id: int, from_date: str, to_date: str, salary: float) -> Dict[str, Any]:
        return self._client.request(
            "POST",
            self.path,
            json={"worker_id": worker_id, "from_date": from_date, "to_date": to_date, "salary": salary},
        )


class _Settings(_Resource):
    path = "/settings"

    def get_revenue(self) -> float:
        return self._client.request("GET", f"{self.path}/revenue")["value"]

    def set_revenue(self, value: float) -> float:
        return self._client.request("PUT", f"{self.path}/revenue", json={"value": value})["value"]


class _Reports(_Resource):
    path = "/reports"

    def salary(self, worker_id: int, from_date: Optional[str] = None, to_date: Optional[str] = None) -> Dict[str, Any]:
        return self._client.request(
            "GET", f"{self.path}/salary/{worker_id}", params={"from": from_date, "to": to_date}
        )

    def export_salary(
        self,
        worker_id: int,
        export_format: str = "csv",
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> bytes:
        return self._client.download(
            f"{self.path}/salary/{worker_id}/export",
            params={"format": export_format, "from": from_date, "to": to_date},
        )

    def weekly_profit(self) -> Dict[str, Any]:
        return self._client.request("GET", f"{self.path}/weekly-profit")
