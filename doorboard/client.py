"""
HTTP clients for the order-management REST API.

ApiClient    : base URL, timeout, bearer token, error conversion
OrdersApi    : /orders collection and status actions
CustomersApi : /customers collection and status actions
AuthApi      : /auth login / logout / profile

Every failure surfaces as ApiError; callers never see requests exceptions.
"""
import logging
from typing import Optional, Dict, Any

import requests

from .schema import Customer, Order, OrderStatistics, OrderStatus, Page, User

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000/api"
DEFAULT_TIMEOUT = 30

# Server rejections that mean "your request was understood and refused"
VALIDATION_STATUSES = {400, 409, 422}


class ApiError(Exception):
    """Raised for any failed API call."""

    def __init__(self, message: str, status: int = 500, errors: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors or {}

    @property
    def is_validation(self) -> bool:
        return self.status in VALIDATION_STATUSES

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401


class NetworkError(ApiError):
    """The server could not be reached (no HTTP status)."""

    def __init__(self, message: str):
        super().__init__(message, status=0)


def _decode(factory, payload: Any, what: str):
    """Build a model from a response body; an empty or malformed body is an ApiError."""
    if not isinstance(payload, dict):
        raise ApiError(f"Empty or invalid {what} response from server", status=502)
    try:
        return factory(payload)
    except (ValueError, TypeError, AttributeError, KeyError) as e:
        raise ApiError(f"Malformed {what} response from server: {e}", status=502) from e


def _page_of(factory):
    return lambda payload: Page.from_dict(payload, factory)


def _clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drop None and empty-string filters so they are not sent as blanks."""
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None and v != ""}


class ApiClient:
    """Thin wrapper over requests for the JSON API."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = DEFAULT_TIMEOUT,
                 session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # AuthSession (or anything with access_token / clear()), injected explicitly
        self.session = session

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.session.access_token if self.session else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, method: str, path: str, params: Optional[dict] = None,
                json: Optional[dict] = None) -> Any:
        """Send one request and return the decoded JSON body (or None)."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug(f"API request: {method} {url} params={params} json={json}")
        try:
            r = requests.request(
                method,
                url,
                params=_clean_params(params),
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"API {method} {url} unreachable: {e}")
            raise NetworkError(str(e) or "Network error") from e

        if not r.ok:
            raise self._to_error(method, url, r)

        if r.status_code == 204 or not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {method} {url}", status=r.status_code) from e

    def _to_error(self, method: str, url: str, r) -> ApiError:
        body: Dict[str, Any] = {}
        try:
            decoded = r.json()
            if isinstance(decoded, dict):
                body = decoded
        except ValueError:
            pass

        message = body.get("message") or r.reason or "Request failed"
        # NestJS validation pipes return a list of messages
        if isinstance(message, list):
            message = "; ".join(str(m) for m in message)

        logger.warning(f"API {method} {url} failed: {r.status_code} {message}")

        if r.status_code == 401 and self.session is not None:
            # Stale token: drop it so the next call goes out anonymous
            self.session.clear()

        return ApiError(str(message), status=r.status_code, errors=body.get("errors"))

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Optional[dict] = None) -> Any:
        return self.request("POST", path, json=json)

    def patch(self, path: str, json: Optional[dict] = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)


class OrdersApi:
    """Order data client."""

    def __init__(self, client: ApiClient):
        self.client = client

    def list(self, filters: Optional[Dict[str, Any]] = None) -> Page:
        """GET /orders. Filters: limit, page, sortBy, sortOrder, search, status, priority."""
        payload = self.client.get("/orders", params=filters) or {}
        return _decode(_page_of(Order.from_dict), payload, "orders list")

    def get(self, order_id: str) -> Order:
        return _decode(Order.from_dict, self.client.get(f"/orders/{order_id}"), "order")

    def create(self, data: Dict[str, Any]) -> Order:
        return _decode(Order.from_dict, self.client.post("/orders", json=data), "order")

    def update(self, order_id: str, data: Dict[str, Any]) -> Order:
        """PATCH /orders/{id}. A status value may be passed as an OrderStatus."""
        body = dict(data)
        if isinstance(body.get("status"), OrderStatus):
            body["status"] = body["status"].value
        return _decode(Order.from_dict, self.client.patch(f"/orders/{order_id}", json=body), "order")

    def remove(self, order_id: str) -> None:
        self.client.delete(f"/orders/{order_id}")

    def complete(self, order_id: str) -> Order:
        return _decode(Order.from_dict, self.client.post(f"/orders/{order_id}/complete"), "order")

    def cancel(self, order_id: str, reason: str) -> Order:
        payload = self.client.post(f"/orders/{order_id}/cancel", json={"reason": reason})
        return _decode(Order.from_dict, payload, "order")

    def pause(self, order_id: str, reason: str) -> Order:
        payload = self.client.post(f"/orders/{order_id}/pause", json={"reason": reason})
        return _decode(Order.from_dict, payload, "order")

    def resume(self, order_id: str) -> Order:
        return _decode(Order.from_dict, self.client.post(f"/orders/{order_id}/resume"), "order")

    def get_statistics(self, manager_id: Optional[str] = None) -> OrderStatistics:
        payload = self.client.get("/orders/statistics", params={"managerId": manager_id})
        return _decode(OrderStatistics.from_dict, payload, "statistics")


class CustomersApi:
    """Customer data client."""

    def __init__(self, client: ApiClient):
        self.client = client

    def list(self, filters: Optional[Dict[str, Any]] = None) -> Page:
        payload = self.client.get("/customers", params=filters) or {}
        return _decode(_page_of(Customer.from_dict), payload, "customers list")

    def get(self, customer_id: str) -> Customer:
        return _decode(Customer.from_dict, self.client.get(f"/customers/{customer_id}"), "customer")

    def _action(self, customer_id: str, action: str) -> Customer:
        payload = self.client.post(f"/customers/{customer_id}/{action}")
        return _decode(Customer.from_dict, payload, "customer")

    def activate(self, customer_id: str) -> Customer:
        return self._action(customer_id, "activate")

    def deactivate(self, customer_id: str) -> Customer:
        return self._action(customer_id, "deactivate")

    def blacklist(self, customer_id: str) -> Customer:
        return self._action(customer_id, "blacklist")


class AuthApi:
    """Authentication endpoints. Token storage lives in AuthSession."""

    def __init__(self, client: ApiClient):
        self.client = client

    def login(self, email: str, password: str) -> Dict[str, Any]:
        payload = self.client.post("/auth/login", json={"email": email, "password": password})
        return payload if isinstance(payload, dict) else {}

    def logout(self) -> None:
        self.client.post("/auth/logout")

    def profile(self) -> User:
        return _decode(User.from_dict, self.client.get("/auth/profile"), "profile")
