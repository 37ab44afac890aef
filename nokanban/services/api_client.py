import httpx
from loguru import logger

from nokanban.core.config import get_settings
from nokanban.core.constants import PIN_HEADER
from nokanban.core.exceptions.base import AppException
from nokanban.core.exceptions.domain import (
    BoardServiceConnectionError,
    CreationFailedError,
    InvalidCredentialError,
    NameTakenError,
    RateLimitError,
    ResourceNotFoundError,
    ValidationError,
)
from nokanban.core.logger import sanitize_dict
from nokanban.schemas.board import (
    BoardPublic,
    BoardResponse,
    CardResponse,
    ColumnResponse,
    PositionUpdate,
)


class BoardApiClient:
    """Async client for the shared board API.

    The PIN is passed to each mutating call and sent only with that request.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.base_url = (base_url or get_settings().api_base_url).rstrip("/")
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "BoardApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("error") or f"HTTP {response.status_code}"

        status = response.status_code
        if status == 404:
            exc: AppException = ResourceNotFoundError()
        elif status == 409:
            exc = NameTakenError()
        elif status == 401:
            exc = InvalidCredentialError()
        elif status == 429:
            retry_after = body.get("retryAfter") or response.headers.get("Retry-After")
            exc = RateLimitError(retry_after=int(retry_after) if retry_after else None)
        elif status in (400, 422):
            exc = ValidationError()
        elif status == 500:
            exc = CreationFailedError()
        else:
            exc = BoardServiceConnectionError()
        # Keep the server's wording over the local default
        exc.message = message
        exc.args = (message,)
        raise exc

    async def _request(
        self,
        method: str,
        path: str,
        *,
        pin: str | None = None,
        json_data: dict | None = None,
    ) -> dict:
        client = await self._get_client()
        headers = {PIN_HEADER: pin} if pin else None
        try:
            response = await client.request(method, path, json=json_data, headers=headers)
        except httpx.TransportError as e:
            raise BoardServiceConnectionError(
                f"Cannot reach board service at {self.base_url}: {e}"
            ) from e

        if response.is_success:
            return response.json()

        logger.debug(
            f"Board API {method} {path} failed with {response.status_code} "
            f"(payload={sanitize_dict(json_data or {})})"
        )
        self._raise_for_status(response)
        return {}

    # ─── Boards ───────────────────────────────────────────────────────

    async def create_board(self, name: str, title: str, pin: str) -> BoardResponse:
        data = await self._request(
            "POST", "/boards", json_data={"name": name, "title": title, "pin": pin}
        )
        return BoardResponse.model_validate(data)

    async def get_board(self, name: str) -> BoardPublic:
        data = await self._request("GET", f"/boards/{name}")
        return BoardPublic.model_validate(data)

    async def delete_board(self, name: str, *, pin: str) -> None:
        await self._request("DELETE", f"/boards/{name}", pin=pin)

    # ─── Columns ──────────────────────────────────────────────────────

    async def create_column(
        self, name: str, title: str, position: int | None = None, *, pin: str
    ) -> ColumnResponse:
        data = await self._request(
            "POST",
            f"/boards/{name}/columns",
            pin=pin,
            json_data={"title": title, "position": position},
        )
        return ColumnResponse.model_validate(data)

    async def update_column_title(
        self, name: str, column_id: str, title: str, *, pin: str
    ) -> ColumnResponse:
        data = await self._request(
            "PATCH", f"/boards/{name}/columns/{column_id}/title", pin=pin, json_data={"title": title}
        )
        return ColumnResponse.model_validate(data)

    async def reorder_columns(
        self, name: str, updates: list[PositionUpdate], *, pin: str
    ) -> None:
        await self._request(
            "PATCH",
            f"/boards/{name}/columns/reorder",
            pin=pin,
            json_data={"columns": [u.model_dump() for u in updates]},
        )

    async def delete_column(self, name: str, column_id: str, *, pin: str) -> None:
        await self._request("DELETE", f"/boards/{name}/columns/{column_id}", pin=pin)

    # ─── Cards ────────────────────────────────────────────────────────

    async def create_card(
        self, name: str, column_id: str, content: str, position: int | None = None, *, pin: str
    ) -> CardResponse:
        data = await self._request(
            "POST",
            f"/boards/{name}/columns/{column_id}/cards",
            pin=pin,
            json_data={"content": content, "position": position},
        )
        return CardResponse.model_validate(data)

    async def update_card_content(
        self, name: str, card_id: str, content: str, *, pin: str
    ) -> CardResponse:
        data = await self._request(
            "PATCH", f"/boards/{name}/cards/{card_id}/content", pin=pin, json_data={"content": content}
        )
        return CardResponse.model_validate(data)

    async def move_card(
        self, name: str, card_id: str, column_id: str, position: int, *, pin: str
    ) -> CardResponse:
        data = await self._request(
            "PATCH",
            f"/boards/{name}/cards/{card_id}/move",
            pin=pin,
            json_data={"columnId": column_id, "position": position},
        )
        return CardResponse.model_validate(data)

    async def reorder_cards(
        self, name: str, column_id: str, updates: list[PositionUpdate], *, pin: str
    ) -> None:
        await self._request(
            "PATCH",
            f"/boards/{name}/columns/{column_id}/cards/reorder",
            pin=pin,
            json_data={"cards": [u.model_dump() for u in updates]},
        )

    async def delete_card(self, name: str, card_id: str, *, pin: str) -> None:
        await self._request("DELETE", f"/boards/{name}/cards/{card_id}", pin=pin)
