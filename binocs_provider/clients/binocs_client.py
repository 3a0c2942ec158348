from __future__ import annotations

import logging
from typing import Any, Type, TypeVar
from urllib.parse import quote

import requests
from pydantic import BaseModel, ValidationError

from binocs_provider.models import Channel, ChannelPayload, Check, CheckPayload

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.binocs.sh"

ModelT = TypeVar("ModelT", bound=BaseModel)


class BinocsClientError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BinocsNotFoundError(BinocsClientError):
    """The remote object no longer exists (HTTP 404)."""


def _snippet(resp: requests.Response) -> str:
    return (resp.text or "")[:240].replace("\n", "\\n")


def _path(*parts: str) -> str:
    return "/" + "/".join(quote(str(p), safe="") for p in parts)


def _parse(model: Type[ModelT], data: Any) -> ModelT:
    if not isinstance(data, dict):
        raise BinocsClientError("Binocs API returned an unexpected payload")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise BinocsClientError(
            f"Binocs API returned a malformed {model.__name__.lower()}: {exc.error_count()} error(s)"
        ) from exc


class BinocsClient:
    def __init__(
        self,
        access_key: str,
        secret_key: str,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout_s: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._access_key = access_key
        self._secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._session = session or requests.Session()
        self._token: str | None = None

        self.checks = ChecksService(self)
        self.channels = ChannelsService(self)

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug("Binocs API %s %s", method, path)
        try:
            return self._session.request(method, url, timeout=self.timeout_s, **kwargs)
        except requests.Timeout as exc:
            raise BinocsClientError(
                f"Binocs API timed out after {self.timeout_s}s ({method} {path})"
            ) from exc
        except requests.ConnectionError as exc:
            raise BinocsClientError(
                f"Binocs API connection error: {exc.__class__.__name__}: {exc}"
            ) from exc
        except requests.RequestException as exc:
            raise BinocsClientError(
                f"Failed to reach Binocs API: {exc.__class__.__name__}: {exc}"
            ) from exc

    @staticmethod
    def _decode(resp: requests.Response) -> Any:
        if resp.status_code == 404:
            raise BinocsNotFoundError(
                f"Binocs API returned HTTP 404: {_snippet(resp)}", status_code=404
            )
        if resp.status_code >= 400:
            raise BinocsClientError(
                f"Binocs API returned HTTP {resp.status_code}: {_snippet(resp)}",
                status_code=resp.status_code,
            )
        if resp.status_code == 204 or not (resp.text or "").strip():
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise BinocsClientError(
                f"Binocs API returned invalid JSON envelope: {_snippet(resp)}",
                status_code=resp.status_code,
            ) from exc

    def authenticate(self) -> str:
        resp = self._send(
            "POST",
            "/authenticate",
            json={"access_key": self._access_key, "secret_key": self._secret_key},
        )
        if resp.status_code in (401, 403):
            raise BinocsClientError(
                f"Binocs API rejected the access key pair (HTTP {resp.status_code})",
                status_code=resp.status_code,
            )
        payload = self._decode(resp)
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise BinocsClientError("Binocs API authentication returned no access token")
        self._token = token
        logger.debug("Authenticated against Binocs API at %s", self.base_url)
        return token

    def request(self, method: str, path: str, *, json: Any = None) -> Any:
        token = self._token or self.authenticate()
        resp = self._send(
            method,
            path,
            json=json,
            headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
        )
        return self._decode(resp)


class ChecksService:
    def __init__(self, client: BinocsClient) -> None:
        self._client = client

    def create(self, payload: CheckPayload) -> Check:
        data = self._client.request("POST", "/checks", json=payload.model_dump(exclude_none=True))
        return _parse(Check, data)

    def read(self, ident: str) -> Check:
        return _parse(Check, self._client.request("GET", _path("checks", ident)))

    def update(self, ident: str, payload: CheckPayload) -> None:
        self._client.request(
            "PUT", _path("checks", ident), json=payload.model_dump(exclude_none=True)
        )

    def delete(self, ident: str) -> None:
        self._client.request("DELETE", _path("checks", ident))


class ChannelsService:
    def __init__(self, client: BinocsClient) -> None:
        self._client = client

    def create(self, payload: ChannelPayload) -> Channel:
        data = self._client.request(
            "POST", "/channels", json=payload.model_dump(exclude_none=True)
        )
        return _parse(Channel, data)

    def read(self, ident: str) -> Channel:
        return _parse(Channel, self._client.request("GET", _path("channels", ident)))

    def update(self, ident: str, payload: ChannelPayload) -> None:
        self._client.request(
            "PUT", _path("channels", ident), json=payload.model_dump(exclude_none=True)
        )

    def delete(self, ident: str) -> None:
        self._client.request("DELETE", _path("channels", ident))

    def attach(self, channel_ident: str, check_ident: str) -> None:
        self._client.request("POST", _path("channels", channel_ident, "check", check_ident))

    def detach(self, channel_ident: str, check_ident: str) -> None:
        self._client.request("DELETE", _path("channels", channel_ident, "check", check_ident))
