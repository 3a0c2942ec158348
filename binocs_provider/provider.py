from __future__ import annotations

import logging
import os
from typing import Any, Callable, Mapping

from binocs_provider.clients.binocs_client import DEFAULT_API_URL, BinocsClient
from binocs_provider.resources.base import Resource
from binocs_provider.resources.channel import ChannelResource
from binocs_provider.resources.check import CheckResource
from binocs_provider.schema import PROVIDER_SCHEMA
from binocs_provider.validation import ConfigValidationError, FieldValidationError

logger = logging.getLogger(__name__)

RESOURCE_TYPES: dict[str, type[Resource]] = {
    CheckResource.type_name: CheckResource,
    ChannelResource.type_name: ChannelResource,
}


class Provider:
    schema = PROVIDER_SCHEMA

    def __init__(self, client_factory: Callable[..., BinocsClient] = BinocsClient) -> None:
        self._client_factory = client_factory
        self._client: BinocsClient | None = None

    @property
    def configured(self) -> bool:
        return self._client is not None

    def _resolve(self, explicit: Mapping[str, Any]) -> dict[str, str]:
        values: dict[str, str] = {}
        errors: list[FieldValidationError] = []
        for name, spec in self.schema.fields.items():
            value = explicit.get(name)
            if not value and spec.env_default:
                value = os.getenv(spec.env_default, "")
            if spec.required and not value:
                errors.append(
                    FieldValidationError(
                        name, f'The argument "{name}" is required, but no definition was found.'
                    )
                )
                continue
            values[name] = value
        if errors:
            raise ConfigValidationError(errors)
        return values

    def configure(
        self,
        access_key: str | None = None,
        secret_key: str | None = None,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout_s: float = 10.0,
    ) -> BinocsClient:
        """Build the API client from explicit keys, falling back to the environment."""
        values = self._resolve({"access_key": access_key, "secret_key": secret_key})
        self._client = self._client_factory(
            values["access_key"],
            values["secret_key"],
            base_url=base_url,
            timeout_s=timeout_s,
        )
        logger.info("Binocs provider configured for %s", base_url)
        return self._client

    def resource_types(self) -> list[str]:
        return sorted(RESOURCE_TYPES)

    def resource(self, type_name: str) -> Resource:
        try:
            resource_cls = RESOURCE_TYPES[type_name]
        except KeyError:
            raise KeyError(f"unsupported resource type {type_name!r}") from None
        return resource_cls(self._client)

    def validate_resource_config(
        self, type_name: str, config: Mapping[str, Any]
    ) -> list[FieldValidationError]:
        return self.resource(type_name).validate(config)

    def describe(self) -> dict[str, Any]:
        return {
            "provider": self.schema.describe(),
            "resources": {
                name: cls.schema.describe() for name, cls in sorted(RESOURCE_TYPES.items())
            },
        }
