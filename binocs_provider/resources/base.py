from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import BaseModel

from binocs_provider.clients.binocs_client import (
    BinocsClient,
    BinocsClientError,
    BinocsNotFoundError,
)
from binocs_provider.resource_data import ResourceData
from binocs_provider.schema import ResourceSchema
from binocs_provider.validation import ConfigValidationError, FieldValidationError

logger = logging.getLogger(__name__)


class ResourceError(RuntimeError):
    """A remote call failed; the message says which operation on which kind."""


class ResourceNotFoundError(ResourceError):
    pass


class AssociationError(ResourceError):
    def __init__(self, message: str, channel_id: str, check_id: str) -> None:
        super().__init__(message)
        self.channel_id = channel_id
        self.check_id = check_id


class Resource:
    """
    CRUD bridge shared by checks and channels.

    Subclasses provide the schema, payload construction, the remote service
    and how a remote object maps onto state. Every remote failure is wrapped
    in ``ResourceError`` with the operation and kind; a not-found on read
    clears the local id instead of failing.
    """

    type_name: str = ""
    kind: str = ""
    schema: ResourceSchema

    def __init__(self, client: BinocsClient | None = None) -> None:
        self._client = client

    @property
    def client(self) -> BinocsClient:
        if self._client is None:
            raise ResourceError(f"{self.type_name} requires a configured provider")
        return self._client

    def service(self) -> Any:
        raise NotImplementedError

    def build_payload(self, d: ResourceData) -> BaseModel:
        raise NotImplementedError

    def write_state(self, d: ResourceData, remote: Any) -> None:
        raise NotImplementedError

    def after_create(self, d: ResourceData) -> None:
        pass

    def after_update(self, d: ResourceData) -> None:
        pass

    def new_data(
        self,
        config: Mapping[str, Any] | None = None,
        state: Mapping[str, Any] | None = None,
        id: str = "",
    ) -> ResourceData:
        return ResourceData(self.schema, config=config, state=state, id=id)

    def validate(self, config: Mapping[str, Any]) -> list[FieldValidationError]:
        errors = self.schema.validate(config)
        if errors:
            return errors
        try:
            self.build_payload(self.new_data(config=config))
        except ConfigValidationError as exc:
            errors.extend(exc.errors)
        return errors

    def _validated_payload(self, d: ResourceData) -> BaseModel:
        errors = self.schema.validate(d.raw_config or {})
        if errors:
            raise ConfigValidationError(errors)
        return self.build_payload(d)

    def requires_replacement(self, d: ResourceData) -> list[str]:
        if not d.id or d.raw_config is None:
            return []
        return self.schema.requires_replacement(d.state(), d.config)

    def create(self, d: ResourceData) -> None:
        payload = self._validated_payload(d)
        try:
            remote = self.service().create(payload)
        except BinocsClientError as exc:
            logger.error("Creating %s failed: %s", self.type_name, exc)
            raise ResourceError(f"unable to create Binocs {self.kind}: {exc}") from exc
        d.set_id(remote.ident)
        logger.info("Created %s %s", self.type_name, remote.ident)
        self.after_create(d)
        self.read(d)

    def read(self, d: ResourceData) -> None:
        if not d.id:
            raise ResourceError(f"cannot read Binocs {self.kind} without an identifier")
        try:
            remote = self.service().read(d.id)
        except BinocsNotFoundError:
            logger.warning(
                "%s %s no longer exists remotely; removing from state", self.type_name, d.id
            )
            d.set_id("")
            return
        except BinocsClientError as exc:
            raise ResourceError(f"unable to read Binocs {self.kind}: {exc}") from exc
        self.write_state(d, remote)

    def exists(self, d: ResourceData) -> bool:
        self.read(d)
        return bool(d.id)

    def update(self, d: ResourceData) -> None:
        payload = self._validated_payload(d)
        try:
            self.service().update(d.id, payload)
        except BinocsClientError as exc:
            logger.error("Updating %s %s failed: %s", self.type_name, d.id, exc)
            raise ResourceError(f"unable to update Binocs {self.kind}: {exc}") from exc
        logger.info("Updated %s %s", self.type_name, d.id)
        self.after_update(d)
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        try:
            self.service().delete(d.id)
        except BinocsClientError as exc:
            logger.error("Removing %s %s failed: %s", self.type_name, d.id, exc)
            raise ResourceError(f"unable to remove Binocs {self.kind}: {exc}") from exc
        logger.info("Removed %s %s", self.type_name, d.id)
        d.set_id("")

    def import_state(self, ident: str) -> ResourceData:
        d = self.new_data(id=ident)
        self.read(d)
        if not d.id:
            raise ResourceNotFoundError(
                f"cannot import non-existent remote Binocs {self.kind} {ident!r}"
            )
        return d
