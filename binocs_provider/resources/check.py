from __future__ import annotations

from binocs_provider.clients.binocs_client import ChecksService
from binocs_provider.models import Check, CheckPayload, CheckSpec
from binocs_provider.payload import build_check_payload
from binocs_provider.resource_data import ResourceData
from binocs_provider.resources.base import Resource
from binocs_provider.schema import CHECK_SCHEMA

CHECK_ATTRIBUTES = (
    "name",
    "resource",
    "method",
    "interval",
    "target",
    "regions",
    "up_codes",
    "up_confirmations_threshold",
    "down_confirmations_threshold",
)


class CheckResource(Resource):
    type_name = "binocs_check"
    kind = "check"
    schema = CHECK_SCHEMA

    def service(self) -> ChecksService:
        return self.client.checks

    def build_payload(self, d: ResourceData) -> CheckPayload:
        return build_check_payload(CheckSpec.from_resource_data(d))

    def write_state(self, d: ResourceData, remote: Check) -> None:
        for key in CHECK_ATTRIBUTES:
            d.set(key, getattr(remote, key))
