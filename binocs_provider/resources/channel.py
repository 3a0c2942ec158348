from __future__ import annotations

import logging

from binocs_provider.clients.binocs_client import BinocsClientError, ChannelsService
from binocs_provider.models import Channel, ChannelPayload, ChannelSpec
from binocs_provider.payload import build_channel_payload, diff_checks
from binocs_provider.resource_data import ResourceData
from binocs_provider.resources.base import AssociationError, Resource
from binocs_provider.schema import CHANNEL_SCHEMA

logger = logging.getLogger(__name__)


class ChannelResource(Resource):
    type_name = "binocs_channel"
    kind = "channel"
    schema = CHANNEL_SCHEMA

    def service(self) -> ChannelsService:
        return self.client.channels

    def build_payload(self, d: ResourceData) -> ChannelPayload:
        return build_channel_payload(ChannelSpec.from_resource_data(d))

    def write_state(self, d: ResourceData, remote: Channel) -> None:
        for key in ("type", "handle", "alias", "checks"):
            d.set(key, getattr(remote, key))

    def _attach(self, channel_id: str, check_id: str) -> None:
        try:
            self.service().attach(channel_id, check_id)
        except BinocsClientError as exc:
            raise AssociationError(
                f"unable to attach Binocs channel {channel_id!r} to check {check_id!r}: {exc}",
                channel_id=channel_id,
                check_id=check_id,
            ) from exc
        logger.info("Attached channel %s to check %s", channel_id, check_id)

    def _detach(self, channel_id: str, check_id: str) -> None:
        try:
            self.service().detach(channel_id, check_id)
        except BinocsClientError as exc:
            raise AssociationError(
                f"unable to detach Binocs channel {channel_id!r} from check {check_id!r}: {exc}",
                channel_id=channel_id,
                check_id=check_id,
            ) from exc
        logger.info("Detached channel %s from check %s", channel_id, check_id)

    def after_create(self, d: ResourceData) -> None:
        checks, ok = d.get_ok("checks")
        if not ok:
            return
        for check_id in sorted(checks):
            self._attach(d.id, check_id)

    def after_update(self, d: ResourceData) -> None:
        if not d.has_change("checks"):
            return
        old, new = d.get_change("checks")
        detach, attach = diff_checks(old, new)
        # No rollback: a failure leaves earlier calls applied.
        for check_id in detach:
            self._detach(d.id, check_id)
        for check_id in attach:
            self._attach(d.id, check_id)
