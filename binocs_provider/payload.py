from __future__ import annotations

from typing import Any, Iterable

from binocs_provider.models import (
    ChannelPayload,
    ChannelSpec,
    CheckPayload,
    CheckSpec,
    HttpCheckPayload,
    TcpCheckPayload,
)
from binocs_provider.validation import (
    HTTP_PROTOCOLS,
    SUPPORTED_HTTP_METHODS,
    ConfigValidationError,
    FieldValidationError,
    derive_protocol,
)


def build_check_payload(spec: CheckSpec) -> CheckPayload:
    """
    Derive the protocol from ``spec.resource`` and apply the protocol rules:
    HTTP(S) checks need ``method`` and ``up_codes``, TCP checks must not
    carry either. Runs before create and before update.
    """
    try:
        protocol = derive_protocol(spec.resource)
    except FieldValidationError as exc:
        raise ConfigValidationError([exc]) from None

    common: dict[str, Any] = {
        "resource": spec.resource,
        "interval": spec.interval,
        "target": spec.target,
        "regions": sorted(spec.regions),
        "up_confirmations_threshold": spec.up_confirmations_threshold,
        "down_confirmations_threshold": spec.down_confirmations_threshold,
    }
    if spec.name:
        common["name"] = spec.name

    if protocol in HTTP_PROTOCOLS:
        if spec.method is None:
            raise ConfigValidationError.single(
                "method",
                f'expected "method" to be one of {", ".join(SUPPORTED_HTTP_METHODS)} '
                f"for a {protocol} resource",
            )
        if spec.up_codes is None:
            raise ConfigValidationError.single(
                "up_codes", f'expected "up_codes" to be set for a {protocol} resource'
            )
        return HttpCheckPayload(
            protocol=protocol, method=spec.method, up_codes=spec.up_codes, **common
        )

    if spec.method is not None:
        raise ConfigValidationError.single(
            "method", f'"method" cannot be used with a {protocol} resource'
        )
    if spec.up_codes is not None:
        raise ConfigValidationError.single(
            "up_codes", f'"up_codes" cannot be used with a {protocol} resource'
        )
    return TcpCheckPayload(protocol=protocol, **common)


def build_channel_payload(spec: ChannelSpec) -> ChannelPayload:
    return ChannelPayload(type=spec.type, handle=spec.handle, alias=spec.alias or None)


def diff_checks(
    previous: Iterable[str], desired: Iterable[str]
) -> tuple[list[str], list[str]]:
    """Return ``(detach, attach)``: ids to drop and ids to add."""
    old, new = set(previous or ()), set(desired or ())
    return sorted(old - new), sorted(new - old)
