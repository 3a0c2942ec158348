from __future__ import annotations

import ipaddress
import re
from typing import Any, Callable, Iterable
from urllib.parse import urlsplit

PROTOCOL_HTTP = "HTTP"
PROTOCOL_HTTPS = "HTTPS"
PROTOCOL_TCP = "TCP"

HTTP_PROTOCOLS = frozenset({PROTOCOL_HTTP, PROTOCOL_HTTPS})
SUPPORTED_PROTOCOLS = frozenset({PROTOCOL_HTTP, PROTOCOL_HTTPS, PROTOCOL_TCP})

SUPPORTED_REGIONS: tuple[str, ...] = (
    "af-south-1",
    "ap-east-1",
    "ap-northeast-1",
    "ap-south-1",
    "ap-southeast-1",
    "ap-southeast-2",
    "eu-central-1",
    "eu-west-1",
    "sa-east-1",
    "us-east-1",
    "us-west-1",
)

SUPPORTED_HTTP_METHODS: tuple[str, ...] = ("GET", "HEAD", "POST", "PUT", "DELETE")

SUPPORTED_CHANNEL_TYPES: tuple[str, ...] = ("email",)

# Created interactively through the Binocs CLI; these can only be imported.
UNSUPPORTED_CHANNEL_TYPES: tuple[str, ...] = ("telegram", "slack")

NAME_MAX_LENGTH = 25

TCP_PREFIX = "tcp://"

_DNS_NAME_RE = re.compile(
    r"^([a-zA-Z0-9_]{1}[a-zA-Z0-9_-]{0,62}){1}(\.[a-zA-Z0-9_]{1}[a-zA-Z0-9_-]{0,62})*[\._]?$"
)
_UP_CODE_ENTRY = r"([1-5]{1}[0-9]{2}-[1-5]{1}[0-9]{2}|([1-5]{1}(([0-9]{2}|[0-9]{1}x)|xx)))"
_UP_CODES_RE = re.compile(rf"^{_UP_CODE_ENTRY}{{1}}(,{_UP_CODE_ENTRY})*$")
_PORT_RE = re.compile(r"^[0-9]+$")
_EMAIL_RE = re.compile(
    r"^(?:[a-z0-9!#$%&'*+/=?^_{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_{|}~-]+)*"
    r"|\"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21\x23-\x5b\x5d-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])*\")"
    r"@(?:(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?"
    r"|\[(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?|[a-z0-9-]*[a-z0-9]:"
    r"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21-\x5a\x53-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])+)\])$",
    re.IGNORECASE,
)

Validator = Callable[[Any, str], None]


class FieldValidationError(ValueError):
    """A single field value that breaks a static or cross-field rule."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class ConfigValidationError(ValueError):
    """Raised when a configuration is rejected; carries every field error found."""

    def __init__(self, errors: Iterable[FieldValidationError]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors) or "invalid configuration")

    @classmethod
    def single(cls, field: str, message: str) -> "ConfigValidationError":
        return cls([FieldValidationError(field, message)])


def _require_string(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise FieldValidationError(field, f'expected type of "{field}" to be string')
    return value


def is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def is_dns_name(value: str) -> bool:
    if not value or len(value.replace(".", "")) > 255:
        return False
    return not is_ip(value) and _DNS_NAME_RE.fullmatch(value) is not None


def is_host(value: str) -> bool:
    return is_ip(value) or is_dns_name(value)


def is_port_number(value: int) -> bool:
    return 1 <= value <= 65535


def derive_protocol(resource: str) -> str:
    """Upper-cased scheme token of ``resource``; anything unclassifiable is rejected."""
    protocol = resource.split(":", 1)[0].upper()
    if protocol not in SUPPORTED_PROTOCOLS:
        raise FieldValidationError(
            "resource",
            f'unable to derive a protocol from "resource" {resource!r}; '
            "expected a HTTP, HTTPS or TCP resource",
        )
    return protocol


def _validate_tcp_resource(value: str, field: str) -> None:
    parts = value[len(TCP_PREFIX):].split(":")
    if len(parts) != 2:
        raise FieldValidationError(
            field, f'expected "{field}" tcp resource to contain host and port components'
        )
    host, port = parts
    if not is_host(host):
        raise FieldValidationError(field, f'expected "{field}" tcp resource to contain a valid host')
    if not _PORT_RE.fullmatch(port):
        raise FieldValidationError(field, f'expected "{field}" tcp resource to contain a port number')
    if not is_port_number(int(port)):
        raise FieldValidationError(
            field, f'expected "{field}" tcp resource to contain a valid port number'
        )


def _validate_http_resource(value: str, field: str) -> None:
    try:
        parsed = urlsplit(value)
        # Accessing .port raises for malformed or out-of-range ports.
        parsed.port
    except ValueError as exc:
        raise FieldValidationError(
            field, f'expected "{field}" to be a valid url, got {value!r}: {exc}'
        ) from exc
    if parsed.scheme not in ("http", "https"):
        raise FieldValidationError(
            field, f'expected "{field}" to have a url with schema of: "http,https", got {value!r}'
        )
    if not parsed.hostname:
        raise FieldValidationError(field, f'expected "{field}" to have a host, got {value!r}')


def validate_resource(value: Any, field: str = "resource") -> None:
    """Accept ``tcp://HOST:PORT`` or an absolute http(s) URL."""
    value = _require_string(value, field)
    if value.startswith(TCP_PREFIX):
        _validate_tcp_resource(value, field)
        return
    if value.startswith("http"):
        _validate_http_resource(value, field)
        return
    raise FieldValidationError(field, f'expected "{field}" to be either TCP or HTTP(S) resource')


def validate_up_codes(value: Any, field: str = "up_codes") -> None:
    value = _require_string(value, field)
    if _UP_CODES_RE.fullmatch(value) is None:
        raise FieldValidationError(
            field,
            f'{field} must be of a format such as "200, 2xx, 200-302, 200,301", got {value!r}',
        )


def validate_region(value: Any, field: str = "regions") -> None:
    value = _require_string(value, field)
    if value not in SUPPORTED_REGIONS:
        raise FieldValidationError(
            field,
            f'expected "{field}" to be any of "{", ".join(SUPPORTED_REGIONS)}", got {value!r}',
        )


def validate_email_handle(value: Any, field: str = "handle") -> None:
    value = _require_string(value, field)
    if _EMAIL_RE.fullmatch(value) is None:
        raise FieldValidationError(field, f"expected a valid e-mail address, got {value!r}")


def string_in(values: Iterable[str]) -> Validator:
    allowed = tuple(values)

    def _validate(value: Any, field: str) -> None:
        value = _require_string(value, field)
        if value not in allowed:
            raise FieldValidationError(
                field, f"expected {field} to be one of {list(allowed)!r}, got {value}"
            )

    return _validate


def string_len_between(min_len: int, max_len: int) -> Validator:
    def _validate(value: Any, field: str) -> None:
        value = _require_string(value, field)
        if not min_len <= len(value) <= max_len:
            raise FieldValidationError(
                field,
                f"expected length of {field} to be in the range ({min_len} - {max_len}), "
                f"got {value}",
            )

    return _validate


def int_between(minimum: int, maximum: int) -> Validator:
    def _validate(value: Any, field: str) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise FieldValidationError(field, f"expected type of {field} to be integer")
        if not minimum <= value <= maximum:
            raise FieldValidationError(
                field, f"expected {field} to be in the range ({minimum} - {maximum}), got {value}"
            )

    return _validate


def float_between(minimum: float, maximum: float) -> Validator:
    def _validate(value: Any, field: str) -> None:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise FieldValidationError(field, f"expected type of {field} to be float")
        if not minimum <= value <= maximum:
            raise FieldValidationError(
                field,
                f"expected {field} to be in the range ({minimum:f} - {maximum:f}), got {value:f}",
            )

    return _validate


validate_method = string_in(SUPPORTED_HTTP_METHODS)
validate_channel_type = string_in(SUPPORTED_CHANNEL_TYPES)
validate_name = string_len_between(0, NAME_MAX_LENGTH)
