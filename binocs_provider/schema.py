from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from binocs_provider.validation import (
    NAME_MAX_LENGTH,
    SUPPORTED_HTTP_METHODS,
    SUPPORTED_REGIONS,
    UNSUPPORTED_CHANNEL_TYPES,
    FieldValidationError,
    Validator,
    float_between,
    int_between,
    validate_name,
    validate_channel_type,
    validate_email_handle,
    validate_method,
    validate_region,
    validate_resource,
    validate_up_codes,
)

FieldType = Literal["string", "int", "float", "set"]

_ZERO_VALUES: dict[str, Any] = {"string": "", "int": 0, "float": 0.0}


@dataclass(frozen=True)
class FieldSchema:
    type: FieldType
    required: bool = False
    default: Any = None
    force_new: bool = False
    computed: bool = False
    sensitive: bool = False
    min_items: int = 0
    env_default: str | None = None
    description: str = ""
    # For "set" fields the validator runs once per element.
    validate: Validator | None = None

    def zero(self) -> Any:
        if self.type == "set":
            return set()
        return _ZERO_VALUES[self.type]

    def normalize(self, value: Any) -> Any:
        if value is None:
            return self.zero()
        if self.type == "set" and not isinstance(value, str):
            try:
                return set(value)
            except TypeError:
                # Left as-is so validation reports the malformed value.
                return value
        return value

    def is_zero(self, value: Any) -> bool:
        return value is None or self.normalize(value) == self.zero()


def _check_type(name: str, spec: FieldSchema, value: Any) -> FieldValidationError | None:
    if spec.type == "string" and not isinstance(value, str):
        return FieldValidationError(name, f'expected type of "{name}" to be string')
    if spec.type == "int" and (not isinstance(value, int) or isinstance(value, bool)):
        return FieldValidationError(name, f'expected type of "{name}" to be integer')
    if spec.type == "float" and (
        not isinstance(value, (int, float)) or isinstance(value, bool)
    ):
        return FieldValidationError(name, f'expected type of "{name}" to be float')
    if spec.type == "set":
        if isinstance(value, (str, bytes, Mapping)) or not hasattr(value, "__iter__"):
            return FieldValidationError(name, f'expected type of "{name}" to be a set of strings')
        if any(not isinstance(item, str) for item in value):
            return FieldValidationError(name, f'expected every element of "{name}" to be string')
    return None


@dataclass(frozen=True)
class ResourceSchema:
    name: str
    description: str
    fields: dict[str, FieldSchema] = field(default_factory=dict)

    def apply_defaults(self, config: Mapping[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name, spec in self.fields.items():
            if config.get(name) is not None:
                out[name] = spec.normalize(config[name])
            elif spec.default is not None:
                out[name] = spec.normalize(spec.default)
        return out

    def validate(self, config: Mapping[str, Any]) -> list[FieldValidationError]:
        """Check every field of ``config`` and return all problems found."""
        errors: list[FieldValidationError] = []

        for name in sorted(set(config) - set(self.fields)):
            errors.append(
                FieldValidationError(name, f'an argument named "{name}" is not expected here')
            )

        for name, spec in self.fields.items():
            value = config.get(name)
            if value is None:
                if spec.required:
                    errors.append(
                        FieldValidationError(
                            name,
                            f'The argument "{name}" is required, but no definition was found.',
                        )
                    )
                continue

            type_error = _check_type(name, spec, value)
            if type_error is not None:
                errors.append(type_error)
                continue

            if spec.type == "set":
                items = sorted(set(value))
                if len(items) < spec.min_items:
                    errors.append(
                        FieldValidationError(
                            name,
                            f'Attribute "{name}" requires {spec.min_items} item minimum, '
                            f"but config has only {len(items)} declared.",
                        )
                    )
                if spec.validate is not None:
                    for item in items:
                        try:
                            spec.validate(item, name)
                        except FieldValidationError as exc:
                            errors.append(exc)
                continue

            if spec.validate is not None:
                try:
                    spec.validate(value, name)
                except FieldValidationError as exc:
                    errors.append(exc)

        return errors

    def requires_replacement(
        self, old: Mapping[str, Any], new: Mapping[str, Any]
    ) -> list[str]:
        changed = []
        for name, spec in self.fields.items():
            if not spec.force_new or name not in old:
                continue
            if spec.normalize(old.get(name)) != spec.normalize(new.get(name)):
                changed.append(name)
        return changed

    def describe(self) -> dict[str, Any]:
        attributes = {}
        for name, spec in self.fields.items():
            attributes[name] = {
                "type": spec.type,
                "required": spec.required,
                "optional": not spec.required,
                "computed": spec.computed,
                "force_new": spec.force_new,
                "sensitive": spec.sensitive,
                "default": spec.default,
                "description": spec.description,
            }
        return {"name": self.name, "description": self.description, "attributes": attributes}


PROVIDER_SCHEMA = ResourceSchema(
    name="binocs",
    description="Binocs provider configuration",
    fields={
        "access_key": FieldSchema(
            type="string",
            required=True,
            sensitive=True,
            env_default="BINOCS_ACCESS_KEY",
            description=(
                "Access Key required to communicate with Binocs API. "
                "Get yours at [https://binocs.sh](https://binocs.sh)"
            ),
        ),
        "secret_key": FieldSchema(
            type="string",
            required=True,
            sensitive=True,
            env_default="BINOCS_SECRET_KEY",
            description=(
                "Secret Key required to communicate with Binocs API. "
                "Get yours at [https://binocs.sh](https://binocs.sh)"
            ),
        ),
    },
)


CHECK_SCHEMA = ResourceSchema(
    name="binocs_check",
    description="`binocs_check` defines a check",
    fields={
        "name": FieldSchema(
            type="string",
            default="",
            description=(
                f"The name (alias) of this check. Maximum length is {NAME_MAX_LENGTH} characters."
            ),
            validate=validate_name,
        ),
        "resource": FieldSchema(
            type="string",
            required=True,
            force_new=True,
            description=(
                "The resource to check; a valid URL in case of a HTTP(S) resource, "
                "or tcp://{HOSTNAME}:{PORT} in case of a TCP resource."
            ),
            validate=validate_resource,
        ),
        "method": FieldSchema(
            type="string",
            description=(
                f"The HTTP method (one of {', '.join(SUPPORTED_HTTP_METHODS)}). "
                "Only used and required with HTTP(S) resources."
            ),
            validate=validate_method,
        ),
        "interval": FieldSchema(
            type="int",
            default=60,
            description=(
                "How often Binocs checks this resource, in seconds. "
                "Minimum is 5 and maximum is 900 seconds."
            ),
            validate=int_between(5, 900),
        ),
        "target": FieldSchema(
            type="float",
            default=1.2,
            description=(
                "The response time that accommodates Apdex=1.0 (in seconds with up to "
                "3 decimal places). Valid target is a value between 0.01 and 10.0 seconds."
            ),
            validate=float_between(0.01, 10.0),
        ),
        "regions": FieldSchema(
            type="set",
            required=True,
            min_items=1,
            description=(
                "From where in the world Binocs checks this resource. At least one region "
                f"is required. Valid values: {', '.join(SUPPORTED_REGIONS)}."
            ),
            validate=validate_region,
        ),
        "up_codes": FieldSchema(
            type="string",
            description=(
                'The good ("up") HTTP(S) response codes, e.g. 2xx or `200-302`, '
                "or `200,301`. Only used with HTTP(S) resources."
            ),
            validate=validate_up_codes,
        ),
        "up_confirmations_threshold": FieldSchema(
            type="int",
            default=2,
            description=(
                'How many subsequent "up" responses need to occur before Binocs creates an '
                "incident and triggers notifications. Minimum is 1 and maximum is 10."
            ),
            validate=int_between(1, 10),
        ),
        "down_confirmations_threshold": FieldSchema(
            type="int",
            default=2,
            description=(
                'How many subsequent "down" responses need to occur before Binocs closes an '
                'incident and triggers "recovery" notifications. Minimum is 1 and maximum is 10.'
            ),
            validate=int_between(1, 10),
        ),
    },
)


CHANNEL_SCHEMA = ResourceSchema(
    name="binocs_channel",
    description="`binocs_channel` defines a notification channel",
    fields={
        "type": FieldSchema(
            type="string",
            required=True,
            force_new=True,
            description=(
                'The only supported channel is currently "email", and it requires e-mail '
                "address verification. All other notification channels "
                f"({', '.join(UNSUPPORTED_CHANNEL_TYPES)}) currently require interactive "
                "creation using Binocs CLI. All notification channels can be imported."
            ),
            validate=validate_channel_type,
        ),
        "handle": FieldSchema(
            type="string",
            required=True,
            force_new=True,
            description="The e-mail address for a channel of `type = email`.",
            validate=validate_email_handle,
        ),
        "alias": FieldSchema(
            type="string",
            default="",
            description=(
                "The alias (name) of this notification channel. "
                f"Maximum length is {NAME_MAX_LENGTH} characters."
            ),
            validate=validate_name,
        ),
        "checks": FieldSchema(
            type="set",
            computed=True,
            description="The checks to associate with this notifications channel.",
        ),
    },
)
