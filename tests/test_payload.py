import unittest

from pydantic import ValidationError

from binocs_provider.models import (
    ChannelSpec,
    CheckSpec,
    HttpCheckPayload,
    TcpCheckPayload,
)
from binocs_provider.payload import build_channel_payload, build_check_payload, diff_checks
from binocs_provider.resource_data import ResourceData
from binocs_provider.schema import CHECK_SCHEMA
from binocs_provider.validation import ConfigValidationError


class CheckPayloadTests(unittest.TestCase):
    def test_http_check_includes_method_and_up_codes(self) -> None:
        spec = CheckSpec(
            name="homepage",
            resource="https://example.com",
            method="GET",
            regions=["us-east-1", "eu-west-1"],
            up_codes="200-302",
        )
        payload = build_check_payload(spec)

        self.assertIsInstance(payload, HttpCheckPayload)
        self.assertEqual(
            payload.model_dump(exclude_none=True),
            {
                "name": "homepage",
                "resource": "https://example.com",
                "protocol": "HTTPS",
                "method": "GET",
                "up_codes": "200-302",
                "interval": 60,
                "target": 1.2,
                "regions": ["eu-west-1", "us-east-1"],
                "up_confirmations_threshold": 2,
                "down_confirmations_threshold": 2,
            },
        )

    def test_http_check_requires_method(self) -> None:
        spec = CheckSpec(resource="http://example.com", regions=["eu-west-1"], up_codes="2xx")
        with self.assertRaises(ConfigValidationError) as ctx:
            build_check_payload(spec)
        self.assertEqual(ctx.exception.errors[0].field, "method")
        self.assertIn("for a HTTP resource", str(ctx.exception))

    def test_http_check_requires_up_codes(self) -> None:
        spec = CheckSpec(resource="https://example.com", regions=["eu-west-1"], method="HEAD")
        with self.assertRaises(ConfigValidationError) as ctx:
            build_check_payload(spec)
        self.assertEqual(ctx.exception.errors[0].field, "up_codes")
        self.assertIn("HTTPS", str(ctx.exception))

    def test_tcp_check_omits_http_fields(self) -> None:
        spec = CheckSpec(resource="tcp://db.internal:5432", regions=["eu-west-1"])
        payload = build_check_payload(spec)

        self.assertIsInstance(payload, TcpCheckPayload)
        dumped = payload.model_dump(exclude_none=True)
        self.assertEqual(dumped["protocol"], "TCP")
        self.assertNotIn("method", dumped)
        self.assertNotIn("up_codes", dumped)
        self.assertNotIn("name", dumped)

    def test_tcp_check_rejects_method_and_up_codes(self) -> None:
        cases = [
            ({"method": "GET"}, "method"),
            ({"up_codes": "2xx"}, "up_codes"),
        ]
        for extra, field in cases:
            with self.subTest(field=field):
                spec = CheckSpec(resource="tcp://db:5432", regions=["eu-west-1"], **extra)
                with self.assertRaises(ConfigValidationError) as ctx:
                    build_check_payload(spec)
                self.assertEqual(ctx.exception.errors[0].field, field)
                self.assertIn("cannot be used with a TCP resource", str(ctx.exception))

    def test_unclassifiable_scheme_is_rejected(self) -> None:
        spec = CheckSpec(resource="ftp://example.com", regions=["eu-west-1"])
        with self.assertRaises(ConfigValidationError) as ctx:
            build_check_payload(spec)
        self.assertEqual(ctx.exception.errors[0].field, "resource")

    def test_tcp_variant_cannot_carry_http_fields(self) -> None:
        with self.assertRaises(ValidationError):
            TcpCheckPayload(protocol="TCP", resource="tcp://db:1", method="GET")

    def test_spec_from_resource_data_marks_unset_fields(self) -> None:
        d = ResourceData(
            CHECK_SCHEMA,
            config={"resource": "tcp://db:5432", "regions": ["eu-west-1"], "interval": 30},
        )
        spec = CheckSpec.from_resource_data(d)
        self.assertIsNone(spec.method)
        self.assertIsNone(spec.up_codes)
        self.assertEqual(spec.interval, 30)
        self.assertEqual(spec.regions, ["eu-west-1"])


class ChannelPayloadTests(unittest.TestCase):
    def test_empty_alias_omitted(self) -> None:
        payload = build_channel_payload(ChannelSpec(type="email", handle="ops@example.com"))
        self.assertEqual(
            payload.model_dump(exclude_none=True),
            {"type": "email", "handle": "ops@example.com"},
        )

    def test_diff_checks(self) -> None:
        self.assertEqual(diff_checks({"A", "B"}, {"B", "C"}), (["A"], ["C"]))
        self.assertEqual(diff_checks(None, {"A"}), ([], ["A"]))
        self.assertEqual(diff_checks({"A"}, {"A"}), ([], []))


if __name__ == "__main__":
    unittest.main()
