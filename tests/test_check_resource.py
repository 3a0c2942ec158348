import unittest
from unittest.mock import Mock

from binocs_provider.clients.binocs_client import BinocsClientError, BinocsNotFoundError
from binocs_provider.models import Check, HttpCheckPayload
from binocs_provider.resources.base import ResourceError, ResourceNotFoundError
from binocs_provider.resources.check import CheckResource
from binocs_provider.validation import ConfigValidationError

HTTP_CONFIG = {
    "name": "homepage",
    "resource": "https://example.com",
    "method": "GET",
    "regions": ["eu-west-1"],
    "up_codes": "2xx",
}


def _remote(**overrides) -> Check:
    data = {
        "ident": "c1",
        "name": "homepage",
        "resource": "https://example.com",
        "protocol": "HTTPS",
        "method": "GET",
        "interval": 60,
        "target": 1.2,
        "regions": ["eu-west-1"],
        "up_codes": "2xx",
        "up_confirmations_threshold": 2,
        "down_confirmations_threshold": 2,
    }
    data.update(overrides)
    return Check(**data)


class CheckResourceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = Mock()
        self.resource = CheckResource(self.client)

    def test_create_stores_identifier_and_reads_back(self) -> None:
        self.client.checks.create.return_value = _remote()
        self.client.checks.read.return_value = _remote()
        d = self.resource.new_data(config=HTTP_CONFIG)

        self.resource.create(d)

        self.assertEqual(d.id, "c1")
        payload = self.client.checks.create.call_args.args[0]
        self.assertIsInstance(payload, HttpCheckPayload)
        self.assertEqual(payload.protocol, "HTTPS")
        self.client.checks.read.assert_called_once_with("c1")
        self.assertEqual(d.state()["regions"], ["eu-west-1"])
        self.assertEqual(d.state()["up_codes"], "2xx")

    def test_create_failure_persists_nothing(self) -> None:
        self.client.checks.create.side_effect = BinocsClientError("Binocs API returned HTTP 429: slow down")
        d = self.resource.new_data(config=HTTP_CONFIG)

        with self.assertRaises(ResourceError) as ctx:
            self.resource.create(d)

        self.assertIn("unable to create Binocs check", str(ctx.exception))
        self.assertIn("429", str(ctx.exception))
        self.assertEqual(d.id, "")
        self.assertEqual(d.state(), {})

    def test_invalid_config_never_reaches_the_api(self) -> None:
        for config in (
            {**HTTP_CONFIG, "interval": 4},
            {k: v for k, v in HTTP_CONFIG.items() if k != "method"},
            {"resource": "tcp://db:5432", "regions": ["eu-west-1"], "up_codes": "2xx"},
        ):
            with self.subTest(config=config):
                with self.assertRaises(ConfigValidationError):
                    self.resource.create(self.resource.new_data(config=config))
        self.client.checks.create.assert_not_called()

    def test_validate_combines_static_and_cross_field_rules(self) -> None:
        errors = self.resource.validate({"resource": "tcp://db:5432", "regions": ["eu-west-1"], "method": "GET"})
        self.assertEqual([e.field for e in errors], ["method"])
        self.assertEqual(self.resource.validate(HTTP_CONFIG), [])

    def test_read_not_found_clears_identifier(self) -> None:
        self.client.checks.read.side_effect = BinocsNotFoundError("Binocs API returned HTTP 404: gone", 404)
        d = self.resource.new_data(state={"name": "homepage"}, id="c1")

        self.assertFalse(self.resource.exists(d))
        self.assertEqual(d.id, "")

    def test_read_without_identifier_makes_no_call(self) -> None:
        with self.assertRaises(ResourceError) as ctx:
            self.resource.read(self.resource.new_data())
        self.assertIn("without an identifier", str(ctx.exception))
        self.client.checks.read.assert_not_called()

    def test_exists_propagates_other_errors(self) -> None:
        self.client.checks.read.side_effect = BinocsClientError("Binocs API returned HTTP 500: boom", 500)
        d = self.resource.new_data(id="c1")

        with self.assertRaises(ResourceError) as ctx:
            self.resource.exists(d)

        self.assertIn("unable to read Binocs check", str(ctx.exception))
        self.assertEqual(d.id, "c1")

    def test_update_sends_rebuilt_payload(self) -> None:
        self.client.checks.read.return_value = _remote(interval=120)
        d = self.resource.new_data(
            config={**HTTP_CONFIG, "interval": 120},
            state={"interval": 60, "resource": "https://example.com"},
            id="c1",
        )

        self.resource.update(d)

        ident, payload = self.client.checks.update.call_args.args
        self.assertEqual(ident, "c1")
        self.assertEqual(payload.interval, 120)
        self.assertEqual(d.state()["interval"], 120)

    def test_update_failure_leaves_state_untouched(self) -> None:
        self.client.checks.update.side_effect = BinocsClientError("Binocs API returned HTTP 500: boom", 500)
        d = self.resource.new_data(
            config={**HTTP_CONFIG, "interval": 120},
            state={"interval": 60},
            id="c1",
        )

        with self.assertRaises(ResourceError):
            self.resource.update(d)

        self.assertEqual(d.state(), {"interval": 60})
        self.client.checks.read.assert_not_called()

    def test_update_with_invalid_config_makes_no_call(self) -> None:
        d = self.resource.new_data(config={**HTTP_CONFIG, "up_codes": None}, id="c1")
        with self.assertRaises(ConfigValidationError):
            self.resource.update(d)
        self.client.checks.update.assert_not_called()

    def test_changing_resource_requires_replacement(self) -> None:
        d = self.resource.new_data(
            config={**HTTP_CONFIG, "resource": "https://other.example"},
            state={"resource": "https://example.com"},
            id="c1",
        )
        self.assertEqual(self.resource.requires_replacement(d), ["resource"])

    def test_delete(self) -> None:
        d = self.resource.new_data(id="c1")
        self.resource.delete(d)
        self.client.checks.delete.assert_called_once_with("c1")
        self.assertEqual(d.id, "")

    def test_delete_error_surfaces(self) -> None:
        self.client.checks.delete.side_effect = BinocsNotFoundError("Binocs API returned HTTP 404: gone", 404)
        with self.assertRaises(ResourceError) as ctx:
            self.resource.delete(self.resource.new_data(id="c1"))
        self.assertIn("unable to remove Binocs check", str(ctx.exception))

    def test_import_reads_remote_state(self) -> None:
        self.client.checks.read.return_value = _remote(
            ident="c7", resource="tcp://db:5432", protocol="TCP", method=None, up_codes=None
        )
        d = self.resource.import_state("c7")

        self.assertEqual(d.id, "c7")
        self.assertEqual(d.state()["resource"], "tcp://db:5432")
        self.assertEqual(d.state()["method"], "")

    def test_import_missing_remote(self) -> None:
        self.client.checks.read.side_effect = BinocsNotFoundError("Binocs API returned HTTP 404: gone", 404)
        with self.assertRaises(ResourceNotFoundError):
            self.resource.import_state("nope")

    def test_unconfigured_resource_cannot_call_api(self) -> None:
        with self.assertRaises(ResourceError):
            CheckResource().read(CheckResource().new_data(id="c1"))


if __name__ == "__main__":
    unittest.main()
