import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from binocs_provider.cli import main
from binocs_provider.formatting import format_diagnostics
from binocs_provider.manifest import Diagnostic, load_manifest, validate_manifest

VALID_MANIFEST = """checks:
  homepage:
    resource: https://example.com
    method: GET
    up_codes: 200-302
    regions: [eu-west-1, us-east-1]
  database:
    resource: tcp://db.internal:5432
    regions: [eu-central-1]
    interval: 30
channels:
  oncall:
    type: email
    handle: oncall@example.com
    checks: [c1, c2]
"""

INVALID_MANIFEST = """checks:
  broken:
    resource: tcp://db.internal:5432
    method: GET
    regions: [mars-1]
    interval: 4
channels:
  chat:
    type: slack
    handle: oncall@example.com
"""


class ManifestTests(unittest.TestCase):
    def _write(self, td: str, content: str) -> Path:
        path = Path(td) / "binocs.yml"
        path.write_text(content)
        return path

    def test_valid_manifest_has_no_diagnostics(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            manifest = load_manifest(self._write(td, VALID_MANIFEST))

        self.assertEqual(sorted(manifest.checks), ["database", "homepage"])
        self.assertEqual(validate_manifest(manifest), [])

    def test_duplicate_names_across_kinds_rejected(self) -> None:
        content = (
            "checks:\n  web:\n    resource: tcp://db:5432\n    regions: [eu-west-1]\n"
            "channels:\n  web:\n    type: email\n    handle: ops@example.com\n"
        )
        with tempfile.TemporaryDirectory() as td:
            path = self._write(td, content)
            with self.assertRaises(ValueError) as ctx:
                load_manifest(path)
            with redirect_stdout(io.StringIO()):
                self.assertEqual(main(["validate", str(path)]), 1)

        self.assertIn("web", str(ctx.exception))

    def test_invalid_manifest_reports_each_problem(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            manifest = load_manifest(self._write(td, INVALID_MANIFEST))

        diagnostics = validate_manifest(manifest)
        found = sorted((d.address, d.field) for d in diagnostics)
        self.assertEqual(
            found,
            [
                ("binocs_channel.chat", "type"),
                ("binocs_check.broken", "interval"),
                ("binocs_check.broken", "regions"),
            ],
        )

    def test_missing_manifest(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_manifest(Path("/nonexistent/binocs.yml"))

    def test_format_diagnostics(self) -> None:
        text = format_diagnostics(
            [Diagnostic(address="binocs_check.a", field="interval", message="too low")], checked=2
        )
        self.assertIn("Error: binocs_check.a: interval: too low", text)
        self.assertIn("1 problem(s) found in 2 resource(s).", text)
        self.assertEqual(format_diagnostics([], checked=3), "Success! 3 resource(s) are valid.")

    def test_cli_validate_exit_codes(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            good = self._write(td, VALID_MANIFEST)
            out = io.StringIO()
            with redirect_stdout(out):
                self.assertEqual(main(["validate", str(good)]), 0)
            self.assertIn("Success!", out.getvalue())

            bad = self._write(td, INVALID_MANIFEST)
            out = io.StringIO()
            with redirect_stdout(out):
                self.assertEqual(main(["validate", str(bad)]), 1)
            self.assertIn("binocs_check.broken", out.getvalue())

    def test_cli_validate_missing_file(self) -> None:
        self.assertEqual(main(["validate", "/nonexistent/binocs.yml"]), 1)


if __name__ == "__main__":
    unittest.main()
