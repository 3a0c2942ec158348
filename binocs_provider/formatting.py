from __future__ import annotations

from typing import Iterable

from binocs_provider.manifest import Diagnostic


def format_diagnostics(diagnostics: Iterable[Diagnostic], checked: int) -> str:
    lines = [f"Error: {d.address}: {d.field}: {d.message}" for d in diagnostics]
    if lines:
        lines.append(f"{len(lines)} problem(s) found in {checked} resource(s).")
    else:
        lines.append(f"Success! {checked} resource(s) are valid.")
    return "\n".join(lines)
