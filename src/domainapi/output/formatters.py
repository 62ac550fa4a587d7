"""Human and JSON rendering of ServiceResult."""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.markup import escape

from domainapi.output.console import create_console, get_output

if TYPE_CHECKING:
    from domainapi.services.result import ServiceResult


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def format_result(result: ServiceResult, *, json_output: bool = False) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: Return JSON instead of human-readable text.
    """
    if json_output:
        return result.model_dump_json(indent=2)

    console = create_console()
    if result.ok:
        console.print(f"[api.ok]OK[/]: [api.op]{escape(result.op)}[/]")
    else:
        message = result.error.message if result.error else "Unknown error"
        code = result.error.code if result.error else "ERROR"
        console.print(
            f"[api.error]ERROR[/]: [api.op]{escape(result.op)}[/] "
            f"({escape(code)}) {escape(message)}"
        )
    for key, value in result.data.items():
        console.print(f"  [api.key]{escape(key)}[/]: {escape(_format_value(value))}")
    return get_output(console).rstrip("\n")
