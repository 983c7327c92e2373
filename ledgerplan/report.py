"""
Summary reporter - human and JSON listings of a run.

The summary lists every environment entry in insertion order, seeded roles
first and then deployed components in plan order, with the $ marker
stripped:

    Admin: 0xAAA...
    Operator: 0xBBB...
    RoleManager: 0x123...
"""

import json
from typing import Any

import click

from ledgerplan.environment import ResolutionEnvironment
from ledgerplan.schemas import REF_MARKER, ExecutionResult


def _display_name(symbol: str) -> str:
    return symbol[len(REF_MARKER):] if symbol.startswith(REF_MARKER) else symbol


def format_summary(env: ResolutionEnvironment) -> list[str]:
    """One "Name: address" line per environment entry, in insertion order."""
    return [f"{_display_name(symbol)}: {address}" for symbol, address in env.snapshot_ordered()]


def print_summary(env: ResolutionEnvironment) -> None:
    """Write the summary to stdout."""
    for line in format_summary(env):
        click.echo(line)


def format_partial(result: ExecutionResult) -> list[str]:
    """Lines describing a failed run: where it stopped and what is already live."""
    lines = []
    if result.error is not None:
        kind = "transient" if result.error.transient else "permanent"
        where = result.failed_item or "?"
        if result.failed_action:
            where = f"{where} ({result.failed_action})"
        lines.append(f"✗ Plan '{result.plan_id}' failed at {where}: {result.error} [{kind}]")

    if result.deployed:
        lines.append("Deployed before failure (not rolled back):")
        for record in result.deployed:
            lines.append(f"  {record.name}: {record.address}")
    else:
        lines.append("Nothing was deployed.")

    if result.wired:
        lines.append("Wiring calls completed:")
        for call in result.wired:
            lines.append(f"  {call.describe()}")
    return lines


def result_payload(result: ExecutionResult, env: ResolutionEnvironment) -> dict[str, Any]:
    """JSON-ready view of a run: the result plus the ordered environment."""
    payload = result.to_dict()
    payload["environment"] = [
        {"name": _display_name(symbol), "address": address}
        for symbol, address in env.snapshot_ordered()
    ]
    return payload


def print_json(result: ExecutionResult, env: ResolutionEnvironment) -> None:
    click.echo(json.dumps(result_payload(result, env), indent=2))
