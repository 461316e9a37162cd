"""
Command-line interface for planweave.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

from .errors import PlanweaveError
from .functions.registry import FunctionRegistry
from .plans.executor import PlanExecutor
from .plans.inspection import describe_plan
from .plans.models import Plan
from .plans.results import PlanResult
from .variables import VariableSet
from .version import __version__


def build_cli_parser() -> argparse.ArgumentParser:
    cli = argparse.ArgumentParser(prog="planweave", description="Run and inspect saved plans")
    cli.add_argument(
        "--version",
        action="version",
        version=f"planweave {__version__} (Python {sys.version.split()[0]})",
    )
    cli.add_argument("--log-level", default="WARNING", help="Logging level for planweave loggers")
    sub = cli.add_subparsers(dest="command", required=True)

    inspect_cmd = sub.add_parser("inspect", help="Show plan structure and progress")
    inspect_cmd.add_argument("file", type=Path, help="Path to a plan JSON file")

    for name, help_text in (
        ("run", "Run a plan to completion"),
        ("step", "Run exactly one step of a plan"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("file", type=Path, help="Path to a plan JSON file")
        cmd.add_argument(
            "--functions",
            action="append",
            default=[],
            metavar="MODULE",
            help="Module whose public functions are registered (repeatable)",
        )
        cmd.add_argument("--input", dest="input_text", help="Running input for the invocation")
        cmd.add_argument("--var", action="append", default=[], metavar="NAME=VALUE", help="Override variable (repeatable)")
        cmd.add_argument("--write", action="store_true", help="Write the updated plan back to FILE")

    return cli


def _parse_overrides(input_text: str | None, pairs: List[str]) -> VariableSet | None:
    if input_text is None and not pairs:
        return None
    overrides = VariableSet(input_text)
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise SystemExit(f"Invalid --var '{pair}': expected NAME=VALUE")
        overrides.set(name, value)
    return overrides


def _load_plan(path: Path, modules: List[str]) -> Plan:
    registry = FunctionRegistry()
    for module in modules:
        registry.register_module(module)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SystemExit(f"Cannot read plan file {path}: {exc}") from exc
    return Plan.from_json(text, registry, require_functions=bool(modules))


def _result_payload(result: PlanResult) -> Dict[str, Any]:
    return {
        "plan": result.plan_name,
        "value": result.value,
        "variables": result.variables.to_dict(),
        "metadata": dict(result.metadata),
    }


def main(argv: list[str] | None = None) -> None:
    cli = build_cli_parser()
    args = cli.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

    try:
        if args.command == "inspect":
            plan = _load_plan(args.file, [])
            print(json.dumps(describe_plan(plan), indent=2))
            return

        plan = _load_plan(args.file, args.functions)
        overrides = _parse_overrides(args.input_text, args.var)
        executor = PlanExecutor()
        if args.command == "run":
            result = executor.invoke(plan, overrides)
            payload: Dict[str, Any] = _result_payload(result)
        else:
            executor.step(plan, overrides)
            payload = describe_plan(plan)
        if args.write:
            args.file.write_text(plan.to_json(indent=2), encoding="utf-8")
        print(json.dumps(payload, indent=2))
    except PlanweaveError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":  # pragma: no cover
    main()
