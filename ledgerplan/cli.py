"""
CLI interface for ledgerplan.

Provides commands to run deployment plans, send single calls to deployed
components, and inspect plan definitions.

Plans are defined as YAML/JSON files in plans/definitions/ (or the
directory configured under plans.definitions_dir) and executed by the
PlanExecutor through a LedgerGateway.
"""

import json

import click
import yaml

from ledgerplan import __version__
from ledgerplan.errors import LedgerplanError, PermanentError, TransientError


@click.group()
@click.version_option(version=__version__, prog_name="ledgerplan")
@click.pass_context
def main(ctx):
    """
    ledgerplan - Deployment orchestrator for on-ledger components.

    Deploy an ordered plan of contracts, wire them together, and print
    the resulting addresses.
    """
    from ledgerplan.config import DeployConfig, load_config

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config()
    except FileNotFoundError:
        # Every setting has a default; config.yaml only overrides them
        ctx.obj["config"] = DeployConfig()
    except LedgerplanError as e:
        # Commands that need config report this; init can still run
        ctx.obj["config_error"] = str(e)


def _require_config(ctx):
    if "config" not in ctx.obj:
        click.echo(f"✗ Config not loaded: {ctx.obj.get('config_error', 'Unknown error')}", err=True)
        click.echo("Run 'ledgerplan init --force' to write a fresh configuration file.", err=True)
        raise SystemExit(1)
    return ctx.obj["config"]


def _setup_logging(config) -> None:
    from ledgerplan.utils import setup_logging

    setup_logging(config.log_level, config.log_format, config.log_path)


@main.command("deploy")
@click.argument("account_tag")
@click.argument("admin_address")
@click.argument("operator_address")
@click.option("--plan", "plan_id", default=None, help="Plan ID (default: plans.default from config)")
@click.option("--plan-version", default=None, help="Require this plan version (default: latest)")
@click.option("--dry-run", is_flag=True, help="Deploy against an in-memory ledger")
@click.option("--strict-artifacts", is_flag=True, help="Fail on ambiguous artifact matches")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def deploy(
    ctx,
    account_tag: str,
    admin_address: str,
    operator_address: str,
    plan_id: str | None,
    plan_version: str | None,
    dry_run: bool,
    strict_artifacts: bool,
    as_json: bool,
):
    """
    Deploy a plan and wire its components.

    ACCOUNT_TAG selects the signing account from accounts.json.
    ADMIN_ADDRESS and OPERATOR_ADDRESS are bound to $Admin and $Operator.

    Examples:

        ledgerplan deploy acc0 0xAdmin... 0xOperator...

        ledgerplan deploy acc0 0xAdmin... 0xOperator... --plan supply_chain --dry-run
    """
    from ledgerplan.accounts import AccountStore
    from ledgerplan.artifacts import ArtifactStore
    from ledgerplan.executor import execute_plan
    from ledgerplan.gateway import create_gateway
    from ledgerplan.hooks import HookRegistry
    from ledgerplan.registry import PlanRegistry
    from ledgerplan.report import format_partial, print_json, print_summary
    from ledgerplan.utils import format_duration

    config = _require_config(ctx)
    _setup_logging(config)
    plan_id = plan_id or config.default_plan

    try:
        plan = PlanRegistry(config.definitions_path).load(plan_id, version=plan_version)
        signer = AccountStore.from_file(config.accounts_path).get(account_tag)
        artifacts = ArtifactStore.from_build_dir(
            config.build_path,
            strict=strict_artifacts or config.strict_artifacts,
        )
    except LedgerplanError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1)

    if dry_run:
        click.echo("=== DRY RUN MODE === (in-memory ledger, nothing is sent)", err=True)

    result, env = execute_plan(
        plan,
        config.role_bindings(admin_address, operator_address),
        artifacts,
        create_gateway(config, dry_run=dry_run),
        signer,
        hooks=HookRegistry(allowed_modules=config.hook_modules),
    )

    if as_json:
        print_json(result, env)
    elif result.success:
        print_summary(env)

    if not result.success:
        for line in format_partial(result):
            click.echo(line, err=True)
        raise SystemExit(1)

    click.echo(
        f"✓ {plan.plan_id} completed: {len(result.deployed)} deployed "
        f"in {format_duration(result.duration_ms / 1000)}",
        err=True,
    )


@main.command("send")
@click.argument("component")
@click.argument("method")
@click.option("--address", required=True, help="Address of the deployed component")
@click.option("--from", "account_tag", required=True, help="Signing account tag")
@click.option("--args", "args_json", default="[]", help="Call arguments as a JSON list")
@click.pass_context
def send(ctx, component: str, method: str, address: str, account_tag: str, args_json: str):
    """
    Send one confirmed call to an already-deployed component.

    COMPONENT is looked up in the artifact store for its interface.

    Example:

        ledgerplan send SensorOracle setShipment --address 0x12... --from acc0 --args '["0x34..."]'
    """
    from ledgerplan.accounts import AccountStore
    from ledgerplan.artifacts import ArtifactStore
    from ledgerplan.gateway import create_gateway

    try:
        args = json.loads(args_json)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--args")
    if not isinstance(args, list):
        args = [args]

    config = _require_config(ctx)
    _setup_logging(config)

    try:
        signer = AccountStore.from_file(config.accounts_path).get(account_tag)
        artifact = ArtifactStore.from_build_dir(
            config.build_path, strict=config.strict_artifacts
        ).lookup(component)
        receipt = create_gateway(config).call(address, artifact.interface, method, args, signer)
    except (TransientError, PermanentError) as e:
        click.echo(f"✗ {component}.{method} failed: {e}", err=True)
        raise SystemExit(1)
    except LedgerplanError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1)

    click.echo(f"✓ {component}.{method} confirmed (tx {receipt.tx_hash}, block {receipt.block_number})")


@main.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """Initialize ledgerplan configuration."""
    from ledgerplan.config import DeployConfig, get_ledgerplan_home

    home = get_ledgerplan_home()
    if not home.exists():
        home.mkdir(parents=True)

    cfg_path = home / "config.yaml"
    if cfg_path.exists() and not force:
        click.echo(f"Config already exists at {cfg_path}. Use --force to overwrite.", err=True)
        raise SystemExit(1)

    default_cfg = DeployConfig(accounts_file=str(home / "accounts.json")).to_dict()
    cfg_path.write_text(yaml.safe_dump(default_cfg, sort_keys=False))

    accounts_path = home / "accounts.json"
    if not accounts_path.exists():
        accounts_path.write_text("{}\n")
        accounts_path.chmod(0o600)

    click.echo(f"Initialized ledgerplan config at {cfg_path}")
    click.echo(f'Add signing accounts to {accounts_path} as {{"<tag>": {{"pvtKey": "0x..."}}}}')


@main.group("plans")
def plans_group():
    """Manage and inspect deployment plans."""
    pass


def _registry(ctx):
    from ledgerplan.registry import PlanRegistry

    config = _require_config(ctx)
    return PlanRegistry(config.definitions_path)


@plans_group.command("list")
@click.pass_context
def list_plans(ctx):
    """List available plans."""
    from ledgerplan.errors import PlanValidationError

    registry = _registry(ctx)
    plan_ids = registry.list_plans()
    if not plan_ids:
        click.echo(f"No plans found in {registry.definitions_dir}")
        return

    for plan_id in plan_ids:
        try:
            plan = registry.load(plan_id)
        except PlanValidationError as e:
            click.echo(f"  {plan_id}  (invalid: {e})")
            continue
        description = f"  {plan.description}" if plan.description else ""
        click.echo(f"  {plan_id} ({len(plan)} items){description}")


@plans_group.command("show")
@click.argument("plan_id")
@click.option("--plan-version", default=None, help="Require this plan version (default: latest)")
@click.pass_context
def show_plan(ctx, plan_id: str, plan_version: str | None):
    """Show a plan definition in execution order."""
    registry = _registry(ctx)
    try:
        plan = registry.load(plan_id, version=plan_version)
    except LedgerplanError as e:
        click.echo(f"✗ {e}", err=True)
        available = registry.list_plans()
        if available:
            click.echo("\nAvailable plans:", err=True)
            for pid in available:
                click.echo(f"  {pid}", err=True)
        raise SystemExit(1)

    click.echo(f"# sha256: {registry.compute_hash(plan)}")
    click.echo(yaml.safe_dump(plan.to_dict(), sort_keys=False).rstrip())


if __name__ == "__main__":
    main()
