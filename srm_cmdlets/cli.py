"""
SRM Cmdlets - Command Line Interface

Usage:
    srm-cmdlets <command> --server=<srm-address> --user=<user> [flags]

The SRM service instance is created by a connector: a callable named as
'package.module:callable' (--connector, or `connector` in the --config
file) that takes the server address and returns an SRM service instance
from the SRM binding in use.
"""

import argparse
import csv
import importlib
import io
import json
import sys
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any, Dict, List

import yaml

from srm_cmdlets.core.config import OUTPUT_FORMATS, VERSION, SrmConfig, load_config, validate_config
from srm_cmdlets.core.exceptions import ConnectorError, SrmError, ValidationError
from srm_cmdlets.core.session import SessionRegistry, connect_vcenter, disconnect_vcenter
from srm_cmdlets.core.types import GroupType, RecoveryMode, plain_value
from srm_cmdlets.inventory import (
    export_recovery_result,
    find_protection_group,
    find_recovery_plan,
    find_vm_by_name,
    get_associated_vms,
    get_protected_datastores,
    get_protected_vms,
    get_protection_groups,
    get_recovery_plans,
    get_recovery_results,
    get_unprotected_vms,
    result_to_dict,
)
from srm_cmdlets.main import protect_vms, start_plan, stop_plan, unprotect_vms
from srm_cmdlets.utils.logger import setup_logging
from srm_cmdlets.utils.prompt import text_prompt
from srm_cmdlets.utils.unique import moref_of


class OutputFormatter:
    """
    Handle output formatting.

    Supports: json, yaml, table, csv
    """

    @staticmethod
    def format_output(rows: List[Dict[str, Any]], format_type: str = 'table') -> str:
        """Format a list of rows based on format type."""
        if format_type == 'json':
            return json.dumps(rows, indent=2, default=str)
        elif format_type == 'yaml':
            return yaml.safe_dump(rows, default_flow_style=False, sort_keys=False)
        elif format_type == 'table':
            return OutputFormatter._format_table(rows)
        elif format_type == 'csv':
            return OutputFormatter._format_csv(rows)
        else:
            return str(rows)

    @staticmethod
    def _columns(rows: List[Dict[str, Any]]) -> List[str]:
        columns = []
        for row in rows:
            for key in row:
                if key not in columns:
                    columns.append(key)
        return columns

    @staticmethod
    def _format_table(rows: List[Dict[str, Any]]) -> str:
        """Format as table."""
        if not rows:
            return "Listed 0 items."

        columns = OutputFormatter._columns(rows)
        cells = [[_cell(row.get(c)) for c in columns] for row in rows]
        widths = [
            max(len(column), *(len(line[i]) for line in cells))
            for i, column in enumerate(columns)
        ]

        lines = ["  ".join(c.upper().ljust(w) for c, w in zip(columns, widths)).rstrip()]
        for line in cells:
            lines.append("  ".join(v.ljust(w) for v, w in zip(line, widths)).rstrip())
        return "\n".join(lines)

    @staticmethod
    def _format_csv(rows: List[Dict[str, Any]]) -> str:
        """Format as CSV."""
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=OutputFormatter._columns(rows),
                                lineterminator='\n')
        writer.writeheader()
        for row in rows:
            writer.writerow({k: _cell(v) for k, v in row.items()})
        return buffer.getvalue().rstrip('\n')


def _cell(value) -> str:
    if value is None:
        return ''
    return str(value)


def _iso_datetime(value: str) -> datetime:
    """argparse type for ISO 8601 timestamps."""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 timestamp: '{value}'")


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser.

    Returns:
        Configured ArgumentParser
    """

    parser = argparse.ArgumentParser(
        prog='srm-cmdlets',
        description='VMware Site Recovery Manager command line helpers',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
    To list vSphere Replication protection groups:
        $ srm-cmdlets groups --server=srm-a.example.com --user=admin \\
            --connector=my_bindings.srm:connect --type=vr

    To protect two VMs:
        $ srm-cmdlets protect Web-PG web-01 web-02 --server=srm-a.example.com \\
            --user=admin --connector=my_bindings.srm:connect

    To test a recovery plan without prompting:
        $ srm-cmdlets start Web-RP --mode=test --quiet --server=srm-b.example.com \\
            --user=admin --config=srm.yaml
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'srm-cmdlets v{VERSION}'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
        help='Available commands'
    )

    # VERSION COMMAND
    version_parser = subparsers.add_parser('version', help='Show the SRM server version')
    _add_common_args(version_parser)

    # GROUPS COMMAND
    groups_parser = subparsers.add_parser('groups', help='List protection groups')
    _add_common_args(groups_parser)
    groups_parser.add_argument('--name', help='Only groups with this name.')
    groups_parser.add_argument(
        '--type',
        choices=[t.value for t in GroupType],
        help='Only groups of this type.'
    )
    groups_parser.add_argument('--plan', help='Only groups in this recovery plan.')

    # PLANS COMMAND
    plans_parser = subparsers.add_parser('plans', help='List recovery plans')
    _add_common_args(plans_parser)
    plans_parser.add_argument('--name', help='Only plans with this name.')
    plans_parser.add_argument('--state', help='Only plans in this state.')
    plans_parser.add_argument('--group', help='Only plans containing this protection group.')

    # PROTECTED-VMS COMMAND
    protected_parser = subparsers.add_parser('protected-vms', help='List protected VMs')
    _add_common_args(protected_parser)
    protected_parser.add_argument('--group', help='Only VMs in this protection group.')
    protected_parser.add_argument('--plan', help='Only VMs in this recovery plan.')
    protected_parser.add_argument('--state', help='Only VMs in this protection state.')
    protected_parser.add_argument('--peer-state', help='Only VMs whose peer is in this state.')
    protected_parser.add_argument(
        '--needs-configuration',
        action='store_true',
        default=None,
        help='Only VMs that need configuration.'
    )

    # UNPROTECTED-VMS COMMAND
    unprotected_parser = subparsers.add_parser(
        'unprotected-vms',
        help='List VMs associated with a protection group but not protected'
    )
    _add_common_args(unprotected_parser)
    unprotected_parser.add_argument('--group', help='Only this protection group.')

    # DATASTORES COMMAND
    datastores_parser = subparsers.add_parser(
        'datastores',
        help='List datastores protected by san protection groups'
    )
    _add_common_args(datastores_parser)
    datastores_parser.add_argument('--group', help='Only this protection group.')

    # RESULTS COMMAND
    results_parser = subparsers.add_parser('results', help='List past runs of a recovery plan')
    _add_common_args(results_parser)
    results_parser.add_argument('plan', metavar='PLAN', help='Name of the recovery plan.')
    results_parser.add_argument('--run-mode', help='Only runs in this mode.')
    results_parser.add_argument('--result-state', help='Only runs that ended in this state.')
    results_parser.add_argument(
        '--after',
        type=_iso_datetime,
        metavar='TIMESTAMP',
        help='Only runs started after this ISO 8601 timestamp.'
    )
    results_parser.add_argument(
        '--before',
        type=_iso_datetime,
        metavar='TIMESTAMP',
        help='Only runs started before this ISO 8601 timestamp.'
    )

    # EXPORT-RESULT COMMAND
    export_parser = subparsers.add_parser(
        'export-result',
        help='Export the XML report of one recovery run'
    )
    _add_common_args(export_parser)
    export_parser.add_argument('plan', metavar='PLAN', help='Name of the recovery plan.')
    export_parser.add_argument('key', metavar='RESULT_KEY', help='Key of the recovery result.')
    export_parser.add_argument(
        '--output',
        metavar='FILE',
        help='Write the report to this file instead of stdout.'
    )

    # PROTECT / UNPROTECT COMMANDS
    for command, help_text in (('protect', 'Protect VMs in a protection group'),
                               ('unprotect', 'Unprotect VMs in a protection group')):
        vm_parser = subparsers.add_parser(command, help=help_text)
        _add_common_args(vm_parser)
        vm_parser.add_argument('group', metavar='GROUP', help='Name of the protection group.')
        vm_parser.add_argument('vms', metavar='VM', nargs='+', help='Names of the VMs.')

    # START COMMAND
    start_parser = subparsers.add_parser(
        'start',
        help='Start a recovery plan',
        description='Start a recovery plan. Asks for confirmation unless --quiet is given.'
    )
    _add_common_args(start_parser)
    start_parser.add_argument('plan', metavar='PLAN', help='Name of the recovery plan.')
    start_parser.add_argument(
        '--mode',
        choices=[m.value for m in RecoveryMode],
        default=RecoveryMode.TEST.value,
        help='Recovery mode. Default: test'
    )
    start_parser.add_argument(
        '--sync-data',
        action='store_true',
        help='Replicate recent changes before recovery.'
    )

    # STOP COMMAND
    stop_parser = subparsers.add_parser(
        'stop',
        help='Stop (cancel) a running recovery plan',
        description='Cancel a running recovery plan. Asks for confirmation unless --quiet is given.'
    )
    _add_common_args(stop_parser)
    stop_parser.add_argument('plan', metavar='PLAN', help='Name of the recovery plan.')

    return parser


def _add_common_args(parser: argparse.ArgumentParser):
    """Add arguments common to all commands."""

    connection = parser.add_argument_group('CONNECTION FLAGS')
    connection.add_argument(
        '--server',
        metavar='ADDRESS',
        required=True,
        help='Address of the SRM server.'
    )
    connection.add_argument(
        '--user',
        metavar='USER',
        required=True,
        help='SRM (vCenter SSO) user name.'
    )
    connection.add_argument(
        '--password',
        metavar='PASSWORD',
        help='Password. Prompted for if not provided.'
    )
    connection.add_argument(
        '--connector',
        metavar='MODULE:CALLABLE',
        help='Callable that returns an SRM service instance for an address.'
    )
    connection.add_argument(
        '--vcenter',
        metavar='ADDRESS',
        help='Address of the paired vCenter, used to look up VMs by name.'
    )

    optional = parser.add_argument_group('OPTIONAL FLAGS')
    optional.add_argument(
        '--config',
        metavar='FILE',
        help='YAML configuration file.'
    )
    optional.add_argument(
        '--timeout',
        type=float,
        metavar='SECONDS',
        help='Give up waiting for an SRM task after this many seconds.'
    )

    output = parser.add_argument_group('OUTPUT FLAGS')
    output.add_argument(
        '--format',
        metavar='FORMAT',
        choices=OUTPUT_FORMATS,
        help='Output format. One of: json, yaml, table, csv. Default: table'
    )
    output.add_argument(
        '--verbosity',
        metavar='VERBOSITY',
        choices=['debug', 'info', 'warning', 'error', 'critical'],
        default='info',
        help='Logging verbosity. One of: debug, info, warning, error, critical. Default: info'
    )
    output.add_argument(
        '--log-file',
        metavar='LOG_FILE',
        help='Write logs to this file.'
    )

    interactive = parser.add_argument_group('INTERACTIVE FLAGS')
    interactive.add_argument(
        '--quiet',
        action='store_true',
        help='Disable interactive prompts. Useful for automation.'
    )


def args_to_config(args: argparse.Namespace) -> SrmConfig:
    """Merge the --config file (if any) with command line flags."""
    config = load_config(args.config) if args.config else SrmConfig()

    config.log_level = args.verbosity.upper()
    if args.log_file:
        config.log_file = args.log_file
    if args.format:
        config.output_format = args.format
    if args.timeout:
        config.task_timeout = args.timeout
    if args.connector:
        config.connector = args.connector
    if args.quiet:
        config.confirm = False
        config.show_progress = False

    validate_config(config)
    return config


def load_connector(spec: str):
    """
    Load a connector callable from a 'package.module:callable' string.

    Raises:
        ConnectorError: If the module or callable cannot be loaded
    """
    module_name, _, attribute = spec.partition(':')
    if not module_name or not attribute:
        raise ConnectorError(
            f"Invalid connector: {spec}",
            fix="Use the form 'package.module:callable'"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConnectorError(f"Cannot import connector module {module_name}: {e}") from e

    connector = getattr(module, attribute, None)
    if not callable(connector):
        raise ConnectorError(f"Connector {spec} is not a callable")
    return connector


def open_session(args: argparse.Namespace, config: SrmConfig, registry: SessionRegistry):
    """Log in to the SRM server (and the paired vCenter if requested)."""
    if not config.connector:
        raise ConnectorError(
            "No SRM connector configured",
            fix="Pass --connector=package.module:callable or set 'connector' in the --config file"
        )

    service = load_connector(config.connector)(args.server)
    password = args.password
    if password is None:
        password = text_prompt(f"Password for {args.user}@{args.server}: ", mask=True)

    vcenter = None
    if args.vcenter:
        vcenter = connect_vcenter(args.vcenter, args.user, password)

    try:
        return registry.connect(args.server, service, args.user, password, vcenter=vcenter)
    except SrmError:
        disconnect_vcenter(vcenter)
        raise


def close_session(session, registry: SessionRegistry):
    try:
        registry.disconnect(session)
    finally:
        disconnect_vcenter(session.vcenter)


def _name_of(entity) -> str:
    return entity.GetInfo().name


def _entity_name(entity):
    try:
        return entity.name
    except Exception:
        return None


def _lookup_vms(session, names: List[str], candidates) -> list:
    """
    Find VMs by name, in the paired vCenter if connected, otherwise
    among the given candidate VMs.
    """
    if session.vcenter is not None:
        return [find_vm_by_name(session.vcenter, name) for name in names]

    by_name = {}
    for vm in candidates:
        by_name.setdefault(_entity_name(vm), vm)

    missing = [name for name in names if name not in by_name]
    if missing:
        raise ValidationError(
            "VM Lookup",
            f"VM(s) not found: {', '.join(missing)}",
            fix="Check the VM names, or pass --vcenter to search the whole inventory"
        )
    return [by_name[name] for name in names]


def _print_rows(rows: List[Dict[str, Any]], config: SrmConfig):
    print(OutputFormatter.format_output(rows, config.output_format))


def handle_version(args, session, config) -> int:
    _print_rows([{'server': session.address, 'version': session.version}], config)
    return 0


def handle_groups(args, session, config) -> int:
    plans = find_recovery_plan(args.plan, server=session) if args.plan else None
    groups = get_protection_groups(recovery_plans=plans, name=args.name, type=args.type,
                                   server=session)
    rows = []
    for pg in groups:
        info = pg.GetInfo()
        rows.append({'name': info.name, 'type': plain_value(info.type), 'moRef': moref_of(pg)})
    _print_rows(rows, config)
    return 0


def handle_plans(args, session, config) -> int:
    groups = find_protection_group(args.group, server=session) if args.group else None
    plans = get_recovery_plans(protection_groups=groups, name=args.name, state=args.state,
                               server=session)
    rows = []
    for plan in plans:
        info = plan.GetInfo()
        rows.append({'name': info.name, 'state': plain_value(info.state), 'moRef': moref_of(plan)})
    _print_rows(rows, config)
    return 0


def handle_protected_vms(args, session, config) -> int:
    plans = find_recovery_plan(args.plan, server=session) if args.plan else None
    records = get_protected_vms(
        recovery_plans=plans,
        protection_group_name=args.group,
        state=args.state,
        peer_state=args.peer_state,
        needs_configuration=args.needs_configuration,
        server=session
    )
    rows = []
    for record in records:
        row = record.to_dict()
        row['protectionGroup'] = _name_of(record.protection_group)
        rows.append(row)
    _print_rows(rows, config)
    return 0


def handle_unprotected_vms(args, session, config) -> int:
    groups = find_protection_group(args.group, server=session) if args.group else None
    vms = get_unprotected_vms(protection_groups=groups, server=session)
    _print_rows([{'vmName': _entity_name(vm), 'moRef': moref_of(vm)} for vm in vms], config)
    return 0


def handle_datastores(args, session, config) -> int:
    groups = find_protection_group(args.group, server=session) if args.group else None
    datastores = get_protected_datastores(protection_groups=groups, server=session)
    _print_rows([{'name': _entity_name(ds), 'moRef': moref_of(ds)} for ds in datastores], config)
    return 0


def handle_results(args, session, config) -> int:
    plan = find_recovery_plan(args.plan, server=session)
    results = get_recovery_results(
        plan,
        run_mode=args.run_mode,
        result_state=args.result_state,
        started_after=args.after,
        started_before=args.before,
        server=session
    )
    _print_rows([result_to_dict(r) for r in results], config)
    return 0


def handle_export_result(args, session, config) -> int:
    plan = find_recovery_plan(args.plan, server=session)
    matching = [r for r in get_recovery_results(plan, server=session)
                if str(r.key) == args.key]
    if not matching:
        raise ValidationError(
            "Recovery Result",
            f"No result with key '{args.key}' for plan '{args.plan}'",
            fix=f"List results with: srm-cmdlets results {args.plan}"
        )

    root = export_recovery_result(matching[0], path=args.output, server=session)
    if not args.output:
        print(ET.tostring(root, encoding='unicode'))
    return 0


def handle_protect(args, session, config) -> int:
    group = find_protection_group(args.group, server=session)
    candidates = [] if session.vcenter is not None else get_associated_vms(group)
    vms = _lookup_vms(session, args.vms, candidates)
    success = protect_vms(group, vms, config=config, debug=args.verbosity == 'debug')
    return 0 if success else 1


def handle_unprotect(args, session, config) -> int:
    group = find_protection_group(args.group, server=session)
    candidates = []
    if session.vcenter is None:
        candidates = [r.vm for r in get_protected_vms(protection_groups=group)]
    vms = _lookup_vms(session, args.vms, candidates)
    success = unprotect_vms(group, vms, config=config, debug=args.verbosity == 'debug')
    return 0 if success else 1


def handle_start(args, session, config) -> int:
    plan = find_recovery_plan(args.plan, server=session)
    success = start_plan(plan, mode=args.mode, sync_data=args.sync_data, config=config,
                         debug=args.verbosity == 'debug')
    return 0 if success else 1


def handle_stop(args, session, config) -> int:
    plan = find_recovery_plan(args.plan, server=session)
    success = stop_plan(plan, config=config, debug=args.verbosity == 'debug')
    return 0 if success else 1


HANDLERS = {
    'version': handle_version,
    'groups': handle_groups,
    'plans': handle_plans,
    'protected-vms': handle_protected_vms,
    'unprotected-vms': handle_unprotected_vms,
    'datastores': handle_datastores,
    'results': handle_results,
    'export-result': handle_export_result,
    'protect': handle_protect,
    'unprotect': handle_unprotect,
    'start': handle_start,
    'stop': handle_stop,
}


def main(argv=None) -> int:
    """Main CLI entry point."""

    args = None
    try:
        parser = create_parser()
        args = parser.parse_args(argv)

        config = args_to_config(args)
        setup_logging(level=config.log_level, log_file=config.log_file,
                      debug=args.verbosity == 'debug')

        registry = SessionRegistry()
        session = open_session(args, config, registry)
        try:
            return HANDLERS[args.command](args, session, config)
        finally:
            close_session(session, registry)

    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.", file=sys.stderr)
        return 130  # Standard exit code for SIGINT
    except SrmError as e:
        print(f"ERROR: (srm-cmdlets) {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"ERROR: (srm-cmdlets) Unexpected error: {str(e)}", file=sys.stderr)
        if args is not None and args.verbosity == 'debug':
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
