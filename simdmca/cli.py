#!/usr/bin/env python3
import argparse
import locale
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.logging import RichHandler

from . import __version__
from .core.catalog import build_default_catalog, NATIVE_ID
from .core.driver import ToolchainDriver
from .core.host import detect_host, filter_compatible, is_compatible, sort_for_display
from .core.render import instructions_table, matrix_table, summary_table, targets_table, tools_table
from .core.results import SORTABLE_COLUMNS
from .utils.term import console, err_console, print_block, print_error, print_info, print_stage, print_success, print_warning
from .utils.toolchain.data import ToolchainConfig
from .utils.toolchain.detector import ToolDetector
from .utils.toolchain.enums import Stage
from .utils.toolchain.exceptions import InvalidRequest, ToolchainError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 2
EXIT_CODES = {
    Stage.COMPILE: 3,
    Stage.SIMULATE: 4,
    Stage.WORKSPACE_SETUP: 5,
}


def configure_logging(verbosity: int):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
        force=True,
    )


def use_system_collation():
    """Sort target tables with the user's LC_COLLATE instead of the C default"""
    try:
        locale.setlocale(locale.LC_COLLATE, '')
    except locale.Error as e:
        logger.debug(f"Keeping default collation: {e}")


def read_source(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    return Path(path).read_text(encoding='utf-8')


def write_output(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')


def report_toolchain_error(error: ToolchainError) -> int:
    print_error(str(error))
    if error.exit_info is not None:
        if error.exit_info.argv:
            print_block("Command", ' '.join(error.exit_info.argv))
        if error.exit_info.output:
            print_block("Captured output", error.exit_info.output)
    return EXIT_CODES.get(error.stage, 1)


def cmd_targets(args) -> int:
    catalog = build_default_catalog()
    if args.all:
        targets = list(catalog)
        title = "All CPU targets"
    else:
        host = detect_host(args.machine)
        targets = filter_compatible(host, catalog)
        title = f"CPU targets for host {host.machine or 'unknown'}"
    console.print(targets_table(sort_for_display(targets), title=title))
    return EXIT_OK


def cmd_tools(args) -> int:
    tools = ToolDetector.detect_tools()
    paths = {kind: str(path) for kind, path in tools.items()}
    versions = {kind: ToolDetector.get_tool_version(path) for kind, path in tools.items()}
    console.print(tools_table(paths, versions))
    return EXIT_OK if len(tools) == 2 else 1


def cmd_analyze(args) -> int:
    try:
        source = read_source(args.input)
    except (OSError, UnicodeDecodeError) as e:
        print_error(f"Could not read {args.input}: {e}")
        return EXIT_INVALID

    catalog = build_default_catalog()
    host = detect_host()
    target_ids = args.target or [NATIVE_ID]
    for target_id in target_ids:
        target = catalog.get(target_id)
        if target is not None and not is_compatible(host, target):
            if not args.force:
                print_error(f"Target {target_id} cannot be analyzed from a {host.machine or 'unknown'} host "
                            f"(use --force to try anyway)")
                return EXIT_INVALID
            print_warning(f"Target {target_id} is not compatible with this host; continuing")

    try:
        config = ToolchainConfig.from_env()
    except ValueError as e:
        print_error(str(e))
        return EXIT_INVALID
    print_info(f"Using {config.compiler} and {config.simulator}")
    driver = ToolchainDriver(catalog, config=config, host=host)

    try:
        if len(target_ids) > 1:
            return _analyze_matrix(driver, source, target_ids, args)
        return _analyze_single(driver, source, target_ids[0], args)
    except InvalidRequest as e:
        print_error(str(e))
        return EXIT_INVALID
    except ToolchainError as e:
        return report_toolchain_error(e)


def _analyze_single(driver: ToolchainDriver, source: str, target_id: str, args) -> int:
    label = driver.catalog.lookup(target_id).label if target_id in driver.catalog else target_id
    print_stage(1, 2, f"Analyzing with LLVM-MCA ({label})")
    result = driver.analyze(source, target_id)
    print_stage(2, 2, "Generating report")

    if args.output:
        write_output(Path(args.output), result.to_json())
        print_success(f"Results written to: {args.output}")
    if args.json:
        console.print_json(result.to_json())
        return EXIT_OK

    console.print(summary_table(result))
    if args.sort:
        records = result.sorted_instructions(args.sort, descending=args.desc)
    else:
        records = result.issue_order()
    console.print(instructions_table(records))
    if args.show_asm:
        print_block("Generated Assembly Code", result.assembly_text)
    if args.show_report:
        print_block("Full MCA Report", result.raw_report_text)
    print_success(f"Analysis complete! {result.headline()}")
    return EXIT_OK


def _analyze_matrix(driver: ToolchainDriver, source: str, target_ids: List[str], args) -> int:
    print_stage(1, 2, f"Analyzing {len(target_ids)} targets with LLVM-MCA")
    outcomes = driver.analyze_matrix(source, target_ids, max_workers=args.jobs)
    print_stage(2, 2, "Generating report")

    if args.output or args.json:
        import json
        payload = json.dumps([
            outcome.result.to_dict() if outcome.ok else {
                'target': outcome.target_id,
                'error': str(outcome.error),
                'stage': outcome.error.stage.value,
                'diagnostic': outcome.error.diagnostic,
            }
            for outcome in outcomes
        ], indent=2)
        if args.output:
            write_output(Path(args.output), payload)
            print_success(f"Results written to: {args.output}")
        if args.json:
            console.print_json(payload)
    else:
        labels = {t: driver.catalog.lookup(t).display_name for t in target_ids}
        console.print(matrix_table(outcomes, labels))

    for outcome in outcomes:
        if not outcome.ok:
            return EXIT_CODES.get(outcome.error.stage, 1)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='simdmca', description='Latency/throughput analysis of SIMD snippets with clang + llvm-mca')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='-v for info logging, -vv for debug')
    sub = parser.add_subparsers(dest='command', required=True)

    p_targets = sub.add_parser('targets', help='List CPU targets analyzable from this host')
    p_targets.add_argument('--all', action='store_true', help='List the whole catalog, ignoring host compatibility')
    p_targets.add_argument('--machine', help='Pretend the host reports this machine string (e.g. aarch64)')
    p_targets.set_defaults(func=cmd_targets)

    p_tools = sub.add_parser('tools', help='Show detected clang / llvm-mca executables')
    p_tools.set_defaults(func=cmd_tools)

    p_analyze = sub.add_parser('analyze', help='Compile a snippet and run llvm-mca on it')
    p_analyze.add_argument('input', help="Source file with the snippet, or '-' for stdin")
    p_analyze.add_argument('-t', '--target', action='append', help='Target id (repeatable); defaults to native')
    p_analyze.add_argument('--json', action='store_true', help='Print the result as JSON')
    p_analyze.add_argument('-o', '--output', help='Also write the JSON result to this file')
    p_analyze.add_argument('--sort', choices=SORTABLE_COLUMNS, help='Sort the instruction table by a column')
    p_analyze.add_argument('--desc', action='store_true', help='Sort descending')
    p_analyze.add_argument('--show-asm', action='store_true', help='Print the generated assembly')
    p_analyze.add_argument('--show-report', action='store_true', help='Print the full llvm-mca report')
    p_analyze.add_argument('--force', action='store_true', help='Analyze targets this host cannot normally handle')
    p_analyze.add_argument('-j', '--jobs', type=int, default=4, help='Parallel analyses when several targets are given')
    p_analyze.set_defaults(func=cmd_analyze)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    use_system_collation()
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
