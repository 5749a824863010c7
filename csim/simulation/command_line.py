"""Command-line front end.

    csim [-hv] -s <num> -E <num> -b <num> -t <file>

Parses the geometry and trace path into a SimulationConfig, runs one
Simulation and prints the summary. Exit status is 0 on success and 1 for
configuration problems, an unreadable trace or results that cannot be written.
"""
import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

from ..core.cache import CacheGeometry, ConfigurationError
from ..core.trace import UnreadableTraceError
from ..data.stats_export import RESULTS_FILE
from .simulation import Simulation

logger = logging.getLogger(__name__)

EXAMPLES = """\
Examples:
  linux>  %(prog)s -s 4 -E 1 -b 4 -t traces/yi.trace
  linux>  %(prog)s -v -s 8 -E 2 -b 4 -t traces/yi.trace
"""


@dataclass
class SimulationConfig:
    geometry: CacheGeometry
    trace_path: str
    verbose: bool = False
    csv_path: Optional[str] = None
    json_path: Optional[str] = None
    chart_path: Optional[str] = None
    results_path: Optional[str] = RESULTS_FILE


class _Parser(argparse.ArgumentParser):
    # report problems to the caller instead of exiting with status 2
    def error(self, message):
        raise ConfigurationError(message)


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = _Parser(
        prog=prog,
        usage='%(prog)s [-hv] -s <num> -E <num> -b <num> -t <file>',
        description='Replay a valgrind memory trace against a set-associative LRU cache.',
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument('-h', action='store_true', dest='help', help='Print this help message.')
    parser.add_argument('-v', action='store_true', dest='verbose', help='Optional verbose flag.')
    parser.add_argument('-s', type=int, metavar='<num>', dest='index_bits', help='Number of set index bits.')
    parser.add_argument('-E', type=int, metavar='<num>', dest='associativity', help='Number of lines per set.')
    parser.add_argument('-b', type=int, metavar='<num>', dest='block_bits', help='Number of block offset bits.')
    parser.add_argument('-t', metavar='<file>', dest='trace_path', help='Trace file.')
    parser.add_argument('--csv', metavar='PATH', dest='csv_path', help='Also write the statistics as CSV.')
    parser.add_argument('--json', metavar='PATH', dest='json_path', help='Also write statistics and hit-rate history as JSON.')
    parser.add_argument('--chart', metavar='PATH', dest='chart_path', help='Plot the cumulative hit rate (pdf/png/svg).')
    parser.add_argument('--no-results-file', action='store_true',
                        help=f'Do not write the {RESULTS_FILE} file.')
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Validate parsed arguments. Zero counts as unset, like a missing flag."""
    required = (args.index_bits, args.associativity, args.block_bits)
    if any(v is None or v <= 0 for v in required) or not args.trace_path:
        raise ConfigurationError('Missing required command line argument')
    geometry = CacheGeometry(args.index_bits, args.associativity, args.block_bits)
    return SimulationConfig(
        geometry=geometry,
        trace_path=args.trace_path,
        verbose=args.verbose,
        csv_path=args.csv_path,
        json_path=args.json_path,
        chart_path=args.chart_path,
        results_path=None if args.no_results_file else RESULTS_FILE,
    )


def _wants_help(argv: List[str]) -> bool:
    # -h, alone or bundled with -v, wins over whatever else is on the line
    for arg in argv:
        if arg == '--':
            break
        if arg.startswith('-') and not arg.startswith('--') and len(arg) > 1:
            flags = arg[1:]
            if 'h' in flags and set(flags) <= {'h', 'v'}:
                return True
    return False


def parse_config(argv: List[str], prog: Optional[str] = None) -> Optional[SimulationConfig]:
    """Return the config, or None when help was requested."""
    if _wants_help(argv):
        return None
    parser = build_parser(prog)
    args = parser.parse_args(argv)
    if args.help:
        return None
    return config_from_args(args)


def main(argv: Optional[List[str]] = None, prog: Optional[str] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser(prog)
    try:
        config = parse_config(argv, prog=prog)
    except ConfigurationError as e:
        print(f"{parser.prog}: {e}")
        parser.print_help()
        return 1
    if config is None:
        parser.print_help()
        return 0

    logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')
    # only our own loggers get chattier with -v
    logging.getLogger('csim').setLevel(logging.DEBUG if config.verbose else logging.NOTSET)
    try:
        Simulation(config).run()
    except UnreadableTraceError:
        # already reported by the simulation
        return 1
    except OSError as e:
        logger.error('cannot write results: %s', e)
        return 1
    return 0
