"""
This is an interpreter for the Sloth programming language.

{0}

For example:

    sloth program.sl

will run program.sl and print whatever it returns, or else try to explain why not.

    sloth -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

parser = argparse.ArgumentParser(
	prog="sloth",
	description="Interpreter for the Sloth programming language.",
)
parser.add_argument("program", help="try examples/primes.sl for example.")
parser.add_argument('-c', "--check", action="store_true", help="Parse the program but do not actually run it.")
parser.add_argument('-v', "--verbose", action="count", help="Mention each file as it gets loaded.")
parser.add_argument('-d', "--depth", type=int, default=None, help="How deeply to render nested lists in the result.")

def run(args):
	from .diagnostics import Report, LoadError
	from .modularity import Loader
	from .tree_walker.executive import run_program
	from .tree_walker.render import DEFAULT_DEPTH
	report = Report(verbose=args.verbose)
	path = Path.cwd() / args.program
	if args.check:
		try: Loader(report).parse_file(path)
		except LoadError:
			report.complain_to_console()
			return 1
		print("Looks plausible to me.", file=sys.stderr)
		return
	depth = DEFAULT_DEPTH if args.depth is None else args.depth
	result = run_program(path, report, depth)
	if report.sick():
		report.complain_to_console()
		return 1
	print(result)

def main():
	if len(sys.argv) > 1:
		sys.exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
