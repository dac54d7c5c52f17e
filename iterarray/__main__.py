#!/usr/bin/env python
#
#    This file is part of ITERARRAY, iterative arrays of communicating
#    processes in Python.
#
#    ITERARRAY is free software: you can redistribute it and/or modify
#    it under the terms of the GNU Lesser General Public License as
#    published by the Free Software Foundation, either version 3 of
#    the License, or (at your option) any later version.
#
#    ITERARRAY is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#    GNU Lesser General Public License for more details.
#
#    You should have received a copy of the GNU Lesser General Public
#    License along with ITERARRAY. If not, see <http://www.gnu.org/licenses/>.
#
# Global imports
import argparse
import sys
import traceback

# Local imports
import iterarray
from iterarray import utils, chain, _control, _debug


def makeParser():
    """Create the ITERARRAY module arguments parser."""
    parser = argparse.ArgumentParser(description="Computes a factorial through "
                                                 "an iterative array of "
                                                 "communicating processes.",
                                     prog="{0} -m iterarray".format(sys.executable))
    parser.add_argument('n',
                        nargs='?',
                        help="The number of which to compute the factorial "
                             "(prompted for if omitted)",
                        metavar="Number")
    parser.add_argument('--depth', '-d',
                        type=int,
                        help="Number of worker tasks in the chain, which is "
                             "also the largest number accepted (default is "
                             "$ITERARRAY_DEPTH or {0})".format(iterarray.MAX_DEPTH),
                        metavar="Depth")
    parser.add_argument('--width', '-w',
                        type=int,
                        help="Width in bits of the integers passed between "
                             "tasks; products overflow as machine integers "
                             "would (default is exact integers)",
                        metavar="Bits")
    parser.add_argument('--verbose', '-v',
                        action='count',
                        help="Verbosity level (-vv for every message "
                             "exchanged)",
                        default=0)
    parser.add_argument('--quiet', '-q',
                        action='store_true')
    parser.add_argument('--log',
                        help="The file to log the output. (default is stderr)",
                        default=None,
                        metavar="FileName")
    parser.add_argument('--debug',
                        help=argparse.SUPPRESS,
                        action='store_true')
    return parser


def readRequest(stream, prompt="Calculate factorial of: "):
    """Prompt the operator and return the line typed."""
    sys.stdout.write(prompt)
    sys.stdout.flush()
    line = stream.readline()
    if not line:
        raise EOFError("No number given")
    return line


def main(argv=None):
    """Execution of the ITERARRAY module. Parses its command-line arguments,
    computes the factorial and returns the exit status."""
    parser = makeParser()
    args = parser.parse_args(argv)

    logger = utils.initLogging(-1 if args.quiet else args.verbose,
                               filename=args.log)
    iterarray.DEBUG = args.debug

    try:
        depth = args.depth if args.depth is not None else utils.getDefaultDepth()
        if depth < 1:
            raise ValueError("The depth must be at least 1, got {0}".format(depth))
        if args.width is not None and args.width < 2:
            raise ValueError("The width must be at least 2 bits, got {0}"
                             .format(args.width))
        iterarray.CONFIGURATION.update({
            'depth': depth,
            'width': args.width,
            'verbose': args.verbose,
            'log': args.log,
        })
        text = args.n if args.n is not None else readRequest(sys.stdin)
        n = utils.checkRequest(utils.parseRequest(text), depth)
    except (ValueError, EOFError) as err:
        logger.error(str(err))
        return 1

    try:
        with chain.ChannelArray() as array:
            result = array.compute(n)
    except Exception:
        logger.error('Error while computing the factorial:')
        logger.error(traceback.format_exc())
        return 1

    print("Fin: {0}! = {1}".format(n, result))

    if iterarray.DEBUG:
        _control.init_debug()
        paths = _debug.writeChainDebug(_control.debug_stats, _control.traceLog)
        logger.info("Debug information written to {0}".format(", ".join(paths)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
