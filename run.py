"""Entry point for the cache trace simulator.

Usage:
    python run.py -s 4 -E 1 -b 4 -t traces/yi.trace
    python run.py -v -s 8 -E 2 -b 4 -t traces/yi.trace
"""
import sys
from csim.simulation.command_line import main


if __name__ == '__main__':
    sys.exit(main(prog='csim'))
