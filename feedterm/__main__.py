"""Main module for feedterm.

This module allows the command line to be run as a Python module using:
python -m feedterm
"""

from feedterm.cli.app import main

if __name__ == "__main__":
    main()
