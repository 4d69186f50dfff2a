"""feedterm - query and command languages of a terminal feed reader."""

__version__ = "0.1.0"
