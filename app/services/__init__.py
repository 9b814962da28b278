"""Supporting services package.

Contains the HTTP session factory, temporary file staging helpers and the
still image to animation converter used by the /gif command.
"""
