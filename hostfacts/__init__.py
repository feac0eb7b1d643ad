"""hostfacts: host fact inventory with an embedded custom-fact runtime."""

__version__ = "0.1.0"
