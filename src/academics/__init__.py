"""Academic records service: students, modules, registrations and grades."""

__version__ = "0.1.0"
