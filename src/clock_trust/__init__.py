"""Clock-event trust pipeline.

This package is organized by feature modules (devices, schedules, duplicates,
integrity, ...) composed by a pipeline service, with a thin Flask controller
layer on top and repository Protocols for storage.
"""

__version__ = "1.0.0"
