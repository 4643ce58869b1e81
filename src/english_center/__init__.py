"""English Center administration API.

This package is organized by feature modules (students, classes, enrollments,
attendance, ...) with a thin Flask controller layer on top of service and
repository layers.
"""
