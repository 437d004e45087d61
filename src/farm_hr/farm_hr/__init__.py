"""Farm HR backend package.

This package is organized by feature modules (users, attendance, workoff,
reports, summaries, milk) with a thin Flask JSON controller layer on top of
service/repository layers.
"""
