"""Tutoring Attendance package.

Organized by feature modules (policies, attendance, reports, finance, ...)
with a thin Flask controller layer over pure service/aggregation layers.
"""
