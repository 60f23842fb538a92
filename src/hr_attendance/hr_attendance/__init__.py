"""HR attendance & leave package.

Organized by feature modules (attendance, approvals, leaves, reports, ...)
with a thin Flask controller layer over service/repository layers.
"""
