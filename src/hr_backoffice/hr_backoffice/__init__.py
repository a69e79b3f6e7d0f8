"""HR back-office package.

Organized by feature modules (employees, attendance, payroll, reports, ...)
with a thin Flask controller layer over service/repository layers.
"""
