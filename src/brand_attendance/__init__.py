"""Brand Attendance package.

Organized by feature modules (employees, attendance, allocations, accrual, ...)
with a thin Flask controller layer over service/repository layers.
"""
