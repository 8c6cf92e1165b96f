"""Timekeeping System package.

Organized by feature modules (time records, schedules, worked hours, time
bank, absence requests, payroll, audit) with a thin Flask JSON controller
layer over service/repository layers.
"""
