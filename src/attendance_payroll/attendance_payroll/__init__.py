"""Attendance & payroll package.

This package is organized by feature modules (attendance, schedules, rules,
payroll, ...) with a thin Flask controller layer and SOLID service/repository
layers.
"""
