"""Attendance Tracker package.

Teachers mark and review classroom attendance through a thin Flask JSON layer
over service/repository modules (teachers, classes, attendance, stats).
"""
