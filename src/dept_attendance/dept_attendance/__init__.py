"""Department period attendance.

Organized by feature modules (timetable, attendance, bookmarks, ...) with a thin
Flask controller layer over service/repository layers.
"""
