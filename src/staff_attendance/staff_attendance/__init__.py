"""Staff Attendance package.

Feature modules (attendance, points, notifications, staff, shifts) follow the
same shape: frozen dataclass models, Protocol repositories, MySQL and in-memory
implementations, and services that hold the business rules. Flask controllers
stay thin.
"""
