from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role, used for capability and user-management gates."""

    EMPLOYEE = "employee"
    CONTRACTOR = "contractor"
    ADMIN = "admin"
    CREATOR = "creator"


class ConnectionMode(str, Enum):
    """Which persistence backend the gateway is currently serving from."""

    REMOTE = "online"
    LOCAL = "local"


class Screen(str, Enum):
    """Capability set reachable by the authenticated identity."""

    LOGIN = "login"
    CHANGE_PASSWORD = "change_password"
    EMPLOYEE_DASHBOARD = "employee_dashboard"
    CONTRACTOR_DASHBOARD = "contractor_dashboard"
    ADMIN_DASHBOARD = "admin_dashboard"
