"""
Get Security Logs Use Case

Read access to the in-memory security journal for administrators.
"""

from typing import List, Optional

from account_service.app.services.security_log import SecurityLog, SecurityLogEntry
from account_service.domain.entities import Role, SecurityLevel
from account_service.libs.result import Error, Result, Return


class GetSecurityLogsUseCase:
    """
    Business Rules:
    - Caller must have role=ADMIN
    - Newest entries first, optionally filtered by level
    """

    def __init__(self, security_log: SecurityLog):
        self.security_log = security_log

    async def execute(
        self, role: Role, limit: int = 100, level: Optional[SecurityLevel] = None
    ) -> Result[List[SecurityLogEntry]]:
        if Role(role) != Role.ADMIN:
            return Return.err(
                Error("FORBIDDEN", "You do not have permission to view security logs.")
            )
        return Return.ok(self.security_log.query(limit=limit, level=level))
