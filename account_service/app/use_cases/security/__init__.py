from .get_security_logs_use_case import GetSecurityLogsUseCase

__all__ = ["GetSecurityLogsUseCase"]
