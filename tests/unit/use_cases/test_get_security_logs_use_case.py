import pytest

from account_service.app.use_cases.security import GetSecurityLogsUseCase
from account_service.domain.entities import Role, SecurityLevel


@pytest.fixture
def populated_log(security_log):
    security_log.record(SecurityLevel.INFO, "login_success", "1.1.1.1")
    security_log.record(SecurityLevel.WARNING, "login_failure", "1.1.1.1")
    security_log.record(SecurityLevel.WARNING, "login_failure", "2.2.2.2")
    return security_log


@pytest.mark.asyncio
async def test_admin_reads_newest_first(populated_log):
    result = await GetSecurityLogsUseCase(populated_log).execute(Role.ADMIN)

    assert [e.ip_address for e in result.value] == ["2.2.2.2", "1.1.1.1", "1.1.1.1"]


@pytest.mark.asyncio
async def test_admin_filters_by_level_and_limit(populated_log):
    result = await GetSecurityLogsUseCase(populated_log).execute(
        Role.ADMIN, limit=1, level=SecurityLevel.WARNING
    )

    assert len(result.value) == 1
    assert result.value[0].ip_address == "2.2.2.2"


@pytest.mark.asyncio
async def test_non_admin_is_forbidden(populated_log):
    result = await GetSecurityLogsUseCase(populated_log).execute(Role.USER)

    assert result.error.code == "FORBIDDEN"
