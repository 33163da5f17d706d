from unittest.mock import Mock

import pytest

from fakes import FakePlan
from srm_cmdlets.core.config import SrmConfig
from srm_cmdlets.core.exceptions import (
    OperationFailedError,
    RecoveryPlanStateError,
    ValidationError,
)
from srm_cmdlets.core.types import RecoveryMode
from srm_cmdlets.operations import start_recovery_plan, stop_recovery_plan
from srm_cmdlets.validators import RecoveryPlanStateValidator


def test_start_in_test_mode(fast_config):
    plan = FakePlan('plan-1', 'Web-RP')

    result = start_recovery_plan(plan, mode='TEST', config=fast_config)

    assert result.success
    method, mode, options = plan.calls[0]
    assert (method, mode) == ('Start', 'test')
    assert options.sync_data is False


def test_start_with_sync_data(fast_config):
    plan = FakePlan('plan-1', 'Web-RP')
    start_recovery_plan(plan, mode=RecoveryMode.FAILOVER, sync_data=True, config=fast_config)
    assert plan.calls[0][1] == 'failover'
    assert plan.calls[0][2].sync_data is True


@pytest.mark.parametrize('state', ['Protecting', 'protecting', 'PROTECTING'])
def test_protecting_plan_is_refused(state, fast_config):
    plan = FakePlan('plan-1', 'Web-RP', state=state)

    with pytest.raises(RecoveryPlanStateError) as exc_info:
        start_recovery_plan(plan, config=fast_config)

    assert plan.calls == []
    assert exc_info.value.plan_name == 'Web-RP'
    assert 'peer' in exc_info.value.fix


def test_unknown_mode_is_refused(fast_config):
    plan = FakePlan('plan-1', 'Web-RP')
    with pytest.raises(ValidationError):
        start_recovery_plan(plan, mode='dance', config=fast_config)
    assert plan.calls == []


def test_declined_confirmation_makes_no_call():
    plan = FakePlan('plan-1', 'Web-RP')
    prompt = Mock(return_value='n')

    result = start_recovery_plan(plan, config=SrmConfig(), prompt=prompt)

    assert not result.success
    assert plan.calls == []
    assert 'Web-RP' in prompt.call_args.args[0]


def test_accepted_confirmation_starts():
    plan = FakePlan('plan-1', 'Web-RP')
    result = start_recovery_plan(plan, config=SrmConfig(), prompt=Mock(return_value=' Yes '))
    assert result.success
    assert plan.calls[0][0] == 'Start'


def test_stop(fast_config):
    plan = FakePlan('plan-1', 'Web-RP', state='Running')
    result = stop_recovery_plan(plan, config=fast_config)
    assert result.success
    assert plan.calls == [('Cancel',)]


def test_stop_declined():
    plan = FakePlan('plan-1', 'Web-RP', state='Running')
    result = stop_recovery_plan(plan, config=SrmConfig(), prompt=Mock(return_value=''))
    assert not result.success
    assert plan.calls == []


def test_start_failure_is_wrapped(fast_config):
    plan = FakePlan('plan-1', 'Web-RP')
    plan.Start = Mock(side_effect=RuntimeError("plan is running"))

    with pytest.raises(OperationFailedError) as exc_info:
        start_recovery_plan(plan, config=fast_config)
    assert 'plan is running' in str(exc_info.value)


def test_state_validator_details():
    result = RecoveryPlanStateValidator(FakePlan('plan-1', 'Web-RP', state='Ready')).validate()
    assert result.passed
    assert result.details['current_state'] == 'Ready'
