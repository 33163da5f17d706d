from datetime import datetime
from types import SimpleNamespace

import pytest

from fakes import FakeHistory
from srm_cmdlets.core.exceptions import OperationFailedError
from srm_cmdlets.inventory import export_recovery_result, get_recovery_results, result_to_dict

REPORT = """<?xml version="1.0"?>
<RecoveryPlan name="Web-RP">
  <Step name="Power on VMs" result="success"/>
</RecoveryPlan>"""


def _result(key, plan, start_hour, run_mode='test', state='success'):
    return SimpleNamespace(
        key=key,
        name='Web-RP',
        plan=plan,
        runMode=run_mode,
        resultState=state,
        startTime=datetime(2024, 5, 1, start_hour),
        stopTime=datetime(2024, 5, 1, start_hour, 30),
    )


@pytest.fixture
def history(site):
    plan = site['plan']
    history = FakeHistory(
        results=[
            _result('r-1', plan, 8),
            _result('r-2', plan, 10, run_mode='failover', state='warnings'),
            _result('r-3', plan, 12),
        ],
        documents={'r-1': REPORT, 'r-bad': '<not xml'}
    )
    site['service'].content.recovery.histories[plan._moId] = history
    return history


def test_all_results(site, registry, history):
    results = get_recovery_results(site['plan'], registry=registry)
    assert [r.key for r in results] == ['r-1', 'r-2', 'r-3']


def test_time_bounds_are_strict(site, registry, history):
    results = get_recovery_results(
        site['plan'],
        started_after=datetime(2024, 5, 1, 8),
        started_before=datetime(2024, 5, 1, 12),
        registry=registry
    )
    assert [r.key for r in results] == ['r-2']


def test_results_without_start_time_are_skipped_by_time_bounds(site, registry, history):
    history.results.append(SimpleNamespace(key='r-4', runMode='test',
                                           resultState='running', startTime=None))

    assert 'r-4' in [r.key for r in get_recovery_results(site['plan'], registry=registry)]

    results = get_recovery_results(site['plan'], started_after=datetime(2024, 5, 1, 9),
                                   registry=registry)
    assert [r.key for r in results] == ['r-2', 'r-3']

    results = get_recovery_results(site['plan'], started_before=datetime(2024, 5, 1, 9),
                                   registry=registry)
    assert [r.key for r in results] == ['r-1']


def test_mode_and_state_filters(site, registry, history):
    results = get_recovery_results(site['plan'], run_mode='Failover',
                                   result_state='warnings', registry=registry)
    assert [r.key for r in results] == ['r-2']


def test_empty_history(site, registry, history):
    history.results = []
    assert get_recovery_results(site['plan'], registry=registry) == []


def test_export_parses_and_writes(site, registry, history, tmp_path):
    target = tmp_path / 'report.xml'

    root = export_recovery_result(history.results[0], path=str(target), registry=registry)

    assert root.tag == 'RecoveryPlan'
    assert root.find('Step').get('result') == 'success'
    assert b'Power on VMs' in target.read_bytes()


def test_export_of_invalid_xml_fails(site, registry, history):
    bad = _result('r-bad', site['plan'], 9)
    with pytest.raises(OperationFailedError):
        export_recovery_result(bad, registry=registry)


def test_result_to_dict(site, history):
    row = result_to_dict(history.results[1])
    assert row['runMode'] == 'failover'
    assert row['startTime'] == '2024-05-01 10:00:00'
