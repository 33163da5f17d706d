"""
SRM Cmdlets - Recovery History

List the results of past recovery plan runs and export the XML report
of one run.
"""

import xml.etree.ElementTree as ET

from srm_cmdlets.core.exceptions import OperationFailedError
from srm_cmdlets.core.session import get_srm_server
from srm_cmdlets.core.types import plain_value
from srm_cmdlets.utils.filters import FieldFilter
from srm_cmdlets.utils.logger import get_logger, log_api_call


def _history(recovery_plan, server, registry):
    session = get_srm_server(server, registry)
    log_api_call(get_logger(), 'Recovery.GetHistory')
    return session.recovery.GetHistory(recovery_plan)


def get_recovery_results(recovery_plan, run_mode=None, result_state=None,
                         started_after=None, started_before=None,
                         server=None, registry=None) -> list:
    """
    List the results of past runs of a recovery plan.

    Runs without a start time are left out when either time bound is set.

    Args:
        recovery_plan: Recovery plan handle
        run_mode: Only runs in this mode (e.g. 'test', 'failover')
        result_state: Only runs that ended in this state
        started_after: Only runs started strictly after this datetime
        started_before: Only runs started strictly before this datetime
        server: Session or address (default: first active session)
        registry: Session registry (default: process-wide registry)

    Returns:
        List of recovery result objects
    """
    logger = get_logger()
    history = _history(recovery_plan, server, registry)

    log_api_call(logger, 'RecoveryHistory.GetResultCount')
    count = history.GetResultCount()
    if not count:
        return []

    log_api_call(logger, 'RecoveryHistory.GetRecoveryResult', count)
    results = history.GetRecoveryResult(count) or []

    criteria = FieldFilter.build(runMode=run_mode, resultState=result_state)
    selected = []
    for result in results:
        if not criteria.matches(result):
            continue
        started = getattr(result, 'startTime', None)
        if (started_after is not None or started_before is not None) and started is None:
            continue
        if started_after is not None and not started > started_after:
            continue
        if started_before is not None and not started < started_before:
            continue
        selected.append(result)

    logger.debug(f"{len(selected)} of {len(results)} recovery results selected")
    return selected


def export_recovery_result(result, path=None, server=None, registry=None) -> ET.Element:
    """
    Export the XML report of one recovery run.

    Args:
        result: Recovery result from get_recovery_results()
        path: Optional file to write the report to
        server: Session or address (default: first active session)
        registry: Session registry (default: process-wide registry)

    Returns:
        Root element of the parsed report

    Raises:
        OperationFailedError: If the report is not valid XML
    """
    logger = get_logger()
    history = _history(result.plan, server, registry)

    log_api_call(logger, 'RecoveryHistory.GetResultLength', result.key)
    length = history.GetResultLength(result.key)

    log_api_call(logger, 'RecoveryHistory.RetrieveStatus', result.key, 0, length)
    document = history.RetrieveStatus(result.key, 0, length)

    try:
        root = ET.fromstring(document)
    except ET.ParseError as e:
        raise OperationFailedError("Export Recovery Result", f"Invalid XML report: {e}") from e

    if path:
        ET.ElementTree(root).write(path, encoding='utf-8', xml_declaration=True)
        logger.info(f"Recovery report written to {path}")

    return root


def result_to_dict(result) -> dict:
    """Flat representation of a recovery result for output formatting."""
    return {
        'name': getattr(result, 'name', None),
        'key': getattr(result, 'key', None),
        'runMode': plain_value(getattr(result, 'runMode', None)),
        'resultState': plain_value(getattr(result, 'resultState', None)),
        'startTime': plain_value(getattr(result, 'startTime', None)),
        'stopTime': plain_value(getattr(result, 'stopTime', None)),
    }
