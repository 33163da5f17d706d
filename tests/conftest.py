import logging

import pytest

from fakes import FakeDatastore, FakeGroup, FakePlan, FakeService, FakeVm, protected_vm
from srm_cmdlets.core.config import SrmConfig
from srm_cmdlets.core.session import Session, SessionRegistry
from srm_cmdlets.utils.logger import LOGGER_NAME


@pytest.fixture
def fast_config():
    """Config that polls tasks without sleeping and never prompts."""
    return SrmConfig(task_poll_interval=0, confirm=False, show_progress=False)


@pytest.fixture
def vms():
    return [FakeVm(f'vm-{i}', name=f'web-0{i}') for i in range(1, 4)]


@pytest.fixture
def site(vms):
    """
    A small SRM site:
    - Web-PG (vr): web-01..03 associated, web-02 protected
    - DB-PG (san): one datastore holding web-03, web-03 protected
    - Web-RP contains both groups
    """
    web_pg = FakeGroup('pg-1', 'Web-PG', type='vr',
                       associated=vms, protected=[protected_vm(vms[1])])
    datastore = FakeDatastore('ds-1', vms=[vms[2]], name='lun-01')
    db_pg = FakeGroup('pg-2', 'DB-PG', type='san', datastores=[datastore],
                      protected=[protected_vm(vms[2], needs_configuration=True)])
    plan = FakePlan('plan-1', 'Web-RP', groups=[web_pg, db_pg])
    web_pg.plans = [plan]
    db_pg.plans = [plan]

    service = FakeService(groups=[web_pg, db_pg], plans=[plan])
    return {
        'service': service,
        'web_pg': web_pg,
        'db_pg': db_pg,
        'plan': plan,
        'datastore': datastore,
    }


@pytest.fixture
def registry(site):
    registry = SessionRegistry()
    registry.register(Session(address='srm-a.example.com', service=site['service']))
    return registry


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers added by setup_logging so they never outlive a test's streams."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
