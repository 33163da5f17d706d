import logging

from fakes import BrokenVm, FakeDatastore, FakeGroup, FakePlan, FakeVm, protected_vm
from srm_cmdlets.inventory import (
    find_protection_group,
    get_associated_vms,
    get_protected_datastores,
    get_protected_vms,
    get_protection_groups,
    get_recovery_plans,
    get_unprotected_vms,
)


def _morefs(items):
    return [item._moId for item in items]


class TestProtectionGroups:

    def test_all_groups_of_default_session(self, site, registry):
        assert _morefs(get_protection_groups(registry=registry)) == ['pg-1', 'pg-2']

    def test_filter_by_type_and_name(self, site, registry):
        assert _morefs(get_protection_groups(type='san', registry=registry)) == ['pg-2']
        assert _morefs(get_protection_groups(name='web-pg', registry=registry)) == ['pg-1']

    def test_groups_of_plans_are_deduplicated(self, site):
        other_plan = FakePlan('plan-2', 'Web-RP-2', groups=[site['web_pg']])
        groups = get_protection_groups(recovery_plans=[site['plan'], other_plan])
        assert _morefs(groups) == ['pg-1', 'pg-2']

    def test_find_by_name(self, site, registry):
        assert find_protection_group('DB-PG', registry=registry) is site['db_pg']


class TestRecoveryPlans:

    def test_all_plans(self, site, registry):
        assert get_recovery_plans(registry=registry) == [site['plan']]

    def test_plans_of_groups(self, site):
        plans = get_recovery_plans(protection_groups=[site['web_pg'], site['db_pg']])
        assert plans == [site['plan']]

    def test_filter_by_state(self, site, registry):
        assert get_recovery_plans(state='ready', registry=registry) == [site['plan']]
        assert get_recovery_plans(state='Running', registry=registry) == []


class TestProtectedVms:

    def test_records_across_groups(self, site, registry, vms):
        records = get_protected_vms(registry=registry)

        assert [r.vm_name for r in records] == ['web-02', 'web-03']
        assert records[0].protection_group is site['web_pg']
        assert records[1].to_dict() == {
            'vmName': 'web-03',
            'moRef': 'vm-3',
            'state': 'Ok',
            'peerState': 'Ok',
            'needsConfiguration': True,
        }

    def test_filters(self, site, registry, vms):
        assert [r.vm for r in get_protected_vms(needs_configuration=True,
                                                registry=registry)] == [vms[2]]
        assert [r.vm for r in get_protected_vms(protection_group_name='Web-PG',
                                                registry=registry)] == [vms[1]]
        assert [r.vm for r in get_protected_vms(vm=vms[2], registry=registry)] == [vms[2]]

    def test_scoped_to_plan(self, site, vms):
        records = get_protected_vms(recovery_plans=site['plan'])
        assert [r.vm for r in records] == [vms[1], vms[2]]

    def test_stale_view_is_kept_with_warning(self, caplog):
        broken = BrokenVm('vm-9')
        group = FakeGroup('pg-9', 'Legacy-PG', protected=[protected_vm(broken)])

        with caplog.at_level(logging.WARNING, logger='srm_cmdlets'):
            records = get_protected_vms(protection_groups=group)

        assert len(records) == 1
        assert records[0].vm_name is None
        assert 'vm-9' in caplog.text

    def test_record_without_vm_reference_is_kept(self, caplog):
        orphan = protected_vm(None)
        group = FakeGroup('pg-9', 'Legacy-PG',
                          protected=[orphan, protected_vm(FakeVm('vm-1', 'web-01'))])

        with caplog.at_level(logging.WARNING, logger='srm_cmdlets'):
            records = get_protected_vms(protection_groups=group)

        assert [r.vm_name for r in records] == [None, 'web-01']
        assert 'Dropping item' not in caplog.text

    def test_vm_protected_in_two_groups_is_listed_per_group(self, vms):
        first = FakeGroup('pg-1', 'Web-PG', protected=[protected_vm(vms[0])])
        second = FakeGroup('pg-2', 'Web-PG-2', protected=[protected_vm(vms[0])])

        records = get_protected_vms(protection_groups=[first, second])

        assert [r.protection_group for r in records] == [first, second]
        assert [r.vm for r in records] == [vms[0], vms[0]]


class TestUnprotectedVms:

    def test_vr_group_difference(self, site, vms):
        unprotected = get_unprotected_vms(protection_groups=site['web_pg'])
        assert unprotected == [vms[0], vms[2]]

    def test_san_group_uses_datastore_vms(self, site, vms):
        extra = FakeVm('vm-4', 'db-02')
        site['datastore'].vm.append(extra)
        assert get_unprotected_vms(protection_groups=site['db_pg']) == [extra]

    def test_all_groups(self, site, registry, vms):
        assert get_unprotected_vms(registry=registry) == [vms[0], vms[2]]

    def test_associated_vms_of_san_group_are_deduplicated(self):
        shared = FakeVm('vm-1')
        group = FakeGroup('pg-3', 'San-PG', type='san', datastores=[
            FakeDatastore('ds-1', vms=[shared]),
            FakeDatastore('ds-2', vms=[shared, FakeVm('vm-2')]),
        ])
        assert _morefs(get_associated_vms(group)) == ['vm-1', 'vm-2']

    def test_vm_unprotected_in_two_groups_is_listed_per_group(self, vms):
        first = FakeGroup('pg-1', 'Web-PG', associated=[vms[0]])
        second = FakeGroup('pg-2', 'Web-PG-2', associated=[vms[0], vms[1]],
                           protected=[protected_vm(vms[1])])

        assert get_unprotected_vms(protection_groups=[first, second]) == [vms[0], vms[0]]


class TestProtectedDatastores:

    def test_only_san_groups_contribute(self, site, registry):
        assert get_protected_datastores(registry=registry) == [site['datastore']]

    def test_shared_datastores_are_deduplicated(self, site):
        twin = FakeGroup('pg-4', 'DB-PG-2', type='san', datastores=[site['datastore']])
        datastores = get_protected_datastores(protection_groups=[site['db_pg'], twin])
        assert datastores == [site['datastore']]
