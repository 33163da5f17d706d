from unittest.mock import patch

import pytest

from fakes import FakeService
from srm_cmdlets.core.exceptions import (
    ConnectorError,
    NoActiveSessionError,
    SessionNotFoundError,
)
from srm_cmdlets.core.session import (
    Session,
    SessionRegistry,
    connect_vcenter,
    get_server_version,
    get_srm_server,
)


@pytest.fixture
def two_sessions():
    registry = SessionRegistry()
    a = registry.register(Session(address='a', service=FakeService()))
    b = registry.register(Session(address='b', service=FakeService(version='8.7.0')))
    return registry, a, b


def test_default_is_first_session(two_sessions):
    registry, a, _ = two_sessions
    assert registry.resolve() is a
    assert registry.default is a


def test_address_matches_case_insensitively(two_sessions):
    registry, _, b = two_sessions
    assert registry.resolve('B') is b


def test_unknown_address_raises(two_sessions):
    registry, _, _ = two_sessions
    with pytest.raises(SessionNotFoundError) as exc_info:
        registry.resolve('c')
    assert exc_info.value.known_addresses == ['a', 'b']


def test_session_object_is_returned_as_is(two_sessions):
    registry, _, _ = two_sessions
    other = Session(address='elsewhere', service=FakeService())
    assert registry.resolve(other) is other


def test_empty_registry_without_server_raises():
    with pytest.raises(NoActiveSessionError):
        SessionRegistry().resolve()


def test_register_replaces_same_address(two_sessions):
    registry, a, b = two_sessions
    replacement = registry.register(Session(address='A', service=FakeService()))
    assert registry.sessions() == [replacement, b]


def test_connect_logs_in_and_registers():
    registry = SessionRegistry()
    service = FakeService()

    session = registry.connect('srm-a', service, 'admin', 'secret')

    assert service.calls == [('SrmLoginLocale', 'admin')]
    assert registry.resolve() is session


def test_rejected_login_raises_connector_error():
    registry = SessionRegistry()
    service = FakeService()
    service.reject_login = True

    with pytest.raises(ConnectorError):
        registry.connect('srm-a', service, 'admin', 'wrong')
    assert registry.sessions() == []


def test_disconnect_logs_out_and_removes(two_sessions):
    registry, a, b = two_sessions
    registry.disconnect('a')
    assert ('SrmLogoutLocale',) in a.service.calls
    assert registry.sessions() == [b]


def test_content_is_retrieved_once(two_sessions):
    registry, _, b = two_sessions
    assert get_server_version('b', registry=registry) == '8.7.0'
    assert get_srm_server('b', registry=registry).protection is not None
    assert b.service.calls.count(('RetrieveContent',)) == 1


def test_connect_vcenter_wraps_errors():
    with patch('srm_cmdlets.core.session.SmartConnect', side_effect=OSError("refused")):
        with pytest.raises(ConnectorError) as exc_info:
            connect_vcenter('vc.example.com', 'admin', 'secret')
    assert 'vc.example.com' in str(exc_info.value)


def test_connect_vcenter_skips_certificate_checks_by_default():
    with patch('srm_cmdlets.core.session.SmartConnect') as smart_connect:
        connect_vcenter('vc.example.com', 'admin', 'secret')
    assert 'sslContext' in smart_connect.call_args.kwargs
