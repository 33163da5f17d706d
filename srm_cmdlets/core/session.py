"""
SRM Cmdlets - Session Management

This module keeps track of connected SRM servers and resolves which one
a command should talk to.

Resolution order for the `server` argument of every command:
1. An explicit Session object
2. An address string, matched case-insensitively against the registry
3. The first registered session (the default)

The SRM service instance itself comes from the SRM binding (see the
`connector` option of the CLI); vCenter connections use pyVmomi.
"""

import ssl
import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from pyVim.connect import SmartConnect, Disconnect

from srm_cmdlets.core.exceptions import (
    ConnectorError,
    NoActiveSessionError,
    SessionNotFoundError,
)
from srm_cmdlets.utils.logger import get_logger, log_api_call


@dataclass
class Session:
    """
    A connection to one SRM server.

    Attributes:
        address: Address of the SRM server
        service: SRM service instance from the SRM binding
        vcenter: Optional pyVmomi ServiceInstance of the paired vCenter
    """
    address: str
    service: Any
    vcenter: Any = None
    _content: Any = field(default=None, init=False, repr=False, compare=False)

    @property
    def content(self):
        """Service content (about, protection, recovery), retrieved once."""
        if self._content is None:
            log_api_call(get_logger(), 'SrmServiceInstance.RetrieveContent')
            self._content = self.service.RetrieveContent()
        return self._content

    @property
    def protection(self):
        return self.content.protection

    @property
    def recovery(self):
        return self.content.recovery

    @property
    def version(self) -> str:
        return self.content.about.version

    def __str__(self):
        return self.address


ServerArg = Union[Session, str, None]


class SessionRegistry:
    """
    Thread-safe list of active SRM sessions.

    The first registered session is the default one.

    Example:
        registry = SessionRegistry()
        registry.connect('srm-a.example.com', service, 'admin', 'secret')

        session = registry.resolve()             # default
        session = registry.resolve('SRM-A.example.com')  # by address
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._sessions: List[Session] = []

    def register(self, session: Session) -> Session:
        """
        Add a session. A session with the same address is replaced in place.

        Returns:
            The registered session
        """
        with self._lock:
            for index, existing in enumerate(self._sessions):
                if existing.address.lower() == session.address.lower():
                    self._sessions[index] = session
                    return session
            self._sessions.append(session)
        return session

    def connect(self, address: str, service, user: str, password: str,
                vcenter=None) -> Session:
        """
        Log in to an SRM server and register the session.

        Args:
            address: Address of the SRM server
            service: SRM service instance from the SRM binding
            user: SRM (vCenter SSO) user name
            password: Password
            vcenter: Optional pyVmomi ServiceInstance of the paired vCenter

        Returns:
            The registered Session

        Raises:
            ConnectorError: If the login is rejected
        """
        logger = get_logger()
        log_api_call(logger, 'SrmServiceInstance.SrmLoginLocale', user)
        try:
            service.SrmLoginLocale(user, password, None)
        except Exception as e:
            raise ConnectorError(
                f"Login to SRM server {address} failed: {e}",
                fix="Check the user name and password"
            ) from e

        logger.debug(f"Connected to SRM server {address}")
        return self.register(Session(address=address, service=service, vcenter=vcenter))

    def disconnect(self, server: ServerArg = None):
        """
        Log out of an SRM server and remove its session.
        """
        session = self.resolve(server)
        logger = get_logger()
        log_api_call(logger, 'SrmServiceInstance.SrmLogoutLocale')
        try:
            session.service.SrmLogoutLocale()
        finally:
            with self._lock:
                self._sessions = [s for s in self._sessions if s is not session]
        logger.debug(f"Disconnected from SRM server {session.address}")

    def sessions(self) -> List[Session]:
        """Snapshot of the registered sessions."""
        with self._lock:
            return list(self._sessions)

    @property
    def default(self) -> Optional[Session]:
        with self._lock:
            return self._sessions[0] if self._sessions else None

    def clear(self):
        with self._lock:
            self._sessions = []

    def resolve(self, server: ServerArg = None) -> Session:
        """
        Resolve the session a command should use.

        Args:
            server: Session, address string, or None for the default

        Returns:
            Session

        Raises:
            SessionNotFoundError: If an address matches no session
            NoActiveSessionError: If nothing is specified and no session exists
        """
        if isinstance(server, Session):
            return server

        sessions = self.sessions()

        if server is not None:
            wanted = str(server).lower()
            for session in sessions:
                if session.address.lower() == wanted:
                    return session
            raise SessionNotFoundError(str(server), [s.address for s in sessions])

        if not sessions:
            raise NoActiveSessionError()
        return sessions[0]


# Process-wide registry used when a command gets no explicit registry
default_registry = SessionRegistry()


def get_srm_server(server: ServerArg = None, registry: SessionRegistry = None) -> Session:
    """
    Get the session for an SRM server.

    Args:
        server: Session, address string, or None for the default
        registry: Registry to search (default: process-wide registry)
    """
    return (registry or default_registry).resolve(server)


def get_server_version(server: ServerArg = None, registry: SessionRegistry = None) -> str:
    """Get the version string reported by an SRM server."""
    return get_srm_server(server, registry).version


# vCenter connections (pyVmomi)

def _unverified_ssl_context() -> ssl.SSLContext:
    """SSL context for environments with self-signed certificates."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def connect_vcenter(host: str, user: str, password: str, port: int = 443,
                    verify_ssl: bool = False):
    """
    Connect to a vCenter server with pyVmomi.

    Returns:
        pyVmomi ServiceInstance

    Raises:
        ConnectorError: If the connection or login fails
    """
    logger = get_logger()
    log_api_call(logger, 'SmartConnect', host=host, user=user, port=port)
    kwargs = {}
    if not verify_ssl:
        kwargs['sslContext'] = _unverified_ssl_context()
    try:
        return SmartConnect(host=host, user=user, pwd=password, port=port, **kwargs)
    except Exception as e:
        raise ConnectorError(
            f"Connection to vCenter {host} failed: {e}",
            fix="Check the vCenter address and credentials"
        ) from e


def disconnect_vcenter(si):
    """Disconnect a pyVmomi ServiceInstance."""
    if si is not None:
        Disconnect(si)
