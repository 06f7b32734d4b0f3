import socket

from .base import LISTEN_ADDR, LISTEN_PORT, BACKLOG
from .exceptions import EndpointSetupError


def create_listener(
    host: str = LISTEN_ADDR,
    port: int = LISTEN_PORT,
    backlog: int = BACKLOG,
    logger=None,
) -> socket.socket:
    """
    Resolve, create, bind and listen on the print endpoint

    Args:
        host: numeric IPv4 address to bind
        port: TCP port (0 lets the OS pick one)
        backlog: pending connections to queue

    Returns:
        socket.socket: the listening socket

    Raises:
        EndpointSetupError: on any failure; the failing step is in .step
    """
    address = (host, port)
    try:
        family, socktype, proto, _, sockaddr = socket.getaddrinfo(
            host,
            str(port),
            socket.AF_INET,
            socket.SOCK_STREAM,
            0,
            socket.AI_NUMERICHOST | socket.AI_NUMERICSERV,
        )[0]
    except socket.gaierror as e:
        raise EndpointSetupError("getaddrinfo", address, e) from e

    try:
        sock = socket.socket(family, socktype, proto)
    except OSError as e:
        raise EndpointSetupError("socket", address, e) from e

    try:
        # allow a restart while old connections sit in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(sockaddr)
    except OSError as e:
        sock.close()
        raise EndpointSetupError("bind", address, e) from e

    try:
        sock.listen(backlog)
    except OSError as e:
        sock.close()
        raise EndpointSetupError("listen", address, e) from e

    if logger:
        logger.debug(f"Listening on {sock.getsockname()} (backlog={backlog})")
    return sock
