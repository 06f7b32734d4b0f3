"""
Sending side of the print endpoint
Streams a job to the daemon and closes the connection, which ends the job
"""

import socket
from typing import BinaryIO, Union

from .base import LISTEN_ADDR, LISTEN_PORT, BUFSIZE


def send_job(
    job: Union[bytes, BinaryIO],
    host: str = LISTEN_ADDR,
    port: int = LISTEN_PORT,
    timeout: float = 10.0,
) -> int:
    """
    Send one print job

    Args:
        job: the payload, either bytes or a binary stream read to EOF
        host: daemon address
        port: daemon port

    Returns:
        int: number of bytes sent
    """
    sent = 0
    with socket.create_connection((host, port), timeout=timeout) as sock:
        if isinstance(job, (bytes, bytearray, memoryview)):
            sock.sendall(job)
            sent = len(job)
        else:
            while True:
                chunk = job.read(BUFSIZE)
                if not chunk:
                    break
                sock.sendall(chunk)
                sent += len(chunk)
        # half-close so the server sees EOF before we drop the socket
        sock.shutdown(socket.SHUT_WR)
    return sent
