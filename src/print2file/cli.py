import argparse
import logging
import logging.handlers
import os
import sys

from .base import LISTEN_ADDR, LISTEN_PORT, BACKLOG, OUTPUT_DIR, NOTICE, LifecycleState
from .client import send_job
from .daemon import daemonize
from .endpoint import create_listener
from .exceptions import StartupError
from .lifecycle import LifecycleManager
from .server import PrintServer

PROG = "print2file"
SYSLOG_SOCKET = "/dev/log"


def setup_logging(verbose, quiet, foreground=False):
    log_format = "[%(process)d]: %(levelname)s - %(message)s"

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    # local syslog socket if there is one, UDP to localhost otherwise
    if os.path.exists(SYSLOG_SOCKET):
        syslog = logging.handlers.SysLogHandler(
            address=SYSLOG_SOCKET,
            facility=logging.handlers.SysLogHandler.LOG_DAEMON,
        )
    else:
        syslog = logging.handlers.SysLogHandler(
            facility=logging.handlers.SysLogHandler.LOG_DAEMON
        )
    syslog.ident = PROG
    syslog.priority_map = dict(syslog.priority_map, NOTICE="notice")
    handlers = [syslog]

    if foreground:
        stream = logging.StreamHandler()
        stream.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        handlers.append(stream)

    syslog.setFormatter(logging.Formatter(log_format))
    logging.basicConfig(level=level, handlers=handlers)

    return logging.getLogger(PROG)


def setup_argparse(argv=None):
    parser = argparse.ArgumentParser(
        prog=PROG, description="Write raw TCP print jobs to files"
    )

    verbosity_group = parser.add_mutually_exclusive_group()
    verbosity_group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="increase output verbosity",
    )
    verbosity_group.add_argument(
        "-q", "--quiet", action="store_true", help="decrease output verbosity"
    )

    parser.add_argument(
        "-H",
        "--host",
        type=str,
        default=LISTEN_ADDR,
        help="numeric IPv4 address to listen on",
    )
    parser.add_argument(
        "-p", "--port", type=int, default=LISTEN_PORT, help="service port"
    )
    parser.add_argument(
        "-s",
        "--storage",
        type=str,
        default=OUTPUT_DIR,
        help="directory print jobs are written to",
    )
    parser.add_argument(
        "-f",
        "--foreground",
        action="store_true",
        help="do not daemonize, also log to stderr",
    )
    parser.add_argument(
        "-t",
        "--read-timeout",
        type=float,
        default=None,
        help="end a job after this many idle seconds (default: never)",
    )

    return parser.parse_known_args(argv)


def main(argv=None):
    args, extra = setup_argparse(argv)
    if extra:
        print(f"{PROG} does not take any arguments, ignoring {' '.join(extra)}")

    logger = setup_logging(args.verbose, args.quiet, args.foreground)

    # resolve before chdir("/")
    storage = os.path.abspath(args.storage)
    try:
        os.makedirs(storage, exist_ok=True)
    except OSError as e:
        logger.warning(f"error creating storage directory {storage}: {e}")

    state = LifecycleState(logger)
    manager = LifecycleManager(state, logger)

    try:
        manager.install()
        if not args.foreground:
            daemonize(logger)
        state.set_listener(create_listener(args.host, args.port, BACKLOG, logger))
    except StartupError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(
        f"successfully started {PROG} on {args.host}:{args.port}, "
        f"printing to {storage}"
    )

    server = PrintServer(state, storage, logger, read_timeout=args.read_timeout)
    try:
        server.serve_forever()
    finally:
        # a signal exits from inside the handler; this covers any other way out
        manager.shutdown("serve loop ended")
        logger.log(NOTICE, f"{PROG} stopped after {server.jobs_printed} jobs")


def send_main(argv=None):
    parser = argparse.ArgumentParser(
        prog=f"{PROG}-send", description="Send a print job to a print2file daemon"
    )
    parser.add_argument(
        "-H", "--host", type=str, default=LISTEN_ADDR, help="server IP address"
    )
    parser.add_argument(
        "-p", "--port", type=int, default=LISTEN_PORT, help="server port"
    )
    parser.add_argument(
        "-s",
        "--src",
        type=str,
        default="-",
        help="source file path (default: stdin)",
    )
    args = parser.parse_args(argv)

    try:
        if args.src == "-":
            sent = send_job(sys.stdin.buffer, args.host, args.port)
        else:
            with open(args.src, "rb") as f:
                sent = send_job(f, args.host, args.port)
    except OSError as e:
        print(f"error sending job: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"sent {sent} bytes to {args.host}:{args.port}")
