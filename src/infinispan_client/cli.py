#!/usr/bin/env python3
"""
infinispan-client - run single REST calls against an Infinispan server.

Usage:
    infinispan-client cache create books --topology distributed --mode sync
    infinispan-client entry put books isbn-1 "Dune" --ttl 60
    infinispan-client counter create hits --strong --value 10
    infinispan-client counter increment hits --by 2
    infinispan-client counter cas hits 12 20

Connection settings come from INFINISPAN_URL, INFINISPAN_USERNAME and
INFINISPAN_PASSWORD (a .env file in the working directory is loaded first)
and can be overridden with --url, --username and --password.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import httpx
from dotenv import load_dotenv

from .config import ClientConfig
from .configuration import (
    CacheMode,
    CounterStorage,
    DistributedCache,
    InvalidationCache,
    LocalCache,
    ReplicatedCache,
    StrongCounter,
    WeakCounter,
)
from .console import console, err_console, format_body
from .core.base_client import SyncInfinispanClient
from .errors import InfinispanError
from .request import Request, caches, counters, entries

logger = logging.getLogger("infinispan_client.cli")

TOPOLOGIES = {
    "local": LocalCache,
    "replicated": ReplicatedCache,
    "distributed": DistributedCache,
    "invalidation": InvalidationCache,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="infinispan-client",
        description="Run a single request against the Infinispan REST API",
    )
    parser.add_argument("--url", help="Server base URL (INFINISPAN_URL)")
    parser.add_argument("--username", help="Digest username (INFINISPAN_USERNAME)")
    parser.add_argument("--password", help="Digest password (INFINISPAN_PASSWORD)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Trace requests and responses")
    resources = parser.add_subparsers(dest="resource", required=True)

    # cache
    cache = resources.add_parser("cache", help="Cache operations")
    cache_ops = cache.add_subparsers(dest="op", required=True)
    create = cache_ops.add_parser("create", help="Create a cache")
    create.add_argument("name")
    create.add_argument("--topology", choices=sorted(TOPOLOGIES), default="local")
    create.add_argument("--mode", choices=["sync", "async"], default="sync")
    create.add_argument("--template", help="Create from a server-side template instead")
    for op in ("delete", "get", "config", "exists", "clear", "size", "stats", "keys"):
        cache_ops.add_parser(op).add_argument("name")
    cache_ops.add_parser("list")

    # entry
    entry = resources.add_parser("entry", help="Entry operations")
    entry_ops = entry.add_subparsers(dest="op", required=True)
    put = entry_ops.add_parser("put", help="Create an entry")
    put.add_argument("cache")
    put.add_argument("key")
    put.add_argument("value", nargs="?")
    put.add_argument("--ttl", type=float, help="Time to live in seconds")
    put.add_argument("--max-idle", type=float, help="Max idle time in seconds")
    put.add_argument("--content-type")
    update = entry_ops.add_parser("update", help="Replace the value of an entry")
    update.add_argument("cache")
    update.add_argument("key")
    update.add_argument("value")
    for op in ("get", "exists", "delete"):
        sub = entry_ops.add_parser(op)
        sub.add_argument("cache")
        sub.add_argument("key")

    # counter
    counter = resources.add_parser("counter", help="Counter operations")
    counter_ops = counter.add_subparsers(dest="op", required=True)
    ccreate = counter_ops.add_parser("create", help="Create a counter")
    ccreate.add_argument("name")
    ccreate.add_argument("--strong", action="store_true", help="Strong instead of weak counter")
    ccreate.add_argument("--value", type=int, default=0, help="Initial value")
    ccreate.add_argument("--storage", choices=[s.value for s in CounterStorage])
    inc = counter_ops.add_parser("increment")
    inc.add_argument("name")
    inc.add_argument("--by", type=int, help="Delta instead of 1")
    for op in ("get", "config", "decrement", "reset", "delete"):
        counter_ops.add_parser(op).add_argument("name")
    counter_ops.add_parser("list")
    for op in ("cas", "swap"):
        sub = counter_ops.add_parser(op, help="Compare-and-set" if op == "cas" else "Compare-and-swap")
        sub.add_argument("name")
        sub.add_argument("expected", type=int)
        sub.add_argument("new", type=int)

    return parser


def build_request(args: argparse.Namespace) -> Request:
    """Map parsed arguments onto a request descriptor."""
    if args.resource == "cache":
        if args.op == "create":
            if args.template:
                return caches.create_from_template(args.name, args.template)
            topology = TOPOLOGIES[args.topology]
            if topology is LocalCache:
                return caches.create(args.name, LocalCache())
            return caches.create(args.name, topology(CacheMode(args.mode.upper())))
        if args.op == "list":
            return caches.list()
        if args.op == "config":
            return caches.get_config(args.name)
        return getattr(caches, args.op)(args.name)

    if args.resource == "entry":
        if args.op == "put":
            req = entries.create(args.cache, args.key)
            if args.value is not None:
                req = req.with_value(args.value, args.content_type)
            if args.ttl is not None:
                req = req.with_ttl(args.ttl)
            if args.max_idle is not None:
                req = req.with_max_idle(args.max_idle)
            return req
        if args.op == "update":
            return entries.update(args.cache, args.key, args.value)
        return getattr(entries, args.op)(args.cache, args.key)

    if args.op == "create":
        config = StrongCounter() if args.strong else WeakCounter()
        req = counters.create(args.name, config).with_value(args.value)
        if args.storage:
            req = req.with_storage(CounterStorage(args.storage))
        return req
    if args.op == "increment":
        req = counters.increment(args.name)
        return req.by(args.by) if args.by is not None else req
    if args.op == "list":
        return counters.list()
    if args.op == "config":
        return counters.get_config(args.name)
    if args.op == "cas":
        return counters.compare_and_set(args.name, args.expected, args.new)
    if args.op == "swap":
        return counters.compare_and_swap(args.name, args.expected, args.new)
    return getattr(counters, args.op)(args.name)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        request = build_request(args)
        config = ClientConfig.from_env(
            base_url=args.url,
            username=args.username,
            password=args.password,
            verbose=args.verbose or None,
        )
        with SyncInfinispanClient(config) as client:
            response = client.run(request)
    except (InfinispanError, ValueError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        return 2
    except httpx.TransportError as e:
        err_console.print(f"[bold red]Transport error:[/bold red] {type(e).__name__}: {e}")
        return 3

    status_color = "green" if response.is_success else "red"
    console.print(f"[bold {status_color}]{response.status_code}[/bold {status_color}] {response.reason_phrase}")
    if response.content:
        console.print(format_body(response.content), markup=False, highlight=False)
    return 0 if response.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
