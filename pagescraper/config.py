from __future__ import annotations

import argparse
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

import soupsieve

from .errors import ConfigError
from .models import ScrapeConfig

MISMATCH_POLICIES = ("error", "truncate")


def _split_pairs(raw: str, what: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for entry in raw.split(","):
        part = entry.strip()
        if not part:
            continue
        if "=" not in part:
            raise ConfigError(f"Malformed {what} entry {part!r}: expected name=value")
        name, value = part.split("=", 1)
        name, value = name.strip(), value.strip()
        if not name or not value:
            raise ConfigError(f"Malformed {what} entry {part!r}: empty name or value")
        pairs.append((name, value))
    if not pairs:
        raise ConfigError(f"No {what} entries given")
    return pairs


def _check_selector(selector: str, label: str) -> None:
    try:
        soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as exc:
        raise ConfigError(f"Invalid CSS selector for {label!r}: {selector!r} ({exc})") from exc


def parse_selectors(raw: str) -> Mapping[str, str]:
    """Parse ``name=selector,name=selector`` into a read-only rule mapping.

    Entries are split on the first ``=`` only, so attribute selectors such as
    ``a[href=x]`` survive. Malformed entries, repeated names and selectors
    soupsieve cannot compile raise ConfigError.
    """
    rules: Dict[str, str] = {}
    for name, selector in _split_pairs(raw, "selector"):
        if name in rules:
            raise ConfigError(f"Duplicate selector field name {name!r}")
        _check_selector(selector, name)
        rules[name] = selector
    return MappingProxyType(rules)


def parse_columns(raw: str) -> Tuple[Tuple[str, str], ...]:
    """Parse ``field=Header`` pairs into the exported column layout."""
    columns = _split_pairs(raw, "column")
    seen = set()
    for name, _ in columns:
        if name in seen:
            raise ConfigError(f"Duplicate column field {name!r}")
        seen.add(name)
    return tuple(columns)


def build_config(args: argparse.Namespace) -> ScrapeConfig:
    if not args.base_url or not args.start_page or not args.selectors:
        raise ConfigError("base_url, start_page, and selectors are required")
    if args.max_pages < 1:
        raise ConfigError(f"max_pages must be at least 1, got {args.max_pages}")
    if args.record_index < 0:
        raise ConfigError(f"record_index must not be negative, got {args.record_index}")
    if args.on_mismatch not in MISMATCH_POLICIES:
        raise ConfigError(f"on_mismatch must be one of {MISMATCH_POLICIES}, got {args.on_mismatch!r}")
    if args.rate <= 0 or args.burst < 1:
        raise ConfigError("rate must be positive and burst at least 1")
    if args.page_delay < 0:
        raise ConfigError("page_delay must not be negative")
    if args.timeout is not None and args.timeout <= 0:
        raise ConfigError("timeout must be positive")

    rules = parse_selectors(args.selectors)
    _check_selector(args.next_selector, "next page link")

    return ScrapeConfig(
        base_url=args.base_url,
        start_page=args.start_page,
        rules=rules,
        max_pages=args.max_pages,
        next_selector=args.next_selector,
        output_path=args.output,
        columns=parse_columns(args.columns),
        record_index=args.record_index,
        on_mismatch=args.on_mismatch,
        records_jsonl=args.records_jsonl,
        rate=args.rate,
        burst=args.burst,
        page_delay=args.page_delay,
        timeout=args.timeout,
        strip_text=args.strip_text,
    )
