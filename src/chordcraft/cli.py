"""Command-line interfaces: chordcraft-seed, chordcraft-regenerate, chordcraft-dedup."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional

from chordcraft.config import DedupConfig, GenerationConfig
from chordcraft.dedup import deduplicate
from chordcraft.errors import ChordCraftError, ConfigurationError
from chordcraft.generate import make_client
from chordcraft.output import banner, log
from chordcraft.regenerate import regenerate_reported
from chordcraft.reports import dismiss_report, list_reported
from chordcraft.seed import seed_combinations, seed_progressions
from chordcraft.store import FirestoreStore, JsonFileStore, ProgressionStore
from chordcraft.theory import SCALE_INTERVALS


def _add_store_args(p: argparse.ArgumentParser) -> None:
    st = p.add_argument_group("store")
    st.add_argument(
        "--store-file",
        type=Path,
        default=None,
        help="Use a local JSON file as the progression store.",
    )
    st.add_argument(
        "--project",
        type=str,
        default=os.getenv("GOOGLE_CLOUD_PROJECT"),
        help="GCP project for the Firestore store (or set GOOGLE_CLOUD_PROJECT).",
    )


def _add_model_args(p: argparse.ArgumentParser) -> None:
    defaults = GenerationConfig()
    md = p.add_argument_group("model")
    md.add_argument("--model", type=str, default=defaults.model)
    md.add_argument(
        "--timeout",
        type=float,
        default=defaults.request_timeout,
        help="Seconds to wait for the model before falling back.",
    )


def open_store(args: argparse.Namespace) -> ProgressionStore:
    if args.store_file is not None:
        return JsonFileStore(args.store_file)
    return FirestoreStore(project=args.project)


def _generation_config(args: argparse.Namespace) -> GenerationConfig:
    return GenerationConfig(model=args.model, request_timeout=args.timeout)


# -- seed --

def parse_seed_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse chordcraft-seed arguments."""
    p = argparse.ArgumentParser(
        prog="chordcraft-seed",
        description="Generate chord progressions and save them to the store.",
    )
    p.add_argument("-n", "--count", type=int, default=10)
    p.add_argument("--key", type=str, default=None, help="Fix the key (default: random).")
    p.add_argument(
        "--scale",
        type=str,
        default=None,
        choices=sorted(SCALE_INTERVALS),
        help="Fix the scale (default: random).",
    )
    p.add_argument("--mood", type=str, default=None, help="Fix the mood (default: random).")
    p.add_argument("--style", type=str, default=None, help="Fix the style (default: random).")
    p.add_argument("--starting-chord", type=str, default=None)
    p.add_argument(
        "--clear",
        action="store_true",
        help="Delete all existing progressions before seeding.",
    )
    p.add_argument(
        "--clear-reports",
        action="store_true",
        help="Delete all existing reports before seeding.",
    )
    p.add_argument(
        "--delay",
        type=float,
        default=0.0,
        help="Seconds to pause between model calls.",
    )
    _add_model_args(p)
    _add_store_args(p)
    return p.parse_args(argv)


def seed_main(argv: Optional[list[str]] = None) -> int:
    """Entry point returning an exit code."""
    args = parse_seed_args(argv)
    if args.count < 1:
        log("ERROR: --count must be >= 1.")
        return 2

    try:
        cfg = _generation_config(args)
        client = make_client(cfg)
        store = open_store(args)
    except ChordCraftError as e:
        log(f"ERROR: {e}")
        return 2

    try:
        if args.clear:
            log(f"Deleted {store.clear_progressions()} progressions")
        if args.clear_reports:
            log(f"Deleted {store.clear_reports()} reports")
        combos = seed_combinations(
            args.count,
            key=args.key,
            scale=args.scale,
            mood=args.mood,
            style=args.style,
            starting_chord=args.starting_chord,
        )
        created = seed_progressions(store, client, cfg, combos, delay=args.delay)
    except (ChordCraftError, ValueError) as e:
        log(f"\nFAILED: {e}")
        return 1

    log(f"\nSuccessfully generated {len(created)} chord progressions.")
    return 0


# -- regenerate --

def parse_regenerate_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse chordcraft-regenerate arguments."""
    p = argparse.ArgumentParser(
        prog="chordcraft-regenerate",
        description="Regenerate progressions that have pending reports.",
    )
    action = p.add_mutually_exclusive_group()
    action.add_argument(
        "--list",
        action="store_true",
        help="List reported progressions instead of regenerating.",
    )
    action.add_argument(
        "--dismiss",
        metavar="REPORT_ID",
        type=str,
        default=None,
        help="Dismiss a single report.",
    )
    _add_model_args(p)
    _add_store_args(p)
    return p.parse_args(argv)


def regenerate_main(argv: Optional[list[str]] = None) -> int:
    """Entry point returning an exit code."""
    args = parse_regenerate_args(argv)
    try:
        store = open_store(args)
    except ChordCraftError as e:
        log(f"ERROR: {e}")
        return 2

    try:
        if args.list:
            reported = list_reported(store)
            if not reported:
                log("No reported progressions found.")
            for p in reported:
                log(
                    f"{p.id:<22} {p.key:<4} {p.scale:<11} {p.mood:<10} "
                    f"{p.style:<12} flags={p.flags} reason={p.report_reason or '-'}"
                )
            return 0
        if args.dismiss:
            dismiss_report(store, args.dismiss)
            return 0
    except ChordCraftError as e:
        log(f"\nFAILED: {e}")
        return 1

    try:
        cfg = _generation_config(args)
        client = make_client(cfg)
    except ConfigurationError as e:
        log(f"ERROR: {e}")
        return 2

    try:
        summary = regenerate_reported(store, client, cfg)
    except ChordCraftError as e:
        log(f"\nFAILED: {e}")
        return 1
    return 1 if summary.failed else 0


# -- dedup --

def parse_dedup_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse chordcraft-dedup arguments."""
    defaults = DedupConfig()
    p = argparse.ArgumentParser(
        prog="chordcraft-dedup",
        description=(
            "Remove duplicate progressions (same key, scale and chords), "
            "keeping the highest-quality copy."
        ),
    )
    p.add_argument(
        "-d", "--dry-run",
        action="store_true",
        help="Show what would be deleted without removing anything.",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show each duplicate set.",
    )
    p.add_argument("--batch-size", type=int, default=defaults.batch_size)
    _add_store_args(p)
    return p.parse_args(argv)


def dedup_main(argv: Optional[list[str]] = None) -> int:
    """Entry point returning an exit code."""
    args = parse_dedup_args(argv)
    cfg = DedupConfig(batch_size=args.batch_size)

    try:
        store = open_store(args)
    except ChordCraftError as e:
        log(f"ERROR: {e}")
        return 2

    banner("ChordCraft progression deduplication")
    if args.dry_run:
        log("DRY RUN MODE: no data will be deleted")
    try:
        report = deduplicate(
            store,
            dry_run=args.dry_run,
            batch_size=cfg.batch_size,
            verbose=args.verbose,
        )
    except (ChordCraftError, ValueError) as e:
        log(f"\nFAILED: {e}")
        return 1

    banner("Deduplication summary")
    log(f"Total duplicate groups:       {len(report.plan.groups)}")
    log(f"Total duplicate progressions: {report.plan.duplicate_count}")
    if args.dry_run:
        log(f"Would delete:                 {len(report.plan.delete_ids)}")
        log("No changes were made (dry run)")
        return 0
    log(f"Deleted:                      {len(report.deleted_ids)}")
    log(f"Unique progressions remaining: {report.plan.total - len(report.deleted_ids)}")
    if not report.ok:
        log(f"\nFAILED after {report.batches_committed} batch(es): {report.error}")
        return 1
    return 0


def seed_cli() -> None:
    """Wrapper for the console_scripts entry point."""
    raise SystemExit(seed_main())


def regenerate_cli() -> None:
    raise SystemExit(regenerate_main())


def dedup_cli() -> None:
    raise SystemExit(dedup_main())
