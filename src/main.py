# src/main.py — v1
"""CLI entry point — backup and verify commands.

Usage:
    confvault backup [--env-file PATH]
    confvault verify (--file MANIFEST | --directory DIR) [--recursive]
                     [--algorithm sha256] [--quiet]

Exit codes: 0 on success, 1 on any failure. For verify, 0 means every entry
of every discovered manifest matched.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from confvault.manifest.digest import DEFAULT_ALGORITHM, SUPPORTED_ALGORITHMS
from confvault.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    _setup_logging(args.verbose, quiet=getattr(args, "quiet", False))

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="confvault",
        description=f"confvault v{__version__} — server configuration backup and verification",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- backup ---
    p_backup = subparsers.add_parser(
        "backup", help="Capture, archive, checksum and publish one backup run",
    )
    p_backup.add_argument(
        "--env-file", type=Path, default=None,
        help="Settings file (default: ./.env)",
    )
    p_backup.set_defaults(func=_cmd_backup)

    # --- verify ---
    p_verify = subparsers.add_parser(
        "verify", help="Verify archives against checksum manifests",
    )
    source = p_verify.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="A single manifest file")
    source.add_argument("--directory", type=Path, help="Directory to scan for manifests")
    p_verify.add_argument(
        "-r", "--recursive", action="store_true",
        help="Scan subdirectories (with --directory)",
    )
    p_verify.add_argument(
        "-a", "--algorithm", choices=SUPPORTED_ALGORITHMS, default=DEFAULT_ALGORITHM,
        help="Digest algorithm (default: sha256)",
    )
    p_verify.add_argument(
        "-q", "--quiet", action="store_true",
        help="No output; the exit code is the only result",
    )
    p_verify.set_defaults(func=_cmd_verify)

    return parser


def _cmd_backup(args: argparse.Namespace) -> int:
    """Execute one backup run."""
    from confvault.config.settings import Settings
    from confvault.logging.logger import setup_logging
    from confvault.pipeline.orchestrator import BackupOrchestrator

    if args.env_file is not None:
        settings = Settings(_env_file=str(args.env_file))  # type: ignore[call-arg]
    else:
        settings = Settings()

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file or None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    result = BackupOrchestrator(settings).run()
    _print_backup_summary(result)
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    """Verify one manifest or every manifest under a directory."""
    from confvault.core.errors import DiscoveryError
    from confvault.verify.report import render_report
    from confvault.verify.verifier import ManifestVerifier

    target: Path = args.file if args.file is not None else args.directory
    verifier = ManifestVerifier(args.algorithm)

    try:
        report = verifier.verify_paths(target, recursive=args.recursive)
    except DiscoveryError as exc:
        if not args.quiet:
            print(f"Verification FAILED: {exc}")
        return 1

    if not args.quiet:
        print(render_report(report))
    return report.exit_code


def _print_backup_summary(result: object) -> None:
    """Print a human-readable summary of BackupRunResult."""
    print("\nBackup complete:")
    print(f"  Run ID:       {result.context.run_id}")
    print(f"  Staging:      {result.context.staging_dir}")
    print(f"  Tasks OK:     {', '.join(result.succeeded_tasks) or '-'}")
    print(f"  Tasks failed: {', '.join(result.failed_tasks) or '-'}")
    print(f"  Manifest:     {result.manifest_path}")
    for location in result.published:
        print(f"  Published:    {location}")


def _setup_logging(verbose: bool, quiet: bool = False) -> None:
    """Configure console logging for CLI usage."""
    if quiet:
        level = logging.CRITICAL
    else:
        level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("confvault").setLevel(level)
    # Quiet noisy libraries
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
