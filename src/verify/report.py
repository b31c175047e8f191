# src/verify/report.py — v1
"""Human-readable verification table."""

from __future__ import annotations

from confvault.core.models import VerificationReport

_COLUMNS = ("STATUS", "FILE", "EXPECTED", "ACTUAL", "MESSAGE")


def _short(digest: str | None, width: int = 16) -> str:
    if not digest:
        return "-"
    return digest if len(digest) <= width else digest[:width] + "..."


def render_report(report: VerificationReport) -> str:
    """Render one row per entry, parse errors, and a summary line."""
    rows: list[tuple[str, ...]] = []
    notes: list[str] = []
    for manifest in report.manifests:
        if manifest.parse_error is not None:
            notes.append(f"MALFORMED {manifest.manifest_path}: {manifest.parse_error}")
            continue
        if not manifest.results:
            notes.append(f"EMPTY     {manifest.manifest_path}: no entries")
        for r in manifest.results:
            rows.append((
                r.status.upper(),
                str(r.archive_path),
                _short(r.expected_hash),
                _short(r.actual_hash),
                r.message,
            ))

    lines: list[str] = []
    if rows:
        widths = [
            max(len(_COLUMNS[i]), *(len(row[i]) for row in rows))
            for i in range(len(_COLUMNS))
        ]
        lines.append("  ".join(c.ljust(w) for c, w in zip(_COLUMNS, widths)).rstrip())
        lines.append("  ".join("-" * w for w in widths))
        for row in rows:
            lines.append("  ".join(v.ljust(w) for v, w in zip(row, widths)).rstrip())
    lines.extend(notes)

    verdict = "PASSED" if report.exit_code == 0 else "FAILED"
    lines.append("")
    lines.append(
        f"Verification {verdict} ({report.algorithm}): "
        f"{len(report.manifests)} manifest(s), "
        f"{report.count('success')} success, "
        f"{report.count('mismatch')} mismatch, "
        f"{report.count('error')} error, "
        f"{report.parse_errors} malformed"
    )
    return "\n".join(lines)
