"""Command-line interface for retheme."""

from __future__ import annotations

import argparse
import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
from typing import Any, Sequence

from retheme import __version__
from retheme.config.engine import EngineConfig, load_project_config
from retheme.config.settings import AppSettings
from retheme.core.backup import BackupManager
from retheme.core.mapping import KIND_HEX
from retheme.core.project import ProjectLayout, get_project_theme
from retheme.core.rebuild import RebuildOrchestrator, RebuildStage
from retheme.core.scanner import ProjectScanner
from retheme.core.taxonomy import SCAN_MODES
from retheme.errors import ErrorCode, RethemeError, format_error_for_user
from retheme.runtime_paths import builtin_themes_root, is_frozen, package_root
from retheme.themes.colors import hex_to_hsl
from retheme.themes.loader import load_document, validate_theme
from retheme.themes.models import ThemeValidationError
from retheme.themes.registry import ThemeRegistry

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 2
EXIT_NOT_FOUND = 3
EXIT_CONFIG_ERROR = 4
EXIT_LOCKED = 5

_EXIT_BY_CODE = {
    ErrorCode.THEME_NOT_FOUND: EXIT_NOT_FOUND,
    ErrorCode.PROJECT_NOT_FOUND: EXIT_NOT_FOUND,
    ErrorCode.BACKUP_NOT_FOUND: EXIT_NOT_FOUND,
    ErrorCode.NO_BACKUPS: EXIT_NOT_FOUND,
    ErrorCode.FILE_NOT_FOUND: EXIT_NOT_FOUND,
    ErrorCode.THEME_INVALID: EXIT_CONFIG_ERROR,
    ErrorCode.CONFIG_INVALID: EXIT_CONFIG_ERROR,
    ErrorCode.PROJECT_LOCKED: EXIT_LOCKED,
    ErrorCode.OPERATION_CANCELLED: EXIT_CANCELLED,
}


def _configure_logger(settings: AppSettings, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger("retheme")
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(logging.DEBUG if verbose else logging.WARNING)
    stream.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    logger.addHandler(stream)

    try:
        handler = RotatingFileHandler(
            settings.log_dir / "retheme.log",
            maxBytes=512_000,
            backupCount=3,
            encoding="utf-8",
        )
    except OSError as exc:
        logger.warning("file logging disabled: %s", exc)
    else:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="retheme",
        description="Migrate a Tailwind/React codebase to a semantic theme, with rollback",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  retheme themes
  retheme scan --mode full
  retheme rebuild neo-tokyo --dry-run
  retheme rebuild neo-tokyo --no-fix
  retheme backups
  retheme rollback
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    parser.add_argument("--settings", metavar="FILE", help="Read preferences from this INI file")
    parser.add_argument("--themes-dir", metavar="DIR", help="Extra theme library (overrides settings)")

    sub = parser.add_subparsers(dest="command", required=True)

    def add_project(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-C", "--project", metavar="DIR", default=".",
            help="Project root (default: current directory)",
        )

    def add_json(p: argparse.ArgumentParser) -> None:
        p.add_argument("--json", action="store_true", help="Print machine-readable JSON")

    p_themes = sub.add_parser("themes", help="List available themes")
    add_json(p_themes)

    p_scan = sub.add_parser("scan", help="Report hardcoded colors")
    add_project(p_scan)
    p_scan.add_argument("--mode", choices=SCAN_MODES, help="Scan mode (default: from settings)")
    add_json(p_scan)

    p_rebuild = sub.add_parser("rebuild", help="Apply a theme and rewrite hardcoded colors")
    p_rebuild.add_argument("theme", help="Theme id, e.g. neo-tokyo")
    add_project(p_rebuild)
    p_rebuild.add_argument("--mode", choices=SCAN_MODES, help="Scan mode (default: from settings)")
    p_rebuild.add_argument("--dry-run", action="store_true", help="Report changes without writing")
    p_rebuild.add_argument("--no-fix", dest="fix_colors", action="store_false", help="Skip color rewriting")
    add_json(p_rebuild)

    p_backups = sub.add_parser("backups", help="List backups, newest first")
    add_project(p_backups)
    add_json(p_backups)

    p_rollback = sub.add_parser("rollback", help="Restore a backup (newest by default)")
    p_rollback.add_argument("backup_id", nargs="?", help="Backup id from `retheme backups`")
    add_project(p_rollback)
    add_json(p_rollback)

    p_current = sub.add_parser("current", help="Show the theme applied to the project")
    add_project(p_current)
    add_json(p_current)

    p_validate = sub.add_parser("validate", help="Validate a theme file")
    p_validate.add_argument("file", help="Theme document (.json, .yaml)")
    add_json(p_validate)

    return parser


def _emit_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def _fail(error: RethemeError) -> int:
    print(f"error: {format_error_for_user(error)}", file=sys.stderr)
    return _EXIT_BY_CODE.get(error.code, EXIT_FAILURE)


def _base_config(settings: AppSettings) -> EngineConfig:
    defaults = EngineConfig()
    extra_calls = tuple(c for c in settings.extra_assertion_calls if c not in defaults.assertion_calls)
    return EngineConfig(
        scan_workers=settings.scan_workers,
        assertion_calls=defaults.assertion_calls + extra_calls,
    )


def _build_registry(settings: AppSettings, themes_dir: str | None) -> ThemeRegistry:
    user_dir = themes_dir or settings.user_themes_dir
    registry = ThemeRegistry(
        builtin_root=builtin_themes_root(),
        user_root=Path(user_dir) if user_dir else None,
    )
    registry.reload()
    errors = registry.load_errors()
    if errors:
        logging.getLogger("retheme").warning("theme load warnings: %s", " | ".join(errors[:6]))
    return registry


def _cmd_themes(args, settings: AppSettings) -> int:
    registry = _build_registry(settings, args.themes_dir)
    summaries = registry.list_themes()
    if args.json:
        _emit_json([
            {
                "id": s.theme_id,
                "name": s.name,
                "category": s.category,
                "description": s.description,
                "primary": {"light": s.primary_light, "dark": s.primary_dark},
                "background": {"light": s.background_light, "dark": s.background_dark},
                "builtin": s.is_builtin,
            }
            for s in summaries
        ])
        return EXIT_SUCCESS
    current = None
    for s in summaries:
        if s.category != current:
            current = s.category
            print(f"{current}:")
        print(f"  {s.theme_id:<20} {s.name}")
    return EXIT_SUCCESS


def _cmd_scan(args, settings: AppSettings) -> int:
    root = Path(args.project).resolve()
    config = load_project_config(root, _base_config(settings))
    mode = args.mode or settings.default_mode
    result = ProjectScanner(config).scan(root, mode)
    if args.json:
        _emit_json(result.to_dict())
        return EXIT_SUCCESS
    for entry in result.files:
        for m in entry.mappings:
            if m.token.protected:
                continue
            if m.fixable:
                hint = f" -> {m.suggestion}"
            elif m.token.kind == KIND_HEX:
                hint = f" (manual review needed, hsl {hex_to_hsl(m.token.raw_text)})"
            else:
                hint = " (manual review needed)"
            print(f"{entry.path}:{m.token.line_number}:{m.token.column} {m.token.raw_text}{hint}")
    print(
        f"{result.files_scanned} files, {result.total_references} references, "
        f"{result.non_compliant_count} non-compliant, {result.fixable_count} fixable"
    )
    return EXIT_SUCCESS


def _cmd_rebuild(args, settings: AppSettings) -> int:
    registry = _build_registry(settings, args.themes_dir)
    orchestrator = RebuildOrchestrator.for_project(registry, args.project, _base_config(settings))

    def on_stage(stage: RebuildStage, message: str) -> None:
        if not args.json and stage is not RebuildStage.DONE:
            print(f"[{stage.value}] {message}")

    result = orchestrator.rebuild(
        args.theme,
        dry_run=args.dry_run,
        fix_colors=args.fix_colors,
        mode=args.mode or settings.default_mode,
        progress_cb=on_stage,
    )
    if args.json:
        _emit_json(result.to_dict())
    if result.error is not None:
        return _fail(result.error)
    if not args.json:
        verb = "Would change" if result.dry_run else "Changed"
        print(f"{verb} {len(result.changed_files)} files")
        for path in result.changed_files:
            print(f"  {path}")
        for warning in result.warnings:
            print(f"warning: {warning}")
        if result.backup_id:
            print(f"Backup: {result.backup_id}")
    return EXIT_SUCCESS


def _cmd_backups(args, settings: AppSettings) -> int:
    root = Path(args.project).resolve()
    config = load_project_config(root, _base_config(settings))
    manifests = BackupManager(ProjectLayout.for_root(root, config)).list_backups()
    if args.json:
        _emit_json([m.to_dict() for m in manifests])
        return EXIT_SUCCESS
    if not manifests:
        print("No backups")
        return EXIT_SUCCESS
    for m in manifests:
        print(f"{m.id}  {m.previous_theme_id} -> {m.new_theme_id}  ({m.origin}, {len(m.captured_files)} files)")
    return EXIT_SUCCESS


def _cmd_rollback(args, settings: AppSettings) -> int:
    registry = ThemeRegistry(builtin_root=builtin_themes_root())
    orchestrator = RebuildOrchestrator.for_project(registry, args.project, _base_config(settings))
    outcome = orchestrator.rollback(args.backup_id)
    if args.json:
        _emit_json(outcome.to_dict())
    if not outcome.success:
        return _fail(outcome.error)
    if not args.json:
        result = outcome.result
        print(f"Restored {result.restored_theme_id} from {result.backup_used}")
        print(f"Safety backup: {result.safety_backup_id}")
    return EXIT_SUCCESS


def _cmd_current(args, settings: AppSettings) -> int:
    root = Path(args.project).resolve()
    layout = ProjectLayout.for_root(root, load_project_config(root, _base_config(settings)))
    theme = get_project_theme(layout)
    if args.json:
        _emit_json(theme.to_dict() if theme else None)
        return EXIT_SUCCESS
    if theme is None:
        print("No theme applied")
    else:
        print(f"{theme.id} ({theme.name}, {theme.category})")
    return EXIT_SUCCESS


def _cmd_validate(args, settings: AppSettings) -> int:
    path = Path(args.file)
    if not path.is_file():
        return _fail(RethemeError(ErrorCode.FILE_NOT_FOUND, path=path))
    try:
        report = validate_theme(load_document(path))
    except ThemeValidationError as exc:
        return _fail(RethemeError(ErrorCode.THEME_PARSE_FAILED, message=str(exc), path=path))
    if args.json:
        _emit_json({"valid": report.valid, "errors": list(report.errors)})
    elif report.valid:
        print(f"{path}: ok")
    else:
        for err in report.errors:
            print(f"{path}: {err}")
    return EXIT_SUCCESS if report.valid else EXIT_CONFIG_ERROR


_COMMANDS = {
    "themes": _cmd_themes,
    "scan": _cmd_scan,
    "rebuild": _cmd_rebuild,
    "backups": _cmd_backups,
    "rollback": _cmd_rollback,
    "current": _cmd_current,
    "validate": _cmd_validate,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments and dispatch; returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = AppSettings(args.settings) if args.settings else AppSettings()
    logger = _configure_logger(settings, args.verbose)
    logger.debug("startup frozen=%s package_root=%s", is_frozen(), package_root())

    try:
        return _COMMANDS[args.command](args, settings)
    except RethemeError as exc:
        return _fail(exc)
