from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm.auto import tqdm

from amp_sanitizer.controllers.sanitize_controller import SanitizeController
from amp_sanitizer.model import PipelineSettings
from amp_sanitizer.specs.component_specs import ComponentSpecError
from amp_shell.core.managers.config_manager import config_manager
from amp_shell.core.utils.configure_logging import configure_logger
from amp_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="amp-sanitize",
        description="Convert Bento components to AMP and prune unneeded Bento resources.",
    )
    parser.add_argument("paths", nargs="+", type=Path, help="HTML files to sanitize.")
    parser.add_argument("-o", "--output-dir", type=Path, default=None,
                        help="Write sanitized files here. Defaults to stdout for a single file.")
    parser.add_argument("--specs", type=Path, default=None, help="Path to an AMP extension spec table (JSON).")
    parser.add_argument("--cdn-base-url", type=str, default=None, help="Base URL of the AMP/Bento CDN.")
    parser.add_argument("--settings", type=Path, default=None, help="Alternative settings.json file.")
    parser.add_argument("--report", action="store_true", help="Print a JSON report per file to stderr.")
    parser.add_argument("--log-level", type=str, default=None, help="Override debug.level (e.g. DEBUG).")
    return parser


def _settings_from_config(parsed_args: argparse.Namespace) -> PipelineSettings:
    """Merges settings.json values with command line overrides (CLI wins)."""
    specs_path = parsed_args.specs or config_manager.get_nested("specs.extension_specs_path")
    return PipelineSettings(
        cdn_base_url=parsed_args.cdn_base_url or config_manager.get_nested(
            "bento.cdn_base_url", PipelineSettings().cdn_base_url
        ),
        extension_specs_path=str(specs_path) if specs_path else None,
    )


def _sanitize_file(controller: SanitizeController, path: Path, parsed_args: argparse.Namespace) -> None:
    html = path.read_text(encoding="utf-8")
    output, report = controller.sanitize_html(html)

    if parsed_args.output_dir:
        out_path = PathUtils.get_output_path(path, parsed_args.output_dir)
        out_path.write_text(output, encoding="utf-8")
        logger.info("Wrote %s", out_path)
    else:
        sys.stdout.write(output)

    if parsed_args.report:
        payload = {
            "file": str(path),
            "reports": [r.model_dump() for r in report.reports],
            "arg_updates": report.arg_updates,
        }
        tqdm.write(json.dumps(payload, indent=2), file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the `amp-sanitize` command."""
    parser = build_parser()
    try:
        parsed_args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    if parsed_args.settings and not config_manager.load_file(parsed_args.settings):
        print(f"❌ Could not load settings from {parsed_args.settings}")
        return 1

    configure_logger(
        parsed_args.log_level or config_manager.get_nested("debug.level", "WARNING"),
        module_specific_levels=config_manager.get_nested("debug.modules"),
        silenced_loggers=config_manager.get_nested("debug.silenced"),
    )

    if len(parsed_args.paths) > 1 and not parsed_args.output_dir:
        print("❌ --output-dir is required when sanitizing more than one file.")
        return 1

    if parsed_args.output_dir:
        names = [path.name for path in parsed_args.paths]
        clashes = sorted({name for name in names if names.count(name) > 1})
        if clashes:
            print(f"❌ Several input files would be written to the same output file: {', '.join(clashes)}")
            return 1

    try:
        controller = SanitizeController(_settings_from_config(parsed_args))
    except ComponentSpecError as e:
        logger.error("Failed to load component specs: %s", e)
        print(f"❌ {e}")
        return 1

    failures = 0
    show_progress = len(parsed_args.paths) > 1
    iterator = tqdm(parsed_args.paths, desc="Sanitizing", unit="file", leave=False) \
        if show_progress else parsed_args.paths

    for path in iterator:
        try:
            _sanitize_file(controller, path, parsed_args)
        except Exception as e:
            failures += 1
            logger.error("Failed to sanitize %s: %s", path, e, exc_info=True)
            tqdm.write(f"❌ Error sanitizing {path}: {e}", file=sys.stderr)

    if show_progress:
        print(f"✅ Sanitized {len(parsed_args.paths) - failures}/{len(parsed_args.paths)} files.")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
