# src/formfixer/cli.py
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from tqdm import tqdm

from formfixer.controllers.form_controller import FormController
from formfixer.errors import FormFixerError
from formfixer.managers.config_manager import config_manager
from formfixer.utils.configure_logging import configure_logger
from formfixer.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def to_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


def _read_html(path: str) -> Optional[str]:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        print(f"❌ Could not read {path}: {e}", file=sys.stderr)
        return None


def handle_analyze(args: argparse.Namespace) -> int:
    """Analyzes one or more HTML files. A single file without --out prints JSON to stdout."""
    if len(args.files) == 1 and not args.out:
        html = _read_html(args.files[0])
        if html is None:
            return 1
        try:
            result = FormController().analyze(html)
        except FormFixerError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1
        print(to_json(result.to_dict()))
        return 1 if args.strict and result.errors else 0

    controller = FormController()
    pbar = tqdm(total=len(args.files), desc="Analyzing", unit="file")

    def progress_update(current, total):
        pbar.n = current
        pbar.refresh()

    results = controller.analyze_batch(args.files, workers=args.workers, progress_callback=progress_update)
    pbar.close()

    out_dir = PathUtils.ensure_dir_exists(Path(args.out)) if args.out else None
    failed = 0
    total_errors = 0
    total_warnings = 0

    for item in results:
        if "error" in item:
            failed += 1
            print(f"❌ {item['path']}: {item['error']}", file=sys.stderr)
            continue

        report = item["report"]
        total_errors += sum(1 for f in report if f["type"] == "error")
        total_warnings += sum(1 for f in report if f["type"] == "warning")

        if out_dir:
            stem = Path(item["path"]).stem
            (out_dir / f"{stem}.fixed.html").write_text(item["fixedHtml"], encoding="utf-8")
            (out_dir / f"{stem}.report.json").write_text(
                to_json({"report": report, "schema": item["schema"]}), encoding="utf-8"
            )
        else:
            print(to_json(item))

    print("\n" + "=" * 60)
    print("📊 ANALYSIS SUMMARY")
    print("=" * 60)
    print(f"Files analyzed: {len(results) - failed}/{len(results)}")
    print(f"Errors:         {total_errors}")
    print(f"Warnings:       {total_warnings}")
    if out_dir:
        print(f"Output:         {out_dir}")

    if failed:
        return 1
    return 1 if args.strict and total_errors else 0


def handle_schema(args: argparse.Namespace) -> int:
    html = _read_html(args.file)
    if html is None:
        return 1
    try:
        schema = FormController().derive_schema(html)
    except FormFixerError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    print(to_json({"schema": schema.to_dict()}))
    return 0


def handle_serve(args: argparse.Namespace) -> int:
    # Flask is only imported for the serve command
    from formfixer.server.app import run_server
    run_server(args.host, args.port, args.debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="formfixer", description="Audit and repair HTML forms")
    parser.add_argument("--log-level", default=None, help="Overrides debug.level from settings.json")
    parser.add_argument("--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
                        help="Override a settings.json value, e.g. --set batch.workers=2")
    sub = parser.add_subparsers(dest="command", required=True)

    p_analyze = sub.add_parser("analyze", help="Report and fix missing required/label issues")
    p_analyze.add_argument("files", nargs="+", help="HTML files to analyze")
    p_analyze.add_argument("--out", help="Directory for <name>.fixed.html and <name>.report.json")
    p_analyze.add_argument("--workers", type=int, default=None, help="Parallel worker processes")
    p_analyze.add_argument("--strict", action="store_true", help="Exit with 1 when any error finding is reported")
    p_analyze.set_defaults(handler=handle_analyze)

    p_schema = sub.add_parser("schema", help="Derive a JSON Schema from the form controls")
    p_schema.add_argument("file", help="HTML file")
    p_schema.set_defaults(handler=handle_schema)

    p_serve = sub.add_parser("serve", help="Start the HTTP API")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.add_argument("--debug", action="store_true")
    p_serve.set_defaults(handler=handle_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = list(args.overrides)
    if args.log_level:
        overrides.append(f"debug.level={args.log_level}")
    try:
        config_manager.apply_overrides(overrides)
    except ValueError as e:
        parser.error(str(e))

    configure_logger(
        config_manager.get_nested("debug.level", "INFO"),
        silenced_loggers=config_manager.get_nested("debug.silenced", {}),
    )
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
