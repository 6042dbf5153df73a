"""Command-line interface for siteprep."""

import argparse
from pathlib import Path
from typing import Iterable, Optional

from .checklist import print_checklist, run_checklist
from .config import SiteConfigError, resolve_site_config
from .discovery import DirectoryNotFound
from .https_rules import ensure_apache_redirect, upgrade_asset_files
from .io_utils import warn
from .pipeline import run_rule_set
from .postdeploy import is_healthy, verify
from .predeploy import is_ready, validate
from .reporting import ScanReport, print_summary, write_reports
from .rule_sets import RULE_SETS
from .security_scan import is_secure, scan
from .seo_files import generate_seo_files


def _finish(report: ScanReport, args: argparse.Namespace) -> None:
    payload = report.to_dict()
    json_path, md_path = write_reports(payload, Path(args.output))
    print_summary(payload)
    print(f"Reports written to {json_path} and {md_path}")


def _handle_rule_set(args: argparse.Namespace) -> int:
    site = resolve_site_config(args.site_config)
    public_dir = Path(args.public)
    report = run_rule_set(RULE_SETS[args.command], public_dir, site)

    if args.command == "https":
        root = public_dir.resolve()
        for outcome in upgrade_asset_files(root, site):
            report.outcomes.append(outcome)
            if outcome.errors:
                report.errors.extend(f"{outcome.filename}: {error}" for error in outcome.errors)
            else:
                report.ok(outcome.filename)
        htaccess = Path(args.config) / "apache" / ".htaccess"
        if ensure_apache_redirect(htaccess):
            print(f"[https] added HTTPS redirect to {htaccess}")
        report.details["htaccess"] = str(htaccess)

    _finish(report, args)
    return 1 if report.errors else 0


def _handle_seo_files(args: argparse.Namespace) -> int:
    site = resolve_site_config(args.site_config)
    report = generate_seo_files(Path(args.public), site)
    _finish(report, args)
    return 0


def _handle_security_scan(args: argparse.Namespace) -> int:
    site = resolve_site_config(args.site_config)
    report = scan(Path(args.public), Path(args.config), site)
    _finish(report, args)
    return 0 if is_secure(report) else 1


def _handle_predeploy(args: argparse.Namespace) -> int:
    site = resolve_site_config(args.site_config)
    report = validate(Path(args.public), Path(args.config), site)
    _finish(report, args)
    return 0 if is_ready(report) else 1


def _handle_postdeploy(args: argparse.Namespace) -> int:
    site = resolve_site_config(args.site_config)
    url = args.url or args.url_option or site.organization.base_url
    report = verify(url, site)
    _finish(report, args)
    return 0 if is_healthy(report) else 1


def _handle_checklist(args: argparse.Namespace) -> int:
    site = resolve_site_config(args.site_config)
    result = run_checklist(
        Path(args.public),
        Path(args.config),
        site,
        url=args.url or args.url_option,
        environment=args.env,
        skip_post=args.skip_post,
        output_dir=Path(args.output),
    )
    print_checklist(result.to_dict())
    return 0 if result.ready_for_deployment else 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--public",
        default="public",
        help="Directory holding the built site (default: ./public).",
    )
    parser.add_argument(
        "--config",
        default="config",
        help="Directory holding apache/.htaccess and nginx/nginx.conf (default: ./config).",
    )
    parser.add_argument(
        "--site-config",
        dest="site_config",
        default=None,
        help="Path to site.yaml (default: config/site.yaml when present).",
    )
    parser.add_argument(
        "--output",
        default="reports",
        help="Directory to write JSON and Markdown reports (default: ./reports).",
    )


def _add_url_arguments(parser: argparse.ArgumentParser, *, help_text: str) -> None:
    parser.add_argument("url", nargs="?", default=None, help=help_text)
    parser.add_argument("--url", dest="url_option", default=None, help=help_text)


RULE_SET_HELP = {
    "seo": "Fix titles, descriptions, canonical links and headings.",
    "social": "Add Open Graph and Twitter card meta tags.",
    "accessibility": "Add skip links, landmarks, alt text and ARIA labels.",
    "responsive": "Add viewport, fluid images, touch targets and table wrappers.",
    "structured-data": "Add JSON-LD structured data.",
    "https": "Upgrade http:// references and add the HTTPS redirect.",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="siteprep",
        description="Production-readiness tooling for a static website",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="siteprep 0.1.0",
        help="Show the siteprep version and exit.",
    )

    subparsers = parser.add_subparsers(dest="command")

    for name, help_text in RULE_SET_HELP.items():
        rule_parser = subparsers.add_parser(name, help=help_text, description=help_text)
        _add_common_arguments(rule_parser)
        rule_parser.set_defaults(func=_handle_rule_set)

    seo_files_parser = subparsers.add_parser(
        "seo-files",
        help="Generate sitemap.xml and robots.txt.",
        description="Write sitemap.xml and robots.txt into the public directory.",
    )
    _add_common_arguments(seo_files_parser)
    seo_files_parser.set_defaults(func=_handle_seo_files)

    security_parser = subparsers.add_parser(
        "security-scan",
        help="Scan the public directory and server config for security issues.",
        description="Read-only security scan; exits non-zero unless the site is secure.",
    )
    _add_common_arguments(security_parser)
    security_parser.set_defaults(func=_handle_security_scan)

    predeploy_parser = subparsers.add_parser(
        "predeploy",
        help="Validate the built site before deployment.",
        description="Check structure, headers, HTTPS, SEO, accessibility and performance.",
    )
    _add_common_arguments(predeploy_parser)
    predeploy_parser.set_defaults(func=_handle_predeploy)

    postdeploy_parser = subparsers.add_parser(
        "postdeploy",
        help="Verify the deployed site over HTTP.",
        description="Run live checks against the deployed site.",
    )
    _add_common_arguments(postdeploy_parser)
    _add_url_arguments(
        postdeploy_parser, help_text="Base URL of the deployed site (default: baseUrl)."
    )
    postdeploy_parser.set_defaults(func=_handle_postdeploy)

    checklist_parser = subparsers.add_parser(
        "checklist",
        help="Run the full deployment checklist.",
        description="Pre-deployment, security and optional post-deployment phases.",
    )
    _add_common_arguments(checklist_parser)
    _add_url_arguments(
        checklist_parser, help_text="Base URL for the post-deployment phase."
    )
    checklist_parser.add_argument(
        "--env",
        default="production",
        help="Environment label recorded in the checklist (default: production).",
    )
    checklist_parser.add_argument(
        "--skip-post",
        dest="skip_post",
        action="store_true",
        help="Skip the post-deployment phase even when a URL is given.",
    )
    checklist_parser.set_defaults(func=_handle_checklist)

    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0
    try:
        return args.func(args)
    except (DirectoryNotFound, SiteConfigError) as exc:
        warn(str(exc))
        return 1


__all__ = ["build_parser", "main"]


if __name__ == "__main__":
    raise SystemExit(main())
