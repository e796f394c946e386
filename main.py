import sys
import os
import json
import time
import logging
import argparse
from datetime import datetime
from pathlib import Path

# Inject the snapshot-checker directory into sys.path
# so the sub-packages (checker, archive, detection) resolve without installation.
sys.path.append(os.path.join(os.path.dirname(__file__), "snapshot-checker"))

from checker.config import REPORT_DIR, SIMILARITY_THRESHOLD
from checker.logger import setup_logger, attach_log_file, route_console
from archive.fetcher import fetch_page, PageFetchError
from archive.url_utils import is_supported_url
from archive.wayback import WaybackClient, ArchiveError
from detection.engine import SnapshotComparator
from report_generator import format_summary, format_blocks, generate_html_report

logger = setup_logger("checker.session")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNSUPPORTED = 2


def _read_file(path):
    return Path(path).read_text(encoding="utf-8", errors="replace")


class CompareSession:
    """
    One CLI run: resolve both markups, compare, report.
    Collaborators are injectable so the flow can run without network.
    """

    def __init__(self, args, client=None, fetcher=fetch_page):
        self.args = args
        self.client = client or WaybackClient()
        self.fetcher = fetcher
        self.archive_url = ""
        self.start_time = time.time()
        policy = {"thresholds": {"similarity": args.threshold}}
        self.comparator = SnapshotComparator(policy=policy)

    def notice(self, message):
        """Human-readable side messages; kept off stdout when it carries JSON."""
        print(message, file=sys.stderr if self.args.json else sys.stdout)

    def current_html(self):
        if self.args.current_file:
            logger.info(f"[SESSION] Reading current markup from {self.args.current_file}")
            return _read_file(self.args.current_file)
        return self.fetcher(self.args.url).html

    def archived_html(self):
        """Archived markup, or None when the archive has no capture."""
        if self.args.archived_file:
            logger.info(f"[SESSION] Reading archived markup from {self.args.archived_file}")
            self.archive_url = self.args.archived_file
            return _read_file(self.args.archived_file)

        if self.args.archive_url:
            self.archive_url = self.args.archive_url
            return self.client.fetch_snapshot_html(self.args.archive_url)

        snapshot = self.client.find_closest(self.args.url, timestamp=self.args.timestamp)
        if snapshot is None:
            self.notice("No archived version found in Wayback Machine.")
            return None
        self.archive_url = snapshot.archive_url
        return self.client.fetch_snapshot_html(snapshot)

    def list_captures(self):
        try:
            snapshots = self.client.list_snapshots(
                self.args.url,
                limit=self.args.limit,
                from_ts=self.args.from_ts,
                to_ts=self.args.to_ts,
            )
        except ArchiveError as e:
            logger.error(f"[SESSION] {e}")
            self.notice(f"❌ Error: {e}")
            return EXIT_FAILED

        if self.args.json:
            rows = [
                {"timestamp": s.timestamp, "archiveUrl": s.archive_url, "status": s.status}
                for s in snapshots
            ]
            print(json.dumps(rows, indent=2))
            return EXIT_OK

        print("\n==============================")
        print("WAYBACK CAPTURES")
        print("==============================")
        print(f"Page:             {self.args.url}")
        print(f"Captures:         {len(snapshots)}")
        print("==============================")
        for s in snapshots:
            print(f"{s.timestamp}  {s.archive_url}")
        return EXIT_OK

    def run(self):
        if self.args.list:
            return self.list_captures()

        try:
            current = self.current_html()
            archived = self.archived_html()
        except (PageFetchError, ArchiveError, OSError) as e:
            logger.error(f"[SESSION] {e}")
            self.notice(f"❌ Error: {e}")
            return EXIT_FAILED

        result = self.comparator.compare(current, archived)
        blocks = self.comparator.blocks(result)

        if self.args.json:
            payload = result.to_dict()
            payload["blocks"] = [b.to_dict() for b in blocks]
            print(json.dumps(payload, indent=2, ensure_ascii=False))
        else:
            self._print_summary(result, blocks)

        if self.args.html:
            prefix = datetime.now().strftime("compare_%Y%m%d_%H%M%S")
            path = generate_html_report(
                url=self.args.url,
                result=result,
                blocks=blocks,
                out_dir=Path(self.args.report_dir),
                file_prefix=prefix,
                archive_url=self.archive_url,
            )
            self.notice(f"\n(HTML report: {path})")

        return EXIT_OK

    def _print_summary(self, result, blocks):
        duration = time.time() - self.start_time
        print("\n==============================")
        print("SNAPSHOT COMPARISON SUMMARY")
        print("==============================")
        print(f"Page:             {self.args.url}")
        print(f"Archived copy:    {self.archive_url or '-'}")
        print(f"Duration:         {duration:.2f} seconds")
        print(format_summary(result))
        print("==============================\n")
        if blocks:
            print(format_blocks(blocks))


def build_parser():
    parser = argparse.ArgumentParser(
        description="Compare a page's article text against its Wayback Machine snapshot"
    )
    parser.add_argument("url", help="Page URL")
    parser.add_argument("--timestamp", help="Prefer the capture closest to YYYYMMDDhhmmss")
    parser.add_argument("--archive-url", help="Compare against this archived URL instead of looking one up")
    parser.add_argument("--current-file", help="Read current markup from a file instead of fetching")
    parser.add_argument("--archived-file", help="Read archived markup from a file instead of fetching")
    parser.add_argument("--threshold", type=float, default=SIMILARITY_THRESHOLD, help="Similarity below this counts as changed")
    parser.add_argument("--report-dir", default=str(REPORT_DIR), help="Directory for HTML reports")
    parser.add_argument("--html", action="store_true", help="Write an HTML report")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--list", action="store_true", help="List successful captures instead of comparing")
    parser.add_argument("--limit", type=int, default=50, help="Captures to list; negative for the most recent")
    parser.add_argument("--from", dest="from_ts", help="List captures from this timestamp prefix")
    parser.add_argument("--to", dest="to_ts", help="List captures up to this timestamp prefix")
    parser.add_argument("--any-site", action="store_true", help="Allow URLs outside the supported domains")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.log_file:
        attach_log_file(args.log_file)
    if args.verbose:
        logging.getLogger("checker").setLevel(logging.DEBUG)
    if args.json:
        route_console(sys.stderr)

    if not args.any_site and not is_supported_url(args.url):
        print("⚠️ Please pass a Wikipedia page URL (or use --any-site).")
        return EXIT_UNSUPPORTED

    return CompareSession(args).run()


if __name__ == "__main__":
    sys.exit(main())
