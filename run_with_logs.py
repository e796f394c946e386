"""
Runs main.py and keeps a transcript of the session under logs/.

A run only counts as complete when main.py printed a verdict: the summary
banner, the capture listing, or a JSON payload.
"""

import subprocess
import sys
from datetime import datetime
from pathlib import Path

LOG_DIR = Path("logs")

VERDICT_MARKERS = (
    "SNAPSHOT COMPARISON SUMMARY",
    "WAYBACK CAPTURES",
)


def has_verdict(lines):
    for line in lines:
        if any(marker in line for marker in VERDICT_MARKERS):
            return True
        # --json output: an object with a verdict field, or a capture list
        stripped = line.strip()
        if stripped.startswith('"changed":') or stripped.startswith('"archiveUrl":'):
            return True
        if stripped == "[]":
            return True
    return False


def transcript_path(log_dir=LOG_DIR, now=None):
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return Path(log_dir) / f"compare_session_{stamp}.txt"


def run_compare(argv, log_dir=LOG_DIR, popen=subprocess.Popen, echo=sys.stdout):
    """
    Streams main.py output to `echo` and to a transcript file.
    Returns the exit status the wrapper should end with.
    """
    cmd = [sys.executable, "-u", "main.py"] + list(argv)
    log_path = transcript_path(log_dir)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    echo.write(f"Transcript: {log_path}\n")

    seen = []
    process = popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        bufsize=1,
    )
    with log_path.open("w", encoding="utf-8") as log:
        log.write(f"# {' '.join(cmd)}\n\n")
        for line in process.stdout:
            echo.write(line)
            log.write(line)
            log.flush()
            seen.append(line)
        code = process.wait()

        verdict = has_verdict(seen)
        log.write(f"\n# exit code: {code}\n")
        if not verdict:
            log.write("# no verdict printed\n")

    if code != 0:
        echo.write(f"\nCompare exited with status {code}\n")
        return code
    if not verdict:
        echo.write("\nCompare finished without printing a verdict\n")
        return 1
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python run_with_logs.py <url> [main.py options]")
        sys.exit(2)
    sys.exit(run_compare(sys.argv[1:]))
