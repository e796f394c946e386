#!/usr/bin/env python3
from datetime import datetime
from html import escape
from pathlib import Path
from typing import List

from checker.logger import setup_logger
from detection.models import ChunkType, ComparisonResult, DiffBlock
from detection.differ import merge_runs

logger = setup_logger("checker.report")

# Longest stable stretch shown in full in console output (words)
STABLE_PREVIEW_WORDS = 12

RULE = "-" * 60


# ============================================================
# CONSOLE RENDERING
# ============================================================

def format_summary(result: ComparisonResult) -> str:
    if result.changed:
        lines = ["⚠️ Changes Detected", result.reason]
        lines.append(f"Differences: {result.diff_count if result.diff_count is not None else 'multiple'}")
    else:
        lines = ["✓ No Significant Changes", result.reason]
    if result.similarity is not None:
        lines.append(f"Similarity: {result.similarity}")
    return "\n".join(lines)


def _chunk_text(chunk) -> str:
    if chunk.type is ChunkType.REMOVED:
        return f"[-{chunk.text}-]"
    if chunk.type is ChunkType.ADDED:
        return f"{{+{chunk.text}+}}"
    return chunk.text


def _block_words(block: DiffBlock) -> List[str]:
    return [_chunk_text(c) for c in _merged(block)]


def _merged(block: DiffBlock):
    # Blocks are word-granular; join same-type neighbours for display
    return merge_runs(list(block.chunks))


def format_blocks(blocks: List[DiffBlock], preview_words: int = STABLE_PREVIEW_WORDS) -> str:
    """
    Plain-text rendering: [-removed-] {+added+}.
    Stable blocks longer than preview_words are abbreviated.
    """
    out = []
    for block in blocks:
        if block.has_changes:
            out.append(" ".join(_block_words(block)))
            continue
        words = [c.text for c in block.chunks]
        if len(words) > preview_words:
            half = preview_words // 2
            skipped = len(words) - 2 * half
            text = " ".join(words[:half]) + f" ... ({skipped} unchanged words) ... " + " ".join(words[-half:])
        else:
            text = " ".join(words)
        out.append(text)
    return f"\n{RULE}\n".join(out)


# ============================================================
# HTML EVIDENCE REPORT
# ============================================================

def _render_block(block: DiffBlock) -> str:
    parts = []
    for chunk in _merged(block):
        text = escape(chunk.text)
        if chunk.type is ChunkType.REMOVED:
            parts.append(f"<span class='del'>{text}</span>")
        elif chunk.type is ChunkType.ADDED:
            parts.append(f"<span class='add'>{text}</span>")
        else:
            parts.append(text)
    cls = "block change" if block.has_changes else "block ctx"
    return f"<div class='{cls}'>{' '.join(parts)}</div>"


def generate_html_report(
    *,
    url: str,
    result: ComparisonResult,
    blocks: List[DiffBlock],
    out_dir: Path,
    file_prefix: str,
    archive_url: str = "",
    checked_at: str = "",
) -> str:
    """
    Writes ONE self-contained HTML report for a comparison and returns its path.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if blocks:
        body = "\n".join(_render_block(b) for b in blocks)
    elif result.changed:
        body = "<div class='no-changes'>No word-level diff available for this result.</div>"
    else:
        body = "<div class='no-changes'>No significant changes detected in the article text.</div>"

    verdict = "Changes Detected" if result.changed else "No Significant Changes"
    verdict_cls = "changed" if result.changed else "same"

    html_page = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>Snapshot diff: {escape(url)}</title>
    <style>
        body {{ font-family: sans-serif; margin: 0; background: #f8fafc; color: #0f172a; }}
        header {{ padding: 20px; background: #fff; border-bottom: 1px solid #e2e8f0; }}
        .cards {{ display: flex; gap: 16px; flex-wrap: wrap; }}
        .card {{ padding: 12px 16px; border: 1px solid #e2e8f0; border-radius: 8px; background: #fff; }}
        .card-label {{ font-size: 12px; color: #64748b; }}
        .card-value {{ font-weight: 700; word-break: break-all; }}
        .changed {{ color: #b91c1c; }}
        .same {{ color: #15803d; }}
        .legend {{ margin: 16px 20px; font-size: 12px; }}
        .block {{ margin: 8px 20px; padding: 10px; border-radius: 6px; line-height: 1.6; }}
        .block.change {{ background: #fff; border-left: 4px solid #facc15; }}
        .block.ctx {{ color: #64748b; }}
        .add {{ background: #d1fae5; color: #064e3b; }}
        .del {{ background: #fee2e2; color: #7f1d1d; text-decoration: line-through; }}
        .no-changes {{ padding: 60px; text-align: center; color: #64748b; font-style: italic; }}
    </style>
</head>
<body>
    <header>
        <h1 class="{verdict_cls}">{verdict}</h1>
        <div class="cards">
            <div class="card"><div class="card-label">Page</div><div class="card-value">{escape(url)}</div></div>
            <div class="card"><div class="card-label">Archived copy</div><div class="card-value">{escape(archive_url or "-")}</div></div>
            <div class="card"><div class="card-label">Similarity</div><div class="card-value">{escape(result.similarity or "n/a")}</div></div>
            <div class="card"><div class="card-label">Checked at</div><div class="card-value">{escape(checked_at or datetime.now().strftime("%d-%m-%Y %H:%M:%S"))}</div></div>
        </div>
        <p>{escape(result.reason)}</p>
    </header>
    <div class="legend"><span class="add">added since archive</span> &nbsp; <span class="del">removed since archive</span></div>
{body}
</body>
</html>
"""

    out_path = out_dir / f"{file_prefix}.html"
    out_path.write_text(html_page, encoding="utf-8")
    logger.info(f"[REPORT] Wrote {out_path}")

    return str(out_path)
