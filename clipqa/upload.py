"""
Bulk Video Upload
Reads video records from a CSV file and registers each one through the API.

Usage:
    clipqa-upload videos.csv http://localhost:8000/api <token>

CSV format:
    title,url,duration_seconds
    "Introduction to Physics","https://youtube.com/watch?v=abc123",300
"""

import argparse
import asyncio
import csv
import json
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

import aiohttp

from .utils.logger import get_logger, setup_logger

logger = get_logger()

REQUIRED_COLUMNS = ("title", "url", "duration_seconds")


@dataclass
class VideoRecord:
    """One CSV row"""
    title: str
    url: str
    duration_seconds: str


@dataclass
class UploadResult:
    """Outcome of uploading a single video"""
    title: str
    success: bool
    clips_generated: int = 0
    error_message: Optional[str] = None


@dataclass
class UploadSummary:
    """Totals for a whole run"""
    successful: int = 0
    failed: int = 0
    total_clips: int = 0
    results: List[UploadResult] = field(default_factory=list)

    def add(self, result: UploadResult):
        self.results.append(result)
        if result.success:
            self.successful += 1
            self.total_clips += result.clips_generated
        else:
            self.failed += 1


def read_video_records(csv_path: Path) -> Tuple[List[VideoRecord], int]:
    """
    Parse the upload CSV

    Rows missing any required column are skipped with a warning.

    Returns:
        (records, skipped row count)
    """
    records: List[VideoRecord] = []
    skipped = 0
    with open(csv_path, newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            values = {column: (row.get(column) or "").strip() for column in REQUIRED_COLUMNS}
            if not all(values.values()):
                logger.warning(f"Skipping invalid row: {row}")
                skipped += 1
                continue
            records.append(VideoRecord(**values))
    return records, skipped


async def upload_video(session: aiohttp.ClientSession, api_url: str, record: VideoRecord) -> UploadResult:
    """POST one video; failures are reported in the result, never raised."""
    logger.info(f"Uploading: {record.title}")

    try:
        duration = int(record.duration_seconds)
    except ValueError:
        logger.error(f"Failed: {record.title} - duration '{record.duration_seconds}' is not a whole number")
        return UploadResult(title=record.title, success=False, error_message="Invalid duration")

    payload = {"title": record.title, "url": record.url, "duration_seconds": duration}
    try:
        async with session.post(f"{api_url.rstrip('/')}/videos", json=payload) as response:
            body = await response.json(content_type=None)
            if response.status >= 400:
                message = (body or {}).get("message") or f"HTTP {response.status}"
                logger.error(f"Failed: {record.title} - {message}")
                return UploadResult(title=record.title, success=False, error_message=message)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.error(f"Failed: {record.title} - {e}")
        return UploadResult(title=record.title, success=False, error_message=str(e))

    clips = (body or {}).get("clips_generated", 0)
    logger.info(f"Success: {record.title} - {clips} clips generated")
    return UploadResult(title=record.title, success=True, clips_generated=clips)


async def run_upload(
    records: List[VideoRecord],
    api_url: str,
    token: str,
    delay: float = 1.0,
    session: Optional[aiohttp.ClientSession] = None,
) -> UploadSummary:
    """Upload records one at a time, pausing between requests."""
    summary = UploadSummary()
    owns_session = session is None
    if owns_session:
        session = aiohttp.ClientSession(headers={"Authorization": f"Bearer {token}"})

    try:
        for index, record in enumerate(records):
            summary.add(await upload_video(session, api_url, record))
            if delay and index < len(records) - 1:
                await asyncio.sleep(delay)
    finally:
        if owns_session:
            await session.close()

    return summary


def write_report(summary: UploadSummary, csv_path: Path, api_url: str, report_dir: Path) -> Path:
    """Dump the run to upload-report-<timestamp>.json"""
    now = datetime.now(timezone.utc)
    report_dir.mkdir(parents=True, exist_ok=True)
    report_path = report_dir / f"upload-report-{int(now.timestamp() * 1000)}.json"
    report = {
        "timestamp": now.isoformat(),
        "csv_file": str(csv_path),
        "api_url": api_url,
        "results": {
            "successful": summary.successful,
            "failed": summary.failed,
            "total_clips": summary.total_clips,
        },
        "videos": [asdict(result) for result in summary.results],
    }
    report_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    return report_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clipqa-upload", description="Bulk upload videos from a CSV file")
    parser.add_argument("csv_file", type=Path, help="CSV with title,url,duration_seconds columns")
    parser.add_argument("api_url", help="API base URL, e.g. http://localhost:8000/api")
    parser.add_argument("token", help="Bearer token of the uploading user")
    parser.add_argument("--delay", type=float, default=1.0, help="Seconds to wait between uploads")
    parser.add_argument("--report-dir", type=Path, default=Path("."), help="Where to write the JSON report")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger()

    if not args.csv_file.exists():
        logger.error(f"CSV file '{args.csv_file}' not found")
        return 1

    logger.info("ClipQA - Bulk Video Upload")
    logger.info(f"Reading CSV file: {args.csv_file}")
    logger.info(f"API URL: {args.api_url}")

    records, skipped = read_video_records(args.csv_file)
    logger.info(f"Found {len(records)} videos to upload ({skipped} rows skipped)")

    summary = asyncio.run(run_upload(records, args.api_url, args.token, delay=args.delay))

    logger.info("Upload Summary")
    logger.info(f"Total videos processed: {len(records)}")
    logger.info(f"Successful uploads: {summary.successful}")
    logger.info(f"Failed uploads: {summary.failed}")
    logger.info(f"Total clips generated: {summary.total_clips}")

    report_path = write_report(summary, args.csv_file, args.api_url, args.report_dir)
    logger.info(f"Detailed report saved to: {report_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
