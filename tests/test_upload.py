import json

from clipqa.upload import UploadSummary, VideoRecord, read_video_records, run_upload, write_report


class FakeResponse:
    def __init__(self, status, body):
        self.status = status
        self._body = body

    async def json(self, content_type=None):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession; answers by video title."""

    def __init__(self, responses):
        self.responses = responses
        self.posted = []

    def post(self, url, json=None):
        self.posted.append((url, json))
        return FakeResponse(*self.responses[json["title"]])


def test_read_video_records_skips_incomplete_rows(tmp_path):
    csv_path = tmp_path / "videos.csv"
    csv_path.write_text(
        "title,url,duration_seconds\n"
        '"Intro to Physics","https://example.com/p",300\n'
        '"No URL",,120\n'
        ' Chemistry , https://example.com/c , 420 \n',
        encoding="utf-8",
    )

    records, skipped = read_video_records(csv_path)

    assert skipped == 1
    assert records == [
        VideoRecord("Intro to Physics", "https://example.com/p", "300"),
        VideoRecord("Chemistry", "https://example.com/c", "420"),
    ]


async def test_run_upload_reports_each_record():
    session = FakeSession({
        "Good": (201, {"clips_generated": 291}),
        "Too long": (400, {"error": "VALIDATION_ERROR", "message": "Video cannot be longer than 1020 seconds"}),
    })
    records = [
        VideoRecord("Good", "https://example.com/g", "300"),
        VideoRecord("Too long", "https://example.com/t", "5000"),
        VideoRecord("Not a number", "https://example.com/n", "ten"),
    ]

    summary = await run_upload(records, "http://api.test/api/", "token", delay=0, session=session)

    assert summary.successful == 1
    assert summary.failed == 2
    assert summary.total_clips == 291
    assert summary.results[1].error_message == "Video cannot be longer than 1020 seconds"
    assert [url for url, _ in session.posted] == ["http://api.test/api/videos"] * 2
    assert session.posted[0][1]["duration_seconds"] == 300


def test_write_report(tmp_path):
    summary = UploadSummary()
    report_path = write_report(summary, tmp_path / "videos.csv", "http://api.test/api", tmp_path / "reports")

    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report_path.name.startswith("upload-report-")
    assert report["results"] == {"successful": 0, "failed": 0, "total_clips": 0}
    assert report["videos"] == []
