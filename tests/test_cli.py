import json

from newsthumb import cli
from newsthumb.exceptions import FeedFetchError
from newsthumb.models import Article, ThumbnailResult


def _articles():
    return [
        Article(
            rank=1,
            title="Headline",
            source="Wire",
            published="Mon, 19 Oct 2026 08:00:00 GMT",
            description="Summary",
            link="https://a.example/1",
            thumbnail="https://img.example/1.jpg",
        )
    ]


def test_no_arguments_defaults_to_serve():
    args = cli.parse_args([])
    assert args.command == "serve"
    assert args.port == cli.DEFAULT_PORT


def test_bare_flags_go_to_serve():
    args = cli.parse_args(["--port", "8080"])
    assert args.command == "serve"
    assert args.port == 8080


def test_browser_flags_override_config(monkeypatch):
    monkeypatch.delenv("NEWSTHUMB_CONCURRENCY", raising=False)
    args = cli.parse_args(["thumbnails", "https://a.example/1", "--concurrency", "2", "--timeout", "5"])
    config = cli._thumb_config(args)
    assert config.concurrency == 2
    assert config.navigation_timeout == 5.0
    assert config.settle_delay == 2.5
    assert config.browser_per_task is False


def test_fetch_writes_json(monkeypatch, tmp_path, capsys):
    calls = []

    async def fake_scrape(country, category, limit, thumb_config=None):
        calls.append((country, category, limit))
        return _articles()

    monkeypatch.setattr(cli, "scrape_news", fake_scrape)
    output = tmp_path / "news.json"

    code = cli.main(["fetch", "--country", "gb", "--category", "science", "--limit", "3", "--output", str(output)])

    assert code == 0
    assert calls == [("GB", "science", 3)]
    saved = json.loads(output.read_text(encoding="utf-8"))
    assert saved[0]["thumbnail"] == "https://img.example/1.jpg"
    assert "1. Headline" in capsys.readouterr().out


def test_fetch_default_filename(monkeypatch, tmp_path):
    async def fake_scrape(country, category, limit, thumb_config=None):
        return _articles()

    monkeypatch.setattr(cli, "scrape_news", fake_scrape)
    monkeypatch.chdir(tmp_path)

    assert cli.main(["fetch", "--country", "us"]) == 0
    assert (tmp_path / "google_news_US_top.json").exists()


def test_fetch_interactive_prompts(monkeypatch, tmp_path):
    answers = iter(["de", "bogus", "health", "many", "4"])
    monkeypatch.setattr("builtins.input", lambda _prompt: next(answers))
    calls = []

    async def fake_scrape(country, category, limit, thumb_config=None):
        calls.append((country, category, limit))
        return []

    monkeypatch.setattr(cli, "scrape_news", fake_scrape)

    assert cli.main(["fetch", "--interactive", "--output", str(tmp_path / "out.json")]) == 0
    assert calls == [("DE", "health", 4)]


def test_fetch_feed_error_exit_code(monkeypatch, tmp_path):
    async def failing_scrape(*args, **kwargs):
        raise FeedFetchError("upstream down")

    monkeypatch.setattr(cli, "scrape_news", failing_scrape)

    assert cli.main(["fetch", "--output", str(tmp_path / "out.json")]) == 1
    assert not (tmp_path / "out.json").exists()


def test_thumbnails_prints_results(monkeypatch, capsys):
    async def fake_run(urls, config):
        return [ThumbnailResult(url=u, thumbnail=None) for u in urls]

    monkeypatch.setattr(cli, "run_thumbnails", fake_run)

    assert cli.main(["thumbnails", "https://a.example/1"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out == [{"url": "https://a.example/1", "thumbnail": None}]


def test_unusable_timeout_flag_exits_cleanly(monkeypatch):
    called = []

    async def fake_run(urls, config):
        called.append(urls)
        return []

    monkeypatch.setattr(cli, "run_thumbnails", fake_run)

    assert cli.main(["thumbnails", "https://a.example/1", "--timeout", "0"]) == 2
    assert called == []
