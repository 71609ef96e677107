"""Tests for the fixed-interval section poller."""
import pytest

from hotsection.config import DEFAULT_CONFIG, _merge_configs
from hotsection.parsers import create_section
from hotsection.poller import SectionPoller, format_contents


class _Reloader:
    def __init__(self, *results):
        self.results = list(results)

    def poll(self):
        result = self.results.pop(0) if self.results else None
        if isinstance(result, Exception):
            raise result
        return result


def _config(**watch):
    return _merge_configs(DEFAULT_CONFIG, {"watch": watch, "poll": {"interval_s": 0.01}})


def test_poll_once_reports_reload(tmp_path, capsys):
    data = tmp_path / "data.txt"
    data.write_text(":Section1\n1\n\n:Section2\n2\n", encoding="utf-8")
    poller = SectionPoller(create_section(data), interval_s=0.0)

    assert poller.poll_once() is True
    out = capsys.readouterr().out
    assert "[INFO] File reloaded: {'Section1': 1, 'Section2': 2}" in out

    assert poller.poll_once() is False
    assert capsys.readouterr().out == ""


def test_poll_once_reports_errors_and_keeps_going(tmp_path, capsys):
    data = tmp_path / "data.txt"
    poller = SectionPoller(create_section(data), interval_s=0.0)

    assert poller.poll_once() is False
    assert "[WARN]" in capsys.readouterr().out

    data.write_text(":A\n3\n", encoding="utf-8")
    assert poller.poll_once() is True
    assert poller.section["A"] == 3


def test_poll_once_calls_on_reload(tmp_path):
    data = tmp_path / "data.txt"
    data.write_text(":A\n1\n", encoding="utf-8")
    seen = []
    poller = SectionPoller(create_section(data), on_reload=lambda s: seen.append(dict(s.contents)))

    poller.poll_once()
    poller.poll_once()

    assert seen == [{"A": 1}]


def test_run_stops_when_requested(tmp_path, capsys):
    data = tmp_path / "data.txt"
    data.write_text(":A\n1\n", encoding="utf-8")
    poller = SectionPoller(create_section(data), interval_s=0.01)
    poller.on_reload = lambda section: poller.stop()

    poller.run()

    out = capsys.readouterr().out
    assert f"[INFO] Watching {data} every 0.01s" in out
    assert poller.section["A"] == 1


def test_apply_config_keeps_section_when_watch_settings_unchanged(tmp_path):
    data = tmp_path / "data.txt"
    section = create_section(data, ":", "uint")
    poller = SectionPoller(section, interval_s=0.5, parser_name="uint")

    poller.apply_config(_config(path=str(data), delimiter=":", parser="uint"))

    assert poller.section is section
    assert poller.interval_s == 0.01


def test_apply_config_rebuilds_section_on_watch_change(tmp_path, capsys):
    data = tmp_path / "data.txt"
    data.write_text("#a\nx\n", encoding="utf-8")
    section = create_section(data, ":", "uint")
    poller = SectionPoller(section, parser_name="uint")

    poller.apply_config(_config(path=str(data), delimiter="#", parser="lines"))

    assert poller.section is not section
    assert poller.parser_name == "lines"
    assert "Now watching" in capsys.readouterr().out
    poller.section.refresh()
    assert poller.section["a"] == ["x"]


def test_run_follows_config_reload(tmp_path, capsys):
    old = tmp_path / "old.txt"
    new = tmp_path / "new.txt"
    new.write_text(":B\n2\n", encoding="utf-8")
    reloader = _Reloader(_config(path=str(new), delimiter=":", parser="uint"))
    poller = SectionPoller(
        create_section(old), parser_name="uint", config_reloader=reloader
    )
    poller.on_reload = lambda section: poller.stop()

    poller.run()

    assert poller.section.path == new
    assert poller.section["B"] == 2
    assert "[INFO] Hot-reloaded config: watch/poll" in capsys.readouterr().out


def test_config_reload_error_is_reported(tmp_path, capsys):
    data = tmp_path / "data.txt"
    poller = SectionPoller(
        create_section(data), config_reloader=_Reloader(ValueError("broken toml"))
    )

    poller._maybe_reload_runtime_config()

    assert "[WARN] Config hot-reload skipped: broken toml" in capsys.readouterr().out
    assert poller.section.path == data


def test_format_contents_lists_sections(tmp_path):
    data = tmp_path / "data.txt"
    data.write_text(":A\nx\n", encoding="utf-8")
    section = create_section(data, ":", "lines")
    section.refresh()
    assert format_contents(section) == "{'A': ['x']}"


def test_poll_once_reports_unreadable_metadata(tmp_path, capsys):
    poller = SectionPoller(create_section(tmp_path / ("x" * 300)), interval_s=0.0)

    assert poller.poll_once() is False
    assert "[WARN] Couldn't get metadata" in capsys.readouterr().out


def test_apply_config_rejected_watch_settings_change_nothing(tmp_path):
    data = tmp_path / "data.txt"
    section = create_section(data, ":", "uint")
    poller = SectionPoller(section, interval_s=0.5, parser_name="uint")

    with pytest.raises(ValueError, match="Unknown parser"):
        poller.apply_config(_config(path=str(data), delimiter=":", parser="csv"))

    assert poller.section is section
    assert poller.parser_name == "uint"
    assert poller.interval_s == 0.5


def test_rejected_config_is_reported_without_partial_apply(tmp_path, capsys):
    data = tmp_path / "data.txt"
    poller = SectionPoller(
        create_section(data),
        interval_s=0.5,
        parser_name="uint",
        config_reloader=_Reloader(_config(path=str(data), delimiter="", parser="uint")),
    )

    poller._maybe_reload_runtime_config()

    assert "[WARN] Config hot-reload skipped" in capsys.readouterr().out
    assert poller.interval_s == 0.5
    assert poller.section.delimiter == ":"
