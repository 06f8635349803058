"""UpdateService 测试 - 清单读取 → 解析 → 差异 → 写回"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from conftest import JENKINS, StubFetcher, rec

from pluginsync.core.config import Config
from pluginsync.core.exceptions import UnexpectedStatusError
from pluginsync.core.plugin.resolver import ResolverContext
from pluginsync.services.update_service import UpdateRequest, UpdateService

CATALOG = {
    ("foo", ""): rec("foo", "2.0", jenkins="2.200"),
    ("foo", "2.0"): rec("foo", "2.0", jenkins="2.200"),
    ("bar", "1.5"): rec("bar", "1.5"),
    ("qux", ""): rec("qux", "1.2", deps={"dep": "3.0", "structs": "1.20"}, title="Qux: Tools"),
    ("qux", "1.2"): rec("qux", "1.2", deps={"dep": "3.0", "structs": "1.20"}, title="Qux: Tools"),
    ("dep", "3.0"): rec("dep", "3.0", jenkins="9.9.9"),
    ("structs", "1.20"): rec("structs", "1.20"),
}

SOURCE = """\
jenkins_plugins:
- name: foo
  version: "1.0"
- name: bar
  version: "1.5"
  version_lock: true
- name: baz
  version: "1.0"
- name: qux
  version: "1.1"
"""


def _service(errors: dict | None = None) -> UpdateService:
    def factory(cfg: Config) -> ResolverContext:
        fetcher = StubFetcher(dict(CATALOG), cfg.jenkins_version, errors)
        return ResolverContext(cfg.jenkins_version, fetcher)  # type: ignore[arg-type]

    return UpdateService(config=Config(jenkins_version=JENKINS, max_workers=4), context_factory=factory)


@pytest.fixture()
def src(tmp_path: Path) -> Path:
    path = tmp_path / "jenkins_plugins.yml"
    path.write_text(SOURCE, encoding="utf-8")
    return path


class TestExecute:
    def test_diff_lines(self, src: Path, tmp_path: Path) -> None:
        result = _service().execute(UpdateRequest(src=str(src), dest=str(tmp_path / "out.yml")))
        assert result.render() == [
            "bar: o 1.5",
            "baz: 1.0",
            "foo: 1.0 -> 2.0",
            "qux: 1.1 -> 1.2",
            "structs: + 1.20",
        ]
        assert "dep" not in result.resolved
        assert result.summary["total"] == 5

    def test_writes_updated_list(self, src: Path, tmp_path: Path) -> None:
        dest = tmp_path / "out.yml"
        result = _service().execute(UpdateRequest(src=str(src), dest=str(dest)))
        assert result.written

        text = dest.read_text(encoding="utf-8")
        assert 'title: "Qux: Tools"' in text
        data = yaml.safe_load(text)
        assert [p["name"] for p in data["jenkins_plugins"]] == ["bar", "baz", "foo", "qux", "structs"]
        assert data["jenkins_plugins"][0]["version_lock"] is True
        assert "version_lock" not in data["jenkins_plugins"][2]

    def test_locked_rerun_is_idempotent(self, src: Path, tmp_path: Path) -> None:
        first = tmp_path / "first.yml"
        _service().execute(UpdateRequest(src=str(src), dest=str(first)))

        data = yaml.safe_load(first.read_text(encoding="utf-8"))
        for entry in data["jenkins_plugins"]:
            entry["version_lock"] = True
        first.write_text(yaml.safe_dump(data), encoding="utf-8")

        result = _service().execute(UpdateRequest(src=str(first), dest=str(tmp_path / "second.yml")))
        assert all(line.kind in ("locked", "unchanged") for line in result.lines)
        assert [line.name for line in result.lines] == ["bar", "baz", "foo", "qux", "structs"]

    def test_unquoted_locked_version_kept_exactly(self, tmp_path: Path) -> None:
        src = tmp_path / "plugins.yml"
        src.write_text(
            "jenkins_plugins:\n"
            "- name: workflow-cps\n"
            "  version: 2.80\n"
            "  version_lock: true\n",
            encoding="utf-8",
        )
        dest = tmp_path / "out.yml"
        result = _service().execute(UpdateRequest(src=str(src), dest=str(dest)))
        assert result.render() == ["workflow-cps: o 2.80"]

        data = yaml.safe_load(dest.read_text(encoding="utf-8"))
        assert data["jenkins_plugins"][0]["version"] == "2.80"

    def test_dry_run_writes_nothing(self, src: Path, tmp_path: Path) -> None:
        dest = tmp_path / "out.yml"
        result = _service().execute(UpdateRequest(src=str(src), dest=str(dest), dry_run=True))
        assert not result.written
        assert not dest.exists()
        assert result.lines

    def test_fatal_error_writes_nothing(self, src: Path, tmp_path: Path) -> None:
        dest = tmp_path / "out.yml"
        svc = _service(errors={("foo", ""): UnexpectedStatusError(500, "https://x/foo.hpi")})
        with pytest.raises(UnexpectedStatusError):
            svc.execute(UpdateRequest(src=str(src), dest=str(dest)))
        assert not dest.exists()

    def test_request_overrides_config(self, src: Path, tmp_path: Path) -> None:
        # 目标平台提升后 dep 可安装
        result = _service().execute(UpdateRequest(
            src=str(src), dest=str(tmp_path / "out.yml"), jenkins_version="9.9.9",
        ))
        assert result.resolved["dep"].version == "3.0"
