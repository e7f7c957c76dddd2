from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from tomcat_buildpack.lib.command import CmdResult
from tomcat_buildpack.main import build_context


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    monkeypatch.delenv("JBP_CONFIG_TOMCAT", raising=False)
    monkeypatch.delenv("JBP_LOG_LEVEL", raising=False)


@pytest.fixture
def reset_logging():
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    for attr in ("_tomcat_buildpack_configured", "_tomcat_buildpack_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


@pytest.fixture
def repository(tmp_path):
    """Factory for a file:// repository listing the given Tomcat versions."""

    repo = tmp_path / "repository"

    def make(*versions: str, archive: bytes | None = None) -> str:
        repo.mkdir(exist_ok=True)
        index = {}
        for v in versions:
            path = repo / f"apache-tomcat-{v}.tar.gz"
            path.write_bytes(archive if archive is not None else f"tomcat {v}".encode())
            index[v] = path.as_uri()
        (repo / "index.yml").write_text(yaml.safe_dump(index), encoding="utf-8")
        return repo.as_uri()

    return make


@pytest.fixture
def app_dir(tmp_path) -> Path:
    d = tmp_path / "app"
    (d / "WEB-INF").mkdir(parents=True)
    (d / "WEB-INF" / "web.xml").write_text("<web-app/>\n", encoding="utf-8")
    (d / "index.html").write_text("<html/>\n", encoding="utf-8")
    return d


@pytest.fixture
def config_file(tmp_path, repository):
    def make(version: str = "8.0.+", versions=("7.0.59", "8.0.21"), archive: bytes | None = None, **extra) -> str:
        raw = {"version": version, "repository_root": repository(*versions, archive=archive), **extra}
        p = tmp_path / "tomcat.yml"
        p.write_text(yaml.safe_dump(raw), encoding="utf-8")
        return str(p)

    return make


@pytest.fixture
def make_context(tmp_path, app_dir, config_file):
    def make(**config):
        return build_context(
            build_dir=str(app_dir),
            cache_dir=str(tmp_path / "cache"),
            config_path=config_file(**config),
        )

    return make


class FakeTar:
    """Stands in for run_cmd: records argv and lays out a bare Tomcat tree."""

    def __init__(self):
        self.calls: list[list[str]] = []
        self.with_datasource = False
        self.error: Exception | None = None

    def __call__(self, argv, **kwargs) -> CmdResult:
        self.calls.append(list(argv))
        if self.error is not None:
            raise self.error

        target = Path(argv[argv.index("-C") + 1])
        (target / "conf").mkdir(parents=True, exist_ok=True)
        (target / "lib").mkdir(exist_ok=True)
        if self.with_datasource:
            (target / "lib" / "tomcat-jdbc.jar").write_bytes(b"jar")
        return CmdResult(argv=list(argv), returncode=0, output="")


@pytest.fixture
def fake_tar(monkeypatch) -> FakeTar:
    fake = FakeTar()
    monkeypatch.setattr("tomcat_buildpack.tomcat_instance.run_cmd", fake)
    return fake
