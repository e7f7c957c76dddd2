from __future__ import annotations

import os

from tomcat_buildpack.droplet import AdditionalLibraries, Application, Droplet, link_to


def test_link_to_uses_relative_targets(tmp_path):
    src = tmp_path / "app" / "index.html"
    src.parent.mkdir()
    src.write_text("hi", encoding="utf-8")
    dest = tmp_path / "sandbox" / "webapps"

    (link,) = link_to([src], dest)

    assert link == dest / "index.html"
    assert os.readlink(link) == os.path.join("..", "..", "app", "index.html")
    assert link.read_text(encoding="utf-8") == "hi"


def test_link_to_replaces_existing_link(tmp_path):
    old = tmp_path / "old" / "a.jar"
    new = tmp_path / "new" / "a.jar"
    for p in (old, new):
        p.parent.mkdir()
        p.write_bytes(p.parent.name.encode())
    dest = tmp_path / "lib"

    link_to([old], dest)
    link_to([new], dest)

    assert (dest / "a.jar").read_bytes() == b"new"


def test_additional_libraries_ignore_duplicates(tmp_path):
    libs = AdditionalLibraries()
    jar = tmp_path / "a.jar"

    libs.append(jar)
    libs.append(jar)
    libs.append(tmp_path / "b.jar")

    assert libs == [jar, tmp_path / "b.jar"]


def test_additional_libraries_link_to(tmp_path):
    jar = tmp_path / "a.jar"
    jar.write_bytes(b"jar")
    libs = AdditionalLibraries()
    libs.append(jar)

    libs.link_to(tmp_path / "WEB-INF" / "lib")

    assert (tmp_path / "WEB-INF" / "lib" / "a.jar").is_symlink()


def test_application_snapshot_skips_buildpack_files(tmp_path):
    (tmp_path / "index.html").write_text("hi", encoding="utf-8")
    (tmp_path / ".java-buildpack").mkdir()
    (tmp_path / ".java-buildpack.log").write_text("", encoding="utf-8")

    app = Application(tmp_path)
    (tmp_path / "late.txt").write_text("", encoding="utf-8")

    assert app.children == [tmp_path / "index.html"]


def test_sandbox_layout(tmp_path):
    droplet = Droplet(root=tmp_path, component_id="tomcat", resources=tmp_path / "resources")

    assert droplet.sandbox == tmp_path / ".java-buildpack" / "tomcat"


def test_copy_resources_overlays_sandbox(tmp_path):
    resources = tmp_path / "resources"
    (resources / "conf").mkdir(parents=True)
    (resources / "conf" / "server.xml").write_text("<Server/>", encoding="utf-8")
    droplet = Droplet(root=tmp_path / "app", component_id="tomcat", resources=resources)
    (droplet.sandbox / "conf").mkdir(parents=True)
    (droplet.sandbox / "conf" / "server.xml").write_text("<Old/>", encoding="utf-8")
    (droplet.sandbox / "conf" / "web.xml").write_text("<web-app/>", encoding="utf-8")

    droplet.copy_resources()

    assert (droplet.sandbox / "conf" / "server.xml").read_text(encoding="utf-8") == "<Server/>"
    assert (droplet.sandbox / "conf" / "web.xml").exists()


def test_copy_resources_without_resources(tmp_path):
    droplet = Droplet(root=tmp_path, component_id="tomcat", resources=tmp_path / "missing")

    droplet.copy_resources()

    assert not droplet.sandbox.exists()
