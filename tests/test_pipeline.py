from __future__ import annotations

from tomcat_buildpack.pipeline import build_components, run_compile, run_detect, run_release
from tomcat_buildpack.tomcat_instance import TomcatInstance


class StubComponent:
    def __init__(self, component_id, tag=None, release=None):
        self.component_id = component_id
        self.tag = tag
        self._release = release
        self.compiled = False

    def detect(self):
        return self.tag

    def compile(self):
        self.compiled = True

    def release(self):
        return self._release


def test_build_components_registers_tomcat_instance(make_context):
    components = build_components(make_context())

    assert [type(c) for c in components] == [TomcatInstance]


def test_run_detect_collects_tags():
    components = [StubComponent("a", "a=1.0.0"), StubComponent("b"), StubComponent("c", "c=2.0.0")]

    assert run_detect(components) == ["a=1.0.0", "c=2.0.0"]


def test_run_compile_skips_undetected():
    a, b = StubComponent("a", "a=1.0.0"), StubComponent("b")

    assert run_compile([a, b]) == ["a"]
    assert a.compiled and not b.compiled


def test_run_release_merges_contributions():
    components = [
        StubComponent("a", "a=1.0.0"),
        StubComponent("b", "b=1.0.0", {"default_process_types": {"web": "run.sh"}, "config_vars": {"X": "1"}}),
        StubComponent("c", None, {"config_vars": {"Y": "2"}}),
    ]

    assert run_release(components) == {
        "addons": [],
        "config_vars": {"X": "1"},
        "default_process_types": {"web": "run.sh"},
    }


def test_tomcat_instance_release_is_empty(make_context):
    assert run_release(build_components(make_context())) == {
        "addons": [],
        "config_vars": {},
        "default_process_types": {},
    }
