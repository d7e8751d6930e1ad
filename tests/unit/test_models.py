"""Tests for manifest and artifact models — validation and filename scheme."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from bottlefetch.models.artifacts import BottleFilename, ResolvedArtifact
from bottlefetch.models.manifest import Manifest


class TestBottleFilename:
    def test_rebuild_zero_is_omitted(self):
        name = BottleFilename(name="foo", version="1.0", tag="x86_64_linux")
        assert str(name) == "foo--1.0.x86_64_linux.bottle.tar.gz"

    def test_rebuild_segment(self):
        name = BottleFilename(name="foo", version="1.0", tag="x86_64_linux", rebuild=3)
        assert str(name) == "foo--1.0.x86_64_linux.bottle.3.tar.gz"

    def test_distinct_rebuilds_do_not_collide(self):
        names = {
            str(BottleFilename(name="foo", version="1.0", tag="linux-x86_64", rebuild=r))
            for r in range(3)
        }
        assert len(names) == 3

    def test_same_tuple_same_name(self):
        a = BottleFilename(name="foo", version="1.0", tag="arm64_sonoma", rebuild=1)
        b = BottleFilename(name="foo", version="1.0", tag="arm64_sonoma", rebuild=1)
        assert str(a) == str(b)

    def test_parse(self):
        parsed = BottleFilename.parse("openssl@3--3.2.1_1.arm64_sonoma.bottle.2.tar.gz")
        assert parsed == BottleFilename(
            name="openssl@3", version="3.2.1_1", tag="arm64_sonoma", rebuild=2
        )

    def test_parse_without_rebuild(self):
        parsed = BottleFilename.parse("foo--1.0.x86_64_linux.bottle.tar.gz")
        assert parsed is not None
        assert parsed.rebuild == 0
        assert parsed.version == "1.0"

    def test_parse_rejects_other_files(self):
        assert BottleFilename.parse("foo-1.0.tar.gz") is None
        assert BottleFilename.parse("README") is None


class TestResolvedArtifact:
    def test_filename(self):
        artifact = ResolvedArtifact(
            name="foo",
            version="1.0",
            platform_tag="x86_64_linux",
            rebuild=1,
            url="https://dl.test/foo.tar.gz",
            sha256="a" * 64,
        )
        assert artifact.filename == "foo--1.0.x86_64_linux.bottle.1.tar.gz"


class TestManifest:
    def test_minimal(self):
        manifest = Manifest.model_validate({"name": "foo", "pkg_version": "1.0"})
        assert manifest.rebuild == 0
        assert manifest.bottles == {}
        assert manifest.dependencies == []

    def test_sha256_optional(self):
        manifest = Manifest.model_validate(
            {
                "name": "foo",
                "pkg_version": "1.0",
                "bottles": {"x86_64_linux": {"url": "https://dl.test/foo"}},
            }
        )
        assert manifest.bottles["x86_64_linux"].sha256 is None

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Manifest.model_validate({"name": "", "pkg_version": "1.0"})

    @pytest.mark.parametrize(
        "name", ["../../escaped", "a/b", "a\\b", ".hidden", "nul\x00byte", ".."]
    )
    def test_name_must_be_one_path_component(self, name: str):
        with pytest.raises(ValidationError):
            Manifest.model_validate({"name": name, "pkg_version": "1.0"})

    @pytest.mark.parametrize("version", ["../1.0", "1.0/..", "1..0"])
    def test_version_must_be_one_path_component(self, version: str):
        with pytest.raises(ValidationError):
            Manifest.model_validate({"name": "foo", "pkg_version": version})

    def test_dependency_name_checked_too(self):
        with pytest.raises(ValidationError):
            Manifest.model_validate(
                {
                    "name": "foo",
                    "pkg_version": "1.0",
                    "dependencies": [{"name": "../bar", "pkg_version": "1.0"}],
                }
            )

    def test_homebrew_names_accepted(self):
        manifest = Manifest.model_validate({"name": "openssl@3", "pkg_version": "3.2.1_1"})
        assert manifest.name == "openssl@3"

    def test_negative_rebuild_rejected(self):
        with pytest.raises(ValidationError):
            Manifest.model_validate({"name": "foo", "pkg_version": "1.0", "rebuild": -1})

    def test_unknown_fields_ignored(self):
        manifest = Manifest.model_validate(
            {"name": "foo", "pkg_version": "1.0", "license": "MIT", "tap": "homebrew/core"}
        )
        assert manifest.name == "foo"

    def test_nested_dependencies_not_processed(self):
        manifest = Manifest.model_validate(
            {
                "name": "foo",
                "pkg_version": "1.0",
                "dependencies": [
                    {
                        "name": "bar",
                        "pkg_version": "2.0",
                        "dependencies": [{"name": "baz", "pkg_version": "3.0"}],
                    }
                ],
            }
        )
        assert [d.name for d in manifest.dependencies] == ["bar"]
        assert not hasattr(manifest.dependencies[0], "dependencies")

    def test_frozen(self):
        manifest = Manifest.model_validate({"name": "foo", "pkg_version": "1.0"})
        with pytest.raises(ValidationError):
            manifest.name = "bar"
