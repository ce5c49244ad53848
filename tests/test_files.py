"""Tests for the shared local path helpers."""

import pytest

from artifact_drivers import Artifact, ArtifactDriverError
from artifact_drivers._files import local_target, object_name_for, relative_name, single_file_target


class TestRelativeName:
    def test_strips_prefix_and_one_separator(self):
        assert relative_name("runs/42/a.txt", "runs/42/") == "a.txt"
        assert relative_name("runs/42/a.txt", "runs/42") == "a.txt"
        assert relative_name("runs/42//a.txt", "runs/42") == "/a.txt"


class TestLocalTarget:
    def test_nested_name_stays_under_root(self, tmp_path):
        assert local_target(tmp_path, "sub/c.txt") == (tmp_path / "sub" / "c.txt").resolve()

    @pytest.mark.parametrize("rel", ["../x", "a/../../x", "/etc/passwd", "", "."])
    def test_rejects_names_outside_root(self, tmp_path, rel):
        with pytest.raises(ArtifactDriverError):
            local_target(tmp_path / "dest", rel)

    def test_single_file_target_uses_key_basename(self, tmp_path):
        target = single_file_target(tmp_path, Artifact(key="runs/42/output.txt"))

        assert target == (tmp_path / "output.txt").resolve()


def test_object_name_for():
    assert object_name_for("runs/42/output.txt", "", "output.txt") == "runs/42/output.txt"
    assert object_name_for("models/", "", "m.onnx") == "models/m.onnx"
    assert object_name_for("out/", "sub/a.txt", "a.txt") == "out/sub/a.txt"
    assert object_name_for("", "a.txt", "a.txt") == "a.txt"
