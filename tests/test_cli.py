"""
KUBEADMIT TEST SUITE - Command Line
Exit codes and machine-readable output of the kubeadmit command.
"""

import json

import pytest

from kubeadmit.cli.main import KubeAdmitCLI

GOOD = """\
kind: ConfigMap
metadata:
  name: settings
data:
  mode: fast
"""

BAD = """\
kind: ConfigMap
metadata:
  name: settings
data:
  "a..b": x
"""


@pytest.fixture
def manifests(tmp_path):
    (tmp_path / "good.yaml").write_text(GOOD, encoding="utf-8")
    (tmp_path / "bad.yaml").write_text(BAD, encoding="utf-8")
    return tmp_path


def test_no_arguments_prints_help():
    assert KubeAdmitCLI().run([]) == 0


def test_version_flag():
    with pytest.raises(SystemExit) as exc:
        KubeAdmitCLI().run(["--version"])
    assert exc.value.code == 0


def test_check_good_file(manifests):
    assert KubeAdmitCLI().run(["check", str(manifests / "good.yaml")]) == 0


def test_check_bad_file(manifests):
    assert KubeAdmitCLI().run(["check", str(manifests / "bad.yaml")]) == 1


def test_check_missing_path(tmp_path):
    assert KubeAdmitCLI().run(["check", str(tmp_path / "missing.yaml")]) == 1


def test_check_directory_json(manifests, capsys):
    """OUTPUT TEST: JSON goes to stdout and parses cleanly."""
    code = KubeAdmitCLI().run(["check", str(manifests), "--output", "json"])
    assert code == 1

    payload = json.loads(capsys.readouterr().out)
    statuses = {r["file_path"]: r["status"] for r in payload["reports"]}
    assert statuses == {"bad.yaml": "REJECTED", "good.yaml": "ADMITTED"}
    assert payload["summary"]["total_files"] == 2
    bad = next(r for r in payload["reports"] if r["file_path"] == "bad.yaml")
    assert bad["documents"][0]["error_details"][0]["field"] == "data[a..b]"


def test_check_empty_directory(tmp_path):
    assert KubeAdmitCLI().run(["check", str(tmp_path)]) == 0


def test_strict_flag(tmp_path):
    (tmp_path / "svc.yaml").write_text("kind: Service\nmetadata:\n  name: web\n", encoding="utf-8")
    assert KubeAdmitCLI().run(["check", str(tmp_path / "svc.yaml")]) == 0
    assert KubeAdmitCLI().run(["check", str(tmp_path / "svc.yaml"), "--strict"]) == 1


def test_update_command(tmp_path, capsys):
    (tmp_path / "old.yaml").write_text(GOOD.replace("name: settings", "name: settings\n  resourceVersion: '1'"),
                                       encoding="utf-8")
    (tmp_path / "new.yaml").write_text(GOOD.replace("mode: fast", "mode: slow"), encoding="utf-8")

    code = KubeAdmitCLI().run(["update", str(tmp_path / "old.yaml"), str(tmp_path / "new.yaml"),
                               "--output", "json"])
    assert code == 1
    report = json.loads(capsys.readouterr().out)["reports"][0]
    assert report["documents"][0]["operation"] == "update"
    assert "metadata.resourceVersion" in report["documents"][0]["errors"][0]


def test_update_missing_file(tmp_path):
    (tmp_path / "new.yaml").write_text(GOOD, encoding="utf-8")
    assert KubeAdmitCLI().run(["update", str(tmp_path / "old.yaml"), str(tmp_path / "new.yaml")]) == 1


def test_update_command_rejects_rename(tmp_path, capsys):
    """UPDATE TEST: a renamed object fails the update instead of passing as a new create."""
    (tmp_path / "old.yaml").write_text(GOOD.replace("name: settings", "name: settings\n  resourceVersion: '1'"),
                                       encoding="utf-8")
    (tmp_path / "new.yaml").write_text(GOOD.replace("name: settings", "name: renamed\n  resourceVersion: '2'"),
                                       encoding="utf-8")

    code = KubeAdmitCLI().run(["update", str(tmp_path / "old.yaml"), str(tmp_path / "new.yaml"),
                               "--output", "json"])
    assert code == 1
    doc = json.loads(capsys.readouterr().out)["reports"][0]["documents"][0]
    assert doc["operation"] == "update"
    assert doc["error_details"][0]["field"] == "metadata.name"
