"""
End-to-end tests for the command line interface.

Tests:
- Exact human and machine output for the reference scenarios
- --output / --human / --machine precedence (last one wins)
- Argument validation and exit codes
- Warnings go to stderr, never into the report
"""

import os
import sys

import pytest

from dedupe import __version__
from dedupe.cli import build_parser, config_from_args, main


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


@pytest.fixture
def in_sample_tree(sample_tree, monkeypatch):
    monkeypatch.chdir(sample_tree)
    return sample_tree


class TestScenarios:
    def test_human_output(self, capsys, in_sample_tree):
        code, out, _ = run(capsys)
        assert code == 0
        assert out == (
            "duplicate1.txt\n"
            "    sample1.txt\n"
            "sample2.txt\n"
            "sample3.txt\n"
            "Unique files: 3. 1 files waste 6 Bytes.\n"
        )

    def test_machine_output(self, capsys, in_sample_tree):
        code, out, _ = run(capsys, "--output", "machine")
        assert code == 0
        assert out == "sample1.txt\n"

    def test_single_file(self, capsys, tmp_path, monkeypatch):
        (tmp_path / "hello.txt").write_text("hi")
        monkeypatch.chdir(tmp_path)

        assert run(capsys)[1] == "hello.txt\nUnique files: 1. 0 files waste 0 Bytes.\n"
        assert run(capsys, "--machine")[1] == ""

    def test_explicit_directory_prefixes_paths(self, capsys, sample_tree):
        _, out, _ = run(capsys, "-m", str(sample_tree))
        assert out == f"{sample_tree / 'sample1.txt'}\n"

    def test_output_is_idempotent(self, capsys, in_sample_tree):
        assert run(capsys) == run(capsys)

    def test_jobs_do_not_change_output(self, capsys, in_sample_tree):
        assert run(capsys, "-j", "4") == run(capsys, "-j", "1")

    def test_max_depth_zero(self, capsys, tree, monkeypatch):
        tree({"top.txt": "same", "sub/inner.txt": "same"})
        monkeypatch.chdir(tree({}))

        _, out, _ = run(capsys, "--max-depth", "0")
        assert out == "top.txt\nUnique files: 1. 0 files waste 0 Bytes.\n"
        _, out, _ = run(capsys, "--max-depth", "1", "--machine")
        assert out == "top.txt\n"

    def test_skip_file_symlinks(self, capsys, in_sample_tree):
        if not hasattr(os, "symlink"):
            pytest.skip("no symlink support")
        (in_sample_tree / "zlink.txt").symlink_to(in_sample_tree / "sample2.txt")

        assert run(capsys, "--machine")[1] == "sample1.txt\nzlink.txt\n"
        assert run(capsys, "--machine", "--skip-file-symlinks")[1] == "sample1.txt\n"


class TestOutputPrecedence:
    @pytest.mark.parametrize(
        "argv, expected",
        [
            ([], "human"),
            (["--machine"], "machine"),
            (["--output", "machine", "--human"], "human"),
            (["--human", "--output", "machine"], "machine"),
            (["--machine", "--output", "human"], "human"),
            (["-o", "human", "-m"], "machine"),
            (["--machine", "--human"], "human"),
        ],
    )
    def test_last_flag_wins(self, argv, expected):
        assert build_parser().parse_args(argv).output == expected

    def test_unknown_mode_rejected(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--output", "json"])
        assert excinfo.value.code == 2
        assert "invalid choice" in capsys.readouterr().err


class TestArguments:
    def test_defaults(self):
        config = config_from_args(build_parser().parse_args([]))
        assert [str(root) for root in config.roots] == ["."]
        assert config.max_depth == 1
        assert config.jobs == 1
        assert config.follow_file_symlinks is True

    @pytest.mark.parametrize("depth", ["-1", "abc", "1.5"])
    def test_invalid_depth_is_a_usage_error(self, capsys, depth):
        with pytest.raises(SystemExit) as excinfo:
            main(["--max-depth", depth])
        assert excinfo.value.code == 2
        assert "invalid depth" in capsys.readouterr().err

    def test_invalid_jobs_is_a_usage_error(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--jobs", "0"])
        assert excinfo.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestErrors:
    def test_all_roots_missing_exits_1(self, capsys, tmp_path):
        code, out, err = run(capsys, str(tmp_path / "nope"), str(tmp_path / "gone"))
        assert code == 1
        assert out == ""
        assert "Warning" in err
        assert "Error: no readable directory" in err

    def test_missing_root_warns_but_reports(self, capsys, sample_tree):
        code, out, err = run(capsys, "--machine", str(sample_tree / "nope"), str(sample_tree))
        assert code == 0
        assert out == f"{sample_tree / 'sample1.txt'}\n"
        assert "Warning: cannot read" in err
        assert "nope" in err

    def test_verbose_statistics_on_stderr(self, capsys, in_sample_tree):
        code, out, err = run(capsys, "-v", "--machine")
        assert code == 0
        assert out == "sample1.txt\n"
        assert "4 files found, 3 hashed, 0 unreadable." in err
        assert "reclaimable space: 6.00 B" in err


@pytest.mark.skipif(sys.platform != "linux", reason="needs byte file names")
class TestUndecodableNames:
    """File names that are not valid UTF-8 are written back byte for byte."""

    @pytest.fixture
    def odd_tree(self, tmp_path):
        (tmp_path / "a.txt").write_bytes(b"same")
        odd = tmp_path / os.fsdecode(b"b\xff.txt")
        odd.write_bytes(b"same")
        return tmp_path, os.fsencode(str(tmp_path / "a.txt")), os.fsencode(str(odd))

    def test_machine_output(self, capsysbinary, odd_tree):
        root, _, odd = odd_tree
        assert main(["--machine", str(root)]) == 0
        assert capsysbinary.readouterr().out == odd + b"\n"

    def test_human_output(self, capsysbinary, odd_tree):
        root, canonical, odd = odd_tree
        assert main([str(root)]) == 0
        assert capsysbinary.readouterr().out == (
            canonical + b"\n    " + odd + b"\nUnique files: 1. 1 files waste 4 Bytes.\n"
        )
