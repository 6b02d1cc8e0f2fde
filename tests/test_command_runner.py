"""Tests for the subprocess command runner."""

import sys

import pytest

from assetmeta.services.command_runner import CommandError, SubprocessRunner


def test_captures_output_and_status():
	script = "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"

	res = SubprocessRunner().run([sys.executable, "-c", script], timeout=30)

	assert res.returncode == 3
	assert not res.ok
	assert res.stdout.strip() == "out"
	assert res.stderr.strip() == "err"


def test_arguments_are_not_shell_expanded():
	res = SubprocessRunner().run([sys.executable, "-c", "import sys; print(sys.argv[1])", "$HOME; echo x"])
	assert res.ok
	assert res.stdout.strip() == "$HOME; echo x"


def test_missing_executable():
	with pytest.raises(CommandError, match="not found"):
		SubprocessRunner().run(["assetmeta-no-such-tool", "--version"])


def test_timeout():
	with pytest.raises(CommandError, match="timed out"):
		SubprocessRunner().run([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)


def test_non_executable_file(tmp_path):
	tool = tmp_path / "exiftool"
	tool.write_text("#!/bin/sh\necho hi\n", encoding="utf-8")
	tool.chmod(0o644)

	with pytest.raises(CommandError, match="cannot run"):
		SubprocessRunner().run([str(tool), "-ver"])


def test_nul_byte_in_argument():
	with pytest.raises(CommandError, match="cannot run"):
		SubprocessRunner().run([sys.executable, "-c", "pass", "bad\x00name.jpg"])
