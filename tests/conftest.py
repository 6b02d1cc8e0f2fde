"""Test fixtures and utilities."""

import json
from typing import Dict, List, Optional, Union

import pytest

from assetmeta.config import Settings
from assetmeta.services.command_runner import CommandResult


class FakeRunner:
	"""Replies to commands by executable name and records every call."""

	def __init__(self, replies: Optional[Dict[str, Union[CommandResult, Exception]]] = None):
		self.replies = replies or {}
		self.calls: List[List[str]] = []
		self.timeouts: List[Optional[float]] = []

	def run(self, args, timeout=None):
		self.calls.append(list(args))
		self.timeouts.append(timeout)
		reply = self.replies.get(args[0])
		if reply is None:
			raise AssertionError(f"unexpected command: {args}")
		if isinstance(reply, Exception):
			raise reply
		return reply

	def called(self, program: str) -> bool:
		return any(c[0] == program for c in self.calls)


def json_result(data, returncode: int = 0, stderr: str = "") -> CommandResult:
	return CommandResult(returncode=returncode, stdout=json.dumps(data), stderr=stderr)


def error_result(stderr: str, returncode: int = 1) -> CommandResult:
	return CommandResult(returncode=returncode, stdout="", stderr=stderr)


@pytest.fixture
def settings() -> Settings:
	return Settings()


@pytest.fixture
def make_runner():
	return FakeRunner
