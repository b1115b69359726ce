"""
Tests for the psutil-backed process table query.

psutil.process_iter is replaced with a fixed process list, including
entries that vanish or deny access while being enumerated.
"""
from __future__ import annotations

import psutil
import pytest

from obs_stream_setup.config import DEFAULT_OBS_PROCESS_NAMES, ObsLaunchConfig
from obs_stream_setup.process_gate import ProcessGatePsutil, normalize_process_name


class _Proc:
    def __init__(self, pid: int, name: str | None):
        self.pid = pid
        self.info = {"pid": pid, "name": name}


class _VanishingProc:
    pid = 99

    @property
    def info(self):
        raise psutil.NoSuchProcess(self.pid)


@pytest.fixture
def process_table(monkeypatch):
    table = [
        _Proc(1, "systemd"),
        _VanishingProc(),
        _Proc(4242, "obs64.exe"),
        _Proc(5000, None),
        _Proc(6000, "Game.exe"),
    ]

    def fake_process_iter(attrs=None):
        return iter(table)

    monkeypatch.setattr(psutil, "process_iter", fake_process_iter)
    return table


class TestNormalizeProcessName:

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("obs64.exe", "obs64"),
            ("OBS64.EXE", "obs64"),
            ("obs", "obs"),
            (" obs64 ", "obs64"),
            ("exe", "exe"),
        ],
    )
    def test_normalize(self, name, expected):
        assert normalize_process_name(name) == expected


class TestProcessGatePsutil:

    @pytest.mark.asyncio
    async def test_running(self, process_table):
        assert await ProcessGatePsutil().is_running("obs64.exe") is True

    @pytest.mark.asyncio
    async def test_case_and_extension_insensitive(self, process_table):
        gate = ProcessGatePsutil()
        assert await gate.is_running("OBS64") is True
        assert await gate.is_running("game") is True

    @pytest.mark.asyncio
    async def test_not_running(self, process_table):
        assert await ProcessGatePsutil().is_running("obs") is False

    @pytest.mark.asyncio
    async def test_list_running_skips_vanished(self, process_table):
        running = await ProcessGatePsutil().list_running(["obs64.exe", "Game.exe"])
        assert [(process.pid, process.name) for process in running] == [
            (4242, "obs64.exe"),
            (6000, "Game.exe"),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["obs", "OBS", "obs64.exe", "obs32.exe"])
    async def test_default_obs_names_match_every_platform(self, monkeypatch, name):
        monkeypatch.setattr(psutil, "process_iter", lambda attrs=None: iter([_Proc(7, name)]))

        gate = ProcessGatePsutil()
        assert await gate.is_running(ObsLaunchConfig().process_names) is True

    @pytest.mark.asyncio
    async def test_default_obs_names_ignore_other_processes(self, process_table):
        running = await ProcessGatePsutil().list_running(DEFAULT_OBS_PROCESS_NAMES)
        assert [process.pid for process in running] == [4242]
