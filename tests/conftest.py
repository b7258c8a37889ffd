import json
from collections import namedtuple
from types import SimpleNamespace

import psutil
import pytest

from genmon_info.config import ConfigManager, RunOptions
from genmon_info.core.cache_store import CacheStore
from genmon_info.monitoring import cpu_monitor

CpuTimes = namedtuple('CpuTimes', ['user', 'nice', 'system', 'idle', 'iowait'])

SENSORS_OUTPUT = (
    "it8728-isa-0228\n"
    "Adapter: ISA adapter\n"
    "CPU Fan Speed: 1200 RPM  (min =    0 RPM)\n"
    "\n"
    "k10temp-pci-00c3\n"
    "Adapter: PCI adapter\n"
    "temp1:        +45.0°C  (high = +70.0°C)\n"
)


@pytest.fixture(autouse=True)
def home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("GENMON_INFO_CONFIG", raising=False)
    return home_dir


@pytest.fixture
def cache_dir(tmp_path):
    directory = tmp_path / "shm"
    directory.mkdir()
    return directory


@pytest.fixture
def config_file(tmp_path, cache_dir, monkeypatch):
    """Writes a config file pointing the cache at ``cache_dir`` and selects it."""
    def _write(data=None):
        content = {"cache": {"directory": str(cache_dir)}, "cpu": {"cores": 4}}
        for key, value in (data or {}).items():
            content.setdefault(key, {}).update(value)
        path = tmp_path / "config.json"
        path.write_text(json.dumps(content))
        monkeypatch.setenv("GENMON_INFO_CONFIG", str(path))
        return path
    return _write


@pytest.fixture
def make_config(tmp_path, cache_dir):
    def _make(**sections):
        overrides = {"cache": {"directory": str(cache_dir)}}
        overrides.update(sections)
        return ConfigManager(str(tmp_path / "absent.json"), overrides=overrides)
    return _make


@pytest.fixture
def store(cache_dir):
    return CacheStore(str(cache_dir), uid=1000)


@pytest.fixture
def options():
    def _options(program, **kwargs):
        return RunOptions(program=program, **kwargs)
    return _options


@pytest.fixture
def fake_cpu(monkeypatch):
    """
    Replaces psutil per-core times and the sensors helper.

    ``set_times`` takes (user, idle) pairs in ticks; nice and system are 0.
    """
    monkeypatch.setattr(cpu_monitor, "CLOCK_TICKS", 100)
    state = SimpleNamespace(times=[], sensors=SENSORS_OUTPUT, helper_calls=[])

    def set_times(pairs):
        state.times = [CpuTimes(user=user / 100.0, nice=0.0, system=0.0, idle=idle / 100.0, iowait=0.0)
                       for user, idle in pairs]

    def fake_cpu_times(percpu=False):
        assert percpu
        return list(state.times)

    def fake_run_helper(command, timeout):
        state.helper_calls.append(list(command))
        return state.sensors

    monkeypatch.setattr(psutil, "cpu_times", fake_cpu_times)
    monkeypatch.setattr(cpu_monitor, "run_helper", fake_run_helper)
    state.set_times = set_times
    return state


@pytest.fixture
def fake_net(monkeypatch):
    state = SimpleNamespace(counters={})

    def fake_net_io_counters(pernic=False):
        assert pernic
        return {name: SimpleNamespace(bytes_recv=rx, bytes_sent=tx)
                for name, (rx, tx) in state.counters.items()}

    monkeypatch.setattr(psutil, "net_io_counters", fake_net_io_counters)
    return state
