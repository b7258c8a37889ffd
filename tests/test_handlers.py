import os
from types import SimpleNamespace

import psutil
import pytest

from genmon_info.command_handlers import CpuInfoHandler, DiskInfoHandler, MemInfoHandler, NetInfoHandler
from genmon_info.core.cache_store import DiskCacheRecord
from genmon_info.core.errors import ResourceUnavailable, UsageError
from genmon_info.monitoring import disk_monitor

KIB = 1024


@pytest.fixture
def cpu_handler(make_config, options, store):
    def _handler(**kwargs):
        return CpuInfoHandler(make_config(cpu={"cores": 4}), options("cpuinfo", **kwargs), cache=store)
    return _handler


def test_base_handler_requires_config(options):
    with pytest.raises(ValueError):
        MemInfoHandler(None, options("meminfo"))


def test_cpu_first_run_reports_zero_usage(cpu_handler, fake_cpu, cache_dir):
    fake_cpu.set_times([(100, 900)] * 4)

    fragment = cpu_handler(cpu_usage=True).execute()

    assert fragment.text == "  45.0°C  0%  0%\n1200rpm  0%  0%"
    assert (cache_dir / "cpuinfo.1000").read_text() == "1000 900\n" * 4 + "45.0 1200\n"


def test_cpu_usage_from_previous_run(cpu_handler, fake_cpu, cache_dir):
    fake_cpu.set_times([(100, 900)] * 4)
    cpu_handler(cpu_usage=True).execute()

    fake_cpu.set_times([(1000, 1000)] * 4)
    fragment = cpu_handler(cpu_usage=True).execute()

    assert fragment.render() == (
        "<txt>  45.0°C 90% 90%\n1200rpm 90% 90%</txt>\n"
        "<tool>Maximum temperature observed: 45.0°C\nMaximum RPM observed: 1200rpm</tool>\n"
    )
    assert (cache_dir / "cpuinfo.1000").read_text() == "2000 1000\n" * 4 + "45.0 1200\n"


def test_cpu_maxima_are_kept(cpu_handler, fake_cpu):
    fake_cpu.set_times([(100, 900)] * 4)
    cpu_handler().execute()

    fake_cpu.sensors = "CPU Fan Speed: 900 RPM\ntemp1:  +40.0°C\n"
    fragment = cpu_handler().execute()

    assert fragment.text == "  40.0°C\n900 rpm"
    assert fragment.tooltip == "Maximum temperature observed: 45.0°C\nMaximum RPM observed: 1200rpm"


def test_cpu_counter_decrease_resets_baseline(cpu_handler, fake_cpu, cache_dir):
    fake_cpu.set_times([(1000, 1000)] * 4)
    cpu_handler().execute()

    fake_cpu.set_times([(10, 10)] * 4)
    fragment = cpu_handler(cpu_usage=True).execute()

    assert fragment.text == "  45.0°C  0%  0%\n1200rpm  0%  0%"
    assert (cache_dir / "cpuinfo.1000").read_text() == "20 10\n" * 4 + "45.0 1200\n"

    fake_cpu.set_times([(20, 100)] * 4)
    fragment = cpu_handler(cpu_usage=True).execute()

    assert fragment.text == "  45.0°C 10% 10%\n1200rpm 10% 10%"


def test_cpu_icon_is_rendered(cpu_handler, fake_cpu):
    fake_cpu.set_times([(100, 900)] * 4)

    fragment = cpu_handler(icon_path="/home/user/.genmon-icon/cpuinfo.png").execute()

    assert fragment.render().startswith("<img>/home/user/.genmon-icon/cpuinfo.png</img>\n<txt>")


def test_memory_handler(make_config, options, monkeypatch, cache_dir):
    stats = SimpleNamespace(total=8_000_000 * KIB, free=2_000_000 * KIB,
                            buffers=500_000 * KIB, cached=1_500_000 * KIB)
    monkeypatch.setattr(psutil, "virtual_memory", lambda: stats)

    fragment = MemInfoHandler(make_config(), options("meminfo", percent_bar=True)).execute()

    assert fragment.text == "3906M 50%\n1464M 488M"
    assert fragment.tooltip == "Total memory available: 7812M\nMemory currently being used: 5859M (75%)"
    assert fragment.bar == 75
    assert os.listdir(cache_dir) == []


@pytest.fixture
def fake_disk(tmp_path, monkeypatch):
    """
    A real directory standing in for the mount path, with faked block counts,
    partition table and hddtemp output.
    """
    mount = tmp_path / "mnt"
    mount.mkdir()
    state = SimpleNamespace(
        mount=str(mount),
        partitions=[SimpleNamespace(device="/dev/sda2", mountpoint=str(mount))],
        hddtemp="/dev/sda2: WDC WD10EZEX: 38°C\n",
        helper_calls=[],
        scans=0,
    )
    st_dev = os.stat(state.mount).st_dev
    state.identity = (os.major(st_dev), os.minor(st_dev))

    real_statvfs = os.statvfs

    def fake_statvfs(path):
        if path != state.mount:
            return real_statvfs(path)
        return SimpleNamespace(f_blocks=1_000_000, f_bfree=250_000, f_frsize=4096, f_bsize=4096)

    def fake_disk_partitions(all=False):
        state.scans += 1
        return list(state.partitions)

    def fake_run_helper(command, timeout):
        state.helper_calls.append(list(command))
        return state.hddtemp

    monkeypatch.setattr(os, "statvfs", fake_statvfs)
    monkeypatch.setattr(psutil, "disk_partitions", fake_disk_partitions)
    monkeypatch.setattr(disk_monitor, "run_helper", fake_run_helper)
    return state


def test_disk_handler_first_run(make_config, options, store, fake_disk):
    fragment = DiskInfoHandler(make_config(), options("diskinfo", target=fake_disk.mount, percent_bar=True),
                               cache=store).execute()

    assert fragment.text == "38°C\n2.9G"
    assert f"Mount: {fake_disk.mount}  Device: /dev/sda2" in fragment.tooltip
    assert fragment.bar == 75
    assert fake_disk.helper_calls == [["sudo", "hddtemp", "/dev/sda2"]]

    key = store.key("diskinfo", *fake_disk.identity)
    assert store.load(key, DiskCacheRecord) == DiskCacheRecord(fake_disk.mount, "/dev/sda2", 38.0)


def test_disk_handler_reuses_cached_device(make_config, options, store, fake_disk, monkeypatch):
    handler_options = options("diskinfo", target=fake_disk.mount)
    DiskInfoHandler(make_config(), handler_options, cache=store).execute()

    writes = []
    real_store = store.store
    monkeypatch.setattr(store, "store", lambda key, record: writes.append(record) or real_store(key, record))

    fake_disk.hddtemp = "/dev/sda2: WDC WD10EZEX: 36°C\n"
    fragment = DiskInfoHandler(make_config(), handler_options, cache=store).execute()

    assert fake_disk.scans == 1
    assert writes == []
    assert fragment.text == "36°C\n2.9G"
    assert fragment.tooltip.endswith("Maximum temperature observed: 38°C")

    fake_disk.hddtemp = "/dev/sda2: WDC WD10EZEX: 44°C\n"
    DiskInfoHandler(make_config(), handler_options, cache=store).execute()

    assert writes == [DiskCacheRecord(fake_disk.mount, "/dev/sda2", 44.0)]


def test_disk_handler_rescans_when_mount_path_changes(make_config, options, store, fake_disk):
    key = store.key("diskinfo", *fake_disk.identity)
    store.store(key, DiskCacheRecord("/old/mount", "/dev/sdz9", 50.0))

    fragment = DiskInfoHandler(make_config(), options("diskinfo", target=fake_disk.mount), cache=store).execute()

    assert fake_disk.scans == 1
    assert "Device: /dev/sda2" in fragment.tooltip
    assert store.load(key, DiskCacheRecord) == DiskCacheRecord(fake_disk.mount, "/dev/sda2", 50.0)


def test_disk_handler_explicit_temperature_device(make_config, options, store, fake_disk):
    handler_options = options("diskinfo", target=fake_disk.mount, disk_temp_device="/dev/sdb")

    DiskInfoHandler(make_config(), handler_options, cache=store).execute()

    assert fake_disk.helper_calls == [["sudo", "hddtemp", "/dev/sdb"]]


def test_disk_handler_without_temperature(make_config, options, store, fake_disk):
    config = make_config(disk={"read_temperature": False})

    fragment = DiskInfoHandler(config, options("diskinfo", target=fake_disk.mount), cache=store).execute()

    assert fragment.text == "0°C\n2.9G"
    assert fake_disk.helper_calls == []


def test_disk_handler_missing_mount(make_config, options, store, tmp_path):
    handler = DiskInfoHandler(make_config(), options("diskinfo", target=str(tmp_path / "nowhere")), cache=store)

    with pytest.raises(ResourceUnavailable) as excinfo:
        handler.execute()

    assert excinfo.value.exit_code == 2


def test_disk_handler_requires_mount_path(make_config, options, store):
    with pytest.raises(UsageError):
        DiskInfoHandler(make_config(), options("diskinfo"), cache=store).execute()


class _Clock:
    def __init__(self, now_ns):
        self.now_ns = now_ns

    def __call__(self):
        return self.now_ns


def test_network_first_run_shows_totals(make_config, options, store, fake_net, cache_dir):
    fake_net.counters = {"eth0": (1000, 2000)}
    clock = _Clock(5_000_000_000)

    fragment = NetInfoHandler(make_config(), options("netinfo", target="eth0"), cache=store, clock=clock).execute()

    assert fragment.text == " 0.000G\n 0.000G"
    assert (cache_dir / "netinfo.eth0.1000").read_text() == "1000 2000 5000000000\n"


@pytest.mark.parametrize("bits,expected", [
    (False, "Rx   2K\nTx  12K"),
    (True, "Rx  16k\nTx  98k"),
])
def test_network_rates_from_previous_run(make_config, options, store, fake_net, bits, expected):
    handler_options = options("netinfo", target="eth0", bits_per_sec=bits)
    clock = _Clock(5_000_000_000)
    fake_net.counters = {"eth0": (1000, 2000)}
    NetInfoHandler(make_config(), handler_options, cache=store, clock=clock).execute()

    clock.now_ns += 1_000_000_000
    fake_net.counters = {"eth0": (1000 + 2048, 2000 + 12 * 1024)}
    fragment = NetInfoHandler(make_config(), handler_options, cache=store, clock=clock).execute()

    assert fragment.text == expected


def test_network_counter_decrease_resets_both_directions(make_config, options, store, fake_net, cache_dir):
    handler_options = options("netinfo", target="eth0")
    clock = _Clock(5_000_000_000)
    fake_net.counters = {"eth0": (10_000_000, 2000)}
    NetInfoHandler(make_config(), handler_options, cache=store, clock=clock).execute()

    clock.now_ns += 1_000_000_000
    fake_net.counters = {"eth0": (100, 2000 + 12 * 1024)}
    fragment = NetInfoHandler(make_config(), handler_options, cache=store, clock=clock).execute()

    assert fragment.text == " 0.000G\n 0.000G"
    assert (cache_dir / "netinfo.eth0.1000").read_text() == f"100 {2000 + 12 * 1024} 6000000000\n"

    clock.now_ns += 1_000_000_000
    fake_net.counters = {"eth0": (100 + 2048, 2000 + 24 * 1024)}
    fragment = NetInfoHandler(make_config(), handler_options, cache=store, clock=clock).execute()

    assert fragment.text == "Rx   2K\nTx  12K"


def test_network_interface_down(make_config, options, store, fake_net, cache_dir):
    fake_net.counters = {"eth0": (1000, 2000)}
    handler = NetInfoHandler(make_config(), options("netinfo", target="wlan0"), cache=store)

    with pytest.raises(ResourceUnavailable) as excinfo:
        handler.execute()

    assert excinfo.value.exit_code == 3
    assert excinfo.value.fragment == "<txt>   Down\n</txt>\n<tool>wlan0 is down</tool>\n"
    assert os.listdir(cache_dir) == []


def test_network_requires_interface(make_config, options, store):
    with pytest.raises(UsageError):
        NetInfoHandler(make_config(), options("netinfo"), cache=store).execute()
