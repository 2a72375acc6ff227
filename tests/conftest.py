"""
Pytest configuration and shared fixtures for the perfsync test suite.

This module provides common fixtures, sample counter texts and log
builders for all test modules.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from perfsync.config import clear_config_cache  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Text builders
# ============================================================================

PROC_STAT_TAIL = (
    "intr 123456 0 0 0\n"
    "ctxt 987654\n"
    "btime 1700000000\n"
    "processes 4242\n"
    "procs_running 2\n"
    "procs_blocked 0\n"
)


def proc_line(cpu: str, user=0, system=0, nice=0, idle=0, iowait=0, irq=0, softirq=0) -> str:
    """One /proc/stat CPU row; cpu="" gives the aggregate row."""
    return f"cpu{cpu if cpu else ' '} {user} {system} {nice} {idle} {iowait} {irq} {softirq} 0 0 0\n"


def proc_stat(rows: Dict[str, Dict[str, int]]) -> str:
    """Build /proc/stat text; the key "all" becomes the aggregate row."""
    text = ""
    for cpu, fields in rows.items():
        text += proc_line("" if cpu == "all" else cpu, **fields)
    return text + PROC_STAT_TAIL


def linux_perf_line(timestamp: float, core: str, value: int, event: str) -> str:
    return f"{timestamp:>15.9f} {core:<10} {2:>8} {value:>18}      {event}\n"


def android_perf_line(cpu: int, value: int, event: str) -> str:
    return f"{cpu},{value},{event},0.5 GHz,(100%),\n"


def log_text(
    entries: List[Dict[str, str]],
    duration: int = 2,
    interval: int = 1,
    run_id: str = "6f1c2b1e-8c55-4c7e-9a55-1d1a5c4e9b10",
    platform: Optional[str] = None,
) -> str:
    """Build log file text from entry dicts with keys time, proc_start, proc_end, perf."""
    platform_attr = f' platform="{platform}"' if platform else ""
    text = f'<log id="{run_id}" duration="{duration}" interval="{interval}"{platform_attr}>\n'
    for entry in entries:
        perf_time = entry.get("perf_time")
        perf_time_attr = f' perf-time="{perf_time}"' if perf_time is not None else ""
        text += f'<log-entry time="{entry["time"]}"{perf_time_attr}>\n'
        text += f'<proc-start>\n{entry["proc_start"]}</proc-start>\n'
        text += f'<proc-end>\n{entry["proc_end"]}</proc-end>\n'
        text += f'<perf>\n{entry["perf"]}</perf>\n'
        text += "</log-entry>\n"
    return text + "</log>\n"


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def reset_config():
    """Make every test start from the default configuration."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def proc_start_text():
    """Kernel snapshot before an interval: two CPUs plus the aggregate."""
    return proc_stat(
        {
            "all": dict(user=200, system=100, nice=20, idle=2000, iowait=10, irq=4, softirq=6),
            "0": dict(user=100, system=50, nice=10, idle=1000, iowait=5, irq=2, softirq=3),
            "1": dict(user=100, system=50, nice=10, idle=1000, iowait=5, irq=2, softirq=3),
        }
    )


@pytest.fixture
def proc_end_text():
    """Kernel snapshot after an interval; CPU 0 is 25% loaded, CPU 1 idle."""
    return proc_stat(
        {
            "all": dict(user=350, system=150, nice=20, idle=3600, iowait=10, irq=4, softirq=6),
            "0": dict(user=250, system=100, nice=10, idle=1600, iowait=5, irq=2, softirq=3),
            "1": dict(user=100, system=50, nice=10, idle=2000, iowait=5, irq=2, softirq=3),
        }
    )


@pytest.fixture
def linux_perf_text():
    """One perf stat report for two physical cores."""
    return (
        linux_perf_line(1.001, "S0-D0-C0", 1500000, "cycles")
        + linux_perf_line(1.001, "S0-D0-C0", 40, "context-switches")
        + linux_perf_line(1.001, "S0-D0-C1", 2500000, "cycles")
        + linux_perf_line(1.001, "S0-D0-C1", 60, "context-switches")
    )


@pytest.fixture
def android_perf_text():
    """One simpleperf report for two cores, with its two banner lines."""
    return (
        "Performance counter statistics:\n"
        + android_perf_line(0, 1000000, "cpu-cycles")
        + android_perf_line(0, 50, "context-switches")
        + android_perf_line(1, 3000000, "cpu-cycles")
        + android_perf_line(1, 70, "context-switches")
        + "Total test time: 1.000123 seconds.\n"
    )


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "collector": {
            "platform": "android",
            "kernel_stat_path": "/tmp/stat",
            "sampler_prefix": ["stdbuf", "-o0"],
            "physical_cores": 4,
            "drift_tolerance": 0.5,
        },
        "analyzer": {
            "platform": "android",
            "fail_fast": True,
            "output_width": 100,
        },
    }


# ============================================================================
# Builder Fixtures
# ============================================================================


@pytest.fixture
def make_proc_stat():
    """Factory for /proc/stat text."""
    return proc_stat


@pytest.fixture
def make_log_text():
    """Factory for log file text."""
    return log_text


@pytest.fixture
def make_linux_perf_line():
    """Factory for perf stat counter lines."""
    return linux_perf_line


@pytest.fixture
def make_android_perf_line():
    """Factory for simpleperf counter lines."""
    return android_perf_line
