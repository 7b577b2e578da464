"""Pytest configuration and shared fixtures."""

import logging

import pytest

from duplicacy_wrapper.config import (
    BackupInfo,
    CheckInfo,
    Config,
    CopyInfo,
    GlobalConfig,
    PruneInfo,
)
from duplicacy_wrapper.core.context import RunContext


class ListHandler(logging.Handler):
    """Collects formatted messages of a logger."""

    def __init__(self):
        super().__init__(logging.DEBUG)
        self.lines = []

    def emit(self, record):
        self.lines.append(record.getMessage())


class FakeExecutor:
    """Stands in for the duplicacy process.

    Invocations are keyed "verb:storage" (copy uses the source storage).
    Output lines for a key are fed to the sink, and keys listed in `fail`
    return a non-zero exit status.
    """

    def __init__(self, outputs=None, fail=(), returncode=2):
        self.outputs = outputs or {}
        self.fail = set(fail)
        self.returncode = returncode
        self.calls = []

    @staticmethod
    def key(args):
        verb = args[0]
        flag = "-from" if verb == "copy" else "-storage"
        return f"{verb}:{args[args.index(flag) + 1]}"

    def __call__(self, path, args, cwd, sink):
        self.calls.append({"path": path, "args": list(args), "cwd": cwd})
        key = self.key(args)
        for line in self.outputs.get(key, []):
            sink.accept(line)
        return self.returncode if key in self.fail else 0

    @property
    def keys(self):
        return [self.key(c["args"]) for c in self.calls]


class RecordingNotifier:
    """Remembers the notifications it received."""

    def __init__(self):
        self.events = []

    def notify_start(self):
        self.events.append(("start",))

    def notify_success(self, context):
        self.events.append(("success", context))

    def notify_failure(self, context, error):
        self.events.append(("failure", context, error))

    @property
    def names(self):
        return [e[0] for e in self.events]


@pytest.fixture
def fake_executor():
    return FakeExecutor


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def context():
    """RunContext whose run log collects lines in memory."""
    run_log = logging.Logger("test-run-log", logging.DEBUG)
    run_log.addHandler(ListHandler())
    return RunContext(name="test", run_log=run_log)


@pytest.fixture
def run_lines(context):
    return context.run_log.handlers[0].lines


@pytest.fixture
def make_config(tmp_path):
    """Factory for Config objects rooted in tmp_path."""
    repository = tmp_path / "repo"
    repository.mkdir()

    def factory(backup=("primary",), copy=(), prune=(), check=(), name="test"):
        return Config(
            name=name,
            global_config=GlobalConfig(
                repository=str(repository),
                duplicacy_path="/usr/local/bin/duplicacy",
                log_dir=str(tmp_path / "logs"),
                log_keep=3,
            ),
            backup_info=[b if isinstance(b, BackupInfo) else BackupInfo(b) for b in backup],
            copy_info=[c if isinstance(c, CopyInfo) else CopyInfo(*c) for c in copy],
            prune_info=[p if isinstance(p, PruneInfo) else PruneInfo(*p) for p in prune],
            check_info=[c if isinstance(c, CheckInfo) else CheckInfo(c) for c in check],
        )

    return factory


@pytest.fixture
def tmp_config_dir(tmp_path):
    """Create a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def sample_config_toml(tmp_path):
    """Return a sample valid TOML configuration string."""
    repository = tmp_path / "repository"
    repository.mkdir(exist_ok=True)
    return f"""
[global]
repository = "{repository}"
duplicacy_path = "/usr/local/bin/duplicacy"
log_dir = "{tmp_path / 'logs'}"
log_keep = 7

[[storage]]
name = "b2"
threads = 10
vss = true
vss_timeout = "400"

[[storage]]
name = "azure"
quote = "-limit-rate 5000"

[[copy]]
name = "b2"
to = "azure"
threads = "5"

[[prune]]
storage = "b2"
keep = "0:365 30:180 7:30"

[[prune]]
storage = "azure"
keep = "0:90"
threads = "4"
all = false

[[check]]
storage = "b2"
all = true

[[check]]
storage = "azure"

[notify.email]
enabled = true
smtp_host = "smtp.example.com"
smtp_port = 587
starttls = true
username = "backup"
password = "secret"
from_address = "backup@example.com"
to_addresses = ["ops@example.com", "me@example.com"]
"""


@pytest.fixture
def minimal_config_toml(tmp_path):
    """Return a minimal valid TOML configuration string."""
    return f"""
[global]
repository = "{tmp_path}"

[[storage]]
name = "primary"

[[prune]]
storage = "primary"
keep = "0:30"

[[check]]
storage = "primary"
"""


@pytest.fixture
def config_file(tmp_config_dir, sample_config_toml):
    """Create a temporary config file with sample content."""
    config_path = tmp_config_dir / "nightly.toml"
    config_path.write_text(sample_config_toml)
    return config_path


@pytest.fixture
def minimal_config_file(tmp_config_dir, minimal_config_toml):
    """Create a temporary config file with minimal content."""
    config_path = tmp_config_dir / "minimal.toml"
    config_path.write_text(minimal_config_toml)
    return config_path
