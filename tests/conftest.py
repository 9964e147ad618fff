import logging

import pytest

from mixconf.format_resolver import FormatResolver


@pytest.fixture(autouse=True)
def reset_mixconf_logging():
    """Drop handlers installed by setup_logging so they don't outlive a test"""
    yield
    logger = logging.getLogger("mixconf")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Run the test from an empty mix workspace"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def system_format_file(tmp_path):
    """A stand-in for /usr/share/defaults/swupd/format"""
    path = tmp_path / "swupd-format"
    path.write_text("29\n")
    return path


@pytest.fixture
def no_system_format(tmp_path, monkeypatch):
    """Make sure the real system default file is never consulted"""
    missing = tmp_path / "does-not-exist" / "format"
    monkeypatch.setattr("mixconf.format_resolver.DEFAULT_FORMAT_PATH", str(missing))
    return missing


@pytest.fixture
def resolver(workspace, system_format_file):
    return FormatResolver(config_path=workspace / "builder.conf", system_path=system_format_file)


@pytest.fixture
def legacy_config(workspace):
    """A pre-versioning builder.conf in INI layout"""
    path = workspace / "builder.conf"
    path.write_text(
        """[Builder]
BUNDLE_DIR = /home/clr/mix/mix-bundles
CERT = /home/clr/mix/Swupd_Root.pem
SERVER_STATE_DIR = /home/clr/mix/update
VERSIONS_PATH = /home/clr/mix
YUM_CONF = /home/clr/mix/.yum-mix.conf

[swupd]
BUNDLE=os-core-update
CONTENTURL=http://example.com/update
VERSIONURL=http://example.com/update
FORMAT=2

[Server]
debuginfo_banned=true
debuginfo_lib=/usr/lib/debug
debuginfo_src=/usr/src/debug

[Mixer]
LOCAL_BUNDLE_DIR=/home/clr/mix/local-bundles
LOCAL_RPM_DIR=
LOCAL_REPO_DIR=
"""
    )
    return path
