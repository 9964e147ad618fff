# ABOUTME: Static field table for builder.conf (section, attribute, key, flags)
# ABOUTME: Drives decoding, legacy conversion, env expansion and validation
"""builder.conf schema"""

from dataclasses import dataclass

CURRENT_CONFIG_VERSION = "1.0"


@dataclass(frozen=True)
class ConfigField:
    """One string field of builder.conf.

    section: TOML table the key lives in
    attr: attribute name on the section object
    key: on-disk key name
    required: must be non-empty after load
    mount: path the container runner bind-mounts
    legacy_keys: extra names accepted from the pre-versioning INI layout
    """

    section: str
    attr: str
    key: str
    required: bool = False
    mount: bool = False
    legacy_keys: tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return self.key or self.attr


@dataclass
class BuilderSection:
    cert: str = ""
    server_state_dir: str = ""
    version_path: str = ""
    dnf_conf: str = ""


@dataclass
class SwupdSection:
    bundle: str = ""
    content_url: str = ""
    version_url: str = ""


@dataclass
class ServerSection:
    debug_info_banned: str = ""
    debug_info_lib: str = ""
    debug_info_src: str = ""


@dataclass
class MixerSection:
    local_bundle_dir: str = ""
    local_repo_dir: str = ""
    local_rpm_dir: str = ""
    docker_image_path: str = ""


# Section name -> attribute on MixConfig, in on-disk order
SECTIONS = {
    "Builder": "builder",
    "Swupd": "swupd",
    "Server": "server",
    "Mixer": "mixer",
}

CONFIG_FIELDS: tuple[ConfigField, ...] = (
    # [Builder]
    ConfigField("Builder", "cert", "CERT", required=True, mount=True),
    ConfigField("Builder", "server_state_dir", "SERVER_STATE_DIR", required=True, mount=True),
    ConfigField("Builder", "version_path", "VERSIONS_PATH", required=True, mount=True),
    ConfigField("Builder", "dnf_conf", "YUM_CONF", required=True, mount=True),
    # [Swupd]
    ConfigField("Swupd", "bundle", "BUNDLE"),
    ConfigField("Swupd", "content_url", "CONTENTURL"),
    ConfigField("Swupd", "version_url", "VERSIONURL"),
    # [Server]
    ConfigField("Server", "debug_info_banned", "DEBUG_INFO_BANNED", legacy_keys=("debuginfo_banned",)),
    ConfigField("Server", "debug_info_lib", "DEBUG_INFO_LIB", legacy_keys=("debuginfo_lib",)),
    ConfigField("Server", "debug_info_src", "DEBUG_INFO_SRC", legacy_keys=("debuginfo_src",)),
    # [Mixer]
    ConfigField("Mixer", "local_bundle_dir", "LOCAL_BUNDLE_DIR", required=True, mount=True),
    ConfigField(
        "Mixer", "local_repo_dir", "LOCAL_REPO_DIR", required=True, mount=True, legacy_keys=("REPODIR",)
    ),
    ConfigField(
        "Mixer", "local_rpm_dir", "LOCAL_RPM_DIR", required=True, mount=True, legacy_keys=("RPMDIR",)
    ),
    ConfigField("Mixer", "docker_image_path", "DOCKER_IMAGE_PATH"),
)

# Key that moved from [swupd] into mixer.state
LEGACY_FORMAT_KEY = "FORMAT"


def fields_for(section: str) -> list[ConfigField]:
    return [f for f in CONFIG_FIELDS if f.section == section]
