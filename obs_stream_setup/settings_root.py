from pathlib import Path

import platformdirs

APP_NAME = "ObsStreamSetup"
APP_AUTHOR = "obs_stream_setup"


def default_obs_settings_root() -> Path:
    """
    OBS Studio の設定ディレクトリ。

    Windows: %APPDATA%\\obs-studio
    macOS: ~/Library/Application Support/obs-studio
    Linux: ~/.config/obs-studio
    """
    return platformdirs.user_config_path(
        appname="obs-studio",
        appauthor=False,
        roaming=True,
    )


def default_config_file_path() -> Path:
    config_dir = platformdirs.user_config_path(
        appauthor=APP_AUTHOR,
        appname=APP_NAME,
    )
    return config_dir / "config.json"


def default_credential_file_path() -> Path:
    config_dir = platformdirs.user_config_path(
        appauthor=APP_AUTHOR,
        appname=APP_NAME,
    )
    return config_dir / "credentials.json"
