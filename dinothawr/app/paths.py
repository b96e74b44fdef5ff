# dinothawr/app/paths.py
from __future__ import annotations
from pathlib import Path



# Root directory structure constants
PACKAGE_DIR = Path(__file__).resolve().parent.parent # dinothawr/
ROOT_DIR = PACKAGE_DIR.parent                        # repository / install root
DEFAULT_BUNDLE_DIR = ROOT_DIR / "bundle"             # read-only game resources
DEFAULT_ENGINE_DIR = ROOT_DIR / "lib"                # native engine cores

USER_HOME_DIR = Path("~/.dinothawr")
USER_SETTINGS_PATH = USER_HOME_DIR / "launcher.json5"
DEFAULT_RUNTIME_DIR = USER_HOME_DIR / "runtime"      # writable staging target

# Files the launcher writes into the runtime directory
CONFIG_FILE_NAME = "retroarch.cfg"
CORE_OPTIONS_FILE_NAME = "retroarch-core-options.cfg"
OVERLAY_FILE_NAME = "overlay.cfg"
OVERLAY_BIG_FILE_NAME = "overlay_big.cfg"
