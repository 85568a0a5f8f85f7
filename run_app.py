import os
import sys

APP_NAME = "CouncilPortal"

# Precompute data dir next to the executable/script so data travels with the app
base_dir = os.path.dirname(sys.executable) if getattr(sys, "frozen", False) else os.path.abspath(os.path.dirname(__file__))
data_root = os.path.join(base_dir, "data")
os.makedirs(data_root, exist_ok=True)
# Ensure Config sees this path on import
os.environ.setdefault("PORTAL_DATA_DIR", data_root)

from council_portal import create_app  # noqa: E402


if __name__ == "__main__":
    # In frozen mode, ensure CWD points to the unpacked bundle for relative assets
    if hasattr(sys, "_MEIPASS"):
        os.chdir(sys._MEIPASS)

    # Create app after env is set so Config picks up PORTAL_DATA_DIR
    app = create_app()
    app.logger.info("%s using data dir %s", APP_NAME, os.environ["PORTAL_DATA_DIR"])

    app.run(host="127.0.0.1", port=5000, debug=False)
