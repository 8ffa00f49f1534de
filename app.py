"""PDF Batch Signer entry point."""
import sys
import logging

from PySide6.QtWidgets import QApplication

from core.capabilities import detect_capabilities
from core.utils import config_file_path
from ui.config_manager import init_config
from ui.main_window import MainWindow


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path = config_file_path()
    config = init_config(config_path)
    capabilities = detect_capabilities(config)

    app = QApplication(sys.argv)
    app.setStyle("fusion")
    main_window = MainWindow(config, capabilities, config_path)
    main_window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
