"""Main window hosting the driver store tab and the activity log."""
from __future__ import annotations

from datetime import datetime

from PySide6.QtCore import Qt, QThreadPool, Signal
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from pnputil_manager.user_settings import SettingsStore
from services.privilege import is_admin, relaunch_as_admin
from ui.driver_store_tab import DriverStoreTab


class MainWindow(QMainWindow):
    # Services log from worker threads; the signal marshals onto the GUI thread.
    log_requested = Signal(str)

    def __init__(self, settings_store: SettingsStore | None = None) -> None:
        super().__init__()
        self.setWindowTitle("PnPUtil Driver Store Manager")
        self.resize(1100, 720)
        self._thread_pool = QThreadPool.globalInstance()
        self._settings_store = settings_store or SettingsStore()
        self.log_requested.connect(self._append_log)
        self._build_ui()

    def _build_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)

        if not is_admin():
            banner = QHBoxLayout()
            warning = QLabel("Not running as administrator: uninstalling drivers will fail.")
            warning.setStyleSheet("color: #b45309; font-weight: 600;")
            btn_elevate = QPushButton("Restart as Administrator")
            btn_elevate.clicked.connect(self._restart_elevated)
            banner.addWidget(warning)
            banner.addStretch()
            banner.addWidget(btn_elevate)
            layout.addLayout(banner)

        splitter = QSplitter(Qt.Vertical, central)
        self._drivers_tab = DriverStoreTab(
            self.log_requested.emit,
            self._thread_pool,
            settings_store=self._settings_store,
        )
        splitter.addWidget(self._drivers_tab)
        self._log_view = QPlainTextEdit()
        self._log_view.setReadOnly(True)
        self._log_view.setMaximumBlockCount(5000)
        splitter.addWidget(self._log_view)
        splitter.setStretchFactor(0, 4)
        splitter.setStretchFactor(1, 1)
        layout.addWidget(splitter)
        self.setCentralWidget(central)

    def _append_log(self, message: str) -> None:
        stamp = datetime.now().strftime("%H:%M:%S")
        self._log_view.appendPlainText(f"{stamp} {message}")

    def _restart_elevated(self) -> None:
        if relaunch_as_admin():
            QApplication.quit()
            return
        QMessageBox.warning(self, "Elevation Failed", "Could not restart with administrator privileges.")
