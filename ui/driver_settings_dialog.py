"""Settings dialog for the pnputil location and delete behaviour."""
from __future__ import annotations

from pathlib import Path

from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QDialogButtonBox,
    QDoubleSpinBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pnputil_manager.paths import default_pnputil_path
from pnputil_manager.user_settings import SettingsStore, UserSettings


class DriverSettingsDialog(QDialog):
    def __init__(self, settings: UserSettings, store: SettingsStore, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._settings = settings
        self._store = store
        self.setWindowTitle("Driver Store Settings")
        self.setMinimumWidth(520)
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        form = QFormLayout()

        self._pnputil_path = QLineEdit(self._settings.pnputil_path)
        self._pnputil_path.setPlaceholderText(default_pnputil_path())
        form.addRow("pnputil.exe", self._make_file_picker(self._pnputil_path, "Select pnputil.exe"))

        self._force_delete = QCheckBox("Pass /force when deleting (removes drivers still in use)")
        self._force_delete.setChecked(self._settings.force_delete)
        form.addRow("", self._force_delete)

        # 0 disables the timeout.
        self._timeout = QDoubleSpinBox()
        self._timeout.setRange(0, 3600)
        self._timeout.setDecimals(0)
        self._timeout.setSuffix(" s")
        self._timeout.setSpecialValueText("No timeout")
        self._timeout.setValue(self._settings.command_timeout_seconds or 0)
        form.addRow("Command timeout", self._timeout)
        layout.addLayout(form)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._save)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _make_file_picker(self, field: QLineEdit, title: str) -> QWidget:
        container = QWidget()
        row = QHBoxLayout(container)
        row.setContentsMargins(0, 0, 0, 0)
        row.addWidget(field)
        browse = QPushButton("Browse")
        browse.clicked.connect(lambda: self._browse_for_file(field, title))
        row.addWidget(browse)
        return container

    def _browse_for_file(self, field: QLineEdit, title: str) -> None:
        current = field.text().strip()
        start_dir = str(Path(current).parent) if current else str(Path.home())
        path, _ = QFileDialog.getOpenFileName(self, title, start_dir, "Executables (*.exe);;All Files (*)")
        if path:
            field.setText(path)

    def _save(self) -> None:
        self._settings.pnputil_path = self._pnputil_path.text().strip()
        self._settings.force_delete = self._force_delete.isChecked()
        timeout = self._timeout.value()
        self._settings.command_timeout_seconds = timeout if timeout > 0 else None
        self._store.save(self._settings)
        self.accept()
