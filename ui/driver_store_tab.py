"""Driver store tab: enumerate, search, sort and uninstall driver packages."""
from __future__ import annotations

from typing import Callable, List

from PySide6.QtCore import QPoint, Qt, QThreadPool
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QLineEdit,
    QMenu,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from pnputil_manager.constants import IMMUTABLE_CONFIG
from pnputil_manager.user_settings import SettingsStore, UserSettings
from services.catalog import SortOrder, column_text
from services.driver_parser import DriverRecord
from services.driver_store import BatchReport, DriverStoreService
from services.errors import EmptyCatalogError
from ui.driver_settings_dialog import DriverSettingsDialog
from ui.workers import ServiceWorker

LogCallback = Callable[[str], None]


class DriverStoreTab(QWidget):
    def __init__(
        self,
        log_callback: LogCallback,
        thread_pool: QThreadPool,
        *,
        settings: UserSettings | None = None,
        settings_store: SettingsStore | None = None,
    ) -> None:
        super().__init__()
        self._log = log_callback
        self._thread_pool = thread_pool
        self._settings_store = settings_store or SettingsStore()
        self._settings = settings or self._settings_store.load()
        self._refresh_service()
        self._view: list[DriverRecord] = []
        self._workers: set[ServiceWorker] = set()
        self._busy = False
        self._build_ui()

    def _track_worker(self, worker: ServiceWorker) -> None:
        self._workers.add(worker)
        worker.signals.finished.connect(lambda *_: self._workers.discard(worker))
        worker.signals.error.connect(lambda *_: self._workers.discard(worker))

    def _refresh_service(self) -> None:
        self._service = DriverStoreService(settings=self._settings, log_callback=self._log)

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        button_row = QHBoxLayout()
        self._btn_enumerate = QPushButton("Enumerate Drivers")
        self._btn_enumerate.setMinimumWidth(150)
        self._search = QLineEdit()
        self._search.setPlaceholderText(IMMUTABLE_CONFIG.display.search_placeholder)
        self._search.setClearButtonEnabled(True)
        self._btn_search = QPushButton("Search")
        self._btn_uninstall = QPushButton("Uninstall Selected")
        self._btn_settings = QPushButton("Settings")
        button_row.addWidget(self._btn_enumerate)
        button_row.addWidget(self._search, 1)
        button_row.addWidget(self._btn_search)
        button_row.addStretch()
        button_row.addWidget(self._btn_uninstall)
        button_row.addWidget(self._btn_settings)
        layout.addLayout(button_row)

        captions = IMMUTABLE_CONFIG.display.column_captions
        table = QTableWidget(0, len(captions), self)
        table.setHorizontalHeaderLabels(list(captions))
        table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        table.setSelectionBehavior(QAbstractItemView.SelectRows)
        table.setSelectionMode(QAbstractItemView.ExtendedSelection)
        table.setAlternatingRowColors(True)
        table.setContextMenuPolicy(Qt.CustomContextMenu)
        table.verticalHeader().setVisible(False)
        header = table.horizontalHeader()
        header.setStretchLastSection(True)
        header.setSectionsClickable(True)
        header.setSortIndicatorShown(True)
        for column in range(len(captions)):
            header.setSectionResizeMode(column, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(2, QHeaderView.ResizeMode.Stretch)
        layout.addWidget(table)
        self._table = table

        self._btn_enumerate.clicked.connect(self._start_enumerate)
        self._btn_search.clicked.connect(self._apply_filter)
        self._search.returnPressed.connect(self._apply_filter)
        self._btn_uninstall.clicked.connect(self._start_uninstall)
        self._btn_settings.clicked.connect(self._open_settings)
        header.sectionClicked.connect(self._handle_column_click)
        table.customContextMenuRequested.connect(self._show_context_menu)

    def _start_enumerate(self) -> None:
        if self._busy:
            return
        self._set_busy(True)
        self._log("Enumerating driver packages...")
        worker = ServiceWorker(self._service.refresh)
        worker.signals.finished.connect(self._handle_enumerate_results)
        worker.signals.error.connect(self._handle_error)
        self._track_worker(worker)
        self._thread_pool.start(worker)

    def _handle_enumerate_results(self, records: List[DriverRecord]) -> None:
        self._set_busy(False)
        self._apply_filter()

    def _apply_filter(self) -> None:
        try:
            self._view = self._service.view(self._search.text())
        except EmptyCatalogError:
            QMessageBox.information(
                self,
                "No Drivers Loaded",
                "Please enumerate drivers first by clicking 'Enumerate Drivers' button.",
            )
            self._clear_table()
            return
        self._populate_table()

    def _handle_column_click(self, column: int) -> None:
        self._service.click_column(column)
        if self._service.catalog:
            self._view = self._service.view(self._search.text())
            self._populate_table()
        else:
            self._update_sort_indicator()

    def _populate_table(self) -> None:
        table = self._table
        table.setRowCount(len(self._view))
        for row, record in enumerate(self._view):
            for column in range(table.columnCount()):
                item = QTableWidgetItem(column_text(record, column))
                item.setData(Qt.UserRole, row)
                table.setItem(row, column, item)
        self._update_sort_indicator()

    def _clear_table(self) -> None:
        self._view = []
        self._table.setRowCount(0)

    def _update_sort_indicator(self) -> None:
        header = self._table.horizontalHeader()
        state = self._service.sort_state
        if state.order == SortOrder.NONE:
            header.setSortIndicator(-1, Qt.AscendingOrder)
            return
        qt_order = Qt.AscendingOrder if state.order == SortOrder.ASCENDING else Qt.DescendingOrder
        header.setSortIndicator(state.column, qt_order)

    def _selected_records(self) -> List[DriverRecord]:
        rows = sorted({index.row() for index in self._table.selectionModel().selectedRows()})
        return [self._view[row] for row in rows if 0 <= row < len(self._view)]

    def _show_context_menu(self, position: QPoint) -> None:
        menu = QMenu(self)
        action = menu.addAction("Uninstall Driver")
        action.setEnabled(not self._busy)
        action.triggered.connect(self._start_uninstall)
        menu.exec(self._table.viewport().mapToGlobal(position))

    def _start_uninstall(self) -> None:
        if self._busy:
            QMessageBox.information(self, "In Progress", "Wait for the current operation to finish.")
            return
        selected = self._selected_records()
        if not selected:
            QMessageBox.information(self, "No Driver Selected", "Please select at least one driver to uninstall.")
            return
        listing = "\n".join(f"- {record.published_name} ({record.original_name})" for record in selected)
        answer = QMessageBox.warning(
            self,
            "Confirm Uninstall",
            "Are you sure you want to uninstall the following driver(s)?\n\n"
            f"{listing}\n\n"
            "This operation requires administrator privileges and may require a system restart.",
            QMessageBox.Ok | QMessageBox.Cancel,
            QMessageBox.Cancel,
        )
        if answer != QMessageBox.Ok:
            return
        self._set_busy(True)
        names = [record.published_name for record in selected]
        self._log(f"Uninstalling {len(names)} driver package(s)...")
        worker = ServiceWorker(self._service.uninstall, names, with_progress=True)
        worker.signals.progress.connect(lambda done, total, message: self._log(f"[{done}/{total}] {message}"))
        worker.signals.finished.connect(self._handle_uninstall_report)
        worker.signals.error.connect(self._handle_error)
        self._track_worker(worker)
        self._thread_pool.start(worker)

    def _handle_uninstall_report(self, report: BatchReport) -> None:
        self._set_busy(False)
        self._log(f"Uninstall complete: {len(report.succeeded)} succeeded, {len(report.failed)} failed.")
        box = QMessageBox(self)
        box.setWindowTitle("Uninstall Summary")
        box.setIcon(QMessageBox.Warning if report.failed or report.refresh_error else QMessageBox.Information)
        box.setText(f"{len(report.succeeded)} driver(s) uninstalled, {len(report.failed)} failed.")
        box.setDetailedText(report.summary())
        box.exec()
        if self._service.catalog:
            self._view = self._service.view(self._search.text())
            self._populate_table()
        else:
            self._clear_table()

    def _handle_error(self, message: str) -> None:
        self._set_busy(False)
        self._log(f"[ERROR] {message}")
        QMessageBox.critical(self, "pnputil Error", message)

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        for button in (self._btn_enumerate, self._btn_search, self._btn_uninstall, self._btn_settings):
            button.setEnabled(not busy)

    def _open_settings(self) -> None:
        dialog = DriverSettingsDialog(self._settings, self._settings_store, self)
        if dialog.exec():
            self._refresh_service()
            self._clear_table()
            self._log("Driver settings saved. Re-enumerating with the new settings...")
            self._start_enumerate()
