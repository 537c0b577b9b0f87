# app_gui_tabs.py
# Version: 1.0.3
# Tab widgets for the Disaster Drive main window: backup, recovery simulation, system health,
# and user profile. Tabs only render AppState and emit signals; the main window wires them
# to the event dispatcher.

from typing import List

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QPushButton,
    QProgressBar, QPlainTextEdit, QGroupBox, QLineEdit, QComboBox, QFileDialog, QMenu
)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor, QFont

from app_types import AppState, Role, UserProfile, METRIC_NAMES

PRIMARY_BLUE = "#3498db"
LIGHT_BLUE = "#ecf5ff"
DARK_GREY = "#2c3e50"
SUCCESS_GREEN = "#2ecc71"
WARNING_ORANGE = "#e67e22"

METRIC_LABELS = {"CPU": "CPU Usage", "Disk": "Disk Space", "Memory": "Memory Usage"}

def styled_button(text: str, color: str) -> QPushButton:
    button = QPushButton(text)
    button.setCursor(Qt.PointingHandCursor)
    button.setMinimumSize(150, 35)
    button.setStyleSheet(
        f"QPushButton {{ background-color: {color}; color: white; border: none; font-size: 14px; }}"
        f"QPushButton:hover {{ background-color: {QColor(color).darker().name()}; }}"
    )
    return button

def header_label(text: str) -> QLabel:
    label = QLabel(text)
    label.setFont(QFont("SansSerif", 18, QFont.Bold))
    label.setStyleSheet(f"QLabel {{ color: {DARK_GREY}; }}")
    label.setAlignment(Qt.AlignCenter)
    return label

class LogView(QGroupBox):
    """Read-only titled log pane that appends only lines it has not shown yet."""

    def __init__(self, title: str, parent=None):
        super().__init__(title, parent)
        layout = QVBoxLayout(self)
        self.text = QPlainTextEdit()
        self.text.setReadOnly(True)
        self.text.setStyleSheet("QPlainTextEdit { background-color: white; font-style: italic; }")
        layout.addWidget(self.text)
        self._shown = 0

    def render(self, lines: List[str]):
        if len(lines) < self._shown:
            self.text.clear()
            self._shown = 0
        for line in lines[self._shown:]:
            self.text.appendPlainText(line)
        self._shown = len(lines)
        scrollbar = self.text.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())

    def line_count(self) -> int:
        return self._shown

class _TabPage(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet(f"background-color: {LIGHT_BLUE};")
        self.layout_ = QVBoxLayout(self)
        self.layout_.setContentsMargins(20, 20, 20, 20)
        self.layout_.setSpacing(10)

class BackupTab(_TabPage):
    """Backup tab: file picker, start button, progress bar and log."""

    backup_requested = Signal()
    file_selected = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout_.addWidget(header_label("Initiate Secure Data Backup"))

        buttons = QHBoxLayout()
        self.select_button = styled_button("Select Files/Folders", PRIMARY_BLUE)
        self.select_menu = QMenu(self.select_button)
        self.select_menu.addAction("Files...", self._pick_file)
        self.select_menu.addAction("Folder...", self._pick_folder)
        self.select_button.setMenu(self.select_menu)
        self.backup_button = styled_button("Initiate Backup", PRIMARY_BLUE)
        self.backup_button.clicked.connect(self.backup_requested)
        buttons.addWidget(self.select_button)
        buttons.addWidget(self.backup_button)
        buttons.addStretch()
        self.layout_.addLayout(buttons)

        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setValue(0)
        self.progress.setTextVisible(True)
        self.layout_.addWidget(self.progress)

        self.log_view = LogView("Backup Log")
        self.layout_.addWidget(self.log_view, 1)

    def _pick_file(self):
        path, _ = QFileDialog.getOpenFileName(self, "Select Files")
        if path:
            self.file_selected.emit(path)

    def _pick_folder(self):
        path = QFileDialog.getExistingDirectory(self, "Select Folder")
        if path:
            self.file_selected.emit(path)

    def render(self, state: AppState):
        self.progress.setValue(state.backup.progress_percent)
        self.backup_button.setEnabled(not state.backup_running)
        self.log_view.render(state.backup.log)

class RecoveryTab(_TabPage):
    recovery_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout_.addWidget(header_label("Simulate Data Recovery Process"))

        self.recovery_button = styled_button("Simulate Recovery", PRIMARY_BLUE)
        self.recovery_button.clicked.connect(self.recovery_requested)
        row = QHBoxLayout()
        row.addWidget(self.recovery_button)
        row.addStretch()
        self.layout_.addLayout(row)

        self.log_view = LogView("Recovery Simulation Log")
        self.layout_.addWidget(self.log_view, 1)

    def render(self, state: AppState):
        self.log_view.render(state.recovery.log)

class MonitoringTab(_TabPage):
    """System health tab: one bar per metric plus the health log."""

    refresh_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout_.addWidget(header_label("Real-Time System Health Monitoring"))

        self.refresh_button = styled_button("Refresh Health Check", PRIMARY_BLUE)
        self.refresh_button.clicked.connect(self.refresh_requested)
        row = QHBoxLayout()
        row.addWidget(self.refresh_button)
        row.addStretch()
        self.layout_.addLayout(row)

        self.metric_bars = {}
        grid = QGridLayout()
        for i, name in enumerate(METRIC_NAMES):
            bar = QProgressBar()
            bar.setRange(0, 100)
            bar.setTextVisible(True)
            bar.setFormat(f"{METRIC_LABELS[name]}: %p%")
            grid.addWidget(QLabel(METRIC_LABELS[name]), i, 0)
            grid.addWidget(bar, i, 1)
            self.metric_bars[name] = bar
        self.layout_.addLayout(grid)

        self.log_view = LogView("Health Alerts Log")
        self.layout_.addWidget(self.log_view, 1)

    def render(self, state: AppState):
        for name, bar in self.metric_bars.items():
            bar.setValue(int(state.monitoring.metrics.get(name, 0)))
        self.log_view.render(state.monitoring.log)

class ProfileTab(_TabPage):
    """Profile form. The password field is collected but never leaves the widget."""

    save_requested = Signal(str, str, str, str)
    load_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout_.addWidget(header_label("Manage User Profile"))

        form = QGridLayout()
        self.username_edit = QLineEdit()
        self.email_edit = QLineEdit()
        self.password_edit = QLineEdit()
        self.password_edit.setEchoMode(QLineEdit.Password)
        self.role_combo = QComboBox()
        self.role_combo.addItems([role.value for role in Role])

        for row, (label, widget) in enumerate([
            ("Username:", self.username_edit),
            ("Email:", self.email_edit),
            ("Password:", self.password_edit),
            ("Role:", self.role_combo),
        ]):
            form.addWidget(QLabel(label), row, 0)
            form.addWidget(widget, row, 1)

        self.save_button = styled_button("Save Profile", SUCCESS_GREEN)
        self.save_button.clicked.connect(self._emit_save)
        self.load_button = styled_button("Load Profile", WARNING_ORANGE)
        self.load_button.clicked.connect(self.load_requested)
        form.addWidget(self.save_button, 4, 0)
        form.addWidget(self.load_button, 4, 1)

        self.layout_.addLayout(form)
        self.layout_.addStretch()

    def _emit_save(self):
        self.save_requested.emit(
            self.username_edit.text(),
            self.email_edit.text(),
            self.role_combo.currentText(),
            self.password_edit.text(),
        )

    def populate(self, profile: UserProfile):
        self.username_edit.setText(profile.username)
        self.email_edit.setText(profile.email)
        self.role_combo.setCurrentText(profile.role.value)
