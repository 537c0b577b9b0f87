# app_gui.py
# Version: 1.1.1
# Main GUI module for Disaster Drive - MainWindow hosting the four tabs, the Qt timer that drives
# the simulated backup clock, and the footer status line.

from datetime import datetime
import logging

from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QLabel, QTabWidget, QMessageBox
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction, QFont, QKeySequence

from app_gui_tabs import BackupTab, RecoveryTab, MonitoringTab, ProfileTab, DARK_GREY, LIGHT_BLUE
from app_core import (
    EventDispatcher, SECTION_BACKUP, SECTION_RECOVERY, SECTION_MONITORING, SECTION_PROFILE
)

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Disaster Drive: A Comprehensive System for Resilient Data Protection and Recovery"
BANNER_TEXT = "Disaster Drive - Resilient Data Protection"

TAB_BACKUP = "🔄 Data Backup"
TAB_RECOVERY = "💾 Recovery Simulation"
TAB_MONITORING = "📊 System Health"
TAB_PROFILE = "👤 User Profile"

class QtTickSource:
    """Tick source backed by a repeating QTimer on the GUI thread."""

    def __init__(self, parent=None):
        self.timer = QTimer(parent)
        self._callback = None
        self.timer.timeout.connect(self._on_timeout)

    def start(self, interval_ms: int, callback):
        self._callback = callback
        self.timer.start(interval_ms)

    def stop(self):
        self.timer.stop()

    def _on_timeout(self):
        if self._callback:
            self._callback()

class MainWindow(QMainWindow):
    """Main application window for Disaster Drive."""

    def __init__(self, config=None, logging_manager=None, dispatcher=None):
        super().__init__()

        self.logging_manager = logging_manager
        if dispatcher is not None:
            self.dispatcher = dispatcher
            self.tick_source = dispatcher.backup_clock.tick_source
        else:
            self.tick_source = QtTickSource(self)
            self.dispatcher = EventDispatcher(
                config=config,
                tick_source=self.tick_source,
                logging_manager=logging_manager,
            )
        self.config = self.dispatcher.config

        self.setup_window()
        self.setup_menu_bar()
        self.setup_central_widget()
        self.setup_status_bar()
        self.connect_signals()

        # Same order as the form being built: profile into the form, then first health reading
        self.profile_tab.populate(self.dispatcher.load_profile())
        self.dispatcher.refresh_monitoring()
        self.render_all()

    def setup_window(self):
        """Set up the main window properties."""
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(self.config.window_width, self.config.window_height)

    def setup_menu_bar(self):
        """Set up the menu bar."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        self.quit_action = QAction("E&xit", self)
        self.quit_action.setShortcut(QKeySequence.Quit)
        self.quit_action.triggered.connect(self.close)
        file_menu.addAction(self.quit_action)

        help_menu = menubar.addMenu("&Help")
        self.about_action = QAction("&About", self)
        self.about_action.triggered.connect(self.show_about)
        help_menu.addAction(self.about_action)

    def setup_central_widget(self):
        """Banner plus the tab widget."""
        central_widget = QWidget()
        layout = QVBoxLayout(central_widget)

        banner = QLabel(BANNER_TEXT)
        banner.setAlignment(Qt.AlignCenter)
        banner.setFont(QFont("SansSerif", 24, QFont.Bold))
        banner.setStyleSheet(f"QLabel {{ color: {DARK_GREY}; padding: 10px 0 20px 0; }}")
        layout.addWidget(banner)

        self.tabs = QTabWidget()
        self.tabs.setStyleSheet(f"QTabWidget::pane {{ background-color: {LIGHT_BLUE}; }}")
        self.backup_tab = BackupTab()
        self.recovery_tab = RecoveryTab()
        self.monitoring_tab = MonitoringTab()
        self.profile_tab = ProfileTab()
        self.tabs.addTab(self.backup_tab, TAB_BACKUP)
        self.tabs.addTab(self.recovery_tab, TAB_RECOVERY)
        self.tabs.addTab(self.monitoring_tab, TAB_MONITORING)
        self.tabs.addTab(self.profile_tab, TAB_PROFILE)
        layout.addWidget(self.tabs, 1)

        self.setCentralWidget(central_widget)

    def setup_status_bar(self):
        """Footer line with the last completed backup time."""
        self.status_bar = self.statusBar()
        self.status_label = QLabel()
        self.status_label.setStyleSheet("QLabel { font-style: italic; font-size: 12px; color: #7f8c8d; }")
        self.status_label.setAlignment(Qt.AlignCenter)
        self.status_bar.addWidget(self.status_label, 1)
        self.update_status_line()

    def connect_signals(self):
        """Connect tab signals to dispatcher actions."""
        self.backup_tab.backup_requested.connect(self.dispatcher.start_backup)
        self.backup_tab.file_selected.connect(self.dispatcher.select_file)
        self.recovery_tab.recovery_requested.connect(self.dispatcher.simulate_recovery)
        self.monitoring_tab.refresh_requested.connect(self.dispatcher.refresh_monitoring)
        self.profile_tab.save_requested.connect(self.on_save_profile)
        self.profile_tab.load_requested.connect(self.on_load_profile)

        # Connected after the tabs exist so building the window does not log a switch
        self.tabs.currentChanged.connect(self.on_tab_changed)

        self.dispatcher.add_listener(self.on_state_changed)

    def on_tab_changed(self, index: int):
        if index < 0:
            return
        self.dispatcher.on_tab_changed(self.tabs.tabText(index), datetime.now())

    def on_save_profile(self, username: str, email: str, role: str, password: str):
        self.dispatcher.save_profile(username, email, role, password=password)
        self.status_bar.showMessage("Profile saved", 2000)

    def on_load_profile(self):
        self.profile_tab.populate(self.dispatcher.load_profile())

    def on_state_changed(self, section: str):
        """Re-render only the tab whose state group changed."""
        state = self.dispatcher.state
        if section == SECTION_BACKUP:
            self.backup_tab.render(state)
            self.update_status_line()
        elif section == SECTION_RECOVERY:
            self.recovery_tab.render(state)
        elif section == SECTION_MONITORING:
            self.monitoring_tab.render(state)
        elif section == SECTION_PROFILE:
            # The form already holds what was saved; nothing else shows the profile
            pass

    def render_all(self):
        state = self.dispatcher.state
        self.backup_tab.render(state)
        self.recovery_tab.render(state)
        self.monitoring_tab.render(state)
        self.update_status_line()

    def update_status_line(self):
        last = self.dispatcher.state.backup.last_completed_at or "N/A"
        self.status_label.setText(f"Status: System Ready | Last Backup: {last}")

    def show_about(self):
        QMessageBox.about(
            self,
            "About Disaster Drive",
            "Disaster Drive\n\nSimulated backup, recovery, system health and profile management."
        )

    def closeEvent(self, event):
        """Stop the backup timer before the window goes away."""
        self.tick_source.stop()
        self.dispatcher.remove_listener(self.on_state_changed)
        logger.info("Main window closed")
        event.accept()
