"""Connection screen: address field, Connect, Find automatically, status line.

The window holds no connection logic. It emits requests and renders the
state and status it is given.

Usage:
    from embyconnect.ui.connect_window import ConnectWindow

    window = ConnectWindow()
    window.connect_requested.connect(worker.submit_manual)
    window.discover_requested.connect(worker.discover)
    worker.state_changed.connect(window.set_state)
    worker.status_changed.connect(window.set_status)
"""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from embyconnect.models.status import ConnectionState, StatusMessage
from embyconnect.ui.theme import theme_manager
from embyconnect.ui.tokens import sizing, spacing, typography

HEADING_TEXT = "Welcome to the unofficial Emby app"
PLACEHOLDER_TEXT = "Enter Emby server IP (e.g., 192.168.1.100)"

CONNECT_LABEL = "Connect"
CHECKING_LABEL = "Checking..."
DISCOVER_LABEL = "Find automatically"
SEARCHING_LABEL = "Searching..."


class ConnectWindow(QWidget):
    """Top-level window asking how to reach the Emby server.

    Input controls are enabled only in the IDLE state.

    Example:
        window = ConnectWindow()
        window.set_state(ConnectionState.IDLE)
        window.set_status(StatusMessage("Server not accessible.", is_error=True))
    """

    connect_requested = Signal(str)  # Raw address text
    discover_requested = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        """Initialize the window.

        Args:
            parent: Optional parent widget.
        """
        super().__init__(parent)
        self._state = ConnectionState.INITIALIZING
        self._status = StatusMessage("")
        self.setWindowTitle("Emby Connect")
        self.setMinimumWidth(sizing.window_min_width)
        self._setup_ui()
        self._apply_style()
        self.set_state(ConnectionState.INITIALIZING)
        theme_manager.theme_changed.connect(self._apply_style)

    @property
    def address(self) -> str:
        """Return the current address field text."""
        return self._input.text()

    @property
    def state(self) -> ConnectionState:
        """Return the last state rendered."""
        return self._state

    @property
    def status(self) -> StatusMessage:
        """Return the last status rendered."""
        return self._status

    def _setup_ui(self) -> None:
        """Build the widget tree."""
        layout = QVBoxLayout(self)
        layout.setSpacing(spacing.lg)
        layout.setContentsMargins(spacing.xl, spacing.xl, spacing.xl, spacing.xl)

        self._heading = QLabel(HEADING_TEXT)
        self._heading.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._heading)

        row = QHBoxLayout()
        row.setSpacing(spacing.md)

        self._input = QLineEdit()
        self._input.setPlaceholderText(PLACEHOLDER_TEXT)
        self._input.setMinimumWidth(sizing.input_min_width)
        self._input.returnPressed.connect(self._on_connect_clicked)
        row.addWidget(self._input, 1)

        self._connect_btn = QPushButton(CONNECT_LABEL)
        self._connect_btn.setObjectName("primary")
        self._connect_btn.setMinimumWidth(sizing.button_min_width)
        self._connect_btn.clicked.connect(self._on_connect_clicked)
        row.addWidget(self._connect_btn)

        layout.addLayout(row)

        self._discover_btn = QPushButton(DISCOVER_LABEL)
        self._discover_btn.clicked.connect(self._on_discover_clicked)
        layout.addWidget(self._discover_btn, 0, Qt.AlignmentFlag.AlignCenter)

        self._status_label = QLabel()
        self._status_label.setWordWrap(True)
        self._status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._status_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self._status_label.setVisible(False)
        layout.addWidget(self._status_label)

        layout.addStretch()

    def _apply_style(self) -> None:
        """Apply the current palette."""
        p = theme_manager.palette
        self.setStyleSheet(f"""
            ConnectWindow {{
                background-color: {p.background};
            }}
            QLabel {{
                background: transparent;
                color: {p.text};
                font-family: {typography.font_family};
            }}
            QLineEdit {{
                background: {p.surface};
                border: 1px solid {p.border};
                border-radius: {sizing.border_radius_md}px;
                padding: {spacing.sm}px {spacing.md}px;
                color: {p.text};
                font-size: {typography.body}pt;
            }}
            QLineEdit:disabled {{
                color: {p.text_disabled};
            }}
            QPushButton {{
                background: {p.surface};
                border: 1px solid {p.border};
                border-radius: {sizing.border_radius_md}px;
                padding: {spacing.sm}px {spacing.lg}px;
                color: {p.text};
                font-size: {typography.body}pt;
            }}
            QPushButton#primary {{
                background: {p.accent};
                border: none;
                color: white;
                font-weight: bold;
            }}
            QPushButton:disabled {{
                color: {p.text_disabled};
            }}
        """)
        self._heading.setStyleSheet(f"font-size: {typography.heading}pt; font-weight: bold;")
        self._render_status()

    # -- Slots -----------------------------------------------------------------

    def set_state(self, state: ConnectionState) -> None:
        """Enable or disable controls for a state.

        Args:
            state: Current orchestrator state.
        """
        self._state = state
        enabled = state.accepts_input
        self._input.setEnabled(enabled)
        self._connect_btn.setEnabled(enabled)
        self._discover_btn.setEnabled(enabled)

        checking = state in (ConnectionState.CHECKING_MANUAL, ConnectionState.CHECKING_SAVED)
        self._connect_btn.setText(CHECKING_LABEL if checking else CONNECT_LABEL)
        discovering = state is ConnectionState.DISCOVERING
        self._discover_btn.setText(SEARCHING_LABEL if discovering else DISCOVER_LABEL)
        if state.is_busy:
            self.setCursor(Qt.CursorShape.BusyCursor)
        else:
            self.unsetCursor()

    def set_status(self, message: StatusMessage) -> None:
        """Show a status message below the controls.

        Args:
            message: Message to show; empty text hides the status line.
        """
        self._status = message
        self._render_status()

    def set_address(self, address: str) -> None:
        """Pre-fill the address field.

        Args:
            address: Address to show.
        """
        self._input.setText(address)

    def _render_status(self) -> None:
        p = theme_manager.palette
        message = self._status
        self._status_label.setText(message.text)
        self._status_label.setVisible(bool(message.text))
        color = p.error if message.is_error else p.text_secondary
        self._status_label.setStyleSheet(f"color: {color}; font-size: {typography.small}pt;")
        self._status_label.setProperty("error", message.is_error)

    def _on_connect_clicked(self) -> None:
        if self._state.accepts_input:
            self.connect_requested.emit(self._input.text())

    def _on_discover_clicked(self) -> None:
        if self._state.accepts_input:
            self.discover_requested.emit()
