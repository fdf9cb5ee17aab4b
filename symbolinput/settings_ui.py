"""Settings window (Qt) for symbolinput."""
import logging

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QGroupBox, QCheckBox, QLineEdit, QPushButton,
    QFormLayout, QStatusBar, QTableWidget, QTableWidgetItem, QHeaderView,
)

from symbolinput.errors import AbbreviationTableError

logger = logging.getLogger(__name__)


class SettingsWindow(QMainWindow):
    """Settings window with all configuration options."""

    settingsSaved = pyqtSignal()

    def __init__(self, config, feature, parent=None):
        super().__init__(parent)
        self.config = config
        self.feature = feature

        self.setWindowTitle("symbolinput — Settings")
        self.setMinimumWidth(450)
        self.setMinimumHeight(520)

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        # === On/Off ===
        self._enabled_cb = QCheckBox("Enable abbreviation input")
        self._enabled_cb.setChecked(config.enabled)
        layout.addWidget(self._enabled_cb)

        # === Input ===
        input_group = QGroupBox("Input")
        input_layout = QFormLayout(input_group)

        self._leader_input = QLineEdit(config.leader)
        self._leader_input.setMaxLength(1)
        input_layout.addRow("Leader character:", self._leader_input)

        self._eager_cb = QCheckBox("Replace as soon as an abbreviation is unique")
        self._eager_cb.setChecked(config.eager_replacement_enabled)
        input_layout.addRow(self._eager_cb)

        self._languages_input = QLineEdit(", ".join(config.languages))
        self._languages_input.setPlaceholderText("lean4, markdown")
        input_layout.addRow("Languages:", self._languages_input)

        layout.addWidget(input_group)

        # === Custom translations ===
        custom_group = QGroupBox("Custom translations")
        custom_layout = QVBoxLayout(custom_group)

        self._custom_table = QTableWidget(0, 2)
        self._custom_table.setHorizontalHeaderLabels(["Abbreviation", "Symbol"])
        self._custom_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        for mnemonic, symbol in sorted(config.custom_translations.items()):
            self._append_row(mnemonic, symbol)
        custom_layout.addWidget(self._custom_table)

        row_buttons = QHBoxLayout()
        add_btn = QPushButton("Add")
        add_btn.clicked.connect(lambda: self._append_row("", ""))
        row_buttons.addWidget(add_btn)
        remove_btn = QPushButton("Remove")
        remove_btn.clicked.connect(self._remove_selected_rows)
        row_buttons.addWidget(remove_btn)
        custom_layout.addLayout(row_buttons)

        layout.addWidget(custom_group)

        # === Advanced ===
        adv_group = QGroupBox("Advanced")
        adv_layout = QFormLayout(adv_group)

        self._debug_cb = QCheckBox("Enable debug logging")
        self._debug_cb.setChecked(config.debug_logging)
        adv_layout.addRow(self._debug_cb)

        layout.addWidget(adv_group)

        # === Buttons ===
        btn_row = QHBoxLayout()
        save_btn = QPushButton("Save")
        save_btn.clicked.connect(self._save)
        btn_row.addWidget(save_btn)

        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.close)
        btn_row.addWidget(close_btn)

        layout.addLayout(btn_row)

        # Status bar
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)

    def _append_row(self, mnemonic, symbol):
        row = self._custom_table.rowCount()
        self._custom_table.insertRow(row)
        self._custom_table.setItem(row, 0, QTableWidgetItem(mnemonic))
        self._custom_table.setItem(row, 1, QTableWidgetItem(symbol))

    def _remove_selected_rows(self):
        rows = sorted({index.row() for index in self._custom_table.selectedIndexes()}, reverse=True)
        for row in rows:
            self._custom_table.removeRow(row)

    def custom_translations(self) -> dict:
        result = {}
        for row in range(self._custom_table.rowCount()):
            mnemonic_item = self._custom_table.item(row, 0)
            symbol_item = self._custom_table.item(row, 1)
            mnemonic = mnemonic_item.text().strip() if mnemonic_item else ""
            symbol = symbol_item.text() if symbol_item else ""
            if mnemonic and symbol:
                result[mnemonic] = symbol
        return result

    def _save(self):
        leader = self._leader_input.text()
        if len(leader) != 1:
            self._statusbar.showMessage("The leader must be exactly one character.", 5000)
            return
        languages = [lang.strip() for lang in self._languages_input.text().split(",") if lang.strip()]

        previous_custom = self.config.custom_translations
        self.config.set("enabled", self._enabled_cb.isChecked())
        self.config.set("leader", leader)
        self.config.set("eager_replacement_enabled", self._eager_cb.isChecked())
        self.config.set("languages", languages)
        self.config.set("custom_translations", self.custom_translations())
        self.config.set("debug_logging", self._debug_cb.isChecked())

        try:
            self.feature.config_changed()
        except AbbreviationTableError as e:
            logger.warning("Rejected custom translations: %s", e)
            self.config.set("custom_translations", previous_custom)
            self.feature.config_changed()
            self._statusbar.showMessage(f"Invalid custom translations: {e}", 5000)
            return

        self._statusbar.showMessage("Settings saved.", 3000)
        self.settingsSaved.emit()
