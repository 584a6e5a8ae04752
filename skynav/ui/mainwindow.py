import logging

from PySide6.QtGui import QAction, QActionGroup, QKeySequence
from PySide6.QtWidgets import QLabel, QMainWindow

from skynav.app.app_settings_manager import AppSettingsManager
from skynav.navigator.camera_state import ViewSize
from skynav.navigator.navigator import NavigationMode
from skynav.status import StatusField
from skynav.viewers.sky_viewer import SkyViewer

logger = logging.getLogger(__name__)

DEFAULT_VIEW_SIZE = ViewSize(1200, 760)


class MainWindow(QMainWindow):
    """Main application window holding the sky viewer."""

    def __init__(self, settings_mgr: AppSettingsManager | None = None,
                 view_size: ViewSize = DEFAULT_VIEW_SIZE):
        """
        Initialize the main window.

        :param settings_mgr: Application settings manager.
        :param view_size: Size of the sky view, fixed for the navigator's lifetime.
        """
        super().__init__()
        self.setting = settings_mgr or AppSettingsManager()

        self.setWindowTitle("SkyNav - Celestial Sphere")
        self.viewer = SkyViewer(view_size, settings_manager=self.setting, parent=self)
        self.setCentralWidget(self.viewer)
        self.resize(int(view_size.width), int(view_size.height) + 40)

        self._status_label: dict[str, QLabel] = {}
        self._setup_menus()
        self._setup_status_bar()

        self.viewer.statusFieldChanged.connect(self._on_status_field_changed)
        self.viewer.modeChanged.connect(self._on_mode_changed)

        self.show()
        self.viewer.start()

    def _setup_menus(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        file_menu.addAction("&Quit", self.close)

        nav_menu = menubar.addMenu("&Navigation")
        group = QActionGroup(self)
        self._gesture_action = QAction("&Gestures", self, checkable=True)
        self._gesture_action.setShortcut(QKeySequence("G"))
        self._gesture_action.triggered.connect(self.viewer.use_gestures)
        self._motion_action = QAction("&Device motion", self, checkable=True)
        self._motion_action.setShortcut(QKeySequence("M"))
        self._motion_action.triggered.connect(lambda: self.viewer.use_device_motion())
        for action in (self._gesture_action, self._motion_action):
            group.addAction(action)
            nav_menu.addAction(action)
        self._on_mode_changed(self.viewer.navigator.mode)

    def _setup_status_bar(self) -> None:
        for key, field in self.viewer.status.fields.items():
            label = QLabel(field.text(), self)
            self.statusBar().addPermanentWidget(label)
            self._status_label[key] = label
        self._mode_label = QLabel(str(self.viewer.navigator.mode), self)
        self.statusBar().addWidget(self._mode_label)

    def _on_status_field_changed(self, key: str, field: StatusField) -> None:
        label = self._status_label.get(key)
        if label is not None:
            label.setText(field.text())

    def _on_mode_changed(self, mode: NavigationMode) -> None:
        self._gesture_action.setChecked(mode is NavigationMode.GESTURE)
        self._motion_action.setChecked(mode is NavigationMode.DEVICE_MOTION)
        if hasattr(self, "_mode_label"):
            self._mode_label.setText(str(mode))
        logger.debug("Mode shown in UI: %s", mode)
