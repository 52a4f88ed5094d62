"""Interactive terminal screens of the registry client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, ClassVar, Protocol

from blessed import Terminal
from blessed.keyboard import Keystroke

MENU_CHOICES = ("Upload", "Download", "Search", "Quit")

_QUIT_KEYS = frozenset({"ctrl+c", "q"})

_SEQUENCE_NAMES = {
    "KEY_ENTER": "enter",
    "KEY_BACKSPACE": "backspace",
    "KEY_DELETE": "delete",
    "KEY_UP": "up",
    "KEY_DOWN": "down",
    "KEY_LEFT": "left",
    "KEY_RIGHT": "right",
    "KEY_ESCAPE": "esc",
    "KEY_TAB": "tab",
}


class _Screen(Protocol):
    def update(self, key: str) -> bool: ...

    def view(self) -> str: ...


@dataclass
class MainMenu:
    """The menu of client actions; enter or space picks the highlighted one."""

    choices: list[str] = field(default_factory=lambda: list(MENU_CHOICES))
    cursor: int = 0
    selected: str = ""

    def update(self, key: str) -> bool:
        """Apply a key press; return True when the screen should close."""
        if key in _QUIT_KEYS:
            return True
        if key in ("up", "k"):
            if self.cursor > 0:
                self.cursor -= 1
        elif key in ("down", "j"):
            if self.cursor < len(self.choices) - 1:
                self.cursor += 1
        elif key in ("enter", " "):
            self.selected = self.choices[self.cursor]
            return True
        return False

    def view(self) -> str:
        lines = "".join(
            f"{'>' if index == self.cursor else ' '} {choice}\n"
            for index, choice in enumerate(self.choices)
        )
        return f"Hamilton Venus Registry\n\n{lines}\nPress q to quit.\n"


@dataclass
class _Form:
    """Text fields filled in one after another; enter moves to the next step."""

    FIELDS: ClassVar[tuple[str, ...]] = ()

    step: int = 0

    def update(self, key: str) -> bool:
        """Apply a key press; return True when the screen should close."""
        if key in _QUIT_KEYS:
            return True
        if key == "enter":
            if self.step < len(self.FIELDS):
                self.step += 1
                return False
            return True
        if self.step >= len(self.FIELDS):
            return False
        name = self.FIELDS[self.step]
        value = getattr(self, name)
        if key == "backspace":
            setattr(self, name, value[:-1])
        else:
            setattr(self, name, value + key)
        return False


@dataclass
class DownloadForm(_Form):
    """Asks for the name and version of a library to download."""

    FIELDS: ClassVar[tuple[str, ...]] = ("name", "version")

    name: str = ""
    version: str = ""

    def update(self, key: str) -> bool:
        return super().update(key)

    def view(self) -> str:
        text = "Download a library\n\n"
        if self.step == 0:
            text += f"Enter library name: {self.name}"
            text += "\n\nPress Enter to continue, Ctrl+C to quit"
        elif self.step == 1:
            text += f"Library name: {self.name}\n"
            text += f"Enter library version: {self.version}"
            text += "\n\nPress Enter to download, Ctrl+C to quit"
        elif self.step == 2:
            text += f"Downloading {self.name} version {self.version}\n"
            text += "\nPress any key to exit"
        return text


@dataclass
class SearchForm(_Form):
    """Asks for a search query."""

    FIELDS: ClassVar[tuple[str, ...]] = ("query",)

    query: str = ""

    def update(self, key: str) -> bool:
        return super().update(key)

    def view(self) -> str:
        text = "Search for libraries\n\n"
        if self.step == 0:
            text += f"Enter search query: {self.query}"
            text += "\n\nPress Enter to search, Ctrl+C to quit"
        elif self.step == 1:
            text += f"Searching for: {self.query}\n"
            text += "\nPress any key to exit"
        return text


@dataclass
class UploadForm(_Form):
    """Asks for the name, version and file of a library to upload."""

    FIELDS: ClassVar[tuple[str, ...]] = ("name", "version", "file")

    name: str = ""
    version: str = ""
    file: str = ""

    def update(self, key: str) -> bool:
        return super().update(key)

    def view(self) -> str:
        text = "Upload a library\n\n"
        if self.step == 0:
            text += f"Enter library name: {self.name}"
            text += "\n\nPress Enter to continue, Ctrl+C to quit"
        elif self.step == 1:
            text += f"Library name: {self.name}\n"
            text += f"Enter library version: {self.version}"
            text += "\n\nPress Enter to continue, Ctrl+C to quit"
        elif self.step == 2:
            text += f"Library name: {self.name}\n"
            text += f"Library version: {self.version}\n"
            text += f"Enter file path: {self.file}"
            text += "\n\nPress Enter to upload, Ctrl+C to quit"
        elif self.step == 3:
            text += f"Uploading {self.name} version {self.version} from file {self.file}\n"
            text += "\nPress any key to exit"
        return text


def _key_name(keystroke: Keystroke) -> str:
    if keystroke.is_sequence:
        name = keystroke.name or ""
        if name in _SEQUENCE_NAMES:
            return _SEQUENCE_NAMES[name]
        return name.removeprefix("KEY_").lower() or str(keystroke)
    text = str(keystroke)
    if text in ("\r", "\n"):
        return "enter"
    if text == "\x7f":
        return "backspace"
    if len(text) == 1 and 0 < ord(text) < 27:
        return "ctrl+" + chr(ord(text) + 96)
    return text


def _draw(term: Terminal, text: str) -> None:
    print(term.home + term.clear + text.replace("\n", "\r\n"), end="", flush=True)


def _run(screen: _Screen) -> None:
    term = Terminal()
    if not term.is_a_tty:
        raise OSError("not a terminal")
    with term.fullscreen(), term.raw(), term.hidden_cursor():
        while True:
            _draw(term, screen.view())
            if screen.update(_key_name(term.inkey())):
                _draw(term, screen.view())
                return


def _guarded(label: str, run: Callable[[], None]) -> bool:
    try:
        run()
    except OSError as exc:
        print(f"Error running {label} TUI: {exc}")
        return False
    return True


def run_main_tui() -> str:
    """Show the main menu; return the chosen action, or "" if none."""
    menu = MainMenu()
    if not _guarded("main", lambda: _run(menu)):
        return ""
    return menu.selected


def run_download_tui() -> tuple[str, str]:
    """Ask for a library to download; return its name and version."""
    form = DownloadForm()
    if not _guarded("download", lambda: _run(form)):
        return "", ""
    return form.name, form.version


def run_search_tui() -> str:
    """Ask for a search query and return it."""
    form = SearchForm()
    if not _guarded("search", lambda: _run(form)):
        return ""
    return form.query


def run_upload_tui() -> tuple[str, str, str, bool]:
    """Ask for a library to upload; return name, version, file and success."""
    form = UploadForm()
    if not _guarded("upload", lambda: _run(form)):
        return "", "", "", False
    return form.name, form.version, form.file, True