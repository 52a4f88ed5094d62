import pytest

from hvr.ui import DownloadForm, MainMenu, SearchForm, UploadForm


def _type(form, text):
    for char in text:
        assert form.update(char) is False


def test_main_menu_initial_view():
    menu = MainMenu()
    assert menu.view() == (
        "Hamilton Venus Registry\n\n"
        "> Upload\n  Download\n  Search\n  Quit\n"
        "\nPress q to quit.\n"
    )


def test_main_menu_choices_match_source():
    assert MainMenu().choices == ["Upload", "Download", "Search", "Quit"]


@pytest.mark.parametrize("key", ["down", "j"])
def test_main_menu_moves_down_and_stops_at_end(key):
    menu = MainMenu()
    for _ in range(10):
        assert menu.update(key) is False
    assert menu.cursor == len(menu.choices) - 1


@pytest.mark.parametrize("key", ["up", "k"])
def test_main_menu_up_stops_at_top(key):
    menu = MainMenu()
    menu.update("down")
    menu.update(key)
    menu.update(key)
    assert menu.cursor == 0


@pytest.mark.parametrize("key", ["enter", " "])
def test_main_menu_selects_highlighted_choice(key):
    menu = MainMenu()
    menu.update("down")
    menu.update("down")
    assert menu.update(key) is True
    assert menu.selected == "Search"


@pytest.mark.parametrize("key", ["q", "ctrl+c"])
def test_main_menu_quit_selects_nothing(key):
    menu = MainMenu()
    assert menu.update(key) is True
    assert menu.selected == ""


def test_main_menu_cursor_marker_follows_cursor():
    menu = MainMenu()
    menu.update("down")
    view = menu.view()
    assert "> Download\n" in view
    assert "  Upload\n" in view


def test_main_menu_ignores_other_keys():
    menu = MainMenu()
    assert menu.update("x") is False
    assert menu.cursor == 0
    assert menu.selected == ""


def test_download_form_collects_name_and_version():
    form = DownloadForm()
    _type(form, "lib")
    assert "Enter library name: lib" in form.view()
    assert form.update("enter") is False
    _type(form, "1.0.0")
    view = form.view()
    assert "Library name: lib\n" in view
    assert "Enter library version: 1.0.0" in view
    assert form.update("enter") is False
    assert form.view().startswith("Download a library\n\n")
    assert "Downloading lib version 1.0.0\n" in form.view()
    assert form.update("enter") is True
    assert (form.name, form.version) == ("lib", "1.0.0")


def test_download_form_backspace_edits_current_field():
    form = DownloadForm()
    _type(form, "abc")
    form.update("backspace")
    assert form.name == "ab"
    form.update("enter")
    form.update("backspace")
    assert form.version == ""
    assert form.name == "ab"


def test_download_form_ignores_typing_after_last_step():
    form = DownloadForm(name="a", version="1", step=2)
    assert form.update("x") is False
    assert (form.name, form.version) == ("a", "1")


@pytest.mark.parametrize("key", ["q", "ctrl+c"])
def test_download_form_quit_keys(key):
    form = DownloadForm()
    assert form.update(key) is True
    assert form.name == ""


def test_search_form_collects_query():
    form = SearchForm()
    _type(form, "test")
    assert "Enter search query: test" in form.view()
    assert "Press Enter to search, Ctrl+C to quit" in form.view()
    assert form.update("enter") is False
    assert "Searching for: test\n" in form.view()
    assert form.update("enter") is True
    assert form.query == "test"


def test_search_form_backspace_on_empty_query():
    form = SearchForm()
    form.update("backspace")
    assert form.query == ""
    assert form.step == 0


def test_upload_form_collects_all_fields():
    form = UploadForm()
    _type(form, "lib")
    form.update("enter")
    _type(form, "2.0.0")
    form.update("enter")
    _type(form, "x.zip")
    view = form.view()
    assert "Library name: lib\n" in view
    assert "Library version: 2.0.0\n" in view
    assert "Enter file path: x.zip" in view
    assert "Press Enter to upload, Ctrl+C to quit" in view
    assert form.update("enter") is False
    assert "Uploading lib version 2.0.0 from file x.zip\n" in form.view()
    assert form.update("enter") is True
    assert (form.name, form.version, form.file) == ("lib", "2.0.0", "x.zip")


def test_upload_form_backspace_only_touches_file_at_step_two():
    form = UploadForm(name="n", version="v", file="ab", step=2)
    form.update("backspace")
    assert (form.name, form.version, form.file) == ("n", "v", "a")


def test_upload_form_views_start_with_title():
    form = UploadForm()
    for _ in range(4):
        assert form.view().startswith("Upload a library\n\n")
        form.update("enter")
    assert form.step == 3