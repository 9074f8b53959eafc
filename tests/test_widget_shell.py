from walla_schedule_export import config
from walla_schedule_export.visible_date import date_from_url
from walla_schedule_export.widget_shell import (
    LOADER_URL,
    build_widget_shell,
    day_tab_labels,
    is_widget_frame,
    widget_frame_url,
    with_date_params,
)


class TestWidgetShell:
    def test_defaults(self):
        page = build_widget_shell(start="2025-09-03", end="=2025-09-04")
        assert 'class="walla-widget-root"' in page
        assert f'data-walla-id="{config.WALLA_UUID}"' in page
        assert f'data-walla-locationid="{config.WALLA_LOCATION_ID}"' in page
        assert 'data-walla-page="classes"' in page
        assert 'data-start="2025-09-03"' in page
        assert 'data-end="2025-09-04"' in page
        assert LOADER_URL in page

    def test_no_dates(self):
        page = build_widget_shell()
        assert 'data-start=""' in page
        assert 'data-end=""' in page

    def test_attributes_escaped(self):
        page = build_widget_shell(widget_id='a"><script>', location_id="7")
        assert 'data-walla-id="a&quot;&gt;&lt;script&gt;"' in page
        assert 'data-walla-locationid="7"' in page


def test_is_widget_frame():
    assert is_widget_frame("https://widget.hellowalla.com/classes?x=1")
    assert not is_widget_frame("https://thepearl.example/schedule")
    assert not is_widget_frame("")


def test_with_date_params():
    url = with_date_params(
        "https://widget.hellowalla.com/classes?start=2025-01-01&foo=1", "2025-09-03", "2025-09-04"
    )
    assert date_from_url(url) == "2025-09-03"
    assert "foo=1" in url
    assert "end=2025-09-04" in url


def test_with_date_params_keeps_url_without_dates():
    url = "https://widget.hellowalla.com/classes?foo=1"
    assert with_date_params(url) == url


def test_day_tab_labels():
    assert day_tab_labels("2025-09-03") == ["Wed Sep 3", "Sep 3", "Wed 3"]
    assert day_tab_labels("soon") == []


def test_widget_frame_url():
    frames = ["https://ads.example/frame", "", "https://widget.hellowalla.com/classes?start=2025-09-03"]
    assert widget_frame_url(frames) == frames[2]
    assert widget_frame_url(["https://ads.example/frame"]) is None


def test_day_tab_labels_year_end():
    assert day_tab_labels("2025-12-29") == ["Mon Dec 29", "Dec 29", "Mon 29"]
