"""Tests for dom_rows.py – row extraction from the widget markup."""
from decimal import Decimal

from walla_schedule_export.content import HtmlContent
from walla_schedule_export.dom_rows import (
    RawRow,
    day_section_roots,
    extract_day_scoped,
    extract_global,
    parse_row,
)
from walla_schedule_export.pipeline import extract_schedule

DAY = "2025-09-03"

WIDGET_HTML = """<html><body>
<div class="tabs"><button>Daily</button><button>Wed Sep 3</button><button>Thu Sep 4</button></div>
<div class="schedule">
  <h3 class="day-header">WEDNESDAY, SEPTEMBER 3</h3>
  <div class="class-row">
    <div class="time">9:00 AM</div>
    <div class="class-title">Mat Pilates</div>
    <div class="instructor">w/ Jane Doe</div>
    <span class="badge">3 SPOTS</span>
    <span class="badge">Drop-in: $35</span>
    <button>Book</button>
  </div>
  <div class="class-row">
    <div>6:00 PM</div>
    <div>Reformer Flow</div>
    <button>Waitlist</button>
  </div>
  <h3 class="day-header">THURSDAY, SEPTEMBER 4</h3>
  <div class="class-row">
    <div>7:30 AM</div>
    <div class="class-title">Barre</div>
    <button>Sold Out</button>
  </div>
</div>
</body></html>
"""


# ── Field parser ───────────────────────────────────────────────

class TestParseRow:
    def test_full_row(self):
        row = RawRow(
            text="9:00 AM\nMat Pilates\nw/ Jane Doe\n3 SPOTS\nDrop-in: $35\nBook",
            title="Mat Pilates",
            badges=("3 SPOTS", "Drop-in: $35", "Book"),
        )
        e = parse_row(row, DAY)
        assert e.date == DAY
        assert e.time == "9:00 AM"
        assert e.class_name == "Mat Pilates"
        assert e.instructor == "Jane Doe"
        assert e.status == "open"
        assert e.open_spots == 3
        assert e.price == Decimal("35")
        assert e.price_text == "$35"

    def test_no_time_is_rejected(self):
        row = RawRow(text="Mat Pilates\nBook", title="Mat Pilates", badges=("Book",))
        assert parse_row(row, DAY) is None

    def test_title_falls_back_to_first_real_line(self):
        row = RawRow(
            text="EDT\n9:00 AM\nDrop-in: $30\nBook\nw/ Sam Lee\nTower Basics",
            title="",
            badges=("Book",),
        )
        e = parse_row(row, DAY)
        assert e.class_name == "Tower Basics"
        assert e.instructor == "Sam Lee"

    def test_action_link_is_not_a_title(self):
        row = RawRow(text="9:00 AM\nBarre\nBook", title="Book", badges=("Book",))
        assert parse_row(row, DAY).class_name == "Barre"

    def test_price_from_badge(self):
        row = RawRow(text="9:00 AM\nBarre", title="Barre", badges=("$28",))
        e = parse_row(row, DAY)
        assert e.price == 28
        assert e.price_text == "$28"

    def test_unparseable_fields_stay_unknown(self):
        row = RawRow(text="9:00 AM\nBarre\nPrice: TBD\nw/", title="Barre", badges=())
        e = parse_row(row, DAY)
        assert e.class_name == "Barre"
        assert e.instructor == ""
        assert e.price is None
        assert e.status == "unknown"
        assert e.open_spots is None

    def test_time_only_row_is_dropped(self):
        row = RawRow(text="9:00 AM\nEDT", title="", badges=("9:00 AM", "EDT"))
        assert parse_row(row, DAY) is None

    def test_reparse_is_identical(self):
        row = RawRow(text="6:00 PM\nReformer Flow\nWaitlist", title="", badges=("Waitlist",))
        assert parse_row(row, DAY) == parse_row(row, DAY)


# ── Strategies over real markup ────────────────────────────────

class TestDayScoped:
    def test_only_the_days_rows(self):
        entries = extract_day_scoped(HtmlContent(WIDGET_HTML), DAY)
        assert [e.class_name for e in entries] == ["Mat Pilates", "Reformer Flow"]

        mat, reformer = entries
        assert mat.instructor == "Jane Doe"
        assert mat.status == "open"
        assert mat.open_spots == 3
        assert mat.price == 35
        assert reformer.status == "waitlist"
        assert reformer.open_spots == 0

    def test_other_day(self):
        entries = extract_day_scoped(HtmlContent(WIDGET_HTML), "2025-09-04")
        assert [e.class_name for e in entries] == ["Barre"]
        assert entries[0].status == "full"
        assert entries[0].open_spots == 0

    def test_no_header_for_day(self):
        assert extract_day_scoped(HtmlContent(WIDGET_HTML), "2025-09-10") == []

    def test_no_date(self):
        assert extract_day_scoped(HtmlContent(WIDGET_HTML), None) == []

    def test_header_wrapped_alone_climbs_to_parent(self):
        html = """<body>
        <div class="day">
          <div class="hdr"><h2>Wednesday, September 3</h2></div>
          <ul><li><div>9:00 AM</div><div>Mat Pilates</div><button>Book</button></li></ul>
        </div>
        <div class="day">
          <div class="hdr"><h2>Thursday, September 4</h2></div>
          <ul><li><div>9:00 AM</div><div>Tower</div><button>Book</button></li></ul>
        </div>
        </body>"""
        content = HtmlContent(html)
        assert len(day_section_roots(content, DAY)) == 1
        entries = extract_day_scoped(content, DAY)
        assert [e.class_name for e in entries] == ["Mat Pilates"]
        assert entries[0].status == "open"
        assert entries[0].open_spots is None

    def test_sibling_holding_next_day_is_excluded(self):
        html = """<body>
        <h3>Wednesday, September 3</h3>
        <ul><li><div>9:00 AM</div><div>Mat Pilates</div><button>Book</button></li></ul>
        <section><h3>Thursday, September 4</h3><ul><li><div>9:00 AM</div><div>Tower</div></li></ul></section>
        </body>"""
        entries = extract_day_scoped(HtmlContent(html), DAY)
        assert [e.class_name for e in entries] == ["Mat Pilates"]

    def test_header_without_comma(self):
        html = """<body>
        <h3>Wednesday September 3</h3>
        <ul><li><div>9:00 AM</div><div>Mat Pilates</div><button>Book</button></li></ul>
        <h3>Thursday September 4</h3>
        <ul><li><div>9:00 AM</div><div>Tower</div><button>Book</button></li></ul>
        </body>"""
        content = HtmlContent(html)
        assert [e.class_name for e in extract_day_scoped(content, DAY)] == ["Mat Pilates"]
        assert [e.class_name for e in extract_day_scoped(content, "2025-09-04")] == ["Tower"]

        result = extract_schedule(DAY, content)
        assert result.strategy_used == "dom-day-scoped"
        assert [e.class_name for e in result.entries] == ["Mat Pilates"]


class TestGlobal:
    def test_all_rows(self):
        entries = extract_global(HtmlContent(WIDGET_HTML), DAY)
        assert [e.class_name for e in entries] == ["Mat Pilates", "Reformer Flow", "Barre"]
        assert all(e.date == DAY for e in entries)

    def test_rows_without_time_ignored(self):
        html = "<ul><li>Log In</li><li></li><li><div>9:00 AM</div><div>Barre</div><div>Sold Out</div></li></ul>"
        entries = extract_global(HtmlContent(html), DAY)
        assert len(entries) == 1
        assert entries[0].status == "full"

    def test_table_rows(self):
        html = """<table>
        <tr><th>Time</th><th>Class</th><th></th></tr>
        <tr><td>7:00 PM</td><td><a href="#c1">Candlelight Flow</a></td><td><span>5 SPOTS</span></td></tr>
        </table>"""
        entries = extract_global(HtmlContent(html), DAY)
        assert len(entries) == 1
        assert entries[0].class_name == "Candlelight Flow"
        assert entries[0].open_spots == 5
        assert entries[0].status == "open"

    def test_nothing(self):
        assert extract_global(HtmlContent("<p>Closed today</p>"), DAY) == []

    def test_inline_only_row(self):
        html = (
            '<ul><li><span class="time">9:00 AM</span><span class="class-title">Full Body Reformer</span>'
            "<button>Book</button></li></ul>"
        )
        entries = extract_global(HtmlContent(html), DAY)
        assert len(entries) == 1
        e = entries[0]
        assert e.time == "9:00 AM"
        assert e.class_name == "Full Body Reformer"
        assert e.status == "open"
        assert e.open_spots is None

    def test_title_with_action_word_keeps_real_button(self):
        html = (
            '<ul><li><div>6:00 PM</div><span class="class-title">Full Body Reformer</span>'
            "<button>Sold Out</button></li></ul>"
        )
        e = extract_global(HtmlContent(html), DAY)[0]
        assert e.status == "full"
        assert e.open_spots == 0
