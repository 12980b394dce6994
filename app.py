# app.py
# Streamlit meeting room booking form backed by a spreadsheet web app
# Rooms: 4 fixed rooms · Views: booking form + the selected room's bookings for one day
# Storage: remote web app (GET ?action=getBookings / ?action=addBooking) · No overlaps

import html
import io
import logging
import os
from datetime import time, timedelta

import streamlit as st

from booking_controller import BookingController
from booking_logic import parse_time
from booking_config import ROOMS, ConfigError, configure_logging, load_settings
from sheets_client import SheetsBookingClient

logger = logging.getLogger(__name__)

# -----------------------------
# CONFIG
# -----------------------------
st.set_page_config(page_title="Hệ thống đặt phòng họp SmartAds", layout="wide")

TIME_STEP = timedelta(minutes=5)
ROOM_PLACEHOLDER = "-- Chọn phòng --"


def read_secrets() -> dict:
    # st.secrets raises when no secrets.toml exists; env vars still apply then
    try:
        return dict(st.secrets)
    except Exception:
        return {}


@st.cache_resource(show_spinner=False)
def get_settings():
    settings = load_settings(read_secrets(), os.environ)
    configure_logging(settings.log_level)
    logger.info("Booking form using %s (timezone %s)", settings.webapp_url, settings.timezone)
    return settings


def get_controller() -> BookingController:
    if "controller" not in st.session_state:
        settings = get_settings()
        client = SheetsBookingClient(settings.webapp_url, timeout=settings.request_timeout)
        st.session_state["controller"] = BookingController(client, settings)
        st.session_state["form_gen"] = 0
    return st.session_state["controller"]

# -----------------------------
# TIME UTILS
# -----------------------------
def to_time(s: str):
    minutes = parse_time(s)
    return time(minutes // 60, minutes % 60)

def fmt_time(t) -> str:
    return f"{t.hour:02d}:{t.minute:02d}" if t is not None else ""

# -----------------------------
# UI HELPERS
# -----------------------------
def inject_css():
    st.markdown(
        """
        <style>
        .pill {
            display:inline-flex; align-items:center;
            border-radius:999px; padding:2px 10px; font-size:12px;
            font-weight:600; background:#DBEAFE; color:#1E40AF; border:1px solid #BFDBFE;
        }
        .card {
            border:1px solid #eee; border-radius:12px; padding:12px 16px; margin-bottom:10px;
            box-shadow: 0 1px 2px rgba(0,0,0,0.03);
        }
        .muted { color:#6B7280; font-size:13px; }
        </style>
        """,
        unsafe_allow_html=True
    )

def show_message(ctrl: BookingController):
    if ctrl.message is None:
        return
    if ctrl.message.kind == "success":
        st.success(ctrl.message.text, icon="✅")
    else:
        st.error(ctrl.message.text, icon="❌")

# -----------------------------
# BOOKING FORM
# -----------------------------
def booking_form(ctrl: BookingController):
    st.subheader("📝 Đặt phòng mới")
    d = ctrl.draft
    gen = st.session_state["form_gen"]
    today = ctrl.today()

    options = [""] + ROOMS
    room = st.selectbox(
        "🏢 Chọn phòng",
        options,
        format_func=lambda r: r or ROOM_PLACEHOLDER,
        key="selected_room",
    )
    picked_date = st.date_input(
        "📅 Chọn ngày",
        value=today,
        min_value=today,
        key="selected_date",
    )

    col_from, col_to = st.columns(2)
    with col_from:
        t_from = st.time_input("🕘 Từ", value=to_time(d.time_from), step=TIME_STEP, key=f"time_from_{gen}")
    with col_to:
        t_to = st.time_input("🕙 Đến", value=to_time(d.time_to), step=TIME_STEP, key=f"time_to_{gen}")

    booked_by = st.text_input("👤 Người đặt", value=d.booked_by, placeholder="Nhập tên người đặt", key=f"booked_by_{gen}")
    purpose = st.text_area(
        "📄 Mục đích", value=d.purpose, placeholder="Họp team, training, phỏng vấn...", height=90, key=f"purpose_{gen}"
    )

    ctrl.update_field("time_from", fmt_time(t_from))
    ctrl.update_field("time_to", fmt_time(t_to))
    ctrl.update_field("booked_by", booked_by)
    ctrl.update_field("purpose", purpose)
    with st.spinner("Đang tải..."):
        ctrl.update_field("selected_room", room)
        ctrl.update_field("selected_date", picked_date.isoformat() if picked_date else "")

    show_message(ctrl)

    if st.button("✅ Đặt phòng", type="primary", disabled=ctrl.loading):
        with st.spinner("Đang xử lý..."):
            ok = ctrl.submit()
        if ok:
            # fresh widget keys so the reset draft values show up
            st.session_state["form_gen"] = gen + 1
        st.rerun()

# -----------------------------
# BOOKED LIST
# -----------------------------
def booked_list(ctrl: BookingController):
    st.subheader("📅 Lịch đã đặt")

    if not ctrl.has_selection:
        st.info("Vui lòng chọn phòng và ngày để xem lịch")
        return
    if ctrl.loading:
        st.caption("Đang tải...")
        return

    df = ctrl.bookings_frame()
    if df.empty:
        st.success("Chưa có lịch đặt nào · Phòng còn trống cả ngày!")
        return

    for _, r in df.iterrows():
        st.markdown(
            f"""
            <div class="card">
              <div style="display:flex;justify-content:space-between;">
                <b>{r['time_from']} - {r['time_to']}</b><span class="pill">Đã đặt</span>
              </div>
              <div class="muted">👤 <b>Người đặt:</b> {html.escape(r["booked_by"])}</div>
              <div class="muted">📝 <b>Mục đích:</b> {html.escape(r["purpose"])}</div>
            </div>
            """,
            unsafe_allow_html=True,
        )

    buf = io.StringIO()
    df.to_csv(buf, index=False)
    st.download_button(
        "📄 Tải lịch đặt (CSV)",
        data=buf.getvalue(),
        file_name=f"bookings_{ctrl.draft.selected_date}.csv",
        mime="text/csv",
    )

# -----------------------------
# PAGE
# -----------------------------
inject_css()

try:
    controller = get_controller()
except ConfigError as e:
    st.error(f"Cấu hình không hợp lệ: {e}")
    st.stop()

st.title("Hệ thống đặt phòng họp SmartAds")
st.markdown("<span class='muted'>Chọn phòng và thời gian để đặt lịch</span>", unsafe_allow_html=True)

left, right = st.columns(2)
with left:
    booking_form(controller)
with right:
    booked_list(controller)
