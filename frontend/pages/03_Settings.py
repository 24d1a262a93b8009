import requests
import streamlit as st

from dashboard_panel import API_URL, TIME_RANGES, get_preferences

st.set_page_config(page_title="Settings", page_icon="⚙️")
st.markdown("# Settings")

prefs = get_preferences()

time_range = st.selectbox(
    "Default time range",
    TIME_RANGES,
    index=TIME_RANGES.index(prefs["time_range"]),
)
dark = st.toggle("Dark theme", value=prefs["theme"] == "dark")

if st.button("Save"):
    try:
        res = requests.put(
            f"{API_URL}/preferences/",
            json={"time_range": time_range, "theme": "dark" if dark else "light"},
            timeout=5,
        )
        if res.status_code == 200:
            st.success("Preferences saved")
        else:
            st.error(f"Save failed: {res.text}")
    except requests.RequestException as e:
        st.error(f"Error connecting to API: {e}")
