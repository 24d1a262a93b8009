import streamlit as st

from dashboard_panel import render_dashboard

st.set_page_config(page_title="Overview", page_icon="📊", layout="wide")

render_dashboard("overview")
