import streamlit as st

from dashboard_panel import render_dashboard

st.set_page_config(page_title="Advanced Analytics", page_icon="📈", layout="wide")

render_dashboard("analytics")
