"""
Shared rendering for the dashboard pages.

The backend decides which panel a dashboard is in (placeholder, spinner,
result or error); this module only draws it.
"""
import pandas as pd
import requests
import streamlit as st

API_URL = "http://localhost:8000/api/v1"
TIME_RANGES = ["7d", "30d", "90d"]
TREND_ICONS = {"up": "📈", "down": "📉", "neutral": "➖"}


def get_preferences():
    try:
        res = requests.get(f"{API_URL}/preferences/", timeout=5)
        if res.status_code == 200:
            return res.json()
    except requests.RequestException as e:
        st.error(f"Error connecting to API: {e}")
    return {"time_range": "7d", "theme": "light"}


def call(method, path, **kwargs):
    """Request a dashboard route and return the view, or None after showing the error."""
    try:
        res = requests.request(method, f"{API_URL}/dashboards/{path}", timeout=60, **kwargs)
    except requests.RequestException as e:
        st.error(f"Error connecting to API: {e}")
        return None
    if res.status_code != 200:
        st.error(f"API Error ({res.status_code}): {res.text}")
        return None
    return res.json()


def render_metrics(metrics):
    cards = list(metrics.values())
    for col, card in zip(st.columns(len(cards) or 1), cards):
        delta = None if card["trend"] == "neutral" else card["change"]
        col.metric(card["title"], card["display"], delta)


def render_result(result):
    for listing in result.get("listings", {}).values():
        st.success(f"{listing['total']} {listing['unit']} loaded")

    render_metrics(result["metrics"])

    for series in result["time_series"].values():
        st.subheader(series["title"])
        if series["points"]:
            df = pd.DataFrame(series["points"])
            # Keep the profile order instead of sorting labels alphabetically
            df["label"] = pd.Categorical(df["label"], categories=df["label"], ordered=True)
            st.line_chart(df, x="label", y="value")
        else:
            st.info("No data available.")

    for projection in result["categorical"].values():
        st.subheader(projection["title"])
        if projection["buckets"]:
            df = pd.DataFrame(projection["buckets"]).set_index("name")
            st.bar_chart(df["value"])
        else:
            st.info("Source unavailable — showing no data.")

    for projection in result["correlation"].values():
        st.subheader(projection["title"])
        if projection["points"]:
            df = pd.DataFrame(projection["points"]).rename(
                columns={"x": projection["x_label"], "y": projection["y_label"]}
            )
            st.scatter_chart(df, x=projection["x_label"], y=projection["y_label"])
        else:
            st.info("No data available.")

    for listing in result.get("listings", {}).values():
        st.subheader(listing["title"])
        if listing["items"]:
            for item in listing["items"]:
                st.markdown(f"- **#{item['id']}** {item['title']}")
        else:
            st.info("No data available.")

    st.caption(f"Generated at {result['generated_at']} · range {result['time_range']}")


def render_dashboard(name):
    """Draw the controls and the current panel of dashboard ``name``."""
    prefs = get_preferences()
    view = call("GET", name)
    if view is None:
        return

    st.markdown(f"# {view['title']}")
    st.info(view["description"])

    selected = st.selectbox(
        "Time range",
        TIME_RANGES,
        index=TIME_RANGES.index(view["time_range"] or prefs["time_range"]),
    )

    left, right = st.columns(2)
    if left.button("🔄 Refresh", key=f"refresh-{name}"):
        with st.spinner("Loading data..."):
            view = call("POST", f"{name}/refresh", params={"time_range": selected}) or view
    if view["can_retry"] and right.button("Retry", key=f"retry-{name}"):
        with st.spinner("Retrying..."):
            view = call("POST", f"{name}/retry") or view

    panel = view["panel"]
    if panel == "placeholder":
        st.write("Press **Refresh** to load data.")
    elif panel == "spinner":
        st.write("⏳ Loading data...")
        if view["stale_result"]:
            render_result(view["stale_result"])
    elif panel == "error":
        st.error(f"Failed to load data: {view['error']}")
        if view["stale_result"]:
            st.warning("Showing the last successful result.")
            render_result(view["stale_result"])
    else:
        render_result(view["result"])

    if view["can_export"]:
        res = requests.get(f"{API_URL}/dashboards/{name}/export", timeout=30)
        if res.status_code == 200:
            filename = res.headers.get("content-disposition", "").split("filename=")[-1].strip('"')
            st.download_button(
                "📥 Export Data",
                data=res.content,
                file_name=filename or f"{name}-data.json",
                mime="application/json",
            )
