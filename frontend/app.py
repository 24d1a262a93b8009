import streamlit as st

st.set_page_config(
    page_title="Pulseboard",
    page_icon="📊",
)

st.write("# Welcome to Pulseboard! 👋")

st.markdown(
    """
    Live analytics aggregated from public data sources.

    ### 👈 Select a page from the sidebar to get started

    *   **Overview:** Posts, users and engagement, plus the current London temperature.
    *   **Analytics:** Weekly activity, user and category distributions, quote topics,
        Bitcoin prices and the engagement-vs-length scatter.
    *   **Settings:** Default time range and theme.

    ---

    ### 🔌 Data sources

    - Posts, users, comments, albums: [JSONPlaceholder](https://jsonplaceholder.typicode.com/) (required)
    - Bitcoin price index: CoinDesk (optional)
    - Quotes: Quotable (optional)
    - Weather: OpenWeatherMap (optional)

    When an optional source is down, its panel stays empty and the rest of the
    dashboard still loads. When a required source is down, the dashboard shows
    an error with a **Retry** button and keeps the last successful result.

    ---

    *Start the API first:* `cd backend && uvicorn app.main:app --reload`
    """
)
