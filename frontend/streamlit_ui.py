"""
Streamlit User Interface - TorDemand

Search box with a category picker. Results from every provider are shown
in one list; each download link gets a button whose action depends on the
link kind (magnet, .torrent file, or plain redirect).

Features:
- One search session at a time, driven by SearchController
- Fade-out of previous results before a new search
- Backend connectivity status monitoring
"""

import asyncio

import logfire
import streamlit as st

from frontend.api_client import API_URL, SearchApiClient
from frontend.controller import SearchController
from frontend.link_dispatcher import LinkDispatcher
from frontend.models import SearchSession, SearchStatus

logfire.configure(send_to_logfire="if-token-present", service_name="tordemand-ui")

CATEGORIES = {"Games": "games", "Movies": "movies"}

st.set_page_config(
    page_title="TorDemand",
    page_icon="🧲",
    layout="centered"
)

st.title("🧲 TorDemand")

if "api_client" not in st.session_state:
    st.session_state.api_client = SearchApiClient()

if "controller" not in st.session_state:
    st.session_state.controller = SearchController(st.session_state.api_client)

if "dispatcher" not in st.session_state:
    st.session_state.dispatcher = LinkDispatcher()

controller: SearchController = st.session_state.controller
dispatcher: LinkDispatcher = st.session_state.dispatcher


def render_session(session: SearchSession) -> None:
    """Draw the result list for the current session state."""
    with results_area.container():
        if session.status == SearchStatus.LOADING:
            st.caption("🔍 Searching providers...")
            return

        if session.status == SearchStatus.ERROR:
            st.error(session.error)
            return

        if session.status == SearchStatus.TRANSITIONING_OUT:
            st.caption("Clearing previous results...")
            return

        if session.status == SearchStatus.READY and not session.results:
            st.info("No results found.")
            return

        for result in session.results:
            with st.container(border=True):
                if result.page:
                    st.markdown(f"**[{result.title}]({result.page})**")
                else:
                    st.markdown(f"**{result.title}**")
                st.caption(f"Provider: {result.provider}")

                # Link buttons only for a settled session; keys are unique per session.
                if result.links and session.status == SearchStatus.READY:
                    columns = st.columns(len(result.links))
                    for index, (column, link) in enumerate(zip(columns, result.links)):
                        key = f"{session.token}-{result.key}-link-{index}"
                        if column.button(link.kind.value, key=key):
                            asyncio.run(dispatcher.activate(link))


with st.form("search", clear_on_submit=False, border=False):
    category_col, query_col, button_col = st.columns([1, 3, 1])
    category_label = category_col.selectbox("Category", list(CATEGORIES), label_visibility="collapsed")
    query = query_col.text_input("Search", placeholder="Search...", label_visibility="collapsed")
    submitted = button_col.form_submit_button("🔍 Search", use_container_width=True)

results_area = st.empty()
controller.on_change = render_session

if submitted and query.strip():
    asyncio.run(controller.search(query, CATEGORIES[category_label]))
else:
    render_session(controller.session)

st.sidebar.markdown("### 📖 How to Use")
st.sidebar.markdown("""
1. Pick a category
2. Type a title and press Enter or Search
3. Click a link button:
   - **magnet** opens your torrent client
   - **torrent_file** saves the .torrent to your downloads folder
   - **redirect** opens the page in a new tab
""")

st.sidebar.markdown("---")
st.sidebar.markdown("### ⚙️ System Status")
if asyncio.run(st.session_state.api_client.is_online()):
    st.sidebar.success("✅ Backend Online")
else:
    st.sidebar.error("❌ Backend Offline")
    st.sidebar.code("uv run uvicorn backend.main:app --reload", language="bash")
    st.sidebar.caption(f"Expected at {API_URL}")
