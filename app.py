import asyncio
import html
import logging

import nest_asyncio
import streamlit as st

from poetry_wrappers import AppState, ViewState, ViewStateController, build_providers
from poetry_wrappers.config import configure_logging, load_config

configure_logging()
logger = logging.getLogger(__name__)

BUSY_LABELS = {
    AppState.LOADING_POEM: "📖 Fetching a poem...",
    AppState.ANALYZING: "✨ Thinking...",
    AppState.GENERATING_IMAGE: "🎨 Painting...",
}


def get_loop() -> asyncio.AbstractEventLoop:
    # One event loop per browser session; nested runs allowed for Streamlit reruns.
    if "loop" not in st.session_state:
        loop = asyncio.new_event_loop()
        nest_asyncio.apply(loop)
        st.session_state.loop = loop
    return st.session_state.loop


def run(coro):
    return get_loop().run_until_complete(coro)


def get_controller() -> ViewStateController:
    if "controller" not in st.session_state:
        poem_source, analysis_chain, image_chain = build_providers(load_config())
        st.session_state.controller = ViewStateController(poem_source, analysis_chain, image_chain)
    return st.session_state.controller


def render_poem(view: ViewState):
    poem = view.poem
    st.header(poem.title)
    st.markdown(f"*— {html.escape(poem.author)}*")
    for stanza in poem.stanzas():
        st.markdown("<br>".join(html.escape(line) for line in stanza), unsafe_allow_html=True)


def render_analysis(view: ViewState):
    analysis = view.analysis
    st.subheader("✨ AI Insight")
    st.markdown("**Mood**")
    # model output is rendered as plain text, never as markdown or html
    st.text(analysis.mood)
    st.markdown("**Themes**")
    st.text(" · ".join(analysis.themes))
    st.markdown("**Summary**")
    st.text(analysis.summary)


def render_image(view: ViewState):
    st.subheader("🖼️ Visualization")
    st.image(view.generated_image.to_pil(), caption="AI Visualization of the poem")


def main():
    st.set_page_config(page_title="Poetry For You", page_icon="📖", layout="wide")
    controller = get_controller()

    status = st.empty()

    def show_status(view: ViewState):
        if view.busy:
            status.info(BUSY_LABELS[view.state])
        else:
            status.empty()

    unsubscribe = controller.subscribe(show_status)
    try:
        run(controller.start())

        header, reload_col = st.columns([6, 1])
        header.title("📖 Poetry For You")
        if reload_col.button("🔄 New Poem", disabled=controller.busy):
            run(controller.load_random_poem())

        view = controller.snapshot()
        if view.state == AppState.ERROR:
            st.error(view.error)
        if view.notice:
            st.caption(f"⚠️ {view.notice}")
        if view.poem is None:
            return

        poem_col, side_col = st.columns([2, 1])
        with poem_col:
            render_poem(view)
            analyze_col, visualize_col = st.columns(2)
            if analyze_col.button("✨ Analyze Theme", disabled=not controller.can_analyze):
                run(controller.analyze())
                st.rerun()
            if visualize_col.button("🎨 Visualize", disabled=not controller.can_visualize):
                run(controller.visualize())
                st.rerun()

        with side_col:
            if view.analysis:
                render_analysis(view)
            if view.generated_image:
                render_image(view)
    finally:
        unsubscribe()


if __name__ == "__main__":
    main()
