"""Default session script.

Loaded once per browser session; ``main`` receives the session's UISession and
installs the UI to draw on every rerun.
"""

from __future__ import annotations

CLICKS_KEY = "clotouch_clicks"


def _on_click(st) -> None:  # noqa: ANN001
    st.session_state[CLICKS_KEY] = st.session_state.get(CLICKS_KEY, 0) + 1


def render(st) -> None:  # noqa: ANN001
    with st.container():
        st.markdown("Hello from the session script.")
        st.button("Click me", key="clotouch_button", on_click=_on_click, args=(st,))
        clicks = st.session_state.get(CLICKS_KEY, 0)
        if clicks:
            st.write(f"Clicked {clicks} time{'s' if clicks != 1 else ''}.")


def main(ui) -> None:  # noqa: ANN001
    ui.set_title("TouchKit")
    ui.set_content(render)
