"""Utility helpers for rendering error messages in Streamlit."""

from __future__ import annotations

from typing import Final

import streamlit as st

_DETAILS_LABEL: Final[str] = "Details"


def display_error(msg: str, detail: str | None = None, *, show_detail: bool = False) -> None:
    """Render a user-facing error with optional technical details.

    Args:
        msg: Short error message for the user.
        detail: Optional technical detail, e.g. the exception text.
        show_detail: Reveal ``detail`` inside an expander.
    """

    st.error(msg)
    if detail and show_detail:
        with st.expander(_DETAILS_LABEL):
            st.code(detail)
