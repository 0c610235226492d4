class StateKeys:
    """Keys for data stored in ``st.session_state``."""

    OPEN_WIZARDS = "membership.open_wizards"
    LAST_OUTCOME = "membership.last_outcome"
    REPLAY_PLAYED = "membership.replay_played"
    SHOW_ERROR_DETAILS = "membership.show_error_details"


class UIKeys:
    """Keys for UI widgets in ``st.session_state``."""

    OPEN_WIZARD_BUTTON = "ui.open_wizard"
    CLOSE_WIZARD_BUTTON = "ui.close_wizard"
    REPLAY_BUTTON = "ui.replay"
