from __future__ import annotations

from wizard.controller import WizardController, open_wizard
from wizard.layout import review_rows

from tests.utils import COMPANY_STEPS, RecordingGateway, walk_to_review


def test_review_rows_summarise_membership_answers(controller: WizardController) -> None:
    walk_to_review(controller)

    rows = dict(review_rows(controller))

    assert rows["Name"] == "Ada Lovelace"
    assert rows["Investment Interests"] == "1 selected"


def test_review_rows_list_answers_of_any_catalog() -> None:
    controller = open_wizard(RecordingGateway(), steps=COMPANY_STEPS)
    controller.advance()
    controller.set_field("company", "Acme")
    controller.set_field("size", "large")
    controller.toggle_option("offices", "ber")
    controller.advance()

    assert review_rows(controller) == [
        ("Company", "Acme"),
        ("Company size", "50+ people"),
        ("Offices", "1 selected"),
    ]
