from types import SimpleNamespace

import pytest

from app.utils.rate_limit_utils import user_or_address

DAY = "2024-06-12"
USER = "/users/user-1"
NEUTRAL = dict(mood=7, stress=3, sleep=7, energy=7, focus=7, anxiety=3)


@pytest.fixture
def checked_in(client):
    # Anchor windows only apply to the current day, so a past date keeps them out
    response = client.post(f"{USER}/checkins", json={**NEUTRAL, "date": DAY, "journal_text": "ok day"})
    assert response.status_code == 201
    return response.json()


def _first_action_id(client):
    return client.get(f"{USER}/plans/{DAY}").json()["actions"][0]["id"]


class TestCheckins:

    def test_create(self, checked_in):
        assert checked_in["checkin"]["date"] == DAY
        assert checked_in["crisis"]["detected"] is False
        assert len(checked_in["plan"]["actions"]) == 3
        assert "journal_text" not in checked_in["checkin"]

    @pytest.mark.parametrize("field, value", [("mood", 0), ("stress", 11), ("sleep", "bad")])
    def test_out_of_range_metrics_are_rejected(self, client, field, value):
        response = client.post(f"{USER}/checkins", json={**NEUTRAL, field: value})
        assert response.status_code == 422

    def test_list(self, client, checked_in):
        response = client.get(f"{USER}/checkins", params={"days": 365 * 5})
        assert response.status_code == 422

        response = client.get(f"{USER}/checkins")
        assert response.status_code == 200


class TestPlans:

    def test_get(self, client, checked_in):
        body = client.get(f"{USER}/plans/{DAY}").json()
        assert body["total_count"] == 3
        assert body["completed_count"] == 0

    def test_missing_plan(self, client):
        assert client.get(f"{USER}/plans/2020-01-01").status_code == 404

    def test_complete_and_skip(self, client, checked_in):
        action_id = _first_action_id(client)

        body = client.post(f"{USER}/plans/{DAY}/actions/{action_id}/complete").json()
        assert body["completed_count"] == 1
        assert body["actions"][0]["status"] == "completed"

        body = client.post(f"{USER}/plans/{DAY}/actions/{action_id}/skip").json()
        assert body["completed_count"] == 0
        assert body["actions"][0]["status"] == "skipped"

    def test_unknown_action(self, client, checked_in):
        assert client.post(f"{USER}/plans/{DAY}/actions/nope/complete").status_code == 404
        assert client.post(f"{USER}/plans/{DAY}/actions/nope/swap").status_code == 404

    def test_swap(self, client, checked_in):
        action_id = _first_action_id(client)
        body = client.post(f"{USER}/plans/{DAY}/actions/{action_id}/swap").json()

        assert body["actions"][0]["id"] != action_id
        assert body["actions"][0]["swapped_from"] == action_id
        assert body["actions"][0]["category"] == "coping"

    def test_anchor(self, client, checked_in):
        action_id = _first_action_id(client)

        response = client.post(f"{USER}/plans/{DAY}/actions/{action_id}/anchor", json={"anchor_id": "anchor-7"})
        assert response.json()["actions"][0]["anchor"] == "Before bed"

        response = client.post(f"{USER}/plans/{DAY}/actions/{action_id}/anchor", json={"anchor_id": "anchor-99"})
        assert response.status_code == 400

    def test_insights(self, client, checked_in):
        insights = client.get(f"{USER}/plans/{DAY}/insights").json()
        assert [i["type"] for i in insights] == ["anchor"]

    def test_anchor_catalogue(self, client):
        assert len(client.get("/anchors").json()) == 8


class TestPredictionsAndTriggerDates:

    def test_predictions_for_a_new_user(self, client):
        body = client.get(f"{USER}/predictions").json()
        assert body["prediction"] is None
        assert body["patterns"] == []
        assert body["alert"] is None

    def test_dismiss_without_alert(self, client):
        assert client.post(f"{USER}/alerts/dismiss").status_code == 404

    def test_trigger_date_crud(self, client):
        response = client.post(f"{USER}/trigger-dates", json={"date": "2024-12-25", "label": "Holidays"})
        assert response.status_code == 201
        trigger_id = response.json()["id"]

        assert [t["label"] for t in client.get(f"{USER}/trigger-dates").json()] == ["Holidays"]

        response = client.patch(f"{USER}/trigger-dates/{trigger_id}", json={"repeat_annually": True})
        assert response.json()["repeat_annually"] is True

        assert client.delete(f"{USER}/trigger-dates/{trigger_id}").status_code == 204
        assert client.get(f"{USER}/trigger-dates/{trigger_id}").status_code == 404

    def test_trigger_date_validation(self, client):
        response = client.post(f"{USER}/trigger-dates", json={"date": "2024-12-25", "label": ""})
        assert response.status_code == 422


class TestAdaptiveMode:

    def test_manual_cycle(self, client):
        body = client.get(f"{USER}/adaptive-mode").json()
        assert body["state"]["active"] is False
        assert body["support_prompts"] == []

        body = client.post(f"{USER}/adaptive-mode/activate", json={"reason": "Rough night"}).json()
        assert body["state"]["active"] is True
        assert body["message"]
        assert body["support_prompts"]

        body = client.post(f"{USER}/adaptive-mode/deactivate").json()
        assert body["state"]["active"] is False

    def test_check_with_sos(self, client):
        body = client.post(f"{USER}/adaptive-mode/check", json={"sos_used_today": True}).json()
        assert body["state"]["active"] is True
        assert body["state"]["triggers"][0]["type"] == "sos_used"


class TestCrisis:

    def test_resources(self, client):
        resources = client.get("/crisis/resources").json()
        assert [r["id"] for r in resources][:2] == ["988", "crisis-text"]

    def test_support_and_acknowledge(self, client):
        response = client.post(f"{USER}/crisis/support")
        assert response.status_code == 201
        event_id = response.json()["event_id"]

        response = client.post(f"{USER}/crisis/events/{event_id}/acknowledge")
        assert response.json()["acknowledged"] is True

        assert client.post(f"{USER}/crisis/events/missing/acknowledge").status_code == 404


class TestProfileAndSummary:

    def test_focus_areas(self, client):
        response = client.put(f"{USER}/focus-areas", json={"focus_areas": ["mindfulness", "mindfulness"]})
        assert response.json() == {"focus_areas": ["mindfulness"]}
        assert client.get(f"{USER}/focus-areas").json() == {"focus_areas": ["mindfulness"]}

    def test_weekly_summary(self, client, checked_in):
        assert client.get(f"{USER}/weekly-summary").status_code == 404

        body = client.get(f"{USER}/weekly-summary", params={"week_of": DAY}).json()
        assert body["week_start"] == "2024-06-10"
        assert body["checkin_count"] == 1


def test_healthz(client):
    body = client.get("/healthz").json()
    assert body["status"] == "ok"


def test_rate_limit_key():
    assert user_or_address(SimpleNamespace(path_params={"user_id": "u1"})) == "user:u1"
    request = SimpleNamespace(path_params={}, client=SimpleNamespace(host="10.0.0.7"))
    assert user_or_address(request) == "10.0.0.7"
