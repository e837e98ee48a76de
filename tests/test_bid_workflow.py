import math

import pytest
from fastapi import HTTPException

from catermatch.domain.bids.service import BidService
from catermatch.models import BID_ACCEPTED, BID_REJECTED, BID_SENT, EVENT_BOOKED, EVENT_OPEN
from catermatch.store import StoreError

from .conftest import ctx_for, run_background


@pytest.fixture
def service(store, sender):
    return BidService(store, sender)


def place(store, event, caterer, amount=500.0, status=BID_SENT, message=None):
    return store.insert(
        "bids",
        {
            "event_id": event.id,
            "caterer_id": caterer.id,
            "amount": amount,
            "message": message,
            "status": status,
        },
    )


def status_of(store, collection, entity_id):
    return store.get(collection, {"id": entity_id}).status


# ============================================
# submit_bid
# ============================================


class TestSubmitBid:
    def test_creates_sent_bid_and_emails_owner(self, service, store, sender, owner, caterer, event, background_tasks):
        bid = service.submit_bid(ctx_for(caterer), event.id, "250", "  Inclusief bediening  ", background_tasks)

        assert bid.status == BID_SENT
        assert bid.amount == 250.0
        assert bid.message == "Inclusief bediening"
        assert bid.caterer_id == caterer.id

        assert len(background_tasks.tasks) == 1
        run_background(background_tasks)
        assert len(sender.sent) == 1
        email = sender.sent[0]
        assert email["to"] == owner.email
        assert email["subject"] == "Nieuw bod op: Bruiloft Jansen"
        assert "€ 250.00" in email["html"]
        assert "Inclusief bediening" in email["html"]
        assert f"/events/{event.id}/bids" in email["html"]

    def test_blank_message_is_stored_as_null(self, service, caterer, event, background_tasks):
        bid = service.submit_bid(ctx_for(caterer), event.id, 300, "   ", background_tasks)
        assert bid.message is None

    def test_decimal_string_amount(self, service, caterer, event, background_tasks):
        bid = service.submit_bid(ctx_for(caterer), event.id, "250.50", None, background_tasks)
        assert bid.amount == 250.5

    def test_owner_cannot_bid(self, service, store, owner, event, background_tasks):
        with pytest.raises(HTTPException) as exc:
            service.submit_bid(ctx_for(owner), event.id, 250, None, background_tasks)
        assert exc.value.status_code == 403
        assert store.query("bids") == []

    def test_unknown_event(self, service, caterer, background_tasks):
        with pytest.raises(HTTPException) as exc:
            service.submit_bid(ctx_for(caterer), 9999, 250, None, background_tasks)
        assert exc.value.status_code == 404

    def test_booked_event_rejects_new_bids(self, service, store, caterer, make_event, background_tasks):
        booked = make_event(status=EVENT_BOOKED)
        with pytest.raises(HTTPException) as exc:
            service.submit_bid(ctx_for(caterer), booked.id, 250, None, background_tasks)
        assert exc.value.status_code == 409
        assert store.query("bids") == []

    def test_event_state_is_checked_before_amount(self, service, caterer, make_event, background_tasks):
        booked = make_event(status=EVENT_BOOKED)
        with pytest.raises(HTTPException) as exc:
            service.submit_bid(ctx_for(caterer), booked.id, "not a number", None, background_tasks)
        assert exc.value.status_code == 409

    @pytest.mark.parametrize(
        "amount",
        [0, -5, "-1", "abc", "", None, True, False, math.nan, math.inf, "Infinity"],
    )
    def test_invalid_amount_writes_nothing_and_sends_nothing(
        self, service, store, sender, caterer, event, background_tasks, amount
    ):
        with pytest.raises(HTTPException) as exc:
            service.submit_bid(ctx_for(caterer), event.id, amount, "hallo", background_tasks)

        assert exc.value.status_code == 400
        assert "valid amount" in exc.value.detail
        assert store.query("bids") == []
        assert background_tasks.tasks == []
        assert sender.sent == []

    def test_owner_without_email_gets_no_notification(
        self, service, store, make_user, make_event, caterer, background_tasks
    ):
        silent_owner = make_user("owner", email=None)
        quiet_event = make_event(owner_id=silent_owner.id)

        bid = service.submit_bid(ctx_for(caterer), quiet_event.id, 250, None, background_tasks)

        assert bid.id is not None
        assert background_tasks.tasks == []


# ============================================
# accept_bid
# ============================================


class TestAcceptBid:
    def test_happy_path(self, service, store, sender, owner, caterer, other_caterer, event, background_tasks):
        winner = place(store, event, caterer, amount=500)
        loser = place(store, event, other_caterer, amount=650)

        result = service.accept_bid(ctx_for(owner), event.id, winner.id, background_tasks)

        assert status_of(store, "bids", winner.id) == BID_ACCEPTED
        assert status_of(store, "bids", loser.id) == BID_REJECTED
        assert status_of(store, "events", event.id) == EVENT_BOOKED

        chats = store.query("chats")
        assert len(chats) == 1
        chat = chats[0]
        assert (chat.event_id, chat.owner_id, chat.caterer_id) == (event.id, owner.id, caterer.id)

        assert result.chat_id == chat.id
        assert result.redirect_to == f"/chats/{chat.id}"
        assert result.bid.status == "accepted"
        assert result.event.status == "booked"

        run_background(background_tasks)
        assert len(sender.sent) == 1
        email = sender.sent[0]
        assert email["to"] == caterer.email
        assert email["subject"] == "Je bod is geaccepteerd: Bruiloft Jansen"
        assert "€ 500.00" in email["html"]
        assert f"/chats/{chat.id}" in email["html"]

    def test_only_sent_siblings_are_rejected(self, service, store, owner, caterer, make_user, event, background_tasks):
        third = make_user("caterer")
        winner = place(store, event, caterer)
        already_rejected = place(store, event, third, status=BID_REJECTED)

        service.accept_bid(ctx_for(owner), event.id, winner.id, background_tasks)

        assert status_of(store, "bids", already_rejected.id) == BID_REJECTED
        assert [b.status for b in store.query("bids", {"event_id": event.id, "status": BID_ACCEPTED})] == [BID_ACCEPTED]

    def test_bids_on_other_events_are_untouched(
        self, service, store, owner, caterer, other_caterer, make_event, event, background_tasks
    ):
        elsewhere = make_event(title="Jubileum")
        winner = place(store, event, caterer)
        unrelated = place(store, elsewhere, other_caterer)

        service.accept_bid(ctx_for(owner), event.id, winner.id, background_tasks)

        assert status_of(store, "bids", unrelated.id) == BID_SENT
        assert status_of(store, "events", elsewhere.id) == EVENT_OPEN

    def test_competing_bids_only_one_can_win(
        self, service, store, owner, caterer, other_caterer, event, background_tasks
    ):
        first = place(store, event, caterer)
        second = place(store, event, other_caterer)

        service.accept_bid(ctx_for(owner), event.id, first.id, background_tasks)
        with pytest.raises(HTTPException) as exc:
            service.accept_bid(ctx_for(owner), event.id, second.id, background_tasks)

        assert exc.value.status_code == 409
        assert status_of(store, "bids", first.id) == BID_ACCEPTED
        assert status_of(store, "bids", second.id) == BID_REJECTED

    def test_accepting_twice_conflicts(self, service, store, owner, caterer, event, background_tasks):
        bid = place(store, event, caterer)
        service.accept_bid(ctx_for(owner), event.id, bid.id, background_tasks)

        with pytest.raises(HTTPException) as exc:
            service.accept_bid(ctx_for(owner), event.id, bid.id, background_tasks)
        assert exc.value.status_code == 409
        assert len(store.query("chats")) == 1

    def test_booked_event_conflicts(self, service, store, owner, caterer, make_event, background_tasks):
        booked = make_event(status=EVENT_BOOKED)
        stray = place(store, booked, caterer)

        with pytest.raises(HTTPException) as exc:
            service.accept_bid(ctx_for(owner), booked.id, stray.id, background_tasks)

        assert exc.value.status_code == 409
        assert status_of(store, "bids", stray.id) == BID_SENT

    def test_only_owner_can_accept(self, service, store, caterer, other_caterer, event, background_tasks):
        bid = place(store, event, caterer)
        with pytest.raises(HTTPException) as exc:
            service.accept_bid(ctx_for(other_caterer), event.id, bid.id, background_tasks)
        assert exc.value.status_code == 403
        assert status_of(store, "bids", bid.id) == BID_SENT

    def test_bid_must_belong_to_event(self, service, store, owner, caterer, make_event, event, background_tasks):
        elsewhere = make_event(title="Jubileum")
        bid = place(store, elsewhere, caterer)
        with pytest.raises(HTTPException) as exc:
            service.accept_bid(ctx_for(owner), event.id, bid.id, background_tasks)
        assert exc.value.status_code == 404

    def test_unknown_event(self, service, owner, background_tasks):
        with pytest.raises(HTTPException) as exc:
            service.accept_bid(ctx_for(owner), 9999, 1, background_tasks)
        assert exc.value.status_code == 404

    def test_existing_chat_is_reused(self, service, store, owner, caterer, event, background_tasks):
        existing = store.insert("chats", {"event_id": event.id, "owner_id": owner.id, "caterer_id": caterer.id})
        bid = place(store, event, caterer)

        result = service.accept_bid(ctx_for(owner), event.id, bid.id, background_tasks)

        assert result.chat_id == existing.id
        assert len(store.query("chats")) == 1

    def test_caterer_without_email_gets_no_notification(
        self, service, store, owner, make_user, event, background_tasks
    ):
        silent = make_user("caterer", email=None)
        bid = place(store, event, silent)

        result = service.accept_bid(ctx_for(owner), event.id, bid.id, background_tasks)

        assert result.chat_id
        assert background_tasks.tasks == []


class TestAcceptBidPartialFailure:
    """Steps commit one by one; a failed step leaves the earlier ones in place"""

    def test_event_update_failure_keeps_accepted_bid(
        self, service, store, mocker, owner, caterer, other_caterer, event, background_tasks
    ):
        winner = place(store, event, caterer)
        sibling = place(store, event, other_caterer)
        real_update = store.update

        def flaky_update(collection, filters, patch):
            if collection == "events":
                raise StoreError("connection reset")
            return real_update(collection, filters, patch)

        mocker.patch.object(store, "update", side_effect=flaky_update)

        with pytest.raises(HTTPException) as exc:
            service.accept_bid(ctx_for(owner), event.id, winner.id, background_tasks)

        assert exc.value.status_code == 500
        detail = exc.value.detail
        assert detail["message"] == "connection reset"
        assert detail["event"]["status"] == "open"
        statuses = {b["id"]: b["status"] for b in detail["bids"]}
        assert statuses == {winner.id: "accepted", sibling.id: "sent"}

        assert status_of(store, "bids", winner.id) == BID_ACCEPTED
        assert status_of(store, "events", event.id) == EVENT_OPEN
        assert store.query("chats") == []
        assert background_tasks.tasks == []

    def test_chat_creation_failure_after_booking(
        self, service, store, mocker, owner, caterer, other_caterer, event, background_tasks
    ):
        winner = place(store, event, caterer)
        sibling = place(store, event, other_caterer)
        real_insert = store.insert

        def flaky_insert(collection, record):
            if collection == "chats":
                raise StoreError("chats table unavailable")
            return real_insert(collection, record)

        mocker.patch.object(store, "insert", side_effect=flaky_insert)

        with pytest.raises(HTTPException) as exc:
            service.accept_bid(ctx_for(owner), event.id, winner.id, background_tasks)

        assert exc.value.status_code == 500
        assert exc.value.detail["event"]["status"] == "booked"
        assert status_of(store, "bids", winner.id) == BID_ACCEPTED
        assert status_of(store, "bids", sibling.id) == BID_REJECTED
        assert store.query("chats") == []
        assert background_tasks.tasks == []

    def test_failed_resync_is_ignored(self, service, store, mocker, owner, caterer, event, background_tasks):
        bid = place(store, event, caterer)
        real_update = store.update
        real_get = store.get
        broken = {"down": False}

        def flaky_update(collection, filters, patch):
            if collection == "events":
                broken["down"] = True
                raise StoreError("database went away")
            return real_update(collection, filters, patch)

        def flaky_get(collection, filters):
            if broken["down"]:
                raise StoreError("still down")
            return real_get(collection, filters)

        mocker.patch.object(store, "update", side_effect=flaky_update)
        mocker.patch.object(store, "get", side_effect=flaky_get)

        with pytest.raises(HTTPException) as exc:
            service.accept_bid(ctx_for(owner), event.id, bid.id, background_tasks)

        assert exc.value.status_code == 500
        assert exc.value.detail == {"message": "database went away", "event": None, "bids": []}


# ============================================
# reject_bid and listings
# ============================================


class TestRejectBid:
    def test_rejects_single_bid(self, service, store, owner, caterer, other_caterer, event, background_tasks):
        target = place(store, event, caterer)
        other = place(store, event, other_caterer)

        bids = service.reject_bid(ctx_for(owner), event.id, target.id)

        assert {b.id: b.status for b in bids} == {target.id: "rejected", other.id: "sent"}
        assert status_of(store, "events", event.id) == EVENT_OPEN
        assert store.query("chats") == []

    def test_cannot_reject_accepted_bid(self, service, store, owner, caterer, event):
        bid = place(store, event, caterer, status=BID_ACCEPTED)
        with pytest.raises(HTTPException) as exc:
            service.reject_bid(ctx_for(owner), event.id, bid.id)
        assert exc.value.status_code == 409

    def test_only_owner_can_reject(self, service, store, caterer, event):
        bid = place(store, event, caterer)
        with pytest.raises(HTTPException) as exc:
            service.reject_bid(ctx_for(caterer), event.id, bid.id)
        assert exc.value.status_code == 403
        assert status_of(store, "bids", bid.id) == BID_SENT


class TestListings:
    def test_event_bids_in_creation_order_with_caterer(self, service, store, owner, caterer, other_caterer, event):
        first = place(store, event, caterer, amount=400)
        second = place(store, event, other_caterer, amount=450)

        bids = service.list_event_bids(ctx_for(owner), event.id)

        assert [b.id for b in bids] == [first.id, second.id]
        assert bids[0].caterer.company_name == "Smaak & Co"
        assert bids[1].caterer.display_name == other_caterer.display_name

    def test_event_bids_are_owner_only(self, service, caterer, event):
        with pytest.raises(HTTPException) as exc:
            service.list_event_bids(ctx_for(caterer), event.id)
        assert exc.value.status_code == 403

    def test_my_bids_newest_first_with_titles(self, service, store, caterer, make_event, event):
        later_event = make_event(title="Bedrijfsborrel")
        older = place(store, event, caterer)
        newer = place(store, later_event, caterer)

        bids = service.list_my_bids(ctx_for(caterer))

        assert [b.id for b in bids] == [newer.id, older.id]
        assert [b.event_title for b in bids] == ["Bedrijfsborrel", "Bruiloft Jansen"]
        assert bids[0].event_status == "open"
